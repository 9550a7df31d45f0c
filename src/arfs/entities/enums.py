from enum import Enum


class EntityTag(str, Enum):
    """Tags placed on entity records for querying and decryption."""

    ARFS = "ArFS"
    UNIX_TIME = "Unix-Time"
    ENTITY_TYPE = "Entity-Type"
    CONTENT_TYPE = "Content-Type"

    DRIVE_ID = "Drive-Id"
    FOLDER_ID = "Folder-Id"
    PARENT_FOLDER_ID = "Parent-Folder-Id"
    FILE_ID = "File-Id"

    DRIVE_PRIVACY = "Drive-Privacy"
    DRIVE_AUTH_MODE = "Drive-Auth-Mode"

    CIPHER = "Cipher"
    CIPHER_IV = "Cipher-IV"


class EntityType(str, Enum):
    DRIVE = "drive"
    FOLDER = "folder"
    FILE = "file"


class Cipher(str, Enum):
    AES256_GCM = "AES256-GCM"


class DrivePrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class DriveAuthMode(str, Enum):
    PASSWORD = "password"


class ContentType(str, Enum):
    JSON = "application/json"
    OCTET_STREAM = "application/octet-stream"
