"""ArFS entity encoding, encryption and key derivation."""
from arfs.crypto.aead import SealedEnvelope, open_envelope, seal_envelope
from arfs.crypto.kdf import (
    AuthModeParams,
    DriveKey,
    FileKey,
    PasswordAuthMode,
    derive_drive_key,
    derive_file_key,
)
from arfs.entities.codec import (
    UNSEALED,
    EncodedEntity,
    Sealed,
    Unsealed,
    decode_entity,
    decode_record,
    encode_entity,
    sealing_for,
)
from arfs.entities.enums import Cipher, DriveAuthMode, DrivePrivacy, EntityTag, EntityType
from arfs.entities.models import DriveEntity, FileEntity, FolderEntity
from arfs.entities.tags import entity_to_tags, fields_from_tags
from arfs.errors import (
    ArFSError,
    AuthenticationFailure,
    InvalidIdentifier,
    KeyImportFailure,
    MissingDecryptionKey,
    MissingNonce,
    UnsupportedAuthMode,
    UnsupportedCipher,
    ValidationFailure,
)

__version__ = "0.11.0"
