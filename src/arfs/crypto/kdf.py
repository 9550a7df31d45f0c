from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from dataclasses import dataclass
from typing import ClassVar

from arfs.crypto.wallet import Wallet, wallet_signer
from arfs.entities.enums import DriveAuthMode
from arfs.errors import KeyImportFailure, UnsupportedAuthMode
from arfs.utils.dataModels import KEY_SIZE
from arfs.utils.helper import b64url_decode, b64url_encode, uuid_bytes
from arfs.utils.logging_config import get_logger

logger = get_logger(__name__)

DRIVE_SIGNATURE_PREFIX = b"drive"


@dataclass(frozen=True)
class SymmetricKey:
    """Raw AES-256 key bytes. The repr never shows the key."""

    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != KEY_SIZE:
            raise KeyImportFailure(f"{type(self).__name__} must be {KEY_SIZE} raw bytes")
        object.__setattr__(self, "raw", bytes(self.raw))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self.raw)} bytes>)"

    def to_b64url(self) -> str:
        return b64url_encode(self.raw)

    @classmethod
    def from_b64url(cls, text: str):
        try:
            return cls(b64url_decode(text))
        except ValueError as e:
            raise KeyImportFailure(f"Could not import {cls.__name__}: {e}") from e


class DriveKey(SymmetricKey):
    pass


class FileKey(SymmetricKey):
    pass


@dataclass(frozen=True)
class AuthModeParams:
    """Auth mode selected by name, for modes other than password."""

    name: str


@dataclass(frozen=True)
class PasswordAuthMode:
    password: str
    name: ClassVar[str] = DriveAuthMode.PASSWORD.value

    def __repr__(self) -> str:
        return "PasswordAuthMode(password=***)"


def hkdf_sha256(ikm: bytes, info: bytes, length: int = KEY_SIZE) -> bytes:
    # salt=None is the RFC 5869 zero-length salt
    return HKDF(algorithm=hashes.SHA256(), length=length, salt=None, info=info).derive(ikm)


def derive_drive_key(drive_id: str, wallet: Wallet, mode) -> DriveKey:
    """
    DriveKey = HKDF-SHA256(ikm=Sign(wallet, "drive" || uuid(drive_id)), info=password)

    Signing uses salt-free RSA-PSS so the key can be re-derived by any holder
    of the same wallet and password.
    """
    drive_id_bytes = uuid_bytes(drive_id, "drive id")

    mode_name = getattr(mode, "name", None)
    if mode_name != DriveAuthMode.PASSWORD.value:
        raise UnsupportedAuthMode(f"Unsupported drive auth mode: {mode_name!r}")
    password = getattr(mode, "password", None)
    if not isinstance(password, str):
        raise UnsupportedAuthMode("Password auth mode requires a password")

    sign = wallet_signer(wallet)
    try:
        signature = sign(DRIVE_SIGNATURE_PREFIX + drive_id_bytes)
    except (TypeError, ValueError) as e:
        raise KeyImportFailure(f"Wallet could not sign drive key material: {e}") from e
    if not isinstance(signature, (bytes, bytearray)) or not signature:
        raise KeyImportFailure("Wallet signer returned no signature bytes")

    key = DriveKey(hkdf_sha256(bytes(signature), password.encode("utf-8")))
    logger.debug("Derived drive key for drive %s", drive_id)
    return key


def derive_file_key(drive_key: DriveKey, file_id: str) -> FileKey:
    """FileKey = HKDF-SHA256(ikm=drive key bytes, info=uuid(file_id))"""
    file_id_bytes = uuid_bytes(file_id, "file id")
    raw = getattr(drive_key, "raw", drive_key)
    if not isinstance(raw, (bytes, bytearray)) or len(raw) != KEY_SIZE:
        raise KeyImportFailure(f"Drive key must be {KEY_SIZE} raw bytes")
    key = FileKey(hkdf_sha256(bytes(raw), file_id_bytes))
    logger.debug("Derived file key for file %s", file_id)
    return key
