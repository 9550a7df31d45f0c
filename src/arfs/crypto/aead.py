"""Envelope cipher: seals entity payloads and carries the nonce as a record tag."""
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from dataclasses import dataclass
from typing import Mapping, Tuple

from arfs.entities.enums import Cipher, ContentType, EntityTag
from arfs.errors import AuthenticationFailure, KeyImportFailure, MissingNonce, UnsupportedCipher
from arfs.utils.dataModels import KEY_SIZE, NONCE_SIZE, TagMap
from arfs.utils.helper import b64url_decode, b64url_encode
from arfs.utils.logging_config import get_logger

logger = get_logger(__name__)

_AUTH_FAILED = "Could not decrypt payload: authentication failed"


@dataclass(frozen=True)
class SealedEnvelope:
    data: bytes
    tags: TagMap


def _raw_key(key) -> bytes:
    raw = getattr(key, "raw", key)
    if not isinstance(raw, (bytes, bytearray)) or len(raw) != KEY_SIZE:
        raise KeyImportFailure(f"Symmetric key must be {KEY_SIZE} raw bytes")
    return bytes(raw)


def aead_encrypt(key: bytes, plaintext: bytes, aad: bytes | None = None) -> Tuple[bytes, bytes]:
    nonce = os.urandom(NONCE_SIZE)
    aesgcm = AESGCM(key)
    ct = aesgcm.encrypt(nonce, plaintext, aad)
    return nonce, ct


def aead_decrypt(key: bytes, nonce: bytes, ct: bytes, aad: bytes | None = None) -> bytes:
    aesgcm = AESGCM(key)
    return aesgcm.decrypt(nonce, ct, aad)


def seal_envelope(plaintext: bytes, key, cipher: Cipher = Cipher.AES256_GCM) -> SealedEnvelope:
    raw = _raw_key(key)
    if cipher == Cipher.AES256_GCM:
        nonce, ct = aead_encrypt(raw, plaintext)
        tags = {
            EntityTag.CIPHER.value: Cipher.AES256_GCM.value,
            EntityTag.CIPHER_IV.value: b64url_encode(nonce),
        }
    else:
        raise UnsupportedCipher(f"Unsupported cipher: {cipher!r}")

    tags[EntityTag.CONTENT_TYPE.value] = ContentType.OCTET_STREAM.value
    logger.debug("Sealed %d bytes with %s", len(plaintext), tags[EntityTag.CIPHER.value])
    return SealedEnvelope(data=ct, tags=tags)


def open_envelope(data: bytes, tags: Mapping[str, str], key) -> bytes:
    cipher = tags.get(EntityTag.CIPHER.value)
    if cipher != Cipher.AES256_GCM.value:
        raise UnsupportedCipher(
            "No cipher specified on record" if cipher is None else f"Unsupported cipher: {cipher!r}"
        )

    iv = tags.get(EntityTag.CIPHER_IV.value)
    if not iv:
        raise MissingNonce(f"No {EntityTag.CIPHER_IV.value} specified for {cipher}")

    raw = _raw_key(key)
    try:
        nonce = b64url_decode(iv)
    except ValueError:
        nonce = b""
    well_formed = len(nonce) == NONCE_SIZE

    # A malformed nonce still goes through AES-GCM so every failure costs the same.
    try:
        plaintext = aead_decrypt(raw, nonce if well_formed else bytes(NONCE_SIZE), bytes(data))
    except InvalidTag as e:
        logger.warning("Envelope authentication failed")
        raise AuthenticationFailure(_AUTH_FAILED) from e
    if not well_formed:
        logger.warning("Envelope authentication failed")
        raise AuthenticationFailure(_AUTH_FAILED)
    return plaintext
