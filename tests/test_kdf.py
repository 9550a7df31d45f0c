"""Tests for drive and file key derivation."""

import pytest

from arfs.crypto.kdf import (
    AuthModeParams,
    DriveKey,
    FileKey,
    PasswordAuthMode,
    derive_drive_key,
    derive_file_key,
)
from arfs.crypto.wallet import sign_deterministic
from arfs.errors import InvalidIdentifier, KeyImportFailure, UnsupportedAuthMode

from conftest import DRIVE_ID, FILE_ID, PASSWORD


class TestDeriveFileKey:
    """Known-answer and determinism checks for file keys."""

    def test_known_file_key(self):
        drive_key = DriveKey.from_b64url("_BswoSJy8cGrHQN7xge2naIiGajCEV7yfC0MXD_XBig")

        file_key = derive_file_key(drive_key, "225f09b7-84c0-495f-b4e6-1c775a6976d0")

        assert isinstance(file_key, FileKey)
        assert file_key.to_b64url() == "_pl7qmnwd7HENIh3jKBImz7jkwTCntNaPyAeoVX8BBs"

    def test_file_key_is_deterministic(self, drive_key):
        assert derive_file_key(drive_key, FILE_ID).raw == derive_file_key(drive_key, FILE_ID).raw

    def test_file_keys_differ_per_file(self, drive_key):
        other_file = "3b0e5a55-2c2b-4f39-9a71-8a1e1c5b2e40"
        assert derive_file_key(drive_key, FILE_ID) != derive_file_key(drive_key, other_file)

    def test_file_key_rejects_malformed_id(self, drive_key):
        with pytest.raises(InvalidIdentifier):
            derive_file_key(drive_key, "not-a-uuid")

    def test_file_key_accepts_raw_bytes(self, drive_key):
        assert derive_file_key(drive_key.raw, FILE_ID) == derive_file_key(drive_key, FILE_ID)

    def test_file_key_rejects_short_drive_key(self):
        with pytest.raises(KeyImportFailure):
            derive_file_key(b"short", FILE_ID)


class TestDeriveDriveKey:
    """Drive keys are derived from a deterministic wallet signature."""

    def test_drive_key_is_deterministic(self, wallet_jwk):
        first = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD))
        second = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD))

        assert isinstance(first, DriveKey)
        assert len(first.raw) == 32
        assert first.raw == second.raw

    def test_drive_key_depends_on_password(self, wallet_jwk):
        a = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode("one"))
        b = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode("two"))
        assert a != b

    def test_drive_key_depends_on_drive_id(self, wallet_jwk):
        other_drive = "a4c8f3a2-95f5-4d5b-8a0e-7b6f0e3c2d11"
        a = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD))
        b = derive_drive_key(other_drive, wallet_jwk, PasswordAuthMode(PASSWORD))
        assert a != b

    def test_wallet_forms_agree(self, wallet_key, wallet_jwk):
        from_jwk = derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD))
        from_key = derive_drive_key(DRIVE_ID, wallet_key, PasswordAuthMode(PASSWORD))
        from_signer = derive_drive_key(
            DRIVE_ID,
            lambda message: sign_deterministic(wallet_key, message),
            PasswordAuthMode(PASSWORD),
        )
        assert from_jwk == from_key == from_signer

    def test_signer_receives_drive_prefix_and_id_bytes(self):
        seen = []

        def signer(message: bytes) -> bytes:
            seen.append(message)
            return b"\x01" * 256

        derive_drive_key(DRIVE_ID, signer, PasswordAuthMode(PASSWORD))

        assert seen == [b"drive" + bytes.fromhex(DRIVE_ID.replace("-", ""))]

    def test_unknown_auth_mode(self, wallet_jwk):
        with pytest.raises(UnsupportedAuthMode):
            derive_drive_key(DRIVE_ID, wallet_jwk, AuthModeParams(name="hardware-token"))

    def test_password_mode_without_password(self, wallet_jwk):
        with pytest.raises(UnsupportedAuthMode):
            derive_drive_key(DRIVE_ID, wallet_jwk, AuthModeParams(name="password"))

    def test_malformed_drive_id(self, wallet_jwk):
        with pytest.raises(InvalidIdentifier):
            derive_drive_key("drive-1", wallet_jwk, PasswordAuthMode(PASSWORD))

    def test_bad_wallet(self):
        with pytest.raises(KeyImportFailure):
            derive_drive_key(DRIVE_ID, {"kty": "RSA", "n": "AQAB"}, PasswordAuthMode(PASSWORD))

    def test_signer_without_bytes(self):
        with pytest.raises(KeyImportFailure):
            derive_drive_key(DRIVE_ID, lambda message: None, PasswordAuthMode(PASSWORD))


class TestSymmetricKey:
    def test_round_trips_through_b64url(self, drive_key):
        assert DriveKey.from_b64url(drive_key.to_b64url()) == drive_key

    def test_rejects_wrong_length(self):
        with pytest.raises(KeyImportFailure):
            DriveKey(b"\x00" * 16)

    def test_rejects_malformed_b64url(self):
        with pytest.raises(KeyImportFailure):
            DriveKey.from_b64url("***")

    def test_repr_hides_key(self, drive_key):
        assert drive_key.to_b64url() not in repr(drive_key)

    def test_password_repr_hides_password(self):
        assert PASSWORD not in repr(PasswordAuthMode(PASSWORD))
