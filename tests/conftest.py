"""Shared pytest fixtures for all tests."""

import json
import logging
from datetime import datetime, timezone

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from arfs.crypto.kdf import DriveKey, PasswordAuthMode, derive_drive_key
from arfs.crypto.wallet import private_key_to_jwk, wallet_address
from arfs.entities.enums import DriveAuthMode, DrivePrivacy
from arfs.entities.models import DriveEntity, FileEntity, FolderEntity
from arfs.storage.ledger import LocalLedger

DRIVE_ID = "225f09b7-84c0-495f-b4e6-1c775a6976d0"
ROOT_FOLDER_ID = "6c312b3e-4778-4a18-8243-f2b346f5e7cb"
FOLDER_ID = "0bcd4a9e-3c43-4e0a-9bd9-8d3b0e1e6b14"
FILE_ID = "9f1b2b5c-6b61-4d7e-8e0f-3f4d7f2a9c11"
PASSWORD = "<password provided by user>"


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """The CLI installs a stream handler on the "arfs" logger; drop it between tests."""
    yield
    logger = logging.getLogger("arfs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture(scope="session")
def wallet_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def wallet_jwk(wallet_key):
    return private_key_to_jwk(wallet_key)


@pytest.fixture
def wallet_file(tmp_path, wallet_jwk):
    path = tmp_path / "wallet.json"
    path.write_text(json.dumps(wallet_jwk))
    return path


@pytest.fixture(scope="session")
def drive_key(wallet_jwk):
    return derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD))


@pytest.fixture
def other_key():
    return DriveKey(bytes(range(32)))


@pytest.fixture
def created_at():
    return datetime(2020, 8, 20, 0, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def public_drive(created_at):
    return DriveEntity(id=DRIVE_ID, name="photos", root_folder_id=ROOT_FOLDER_ID, created_at=created_at)


@pytest.fixture
def private_drive(created_at):
    return DriveEntity(
        id=DRIVE_ID,
        name="secrets",
        root_folder_id=ROOT_FOLDER_ID,
        privacy=DrivePrivacy.PRIVATE,
        auth_mode=DriveAuthMode.PASSWORD,
        created_at=created_at,
    )


@pytest.fixture
def root_folder(created_at):
    return FolderEntity(id=ROOT_FOLDER_ID, drive_id=DRIVE_ID, name="photos", created_at=created_at)


@pytest.fixture
def folder(created_at):
    return FolderEntity(
        id=FOLDER_ID,
        drive_id=DRIVE_ID,
        name="2020",
        parent_folder_id=ROOT_FOLDER_ID,
        created_at=created_at,
    )


@pytest.fixture
def file_entity(created_at):
    return FileEntity(
        id=FILE_ID,
        drive_id=DRIVE_ID,
        parent_folder_id=FOLDER_ID,
        name="mock_file",
        size=12,
        last_modified_date=created_at,
        data_tx_id="mock_tx_id",
        data_content_type="application/json",
        created_at=created_at,
    )


@pytest.fixture
def ledger(tmp_path, wallet_jwk):
    return LocalLedger(tmp_path / "ledger", owner_address=wallet_address(wallet_jwk))
