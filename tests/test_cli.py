"""Tests for the command line interface."""

import json
import re

import pytest

from arfs.crypto.kdf import DriveKey, PasswordAuthMode, derive_drive_key, derive_file_key
from arfs.ui.cli import build_parser, main

from conftest import DRIVE_ID, FILE_ID, PASSWORD


def _field(output: str, name: str) -> str:
    match = re.search(rf"{name}=(\S+)", output)
    assert match, output
    return match.group(1)


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_show_options(self):
        args = build_parser().parse_args(["show", "ledger", "tx", "--drive-key", "abc"])
        assert args.drive_key == "abc"
        assert args.password is None


class TestKeyCommands:
    def test_drive_key(self, capsys, wallet_file, wallet_jwk):
        main(["drive-key", str(wallet_file), DRIVE_ID, "--password", PASSWORD])

        printed = capsys.readouterr().out.strip().splitlines()[-1]
        assert printed == derive_drive_key(DRIVE_ID, wallet_jwk, PasswordAuthMode(PASSWORD)).to_b64url()

    def test_file_key(self, capsys, drive_key):
        main(["file-key", drive_key.to_b64url(), FILE_ID])

        printed = capsys.readouterr().out.strip().splitlines()[-1]
        assert DriveKey.from_b64url(printed).raw == derive_file_key(drive_key, FILE_ID).raw

    def test_invalid_id_exits(self, capsys, drive_key):
        with pytest.raises(SystemExit) as exc:
            main(["file-key", drive_key.to_b64url(), "not-a-uuid"])
        assert exc.value.code == 1
        assert "[!]" in capsys.readouterr().out


class TestDriveCommands:
    def test_public_drive_flow(self, capsys, tmp_path, wallet_file):
        ledger_dir = tmp_path / "ledger"
        main(["new-drive", str(ledger_dir), "--wallet", str(wallet_file), "--name", "photos"])
        out = capsys.readouterr().out
        assert "[+] Created public drive" in out

        drive_id = _field(out, "drive_id")
        root_id = _field(out, "root_folder_id")
        root_tx = re.search(r"root_folder_id=\S+\ttx=(\S+)", out).group(1)

        sample = tmp_path / "notes.txt"
        sample.write_text("hello world")
        main([
            "add-file", str(ledger_dir), str(sample),
            "--wallet", str(wallet_file),
            "--drive-id", drive_id,
            "--parent-id", root_id,
            "--data-tx-id", "data-tx",
        ])
        file_tx = re.search(r"tx=(\S+)", capsys.readouterr().out).group(1)

        main(["show", str(ledger_dir), file_tx])
        shown = json.loads(capsys.readouterr().out)
        assert shown["entity_type"] == "file"
        assert shown["name"] == "notes.txt"
        assert shown["size"] == len("hello world")
        assert shown["data_content_type"] == "text/plain"
        assert shown["drive_id"] == drive_id

        main(["show", str(ledger_dir), root_tx])
        root = json.loads(capsys.readouterr().out)
        assert root["entity_type"] == "folder"
        assert root["parent_folder_id"] is None

    def test_private_drive_flow(self, capsys, tmp_path, wallet_file):
        ledger_dir = tmp_path / "ledger"
        main([
            "new-drive", str(ledger_dir),
            "--wallet", str(wallet_file),
            "--name", "secrets",
            "--password", PASSWORD,
        ])
        out = capsys.readouterr().out
        assert "[+] Created private drive" in out
        drive_tx = re.search(r"drive_id=\S+\ttx=(\S+)", out).group(1)

        with pytest.raises(SystemExit):
            main(["show", str(ledger_dir), drive_tx])
        assert "no key was supplied" in capsys.readouterr().out

        main([
            "show", str(ledger_dir), drive_tx,
            "--wallet", str(wallet_file),
            "--password", PASSWORD,
        ])
        drive = json.loads(capsys.readouterr().out)
        assert drive["name"] == "secrets"
        assert drive["privacy"] == "private"
        assert drive["auth_mode"] == "password"

    def test_wrong_password(self, capsys, tmp_path, wallet_file):
        ledger_dir = tmp_path / "ledger"
        main(["new-drive", str(ledger_dir), "--wallet", str(wallet_file), "--name", "x", "--password", "right"])
        drive_tx = re.search(r"drive_id=\S+\ttx=(\S+)", capsys.readouterr().out).group(1)

        with pytest.raises(SystemExit) as exc:
            main(["show", str(ledger_dir), drive_tx, "--wallet", str(wallet_file), "--password", "wrong"])
        assert exc.value.code == 1
        assert "authentication failed" in capsys.readouterr().out
