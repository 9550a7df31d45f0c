import argparse
import sys

from arfs.errors import ArFSError
from arfs.utils.core import cmd_add_file, cmd_drive_key, cmd_file_key, cmd_new_drive, cmd_new_folder, cmd_show
from arfs.utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="ArFS entity tool (drive/folder/file records, optional encryption)")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR (default: $LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_dk = sub.add_parser("drive-key", help="Derive a drive key from a wallet")
    p_dk.add_argument("wallet", help="Wallet keyfile (JWK or PEM)")
    p_dk.add_argument("drive_id", help="Drive id (UUID)")
    p_dk.add_argument("--password", required=True)
    p_dk.set_defaults(func=cmd_drive_key)

    p_fk = sub.add_parser("file-key", help="Derive a file key from a drive key")
    p_fk.add_argument("drive_key", help="Drive key (base64url)")
    p_fk.add_argument("file_id", help="File id (UUID)")
    p_fk.set_defaults(func=cmd_file_key)

    p_drive = sub.add_parser("new-drive", help="Create a drive and its root folder")
    p_drive.add_argument("ledger", help="Path to ledger directory")
    p_drive.add_argument("--wallet", required=True, help="Wallet keyfile (JWK or PEM)")
    p_drive.add_argument("--name", required=True)
    p_drive.add_argument("--password", help="Make the drive private with this password")
    p_drive.set_defaults(func=cmd_new_drive)

    p_folder = sub.add_parser("new-folder", help="Create a folder")
    p_folder.add_argument("ledger", help="Path to ledger directory")
    p_folder.add_argument("--wallet", required=True, help="Wallet keyfile (JWK or PEM)")
    p_folder.add_argument("--drive-id", required=True)
    p_folder.add_argument("--parent-id", required=True, help="Parent folder id (UUID)")
    p_folder.add_argument("--name", required=True)
    p_folder.add_argument("--password", help="Drive password (private drives)")
    p_folder.set_defaults(func=cmd_new_folder)

    p_file = sub.add_parser("add-file", help="Write a file entity for a local file")
    p_file.add_argument("ledger", help="Path to ledger directory")
    p_file.add_argument("path", help="Local file to describe")
    p_file.add_argument("--wallet", required=True, help="Wallet keyfile (JWK or PEM)")
    p_file.add_argument("--drive-id", required=True)
    p_file.add_argument("--parent-id", required=True, help="Parent folder id (UUID)")
    p_file.add_argument("--data-tx-id", required=True, help="Transaction holding the file data")
    p_file.add_argument("--password", help="Drive password (private drives)")
    p_file.set_defaults(func=cmd_add_file)

    p_show = sub.add_parser("show", help="Decode an entity record")
    p_show.add_argument("ledger", help="Path to ledger directory")
    p_show.add_argument("tx_id", help="Transaction id")
    p_show.add_argument("--wallet", help="Wallet keyfile, with --password")
    p_show.add_argument("--password", help="Drive password (private drives)")
    p_show.add_argument("--drive-key", help="Drive key (base64url) instead of wallet + password")
    p_show.set_defaults(func=cmd_show)

    return p


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("arfs", args.log_level)
    try:
        args.func(args)
    except ArFSError as e:
        print(f"[!] {e}")
        sys.exit(1)
