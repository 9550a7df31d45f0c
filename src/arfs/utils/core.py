import argparse
import json
import mimetypes
import sys

from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from arfs.crypto.kdf import DriveKey, PasswordAuthMode, derive_drive_key, derive_file_key
from arfs.crypto.wallet import load_wallet_file, wallet_address
from arfs.entities.codec import sealing_for
from arfs.entities.enums import DriveAuthMode, DrivePrivacy, EntityTag
from arfs.entities.models import DriveEntity, Entity, FileEntity, FolderEntity
from arfs.storage.ledger import LocalLedger, fetch_entity, submit_entity
from arfs.utils.helper import new_id


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    d = asdict(entity)
    d["entity_type"] = entity.entity_type.value
    for k, v in d.items():
        if isinstance(v, datetime):
            d[k] = v.isoformat()
        elif isinstance(v, Enum):
            d[k] = v.value
    return d


def _drive_key_for(args: argparse.Namespace, wallet: Dict[str, Any], drive_id: str) -> Optional[DriveKey]:
    if not args.password:
        return None
    return derive_drive_key(drive_id, wallet, PasswordAuthMode(args.password))


def _ledger_for(args: argparse.Namespace, wallet: Dict[str, Any]) -> LocalLedger:
    return LocalLedger(Path(args.ledger), owner_address=wallet_address(wallet))


def cmd_drive_key(args: argparse.Namespace) -> None:
    wallet = load_wallet_file(Path(args.wallet))
    drive_key = derive_drive_key(args.drive_id, wallet, PasswordAuthMode(args.password))
    print(drive_key.to_b64url())


def cmd_file_key(args: argparse.Namespace) -> None:
    drive_key = DriveKey.from_b64url(args.drive_key)
    print(derive_file_key(drive_key, args.file_id).to_b64url())


def cmd_new_drive(args: argparse.Namespace) -> None:
    wallet = load_wallet_file(Path(args.wallet))
    ledger = _ledger_for(args, wallet)

    drive_id, root_folder_id = new_id(), new_id()
    drive_key = _drive_key_for(args, wallet, drive_id)

    drive = DriveEntity(
        id=drive_id,
        name=args.name,
        root_folder_id=root_folder_id,
        privacy=DrivePrivacy.PRIVATE if drive_key else DrivePrivacy.PUBLIC,
        auth_mode=DriveAuthMode.PASSWORD if drive_key else None,
    )
    root_folder = FolderEntity(id=root_folder_id, drive_id=drive_id, name=args.name)

    drive_tx = submit_entity(ledger, drive, sealing_for(drive, drive_key))
    folder_tx = submit_entity(ledger, root_folder, sealing_for(root_folder, drive_key))
    print(f"[+] Created {drive.privacy.value} drive {args.name!r}")
    print(f"drive_id={drive_id}\ttx={drive_tx}")
    print(f"root_folder_id={root_folder_id}\ttx={folder_tx}")


def cmd_new_folder(args: argparse.Namespace) -> None:
    wallet = load_wallet_file(Path(args.wallet))
    ledger = _ledger_for(args, wallet)

    folder = FolderEntity(id=new_id(), drive_id=args.drive_id, name=args.name, parent_folder_id=args.parent_id)
    tx = submit_entity(ledger, folder, sealing_for(folder, _drive_key_for(args, wallet, args.drive_id)))
    print(f"[+] Created folder {args.name!r} as id={folder.id} tx={tx}")


def cmd_add_file(args: argparse.Namespace) -> None:
    src = Path(args.path)
    if not src.is_file():
        print(f"[!] Not a file: {src}")
        sys.exit(1)

    wallet = load_wallet_file(Path(args.wallet))
    ledger = _ledger_for(args, wallet)

    stat = src.stat()
    content_type, _ = mimetypes.guess_type(src.name)
    entry = FileEntity(
        id=new_id(),
        drive_id=args.drive_id,
        parent_folder_id=args.parent_id,
        name=src.name,
        size=stat.st_size,
        last_modified_date=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        data_tx_id=args.data_tx_id,
        data_content_type=content_type,
    )
    tx = submit_entity(ledger, entry, sealing_for(entry, _drive_key_for(args, wallet, args.drive_id)))
    print(f"[+] Added {src.name} as id={entry.id} tx={tx}")


def cmd_show(args: argparse.Namespace) -> None:
    ledger = LocalLedger(Path(args.ledger))

    key = None
    if args.drive_key:
        key = DriveKey.from_b64url(args.drive_key)
    elif args.password:
        if not args.wallet:
            print("[!] --password needs --wallet")
            sys.exit(1)
        record = ledger.fetch_record(args.tx_id)
        drive_id = record.tags.get(EntityTag.DRIVE_ID.value)
        wallet = load_wallet_file(Path(args.wallet))
        key = derive_drive_key(drive_id, wallet, PasswordAuthMode(args.password))

    entity = fetch_entity(ledger, args.tx_id, key)
    print(json.dumps(entity_to_dict(entity), indent=2, ensure_ascii=False))
