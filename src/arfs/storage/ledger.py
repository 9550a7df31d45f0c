import os

from pathlib import Path
from typing import Mapping, Optional, Protocol

from arfs.crypto.kdf import SymmetricKey
from arfs.crypto.wallet import sha256_bytes
from arfs.entities.codec import UNSEALED, Sealing, decode_record, encode_entity
from arfs.entities.models import Entity
from arfs.errors import RecordNotFound
from arfs.utils.dataModels import LEDGER_DATA_SUFFIX, LEDGER_META_SUFFIX, LedgerRecord
from arfs.utils.helper import b64url_encode, ledger_paths
from arfs.utils.logging_config import get_logger

logger = get_logger(__name__)


class Ledger(Protocol):
    """Append-only record store keyed by transaction id."""

    def fetch_record(self, transaction_id: str) -> LedgerRecord: ...

    def submit_record(self, data: bytes, tags: Mapping[str, str]) -> str: ...


def _write_atomic(path: Path, payload: bytes) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("wb") as f:
        f.write(payload)
    os.replace(tmp, path)


class LocalLedger:
    """
    Directory-backed ledger.

    Layout:
      <root>/records/<txid>.bin    record bytes, verbatim
      <root>/records/<txid>.json   {"owner": ..., "tags": {...}}

    A transaction id is base64url(SHA-256(owner || data || tags)), so writing
    the same record twice yields the same id and the same files.
    """

    def __init__(self, root: Path, owner_address: Optional[str] = None):
        self.root = Path(root)
        self.owner_address = owner_address
        self.paths = ledger_paths(self.root)

    def _record_path(self, transaction_id: str, suffix: str) -> Path:
        if not transaction_id or "/" in transaction_id or "\\" in transaction_id or transaction_id.startswith("."):
            raise RecordNotFound(f"No such transaction: {transaction_id!r}")
        return self.paths["records"] / f"{transaction_id}{suffix}"

    def submit_record(self, data: bytes, tags: Mapping[str, str]) -> str:
        record = LedgerRecord(data=bytes(data), tags=dict(tags), owner_address=self.owner_address)
        meta = record.meta_bytes()
        owner = (self.owner_address or "").encode("utf-8")
        transaction_id = b64url_encode(sha256_bytes(owner + b"\x00" + record.data + b"\x00" + meta))

        self.paths["records"].mkdir(parents=True, exist_ok=True)
        _write_atomic(self._record_path(transaction_id, LEDGER_DATA_SUFFIX), record.data)
        _write_atomic(self._record_path(transaction_id, LEDGER_META_SUFFIX), meta)
        logger.debug("Stored record %s (%d bytes, %d tags)", transaction_id, len(record.data), len(record.tags))
        return transaction_id

    def fetch_record(self, transaction_id: str) -> LedgerRecord:
        data_path = self._record_path(transaction_id, LEDGER_DATA_SUFFIX)
        meta_path = self._record_path(transaction_id, LEDGER_META_SUFFIX)
        try:
            return LedgerRecord.from_parts(data_path.read_bytes(), meta_path.read_bytes())
        except FileNotFoundError as e:
            raise RecordNotFound(f"No such transaction: {transaction_id}") from e

    def transaction_ids(self) -> list[str]:
        records = self.paths["records"]
        if not records.exists():
            return []
        return sorted(p.stem for p in records.glob(f"*{LEDGER_META_SUFFIX}"))


def submit_entity(ledger: Ledger, entity: Entity, sealing: Sealing = UNSEALED) -> str:
    encoded = encode_entity(entity, sealing)
    transaction_id = ledger.submit_record(encoded.data, encoded.tags)
    logger.info("Wrote %s %s as transaction %s", entity.entity_type.value, entity.id, transaction_id)
    return transaction_id


def fetch_entity(ledger: Ledger, transaction_id: str, key: Optional[SymmetricKey] = None) -> Entity:
    record = ledger.fetch_record(transaction_id)
    return decode_record(
        record.data,
        record.tags,
        key=key,
        transaction_id=transaction_id,
        owner_address=record.owner_address,
    )
