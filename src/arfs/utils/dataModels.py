import json

from dataclasses import dataclass, field
from typing import Dict, Any

ARFS_VERSION = "0.11"

KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12  # 96-bit GCM nonce

LEDGER_RECORDS_DIR = "records"
LEDGER_DATA_SUFFIX = ".bin"
LEDGER_META_SUFFIX = ".json"

TagMap = Dict[str, str]


@dataclass
class LedgerRecord:
    data: bytes
    tags: TagMap = field(default_factory=dict)
    owner_address: str | None = None

    def meta_bytes(self) -> bytes:
        return json.dumps(
            {"owner": self.owner_address, "tags": self.tags},
            ensure_ascii=False,
            separators=(",", ":"),
            sort_keys=True,
        ).encode("utf-8")

    @staticmethod
    def from_parts(data: bytes, meta: bytes) -> "LedgerRecord":
        obj: Dict[str, Any] = json.loads(meta.decode("utf-8"))
        return LedgerRecord(data=data, tags=dict(obj.get("tags", {})), owner_address=obj.get("owner"))
