import base64
import binascii
import re
import uuid

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from arfs.errors import InvalidIdentifier
from arfs.utils.dataModels import LEDGER_RECORDS_DIR

_UUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


def ledger_paths(root: Path) -> Dict[str, Path]:
    return {
        "records": root / LEDGER_RECORDS_DIR,
    }


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode unpadded base64url. Raises ValueError on malformed input."""
    if not isinstance(text, str):
        raise ValueError("base64url value must be a string")
    if "+" in text or "/" in text:
        raise ValueError("Malformed base64url value: standard base64 alphabet")
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise ValueError(f"Malformed base64url value: {e}") from e


def is_uuid(value: object) -> bool:
    return isinstance(value, str) and _UUID_RE.fullmatch(value) is not None


def uuid_bytes(value: object, what: str = "identifier") -> bytes:
    """Raw 16-byte encoding of a UUID in canonical text form."""
    if not is_uuid(value):
        raise InvalidIdentifier(value, what)
    return uuid.UUID(value).bytes


def new_id() -> str:
    return str(uuid.uuid4())


def merge_tags(*maps: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Combine tag maps into a new dict. Entries whose value is None are left out."""
    merged: Dict[str, str] = {}
    for tags in maps:
        if not tags:
            continue
        for name, value in tags.items():
            if value is not None:
                merged[getattr(name, "value", name)] = getattr(value, "value", value)
    return merged
