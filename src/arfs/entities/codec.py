"""
Entity codec.

Encoding turns the kind-specific fields of an entity into compact UTF-8 JSON
(fixed field order, identity fields left to the tags) and optionally seals it.
Decoding reverses this for a record fetched from the ledger and validates the
merged entity as a whole.
"""
import json

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from arfs.crypto.aead import open_envelope, seal_envelope
from arfs.crypto.kdf import DriveKey, SymmetricKey, derive_file_key
from arfs.entities.enums import Cipher, ContentType, EntityTag, EntityType
from arfs.entities.models import ENTITY_CLASSES, DriveEntity, Entity, FileEntity, FolderEntity
from arfs.entities.tags import ID_TAGS, entity_to_tags, fields_from_tags
from arfs.errors import FieldViolation, MissingDecryptionKey, ValidationFailure
from arfs.utils.dataModels import TagMap
from arfs.utils.helper import merge_tags
from arfs.utils.logging_config import get_logger
from arfs.utils.unix_time import datetime_to_ms, ms_to_datetime

logger = get_logger(__name__)


@dataclass(frozen=True)
class Unsealed:
    pass


@dataclass(frozen=True)
class Sealed:
    key: SymmetricKey
    cipher: Cipher = Cipher.AES256_GCM


Sealing = Union[Unsealed, Sealed]

UNSEALED = Unsealed()


@dataclass(frozen=True)
class EncodedEntity:
    data: bytes
    tags: TagMap

    @property
    def sealed(self) -> bool:
        return EntityTag.CIPHER.value in self.tags


# Payload keys per kind, in the order they are written.
_PAYLOAD_FIELDS = {
    EntityType.DRIVE: (("name", "name"), ("rootFolderId", "root_folder_id")),
    EntityType.FOLDER: (("name", "name"),),
    EntityType.FILE: (
        ("name", "name"),
        ("size", "size"),
        ("lastModifiedDate", "last_modified_date"),
        ("dataTxId", "data_tx_id"),
        ("dataContentType", "data_content_type"),
    ),
}


def entity_payload(entity: Entity) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key, attr in _PAYLOAD_FIELDS[entity.entity_type]:
        value = getattr(entity, attr)
        if value is None:
            continue
        if isinstance(value, datetime):
            value = datetime_to_ms(value)
        payload[key] = value
    return payload


def canonical_bytes(entity: Entity) -> bytes:
    return json.dumps(entity_payload(entity), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def key_for_entity(entity_type: EntityType, entity_id: Optional[str], key: SymmetricKey) -> SymmetricKey:
    """File records are sealed under the file key; a drive key is expanded to it here."""
    if EntityType(entity_type) is EntityType.FILE and isinstance(key, DriveKey):
        return derive_file_key(key, entity_id)
    return key


def encode_entity(entity: Entity, sealing: Sealing = UNSEALED) -> EncodedEntity:
    if isinstance(entity, DriveEntity) and entity.is_private != isinstance(sealing, Sealed):
        # Drive-Privacy must agree with whether the payload is sealed.
        state = "sealed" if entity.is_private else "unsealed"
        raise ValidationFailure([FieldViolation("privacy", f"{entity.privacy.value} drive must be encoded {state}")])

    data = canonical_bytes(entity)

    if isinstance(sealing, Sealed):
        key = key_for_entity(entity.entity_type, entity.id, sealing.key)
        envelope = seal_envelope(data, key, sealing.cipher)
        data, content_tags = envelope.data, envelope.tags
    elif isinstance(sealing, Unsealed):
        content_tags = {EntityTag.CONTENT_TYPE.value: ContentType.JSON.value}
    else:
        raise TypeError(f"Unknown sealing: {sealing!r}")

    tags = merge_tags(content_tags, entity_to_tags(entity))
    logger.debug("Encoded %s %s (%d bytes, sealed=%s)", entity.entity_type.value, entity.id, len(data), isinstance(sealing, Sealed))
    return EncodedEntity(data=data, tags=tags)


def _parse_payload(data: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationFailure([FieldViolation("payload", f"is not valid UTF-8 JSON ({e})")]) from e
    if not isinstance(payload, dict):
        raise ValidationFailure([FieldViolation("payload", "must be a JSON object")])
    return payload


def _payload_fields(entity_type: EntityType, payload: Mapping[str, Any]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for key, attr in _PAYLOAD_FIELDS[entity_type]:
        fields[attr] = payload.get(key)

    if entity_type is EntityType.FILE:
        modified = fields["last_modified_date"]
        if isinstance(modified, int) and not isinstance(modified, bool):
            try:
                fields["last_modified_date"] = ms_to_datetime(modified)
            except ValueError:
                pass
        elif isinstance(modified, str):
            try:
                fields["last_modified_date"] = datetime.fromisoformat(modified.replace("Z", "+00:00"))
            except ValueError:
                pass
    return fields


def decode_entity(
    entity_type: EntityType,
    data: Union[bytes, str],
    tags: Mapping[str, str],
    key: Optional[SymmetricKey] = None,
    transaction_id: Optional[str] = None,
    owner_address: Optional[str] = None,
) -> Entity:
    """
    Rebuild an entity from a ledger record.

    `key` is required when the record carries a `Cipher` tag. For file records
    either the file key or the drive key may be given.
    """
    entity_type = EntityType(entity_type)
    if isinstance(data, str):
        data = data.encode("utf-8")

    if tags.get(EntityTag.CIPHER.value) is not None:
        if key is None:
            raise MissingDecryptionKey(f"{entity_type.value} record is encrypted and no key was supplied")
        entity_id = tags.get(ID_TAGS[entity_type].value)
        data = open_envelope(data, tags, key_for_entity(entity_type, entity_id, key))

    fields = _payload_fields(entity_type, _parse_payload(bytes(data)))
    fields.update(fields_from_tags(entity_type, tags))
    fields["transaction_id"] = transaction_id
    fields["transaction_owner_address"] = owner_address

    entity = ENTITY_CLASSES[entity_type](**fields)
    logger.debug("Decoded %s %s", entity_type.value, entity.id)
    return entity


def decode_record(
    data: Union[bytes, str],
    tags: Mapping[str, str],
    key: Optional[SymmetricKey] = None,
    transaction_id: Optional[str] = None,
    owner_address: Optional[str] = None,
) -> Entity:
    """Decode a record whose kind is taken from its `Entity-Type` tag."""
    raw_type = tags.get(EntityTag.ENTITY_TYPE.value)
    try:
        entity_type = EntityType(raw_type)
    except ValueError as e:
        allowed = ", ".join(t.value for t in EntityType)
        raise ValidationFailure([FieldViolation(EntityTag.ENTITY_TYPE.value, f"must be one of: {allowed}")]) from e
    return decode_entity(entity_type, data, tags, key, transaction_id, owner_address)


def sealing_for(entity: Entity, drive_key: Optional[DriveKey]) -> Sealing:
    """Sealed under the drive key (or its file key) when one is given, otherwise public."""
    if drive_key is None:
        return UNSEALED
    if isinstance(entity, FileEntity):
        return Sealed(derive_file_key(drive_key, entity.id))
    if isinstance(entity, (DriveEntity, FolderEntity)):
        return Sealed(drive_key)
    raise TypeError(f"Unknown entity: {entity!r}")
