"""
Entity records as tagged variants.

Each variant is a frozen dataclass validated on construction. Validation
collects every violated constraint before raising, so a caller always sees
the full list of defects in a record.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, ClassVar, Dict, List, Optional, Union

from arfs.entities.enums import DriveAuthMode, DrivePrivacy, EntityType
from arfs.errors import FieldViolation, ValidationFailure
from arfs.utils.helper import is_uuid
from arfs.utils.unix_time import now_seconds


@dataclass(frozen=True)
class DriveEntity:
    id: str
    name: str
    root_folder_id: str
    privacy: DrivePrivacy = DrivePrivacy.PUBLIC
    auth_mode: Optional[DriveAuthMode] = None
    created_at: Optional[datetime] = field(default_factory=now_seconds)
    transaction_id: Optional[str] = None
    transaction_owner_address: Optional[str] = None

    entity_type: ClassVar[EntityType] = EntityType.DRIVE

    def __post_init__(self):
        _normalize_time(self, "created_at")
        _coerce_enum(self, "privacy", DrivePrivacy)
        _coerce_enum(self, "auth_mode", DriveAuthMode)
        validate_entity(self)

    @property
    def is_private(self) -> bool:
        return self.privacy == DrivePrivacy.PRIVATE


@dataclass(frozen=True)
class FolderEntity:
    id: str
    drive_id: str
    name: str
    parent_folder_id: Optional[str] = None
    created_at: Optional[datetime] = field(default_factory=now_seconds)
    transaction_id: Optional[str] = None
    transaction_owner_address: Optional[str] = None

    entity_type: ClassVar[EntityType] = EntityType.FOLDER

    def __post_init__(self):
        _normalize_time(self, "created_at")
        validate_entity(self)

    @property
    def is_root(self) -> bool:
        return self.parent_folder_id is None


@dataclass(frozen=True)
class FileEntity:
    id: str
    drive_id: str
    parent_folder_id: str
    name: str
    size: int
    last_modified_date: datetime
    data_tx_id: str
    data_content_type: Optional[str] = None
    created_at: Optional[datetime] = field(default_factory=now_seconds)
    transaction_id: Optional[str] = None
    transaction_owner_address: Optional[str] = None

    entity_type: ClassVar[EntityType] = EntityType.FILE

    def __post_init__(self):
        _normalize_time(self, "created_at")
        _normalize_time(self, "last_modified_date", millis=True)
        validate_entity(self)


Entity = Union[DriveEntity, FolderEntity, FileEntity]


def _normalize_time(entity, name: str, millis: bool = False) -> None:
    # Records keep whole seconds (`Unix-Time`) or milliseconds (`lastModifiedDate`), always UTC.
    value = getattr(entity, name)
    if not isinstance(value, datetime):
        return
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    value = value.replace(microsecond=value.microsecond // 1000 * 1000 if millis else 0)
    object.__setattr__(entity, name, value)


def _coerce_enum(entity, name: str, enum_cls) -> None:
    # Tag values arrive as plain strings; unknown values are left for validation to report.
    value = getattr(entity, name)
    if isinstance(value, str) and not isinstance(value, enum_cls):
        try:
            object.__setattr__(entity, name, enum_cls(value))
        except ValueError:
            pass


def _check_uuid(errors: List[FieldViolation], name: str, value, optional: bool = False) -> None:
    if value is None:
        if not optional:
            errors.append(FieldViolation(name, "is required"))
    elif not is_uuid(value):
        errors.append(FieldViolation(name, "must be a UUID"))


def _check_text(errors: List[FieldViolation], name: str, value, optional: bool = False) -> None:
    if value is None:
        if not optional:
            errors.append(FieldViolation(name, "is required"))
    elif not isinstance(value, str):
        errors.append(FieldViolation(name, "must be a string"))
    elif not value:
        errors.append(FieldViolation(name, "must not be empty"))


def _check_datetime(errors: List[FieldViolation], name: str, value, optional: bool = False) -> None:
    if value is None:
        if not optional:
            errors.append(FieldViolation(name, "is required"))
    elif not isinstance(value, datetime):
        errors.append(FieldViolation(name, "must be a datetime"))


def _check_enum(errors: List[FieldViolation], name: str, value, enum_cls, optional: bool = False) -> None:
    if value is None:
        if not optional:
            errors.append(FieldViolation(name, "is required"))
    elif not isinstance(value, enum_cls):
        allowed = ", ".join(member.value for member in enum_cls)
        errors.append(FieldViolation(name, f"must be one of: {allowed}"))


def _drive_violations(entity: DriveEntity) -> List[FieldViolation]:
    errors: List[FieldViolation] = []
    _check_uuid(errors, "id", entity.id)
    _check_text(errors, "name", entity.name)
    _check_uuid(errors, "root_folder_id", entity.root_folder_id)
    _check_enum(errors, "privacy", entity.privacy, DrivePrivacy)
    _check_enum(errors, "auth_mode", entity.auth_mode, DriveAuthMode, optional=True)
    if entity.privacy == DrivePrivacy.PRIVATE and entity.auth_mode is None:
        errors.append(FieldViolation("auth_mode", "is required for private drives"))
    elif entity.privacy == DrivePrivacy.PUBLIC and entity.auth_mode is not None:
        errors.append(FieldViolation("auth_mode", "must be absent for public drives"))
    return errors


def _folder_violations(entity: FolderEntity) -> List[FieldViolation]:
    errors: List[FieldViolation] = []
    _check_uuid(errors, "id", entity.id)
    _check_uuid(errors, "drive_id", entity.drive_id)
    _check_uuid(errors, "parent_folder_id", entity.parent_folder_id, optional=True)
    _check_text(errors, "name", entity.name)
    return errors


def _file_violations(entity: FileEntity) -> List[FieldViolation]:
    errors: List[FieldViolation] = []
    _check_uuid(errors, "id", entity.id)
    _check_uuid(errors, "drive_id", entity.drive_id)
    _check_uuid(errors, "parent_folder_id", entity.parent_folder_id)
    _check_text(errors, "name", entity.name)
    if entity.size is None:
        errors.append(FieldViolation("size", "is required"))
    elif isinstance(entity.size, bool) or not isinstance(entity.size, int):
        errors.append(FieldViolation("size", "must be an integer"))
    elif entity.size <= 0:
        errors.append(FieldViolation("size", "must be positive"))
    _check_datetime(errors, "last_modified_date", entity.last_modified_date)
    _check_text(errors, "data_tx_id", entity.data_tx_id)
    _check_text(errors, "data_content_type", entity.data_content_type, optional=True)
    return errors


_VALIDATORS: Dict[EntityType, Callable[..., List[FieldViolation]]] = {
    EntityType.DRIVE: _drive_violations,
    EntityType.FOLDER: _folder_violations,
    EntityType.FILE: _file_violations,
}

ENTITY_CLASSES = {
    EntityType.DRIVE: DriveEntity,
    EntityType.FOLDER: FolderEntity,
    EntityType.FILE: FileEntity,
}


def entity_violations(entity: Entity) -> List[FieldViolation]:
    errors = _VALIDATORS[entity.entity_type](entity)
    _check_datetime(errors, "created_at", entity.created_at, optional=True)
    return errors


def validate_entity(entity: Entity) -> None:
    errors = entity_violations(entity)
    if errors:
        raise ValidationFailure(errors)
