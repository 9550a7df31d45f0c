"""Projection of entity identity fields to and from the record tag map."""
from typing import Any, Dict, Mapping

from arfs.entities.enums import DrivePrivacy, EntityTag, EntityType
from arfs.entities.models import DriveEntity, Entity, FileEntity, FolderEntity
from arfs.utils.dataModels import ARFS_VERSION, TagMap
from arfs.utils.helper import merge_tags
from arfs.utils.unix_time import format_unix_time, parse_unix_time

ID_TAGS = {
    EntityType.DRIVE: EntityTag.DRIVE_ID,
    EntityType.FOLDER: EntityTag.FOLDER_ID,
    EntityType.FILE: EntityTag.FILE_ID,
}


def entity_to_tags(entity: Entity) -> TagMap:
    """
    Tags that identify an entity and place it in its drive.

    Does not include `Content-Type` or the cipher tags, which depend on how
    the payload is encoded.
    """
    tags: Dict[EntityTag, Any] = {
        EntityTag.ARFS: ARFS_VERSION,
        EntityTag.UNIX_TIME: format_unix_time(entity.created_at) if entity.created_at is not None else None,
        EntityTag.ENTITY_TYPE: entity.entity_type,
        ID_TAGS[entity.entity_type]: entity.id,
    }

    if isinstance(entity, DriveEntity):
        tags[EntityTag.DRIVE_PRIVACY] = entity.privacy
        tags[EntityTag.DRIVE_AUTH_MODE] = entity.auth_mode
    elif isinstance(entity, (FolderEntity, FileEntity)):
        tags[EntityTag.DRIVE_ID] = entity.drive_id
        tags[EntityTag.PARENT_FOLDER_ID] = entity.parent_folder_id

    return merge_tags(tags)


def fields_from_tags(entity_type: EntityType, tags: Mapping[str, str]) -> Dict[str, Any]:
    """
    Identity fields of an entity read back from its tags.

    A missing `Unix-Time` tag gives `created_at=None`. Malformed values are
    passed through unchanged so entity validation can report them.
    """
    entity_type = EntityType(entity_type)
    unix_time = tags.get(EntityTag.UNIX_TIME.value)
    try:
        created_at = parse_unix_time(unix_time)
    except ValueError:
        created_at = unix_time

    fields: Dict[str, Any] = {
        "id": tags.get(ID_TAGS[entity_type].value),
        "created_at": created_at,
    }

    if entity_type is EntityType.DRIVE:
        # Drives written before the privacy tag existed are public.
        fields["privacy"] = tags.get(EntityTag.DRIVE_PRIVACY.value) or DrivePrivacy.PUBLIC
        fields["auth_mode"] = tags.get(EntityTag.DRIVE_AUTH_MODE.value)
    else:
        fields["drive_id"] = tags.get(EntityTag.DRIVE_ID.value)
        fields["parent_folder_id"] = tags.get(EntityTag.PARENT_FOLDER_ID.value)

    return fields
