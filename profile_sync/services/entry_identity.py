"""Classify repeating-entry ids and decide which remote call they need."""

from enum import Enum
from typing import Any

from profile_sync.models.profile_models import (
    EntryId,
    PendingId,
    PersistedId,
    UnknownId,
    UnsavedId,
    parse_entry_id,
)


class EntryClass(str, Enum):
    """Lifecycle stage of an entry."""

    UNSAVED_EMPTY = "unsaved_empty"
    UNSAVED_NEW = "unsaved_new"
    PERSISTED = "persisted"
    UNKNOWN = "unknown"


class SaveAction(str, Enum):
    """Remote call issued for an entry when its section is saved."""

    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class DeleteAction(str, Enum):
    """How an entry is removed."""

    REMOTE = "remote"
    LOCAL_ONLY = "local_only"


def classify_entry_id(entry_id: Any) -> EntryClass:
    """
    Classify an entry id.

    Args:
        entry_id: EntryId or its string form ('new', 'temp_<n>', '<n>', ...)

    Returns:
        EntryClass: Lifecycle stage
    """
    parsed = parse_entry_id(entry_id)
    if isinstance(parsed, UnsavedId):
        return EntryClass.UNSAVED_EMPTY
    if isinstance(parsed, PendingId):
        return EntryClass.UNSAVED_NEW
    if isinstance(parsed, PersistedId):
        return EntryClass.PERSISTED
    if isinstance(parsed, UnknownId):
        return EntryClass.UNKNOWN
    raise TypeError(f"Unhandled entry id type: {type(parsed).__name__}")


def resolve_save_action(entry_id: EntryId, is_blank: bool = False) -> SaveAction:
    """
    Decide the remote call for an entry during a section save.

    Unsaved rows ('new' or temp) are created only once the user has typed
    into them; left blank they are skipped so no empty record is persisted.

    Args:
        entry_id: Entry identifier
        is_blank: Whether every field of the entry is empty

    Returns:
        SaveAction: CREATE, UPDATE or SKIP
    """
    entry_class = classify_entry_id(entry_id)
    if entry_class is EntryClass.PERSISTED:
        return SaveAction.UPDATE
    if entry_class in (EntryClass.UNSAVED_EMPTY, EntryClass.UNSAVED_NEW):
        return SaveAction.SKIP if is_blank else SaveAction.CREATE
    return SaveAction.SKIP


def resolve_delete_action(entry_id: EntryId) -> DeleteAction:
    """Only persisted entries need a remote DELETE before local removal."""
    if classify_entry_id(entry_id) is EntryClass.PERSISTED:
        return DeleteAction.REMOTE
    return DeleteAction.LOCAL_ONLY
