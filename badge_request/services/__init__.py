from badge_request.services.badge_form import FormController, Outcome
from badge_request.services.entries import (
    Batch,
    Entry,
    EntryStore,
    ErrorKind,
    Field,
    FieldError,
    NotificationError,
    PersistenceError,
)

__all__ = [
    "FormController",
    "Outcome",
    "Batch",
    "Entry",
    "EntryStore",
    "ErrorKind",
    "Field",
    "FieldError",
    "NotificationError",
    "PersistenceError",
]
