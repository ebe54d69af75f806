"""Badge request entries, the per-session entry store, and submission batches."""

from dataclasses import dataclass, field

from badge_request.utils import IdKind


class Field:
    """Form fields an error can be attributed to."""
    EMPLOYEE_NAME = "employee_name"
    IDENTIFIER = "identifier"
    REQUESTER_NAME = "requester_name"
    COMPANY = "company"


class ErrorKind:
    INPUT = "input"
    DUPLICATE = "duplicate"
    PERSISTENCE = "persistence"
    NOTIFICATION = "notification"
    PARTIAL_INPUT = "partial_input"
    NO_ENTRIES = "no_entries"
    BUSY = "busy"


class PersistenceError(Exception):
    """Raised by a persister when an entry could not be saved."""


class NotificationError(Exception):
    """Raised by a notifier when a batch could not be delivered."""


@dataclass(frozen=True)
class FieldError:
    kind: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class Entry:
    """One accepted identity record. Exactly one of ldap / ain is set."""

    requester_name: str
    company: str
    employee_name: str
    ldap: str = ""
    ain: str = ""

    @property
    def id_kind(self) -> str:
        return IdKind.LDAP if self.ldap else IdKind.TIME_CLOCK

    @property
    def id_value(self) -> str:
        return self.ldap or self.ain

    def matches(self, other: "Entry") -> bool:
        """Return True if *other* identifies the same person by the same kind of id."""
        if self.company != other.company:
            return False
        if self.employee_name.lower() != other.employee_name.lower():
            return False
        if self.ldap and other.ldap:
            return self.ldap.lower() == other.ldap.lower()
        if self.ain and other.ain:
            return self.ain == other.ain
        return False

    def to_payload(self) -> dict:
        return {
            "employeeName": self.employee_name,
            "idType": self.id_kind,
            "idValue": self.id_value,
            "company": self.company,
        }


class EntryStore:
    """Entries accepted so far in one form session, in insertion order.

    Entries are never edited or removed one at a time; the store is only
    appended to or cleared as a whole.
    """

    def __init__(self):
        self._entries = []

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __bool__(self):
        return bool(self._entries)

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def append(self, entry: Entry) -> None:
        self._entries.append(entry)

    def is_duplicate(self, candidate: Entry) -> bool:
        return any(entry.matches(candidate) for entry in self._entries)

    def clear(self) -> None:
        self._entries.clear()


@dataclass(frozen=True)
class Batch:
    """Everything sent to the IT coordinator in one notification."""

    requester_name: str
    company: str
    entries: tuple = field(default_factory=tuple)

    @classmethod
    def from_store(cls, requester_name: str, company: str, store: EntryStore) -> "Batch":
        return cls(requester_name=requester_name, company=company, entries=store.entries)

    @classmethod
    def from_payload(cls, payload) -> "Batch":
        """Build a batch from the JSON body of ``POST /api/send``.

        Raises ValueError when a required field is missing or malformed.
        """
        if not isinstance(payload, dict):
            raise ValueError("Missing required form fields.")

        requester_name = str(payload.get("requesterName") or "").strip()
        company = str(payload.get("company") or "").strip()
        raw_entries = payload.get("entries")
        if not requester_name or not company or not raw_entries or not isinstance(raw_entries, list):
            raise ValueError("Missing required form fields.")

        entries = []
        for raw in raw_entries:
            if not isinstance(raw, dict):
                raise ValueError("Missing required form fields.")
            employee_name = str(raw.get("employeeName") or "").strip()
            id_value = str(raw.get("idValue") or "").strip()
            if not employee_name or not id_value:
                raise ValueError("Missing required form fields.")
            id_kind = IdKind.parse(raw.get("idType"))
            entries.append(Entry(
                requester_name=requester_name,
                company=str(raw.get("company") or company).strip(),
                employee_name=employee_name,
                ldap=id_value if id_kind == IdKind.LDAP else "",
                ain=id_value if id_kind == IdKind.TIME_CLOCK else "",
            ))

        return cls(requester_name=requester_name, company=company, entries=tuple(entries))

    def to_payload(self) -> dict:
        return {
            "requesterName": self.requester_name,
            "company": self.company,
            "entries": [entry.to_payload() for entry in self.entries],
        }
