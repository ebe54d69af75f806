"""Badge request form controller.

Holds the inputs and accepted entries of one form session and runs the
add-entry and submit-batch pipelines against an injected persister and
notifier:

    persister(entry) -> None, raises PersistenceError
    notifier(batch) -> message id, raises NotificationError

Nothing here knows about Flask or HTML; the routes bind requests to
``on_edit`` / ``on_add`` / ``on_submit`` and render ``view()``.
"""

import logging
import threading
from dataclasses import dataclass, asdict

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
from badge_request.utils import IdKind, is_ldap_only, validate_identifier

logger = logging.getLogger(__name__)

DEFAULT_COMPANIES = ("Link", "Impact", "Other")

PARTIAL_INPUT_MESSAGE = "Finish adding the current employee or clear the fields before submitting."
NO_ENTRIES_MESSAGE = "No entries to submit"
BUSY_MESSAGE = "A request is already in progress."
PERSISTENCE_MESSAGE = "Failed to save entry to database."
NOTIFICATION_MESSAGE = "Failed to send email."


@dataclass
class FormInputs:
    """Raw values currently typed into the form."""

    requester_name: str = ""
    company: str = ""
    employee_name: str = ""
    id_kind: str = IdKind.LDAP
    ldap: str = ""
    ain: str = ""


@dataclass(frozen=True)
class Outcome:
    """Result of an add, submit or reset action."""

    accepted: bool
    error: FieldError | None = None
    entry: Entry | None = None
    message_id: str | None = None

    @classmethod
    def rejected(cls, kind, message, field=None) -> "Outcome":
        return cls(accepted=False, error=FieldError(kind=kind, message=message, field=field))


class FormController:
    """One requester's in-progress badge request."""

    def __init__(self, persister, notifier, companies=DEFAULT_COMPANIES):
        self.persister = persister
        self.notifier = notifier
        self.companies = tuple(companies)
        self.inputs = FormInputs()
        self.store = EntryStore()
        self.error = None
        # Held while the persister or notifier is being called
        self._in_flight = threading.Lock()

    # ------------------------------------------------------------------
    # Field state
    # ------------------------------------------------------------------

    @property
    def id_kind(self) -> str:
        """The identifier kind that applies to the selected company."""
        if is_ldap_only(self.inputs.company):
            return IdKind.LDAP
        return self.inputs.id_kind

    @property
    def id_kind_locked(self) -> bool:
        return is_ldap_only(self.inputs.company)

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    def on_edit(self, **changes) -> None:
        """Apply edited input values; unknown names raise TypeError."""
        for name, value in changes.items():
            if not hasattr(self.inputs, name):
                raise TypeError(f"Unknown form field: {name}")
            if name == "id_kind":
                value = IdKind.parse(value)
            setattr(self.inputs, name, value if value is not None else "")

        if is_ldap_only(self.inputs.company):
            self.inputs.ain = ""

    def view(self) -> dict:
        """Everything a renderer needs to draw the form."""
        kind = self.id_kind
        return {
            "inputs": asdict(self.inputs),
            "companies": self.companies,
            "ldap_only_companies": [c for c in self.companies if is_ldap_only(c)],
            "id_kind": kind,
            "id_kind_locked": self.id_kind_locked,
            "show_ldap": kind == IdKind.LDAP,
            "show_ain": kind == IdKind.TIME_CLOCK,
            "entries": self.store.entries,
            "can_submit": bool(self.store),
            "busy": self.busy,
            "error": self.error,
        }

    # ------------------------------------------------------------------
    # Add entry
    # ------------------------------------------------------------------

    def on_add(self) -> Outcome:
        """Validate the current inputs and, if they pass, save and keep the entry."""
        if not self._in_flight.acquire(blocking=False):
            return Outcome.rejected(ErrorKind.BUSY, BUSY_MESSAGE)
        try:
            outcome = self._add()
        finally:
            self._in_flight.release()
        self.error = outcome.error
        return outcome

    def _add(self) -> Outcome:
        company = self.inputs.company
        kind = self.id_kind
        employee_name = self.inputs.employee_name.strip()
        ldap = self.inputs.ldap.strip() if kind == IdKind.LDAP else ""
        ain = self.inputs.ain.strip() if kind == IdKind.TIME_CLOCK else ""
        id_value = ldap or ain

        if company not in self.companies:
            return Outcome.rejected(ErrorKind.INPUT, "Please select a company.", Field.COMPANY)
        if not employee_name:
            return Outcome.rejected(ErrorKind.INPUT, "Employee name is required.", Field.EMPLOYEE_NAME)
        if not id_value:
            message = "LDAP is required." if kind == IdKind.LDAP else "AIN is required."
            return Outcome.rejected(ErrorKind.INPUT, message, Field.IDENTIFIER)

        format_error = validate_identifier(company, kind, id_value)
        if format_error:
            return Outcome.rejected(ErrorKind.INPUT, format_error, Field.IDENTIFIER)

        entry = Entry(
            requester_name=self.inputs.requester_name.strip(),
            company=company,
            employee_name=employee_name,
            ldap=ldap,
            ain=ain,
        )

        if self.store.is_duplicate(entry):
            label = "LDAP" if kind == IdKind.LDAP else "AIN"
            return Outcome.rejected(
                ErrorKind.DUPLICATE,
                f"Duplicate {label} for this employee/company.",
                Field.IDENTIFIER,
            )

        try:
            self.persister(entry)
        except PersistenceError:
            logger.exception("Could not save badge request for %s", employee_name)
            return Outcome.rejected(ErrorKind.PERSISTENCE, PERSISTENCE_MESSAGE)

        self.store.append(entry)
        self.inputs.employee_name = ""
        self.inputs.ldap = ""
        self.inputs.ain = ""
        logger.info("Accepted %s entry for %s (%s)", kind, employee_name, company)
        return Outcome(accepted=True, entry=entry)

    # ------------------------------------------------------------------
    # Submit batch
    # ------------------------------------------------------------------

    def has_pending_input(self) -> bool:
        """Return True if an entry has been started but not added."""
        kind = self.id_kind
        pending_id = self.inputs.ldap if kind == IdKind.LDAP else self.inputs.ain
        return bool(self.inputs.employee_name.strip() or pending_id.strip())

    def on_submit(self) -> Outcome:
        """Send every accepted entry to the IT coordinator."""
        if not self._in_flight.acquire(blocking=False):
            return Outcome.rejected(ErrorKind.BUSY, BUSY_MESSAGE)
        try:
            outcome = self._submit()
        finally:
            self._in_flight.release()
        self.error = outcome.error
        return outcome

    def _submit(self) -> Outcome:
        if self.has_pending_input():
            return Outcome.rejected(ErrorKind.PARTIAL_INPUT, PARTIAL_INPUT_MESSAGE)
        if not self.store:
            return Outcome.rejected(ErrorKind.NO_ENTRIES, NO_ENTRIES_MESSAGE)

        requester_name = self.inputs.requester_name.strip()
        if not requester_name:
            return Outcome.rejected(ErrorKind.INPUT, "Requester name is required.", Field.REQUESTER_NAME)

        batch = Batch.from_store(requester_name, self.inputs.company, self.store)
        try:
            message_id = self.notifier(batch)
        except NotificationError:
            logger.exception("Could not send badge request from %s", requester_name)
            return Outcome.rejected(ErrorKind.NOTIFICATION, NOTIFICATION_MESSAGE)

        logger.info("Submitted %d badge request(s) from %s", len(batch.entries), requester_name)
        self._clear()
        return Outcome(accepted=True, message_id=message_id)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> Outcome:
        """Drop all accepted entries and clear every input."""
        if not self._in_flight.acquire(blocking=False):
            return Outcome.rejected(ErrorKind.BUSY, BUSY_MESSAGE)
        try:
            self._clear()
        finally:
            self._in_flight.release()
        return Outcome(accepted=True)

    def _clear(self) -> None:
        self.store.clear()
        self.inputs = FormInputs()
        self.error = None
