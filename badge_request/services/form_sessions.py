"""Keeps one FormController per browser session."""

import threading
import time
import uuid

from flask import current_app, session

from badge_request.services.badge_form import DEFAULT_COMPANIES, FormController

SESSION_KEY = "badge_form_id"


class FormSessionRegistry:
    """Process-local map of form session id -> FormController.

    Sessions untouched for *idle_timeout* seconds are dropped, and the
    registry never holds more than *max_sessions* controllers.  A
    controller with a save or send in flight is never evicted.
    """

    def __init__(self, idle_timeout: float = 3600, max_sessions: int = 1000, clock=time.monotonic):
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self._clock = clock
        # form_id -> [controller, last touched]
        self._forms = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._forms)

    def __contains__(self, form_id):
        return form_id in self._forms

    def find(self, form_id) -> FormController | None:
        """Return the controller for *form_id* without creating one."""
        with self._lock:
            slot = self._forms.get(form_id)
            if slot is None:
                return None
            slot[1] = self._clock()
            return slot[0]

    def get(self, form_id, factory) -> FormController:
        """Return the controller for *form_id*, creating it with *factory* if needed."""
        with self._lock:
            now = self._clock()
            slot = self._forms.get(form_id)
            if slot is None:
                self._evict(now)
                slot = [factory(), now]
                self._forms[form_id] = slot
            else:
                slot[1] = now
            return slot[0]

    def discard(self, form_id) -> None:
        with self._lock:
            self._forms.pop(form_id, None)

    def _evict(self, now) -> None:
        idle = [
            (touched, form_id)
            for form_id, (controller, touched) in self._forms.items()
            if not controller.busy
        ]
        for touched, form_id in idle:
            if now - touched > self.idle_timeout:
                del self._forms[form_id]

        overflow = len(self._forms) - self.max_sessions + 1
        if overflow > 0:
            oldest = sorted(item for item in idle if item[1] in self._forms)
            for _, form_id in oldest[:overflow]:
                del self._forms[form_id]


def _new_controller() -> FormController:
    from badge_request.services import email as email_service
    from badge_request.services.persistence import save_entry

    return FormController(
        persister=save_entry,
        notifier=email_service.send_badge_request_email,
        companies=current_app.config.get("BADGE_COMPANIES") or DEFAULT_COMPANIES,
    )


def _registry() -> FormSessionRegistry:
    return current_app.extensions["badge_forms"]


def current_form() -> FormController:
    """Return the form controller bound to the current browser session."""
    form_id = session.get(SESSION_KEY)
    if not form_id:
        form_id = uuid.uuid4().hex
        session[SESSION_KEY] = form_id
    return _registry().get(form_id, _new_controller)


def peek_form() -> FormController:
    """Return the session's controller, or a blank one that is not kept."""
    form_id = session.get(SESSION_KEY)
    controller = _registry().find(form_id) if form_id else None
    return controller or _new_controller()


def release_form() -> None:
    """Forget the current session's controller once its batch is done."""
    form_id = session.pop(SESSION_KEY, None)
    if form_id:
        _registry().discard(form_id)
