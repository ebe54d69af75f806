"""Saves accepted badge request entries to the database."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from badge_request import db
from badge_request.models import BadgeRequest
from badge_request.services.entries import Entry, PersistenceError

logger = logging.getLogger(__name__)


def save_entry(entry: Entry) -> BadgeRequest:
    """Insert one badge request row. Raises PersistenceError on failure."""
    row = BadgeRequest(
        requester_name=entry.requester_name,
        company=entry.company,
        employee_name=entry.employee_name,
        ldap=entry.ldap,
        ain=entry.ain,
    )
    try:
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError(str(exc)) from exc

    logger.info("Saved badge request %s for %s", row.id, entry.employee_name)
    return row
