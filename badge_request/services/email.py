"""SMTP email service."""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from html import escape

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from badge_request.services.entries import Batch, NotificationError

logger = logging.getLogger(__name__)

_CELL = 'style="border:1px solid #ddd; padding:8px; text-align:left;"'


def is_configured() -> bool:
    """Return True if all required SMTP settings are present."""
    from badge_request.models import Settings

    return all(
        Settings.get_email_setting(k)
        for k in ("smtp_host", "smtp_from_email", "notify_to")
    )


def send_email(to: str, subject: str, body_html: str, body_text: str) -> str:
    """Send an email via SMTP and return its Message-ID. Raises on failure."""
    from badge_request.models import Settings

    host = Settings.get_email_setting("smtp_host")
    port = int(Settings.get_email_setting("smtp_port") or "587")
    user = Settings.get_email_setting("smtp_user")
    password = Settings.get_email_setting("smtp_password")
    from_email = Settings.get_email_setting("smtp_from_email")
    use_tls = (Settings.get_email_setting("smtp_use_tls") or "true").lower() != "false"
    timeout = current_app.config.get("SMTP_TIMEOUT", 15)

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = from_email
    msg["To"] = to
    msg["Message-ID"] = make_msgid(domain=from_email.rpartition("@")[2] or None)
    msg.attach(MIMEText(body_text, "plain"))
    if body_html:
        msg.attach(MIMEText(body_html, "html"))

    with smtplib.SMTP(host, port, timeout=timeout) as smtp:
        if use_tls:
            smtp.starttls()
        if user and password:
            smtp.login(user, password)
        smtp.sendmail(from_email, [to], msg.as_string())

    logger.info("Email sent to %s: %s", to, subject)
    return msg["Message-ID"]


def _deliver(subject: str, body_html: str, body_text: str) -> str:
    """Send to the IT coordinator, translating failures into NotificationError."""
    from badge_request import db
    from badge_request.models import Settings

    try:
        if not is_configured():
            raise NotificationError("Email is not configured.")
        to = Settings.get_email_setting("notify_to")
        return send_email(to, subject, body_html, body_text)
    except SQLAlchemyError as exc:
        # SMTP settings are read from the database
        db.session.rollback()
        raise NotificationError("Could not load email settings.") from exc
    except (smtplib.SMTPException, OSError) as exc:
        raise NotificationError(str(exc)) from exc


def render_badge_request_text(batch: Batch) -> str:
    lines = [
        "New Badge Request",
        f"Requester: {batch.requester_name}",
        "",
        "Entries:",
    ]
    for number, entry in enumerate(batch.entries, start=1):
        lines.append(
            f"{number}. {entry.employee_name} | {entry.id_kind}: {entry.id_value} | {entry.company}"
        )
    return "\n".join(lines) + "\n"


def render_badge_request_html(batch: Batch) -> str:
    """Render the batch as the HTML table the IT coordinator works from."""
    headers = ("#", "Employee Name", "ID Type", "ID Value", "Company")
    header_cells = "".join(f"<th {_CELL}>{h}</th>" for h in headers)

    rows = []
    for number, entry in enumerate(batch.entries, start=1):
        values = (number, entry.employee_name, entry.id_kind, entry.id_value, entry.company)
        cells = "".join(f"<td {_CELL}>{escape(str(v))}</td>" for v in values)
        rows.append(f"<tr>{cells}</tr>")

    return f"""
<h2>New Badge Request</h2>
<h3><strong>Requester:</strong> {escape(batch.requester_name)}</h3>

<h3>Entries:</h3>
<table style="width:100%; border-collapse:collapse; font-family:Arial, sans-serif;">
  <thead>
    <tr style="background-color:#f2f2f2;">{header_cells}</tr>
  </thead>
  <tbody>
    {"".join(rows)}
  </tbody>
</table>
"""


def send_badge_request_email(batch: Batch) -> str:
    """Email a submitted batch to the IT coordinator. Raises NotificationError."""
    subject = f"Badge Request from {batch.requester_name}"
    return _deliver(subject, render_badge_request_html(batch), render_badge_request_text(batch))


def send_test_email() -> str:
    """Send a plain-text delivery check to the IT coordinator."""
    subject = "Test email - Badge Request app"
    body_text = (
        f"This is a test message sent by the Badge Request app at "
        f"{datetime.now().isoformat()}."
    )
    return _deliver(subject, "", body_text)
