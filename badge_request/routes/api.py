from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from badge_request import db
from badge_request.services import email as email_service
from badge_request.services.entries import Batch, NotificationError

bp = Blueprint("api", __name__)


@bp.route("/send", methods=["POST"])
def send():
    """Email a badge request batch posted as JSON."""
    try:
        batch = Batch.from_payload(request.get_json(silent=True))
    except ValueError as exc:
        return jsonify(ok=False, error=str(exc)), 400

    try:
        message_id = email_service.send_badge_request_email(batch)
    except NotificationError as exc:
        current_app.logger.exception("Failed to send badge request from %s", batch.requester_name)
        return jsonify(ok=False, error=str(exc)), 500

    return jsonify(ok=True, id=message_id)


@bp.route("/send-test", methods=["POST"])
def send_test():
    """Send a plain-text test email to check delivery settings."""
    try:
        configured = email_service.is_configured()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Could not load email settings")
        return jsonify(ok=False, error="Could not load email settings."), 500

    if not configured:
        return jsonify(
            ok=False,
            error="Please set the SMTP host, from address and IT coordinator address.",
        ), 400

    try:
        message_id = email_service.send_test_email()
    except NotificationError as exc:
        current_app.logger.exception("Test email failed")
        return jsonify(ok=False, error=str(exc)), 500

    return jsonify(ok=True, id=message_id)
