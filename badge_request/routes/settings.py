from flask import Blueprint, render_template, request, redirect, url_for, flash

from badge_request.models import Settings
from badge_request.services import email as email_service
from badge_request.utils import is_valid_email

bp = Blueprint("settings", __name__)


@bp.route("/", methods=["GET", "POST"])
def index():
    """Email delivery settings page."""
    if request.method == "POST":
        from_email = request.form.get("smtp_from_email", "").strip()
        notify_to = request.form.get("notify_to", "").strip()

        for label, value in (("From address", from_email), ("IT coordinator address", notify_to)):
            if value and not is_valid_email(value):
                flash(f"{label} is not a valid email address", "error")
                return redirect(url_for("settings.index"))

        port = request.form.get("smtp_port", "").strip()
        if port and not port.isdigit():
            flash("SMTP port must be a number", "error")
            return redirect(url_for("settings.index"))

        Settings.save_smtp_config(
            host=request.form.get("smtp_host", ""),
            port=port,
            user=request.form.get("smtp_user", ""),
            from_email=from_email,
            use_tls=request.form.get("smtp_use_tls") == "on",
            notify_to=notify_to,
            password=request.form.get("smtp_password") or None,
        )

        flash("Settings saved", "success")
        return redirect(url_for("settings.index"))

    return render_template(
        "settings/index.html",
        smtp_config=Settings.get_smtp_config(),
        email_configured=email_service.is_configured(),
    )
