from flask import current_app

from badge_request import db


class Settings(db.Model):
    """Application settings stored in the database."""

    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False, index=True)
    value = db.Column(db.Text)
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    @classmethod
    def get(cls, key: str, default: str = None) -> str:
        """Get a setting value by key."""
        setting = cls.query.filter_by(key=key).first()
        return setting.value if setting else default

    @classmethod
    def set(cls, key: str, value: str) -> None:
        """Set a setting value."""
        setting = cls.query.filter_by(key=key).first()
        if setting:
            setting.value = value
        else:
            setting = cls(key=key, value=value)
            db.session.add(setting)
        db.session.commit()

    # ------------------------------------------------------------------
    # SMTP / email settings
    # ------------------------------------------------------------------

    # setting key -> app config key used when the setting is not stored
    SMTP_DEFAULTS = {
        "smtp_host": "SMTP_HOST",
        "smtp_port": "SMTP_PORT",
        "smtp_user": "SMTP_USER",
        "smtp_password": "SMTP_PASSWORD",
        "smtp_from_email": "SMTP_FROM_EMAIL",
        "smtp_use_tls": "SMTP_USE_TLS",
        "notify_to": "NOTIFY_TO",
    }

    @classmethod
    def get_email_setting(cls, key: str) -> str:
        """Get an email setting, falling back to the environment config."""
        value = cls.get(key)
        if value:
            return value
        return str(current_app.config.get(cls.SMTP_DEFAULTS[key], "") or "")

    @classmethod
    def get_smtp_config(cls) -> dict:
        """Return all SMTP-related settings as a dict."""
        return {
            "host": cls.get_email_setting("smtp_host"),
            "port": cls.get_email_setting("smtp_port") or "587",
            "user": cls.get_email_setting("smtp_user"),
            "from_email": cls.get_email_setting("smtp_from_email"),
            "use_tls": cls.get_email_setting("smtp_use_tls") or "true",
            "notify_to": cls.get_email_setting("notify_to"),
            "has_password": bool(cls.get_email_setting("smtp_password")),
        }

    @classmethod
    def save_smtp_config(cls, host, port, user, from_email, use_tls, notify_to, password=None):
        """Persist SMTP configuration. Password is only overwritten if provided."""
        cls.set("smtp_host", host.strip())
        cls.set("smtp_port", port.strip() or "587")
        cls.set("smtp_user", user.strip())
        cls.set("smtp_from_email", from_email.strip())
        cls.set("smtp_use_tls", "true" if use_tls else "false")
        cls.set("notify_to", notify_to.strip())
        if password:
            cls.set("smtp_password", password)

    def __repr__(self):
        return f"<Settings {self.key}={self.value}>"
