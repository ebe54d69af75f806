import os
from dotenv import load_dotenv

load_dotenv()


def _split_list(value: str) -> tuple:
    return tuple(item.strip() for item in value.split(",") if item.strip())


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "postgresql://localhost:5432/badge_requests"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"connect_timeout": 5},
    }

    # Companies offered on the form
    BADGE_COMPANIES = _split_list(os.environ.get("BADGE_COMPANIES", "Link,Impact,Other"))

    # Notification defaults (rows in the settings table take precedence)
    SMTP_HOST = os.environ.get("SMTP_HOST", "")
    SMTP_PORT = os.environ.get("SMTP_PORT", "587")
    SMTP_USER = os.environ.get("SMTP_USER", "")
    SMTP_PASSWORD = os.environ.get("SMTP_PASSWORD", "")
    SMTP_FROM_EMAIL = os.environ.get("SMTP_FROM_EMAIL", "")
    SMTP_USE_TLS = os.environ.get("SMTP_USE_TLS", "true")
    SMTP_TIMEOUT = int(os.environ.get("SMTP_TIMEOUT", "15"))
    NOTIFY_TO = os.environ.get("NOTIFY_TO", "")

    # In-progress forms kept in memory
    FORM_SESSION_IDLE_TIMEOUT = int(os.environ.get("FORM_SESSION_IDLE_TIMEOUT", "3600"))
    FORM_SESSION_LIMIT = int(os.environ.get("FORM_SESSION_LIMIT", "1000"))
