from __future__ import annotations

import pytest

from badge_request import create_app, db
from badge_request.config import Config
from badge_request.services.entries import NotificationError, PersistenceError


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    BADGE_COMPANIES = ("Link", "Impact", "Other")

    SMTP_HOST = "smtp.example.com"
    SMTP_PORT = "587"
    SMTP_USER = ""
    SMTP_PASSWORD = ""
    SMTP_FROM_EMAIL = "badges@example.com"
    SMTP_USE_TLS = "true"
    SMTP_TIMEOUT = 5
    NOTIFY_TO = "it@example.com"


class FakePersister:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    def __call__(self, entry):
        if self.fail:
            raise PersistenceError("database unavailable")
        self.saved.append(entry)


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.batches = []

    def __call__(self, batch):
        if self.fail:
            raise NotificationError("smtp unavailable")
        self.batches.append(batch)
        return f"<msg-{len(self.batches)}@example.com>"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to an SMTP server."""
    from badge_request.services import email as email_service

    sent = []

    def fake_send_email(to, subject, body_html, body_text):
        sent.append({"to": to, "subject": subject, "html": body_html, "text": body_text})
        return f"<sent-{len(sent)}@example.com>"

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent
