from __future__ import annotations

import smtplib

from sqlalchemy.exc import OperationalError

from badge_request.models import BadgeRequest, Settings
from badge_request.services import email as email_service
from badge_request.services.form_sessions import SESSION_KEY

ENTRY = {
    "requester_name": "Sam Lee",
    "company": "Other",
    "employee_name": "Jane Doe",
    "id_kind": "LDAP",
    "ldap": "AB12345",
}

EMPTY_ENTRY = {"requester_name": "Sam Lee", "company": "Other", "employee_name": "", "ldap": ""}


def _form(app, client):
    with client.session_transaction() as sess:
        form_id = sess[SESSION_KEY]
    return app.extensions["badge_forms"].find(form_id)


def test_index_renders_form(app, client):
    response = client.get("/")

    assert response.status_code == 200
    assert b"Badge Request" in response.data
    assert b'value="Impact"' in response.data
    assert b'name="ldap"' in response.data
    assert b'name="ain"' in response.data
    assert len(app.extensions["badge_forms"]) == 0


def test_add_duplicate_and_submit(app, client, sent_emails):
    response = client.post("/entries", data=ENTRY)
    assert response.status_code == 302
    assert BadgeRequest.query.count() == 1
    row = BadgeRequest.query.first()
    assert (row.requester_name, row.employee_name, row.ldap, row.ain) == ("Sam Lee", "Jane Doe", "AB12345", "")

    response = client.post("/entries", data=ENTRY)
    assert response.status_code == 400
    assert b"Duplicate LDAP for this employee/company." in response.data
    assert BadgeRequest.query.count() == 1

    response = client.post("/submit", data=EMPTY_ENTRY)
    assert response.status_code == 302
    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == "it@example.com"
    assert sent_emails[0]["subject"] == "Badge Request from Sam Lee"
    assert "Jane Doe" in sent_emails[0]["html"]
    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess
    assert len(app.extensions["badge_forms"]) == 0


def test_field_error_is_rendered(client):
    response = client.post("/entries", data=dict(ENTRY, ldap="AB1"))

    assert response.status_code == 400
    assert b"LDAP must be exactly 7 letters or numbers." in response.data
    assert BadgeRequest.query.count() == 0


def test_link_hides_time_clock_field(client):
    response = client.post("/entries", data=dict(ENTRY, company="Link", id_kind="Time Clock", ldap="AB12345"))

    assert response.status_code == 400
    assert b"Link LDAP must be exactly 11 alphanumeric characters." in response.data
    assert b'<div class="timeclock" hidden>' in response.data
    assert b'<select id="id_kind" name="id_kind" disabled>' in response.data


def test_submit_without_entries(client, sent_emails):
    response = client.post("/submit", data=EMPTY_ENTRY)

    assert response.status_code == 400
    assert b"No entries to submit" in response.data
    assert sent_emails == []


def test_submit_with_partial_entry(client, sent_emails):
    client.post("/entries", data=ENTRY)

    response = client.post("/submit", data=dict(EMPTY_ENTRY, employee_name="John"))

    assert response.status_code == 400
    assert sent_emails == []


def test_submit_failure_keeps_entries(app, client, monkeypatch):
    def refuse(*args, **kwargs):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(email_service, "send_email", refuse)
    client.post("/entries", data=ENTRY)

    response = client.post("/submit", data=EMPTY_ENTRY)

    assert response.status_code == 502
    assert b"Failed to send email." in response.data
    assert len(_form(app, client).store) == 1


def test_reset_clears_entries(app, client):
    client.post("/entries", data=ENTRY)

    response = client.post("/reset")

    assert response.status_code == 302
    assert len(app.extensions["badge_forms"]) == 0
    # rows already saved stay in the database
    assert BadgeRequest.query.count() == 1


def test_sessions_are_isolated(app, client):
    other = app.test_client()
    client.post("/entries", data=ENTRY)
    other.post("/entries", data=ENTRY)

    assert len(_form(app, client).store) == 1
    assert len(_form(app, other).store) == 1
    assert BadgeRequest.query.count() == 2


def test_api_send(client, sent_emails):
    response = client.post("/api/send", json={
        "requesterName": "Sam Lee",
        "company": "Other",
        "entries": [{"employeeName": "Jane Doe", "idType": "LDAP", "idValue": "AB12345", "company": "Other"}],
    })

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "id": "<sent-1@example.com>"}
    assert "AB12345" in sent_emails[0]["html"]


def test_api_send_missing_fields(client, sent_emails):
    response = client.post("/api/send", json={"requesterName": "Sam Lee", "entries": []})

    assert response.status_code == 400
    assert response.get_json() == {"ok": False, "error": "Missing required form fields."}
    assert sent_emails == []


def test_api_send_failure(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(email_service, "send_email", refuse)

    response = client.post("/api/send", json={
        "requesterName": "Sam Lee",
        "company": "Other",
        "entries": [{"employeeName": "Jane Doe", "idType": "LDAP", "idValue": "AB12345"}],
    })

    assert response.status_code == 500
    assert response.get_json()["ok"] is False


def test_api_send_test(client, sent_emails):
    response = client.post("/api/send-test")

    assert response.status_code == 200
    assert response.get_json()["ok"] is True
    assert sent_emails[0]["subject"] == "Test email - Badge Request app"


def test_api_send_test_not_configured(app, client, sent_emails):
    app.config["SMTP_HOST"] = ""

    response = client.post("/api/send-test")

    assert response.status_code == 400
    assert sent_emails == []


def test_settings_save(client):
    response = client.post("/settings/", data={
        "smtp_host": "mail.example.com",
        "smtp_port": "25",
        "smtp_user": "mailer",
        "smtp_password": "secret",
        "smtp_from_email": "badges@example.com",
        "notify_to": "coordinator@example.com",
    })

    assert response.status_code == 302
    assert Settings.get("smtp_host") == "mail.example.com"
    assert Settings.get("smtp_use_tls") == "false"
    assert Settings.get("notify_to") == "coordinator@example.com"
    assert Settings.get("smtp_password") == "secret"


def test_settings_rejects_bad_email(client):
    response = client.post("/settings/", data={"notify_to": "nope", "smtp_from_email": ""})

    assert response.status_code == 302
    assert Settings.get("notify_to") is None


def test_settings_page_renders(client):
    response = client.get("/settings/")

    assert response.status_code == 200
    assert b"smtp.example.com" in response.data


def _settings_unavailable(monkeypatch):
    def fail(cls, key):
        raise OperationalError("SELECT settings", {}, Exception("db down"))

    monkeypatch.setattr(Settings, "get_email_setting", classmethod(fail))


def test_add_time_clock_entry_in_one_post(client):
    response = client.post("/entries", data={
        "requester_name": "Sam Lee",
        "company": "Other",
        "employee_name": "Jo Park",
        "id_kind": "Time Clock",
        "ldap": "",
        "ain": "123456789",
    })

    assert response.status_code == 302
    row = BadgeRequest.query.first()
    assert (row.ldap, row.ain) == ("", "123456789")


def test_edit_redraws_identifier_fields(client):
    response = client.post("/edit", data={"company": "Other", "id_kind": "Time Clock"})

    assert response.status_code == 200
    assert b'<div class="ldap" hidden>' in response.data
    assert b'<div class="timeclock">' in response.data
    assert b"is required" not in response.data
    assert BadgeRequest.query.count() == 0

    response = client.post("/edit", data={"company": "Impact", "ain": "123456789"})

    assert b'<select id="id_kind" name="id_kind" disabled>' in response.data
    assert b'<div class="timeclock" hidden>' in response.data
    assert b'value="123456789"' not in response.data


def test_plain_visits_do_not_keep_forms(app):
    for _ in range(50):
        assert app.test_client().get("/").status_code == 200

    assert len(app.extensions["badge_forms"]) == 0


def test_form_is_kept_between_requests_until_submitted(app, client, sent_emails):
    client.post("/entries", data=ENTRY)
    client.get("/")

    assert len(app.extensions["badge_forms"]) == 1
    assert b"AB12345" in client.get("/").data


def test_submit_with_settings_unavailable(app, client, monkeypatch):
    client.post("/entries", data=ENTRY)
    _settings_unavailable(monkeypatch)

    response = client.post("/submit", data=EMPTY_ENTRY)

    assert response.status_code == 502
    assert b"Failed to send email." in response.data
    assert len(_form(app, client).store) == 1


def test_api_send_with_settings_unavailable(client, monkeypatch):
    _settings_unavailable(monkeypatch)

    response = client.post("/api/send", json={
        "requesterName": "Sam Lee",
        "company": "Other",
        "entries": [{"employeeName": "Jane Doe", "idType": "LDAP", "idValue": "AB12345"}],
    })

    assert response.status_code == 500
    assert response.get_json() == {"ok": False, "error": "Could not load email settings."}


def test_api_send_test_with_settings_unavailable(client, monkeypatch):
    _settings_unavailable(monkeypatch)

    response = client.post("/api/send-test")

    assert response.status_code == 500
    assert response.get_json()["ok"] is False
