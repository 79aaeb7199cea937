# tests/unit/infra/test_smtp_mailer.py
from __future__ import annotations

import logging
import smtplib

import pytest

from authcore.infra.mail import smtp_mailer
from authcore.infra.mail.smtp_mailer import SmtpMailer
from authcore.services._shared.ports import UserRecord

USER = UserRecord(id=1, email="ada@example.com", password_hash="h", full_name="Ada")


class FakeSMTP:
    """Minimal stand-in recording what an SMTP session was asked to do."""

    instances: list[FakeSMTP] = []
    fail_with: Exception | None = None

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port
        self.calls: list[tuple] = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        self.calls.append(("starttls",))

    def login(self, user, password):
        self.calls.append(("login", user))

    def sendmail(self, sender, recipients, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.calls.append(("sendmail", sender, tuple(recipients), message))


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtp_mailer.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(smtp_mailer.smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP


def _mailer(**kwargs) -> SmtpMailer:
    defaults = dict(host="smtp.example.com", user="bot", password="pw", from_email="no-reply@example.com")
    defaults.update(kwargs)
    return SmtpMailer(**defaults)


def test_send_uses_starttls_and_includes_code(fake_smtp):
    assert _mailer().send(USER, "004211") is True

    conn = fake_smtp.instances[0]
    assert conn.calls[0] == ("starttls",)
    assert conn.calls[1] == ("login", "bot")
    _, sender, recipients, message = conn.calls[2]
    assert sender == "no-reply@example.com"
    assert recipients == ("ada@example.com",)
    assert "004211" in message


def test_implicit_tls_skips_starttls(fake_smtp):
    assert _mailer(use_tls=False, port=465).send(USER, "123456") is True

    assert ("starttls",) not in fake_smtp.instances[0].calls


def test_delivery_error_reports_false(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({"ada@example.com": (550, b"no")})

    assert _mailer().send(USER, "123456") is False


def test_unconfigured_mailer_fails_and_never_logs_code(fake_smtp, caplog):
    caplog.set_level(logging.DEBUG, logger=smtp_mailer.__name__)

    assert SmtpMailer().send(USER, "654321") is False
    assert SmtpMailer(host="smtp.example.com").send(USER, "654321") is False

    assert fake_smtp.instances == []
    assert "654321" not in caplog.text
    assert [r.getMessage() for r in caplog.records if r.name == smtp_mailer.__name__] == ["mail.not_configured"] * 2


def test_dev_fallback_logs_code_at_debug_only(fake_smtp, caplog):
    caplog.set_level(logging.DEBUG, logger=smtp_mailer.__name__)

    assert SmtpMailer(dev_fallback=True).send(USER, "654321") is True

    assert fake_smtp.instances == []
    (record,) = [r for r in caplog.records if "654321" in r.getMessage()]
    assert record.levelno == logging.DEBUG


def test_message_mentions_expiry_window():
    msg = _mailer(expiry_minutes=7).build_message(USER, "000001")

    assert msg["To"] == "ada@example.com"
    assert "7 minutes" in msg.as_string()
