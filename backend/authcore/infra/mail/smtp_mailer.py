"""SMTP delivery of verification codes."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from authcore.core.logger import redact_email
from authcore.services._shared.ports.mailer import Mailer
from authcore.services._shared.ports.user_store import UserRecord

log = logging.getLogger(__name__)

SUBJECT = "Your verification code"

_TEXT_TEMPLATE = (
    "Hello{name},\n\n"
    "Your verification code is {code}.\n"
    "It expires in {minutes} minutes. If you did not request it, ignore this email.\n"
)

_HTML_TEMPLATE = (
    "<p>Hello{name},</p>"
    "<p>Your verification code is <strong>{code}</strong>.</p>"
    "<p>It expires in {minutes} minutes. If you did not request it, ignore this email.</p>"
)


class SmtpMailer(Mailer):
    """
    Send verification codes over SMTP (STARTTLS or implicit TLS).

    Without a host or sender address nothing can be delivered. With
    ``dev_fallback`` (debug and testing apps) the code is written to the
    DEBUG log and delivery is reported as successful; otherwise the send
    fails so callers answer with a transient error.
    """

    def __init__(
        self,
        *,
        host: str | None = None,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        from_email: str | None = None,
        expiry_minutes: int = 5,
        timeout: float = 30.0,
        dev_fallback: bool = False,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.from_email = from_email or user
        self.expiry_minutes = expiry_minutes
        self.timeout = timeout
        self.dev_fallback = dev_fallback

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    def build_message(self, user: UserRecord, code: str) -> MIMEMultipart:
        name = f" {user.full_name}" if user.full_name else ""
        values = {"name": name, "code": code, "minutes": self.expiry_minutes}
        msg = MIMEMultipart("alternative")
        msg["Subject"] = SUBJECT
        msg["From"] = self.from_email or ""
        msg["To"] = user.email
        msg.attach(MIMEText(_TEXT_TEMPLATE.format(**values), "plain"))
        msg.attach(MIMEText(_HTML_TEMPLATE.format(**values), "html"))
        return msg

    def send(self, user: UserRecord, code: str) -> bool:
        if not self.is_configured:
            extra = {"user_id": user.id, "email": redact_email(user.email)}
            if not self.dev_fallback:
                log.error("mail.not_configured", extra=extra)
                return False
            log.debug("mail.dev_mode code=%s", code, extra=extra)
            return True

        msg = self.build_message(user, code)
        context = ssl.create_default_context()
        try:
            if self.use_tls:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    self._login(server)
                    server.sendmail(self.from_email, [user.email], msg.as_string())
            else:
                with smtplib.SMTP_SSL(
                    self.host, self.port, context=context, timeout=self.timeout
                ) as server:
                    self._login(server)
                    server.sendmail(self.from_email, [user.email], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            log.error(
                "mail.send_failed",
                extra={
                    "user_id": user.id,
                    "email": redact_email(user.email),
                    "failure": exc.__class__.__name__,
                },
            )
            return False

        log.info("mail.sent", extra={"user_id": user.id, "email": redact_email(user.email)})
        return True

    def _login(self, server: smtplib.SMTP) -> None:
        if self.user and self.password:
            server.login(self.user, self.password)
