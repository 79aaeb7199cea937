"""Composition root: build the credential services once per application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask import Flask, current_app

from authcore.core.extensions import get_redis
from authcore.infra.mail.smtp_mailer import SmtpMailer
from authcore.infra.oauth.google_oauth_exchange import GoogleOAuthExchange
from authcore.infra.redis.redis_challenge_store import RedisChallengeStore
from authcore.infra.sqlalchemy.challenge_store import SqlChallengeStore
from authcore.infra.sqlalchemy.user_store import SqlUserStore
from authcore.services._shared.ports import (
    ChallengeStore,
    Clock,
    Mailer,
    OAuthExchange,
    SystemClock,
    UserStore,
)
from authcore.services.oauth.service import OAuthService
from authcore.services.registration.service import RegistrationService
from authcore.services.sessions.service import SessionService
from authcore.services.tokens.codec import TokenCodec
from authcore.services.tokens.dto import TokenCodecConfig
from authcore.services.verification.otp import OtpPolicy
from authcore.services.verification.service import VerificationService

EXTENSION_KEY = "credential_services"


@dataclass(slots=True)
class CredentialServices:
    """Services shared by every request of one application."""

    clock: Clock
    codec: TokenCodec
    sessions: SessionService
    verification: VerificationService
    registration: RegistrationService
    oauth: OAuthService


def _challenge_store(app: Flask) -> ChallengeStore:
    backend = app.config.get("CHALLENGE_BACKEND", "sql")
    if backend == "redis":
        return RedisChallengeStore(r=get_redis(app))
    if backend != "sql":
        raise RuntimeError(f"Unknown CHALLENGE_BACKEND {backend!r}; expected 'sql' or 'redis'.")
    return SqlChallengeStore()


def build_services(
    app: Flask,
    *,
    clock: Clock | None = None,
    users: UserStore | None = None,
    challenges: ChallengeStore | None = None,
    mailer: Mailer | None = None,
    oauth_exchange: OAuthExchange | None = None,
) -> CredentialServices:
    """
    Assemble the services from ``app.config``.

    Keyword arguments replace the default adapters (tests pass in-memory
    doubles or a frozen clock here).
    """
    cfg = app.config
    clock = clock or SystemClock()
    policy = OtpPolicy(
        expiry=timedelta(seconds=int(cfg["OTP_EXPIRY_SECONDS"])),
        cooldown=timedelta(seconds=int(cfg["OTP_RESEND_COOLDOWN_SECONDS"])),
    )
    codec = TokenCodec(
        config=TokenCodecConfig(
            access_secret=cfg["ACCESS_TOKEN_SECRET"],
            refresh_secret=cfg["REFRESH_TOKEN_SECRET"],
            access_ttl=timedelta(seconds=int(cfg["ACCESS_TOKEN_TTL_SECONDS"])),
            refresh_ttl=timedelta(seconds=int(cfg["REFRESH_TOKEN_TTL_SECONDS"])),
        ),
        clock=clock,
    )
    users = users or SqlUserStore()
    challenges = challenges or _challenge_store(app)
    mailer = mailer or SmtpMailer(
        host=cfg.get("SMTP_HOST"),
        port=int(cfg.get("SMTP_PORT", 587)),
        user=cfg.get("SMTP_USER"),
        password=cfg.get("SMTP_PASSWORD"),
        use_tls=bool(cfg.get("SMTP_USE_TLS", True)),
        from_email=cfg.get("MAIL_FROM"),
        expiry_minutes=max(1, int(policy.expiry.total_seconds()) // 60),
        dev_fallback=app.debug or app.testing,
    )
    oauth_exchange = oauth_exchange or GoogleOAuthExchange(
        client_id=cfg.get("GOOGLE_CLIENT_ID", ""),
        client_secret=cfg.get("GOOGLE_CLIENT_SECRET", ""),
        redirect_uri=cfg.get("GOOGLE_REDIRECT_URI", ""),
    )

    return CredentialServices(
        clock=clock,
        codec=codec,
        sessions=SessionService(users=users, codec=codec, clock=clock),
        verification=VerificationService(
            users=users, challenges=challenges, mailer=mailer, clock=clock, policy=policy
        ),
        registration=RegistrationService(users=users, clock=clock),
        oauth=OAuthService(exchange=oauth_exchange),
    )


def init_app(app: Flask, **overrides: Any) -> CredentialServices:
    """Build the services and attach them to ``app.extensions``."""
    services = build_services(app, **overrides)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> CredentialServices:
    """Return the services of the current application."""
    services = current_app.extensions.get(EXTENSION_KEY)
    if services is None:
        raise RuntimeError("Credential services are not initialized; call wiring.init_app().")
    return cast(CredentialServices, services)
