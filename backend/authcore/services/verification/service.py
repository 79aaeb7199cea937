# authcore/services/verification/service.py
from __future__ import annotations

import logging
import re

from authcore.services._shared.base import BaseService, transient_as_failure
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.ports.challenge_store import ChallengeStore
from authcore.services._shared.ports.clock import Clock
from authcore.services._shared.ports.mailer import Mailer
from authcore.services._shared.ports.user_store import UserStore
from authcore.services.verification.dto import SendChallengeIn, VerifyChallengeIn
from authcore.services.verification.otp import OtpGenerator, OtpPolicy, format_code

log = logging.getLogger(__name__)

_CODE_RE = re.compile(r"[0-9]{6}")


class VerificationService(BaseService):
    """
    Email ownership verification through one-time codes.

    Lifecycle per user: no challenge -> pending -> verified (record deleted)
    or expired (record deleted on the next verification attempt). A wrong
    code leaves the pending challenge in place.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        challenges: ChallengeStore,
        mailer: Mailer,
        clock: Clock | None = None,
        policy: OtpPolicy | None = None,
        generator: OtpGenerator | None = None,
    ) -> None:
        """
        :param users: User store.
        :param challenges: Pending OTP challenges keyed by user id.
        :param mailer: Code delivery port.
        :param clock: Time source.
        :param policy: Expiry window and resend cooldown.
        :param generator: Code generator; built from ``clock`` and ``policy`` if omitted.
        """
        super().__init__(clock=clock)
        self.users = users
        self.challenges = challenges
        self.mailer = mailer
        self.policy = policy or OtpPolicy()
        self.generator = generator or OtpGenerator(clock=self.clock, policy=self.policy)

    @transient_as_failure
    def send_challenge(self, dto: SendChallengeIn) -> Failure | None:
        """
        Deliver a fresh code and store it as the user's pending challenge.

        The mail goes out first; the challenge is written only after delivery
        succeeded, so a failed send never leaves a code the user cannot know.
        """
        user = self.users.find_by_email(dto.email)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found")
        if user.is_verified:
            return self.fail(
                FailureKind.ALREADY_VERIFIED, "User is already verified", user_id=user.id
            )

        now = self.now_utc()
        existing = self.challenges.get(user.id)
        if existing is not None and self.policy.in_cooldown(existing.issued_at, now):
            return self.fail(
                FailureKind.THROTTLED,
                "Please wait before requesting another code",
                user_id=user.id,
            )

        issue = self.generator.generate()
        if not self.mailer.send(user, format_code(issue.code)):
            log.warning("otp.delivery_failed", extra={"user_id": user.id})
            return Failure(FailureKind.TRANSIENT, "Could not deliver the verification code")

        self.challenges.upsert(user.id, issue.code, issue.issued_at)
        log.info("otp.sent", extra={"user_id": user.id})
        return None

    @transient_as_failure
    def verify_challenge(self, dto: VerifyChallengeIn) -> Failure | None:
        """
        Check a submitted code against the user's pending challenge.

        Expiry is evaluated before the code comparison, so a stale challenge
        reports ``EXPIRED`` even when the code is wrong.
        """
        if not isinstance(dto.code, str) or not _CODE_RE.fullmatch(dto.code):
            return self.fail(FailureKind.INVALID_FORMAT, "Code must be exactly 6 digits")

        user = self.users.find_by_email(dto.email)
        if user is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found")

        challenge = self.challenges.get(user.id)
        if challenge is None:
            return self.fail(
                FailureKind.NO_CHALLENGE, "No verification code was sent", user_id=user.id
            )

        if self.policy.is_expired(challenge.issued_at, self.now_utc()):
            self.challenges.delete(user.id)
            return self.fail(
                FailureKind.EXPIRED, "Verification code has expired", user_id=user.id
            )

        if int(dto.code) != challenge.code:
            return self.fail(
                FailureKind.CODE_MISMATCH, "Verification code does not match", user_id=user.id
            )

        if self.users.update(user.id, {"is_verified": True}) is None:
            return self.fail(FailureKind.NOT_FOUND, "User not found", user_id=user.id)
        self.challenges.delete(user.id)
        log.info("otp.verified", extra={"user_id": user.id})
        return None
