"""Factory Boy definition for :class:`authcore.models.otp_challenge.OtpChallenge`."""

from __future__ import annotations

from datetime import UTC, datetime

import factory

from authcore.models.otp_challenge import OtpChallenge
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class OtpChallengeFactory(BaseFactory):
    class Meta:
        model = OtpChallenge

    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    code = factory.Faker("pyint", min_value=0, max_value=999_999)
    issued_at = factory.LazyFunction(lambda: datetime(2024, 1, 1, tzinfo=UTC))
