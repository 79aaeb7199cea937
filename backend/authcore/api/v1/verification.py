"""Email verification (OTP) endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from authcore.api.deps import json_response, timing
from authcore.api.failures import raise_for_failure
from authcore.schemas import OtpSendSchema, OtpVerifySchema
from authcore.services.verification.dto import SendChallengeIn, VerifyChallengeIn
from authcore.wiring import get_services

bp = Blueprint("verification", __name__)

send_schema = OtpSendSchema()
verify_schema = OtpVerifySchema()


@bp.post("/send")
@timing
def send_code():
    """Email a fresh six-digit code (at most one per cooldown window)."""

    data = send_schema.load(request.get_json(silent=True) or {})
    raise_for_failure(get_services().verification.send_challenge(SendChallengeIn(**data)))
    return json_response({"data": {"sent": True}})


@bp.post("/verify")
@timing
def verify_code():
    """Check a code and mark the account as verified."""

    data = verify_schema.load(request.get_json(silent=True) or {})
    raise_for_failure(get_services().verification.verify_challenge(VerifyChallengeIn(**data)))
    return json_response({"data": {"verified": True}})
