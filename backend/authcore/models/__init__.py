from authcore.models.otp_challenge import OtpChallenge
from authcore.models.user import User

__all__ = [
    "OtpChallenge",
    "User",
]
