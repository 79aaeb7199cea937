"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class BaseSchema(Schema):
    """Base schema enabling ordered output for consistent API responses."""

    class Meta:
        ordered = True


# ----------------------------- Request bodies ------------------------------ #


class RegisterSchema(BaseSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    full_name = fields.String(load_default=None, validate=validate.Length(max=100))


class LoginSchema(BaseSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(BaseSchema):
    """Optional body for refresh; the ``refreshToken`` cookie takes precedence."""

    refresh_token = fields.String(load_default=None)


class PasswordChangeSchema(BaseSchema):
    """Input payload for changing the password of the authenticated user."""

    old_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class OtpSendSchema(BaseSchema):
    """Request a verification code for an account."""

    email = fields.Email(required=True, validate=validate.Length(max=254))


class OtpVerifySchema(BaseSchema):
    """Submit a verification code; its six-digit format is checked by the service."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    code = fields.String(required=True)


class OAuthCallbackQuerySchema(BaseSchema):
    """Query string of the OAuth redirect."""

    code = fields.String(required=True, validate=validate.Length(min=1))
    state = fields.String(load_default=None)


# ------------------------------- Responses --------------------------------- #


class TokenPairSchema(BaseSchema):
    """Response payload containing an access/refresh pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    access_expires_at = fields.DateTime(required=True)
    refresh_expires_at = fields.DateTime(required=True)
    token_type = fields.Constant("bearer")


class UserSchema(BaseSchema):
    """Public representation of a user."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(allow_none=True)
    is_verified = fields.Boolean(required=True)
