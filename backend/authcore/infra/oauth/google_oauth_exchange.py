"""Google authorization-code exchange over HTTPS."""

from __future__ import annotations

import logging

import requests

from authcore.services._shared.errors import StoreUnavailableError
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.ports.oauth_exchange import OAuthExchange, OAuthTokens

log = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


class GoogleOAuthExchange(OAuthExchange):
    """
    Trade a Google authorization code for an ``(id_token, access_token)`` pair.

    Network errors raise :class:`StoreUnavailableError`; a response Google
    rejects, or one without both tokens, is ``Failure(MALFORMED)``.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_url: str = GOOGLE_TOKEN_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.timeout = timeout
        self.http = session or requests.Session()

    def exchange_code(self, code: str) -> OAuthTokens | Failure:
        try:
            resp = self.http.post(
                self.token_url,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StoreUnavailableError("google-oauth", exc.__class__.__name__) from exc

        if resp.status_code >= 500:
            raise StoreUnavailableError("google-oauth", f"HTTP {resp.status_code}")
        if not resp.ok:
            log.info("oauth.exchange_rejected", extra={"failure": str(resp.status_code)})
            return Failure(FailureKind.MALFORMED, "Authorization code was rejected")

        try:
            data = resp.json()
        except ValueError:
            return Failure(FailureKind.MALFORMED, "Unexpected token endpoint response")

        id_token = data.get("id_token")
        access_token = data.get("access_token")
        if not id_token or not access_token:
            return Failure(FailureKind.MALFORMED, "Token endpoint response is incomplete")
        return OAuthTokens(id_token=id_token, access_token=access_token)
