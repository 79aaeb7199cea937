# authcore/services/oauth/service.py
from __future__ import annotations

import logging

from authcore.services._shared.base import BaseService, transient_as_failure
from authcore.services._shared.failures import Failure, FailureKind
from authcore.services._shared.ports.oauth_exchange import OAuthExchange, OAuthTokens

log = logging.getLogger(__name__)


class OAuthService(BaseService):
    """
    Receive the result of a third-party sign-in.

    Only the code exchange happens here. The provider tokens are handed back
    to the caller; no local account is created or linked and no session pair
    is issued.
    """

    def __init__(self, *, exchange: OAuthExchange) -> None:
        super().__init__()
        self.exchange = exchange

    @transient_as_failure
    def acknowledge(self, code: str | None) -> OAuthTokens | Failure:
        if not code:
            return self.fail(FailureKind.MALFORMED, "Authorization code is missing")
        result = self.exchange.exchange_code(code)
        if isinstance(result, Failure):
            log.info("oauth.exchange_failed", extra={"failure": result.kind.value})
        else:
            log.info("oauth.exchange_ok")
        return result
