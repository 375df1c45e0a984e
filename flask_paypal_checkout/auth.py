"""OAuth client-credentials exchange against the PayPal token endpoint."""

from __future__ import annotations

import httpx

from flask_paypal_checkout.errors import CredentialsMissing, UpstreamAuthError
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import AccessToken

SANDBOX_API_BASE = "https://api-m.sandbox.paypal.com"


class AccessTokenProvider:
    """Fetch a fresh bearer token for every call.

    Args:
        client_id: REST app client id.
        client_secret: REST app secret.
        api_base: PayPal API root (sandbox by default).
        http: Optional :class:`httpx.Client`; one is created when omitted.
        timeout: Request timeout in seconds for the default client.
        logger: Optional structlog logger.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        *,
        api_base: str = SANDBOX_API_BASE,
        http: httpx.Client | None = None,
        timeout: float = 30.0,
        logger=None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_base = api_base.rstrip("/")
        self._http = http if http is not None else httpx.Client(timeout=timeout)
        self._log = get_logger("token_provider", logger)

    def get_access_token(self) -> AccessToken:
        """Exchange the client credentials for an :class:`AccessToken`.

        Raises:
            CredentialsMissing: client id or secret is empty.
            UpstreamAuthError: the token endpoint failed or was unreachable.
        """
        if not self.client_id or not self.client_secret:
            raise CredentialsMissing(
                "PayPal CLIENT_ID and CLIENT_SECRET must be set in environment variables"
            )

        try:
            response = self._http.post(
                f"{self.api_base}/v1/oauth2/token",
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self.client_secret),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            self._log.error("token_request_failed", error=str(exc))
            raise UpstreamAuthError(f"Token request failed: {exc}") from exc

        if response.status_code != 200:
            self._log.error("token_rejected", status=response.status_code)
            raise UpstreamAuthError(
                f"Token endpoint returned {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
            value = data["access_token"]
        except (ValueError, KeyError) as exc:
            raise UpstreamAuthError("Token response has no access_token") from exc

        return AccessToken(
            value=value,
            token_type=data.get("token_type", "Bearer"),
            expires_in=data.get("expires_in"),
        )
