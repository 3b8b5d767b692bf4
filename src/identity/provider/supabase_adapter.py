"""Supabase Auth identity provider.

Talks to the Supabase Auth (GoTrue) REST API over httpx:
- POST /auth/v1/signup with no credentials provisions an anonymous user
- POST /auth/v1/logout revokes the session's access token

The session itself is held in memory for the lifetime of the storefront
session, the way supabase-js holds it in the browser.
"""

import httpx
import structlog

from identity.provider.port import AuthEvent, AuthSession, IdentityProvider
from shared.errors import IdentityProvisionError

logger = structlog.get_logger(__name__)


class SupabaseIdentityProvider(IdentityProvider):
    def __init__(
        self,
        url: str,
        anon_key: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__()
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.session: AuthSession | None = None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, access_token: str | None = None) -> dict:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
        }

    async def get_session(self) -> AuthSession | None:
        return self.session

    async def sign_in_anonymously(self) -> AuthSession:
        try:
            response = await self._client.post(
                f"{self.url}/auth/v1/signup",
                json={"data": {}},
                headers=self._headers(),
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise IdentityProvisionError(f"Anonymous sign-in failed: {exc}") from exc
        except ValueError as exc:
            raise IdentityProvisionError("Anonymous sign-in returned a malformed response") from exc

        user = payload.get("user") or {}
        if not user.get("id"):
            raise IdentityProvisionError("Anonymous sign-in returned no user")

        self.session = AuthSession(
            user_id=str(user["id"]),
            access_token=payload.get("access_token"),
            is_anonymous=bool(user.get("is_anonymous", True)),
        )
        self._notify(AuthEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_out(self) -> None:
        session, self.session = self.session, None

        if session and session.access_token:
            try:
                response = await self._client.post(
                    f"{self.url}/auth/v1/logout",
                    headers=self._headers(session.access_token),
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error("Error signing out", user_id=session.user_id, error=str(exc))

        self._notify(AuthEvent.SIGNED_OUT, None)

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.debug("Supabase client closed", url=self.url)
