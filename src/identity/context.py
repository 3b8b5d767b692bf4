"""Identity context: the current visitor's user id for one storefront session.

On activation the context listens to its provider's auth-state changes and
makes sure the visitor has an identity: an existing session is adopted as is,
otherwise an anonymous identity is provisioned. Concurrent requests for
provisioning share a single in-flight sign-in.

Sign-out leaves the cart alone. Whether a new anonymous identity is issued
right after sign-out is controlled by `reprovision_on_sign_out`; without it the
visitor has no identity until the next activation, and any order submitted in
the meantime is refused.
"""

import asyncio

import structlog

from identity.provider.port import AuthEvent, AuthSession, IdentityProvider
from shared.errors import IdentityProvisionError

logger = structlog.get_logger(__name__)


class IdentityContext:
    def __init__(self, provider: IdentityProvider, reprovision_on_sign_out: bool = True) -> None:
        self.provider = provider
        self.reprovision_on_sign_out = reprovision_on_sign_out
        self.user_id: str | None = None
        self._unsubscribe = None
        self._provisioning: asyncio.Future | None = None

    @property
    def is_active(self) -> bool:
        return self._unsubscribe is not None

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    async def activate(self) -> str | None:
        """Start listening for auth changes and resolve an identity."""
        if self._unsubscribe is None:
            self._unsubscribe = self.provider.subscribe(self._on_auth_state_change)

        session = await self.provider.get_session()
        if session:
            self._adopt(session)
        else:
            await self._provision()
        return self.user_id

    def deactivate(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def sign_out(self) -> str | None:
        """Sign out through the provider. Returns the identity in effect afterwards."""
        previous = self.user_id
        await self.provider.sign_out()
        self.user_id = None
        logger.info("Signed out", previous_user_id=previous)

        if self.reprovision_on_sign_out:
            await self._provision()
        return self.user_id

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _adopt(self, session: AuthSession) -> None:
        if session.user_id != self.user_id:
            logger.info("Identity resolved", user_id=session.user_id, is_anonymous=session.is_anonymous)
        self.user_id = session.user_id

    def _on_auth_state_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        if session:
            self._adopt(session)
        else:
            self.user_id = None

    async def _provision(self) -> None:
        if self._provisioning is None:
            self._provisioning = asyncio.ensure_future(self._sign_in_anonymously())
        try:
            await self._provisioning
        finally:
            self._provisioning = None

    async def _sign_in_anonymously(self) -> None:
        try:
            session = await self.provider.sign_in_anonymously()
        except IdentityProvisionError as exc:
            logger.error("Error signing in anonymously", error=str(exc))
            return
        self._adopt(session)
