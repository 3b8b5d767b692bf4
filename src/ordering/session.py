"""Storefront sessions: one visitor's cart, identity, flow and history.

A session is the server-side stand-in for one browser tab of the storefront.
It wires together the collaborators the visitor interacts with:

- IdentityContext: resolves (or provisions) who the visitor is
- CartStore: the visitor's cart, never persisted
- CheckoutFlow: which modal is showing, and order submission
- OrderHistoryReader: the visitor's past orders

Sessions live in memory in a SessionRegistry. Ending a session drops its cart
and closes its identity provider. A session left idle for longer than the
configured timeout is treated as ended.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from protean.exceptions import ObjectNotFoundError

from identity.context import IdentityContext
from identity.provider import IdentityProvider, create_provider
from ordering.cart.store import CartStore
from ordering.checkout.flow import CheckoutFlow
from ordering.checkout.submission import OrderSubmissionService
from ordering.history.reader import HistoryView, OrderHistoryReader
from shared.config import Settings, load_settings

logger = structlog.get_logger(__name__)


class StorefrontSession:
    def __init__(
        self,
        session_id: str,
        identity: IdentityContext,
        cart: CartStore,
        flow: CheckoutFlow,
        history: OrderHistoryReader,
    ) -> None:
        self.session_id = session_id
        self.identity = identity
        self.cart = cart
        self.flow = flow
        self.history = history

    @classmethod
    def build(cls, session_id: str, provider: IdentityProvider, reprovision_on_sign_out: bool = True):
        identity = IdentityContext(provider, reprovision_on_sign_out=reprovision_on_sign_out)
        cart = CartStore()
        flow = CheckoutFlow(cart, OrderSubmissionService(cart), identity)
        return cls(
            session_id=session_id,
            identity=identity,
            cart=cart,
            flow=flow,
            history=OrderHistoryReader(),
        )

    @property
    def user_id(self) -> str | None:
        return self.identity.user_id

    async def start(self) -> None:
        await self.identity.activate()

    async def open_history(self) -> HistoryView:
        """Show the history modal and load the visitor's orders."""
        self.flow.open_history()
        return await self.history.open(self.identity.user_id)

    def close_history(self) -> None:
        self.flow.close_history()
        self.history.close()

    async def sign_out(self) -> str | None:
        return await self.identity.sign_out()

    async def end(self) -> None:
        """Stop listening for auth changes and release the identity provider."""
        self.history.close()
        self.identity.deactivate()
        await self.identity.provider.aclose()


class SessionRegistry:
    """In-memory lookup of live storefront sessions by id.

    Every successful `get` marks the session as seen. Sessions unseen for
    longer than `settings.session_idle_timeout_seconds` are no longer returned,
    and are ended the next time a session is created.
    """

    def __init__(
        self,
        provider_factory: Callable[[Settings], IdentityProvider] = create_provider,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider_factory = provider_factory
        self.settings = settings or load_settings()
        self._clock = clock
        self._sessions: dict[str, StorefrontSession] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_idle(self, session_id: str, now: float) -> bool:
        return now - self._last_seen[session_id] > self.settings.session_idle_timeout_seconds

    def _discard(self, session_id: str) -> StorefrontSession:
        del self._last_seen[session_id]
        return self._sessions.pop(session_id)

    async def create(self) -> StorefrontSession:
        await self.expire_idle()

        session = StorefrontSession.build(
            session_id=str(uuid.uuid4()),
            provider=self.provider_factory(self.settings),
            reprovision_on_sign_out=self.settings.reprovision_on_sign_out,
        )
        self._sessions[session.session_id] = session
        self._last_seen[session.session_id] = self._clock()
        await session.start()

        logger.info("Storefront session started", session_id=session.session_id, user_id=session.user_id)
        return session

    def get(self, session_id: str) -> StorefrontSession:
        now = self._clock()
        if session_id not in self._sessions or self._is_idle(session_id, now):
            raise ObjectNotFoundError(f"Session with id {session_id} does not exist")

        self._last_seen[session_id] = now
        return self._sessions[session_id]

    async def end(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise ObjectNotFoundError(f"Session with id {session_id} does not exist")

        await self._discard(session_id).end()
        logger.info("Storefront session ended", session_id=session_id)

    async def expire_idle(self) -> list[str]:
        """End every idle session. Returns the ids that were ended."""
        now = self._clock()
        expired = [session_id for session_id in self._sessions if self._is_idle(session_id, now)]

        for session_id in expired:
            await self._discard(session_id).end()

        if expired:
            logger.info("Idle storefront sessions expired", count=len(expired))
        return expired

    async def clear(self) -> None:
        for session_id in list(self._sessions):
            await self._discard(session_id).end()
