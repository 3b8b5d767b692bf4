"""Identity provider port (abstract interface).

Defines the auth-session contract the storefront relies on: push
notifications of session changes, pulling the current session, anonymous
provisioning and sign-out. Adapters exist for an in-memory fake and for
Supabase Auth.

One provider instance backs one storefront session, the way one browser holds
one auth client.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


class AuthEvent(Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthSession:
    """An authenticated or anonymously provisioned session."""

    user_id: str
    access_token: str | None = None
    is_anonymous: bool = False


AuthListener = Callable[[AuthEvent, AuthSession | None], None]


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    def __init__(self) -> None:
        self._listeners: list[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Receive every auth-state change. Returns a callable that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify(self, event: AuthEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception as exc:
                logger.error("Auth listener failed", auth_event=event.value, error=str(exc))

    @abstractmethod
    async def get_session(self) -> AuthSession | None:
        """Return the current session, if any."""
        ...

    @abstractmethod
    async def sign_in_anonymously(self) -> AuthSession:
        """Provision a new anonymous identity. Raises IdentityProvisionError on failure."""
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session."""
        ...

    async def aclose(self) -> None:
        """Release connections held by the provider. Nothing to release by default."""
