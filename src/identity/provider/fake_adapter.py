"""Configurable in-memory identity provider for development and testing.

Simulates an auth backend without any external calls. It can be told to refuse
anonymous sign-ins, and it records every call so tests can assert on how often
provisioning was requested.
"""

from uuid import uuid4

from identity.provider.port import AuthEvent, AuthSession, IdentityProvider
from shared.errors import IdentityProvisionError


class FakeIdentityProvider(IdentityProvider):
    """Configurable fake identity provider."""

    def __init__(self, session: AuthSession | None = None) -> None:
        super().__init__()
        self.session = session
        self.should_succeed: bool = True
        self.failure_reason: str = "Anonymous sign-ins are disabled"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Anonymous sign-ins are disabled") -> None:
        """Configure provisioning behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def calls_to(self, method: str) -> int:
        return sum(1 for call in self.calls if call["method"] == method)

    async def get_session(self) -> AuthSession | None:
        self.calls.append({"method": "get_session"})
        return self.session

    async def sign_in_anonymously(self) -> AuthSession:
        self.calls.append({"method": "sign_in_anonymously"})

        if not self.should_succeed:
            raise IdentityProvisionError(self.failure_reason)

        self.session = AuthSession(
            user_id=f"anon-{uuid4().hex[:12]}",
            access_token=f"fake_token_{uuid4().hex[:12]}",
            is_anonymous=True,
        )
        self._notify(AuthEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_in(self, user_id: str) -> AuthSession:
        """Simulate a regular login for an existing account."""
        self.calls.append({"method": "sign_in", "user_id": user_id})
        self.session = AuthSession(user_id=user_id, access_token=f"fake_token_{uuid4().hex[:12]}")
        self._notify(AuthEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_out(self) -> None:
        self.calls.append({"method": "sign_out"})
        self.session = None
        self._notify(AuthEvent.SIGNED_OUT, None)
