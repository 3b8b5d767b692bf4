"""Identity provider factory.

Provides create_provider() to build a fresh provider per storefront session:
- FakeIdentityProvider for development and testing
- SupabaseIdentityProvider when IDENTITY_PROVIDER=supabase
"""

from identity.provider.fake_adapter import FakeIdentityProvider
from identity.provider.port import AuthEvent, AuthSession, IdentityProvider
from identity.provider.supabase_adapter import SupabaseIdentityProvider
from shared.config import Settings, load_settings


def create_provider(settings: Settings | None = None) -> IdentityProvider:
    """Return a new identity provider as selected by settings."""
    settings = settings or load_settings()

    if settings.identity_provider == "supabase":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set when IDENTITY_PROVIDER=supabase")
        return SupabaseIdentityProvider(url=settings.supabase_url, anon_key=settings.supabase_anon_key)

    if settings.identity_provider == "fake":
        return FakeIdentityProvider()

    raise ValueError(f"Unknown identity provider: {settings.identity_provider}")


__all__ = [
    "AuthEvent",
    "AuthSession",
    "FakeIdentityProvider",
    "IdentityProvider",
    "SupabaseIdentityProvider",
    "create_provider",
]
