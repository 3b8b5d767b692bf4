"""Storefront settings loaded from the environment.

Protean infrastructure (databases, brokers, event store) is configured in
``src/ordering/domain.toml``. Everything the storefront talks to outside of
Protean (the Strapi catalogue, the identity backend) is configured here.
"""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return default


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    return value.lower() in _TRUTHY


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    strapi_api_url: str = "http://localhost:1337"
    strapi_api_token: str | None = None
    strapi_timeout_seconds: float = 10.0
    identity_provider: str = "fake"
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    reprovision_on_sign_out: bool = True
    session_idle_timeout_seconds: float = 1800.0


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    return Settings(
        strapi_api_url=(_get_env("STRAPI_API_URL", "NEXT_PUBLIC_STRAPI_API_URL") or "http://localhost:1337").rstrip("/"),
        strapi_api_token=_get_env("STRAPI_API_TOKEN", "NEXT_PUBLIC_STRAPI_API_TOKEN"),
        strapi_timeout_seconds=_get_float("STRAPI_TIMEOUT_SECONDS", 10.0),
        identity_provider=(_get_env("IDENTITY_PROVIDER", default="fake") or "fake").lower(),
        supabase_url=_get_env("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        supabase_anon_key=_get_env("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        reprovision_on_sign_out=_get_bool("STOREFRONT_REPROVISION_ON_SIGN_OUT", True),
        session_idle_timeout_seconds=_get_float("STOREFRONT_SESSION_IDLE_TIMEOUT_SECONDS", 1800.0),
    )
