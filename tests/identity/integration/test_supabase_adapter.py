"""Tests for the Supabase identity adapter against a mocked Auth API."""

import json

import httpx
import pytest
from identity.provider import AuthEvent, FakeIdentityProvider, SupabaseIdentityProvider, create_provider
from shared.config import Settings
from shared.errors import IdentityProvisionError

SUPABASE_URL = "https://project.supabase.co"
ANON_KEY = "anon-key-123"


def _provider(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseIdentityProvider(url=SUPABASE_URL + "/", anon_key=ANON_KEY, client=client)


def _signup_ok(request):
    return httpx.Response(
        200,
        json={
            "access_token": "jwt-abc",
            "user": {"id": "8b0c6a0e-user", "is_anonymous": True},
        },
    )


class TestAnonymousSignIn:
    @pytest.mark.asyncio
    async def test_posts_to_signup_with_api_key(self):
        requests = []

        def handler(request):
            requests.append(request)
            return _signup_ok(request)

        provider = _provider(handler)
        await provider.sign_in_anonymously()

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{SUPABASE_URL}/auth/v1/signup"
        assert request.headers["apikey"] == ANON_KEY
        assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"
        assert json.loads(request.content) == {"data": {}}

    @pytest.mark.asyncio
    async def test_returns_and_holds_session(self):
        provider = _provider(_signup_ok)

        session = await provider.sign_in_anonymously()

        assert session.user_id == "8b0c6a0e-user"
        assert session.access_token == "jwt-abc"
        assert session.is_anonymous is True
        assert await provider.get_session() == session

    @pytest.mark.asyncio
    async def test_notifies_listeners(self):
        provider = _provider(_signup_ok)
        received = []
        provider.subscribe(lambda event, session: received.append(event))

        await provider.sign_in_anonymously()

        assert received == [AuthEvent.SIGNED_IN]

    @pytest.mark.asyncio
    async def test_error_status_raises_provision_error(self):
        provider = _provider(lambda request: httpx.Response(422, json={"msg": "Anonymous sign-ins are disabled"}))

        with pytest.raises(IdentityProvisionError):
            await provider.sign_in_anonymously()
        assert await provider.get_session() is None

    @pytest.mark.asyncio
    async def test_transport_error_raises_provision_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = _provider(handler)

        with pytest.raises(IdentityProvisionError):
            await provider.sign_in_anonymously()

    @pytest.mark.asyncio
    async def test_malformed_body_raises_provision_error(self):
        provider = _provider(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(IdentityProvisionError):
            await provider.sign_in_anonymously()

    @pytest.mark.asyncio
    async def test_missing_user_raises_provision_error(self):
        provider = _provider(lambda request: httpx.Response(200, json={"access_token": "jwt-abc"}))

        with pytest.raises(IdentityProvisionError):
            await provider.sign_in_anonymously()


class TestSignOut:
    @pytest.mark.asyncio
    async def test_revokes_token_and_clears_session(self):
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.path == "/auth/v1/signup":
                return _signup_ok(request)
            return httpx.Response(204)

        provider = _provider(handler)
        await provider.sign_in_anonymously()
        await provider.sign_out()

        logout = requests[-1]
        assert logout.url.path == "/auth/v1/logout"
        assert logout.headers["Authorization"] == "Bearer jwt-abc"
        assert await provider.get_session() is None

    @pytest.mark.asyncio
    async def test_failed_revocation_still_signs_out_locally(self):
        def handler(request):
            if request.url.path == "/auth/v1/signup":
                return _signup_ok(request)
            return httpx.Response(500)

        provider = _provider(handler)
        received = []
        provider.subscribe(lambda event, session: received.append(event))

        await provider.sign_in_anonymously()
        await provider.sign_out()

        assert await provider.get_session() is None
        assert received == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]

    @pytest.mark.asyncio
    async def test_without_session_makes_no_request(self):
        requests = []
        provider = _provider(lambda request: requests.append(request) or httpx.Response(204))

        await provider.sign_out()

        assert requests == []


class TestCreateProvider:
    def test_fake_by_default(self):
        assert isinstance(create_provider(Settings()), FakeIdentityProvider)

    def test_supabase(self):
        settings = Settings(identity_provider="supabase", supabase_url=SUPABASE_URL, supabase_anon_key=ANON_KEY)
        provider = create_provider(settings)
        assert isinstance(provider, SupabaseIdentityProvider)
        assert provider.url == SUPABASE_URL

    def test_supabase_requires_configuration(self):
        with pytest.raises(ValueError):
            create_provider(Settings(identity_provider="supabase"))

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown identity provider"):
            create_provider(Settings(identity_provider="ldap"))

    def test_each_call_returns_a_new_provider(self):
        assert create_provider(Settings()) is not create_provider(Settings())
