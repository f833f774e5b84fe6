"""
Integration tests for the NhostClient facade against fake Nhost services.
"""

import json

import httpx
import pytest

from nhost_client import InMemoryAuthStore, NhostClient, ServiceUrls, Subdomain

AUTH = "myapp.auth.eu-west-1.nhost.run"
STORAGE = "myapp.storage.eu-west-1.nhost.run"
FUNCTIONS = "myapp.functions.eu-west-1.nhost.run"


class FakeNhost:
    """Routes requests by host like the hosted platform."""

    def __init__(self):
        self.requests = []
        self.refreshes = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host, path = request.url.host, request.url.path

        if host == AUTH and path == "/v1/signin/email-password":
            return httpx.Response(200, json={"session": self._session("access-1", "refresh-1")})
        if host == AUTH and path == "/v1/token":
            self.refreshes += 1
            return httpx.Response(200, json=self._session(f"access-{self.refreshes + 1}", "refresh-2"))
        if host == STORAGE and path == "/v1/files":
            return httpx.Response(201, json={"id": "file-1", "name": "hello.txt"})
        if host == FUNCTIONS and path == "/v1/hello":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404)

    @staticmethod
    def _session(access_token, refresh_token):
        return {
            "accessToken": access_token,
            "accessTokenExpiresIn": 900,
            "refreshToken": refresh_token,
            "user": {"id": "user-123"},
        }


@pytest.fixture
def fake_nhost():
    return FakeNhost()


@pytest.fixture
def http_client(fake_nhost):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_nhost))


class TestClientFlow:
    """End-to-end flows through the facade."""

    @pytest.mark.asyncio
    async def test_sign_in_then_use_other_services(self, fake_nhost, http_client):
        """Test services use the token obtained by sign-in."""
        nhost = NhostClient(subdomain=Subdomain("myapp", "eu-west-1"), http_client_override=http_client)

        await nhost.auth.sign_in_email_password("test@example.com", "password123")
        await nhost.storage.upload_bytes("hello.txt", b"hello", "text/plain")
        await nhost.functions.call_function("/hello", {"name": "world"})

        storage_request, functions_request = fake_nhost.requests[1], fake_nhost.requests[2]
        assert storage_request.headers["Authorization"] == "Bearer access-1"
        assert functions_request.headers["Authorization"] == "Bearer access-1"

        await nhost.close()
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_refresh_is_visible_to_other_services(self, fake_nhost, http_client):
        """Test a refreshed token reaches functions calls."""
        nhost = NhostClient(subdomain=Subdomain("myapp", "eu-west-1"), http_client_override=http_client)

        await nhost.auth.sign_in_email_password("test@example.com", "password123")
        await nhost.auth.refresh_session()
        await nhost.functions.call_function("/hello")

        assert fake_nhost.requests[-1].headers["Authorization"] == "Bearer access-2"

        await nhost.close()
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_session_resumes_in_new_client(self, fake_nhost, http_client):
        """Test a new client resumes a persisted session."""
        store = InMemoryAuthStore()

        first = NhostClient(subdomain=Subdomain("myapp", "eu-west-1"), auth_store=store, http_client_override=http_client)
        await first.auth.sign_in_email_password("test@example.com", "password123")
        await first.close()

        second = NhostClient(subdomain=Subdomain("myapp", "eu-west-1"), auth_store=store, http_client_override=http_client)
        session = await second.auth.restore_session()

        assert session is not None
        assert json.loads(fake_nhost.requests[-1].content) == {"refreshToken": "refresh-1"}
        assert second.storage.session.access_token == session.access_token

        await second.close()
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_self_hosted_urls(self):
        """Test requests go to explicit self-hosted URLs."""
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={"ok": True})

        urls = ServiceUrls(
            auth_url="http://localhost:4000/v1/auth",
            storage_url="http://localhost:4000/v1/storage",
            functions_url="http://localhost:4000/v1/functions",
            graphql_url="http://localhost:4000/v1/graphql",
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            async with NhostClient(service_urls=urls, http_client_override=http_client) as nhost:
                await nhost.functions.call_function("/hello")
                assert nhost.graphql_endpoint_url == "http://localhost:4000/v1/graphql"

        assert seen == ["http://localhost:4000/v1/functions/hello"]
