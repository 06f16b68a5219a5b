"""Tests for the OAuth capability group."""

import asyncio
import base64
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from qontoclient.api.factories import create_client
from qontoclient.config import ClientConfiguration, OAuthAuthentication
from qontoclient.domain.entities import OAuthCredentials, OAuthScope, OAuthTokens
from qontoclient.domain.errors import ApiResponseError

CREDENTIALS = OAuthCredentials(
    client_id="my-client", client_secret="my-secret", redirect_uri="https://example.com/callback"
)

TOKEN_RESPONSE = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "expires_in": 3600,
    "id_token": "id-1",
    "token_type": "bearer",
}


@pytest.fixture
def oauth_client(server):
    """Client configured for OAuth, without tokens yet."""
    return create_client(ClientConfiguration(OAuthAuthentication()), transport=server.transport)


class TestLoginUri:
    def test_login_uri_with_all_scopes(self, oauth_client):
        uri = oauth_client.oauth.get_login_uri(CREDENTIALS, "state-123")

        parts = urlsplit(uri)
        query = parse_qs(parts.query)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://oauth.qonto.com/oauth2/auth"
        assert query["client_id"] == ["my-client"]
        assert query["redirect_uri"] == ["https://example.com/callback"]
        assert query["response_type"] == ["code"]
        assert query["scope"] == ["offline_access organization.read openid"]
        assert query["state"] == ["state-123"]

    def test_scope_separator_is_encoded(self, oauth_client):
        uri = oauth_client.oauth.get_login_uri(
            CREDENTIALS, "s", scopes=[OAuthScope.ORGANIZATION_READ, OAuthScope.OFFLINE_ACCESS]
        )

        assert "scope=organization.read%20offline_access" in uri

    def test_no_request_is_sent(self, oauth_client, server):
        oauth_client.oauth.get_login_uri(CREDENTIALS, "state-123")

        assert server.requests == []


class TestExtractCodeAndUniqueState:
    def test_extract(self, oauth_client):
        result = oauth_client.oauth.extract_code_and_unique_state_from_redirect_uri(
            "https://example.com/callback?code=the-code&state=state-123"
        )

        assert result.code == "the-code"
        assert result.unique_state == "state-123"

    @pytest.mark.parametrize(
        "redirect_uri",
        [
            "https://example.com/callback?state=state-123",
            "https://example.com/callback?code=the-code",
            "https://example.com/callback?error=access_denied&state=state-123",
            "https://example.com/callback",
            "not a uri at all",
            "http://[invalid",
            "",
        ],
    )
    def test_incomplete_or_malformed_uri_yields_none(self, oauth_client, redirect_uri):
        assert oauth_client.oauth.extract_code_and_unique_state_from_redirect_uri(redirect_uri) is None


class TestTokens:
    def test_get_tokens(self, oauth_client, server):
        server.add_json("POST", "/oauth2/token", TOKEN_RESPONSE)

        before = datetime.now(timezone.utc)
        tokens = asyncio.run(oauth_client.oauth.get_tokens(CREDENTIALS, "the-code"))

        request = server.last_request()
        assert str(request.url) == "https://oauth.qonto.com/oauth2/token"
        expected_basic = base64.b64encode(b"my-client:my-secret").decode("ascii")
        assert request.headers["Authorization"] == f"Basic {expected_basic}"
        form = parse_qs(request.content.decode("utf-8"))
        assert form == {
            "code": ["the-code"],
            "redirect_uri": ["https://example.com/callback"],
            "grant_type": ["authorization_code"],
        }
        assert tokens.access_token == "access-1"
        assert tokens.refresh_token == "refresh-1"
        assert tokens.id_token == "id-1"
        assert before + timedelta(seconds=3600) <= tokens.expires_at

    def test_refresh_tokens(self, oauth_client, server):
        server.add_json("POST", "/oauth2/token", dict(TOKEN_RESPONSE, access_token="access-2"))
        old_tokens = OAuthTokens("access-1", "refresh-1", datetime.now(timezone.utc))

        tokens = asyncio.run(oauth_client.oauth.refresh_tokens(CREDENTIALS, old_tokens))

        form = parse_qs(server.last_request().content.decode("utf-8"))
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["refresh-1"]
        assert tokens.access_token == "access-2"

    def test_invalid_code(self, oauth_client, server):
        server.add_handler(
            "POST",
            "/oauth2/token",
            lambda request: httpx.Response(400, json={"error": "invalid_grant"}),
        )

        with pytest.raises(ApiResponseError) as excinfo:
            asyncio.run(oauth_client.oauth.get_tokens(CREDENTIALS, "bad-code"))
        assert excinfo.value.status_code == 400


class TestTokenExpiry:
    def test_fresh_tokens_are_not_about_to_expire(self):
        tokens = OAuthTokens("a", "r", datetime.now(timezone.utc) + timedelta(hours=1))

        assert not tokens.are_about_to_expire

    def test_tokens_within_margin_are_about_to_expire(self):
        tokens = OAuthTokens("a", "r", datetime.now(timezone.utc) + timedelta(minutes=2))

        assert tokens.are_about_to_expire

    def test_expired_tokens_are_about_to_expire(self):
        tokens = OAuthTokens("a", "r", datetime.now(timezone.utc) - timedelta(minutes=1))

        assert tokens.are_about_to_expire
