"""Tests for the two-step token exchange."""
import pytest

from sugarsync.core.api import AccessToken, AsyncAuthService, Credentials, RefreshToken
from sugarsync.core.api.auth import ACCESS_TOKEN_ERROR, REFRESH_TOKEN_ERROR, XML_CONTENT_TYPE
from sugarsync.core.exceptions import SugarSyncAuthError
from sugarsync.core.xml_query import text_values


@pytest.fixture
def credentials():
    return Credentials(
        username='me@example.com',
        password='hunter2',
        application='/sc/app/42',
        access_key='KEY-ID',
        private_key='PRIVATE-KEY',
    )


@pytest.fixture
def auth(transport):
    return AsyncAuthService(transport)


class TestRefreshToken:
    """Test suite for get_refresh_token."""

    @pytest.mark.asyncio
    async def test_success(self, auth, transport, credentials, urls):
        """Test the refresh token is the Location header."""
        transport.add('POST', urls.app_authorization, 201, headers={'Location': urls.refresh_token})

        token = await auth.get_refresh_token(credentials)

        assert token == RefreshToken(urls.refresh_token)
        call = transport.calls[0]
        assert call.url == urls.app_authorization
        assert call.content_type == XML_CONTENT_TYPE
        assert call.token is None

    @pytest.mark.asyncio
    async def test_request_body(self, auth, transport, credentials, urls):
        """Test the appAuthorization document carries all five values."""
        transport.add('POST', urls.app_authorization, 201, headers={'Location': urls.refresh_token})

        await auth.get_refresh_token(credentials)

        body = transport.calls[0].body
        assert text_values(body, '/appAuthorization/username') == ['me@example.com']
        assert text_values(body, '/appAuthorization/password') == ['hunter2']
        assert text_values(body, '/appAuthorization/application') == ['/sc/app/42']
        assert text_values(body, '/appAuthorization/accessKeyId') == ['KEY-ID']
        assert text_values(body, '/appAuthorization/privateAccessKey') == ['PRIVATE-KEY']

    @pytest.mark.asyncio
    async def test_failure_carries_response(self, auth, transport, credentials, urls):
        """Test a 401 raises with the full server response."""
        transport.add('POST', urls.app_authorization, 401, b'<error>bad creds</error>')

        with pytest.raises(SugarSyncAuthError) as exc_info:
            await auth.get_refresh_token(credentials)

        error = exc_info.value
        assert error.message == REFRESH_TOKEN_ERROR
        assert error.status_code == 401
        assert error.result.body == b'<error>bad creds</error>'

    @pytest.mark.asyncio
    async def test_missing_location(self, auth, transport, credentials, urls):
        """Test a 2xx without Location is an authentication error."""
        transport.add('POST', urls.app_authorization, 201)

        with pytest.raises(SugarSyncAuthError, match="refresh token"):
            await auth.get_refresh_token(credentials)


class TestAccessToken:
    """Test suite for get_access_token."""

    @pytest.mark.asyncio
    async def test_success(self, auth, transport, credentials, urls):
        transport.add('POST', urls.authorization, 201, headers={'Location': urls.access_token})

        token = await auth.get_access_token(credentials, RefreshToken(urls.refresh_token))

        assert token == AccessToken(urls.access_token)
        body = transport.calls[0].body
        assert text_values(body, '/tokenAuthRequest/accessKeyId') == ['KEY-ID']
        assert text_values(body, '/tokenAuthRequest/privateAccessKey') == ['PRIVATE-KEY']
        assert text_values(body, '/tokenAuthRequest/refreshToken') == [urls.refresh_token]

    @pytest.mark.asyncio
    async def test_failure(self, auth, transport, credentials, urls):
        transport.add('POST', urls.authorization, 403, b'<error>expired</error>')

        with pytest.raises(SugarSyncAuthError) as exc_info:
            await auth.get_access_token(credentials, RefreshToken(urls.refresh_token))

        assert exc_info.value.message == ACCESS_TOKEN_ERROR
        assert exc_info.value.status_code == 403


class TestAuthenticate:
    """Test suite for authenticate."""

    @pytest.mark.asyncio
    async def test_two_exchanges_in_order(self, auth, account, credentials, urls):
        """Test both exchanges run in order and nothing else is requested."""
        token = await auth.authenticate(credentials)

        assert token == AccessToken(urls.access_token)
        assert account.urls() == [urls.app_authorization, urls.authorization]

    @pytest.mark.asyncio
    async def test_stops_after_refresh_failure(self, auth, transport, credentials, urls):
        """Test the access exchange is skipped when the first one fails."""
        transport.add('POST', urls.app_authorization, 401, b'<error>bad creds</error>')

        with pytest.raises(SugarSyncAuthError):
            await auth.authenticate(credentials)

        assert transport.urls() == [urls.app_authorization]
