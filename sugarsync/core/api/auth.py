"""
Async authentication service.

SugarSync authorization is a two-step token exchange:

1. app-authorization: user + developer credentials -> refresh token
2. authorization: developer keys + refresh token -> access token

Both tokens are URLs returned in the Location header of a 2xx response.
"""
from typing import Optional

from .config import APIConfig
from .models import AccessToken, Credentials, HttpResult, RefreshToken
from .transport import AsyncHTTPTransport
from ..exceptions import SugarSyncAuthError
from ..logging import get_logger, mask
from ..xml_query import build_document

XML_CONTENT_TYPE = 'application/xml; charset=UTF-8'

REFRESH_TOKEN_ERROR = 'Error while getting refresh token!'
ACCESS_TOKEN_ERROR = 'Error while getting access token!'


class AsyncAuthService:
    """
    Asynchronous authentication service.

    The refresh token only lives inside authenticate(); callers keep the
    access token for the rest of the run.
    """

    def __init__(self, transport: AsyncHTTPTransport, config: Optional[APIConfig] = None):
        """
        Initialize auth service.

        Args:
            transport: HTTP transport
            config: API configuration (defaults to the transport's)
        """
        self._transport = transport
        self._config = config or transport.config
        self._logger = get_logger('sugarsync.auth')

    @staticmethod
    def _token_location(result: HttpResult, error_message: str) -> str:
        if not result.ok:
            raise SugarSyncAuthError(error_message, result)
        location = result.location
        if not location:
            raise SugarSyncAuthError(f"{error_message} (no Location header)", result)
        return location

    async def get_refresh_token(self, credentials: Credentials) -> RefreshToken:
        """
        Exchange user and developer credentials for a refresh token.

        Args:
            credentials: Credentials for this run

        Returns:
            RefreshToken

        Raises:
            SugarSyncAuthError: On any non-2xx response
        """
        body = build_document('appAuthorization', {
            'username': credentials.username,
            'password': credentials.password,
            'application': credentials.application,
            'accessKeyId': credentials.access_key,
            'privateAccessKey': credentials.private_key,
        })
        self._logger.debug(f"Requesting refresh token for {credentials.username}")

        result = await self._transport.post(
            self._config.app_authorization_url,
            XML_CONTENT_TYPE,
            body,
            follow_redirects=False
        )
        return RefreshToken(self._token_location(result, REFRESH_TOKEN_ERROR))

    async def get_access_token(
        self,
        credentials: Credentials,
        refresh_token: RefreshToken
    ) -> AccessToken:
        """
        Exchange the developer keys and a refresh token for an access token.

        Args:
            credentials: Credentials for this run
            refresh_token: Token from get_refresh_token()

        Returns:
            AccessToken

        Raises:
            SugarSyncAuthError: On any non-2xx response
        """
        body = build_document('tokenAuthRequest', {
            'accessKeyId': credentials.access_key,
            'privateAccessKey': credentials.private_key,
            'refreshToken': refresh_token.url,
        })
        self._logger.debug(f"Requesting access token (refresh token {mask(refresh_token.url)})")

        result = await self._transport.post(
            self._config.authorization_url,
            XML_CONTENT_TYPE,
            body,
            follow_redirects=False
        )
        return AccessToken(self._token_location(result, ACCESS_TOKEN_ERROR))

    async def authenticate(self, credentials: Credentials) -> AccessToken:
        """
        Run both exchanges and return the access token for this run.

        Args:
            credentials: Credentials for this run

        Returns:
            AccessToken
        """
        refresh_token = await self.get_refresh_token(credentials)
        access_token = await self.get_access_token(credentials, refresh_token)
        self._logger.info(f"Authenticated as {credentials.username}")
        return access_token
