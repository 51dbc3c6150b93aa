"""
Async HTTP transport.

Thin wrapper over aiohttp that returns every response as an HttpResult,
whatever its status. Classifying errors is left to the caller.
"""
import asyncio
from pathlib import Path
from typing import AsyncIterable, Dict, Optional, Union

import aiofiles
import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from .config import APIConfig
from .models import AccessToken, HttpResult
from ..exceptions import LocalFileError, SugarSyncRequestError
from ..logging import TRANSPORT_LOGGER, get_logger, mask

Body = Union[bytes, AsyncIterable[bytes]]


class AsyncHTTPTransport:
    """
    Asynchronous HTTPS transport for the SugarSync API.

    Example:
        >>> async with AsyncHTTPTransport(APIConfig.default()) as transport:
        ...     result = await transport.get(url, access_token)
    """

    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize transport.

        Args:
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._logger = get_logger(TRANSPORT_LOGGER)

    @property
    def config(self) -> APIConfig:
        return self._config

    async def __aenter__(self) -> 'AsyncHTTPTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(**self._config.get_connector_kwargs())
            self._session = aiohttp.ClientSession(
                connector=connector,
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close the underlying session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    @staticmethod
    def _build_headers(
        access_token: Optional[AccessToken],
        content_type: Optional[str] = None,
        extra: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if content_type:
            headers['Content-Type'] = content_type
        if access_token is not None:
            headers['Authorization'] = access_token.authorization_header
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _copy_headers(response) -> CIMultiDictProxy:
        return CIMultiDictProxy(CIMultiDict(response.headers))

    async def _request(
        self,
        method: str,
        url: str,
        access_token: Optional[AccessToken] = None,
        content_type: Optional[str] = None,
        data: Optional[Body] = None,
        allow_redirects: bool = True,
        extra_headers: Optional[Dict[str, str]] = None
    ) -> HttpResult:
        session = await self._ensure_session()
        headers = self._build_headers(access_token, content_type, extra_headers)

        self._logger.debug(
            f"{method} {url} (token: {mask(access_token.url if access_token else None)})"
        )
        try:
            async with session.request(
                method,
                url,
                data=data,
                headers=headers,
                allow_redirects=allow_redirects
            ) as response:
                body = await response.read()
                result = HttpResult(
                    status=response.status,
                    headers=self._copy_headers(response),
                    body=body
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"{method} {url} failed: {e!r}")
            raise SugarSyncRequestError(f"{method} {url} failed: {e}") from e

        self._log_result(method, url, result)
        return result

    def _log_result(self, method: str, url: str, result: HttpResult) -> None:
        if result.ok:
            self._logger.debug(f"{method} {url} -> {result.status}")
        else:
            self._logger.error(f"{method} {url} -> {result.status}")

    async def get(self, url: str, access_token: Optional[AccessToken] = None) -> HttpResult:
        """
        Perform a GET request.

        Args:
            url: Absolute URL
            access_token: Access token, if the request needs one

        Returns:
            HttpResult with the full response body
        """
        return await self._request('GET', url, access_token=access_token)

    async def post(
        self,
        url: str,
        content_type: str,
        body: bytes,
        access_token: Optional[AccessToken] = None,
        follow_redirects: bool = False
    ) -> HttpResult:
        """
        Perform a POST request.

        Redirects are not followed by default: newly created tokens and
        resources are announced in the Location header of the response.

        Args:
            url: Absolute URL
            content_type: Content-Type of the body
            body: Request body
            access_token: Access token, if the request needs one
            follow_redirects: Let aiohttp follow 3xx responses

        Returns:
            HttpResult
        """
        return await self._request(
            'POST',
            url,
            access_token=access_token,
            content_type=content_type,
            data=body,
            allow_redirects=follow_redirects
        )

    async def put(
        self,
        url: str,
        content_type: str,
        body_stream: Body,
        access_token: AccessToken,
        content_length: Optional[int] = None
    ) -> HttpResult:
        """
        Perform a PUT request with a bytes or streamed body.

        Args:
            url: Absolute URL
            content_type: Content-Type of the body
            body_stream: Bytes, or an async iterable yielding bytes
            access_token: Access token
            content_length: Size of a streamed body, sent as Content-Length

        Returns:
            HttpResult
        """
        extra = None
        if content_length is not None:
            extra = {'Content-Length': str(content_length)}
        return await self._request(
            'PUT',
            url,
            access_token=access_token,
            content_type=content_type,
            data=body_stream,
            extra_headers=extra
        )

    async def get_to_file(
        self,
        url: str,
        local_path: Union[str, Path],
        access_token: AccessToken,
        chunk_size: Optional[int] = None
    ) -> HttpResult:
        """
        Stream a GET response body into a local file.

        On a 2xx response the file is created (or truncated) and filled; the
        returned result has an empty body. On any other status nothing is
        written and the error body is returned. If streaming fails midway
        the partial file is deleted before the error propagates.

        Args:
            url: Absolute URL
            local_path: Destination file
            access_token: Access token
            chunk_size: Bytes per read (default: config.download_chunk_size)

        Returns:
            HttpResult

        Raises:
            LocalFileError: If the destination cannot be written
            SugarSyncRequestError: If the connection fails
        """
        session = await self._ensure_session()
        dest = Path(local_path)
        chunk_size = chunk_size or self._config.download_chunk_size
        headers = self._build_headers(access_token)

        self._logger.debug(f"GET {url} -> {dest}")
        created = False
        try:
            async with session.get(url, headers=headers) as response:
                if not 200 <= response.status <= 299:
                    result = HttpResult(
                        status=response.status,
                        headers=self._copy_headers(response),
                        body=await response.read()
                    )
                    self._log_result('GET', url, result)
                    return result

                written = 0
                try:
                    async with aiofiles.open(dest, 'wb') as f:
                        created = True
                        async for chunk in response.content.iter_chunked(chunk_size):
                            await f.write(chunk)
                            written += len(chunk)
                except (aiohttp.ClientError, asyncio.TimeoutError):
                    raise
                except OSError as e:
                    raise LocalFileError(f"Cannot write {dest}: {e.strerror or e}", dest) from e

                result = HttpResult(
                    status=response.status,
                    headers=self._copy_headers(response)
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._discard(dest, created)
            self._logger.error(f"GET {url} failed: {e!r}")
            raise SugarSyncRequestError(f"GET {url} failed: {e}") from e
        except BaseException:
            self._discard(dest, created)
            raise

        self._logger.debug(f"Saved {written} bytes to {dest}")
        self._log_result('GET', url, result)
        return result

    def _discard(self, dest: Path, created: bool) -> None:
        """Remove a partially written download."""
        if not created:
            return
        try:
            dest.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self._logger.error(f"Could not remove partial download {dest}: {e}")
