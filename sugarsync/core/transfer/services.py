"""
Upload and download services.

Upload is two-phase: a POST creates an empty file resource in the target
folder, then the bytes are PUT to the resource's ``data`` sub-URL. If the
second phase fails the empty resource stays on the server.
"""
from pathlib import Path
from typing import Optional, Union

from ..api.auth import XML_CONTENT_TYPE
from ..api.models import AccessToken
from ..api.transport import AsyncHTTPTransport
from ..exceptions import SugarSyncRequestError
from ..logging import get_logger
from ..xml_query import build_document
from .file_service import AsyncFileReader, FileValidator
from .models import DownloadResult, UploadResult

OCTET_STREAM = 'application/octet-stream'
DATA_SUFFIX = '/data'


class UploadService:
    """
    Creates a file resource and streams the local bytes into it.

    Responsibilities:
    - Validate the local file
    - Create the remote file resource
    - Stream the file data
    """

    def __init__(
        self,
        transport: AsyncHTTPTransport,
        validator: Optional[FileValidator] = None,
        reader: Optional[AsyncFileReader] = None
    ):
        """
        Initialize upload service.

        Args:
            transport: HTTP transport
            validator: Local file validator
            reader: Chunked file reader (chunk size from the transport config)
        """
        self._transport = transport
        self._validator = validator or FileValidator()
        self._reader = reader or AsyncFileReader(transport.config.upload_chunk_size)
        self._logger = get_logger('sugarsync.transfer.upload')

    async def create_file(
        self,
        folder_url: str,
        display_name: str,
        media_type: str,
        token: AccessToken
    ) -> str:
        """
        Create an empty file resource in a folder.

        Args:
            folder_url: Link of the target folder
            display_name: Remote file name
            media_type: MIME type recorded for the file
            token: Access token

        Returns:
            URL of the created resource (Location header)

        Raises:
            SugarSyncRequestError: On non-2xx or a missing Location
        """
        body = build_document('file', {
            'displayName': display_name,
            'mediaType': media_type,
        })
        result = await self._transport.post(folder_url, XML_CONTENT_TYPE, body, token)
        if not result.ok:
            raise SugarSyncRequestError(f"Creating {display_name} returned {result.status}", result)

        location = result.location
        if not location:
            raise SugarSyncRequestError(
                f"Creating {display_name} returned no Location header", result
            )
        self._logger.debug(f"Created file resource {location}")
        return location

    async def upload(
        self,
        folder_url: str,
        file_path: Union[str, Path],
        token: AccessToken,
        display_name: Optional[str] = None
    ) -> UploadResult:
        """
        Upload a local file into a folder.

        Args:
            folder_url: Link of the target folder
            file_path: Local file
            token: Access token
            display_name: Remote name (default: the local file name)

        Returns:
            UploadResult

        Raises:
            LocalFileError: If the local file is missing
            SugarSyncRequestError: If either phase fails
        """
        path, size = self._validator.validate(file_path)
        name = display_name or path.name
        media_type = self._validator.guess_media_type(path)

        file_url = await self.create_file(folder_url, name, media_type, token)
        data_url = f"{file_url}{DATA_SUFFIX}"

        self._logger.info(f"Uploading {path} ({size} bytes) to {data_url}")
        chunks = self._reader.iter_chunks(path)
        try:
            result = await self._transport.put(
                data_url,
                OCTET_STREAM,
                chunks,
                token,
                content_length=size
            )
        finally:
            # Releases the source handle when the PUT stopped mid-stream
            await chunks.aclose()
        if not result.ok:
            raise SugarSyncRequestError(f"Uploading data of {name} returned {result.status}", result)

        return UploadResult(file_url=file_url, data_url=data_url, size=size, status=result.status)


class DownloadService:
    """Saves a file's data link to a local path."""

    def __init__(self, transport: AsyncHTTPTransport):
        self._transport = transport
        self._logger = get_logger('sugarsync.transfer.download')

    async def download(
        self,
        file_data_url: str,
        dest: Union[str, Path],
        token: AccessToken,
        display_name: Optional[str] = None
    ) -> DownloadResult:
        """
        Stream a file's bytes to disk, truncating an existing file.

        Args:
            file_data_url: The file's fileData link
            dest: Local destination path
            token: Access token
            display_name: Remote name, for the result (default: dest name)

        Returns:
            DownloadResult

        Raises:
            SugarSyncRequestError: On non-2xx or a broken connection
            LocalFileError: If the destination cannot be written
        """
        path = Path(dest)
        result = await self._transport.get_to_file(file_data_url, path, token)
        if not result.ok:
            raise SugarSyncRequestError(f"GET {file_data_url} returned {result.status}", result)

        self._logger.info(f"Downloaded {file_data_url} to {path}")
        return DownloadResult(
            display_name=display_name or path.name,
            path=path,
            status=result.status
        )
