"""
SugarSyncClient - High-level async client for SugarSync.

Example:
    >>> creds = Credentials('me@example.com', 'secret', 'app', 'key', 'private')
    >>> async with SugarSyncClient(creds) as sugarsync:
    ...     await sugarsync.authenticate()
    ...     quota = await sugarsync.get_quota()
    ...     print(quota.limit_gb)
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_EVEN
from pathlib import Path
from typing import List, Optional, Union

from .core.api import (
    AccessToken,
    APIConfig,
    AsyncAuthService,
    AsyncHTTPTransport,
    Credentials,
)
from .core.exceptions import LocalFileError, SugarSyncAuthError, SugarSyncRequestError
from .core.logging import get_logger
from .core.navigation import (
    KIND_FILE,
    LISTING_CONTENTS,
    FileRef,
    ResourceDoc,
    ResourceNavigator,
)
from .core.transfer import (
    DownloadResult,
    DownloadService,
    FileValidator,
    UploadResult,
    UploadService,
)

GIB = 1024 ** 3

DEFAULT_SHARE = 'CapCityCreative'
DEFAULT_VIDEO_TYPE = 'video/quicktime'

_THREE_PLACES = Decimal('0.001')

logger = get_logger(__name__)


def format_gib(num_bytes: int) -> str:
    """
    Render a byte count in GiB with at most three decimals.

    Rounds half-even and drops trailing zeros, so 107374182400 gives
    "100" and 536870912 gives "0.5".
    """
    value = (Decimal(num_bytes) / GIB).quantize(_THREE_PLACES, rounding=ROUND_HALF_EVEN)
    text = format(value, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return '0' if text in ('', '-0') else text


def local_target(dest_dir: Union[str, Path], display_name: str) -> Path:
    """
    Local path for a remote file inside ``dest_dir``.

    Raises:
        LocalFileError: If the name is empty, '.' or '..', or holds a path separator
    """
    if display_name in ('', '.', '..') or '/' in display_name or '\\' in display_name:
        raise LocalFileError(
            f"Refusing to save {display_name!r} outside {dest_dir}", Path(dest_dir)
        )
    return Path(dest_dir) / display_name


@dataclass
class QuotaInfo:
    """
    Storage quota of the account.

    Attributes:
        limit: Total storage in bytes
        usage: Storage used in bytes
    """
    limit: int
    usage: int

    @property
    def free(self) -> int:
        """Free storage in bytes (negative when over quota)."""
        return self.limit - self.usage

    @property
    def limit_gb(self) -> str:
        return format_gib(self.limit)

    @property
    def usage_gb(self) -> str:
        return format_gib(self.usage)

    @property
    def free_gb(self) -> str:
        return format_gib(self.free)


@dataclass
class FolderContents:
    """
    Names found in a folder listing, in document order.

    Attributes:
        folders: Display names of folder collections
        files: Display names of files
    """
    folders: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)


class SugarSyncClient:
    """
    High-level async client for SugarSync.

    Usage:
        >>> async with SugarSyncClient(credentials) as sugarsync:
        ...     await sugarsync.authenticate()
        ...     contents = await sugarsync.list_folder()
        ...     for name in contents.files:
        ...         print(name)
    """

    def __init__(self, credentials: Credentials, config: Optional[APIConfig] = None):
        """
        Initialize client.

        Args:
            credentials: User and developer credentials for this run
            config: API configuration (uses defaults if not provided)
        """
        self._credentials = credentials
        self._config = config or APIConfig.default()
        self._transport = AsyncHTTPTransport(self._config)
        self._auth = AsyncAuthService(self._transport, self._config)
        self._navigator = ResourceNavigator(self._transport, self._config)
        self._uploader = UploadService(self._transport)
        self._downloader = DownloadService(self._transport)
        self._validator = FileValidator()
        self._token: Optional[AccessToken] = None

    async def __aenter__(self) -> 'SugarSyncClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP session. The access token is dropped too."""
        self._token = None
        await self._transport.close()

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def navigator(self) -> ResourceNavigator:
        return self._navigator

    def is_authenticated(self) -> bool:
        return self._token is not None

    def _ensure_authenticated(self) -> AccessToken:
        if self._token is None:
            raise SugarSyncAuthError("Not authenticated")
        return self._token

    async def authenticate(self) -> AccessToken:
        """
        Run the two-step token exchange.

        Returns:
            The access token used by every later call

        Raises:
            SugarSyncAuthError: If either exchange fails
        """
        self._token = await self._auth.authenticate(self._credentials)
        return self._token

    async def get_quota(self) -> QuotaInfo:
        """
        Read the storage quota from the user resource.

        Raises:
            SugarSyncRequestError: If the user document has no quota values
        """
        token = self._ensure_authenticated()
        user = await self._navigator.user_doc(token)

        limit = user.text_values('/user/quota/limit/text()')
        usage = user.text_values('/user/quota/usage/text()')
        if not limit or not usage:
            raise SugarSyncRequestError("User resource has no quota information")
        try:
            return QuotaInfo(limit=int(limit[0].strip()), usage=int(usage[0].strip()))
        except ValueError as e:
            raise SugarSyncRequestError(f"Invalid quota value: {e}") from e

    async def magic_briefcase_contents(self) -> ResourceDoc:
        """Fetch the full listing of the Magic Briefcase."""
        token = self._ensure_authenticated()
        folder = await self._navigator.magic_briefcase(token)
        return await self._navigator.listing(folder, token, LISTING_CONTENTS)

    @staticmethod
    def _project(listing: ResourceDoc) -> FolderContents:
        return FolderContents(
            folders=[c.display_name for c in ResourceNavigator.collections(listing) if c.is_folder],
            files=[f.display_name for f in ResourceNavigator.files(listing)],
        )

    async def list_folder(self) -> FolderContents:
        """
        List the Magic Briefcase.

        Returns:
            FolderContents with folder and file display names
        """
        return self._project(await self.magic_briefcase_contents())

    async def list_share(self, share_name: str) -> FolderContents:
        """
        List the collections of a received share.

        Args:
            share_name: Display name of the received share
        """
        token = self._ensure_authenticated()
        return self._project(await self._navigator.share_collections(token, share_name))

    async def upload(self, file_path: Union[str, Path]) -> UploadResult:
        """
        Upload a local file into the Magic Briefcase.

        The local file is checked before any request is sent.

        Args:
            file_path: Path to the local file

        Returns:
            UploadResult

        Raises:
            LocalFileError: If the file does not exist or is not a file
            SugarSyncRequestError: If creating or filling the file fails
        """
        token = self._ensure_authenticated()
        path, _ = self._validator.validate(file_path)

        folder = await self._navigator.magic_briefcase(token)
        result = await self._uploader.upload(folder.url, path, token)
        logger.info(f"Uploaded {path.name} to {result.file_url}")
        return result

    async def download(
        self,
        name: str,
        dest_dir: Union[str, Path] = '.'
    ) -> DownloadResult:
        """
        Download a file from the Magic Briefcase by display name.

        Args:
            name: Exact display name
            dest_dir: Local directory (the file keeps its name)

        Raises:
            SugarSyncNotFoundError: No file has that name
            SugarSyncAmbiguousError: Several files have it
        """
        token = self._ensure_authenticated()
        listing = await self.magic_briefcase_contents()
        data_url = self._navigator.find_child_by_display_name(listing, name, KIND_FILE)
        return await self._downloader.download(data_url, local_target(dest_dir, name), token, name)

    async def find_videos(
        self,
        share_name: str,
        folder_name: str,
        media_type: str = DEFAULT_VIDEO_TYPE
    ) -> List[FileRef]:
        """
        List the files of a share subfolder that have a given media type.

        Args:
            share_name: Display name of the received share
            folder_name: Display name of the subfolder
            media_type: Exact media type to keep

        Returns:
            Matching files, in document order
        """
        token = self._ensure_authenticated()
        listing = await self._navigator.share_subfolder_files(token, share_name, folder_name)
        return [f for f in self._navigator.files(listing) if f.media_type == media_type]

    async def download_file(
        self,
        file_ref: FileRef,
        dest_dir: Union[str, Path] = '.'
    ) -> DownloadResult:
        """Download one listed file into a directory under its display name."""
        token = self._ensure_authenticated()
        dest = local_target(dest_dir, file_ref.display_name)
        return await self._downloader.download(file_ref.file_data, dest, token, file_ref.display_name)

    async def download_videos(
        self,
        share_name: str = DEFAULT_SHARE,
        folder_name: str = '',
        media_type: str = DEFAULT_VIDEO_TYPE,
        dest_dir: Union[str, Path] = '.'
    ) -> List[DownloadResult]:
        """
        Download every video of a share subfolder, one after another.

        Args:
            share_name: Display name of the received share
            folder_name: Display name of the subfolder
            media_type: Media type to download
            dest_dir: Local directory

        Returns:
            One DownloadResult per file, in document order
        """
        videos = await self.find_videos(share_name, folder_name, media_type)
        results = []
        for video in videos:
            results.append(await self.download_file(video, dest_dir))
        return results

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated() else "not authenticated"
        return f"<SugarSyncClient {self._credentials.username} ({state})>"
