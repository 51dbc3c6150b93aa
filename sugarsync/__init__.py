"""
SugarSync - Async Python client and CLI for SugarSync cloud storage.

Usage:
    >>> from sugarsync import SugarSyncClient, Credentials
    >>>
    >>> async with SugarSyncClient(credentials) as sugarsync:
    ...     await sugarsync.authenticate()
    ...     contents = await sugarsync.list_folder()
    ...     print(contents.files)
"""
from .client import SugarSyncClient, QuotaInfo, FolderContents, format_gib

# Configuration and models
from .core.api import (
    APIConfig,
    SSLConfig,
    TimeoutConfig,
    Credentials,
    AccessToken,
    RefreshToken,
    HttpResult,
    AsyncHTTPTransport,
    AsyncAuthService,
)
from .core.navigation import ResourceNavigator, ResourceDoc, CollectionRef, FileRef
from .core.transfer import UploadService, DownloadService, UploadResult, DownloadResult
from .core.exceptions import (
    SugarSyncException,
    SugarSyncAuthError,
    SugarSyncRequestError,
    SugarSyncNotFoundError,
    SugarSyncAmbiguousError,
    LocalFileError,
    XMLQueryError,
)

__version__ = '1.0.0'


__all__ = [
    'SugarSyncClient',
    'QuotaInfo',
    'FolderContents',
    'format_gib',
    'APIConfig',
    'SSLConfig',
    'TimeoutConfig',
    'Credentials',
    'AccessToken',
    'RefreshToken',
    'HttpResult',
    'AsyncHTTPTransport',
    'AsyncAuthService',
    'ResourceNavigator',
    'ResourceDoc',
    'CollectionRef',
    'FileRef',
    'UploadService',
    'DownloadService',
    'UploadResult',
    'DownloadResult',
    'SugarSyncException',
    'SugarSyncAuthError',
    'SugarSyncRequestError',
    'SugarSyncNotFoundError',
    'SugarSyncAmbiguousError',
    'LocalFileError',
    'XMLQueryError',
]
