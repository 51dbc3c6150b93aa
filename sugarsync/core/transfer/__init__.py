"""Transfer module - two-phase uploads and streamed downloads."""
from .file_service import FileValidator, AsyncFileReader
from .models import UploadResult, DownloadResult
from .services import UploadService, DownloadService, OCTET_STREAM

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'UploadResult',
    'DownloadResult',
    'UploadService',
    'DownloadService',
    'OCTET_STREAM',
]
