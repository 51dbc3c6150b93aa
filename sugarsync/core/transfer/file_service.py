"""
File validation and reading services.

Single Responsibility: each class handles one local-file concern.
"""
from pathlib import Path
from typing import AsyncIterator, Tuple, Union
import mimetypes

import aiofiles

from ..exceptions import LocalFileError
from ..logging import get_logger


class FileValidator:
    """
    Validates local files before upload.

    Responsibilities:
    - Check file existence
    - Verify path is a regular file
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            LocalFileError: If the file doesn't exist or is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise LocalFileError(f"File {file_path} does not exist", path)

        if not path.is_file():
            raise LocalFileError(f"Path {file_path} is not a file", path)

        return path, path.stat().st_size

    @staticmethod
    def guess_media_type(path: Union[str, Path]) -> str:
        """Guess a MIME type from the file name; empty when unknown."""
        media_type, _ = mimetypes.guess_type(str(path))
        return media_type or ''


class AsyncFileReader:
    """
    Streams a file in fixed-size chunks using aiofiles.

    The handle is opened when iteration starts and closed when it ends.
    A consumer that stops early must call ``aclose()`` on the iterator.
    """

    def __init__(self, chunk_size: int = 64 * 1024):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._logger = get_logger('sugarsync.transfer.file')

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def iter_chunks(self, file_path: Path) -> AsyncIterator[bytes]:
        """
        Yield the file's bytes chunk by chunk.

        Args:
            file_path: Path to the file

        Yields:
            Chunks of at most chunk_size bytes
        """
        read = 0
        async with aiofiles.open(file_path, 'rb') as f:
            while True:
                chunk = await f.read(self._chunk_size)
                if not chunk:
                    break
                read += len(chunk)
                yield chunk
        self._logger.debug(f"Read {read} bytes from {file_path}")
