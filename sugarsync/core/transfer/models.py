"""Data models for the transfer module."""
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful two-phase upload.

    Attributes:
        file_url: URL of the created file resource (Location of the create POST)
        data_url: URL the bytes were PUT to
        size: Bytes uploaded
        status: Status of the data PUT
    """
    file_url: str
    data_url: str
    size: int
    status: int


@dataclass(frozen=True)
class DownloadResult:
    """
    Result of a successful download.

    Attributes:
        display_name: Remote file name
        path: Local file written
        status: Status of the data GET
    """
    display_name: str
    path: Path
    status: int
