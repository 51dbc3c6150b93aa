"""
Custom exceptions for SugarSync operations.

Every failure of the protocol layer is raised as one of these classes and
surfaced to the caller; nothing in the core terminates the process.
"""
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .api.models import HttpResult


class SugarSyncException(Exception):
    """Base exception for all SugarSync-related errors."""

    def __init__(self, message: str, result: Optional['HttpResult'] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            result: HTTP result that caused the error (if any)
        """
        self.message = message
        self.result = result
        super().__init__(message)

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code of the failing response, if one exists."""
        return self.result.status if self.result is not None else None


class SugarSyncAuthError(SugarSyncException):
    """Exception raised when either token exchange fails."""
    pass


class SugarSyncRequestError(SugarSyncException):
    """Exception raised for non-2xx responses and broken protocol data."""
    pass


class SugarSyncNotFoundError(SugarSyncException):
    """Exception raised when a display name matches nothing."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} {name} not found")


class SugarSyncAmbiguousError(SugarSyncException):
    """Exception raised when a display name matches more than one entry."""

    def __init__(self, kind: str, name: str, count: int) -> None:
        self.kind = kind
        self.name = name
        self.count = count
        super().__init__(f"{count} {kind}s found with the name {name}")


class LocalFileError(SugarSyncException):
    """Exception raised for local filesystem problems."""

    def __init__(self, message: str, path: Union[str, Path]) -> None:
        self.path = Path(path)
        super().__init__(message)


class XMLQueryError(SugarSyncException):
    """Exception raised for malformed XML documents or path expressions."""
    pass
