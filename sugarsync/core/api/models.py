"""
Data models shared by the API layer.

Tokens are modelled as distinct value types so a refresh token can never be
sent where an access token is expected.
"""
from dataclasses import dataclass, field
from typing import Optional

from multidict import CIMultiDict, CIMultiDictProxy


@dataclass(frozen=True)
class Credentials:
    """
    Developer and user secrets for one run.

    Attributes:
        username: SugarSync username (email address)
        password: SugarSync password
        application: Application id from the developer site
        access_key: Developer access key id
        private_key: Developer private access key
    """
    username: str
    password: str = field(repr=False)
    application: str
    access_key: str
    private_key: str = field(repr=False)


@dataclass(frozen=True)
class RefreshToken:
    """Long-lived grant issued by app-authorization; consumed once."""
    url: str

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer credential attached to every API request."""
    url: str

    @property
    def authorization_header(self) -> str:
        """Value for the Authorization header."""
        return f"AccessToken {self.url}"

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class HttpResult:
    """
    Response triple returned by the transport.

    Attributes:
        status: HTTP status code
        headers: Case-insensitive, multi-valued response headers
        body: Raw response body
    """
    status: int
    headers: CIMultiDictProxy = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict())
    )
    body: bytes = b''

    @property
    def ok(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.status <= 299

    @property
    def location(self) -> Optional[str]:
        """Value of the Location header, if present."""
        return self.header('Location')

    def header(self, name: str) -> Optional[str]:
        """Get the first value of a header."""
        return self.headers.get(name)

    @classmethod
    def build(cls, status: int, headers: Optional[dict] = None, body: bytes = b'') -> 'HttpResult':
        """Create a result from a plain header mapping."""
        return cls(
            status=status,
            headers=CIMultiDictProxy(CIMultiDict(headers or {})),
            body=body,
        )
