"""
API configuration module.

Provides configuration for the SugarSync API client: gateway, timeouts,
SSL behaviour and transfer chunk sizes. Nothing here is read from files or
the environment; the CLI builds an APIConfig from its options.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import ssl


DEFAULT_GATEWAY = 'https://api.sugarsync.com'

# Fixed endpoints; every other URL is taken from a fetched document
APP_AUTHORIZATION_PATH = '/app-authorization'
AUTHORIZATION_PATH = '/authorization'
USER_PATH = '/user'


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    verify=False disables certificate checks entirely (testing only).
    """
    verify: bool = True
    ca_file: Optional[str] = None

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Create the value aiohttp expects for its ``ssl`` argument."""
        if not self.verify:
            return False

        context = ssl.create_default_context()
        if self.ca_file:
            context.load_verify_locations(self.ca_file)
        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration in seconds.

    ``total`` is left unset by default so long transfers are bounded only
    by the socket read timeout.
    """
    total: Optional[float] = None
    connect: float = 30.0
    sock_read: float = 120.0

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
        )


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Attributes:
        gateway: Base URL of the SugarSync REST API
        user_agent: User-Agent header sent with every request
        ssl: SSL settings
        timeout: Timeout settings
        download_chunk_size: Bytes read per iteration when saving a download
        upload_chunk_size: Bytes read per iteration when streaming an upload
        extra_headers: Headers added to every request
    """
    gateway: str = DEFAULT_GATEWAY
    user_agent: str = 'sugarsync-cli/1.0.0'
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    download_chunk_size: int = 64 * 1024
    upload_chunk_size: int = 64 * 1024
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    def endpoint(self, path: str) -> str:
        """Join one of the fixed endpoint paths onto the gateway."""
        return f"{self.gateway.rstrip('/')}/{path.lstrip('/')}"

    @property
    def app_authorization_url(self) -> str:
        return self.endpoint(APP_AUTHORIZATION_PATH)

    @property
    def authorization_url(self) -> str:
        return self.endpoint(AUTHORIZATION_PATH)

    @property
    def user_url(self) -> str:
        return self.endpoint(USER_PATH)

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
