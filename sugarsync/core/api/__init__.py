"""SugarSync API module - configuration, transport and authentication."""
from .config import APIConfig, SSLConfig, TimeoutConfig, DEFAULT_GATEWAY
from .models import Credentials, RefreshToken, AccessToken, HttpResult
from .transport import AsyncHTTPTransport
from .auth import AsyncAuthService, XML_CONTENT_TYPE

__all__ = [
    # Configuration
    'APIConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DEFAULT_GATEWAY',

    # Models
    'Credentials',
    'RefreshToken',
    'AccessToken',
    'HttpResult',

    # Transport and auth
    'AsyncHTTPTransport',
    'AsyncAuthService',
    'XML_CONTENT_TYPE',
]
