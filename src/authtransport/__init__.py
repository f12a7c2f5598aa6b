"""
Authorized HTTP transport with thread-safe token refresh.

Wraps outgoing requests with an Authorization header built from the current
token, fetching a new token when it is missing or expired. One transport can
be shared by many threads; concurrent requests that find the same expired
token trigger a single refresh.

Basic Usage:
    from authtransport import AuthorizedTransport, CallableTokenFetcher, OAuth2Token
    from authtransport import build_authorized_session

    def fetch(current):
        return OAuth2Token.from_response(identity_client.refresh(current))

    transport = AuthorizedTransport(CallableTokenFetcher(fetch))
    session = build_authorized_session(transport)
    response = session.get("https://api.example.com/me")

From Configuration:
    from authtransport import build_session, load_config

    config = load_config(Path("config.yaml"))
    session = build_session(config)  # uses transport.token_file
"""

from authtransport.config import TransportConfig, build_session, build_transport, load_config
from authtransport.oauth2 import (
    DEFAULT_TOKEN_TYPE,
    CallableTokenFetcher,
    FileTokenFetcher,
    InvalidConfigurationError,
    OAuth2Error,
    OAuth2Token,
    TokenFetcher,
    TokenFetchError,
    is_expired,
)
from authtransport.transport import (
    AUTHORIZATION_HEADER,
    AuthorizedTransport,
    ReadWriteLock,
    build_authorized_session,
    clone_request,
)

__version__ = "0.1.0"

__all__ = [
    # Transport
    "AuthorizedTransport",
    "AUTHORIZATION_HEADER",
    "build_authorized_session",
    "clone_request",
    "ReadWriteLock",
    # Tokens
    "OAuth2Token",
    "is_expired",
    "DEFAULT_TOKEN_TYPE",
    # Fetchers
    "TokenFetcher",
    "CallableTokenFetcher",
    "FileTokenFetcher",
    # Configuration
    "TransportConfig",
    "load_config",
    "build_transport",
    "build_session",
    # Exceptions
    "OAuth2Error",
    "TokenFetchError",
    "InvalidConfigurationError",
]
