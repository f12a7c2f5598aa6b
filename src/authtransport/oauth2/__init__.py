"""
Token model, exceptions and fetchers.

Usage:
    from authtransport.oauth2 import CallableTokenFetcher, OAuth2Token

    def fetch(current):
        return OAuth2Token.from_response(my_identity_client.refresh(current))

    fetcher = CallableTokenFetcher(fetch)
"""

from authtransport.oauth2.exceptions import (
    InvalidConfigurationError,
    OAuth2Error,
    TokenFetchError,
)
from authtransport.oauth2.fetchers import (
    CallableTokenFetcher,
    FileTokenFetcher,
    TokenFetcher,
)
from authtransport.oauth2.models import DEFAULT_TOKEN_TYPE, OAuth2Token, is_expired

__all__ = [
    # Models
    "OAuth2Token",
    "is_expired",
    "DEFAULT_TOKEN_TYPE",
    # Fetchers
    "TokenFetcher",
    "CallableTokenFetcher",
    "FileTokenFetcher",
    # Exceptions
    "OAuth2Error",
    "TokenFetchError",
    "InvalidConfigurationError",
]
