"""Token and configuration exceptions."""


class OAuth2Error(Exception):
    """Base exception for token operations."""

    pass


class TokenFetchError(OAuth2Error):
    """A fetcher could not produce a token."""

    pass


class InvalidConfigurationError(OAuth2Error):
    """Fetcher or transport configuration is invalid."""

    pass


__all__ = [
    "OAuth2Error",
    "TokenFetchError",
    "InvalidConfigurationError",
]
