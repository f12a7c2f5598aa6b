"""Token fetcher backed by a plain callable."""

import logging
from collections.abc import Callable

from authtransport.oauth2.exceptions import InvalidConfigurationError, TokenFetchError
from authtransport.oauth2.fetchers.base import TokenFetcher
from authtransport.oauth2.models import OAuth2Token

logger = logging.getLogger(__name__)

FetchFunc = Callable[[OAuth2Token | None], OAuth2Token]


class CallableTokenFetcher(TokenFetcher):
    """
    Adapts a function to the TokenFetcher interface.

    Usage:
        def fetch(current):
            return OAuth2Token(access_token=vault.read("api-token"))

        fetcher = CallableTokenFetcher(fetch)
    """

    def __init__(self, func: FetchFunc):
        if not callable(func):
            raise InvalidConfigurationError(
                f"Token fetch function must be callable, got {type(func).__name__}"
            )
        self._func = func

    def fetch_token(self, current: OAuth2Token | None) -> OAuth2Token:
        token = self._func(current)
        if token is None:
            raise TokenFetchError(f"{self!r} returned no token")
        return token

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", type(self._func).__name__)
        return f"CallableTokenFetcher({name})"


__all__ = ["CallableTokenFetcher", "FetchFunc"]
