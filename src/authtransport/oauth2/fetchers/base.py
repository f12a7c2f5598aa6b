"""Base token fetcher interface."""

import logging
from abc import ABC, abstractmethod

from authtransport.oauth2.models import OAuth2Token

logger = logging.getLogger(__name__)


class TokenFetcher(ABC):
    """
    Abstract base class for token fetchers.

    Implementations produce a fresh token, optionally using the current one
    as a hint (for example to read its refresh credential). The transport
    treats a fetcher as an opaque capability and calls it while holding its
    exclusive lock, so an implementation never runs concurrently with itself
    for the same transport.
    """

    @abstractmethod
    def fetch_token(self, current: OAuth2Token | None) -> OAuth2Token:
        """
        Produce a new token.

        Args:
            current: Token currently held by the transport, or None

        Returns:
            New OAuth2Token

        Raises:
            Exception: Any failure; the transport propagates it unchanged
        """
        pass


__all__ = ["TokenFetcher"]
