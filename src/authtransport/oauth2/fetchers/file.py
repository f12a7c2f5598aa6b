"""
Token fetcher that reads tokens from a JSON file.

Intended for deployments where an external refresher process keeps a token
file up to date. Every fetch re-reads the file, so the transport picks up
whatever the refresher wrote last.

Supported formats:
1. A single token object:
   {"access_token": "...", "token_type": "Bearer", "expires_in": 3600}
2. Tokens keyed by resource, selected with ``key``:
   {"https://api.example.com/": {"access_token": "...", "expiry": "2026-01-01T00:00:00+00:00"}}
"""

import json
import logging
from pathlib import Path
from typing import Any

from authtransport.oauth2.exceptions import InvalidConfigurationError, TokenFetchError
from authtransport.oauth2.fetchers.base import TokenFetcher
from authtransport.oauth2.models import OAuth2Token

logger = logging.getLogger(__name__)


class FileTokenFetcher(TokenFetcher):
    """Reads a fresh token from a JSON token file on every fetch."""

    def __init__(self, path: str | Path, key: str | None = None):
        """
        Args:
            path: Path to the JSON token file
            key: Resource key to select in a multi-token file

        Raises:
            InvalidConfigurationError: If path is empty
        """
        if not path:
            raise InvalidConfigurationError("Token file path is required")
        self.path = Path(path)
        self.key = key

    def _read(self) -> Any:
        try:
            with open(self.path, encoding="utf-8-sig") as f:
                content = f.read().strip()
        except FileNotFoundError as e:
            raise TokenFetchError(f"Token file not found: {self.path}") from e
        except OSError as e:
            raise TokenFetchError(f"Failed to read token file: {self.path}") from e

        if not content:
            raise TokenFetchError(f"Token file is empty: {self.path}")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise TokenFetchError(f"Token file is not valid JSON: {self.path}") from e

    def _lookup(self, tokens: dict[str, Any]) -> Any:
        """Look up the configured key (exact then normalized match)."""
        if self.key in tokens:
            return tokens[self.key]

        # with/without trailing slash
        normalized = self.key.rstrip("/")
        for name, value in tokens.items():
            if normalized == name.rstrip("/"):
                return value

        raise TokenFetchError(
            f"Key '{self.key}' not found in token file. Available: {list(tokens.keys())}"
        )

    def fetch_token(self, current: OAuth2Token | None) -> OAuth2Token:
        data = self._read()
        if not isinstance(data, dict):
            raise TokenFetchError(f"Token file must contain a JSON object: {self.path}")

        entry = self._lookup(data) if self.key else data
        if not isinstance(entry, dict) or not entry.get("access_token"):
            raise TokenFetchError(f"No access_token in token file entry: {self.path}")

        try:
            token = OAuth2Token.from_response(entry)
        except (TypeError, ValueError) as e:
            raise TokenFetchError(f"Malformed token entry in {self.path}: {e}") from e

        logger.debug(
            "Read token from file",
            extra={"token_file": str(self.path), "resource": self.key},
        )
        return token

    def __repr__(self) -> str:
        return f"FileTokenFetcher({str(self.path)!r}, key={self.key!r})"


__all__ = ["FileTokenFetcher"]
