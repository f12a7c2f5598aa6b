"""Token model and expiry predicate."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

DEFAULT_TOKEN_TYPE = "Bearer"


def _mask(value: str, visible_chars: int = 4) -> str:
    """Mask a secret showing only the first N chars."""
    if not value:
        return "<not_set>"
    if len(value) <= visible_chars:
        return "***"
    return f"{value[:visible_chars]}...({len(value)} chars)"


def _as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass(repr=False)
class OAuth2Token:
    """
    Access token with optional refresh credential and expiry.

    Attributes:
        access_token: The access token string
        token_type: Authorization scheme (empty means "Bearer")
        refresh_token: Refresh credential, empty if none was issued
        expiry: UTC timestamp when the token expires, None if it never does
    """

    access_token: str
    token_type: str = DEFAULT_TOKEN_TYPE
    refresh_token: str = ""
    expiry: datetime | None = None

    def __post_init__(self) -> None:
        if self.expiry is not None:
            self.expiry = _as_utc(self.expiry)

    @classmethod
    def from_response(cls, response: dict) -> "OAuth2Token":
        """
        Create token from an OAuth2 token response.

        Accepts either ``expires_in`` (seconds from now) or ``expiry``
        (ISO-8601 timestamp). Without either the token never expires.

        Args:
            response: Token response dict

        Returns:
            OAuth2Token instance

        Raises:
            KeyError: If access_token is missing
        """
        expiry = None
        if response.get("expires_in") is not None:
            expiry = datetime.now(UTC) + timedelta(seconds=int(response["expires_in"]))
        elif response.get("expiry"):
            expiry = datetime.fromisoformat(response["expiry"])

        return cls(
            access_token=response["access_token"],
            token_type=response.get("token_type") or DEFAULT_TOKEN_TYPE,
            refresh_token=response.get("refresh_token") or "",
            expiry=expiry,
        )

    def is_expired(self) -> bool:
        """True if there is no access token or the expiry has passed."""
        return is_expired(self)

    def copy(self) -> "OAuth2Token":
        """Return an independent copy of this token."""
        return replace(self)

    @property
    def scheme(self) -> str:
        """Authorization scheme, falling back to Bearer."""
        return self.token_type or DEFAULT_TOKEN_TYPE

    def authorization_value(self) -> str:
        """Value for the Authorization header."""
        return f"{self.scheme} {self.access_token}"

    @property
    def remaining_lifetime(self) -> timedelta | None:
        """Time left before expiry, None for tokens that never expire."""
        if self.expiry is None:
            return None
        return _as_utc(self.expiry) - datetime.now(UTC)

    def __repr__(self) -> str:
        expiry = self.expiry.isoformat() if self.expiry else None
        return (
            f"OAuth2Token(access_token={_mask(self.access_token)!r}, "
            f"token_type={self.token_type!r}, "
            f"refresh_token={_mask(self.refresh_token)!r}, expiry={expiry!r})"
        )


def is_expired(token: OAuth2Token | None) -> bool:
    """
    Check whether a token must be refreshed before use.

    A missing token or an empty access token is always expired, whatever the
    expiry says. A token with no expiry never expires.
    """
    if token is None or not token.access_token:
        return True
    if token.expiry is None:
        return False
    # expiry may have been reassigned to a naive value after construction
    return _as_utc(token.expiry) < datetime.now(UTC)


__all__ = ["OAuth2Token", "is_expired", "DEFAULT_TOKEN_TYPE"]
