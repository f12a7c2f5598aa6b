"""Transport adapter that authorizes requests with a refreshable token."""

import logging

from requests import PreparedRequest, Response
from requests.adapters import BaseAdapter, HTTPAdapter

from authtransport.logging.formatters import sanitize_url
from authtransport.oauth2.exceptions import TokenFetchError
from authtransport.oauth2.fetchers.base import TokenFetcher
from authtransport.oauth2.models import OAuth2Token, is_expired
from authtransport.transport.request import clone_request
from authtransport.transport.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"


class AuthorizedTransport(BaseAdapter):
    """
    Authorizes outgoing requests with the current token.

    If the token is missing or expired, a new one is fetched through the
    fetcher before the request goes out. Token access is thread-safe: reads
    share the lock, while set and refresh hold it exclusively. A refresh
    holds the exclusive lock for the whole fetch, so when several requests
    find the same expired token one of them fetches and the others wait for
    it.

    Usage:
        transport = AuthorizedTransport(fetcher, token=initial_token)

        session = requests.Session()
        session.mount("https://", transport)
        session.get("https://api.example.com/me")
    """

    def __init__(
        self,
        fetcher: TokenFetcher,
        token: OAuth2Token | None = None,
        underlying: BaseAdapter | None = None,
        recheck_before_refresh: bool = True,
    ):
        """
        Args:
            fetcher: Produces new tokens on refresh
            token: Initial token, None to fetch on first request
            underlying: Transport that sends the authorized request
                (default: a new HTTPAdapter)
            recheck_before_refresh: Skip the fetch in send() when another
                thread already replaced the expired token
        """
        super().__init__()
        self._fetcher = fetcher
        self._token = token
        self._lock = ReadWriteLock()
        self._underlying = underlying if underlying is not None else HTTPAdapter()
        self.recheck_before_refresh = recheck_before_refresh

    @property
    def fetcher(self) -> TokenFetcher:
        return self._fetcher

    @property
    def underlying(self) -> BaseAdapter:
        return self._underlying

    def get_token(self) -> OAuth2Token | None:
        """Return a copy of the current token, or None if none is set."""
        with self._lock.read_locked():
            if self._token is None:
                return None
            return self._token.copy()

    def set_token(self, token: OAuth2Token | None) -> None:
        """Replace the current token. No validation is performed."""
        with self._lock.write_locked():
            self._token = token

    def refresh_token(self) -> None:
        """
        Fetch a new token and make it current.

        Raises:
            Exception: Whatever the fetcher raises; the current token is
                left unchanged
        """
        with self._lock.write_locked():
            self._fetch_locked()

    def _fetch_locked(self) -> None:
        # Caller must hold the write lock.
        logger.debug("Refreshing token", extra={"fetcher": repr(self._fetcher)})
        token = self._fetcher.fetch_token(self._token)
        self._token = token
        logger.debug(
            "Token refreshed",
            extra={"expiry": token.expiry.isoformat() if token and token.expiry else None},
        )

    def _refresh_if_stale(self, observed: OAuth2Token | None) -> OAuth2Token:
        """
        Refresh unless another thread replaced the observed token already.

        Returns a copy of the token that is current when the write lock is
        released.

        Raises:
            TokenFetchError: If no token is available after the refresh
        """
        with self._lock.write_locked():
            if (
                self.recheck_before_refresh
                and self._token is not None
                and self._token != observed
                and not is_expired(self._token)
            ):
                logger.debug("Token was refreshed by another thread")
            else:
                self._fetch_locked()
            if self._token is None:
                raise TokenFetchError(f"{self._fetcher!r} returned no token")
            return self._token.copy()

    def send(
        self,
        request: PreparedRequest,
        stream: bool = False,
        timeout=None,
        verify=True,
        cert=None,
        proxies=None,
    ) -> Response:
        """
        Authorize a clone of the request and send it through the underlying
        transport.

        The caller's request is never modified. Errors from the fetcher or
        the underlying transport propagate unchanged; if the refresh fails
        nothing is sent.
        """
        token = self.get_token()
        if token is None or is_expired(token):
            token = self._refresh_if_stale(token)

        authorized = clone_request(request)
        authorized.headers[AUTHORIZATION_HEADER] = token.authorization_value()

        logger.debug(
            "Sending authorized request",
            extra={"http_method": authorized.method, "http_url": sanitize_url(authorized.url)},
        )
        return self._underlying.send(
            authorized,
            stream=stream,
            timeout=timeout,
            verify=verify,
            cert=cert,
            proxies=proxies,
        )

    def close(self) -> None:
        """Close the underlying transport. The token is kept."""
        self._underlying.close()


__all__ = ["AuthorizedTransport", "AUTHORIZATION_HEADER"]
