"""requests.Session wiring for the authorized transport."""

import logging
from collections.abc import Iterable

import requests

from authtransport.oauth2.exceptions import InvalidConfigurationError
from authtransport.transport.authorized import AuthorizedTransport

logger = logging.getLogger(__name__)

DEFAULT_MOUNT_PREFIXES = ("https://", "http://")


def build_authorized_session(
    transport: AuthorizedTransport,
    prefixes: Iterable[str] = DEFAULT_MOUNT_PREFIXES,
) -> requests.Session:
    """
    Create a session that sends every matching request through the transport.

    Args:
        transport: Authorized transport to mount
        prefixes: URL prefixes to mount it on

    Returns:
        Configured requests.Session

    Raises:
        InvalidConfigurationError: If no prefixes are given
    """
    prefixes = list(prefixes)
    if not prefixes:
        raise InvalidConfigurationError("At least one mount prefix is required")

    session = requests.Session()
    for prefix in prefixes:
        session.mount(prefix, transport)

    logger.debug("Mounted authorized transport", extra={"prefixes": prefixes})
    return session


__all__ = ["build_authorized_session", "DEFAULT_MOUNT_PREFIXES"]
