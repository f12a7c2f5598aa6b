"""
Authorized HTTP transport.

Usage:
    from authtransport.transport import AuthorizedTransport, build_authorized_session

    transport = AuthorizedTransport(fetcher, token=initial_token)
    session = build_authorized_session(transport)
    response = session.get("https://api.example.com/me")
"""

from authtransport.transport.authorized import AUTHORIZATION_HEADER, AuthorizedTransport
from authtransport.transport.request import clone_request
from authtransport.transport.rwlock import ReadWriteLock
from authtransport.transport.session import DEFAULT_MOUNT_PREFIXES, build_authorized_session

__all__ = [
    "AuthorizedTransport",
    "AUTHORIZATION_HEADER",
    "build_authorized_session",
    "DEFAULT_MOUNT_PREFIXES",
    "clone_request",
    "ReadWriteLock",
]
