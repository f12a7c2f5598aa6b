"""Request cloning for header decoration."""

import copy

from requests import PreparedRequest
from requests.structures import CaseInsensitiveDict


def clone_request(request: PreparedRequest) -> PreparedRequest:
    """
    Return a clone of a prepared request that is safe to decorate.

    The clone is a shallow copy of the request with its own header mapping,
    so setting a header on it never changes the caller's request. Body,
    hooks and cookies are shared with the original.
    """
    clone = copy.copy(request)
    clone.headers = CaseInsensitiveDict(request.headers or {})
    return clone


__all__ = ["clone_request"]
