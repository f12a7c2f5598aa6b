"""Token fetcher implementations."""

from authtransport.oauth2.fetchers.base import TokenFetcher
from authtransport.oauth2.fetchers.file import FileTokenFetcher
from authtransport.oauth2.fetchers.function import CallableTokenFetcher

__all__ = ["TokenFetcher", "CallableTokenFetcher", "FileTokenFetcher"]
