"""Fetchers package for walking Wolai block trees via the open API."""

from .base_fetcher import (
    FetcherError,
    PermissionDeniedError,
    RateLimitExceededError,
    TokenInvalidError,
    UnknownFetchError
)
from .block_fetcher import BlockTreeFetcher

__all__ = [
    'FetcherError',
    'TokenInvalidError',
    'PermissionDeniedError',
    'UnknownFetchError',
    'RateLimitExceededError',
    'BlockTreeFetcher'
]
