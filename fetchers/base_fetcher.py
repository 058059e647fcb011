"""Fetcher error taxonomy shared by block tree fetchers."""

from typing import Optional


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class TokenInvalidError(FetcherError):
    """The access token was rejected by the API."""

    def __init__(self, message: str = "token is invalid"):
        super().__init__(message)


class PermissionDeniedError(FetcherError):
    """The token may not read a block."""

    def __init__(self, block_id: str):
        super().__init__(f"failed to get content of block {block_id}: permission denied")
        self.block_id = block_id


class UnknownFetchError(FetcherError):
    """Any fetch failure that is neither an auth problem nor a rate limit."""

    def __init__(self, block_id: str, cause: Optional[BaseException] = None):
        super().__init__(f"failed to get content of block {block_id}: {cause}")
        self.block_id = block_id
        self.cause = cause


class RateLimitExceededError(UnknownFetchError):
    """The configured number of rate-limit retries ran out."""

    def __init__(self, block_id: str, attempts: int):
        super().__init__(block_id, f"API rate limit still exceeded after {attempts} attempts")
        self.attempts = attempts


__all__ = [
    'FetcherError',
    'TokenInvalidError',
    'PermissionDeniedError',
    'UnknownFetchError',
    'RateLimitExceededError'
]
