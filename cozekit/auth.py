"""Credentials that supply the bearer token sent with every API request."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Auth(ABC):
    """Source of access tokens for the API."""

    @abstractmethod
    def token(self) -> str:
        """Return the access token to send with the next request."""


class TokenAuth(Auth):
    """Authentication with a fixed, pre-issued access token."""

    def __init__(self, access_token: str) -> None:
        self._access_token = access_token

    def token(self) -> str:
        return self._access_token

    def __repr__(self) -> str:
        return f"{type(self).__name__}(access_token=***)"


def get_refresh_before(ttl: int) -> int:
    """Seconds before expiry at which a token with the given TTL is refreshed."""
    if ttl >= 600:
        return 30
    if ttl >= 60:
        return 10
    if ttl >= 30:
        return 5
    return 0