"""mediagate/client/__init__.py - public API of the client package."""

from mediagate.client.api_client import ApiClient, Navigator, RequestAttempt
from mediagate.client.session import (
    AuthSession,
    InMemoryTokenStore,
    JsonFileTokenStore,
    TokenStore,
)

__all__ = [
    "ApiClient",
    "Navigator",
    "RequestAttempt",
    "AuthSession",
    "TokenStore",
    "InMemoryTokenStore",
    "JsonFileTokenStore",
]
