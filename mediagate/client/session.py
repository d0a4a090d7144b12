"""
mediagate/client/session.py

Client-side session credentials and where they are kept.

AuthSession is the only reader/writer of the two token slots; the storage
itself is pluggable so tests use InMemoryTokenStore while a desktop or CLI
client can persist to disk with JsonFileTokenStore.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from mediagate.core.constants import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY
from mediagate.core.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TokenStore(Protocol):
    """String key/value storage for session tokens."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self, key: str) -> None:
        ...


class InMemoryTokenStore:
    """Process-local storage; lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def clear(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileTokenStore:
    """
    Storage backed by a small JSON object on disk.

    The file is re-read on every access so several clients sharing one
    file see each other's refreshes.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Token file '%s' is corrupt - treating as empty.", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def clear(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class AuthSession:
    """
    Access/refresh token pair for one signed-in user.

    Lifecycle: ``start`` at login, ``replace_access_token`` on refresh,
    ``clear`` on logout or when a refresh fails.
    """

    def __init__(self, store: TokenStore | None = None) -> None:
        self._store: TokenStore = store if store is not None else InMemoryTokenStore()

    @property
    def access_token(self) -> Optional[str]:
        return self._store.get(ACCESS_TOKEN_KEY)

    @property
    def refresh_token(self) -> Optional[str]:
        return self._store.get(REFRESH_TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def start(self, access_token: str, refresh_token: str) -> None:
        self._store.set(ACCESS_TOKEN_KEY, access_token)
        self._store.set(REFRESH_TOKEN_KEY, refresh_token)

    def replace_access_token(self, access_token: str) -> None:
        self._store.set(ACCESS_TOKEN_KEY, access_token)

    def clear(self) -> None:
        self._store.clear(ACCESS_TOKEN_KEY)
        self._store.clear(REFRESH_TOKEN_KEY)
        logger.info("Session cleared.")
