"""
Durable Store Module - Key-Value Snapshot Storage

Synchronous key-value backends for the cart snapshot:
- MemoryStore: process memory (tests, throwaway sessions)
- FileStore: one file per key in a local directory
- RedisStore: Upstash Redis over REST
"""

import os
import tempfile
from hashlib import sha256
from pathlib import Path
from typing import Optional, Protocol

from upstash_redis import Redis

from rocketcart.errors import StorageError
from rocketcart.logging import get_logger

logger = get_logger(__name__)


class StorageKeys:
    """Persisted key names."""

    # Namespaced the same way the web storefront namespaces localStorage,
    # so snapshots written by either side are interchangeable
    CART = "@RocketShoes:cart"


class DurableStore(Protocol):
    """Key-value primitive the cart is mirrored to."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """
    Stores each key in its own file under `directory`.

    Key names may contain characters that are not valid in file names
    ("@", ":"), so files are named after the key's SHA-256 digest.
    Writes go to a temporary file first and are moved into place with
    os.replace, so a crash never leaves a half-written snapshot.
    """

    def __init__(self, directory: str | os.PathLike):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{sha256(key.encode('utf-8')).hexdigest()}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e


class RedisStore:
    """
    Upstash Redis store.

    Uses the standard Upstash env var names via Settings:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """

    def __init__(self, url: str = "", token: str = "", client: Optional[Redis] = None):
        if client is None:
            if not url or not token:
                raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
            client = Redis(url=url, token=token)
        self._redis = client

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._redis.get(key)
        except Exception as e:
            raise StorageError(f"Redis GET failed: {e}") from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis SET failed: {e}") from e


def create_store(settings) -> DurableStore:
    """
    Build the durable store selected by settings.storage_backend.

    Args:
        settings: rocketcart.config.Settings

    Returns:
        A DurableStore implementation
    """
    backend = settings.storage_backend
    if backend == "memory":
        logger.warning("Using in-memory cart storage; the cart will not survive restarts")
        return MemoryStore()
    if backend == "file":
        return FileStore(settings.storage_dir)
    if backend == "redis":
        return RedisStore(url=settings.redis_url, token=settings.redis_token)
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = [
    "StorageKeys",
    "DurableStore",
    "MemoryStore",
    "FileStore",
    "RedisStore",
    "create_store",
]
