"""
Configuration - Environment Settings

All settings come from environment variables:
- INVENTORY_API_URL / INVENTORY_TIMEOUT: remote stock and catalog service
- CART_STORAGE_BACKEND / CART_STORAGE_DIR / CART_STORAGE_KEY: durable cart snapshot
- UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN: redis backend credentials
- CART_LANGUAGE: language of toast messages
- CART_SERIALIZE_MUTATIONS: run cart mutations one at a time
"""

import os
from dataclasses import dataclass
from functools import cache

from rocketcart.db import StorageKeys
from rocketcart.i18n import DEFAULT_LANGUAGE, detect_language

STORAGE_BACKENDS = ("memory", "file", "redis")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the cart store and its collaborators."""
    inventory_api_url: str = "http://localhost:3333"
    inventory_timeout: float = 10.0
    storage_backend: str = "file"
    storage_dir: str = ".rocketcart"
    storage_key: str = StorageKeys.CART
    redis_url: str = ""
    redis_token: str = ""
    language: str = DEFAULT_LANGUAGE
    serialize_mutations: bool = True

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"CART_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}"
            )
        if self.inventory_timeout <= 0:
            raise ValueError("INVENTORY_TIMEOUT must be positive")
        if not self.storage_key:
            raise ValueError("CART_STORAGE_KEY must not be empty")
        if self.storage_backend == "redis" and not (self.redis_url and self.redis_token):
            raise ValueError(
                "UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set "
                "for the redis storage backend"
            )

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ

        raw_timeout = env.get("INVENTORY_TIMEOUT", "10.0")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"INVENTORY_TIMEOUT must be a number, got {raw_timeout!r}")

        return cls(
            inventory_api_url=env.get("INVENTORY_API_URL", cls.inventory_api_url),
            inventory_timeout=timeout,
            storage_backend=env.get("CART_STORAGE_BACKEND", cls.storage_backend).lower(),
            storage_dir=env.get("CART_STORAGE_DIR", cls.storage_dir),
            storage_key=env.get("CART_STORAGE_KEY", cls.storage_key),
            redis_url=env.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=env.get("UPSTASH_REDIS_REST_TOKEN", ""),
            language=detect_language(env.get("CART_LANGUAGE")),
            serialize_mutations=_parse_bool(
                "CART_SERIALIZE_MUTATIONS", env.get("CART_SERIALIZE_MUTATIONS", "true")
            ),
        )


@cache
def get_settings() -> Settings:
    """Get process-wide settings (read from the environment once)."""
    return Settings.from_env()


__all__ = ["STORAGE_BACKENDS", "Settings", "get_settings"]
