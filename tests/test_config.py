"""Tests for environment settings"""
import pytest

from rocketcart.config import Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.inventory_api_url == "http://localhost:3333"
    assert settings.inventory_timeout == 10.0
    assert settings.storage_backend == "file"
    assert settings.storage_key == "@RocketShoes:cart"
    assert settings.language == "pt"
    assert settings.serialize_mutations is True


def test_from_env():
    settings = Settings.from_env({
        "INVENTORY_API_URL": "https://api.rocketshoes.test",
        "INVENTORY_TIMEOUT": "2.5",
        "CART_STORAGE_BACKEND": "REDIS",
        "UPSTASH_REDIS_REST_URL": "https://example.upstash.io",
        "UPSTASH_REDIS_REST_TOKEN": "token",
        "CART_STORAGE_KEY": "@Store:cart",
        "CART_LANGUAGE": "en-US",
        "CART_SERIALIZE_MUTATIONS": "off",
    })

    assert settings.inventory_api_url == "https://api.rocketshoes.test"
    assert settings.inventory_timeout == 2.5
    assert settings.storage_backend == "redis"
    assert settings.storage_key == "@Store:cart"
    assert settings.language == "en"
    assert settings.serialize_mutations is False


@pytest.mark.parametrize("env", [
    {"CART_STORAGE_BACKEND": "sqlite"},
    {"INVENTORY_TIMEOUT": "soon"},
    {"INVENTORY_TIMEOUT": "0"},
    {"CART_STORAGE_KEY": ""},
    {"CART_SERIALIZE_MUTATIONS": "maybe"},
    {"CART_STORAGE_BACKEND": "redis"},
])
def test_invalid_values(env):
    with pytest.raises(ValueError):
        Settings.from_env(env)
