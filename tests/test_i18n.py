"""Tests for i18n translations"""
import pytest

from rocketcart.errors import CartError
from rocketcart.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, detect_language, get_text


PT_MESSAGES = {
    CartError.ADD_PRODUCT_FAILED: "Erro na adição do produto",
    CartError.REMOVE_PRODUCT_FAILED: "Erro na remoção do produto",
    CartError.UPDATE_AMOUNT_FAILED: "Erro na alteração de quantidade do produto",
    CartError.INSUFFICIENT_STOCK: "Quantidade solicitada fora de estoque",
}


@pytest.mark.parametrize("category,message", list(PT_MESSAGES.items()))
def test_portuguese_messages(category, message):
    """The Portuguese toast texts are shown verbatim to shoppers."""
    assert get_text(category.value, "pt") == message


def test_default_language_is_portuguese():
    assert DEFAULT_LANGUAGE == "pt"
    assert get_text(CartError.ADD_PRODUCT_FAILED.value) == "Erro na adição do produto"


def test_every_category_translated_in_all_languages():
    for lang in SUPPORTED_LANGUAGES:
        for category in CartError:
            text = get_text(category.value, lang)
            assert text != category.value


def test_region_code_is_normalized():
    assert get_text(CartError.INSUFFICIENT_STOCK.value, "pt-BR") == "Quantidade solicitada fora de estoque"
    assert get_text(CartError.INSUFFICIENT_STOCK.value, "en_US") == "Requested quantity is out of stock"


def test_unknown_language_falls_back_to_default():
    assert get_text(CartError.REMOVE_PRODUCT_FAILED.value, "ru") == "Erro na remoção do produto"


def test_missing_key_returns_key_or_default():
    assert get_text("cart.nope", "pt") == "cart.nope"
    assert get_text("cart.nope", "pt", default="?") == "?"


def test_section_key_is_not_text():
    assert get_text("cart", "pt") == "cart"


@pytest.mark.parametrize("code,expected", [
    (None, "pt"),
    ("", "pt"),
    ("en", "en"),
    ("EN-gb", "en"),
    ("pt_BR", "pt"),
    ("de", "pt"),
])
def test_detect_language(code, expected):
    assert detect_language(code) == expected
