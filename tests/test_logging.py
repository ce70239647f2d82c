"""Tests for logging helpers"""
import logging

from rocketcart.logging import get_logger, sanitize_id_for_logging


def test_get_logger_is_cached():
    assert get_logger("rocketcart.test") is get_logger("rocketcart.test")
    assert isinstance(get_logger("rocketcart.test"), logging.Logger)


def test_sanitize_id_escapes_newlines():
    assert sanitize_id_for_logging("1\nERROR fake") == "1\\nERROR fake"


def test_sanitize_id_truncates():
    assert sanitize_id_for_logging("x" * 40) == "x" * 16


def test_sanitize_id_empty():
    assert sanitize_id_for_logging(None) == "N/A"
    assert sanitize_id_for_logging("") == "N/A"
    assert sanitize_id_for_logging(0) == "0"


def test_sanitize_id_escapes_before_truncating():
    assert sanitize_id_for_logging("\t" * 10) == "\\t" * 8
