"""
Tests for the configuration-based logging setup.
Covers level mapping and fallback behavior.
"""

import logging

import pytest

from realments.config_loader import configure_logging, get_logging_level


@pytest.mark.parametrize("level_str", ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
def test_logging_levels(level_str):
    """Test that each configured level maps to its logging constant."""
    assert get_logging_level(level_str) == getattr(logging, level_str)


def test_level_is_case_insensitive():
    assert get_logging_level('debug') == logging.DEBUG


def test_unknown_level_falls_back_to_info():
    assert get_logging_level('VERBOSE') == logging.INFO
    assert get_logging_level(None) == logging.INFO


def test_configure_logging_returns_applied_level():
    level = configure_logging({'logging': {'level': 'WARNING', 'format': '%(message)s'}})
    assert level == logging.WARNING


def test_configure_logging_without_section():
    """Test that a config without a logging section uses INFO."""
    assert configure_logging({}) == logging.INFO
