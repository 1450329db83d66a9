"""Pytest configuration and shared fixtures for the html2gmi test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest
from bs4 import BeautifulSoup

from html2gmi import GemtextOptions, HtmlToGemtextConverter


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def soup() -> Callable[[str], BeautifulSoup]:
    """Provide a helper that parses an HTML snippet with the built-in parser."""

    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _parse


@pytest.fixture
def gemtext() -> Callable[..., str]:
    """Provide a helper converting an HTML snippet straight to Gemtext.

    Keyword arguments other than ``base_url`` are passed to GemtextOptions.
    """

    def _convert(html: str, base_url: str | None = None, **option_kwargs) -> str:
        converter = HtmlToGemtextConverter(GemtextOptions(**option_kwargs))
        return converter.convert(BeautifulSoup(html, "html.parser"), base_url).gemtext

    return _convert


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the HTML fixture documents."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        yield
    finally:
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
