"""Pytest configuration and shared fixtures for the llmdocs test suite.

This module provides shared fixtures and test configuration used across
the unit, integration and property-based tests.
"""

import logging
import os
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings

from llmdocs import HTMLToMarkdown, HtmlToMarkdownOptions
from llmdocs.logging_utils import PACKAGE_LOGGER_NAME

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "property: Property-based tests driven by Hypothesis")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def converter() -> HTMLToMarkdown:
    """Converter with default options."""
    return HTMLToMarkdown()


@pytest.fixture
def make_converter():
    """Factory building a converter from option keyword arguments."""

    def _make(**kwargs) -> HTMLToMarkdown:
        return HTMLToMarkdown(HtmlToMarkdownOptions(**kwargs))

    return _make


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Detach handlers installed by the CLI so they never outlive a captured stream."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
