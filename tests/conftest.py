"""Pytest configuration and fixtures."""

import os

import pytest

from nibs import Nibs


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--fast",
        action="store_true",
        default=False,
        help="Skip slow tests (multi-megabyte random streams)",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests when --fast flag is used."""
    if config.getoption("--fast"):
        skip_slow = pytest.mark.skip(reason="skipped with --fast flag")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture()
def random_bytes():
    """Factory for random test payloads."""
    return os.urandom


@pytest.fixture()
def reader_for():
    """Factory building a reader over in-memory bytes."""

    def make(data: bytes, buffer_size: int = 64) -> Nibs:
        return Nibs.from_bytes(data, buffer_size)

    return make
