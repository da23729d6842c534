"""Shared pytest fixtures for the site2epub test suite."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from site2epub.cache import PageCache
from tests.helpers import FakeExtractor


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_dir: Path) -> PageCache:
    return PageCache(cache_dir, logger=MagicMock())


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()
