"""
Shared pytest fixtures for the fixtureloader test suite.

Provides:
- Loguru to pytest ``caplog`` bridging so tests can assert on log output
- Helpers that lay out fixture directories on disk
- Isolated format provider and data source registries
"""

import contextlib
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
from loguru import logger

from fixtureloader import (
    Configuration,
    ConventionDataSetLoader,
    ConventionSettings,
    DataSourceRegistry,
    FormatProviderRegistry,
)
from fixtureloader.dataset.delimited import CsvFormatProvider, TsvFormatProvider


# ============================================================================
# LOGURU INTEGRATION
# ============================================================================

@pytest.fixture(autouse=True, scope="function")
def capture_loguru_logs_globally(caplog):
    """Route Loguru records into pytest's caplog for the duration of a test."""

    class PropagateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name or "fixtureloader").handle(record)

    caplog.set_level(logging.DEBUG)
    handler_id = logger.add(
        PropagateHandler(),
        format="{message}",
        level="DEBUG",
        enqueue=False,
    )

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


# ============================================================================
# FIXTURE DIRECTORY HELPERS
# ============================================================================

@pytest.fixture
def write_tables() -> Callable[..., Path]:
    """
    Write data files into a directory.

    Usage:
        write_tables(tmp_path / "UserTest", {"USERS.csv": "ID,NAME\\n1,alice\\n"})
    """

    def _write(directory: Path, files: Dict[str, str], ordering: Optional[str] = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        for file_name, content in files.items():
            (directory / file_name).write_text(content, encoding="utf-8")
        if ordering is not None:
            (directory / "table-ordering.txt").write_text(ordering, encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def users_csv() -> str:
    return "[Scenario],ID,NAME\na,1,alice\nb,2,bob\n"


# ============================================================================
# REGISTRIES AND CONFIGURATION
# ============================================================================

@pytest.fixture
def format_registry() -> FormatProviderRegistry:
    """Registry holding the built-in providers only, without plugin discovery."""
    return FormatProviderRegistry([CsvFormatProvider(), TsvFormatProvider()])


@pytest.fixture
def data_source() -> object:
    return object()


@pytest.fixture
def data_sources(data_source) -> DataSourceRegistry:
    registry = DataSourceRegistry()
    registry.register_default(data_source)
    return registry


@pytest.fixture
def make_configuration(format_registry) -> Callable[..., Configuration]:
    """Build a Configuration rooted at a base directory, using the isolated registry."""

    def _make(base_directory: Optional[Path] = None, **conventions) -> Configuration:
        settings = ConventionSettings(base_directory=base_directory, **conventions)
        return Configuration(conventions=settings, loader=ConventionDataSetLoader(format_registry))

    return _make
