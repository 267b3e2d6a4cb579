"""
fixtureloader - Scenario-aware database fixture loading.

Loads tabular fixtures from flat files laid out by convention, filters rows by
scenario, guarantees a deterministic table order and exposes the result through
a library-agnostic Dataset / Table / Row abstraction.

This module also owns the Loguru configuration used across the package. Logging
is test-configurable: under pytest no sinks are installed on import, so test
suites can attach their own sinks (see ``configure_test_logging``).
"""

__version__ = "0.1.0"

import os
import sys
import warnings
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

from loguru import logger


# --- Logger Configuration Classes and Types ---

class LoggingConfigError(Exception):
    """Raised when logging configuration fails validation or setup."""
    pass


class LoggerState:
    """
    Tracks the sinks installed by this package so they can be reset.

    Tests use this to isolate logger state between cases.
    """

    def __init__(self):
        self._initialized = False
        self._test_mode = False
        self._sink_ids = []

    def is_initialized(self) -> bool:
        """Check if logger has been initialized."""
        return self._initialized

    def is_test_mode(self) -> bool:
        """Check if logger is in test mode."""
        return self._test_mode

    def mark_initialized(self, test_mode: bool = False):
        """Mark logger as initialized."""
        self._initialized = True
        self._test_mode = test_mode

    def add_sink_id(self, sink_id: int):
        """Track sink IDs for cleanup."""
        self._sink_ids.append(sink_id)

    @property
    def sink_ids(self):
        return list(self._sink_ids)

    def reset(self):
        """Reset logger state for test isolation."""
        self._initialized = False
        self._test_mode = False
        self._sink_ids.clear()


_logger_state = LoggerState()


# --- Configuration Validation Functions ---

def validate_log_level(level: str) -> str:
    """
    Validate a Loguru log level name.

    Args:
        level: Log level string to validate

    Returns:
        Upper-cased log level

    Raises:
        LoggingConfigError: If log level is invalid
    """
    valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
    level_upper = level.upper()

    if level_upper not in valid_levels:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(sorted(valid_levels))}"
        )

    return level_upper


# --- Core Logging Configuration Functions ---

def configure_console_logging(
    level: str = "INFO",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Add a console sink.

    Args:
        level: Log level for console output
        format_template: Custom format template (uses default if None)
        colorize: Enable colored console output
        destination: Console destination (default: sys.stderr)

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)

        if format_template is None:
            format_template = (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
            )

        sink_id = logger.add(
            destination,
            level=validated_level,
            format=format_template,
            colorize=colorize
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure console logging: {e}") from e


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    format_template: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """
    Add a rotating file sink.

    Args:
        log_file_path: Path to log file
        level: Log level for file output
        rotation: Log rotation setting
        retention: Log retention setting
        format_template: Custom format template (uses default if None)
        encoding: File encoding

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if format_template is None:
            format_template = (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} - {message}"
            )

        sink_id = logger.add(
            str(path),
            rotation=rotation,
            retention=retention,
            level=validated_level,
            format=format_template,
            encoding=encoding
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure file logging: {e}") from e


# --- Test-Specific Entry Points ---

def configure_test_logging(
    console_level: str = "DEBUG",
    console_destination: Optional[TextIO] = None,
    file_destination: Optional[Union[str, Path]] = None,
) -> Dict[str, int]:
    """
    Configure logging for test runs: uncolored console sink, optional file sink.

    Returns:
        Dictionary mapping sink types to sink IDs
    """
    reset_logging()

    sink_ids = {}
    sink_ids['console'] = configure_console_logging(
        level=console_level,
        destination=console_destination if console_destination is not None else sys.stderr,
        colorize=False,
    )

    if file_destination:
        sink_ids['file'] = configure_file_logging(log_file_path=file_destination)

    _logger_state.mark_initialized(test_mode=True)
    return sink_ids


def reset_logging():
    """
    Remove every Loguru sink and forget tracked state.

    Raises:
        LoggingConfigError: If reset fails
    """
    try:
        logger.remove()
        _logger_state.reset()
    except Exception as e:
        raise LoggingConfigError(f"Failed to reset logging configuration: {e}") from e


# --- Production Logging Initialization ---

def _default_log_directory() -> Path:
    override = os.environ.get("FIXTURELOADER_LOG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".fixtureloader" / "logs"


def initialize_production_logging(
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    log_dir: Optional[Union[str, Path]] = None,
) -> Dict[str, int]:
    """
    Install the default console and file sinks.

    Args:
        console_level: Console logging level
        file_level: File logging level
        log_dir: Directory for log files (``~/.fixtureloader/logs`` if None)

    Returns:
        Dictionary mapping sink types to sink IDs

    Raises:
        LoggingConfigError: If initialization fails
    """
    logger.remove()

    sink_ids = {}
    sink_ids['console'] = configure_console_logging(level=console_level)

    directory = Path(log_dir) if log_dir is not None else _default_log_directory()
    sink_ids['file'] = configure_file_logging(
        log_file_path=directory / "fixtureloader_{time:YYYYMMDD}.log",
        level=file_level,
    )

    _logger_state.mark_initialized(test_mode=False)
    logger.debug("--- fixtureloader logger initialized ---")
    return sink_ids


# --- Module-Level Logger State Access ---

def get_logger_state() -> LoggerState:
    """Get current logger state for test inspection."""
    return _logger_state


def is_logging_initialized() -> bool:
    return _logger_state.is_initialized()


def is_test_mode() -> bool:
    return _logger_state.is_test_mode()


def _is_pytest_running() -> bool:
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


def _auto_initialize_logging():
    """Install production sinks unless already configured or running under pytest."""
    if _logger_state.is_initialized() or _is_pytest_running():
        return
    try:
        initialize_production_logging()
    except LoggingConfigError as e:
        warnings.warn(f"Failed to initialize production logging: {e}. Using basic stderr logging.")
        logger.add(sys.stderr, level="WARNING")
        _logger_state.mark_initialized(test_mode=False)


_auto_initialize_logging()

# --- End Logger Configuration ---


from fixtureloader.exceptions import (  # noqa: E402
    ConfigError,
    DataSourceNotFoundError,
    FixtureLoaderError,
    LoadError,
    ValidationError,
)
from fixtureloader.domain import (  # noqa: E402
    ColumnName,
    DataSourceName,
    DataValue,
    FileExtension,
    ScenarioMarker,
    ScenarioName,
    SchemaName,
    TableName,
)
from fixtureloader.dataset import (  # noqa: E402
    Dataset,
    Row,
    ScenarioDataset,
    ScenarioTable,
    Table,
    TableOrderingResolver,
)
from fixtureloader.registries import (  # noqa: E402
    DataSetFormatProvider,
    FormatProviderRegistry,
    create_default_registry,
)
from fixtureloader.config import (  # noqa: E402
    Configuration,
    ConventionSettings,
    DataSourceRegistry,
    load_configuration,
)
from fixtureloader.loader import (  # noqa: E402
    ConventionDataSetLoader,
    DataSetDeclaration,
    DataSetLoader,
    Expectation,
    Phase,
    Preparation,
    TestContext,
    expectation,
    preparation,
)

__all__ = [
    "__version__",
    "logger",
    "LoggingConfigError",
    "configure_console_logging",
    "configure_file_logging",
    "configure_test_logging",
    "reset_logging",
    "initialize_production_logging",
    "get_logger_state",
    "is_logging_initialized",
    "is_test_mode",
    # errors
    "FixtureLoaderError",
    "ConfigError",
    "LoadError",
    "ValidationError",
    "DataSourceNotFoundError",
    # domain
    "ColumnName",
    "DataSourceName",
    "DataValue",
    "FileExtension",
    "ScenarioMarker",
    "ScenarioName",
    "SchemaName",
    "TableName",
    # datasets
    "Dataset",
    "Row",
    "Table",
    "ScenarioDataset",
    "ScenarioTable",
    "TableOrderingResolver",
    # registry
    "DataSetFormatProvider",
    "FormatProviderRegistry",
    "create_default_registry",
    # configuration
    "Configuration",
    "ConventionSettings",
    "DataSourceRegistry",
    "load_configuration",
    # loading
    "ConventionDataSetLoader",
    "DataSetDeclaration",
    "DataSetLoader",
    "Expectation",
    "Phase",
    "Preparation",
    "TestContext",
    "expectation",
    "preparation",
]
