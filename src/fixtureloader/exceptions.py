"""
fixtureloader exception hierarchy.

Every error raised by the package derives from ``FixtureLoaderError`` and
carries an error code for programmatic handling plus a context dictionary that
names the offending path, table or extension:

- FixtureLoaderError: base exception
- ConfigError: missing format provider, plugin instantiation, invalid configuration
- LoadError: missing/unreadable directories, absent data files, parse failures
- ValidationError: identifier invariant violations
- DataSourceNotFoundError: data source name without a registration

Errors are fail-fast. A failure while resolving one declared dataset aborts
the whole phase, since partially applied fixtures leave the database in an
undefined state.

Usage Examples:
    >>> try:
    ...     registry.get_provider(".xml")
    ... except ConfigError as e:
    ...     print(e.context["registered_extensions"])

    >>> raise LoadError("Failed to parse table").with_context({
    ...     "file_path": "/fixtures/UserTest/USERS.csv",
    ... })
"""

from pathlib import Path
from typing import Any, Dict, Optional


class FixtureLoaderError(Exception):
    """
    Base exception class for all fixtureloader errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        FIXTURE_001: Generic fixtureloader error
        FIXTURE_002: Unexpected internal error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "FIXTURE_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context) if context else {}
        for key, value in list(self.context.items()):
            if isinstance(value, Path):
                self.context[key] = str(value)

    def with_context(self, context: Dict[str, Any]) -> 'FixtureLoaderError':
        """
        Add context to the exception and return self for chaining.

        Example:
            >>> raise FixtureLoaderError("Operation failed").with_context({
            ...     "directory": "/fixtures/UserTest",
            ... })
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


class ConfigError(FixtureLoaderError):
    """
    Configuration and setup errors.

    Raised during setup or resolution, e.g. when no format provider is
    registered for an extension. Provider lookups include the currently
    registered extensions under ``registered_extensions``.

    Error Codes:
        CONFIG_001: Invalid configuration value
        CONFIG_002: Configuration file not found
        CONFIG_003: Configuration file could not be parsed
        CONFIG_004: No format provider registered for extension
        CONFIG_005: Format provider plugin could not be instantiated
        CONFIG_006: No format providers registered at all
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)
        if 'registered_extensions' in self.context:
            self.context['registered_extensions'] = sorted(self.context['registered_extensions'])


class LoadError(FixtureLoaderError):
    """
    Dataset loading errors.

    Always chained (``raise ... from``) to the underlying cause when there is one.

    Error Codes:
        LOAD_001: Directory not found
        LOAD_002: Path is not a directory
        LOAD_003: Directory could not be listed
        LOAD_004: No supported data files in directory
        LOAD_005: Ordering manifest could not be written or read
        LOAD_006: Data file could not be parsed
        LOAD_007: Tabular backend failed while reading metadata or values
    """

    def __init__(
        self,
        message: str,
        error_code: str = "LOAD_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class ValidationError(FixtureLoaderError, ValueError):
    """
    Identifier or value validation errors.

    Error Codes:
        VALIDATION_001: Identifier is blank
        VALIDATION_002: Invalid file extension
        VALIDATION_003: Identifier has the wrong type
    """

    def __init__(
        self,
        message: str,
        error_code: str = "VALIDATION_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class DataSourceNotFoundError(FixtureLoaderError):
    """
    Raised when a declared data source name has no registration.

    Error Codes:
        DATASOURCE_001: Named data source not registered
        DATASOURCE_002: No default data source registered
    """

    def __init__(
        self,
        message: str,
        error_code: str = "DATASOURCE_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


__all__ = [
    'FixtureLoaderError',
    'ConfigError',
    'LoadError',
    'ValidationError',
    'DataSourceNotFoundError',
]
