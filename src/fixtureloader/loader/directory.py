"""
Convention-based fixture directory resolution.

A test ``TestUsers.test_create`` defined in module ``tests.service.test_users``
reads its datasets from::

    <root>/tests/service/test_users/TestUsers/            (preparation)
    <root>/tests/service/test_users/TestUsers/expected/   (expectation)

``<root>`` is ``conventions.base_directory`` when configured, otherwise the
directory the test module's top-level package is imported from.
"""

import sys
from pathlib import Path
from typing import FrozenSet, Optional

from loguru import logger

from fixtureloader.config import ConventionSettings
from fixtureloader.domain import FileExtension
from fixtureloader.exceptions import ConfigError, LoadError

RESOURCE_PREFIX = "resource:"


def module_import_root(module_name: str) -> Path:
    """
    Directory from which ``module_name`` was imported.

    Raises:
        ConfigError: If the module is not loaded from a file
    """
    module = sys.modules.get(module_name)
    module_file = getattr(module, "__file__", None)
    if module_file is None:
        raise ConfigError(
            f"Cannot determine the import root of module {module_name!r}. "
            "Set conventions.base_directory to locate fixture directories.",
            error_code="CONFIG_001",
            context={'module': module_name},
        )
    path = Path(module_file).resolve()
    depth = module_name.count(".")
    if path.stem == "__init__":
        depth += 1
    return path.parents[depth]


def supported_extension_of(file_name: str, supported: FrozenSet[str]) -> Optional[FileExtension]:
    """The extension of ``file_name`` if it is supported, matched case-sensitively."""
    suffix = FileExtension.raw_suffix(file_name)
    if suffix is None or suffix not in supported:
        return None
    return FileExtension(suffix)


class DirectoryResolver:
    """
    Resolves and validates fixture directories for one test.

    Args:
        test_module: Dotted module name of the test
        test_class_name: Name of the test class, None for module-level tests
        conventions: Directory conventions in effect
        registry: Format provider registry used to recognize data files
    """

    def __init__(self, test_module: str, test_class_name: Optional[str], conventions: ConventionSettings, registry):
        self.test_module = test_module
        self.test_class_name = test_class_name
        self.conventions = conventions
        self.registry = registry

    @classmethod
    def for_context(cls, context, registry) -> 'DirectoryResolver':
        test_class_name = context.test_class.__name__ if context.test_class is not None else None
        return cls(context.test_module, test_class_name, context.configuration.conventions, registry)

    @property
    def base_root(self) -> Path:
        if self.conventions.base_directory is not None:
            return Path(self.conventions.base_directory)
        return module_import_root(self.test_module)

    def convention_directory(self) -> Path:
        directory = self.base_root.joinpath(*self.test_module.split("."))
        if self.test_class_name:
            directory = directory / self.test_class_name
        return directory

    def resolve_directory(self, resource_location: Optional[str] = None, suffix: Optional[str] = None) -> Path:
        """
        Directory to read.

        A non-empty ``resource_location`` is used as-is. Otherwise the
        convention directory is used, with ``suffix`` appended verbatim.

        Raises:
            LoadError: If the directory is missing or is not a directory
        """
        if resource_location:
            location = self._location_path(resource_location)
        else:
            location = self.convention_directory()
            if suffix:
                location = Path(f"{location}{suffix}")

        logger.debug(f"Resolved fixture directory for {self.test_module}: {location}")
        return self._existing_directory(location, resource_location)

    def _location_path(self, resource_location: str) -> Path:
        if resource_location.startswith(RESOURCE_PREFIX):
            relative = resource_location[len(RESOURCE_PREFIX):].lstrip("/")
            return self.base_root / relative
        return Path(resource_location)

    def _existing_directory(self, location: Path, resource_location: Optional[str]) -> Path:
        if not location.exists():
            hint = (
                "Create the directory and add dataset files (for example, TABLE_NAME.csv), "
                "or declare DataSetDeclaration(resource_location=...) to use a custom location."
                if resource_location is None
                else "Create the directory and add dataset files, or verify the path is correct."
            )
            raise LoadError(
                f"Dataset directory does not exist: '{location}'\nHint: {hint}",
                error_code="LOAD_001",
                context={'directory': location, 'resource_location': resource_location},
            )
        if not location.is_dir():
            raise LoadError(
                f"Path exists but is not a directory: '{location}'\n"
                "Hint: Ensure the path points to a directory, not a file.",
                error_code="LOAD_002",
                context={'directory': location},
            )
        return location

    def validate_directory_contains_supported_files(self, directory: Path) -> None:
        """
        Raises:
            ConfigError: If no format providers are registered
            LoadError: If the directory holds no file with a supported extension
        """
        supported = self.registry.supported_extensions()
        if not supported:
            raise ConfigError(
                "No dataset format providers are registered. "
                "Register a DataSetFormatProvider before loading datasets.",
                error_code="CONFIG_006",
            )
        try:
            has_supported_files = any(
                path.is_file() and supported_extension_of(path.name, supported) is not None
                for path in directory.iterdir()
            )
        except OSError as e:
            raise LoadError(
                f"Failed to list files in directory: {directory}",
                error_code="LOAD_003",
                context={'directory': directory},
            ) from e

        if not has_supported_files:
            ordered = sorted(supported)
            raise LoadError(
                f"Dataset directory exists but contains no supported data files: '{directory.absolute()}'\n"
                f"Supported file extensions: {ordered}\n"
                f"Hint: Add at least one data file (for example, TABLE_NAME{ordered[0]}) to this directory, "
                "or register a format provider for the desired file extension.",
                error_code="LOAD_004",
                context={'directory': directory, 'supported_extensions': ordered},
            )
