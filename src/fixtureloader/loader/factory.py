"""Creates scenario datasets by picking the provider for a directory's data files."""

from pathlib import Path
from typing import Any, Collection, Optional

from loguru import logger

from fixtureloader.dataset.models import ScenarioDataset
from fixtureloader.domain import FileExtension, ScenarioMarker, ScenarioName
from fixtureloader.exceptions import ConfigError, LoadError
from fixtureloader.loader.directory import supported_extension_of
from fixtureloader.registries import FormatProviderRegistry


class DatasetFactory:
    """Builds a ``ScenarioDataset`` with the provider matching the directory contents."""

    def __init__(self, registry: FormatProviderRegistry):
        self.registry = registry

    def create_dataset(
        self,
        directory: Path,
        scenario_names: Collection[ScenarioName],
        scenario_marker: ScenarioMarker,
        data_source: Optional[Any] = None,
    ) -> ScenarioDataset:
        extension = self.detect_file_extension(directory)
        provider = self.registry.get_provider(extension)
        logger.debug(f"Loading {directory} with {provider!r}")
        return provider.create_dataset(directory, scenario_names, scenario_marker, data_source)

    def detect_file_extension(self, directory: Path) -> FileExtension:
        """
        First supported extension among the directory's files, sorted by name.

        Raises:
            ConfigError: If no format providers are registered
            LoadError: If the directory cannot be read or holds no supported file
        """
        supported = self.registry.supported_extensions()
        if not supported:
            raise ConfigError(
                "No dataset format providers are registered. "
                "Register a DataSetFormatProvider before loading datasets.",
                error_code="CONFIG_006",
            )
        try:
            file_names = sorted(path.name for path in Path(directory).iterdir() if path.is_file())
        except OSError as e:
            raise LoadError(
                f"Failed to read directory: {directory}. Cause: {e}",
                error_code="LOAD_003",
                context={'directory': directory},
            ) from e

        for file_name in file_names:
            extension = supported_extension_of(file_name, supported)
            if extension is not None:
                return extension

        raise LoadError(
            f"No data files with supported file extensions found in directory: {directory}. "
            f"Supported file extensions: {sorted(supported)}",
            error_code="LOAD_004",
            context={'directory': directory, 'supported_extensions': sorted(supported)},
        )
