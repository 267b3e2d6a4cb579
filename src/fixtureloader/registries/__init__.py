"""
Format provider registry.

Maps a normalized file extension (``.csv``) to the provider able to turn a
fixture directory into a ``ScenarioDataset``. The registry is an ordinary
object passed to the loader rather than process-wide state, so tests can use
isolated registries side by side.

Key Features:
- Thread-safe registration and lookup guarded by a re-entrant lock
- Last registration for an extension wins
- Plugin discovery through the ``fixtureloader.format_providers`` entry-point group
- Lookup failures list every registered extension for diagnosis

Plugins declare themselves in their packaging metadata::

    [project.entry-points."fixtureloader.format_providers"]
    xlsx = "my_package.formats:XlsxFormatProvider"
"""

import importlib.metadata
import logging
import threading
from pathlib import Path
from typing import (
    Any, Collection, Dict, FrozenSet, Iterable, Optional, Protocol, Union,
    runtime_checkable
)

from fixtureloader.dataset.models import ScenarioDataset
from fixtureloader.domain import FileExtension, ScenarioMarker, ScenarioName
from fixtureloader.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "fixtureloader.format_providers"


@runtime_checkable
class DataSetFormatProvider(Protocol):
    """Protocol every format provider implements.

    Providers return tabular-abstraction types only; their parsing
    representation never leaves the provider.
    """

    @property
    def supported_file_extension(self) -> FileExtension:
        """Extension of the data files this provider reads."""
        ...

    def create_dataset(
        self,
        directory: Path,
        scenario_names: Collection[ScenarioName],
        scenario_marker: ScenarioMarker,
        data_source: Optional[Any] = None,
    ) -> ScenarioDataset:
        """Load ``directory`` filtered to ``scenario_names``.

        Raises:
            LoadError: If the directory or one of its files cannot be read
        """
        ...


def _normalize(extension: Union[str, FileExtension]) -> str:
    return extension.value if isinstance(extension, FileExtension) else FileExtension(extension).value


class FormatProviderRegistry:
    """Registry of format providers keyed by normalized file extension.

    Example:
        >>> registry = FormatProviderRegistry()
        >>> registry.register(CsvFormatProvider())
        >>> registry.get_provider("CSV").create_dataset(directory, names, marker)
    """

    def __init__(self, providers: Iterable[DataSetFormatProvider] = ()):
        self._providers: Dict[str, DataSetFormatProvider] = {}
        self._lock = threading.RLock()
        for provider in providers:
            self.register(provider)

    def register(self, provider: DataSetFormatProvider, source: str = "api") -> None:
        """Register ``provider`` for its extension, replacing any previous one.

        Raises:
            ConfigError: If ``provider`` does not implement the provider protocol
        """
        if not isinstance(provider, DataSetFormatProvider):
            error = ConfigError(
                f"Format provider {provider!r} must implement DataSetFormatProvider",
                error_code="CONFIG_005",
                context={'provider': type(provider).__name__, 'source': source},
            )
            logger.error(f"Format provider validation failed: {error}")
            raise error

        extension = _normalize(provider.supported_file_extension)
        with self._lock:
            previous = self._providers.get(extension)
            self._providers[extension] = provider
            registry_size = len(self._providers)

        action = "replaced" if previous is not None else "registered"
        logger.info(
            f"Successfully {action} format provider for {extension}",
            extra={
                'extension': extension,
                'provider_class': type(provider).__name__,
                'previous_provider': type(previous).__name__ if previous is not None else None,
                'source': source,
                'action': action,
                'registry_size': registry_size,
            }
        )

    def unregister(self, extension: Union[str, FileExtension]) -> bool:
        """Remove the provider for ``extension``; False if none was registered."""
        key = _normalize(extension)
        with self._lock:
            removed = self._providers.pop(key, None)
        if removed is None:
            logger.warning(
                f"Attempted to unregister non-existent format provider for {key}",
                extra={'extension': key, 'action': 'unregister_failed'}
            )
            return False
        logger.info(
            f"Unregistered format provider for {key}",
            extra={'extension': key, 'removed_provider': type(removed).__name__, 'action': 'unregistered'}
        )
        return True

    def get_provider(self, extension: Union[str, FileExtension]) -> DataSetFormatProvider:
        """Provider registered for ``extension``.

        Raises:
            ConfigError: If no provider is registered; the message and context
                list the registered extensions
        """
        key = _normalize(extension)
        with self._lock:
            provider = self._providers.get(key)
            registered = sorted(self._providers)
        if provider is None:
            raise ConfigError(
                f"No format provider registered for extension: {key}. "
                f"Registered extensions: {registered}",
                error_code="CONFIG_004",
                context={'extension': key, 'registered_extensions': registered},
            )
        return provider

    def supported_extensions(self) -> FrozenSet[str]:
        """Immutable snapshot of the registered extensions."""
        with self._lock:
            return frozenset(self._providers)

    def clear(self) -> None:
        with self._lock:
            cleared_count = len(self._providers)
            self._providers.clear()
        logger.info(
            f"Cleared {cleared_count} format provider(s)",
            extra={'cleared_count': cleared_count}
        )

    def __contains__(self, extension: object) -> bool:
        if not isinstance(extension, (str, FileExtension)):
            return False
        try:
            key = _normalize(extension)
        except ValueError:
            return False
        with self._lock:
            return key in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def discover_plugins(self, group: str = ENTRY_POINT_GROUP) -> int:
        """Register every provider advertised under the entry-point ``group``.

        Each entry point must reference a provider class with a no-argument
        constructor, or a provider instance.

        Returns:
            Number of providers registered

        Raises:
            ConfigError: If an entry point cannot be loaded or instantiated
        """
        logger.info(
            f"Starting format provider discovery for group {group}",
            extra={'group': group, 'discovery_phase': 'start'}
        )
        discovered_count = 0
        for entry_point in importlib.metadata.entry_points(group=group):
            provider = self._load_entry_point(entry_point)
            self.register(provider, source="entry_point")
            discovered_count += 1

        logger.info(
            f"Format provider discovery completed for group {group}",
            extra={
                'group': group,
                'discovered_count': discovered_count,
                'total_registered': len(self),
                'discovery_phase': 'complete',
            }
        )
        return discovered_count

    @staticmethod
    def _load_entry_point(entry_point: importlib.metadata.EntryPoint) -> DataSetFormatProvider:
        try:
            target = entry_point.load()
            return target() if isinstance(target, type) else target
        except Exception as e:
            raise ConfigError(
                f"Failed to instantiate format provider: {entry_point.value}. "
                "Ensure the class has a public no-argument constructor.",
                error_code="CONFIG_005",
                context={'entry_point': entry_point.name, 'target': entry_point.value},
            ) from e


def builtin_providers() -> list:
    """Providers shipped with fixtureloader."""
    from fixtureloader.dataset.delimited import CsvFormatProvider, TsvFormatProvider

    return [CsvFormatProvider(), TsvFormatProvider()]


def create_default_registry(discover: bool = True) -> FormatProviderRegistry:
    """Registry holding the built-in providers plus, optionally, discovered plugins.

    Plugins are registered after the built-ins, so a plugin for ``.csv``
    replaces the built-in CSV provider.
    """
    registry = FormatProviderRegistry(builtin_providers())
    if discover:
        registry.discover_plugins()
    return registry


__all__ = [
    'ENTRY_POINT_GROUP',
    'DataSetFormatProvider',
    'FormatProviderRegistry',
    'builtin_providers',
    'create_default_registry',
]
