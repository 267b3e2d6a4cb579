"""
Registry of the data sources datasets are bound to.

Data sources are opaque here: anything the execution layer can use as a
connection target (a DB-API connection factory, an SQLAlchemy engine, ...).
"""

import logging
import threading
from typing import Any, Dict, Optional

from fixtureloader.domain import DataSourceName
from fixtureloader.exceptions import DataSourceNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DATA_SOURCE_NAME = DataSourceName("_defaultDataSource_")


class DataSourceRegistry:
    """Thread-safe mapping of data source names to data sources.

    The default data source is also stored under the reserved name
    ``_defaultDataSource_``. Registering under a blank name, or under the
    reserved name, sets the default.
    """

    def __init__(self):
        self._data_sources: Dict[DataSourceName, Any] = {}
        self._default: Optional[Any] = None
        self._lock = threading.RLock()

    def register_default(self, data_source: Any) -> None:
        if data_source is None:
            raise TypeError("data_source must not be None")
        with self._lock:
            self._default = data_source
            self._data_sources[DEFAULT_DATA_SOURCE_NAME] = data_source
        logger.debug("Registered default data source")

    def register(self, name: str, data_source: Any) -> None:
        if name is None:
            raise TypeError("name must not be None")
        if data_source is None:
            raise TypeError("data_source must not be None")
        if not name.strip() or name == DEFAULT_DATA_SOURCE_NAME.value:
            self.register_default(data_source)
            return
        with self._lock:
            self._data_sources[DataSourceName(name)] = data_source
        logger.debug(f"Registered data source {name!r}")

    def get_default(self) -> Any:
        """Default data source.

        Raises:
            DataSourceNotFoundError: If no default is registered
        """
        with self._lock:
            default = self._default
        if default is None:
            raise DataSourceNotFoundError(
                "No default data source registered",
                error_code="DATASOURCE_002",
            )
        return default

    def get(self, name: Optional[str] = None) -> Any:
        """Data source registered as ``name``, falling back to the default.

        Raises:
            DataSourceNotFoundError: If neither ``name`` nor a default is registered
        """
        with self._lock:
            named = self._data_sources.get(DataSourceName(name)) if name and name.strip() else None
            if named is not None:
                return named
            if self._default is not None:
                return self._default

        if name and name.strip():
            raise DataSourceNotFoundError(
                f"No data source registered for name: {name}",
                error_code="DATASOURCE_001",
                context={'data_source_name': name, 'registered': self._registered_names()},
            )
        raise DataSourceNotFoundError(
            "No default data source registered",
            error_code="DATASOURCE_002",
        )

    def find(self, name: str) -> Optional[Any]:
        """Data source registered as ``name`` or None, without default fallback."""
        with self._lock:
            return self._data_sources.get(DataSourceName(name))

    def has(self, name: str) -> bool:
        with self._lock:
            return DataSourceName(name) in self._data_sources

    def has_default(self) -> bool:
        with self._lock:
            return self._default is not None

    def clear(self) -> None:
        with self._lock:
            self._data_sources.clear()
            self._default = None

    def _registered_names(self):
        with self._lock:
            return sorted(
                name.value for name in self._data_sources if name != DEFAULT_DATA_SOURCE_NAME
            )
