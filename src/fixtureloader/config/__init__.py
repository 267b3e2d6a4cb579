"""Configuration models, YAML loading and the data source registry."""

from fixtureloader.config.datasources import DEFAULT_DATA_SOURCE_NAME, DataSourceRegistry
from fixtureloader.config.models import (
    DEFAULT_EXPECTATION_SUFFIX,
    DEFAULT_SCENARIO_MARKER,
    Configuration,
    ConventionSettings,
    load_configuration,
)

__all__ = [
    "DEFAULT_DATA_SOURCE_NAME",
    "DEFAULT_EXPECTATION_SUFFIX",
    "DEFAULT_SCENARIO_MARKER",
    "Configuration",
    "ConventionSettings",
    "DataSourceRegistry",
    "load_configuration",
]
