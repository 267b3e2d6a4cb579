"""
Pydantic configuration models.

``ConventionSettings`` holds the directory and scenario conventions the loader
follows; ``Configuration`` bundles them with the dataset loader. Both models
are frozen: derive modified copies through the ``with_*`` helpers.

A YAML configuration file looks like::

    conventions:
      base_directory: src/test/resources
      expectation_suffix: /expected
      scenario_marker: "[Scenario]"
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError as PydanticValidationError, field_validator

from fixtureloader.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_EXPECTATION_SUFFIX = "/expected"
DEFAULT_SCENARIO_MARKER = "[Scenario]"

ENV_BASE_DIRECTORY = "FIXTURELOADER_BASE_DIRECTORY"
ENV_EXPECTATION_SUFFIX = "FIXTURELOADER_EXPECTATION_SUFFIX"
ENV_SCENARIO_MARKER = "FIXTURELOADER_SCENARIO_MARKER"


class ConventionSettings(BaseModel):
    """
    Naming conventions for fixture directories.

    Attributes:
        base_directory: Root that convention paths and ``resource:`` locations
            resolve against; None means the import root of the test module
        expectation_suffix: Subdirectory appended for the expectation phase
        scenario_marker: Header of the column holding scenario names
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    base_directory: Optional[Path] = Field(
        default=None,
        description="Root directory for convention-based fixture lookup",
        json_schema_extra={"example": "src/test/resources"}
    )

    expectation_suffix: str = Field(
        default=DEFAULT_EXPECTATION_SUFFIX,
        description="Subdirectory appended to the fixture directory for expected data",
    )

    scenario_marker: str = Field(
        default=DEFAULT_SCENARIO_MARKER,
        description="Column header marking the scenario column",
    )

    @field_validator('expectation_suffix', 'scenario_marker')
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        if not isinstance(v, str) or not v.strip():
            logger.error(f"Convention setting {info.field_name} is blank")
            raise ValueError(f"{info.field_name} must not be blank")
        return v.strip()

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional['ConventionSettings'] = None,
    ) -> 'ConventionSettings':
        """
        Apply ``FIXTURELOADER_*`` environment overrides on top of ``base``.

        Args:
            environ: Mapping to read instead of ``os.environ``
            base: Settings to override; defaults when omitted

        Raises:
            ConfigError: If an override is invalid
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        if environ.get(ENV_BASE_DIRECTORY):
            overrides['base_directory'] = Path(environ[ENV_BASE_DIRECTORY])
        if environ.get(ENV_EXPECTATION_SUFFIX) is not None:
            overrides['expectation_suffix'] = environ[ENV_EXPECTATION_SUFFIX]
        if environ.get(ENV_SCENARIO_MARKER) is not None:
            overrides['scenario_marker'] = environ[ENV_SCENARIO_MARKER]

        if overrides:
            logger.debug(f"Applying environment overrides: {sorted(overrides)}")
        data = (base or cls()).model_dump()
        data.update(overrides)
        return _validate(cls, data, source="environment")

    @property
    def marker(self):
        """The scenario marker as a ``ScenarioMarker`` identifier."""
        from fixtureloader.domain import ScenarioMarker

        return ScenarioMarker(self.scenario_marker)


def _create_default_loader():
    from fixtureloader.loader import ConventionDataSetLoader

    return ConventionDataSetLoader()


class Configuration(BaseModel):
    """
    Loader configuration: conventions plus the ``DataSetLoader`` in use.

    ``loader`` stays None unless one is given; ``get_loader`` then creates a
    ``ConventionDataSetLoader`` over the default registry on first use.

    Example:
        >>> config = Configuration.defaults()
        >>> custom = config.with_conventions(ConventionSettings(scenario_marker="#scenario"))
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )

    conventions: ConventionSettings = Field(default_factory=ConventionSettings)
    loader: Optional[Any] = Field(
        default=None,
        description="DataSetLoader resolving preparation and expectation datasets",
    )

    _default_loader: Any = PrivateAttr(default=None)

    @classmethod
    def defaults(cls) -> 'Configuration':
        return cls()

    def get_loader(self) -> Any:
        """The configured loader, or the default one created on first call."""
        if self.loader is not None:
            return self.loader
        if self._default_loader is None:
            self._default_loader = _create_default_loader()
        return self._default_loader

    def with_conventions(self, conventions: ConventionSettings) -> 'Configuration':
        return self.model_copy(update={'conventions': conventions})

    def with_loader(self, loader: Any) -> 'Configuration':
        return self.model_copy(update={'loader': loader})


def _validate(model, data: Dict[str, Any], source: str):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError(
            f"Invalid {model.__name__} from {source}: {'; '.join(errors)}",
            error_code="CONFIG_001",
            context={'source': source, 'errors': errors},
        ) from e


def load_configuration(
    path: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None,
) -> Configuration:
    """
    Load a ``Configuration`` from a YAML file.

    A relative ``base_directory`` is resolved against the file's directory.
    Environment overrides are applied after the file is read.

    Args:
        path: YAML file with an optional ``conventions`` section
        environ: Mapping to read overrides from instead of ``os.environ``

    Returns:
        Configuration using the default loader

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(
            f"Configuration file not found: {path}",
            error_code="CONFIG_002",
            context={'config_path': path},
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Error parsing YAML configuration {path}: {e}",
            error_code="CONFIG_003",
            context={'config_path': path},
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(raw_config).__name__}",
            error_code="CONFIG_001",
            context={'config_path': path},
        )

    conventions_data = raw_config.get('conventions') or {}
    if not isinstance(conventions_data, dict):
        raise ConfigError(
            "The 'conventions' section must be a mapping",
            error_code="CONFIG_001",
            context={'config_path': path},
        )

    conventions = _validate(ConventionSettings, conventions_data, source=str(path))
    if conventions.base_directory is not None and not conventions.base_directory.is_absolute():
        conventions = conventions.model_copy(
            update={'base_directory': path.parent / conventions.base_directory}
        )
    conventions = ConventionSettings.from_environment(environ, base=conventions)

    logger.info(f"Loaded configuration from {path}")
    return Configuration(conventions=conventions)
