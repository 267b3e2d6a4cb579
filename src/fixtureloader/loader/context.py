"""Test identity handed to dataset loaders."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from fixtureloader.config import Configuration, DataSourceRegistry


class Phase(Enum):
    """Lifecycle phase a dataset is loaded for."""

    PREPARATION = "preparation"
    EXPECTATION = "expectation"


@dataclass(frozen=True)
class TestContext:
    """
    Everything a loader needs to know about the running test.

    Attributes:
        test_class: Class defining the test, or None for module-level test functions
        test_method: The test function; its ``__name__`` is the default scenario
        configuration: Conventions and loader in effect
        registry: Data sources datasets are bound to
    """

    __test__ = False

    test_class: Optional[type]
    test_method: Callable
    configuration: Configuration = field(default_factory=Configuration.defaults)
    registry: DataSourceRegistry = field(default_factory=DataSourceRegistry)

    @property
    def test_method_name(self) -> str:
        return self.test_method.__name__

    @property
    def test_module(self) -> str:
        """Dotted name of the module that defines the test."""
        owner = self.test_class if self.test_class is not None else self.test_method
        return owner.__module__
