"""
Dataset declarations attached to test functions and classes.

    @preparation(DataSetDeclaration(scenario_names=("adminUser",)))
    @expectation()
    def test_creates_user(self):
        ...

A method-level declaration takes precedence over one on the class; class
declarations are inherited through the MRO.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from fixtureloader.domain import DataSourceName, ScenarioName

PREPARATION_ATTRIBUTE = "__fixtureloader_preparation__"
EXPECTATION_ATTRIBUTE = "__fixtureloader_expectation__"

T = TypeVar("T")


@dataclass(frozen=True)
class DataSetDeclaration:
    """
    One dataset to load.

    Attributes:
        resource_location: Directory override; ``resource:`` paths resolve
            against the fixture root, anything else is a filesystem path
        scenario_names: Scenarios to keep; the test method name when empty
        data_source_name: Named data source; the default one when None
    """

    resource_location: Optional[str] = None
    scenario_names: Tuple[str, ...] = ()
    data_source_name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.scenario_names, str):
            object.__setattr__(self, "scenario_names", (self.scenario_names,))
        else:
            object.__setattr__(self, "scenario_names", tuple(self.scenario_names))


@dataclass(frozen=True)
class Preparation:
    datasets: Tuple[DataSetDeclaration, ...] = ()


@dataclass(frozen=True)
class Expectation:
    datasets: Tuple[DataSetDeclaration, ...] = ()


def _declare(attribute: str, declaration: Union[Preparation, Expectation]) -> Callable[[T], T]:
    def decorator(target: T) -> T:
        setattr(target, attribute, declaration)
        return target
    return decorator


def preparation(*datasets: DataSetDeclaration) -> Callable[[T], T]:
    """Declare the datasets loaded before the test runs.

    Without arguments, the convention directory is used.
    """
    return _declare(PREPARATION_ATTRIBUTE, Preparation(tuple(datasets)))


def expectation(*datasets: DataSetDeclaration) -> Callable[[T], T]:
    """Declare the datasets the database must match after the test runs."""
    return _declare(EXPECTATION_ATTRIBUTE, Expectation(tuple(datasets)))


class DeclarationResolver:
    """Finds declarations on tests and normalizes their fields."""

    def find_preparation(self, test_method: Callable, test_class: Optional[type]) -> Optional[Preparation]:
        return self._find(PREPARATION_ATTRIBUTE, test_method, test_class)

    def find_expectation(self, test_method: Callable, test_class: Optional[type]) -> Optional[Expectation]:
        return self._find(EXPECTATION_ATTRIBUTE, test_method, test_class)

    @staticmethod
    def _find(attribute: str, test_method: Callable, test_class: Optional[type]):
        declared = getattr(test_method, attribute, None)
        if declared is not None:
            return declared
        if test_class is None:
            return None
        for cls in test_class.__mro__:
            declared = vars(cls).get(attribute)
            if declared is not None:
                return declared
        return None

    @staticmethod
    def resolve_scenario_names(declaration: DataSetDeclaration, test_method: Callable) -> List[ScenarioName]:
        names = [ScenarioName(name) for name in declaration.scenario_names if name and name.strip()]
        return names or [ScenarioName(test_method.__name__)]

    @staticmethod
    def resource_location(declaration: DataSetDeclaration) -> Optional[str]:
        location = declaration.resource_location
        return location if location and location.strip() else None

    @staticmethod
    def data_source_name(declaration: DataSetDeclaration) -> Optional[DataSourceName]:
        name = declaration.data_source_name
        return DataSourceName(name) if name and name.strip() else None


def convention_declarations(declared: Sequence[DataSetDeclaration]) -> Tuple[DataSetDeclaration, ...]:
    """Declarations to process; a single convention-based one when none are given."""
    return tuple(declared) if declared else (DataSetDeclaration(),)
