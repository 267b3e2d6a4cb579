"""
Dataset loaders.

``ConventionDataSetLoader`` turns the declarations on a test into scenario
datasets: each declaration is resolved to a directory, a set of scenario names
and a data source, then handed to the provider registered for the directory's
data files. Any failure aborts the whole phase.
"""

from typing import Any, Callable, List, Optional, Protocol, Union, runtime_checkable

from loguru import logger

from fixtureloader.dataset.models import ScenarioDataset
from fixtureloader.domain import ScenarioMarker
from fixtureloader.loader.context import Phase, TestContext
from fixtureloader.loader.declarations import (
    DataSetDeclaration,
    DeclarationResolver,
    Expectation,
    Preparation,
    convention_declarations,
)
from fixtureloader.loader.directory import DirectoryResolver
from fixtureloader.loader.factory import DatasetFactory
from fixtureloader.registries import FormatProviderRegistry, create_default_registry

DirectoryResolverFactory = Callable[[TestContext, FormatProviderRegistry], DirectoryResolver]


@runtime_checkable
class DataSetLoader(Protocol):
    """Resolves the datasets of the preparation and expectation phases."""

    def load_preparation_datasets(self, context: TestContext) -> List[ScenarioDataset]:
        ...

    def load_expectation_datasets(self, context: TestContext) -> List[ScenarioDataset]:
        ...


class ConventionDataSetLoader:
    """
    Loads datasets from directories named after the test module and class.

    Args:
        registry: Format providers; the built-in ones plus installed plugins
            when omitted
        directory_resolver_factory: Builds the ``DirectoryResolver`` for a test
        declaration_resolver: Finds declarations on tests
    """

    def __init__(
        self,
        registry: Optional[FormatProviderRegistry] = None,
        directory_resolver_factory: DirectoryResolverFactory = DirectoryResolver.for_context,
        declaration_resolver: Optional[DeclarationResolver] = None,
    ):
        self.registry = registry if registry is not None else create_default_registry()
        self.directory_resolver_factory = directory_resolver_factory
        self.declaration_resolver = declaration_resolver or DeclarationResolver()
        self.dataset_factory = DatasetFactory(self.registry)

    def load_preparation_datasets(self, context: TestContext) -> List[ScenarioDataset]:
        declared = self.declaration_resolver.find_preparation(context.test_method, context.test_class)
        if declared is None:
            return []
        return self.load_for_phase(context, Phase.PREPARATION, declared)

    def load_expectation_datasets(self, context: TestContext) -> List[ScenarioDataset]:
        declared = self.declaration_resolver.find_expectation(context.test_method, context.test_class)
        if declared is None:
            return []
        return self.load_for_phase(context, Phase.EXPECTATION, declared)

    def load_for_phase(
        self,
        context: TestContext,
        phase: Phase,
        declaration: Union[Preparation, Expectation, DataSetDeclaration, None],
    ) -> List[ScenarioDataset]:
        """
        Load the datasets of one phase, in declaration order.

        Args:
            context: The running test
            phase: Expectation appends the configured suffix to every directory
            declaration: A phase declaration, a single dataset declaration, or
                None for the convention directory

        Returns:
            One scenario dataset per declaration

        Raises:
            LoadError: If a directory or data file cannot be read
            ConfigError: If no provider handles the directory's data files
            DataSourceNotFoundError: If a declared data source is not registered
        """
        if isinstance(declaration, (Preparation, Expectation)):
            declarations = convention_declarations(declaration.datasets)
        elif isinstance(declaration, DataSetDeclaration):
            declarations = (declaration,)
        else:
            declarations = convention_declarations(())

        conventions = context.configuration.conventions
        suffix = conventions.expectation_suffix if phase is Phase.EXPECTATION else None
        marker = ScenarioMarker(conventions.scenario_marker)
        directory_resolver = self.directory_resolver_factory(context, self.registry)

        logger.debug(
            f"Loading {len(declarations)} {phase.value} dataset(s) for "
            f"{context.test_module}.{context.test_method_name}"
        )
        return [
            self._load_declaration(context, directory_resolver, item, suffix, marker)
            for item in declarations
        ]

    def _load_declaration(
        self,
        context: TestContext,
        directory_resolver: DirectoryResolver,
        declaration: DataSetDeclaration,
        suffix: Optional[str],
        marker: ScenarioMarker,
    ) -> ScenarioDataset:
        resolver = self.declaration_resolver
        directory = directory_resolver.resolve_directory(resolver.resource_location(declaration), suffix)
        directory_resolver.validate_directory_contains_supported_files(directory)

        scenario_names = resolver.resolve_scenario_names(declaration, context.test_method)
        data_source = self._resolve_data_source(context, declaration)
        return self.dataset_factory.create_dataset(directory, scenario_names, marker, data_source)

    def _resolve_data_source(self, context: TestContext, declaration: DataSetDeclaration) -> Any:
        name = self.declaration_resolver.data_source_name(declaration)
        if name is None:
            return context.registry.get_default()
        return context.registry.get(name.value)
