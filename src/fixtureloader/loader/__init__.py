"""Convention-based resolution of preparation and expectation datasets."""

from fixtureloader.loader.context import Phase, TestContext
from fixtureloader.loader.declarations import (
    DataSetDeclaration,
    DeclarationResolver,
    Expectation,
    Preparation,
    expectation,
    preparation,
)
from fixtureloader.loader.directory import RESOURCE_PREFIX, DirectoryResolver, module_import_root
from fixtureloader.loader.factory import DatasetFactory
from fixtureloader.loader.loader import ConventionDataSetLoader, DataSetLoader

__all__ = [
    "RESOURCE_PREFIX",
    "ConventionDataSetLoader",
    "DataSetDeclaration",
    "DataSetLoader",
    "DatasetFactory",
    "DeclarationResolver",
    "DirectoryResolver",
    "Expectation",
    "Phase",
    "Preparation",
    "TestContext",
    "expectation",
    "module_import_root",
    "preparation",
]
