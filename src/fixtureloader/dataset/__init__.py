"""Tabular abstraction, table ordering, scenario filtering and delimited formats."""

from fixtureloader.dataset.models import (
    Dataset,
    MappedRow,
    Row,
    ScenarioDataset,
    ScenarioTable,
    StaticTable,
    Table,
)
from fixtureloader.dataset.ordering import TABLE_ORDERING_FILE, TableOrderingResolver, read_table_ordering
from fixtureloader.dataset.scenario import FilteredScenarioTable, filter_table
from fixtureloader.dataset.delimited import (
    CsvFormatProvider,
    DelimitedFormatProvider,
    DelimitedScenarioDataset,
    TsvFormatProvider,
)

__all__ = [
    "Dataset",
    "MappedRow",
    "Row",
    "ScenarioDataset",
    "ScenarioTable",
    "StaticTable",
    "Table",
    "TABLE_ORDERING_FILE",
    "TableOrderingResolver",
    "read_table_ordering",
    "FilteredScenarioTable",
    "filter_table",
    "CsvFormatProvider",
    "DelimitedFormatProvider",
    "DelimitedScenarioDataset",
    "TsvFormatProvider",
]
