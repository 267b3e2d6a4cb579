"""
Scenario row filtering.

A table opts into scenario filtering by naming its first column after the
scenario marker (``[Scenario]`` by default). Each row then carries one scenario
tag in that column, and only rows tagged with a requested scenario survive.
The marker column itself never reaches the filtered table.

Matching is exact and case-sensitive after trimming the cell value. Requesting
no scenarios disables filtering, as does a table without a marker column.
"""

from typing import Collection, FrozenSet, Iterable, List, Optional

from loguru import logger

from fixtureloader.dataset.models import MappedRow, Row, ScenarioTable, Table
from fixtureloader.domain import NULL, ColumnName, DataValue, ScenarioMarker, ScenarioName, TableName


def find_scenario_column(columns: List[ColumnName], scenario_marker: ScenarioMarker) -> Optional[ColumnName]:
    """The first column if its name equals the marker, otherwise None."""
    if columns and columns[0].value == scenario_marker.value:
        return columns[0]
    return None


def _read_scenario_name(row: Row, scenario_column: ColumnName) -> Optional[ScenarioName]:
    value = row.get_value(scenario_column).value
    if value is None:
        return None
    text = str(value).strip()
    return ScenarioName(text) if text else None


def should_include_row(
    row: Row,
    scenario_column: Optional[ColumnName],
    scenario_names: FrozenSet[ScenarioName],
) -> bool:
    if scenario_column is None or not scenario_names:
        return True
    scenario_name = _read_scenario_name(row, scenario_column)
    return scenario_name is not None and scenario_name in scenario_names


def normalize_empty_string(data_value: DataValue) -> DataValue:
    """Plain empty strings stand for SQL NULL; anything else passes through."""
    value = data_value.value
    if type(value) is str and value == "":
        return NULL
    return data_value


def project_row(row: Row, data_columns: Iterable[ColumnName]) -> Row:
    return MappedRow({
        column: normalize_empty_string(row.get_value(column))
        for column in data_columns
    })


class FilteredScenarioTable(ScenarioTable):
    """
    Scenario-filtered view of a source table, materialized on construction.

    Args:
        source_table: Table as read from the data file, marker column included
        scenario_names: Requested scenarios; empty means keep every row
        scenario_marker: Header text of the scenario column
    """

    def __init__(
        self,
        source_table: Table,
        scenario_names: Collection[ScenarioName],
        scenario_marker: ScenarioMarker,
    ):
        self._name = source_table.name
        all_columns = source_table.columns
        scenario_column = find_scenario_column(all_columns, scenario_marker)
        self._columns = all_columns[1:] if scenario_column is not None else list(all_columns)
        self.scenario_filtered = scenario_column is not None

        requested = frozenset(scenario_names)
        source_rows = source_table.rows
        self._rows = [
            project_row(row, self._columns)
            for row in source_rows
            if should_include_row(row, scenario_column, requested)
        ]

        logger.debug(
            f"Table {self._name.value}: kept {len(self._rows)}/{len(source_rows)} row(s) "
            f"(scenario column: {scenario_column.value if scenario_column else None}, "
            f"scenarios: {sorted(n.value for n in requested)})"
        )

    @property
    def name(self) -> TableName:
        return self._name

    @property
    def columns(self) -> List[ColumnName]:
        return list(self._columns)

    @property
    def rows(self) -> List[Row]:
        return list(self._rows)


def filter_table(
    source_table: Table,
    scenario_names: Collection[ScenarioName],
    scenario_marker: ScenarioMarker,
) -> ScenarioTable:
    """Filter ``source_table`` down to the rows of the requested scenarios."""
    return FilteredScenarioTable(source_table, scenario_names, scenario_marker)
