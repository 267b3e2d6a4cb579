"""
Library-agnostic tabular abstraction.

Everything outside ``fixtureloader.bridge`` works against these interfaces only:

* ``Row`` - ordered, immutable ColumnName -> DataValue mapping
* ``Table`` - a named, ordered list of columns and rows
* ``Dataset`` - an ordered list of tables, optionally bound to a data source

``ScenarioTable`` and ``ScenarioDataset`` are the scenario-filtered variants
that format providers hand back to the loader.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Union

from fixtureloader.domain import NULL, ColumnName, DataValue, TableName


def _as_column(column: Union[ColumnName, str]) -> ColumnName:
    return column if isinstance(column, ColumnName) else ColumnName(column)


def _as_table_name(name: Union[TableName, str]) -> TableName:
    return name if isinstance(name, TableName) else TableName(name)


class Row(ABC):
    """A single table row."""

    @property
    @abstractmethod
    def values(self) -> Mapping[ColumnName, DataValue]:
        """All values keyed by column, in column order."""

    def get_value(self, column: Union[ColumnName, str]) -> DataValue:
        """Value of ``column``; unknown columns yield a NULL value instead of failing."""
        return self.values.get(_as_column(column), NULL)

    def __getitem__(self, column: Union[ColumnName, str]) -> Any:
        return self.get_value(column).value

    def __repr__(self) -> str:
        cells = ", ".join(f"{c.value}={v.value!r}" for c, v in self.values.items())
        return f"{self.__class__.__name__}({cells})"


class MappedRow(Row):
    """Row backed by an immutable copy of a plain mapping."""

    def __init__(self, values: Mapping[ColumnName, DataValue]):
        self._values = MappingProxyType(dict(values))

    @property
    def values(self) -> Mapping[ColumnName, DataValue]:
        return self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return list(self.values.items()) == list(other.values.items())

    __hash__ = None


class Table(ABC):
    """A named table with ordered columns and rows."""

    @property
    @abstractmethod
    def name(self) -> TableName:
        ...

    @property
    @abstractmethod
    def columns(self) -> List[ColumnName]:
        ...

    @property
    @abstractmethod
    def rows(self) -> List[Row]:
        ...

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name.value!r}, "
            f"columns={[c.value for c in self.columns]}, rows={self.row_count})"
        )


class Dataset(ABC):
    """An ordered collection of tables."""

    @property
    @abstractmethod
    def tables(self) -> List[Table]:
        ...

    def get_table(self, name: Union[TableName, str]) -> Optional[Table]:
        """Table with exactly this name (case-sensitive), or None."""
        table_name = _as_table_name(name)
        for table in self.tables:
            if table.name == table_name:
                return table
        return None

    @property
    def table_names(self) -> List[TableName]:
        return [table.name for table in self.tables]

    @property
    def data_source(self) -> Optional[Any]:
        return None


class ScenarioTable(Table):
    """Table whose rows have already been filtered for the requested scenarios."""


class ScenarioDataset(Dataset):
    """
    Dataset of ScenarioTables produced by a format provider.

    The optional data source is the target store the execution layer applies
    this dataset to or verifies it against.
    """

    def __init__(self, data_source: Optional[Any] = None):
        self._data_source = data_source

    @property
    def data_source(self) -> Optional[Any]:
        return self._data_source


class StaticTable(Table):
    """Plain in-memory table."""

    def __init__(self, name: TableName, columns: Sequence[ColumnName], rows: Sequence[Row]):
        self._name = name
        self._columns = list(columns)
        self._rows = list(rows)

    @property
    def name(self) -> TableName:
        return self._name

    @property
    def columns(self) -> List[ColumnName]:
        return list(self._columns)

    @property
    def rows(self) -> List[Row]:
        return list(self._rows)
