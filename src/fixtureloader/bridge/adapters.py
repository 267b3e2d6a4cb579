"""
Adapters exposing pandas structures through the fixtureloader tabular interfaces.

Conversion is one-directional (pandas -> fixtureloader). The rest of the
package never sees a DataFrame: it only talks to ``Dataset``, ``Table`` and
``Row``. Any error pandas raises while metadata or values are read is turned
into a ``LoadError`` chained to the original exception.
"""

from typing import Dict, List, Mapping, Optional, Union

import pandas as pd

from fixtureloader.dataset.models import Dataset, Row, Table, _as_column, _as_table_name
from fixtureloader.domain import NULL, ColumnName, DataValue, TableName
from fixtureloader.exceptions import LoadError

_BACKEND_ERRORS = (IndexError, KeyError, ValueError, TypeError, AttributeError)


def _to_data_value(value) -> DataValue:
    if value is None:
        return NULL
    try:
        if pd.isna(value):
            return NULL
    except (TypeError, ValueError):
        # Array-like cells have no single truth value; keep them as-is.
        pass
    return DataValue(value)


class PandasRowAdapter(Row):
    """Row ``row_index`` of a DataFrame, resolved per column on access."""

    def __init__(self, frame: pd.DataFrame, row_index: int, column_positions: Mapping[ColumnName, int], table_name: str):
        self._frame = frame
        self._row_index = row_index
        self._column_positions = column_positions
        self._table_name = table_name

    def _value_at(self, position: int) -> DataValue:
        try:
            return _to_data_value(self._frame.iat[self._row_index, position])
        except _BACKEND_ERRORS as e:
            raise LoadError(
                f"Failed to get column value in table {self._table_name}",
                error_code="LOAD_007",
                context={'table': self._table_name, 'row_index': self._row_index, 'column_position': position},
            ) from e

    @property
    def values(self) -> Mapping[ColumnName, DataValue]:
        return {column: self._value_at(position) for column, position in self._column_positions.items()}

    def get_value(self, column: Union[ColumnName, str]) -> DataValue:
        position = self._column_positions.get(_as_column(column))
        if position is None:
            return NULL
        return self._value_at(position)


class PandasTableAdapter(Table):
    """Table view of a single DataFrame; rows are created on demand."""

    def __init__(self, name: str, frame: pd.DataFrame):
        self._name = TableName(name)
        self._frame = frame
        self._column_positions: Optional[Dict[ColumnName, int]] = None

    @property
    def name(self) -> TableName:
        return self._name

    def _positions(self) -> Dict[ColumnName, int]:
        if self._column_positions is None:
            try:
                labels = list(self._frame.columns)
            except _BACKEND_ERRORS as e:
                raise LoadError(
                    f"Failed to get columns of table {self._name.value}",
                    error_code="LOAD_007",
                    context={'table': self._name.value},
                ) from e
            positions: Dict[ColumnName, int] = {}
            for position, label in enumerate(labels):
                positions.setdefault(ColumnName(str(label)), position)
            self._column_positions = positions
        return self._column_positions

    @property
    def columns(self) -> List[ColumnName]:
        return list(self._positions())

    @property
    def row_count(self) -> int:
        return len(self._frame.index)

    def row_at(self, row_index: int) -> Row:
        if not 0 <= row_index < self.row_count:
            raise LoadError(
                f"Row {row_index} out of range for table {self._name.value}",
                error_code="LOAD_007",
                context={'table': self._name.value, 'row_count': self.row_count},
            )
        return PandasRowAdapter(self._frame, row_index, self._positions(), self._name.value)

    @property
    def rows(self) -> List[Row]:
        return [self.row_at(index) for index in range(self.row_count)]


class PandasDatasetAdapter(Dataset):
    """
    Dataset over an ordered ``{table name: DataFrame}`` mapping.

    Tables are wrapped the first time they are requested.
    """

    def __init__(self, frames: Mapping[str, pd.DataFrame]):
        self._frames = dict(frames)
        self._tables: Dict[str, PandasTableAdapter] = {}

    @property
    def native_table_names(self) -> List[str]:
        return list(self._frames)

    def _wrap(self, name: str) -> PandasTableAdapter:
        table = self._tables.get(name)
        if table is None:
            try:
                frame = self._frames[name]
            except KeyError as e:
                raise LoadError(
                    f"Failed to load table: {name}",
                    error_code="LOAD_007",
                    context={'table': name},
                ) from e
            table = PandasTableAdapter(name, frame)
            self._tables[name] = table
        return table

    @property
    def tables(self) -> List[Table]:
        return [self._wrap(name) for name in self._frames]

    def get_table(self, name: Union[TableName, str]) -> Optional[Table]:
        table_name = _as_table_name(name)
        if table_name.value not in self._frames:
            return None
        return self._wrap(table_name.value)
