"""Tests for the library-agnostic Row / Table / Dataset abstraction."""

import pytest

from fixtureloader.dataset.models import Dataset, MappedRow, ScenarioDataset, StaticTable
from fixtureloader.domain import NULL, ColumnName, DataValue, TableName


@pytest.fixture
def row():
    return MappedRow({ColumnName("ID"): DataValue("1"), ColumnName("NAME"): DataValue("alice")})


class TestRow:

    def test_get_value_accepts_names_and_identifiers(self, row):
        assert row.get_value("ID") == DataValue("1")
        assert row.get_value(ColumnName("NAME")) == DataValue("alice")

    def test_unknown_column_yields_null(self, row):
        assert row.get_value("MISSING") is NULL

    def test_getitem_returns_raw_value(self, row):
        assert row["NAME"] == "alice"
        assert row["MISSING"] is None

    def test_values_preserve_column_order(self, row):
        assert list(row.values) == [ColumnName("ID"), ColumnName("NAME")]

    def test_values_are_read_only(self, row):
        with pytest.raises(TypeError):
            row.values[ColumnName("ID")] = DataValue("2")

    def test_equality_respects_order(self, row):
        reordered = MappedRow({ColumnName("NAME"): DataValue("alice"), ColumnName("ID"): DataValue("1")})
        same = MappedRow({ColumnName("ID"): DataValue("1"), ColumnName("NAME"): DataValue("alice")})
        assert row == same
        assert row != reordered

    def test_source_mapping_is_copied(self):
        source = {ColumnName("ID"): DataValue("1")}
        row = MappedRow(source)
        source[ColumnName("ID")] = DataValue("2")
        assert row["ID"] == "1"


class _TwoTables(Dataset):
    @property
    def tables(self):
        return [
            StaticTable(TableName("USERS"), [ColumnName("ID")], []),
            StaticTable(TableName("ORDERS"), [ColumnName("ID")], []),
        ]


class TestDataset:

    def test_get_table_is_case_sensitive(self):
        dataset = _TwoTables()
        assert dataset.get_table("USERS").name == TableName("USERS")
        assert dataset.get_table("users") is None

    def test_table_names_preserve_order(self):
        assert _TwoTables().table_names == [TableName("USERS"), TableName("ORDERS")]

    def test_plain_dataset_has_no_data_source(self):
        assert _TwoTables().data_source is None


class TestStaticTable:

    def test_row_count_and_iteration(self, row):
        table = StaticTable(TableName("USERS"), [ColumnName("ID"), ColumnName("NAME")], [row, row])
        assert table.row_count == 2
        assert list(table) == [row, row]

    def test_columns_are_copies(self):
        table = StaticTable(TableName("USERS"), [ColumnName("ID")], [])
        table.columns.append(ColumnName("X"))
        assert table.columns == [ColumnName("ID")]


def test_scenario_dataset_data_source_is_fixed_at_construction():
    class Empty(ScenarioDataset):
        @property
        def tables(self):
            return []

    assert Empty().data_source is None
    marker = object()
    dataset = Empty(marker)
    assert dataset.data_source is marker
    with pytest.raises(AttributeError):
        dataset.data_source = object()
