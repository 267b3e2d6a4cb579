"""End-to-end tests for the CSV and TSV format providers."""

import pytest

from fixtureloader.dataset import CsvFormatProvider, TsvFormatProvider
from fixtureloader.dataset.models import ScenarioDataset, ScenarioTable
from fixtureloader.domain import EMPTY_STRING, NULL, ColumnName, FileExtension, ScenarioMarker, ScenarioName, TableName
from fixtureloader.exceptions import LoadError
from fixtureloader.registries import DataSetFormatProvider

MARKER = ScenarioMarker("[Scenario]")


@pytest.mark.parametrize("provider_class, extension", [(CsvFormatProvider, ".csv"), (TsvFormatProvider, ".tsv")])
def test_providers_implement_protocol(provider_class, extension):
    provider = provider_class()
    assert isinstance(provider, DataSetFormatProvider)
    assert provider.supported_file_extension == FileExtension(extension)


def test_loads_and_filters_users_fixture(tmp_path, write_tables, users_csv):
    write_tables(tmp_path, {"USERS.csv": users_csv})

    dataset = CsvFormatProvider().create_dataset(tmp_path, [ScenarioName("a")], MARKER)

    assert isinstance(dataset, ScenarioDataset)
    users = dataset.get_table("USERS")
    assert isinstance(users, ScenarioTable)
    assert users.columns == [ColumnName("ID"), ColumnName("NAME")]
    assert [(row["ID"], row["NAME"]) for row in users.rows] == [("1", "alice")]
    assert (tmp_path / "table-ordering.txt").read_text(encoding="utf-8") == "USERS\n"


def test_no_scenarios_keeps_every_row(tmp_path, write_tables, users_csv):
    write_tables(tmp_path, {"USERS.csv": users_csv})

    dataset = CsvFormatProvider().create_dataset(tmp_path, [], MARKER)

    assert dataset.get_table("USERS").row_count == 2


def test_empty_cells_become_null_and_quoted_empty_strings_survive(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.csv": '[Scenario],ID,NAME,NOTE\na,1,,""\n'})

    row = CsvFormatProvider().create_dataset(tmp_path, [ScenarioName("a")], MARKER).get_table("USERS").rows[0]

    assert row.get_value("NAME") is NULL
    assert row["NOTE"] is EMPTY_STRING


def test_tables_follow_manifest_order(tmp_path, write_tables):
    write_tables(
        tmp_path,
        {"USERS.csv": "ID\n1\n", "ORDERS.csv": "ID\n2\n", "ACCOUNTS.csv": "ID\n3\n"},
        ordering="USERS\nORDERS\nACCOUNTS\n",
    )

    dataset = CsvFormatProvider().create_dataset(tmp_path, [], MARKER)

    assert dataset.table_names == [TableName("USERS"), TableName("ORDERS"), TableName("ACCOUNTS")]


def test_generated_order_is_sorted(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.csv": "ID\n1\n", "ORDERS.csv": "ID\n2\n"})

    dataset = CsvFormatProvider().create_dataset(tmp_path, [], MARKER)

    assert dataset.table_names == [TableName("ORDERS"), TableName("USERS")]


def test_data_source_is_attached(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.csv": "ID\n1\n"})
    target = object()

    dataset = CsvFormatProvider().create_dataset(tmp_path, [], MARKER, data_source=target)

    assert dataset.data_source is target


def test_tsv_provider_ignores_csv_files(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.tsv": "[Scenario]\tID\na\t1\nb\t2\n", "OTHER.csv": "ID\n1\n"})

    dataset = TsvFormatProvider().create_dataset(tmp_path, [ScenarioName("b")], MARKER)

    assert dataset.table_names == [TableName("USERS")]
    assert dataset.get_table("USERS").rows[0]["ID"] == "2"


def test_missing_directory_raises_load_error(tmp_path):
    with pytest.raises(LoadError):
        CsvFormatProvider().create_dataset(tmp_path / "missing", [], MARKER)


def test_repr_lists_tables(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.csv": "ID\n1\n"})
    dataset = CsvFormatProvider().create_dataset(tmp_path, [ScenarioName("a")], MARKER)
    assert "USERS" in repr(dataset)
    assert "'a'" in repr(dataset)
