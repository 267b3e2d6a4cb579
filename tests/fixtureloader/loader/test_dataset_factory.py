"""Tests for provider selection by data file extension."""

import pytest

from fixtureloader.domain import FileExtension, ScenarioMarker, ScenarioName
from fixtureloader.exceptions import ConfigError, LoadError
from fixtureloader.loader import DatasetFactory
from fixtureloader.registries import FormatProviderRegistry

MARKER = ScenarioMarker("[Scenario]")


def test_detects_first_supported_extension_by_file_name(tmp_path, format_registry, write_tables):
    write_tables(tmp_path, {"A.tsv": "ID\n", "B.csv": "ID\n", "0notes.txt": "x"})

    assert DatasetFactory(format_registry).detect_file_extension(tmp_path) == FileExtension(".tsv")


def test_uppercase_extension_is_not_detected(tmp_path, format_registry, write_tables):
    write_tables(tmp_path, {"A.CSV": "ID\n", "B.csv": "ID\n"})

    assert DatasetFactory(format_registry).detect_file_extension(tmp_path) == FileExtension(".csv")


def test_creates_dataset_with_matching_provider(tmp_path, format_registry, write_tables, users_csv):
    write_tables(tmp_path, {"USERS.csv": users_csv})
    target = object()

    dataset = DatasetFactory(format_registry).create_dataset(tmp_path, [ScenarioName("b")], MARKER, target)

    assert dataset.data_source is target
    assert [row["NAME"] for row in dataset.get_table("USERS").rows] == ["bob"]


def test_no_supported_files(tmp_path, format_registry, write_tables):
    write_tables(tmp_path, {"notes.txt": "x"})

    with pytest.raises(LoadError) as exc_info:
        DatasetFactory(format_registry).detect_file_extension(tmp_path)
    assert exc_info.value.error_code == "LOAD_004"


def test_empty_registry(tmp_path, write_tables):
    write_tables(tmp_path, {"USERS.csv": "ID\n"})

    with pytest.raises(ConfigError) as exc_info:
        DatasetFactory(FormatProviderRegistry()).create_dataset(tmp_path, [], MARKER)
    assert exc_info.value.error_code == "CONFIG_006"


def test_unreadable_directory(tmp_path, format_registry):
    with pytest.raises(LoadError) as exc_info:
        DatasetFactory(format_registry).detect_file_extension(tmp_path / "missing")
    assert exc_info.value.error_code == "LOAD_003"
