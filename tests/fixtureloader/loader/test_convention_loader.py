"""
End-to-end tests for ConventionDataSetLoader.

Fixture directories are laid out under ``tmp_path`` following the module and
class naming convention of the test classes defined here.
"""

import pytest

from fixtureloader import (
    ConventionDataSetLoader,
    DataSetDeclaration,
    DataSetLoader,
    Expectation,
    Phase,
    Preparation,
    TestContext,
    expectation,
    preparation,
)
from fixtureloader.domain import ColumnName, TableName
from fixtureloader.exceptions import ConfigError, DataSourceNotFoundError, LoadError
from fixtureloader.registries import FormatProviderRegistry


@preparation()
@expectation()
class UserRepositoryCase:

    def create_user(self):
        pass

    @preparation(
        DataSetDeclaration(scenario_names=("a",)),
        DataSetDeclaration(resource_location="resource:shared/orders", data_source_name="warehouse"),
    )
    def multiple_datasets(self):
        pass

    @preparation(DataSetDeclaration(resource_location="resource:shared/orders"))
    @expectation(DataSetDeclaration(resource_location="resource:shared/orders"))
    def overridden(self):
        pass

    @expectation(DataSetDeclaration(resource_location="resource:shared/expected-basic"))
    def custom_expected_location(self):
        pass


class UndeclaredCase:

    def nothing(self):
        pass


def a():
    pass


@pytest.fixture
def class_directory(tmp_path):
    return tmp_path.joinpath(*UserRepositoryCase.__module__.split(".")) / "UserRepositoryCase"


@pytest.fixture
def loader(format_registry):
    return ConventionDataSetLoader(format_registry)


@pytest.fixture
def context_for(tmp_path, make_configuration, data_sources):
    def _make(test_method, test_class=UserRepositoryCase, **conventions):
        return TestContext(
            test_class=test_class,
            test_method=test_method,
            configuration=make_configuration(base_directory=tmp_path, **conventions),
            registry=data_sources,
        )
    return _make


def test_loader_satisfies_protocol(loader):
    assert isinstance(loader, DataSetLoader)


def test_test_context_is_not_collected():
    assert TestContext.__test__ is False


class TestPreparation:

    def test_convention_directory_and_method_scenario(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory, {"USERS.csv": "[Scenario],ID,NAME\ncreate_user,1,alice\nother,2,bob\n"})

        datasets = loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))

        assert len(datasets) == 1
        users = datasets[0].get_table("USERS")
        assert users.columns == [ColumnName("ID"), ColumnName("NAME")]
        assert [row["NAME"] for row in users.rows] == ["alice"]

    def test_default_data_source_is_attached(self, loader, context_for, class_directory, write_tables, data_source):
        write_tables(class_directory, {"USERS.csv": "ID\n1\n"})

        datasets = loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))

        assert datasets[0].data_source is data_source

    def test_declarations_are_processed_in_order(
        self, tmp_path, loader, context_for, class_directory, data_sources, write_tables, users_csv
    ):
        warehouse = object()
        data_sources.register("warehouse", warehouse)
        write_tables(class_directory, {"USERS.csv": users_csv})
        write_tables(tmp_path / "shared" / "orders", {"ORDERS.csv": "[Scenario],ID\nmultiple_datasets,10\nx,11\n"})

        datasets = loader.load_preparation_datasets(context_for(UserRepositoryCase.multiple_datasets))

        assert [d.table_names for d in datasets] == [[TableName("USERS")], [TableName("ORDERS")]]
        assert [row["ID"] for row in datasets[0].get_table("USERS").rows] == ["1"]
        assert [row["ID"] for row in datasets[1].get_table("ORDERS").rows] == ["10"]
        assert datasets[1].data_source is warehouse

    def test_no_declaration_loads_nothing(self, loader, context_for):
        context = context_for(UndeclaredCase.nothing, test_class=UndeclaredCase)
        assert loader.load_preparation_datasets(context) == []
        assert loader.load_expectation_datasets(context) == []

    def test_missing_convention_directory(self, loader, context_for):
        with pytest.raises(LoadError) as exc_info:
            loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))
        assert exc_info.value.error_code == "LOAD_001"

    def test_directory_without_data_files(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory, {"README.md": "fixtures"})

        with pytest.raises(LoadError) as exc_info:
            loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))
        assert exc_info.value.error_code == "LOAD_004"

    def test_empty_registry(self, context_for, class_directory, write_tables):
        write_tables(class_directory, {"USERS.csv": "ID\n1\n"})
        loader = ConventionDataSetLoader(FormatProviderRegistry())

        with pytest.raises(ConfigError):
            loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))

    def test_unknown_data_source_propagates(self, tmp_path, loader, make_configuration, class_directory, write_tables):
        from fixtureloader import DataSourceRegistry

        write_tables(class_directory, {"USERS.csv": "ID\n1\n"})
        write_tables(tmp_path / "shared" / "orders", {"ORDERS.csv": "ID\n1\n"})
        context = TestContext(
            test_class=UserRepositoryCase,
            test_method=UserRepositoryCase.multiple_datasets,
            configuration=make_configuration(base_directory=tmp_path),
            registry=DataSourceRegistry(),
        )

        with pytest.raises(DataSourceNotFoundError):
            loader.load_preparation_datasets(context)


class TestExpectation:

    def test_suffix_is_appended(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory, {"USERS.csv": "ID\n1\n"})
        write_tables(class_directory / "expected", {"USERS.csv": "ID\n2\n"})

        datasets = loader.load_expectation_datasets(context_for(UserRepositoryCase.create_user))

        assert [row["ID"] for row in datasets[0].get_table("USERS").rows] == ["2"]

    def test_custom_suffix(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory / "after", {"USERS.csv": "ID\n3\n"})

        context = context_for(UserRepositoryCase.create_user, expectation_suffix="/after")
        datasets = loader.load_expectation_datasets(context)

        assert [row["ID"] for row in datasets[0].get_table("USERS").rows] == ["3"]

    def test_overrides_are_used_as_is(self, tmp_path, loader, context_for, write_tables):
        write_tables(tmp_path / "shared" / "orders", {"ORDERS.csv": "ID\n1\n"})
        write_tables(tmp_path / "shared" / "orders" / "expected", {"ORDERS.csv": "ID\n2\n"})
        context = context_for(UserRepositoryCase.overridden)

        prepared = loader.load_preparation_datasets(context)
        expected = loader.load_expectation_datasets(context)

        assert [row["ID"] for row in prepared[0].get_table("ORDERS").rows] == ["1"]
        assert [row["ID"] for row in expected[0].get_table("ORDERS").rows] == ["1"]

    def test_override_points_at_expected_data(self, tmp_path, loader, context_for, write_tables):
        write_tables(tmp_path / "shared" / "expected-basic", {"ORDERS.csv": "ID\n7\n"})

        datasets = loader.load_expectation_datasets(context_for(UserRepositoryCase.custom_expected_location))

        assert [row["ID"] for row in datasets[0].get_table("ORDERS").rows] == ["7"]


class TestLoadForPhase:

    def test_empty_phase_declaration_uses_convention(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory, {"USERS.csv": "ID\n1\n"})

        datasets = loader.load_for_phase(context_for(UserRepositoryCase.create_user), Phase.PREPARATION, Preparation())

        assert len(datasets) == 1

    def test_single_declaration(self, tmp_path, loader, context_for, write_tables):
        write_tables(tmp_path / "custom", {"ITEMS.tsv": "[Scenario]\tID\na\t1\nb\t2\n"})
        declaration = DataSetDeclaration(resource_location=str(tmp_path / "custom"), scenario_names=("b",))

        datasets = loader.load_for_phase(context_for(UserRepositoryCase.create_user), Phase.PREPARATION, declaration)

        assert [row["ID"] for row in datasets[0].get_table("ITEMS").rows] == ["2"]

    def test_none_declaration_uses_convention(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory / "expected", {"USERS.csv": "ID\n1\n"})

        datasets = loader.load_for_phase(context_for(UserRepositoryCase.create_user), Phase.EXPECTATION, None)

        assert datasets[0].get_table("USERS").row_count == 1

    def test_custom_scenario_marker(self, loader, context_for, class_directory, write_tables):
        write_tables(class_directory, {"USERS.csv": "#case,ID\ncreate_user,1\nother,2\n"})

        context = context_for(UserRepositoryCase.create_user, scenario_marker="#case")
        datasets = loader.load_for_phase(context, Phase.PREPARATION, Expectation())

        assert [row["ID"] for row in datasets[0].get_table("USERS").rows] == ["1"]


def test_module_level_test_function(tmp_path, loader, make_configuration, data_sources, write_tables):
    directory = tmp_path.joinpath(*a.__module__.split("."))
    write_tables(directory, {"USERS.csv": "[Scenario],ID\na,1\nb,2\n"})
    context = TestContext(
        test_class=None,
        test_method=a,
        configuration=make_configuration(base_directory=tmp_path),
        registry=data_sources,
    )

    datasets = loader.load_for_phase(context, Phase.PREPARATION, DataSetDeclaration())

    assert [row["ID"] for row in datasets[0].get_table("USERS").rows] == ["1"]


def test_custom_directory_resolver_factory(tmp_path, format_registry, context_for, write_tables):
    write_tables(tmp_path / "anywhere", {"USERS.csv": "ID\n1\n"})
    calls = []

    class FixedResolver:
        def __init__(self, context, registry):
            calls.append(context.test_method_name)

        def resolve_directory(self, resource_location=None, suffix=None):
            return tmp_path / "anywhere"

        def validate_directory_contains_supported_files(self, directory):
            pass

    loader = ConventionDataSetLoader(format_registry, directory_resolver_factory=FixedResolver)
    datasets = loader.load_preparation_datasets(context_for(UserRepositoryCase.create_user))

    assert calls == ["create_user"]
    assert datasets[0].get_table("USERS").row_count == 1
