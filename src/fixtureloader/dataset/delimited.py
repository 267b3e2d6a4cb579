"""
Format providers for delimited text fixtures (CSV and TSV).

Loading a directory runs three steps in order:

1. ``TableOrderingResolver`` makes sure ``table-ordering.txt`` exists
2. ``DelimitedDatasetReader`` parses the tables through the pandas bridge
3. every table is wrapped in a ``FilteredScenarioTable``
"""

from pathlib import Path
from typing import Any, Collection, List, Optional, Union

from loguru import logger

from fixtureloader.bridge.readers import DelimitedDatasetReader
from fixtureloader.dataset.models import ScenarioDataset, Table
from fixtureloader.dataset.ordering import TableOrderingResolver
from fixtureloader.dataset.scenario import filter_table
from fixtureloader.domain import FileExtension, ScenarioMarker, ScenarioName


class DelimitedScenarioDataset(ScenarioDataset):
    """Scenario-filtered tables of one fixture directory, in manifest order."""

    def __init__(
        self,
        directory: Union[str, Path],
        scenario_names: Collection[ScenarioName],
        scenario_marker: ScenarioMarker,
        reader: DelimitedDatasetReader,
        data_source: Optional[Any] = None,
    ):
        super().__init__(data_source)
        self.directory = Path(directory)
        self.scenario_names = tuple(scenario_names)

        ordered_directory = TableOrderingResolver(reader.extension).ensure_table_ordering(self.directory)
        source = reader.read(ordered_directory)
        self._tables: List[Table] = [
            filter_table(table, self.scenario_names, scenario_marker)
            for table in source.tables
        ]

    @property
    def tables(self) -> List[Table]:
        return list(self._tables)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(directory={str(self.directory)!r}, "
            f"tables={[t.name.value for t in self._tables]}, "
            f"scenarios={[n.value for n in self.scenario_names]})"
        )


class DelimitedFormatProvider:
    """Base provider for one delimited file extension."""

    extension = ".csv"
    separator = ","

    @property
    def supported_file_extension(self) -> FileExtension:
        return FileExtension(self.extension)

    def create_reader(self) -> DelimitedDatasetReader:
        return DelimitedDatasetReader(self.supported_file_extension, self.separator)

    def create_dataset(
        self,
        directory: Union[str, Path],
        scenario_names: Collection[ScenarioName],
        scenario_marker: ScenarioMarker,
        data_source: Optional[Any] = None,
    ) -> ScenarioDataset:
        logger.debug(
            f"{self.__class__.__name__} loading {directory} "
            f"for scenarios {[n.value for n in scenario_names]}"
        )
        return DelimitedScenarioDataset(
            directory, scenario_names, scenario_marker, self.create_reader(), data_source
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(extension={self.extension!r})"


class CsvFormatProvider(DelimitedFormatProvider):
    """Comma-separated fixtures (``TABLE.csv``)."""

    extension = ".csv"
    separator = ","


class TsvFormatProvider(DelimitedFormatProvider):
    """Tab-separated fixtures (``TABLE.tsv``)."""

    extension = ".tsv"
    separator = "\t"
