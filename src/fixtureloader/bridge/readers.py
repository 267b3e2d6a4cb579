"""
Directory readers backed by pandas.

A reader turns a fixture directory into a ``Dataset``: it reads the ordering
manifest, parses one DataFrame per table with ``pandas.read_csv`` and hands the
ordered frames to ``PandasDatasetAdapter``.

Cells are read as text with no NA conversion: an empty cell comes back as
``""`` (NULL once scenario filtering normalizes it), while a cell written as
``""`` comes back as ``EMPTY_STRING``.
"""

import io
from pathlib import Path
from typing import Dict, List, Protocol, Union, runtime_checkable

import pandas as pd
from loguru import logger

from fixtureloader.bridge.adapters import PandasDatasetAdapter
from fixtureloader.dataset.models import Dataset
from fixtureloader.dataset.ordering import read_table_ordering
from fixtureloader.domain import EMPTY_STRING, FileExtension
from fixtureloader.exceptions import LoadError

QUOTE_CHAR = '"'


@runtime_checkable
class DatasetReader(Protocol):
    """Reads every table of a fixture directory."""

    def read(self, directory: Path) -> Dataset:
        ...


def quoted_empty_cells(text: str, separator: str) -> List[List[bool]]:
    """
    Flag, per record and field, whether the raw field is exactly ``""``.

    Records follow ``pandas.read_csv`` conventions: quoted fields may span
    lines and blank lines are skipped. The header record is included.
    """
    records: List[List[bool]] = []
    fields: List[bool] = []
    raw: List[str] = []
    in_quotes = False

    def end_field():
        fields.append("".join(raw) == QUOTE_CHAR * 2)
        raw.clear()

    for char in text:
        if in_quotes:
            raw.append(char)
            if char == QUOTE_CHAR:
                in_quotes = False
        elif char == QUOTE_CHAR:
            raw.append(char)
            in_quotes = True
        elif char == separator:
            end_field()
        elif char == "\n":
            blank = not fields and not raw
            end_field()
            if not blank:
                records.append(list(fields))
            fields.clear()
        elif char != "\r":
            raw.append(char)

    if fields or raw:
        end_field()
        records.append(list(fields))
    return records


class DelimitedDatasetReader:
    """
    Reads delimited text files (CSV, TSV, ...) from a directory.

    Args:
        extension: Data file extension, matched case-sensitively
        separator: Field separator passed to ``pandas.read_csv``
        encoding: Text encoding of the data files
    """

    def __init__(self, extension: Union[FileExtension, str] = ".csv", separator: str = ",", encoding: str = "utf-8-sig"):
        self.extension = extension if isinstance(extension, FileExtension) else FileExtension(extension)
        self.separator = separator
        self.encoding = encoding

    def read(self, directory: Path) -> Dataset:
        """
        Parse all tables of ``directory`` in manifest order.

        Raises:
            LoadError: If the directory, manifest or a data file cannot be read
        """
        directory = Path(directory)
        data_files = self._data_files(directory)

        frames: Dict[str, pd.DataFrame] = {}
        for name in self._ordered_table_names(directory, data_files):
            frames[name] = self.read_table(data_files[name])

        logger.debug(f"Read {len(frames)} table(s) from {directory}: {list(frames)}")
        return PandasDatasetAdapter(frames)

    def _data_files(self, directory: Path) -> Dict[str, Path]:
        try:
            paths = [
                path for path in sorted(directory.iterdir())
                if path.is_file() and self.extension.matches(path.name)
            ]
        except OSError as e:
            raise LoadError(
                f"Failed to list data files in directory: {directory}",
                error_code="LOAD_003",
                context={'directory': directory, 'extension': self.extension.value},
            ) from e

        data_files: Dict[str, Path] = {}
        for path in paths:
            name = self.extension.strip_from(path.name)
            if name.strip():
                data_files[name] = path
            else:
                logger.warning(f"Skipping data file without a table name: {path}")
        return data_files

    def _ordered_table_names(self, directory: Path, data_files: Dict[str, Path]) -> List[str]:
        ordered: List[str] = []
        for table_name in read_table_ordering(directory):
            name = table_name.value
            if name in ordered:
                logger.debug(f"Table {name} listed more than once in ordering of {directory}")
            elif name not in data_files:
                logger.warning(
                    f"Table {name} is listed in the ordering of {directory} "
                    f"but has no {self.extension.value} file; skipping"
                )
            else:
                ordered.append(name)

        unordered = sorted(name for name in data_files if name not in ordered)
        if unordered:
            logger.warning(
                f"Data files missing from the ordering of {directory} are appended: {unordered}"
            )
        return ordered + unordered

    def read_table(self, path: Path) -> pd.DataFrame:
        """
        Parse one data file into a DataFrame of text cells.

        Raises:
            LoadError: If the file cannot be read or parsed, or a record's
                field count differs from the header's
        """
        try:
            text = path.read_text(encoding=self.encoding)
            records = quoted_empty_cells(text, self.separator)
            self._check_field_counts(records, path)
            frame = pd.read_csv(
                io.StringIO(text),
                sep=self.separator,
                quotechar=QUOTE_CHAR,
                dtype=object,
                index_col=False,
                keep_default_na=False,
                na_filter=False,
            )
        except (OSError, ValueError) as e:
            # ParserError, EmptyDataError and UnicodeDecodeError are ValueErrors.
            raise LoadError(
                f"Failed to parse data file: {path}",
                error_code="LOAD_006",
                context={'file_path': path, 'extension': self.extension.value},
            ) from e

        self._mark_quoted_empty_cells(frame, records[1:], path)
        return frame

    def _check_field_counts(self, records: List[List[bool]], path: Path) -> None:
        if not records:
            return
        expected = len(records[0])
        for record_number, fields in enumerate(records[1:], start=1):
            if len(fields) != expected:
                raise LoadError(
                    f"Failed to parse data file: {path}\n"
                    f"Record {record_number} has {len(fields)} field(s), the header has {expected}",
                    error_code="LOAD_006",
                    context={
                        'file_path': path,
                        'extension': self.extension.value,
                        'record': record_number,
                        'field_count': len(fields),
                        'header_field_count': expected,
                    },
                )

    def _mark_quoted_empty_cells(self, frame: pd.DataFrame, records: List[List[bool]], path: Path) -> None:
        if len(records) != len(frame.index):
            logger.debug(f"Record count mismatch in {path}; quoted empty cells stay plain")
            return
        column_count = len(frame.columns)
        for row_index, flags in enumerate(records):
            for column_index, quoted_empty in enumerate(flags[:column_count]):
                if quoted_empty and frame.iat[row_index, column_index] == "":
                    frame.iat[row_index, column_index] = EMPTY_STRING
