"""
Deterministic table ordering for fixture directories.

Each fixture directory carries a ``table-ordering.txt`` manifest listing one
table name per line. When it is missing, it is generated from the data files
found in the directory; when present it is authoritative and never rewritten,
even if it omits, duplicates or reorders tables.
"""

from pathlib import Path
from typing import List, Union

from loguru import logger

from fixtureloader.domain import FileExtension, TableName
from fixtureloader.exceptions import LoadError

TABLE_ORDERING_FILE = "table-ordering.txt"


class TableOrderingResolver:
    """
    Ensures a directory has an ordering manifest for one data file extension.

    The resolver only knows the extension, so the same class serves every
    tabular format.
    """

    def __init__(self, extension: Union[FileExtension, str]):
        self.extension = extension if isinstance(extension, FileExtension) else FileExtension(extension)

    def ensure_table_ordering(self, directory: Union[str, Path]) -> Path:
        """
        Make sure ``directory`` contains an ordering manifest and return the directory.

        Raises:
            LoadError: If the directory does not exist or the manifest cannot be written
        """
        directory = Path(directory)
        ordering_file = directory / TABLE_ORDERING_FILE
        if ordering_file.exists():
            logger.debug(f"Using existing table ordering: {ordering_file}")
            return directory

        table_names = self.discover_table_names(directory)
        self._write_table_ordering(ordering_file, table_names)
        return directory

    def discover_table_names(self, directory: Path) -> List[TableName]:
        """Sorted table names of the data files directly inside ``directory``."""
        if not directory.is_dir():
            raise LoadError(
                f"Failed to list data files in directory: {directory}",
                error_code="LOAD_001",
                context={'directory': directory, 'extension': self.extension.value},
            )
        try:
            file_names = [path.name for path in directory.iterdir() if path.is_file()]
        except OSError as e:
            raise LoadError(
                f"Failed to list data files in directory: {directory}",
                error_code="LOAD_003",
                context={'directory': directory, 'extension': self.extension.value},
            ) from e

        table_names = []
        for name in sorted(file_names):
            if not self.extension.matches(name):
                continue
            stem = self.extension.strip_from(name)
            if not stem.strip():
                logger.warning(f"Skipping data file without a table name: {directory / name}")
                continue
            table_names.append(TableName(stem))
        return sorted(table_names)

    def _write_table_ordering(self, ordering_file: Path, table_names: List[TableName]) -> None:
        content = "".join(f"{name.value}\n" for name in table_names)
        try:
            with open(ordering_file, "x", encoding="utf-8") as handle:
                handle.write(content)
        except FileExistsError:
            # Another loader created it first; the content is deterministic.
            logger.debug(f"Table ordering created concurrently: {ordering_file}")
            return
        except OSError as e:
            raise LoadError(
                f"Failed to write table ordering file: {ordering_file}",
                error_code="LOAD_005",
                context={'ordering_file': ordering_file},
            ) from e

        logger.info(
            f"Created table ordering {ordering_file} with {len(table_names)} table(s): "
            f"{[name.value for name in table_names]}"
        )


def read_table_ordering(directory: Union[str, Path]) -> List[TableName]:
    """
    Read the manifest of ``directory`` in file order.

    Blank lines are skipped and names are trimmed; duplicates are kept.

    Raises:
        LoadError: If the manifest is missing or unreadable
    """
    ordering_file = Path(directory) / TABLE_ORDERING_FILE
    try:
        lines = ordering_file.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise LoadError(
            f"Failed to read table ordering file: {ordering_file}",
            error_code="LOAD_005",
            context={'ordering_file': ordering_file},
        ) from e
    return [TableName(line) for line in lines if line.strip()]
