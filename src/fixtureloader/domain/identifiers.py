"""
Validated value types used throughout the loader.

All string identifiers share ``_validate_non_blank``: the stored value is the
trimmed input, which must not be blank. Each identifier type has its own
equality and ordering, so a ``TableName`` never equals a ``ColumnName`` with the
same text.
"""

from dataclasses import dataclass
from typing import Any, Optional

from fixtureloader.exceptions import ValidationError


def _validate_non_blank(value: Any, param_name: str) -> str:
    """Return the trimmed value or raise ValidationError if it is missing or blank."""
    if value is None:
        raise ValidationError(
            f"{param_name} must not be None",
            error_code="VALIDATION_001",
            context={'parameter': param_name},
        )
    if not isinstance(value, str):
        raise ValidationError(
            f"{param_name} must be a string, got {type(value).__name__}",
            error_code="VALIDATION_003",
            context={'parameter': param_name},
        )
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(
            f"{param_name} must not be blank",
            error_code="VALIDATION_001",
            context={'parameter': param_name},
        )
    return trimmed


@dataclass(frozen=True, order=True)
class _StringIdentifier:
    value: str

    _label = "identifier"

    def __post_init__(self):
        object.__setattr__(self, "value", _validate_non_blank(self.value, self._label))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class TableName(_StringIdentifier):
    """Name of a database table; equals the data file name without its extension."""

    _label = "Table name"


@dataclass(frozen=True, order=True)
class ColumnName(_StringIdentifier):
    _label = "Column name"


@dataclass(frozen=True, order=True)
class ScenarioName(_StringIdentifier):
    """A tag selecting the rows that belong to one test scenario."""

    _label = "Scenario name"


@dataclass(frozen=True, order=True)
class ScenarioMarker(_StringIdentifier):
    """Header text that flags a table's first column as the scenario column."""

    _label = "Scenario marker"


@dataclass(frozen=True, order=True)
class DataSourceName(_StringIdentifier):
    _label = "Data source name"


@dataclass(frozen=True, order=True)
class SchemaName(_StringIdentifier):
    _label = "Schema name"


@dataclass(frozen=True)
class FileExtension:
    """
    File extension normalized to lowercase with a leading dot.

    ``FileExtension("csv")`` and ``FileExtension(".CSV")`` both hold ``".csv"``.
    Matching a file name against an extension is case-sensitive: the raw suffix
    of the file must equal the normalized value.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValidationError(
                "File extension must be a string",
                error_code="VALIDATION_002",
                context={'extension': repr(self.value)},
            )
        normalized = self.value.strip().lower()
        if not normalized.startswith("."):
            normalized = f".{normalized}"
        if len(normalized) <= 1:
            raise ValidationError(
                "File extension must not be empty after '.'",
                error_code="VALIDATION_002",
                context={'extension': self.value},
            )
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def raw_suffix(file_name: str) -> Optional[str]:
        """Return the text from the last dot of ``file_name``, or None for dotfiles and names without one."""
        dot_index = file_name.rfind(".")
        if dot_index <= 0 or dot_index == len(file_name) - 1:
            return None
        return file_name[dot_index:]

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional['FileExtension']:
        suffix = cls.raw_suffix(file_name)
        return cls(suffix) if suffix is not None else None

    def matches(self, file_name: str) -> bool:
        """True if ``file_name`` ends with exactly this extension (case-sensitive)."""
        return self.raw_suffix(file_name) == self.value

    def strip_from(self, file_name: str) -> str:
        return file_name[: -len(self.value)]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DataValue:
    """
    A single cell value. ``DataValue(None)`` is a valid SQL NULL and is distinct
    from ``DataValue("")``.
    """

    value: Any = None

    @property
    def is_null(self) -> bool:
        return self.value is None


NULL = DataValue(None)


class EmptyString(str):
    """
    A deliberately empty text cell (written as ``""`` in a data file).

    Equal to ``""`` everywhere, but not a plain ``str``, so it is not turned
    into NULL the way a bare empty cell is.
    """

    __slots__ = ()

    def __new__(cls):
        return super().__new__(cls, "")

    def __repr__(self) -> str:
        return "EMPTY_STRING"


EMPTY_STRING = EmptyString()
