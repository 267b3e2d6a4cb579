"""Domain identifiers and value objects."""

from fixtureloader.domain.identifiers import (
    EMPTY_STRING,
    NULL,
    ColumnName,
    DataSourceName,
    DataValue,
    FileExtension,
    ScenarioMarker,
    ScenarioName,
    SchemaName,
    TableName,
)

__all__ = [
    "EMPTY_STRING",
    "NULL",
    "ColumnName",
    "DataSourceName",
    "DataValue",
    "FileExtension",
    "ScenarioMarker",
    "ScenarioName",
    "SchemaName",
    "TableName",
]
