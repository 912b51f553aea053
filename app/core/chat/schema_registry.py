# app/core/chat/schema_registry.py
"""
SCHEMA REGISTRY - Static description of the statistics tables

Purpose:
    1. List every table the chat engine may query, with its columns in order
    2. Tag each column as integer (a count) or text (an identifier)
    3. Give each column a human label used in summaries and prompts

Everything downstream (classifier, predicate builder, summarizer, prompt)
is parameterized by a TableDescriptor, never by a hard-coded column list.
Bump SCHEMA_VERSION whenever a table or column is added.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

SCHEMA_VERSION = 3

BASELINE_TABLE = "baselinedata"
NEEDS_TABLE = "needsdata"
SEVERITY_TABLE = "severitydata"

YEAR_COLUMN = "Response_Year"

# Free-text columns that identify a place or a sector.
# The same value can appear in several tables with different meanings.
IDENTIFIER_COLUMNS = ("State", "State_Pcode", "LGA", "LGA_Pcode", "Sector")

DISPLACEMENT_STATUSES = ("IDP", "Returnee", "Host_Community")
DEMOGRAPHIC_BANDS = ("Girls", "Boys", "Women", "Men", "Elderly_Women", "Elderly_Men")


class SemanticType(str, Enum):
    INTEGER = "integer"
    TEXT = "text"


def humanize(column_name: str) -> str:
    """IDP_Elderly_Women -> 'idp elderly women'"""
    return column_name.replace("_", " ").lower()


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    semantic_type: SemanticType
    label: str
    nullable: bool = True

    @property
    def humanized(self) -> str:
        return humanize(self.name)

    @property
    def is_text(self) -> bool:
        return self.semantic_type == SemanticType.TEXT

    @property
    def is_integer(self) -> bool:
        return self.semantic_type == SemanticType.INTEGER


@dataclass(frozen=True)
class TableDescriptor:
    name: str
    label: str
    description: str
    columns: Tuple[ColumnDescriptor, ...]

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    @property
    def text_columns(self) -> Tuple[ColumnDescriptor, ...]:
        return tuple(column for column in self.columns if column.is_text)

    @property
    def measure_columns(self) -> Tuple[ColumnDescriptor, ...]:
        """Integer columns that hold counts (everything numeric except the year)."""
        return tuple(
            column
            for column in self.columns
            if column.is_integer and column.name != YEAR_COLUMN
        )

    @property
    def identifier_columns(self) -> Tuple[ColumnDescriptor, ...]:
        return tuple(
            column for column in self.columns if column.name in IDENTIFIER_COLUMNS
        )

    def has_column(self, name: str) -> bool:
        return name in self.column_names

    def column(self, name: str) -> ColumnDescriptor:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"{self.name} has no column {name!r}")


@dataclass(frozen=True)
class SchemaRegistry:
    version: int
    tables: Tuple[TableDescriptor, ...]

    @property
    def table_names(self) -> Tuple[str, ...]:
        return tuple(table.name for table in self.tables)

    def get(self, name: str) -> TableDescriptor:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(f"Unknown table {name!r}")

    def find(self, name: str) -> Optional[TableDescriptor]:
        try:
            return self.get(name)
        except KeyError:
            return None

    def all_columns(self) -> Dict[str, ColumnDescriptor]:
        """Every distinct column across tables, keyed by name (first table wins)."""
        columns: Dict[str, ColumnDescriptor] = {}
        for table in self.tables:
            for column in table.columns:
                columns.setdefault(column.name, column)
        return columns


# ============================================================================
# COLUMN BUILDING BLOCKS
# ============================================================================


def _integer(name: str, label: str) -> ColumnDescriptor:
    return ColumnDescriptor(name, SemanticType.INTEGER, label)


def _text(name: str, label: str) -> ColumnDescriptor:
    return ColumnDescriptor(name, SemanticType.TEXT, label)


def _demographic_columns() -> Tuple[ColumnDescriptor, ...]:
    columns = []
    for status in DISPLACEMENT_STATUSES:
        for band in DEMOGRAPHIC_BANDS:
            name = f"{status}_{band}"
            columns.append(_integer(name, name.replace("_", " ")))
    return tuple(columns)


_YEAR = _integer(YEAR_COLUMN, "Response Year")
_SECTOR = _text("Sector", "Sector")
_LOCATION = (
    _text("State", "State"),
    _text("State_Pcode", "State Pcode"),
    _text("LGA", "LGA"),
    _text("LGA_Pcode", "LGA Pcode"),
)


BASELINE = TableDescriptor(
    name=BASELINE_TABLE,
    label="Baseline demographics",
    description=(
        "general population counts of IDP, Returnee and Host Community "
        "girls, boys, women, men, elderly women and elderly men per State/LGA and year"
    ),
    columns=(_YEAR, *_LOCATION, *_demographic_columns()),
)

NEEDS = TableDescriptor(
    name=NEEDS_TABLE,
    label="People in need",
    description=(
        "the same demographic breakdown restricted to people requiring "
        "humanitarian assistance, split by sector (e.g. Health, WASH, Protection)"
    ),
    columns=(_YEAR, _SECTOR, *_LOCATION, *_demographic_columns()),
)

SEVERITY = TableDescriptor(
    name=SEVERITY_TABLE,
    label="Severity",
    description=(
        "aggregated severity counters for IDP, Returnee and Host Community "
        "populations plus a composite final severity score per sector, State/LGA and year"
    ),
    columns=(
        _YEAR,
        _SECTOR,
        *_LOCATION,
        _integer("IDP_Severity", "IDP Severity"),
        _integer("Returnee_Severity", "Returnee Severity"),
        _integer("Host_Community_Severity", "Host Community Severity"),
        _integer("Final_Severity", "Final Severity"),
    ),
)

REGISTRY = SchemaRegistry(version=SCHEMA_VERSION, tables=(BASELINE, NEEDS, SEVERITY))
