# app/core/chat/summarize.py
"""
AGGREGATOR - Reduce fetched rows to something the generation step can use

Purpose:
    1. Default: sum the count columns and report only what the user asked about
    2. "in detailed": skip the arithmetic and list every row with every column
    3. Collect the distinct sectors, locations and years behind the numbers

Why summation by default: the generation service is better at explaining
pre-computed totals than at adding up dozens of raw rows itself.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.core.chat.classifier import QueryIntent
from app.core.chat.retrieval import Row
from app.core.chat.schema_registry import (
    DISPLACEMENT_STATUSES,
    REGISTRY,
    YEAR_COLUMN,
    SchemaRegistry,
    TableDescriptor,
)

NO_DATA_MESSAGE = (
    "No specific data found for the query, but you can provide general insights."
)

# Super-categories and the disaggregated columns they add up
DEMOGRAPHIC_GROUPS: Dict[str, List[str]] = {
    "women": [
        f"{status}_{band}"
        for status in DISPLACEMENT_STATUSES
        for band in ("Women", "Elderly_Women")
    ],
    "men": [
        f"{status}_{band}"
        for status in DISPLACEMENT_STATUSES
        for band in ("Men", "Elderly_Men")
    ],
    "girls": [f"{status}_Girls" for status in DISPLACEMENT_STATUSES],
    "boys": [f"{status}_Boys" for status in DISPLACEMENT_STATUSES],
}

_GROUP_RES = {
    group: re.compile(rf"\b{group}\b", re.IGNORECASE) for group in DEMOGRAPHIC_GROUPS
}


@dataclass
class TableSummary:
    table: str
    label: str
    row_count: int
    totals: Dict[str, int] = field(default_factory=dict)
    sectors: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)
    years: List[int] = field(default_factory=list)
    detailed_rows: Optional[List[str]] = None

    @property
    def is_detailed(self) -> bool:
        return self.detailed_rows is not None

    def render(self) -> str:
        noun = "row" if self.row_count == 1 else "rows"
        lines = [f"{self.label} ({self.table}), {self.row_count} matching {noun}:"]

        if self.is_detailed:
            lines.extend(f"- {row}" for row in self.detailed_rows)
            return "\n".join(lines)

        lines.extend(f"- {label}: {value}" for label, value in self.totals.items())
        if self.sectors:
            lines.append(f"- Sectors: {', '.join(self.sectors)}")
        if self.locations:
            lines.append(f"- Locations: {'; '.join(self.locations)}")
        if self.years:
            lines.append(f"- Years: {', '.join(str(year) for year in self.years)}")
        return "\n".join(lines)


# ============================================================================
# HELPERS
# ============================================================================


def _as_int(value) -> int:
    return int(value) if value is not None else 0


def _distinct(values) -> List:
    seen = []
    for value in values:
        if value not in (None, "") and value not in seen:
            seen.append(value)
    return seen


def column_totals(rows: List[Row], table: TableDescriptor) -> Dict[str, int]:
    """Sum every count column across the rows (NULL counts as 0)."""
    return {
        column.name: sum(_as_int(row.get(column.name)) for row in rows)
        for column in table.measure_columns
    }


def composite_total(rows: List[Row], group: str) -> int:
    """
    Add up every sub-column of a super-category across the rows.

    Example:
        composite_total(rows, "women") sums IDP/Returnee/Host_Community
        Women and Elderly_Women (six columns) over all rows.
    """
    return sum(
        _as_int(row.get(column)) for row in rows for column in DEMOGRAPHIC_GROUPS[group]
    )


def mentioned_groups(message: str, table: TableDescriptor) -> List[str]:
    """Super-categories named in the message that this table can answer."""
    return [
        group
        for group, pattern in _GROUP_RES.items()
        if pattern.search(message)
        and all(table.has_column(column) for column in DEMOGRAPHIC_GROUPS[group])
    ]


def _location(row: Row) -> Optional[str]:
    parts = [row.get("LGA"), row.get("State")]
    parts = [str(part) for part in parts if part not in (None, "")]
    return ", ".join(parts) if parts else None


def render_row(row: Row, table: TableDescriptor) -> str:
    return "; ".join(
        f"{column.label}: {row.get(column.name) if row.get(column.name) is not None else 'N/A'}"
        for column in table.columns
    )


# ============================================================================
# SUMMARIES
# ============================================================================


def select_totals(message: str, rows: List[Row], table: TableDescriptor) -> Dict[str, int]:
    """
    Pick which totals to report, most specific first:
        1. columns named in the message ("IDP Girls") with a non-zero sum;
           when every named column sums to zero, those zero totals are
           reported instead
        2. super-categories named in the message ("women") as one composite each
        3. every non-zero column
    """
    sums = column_totals(rows, table)
    message_lower = message.lower()

    mentioned = [
        column for column in table.measure_columns if column.humanized in message_lower
    ]
    if mentioned:
        reported = [column for column in mentioned if sums[column.name]] or mentioned
        return {f"Total {column.label}": sums[column.name] for column in reported}

    groups = mentioned_groups(message, table)
    if groups:
        return {f"Total {group.title()}": composite_total(rows, group) for group in groups}

    return {
        f"Total {column.label}": sums[column.name]
        for column in table.measure_columns
        if sums[column.name]
    }


def summarize_table(
    message: str, intent: QueryIntent, rows: List[Row], table: TableDescriptor
) -> TableSummary:
    summary = TableSummary(table=table.name, label=table.label, row_count=len(rows))

    if intent.is_detailed:
        summary.detailed_rows = [render_row(row, table) for row in rows]
        return summary

    summary.totals = select_totals(message, rows, table)
    summary.sectors = sorted(_distinct(row.get("Sector") for row in rows))
    summary.locations = _distinct(_location(row) for row in rows)
    summary.years = sorted(_distinct(row.get(YEAR_COLUMN) for row in rows))
    return summary


def summarize(
    message: str,
    intent: QueryIntent,
    rows_by_table: Dict[str, List[Row]],
    registry: SchemaRegistry = REGISTRY,
) -> List[TableSummary]:
    """One summary per table that returned rows; an empty list means no data."""
    return [
        summarize_table(message, intent, rows_by_table[table.name], table)
        for table in registry.tables
        if rows_by_table.get(table.name)
    ]
