# app/core/chat/reconcile.py
"""
Cross-table reconciliation.

A State, pcode or sector name can be stored in the baseline, needs and
severity tables at once, each time meaning something different. When the
user's whole message is such a value and it matched in two or more tables,
the answer must say where each figure comes from.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from app.core.chat.retrieval import Row
from app.core.chat.schema_registry import IDENTIFIER_COLUMNS, REGISTRY, SchemaRegistry


@dataclass(frozen=True)
class CrossTableNote:
    value: str
    column: str
    tables: Tuple[str, ...]

    def describe(self) -> str:
        return (
            f"The value '{self.value}' in column {self.column} appears in tables "
            f"{', '.join(self.tables)}. These tables describe different populations "
            f"(general demographics, people in need, severity); keep their figures separate."
        )


def _normalize(value) -> str:
    return str(value).strip().casefold()


def find_cross_table_matches(
    message: str,
    rows_by_table: Dict[str, List[Row]],
    registry: SchemaRegistry = REGISTRY,
) -> List[CrossTableNote]:
    """
    Return one note per identifier column whose value equals the message in
    at least two non-empty tables. Tables are listed in registry order.

    Nothing is reported unless more than one table returned rows.
    """
    non_empty = {name: rows for name, rows in rows_by_table.items() if rows}
    if len(non_empty) < 2:
        return []

    target = _normalize(message)
    notes = []
    for column in IDENTIFIER_COLUMNS:
        matching_tables = []
        value = None
        for table in registry.tables:
            rows = non_empty.get(table.name)
            if not rows or not table.has_column(column):
                continue
            for row in rows:
                cell = row.get(column)
                if cell is not None and _normalize(cell) == target:
                    matching_tables.append(table.name)
                    value = value or str(cell)
                    break

        if len(matching_tables) >= 2:
            notes.append(CrossTableNote(value, column, tuple(matching_tables)))

    return notes
