# app/core/chat/predicates.py
"""
PREDICATE BUILDER - Turn a free-text question into filter conditions

Purpose:
    Build a small predicate tree per table. Conditions are OR-ed together
    (return rows matching ANY plausible filter) and every literal stays a
    value on the tree. Rendering to SQL with bound parameters happens in
    retrieval.py, so user text never becomes query text.

Rules (additive):
    1. Gazetteer location      → State = v, LGA = v
    2. 4-digit token           → Response_Year = <int>
    3. Column name mentioned   → column is present and non-zero
    4. Every identifier column → column = <whole message>
"""

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from app.core.chat.schema_registry import TableDescriptor, YEAR_COLUMN
from app.core.chat.vocabulary import find_location

YEAR_TOKEN_RE = re.compile(r"\b(\d{4})\b")

LOCATION_COLUMNS = ("State", "LGA")


@dataclass(frozen=True)
class Equals:
    column: str
    value: Union[str, int]

    @property
    def value_kind(self) -> str:
        return "integer" if isinstance(self.value, int) else "string"


@dataclass(frozen=True)
class NonZero:
    column: str


Predicate = Union[Equals, NonZero]


@dataclass(frozen=True)
class PredicateSet:
    table: str
    predicates: Tuple[Predicate, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def __iter__(self):
        return iter(self.predicates)

    @property
    def parameters(self) -> List[Tuple[Union[str, int], str]]:
        """Bound values with their kind, in predicate order: [("Fufore", "string"), (2021, "integer")]"""
        return [
            (predicate.value, predicate.value_kind)
            for predicate in self.predicates
            if isinstance(predicate, Equals)
        ]


def location_predicates(message: str, table: TableDescriptor) -> List[Predicate]:
    location = find_location(message)
    if location is None:
        return []
    return [
        Equals(column, location)
        for column in LOCATION_COLUMNS
        if table.has_column(column)
    ]


def year_predicates(message: str, table: TableDescriptor) -> List[Predicate]:
    if not table.has_column(YEAR_COLUMN):
        return []
    match = YEAR_TOKEN_RE.search(message)
    if not match:
        return []
    return [Equals(YEAR_COLUMN, int(match.group(1)))]


def mentioned_column_predicates(message: str, table: TableDescriptor) -> List[Predicate]:
    message_lower = message.lower()
    return [
        NonZero(column.name)
        for column in table.columns
        if column.humanized in message_lower
    ]


def exact_value_predicates(message: str, table: TableDescriptor) -> List[Predicate]:
    # The user may have typed a bare place, pcode or sector name
    return [Equals(column.name, message) for column in table.identifier_columns]


def build_predicates(message: str, table: TableDescriptor) -> PredicateSet:
    """
    Build the OR-ed filter for one table.

    Only columns that exist in `table` are referenced, so the baseline table
    (no Sector column) never gets a sector condition.

    Example:
        build_predicates("How many IDP Girls in Fufore?", BASELINE)
        -> Equals(State, "Fufore"), Equals(LGA, "Fufore"), NonZero(IDP_Girls),
           Equals(State, "How many IDP Girls in Fufore?"), ...
    """
    candidates = (
        location_predicates(message, table)
        + year_predicates(message, table)
        + mentioned_column_predicates(message, table)
        + exact_value_predicates(message, table)
    )

    # Drop repeats (e.g. the message is itself "Fufore"), keeping first position
    unique: List[Predicate] = []
    for predicate in candidates:
        if predicate not in unique:
            unique.append(predicate)

    return PredicateSet(table=table.name, predicates=tuple(unique))
