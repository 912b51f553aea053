# app/core/chat/retrieval.py
"""
RETRIEVAL EXECUTOR - Run the predicate tree against the database

Purpose:
    1. Render Equals/NonZero predicates into SQLAlchemy clauses (bound parameters only)
    2. Fetch at most RESULT_LIMIT rows per table
    3. Answer point existence probes for the classifier

The executor wraps exactly one AsyncSession, handed in by the request.
Nothing here opens or closes connections.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import Table, and_, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.core import models
from app.core.chat.predicates import Equals, NonZero, Predicate, PredicateSet
from app.core.chat.schema_registry import REGISTRY, SchemaRegistry, TableDescriptor
from app.core.config import settings

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

# Storage tables the engine may read, keyed by registry table name
STATISTICS_TABLES: Dict[str, Table] = {
    model.__tablename__: model.__table__
    for model in (models.BaselineData, models.NeedsData, models.SeverityData)
}


class RetrievalError(Exception):
    """A lookup could not be prepared or executed. Fatal for the request."""


class QueryExecutor(Protocol):
    async def fetch_rows(
        self, predicates: PredicateSet, limit: Optional[int] = None
    ) -> List[Row]: ...

    async def value_exists(self, table: str, column: str, value: str) -> bool: ...


# ============================================================================
# RENDERING: predicate tree -> SQL clause
# ============================================================================


def render_predicate(
    table: Table, descriptor: TableDescriptor, predicate: Predicate
) -> ColumnElement:
    """
    Examples:
        Equals("LGA", "Fufore")  -> "LGA" = :LGA_1
        NonZero("IDP_Girls")     -> "IDP_Girls" IS NOT NULL AND "IDP_Girls" != :IDP_Girls_1
        NonZero("Sector")        -> "Sector" IS NOT NULL AND "Sector" != :Sector_1   ('' for text)
    """
    column = table.c[predicate.column]

    if isinstance(predicate, Equals):
        return column == predicate.value

    if isinstance(predicate, NonZero):
        empty = "" if descriptor.column(predicate.column).is_text else 0
        return and_(column.isnot(None), column != empty)

    raise TypeError(f"Unsupported predicate: {predicate!r}")


def render_where(
    table: Table, descriptor: TableDescriptor, predicates: PredicateSet
) -> Optional[ColumnElement]:
    """OR all conditions together; None when there is nothing to filter on."""
    if not predicates:
        return None
    return or_(*(render_predicate(table, descriptor, p) for p in predicates))


# ============================================================================
# EXECUTION
# ============================================================================


class SqlAlchemyQueryExecutor:
    """QueryExecutor backed by one request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession, registry: SchemaRegistry = REGISTRY):
        self.db = db
        self.registry = registry

    def _table(self, name: str) -> Table:
        try:
            return STATISTICS_TABLES[name]
        except KeyError:
            raise RetrievalError(f"Table {name!r} is not mapped")

    async def fetch_rows(
        self, predicates: PredicateSet, limit: Optional[int] = None
    ) -> List[Row]:
        """
        Fetch the first `limit` matching rows in storage order (no ORDER BY).
        With no predicates this is an unfiltered preview of the table.
        """
        if limit is None:
            limit = settings.RESULT_LIMIT
        descriptor = self.registry.get(predicates.table)
        table = self._table(descriptor.name)

        stmt = select(*(table.c[name] for name in descriptor.column_names))
        where = render_where(table, descriptor, predicates)
        if where is not None:
            stmt = stmt.where(where)
        stmt = stmt.limit(limit)

        try:
            result = await self.db.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as error:
            logger.error(f"Failed to fetch data from {descriptor.name}: {error}")
            raise RetrievalError(f"Failed to fetch data from {descriptor.name}") from error

        logger.info(
            f"{descriptor.name}: {len(rows)} rows for {len(predicates)} conditions"
        )
        return rows

    async def value_exists(self, table: str, column: str, value: str) -> bool:
        """
        Exact-match lookup used by the relevance fallback. Runs inside a
        savepoint so a failed lookup leaves the request transaction usable.
        """
        sa_table = self._table(table)
        stmt = (
            select(literal(1))
            .select_from(sa_table)
            .where(sa_table.c[column] == value)
            .limit(1)
        )
        try:
            async with self.db.begin_nested():
                result = await self.db.execute(stmt)
                return result.first() is not None
        except SQLAlchemyError as error:
            raise RetrievalError(f"Probe on {table}.{column} failed") from error
