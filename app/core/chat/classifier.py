# app/core/chat/classifier.py
"""
RELEVANCE CLASSIFIER - Does this message talk about the statistics tables?

Purpose:
    1. Cheap lexical checks: column names, domain keywords, question patterns
    2. Fallback database probe: is the whole message a stored State/LGA/sector value?
    3. Tag the intent once per request (related / in need / detailed)

Data Flow:
    message → is_lexically_related() ──yes──→ related
                      │ no
                      ↓
              matches_stored_value() (one probe per table x text column)
                      ↓
              derive_intent() → QueryIntent (frozen)
"""

import logging
import re
from dataclasses import dataclass

from app.core.chat.retrieval import QueryExecutor, RetrievalError
from app.core.chat.schema_registry import REGISTRY, SchemaRegistry
from app.core.chat.vocabulary import contains_domain_keyword

logger = logging.getLogger(__name__)

QUANTITY_RE = re.compile(r"\b(how many|count|number|total)\b", re.IGNORECASE)
LOCATION_PHRASE_RE = re.compile(r"\b(in|at|from)\s+[a-zA-Z\s]+\b", re.IGNORECASE)
YEAR_RE = re.compile(r"\b(\d{4})\b")

IN_NEED_PHRASE = "in need"
DETAILED_PHRASE = "in detailed"


@dataclass(frozen=True)
class QueryIntent:
    is_related: bool
    is_in_need: bool = False
    is_detailed: bool = False


# ============================================================================
# STEP 1: LEXICAL CHECKS (pure, no I/O)
# ============================================================================


def mentions_column(message: str, registry: SchemaRegistry = REGISTRY) -> bool:
    """True when any column name, with underscores as spaces, appears in the text."""
    message_lower = message.lower()
    return any(
        column.humanized in message_lower for column in registry.all_columns().values()
    )


def matches_question_pattern(message: str) -> bool:
    return bool(
        QUANTITY_RE.search(message)
        or LOCATION_PHRASE_RE.search(message)
        or YEAR_RE.search(message)
    )


def is_lexically_related(message: str, registry: SchemaRegistry = REGISTRY) -> bool:
    """
    Decide relatedness from the text alone.

    Examples:
        "How many IDP Girls in Fufore?"  -> True (column name + keyword + pattern)
        "Show me 2021"                   -> True (bare year)
        "What is the weather today?"     -> False
    """
    return (
        mentions_column(message, registry)
        or contains_domain_keyword(message)
        or matches_question_pattern(message)
    )


# ============================================================================
# STEP 2: DATABASE FALLBACK
# ============================================================================


async def matches_stored_value(
    message: str, executor: QueryExecutor, registry: SchemaRegistry = REGISTRY
) -> bool:
    """
    Check whether the message is exactly a value stored in any text column.
    Location and sector names are open-ended, so a keyword list can never cover them.

    A probe that fails is logged and skipped; the other probes still run.
    """
    for table in registry.tables:
        for column in table.text_columns:
            try:
                if await executor.value_exists(table.name, column.name, message):
                    logger.info(
                        f"Message matched stored value in {table.name}.{column.name}"
                    )
                    return True
            except RetrievalError as error:
                logger.error(
                    f"Existence probe on {table.name}.{column.name} failed: {error}"
                )
    return False


# ============================================================================
# STEP 3: INTENT TAGGING
# ============================================================================


def derive_intent(message: str, is_related: bool) -> QueryIntent:
    """Attach the in-need / detailed refinements. They never change relatedness."""
    message_lower = message.lower()
    return QueryIntent(
        is_related=is_related,
        is_in_need=IN_NEED_PHRASE in message_lower,
        is_detailed=DETAILED_PHRASE in message_lower,
    )


async def classify(
    message: str, executor: QueryExecutor, registry: SchemaRegistry = REGISTRY
) -> QueryIntent:
    related = is_lexically_related(message, registry)
    if not related:
        related = await matches_stored_value(message, executor, registry)
    return derive_intent(message, related)
