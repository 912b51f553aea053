# app/core/chat/pipeline.py
"""
CHAT PIPELINE - Orchestration

Purpose: run classify → build predicates → retrieve → reconcile → summarize →
compose prompt → generate, strictly in that order, for one message.

Every failure is terminal for the request: no retries, no partial answers.
Only the classifier's fallback probes swallow their own errors.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from app.ai_feature.service import TextGenerator
from app.core.chat import classifier
from app.core.chat.classifier import QueryIntent
from app.core.chat.predicates import build_predicates
from app.core.chat.prompt import compose_data_prompt, compose_fallback_prompt
from app.core.chat.reconcile import CrossTableNote, find_cross_table_matches
from app.core.chat.retrieval import QueryExecutor, Row
from app.core.chat.schema_registry import (
    NEEDS_TABLE,
    REGISTRY,
    SchemaRegistry,
    TableDescriptor,
)
from app.core.chat.summarize import TableSummary, summarize

logger = logging.getLogger(__name__)


class ChatLogger:
    """Step logger for one chat request."""

    def __init__(self):
        self.start_time = datetime.now()

    def log(self, step: str, message: str, level: str = "info"):
        elapsed = (datetime.now() - self.start_time).total_seconds()
        getattr(logger, level)(f"[{elapsed:.3f}s] {step}: {message}")


@dataclass
class PreparedPrompt:
    message: str
    intent: QueryIntent
    prompt: str
    rows_by_table: Dict[str, List[Row]] = field(default_factory=dict)
    summaries: List[TableSummary] = field(default_factory=list)
    notes: List[CrossTableNote] = field(default_factory=list)


@dataclass
class ChatResult:
    message: str
    intent: QueryIntent
    response: str


def tables_for(intent: QueryIntent, registry: SchemaRegistry = REGISTRY) -> List[TableDescriptor]:
    """In-need questions only look at the needs table; everything else at all tables."""
    if intent.is_in_need:
        return [registry.get(NEEDS_TABLE)]
    return list(registry.tables)


async def retrieve(
    message: str, tables: List[TableDescriptor], executor: QueryExecutor
) -> Dict[str, List[Row]]:
    rows_by_table = {}
    for table in tables:
        predicates = build_predicates(message, table)
        rows_by_table[table.name] = await executor.fetch_rows(predicates)
    return rows_by_table


async def prepare_prompt(
    message: str, executor: QueryExecutor, registry: SchemaRegistry = REGISTRY
) -> PreparedPrompt:
    """
    Everything up to (not including) the generation call.

    Raises:
        RetrievalError: a table lookup failed
    """
    chat_logger = ChatLogger()

    intent = await classifier.classify(message, executor, registry)
    chat_logger.log(
        "classify",
        f"related={intent.is_related} in_need={intent.is_in_need} detailed={intent.is_detailed}",
    )

    if not intent.is_related:
        return PreparedPrompt(
            message=message, intent=intent, prompt=compose_fallback_prompt(message)
        )

    tables = tables_for(intent, registry)
    rows_by_table = await retrieve(message, tables, executor)
    chat_logger.log(
        "retrieve",
        ", ".join(f"{name}={len(rows)}" for name, rows in rows_by_table.items()),
    )

    notes = find_cross_table_matches(message, rows_by_table, registry)
    if notes:
        chat_logger.log("reconcile", f"{len(notes)} cross-table matches", "warning")

    summaries = summarize(message, intent, rows_by_table, registry)
    chat_logger.log("summarize", f"{len(summaries)} table summaries")

    return PreparedPrompt(
        message=message,
        intent=intent,
        prompt=compose_data_prompt(message, summaries, notes, registry),
        rows_by_table=rows_by_table,
        summaries=summaries,
        notes=notes,
    )


async def answer_message(
    message: str,
    executor: QueryExecutor,
    generator: TextGenerator,
    registry: SchemaRegistry = REGISTRY,
) -> ChatResult:
    """
    Full flow for one message.

    Raises:
        RetrievalError: a table lookup failed
        GenerationServiceError: the generation service failed or returned nothing
    """
    prepared = await prepare_prompt(message, executor, registry)
    response = await generator.generate(prepared.prompt)
    return ChatResult(message=message, intent=prepared.intent, response=response)
