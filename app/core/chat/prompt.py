# app/core/chat/prompt.py
"""Build the single text payload sent to the generation service."""

from typing import List

from app.core.chat.reconcile import CrossTableNote
from app.core.chat.schema_registry import REGISTRY, SchemaRegistry
from app.core.chat.summarize import NO_DATA_MESSAGE, TableSummary

ASSISTANT_NAME = "Unimaid Resources AI"

INSTRUCTIONS = (
    "Provide a clear, conversational answer with Markdown formatting "
    "(e.g., **bold**, *italic*, [links](url)) where appropriate. "
    "Use the figures exactly as given: do not multiply, add up or otherwise "
    "combine numbers unless the user explicitly asks for it. "
    "If figures come from different tables, say which table each one belongs to. "
    "If no data is relevant, explain clearly and suggest related questions."
)


def describe_schema(registry: SchemaRegistry = REGISTRY) -> str:
    """
    Plain-language description of every table, e.g.

        - baselinedata: general population counts ... Columns: Response Year, State, ...
    """
    lines = ["The fredometer database has these tables:"]
    for table in registry.tables:
        columns = ", ".join(column.label for column in table.columns)
        lines.append(f"- {table.name}: {table.description}. Columns: {columns}.")
    return "\n".join(lines)


def compose_data_prompt(
    message: str,
    summaries: List[TableSummary],
    notes: List[CrossTableNote],
    registry: SchemaRegistry = REGISTRY,
) -> str:
    sections = [
        f"You are {ASSISTANT_NAME}, an expert on baseline data about IDP, "
        f"Returnee, and Host Community populations.",
        describe_schema(registry),
    ]

    if notes:
        sections.append(
            "Ambiguity notes:\n" + "\n".join(f"- {note.describe()}" for note in notes)
        )

    if summaries:
        sections.append(
            "Data matching the question:\n"
            + "\n\n".join(summary.render() for summary in summaries)
        )
    else:
        sections.append(NO_DATA_MESSAGE)

    sections.append(f"User asked: '{message}'")
    sections.append(INSTRUCTIONS)
    return "\n\n".join(sections)


def compose_fallback_prompt(message: str) -> str:
    """Prompt for messages that are not about the dataset; no data is attached."""
    return (
        f"You are {ASSISTANT_NAME}, specialized in baseline data about IDP, "
        f"Returnee, and Host Community populations (e.g., IDP_Girls, "
        f"Returnee_Women, State, LGA, Sector, severity scores). User asked: '{message}'\n"
        "This question seems unrelated to the baseline data. Respond in a friendly, "
        "conversational tone with Markdown formatting, suggesting the user ask about "
        "baseline data or offering to clarify their question. "
        "Do not offer to browse the internet."
    )
