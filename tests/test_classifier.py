import pytest

from conftest import FakeExecutor
from app.core.chat import classifier
from app.core.chat.schema_registry import REGISTRY


@pytest.mark.parametrize("column", sorted(REGISTRY.all_columns()))
def test_column_name_makes_message_related(column):
    """Any humanized column name counts as a reference to the dataset"""
    message = f"Tell me about {column.replace('_', ' ').upper()} please"
    assert classifier.mentions_column(message)
    assert classifier.is_lexically_related(message)


@pytest.mark.parametrize(
    "message",
    [
        "How many IDP Girls in Fufore?",
        "total returnees",
        "Show me 2021",
        "statistics for Borno",
        "What about internally displaced people?",
        "girls",
        "Tell me about the dataset",
        "Show the yearly figures",
    ],
)
def test_lexically_related_messages(message):
    assert classifier.is_lexically_related(message)


@pytest.mark.parametrize(
    "message",
    ["What is the weather today?", "Hello!", "Tell me a joke", "Play some music"],
)
def test_unrelated_messages(message):
    assert not classifier.is_lexically_related(message)


@pytest.mark.asyncio
async def test_unrelated_message_probes_every_text_column():
    """Nothing lexical and nothing stored -> not related, after one probe per text column"""
    executor = FakeExecutor()
    intent = await classifier.classify("What is the weather today?", executor)

    assert intent == classifier.QueryIntent(is_related=False)
    expected = [
        (table.name, column.name)
        for table in REGISTRY.tables
        for column in table.text_columns
    ]
    assert executor.probes == expected
    assert executor.fetched == []


@pytest.mark.asyncio
async def test_stored_value_makes_message_related():
    """An open-ended sector name is recognised through the database"""
    executor = FakeExecutor(stored={("needsdata", "Sector"): {"Nutrition"}})
    intent = await classifier.classify("Nutrition", executor)
    assert intent.is_related


@pytest.mark.asyncio
async def test_failing_probe_is_skipped():
    executor = FakeExecutor(
        stored={("severitydata", "Sector"): {"Nutrition"}},
        failing_probes=[("baselinedata", "State"), ("needsdata", "Sector")],
    )
    intent = await classifier.classify("Nutrition", executor)

    assert intent.is_related
    assert ("needsdata", "Sector") in executor.probes


@pytest.mark.asyncio
async def test_lexical_match_skips_database():
    executor = FakeExecutor()
    intent = await classifier.classify("How many IDP Girls in Fufore?", executor)
    assert intent.is_related
    assert executor.probes == []


@pytest.mark.parametrize(
    "message, in_need, detailed",
    [
        ("Women in need in Health sector", True, False),
        ("Show IDP girls IN DETAILED form", False, True),
        ("in detailed: people IN NEED in Borno", True, True),
        ("How many IDP Girls in Fufore?", False, False),
    ],
)
def test_intent_flags(message, in_need, detailed):
    intent = classifier.derive_intent(message, True)
    assert intent.is_in_need is in_need
    assert intent.is_detailed is detailed
    assert intent.is_related


def test_flags_do_not_change_relatedness():
    assert not classifier.derive_intent("in need", False).is_related


@pytest.mark.asyncio
async def test_classification_is_idempotent():
    message = "Women in need in Health sector"
    first = await classifier.classify(message, FakeExecutor())
    second = await classifier.classify(message, FakeExecutor())
    assert first == second == classifier.QueryIntent(True, True, False)


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["Tell me about the dataset", "Show the yearly figures"])
async def test_keyword_inside_a_longer_word_is_related(message):
    """'data' in 'dataset' and 'year' in 'yearly' still point at the dataset"""
    executor = FakeExecutor()
    intent = await classifier.classify(message, executor)

    assert intent.is_related
    assert executor.probes == []
