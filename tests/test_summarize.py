import random

import pytest

from app.core.chat.classifier import QueryIntent
from app.core.chat.schema_registry import BASELINE, NEEDS, SEVERITY
from app.core.chat.summarize import (
    DEMOGRAPHIC_GROUPS,
    NO_DATA_MESSAGE,
    composite_total,
    summarize,
    summarize_table,
)

SUMMARY = QueryIntent(is_related=True)
DETAILED = QueryIntent(is_related=True, is_detailed=True)

FUFORE_ROWS = [
    {
        "Response_Year": 2021,
        "State": "Adamawa",
        "LGA": "Fufore",
        "IDP_Girls": 10,
        "IDP_Women": 5,
        "IDP_Elderly_Women": 1,
        "Returnee_Women": 2,
        "Host_Community_Elderly_Women": 3,
    },
    {
        "Response_Year": 2022,
        "State": "Adamawa",
        "LGA": "Fufore",
        "IDP_Girls": 20,
        "IDP_Boys": None,
        "IDP_Men": 8,
    },
]


def test_mentioned_column_total():
    summary = summarize_table("How many IDP Girls in Fufore?", SUMMARY, FUFORE_ROWS, BASELINE)

    assert summary.totals == {"Total IDP Girls": 30}
    assert "- Total IDP Girls: 30" in summary.render()
    assert summary.locations == ["Fufore, Adamawa"]
    assert summary.years == [2021, 2022]


def test_women_composite():
    summary = summarize_table("How many women are there?", SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {"Total Women": 11}


def test_men_does_not_match_women():
    summary = summarize_table("How many men?", SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {"Total Men": 8}


def test_specific_column_wins_over_super_category():
    summary = summarize_table("idp women in Fufore", SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {"Total IDP Women": 5}


def test_mentioned_columns_that_sum_to_zero_are_still_reported():
    summary = summarize_table("How many Returnee Boys?", SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {"Total Returnee Boys": 0}


def test_zero_mention_is_dropped_next_to_a_non_zero_one():
    message = "IDP Girls and Returnee Boys"
    summary = summarize_table(message, SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {"Total IDP Girls": 30}


@pytest.mark.parametrize("seed", range(5))
def test_women_composite_equals_sum_of_six_columns(seed):
    rng = random.Random(seed)
    rows = [
        {column.name: rng.choice([None, 0, rng.randint(1, 500)]) for column in NEEDS.columns}
        for _ in range(rng.randint(1, 5))
    ]
    women_columns = [
        "IDP_Women",
        "IDP_Elderly_Women",
        "Returnee_Women",
        "Returnee_Elderly_Women",
        "Host_Community_Women",
        "Host_Community_Elderly_Women",
    ]
    expected = sum(row[column] or 0 for row in rows for column in women_columns)

    assert sorted(DEMOGRAPHIC_GROUPS["women"]) == sorted(women_columns)
    assert composite_total(rows, "women") == expected


def test_without_mentions_every_non_zero_total_is_reported():
    summary = summarize_table("Fufore", SUMMARY, FUFORE_ROWS, BASELINE)
    assert summary.totals == {
        "Total IDP Girls": 30,
        "Total IDP Women": 5,
        "Total IDP Men": 8,
        "Total IDP Elderly Women": 1,
        "Total Returnee Women": 2,
        "Total Host Community Elderly Women": 3,
    }


def test_severity_ignores_demographic_groups():
    rows = [{"Sector": "Health", "IDP_Severity": 3, "Final_Severity": 4}]
    summary = summarize_table("severity for women", SUMMARY, rows, SEVERITY)
    assert summary.totals == {"Total IDP Severity": 3, "Total Final Severity": 4}
    assert summary.sectors == ["Health"]


def test_detailed_mode_lists_rows():
    summary = summarize_table("IDP girls in detailed", DETAILED, FUFORE_ROWS, BASELINE)

    assert summary.totals == {}
    assert len(summary.detailed_rows) == 2
    assert "Response Year: 2021" in summary.detailed_rows[0]
    assert "IDP Boys: N/A" in summary.detailed_rows[1]
    assert "Total" not in summary.render()


def test_summarize_skips_empty_tables():
    summaries = summarize(
        "girls",
        SUMMARY,
        {"baselinedata": FUFORE_ROWS, "needsdata": [], "severitydata": []},
    )
    assert [summary.table for summary in summaries] == ["baselinedata"]


def test_no_rows_anywhere():
    assert summarize("girls", SUMMARY, {"baselinedata": [], "needsdata": []}) == []
    assert NO_DATA_MESSAGE.startswith("No specific data found")
