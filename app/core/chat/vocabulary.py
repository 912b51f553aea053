# app/core/chat/vocabulary.py
"""
Fixed word lists used to recognise questions about the dataset.

The gazetteer only covers the places people ask about most often.
Any other State/LGA/sector name is still recognised through the exact-value
lookups in classifier.py and predicates.py.
"""

import re
from typing import Optional

# States first, then LGAs of the North-East response
LOCATION_GAZETTEER = (
    "Borno",
    "Adamawa",
    "Yobe",
    "Lagos",
    "Kano",
    "Jigawa",
    "Kaduna",
    "Maiduguri",
    "Jere",
    "Konduga",
    "Bama",
    "Gwoza",
    "Dikwa",
    "Monguno",
    "Ngala",
    "Kukawa",
    "Fufore",
    "Yola North",
    "Yola South",
    "Mubi North",
    "Mubi South",
    "Madagali",
    "Michika",
    "Girei",
    "Damaturu",
    "Potiskum",
    "Gujba",
    "Geidam",
)

DOMAIN_KEYWORDS = (
    # Population groups
    "idp",
    "internally displaced",
    "displaced person",
    "returnee",
    "host community",
    "girl",
    "boy",
    "women",
    "men",
    "elderly",
    "population",
    "people",
    "demographic",
    # Dataset vocabulary
    "state",
    "lga",
    "year",
    "response year",
    "pcode",
    "sector",
    "severity",
    "need",
    "assistance",
    # Generic data questions
    "data",
    "statistics",
    "count",
    "number of",
    "how many",
    "total",
    "report",
    "survey",
)

# Plain substring match, so "girl" covers "girls" and "data" covers "dataset".
# Whole-word matching is left to find_location and the composite selection in
# summarize.py, where "men" must not match "women".
_KEYWORDS = tuple(word.lower() for word in DOMAIN_KEYWORDS + LOCATION_GAZETTEER)

# Longest names first so "Yola North" wins over a shorter overlapping entry
_GAZETTEER_RE = re.compile(
    r"\b("
    + "|".join(
        re.escape(name) for name in sorted(LOCATION_GAZETTEER, key=len, reverse=True)
    )
    + r")\b",
    re.IGNORECASE,
)
_CANONICAL_LOCATIONS = {name.lower(): name for name in LOCATION_GAZETTEER}


def contains_domain_keyword(text: str) -> bool:
    text_lower = text.lower()
    return any(keyword in text_lower for keyword in _KEYWORDS)


def find_location(text: str) -> Optional[str]:
    """
    Return the first gazetteer location mentioned in the text, spelled the
    way it is stored ("fufore" -> "Fufore"), or None.
    """
    match = _GAZETTEER_RE.search(text)
    if not match:
        return None
    return _CANONICAL_LOCATIONS[match.group(1).lower()]
