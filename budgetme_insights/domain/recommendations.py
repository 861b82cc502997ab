"""Category -> advice lookup backed by recommendations.json"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict

RECOMMENDATIONS_FILE = Path(__file__).with_name("recommendations.json")

GENERIC_INCREASE = "Review your spending habits and set a stricter budget for this category."
GENERIC_DECREASE = "Great job! Keep maintaining this spending level."


@lru_cache(maxsize=None)
def load_recommendations(path: Path = RECOMMENDATIONS_FILE) -> Dict[str, Dict[str, str]]:
    """Read the table once per path; entries are {"up": ..., "down": ...}"""
    return json.loads(path.read_text(encoding="utf-8"))


def recommend(category: str, is_increasing: bool) -> str:
    """Advice for a category moving up or down, generic text for unknown ones"""
    entry = load_recommendations().get(category, {})
    direction = "up" if is_increasing else "down"
    return entry.get(direction) or (GENERIC_INCREASE if is_increasing else GENERIC_DECREASE)
