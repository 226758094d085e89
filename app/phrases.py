# app/phrases.py
from __future__ import annotations
import random
from typing import List, Optional, Sequence

PHRASES: List[str] = [
    "Hello World",
    "Go Programming",
    "Type this text",
    "Practice makes perfect",
    "Keep coding",
    "The quick brown fox",
    "Slow is smooth and smooth is fast",
    "Read the error message",
]


def choose_phrase(
    rng: Optional[random.Random] = None,
    previous: Optional[str] = None,
    phrases: Sequence[str] = PHRASES,
) -> str:
    """Pick a phrase at random, skipping ``previous`` when there is a choice."""
    if not phrases:
        raise ValueError("no phrases to choose from")
    rng = rng or random.Random()
    pool = [p for p in phrases if p != previous] or list(phrases)
    return rng.choice(pool)
