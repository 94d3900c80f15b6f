"""
Difficulty resolution
- maps the optional `difficulty` command option onto a LeetCode difficulty
- anything unrecognized falls back to a uniformly random pick
"""
import random
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    """Difficulty filter accepted by the LeetCode randomQuestion API."""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


_ALL = tuple(Difficulty)


def random_difficulty(rng: Optional[random.Random] = None) -> Difficulty:
    """Pick one of the difficulties uniformly at random."""
    return (rng or random).choice(_ALL)


def resolve_difficulty(raw: Optional[str], rng: Optional[random.Random] = None) -> Difficulty:
    """Return the difficulty named by raw (any case), or a random one."""
    label = (raw or "").strip().upper()
    try:
        return Difficulty(label)
    except ValueError:
        return random_difficulty(rng)
