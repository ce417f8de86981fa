"""
tiered-fsrs
-----------

Tiered-FSRS is a Free Spaced Repetition Scheduler whose intervals and retention estimates are
scaled by the subscription tier of the learner and rewarded by streaks of successful reviews.
"""

import logging

from tiered_fsrs.scheduler import (
    Scheduler,
    DEFAULT_PARAMETERS,
    STABILITY_MIN,
    STABILITY_MAX,
    HARD_PENALTY,
    EASY_BONUS,
    REVIEW_THRESHOLD,
    MAXIMUM_INTERVAL,
    STREAK_BONUSES,
)
from tiered_fsrs.memory_state import (
    MemoryState,
    INITIAL_STABILITY,
    INITIAL_DIFFICULTY,
    MIN_DIFFICULTY,
    MAX_DIFFICULTY,
)
from tiered_fsrs.card import Card
from tiered_fsrs.rating import Rating
from tiered_fsrs.tier import Tier, TIER_MODIFIERS
from tiered_fsrs.review_log import ReviewLog
from tiered_fsrs.exceptions import (
    InvalidRatingError,
    InvalidMemoryStateError,
    UnknownTierError,
)

# the host application decides where scheduler logs go
logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "Scheduler",
    "MemoryState",
    "Card",
    "Rating",
    "Tier",
    "ReviewLog",
    "InvalidRatingError",
    "InvalidMemoryStateError",
    "UnknownTierError",
    "DEFAULT_PARAMETERS",
    "STABILITY_MIN",
    "STABILITY_MAX",
    "HARD_PENALTY",
    "EASY_BONUS",
    "REVIEW_THRESHOLD",
    "MAXIMUM_INTERVAL",
    "STREAK_BONUSES",
    "TIER_MODIFIERS",
    "INITIAL_STABILITY",
    "INITIAL_DIFFICULTY",
    "MIN_DIFFICULTY",
    "MAX_DIFFICULTY",
]
