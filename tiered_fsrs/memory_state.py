"""
tiered_fsrs.memory_state
------------------------

This module defines the MemoryState class.

Classes:
    MemoryState: The scheduler's current belief about how well one card is remembered.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
import json
import math
from typing import TypedDict
from typing_extensions import Self
from tiered_fsrs.exceptions import InvalidMemoryStateError
from tiered_fsrs.rating import Rating

INITIAL_STABILITY = 0.5
INITIAL_DIFFICULTY = 5.0

MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0


class MemoryStateDict(TypedDict):
    """
    JSON-serializable dictionary representation of a MemoryState object.
    """

    stability: float
    difficulty: float
    review_count: int
    last_reviewed_at: str
    last_rating: int | None
    streak_count: int
    retention_score: float


@dataclass(frozen=True)
class MemoryState:
    """
    The scheduler's current belief about how well one card is remembered.

    A MemoryState is never modified in place. Every review produces a new one.

    Attributes:
        stability: Expected number of days until recall probability decays to the reference threshold.
        difficulty: Intrinsic hardness of the card, between 1 and 10.
        review_count: Total number of reviews performed.
        last_reviewed_at: The date and time of the most recent review (or of creation, before the first review).
        last_rating: The rating given at the most recent review or None if the card was never reviewed.
        streak_count: Number of consecutive reviews rated Good or Easy.
        retention_score: Retrievability of the card measured right before the most recent review.
    """

    stability: float
    difficulty: float
    review_count: int
    last_reviewed_at: datetime
    last_rating: Rating | None = None
    streak_count: int = 0
    retention_score: float = 1.0

    @classmethod
    def initial(cls, created_at: datetime | None = None) -> Self:
        """
        Returns the memory state of a card that has just been created.

        Args:
            created_at: When the card was created. Defaults to now.

        Returns:
            A fresh MemoryState with default stability and difficulty.
        """

        if created_at is None:
            created_at = datetime.now(timezone.utc)

        return cls(
            stability=INITIAL_STABILITY,
            difficulty=INITIAL_DIFFICULTY,
            review_count=0,
            last_reviewed_at=created_at,
            last_rating=None,
            streak_count=0,
            retention_score=1.0,
        )

    def validate(self) -> None:
        """
        Checks the memory state's invariants.

        Raises:
            InvalidMemoryStateError: If any invariant is broken.
        """

        error_messages = []

        if not math.isfinite(self.stability) or self.stability <= 0:
            error_messages.append(
                f"stability = {self.stability} must be a finite positive number"
            )
        if not MIN_DIFFICULTY <= self.difficulty <= MAX_DIFFICULTY:
            error_messages.append(
                f"difficulty = {self.difficulty} is out of bounds: ({MIN_DIFFICULTY}, {MAX_DIFFICULTY})"
            )
        if self.review_count < 0:
            error_messages.append(
                f"review_count = {self.review_count} must not be negative"
            )
        if self.streak_count < 0:
            error_messages.append(
                f"streak_count = {self.streak_count} must not be negative"
            )
        if not 0.0 <= self.retention_score <= 1.0:
            error_messages.append(
                f"retention_score = {self.retention_score} is out of bounds: (0.0, 1.0)"
            )
        if self.last_reviewed_at.tzinfo is None:
            error_messages.append("last_reviewed_at must be timezone-aware")

        if len(error_messages) > 0:
            raise InvalidMemoryStateError(
                "Memory state is invalid:\n" + "\n".join(error_messages)
            )

    def elapsed_days(self, current_datetime: datetime) -> float:
        """
        Fractional number of days between the last review and the given datetime.

        Never negative: a datetime before the last review counts as zero days.
        """

        elapsed_seconds = (current_datetime - self.last_reviewed_at).total_seconds()

        return max(0.0, elapsed_seconds / 86400)

    def to_dict(self) -> MemoryStateDict:
        """
        Returns a JSON-serializable dictionary representation of the MemoryState object.

        Returns:
            A dictionary representation of the MemoryState object.
        """

        return {
            "stability": self.stability,
            "difficulty": self.difficulty,
            "review_count": self.review_count,
            "last_reviewed_at": self.last_reviewed_at.isoformat(),
            "last_rating": int(self.last_rating) if self.last_rating else None,
            "streak_count": self.streak_count,
            "retention_score": self.retention_score,
        }

    @classmethod
    def from_dict(cls, source_dict: MemoryStateDict) -> Self:
        """
        Creates a MemoryState object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing MemoryState object.

        Returns:
            A MemoryState object created from the provided dictionary.
        """

        return cls(
            stability=float(source_dict["stability"]),
            difficulty=float(source_dict["difficulty"]),
            review_count=int(source_dict["review_count"]),
            last_reviewed_at=datetime.fromisoformat(source_dict["last_reviewed_at"]),
            last_rating=(
                Rating.parse(source_dict["last_rating"])
                if source_dict["last_rating"]
                else None
            ),
            streak_count=int(source_dict["streak_count"]),
            retention_score=float(source_dict["retention_score"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the MemoryState object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the MemoryState object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a MemoryState object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing MemoryState object.

        Returns:
            Self: A MemoryState object created from the JSON string.
        """

        source_dict: MemoryStateDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["MemoryState"]
