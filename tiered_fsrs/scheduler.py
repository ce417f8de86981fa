"""
tiered_fsrs.scheduler
---------------------

This module defines the Scheduler class as well as the various constants used in its calculations.

Classes:
    Scheduler: The tiered FSRS spaced-repetition scheduler.
"""

from __future__ import annotations
from collections.abc import Sequence
import logging
import math
from datetime import datetime, timezone, timedelta
from copy import copy
import json
from dataclasses import dataclass
from tiered_fsrs.card import Card
from tiered_fsrs.memory_state import (
    MemoryState,
    INITIAL_DIFFICULTY,
    MIN_DIFFICULTY,
    MAX_DIFFICULTY,
)
from tiered_fsrs.rating import Rating
from tiered_fsrs.review_log import ReviewLog
from tiered_fsrs.tier import Tier, TIER_MODIFIERS
from tiered_fsrs.exceptions import InvalidMemoryStateError
from typing import TypedDict
from typing_extensions import Self

logger = logging.getLogger(__name__)

DEFAULT_PARAMETERS = (
    1.0,
    1.0,
    5.0,
    -0.5,
    -0.5,
    0.2,
    1.4,
    -0.12,
    0.8,
    2.0,
    -0.2,
    0.2,
    1.0,
)

STABILITY_MIN = 0.01
# one hundred years
STABILITY_MAX = 36500.0

HARD_PENALTY = 0.5
EASY_BONUS = 1.3

# not read by the update or interval formulas, only by Scheduler.needs_review
REVIEW_THRESHOLD = 0.85

MAXIMUM_INTERVAL = 365

# (minimum streak, interval multiplier), highest threshold first
STREAK_BONUSES = (
    (30, 1.3),
    (14, 1.2),
    (7, 1.1),
)

MINIMUM_INTERVAL = 1


class SchedulerDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Scheduler object.
    """

    parameters: list[float]
    hard_penalty: float
    easy_bonus: float
    review_threshold: float
    maximum_interval: int


@dataclass(init=False)
class Scheduler:
    """
    The tiered FSRS scheduler.

    Computes a card's new memory state and its next review date from a rating, scaled by
    the subscription tier of the card's owner and by the card's streak of successful reviews.

    The scheduler holds no mutable state, so one instance can be shared freely between threads.

    Attributes:
        parameters: The 13 model weights of the scheduler.
        hard_penalty: Stability multiplier for Again ratings and interval multiplier for Hard ratings.
        easy_bonus: Stability and interval multiplier for Easy ratings.
        review_threshold: Retrievability below which a card needs to be reviewed.
        maximum_interval: The maximum number of days a Basic-tier card can be scheduled into the future.
    """

    parameters: tuple[float, ...]
    hard_penalty: float
    easy_bonus: float
    review_threshold: float
    maximum_interval: int

    def __init__(
        self,
        parameters: Sequence[float] = DEFAULT_PARAMETERS,
        hard_penalty: float = HARD_PENALTY,
        easy_bonus: float = EASY_BONUS,
        review_threshold: float = REVIEW_THRESHOLD,
        maximum_interval: int = MAXIMUM_INTERVAL,
    ) -> None:
        self._validate(
            parameters=parameters,
            hard_penalty=hard_penalty,
            easy_bonus=easy_bonus,
            review_threshold=review_threshold,
            maximum_interval=maximum_interval,
        )

        self.parameters = tuple(float(parameter) for parameter in parameters)
        self.hard_penalty = hard_penalty
        self.easy_bonus = easy_bonus
        self.review_threshold = review_threshold
        self.maximum_interval = maximum_interval

    def _validate(
        self,
        *,
        parameters: Sequence[float],
        hard_penalty: float,
        easy_bonus: float,
        review_threshold: float,
        maximum_interval: int,
    ) -> None:
        if len(parameters) != len(DEFAULT_PARAMETERS):
            raise ValueError(
                f"Expected {len(DEFAULT_PARAMETERS)} parameters, got {len(parameters)}."
            )

        error_messages = []
        for index, parameter in enumerate(parameters):
            if not math.isfinite(parameter):
                error_messages.append(f"parameters[{index}] = {parameter} is not finite")

        for name, value in (("hard_penalty", hard_penalty), ("easy_bonus", easy_bonus)):
            if not math.isfinite(value) or value <= 0:
                error_messages.append(f"{name} = {value} must be a finite positive number")

        if not 0 < review_threshold <= 1:
            error_messages.append(
                f"review_threshold = {review_threshold} is out of bounds: (0, 1]"
            )

        if maximum_interval < MINIMUM_INTERVAL:
            error_messages.append(
                f"maximum_interval = {maximum_interval} must be at least {MINIMUM_INTERVAL} day"
            )

        if len(error_messages) > 0:
            raise ValueError(
                "One or more scheduler settings are invalid:\n"
                + "\n".join(error_messages)
            )

    def get_retrievability(
        self, stability: float, elapsed_days: float, tier: Tier | str
    ) -> float:
        """
        Calculates the probability that a card is still recalled after a number of days.

        The forgetting curve decays exponentially with the tier-scaled stability, and the
        result is scaled once more by the tier modifier before being capped at 1.

        Args:
            stability: The card's stability. Must be positive.
            elapsed_days: Days since the last review. Negative values count as zero.
            tier: The subscription tier of the card's owner.

        Returns:
            float: The retrievability, between 0 and 1.

        Raises:
            InvalidMemoryStateError: If the stability is not a finite positive number.
            UnknownTierError: If the tier is not supported.
            ValueError: If elapsed_days is NaN.
        """

        tier = Tier.parse(tier)

        if not math.isfinite(stability) or stability <= 0:
            raise InvalidMemoryStateError(
                f"stability = {stability} must be a finite positive number"
            )
        if math.isnan(elapsed_days):
            raise ValueError("elapsed_days must be a number, got NaN")

        elapsed_days = max(0.0, elapsed_days)

        modifier = TIER_MODIFIERS[tier]
        base_retrievability = math.exp(-elapsed_days / (stability * modifier))
        tier_adjusted_retrievability = min(base_retrievability * modifier, 1.0)

        return max(0.0, tier_adjusted_retrievability)

    def get_card_retrievability(
        self, card: Card, current_datetime: datetime | None = None
    ) -> float:
        """
        Calculates a Card object's current retrievability for a given date and time.

        Args:
            card: The card whose retrievability is to be calculated
            current_datetime: The current date and time

        Returns:
            float: The retrievability of the Card object.
        """

        current_datetime = self._resolve_datetime(current_datetime)

        return self.get_retrievability(
            card.memory_state.stability,
            card.memory_state.elapsed_days(current_datetime),
            card.subscription_tier,
        )

    def update_memory_state(
        self,
        memory_state: MemoryState,
        rating: Rating | int,
        tier: Tier | str,
        review_datetime: datetime | None = None,
    ) -> MemoryState:
        """
        Computes the memory state that follows a review.

        The given memory state is left untouched. Difficulty and stability are both derived
        from the state before the review, and so is the retention score, which measures how
        well the card was remembered right before it was reviewed.

        Args:
            memory_state: The card's memory state before the review.
            rating: The rating given during the review.
            tier: The subscription tier of the card's owner.
            review_datetime: The date and time of the review. Defaults to now.

        Returns:
            MemoryState: The new memory state.

        Raises:
            InvalidRatingError: If the rating is not between 1 and 4.
            UnknownTierError: If the tier is not supported.
            InvalidMemoryStateError: If the given memory state breaks its invariants.
            ValueError: If the `review_datetime` argument is not timezone-aware and set to UTC.
        """

        rating = Rating.parse(rating)
        tier = Tier.parse(tier)
        memory_state.validate()
        review_datetime = self._resolve_datetime(review_datetime)

        next_difficulty = self._next_difficulty(
            difficulty=memory_state.difficulty, rating=rating, tier=tier
        )
        next_stability = self._next_stability(
            stability=memory_state.stability,
            difficulty=memory_state.difficulty,
            rating=rating,
        )

        if rating >= Rating.Good:
            streak_count = memory_state.streak_count + 1
        else:
            streak_count = 0

        retention_score = self.get_retrievability(
            memory_state.stability,
            memory_state.elapsed_days(review_datetime),
            tier,
        )

        return MemoryState(
            stability=next_stability,
            difficulty=next_difficulty,
            review_count=memory_state.review_count + 1,
            last_reviewed_at=review_datetime,
            last_rating=rating,
            streak_count=streak_count,
            retention_score=retention_score,
        )

    def next_review_interval(self, card: Card, rating: Rating | int) -> timedelta:
        """
        Calculates how long to wait before a card's next review.

        Uses the card's memory state from before the review, including its streak.

        Args:
            card: The card being reviewed, as it was before the review.
            rating: The rating given during the review.

        Returns:
            timedelta: The time until the next review, between 1 day and the tier's maximum interval.

        Raises:
            InvalidRatingError: If the rating is not between 1 and 4.
            UnknownTierError: If the card's subscription tier is not supported.
            InvalidMemoryStateError: If the card's memory state breaks its invariants.
        """

        rating = Rating.parse(rating)
        tier = Tier.parse(card.subscription_tier)
        memory_state = card.memory_state
        memory_state.validate()

        modifier = TIER_MODIFIERS[tier]

        interval_days = memory_state.stability * modifier
        interval_days *= self._streak_bonus(streak_count=memory_state.streak_count)

        match rating:
            case Rating.Again:
                interval_days = 1.0
            case Rating.Hard:
                interval_days *= self.hard_penalty
            case Rating.Good:
                pass
            case Rating.Easy:
                interval_days *= self.easy_bonus

        interval_days = min(
            max(interval_days, MINIMUM_INTERVAL), self.maximum_interval * modifier
        )

        return timedelta(days=interval_days)

    def next_review_datetime(
        self,
        card: Card,
        rating: Rating | int,
        review_datetime: datetime | None = None,
    ) -> datetime:
        """
        Calculates the date and time of a card's next review.

        Args:
            card: The card being reviewed, as it was before the review.
            rating: The rating given during the review.
            review_datetime: The date and time of the review. Defaults to now.

        Returns:
            datetime: When the card is due next, in UTC.

        Raises:
            ValueError: If the `review_datetime` argument is not timezone-aware and set to UTC.
        """

        review_datetime = self._resolve_datetime(review_datetime)

        return review_datetime + self.next_review_interval(card, rating)

    def review_card(
        self,
        card: Card,
        rating: Rating | int,
        review_datetime: datetime | None = None,
        review_duration: int | None = None,
    ) -> tuple[Card, ReviewLog]:
        """
        Reviews a card with a given rating at a given time for a specified duration.

        Args:
            card: The card being reviewed. It is not modified.
            rating: The chosen rating for the card being reviewed.
            review_datetime: The date and time of the review.
            review_duration: The number of milliseconds it took to review the card or None if unspecified.

        Returns:
            tuple[Card,ReviewLog]: A tuple containing the updated, reviewed card and its corresponding review log.

        Raises:
            ValueError: If the `review_datetime` argument is not timezone-aware and set to UTC.
        """

        rating = Rating.parse(rating)
        tier = Tier.parse(card.subscription_tier)
        review_datetime = self._resolve_datetime(review_datetime)

        # both calculations read the card as it was before this review
        memory_state = self.update_memory_state(
            card.memory_state, rating, tier, review_datetime
        )
        due = self.next_review_datetime(card, rating, review_datetime)

        reviewed_card = copy(card)
        reviewed_card.memory_state = memory_state
        reviewed_card.due = due

        review_log = ReviewLog(
            card_id=card.card_id,
            rating=rating,
            subscription_tier=tier,
            review_datetime=review_datetime,
            retention_score=memory_state.retention_score,
            review_duration=review_duration,
        )

        logger.debug(
            "reviewed card %s: rating=%s tier=%s stability=%.4f difficulty=%.4f streak=%d due=%s",
            card.card_id,
            rating.name,
            tier.value,
            memory_state.stability,
            memory_state.difficulty,
            memory_state.streak_count,
            due.isoformat(),
        )

        return reviewed_card, review_log

    def reschedule_card(self, card: Card, review_logs: list[ReviewLog]) -> Card:
        """
        Rebuilds a card's memory state and due date by replaying its review logs with this scheduler.

        The card is replayed from a fresh memory state under its current subscription tier, which
        is useful after the scheduler's settings or the owner's tier have changed.

        Args:
            card: The card to be rescheduled/updated.
            review_logs: A list of that card's review logs (order doesn't matter).

        Returns:
            Card: A new card that has been rescheduled/updated with this current scheduler.

        Raises:
            ValueError: If any of the review logs are for a card other than the one specified, this will raise an error.
        """

        for review_log in review_logs:
            if review_log.card_id != card.card_id:
                raise ValueError(
                    f"ReviewLog card_id {review_log.card_id} does not match Card card_id {card.card_id}"
                )

        review_logs = sorted(review_logs, key=lambda log: log.review_datetime)

        if len(review_logs) == 0:
            return Card(
                card_id=card.card_id,
                subscription_tier=card.subscription_tier,
                due=card.due,
            )

        first_review_datetime = review_logs[0].review_datetime
        rescheduled_card = Card(
            card_id=card.card_id,
            subscription_tier=card.subscription_tier,
            memory_state=MemoryState.initial(created_at=first_review_datetime),
            due=first_review_datetime,
        )

        for review_log in review_logs:
            rescheduled_card, _ = self.review_card(
                card=rescheduled_card,
                rating=review_log.rating,
                review_datetime=review_log.review_datetime,
                review_duration=review_log.review_duration,
            )

        logger.debug(
            "rescheduled card %s from %d review logs", card.card_id, len(review_logs)
        )

        return rescheduled_card

    def is_due(self, card: Card, current_datetime: datetime | None = None) -> bool:
        """
        Whether the card's next review date has been reached.
        """

        current_datetime = self._resolve_datetime(current_datetime)

        return card.due <= current_datetime

    def needs_review(
        self, card: Card, current_datetime: datetime | None = None
    ) -> bool:
        """
        Whether the card's retrievability has dropped below the review threshold.
        """

        return (
            self.get_card_retrievability(card, current_datetime) < self.review_threshold
        )

    def to_dict(
        self,
    ) -> SchedulerDict:
        """
        Returns a dictionary representation of the Scheduler object.

        Returns:
            SchedulerDict: A dictionary representation of the Scheduler object.
        """

        return {
            "parameters": list(self.parameters),
            "hard_penalty": self.hard_penalty,
            "easy_bonus": self.easy_bonus,
            "review_threshold": self.review_threshold,
            "maximum_interval": self.maximum_interval,
        }

    @classmethod
    def from_dict(cls, source_dict: SchedulerDict) -> Self:
        """
        Creates a Scheduler object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Scheduler object.

        Returns:
            Self: A Scheduler object created from the provided dictionary.
        """

        return cls(
            parameters=source_dict["parameters"],
            hard_penalty=source_dict["hard_penalty"],
            easy_bonus=source_dict["easy_bonus"],
            review_threshold=source_dict["review_threshold"],
            maximum_interval=source_dict["maximum_interval"],
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Scheduler object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the Scheduler object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Scheduler object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing Scheduler object.

        Returns:
            Self: A Scheduler object created from the JSON string.
        """

        source_dict: SchedulerDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)

    def _resolve_datetime(self, value: datetime | None) -> datetime:
        if value is None:
            return datetime.now(timezone.utc)

        if (value.tzinfo is None) or (value.tzinfo != timezone.utc):
            raise ValueError("datetime must be timezone-aware and set to UTC")

        return value

    def _clamp_difficulty(self, *, difficulty: float) -> float:
        return min(max(difficulty, MIN_DIFFICULTY), MAX_DIFFICULTY)

    def _clamp_stability(self, *, stability: float) -> float:
        return min(max(stability, STABILITY_MIN), STABILITY_MAX)

    def _next_difficulty(
        self, *, difficulty: float, rating: Rating, tier: Tier
    ) -> float:
        difficulty_delta = self.parameters[0] * (rating - 3) + self.parameters[1] * (
            difficulty - INITIAL_DIFFICULTY
        )

        next_difficulty = difficulty + difficulty_delta * TIER_MODIFIERS[tier]

        return self._clamp_difficulty(difficulty=next_difficulty)

    def _stability_multiplier(self, *, rating: Rating) -> float:
        if rating == Rating.Again:
            return self.hard_penalty
        elif rating == Rating.Easy:
            return self.easy_bonus
        return 1.0

    def _next_stability(
        self, *, stability: float, difficulty: float, rating: Rating
    ) -> float:
        stability_multiplier = self._stability_multiplier(rating=rating)

        next_stability = stability * (
            1
            + self.parameters[2]
            * math.exp(-self.parameters[3] * difficulty)
            * (
                self.parameters[4] * (rating - 3)
                + self.parameters[5] * stability_multiplier
            )
        )

        return self._clamp_stability(stability=next_stability)

    def _streak_bonus(self, *, streak_count: int) -> float:
        for minimum_streak, bonus in STREAK_BONUSES:
            if streak_count >= minimum_streak:
                return bonus
        return 1.0


__all__ = ["Scheduler"]
