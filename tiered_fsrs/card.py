"""
tiered_fsrs.card
----------------

This module defines the Card class.

Classes:
    Card: Represents a flashcard owned by a learner on a given subscription tier.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
import json
import time
from typing import TypedDict
from typing_extensions import Self
from tiered_fsrs.memory_state import MemoryState, MemoryStateDict
from tiered_fsrs.tier import Tier


class CardDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Card object.
    """

    card_id: int
    subscription_tier: str
    memory_state: MemoryStateDict
    due: str


@dataclass(init=False)
class Card:
    """
    Represents a flashcard owned by a learner on a given subscription tier.

    Attributes:
        card_id: The id of the card. Defaults to the epoch milliseconds of when the card was created.
        subscription_tier: The subscription tier of the card's owner. Required, there is no default tier.
        memory_state: The card's current memory state.
        due: The date and time when the card is due next.
    """

    card_id: int
    subscription_tier: Tier
    memory_state: MemoryState
    due: datetime

    def __init__(
        self,
        subscription_tier: Tier | str,
        card_id: int | None = None,
        memory_state: MemoryState | None = None,
        due: datetime | None = None,
    ) -> None:
        if card_id is None:
            # epoch milliseconds of when the card was created
            card_id = int(datetime.now(timezone.utc).timestamp() * 1000)
            # wait 1ms to prevent potential card_id collision on next Card creation
            time.sleep(0.001)
        self.card_id = card_id

        self.subscription_tier = Tier.parse(subscription_tier)

        if due is None:
            due = datetime.now(timezone.utc)
        self.due = due

        if memory_state is None:
            memory_state = MemoryState.initial(created_at=self.due)
        self.memory_state = memory_state

    def to_dict(self) -> CardDict:
        """
        Returns a JSON-serializable dictionary representation of the Card object.

        This method is specifically useful for storing Card objects in a database.

        Returns:
            A dictionary representation of the Card object.
        """

        return {
            "card_id": self.card_id,
            "subscription_tier": self.subscription_tier.value,
            "memory_state": self.memory_state.to_dict(),
            "due": self.due.isoformat(),
        }

    @classmethod
    def from_dict(cls, source_dict: CardDict) -> Self:
        """
        Creates a Card object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Card object.

        Returns:
            A Card object created from the provided dictionary.

        Raises:
            UnknownTierError: If the stored subscription tier is not supported.
        """

        return cls(
            card_id=int(source_dict["card_id"]),
            subscription_tier=Tier.parse(source_dict["subscription_tier"]),
            memory_state=MemoryState.from_dict(source_dict["memory_state"]),
            due=datetime.fromisoformat(source_dict["due"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Card object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()

        Returns:
            str: A JSON-serialized string of the Card object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Card object from a JSON-serialized string.

        Args:
            source_json: A JSON-serialized string of an existing Card object.

        Returns:
            Self: A Card object created from the JSON string.
        """

        source_dict: CardDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Card"]
