"""
tiered_fsrs.rating
------------------

This module defines the Rating class.

Classes:
    Rating: Enum representing the four possible ratings when reviewing a card.
"""

from __future__ import annotations
from enum import IntEnum
from typing_extensions import Self
from tiered_fsrs.exceptions import InvalidRatingError


class Rating(IntEnum):
    """
    Enum representing the four possible ratings when reviewing a card.
    """

    Again = 1
    Hard = 2
    Good = 3
    Easy = 4

    @classmethod
    def parse(cls, value: object) -> Self:
        """
        Converts a Rating or an integer between 1 and 4 into a Rating.

        Args:
            value: The rating to convert.

        Returns:
            The matching Rating.

        Raises:
            InvalidRatingError: If the value is not a valid rating.
        """

        # bool is an int subclass, but True is not a rating
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRatingError(
                f"rating must be an integer between 1 and 4, got {value!r}"
            )

        try:
            return cls(value)
        except ValueError:
            raise InvalidRatingError(
                f"rating must be an integer between 1 and 4, got {value!r}"
            ) from None


__all__ = ["Rating"]
