"""
tiered_fsrs.tier
----------------

This module defines the Tier class and the per-tier scheduling modifiers.

Classes:
    Tier: Enum representing the subscription tier of the card's owner.
"""

from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing_extensions import Self
from tiered_fsrs.exceptions import UnknownTierError


class Tier(Enum):
    """
    Enum representing the subscription tier of the card's owner.

    Higher tiers stretch intervals and raise the computed retention.
    """

    Basic = "basic"
    Pro = "pro"
    Power = "power"

    @property
    def modifier(self) -> float:
        """
        The multiplicative scheduling modifier of the tier.
        """

        return TIER_MODIFIERS[self]

    @classmethod
    def parse(cls, value: object) -> Self:
        """
        Converts a Tier or a tier name such as "pro" into a Tier.

        Args:
            value: The tier to convert.

        Returns:
            The matching Tier.

        Raises:
            UnknownTierError: If the value does not name a supported tier.
        """

        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass

        supported = ", ".join(tier.value for tier in cls)
        raise UnknownTierError(
            f"unknown subscription tier {value!r}, expected one of: {supported}"
        )


TIER_MODIFIERS = MappingProxyType(
    {
        Tier.Basic: 1.0,
        Tier.Pro: 1.2,
        Tier.Power: 1.5,
    }
)

_missing_tiers = set(Tier) - set(TIER_MODIFIERS)
if _missing_tiers:
    raise RuntimeError(f"no scheduling modifier defined for tiers: {_missing_tiers}")


__all__ = ["Tier", "TIER_MODIFIERS"]
