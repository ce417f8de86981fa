"""
tiered_fsrs.exceptions
----------------------

This module defines the errors raised for invalid scheduler input.

All of them subclass ValueError so callers catching ValueError keep working.

Classes:
    InvalidRatingError: A rating outside of Again/Hard/Good/Easy.
    InvalidMemoryStateError: A stored memory state that breaks its invariants.
    UnknownTierError: A subscription tier outside of the supported set.
"""


class InvalidRatingError(ValueError):
    """
    Raised when a rating is not one of 1 (Again), 2 (Hard), 3 (Good) or 4 (Easy).
    """


class InvalidMemoryStateError(ValueError):
    """
    Raised when a memory state handed to the scheduler is corrupted.

    Output values are clamped as part of normal scheduling, but input values are never
    repaired: a non-positive stability or an out-of-range difficulty points at a bug in
    whatever stored the state.
    """


class UnknownTierError(ValueError):
    """
    Raised when a subscription tier is not one of the supported tiers.
    """


__all__ = ["InvalidRatingError", "InvalidMemoryStateError", "UnknownTierError"]
