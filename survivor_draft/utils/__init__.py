"""
Utility functions for draft calculations.

This package provides the draft-specific logic: turn order for normal
and snake drafts, draft order construction and pick validation.
"""

from .snake_draft import DraftOrderCalculator
from .draft_order import (
    DraftInProgressError, DraftOrderError, DuplicatePositionError, MissingPositionError,
    PositionOutOfRangeError, manual_draft_order, random_draft_order
)
from .pick_validation import validate_pick

__all__ = [
    "DraftOrderCalculator",
    "DraftInProgressError",
    "DraftOrderError",
    "DuplicatePositionError",
    "MissingPositionError",
    "PositionOutOfRangeError",
    "manual_draft_order",
    "random_draft_order",
    "validate_pick"
]
