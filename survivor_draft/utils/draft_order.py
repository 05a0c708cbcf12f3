"""
Draft order construction.

A season's draft order is either drawn at random or assigned by hand.
Manual assignments must give every team a distinct slot in 1..N.
"""

import random
from typing import Mapping, Optional, Sequence

from ..datamodels.draft import DraftRoster


class DraftOrderError(ValueError):
    """Base class for rejected draft order assignments."""
    pass


class PositionOutOfRangeError(DraftOrderError):
    pass


class DuplicatePositionError(DraftOrderError):
    pass


class MissingPositionError(DraftOrderError):
    pass


class DraftInProgressError(DraftOrderError):
    """Raised when the order of a season that already has picks would change."""
    pass


def random_draft_order(participants: Sequence[str],
                       rng: Optional[random.Random] = None) -> DraftRoster:
    """Shuffle the participants into a new draft order."""
    if not participants:
        raise DraftOrderError("At least one team is needed to set a draft order")

    order = list(participants)
    (rng or random).shuffle(order)
    return DraftRoster(participants=order)


def manual_draft_order(assignments: Mapping[str, Optional[int]]) -> DraftRoster:
    """
    Build a draft order from team -> slot assignments.

    Args:
        assignments: Team name mapped to its 1-based draft slot

    Returns:
        DraftRoster sorted by assigned slot

    Raises:
        MissingPositionError: A team has no slot
        PositionOutOfRangeError: A slot is outside 1..N
        DuplicatePositionError: Two teams share a slot
    """
    team_count = len(assignments)
    if team_count == 0:
        raise DraftOrderError("At least one team is needed to set a draft order")

    unassigned = sorted(team for team, slot in assignments.items() if slot is None)
    if unassigned:
        raise MissingPositionError(f"No draft position assigned for: {', '.join(unassigned)}")

    for team, slot in assignments.items():
        if not 1 <= slot <= team_count:
            raise PositionOutOfRangeError(
                f"Draft position {slot} for {team} must be between 1 and {team_count}"
            )

    holders = {}
    for team, slot in assignments.items():
        if slot in holders:
            raise DuplicatePositionError(
                f"Draft position {slot} is assigned to both {holders[slot]} and {team}"
            )
        holders[slot] = team

    # N teams with N distinct in-range slots cover 1..N
    return DraftRoster(participants=[holders[slot] for slot in sorted(holders)])
