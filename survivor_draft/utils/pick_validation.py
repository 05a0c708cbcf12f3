"""
Validation policy for submitted draft picks.

Every rejection is an expected outcome with a message meant for the
person running the draft, so nothing here raises.
"""

from typing import Iterable, Optional

from ..datamodels.draft import DraftPick, DraftPosition, DraftRoster, DraftType
from .snake_draft import DraftOrderCalculator

_calculator = DraftOrderCalculator()


def validate_pick(team_name: Optional[str],
                  player_name: Optional[str],
                  roster: Optional[DraftRoster],
                  draft_type: Optional[DraftType],
                  position: DraftPosition,
                  existing_picks: Iterable[DraftPick]) -> Optional[str]:
    """
    Check a pick before it is recorded.

    Args:
        team_name: Fantasy team submitting the pick
        player_name: Full name ("First Last") of the player being drafted
        roster: Confirmed draft order, or None if no order has been fixed
        draft_type: Turn discipline of the draft (defaults to snake)
        position: Position the pick would be recorded at
        existing_picks: Picks already made this season

    Returns:
        Rejection message, or None if the pick may be recorded
    """
    if not team_name:
        return "Please select a team"

    if not player_name:
        return "Please select a player"

    if roster is not None and len(roster) > 0:
        expected = _calculator.current_turn_participant(
            roster, draft_type or DraftType.SNAKE, position.round, position.pick
        )
        if team_name != expected:
            return f"It's {expected}'s turn to pick ({position})"

    if any(pick.player_name == player_name for pick in existing_picks):
        return f"{player_name} has already been drafted"

    return None
