"""
Draft order calculation utilities.

Works out whose turn it is for any (round, pick) of a draft, for both
normal and snake drafts, and how the draft advances after each pick.
"""

from typing import List, Sequence, Tuple

from ..datamodels.draft import DraftPosition, DraftType


class DraftOrderCalculator:
    """
    Utility class for draft turn order calculations.

    Normal drafts use the same order every round. Snake drafts reverse
    direction each round:
    Round 1: 1, 2, 3, 4
    Round 2: 4, 3, 2, 1
    Round 3: 1, 2, 3, 4

    Pick numbers run across the whole draft, so with 4 teams round 2
    covers picks 5-8.
    """

    def current_turn_participant(self,
                                 roster: Sequence[str],
                                 draft_type: DraftType,
                                 round_number: int,
                                 pick_number: int) -> str:
        """
        Determine which participant is on the clock.

        Args:
            roster: Confirmed draft order
            draft_type: Normal or snake
            round_number: Current round (1-based)
            pick_number: Overall pick number (1-based), consistent with the round

        Returns:
            Participant identifier (fantasy team name)
        """
        team_count = len(roster)
        if team_count == 0:
            raise ValueError("Draft order is empty")
        if round_number < 1:
            raise ValueError("Round number must be >= 1")
        if pick_number < 1:
            raise ValueError("Pick number must be >= 1")

        pick_in_round = pick_number - (round_number - 1) * team_count
        if not 1 <= pick_in_round <= team_count:
            raise ValueError(
                f"Pick {pick_number} does not fall in round {round_number} of a {team_count}-team draft"
            )

        return roster[self.turn_index(team_count, draft_type, round_number, pick_number)]

    def turn_index(self,
                   team_count: int,
                   draft_type: DraftType,
                   round_number: int,
                   pick_number: int) -> int:
        """0-based index into the roster for the given position."""
        if draft_type != DraftType.SNAKE:
            # Normal draft - same order every round
            return (pick_number - 1) % team_count

        pick_in_round = pick_number - (round_number - 1) * team_count

        if round_number % 2 == 1:
            # Odd rounds: left to right
            return pick_in_round - 1

        # Even rounds: right to left
        return team_count - pick_in_round

    def next_position(self, position: DraftPosition, team_count: int) -> DraftPosition:
        """
        Position after a pick is recorded.

        The pick number always moves forward; the round rolls over once a
        full round of `team_count` picks has been made.
        """
        if team_count < 1:
            raise ValueError("Team count must be >= 1")

        if position.pick % team_count == 0:
            return DraftPosition(round=position.round + 1, pick=position.pick + 1)

        return DraftPosition(round=position.round, pick=position.pick + 1)

    def position_for_pick(self, pick_number: int, team_count: int) -> DraftPosition:
        """Round that an overall pick number falls in."""
        if pick_number < 1:
            raise ValueError("Pick number must be >= 1")

        return DraftPosition(round=((pick_number - 1) // team_count) + 1, pick=pick_number)

    def draft_sequence(self,
                       roster: Sequence[str],
                       draft_type: DraftType,
                       rounds: int) -> List[Tuple[int, int, str]]:
        """
        Full pick sequence for a number of rounds.

        Returns:
            List of (round, pick, participant) tuples
        """
        sequence = []
        position = DraftPosition(round=1, pick=1)

        while position.round <= rounds:
            participant = self.current_turn_participant(
                roster, draft_type, position.round, position.pick
            )
            sequence.append((position.round, position.pick, participant))
            position = self.next_position(position, len(roster))

        return sequence

    def picks_until_turn(self,
                         roster: Sequence[str],
                         draft_type: DraftType,
                         position: DraftPosition,
                         participant: str) -> int:
        """
        Number of picks before `participant` is on the clock again.

        Returns 0 when it is already their turn. Never searches more than
        two rounds ahead, which always contains every participant.
        """
        if participant not in roster:
            raise ValueError(f"{participant} is not in the draft order")

        check = position
        for picks_ahead in range(len(roster) * 2):
            on_clock = self.current_turn_participant(roster, draft_type, check.round, check.pick)
            if on_clock == participant:
                return picks_ahead
            check = self.next_position(check, len(roster))

        return len(roster)
