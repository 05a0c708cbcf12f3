import pytest

from survivor_draft.datamodels.draft import DraftPosition, DraftRoster, DraftType
from survivor_draft.utils.snake_draft import DraftOrderCalculator


ROSTER = DraftRoster(participants=["A", "B", "C", "D"])


@pytest.fixture
def calculator():
    return DraftOrderCalculator()


@pytest.mark.parametrize("round_number, pick_number, expected", [
    (1, 1, "A"), (1, 4, "D"),
    (2, 5, "D"), (2, 6, "C"), (2, 8, "A"),
    (3, 9, "A"), (3, 12, "D"),
])
def test_snake_order(calculator, round_number, pick_number, expected):
    assert calculator.current_turn_participant(ROSTER, DraftType.SNAKE, round_number, pick_number) == expected


@pytest.mark.parametrize("round_number, pick_number, expected", [
    (1, 1, "A"), (1, 4, "D"), (2, 5, "A"), (2, 8, "D"), (3, 10, "B"),
])
def test_normal_order(calculator, round_number, pick_number, expected):
    assert calculator.current_turn_participant(ROSTER, DraftType.NORMAL, round_number, pick_number) == expected


def test_accepts_plain_string_draft_type(calculator):
    assert calculator.current_turn_participant(ROSTER, "snake", 2, 5) == "D"
    assert calculator.current_turn_participant(ROSTER, "normal", 2, 5) == "A"


def test_normal_order_is_periodic(calculator):
    team_count = len(ROSTER)
    for pick in range(1, 30):
        later = pick + team_count
        here = calculator.position_for_pick(pick, team_count)
        there = calculator.position_for_pick(later, team_count)
        assert (calculator.current_turn_participant(ROSTER, DraftType.NORMAL, here.round, here.pick)
                == calculator.current_turn_participant(ROSTER, DraftType.NORMAL, there.round, there.pick))


@pytest.mark.parametrize("draft_type", [DraftType.NORMAL, DraftType.SNAKE])
@pytest.mark.parametrize("round_number, pick_number", [
    (1, 5),     # past the end of round 1
    (2, 4),     # before the start of round 2
    (2, 11),    # an order shrunk mid-draft would land here
])
def test_pick_outside_its_round_rejected(calculator, draft_type, round_number, pick_number):
    with pytest.raises(ValueError, match="does not fall in round"):
        calculator.current_turn_participant(ROSTER, draft_type, round_number, pick_number)


def test_snake_round_is_reverse_of_previous(calculator):
    sequence = calculator.draft_sequence(ROSTER, DraftType.SNAKE, rounds=4)
    by_round = {}
    for round_number, _, team in sequence:
        by_round.setdefault(round_number, []).append(team)

    assert by_round[1] == ["A", "B", "C", "D"]
    for round_number in (2, 3, 4):
        assert by_round[round_number] == list(reversed(by_round[round_number - 1]))


def test_every_team_picks_once_per_round(calculator):
    for draft_type in (DraftType.NORMAL, DraftType.SNAKE):
        sequence = calculator.draft_sequence(ROSTER, draft_type, rounds=3)
        for round_number in (1, 2, 3):
            teams = [team for r, _, team in sequence if r == round_number]
            assert sorted(teams) == ["A", "B", "C", "D"]


def test_auto_advance_visits_every_pick_once(calculator):
    position = DraftPosition(round=1, pick=1)
    visited = []
    for _ in range(8):
        visited.append((position.round, position.pick))
        position = calculator.next_position(position, team_count=4)

    assert visited == [(1, 1), (1, 2), (1, 3), (1, 4), (2, 5), (2, 6), (2, 7), (2, 8)]
    assert (position.round, position.pick) == (3, 9)


def test_single_team_draft(calculator):
    roster = DraftRoster(participants=["Solo"])

    assert calculator.current_turn_participant(roster, DraftType.SNAKE, 2, 2) == "Solo"
    assert calculator.next_position(DraftPosition(round=1, pick=1), 1) == DraftPosition(round=2, pick=2)


@pytest.mark.parametrize("roster, round_number, pick_number", [
    ([], 1, 1),
    (ROSTER, 0, 1),
    (ROSTER, 1, 0),
])
def test_invalid_turn_inputs(calculator, roster, round_number, pick_number):
    with pytest.raises(ValueError):
        calculator.current_turn_participant(roster, DraftType.SNAKE, round_number, pick_number)


def test_position_for_pick(calculator):
    assert calculator.position_for_pick(1, 4) == DraftPosition(round=1, pick=1)
    assert calculator.position_for_pick(4, 4) == DraftPosition(round=1, pick=4)
    assert calculator.position_for_pick(5, 4) == DraftPosition(round=2, pick=5)


def test_picks_until_turn(calculator):
    position = DraftPosition(round=1, pick=3)

    assert calculator.picks_until_turn(ROSTER, DraftType.SNAKE, position, "C") == 0
    assert calculator.picks_until_turn(ROSTER, DraftType.SNAKE, position, "D") == 1
    # D picks 4 and 5, then C at 6
    assert calculator.picks_until_turn(ROSTER, DraftType.SNAKE, DraftPosition(round=1, pick=4), "C") == 2

    with pytest.raises(ValueError):
        calculator.picks_until_turn(ROSTER, DraftType.SNAKE, position, "Z")


def test_roster_rejects_duplicates():
    with pytest.raises(ValueError):
        DraftRoster(participants=["A", "B", "A"])


def test_pick_in_round():
    assert DraftPosition(round=2, pick=6).pick_in_round(4) == 2
    assert str(DraftPosition(round=2, pick=6)) == "round 2, pick 6"
