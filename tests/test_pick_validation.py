import pytest

from survivor_draft.datamodels.draft import DraftPick, DraftPosition, DraftRoster, DraftType
from survivor_draft.utils.pick_validation import validate_pick


ROSTER = DraftRoster(participants=["Torches", "Buffs", "Idols"])
PICKS = [
    DraftPick(round=1, pick_number=1, player_name="Rachel LaMont", team_name="Torches"),
    DraftPick(round=1, pick_number=2, player_name="Sam Phalen", team_name="Buffs"),
]
POSITION = DraftPosition(round=1, pick=3)


def test_valid_pick():
    assert validate_pick("Idols", "Sue Smey", ROSTER, DraftType.SNAKE, POSITION, PICKS) is None


@pytest.mark.parametrize("team, player, message", [
    (None, "Sue Smey", "Please select a team"),
    ("", "Sue Smey", "Please select a team"),
    ("Idols", None, "Please select a player"),
])
def test_missing_selection(team, player, message):
    assert validate_pick(team, player, ROSTER, DraftType.SNAKE, POSITION, PICKS) == message


def test_wrong_team():
    message = validate_pick("Torches", "Sue Smey", ROSTER, DraftType.SNAKE, POSITION, PICKS)

    assert message == "It's Idols's turn to pick (round 1, pick 3)"


def test_snake_turn_in_second_round():
    position = DraftPosition(round=2, pick=4)

    assert validate_pick("Idols", "Sue Smey", ROSTER, DraftType.SNAKE, position, PICKS) is None
    assert validate_pick("Torches", "Sue Smey", ROSTER, DraftType.NORMAL, position, PICKS) is None


def test_already_drafted():
    message = validate_pick("Idols", "Sam Phalen", ROSTER, DraftType.SNAKE, POSITION, PICKS)

    assert message == "Sam Phalen has already been drafted"


def test_turn_checked_before_duplicates():
    message = validate_pick("Buffs", "Sam Phalen", ROSTER, DraftType.SNAKE, POSITION, PICKS)

    assert message.startswith("It's Idols's turn")


def test_no_fixed_order_skips_turn_check():
    assert validate_pick("Torches", "Sue Smey", None, None, POSITION, PICKS) is None
