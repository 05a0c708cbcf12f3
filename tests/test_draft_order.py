import random

import pytest

from survivor_draft.utils.draft_order import (
    DraftOrderError, DuplicatePositionError, MissingPositionError, PositionOutOfRangeError,
    manual_draft_order, random_draft_order
)


def test_manual_order_sorted_by_slot():
    roster = manual_draft_order({"Torches": 2, "Buffs": 3, "Idols": 1})

    assert list(roster) == ["Idols", "Torches", "Buffs"]


def test_duplicate_slot_rejected():
    with pytest.raises(DuplicatePositionError) as exc_info:
        manual_draft_order({"Torches": 1, "Buffs": 1, "Idols": 3})

    assert "Draft position 1" in str(exc_info.value)


@pytest.mark.parametrize("slot", [0, 4, -1])
def test_out_of_range_slot_rejected(slot):
    with pytest.raises(PositionOutOfRangeError):
        manual_draft_order({"Torches": 1, "Buffs": 2, "Idols": slot})


def test_missing_slot_rejected():
    with pytest.raises(MissingPositionError) as exc_info:
        manual_draft_order({"Torches": 1, "Buffs": None, "Idols": 2})

    assert "Buffs" in str(exc_info.value)


def test_errors_share_a_base_class():
    for error in (DuplicatePositionError, MissingPositionError, PositionOutOfRangeError):
        assert issubclass(error, DraftOrderError)
        assert issubclass(error, ValueError)


def test_empty_assignments_rejected():
    with pytest.raises(DraftOrderError):
        manual_draft_order({})


def test_random_order_is_a_permutation():
    teams = ["Torches", "Buffs", "Idols", "Tribal"]

    roster = random_draft_order(teams, rng=random.Random(7))

    assert sorted(roster) == sorted(teams)
    assert len(roster) == 4


def test_random_order_does_not_mutate_input():
    teams = ["Torches", "Buffs", "Idols"]
    random_draft_order(teams, rng=random.Random(1))

    assert teams == ["Torches", "Buffs", "Idols"]


def test_random_order_needs_teams():
    with pytest.raises(DraftOrderError):
        random_draft_order([])
