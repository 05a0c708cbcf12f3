import pytest

from survivor_draft.database import queries


def test_build_update_uses_whitelisted_fragments():
    text = queries.build_update(
        queries.UPDATE_PLAYER,
        {"votes_received": 2, "notes": "Strategic"},
        queries.PLAYER_UPDATABLE_FIELDS,
    )

    assert "SET p.notes = $notes, p.votes_received = $votes_received" in text
    assert "{first_name: $first_name, last_name: $last_name}" in text


def test_build_update_rejects_empty_updates():
    with pytest.raises(ValueError, match="No fields provided for update"):
        queries.build_update(queries.UPDATE_SEASON, {}, queries.SEASON_UPDATABLE_FIELDS)


def test_build_update_rejects_unknown_fields():
    with pytest.raises(ValueError, match="Fields cannot be updated: first_name"):
        queries.build_update(
            queries.UPDATE_PLAYER,
            {"first_name": "x", "notes": "y"},
            queries.PLAYER_UPDATABLE_FIELDS,
        )


def test_field_names_never_reach_query_text():
    with pytest.raises(ValueError):
        queries.build_update(
            queries.UPDATE_ALLIANCE,
            {"size = 1 DETACH DELETE a //": 1},
            queries.ALLIANCE_UPDATABLE_FIELDS,
        )


def test_tribe_rename_binds_new_name_parameter():
    text = queries.build_update(queries.UPDATE_TRIBE, {"tribe_name": "Lavo"}, queries.TRIBE_UPDATABLE_FIELDS)

    assert "t.tribe_name = $new_tribe_name" in text
    assert "{tribe_name: $tribe_name}" in text
