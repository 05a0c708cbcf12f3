"""
Cypher text for every service operation.

One constant per operation; parameters are always passed separately.
Update statements are assembled only from the fixed SET fragments in
*_UPDATABLE_FIELDS, never from caller-supplied keys.
"""

# ============================================
# CREATE
# ============================================

CREATE_SEASON = """
CREATE (s:Season {season_number: $season_number, year: $year})
RETURN s
"""

CREATE_TRIBE = """
MATCH (s:Season {season_number: $season_number})
CREATE (t:Tribe {tribe_name: $tribe_name, tribe_color: $tribe_color})
CREATE (s)-[:HAS_TRIBE]->(t)
RETURN t
"""

CREATE_PLAYER = """
MATCH (s:Season {season_number: $season_number})-[:HAS_TRIBE]->(t:Tribe {tribe_name: $tribe_name})
CREATE (p:Player {
  first_name: $first_name,
  last_name: $last_name,
  occupation: $occupation,
  hometown: $hometown,
  archetype: $archetype,
  challenges_won: 0,
  has_idol: false,
  idols_played: 0,
  votes_received: 0,
  notes: $notes
})
CREATE (p)-[:BELONGS_TO]->(t)
CREATE (p)-[:COMPETES_IN]->(s)
RETURN p
"""

CREATE_ALLIANCE = """
MATCH (s:Season {season_number: $season_number})
CREATE (a:Alliance {
  alliance_name: $alliance_name,
  formation_episode: $formation_episode,
  dissolved_episode: $dissolved_episode,
  size: $size,
  notes: $notes
})
CREATE (a)-[:FORMED_IN]->(s)
RETURN a
"""

ADD_PLAYER_TO_ALLIANCE = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
MATCH (a:Alliance {alliance_name: $alliance_name})
MERGE (p)-[:MEMBER_OF]->(a)
RETURN p, a
"""

CREATE_FANTASY_TEAM = """
MATCH (s:Season {season_number: $season_number})
CREATE (ft:FantasyTeam {team_name: $team_name, owners: $owners})
CREATE (ft)-[:DRAFTED_FOR]->(s)
RETURN ft
"""

DRAFT_PLAYER_TO_TEAM = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
MATCH (ft:FantasyTeam {team_name: $team_name})
MERGE (p)-[:DRAFTED_BY]->(ft)
RETURN p, ft
"""

CREATE_DRAFT_PICK = """
MATCH (s:Season {season_number: $season_number})
MATCH (ft:FantasyTeam {team_name: $team_name})
MATCH (p:Player)-[:COMPETES_IN]->(s)
WHERE p.first_name + ' ' + p.last_name = $player_name
CREATE (dp:DraftPick {round: $round, pick_number: $pick_number, player_name: $player_name})
CREATE (dp)-[:PICKED_IN]->(s)
CREATE (ft)-[:MADE_PICK]->(dp)
MERGE (p)-[:DRAFTED_BY]->(ft)
RETURN dp, ft.team_name AS team_name
"""

# ============================================
# READ
# ============================================

GET_ALL_SEASONS = """
MATCH (s:Season)
RETURN s
ORDER BY s.season_number
"""

GET_SEASON = """
MATCH (s:Season {season_number: $season_number})
RETURN s
"""

GET_TRIBES_IN_SEASON = """
MATCH (s:Season {season_number: $season_number})-[:HAS_TRIBE]->(t:Tribe)
RETURN t
ORDER BY t.tribe_name
"""

GET_PLAYERS_IN_SEASON = """
MATCH (p:Player)-[:COMPETES_IN]->(s:Season {season_number: $season_number})
RETURN p
ORDER BY p.last_name
"""

GET_PLAYERS_ON_TRIBE = """
MATCH (s:Season {season_number: $season_number})-[:HAS_TRIBE]->(t:Tribe {tribe_name: $tribe_name})
MATCH (p:Player)-[:BELONGS_TO]->(t)
RETURN p
ORDER BY p.last_name
"""

GET_PLAYER_DETAILS = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
OPTIONAL MATCH (p)-[:BELONGS_TO]->(t:Tribe)
OPTIONAL MATCH (p)-[:COMPETES_IN]->(s:Season)
OPTIONAL MATCH (p)-[:MEMBER_OF]->(a:Alliance)
OPTIONAL MATCH (p)-[:DRAFTED_BY]->(ft:FantasyTeam)
RETURN p, t, s, collect(DISTINCT a) AS alliances, ft
"""

GET_PLAYERS_IN_ALLIANCE = """
MATCH (p:Player)-[:MEMBER_OF]->(a:Alliance {alliance_name: $alliance_name})
RETURN p
ORDER BY p.last_name
"""

GET_ALLIANCES_IN_SEASON = """
MATCH (a:Alliance)-[:FORMED_IN]->(s:Season {season_number: $season_number})
OPTIONAL MATCH (p:Player)-[:MEMBER_OF]->(a)
RETURN a, collect(p) AS members
ORDER BY a.alliance_name
"""

GET_FANTASY_TEAM_WITH_PLAYERS = """
MATCH (ft:FantasyTeam {team_name: $team_name})
OPTIONAL MATCH (p:Player)-[:DRAFTED_BY]->(ft)
RETURN ft, collect(p) AS roster
"""

GET_ALL_FANTASY_TEAMS = """
MATCH (ft:FantasyTeam)
RETURN ft
ORDER BY ft.team_name
"""

GET_FANTASY_TEAMS_IN_SEASON = """
MATCH (ft:FantasyTeam)-[:DRAFTED_FOR]->(s:Season {season_number: $season_number})
OPTIONAL MATCH (p:Player)-[:DRAFTED_BY]->(ft)
RETURN ft, collect(p) AS roster
ORDER BY ft.team_name
"""

GET_SEASON_OVERVIEW = """
MATCH (s:Season {season_number: $season_number})-[:HAS_TRIBE]->(t:Tribe)
OPTIONAL MATCH (p:Player)-[:BELONGS_TO]->(t)
RETURN t, count(p) AS player_count
ORDER BY t.tribe_name
"""

GET_AVAILABLE_PLAYERS_IN_SEASON = """
MATCH (p:Player)-[:COMPETES_IN]->(s:Season {season_number: $season_number})
WHERE NOT (p)-[:DRAFTED_BY]->(:FantasyTeam)
RETURN p
ORDER BY p.last_name
"""

GET_DRAFT_PICKS_FOR_SEASON = """
MATCH (dp:DraftPick)-[:PICKED_IN]->(s:Season {season_number: $season_number})
OPTIONAL MATCH (ft:FantasyTeam)-[:MADE_PICK]->(dp)
RETURN dp, ft.team_name AS team_name
ORDER BY dp.pick_number
"""

GET_PLAYER_STATS_SUMMARY = """
MATCH (p:Player)-[:COMPETES_IN]->(s:Season {season_number: $season_number})
RETURN p.first_name + ' ' + p.last_name AS player_name,
       p.challenges_won AS challenges_won,
       p.idols_played AS idols_played,
       p.votes_received AS votes_received,
       p.has_idol AS has_idol
ORDER BY challenges_won DESC
"""

GET_FANTASY_TEAM_LEADERBOARD = """
MATCH (ft:FantasyTeam)
OPTIONAL MATCH (p:Player)-[:DRAFTED_BY]->(ft)
RETURN ft.team_name AS team_name,
       sum(coalesce(p.challenges_won, 0)) AS total_challenge_wins,
       count(p) AS roster_size
ORDER BY total_challenge_wins DESC, team_name
"""

PLAYER_EXISTS = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
RETURN count(p) > 0 AS player_exists
"""

# ============================================
# UPDATE
# ============================================

UPDATE_SEASON = """
MATCH (s:Season {{season_number: $season_number}})
SET {set_clause}
RETURN s
"""

SEASON_UPDATABLE_FIELDS = {
    "year": "s.year = $year",
}

UPDATE_TRIBE = """
MATCH (s:Season {{season_number: $season_number}})-[:HAS_TRIBE]->(t:Tribe {{tribe_name: $tribe_name}})
SET {set_clause}
RETURN t
"""

TRIBE_UPDATABLE_FIELDS = {
    "tribe_name": "t.tribe_name = $new_tribe_name",
    "tribe_color": "t.tribe_color = $tribe_color",
}

UPDATE_PLAYER = """
MATCH (p:Player {{first_name: $first_name, last_name: $last_name}})
SET {set_clause}
RETURN p
"""

PLAYER_UPDATABLE_FIELDS = {
    "occupation": "p.occupation = $occupation",
    "hometown": "p.hometown = $hometown",
    "archetype": "p.archetype = $archetype",
    "notes": "p.notes = $notes",
    "challenges_won": "p.challenges_won = $challenges_won",
    "has_idol": "p.has_idol = $has_idol",
    "idols_played": "p.idols_played = $idols_played",
    "votes_received": "p.votes_received = $votes_received",
}

UPDATE_ALLIANCE = """
MATCH (a:Alliance {{alliance_name: $alliance_name}})
SET {set_clause}
RETURN a
"""

ALLIANCE_UPDATABLE_FIELDS = {
    "dissolved_episode": "a.dissolved_episode = $dissolved_episode",
    "size": "a.size = $size",
    "notes": "a.notes = $notes",
}

UPDATE_FANTASY_TEAM = """
MATCH (ft:FantasyTeam {{team_name: $team_name}})
SET {set_clause}
RETURN ft
"""

FANTASY_TEAM_UPDATABLE_FIELDS = {
    "owners": "ft.owners = $owners",
}

SET_DRAFT_ORDER = """
MATCH (s:Season {season_number: $season_number})
SET s.draft_order = $draft_order, s.draft_type = $draft_type
RETURN s
"""

MOVE_PLAYER_TO_TRIBE = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})-[:COMPETES_IN]->(s:Season)
MATCH (s)-[:HAS_TRIBE]->(new_tribe:Tribe {tribe_name: $new_tribe_name})
OPTIONAL MATCH (p)-[r:BELONGS_TO]->(:Tribe)
DELETE r
CREATE (p)-[:BELONGS_TO]->(new_tribe)
RETURN p, new_tribe
"""

INCREMENT_CHALLENGE_WINS = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
SET p.challenges_won = coalesce(p.challenges_won, 0) + 1
RETURN p
"""

INCREMENT_VOTES_RECEIVED = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
SET p.votes_received = coalesce(p.votes_received, 0) + 1
RETURN p
"""

TOGGLE_IDOL_STATUS = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
SET p.has_idol = NOT coalesce(p.has_idol, false)
RETURN p
"""

# ============================================
# DELETE
# ============================================

REMOVE_PLAYER_FROM_ALLIANCE = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})-[r:MEMBER_OF]->(:Alliance {alliance_name: $alliance_name})
DELETE r
RETURN p
"""

REMOVE_PLAYER_FROM_FANTASY_TEAM = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})-[r:DRAFTED_BY]->(:FantasyTeam {team_name: $team_name})
DELETE r
RETURN p
"""

DELETE_PLAYER = """
MATCH (p:Player {first_name: $first_name, last_name: $last_name})
DETACH DELETE p
RETURN count(*) AS deleted
"""

DELETE_ALLIANCE = """
MATCH (a:Alliance {alliance_name: $alliance_name})
DETACH DELETE a
RETURN count(*) AS deleted
"""

DELETE_TRIBE = """
MATCH (s:Season {season_number: $season_number})-[:HAS_TRIBE]->(t:Tribe {tribe_name: $tribe_name})
DETACH DELETE t
RETURN count(*) AS deleted
"""

DELETE_FANTASY_TEAM = """
MATCH (ft:FantasyTeam {team_name: $team_name})
DETACH DELETE ft
RETURN count(*) AS deleted
"""

DELETE_SEASON = """
MATCH (s:Season {season_number: $season_number})
DETACH DELETE s
RETURN count(*) AS deleted
"""

DELETE_DRAFT_PICK = """
MATCH (dp:DraftPick {round: $round, pick_number: $pick_number})-[:PICKED_IN]->(s:Season {season_number: $season_number})
OPTIONAL MATCH (ft:FantasyTeam)-[:MADE_PICK]->(dp)
OPTIONAL MATCH (p:Player)-[d:DRAFTED_BY]->(ft)
WHERE p.first_name + ' ' + p.last_name = dp.player_name
DELETE d
DETACH DELETE dp
RETURN count(*) AS deleted
"""


def build_update(template: str, fields: dict, updatable: dict) -> str:
    """
    Fill a template's SET clause from a whitelist of field fragments.

    Raises:
        ValueError: If `fields` is empty or names a field not in `updatable`
    """
    if not fields:
        raise ValueError("No fields provided for update")

    unknown = sorted(set(fields) - set(updatable))
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(unknown)}")

    set_clause = ", ".join(updatable[name] for name in updatable if name in fields)
    return template.format(set_clause=set_clause)
