"""
Survivor data service.

One coroutine per database operation. Each builds a QueryOperation from
the Cypher in `queries` and runs it through the QueryExecutor, which
owns sessions and retries. Results come back as datamodels.

Multi-step sequences (create a season, then its tribes) are not
transactional: a failure part way through leaves earlier steps committed.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, List, Optional

from ..datamodels.draft import (
    DraftBoard, DraftPick, DraftPosition, DraftRoster, DraftStatus, DraftType
)
from ..datamodels.entities import (
    Alliance, AllianceCreate, FantasyTeam, FantasyTeamCreate, LeaderboardEntry,
    Player, PlayerCreate, PlayerStats, Season, SeasonCreate, Tribe, TribeCreate
)
from ..utils.draft_order import DraftInProgressError
from ..utils.pick_validation import validate_pick
from ..utils.snake_draft import DraftOrderCalculator
from . import queries
from .executor import AccessMode, QueryExecutor, QueryFailedError, QueryOperation, error_message


logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when an operation targets an entity that does not exist."""
    pass


class PickRejectedError(Exception):
    """Raised when a submitted draft pick fails validation."""
    pass


def _read(text: str, name: str, **params) -> QueryOperation:
    return QueryOperation(text=text, params=params, access=AccessMode.READ, name=name)


def _write(text: str, name: str, **params) -> QueryOperation:
    return QueryOperation(text=text, params=params, access=AccessMode.WRITE, name=name)


class SurvivorService:
    """
    Async service over the Survivor graph.

    Reads return models (or None when nothing matched); writes that
    match nothing raise NotFoundError.
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor
        self.calculator = DraftOrderCalculator()

    async def _run(self, operation: QueryOperation) -> List[Dict[str, Any]]:
        return await self.executor.execute(operation)

    async def _first(self, operation: QueryOperation) -> Optional[Dict[str, Any]]:
        rows = await self._run(operation)
        return rows[0] if rows else None

    async def _deleted(self, operation: QueryOperation, what: str) -> bool:
        row = await self._first(operation)
        if not row or not row.get("deleted"):
            raise NotFoundError(f"{what} not found")
        logger.info(f"Deleted {what}")
        return True

    # ============================================
    # Seasons & tribes
    # ============================================

    async def create_season(self, season: SeasonCreate) -> Season:
        row = await self._first(_write(
            queries.CREATE_SEASON, "create_season",
            season_number=season.season_number, year=season.year
        ))
        logger.info(f"Created season {season.season_number}")
        return Season.model_validate(row["s"])

    async def get_all_seasons(self) -> List[Season]:
        rows = await self._run(_read(queries.GET_ALL_SEASONS, "get_all_seasons"))
        return [Season.model_validate(r["s"]) for r in rows]

    async def get_season(self, season_number: int) -> Optional[Season]:
        row = await self._first(_read(
            queries.GET_SEASON, "get_season", season_number=season_number
        ))
        return Season.model_validate(row["s"]) if row else None

    async def update_season(self, season_number: int, updates: Dict[str, Any]) -> Season:
        text = queries.build_update(queries.UPDATE_SEASON, updates, queries.SEASON_UPDATABLE_FIELDS)
        row = await self._first(_write(
            text, "update_season", season_number=season_number, **updates
        ))
        if not row:
            raise NotFoundError(f"Season {season_number} not found")
        return Season.model_validate(row["s"])

    async def delete_season(self, season_number: int) -> bool:
        return await self._deleted(
            _write(queries.DELETE_SEASON, "delete_season", season_number=season_number),
            f"Season {season_number}",
        )

    async def get_season_overview(self, season_number: int) -> List[Dict[str, Any]]:
        rows = await self._run(_read(
            queries.GET_SEASON_OVERVIEW, "get_season_overview", season_number=season_number
        ))
        return [
            {"tribe": Tribe.model_validate(r["t"]), "player_count": r.get("player_count") or 0}
            for r in rows
        ]

    async def create_tribe(self, season_number: int, tribe: TribeCreate) -> Tribe:
        row = await self._first(_write(
            queries.CREATE_TRIBE, "create_tribe",
            season_number=season_number,
            tribe_name=tribe.tribe_name,
            tribe_color=tribe.tribe_color,
        ))
        if not row:
            raise NotFoundError(f"Season {season_number} not found")
        return Tribe.model_validate(row["t"])

    async def get_tribes_in_season(self, season_number: int) -> List[Tribe]:
        rows = await self._run(_read(
            queries.GET_TRIBES_IN_SEASON, "get_tribes_in_season", season_number=season_number
        ))
        return [Tribe.model_validate(r["t"]) for r in rows]

    async def update_tribe(self, season_number: int, tribe_name: str, updates: Dict[str, Any]) -> Tribe:
        # Renaming to the current name is not a change
        if updates.get("tribe_name") == tribe_name:
            updates = {k: v for k, v in updates.items() if k != "tribe_name"}

        text = queries.build_update(queries.UPDATE_TRIBE, updates, queries.TRIBE_UPDATABLE_FIELDS)
        params = {k: v for k, v in updates.items() if k != "tribe_name"}
        if "tribe_name" in updates:
            params["new_tribe_name"] = updates["tribe_name"]

        row = await self._first(_write(
            text, "update_tribe", season_number=season_number, tribe_name=tribe_name, **params
        ))
        if not row:
            raise NotFoundError(f"Tribe {tribe_name} not found in season {season_number}")
        return Tribe.model_validate(row["t"])

    async def delete_tribe(self, season_number: int, tribe_name: str) -> bool:
        return await self._deleted(
            _write(queries.DELETE_TRIBE, "delete_tribe",
                   season_number=season_number, tribe_name=tribe_name),
            f"Tribe {tribe_name}",
        )

    # ============================================
    # Players
    # ============================================

    async def create_player(self, season_number: int, player: PlayerCreate) -> Player:
        row = await self._first(_write(
            queries.CREATE_PLAYER, "create_player",
            season_number=season_number, **player.model_dump()
        ))
        if not row:
            raise NotFoundError(f"Tribe {player.tribe_name} not found in season {season_number}")
        logger.info(f"Created player {player.first_name} {player.last_name}")
        return Player.model_validate(row["p"])

    async def get_players_in_season(self, season_number: int) -> List[Player]:
        rows = await self._run(_read(
            queries.GET_PLAYERS_IN_SEASON, "get_players_in_season", season_number=season_number
        ))
        return [Player.model_validate(r["p"]) for r in rows]

    async def get_available_players_in_season(self, season_number: int) -> List[Player]:
        rows = await self._run(_read(
            queries.GET_AVAILABLE_PLAYERS_IN_SEASON, "get_available_players_in_season",
            season_number=season_number
        ))
        return [Player.model_validate(r["p"]) for r in rows]

    async def get_players_on_tribe(self, season_number: int, tribe_name: str) -> List[Player]:
        rows = await self._run(_read(
            queries.GET_PLAYERS_ON_TRIBE, "get_players_on_tribe",
            season_number=season_number, tribe_name=tribe_name
        ))
        return [Player.model_validate(r["p"]) for r in rows]

    async def get_player_details(self, first_name: str, last_name: str) -> Optional[Dict[str, Any]]:
        row = await self._first(_read(
            queries.GET_PLAYER_DETAILS, "get_player_details",
            first_name=first_name, last_name=last_name
        ))
        if not row or not row.get("p"):
            return None

        return {
            "player": Player.model_validate(row["p"]),
            "tribe": Tribe.model_validate(row["t"]) if row.get("t") else None,
            "season": Season.model_validate(row["s"]) if row.get("s") else None,
            "alliances": [Alliance.model_validate(a) for a in row.get("alliances") or []],
            "fantasy_team": FantasyTeam.model_validate(row["ft"]) if row.get("ft") else None,
        }

    async def player_exists(self, first_name: str, last_name: str) -> bool:
        row = await self._first(_read(
            queries.PLAYER_EXISTS, "player_exists", first_name=first_name, last_name=last_name
        ))
        return bool(row and row.get("player_exists"))

    async def update_player(self, first_name: str, last_name: str, updates: Dict[str, Any]) -> Player:
        text = queries.build_update(queries.UPDATE_PLAYER, updates, queries.PLAYER_UPDATABLE_FIELDS)
        row = await self._first(_write(
            text, "update_player", first_name=first_name, last_name=last_name, **updates
        ))
        if not row:
            raise NotFoundError(f"Player {first_name} {last_name} not found")
        return Player.model_validate(row["p"])

    async def update_player_stats(self, first_name: str, last_name: str, stats: PlayerStats) -> Player:
        return await self.update_player(first_name, last_name, stats.model_dump())

    async def move_player_to_tribe(self, first_name: str, last_name: str, new_tribe_name: str) -> Dict[str, Any]:
        row = await self._first(_write(
            queries.MOVE_PLAYER_TO_TRIBE, "move_player_to_tribe",
            first_name=first_name, last_name=last_name, new_tribe_name=new_tribe_name
        ))
        if not row:
            raise NotFoundError(f"Player {first_name} {last_name} or tribe {new_tribe_name} not found")
        return {
            "player": Player.model_validate(row["p"]),
            "tribe": Tribe.model_validate(row["new_tribe"]),
        }

    async def increment_player_challenge_wins(self, first_name: str, last_name: str) -> Player:
        return await self._player_event(queries.INCREMENT_CHALLENGE_WINS, "increment_player_challenge_wins",
                                        first_name, last_name)

    async def increment_player_votes_received(self, first_name: str, last_name: str) -> Player:
        return await self._player_event(queries.INCREMENT_VOTES_RECEIVED, "increment_player_votes_received",
                                        first_name, last_name)

    async def toggle_player_idol_status(self, first_name: str, last_name: str) -> Player:
        return await self._player_event(queries.TOGGLE_IDOL_STATUS, "toggle_player_idol_status",
                                        first_name, last_name)

    async def _player_event(self, text: str, name: str, first_name: str, last_name: str) -> Player:
        row = await self._first(_write(text, name, first_name=first_name, last_name=last_name))
        if not row:
            raise NotFoundError(f"Player {first_name} {last_name} not found")
        return Player.model_validate(row["p"])

    async def delete_player(self, first_name: str, last_name: str) -> bool:
        return await self._deleted(
            _write(queries.DELETE_PLAYER, "delete_player", first_name=first_name, last_name=last_name),
            f"Player {first_name} {last_name}",
        )

    async def get_player_stats_summary(self, season_number: int) -> List[Dict[str, Any]]:
        rows = await self._run(_read(
            queries.GET_PLAYER_STATS_SUMMARY, "get_player_stats_summary", season_number=season_number
        ))
        return [
            {
                "player_name": r["player_name"],
                "challenges_won": r.get("challenges_won") or 0,
                "idols_played": r.get("idols_played") or 0,
                "votes_received": r.get("votes_received") or 0,
                "has_idol": bool(r.get("has_idol")),
            }
            for r in rows
        ]

    # ============================================
    # Alliances
    # ============================================

    async def create_alliance(self, season_number: int, alliance: AllianceCreate) -> Alliance:
        row = await self._first(_write(
            queries.CREATE_ALLIANCE, "create_alliance",
            season_number=season_number, **alliance.model_dump()
        ))
        if not row:
            raise NotFoundError(f"Season {season_number} not found")
        return Alliance.model_validate(row["a"])

    async def get_alliances_in_season(self, season_number: int) -> List[Alliance]:
        rows = await self._run(_read(
            queries.GET_ALLIANCES_IN_SEASON, "get_alliances_in_season", season_number=season_number
        ))
        return [
            Alliance.model_validate({**r["a"], "members": [m for m in r.get("members") or [] if m]})
            for r in rows
        ]

    async def get_players_in_alliance(self, alliance_name: str) -> List[Player]:
        rows = await self._run(_read(
            queries.GET_PLAYERS_IN_ALLIANCE, "get_players_in_alliance", alliance_name=alliance_name
        ))
        return [Player.model_validate(r["p"]) for r in rows]

    async def add_player_to_alliance(self, first_name: str, last_name: str, alliance_name: str) -> Dict[str, Any]:
        row = await self._first(_write(
            queries.ADD_PLAYER_TO_ALLIANCE, "add_player_to_alliance",
            first_name=first_name, last_name=last_name, alliance_name=alliance_name
        ))
        if not row:
            raise NotFoundError(f"Player {first_name} {last_name} or alliance {alliance_name} not found")
        return {
            "player": Player.model_validate(row["p"]),
            "alliance": Alliance.model_validate(row["a"]),
        }

    async def update_alliance(self, alliance_name: str, updates: Dict[str, Any]) -> Alliance:
        text = queries.build_update(queries.UPDATE_ALLIANCE, updates, queries.ALLIANCE_UPDATABLE_FIELDS)
        row = await self._first(_write(text, "update_alliance", alliance_name=alliance_name, **updates))
        if not row:
            raise NotFoundError(f"Alliance {alliance_name} not found")
        return Alliance.model_validate(row["a"])

    async def remove_player_from_alliance(self, first_name: str, last_name: str, alliance_name: str) -> Player:
        row = await self._first(_write(
            queries.REMOVE_PLAYER_FROM_ALLIANCE, "remove_player_from_alliance",
            first_name=first_name, last_name=last_name, alliance_name=alliance_name
        ))
        if not row:
            raise NotFoundError(f"{first_name} {last_name} is not a member of {alliance_name}")
        return Player.model_validate(row["p"])

    async def delete_alliance(self, alliance_name: str) -> bool:
        return await self._deleted(
            _write(queries.DELETE_ALLIANCE, "delete_alliance", alliance_name=alliance_name),
            f"Alliance {alliance_name}",
        )

    # ============================================
    # Fantasy teams
    # ============================================

    async def create_fantasy_team(self, season_number: int, team: FantasyTeamCreate) -> FantasyTeam:
        row = await self._first(_write(
            queries.CREATE_FANTASY_TEAM, "create_fantasy_team",
            season_number=season_number, team_name=team.team_name, owners=team.owners
        ))
        if not row:
            raise NotFoundError(f"Season {season_number} not found")
        logger.info(f"Created fantasy team {team.team_name} for season {season_number}")
        return FantasyTeam.model_validate(row["ft"])

    async def get_all_fantasy_teams(self) -> List[FantasyTeam]:
        rows = await self._run(_read(queries.GET_ALL_FANTASY_TEAMS, "get_all_fantasy_teams"))
        return [FantasyTeam.model_validate(r["ft"]) for r in rows]

    async def get_fantasy_teams_in_season(self, season_number: int) -> List[FantasyTeam]:
        rows = await self._run(_read(
            queries.GET_FANTASY_TEAMS_IN_SEASON, "get_fantasy_teams_in_season", season_number=season_number
        ))
        return [
            FantasyTeam.model_validate({**r["ft"], "roster": [p for p in r.get("roster") or [] if p]})
            for r in rows
        ]

    async def get_fantasy_team_with_players(self, team_name: str) -> Optional[FantasyTeam]:
        row = await self._first(_read(
            queries.GET_FANTASY_TEAM_WITH_PLAYERS, "get_fantasy_team_with_players", team_name=team_name
        ))
        if not row or not row.get("ft"):
            return None
        return FantasyTeam.model_validate({**row["ft"], "roster": [p for p in row.get("roster") or [] if p]})

    async def update_fantasy_team(self, team_name: str, updates: Dict[str, Any]) -> FantasyTeam:
        text = queries.build_update(
            queries.UPDATE_FANTASY_TEAM, updates, queries.FANTASY_TEAM_UPDATABLE_FIELDS
        )
        row = await self._first(_write(text, "update_fantasy_team", team_name=team_name, **updates))
        if not row:
            raise NotFoundError(f"Fantasy team {team_name} not found")
        return FantasyTeam.model_validate(row["ft"])

    async def draft_player_to_team(self, first_name: str, last_name: str, team_name: str) -> Dict[str, Any]:
        row = await self._first(_write(
            queries.DRAFT_PLAYER_TO_TEAM, "draft_player_to_team",
            first_name=first_name, last_name=last_name, team_name=team_name
        ))
        if not row:
            raise NotFoundError(f"Player {first_name} {last_name} or team {team_name} not found")
        return {
            "player": Player.model_validate(row["p"]),
            "team": FantasyTeam.model_validate(row["ft"]),
        }

    async def remove_player_from_fantasy_team(self, first_name: str, last_name: str, team_name: str) -> Player:
        row = await self._first(_write(
            queries.REMOVE_PLAYER_FROM_FANTASY_TEAM, "remove_player_from_fantasy_team",
            first_name=first_name, last_name=last_name, team_name=team_name
        ))
        if not row:
            raise NotFoundError(f"{first_name} {last_name} is not on {team_name}")
        return Player.model_validate(row["p"])

    async def delete_fantasy_team(self, team_name: str) -> bool:
        return await self._deleted(
            _write(queries.DELETE_FANTASY_TEAM, "delete_fantasy_team", team_name=team_name),
            f"Fantasy team {team_name}",
        )

    async def get_fantasy_team_leaderboard(self) -> List[LeaderboardEntry]:
        rows = await self._run(_read(queries.GET_FANTASY_TEAM_LEADERBOARD, "get_fantasy_team_leaderboard"))
        return [
            LeaderboardEntry(
                team_name=r["team_name"],
                total_challenge_wins=r.get("total_challenge_wins") or 0,
                roster_size=r.get("roster_size") or 0,
            )
            for r in rows
        ]

    # ============================================
    # Draft
    # ============================================

    async def set_draft_order(self, season_number: int, roster: DraftRoster, draft_type: DraftType) -> Season:
        """
        Fix the draft order of a season.

        Raises:
            DraftInProgressError: If picks have already been recorded; the
                order is locked for the rest of the draft
        """
        picks = await self.get_draft_picks_for_season(season_number)
        if picks:
            raise DraftInProgressError(
                f"Season {season_number} already has {len(picks)} pick(s); the draft order is locked"
            )

        row = await self._first(_write(
            queries.SET_DRAFT_ORDER, "set_draft_order",
            season_number=season_number,
            draft_order=list(roster.participants),
            draft_type=DraftType(draft_type).value,
        ))
        if not row:
            raise NotFoundError(f"Season {season_number} not found")
        logger.info(f"Draft order fixed for season {season_number}: {', '.join(roster.participants)}")
        return Season.model_validate(row["s"])

    async def get_draft_picks_for_season(self, season_number: int) -> List[DraftPick]:
        rows = await self._run(_read(
            queries.GET_DRAFT_PICKS_FOR_SEASON, "get_draft_picks_for_season", season_number=season_number
        ))
        return [DraftPick.model_validate({**r["dp"], "team_name": r.get("team_name")}) for r in rows]

    async def create_draft_pick(self,
                                season_number: int,
                                position: DraftPosition,
                                player_name: str,
                                team_name: str) -> DraftPick:
        row = await self._first(_write(
            queries.CREATE_DRAFT_PICK, "create_draft_pick",
            season_number=season_number,
            round=position.round,
            pick_number=position.pick,
            player_name=player_name,
            team_name=team_name,
        ))
        if not row:
            raise NotFoundError(f"Player {player_name} or team {team_name} not found in season {season_number}")
        return DraftPick.model_validate({**row["dp"], "team_name": row.get("team_name")})

    async def delete_draft_pick(self, season_number: int, round_number: int, pick_number: int) -> bool:
        return await self._deleted(
            _write(queries.DELETE_DRAFT_PICK, "delete_draft_pick",
                   season_number=season_number, round=round_number, pick_number=pick_number),
            f"Draft pick (round {round_number}, pick {pick_number})",
        )

    def current_position(self, picks: List[DraftPick], team_count: int) -> DraftPosition:
        """Position after the highest recorded pick, or (1, 1) for a fresh draft."""
        if not picks:
            return DraftPosition(round=1, pick=1)

        last = max(picks, key=lambda p: p.pick_number)
        if team_count < 1:
            return DraftPosition(round=last.round, pick=last.pick_number + 1)
        return self.calculator.next_position(last.position, team_count)

    async def get_draft_board(self, season_number: int) -> DraftBoard:
        season = await self.get_season(season_number)
        if season is None:
            raise NotFoundError(f"Season {season_number} not found")

        picks = await self.get_draft_picks_for_season(season_number)
        roster = DraftRoster(participants=season.draft_order) if season.draft_order else None
        draft_type = season.draft_type or DraftType.SNAKE

        if roster is not None:
            team_count = len(roster)
        else:
            team_count = len(await self.get_fantasy_teams_in_season(season_number))

        position = self.current_position(picks, team_count)
        current_team = None
        if roster is not None:
            current_team = self.calculator.current_turn_participant(
                roster, draft_type, position.round, position.pick
            )

        return DraftBoard(
            season_number=season_number,
            draft_type=draft_type,
            draft_order=list(roster.participants) if roster else [],
            status=DraftStatus.IN_PROGRESS if picks else DraftStatus.NOT_STARTED,
            current_round=position.round,
            current_pick=position.pick,
            current_team=current_team,
            picks=picks,
        )

    async def submit_draft_pick(self,
                                season_number: int,
                                team_name: Optional[str],
                                player_name: Optional[str]) -> DraftBoard:
        """
        Validate and record a pick at the current position.

        Raises:
            PickRejectedError: With a user-facing message when validation fails
        """
        board = await self.get_draft_board(season_number)
        roster = DraftRoster(participants=board.draft_order) if board.draft_order else None
        position = DraftPosition(round=board.current_round, pick=board.current_pick)

        rejection = validate_pick(
            team_name, player_name, roster, board.draft_type, position, board.picks
        )
        if rejection:
            logger.info(f"Pick rejected for season {season_number}: {rejection}")
            raise PickRejectedError(rejection)

        await self.create_draft_pick(season_number, position, player_name, team_name)
        logger.info(f"Season {season_number} {position}: {team_name} drafted {player_name}")

        return await self.get_draft_board(season_number)


ERROR_MESSAGES = {
    "network": "Unable to connect to the database. Please try again.",
    "timeout": "The request timed out. Please try again.",
    "database": "Database operation failed. Please try again.",
    "validation": "Invalid input. Please check your data and try again.",
    "not_found": "The requested item was not found.",
    "unknown": "An unexpected error occurred. Please try again.",
}


@dataclass(frozen=True)
class OperationResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    details: Optional[str] = None
    timestamp: Optional[datetime] = None


def categorize_error(error: BaseException) -> str:
    if isinstance(error, NotFoundError):
        return "not_found"
    if isinstance(error, (ValueError, PickRejectedError)):
        return "validation"
    if isinstance(error, QueryFailedError):
        message = error.message.lower()
        if "timeout" in message or "timed out" in message:
            return "timeout"
        return "network" if error.transient else "database"
    return "unknown"


async def run_operation(operation: Awaitable[Any]) -> OperationResult:
    """
    Await a service call and fold the outcome into an OperationResult.

    For callers that want a value either way instead of handling
    exceptions (background jobs, batch scripts).
    """
    now = datetime.now(timezone.utc)
    try:
        data = await operation
        return OperationResult(ok=True, data=data, timestamp=now)
    except (QueryFailedError, NotFoundError, PickRejectedError, ValueError) as e:
        error_type = categorize_error(e)
        if isinstance(e, PickRejectedError):
            message = str(e)
        else:
            message = ERROR_MESSAGES[error_type]
        return OperationResult(
            ok=False,
            error=message,
            error_type=error_type,
            details=error_message(e),
            timestamp=now,
        )
