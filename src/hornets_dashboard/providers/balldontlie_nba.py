"""
BallDontLie NBA API client.

Provides access to NBA teams, players, per-game box scores and season
averages via the BallDontLie API (https://api.balldontlie.io).
"""

import logging
from typing import Any, AsyncIterator, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..core.http import BaseApiClient, ExternalAPIError
from ..core.models import PlayerIdentity, RawGameRecord, Team

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class TeamNotFoundError(ExternalAPIError):
    """Raised when the configured team is not in the /teams listing."""

    def __init__(self, team_name: str):
        super().__init__(f"Team {team_name!r} not found", code="TEAM_NOT_FOUND", status_code=404)
        self.team_name = team_name


def _items(response: dict[str, Any], path: str) -> list[Any]:
    data = response.get("data") or []
    if not isinstance(data, list):
        raise ExternalAPIError(f"Malformed {path} response: \"data\" is {type(data).__name__}")
    return data


def _parse(model: type[ModelT], item: Any, path: str) -> ModelT:
    """Validate one upstream item; a schema mismatch is an upstream failure."""
    try:
        return model.model_validate(item)
    except ValidationError as e:
        raise ExternalAPIError(
            f"Malformed {model.__name__} in {path} response ({e.error_count()} errors)"
        ) from e


class BallDontLieNBA(BaseApiClient):
    """BallDontLie NBA API client."""

    BASE_URL = "https://api.balldontlie.io/v1"
    SERVICE_NAME = "BallDontLie"

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        requests_per_minute: int = 600,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=base_url,
            headers={"Authorization": api_key} if api_key else {},
            requests_per_minute=requests_per_minute,
            timeout=timeout,
            transport=transport,
        )

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any],
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield every item of a cursor-paginated endpoint."""
        params = dict(params)
        while True:
            response = await self._get(path, params)
            for item in _items(response, path):
                yield item

            meta = response.get("meta")
            next_cursor = meta.get("next_cursor") if isinstance(meta, dict) else None
            if not next_cursor:
                break
            params["cursor"] = next_cursor

    # =========================================================================
    # Teams
    # =========================================================================

    async def get_teams(self) -> list[Team]:
        """Get all NBA teams."""
        response = await self._get("/teams")
        return [_parse(Team, team, "/teams") for team in _items(response, "/teams")]

    async def find_team(self, team_name: str) -> Team:
        """Find a team by nickname ("Hornets") or part of its full name.

        Raises:
            TeamNotFoundError: If no team matches
        """
        wanted = team_name.lower()
        for team in await self.get_teams():
            if team.name.lower() == wanted or wanted in team.full_name.lower():
                return team
        raise TeamNotFoundError(team_name)

    # =========================================================================
    # Players
    # =========================================================================

    async def get_team_players(
        self,
        team_id: int,
        *,
        active_only: bool = False,
        per_page: int = 100,
    ) -> list[PlayerIdentity]:
        """Get every player listed for a team."""
        path = "/players/active" if active_only else "/players"
        params: dict[str, Any] = {"team_ids[]": [team_id], "per_page": per_page}
        return [_parse(PlayerIdentity, p, path) async for p in self._paginate(path, params)]

    # =========================================================================
    # Box scores
    # =========================================================================

    async def get_player_game_stats(
        self,
        player_id: int,
        season: int,
        *,
        postseason: bool = False,
        per_page: int = 100,
    ) -> list[RawGameRecord]:
        """Get one player's per-game stat lines for a season, in API order."""
        params: dict[str, Any] = {
            "player_ids[]": [player_id],
            "seasons[]": [season],
            "postseason": str(postseason).lower(),
            "per_page": per_page,
        }
        return [_parse(RawGameRecord, g, "/stats") async for g in self._paginate("/stats", params)]

    # =========================================================================
    # Season Averages
    # =========================================================================

    async def get_season_averages(
        self,
        season: int,
        player_ids: list[int],
        season_type: str = "regular",
    ) -> list[dict[str, Any]]:
        """
        Get already-averaged season stats.

        Args:
            season: Season year (e.g., 2024 for 2024-25 season)
            player_ids: Players to include
            season_type: "regular" or "playoffs"
        """
        params: dict[str, Any] = {
            "season": season,
            "season_type": season_type,
            "player_ids[]": player_ids,
        }
        response = await self._get("/season_averages", params)
        return [row for row in _items(response, "/season_averages") if isinstance(row, dict)]
