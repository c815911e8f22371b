"""Player registration and credential endpoints."""

from fastapi import APIRouter, Depends

from stockleague.api.deps import get_player_service
from stockleague.api.schemas import (
    LoginRequest,
    PasswordChange,
    PlayerCreate,
    PlayerListResponse,
    PlayerResponse,
)
from stockleague.services import PlayerService

router = APIRouter(prefix="/players", tags=["players"])


@router.post("", response_model=PlayerResponse, status_code=201)
def register_player(
    data: PlayerCreate,
    players: PlayerService = Depends(get_player_service),
):
    """Register a new player."""
    return players.register(data.name, data.password)


@router.get("", response_model=PlayerListResponse)
def list_players(players: PlayerService = Depends(get_player_service)):
    """List all players, ordered by name."""
    items = players.list_players()
    return PlayerListResponse(
        players=[PlayerResponse.model_validate(p) for p in items],
        count=len(items),
    )


@router.post("/login", response_model=PlayerResponse)
def login(
    data: LoginRequest,
    players: PlayerService = Depends(get_player_service),
):
    """Check a player's name and password."""
    return players.authenticate(data.name, data.password)


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player(
    player_id: str,
    players: PlayerService = Depends(get_player_service),
):
    """Get a player by ID."""
    return players.get_player(player_id)


@router.post("/{player_id}/password")
def change_password(
    player_id: str,
    data: PasswordChange,
    players: PlayerService = Depends(get_player_service),
) -> dict[str, str]:
    """Change a player's password after checking the current one."""
    players.change_password(player_id, data.current_password, data.new_password)
    return {"message": "Password updated successfully"}
