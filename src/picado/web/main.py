"""
JSON API for Picado.

Thin HTTP layer over the roster service, match management and player
registry. Routes mirror the signup page's endpoints; all roster rules live in
picado.roster.
"""

import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from picado import __version__
from picado.db.session import get_db
from picado.errors import Conflict, InvalidInput, NotFound, RosterError
from picado.logging_config import setup_logging
from picado.matches import create_match, delete_match, list_matches
from picado.players import create_player, list_players
from picado.roster import Entrant, RosterService
from picado.roster.results import match_to_dict, signup_to_dict
from picado.teams import split_teams
from picado.web.schemas import (
    MatchCreate,
    MealUpdate,
    PlayerCreate,
    PositionsUpdate,
    SignupCreate,
    SignupRef,
    TeamSplitRequest,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type, int] = {
    NotFound: 404,
    InvalidInput: 400,
    Conflict: 409,
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    logger.info("Picado API %s starting", __version__)
    yield


app = FastAPI(title="Picado", version=__version__, lifespan=lifespan)


@app.exception_handler(RosterError)
async def roster_error_handler(request: Request, exc: RosterError):
    """Map roster errors to status codes; storage failures are 500."""
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        500,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "category": exc.category},
    )


def _player_to_dict(player) -> dict:
    return {
        "id": player.id,
        "name": player.name,
        "primary_position": player.primary_position,
        "secondary_position": player.secondary_position,
    }


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}


# =============================================================================
# Players
# =============================================================================

@app.get("/api/players")
def api_list_players(db: Session = Depends(get_db)):
    return [_player_to_dict(p) for p in list_players(db)]


@app.post("/api/players", status_code=201)
def api_create_player(body: PlayerCreate, db: Session = Depends(get_db)):
    player = create_player(
        db,
        body.name,
        primary_position=body.primary_position,
        secondary_position=body.secondary_position,
        speed=body.speed,
        control=body.control,
        physical_condition=body.physical_condition,
        attitude=body.attitude,
    )
    return _player_to_dict(player)


# =============================================================================
# Matches
# =============================================================================

@app.get("/api/matches")
def api_list_matches(db: Session = Depends(get_db)):
    return [summary.to_dict() for summary in list_matches(db)]


@app.post("/api/matches", status_code=201)
def api_create_match(body: MatchCreate, db: Session = Depends(get_db)):
    match = create_match(
        db,
        group_name=body.group_name,
        scheduled_at=body.scheduled_at,
        location_name=body.location_name,
        player_limit=body.player_limit,
    )
    return match_to_dict(match)


@app.get("/api/matches/{match_id}")
def api_get_match(match_id: int, db: Session = Depends(get_db)):
    """Match details with its ordered active, waiting and meal-only lists."""
    return RosterService(db).list_roster(match_id).to_dict()


@app.delete("/api/matches/{match_id}")
def api_delete_match(match_id: int, db: Session = Depends(get_db)):
    delete_match(db, match_id)
    return {"success": True}


# =============================================================================
# Signups
# =============================================================================

@app.post("/api/matches/{match_id}/signup", status_code=201)
def api_signup(match_id: int, body: SignupCreate, db: Session = Depends(get_db)):
    entrant = Entrant(
        name=body.player_name,
        player_id=body.player_id,
        is_guest=body.is_guest,
        meal_only=body.meal_only,
    )
    signup = RosterService(db).admit(match_id, entrant)
    return signup_to_dict(signup)


@app.delete("/api/matches/{match_id}/signup")
def api_withdraw(
    match_id: int,
    signup_id: Optional[int] = Query(default=None, alias="signupId"),
    db: Session = Depends(get_db),
):
    if signup_id is None:
        raise InvalidInput("signupId is required")
    return RosterService(db).withdraw(match_id, signup_id).to_dict()


@app.put("/api/matches/{match_id}/player/order")
def api_move_up(match_id: int, body: SignupRef, db: Session = Depends(get_db)):
    return RosterService(db).reorder_up(match_id, body.signup_id).to_dict()


@app.put("/api/matches/{match_id}/meal")
def api_toggle_meal(match_id: int, body: MealUpdate, db: Session = Depends(get_db)):
    signup = RosterService(db).toggle_meal(body.signup_id, body.has_meal)
    return signup_to_dict(signup)


@app.put("/api/matches/{match_id}/player/positions")
def api_set_positions(match_id: int, body: PositionsUpdate, db: Session = Depends(get_db)):
    signup = RosterService(db).set_positions(match_id, body.signup_id, body.positions)
    return signup_to_dict(signup)


# =============================================================================
# Teams
# =============================================================================

@app.post("/api/matches/{match_id}/teams")
def api_split_teams(
    match_id: int,
    body: Optional[TeamSplitRequest] = None,
    db: Session = Depends(get_db),
):
    """Local randomized split of the active roster. Nothing is stored."""
    entrants = RosterService(db).active_entrants(match_id)
    rng = random.Random(body.seed) if body and body.seed is not None else None
    split = split_teams(entrants, rng=rng)
    return {"match_id": match_id, **split.to_dict()}
