"""FastAPI app: seat players, start, act, cancel and read the table."""

import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from coup.engine import (
    add_player,
    cancel_target,
    cancellers,
    perform,
    start_game,
    winner_name,
)
from coup.errors import ErrorKind
from coup.outcome import Outcome, attempt
from coup.roles import ROLE_TABLE, available_actions
from coup_api import session_store
from coup_api.models import (
    ActionRequest,
    ActionResponse,
    CancellersResponse,
    GameStateResponse,
    PlayerCreateRequest,
    RolePublic,
    action_result_to_public,
    game_state_to_public,
)
from coup_api.settings import configure_logging, get_cors_origins

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Coup API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rule violations a client could fix by choosing differently are 400; wrong moment is 409
STATUS_BY_KIND = {
    ErrorKind.ROSTER: 409,
    ErrorKind.ILLEGAL_STATE: 409,
    ErrorKind.GAME_NOT_OVER: 409,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.INVALID_TARGET: 400,
    ErrorKind.INVALID_CANCELLATION: 400,
}


def _raise_for(outcome: Outcome) -> None:
    """Turn a failed Outcome into an HTTPException carrying the error kind."""
    if outcome.ok:
        return
    logger.warning("Rejected: %s (%s)", outcome.message, outcome.kind.value)
    raise HTTPException(
        STATUS_BY_KIND.get(outcome.kind, 400),
        {"kind": outcome.kind.value, "message": outcome.message},
    )


def _require_player(name: str):
    player = session_store.get().get_player(name)
    if player is None:
        raise HTTPException(404, f"Player {name!r} not found")
    return player


@app.get("/game", response_model=GameStateResponse, tags=["Game"], summary="Get table state")
def get_game(since: int = Query(0, ge=0, description="Only return events from this index on")):
    """Get the public state of the table."""
    return game_state_to_public(session_store.get(), events_since=since)


@app.post("/game/players", response_model=GameStateResponse, tags=["Game"], summary="Add player")
def add_player_endpoint(body: PlayerCreateRequest):
    """Seat a player before the game starts."""
    session = session_store.get()
    _raise_for(attempt(add_player, session, body.name, body.role))
    return game_state_to_public(session)


@app.post("/game/start", response_model=GameStateResponse, tags=["Game"], summary="Start game")
def start_game_endpoint():
    """Lock the roster; the first seated player moves first."""
    session = session_store.get()
    _raise_for(attempt(start_game, session))
    return game_state_to_public(session)


@app.post("/game/actions", response_model=ActionResponse, tags=["Game"], summary="Perform action")
def perform_action(body: ActionRequest):
    """Perform an action (including cancel) for the named player."""
    session = session_store.get()
    actor = _require_player(body.actor)
    target = _require_player(body.target) if body.target is not None else None
    seen = len(session.events)
    outcome = attempt(perform, session, actor, body.action, target)
    _raise_for(outcome)
    return ActionResponse(
        result=action_result_to_public(outcome.value),
        state=game_state_to_public(session, events_since=seen),
    )


@app.get("/game/cancellers", response_model=CancellersResponse, tags=["Game"], summary="Who may cancel")
def get_cancellers():
    """Players who may cancel the last action, and the target they must name."""
    session = session_store.get()
    return CancellersResponse(
        last_action=session.last_action.value if session.last_action else None,
        target=cancel_target(session),
        cancellers=[p.name for p in cancellers(session)],
    )


@app.get("/game/winner", response_model=dict, tags=["Game"], summary="Get winner")
def get_winner():
    """Return the winner's name once a single player is left."""
    outcome = attempt(winner_name, session_store.get())
    _raise_for(outcome)
    return {"winner": outcome.value}


@app.post("/game/reset", response_model=GameStateResponse, tags=["Game"], summary="Reset table")
def reset_game():
    """Clear the table back to an empty, not-started game."""
    return game_state_to_public(session_store.reset())


@app.get("/rules/roles", response_model=list[RolePublic], tags=["Rules"], summary="List roles")
def list_roles():
    """Each role with its description, actions and cancel capability."""
    return [
        RolePublic(
            role=traits.role.value,
            description=traits.description,
            actions=[a.value for a in available_actions(traits.role)],
            cancels=traits.cancels.value if traits.cancels else None,
        )
        for traits in ROLE_TABLE.values()
    ]


@app.get("/health", tags=["System"], summary="Health check")
def health():
    return {"status": "ok"}
