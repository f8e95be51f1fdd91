"""Pydantic request/response models for the API."""

from pydantic import BaseModel, Field, field_validator, model_validator

from coup.engine import is_game_over, winner_name
from coup.roles import available_actions
from coup.rules import TARGETED_ACTIONS, ActionKind, Role
from coup.state import ActionResult, GameSession

# Validation constants (no magic numbers in validation)
MAX_PLAYER_NAME_LENGTH = 50
ALLOWED_ROLES = tuple(r.value for r in Role)


class PlayerCreateRequest(BaseModel):
    """Body for POST /game/players."""

    name: str = Field(..., min_length=1, max_length=MAX_PLAYER_NAME_LENGTH)
    role: str = Field(..., description="Governor, Spy, Baron, General, Judge or Merchant")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("role")
    @classmethod
    def role_allowed(cls, v: str) -> str:
        if v not in ALLOWED_ROLES:
            raise ValueError(f"role must be one of {ALLOWED_ROLES}")
        return v


class ActionRequest(BaseModel):
    """Body for POST /game/actions."""

    actor: str = Field(..., min_length=1, max_length=MAX_PLAYER_NAME_LENGTH)
    action: ActionKind
    target: str | None = Field(default=None, description="Required for arrest, sanction, coup, spy_on and cancel")

    @model_validator(mode="after")
    def target_matches_action(self) -> "ActionRequest":
        if self.action in TARGETED_ACTIONS and not self.target:
            raise ValueError(f"{self.action.value} requires a target")
        if self.action not in TARGETED_ACTIONS and self.target is not None:
            raise ValueError(f"{self.action.value} takes no target")
        return self


class PlayerPublic(BaseModel):
    """Player as shown to the (hot-seat) renderer."""

    name: str
    role: str
    coins: int
    active: bool
    sanctioned: bool
    last_arrested: bool
    can_arrest: bool
    bribed: bool
    available_actions: list[str]


class EventPublic(BaseModel):
    kind: str
    message: str
    player: str | None = None
    target: str | None = None


class TurnChangePublic(BaseModel):
    previous: str
    current: str
    merchant_bonus: int = 0


class ActionResultPublic(BaseModel):
    """Outcome of one successful action."""

    action: str
    actor: str
    target: str | None = None
    revealed_coins: int | None = Field(default=None, description="Only set for spy_on")
    turn: TurnChangePublic | None = Field(default=None, description="Null when the turn did not pass")


class GameStateResponse(BaseModel):
    """Public table state for GET /game."""

    players: list[PlayerPublic]
    started: bool
    current_player: str | None = None
    active_players: list[str]
    active_count: int
    last_action: str | None = None
    last_actor: str | None = None
    winner: str | None = Field(default=None, description="Set once a single player is left")
    events: list[EventPublic] = Field(..., description="Events from index events_since onwards")
    events_since: int = 0
    event_count: int = Field(..., description="Total events so far; pass as since to fetch only newer ones")


class ActionResponse(BaseModel):
    result: ActionResultPublic
    state: GameStateResponse


class CancellersResponse(BaseModel):
    """Who may cancel the last action, and whom they must name as target."""

    last_action: str | None = None
    target: str | None = None
    cancellers: list[str] = Field(default_factory=list)


class RolePublic(BaseModel):
    role: str
    description: str
    actions: list[str]
    cancels: str | None = None


def action_result_to_public(result: ActionResult) -> ActionResultPublic:
    turn = None
    if result.turn is not None:
        turn = TurnChangePublic(
            previous=result.turn.previous,
            current=result.turn.current,
            merchant_bonus=result.turn.merchant_bonus,
        )
    return ActionResultPublic(
        action=result.kind.value,
        actor=result.actor,
        target=result.target,
        revealed_coins=result.revealed_coins,
        turn=turn,
    )


def game_state_to_public(session: GameSession, events_since: int = 0) -> GameStateResponse:
    """Build public response from a GameSession, with the events from events_since on."""
    players_public = [
        PlayerPublic(
            name=p.name,
            role=p.role.value,
            coins=p.coins,
            active=p.active,
            sanctioned=p.sanctioned,
            last_arrested=p.last_arrested,
            can_arrest=p.can_arrest,
            bribed=p.bribed,
            available_actions=[a.value for a in available_actions(p.role)],
        )
        for p in session.players
    ]
    events_public = [
        EventPublic(kind=e.kind.value, message=e.message, player=e.player, target=e.target)
        for e in session.events[events_since:]
    ]
    current = session.players[session.current_index].name if session.players else None
    return GameStateResponse(
        players=players_public,
        started=session.started,
        current_player=current,
        active_players=[p.name for p in session.get_active_players()],
        active_count=session.active_count,
        last_action=session.last_action.value if session.last_action else None,
        last_actor=session.last_actor,
        winner=winner_name(session) if is_game_over(session) else None,
        events=events_public,
        events_since=events_since,
        event_count=len(session.events),
    )
