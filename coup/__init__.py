"""Rules engine for the Coup card game."""

from coup.engine import (
    add_player,
    start_game,
    reset,
    advance_turn,
    current_player,
    active_player_names,
    is_game_over,
    winner_name,
    gather,
    tax,
    bribe,
    arrest,
    sanction,
    coup,
    invest,
    spy_on,
    cancel,
    can_cancel,
    cancel_target,
    cancellers,
    perform,
)
from coup.errors import (
    ErrorKind,
    GameError,
    RosterError,
    IllegalStateError,
    InsufficientFundsError,
    InvalidTargetError,
    InvalidCancellationError,
    GameNotOverError,
)
from coup.outcome import Outcome, attempt
from coup.roles import ROLE_TABLE, RoleTraits, available_actions, create_player
from coup.rules import Role, ActionKind
from coup.state import GameSession, PlayerAccount, ActionResult, TurnChange, Event

__all__ = [
    "add_player",
    "start_game",
    "reset",
    "advance_turn",
    "current_player",
    "active_player_names",
    "is_game_over",
    "winner_name",
    "gather",
    "tax",
    "bribe",
    "arrest",
    "sanction",
    "coup",
    "invest",
    "spy_on",
    "cancel",
    "can_cancel",
    "cancel_target",
    "cancellers",
    "perform",
    "ErrorKind",
    "GameError",
    "RosterError",
    "IllegalStateError",
    "InsufficientFundsError",
    "InvalidTargetError",
    "InvalidCancellationError",
    "GameNotOverError",
    "Outcome",
    "attempt",
    "ROLE_TABLE",
    "RoleTraits",
    "available_actions",
    "create_player",
    "Role",
    "ActionKind",
    "GameSession",
    "PlayerAccount",
    "ActionResult",
    "TurnChange",
    "Event",
]
