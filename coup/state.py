"""Game state types for Coup."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from coup.rules import STARTING_COINS, ActionKind, Role


@dataclass
class PlayerAccount:
    """A seat at the table: role, coins and status flags.

    Build through ``coup.roles.create_player`` (reached via
    ``coup.engine.add_player``); name and role never change afterwards.
    """

    name: str
    role: Role
    coins: int = STARTING_COINS
    active: bool = True
    sanctioned: bool = False
    last_arrested: bool = False
    can_arrest: bool = True
    bribed: bool = False


class EventKind(str, Enum):
    """Type of game event."""

    PLAYER_ADDED = "player_added"
    GAME_START = "game_start"
    ACTION = "action"
    CANCEL = "cancel"
    TURN = "turn"
    MERCHANT_BONUS = "merchant_bonus"
    ELIMINATED = "eliminated"
    REINSTATED = "reinstated"
    GAME_OVER = "game_over"


@dataclass
class Event:
    """A single game event for history."""

    kind: EventKind
    message: str
    player: Optional[str] = None
    target: Optional[str] = None
    extra: Optional[dict] = None


@dataclass(frozen=True)
class TurnChange:
    """What happened when the turn passed from one player to the next."""

    previous: str
    current: str
    merchant_bonus: int = 0  # coins credited to the outgoing Merchant


@dataclass(frozen=True)
class ActionResult:
    """Observable outcome of a successful action."""

    kind: ActionKind
    actor: str
    target: Optional[str] = None
    revealed_coins: Optional[int] = None  # spy_on only
    turn: Optional[TurnChange] = None  # None when the turn did not pass

    @property
    def turn_advanced(self) -> bool:
        return self.turn is not None


@dataclass
class GameSession:
    """The table: seating order, turn pointer and last-action memory."""

    players: list[PlayerAccount] = field(default_factory=list)
    current_index: int = 0
    started: bool = False
    active_count: int = 0
    last_action: Optional[ActionKind] = None
    last_actor: Optional[str] = None  # name of the player who performed last_action
    last_target: Optional[str] = None  # name of its target, for targeted actions
    events: list[Event] = field(default_factory=list)

    def reset(self) -> None:
        """Return to the empty, not-started state."""
        self.players = []
        self.current_index = 0
        self.started = False
        self.active_count = 0
        self.last_action = None
        self.last_actor = None
        self.last_target = None
        self.events = []

    def get_active_players(self) -> list[PlayerAccount]:
        """Return active players in seating order."""
        return [p for p in self.players if p.active]

    def get_player(self, name: str) -> Optional[PlayerAccount]:
        """Return player by name or None."""
        for p in self.players:
            if p.name == name:
                return p
        return None
