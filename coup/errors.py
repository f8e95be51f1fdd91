"""Error taxonomy for the Coup engine.

Every failure an action can produce is one of the kinds in ``ErrorKind``.
They are all expected, user-facing outcomes: nothing here is fatal and no
action mutates state before it has passed all of its checks.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kind of rule violation."""

    ROSTER = "roster_error"
    ILLEGAL_STATE = "illegal_state"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_TARGET = "invalid_target"
    INVALID_CANCELLATION = "invalid_cancellation"
    GAME_NOT_OVER = "game_not_over"


class GameError(Exception):
    """Base class for all rule violations."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RosterError(GameError):
    """Roster or session lifecycle misuse (adding after start, bad player count...)."""

    kind = ErrorKind.ROSTER


class IllegalStateError(GameError):
    """The acting player may not act right now (inactive, sanctioned, wrong turn, must coup)."""

    kind = ErrorKind.ILLEGAL_STATE


class InsufficientFundsError(GameError):
    """The acting player holds fewer coins than the action costs."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class InvalidTargetError(GameError):
    """The chosen target cannot receive this action."""

    kind = ErrorKind.INVALID_TARGET


class InvalidCancellationError(GameError):
    """The last action cannot be cancelled by this player against this target."""

    kind = ErrorKind.INVALID_CANCELLATION


class GameNotOverError(GameError):
    """Winner requested while more than one player is active."""

    kind = ErrorKind.GAME_NOT_OVER
