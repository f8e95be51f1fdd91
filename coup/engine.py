"""Game engine: session lifecycle, turn scheduling and every player action.

All functions take the ``GameSession`` they act on. Actions run their checks
before touching any state, so a raised ``GameError`` always leaves the
session exactly as it was.
"""

import logging
from typing import Callable, Optional

from coup.errors import (
    GameNotOverError,
    IllegalStateError,
    InsufficientFundsError,
    InvalidCancellationError,
    InvalidTargetError,
    RosterError,
)
from coup.roles import create_player, get_traits
from coup.rules import (
    BRIBE_COST,
    COUP_COST,
    ECONOMIC_ACTIONS,
    GATHER_GAIN,
    GENERAL_CANCEL_COST,
    INVEST_GAIN,
    INVEST_MIN_COINS,
    MAX_PLAYERS,
    MERCHANT_BONUS_THRESHOLD,
    MIN_PLAYERS,
    MUST_COUP_COINS,
    MUST_COUP_EXEMPT,
    SANCTION_COST,
    ActionKind,
)
from coup.state import (
    ActionResult,
    Event,
    EventKind,
    GameSession,
    PlayerAccount,
    TurnChange,
)

logger = logging.getLogger(__name__)


def _emit(session: GameSession, event: Event) -> None:
    """Append event to the session log (mutates session)."""
    session.events.append(event)


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


def add_player(session: GameSession, name: str, role_name: str) -> PlayerAccount:
    """Seat a new player with the given role name ("Governor", "Spy", ...)."""
    if session.started:
        raise RosterError("Cannot add players after the game has started")
    if len(session.players) >= MAX_PLAYERS:
        raise RosterError(f"Maximum players is {MAX_PLAYERS}")
    if session.get_player(name) is not None:
        raise RosterError(f"Player with name {name!r} already exists")

    player = create_player(name, role_name)
    session.players.append(player)
    session.active_count += 1
    _emit(
        session,
        Event(
            kind=EventKind.PLAYER_ADDED,
            message=f"{name} joined as {player.role.value}.",
            player=name,
        ),
    )
    return player


def start_game(session: GameSession) -> None:
    """Lock the roster and hand the first turn to the first seated player."""
    if session.started:
        raise RosterError("The game has already started")
    if not MIN_PLAYERS <= session.active_count <= MAX_PLAYERS:
        raise RosterError(
            f"Illegal number of players to start the game: {session.active_count} "
            f"(need {MIN_PLAYERS}-{MAX_PLAYERS})"
        )
    session.started = True
    first = session.players[session.current_index]
    logger.info("Game started with %d players; %s goes first", len(session.players), first.name)
    _emit(
        session,
        Event(
            kind=EventKind.GAME_START,
            message=f"Game started with {len(session.players)} players. It's {first.name}'s turn.",
            player=first.name,
        ),
    )


def reset(session: GameSession) -> None:
    """Clear the roster and return to the not-started state."""
    session.reset()


def current_player(session: GameSession) -> PlayerAccount:
    """Return the player whose turn it is."""
    if not session.players:
        raise RosterError("No players in the game")
    return session.players[session.current_index]


def active_player_names(session: GameSession) -> list[str]:
    """Names of players still in the game, in seating order."""
    if not session.players:
        raise RosterError("No players in the game")
    return [p.name for p in session.get_active_players()]


def is_game_over(session: GameSession) -> bool:
    """True once the game has started and a single player is left."""
    return session.started and len(session.get_active_players()) == 1


def winner_name(session: GameSession) -> str:
    """Return the last active player's name."""
    active = session.get_active_players()
    if len(active) != 1:
        raise GameNotOverError(f"Game is not over yet: {len(active)} players still active")
    return active[0].name


# ---------------------------------------------------------------------------
# Turn scheduling
# ---------------------------------------------------------------------------


def advance_turn(session: GameSession) -> TurnChange:
    """
    Pass the turn to the next active player in seating order.

    The outgoing player loses any pending bribe grant, and an outgoing
    Merchant holding enough coins (after the action that ended the turn)
    collects the turn-end bonus.
    """
    if len(session.get_active_players()) < MIN_PLAYERS:
        raise RosterError("Not enough players to continue the game")

    outgoing = session.players[session.current_index]
    outgoing.bribed = False

    bonus = 0
    traits = get_traits(outgoing.role)
    if traits.turn_end_bonus and outgoing.coins >= MERCHANT_BONUS_THRESHOLD:
        bonus = traits.turn_end_bonus
        outgoing.coins += bonus
        logger.info("%s received %d bonus coin(s) as %s", outgoing.name, bonus, traits)
        _emit(
            session,
            Event(
                kind=EventKind.MERCHANT_BONUS,
                message=f"{outgoing.name} received an extra coin for being a {traits}.",
                player=outgoing.name,
                extra={"coins": bonus},
            ),
        )

    index = session.current_index
    while True:
        index = (index + 1) % len(session.players)
        if session.players[index].active:
            break
    session.current_index = index
    incoming = session.players[index]

    _emit(
        session,
        Event(kind=EventKind.TURN, message=f"It's {incoming.name}'s turn.", player=incoming.name),
    )
    return TurnChange(previous=outgoing.name, current=incoming.name, merchant_bonus=bonus)


def _end_turn_reset(player: PlayerAccount) -> None:
    """Flags a player gets back once their own turn is over."""
    player.can_arrest = True
    player.sanctioned = False


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


def _check_in_progress(session: GameSession) -> None:
    if not session.started:
        raise IllegalStateError("The game has not started")
    if session.active_count < MIN_PLAYERS:
        raise IllegalStateError("The game is over")


def _check_active(player: PlayerAccount) -> None:
    if not player.active:
        raise IllegalStateError(f"{player.name} is not active")


def _check_sanctioned(player: PlayerAccount) -> None:
    if player.sanctioned:
        raise IllegalStateError(f"{player.name} is sanctioned")


def _check_turn(session: GameSession, player: PlayerAccount) -> None:
    if current_player(session) is not player:
        raise IllegalStateError(f"It is not {player.name}'s turn")


def _check_must_coup(player: PlayerAccount) -> None:
    if player.coins >= MUST_COUP_COINS:
        raise IllegalStateError(f"{player.name} holds {player.coins} coins and must coup")


def _check_turn_guards(session: GameSession, actor: PlayerAccount, kind: ActionKind) -> None:
    """Shared guard sequence run before any turn action."""
    _check_in_progress(session)
    _check_active(actor)
    if kind in ECONOMIC_ACTIONS:
        _check_sanctioned(actor)
    _check_turn(session, actor)
    if kind not in MUST_COUP_EXEMPT:
        _check_must_coup(actor)


def _check_role_action(actor: PlayerAccount, kind: ActionKind) -> None:
    if get_traits(actor.role).extra_action != kind:
        raise IllegalStateError(f"A {actor.role.value} cannot {kind.value}")


def _check_target(
    session: GameSession, actor: PlayerAccount, target: PlayerAccount, kind: ActionKind
) -> None:
    if target is actor:
        raise InvalidTargetError(f"{actor.name} cannot {kind.value} themselves")
    if not any(p is target for p in session.players):
        raise InvalidTargetError(f"{target.name} is not seated in this game")
    if not target.active:
        raise InvalidTargetError(f"{target.name} is not active")


def _check_funds(player: PlayerAccount, needed: int, kind: ActionKind) -> None:
    if player.coins < needed:
        raise InsufficientFundsError(
            f"{player.name} needs {needed} coins to {kind.value} but has {player.coins}"
        )


# ---------------------------------------------------------------------------
# Completing an action
# ---------------------------------------------------------------------------


def _finish(
    session: GameSession,
    actor: PlayerAccount,
    kind: ActionKind,
    message: str,
    target: Optional[PlayerAccount] = None,
    revealed_coins: Optional[int] = None,
    advance: bool = True,
) -> ActionResult:
    """Log the action, pass the turn unless a bribe is pending, and record it as the last action."""
    target_name = target.name if target is not None else None
    logger.debug("%s: %s -> %s", kind.value, actor.name, target_name)
    _emit(
        session,
        Event(kind=EventKind.ACTION, message=message, player=actor.name, target=target_name,
              extra={"action": kind.value}),
    )

    turn: Optional[TurnChange] = None
    if advance and session.last_action != ActionKind.BRIBE:
        turn = advance_turn(session)
        _end_turn_reset(actor)

    session.last_action = kind
    session.last_actor = actor.name
    session.last_target = target_name
    return ActionResult(
        kind=kind,
        actor=actor.name,
        target=target_name,
        revealed_coins=revealed_coins,
        turn=turn,
    )


# ---------------------------------------------------------------------------
# Base actions
# ---------------------------------------------------------------------------


def gather(session: GameSession, actor: PlayerAccount) -> ActionResult:
    """Take one coin from the bank."""
    _check_turn_guards(session, actor, ActionKind.GATHER)
    actor.coins += GATHER_GAIN
    return _finish(session, actor, ActionKind.GATHER, f"{actor.name} gathered {GATHER_GAIN} coin.")


def tax(session: GameSession, actor: PlayerAccount) -> ActionResult:
    """Take two coins from the bank (three for a Governor)."""
    _check_turn_guards(session, actor, ActionKind.TAX)
    gain = get_traits(actor.role).tax_gain
    actor.coins += gain
    return _finish(session, actor, ActionKind.TAX, f"{actor.name} collected {gain} coins in tax.")


def bribe(session: GameSession, actor: PlayerAccount) -> ActionResult:
    """Pay 4 coins for an extra action; the turn does not pass."""
    _check_turn_guards(session, actor, ActionKind.BRIBE)
    _check_funds(actor, BRIBE_COST, ActionKind.BRIBE)
    actor.coins -= BRIBE_COST
    actor.bribed = True
    return _finish(
        session, actor, ActionKind.BRIBE, f"{actor.name} paid a bribe of {BRIBE_COST} coins.",
        advance=False,
    )


def arrest(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> ActionResult:
    """Take a coin from another player, subject to the target's role terms."""
    _check_turn_guards(session, actor, ActionKind.ARREST)
    _check_target(session, actor, target, ActionKind.ARREST)
    if target.coins == 0:
        raise InvalidTargetError(f"{target.name} has no coins to lose")
    if target.last_arrested:
        raise InvalidTargetError(f"{target.name} was arrested in the previous arrest")
    if not actor.can_arrest:
        raise IllegalStateError(f"{actor.name} cannot arrest this turn")
    terms = get_traits(target.role).arrest
    if target.coins < terms.target_loss:
        raise InvalidTargetError(
            f"{target.name} needs at least {terms.target_loss} coins to be arrested"
        )

    for p in session.players:
        p.last_arrested = False
    target.coins -= terms.target_loss
    actor.coins += terms.arrester_gain
    target.last_arrested = True
    return _finish(
        session, actor, ActionKind.ARREST,
        f"{actor.name} arrested {target.name} (-{terms.target_loss}/+{terms.arrester_gain}).",
        target=target,
    )


def sanction(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> ActionResult:
    """Block another player's economic actions until their next turn ends."""
    _check_turn_guards(session, actor, ActionKind.SANCTION)
    _check_target(session, actor, target, ActionKind.SANCTION)
    _check_funds(actor, SANCTION_COST, ActionKind.SANCTION)
    if target.sanctioned:
        raise InvalidTargetError(f"{target.name} is already sanctioned")
    terms = get_traits(target.role).sanction
    _check_funds(actor, terms.cost, ActionKind.SANCTION)

    actor.coins -= terms.cost
    target.coins += terms.compensation
    target.sanctioned = True
    return _finish(
        session, actor, ActionKind.SANCTION,
        f"{actor.name} sanctioned {target.name} for {terms.cost} coins.",
        target=target,
    )


def coup(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> ActionResult:
    """Pay 7 coins to eliminate another player."""
    _check_turn_guards(session, actor, ActionKind.COUP)
    _check_target(session, actor, target, ActionKind.COUP)
    _check_funds(actor, COUP_COST, ActionKind.COUP)

    target.active = False
    actor.coins -= COUP_COST
    session.active_count -= 1
    logger.info("%s was eliminated by %s", target.name, actor.name)
    _emit(
        session,
        Event(kind=EventKind.ELIMINATED, message=f"{target.name} was removed from the game.",
              player=actor.name, target=target.name),
    )
    # Passing the turn into a decided game is not allowed
    result = _finish(
        session, actor, ActionKind.COUP, f"{actor.name} staged a coup against {target.name}.",
        target=target, advance=session.active_count > 1,
    )
    if session.active_count == 1:
        logger.info("Game over: %s wins", actor.name)
        _emit(session, Event(kind=EventKind.GAME_OVER, message=f"{actor.name} wins.", player=actor.name))
    return result


# ---------------------------------------------------------------------------
# Role actions
# ---------------------------------------------------------------------------


def invest(session: GameSession, actor: PlayerAccount) -> ActionResult:
    """Baron only: with at least 3 coins, gain 3 more."""
    _check_role_action(actor, ActionKind.INVEST)
    _check_turn_guards(session, actor, ActionKind.INVEST)
    _check_funds(actor, INVEST_MIN_COINS, ActionKind.INVEST)
    actor.coins += INVEST_GAIN
    return _finish(session, actor, ActionKind.INVEST, f"{actor.name} invested and gained {INVEST_GAIN} coins.")


def spy_on(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> ActionResult:
    """Spy only: see the target's coins and stop them arresting on their next turn."""
    _check_role_action(actor, ActionKind.SPY_ON)
    _check_turn_guards(session, actor, ActionKind.SPY_ON)
    _check_target(session, actor, target, ActionKind.SPY_ON)
    if not target.can_arrest:
        raise InvalidTargetError(f"{target.name} already cannot arrest")

    revealed = target.coins
    target.can_arrest = False
    return _finish(
        session, actor, ActionKind.SPY_ON, f"{actor.name} spied on {target.name}: {revealed} coins.",
        target=target, revealed_coins=revealed,
    )


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


def can_cancel(player: PlayerAccount, kind: Optional[ActionKind]) -> bool:
    """Whether this player's role can cancel an action of the given kind."""
    return get_traits(player.role).can_cancel(kind)


def cancel_target(session: GameSession) -> Optional[str]:
    """Name of the player a cancel of the last action must be aimed at."""
    if session.last_action == ActionKind.COUP:
        return session.last_target
    if session.last_action in (ActionKind.TAX, ActionKind.BRIBE):
        return session.last_actor
    return None


def cancellers(session: GameSession) -> list[PlayerAccount]:
    """Active players, other than the one who just acted, whose role can cancel the last action."""
    return [
        p
        for p in session.get_active_players()
        if p.name != session.last_actor and can_cancel(p, session.last_action)
    ]


def _undo_tax(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> Optional[TurnChange]:
    # The tax is always the last action here, so the taxed coins are still held
    target.coins -= get_traits(target.role).tax_gain
    return None


def _undo_coup(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> Optional[TurnChange]:
    _check_funds(actor, GENERAL_CANCEL_COST, ActionKind.CANCEL)
    if target.active:
        raise InvalidCancellationError(f"{target.name} is still active")
    actor.coins -= GENERAL_CANCEL_COST
    target.active = True
    session.active_count += 1
    logger.info("%s was reinstated by %s", target.name, actor.name)
    _emit(
        session,
        Event(kind=EventKind.REINSTATED, message=f"{target.name} is back in the game.",
              player=actor.name, target=target.name),
    )
    return None


def _undo_bribe(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> Optional[TurnChange]:
    target.bribed = False
    outgoing = current_player(session)
    turn = advance_turn(session)
    _end_turn_reset(outgoing)
    return turn


_UNDO: dict[ActionKind, Callable[[GameSession, PlayerAccount, PlayerAccount], Optional[TurnChange]]] = {
    ActionKind.TAX: _undo_tax,
    ActionKind.COUP: _undo_coup,
    ActionKind.BRIBE: _undo_bribe,
}


def cancel(session: GameSession, actor: PlayerAccount, target: PlayerAccount) -> ActionResult:
    """
    Undo the last action, if the actor's role can cancel that kind of action.

    The target is the coup's victim when cancelling a coup, and the player
    who acted when cancelling a tax or a bribe. Can be called out of turn.
    """
    traits = get_traits(actor.role)
    if traits.cancels is None:
        raise InvalidCancellationError(f"A {traits} cannot cancel actions")
    if not session.started:
        raise IllegalStateError("The game has not started")
    _check_active(actor)
    if session.last_action != traits.cancels:
        raise InvalidCancellationError(f"A {traits} can cancel only {traits.cancels.value}")
    if target is actor or session.last_actor == actor.name:
        raise InvalidCancellationError(f"{actor.name} cannot undo their own action")
    expected = cancel_target(session)
    if expected is None or session.get_player(expected) is not target:
        raise InvalidCancellationError(
            f"The last {traits.cancels.value} was not aimed at or made by {target.name}"
        )

    undone = traits.cancels
    turn = _UNDO[undone](session, actor, target)
    _emit(
        session,
        Event(kind=EventKind.CANCEL, message=f"{actor.name} cancelled {target.name}'s {undone.value}.",
              player=actor.name, target=target.name, extra={"cancelled": undone.value}),
    )
    logger.debug("cancel: %s undid %s (%s)", actor.name, undone.value, target.name)
    session.last_action = ActionKind.CANCEL
    session.last_actor = actor.name
    session.last_target = target.name
    return ActionResult(kind=ActionKind.CANCEL, actor=actor.name, target=target.name, turn=turn)


# ---------------------------------------------------------------------------
# Dispatch by action kind
# ---------------------------------------------------------------------------

_UNTARGETED_ACTIONS: dict[ActionKind, Callable[[GameSession, PlayerAccount], ActionResult]] = {
    ActionKind.GATHER: gather,
    ActionKind.TAX: tax,
    ActionKind.BRIBE: bribe,
    ActionKind.INVEST: invest,
}

_TARGETED_ACTIONS: dict[
    ActionKind, Callable[[GameSession, PlayerAccount, PlayerAccount], ActionResult]
] = {
    ActionKind.ARREST: arrest,
    ActionKind.SANCTION: sanction,
    ActionKind.COUP: coup,
    ActionKind.SPY_ON: spy_on,
    ActionKind.CANCEL: cancel,
}


def perform(
    session: GameSession,
    actor: PlayerAccount,
    kind: ActionKind,
    target: Optional[PlayerAccount] = None,
) -> ActionResult:
    """Run any action by kind (for callers that work with action names)."""
    if kind in _TARGETED_ACTIONS:
        if target is None:
            raise InvalidTargetError(f"{kind.value} needs a target")
        return _TARGETED_ACTIONS[kind](session, actor, target)
    if target is not None:
        raise InvalidTargetError(f"{kind.value} takes no target")
    return _UNTARGETED_ACTIONS[kind](session, actor)
