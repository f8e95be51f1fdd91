"""Unit tests for the role table, role abilities and the cancellation window."""

import pytest

from coup.engine import (
    add_player,
    arrest,
    bribe,
    can_cancel,
    cancel,
    cancel_target,
    cancellers,
    coup,
    current_player,
    gather,
    invest,
    sanction,
    spy_on,
    start_game,
    tax,
)
from coup.errors import (
    IllegalStateError,
    InsufficientFundsError,
    InvalidCancellationError,
    InvalidTargetError,
)
from coup.roles import ROLE_TABLE, available_actions, create_player
from coup.rules import BASE_ACTIONS, ActionKind, Role
from coup.state import GameSession


def _make_game(*seats: tuple[str, str]) -> GameSession:
    session = GameSession()
    for name, role in seats:
        add_player(session, name, role)
    start_game(session)
    return session


# ---------------------------------------------------------------------------
# Table and factory
# ---------------------------------------------------------------------------


def test_role_table_covers_every_role():
    assert set(ROLE_TABLE) == set(Role)
    for role, traits in ROLE_TABLE.items():
        assert traits.role == role
        assert traits.description


@pytest.mark.parametrize("role_name", ["Governor", "Spy", "Baron", "General", "Judge", "Merchant"])
def test_create_player_for_each_role(role_name):
    player = create_player(f"Test{role_name}", role_name)
    assert player.role == Role(role_name)
    assert player.name == f"Test{role_name}"
    assert player.coins == 0


@pytest.mark.parametrize("role_name", ["King", "", "spy"])
def test_create_player_rejects_unknown_role(role_name):
    with pytest.raises(ValueError):
        create_player("TestPlayer", role_name)


def test_available_actions_per_role():
    assert available_actions(Role.MERCHANT) == list(BASE_ACTIONS)
    assert ActionKind.INVEST in available_actions(Role.BARON)
    assert ActionKind.CANCEL not in available_actions(Role.BARON)
    assert ActionKind.SPY_ON in available_actions(Role.SPY)
    for role in (Role.GOVERNOR, Role.GENERAL, Role.JUDGE):
        assert ActionKind.CANCEL in available_actions(role)


def test_cancel_capabilities():
    assert ROLE_TABLE[Role.GOVERNOR].cancels == ActionKind.TAX
    assert ROLE_TABLE[Role.GENERAL].cancels == ActionKind.COUP
    assert ROLE_TABLE[Role.JUDGE].cancels == ActionKind.BRIBE
    for role in (Role.SPY, Role.BARON, Role.MERCHANT):
        assert ROLE_TABLE[role].cancels is None
        assert not ROLE_TABLE[role].can_cancel(ActionKind.TAX)


# ---------------------------------------------------------------------------
# Governor
# ---------------------------------------------------------------------------


def test_governor_tax_yields_three():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    tax(session, alice)
    assert alice.coins == 3


def test_governor_cancels_tax_of_regular_player():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    gather(session, alice)
    tax(session, bob)
    assert bob.coins == 2
    result = cancel(session, alice, bob)
    assert bob.coins == 0
    assert result.kind == ActionKind.CANCEL
    assert session.last_action == ActionKind.CANCEL
    # Cancelling does not move the turn
    assert not result.turn_advanced
    assert current_player(session) is alice


def test_governor_cancels_tax_of_another_governor():
    session = _make_game(("Alice", "Governor"), ("Bob", "Governor"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    tax(session, alice)
    assert alice.coins == 3
    cancel(session, bob, alice)
    assert alice.coins == 0


def test_governor_cancels_tax_paid_for_by_bribe():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    gather(session, alice)
    bob.coins = 4
    bribe(session, bob)
    tax(session, bob)
    assert bob.coins == 2
    cancel(session, alice, bob)
    assert bob.coins == 0
    # The bribe grant is still pending
    assert current_player(session) is bob
    assert bob.bribed


def test_governor_cannot_cancel_other_actions():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    gather(session, alice)
    gather(session, bob)
    with pytest.raises(InvalidCancellationError):
        cancel(session, alice, bob)
    assert bob.coins == 1


def test_governor_cannot_cancel_own_tax():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    tax(session, alice)
    with pytest.raises(InvalidCancellationError):
        cancel(session, alice, alice)
    assert alice.coins == 3


def test_governor_cancel_must_name_the_taxer():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"), ("Carol", "Judge"))
    alice, bob, carol = (session.get_player(n) for n in ("Alice", "Bob", "Carol"))
    carol.coins = 2
    gather(session, alice)
    tax(session, bob)
    with pytest.raises(InvalidCancellationError):
        cancel(session, alice, carol)
    assert carol.coins == 2
    assert bob.coins == 2


def test_only_one_cancel_per_action():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"), ("Carol", "Governor"))
    alice, bob, carol = (session.get_player(n) for n in ("Alice", "Bob", "Carol"))
    gather(session, alice)
    tax(session, bob)
    cancel(session, alice, bob)
    with pytest.raises(InvalidCancellationError):
        cancel(session, carol, bob)
    assert bob.coins == 0


# ---------------------------------------------------------------------------
# Spy
# ---------------------------------------------------------------------------


def test_spy_on_reveals_coins_and_blocks_arrest():
    session = _make_game(("Alice", "Spy"), ("Bob", "Governor"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    bob.coins = 5
    assert bob.can_arrest
    result = spy_on(session, alice, bob)
    assert result.revealed_coins == 5
    assert bob.coins == 5
    assert not bob.can_arrest
    assert session.last_action == ActionKind.SPY_ON
    alice.coins = 2
    with pytest.raises(IllegalStateError):
        arrest(session, bob, alice)
    gather(session, bob)
    # Arrest ability comes back once Bob's turn is over
    assert bob.can_arrest


def test_spy_on_advances_turn():
    session = _make_game(("Alice", "Spy"), ("Bob", "Governor"), ("Carol", "Judge"))
    spy_on(session, session.get_player("Alice"), session.get_player("Carol"))
    assert session.current_index == 1


def test_spy_on_invalid_targets_raise():
    session = _make_game(("Alice", "Spy"), ("Bob", "Governor"), ("Carol", "Judge"))
    alice, bob, carol = (session.get_player(n) for n in ("Alice", "Bob", "Carol"))
    with pytest.raises(InvalidTargetError):
        spy_on(session, alice, alice)
    bob.can_arrest = False
    with pytest.raises(InvalidTargetError):
        spy_on(session, alice, bob)
    carol.active = False
    session.active_count -= 1
    with pytest.raises(InvalidTargetError):
        spy_on(session, alice, carol)
    assert current_player(session) is alice


def test_only_spy_can_spy_on():
    session = _make_game(("Alice", "Governor"), ("Bob", "Spy"))
    with pytest.raises(IllegalStateError):
        spy_on(session, session.get_player("Alice"), session.get_player("Bob"))


def test_sanctioned_spy_cannot_spy_on():
    session = _make_game(("Alice", "Spy"), ("Bob", "Governor"))
    alice = session.get_player("Alice")
    alice.sanctioned = True
    with pytest.raises(IllegalStateError):
        spy_on(session, alice, session.get_player("Bob"))


# ---------------------------------------------------------------------------
# Baron
# ---------------------------------------------------------------------------


def test_baron_invest_with_exactly_three_coins():
    session = _make_game(("Alice", "Baron"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    alice.coins = 3
    result = invest(session, alice)
    assert alice.coins == 6
    assert result.turn_advanced
    assert current_player(session).name == "Bob"


def test_baron_invest_with_two_coins_raises():
    session = _make_game(("Alice", "Baron"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    alice.coins = 2
    with pytest.raises(InsufficientFundsError):
        invest(session, alice)
    assert alice.coins == 2


def test_baron_invest_when_sanctioned_or_out_of_turn_raises():
    session = _make_game(("Alice", "Spy"), ("Bob", "Baron"))
    bob = session.get_player("Bob")
    bob.coins = 5
    with pytest.raises(IllegalStateError):
        invest(session, bob)
    gather(session, session.get_player("Alice"))
    bob.sanctioned = True
    with pytest.raises(IllegalStateError):
        invest(session, bob)
    assert bob.coins == 5


def test_only_baron_can_invest():
    session = _make_game(("Alice", "Spy"), ("Bob", "Baron"))
    alice = session.get_player("Alice")
    alice.coins = 3
    with pytest.raises(IllegalStateError):
        invest(session, alice)


def test_sanctioned_baron_receives_compensation():
    session = _make_game(("Alice", "Spy"), ("Bob", "Baron"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    alice.coins = 5
    bob.coins = 6
    sanction(session, alice, bob)
    assert bob.coins == 7
    assert alice.coins == 2
    assert bob.sanctioned


# ---------------------------------------------------------------------------
# General
# ---------------------------------------------------------------------------


def _make_coup_game() -> GameSession:
    """Attacker (Spy) couped Victim (Judge); General holds 10 coins."""
    session = _make_game(("Attacker", "Spy"), ("Victim", "Judge"), ("General", "General"))
    session.get_player("Attacker").coins = 7
    session.get_player("General").coins = 10
    coup(session, session.get_player("Attacker"), session.get_player("Victim"))
    return session


def test_general_cancels_coup():
    session = _make_coup_game()
    victim, general = session.get_player("Victim"), session.get_player("General")
    assert not victim.active
    assert session.active_count == 2
    cancel(session, general, victim)
    assert victim.active
    assert session.active_count == 3
    assert general.coins == 5
    assert session.last_action == ActionKind.CANCEL
    assert current_player(session) is general


def test_general_cannot_cancel_other_actions():
    session = _make_game(("Alice", "Spy"), ("Bob", "General"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    bob.coins = 5
    gather(session, alice)
    with pytest.raises(InvalidCancellationError):
        cancel(session, bob, alice)
    assert bob.coins == 5


def test_general_cancel_with_four_coins_raises():
    session = _make_coup_game()
    victim, general = session.get_player("Victim"), session.get_player("General")
    general.coins = 4
    with pytest.raises(InsufficientFundsError):
        cancel(session, general, victim)
    assert not victim.active
    assert session.active_count == 2
    assert general.coins == 4


def test_general_cannot_cancel_own_coup():
    session = _make_game(("Alice", "General"), ("Bob", "Spy"), ("Carol", "Judge"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    alice.coins = 12
    coup(session, alice, bob)
    with pytest.raises(InvalidCancellationError):
        cancel(session, alice, bob)
    assert not bob.active


def test_general_cancel_must_name_the_coup_target():
    session = _make_game(("A", "Spy"), ("B", "Judge"), ("C", "General"), ("D", "Baron"))
    a, c, d = (session.get_player(n) for n in ("A", "C", "D"))
    a.coins = 7
    c.coins = 5
    coup(session, a, session.get_player("B"))
    with pytest.raises(InvalidCancellationError):
        cancel(session, c, d)
    assert c.coins == 5


def test_arrested_general_loses_nothing():
    session = _make_game(("Alice", "Spy"), ("Bob", "General"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    bob.coins = 3
    arrest(session, alice, bob)
    assert bob.coins == 3
    assert alice.coins == 1


# ---------------------------------------------------------------------------
# Judge
# ---------------------------------------------------------------------------


def test_judge_cancels_bribe_and_passes_turn():
    session = _make_game(("Alice", "Spy"), ("Bob", "Judge"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    alice.coins = 4
    bribe(session, alice)
    assert alice.coins == 0
    assert alice.bribed
    result = cancel(session, bob, alice)
    assert not alice.bribed
    # The bribe money is not returned and Alice loses her turn
    assert alice.coins == 0
    assert result.turn.previous == "Alice"
    assert current_player(session) is bob
    assert session.last_action == ActionKind.CANCEL
    with pytest.raises(IllegalStateError):
        gather(session, alice)


def test_judge_cannot_cancel_other_actions():
    session = _make_game(("Alice", "Spy"), ("Bob", "Judge"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    tax(session, alice)
    with pytest.raises(InvalidCancellationError):
        cancel(session, bob, alice)
    assert alice.coins == 2


def test_sanctioning_judge_costs_four():
    session = _make_game(("Alice", "Spy"), ("Bob", "Judge"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    alice.coins = 3
    with pytest.raises(InsufficientFundsError):
        sanction(session, alice, bob)
    assert alice.coins == 3
    assert not bob.sanctioned
    alice.coins = 4
    sanction(session, alice, bob)
    assert alice.coins == 0
    assert bob.sanctioned


# ---------------------------------------------------------------------------
# Merchant
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "start, expected, bonus",
    [
        (1, 2, 0),  # below the threshold even after gathering
        (2, 4, 1),  # gather lifts the balance to 3 before the bonus is checked
        (3, 5, 1),
        (4, 6, 1),
    ],
)
def test_merchant_turn_end_bonus(start, expected, bonus):
    session = _make_game(("Alice", "Merchant"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    alice.coins = start
    result = gather(session, alice)
    assert alice.coins == expected
    assert result.turn.merchant_bonus == bonus


def test_merchant_bonus_waits_for_turn_to_end():
    session = _make_game(("Alice", "Merchant"), ("Bob", "Spy"))
    alice = session.get_player("Alice")
    alice.coins = 7
    bribe(session, alice)
    first = gather(session, alice)
    assert first.turn is None
    assert alice.coins == 4
    second = gather(session, alice)
    assert second.turn.merchant_bonus == 1
    assert alice.coins == 6


def test_merchant_bonus_when_bribe_is_cancelled():
    session = _make_game(("Alice", "Merchant"), ("Bob", "Judge"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    alice.coins = 8
    bribe(session, alice)
    result = cancel(session, bob, alice)
    assert result.turn.merchant_bonus == 1
    assert alice.coins == 5


def test_arrested_merchant_pays_the_bank():
    session = _make_game(("Alice", "Spy"), ("Bob", "Merchant"))
    alice, bob = session.get_player("Alice"), session.get_player("Bob")
    bob.coins = 3
    arrest(session, alice, bob)
    assert bob.coins == 1
    assert alice.coins == 0


def test_merchant_with_one_coin_cannot_be_arrested():
    session = _make_game(("Alice", "Spy"), ("Bob", "Merchant"), ("Carol", "Judge"))
    alice, bob, carol = (session.get_player(n) for n in ("Alice", "Bob", "Carol"))
    bob.coins = 1
    carol.last_arrested = True
    with pytest.raises(InvalidTargetError):
        arrest(session, alice, bob)
    assert bob.coins == 1
    assert not bob.last_arrested
    assert carol.last_arrested


# ---------------------------------------------------------------------------
# Cancellation window
# ---------------------------------------------------------------------------


def test_cancellers_after_tax():
    session = _make_game(("A", "Spy"), ("B", "Governor"), ("C", "Governor"), ("D", "Judge"))
    tax(session, session.get_player("A"))
    assert [p.name for p in cancellers(session)] == ["B", "C"]
    assert cancel_target(session) == "A"
    cancel(session, session.get_player("B"), session.get_player("A"))
    assert cancellers(session) == []
    assert cancel_target(session) is None


def test_cancellers_exclude_the_actor():
    session = _make_game(("A", "Governor"), ("B", "Governor"), ("C", "Spy"))
    tax(session, session.get_player("A"))
    assert [p.name for p in cancellers(session)] == ["B"]


def test_cancellers_after_coup_name_the_victim():
    session = _make_game(("A", "Spy"), ("B", "General"), ("C", "General"))
    session.get_player("A").coins = 7
    coup(session, session.get_player("A"), session.get_player("B"))
    assert [p.name for p in cancellers(session)] == ["C"]
    assert cancel_target(session) == "B"


def test_cancellers_after_bribe():
    session = _make_game(("A", "Spy"), ("B", "Judge"), ("C", "Governor"))
    session.get_player("A").coins = 4
    bribe(session, session.get_player("A"))
    assert [p.name for p in cancellers(session)] == ["B"]
    assert cancel_target(session) == "A"


def test_can_cancel_matches_role_capability():
    session = _make_game(("A", "Governor"), ("B", "Merchant"))
    a, b = session.get_player("A"), session.get_player("B")
    assert can_cancel(a, ActionKind.TAX)
    assert not can_cancel(a, ActionKind.BRIBE)
    assert not can_cancel(b, ActionKind.TAX)


def test_role_without_cancel_raises():
    session = _make_game(("A", "Spy"), ("B", "Merchant"))
    a, b = session.get_player("A"), session.get_player("B")
    tax(session, a)
    with pytest.raises(InvalidCancellationError):
        cancel(session, b, a)
    assert a.coins == 2


def test_cancel_before_start_raises():
    session = GameSession()
    a = add_player(session, "A", "Governor")
    b = add_player(session, "B", "Spy")
    with pytest.raises(IllegalStateError):
        cancel(session, a, b)


def test_inactive_player_cannot_cancel():
    session = _make_game(("A", "Spy"), ("B", "Governor"), ("C", "Judge"))
    a, b = session.get_player("A"), session.get_player("B")
    tax(session, a)
    b.active = False
    session.active_count -= 1
    with pytest.raises(IllegalStateError):
        cancel(session, b, a)
    assert a.coins == 2
