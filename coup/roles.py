"""Role table for Coup: one entry per role, plus the player factory."""

from dataclasses import dataclass
from typing import Optional

from coup.rules import (
    ARREST_TRANSFER,
    BARON_SANCTION_COMPENSATION,
    BASE_ACTIONS,
    GOVERNOR_TAX_GAIN,
    JUDGE_SANCTION_COST,
    MERCHANT_ARREST_LOSS,
    MERCHANT_BONUS,
    SANCTION_COST,
    TAX_GAIN,
    ActionKind,
    Role,
)
from coup.state import PlayerAccount


@dataclass(frozen=True)
class ArrestTerms:
    """Coin movement when a player of this role is arrested."""

    target_loss: int = ARREST_TRANSFER
    arrester_gain: int = ARREST_TRANSFER


@dataclass(frozen=True)
class SanctionTerms:
    """What sanctioning a player of this role costs, and what the target receives."""

    cost: int = SANCTION_COST
    compensation: int = 0


@dataclass(frozen=True)
class RoleTraits:
    """Everything that makes a role differ from the base rules."""

    role: Role
    description: str
    tax_gain: int = TAX_GAIN
    extra_action: Optional[ActionKind] = None
    cancels: Optional[ActionKind] = None
    arrest: ArrestTerms = ArrestTerms()
    sanction: SanctionTerms = SanctionTerms()
    turn_end_bonus: int = 0

    def can_cancel(self, kind: Optional[ActionKind]) -> bool:
        return self.cancels is not None and self.cancels == kind

    def __str__(self) -> str:
        return self.role.value


ROLE_TABLE: dict[Role, RoleTraits] = {
    Role.GOVERNOR: RoleTraits(
        role=Role.GOVERNOR,
        description="Collects 3 coins on tax instead of 2 and can cancel another player's tax.",
        tax_gain=GOVERNOR_TAX_GAIN,
        cancels=ActionKind.TAX,
    ),
    Role.SPY: RoleTraits(
        role=Role.SPY,
        description="Can see another player's coins and stop them from arresting on their next turn.",
        extra_action=ActionKind.SPY_ON,
    ),
    Role.BARON: RoleTraits(
        role=Role.BARON,
        description="Can invest 3 coins for a return of 6 and is compensated with a coin when sanctioned.",
        extra_action=ActionKind.INVEST,
        sanction=SanctionTerms(compensation=BARON_SANCTION_COMPENSATION),
    ),
    Role.GENERAL: RoleTraits(
        role=Role.GENERAL,
        description="Can pay 5 coins to undo a coup and loses nothing when arrested.",
        cancels=ActionKind.COUP,
        arrest=ArrestTerms(target_loss=0, arrester_gain=ARREST_TRANSFER),
    ),
    Role.JUDGE: RoleTraits(
        role=Role.JUDGE,
        description="Can cancel a bribe, and sanctioning a Judge costs an extra coin.",
        cancels=ActionKind.BRIBE,
        sanction=SanctionTerms(cost=JUDGE_SANCTION_COST),
    ),
    Role.MERCHANT: RoleTraits(
        role=Role.MERCHANT,
        description="Earns a bonus coin when ending a turn with 3 or more coins; pays 2 coins to the bank when arrested.",
        arrest=ArrestTerms(target_loss=MERCHANT_ARREST_LOSS, arrester_gain=0),
        turn_end_bonus=MERCHANT_BONUS,
    ),
}


def get_traits(role: Role) -> RoleTraits:
    """Return the table entry for a role."""
    return ROLE_TABLE[role]


def parse_role(name: str) -> Role:
    """Get a role by its exact name ("Governor", "Spy", ...)."""
    try:
        return Role(name)
    except ValueError:
        raise ValueError(f"Unknown role: {name!r}. Available: {[r.value for r in Role]}") from None


def create_player(name: str, role_name: str) -> PlayerAccount:
    """Build a new player record; the only construction path used by the engine."""
    return PlayerAccount(name=name, role=parse_role(role_name))


def available_actions(role: Role) -> list[ActionKind]:
    """Actions a player of this role may ever attempt."""
    traits = get_traits(role)
    actions = list(BASE_ACTIONS)
    if traits.extra_action is not None:
        actions.append(traits.extra_action)
    if traits.cancels is not None:
        actions.append(ActionKind.CANCEL)
    return actions
