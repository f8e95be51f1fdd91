"""Game rules and constants for Coup."""

from enum import Enum


class Role(str, Enum):
    """Player roles in the game."""

    GOVERNOR = "Governor"
    SPY = "Spy"
    BARON = "Baron"
    GENERAL = "General"
    JUDGE = "Judge"
    MERCHANT = "Merchant"


class ActionKind(str, Enum):
    """Kind of action a player can perform on their turn (or out of turn, for cancel)."""

    GATHER = "gather"
    TAX = "tax"
    BRIBE = "bribe"
    ARREST = "arrest"
    SANCTION = "sanction"
    COUP = "coup"
    INVEST = "invest"
    SPY_ON = "spy_on"
    CANCEL = "cancel"


# Actions every role can perform
BASE_ACTIONS = (
    ActionKind.GATHER,
    ActionKind.TAX,
    ActionKind.BRIBE,
    ActionKind.ARREST,
    ActionKind.SANCTION,
    ActionKind.COUP,
)

# Actions blocked while a player is sanctioned
ECONOMIC_ACTIONS = (ActionKind.GATHER, ActionKind.TAX, ActionKind.INVEST, ActionKind.SPY_ON)

# Actions still allowed when holding MUST_COUP_COINS or more
MUST_COUP_EXEMPT = (ActionKind.COUP, ActionKind.CANCEL)

# Actions that name another player
TARGETED_ACTIONS = (
    ActionKind.ARREST,
    ActionKind.SANCTION,
    ActionKind.COUP,
    ActionKind.SPY_ON,
    ActionKind.CANCEL,
)

# Roster size
MIN_PLAYERS = 2
MAX_PLAYERS = 6

# Coin rules
STARTING_COINS = 0
MUST_COUP_COINS = 10
GATHER_GAIN = 1
TAX_GAIN = 2
BRIBE_COST = 4
SANCTION_COST = 3
COUP_COST = 7
ARREST_TRANSFER = 1

# Role-specific numbers
GOVERNOR_TAX_GAIN = 3
INVEST_MIN_COINS = 3
INVEST_GAIN = 3
GENERAL_CANCEL_COST = 5
JUDGE_SANCTION_COST = 4
BARON_SANCTION_COMPENSATION = 1
MERCHANT_ARREST_LOSS = 2
MERCHANT_BONUS_THRESHOLD = 3
MERCHANT_BONUS = 1
