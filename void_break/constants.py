from decimal import Decimal
from enum import Enum


class Symbol(str, Enum):
    S1_VOID_SHARD = "S1_VOID_SHARD"
    S2_NEBULA_CORE = "S2_NEBULA_CORE"
    S3_PLASMA_ORB = "S3_PLASMA_ORB"
    S4_STELLAR_FRAG = "S4_STELLAR_FRAG"
    S5_DARK_MATTER = "S5_DARK_MATTER"
    S6_SINGULARITY = "S6_SINGULARITY"
    S7_NEUTRON = "S7_NEUTRON"
    WILD = "WILD"
    SCATTER = "SCATTER"


# --- Grid ---
GRID_SIZE = 7
GRID_SIZE_BONUS = 9
SUPPORTED_GRID_SIZES = (GRID_SIZE, GRID_SIZE_BONUS)
VOID_CORE_CELLS = {
    GRID_SIZE: frozenset([(3, 3), (3, 4), (4, 3), (4, 4)]),
    GRID_SIZE_BONUS: frozenset([
        (3, 3), (3, 4), (3, 5),
        (4, 3), (4, 4), (4, 5),
        (5, 3), (5, 4), (5, 5),
    ]),
}

# --- Symbols ---
SYMBOL_NAMES = {
    Symbol.S1_VOID_SHARD: "Void Shard",
    Symbol.S2_NEBULA_CORE: "Nebula Core",
    Symbol.S3_PLASMA_ORB: "Plasma Orb",
    Symbol.S4_STELLAR_FRAG: "Stellar Fragment",
    Symbol.S5_DARK_MATTER: "Dark Matter",
    Symbol.S6_SINGULARITY: "Singularity Gem",
    Symbol.S7_NEUTRON: "Neutron Crystal",
    Symbol.WILD: "Wild",
    Symbol.SCATTER: "Scatter",
}

# Insertion order is the cumulative scan order used by weighted selection.
SYMBOL_WEIGHTS = {
    Symbol.S1_VOID_SHARD: 8,
    Symbol.S2_NEBULA_CORE: 8,
    Symbol.S3_PLASMA_ORB: 7,
    Symbol.S4_STELLAR_FRAG: 6,
    Symbol.S5_DARK_MATTER: 6,
    Symbol.S6_SINGULARITY: 4,
    Symbol.S7_NEUTRON: 3,
    Symbol.WILD: 2,
    Symbol.SCATTER: 1,
}
TOTAL_SYMBOL_WEIGHT = sum(SYMBOL_WEIGHTS.values())

PAYING_SYMBOLS = tuple(s for s in Symbol if s not in (Symbol.WILD, Symbol.SCATTER))

# --- Clusters & Pays ---
MIN_CLUSTER_SIZE = 5

# Lower bound (inclusive) of each pay tier: 5-7, 8-11, 12-15, 16+
PAY_TIER_BOUNDS = (5, 8, 12, 16)

# symbol -> pay tier -> bet multiplier
PAY_TABLE = {
    Symbol.S1_VOID_SHARD: (Decimal("0.5"), Decimal("1.0"), Decimal("3.0"), Decimal("10.0")),
    Symbol.S2_NEBULA_CORE: (Decimal("0.5"), Decimal("1.0"), Decimal("3.0"), Decimal("10.0")),
    Symbol.S3_PLASMA_ORB: (Decimal("0.8"), Decimal("2.0"), Decimal("5.0"), Decimal("25.0")),
    Symbol.S4_STELLAR_FRAG: (Decimal("1.0"), Decimal("3.0"), Decimal("8.0"), Decimal("50.0")),
    Symbol.S5_DARK_MATTER: (Decimal("1.0"), Decimal("3.0"), Decimal("8.0"), Decimal("50.0")),
    Symbol.S6_SINGULARITY: (Decimal("2.0"), Decimal("5.0"), Decimal("15.0"), Decimal("100.0")),
    Symbol.S7_NEUTRON: (Decimal("3.0"), Decimal("8.0"), Decimal("25.0"), Decimal("200.0")),
}

MAX_CASCADES = 50
GRAVITATIONAL_SURGE_SIZE = 12

# --- Singularity Meter ---
METER_MIN = 0
METER_MAX = 100
METER_THRESHOLDS = (25, 50, 75, 100)
METER_DECAY_AMOUNT = 5
# (min size, max size, charge); max of None means unbounded
METER_CHARGE_RATES = (
    (5, 7, 5),
    (8, 11, 10),
    (12, 15, 20),
    (16, None, 35),
)

# --- Multiplier Bubbles ---
BUBBLE_VALUES = (2, 3, 5, 10)
BUBBLE_BASE_LIFESPAN = 5
BUBBLE_ORBIT_STEP = 0.005

# --- Bonus (Event Horizon) ---
BONUS_MAX_SPINS = 20
BONUS_RETRIGGER_SCATTERS = 2
BONUS_RETRIGGER_SPINS = 3
BASE_TRIGGER_SCATTERS = 3
VOID_ABSORPTION_RATE = 0.15

BONUS_BUY = {
    'ANOMALY': {
        'name': 'Anomaly',
        'cost_multiplier': Decimal("50"),
        'meter_value': 50,
        'description': 'Start with the Singularity Meter at 50%',
    },
    'COLLAPSE': {
        'name': 'Collapse',
        'cost_multiplier': Decimal("100"),
        'meter_value': 75,
        'description': 'Start with the Singularity Meter at 75%',
    },
    'SINGULARITY': {
        'name': 'Singularity',
        'cost_multiplier': Decimal("200"),
        'meter_value': 100,
        'description': 'Enter the Event Horizon immediately',
    },
}

# --- Bets ---
BET_LEVELS = (
    Decimal("0.20"), Decimal("0.50"), Decimal("1.00"), Decimal("2.00"), Decimal("5.00"),
    Decimal("10.00"), Decimal("25.00"), Decimal("50.00"), Decimal("100.00"),
)
DEFAULT_BET_INDEX = 2  # 1.00

# --- Presentation timing (seconds) ---
ANIM = {
    'SPIN_SCATTER_OUT': 0.3,
    'SPIN_SNAP_BACK': 0.4,
    'WIN_GLOW': 0.3,
    'WIN_ABSORB': 0.5,
    'CASCADE_DRIFT': 0.5,
    'CASCADE_SPAWN': 0.3,
    'CASCADE_PAUSE': 0.15,
    'WIN_DISPLAY': 1.5,
    'NO_WIN_DISPLAY': 1.2,
}
