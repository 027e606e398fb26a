from marshmallow import Schema, fields, ValidationError, validates
from marshmallow.validate import OneOf

from void_break.constants import BET_LEVELS, BONUS_BUY, Symbol
from void_break.services.game_state_machine import GameState
from void_break.utils.grid_generator import FORCED_OUTCOMES
from void_break.utils.grid_helpers import is_symbol


# --- Helpers ---
def serialize_cell(cell):
    """Symbols dump as their string value; EMPTY and VOID markers dump as None."""
    return cell.value if is_symbol(cell) else None


def serialize_grid(grid):
    return [[serialize_cell(cell) for cell in row] for row in grid]


def serialize_coords(coords):
    return [[row, col] for row, col in coords]


# --- Requests ---
class SpinRequestSchema(Schema):
    bet_amount = fields.Decimal(required=True, places=2)
    forced_outcome = fields.Str(load_default=None, allow_none=True, validate=OneOf(list(FORCED_OUTCOMES.keys())))

    @validates('bet_amount')
    def validate_bet_level(self, value, **kwargs):
        if value not in BET_LEVELS:
            raise ValidationError(
                f"Bet amount must be one of: {', '.join(str(level) for level in BET_LEVELS)}."
            )


class BonusBuyRequestSchema(Schema):
    tier = fields.Str(required=True, validate=OneOf(list(BONUS_BUY.keys())))


# --- Outcome snapshots ---
class ClusterSchema(Schema):
    symbol = fields.Enum(Symbol)
    cells = fields.Function(lambda cluster: serialize_coords(cluster.cells))
    size = fields.Int()
    has_wild = fields.Bool()


class SettleMoveSchema(Schema):
    source = fields.Function(lambda move: list(move.source))
    destination = fields.Function(lambda move: list(move.destination))
    symbol = fields.Enum(Symbol)


class SpawnedCellSchema(Schema):
    cell = fields.Function(lambda spawned: list(spawned.cell))
    symbol = fields.Enum(Symbol)


class CascadeStepSchema(Schema):
    clusters = fields.List(fields.Nested(ClusterSchema))
    removed_cells = fields.Function(lambda step: serialize_coords(step.removed_cells))
    settled_moves = fields.List(fields.Nested(SettleMoveSchema))
    spawned_cells = fields.List(fields.Nested(SpawnedCellSchema))
    grid_after = fields.Function(lambda step: serialize_grid(step.grid_after))


class ClusterWinSchema(Schema):
    symbol = fields.Enum(Symbol)
    size = fields.Int()
    tier = fields.Int()
    multiplier = fields.Decimal(as_string=True)


class StepDetailSchema(Schema):
    multiplier = fields.Decimal(as_string=True)
    bubble_multiplier = fields.Int()
    cluster_wins = fields.List(fields.Nested(ClusterWinSchema))
    win = fields.Decimal(as_string=True)


class BubbleSchema(Schema):
    id = fields.Int()
    value = fields.Int()
    row = fields.Int()
    col = fields.Int()
    spins_left = fields.Int(allow_none=True)  # None = sticky until consumed
    active = fields.Bool()


class SpinResultSchema(Schema):
    initial_grid = fields.Function(lambda result: serialize_grid(result.initial_grid))
    steps = fields.List(fields.Nested(CascadeStepSchema))
    total_win = fields.Decimal(as_string=True)
    win_multiplier = fields.Decimal(as_string=True)
    step_details = fields.List(fields.Nested(StepDetailSchema))
    bet_amount = fields.Decimal(as_string=True)
    is_bonus = fields.Bool()
    scatter_count = fields.Int()
    converted_cells = fields.Function(lambda result: serialize_coords(result.converted_cells))
    activated_bubbles = fields.List(fields.Nested(BubbleSchema))
    event_horizon_triggered = fields.Bool()
    retrigger_spins = fields.Int()
    meter_value = fields.Int()
    bonus_spins_remaining = fields.Int()


class SessionSnapshotSchema(Schema):
    state = fields.Enum(GameState)
    bet_amount = fields.Decimal(as_string=True)
    meter = fields.Int()
    meter_level = fields.Int()
    bubbles = fields.List(fields.Dict())
    bonus_active = fields.Bool()
    bonus_spins_remaining = fields.Int()
    bonus_total_win = fields.Decimal(as_string=True)
