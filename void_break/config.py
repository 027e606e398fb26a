"""
Game configuration.

Tunables come from VOID_BREAK_* environment variables (a .env file is loaded
first) and are validated once at import time.
"""
from dotenv import load_dotenv

from void_break.config_validator import validate_config

load_dotenv()


class Config:
    """Validated runtime configuration."""

    _validated_config = validate_config()

    # Logging
    LOG_LEVEL = _validated_config['LOG_LEVEL']
    JSON_LOGS = _validated_config['JSON_LOGS']

    # Cascades - fail-safe cap on steps per spin
    MAX_CASCADES = _validated_config['MAX_CASCADES']

    # Event Horizon bonus
    BONUS_MAX_SPINS = _validated_config['BONUS_MAX_SPINS']
    RETRIGGER_SCATTERS = _validated_config['RETRIGGER_SCATTERS']
    RETRIGGER_SPINS = _validated_config['RETRIGGER_SPINS']
    BASE_TRIGGER_SCATTERS = _validated_config['BASE_TRIGGER_SCATTERS']
    VOID_ABSORPTION_RATE = _validated_config['VOID_ABSORPTION_RATE']

    # Multiplier bubbles
    BUBBLE_LIFESPAN = _validated_config['BUBBLE_LIFESPAN']

    # Bets
    DEFAULT_BET_INDEX = _validated_config['DEFAULT_BET_INDEX']

    # None -> secrets.SystemRandom
    RNG_SEED = _validated_config['RNG_SEED']

    TESTING = False


class TestingConfig(Config):
    TESTING = True
    JSON_LOGS = False
    LOG_LEVEL = 'DEBUG'
    RNG_SEED = 1234
