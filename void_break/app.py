import logging

from marshmallow import ValidationError
from pythonjsonlogger import jsonlogger

from void_break.config import Config
from void_break.constants import BET_LEVELS
from void_break.exceptions import ValidationException
from void_break.schemas import BonusBuyRequestSchema, SpinRequestSchema, SpinResultSchema
from void_break.services.game_session import GameSession


def configure_logging(config_class=Config):
    """Configures the package logger: JSON lines to stderr, or plain basicConfig output."""
    logger = logging.getLogger('void_break')
    level = getattr(logging, config_class.LOG_LEVEL, logging.INFO)

    if config_class.JSON_LOGS:
        handler = logging.StreamHandler()
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(lineno)d %(message)s'
        )
        handler.setFormatter(formatter)
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
    else:
        # Basic logging if not already configured by the host application
        if not logging.getLogger().handlers:
            logging.basicConfig(level=level)
        logger.propagate = True

    logger.setLevel(level)
    return logger


def create_session(config_class=Config, rng=None):
    """Session factory: configures logging and wires a GameSession from `config_class`."""
    logger = configure_logging(config_class)
    session = GameSession(config=config_class, rng=rng)
    logger.info(
        f"Game session created (bet {session.bet_amount}, max cascades {config_class.MAX_CASCADES}, "
        f"seeded={config_class.RNG_SEED is not None})"
    )
    return session


def _load_request(schema, payload):
    try:
        return schema.load(payload or {})
    except ValidationError as e:
        raise ValidationException(status_message="Input validation failed.", details=e.messages)


def handle_spin_request(session, payload):
    """
    Validates a spin request and plays it on `session`.

    The request's bet becomes the session bet before spinning. Returns the
    SpinResultSchema dump, or None when the session cannot take a spin (or a
    bet change) in its current state.

    Raises:
        ValidationException: If the payload fails SpinRequestSchema.
    """
    data = _load_request(SpinRequestSchema(), payload)
    bet_index = BET_LEVELS.index(data['bet_amount'])
    if bet_index != session.bet_index and not session.set_bet_index(bet_index):
        return None
    result = session.spin(data['forced_outcome'])
    if result is None:
        return None
    return SpinResultSchema().dump(result)


def handle_bonus_buy_request(session, payload):
    """Validates a bonus-buy request and applies it; None when the session is not idle in the base game."""
    data = _load_request(BonusBuyRequestSchema(), payload)
    return session.buy_bonus(data['tier'])
