import logging
import random
from decimal import Decimal

import pytest
from pythonjsonlogger import jsonlogger

from void_break.app import configure_logging, create_session, handle_bonus_buy_request, handle_spin_request
from void_break.config import TestingConfig
from void_break.exceptions import ValidationException
from void_break.services.game_session import GameSession
from void_break.services.game_state_machine import GameState


class JsonTestingConfig(TestingConfig):
    JSON_LOGS = True
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def package_logger():
    logger = logging.getLogger('void_break')
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield logger
    logger.handlers[:] = saved[0]
    logger.propagate = saved[1]
    logger.setLevel(saved[2])


def test_json_logging(package_logger):
    logger = configure_logging(JsonTestingConfig)

    assert logger is package_logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert logger.propagate is False
    assert logger.level == logging.WARNING


def test_plain_logging(package_logger):
    logger = configure_logging(TestingConfig)

    assert logger.propagate is True
    assert logger.level == logging.DEBUG


def test_create_session(package_logger):
    session = create_session(TestingConfig, rng=random.Random(3))

    assert isinstance(session, GameSession)
    assert session.config is TestingConfig
    assert session.state is GameState.IDLE


def test_create_session_uses_configured_seed(package_logger):
    first = create_session(TestingConfig).play_spin()
    second = create_session(TestingConfig).play_spin()
    assert first.initial_grid == second.initial_grid


def test_spin_request_sets_bet_and_returns_dump():
    session = GameSession(config=TestingConfig, rng=random.Random(4))

    dumped = handle_spin_request(session, {"bet_amount": "2.00", "forced_outcome": "BIG_CLUSTER"})

    assert session.bet_amount == Decimal("2.00")
    assert dumped["bet_amount"] == "2.00"
    assert dumped["steps"][0]["clusters"][0]["size"] == 12
    assert session.state is GameState.RESOLVING


def test_spin_request_refused_while_resolving():
    session = GameSession(config=TestingConfig, rng=random.Random(4))
    handle_spin_request(session, {"bet_amount": "1.00"})

    assert handle_spin_request(session, {"bet_amount": "1.00"}) is None
    assert handle_spin_request(session, {"bet_amount": "5.00"}) is None
    assert session.bet_amount == Decimal("1.00")


@pytest.mark.parametrize("payload", [
    {"bet_amount": "3.00"},
    {"bet_amount": "1.00", "forced_outcome": "JACKPOT"},
    {},
    None,
])
def test_spin_request_validation_errors(payload):
    session = GameSession(config=TestingConfig, rng=random.Random(4))
    with pytest.raises(ValidationException) as exc_info:
        handle_spin_request(session, payload)
    assert exc_info.value.status_code == 422
    assert exc_info.value.details
    assert session.state is GameState.IDLE


def test_bonus_buy_request():
    session = GameSession(config=TestingConfig, rng=random.Random(4))

    bought = handle_bonus_buy_request(session, {"tier": "SINGULARITY"})

    assert bought["event_horizon"] is True
    assert session.state is GameState.EVENT_HORIZON
    with pytest.raises(ValidationException):
        handle_bonus_buy_request(session, {"tier": "GOLD"})
