import os

import pytest

from void_break.config_validator import ConfigValidationError, ConfigValidator, validate_config
from void_break.constants import BONUS_MAX_SPINS, MAX_CASCADES, VOID_ABSORPTION_RATE


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith('VOID_BREAK_'):
            monkeypatch.delenv(name)
    return monkeypatch


def test_defaults_without_overrides():
    config = ConfigValidator(is_production=False).validate_all()

    assert config['LOG_LEVEL'] == 'INFO'
    assert config['JSON_LOGS'] is True
    assert config['MAX_CASCADES'] == MAX_CASCADES
    assert config['BONUS_MAX_SPINS'] == BONUS_MAX_SPINS
    assert config['VOID_ABSORPTION_RATE'] == VOID_ABSORPTION_RATE
    assert config['RNG_SEED'] is None


def test_valid_overrides(clean_env):
    clean_env.setenv('VOID_BREAK_LOG_LEVEL', 'debug')
    clean_env.setenv('VOID_BREAK_JSON_LOGS', 'no')
    clean_env.setenv('VOID_BREAK_MAX_CASCADES', '10')
    clean_env.setenv('VOID_BREAK_VOID_ABSORPTION_RATE', '0.5')
    clean_env.setenv('VOID_BREAK_DEFAULT_BET_INDEX', '0')

    config = ConfigValidator(is_production=False).validate_all()

    assert config['LOG_LEVEL'] == 'DEBUG'
    assert config['JSON_LOGS'] is False
    assert config['MAX_CASCADES'] == 10
    assert config['VOID_ABSORPTION_RATE'] == 0.5
    assert config['DEFAULT_BET_INDEX'] == 0


@pytest.mark.parametrize("name, raw", [
    ('VOID_BREAK_MAX_CASCADES', 'lots'),
    ('VOID_BREAK_MAX_CASCADES', '0'),
    ('VOID_BREAK_VOID_ABSORPTION_RATE', '1.5'),
    ('VOID_BREAK_JSON_LOGS', 'maybe'),
    ('VOID_BREAK_LOG_LEVEL', 'LOUD'),
    ('VOID_BREAK_DEFAULT_BET_INDEX', '42'),
])
def test_invalid_override_warns_in_development(clean_env, name, raw):
    clean_env.setenv(name, raw)
    validator = ConfigValidator(is_production=False)

    with pytest.warns(UserWarning, match=name):
        config = validator.validate_all()

    defaults = ConfigValidator(is_production=False)
    clean_env.delenv(name)
    with_defaults = defaults.validate_all()
    assert config == with_defaults


@pytest.mark.parametrize("name, raw", [
    ('VOID_BREAK_MAX_CASCADES', 'lots'),
    ('VOID_BREAK_BUBBLE_LIFESPAN', '0'),
    ('VOID_BREAK_RETRIGGER_SCATTERS', '-1'),
])
def test_invalid_override_fails_in_production(clean_env, name, raw):
    clean_env.setenv(name, raw)

    with pytest.raises(ConfigValidationError, match=name):
        ConfigValidator(is_production=True).validate_all()


def test_rng_seed_is_a_development_only_setting(clean_env):
    clean_env.setenv('VOID_BREAK_RNG_SEED', '99')

    with pytest.warns(UserWarning, match='deterministic'):
        config = ConfigValidator(is_production=False).validate_all()
    assert config['RNG_SEED'] == 99

    with pytest.raises(ConfigValidationError, match='VOID_BREAK_RNG_SEED'):
        ConfigValidator(is_production=True).validate_all()


def test_retrigger_spins_above_cap_only_warns(clean_env):
    clean_env.setenv('VOID_BREAK_BONUS_MAX_SPINS', '5')
    clean_env.setenv('VOID_BREAK_RETRIGGER_SPINS', '10')

    with pytest.warns(UserWarning, match='capped'):
        config = ConfigValidator(is_production=True).validate_all()
    assert config['RETRIGGER_SPINS'] == 10


def test_production_detected_from_environment(clean_env):
    clean_env.setenv('VOID_BREAK_ENV', 'Production')
    assert ConfigValidator().is_production is True

    clean_env.setenv('VOID_BREAK_ENV', 'development')
    assert ConfigValidator().is_production is False


def test_validate_config_logs_and_reraises(clean_env, caplog):
    clean_env.setenv('VOID_BREAK_ENV', 'production')
    clean_env.setenv('VOID_BREAK_MAX_CASCADES', 'lots')

    with pytest.raises(ConfigValidationError):
        validate_config()
    assert 'refusing to start' in caplog.text
