"""
Configuration validation for the environment-driven game tunables.

Every VOID_BREAK_* override is parsed and range-checked up front. In
development an invalid override falls back to its default with a warning;
in production (VOID_BREAK_ENV=production) it is an error and validation
fails fast with ConfigValidationError.
"""

import logging
import os
import warnings
from typing import List, Optional, Tuple

from void_break.constants import (
    BASE_TRIGGER_SCATTERS, BET_LEVELS, BONUS_MAX_SPINS, BONUS_RETRIGGER_SCATTERS, BONUS_RETRIGGER_SPINS,
    BUBBLE_BASE_LIFESPAN, DEFAULT_BET_INDEX, MAX_CASCADES, VOID_ABSORPTION_RATE
)

logger = logging.getLogger(__name__)

TRUTHY = ('true', '1', 't', 'yes')
FALSY = ('false', '0', 'f', 'no')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigValidator:
    """Validates VOID_BREAK_* environment overrides."""

    def __init__(self, is_production: bool = None):
        """
        Args:
            is_production: If None, production is detected from VOID_BREAK_ENV.
        """
        if is_production is None:
            is_production = os.getenv('VOID_BREAK_ENV', 'development').lower() == 'production'

        self.is_production = is_production
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _reject(self, message: str):
        if self.is_production:
            self.errors.append(f"CRITICAL: {message}")
        else:
            self.warnings.append(f"WARNING: {message} - using default")

    def parse_int(self, var_name: str, default: int, minimum: int = None, maximum: int = None) -> int:
        raw = os.getenv(var_name)
        if raw is None or raw.strip() == '':
            return default
        try:
            value = int(raw)
        except ValueError:
            self._reject(f"{var_name} must be an integer, got '{raw}'")
            return default

        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            bounds = f"[{minimum if minimum is not None else '-inf'}, {maximum if maximum is not None else 'inf'}]"
            self._reject(f"{var_name}={value} is outside {bounds}")
            return default
        return value

    def parse_float(self, var_name: str, default: float, minimum: float, maximum: float) -> float:
        raw = os.getenv(var_name)
        if raw is None or raw.strip() == '':
            return default
        try:
            value = float(raw)
        except ValueError:
            self._reject(f"{var_name} must be a number, got '{raw}'")
            return default

        if not minimum <= value <= maximum:
            self._reject(f"{var_name}={value} is outside [{minimum}, {maximum}]")
            return default
        return value

    def parse_bool(self, var_name: str, default: bool) -> bool:
        raw = os.getenv(var_name)
        if raw is None or raw.strip() == '':
            return default
        lowered = raw.strip().lower()
        if lowered in TRUTHY:
            return True
        if lowered in FALSY:
            return False
        self._reject(f"{var_name} must be a boolean, got '{raw}'")
        return default

    def validate_logging_config(self) -> Tuple[str, bool]:
        level = os.getenv('VOID_BREAK_LOG_LEVEL', 'INFO').strip().upper()
        if level not in LOG_LEVELS:
            self._reject(f"VOID_BREAK_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{level}'")
            level = 'INFO'
        json_logs = self.parse_bool('VOID_BREAK_JSON_LOGS', True)
        return level, json_logs

    def validate_cascade_config(self) -> int:
        return self.parse_int('VOID_BREAK_MAX_CASCADES', MAX_CASCADES, minimum=1, maximum=1000)

    def validate_bonus_config(self) -> dict:
        """Validate free-spin counts, retrigger rules and the void absorption probability."""
        max_spins = self.parse_int('VOID_BREAK_BONUS_MAX_SPINS', BONUS_MAX_SPINS, minimum=1, maximum=500)
        retrigger_scatters = self.parse_int(
            'VOID_BREAK_RETRIGGER_SCATTERS', BONUS_RETRIGGER_SCATTERS, minimum=1, maximum=81)
        retrigger_spins = self.parse_int('VOID_BREAK_RETRIGGER_SPINS', BONUS_RETRIGGER_SPINS, minimum=0, maximum=500)
        base_trigger_scatters = self.parse_int(
            'VOID_BREAK_BASE_TRIGGER_SCATTERS', BASE_TRIGGER_SCATTERS, minimum=1, maximum=49)
        absorption_rate = self.parse_float(
            'VOID_BREAK_VOID_ABSORPTION_RATE', VOID_ABSORPTION_RATE, minimum=0.0, maximum=1.0)

        if retrigger_spins > max_spins:
            self.warnings.append(
                f"WARNING: VOID_BREAK_RETRIGGER_SPINS ({retrigger_spins}) exceeds VOID_BREAK_BONUS_MAX_SPINS "
                f"({max_spins}); retriggers are always capped"
            )

        return {
            'BONUS_MAX_SPINS': max_spins,
            'RETRIGGER_SCATTERS': retrigger_scatters,
            'RETRIGGER_SPINS': retrigger_spins,
            'BASE_TRIGGER_SCATTERS': base_trigger_scatters,
            'VOID_ABSORPTION_RATE': absorption_rate,
        }

    def validate_bubble_config(self) -> int:
        return self.parse_int('VOID_BREAK_BUBBLE_LIFESPAN', BUBBLE_BASE_LIFESPAN, minimum=1, maximum=100)

    def validate_bet_config(self) -> int:
        return self.parse_int('VOID_BREAK_DEFAULT_BET_INDEX', DEFAULT_BET_INDEX, minimum=0, maximum=len(BET_LEVELS) - 1)

    def validate_rng_config(self) -> Optional[int]:
        """A fixed seed makes every session replay the same outcomes; it is refused in production."""
        raw = os.getenv('VOID_BREAK_RNG_SEED')
        if raw is None or raw.strip() == '':
            return None
        try:
            seed = int(raw)
        except ValueError:
            self._reject(f"VOID_BREAK_RNG_SEED must be an integer, got '{raw}'")
            return None

        if self.is_production:
            self.errors.append("CRITICAL: VOID_BREAK_RNG_SEED must not be set in production")
            return None
        self.warnings.append(f"WARNING: VOID_BREAK_RNG_SEED={seed} set - outcomes are deterministic")
        return seed

    def validate_all(self) -> dict:
        """
        Validate all configuration settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If any value is invalid in production
        """
        config = {}
        config['LOG_LEVEL'], config['JSON_LOGS'] = self.validate_logging_config()
        config['MAX_CASCADES'] = self.validate_cascade_config()
        config.update(self.validate_bonus_config())
        config['BUBBLE_LIFESPAN'] = self.validate_bubble_config()
        config['DEFAULT_BET_INDEX'] = self.validate_bet_config()
        config['RNG_SEED'] = self.validate_rng_config()

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
            if self.warnings:
                error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
            raise ConfigValidationError(error_msg)

        for warning in self.warnings:
            warnings.warn(warning, UserWarning)

        return config


def validate_config() -> dict:
    """
    Validate the environment with fail-fast behavior.

    Raises:
        ConfigValidationError: If critical configuration is invalid
    """
    try:
        return ConfigValidator().validate_all()
    except ConfigValidationError as e:
        logger.critical(f"Configuration validation failed, refusing to start:\n{e}")
        raise
