"""
Singularity Meter
Tension meter charged by winning clusters and drained by dead spins.
"""

import logging

from void_break.constants import (
    METER_CHARGE_RATES, METER_DECAY_AMOUNT, METER_MAX, METER_MIN, METER_THRESHOLDS
)
from void_break.utils.observers import ObserverRegistry

logger = logging.getLogger(__name__)


def charge_for_cluster_size(cluster_size):
    """Charge amount for one cluster of the given size; 0 below the minimum cluster size."""
    for lower, upper, charge in METER_CHARGE_RATES:
        if cluster_size >= lower and (upper is None or cluster_size <= upper):
            return charge
    return 0


class SingularityMeter:
    """
    Tracks a charge level between 0 and 100.

    Thresholds latch when the meter rises to them: listeners are called as
    callback(threshold, value) once, in ascending order, and not again until
    the meter falls back onto or below that threshold. Falling (decay or a
    lower set) only re-derives the latch, it never notifies.
    """

    def __init__(self):
        self.value = METER_MIN
        self._threshold_index = 0  # number of latched thresholds, lowest first
        self._listeners = ObserverRegistry()

    @property
    def percent(self):
        return self.value / METER_MAX

    @property
    def level(self):
        level = 0
        for position, threshold in enumerate(METER_THRESHOLDS, start=1):
            if self.value >= threshold:
                level = position
        return level

    def on_threshold(self, callback) -> int:
        return self._listeners.subscribe(callback)

    def remove_listener(self, handle) -> bool:
        return self._listeners.unsubscribe(handle)

    def charge_from_cluster(self, cluster_size):
        """
        Charges the meter for a single cluster.

        Returns:
            dict: {"charged": int, "crossed_thresholds": list[int]}
        """
        charge = charge_for_cluster_size(cluster_size)
        old_value = self.value
        self.value = self._clamp(self.value + charge)
        crossed = self._check_thresholds(old_value, self.value)
        return {"charged": charge, "crossed_thresholds": crossed}

    def charge_from_clusters(self, clusters):
        return [self.charge_from_cluster(cluster.size) for cluster in clusters]

    def decay(self):
        """Drains the meter after a dead spin. Returns the amount actually removed."""
        old_value = self.value
        self.value = self._clamp(self.value - METER_DECAY_AMOUNT)
        self._relatch()
        return old_value - self.value

    def set(self, value):
        """Sets the meter directly (debug and bonus buy). Returns the thresholds crossed upward."""
        old_value = self.value
        self.value = self._clamp(value)
        if self.value < old_value:
            self._relatch()
            return []
        return self._check_thresholds(old_value, self.value)

    def reset(self):
        self.value = METER_MIN
        self._threshold_index = 0

    @staticmethod
    def _clamp(value):
        return max(METER_MIN, min(METER_MAX, value))

    def _relatch(self):
        # A threshold the meter sits exactly on is unlatched, so rising off it fires again.
        self._threshold_index = sum(1 for threshold in METER_THRESHOLDS if threshold < self.value)

    def _check_thresholds(self, old_value, new_value):
        if new_value <= old_value:
            return []
        crossed = []
        for position, threshold in enumerate(METER_THRESHOLDS, start=1):
            if threshold <= new_value and position > self._threshold_index:
                crossed.append(threshold)
                self._threshold_index = position
                logger.info(f"Singularity meter crossed {threshold} (value {new_value})")
                self._listeners.notify(threshold, new_value)
        return crossed
