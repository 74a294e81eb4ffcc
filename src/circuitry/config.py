"""Option objects shared by the solver, validator and flow gate."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Optional

TOLERANCE_ENV = "CIRCUITRY_TOLERANCE"
DEFAULT_TOLERANCE = 0.6
DEFAULT_PIVOT_EPSILON = 1e-12
DEFAULT_REVERSE_BIAS_THRESHOLD = -0.01
DEFAULT_MIN_CURRENT_AMPS = 1e-6
CLASSROOM_LOAD_COUNT = 3


def get_default_tolerance() -> float:
    """Return the node-merge tolerance, honoring the environment override."""
    raw = os.environ.get(TOLERANCE_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_TOLERANCE
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{TOLERANCE_ENV} must be a number, got {raw!r}.") from exc
    _check_tolerance(value)
    return value


def _check_tolerance(value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError("tolerance must be positive and finite.")


@dataclass(frozen=True)
class SolverOptions:
    """Configuration for DC solving."""

    tolerance: float = field(default_factory=get_default_tolerance)
    pivot_epsilon: float = DEFAULT_PIVOT_EPSILON
    default_resistor_ohms: float = 100.0
    default_lamp_ohms: float = 10.0
    default_battery_volts: float = 9.0
    diode_forward_volts: float = 0.7
    diode_series_ohms: float = 10.0
    led_forward_volts: float = 2.0
    led_series_ohms: float = 50.0

    def __post_init__(self) -> None:
        _check_tolerance(self.tolerance)
        if self.pivot_epsilon <= 0.0:
            raise ValueError("pivot_epsilon must be positive.")
        for name in (
            "default_resistor_ohms",
            "default_lamp_ohms",
            "diode_series_ohms",
            "led_series_ohms",
        ):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive.")
        if self.diode_forward_volts < 0.0 or self.led_forward_volts < 0.0:
            raise ValueError("forward voltages must be non-negative.")


@dataclass(frozen=True)
class ValidatorOptions:
    """Configuration for topology validation."""

    connection_tolerance: float = field(default_factory=get_default_tolerance)
    reverse_bias_threshold: float = DEFAULT_REVERSE_BIAS_THRESHOLD
    required_load_count: Optional[int] = None
    check_polarity: bool = True

    def __post_init__(self) -> None:
        _check_tolerance(self.connection_tolerance)
        if self.reverse_bias_threshold > 0.0:
            raise ValueError("reverse_bias_threshold must be <= 0.")
        if self.required_load_count is not None and self.required_load_count < 0:
            raise ValueError("required_load_count must be non-negative.")

    @classmethod
    def classroom(cls) -> "ValidatorOptions":
        """Options for the four-sided practice layout (three loads plus a battery)."""
        return cls(required_load_count=CLASSROOM_LOAD_COUNT)


@dataclass(frozen=True)
class FlowGateOptions:
    """Configuration for the current-flow animation gate."""

    min_current_amps: float = DEFAULT_MIN_CURRENT_AMPS
    solver: SolverOptions = field(default_factory=SolverOptions)
    validator: ValidatorOptions = field(default_factory=ValidatorOptions)

    def __post_init__(self) -> None:
        if self.min_current_amps < 0.0:
            raise ValueError("min_current_amps must be non-negative.")
