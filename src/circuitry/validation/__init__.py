"""Topology validation and polarity checks."""

from circuitry.validation.polarity import POLARITY_CONFIGS, PolarityConfig, detect_reverse_polarity
from circuitry.validation.summary import get_validation_summary, severity_icon, severity_label
from circuitry.validation.types import ValidationIssue, ValidationResult, ValidationStats
from circuitry.validation.validator import build_connection_graph, validate_circuit

__all__ = [
    "POLARITY_CONFIGS",
    "PolarityConfig",
    "ValidationIssue",
    "ValidationResult",
    "ValidationStats",
    "build_connection_graph",
    "detect_reverse_polarity",
    "get_validation_summary",
    "severity_icon",
    "severity_label",
    "validate_circuit",
]
