"""Human-readable summaries of validation results."""

from __future__ import annotations

from circuitry.validation.types import ValidationResult, ValidationSeverity


_SEVERITY_LABELS = {"error": "Error", "warning": "Warning", "info": "Info"}
_SEVERITY_ICONS = {"error": "✕", "warning": "⚠", "info": "ℹ"}


def severity_label(severity: ValidationSeverity) -> str:
    return _SEVERITY_LABELS[severity]


def severity_icon(severity: ValidationSeverity) -> str:
    return _SEVERITY_ICONS[severity]


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def get_validation_summary(result: ValidationResult) -> str:
    """One-line status text, e.g. ``"1 error, 2 warnings"``."""
    stats = result.stats
    if stats.component_count == 0 and stats.wire_count == 0:
        return "Empty circuit - place components to begin"
    if result.circuit_status == "complete":
        return "Circuit is complete and ready for simulation"

    parts = []
    for severity, noun in (("error", "error"), ("warning", "warning"), ("info", "suggestion")):
        count = len(result.by_severity(severity))
        if count:
            parts.append(_plural(count, noun))
    if not parts:
        return "Circuit incomplete - continue building"
    return ", ".join(parts)
