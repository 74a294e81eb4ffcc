"""Reverse-polarity checks driven by solved node voltages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from circuitry.dc.types import DcSolution
from circuitry.elements import Element, TwoTerminalElement, element_label
from circuitry.validation.types import ValidationIssue, ValidationIssueType, ValidationSeverity
from circuitry.values import format_quantity


@dataclass(frozen=True)
class PolarityConfig:
    """Which terminal must sit at the higher potential, and what to report."""

    positive_terminal: str
    allows_reverse: bool
    issue_type: ValidationIssueType
    severity: ValidationSeverity
    title: str
    advice: str

    @property
    def negative_terminal(self) -> str:
        return "end" if self.positive_terminal == "start" else "start"


POLARITY_CONFIGS: Dict[str, PolarityConfig] = {
    "diode": PolarityConfig(
        positive_terminal="start",
        allows_reverse=False,
        issue_type="diode_reverse_bias",
        severity="warning",
        title="Diode Reverse Biased",
        advice="Flip the diode so its anode faces the higher potential.",
    ),
    "led": PolarityConfig(
        positive_terminal="start",
        allows_reverse=False,
        issue_type="led_reverse_bias",
        severity="warning",
        title="LED Reverse Biased",
        advice="Flip the LED so its anode faces the higher potential; it will not light as placed.",
    ),
    "capacitor": PolarityConfig(
        positive_terminal="end",
        allows_reverse=False,
        issue_type="capacitor_reverse_polarity",
        severity="error",
        title="Polarized Capacitor Reversed",
        advice="Reverse the capacitor; a reversed electrolytic capacitor can fail.",
    ),
}


def polarity_config_for(element: Element) -> Optional[PolarityConfig]:
    """Config for polarity-sensitive parts; batteries are never included."""
    if not isinstance(element, TwoTerminalElement):
        return None
    if element.kind == "capacitor" and not element.polarized:
        return None
    return POLARITY_CONFIGS.get(element.kind)


def detect_reverse_polarity(
    elements: Sequence[Element],
    solution: DcSolution,
    threshold: float,
) -> List[ValidationIssue]:
    """Report polarity-sensitive parts whose solved voltage is reversed."""
    issues: List[ValidationIssue] = []
    if not solution.is_solved:
        return issues

    for element in elements:
        config = polarity_config_for(element)
        if config is None or config.allows_reverse:
            continue
        v_pos = solution.voltage_at(element.id, config.positive_terminal)
        v_neg = solution.voltage_at(element.id, config.negative_terminal)
        if v_pos is None or v_neg is None:
            continue
        forward = v_pos - v_neg
        if forward >= threshold:
            continue
        label = element_label(element)
        issues.append(
            ValidationIssue(
                type=config.issue_type,
                severity=config.severity,
                message=f"{config.title}: {label}",
                description=(
                    f"{label} sees {format_quantity(forward, 'V')} from its "
                    f"{config.positive_terminal} to its {config.negative_terminal} terminal. {config.advice}"
                ),
                affected_elements=(element.id,),
                affected_positions=(element.start, element.end),
            )
        )
    return issues
