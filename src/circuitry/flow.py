"""Decide whether a layout should show animated current flow."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence

from circuitry.config import FlowGateOptions
from circuitry.dc.solver import solve_dc_circuit
from circuitry.elements import Element
from circuitry.validation.validator import validate_circuit
from circuitry.values import format_quantity


logger = logging.getLogger(__name__)

INCOMPLETE_REASON = "Circuit is incomplete"
ENABLED_REASON = "Circuit is complete with measurable current."


@dataclass(frozen=True)
class FlowGateResult:
    should_animate: bool
    reason: str
    current_amps: float = 0.0

    def to_json_dict(self) -> dict[str, object]:
        return {
            "should_animate": self.should_animate,
            "reason": self.reason,
            "current_amps": float(self.current_amps),
        }


def _blocked(reason: str, current_amps: float = 0.0) -> FlowGateResult:
    logger.debug("Current flow blocked: %s", reason)
    return FlowGateResult(should_animate=False, reason=reason, current_amps=current_amps)


def should_enable_current_flow(
    elements: Sequence[Element],
    options: Optional[FlowGateOptions] = None,
) -> FlowGateResult:
    """Enable animation only for a valid, complete, solved circuit carrying current."""
    options = options or FlowGateOptions()
    solution = solve_dc_circuit(elements, options=options.solver)
    validation = validate_circuit(elements, options=options.validator, solution=solution)

    errors = validation.errors
    if errors:
        return _blocked(f"{errors[0].message}: {errors[0].description}")

    if validation.circuit_status != "complete":
        warnings = validation.warnings
        if warnings:
            return _blocked(f"{warnings[0].message}: {warnings[0].description}")
        return _blocked(INCOMPLETE_REASON)

    if not solution.is_solved:
        return _blocked(solution.reason or f"DC solve status: {solution.status}")

    current = solution.max_current_amps()
    if current <= options.min_current_amps:
        return _blocked(
            f"Current {format_quantity(current, 'A')} is below the "
            f"{format_quantity(options.min_current_amps, 'A')} display threshold.",
            current_amps=current,
        )
    return FlowGateResult(should_animate=True, reason=ENABLED_REASON, current_amps=current)
