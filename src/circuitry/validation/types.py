"""Typed results for topology validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Tuple

from circuitry.elements import Point


ValidationSeverity = Literal["error", "warning", "info"]
CircuitStatus = Literal["complete", "incomplete", "invalid"]

ValidationIssueType = Literal[
    "open_circuit",
    "floating_component",
    "floating_node",
    "short_circuit",
    "missing_ground",
    "missing_power_source",
    "unconnected_terminal",
    "insufficient_components",
    "diode_reverse_bias",
    "led_reverse_bias",
    "capacitor_reverse_polarity",
    "unsupported_component",
]


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding, keyed to the elements a UI should highlight."""

    type: ValidationIssueType
    severity: ValidationSeverity
    message: str
    description: str
    affected_elements: Tuple[str, ...] = ()
    affected_positions: Tuple[Point, ...] = ()

    def to_json_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "severity": self.severity,
            "message": self.message,
            "description": self.description,
            "affected_elements": list(self.affected_elements),
            "affected_positions": [{"x": float(p.x), "z": float(p.z)} for p in self.affected_positions],
        }


@dataclass(frozen=True)
class ValidationStats:
    component_count: int = 0
    wire_count: int = 0
    ground_count: int = 0
    battery_count: int = 0
    node_count: int = 0
    connected_components: int = 0

    def to_json_dict(self) -> dict[str, int]:
        return {
            "component_count": self.component_count,
            "wire_count": self.wire_count,
            "ground_count": self.ground_count,
            "battery_count": self.battery_count,
            "node_count": self.node_count,
            "connected_components": self.connected_components,
        }


@dataclass
class ValidationResult:
    """Issues, aggregate stats and overall status of a layout."""

    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: ValidationStats = field(default_factory=ValidationStats)
    circuit_status: CircuitStatus = "incomplete"

    def by_severity(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.by_severity("error")

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.by_severity("warning")

    @property
    def infos(self) -> List[ValidationIssue]:
        return self.by_severity("info")

    def issues_of_type(self, issue_type: ValidationIssueType) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.type == issue_type]

    def to_json_dict(self) -> dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "issues": [issue.to_json_dict() for issue in self.issues],
            "stats": self.stats.to_json_dict(),
            "circuit_status": self.circuit_status,
        }
