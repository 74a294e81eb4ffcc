"""Typed results for DC solving."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from circuitry.elements import Point


DcSolveStatus = Literal["solved", "unsolved", "no_reference", "singular", "invalid_ideal_short"]

CurrentDirection = Literal[
    "start->end",
    "end->start",
    "path-forward",
    "path-backward",
    "unknown",
]


@dataclass(frozen=True)
class ElementCurrent:
    """Signed current through an element; positive flows ``start -> end``."""

    element_id: str
    amps: float
    direction: CurrentDirection

    def to_json_dict(self) -> dict[str, object]:
        return {"element_id": self.element_id, "amps": float(self.amps), "direction": self.direction}


@dataclass(frozen=True)
class WireSegmentCurrent:
    """Current in one wire segment; positive flows ``path[i] -> path[i+1]``."""

    wire_id: str
    segment_index: int
    amps: float

    @property
    def direction(self) -> CurrentDirection:
        if self.amps > 0.0:
            return "path-forward"
        if self.amps < 0.0:
            return "path-backward"
        return "unknown"

    def to_json_dict(self) -> dict[str, object]:
        return {
            "wire_id": self.wire_id,
            "segment_index": int(self.segment_index),
            "amps": float(self.amps),
            "direction": self.direction,
        }


@dataclass
class DcSolution:
    """Outcome of one DC solve; rebuilt from scratch on every call."""

    status: DcSolveStatus
    reason: Optional[str] = None
    node_voltages: Dict[str, float] = field(default_factory=dict)
    element_currents: Dict[str, ElementCurrent] = field(default_factory=dict)
    wire_segment_currents: List[WireSegmentCurrent] = field(default_factory=list)
    reference_node_id: Optional[str] = None
    terminal_to_node: Dict[str, str] = field(default_factory=dict)
    node_positions: Dict[str, Point] = field(default_factory=dict)
    skipped_elements: Tuple[str, ...] = ()

    @property
    def is_solved(self) -> bool:
        return self.status == "solved"

    def max_current_amps(self) -> float:
        """Largest element current magnitude, 0.0 when there is none."""
        return max((abs(current.amps) for current in self.element_currents.values()), default=0.0)

    def node_for(self, element_id: str, terminal_key: str) -> Optional[str]:
        return self.terminal_to_node.get(f"{element_id}:{terminal_key}")

    def voltage_at(self, element_id: str, terminal_key: str) -> Optional[float]:
        node = self.node_for(element_id, terminal_key)
        if node is None:
            return None
        return self.node_voltages.get(node)

    def segment_current(self, wire_id: str, segment_index: int) -> Optional[WireSegmentCurrent]:
        for current in self.wire_segment_currents:
            if current.wire_id == wire_id and current.segment_index == segment_index:
                return current
        return None

    def to_json_dict(self) -> dict[str, object]:
        return {
            "status": self.status,
            "reason": self.reason,
            "node_voltages": {key: float(val) for key, val in self.node_voltages.items()},
            "element_currents": {key: val.to_json_dict() for key, val in self.element_currents.items()},
            "wire_segment_currents": [item.to_json_dict() for item in self.wire_segment_currents],
            "reference_node_id": self.reference_node_id,
            "terminal_to_node": dict(self.terminal_to_node),
            "node_positions": {
                key: {"x": float(point.x), "z": float(point.z)} for key, point in self.node_positions.items()
            },
            "skipped_elements": list(self.skipped_elements),
        }
