"""Translate placed elements into resistive branches and voltage sources."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Literal, Optional, Sequence, Tuple

from circuitry.config import SolverOptions
from circuitry.elements import (
    Element,
    GroundElement,
    ThreeTerminalElement,
    TwoTerminalElement,
    WireElement,
)
from circuitry.graph.nodes import NodeMap
from circuitry.values import resolve_resistance, resolve_voltage


logger = logging.getLogger(__name__)

BranchRole = Literal["load", "diode_series"]
SourceOrigin = Literal["battery", "wire_segment", "inductor_short", "diode_drop"]


@dataclass(frozen=True)
class ResistorBranch:
    """Resistance between node ``a`` (element start) and node ``b``."""

    a: int
    b: int
    ohms: float
    element_id: str
    role: BranchRole = "load"

    def __post_init__(self) -> None:
        if self.ohms <= 0.0:
            raise ValueError("Branch resistance must be positive.")


@dataclass(frozen=True)
class VoltageSource:
    """Ideal source holding ``V(positive) - V(negative) == volts``."""

    positive: int
    negative: int
    volts: float
    origin: SourceOrigin
    element_id: str
    segment_index: Optional[int] = None


@dataclass
class Netlist:
    """Primitives over merged nodes plus internal (junction) nodes."""

    external_node_count: int
    node_count: int
    resistors: List[ResistorBranch] = field(default_factory=list)
    sources: List[VoltageSource] = field(default_factory=list)
    skipped_elements: Tuple[str, ...] = ()

    def add_internal_node(self) -> int:
        index = self.node_count
        self.node_count += 1
        return index

    @property
    def has_battery(self) -> bool:
        return any(source.origin == "battery" for source in self.sources)


def _endpoints(element: TwoTerminalElement, nodes: NodeMap) -> Optional[Tuple[int, int]]:
    a = nodes.node_of(element.id, "start")
    b = nodes.node_of(element.id, "end")
    if a is None or b is None or a == b:
        return None
    return a, b


def build_netlist(elements: Sequence[Element], nodes: NodeMap, options: SolverOptions) -> Netlist:
    """Map each element to zero or more netlist primitives.

    Capacitors and switches are open at DC and emit nothing. Degenerate
    placements (both terminals on one node) emit nothing either.
    """
    netlist = Netlist(external_node_count=nodes.node_count, node_count=nodes.node_count)
    skipped: List[str] = []

    for element in elements:
        if isinstance(element, WireElement):
            _add_wire(netlist, element, nodes)
            continue
        if isinstance(element, GroundElement):
            continue
        if isinstance(element, ThreeTerminalElement):
            skipped.append(element.id)
            continue

        kind = element.kind
        if kind not in ("resistor", "lamp", "battery", "inductor", "diode", "led"):
            continue
        ends = _endpoints(element, nodes)
        if ends is None:
            logger.debug("Element %s has coincident terminals; no primitive emitted", element.id)
            continue
        start, end = ends

        if kind in ("resistor", "lamp"):
            default = options.default_lamp_ohms if kind == "lamp" else options.default_resistor_ohms
            ohms = resolve_resistance(element.label, default)
            netlist.resistors.append(ResistorBranch(start, end, ohms, element.id))
        elif kind == "battery":
            volts = resolve_voltage(element.label, options.default_battery_volts)
            netlist.sources.append(VoltageSource(end, start, volts, "battery", element.id))
        elif kind == "inductor":
            netlist.sources.append(VoltageSource(start, end, 0.0, "inductor_short", element.id))
        else:
            _add_diode(netlist, element, start, end, options)

    netlist.skipped_elements = tuple(skipped)
    if skipped:
        logger.info("Three-terminal elements are not solved: %s", ", ".join(skipped))
    return netlist


def _add_wire(netlist: Netlist, wire: WireElement, nodes: NodeMap) -> None:
    for idx in range(len(wire.path) - 1):
        a = nodes.node_of(wire.id, f"p{idx}")
        b = nodes.node_of(wire.id, f"p{idx + 1}")
        if a is None or b is None or a == b:
            continue
        netlist.sources.append(VoltageSource(a, b, 0.0, "wire_segment", wire.id, segment_index=idx))


def _add_diode(
    netlist: Netlist,
    element: TwoTerminalElement,
    anode: int,
    cathode: int,
    options: SolverOptions,
) -> None:
    # Always forward biased here; reverse bias is reported by the validator.
    if element.kind == "led":
        forward_volts, series_ohms = options.led_forward_volts, options.led_series_ohms
    else:
        forward_volts, series_ohms = options.diode_forward_volts, options.diode_series_ohms
    junction = netlist.add_internal_node()
    netlist.sources.append(VoltageSource(anode, junction, forward_volts, "diode_drop", element.id))
    netlist.resistors.append(ResistorBranch(junction, cathode, series_ohms, element.id, role="diode_series"))
