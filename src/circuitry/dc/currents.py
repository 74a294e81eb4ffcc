"""Per-element and per-segment current recovery."""

from __future__ import annotations

from typing import Dict, List, Sequence

from circuitry.dc.mna import SubnetworkSolution
from circuitry.dc.netlist import Netlist
from circuitry.dc.partition import Subnetwork
from circuitry.dc.types import CurrentDirection, ElementCurrent, WireSegmentCurrent
from circuitry.elements import Element, TwoTerminalElement


def _direction(amps: float) -> CurrentDirection:
    return "start->end" if amps >= 0.0 else "end->start"


def recover_currents(
    subnetwork: Subnetwork,
    netlist: Netlist,
    solution: SubnetworkSolution,
    element_currents: Dict[str, ElementCurrent],
    wire_segment_currents: List[WireSegmentCurrent],
) -> None:
    """Fill current records for one solved subnetwork.

    Sign convention: positive current flows from the element's ``start``
    terminal to its ``end`` terminal. A battery's source current is flipped so
    that positive means current leaving its positive (``end``) terminal.
    """
    voltages = solution.voltages

    for ridx in subnetwork.resistor_indices:
        resistor = netlist.resistors[ridx]
        if resistor.role != "load":
            continue
        amps = (voltages.get(resistor.a, 0.0) - voltages.get(resistor.b, 0.0)) / resistor.ohms
        element_currents[resistor.element_id] = ElementCurrent(resistor.element_id, amps, _direction(amps))

    for sidx in subnetwork.source_indices:
        source = netlist.sources[sidx]
        amps = solution.source_currents.get(sidx, 0.0)
        if source.origin == "wire_segment":
            wire_segment_currents.append(WireSegmentCurrent(source.element_id, int(source.segment_index or 0), amps))
            continue
        if source.origin == "battery":
            amps = 0.0 - amps
        element_currents[source.element_id] = ElementCurrent(source.element_id, amps, _direction(amps))


def zero_unpowered(
    subnetwork: Subnetwork,
    netlist: Netlist,
    element_currents: Dict[str, ElementCurrent],
    wire_segment_currents: List[WireSegmentCurrent],
) -> None:
    """Record 0 A across a subnetwork that no battery drives.

    Diode drops are sources too, but they only oppose current and never drive it.
    """
    for ridx in subnetwork.resistor_indices:
        resistor = netlist.resistors[ridx]
        if resistor.role == "load":
            element_currents[resistor.element_id] = ElementCurrent(resistor.element_id, 0.0, "unknown")
    for sidx in subnetwork.source_indices:
        source = netlist.sources[sidx]
        if source.origin == "wire_segment":
            wire_segment_currents.append(WireSegmentCurrent(source.element_id, int(source.segment_index or 0), 0.0))


def fill_missing(elements: Sequence[Element], element_currents: Dict[str, ElementCurrent]) -> None:
    """Give every two-terminal element a record, in element order."""
    ordered: Dict[str, ElementCurrent] = {}
    for element in elements:
        if not isinstance(element, TwoTerminalElement):
            continue
        ordered[element.id] = element_currents.get(element.id) or ElementCurrent(element.id, 0.0, "unknown")
    element_currents.clear()
    element_currents.update(ordered)
