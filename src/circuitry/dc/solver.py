"""DC steady-state solve over freehand element layouts."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components

from circuitry.config import SolverOptions
from circuitry.dc.currents import fill_missing, recover_currents, zero_unpowered
from circuitry.dc.mna import choose_reference, solve_subnetwork
from circuitry.dc.netlist import Netlist, build_netlist
from circuitry.dc.partition import partition_netlist
from circuitry.dc.types import DcSolution, DcSolveStatus, ElementCurrent, WireSegmentCurrent
from circuitry.elements import Element, GroundElement, TwoTerminalElement, check_unique_ids
from circuitry.errors import SingularCircuitError
from circuitry.graph.nodes import NodeMap, build_node_map


logger = logging.getLogger(__name__)

NO_TERMINALS_REASON = "No terminals found to establish a reference node."
NO_BATTERY_REASON = "No battery drives the circuit."
IDEAL_SHORT_REASON = "Battery terminals are connected by an ideal short (0 Ω path)."
SINGULAR_REASON = "Circuit matrix is singular (often caused by ideal-only loops)."


def solve_dc_circuit(
    elements: Sequence[Element],
    tolerance: Optional[float] = None,
    options: Optional[SolverOptions] = None,
) -> DcSolution:
    """Solve node voltages and branch currents of a placed circuit.

    Open or floating parts solve to 0 A. Positive element current flows from
    ``start`` to ``end``; wire segment current is positive along the path.
    Expected failures come back as a status, never as an exception.
    """
    options = options or SolverOptions()
    if tolerance is not None:
        options = replace(options, tolerance=tolerance)
    check_unique_ids(elements)

    nodes = build_node_map(elements, options.tolerance)
    if nodes.node_count == 0:
        return DcSolution(status="no_reference", reason=NO_TERMINALS_REASON)

    netlist = build_netlist(elements, nodes, options)
    ground_nodes = _ground_nodes(elements, nodes)
    battery_negatives = _battery_negative_nodes(elements, nodes)
    reference = (ground_nodes + battery_negatives + [0])[0]

    shorted = _batteries_across_ideal_short(elements, nodes, netlist)
    if shorted:
        logger.info("Ideal short across battery %s", ", ".join(shorted))
        return _failed(nodes, netlist, "invalid_ideal_short", IDEAL_SHORT_REASON, reference)

    node_voltages = np.zeros(netlist.node_count, dtype=float)
    element_currents: Dict[str, ElementCurrent] = {}
    wire_segment_currents: List[WireSegmentCurrent] = []

    if not netlist.has_battery:
        fill_missing(elements, element_currents)
        return DcSolution(
            status="unsolved",
            reason=NO_BATTERY_REASON,
            node_voltages=_external_voltages(nodes, node_voltages),
            element_currents=element_currents,
            reference_node_id=nodes.node_label(reference),
            terminal_to_node=nodes.labelled_terminals(),
            node_positions=nodes.labelled_positions(),
            skipped_elements=netlist.skipped_elements,
        )

    for subnetwork in partition_netlist(netlist):
        if not subnetwork.has_battery:
            zero_unpowered(subnetwork, netlist, element_currents, wire_segment_currents)
            continue
        local_reference = choose_reference(subnetwork, ground_nodes, battery_negatives)
        try:
            solved = solve_subnetwork(subnetwork, netlist, local_reference, options.pivot_epsilon)
        except SingularCircuitError as exc:
            logger.info("Singular subnetwork with %d nodes: %s", len(subnetwork.nodes), exc)
            return _failed(nodes, netlist, "singular", SINGULAR_REASON, reference)
        for node, volts in solved.voltages.items():
            node_voltages[node] = volts
        recover_currents(subnetwork, netlist, solved, element_currents, wire_segment_currents)

    fill_missing(elements, element_currents)
    wire_order = {element.id: idx for idx, element in enumerate(elements)}
    wire_segment_currents.sort(key=lambda item: (wire_order[item.wire_id], item.segment_index))

    return DcSolution(
        status="solved",
        node_voltages=_external_voltages(nodes, node_voltages),
        element_currents=element_currents,
        wire_segment_currents=wire_segment_currents,
        reference_node_id=nodes.node_label(reference),
        terminal_to_node=nodes.labelled_terminals(),
        node_positions=nodes.labelled_positions(),
        skipped_elements=netlist.skipped_elements,
    )


def _ground_nodes(elements: Sequence[Element], nodes: NodeMap) -> List[int]:
    found: List[int] = []
    for element in elements:
        if isinstance(element, GroundElement):
            node = nodes.node_of(element.id, "gnd")
            if node is not None:
                found.append(node)
    return found


def _battery_negative_nodes(elements: Sequence[Element], nodes: NodeMap) -> List[int]:
    found: List[int] = []
    for element in elements:
        if isinstance(element, TwoTerminalElement) and element.kind == "battery":
            node = nodes.node_of(element.id, "start")
            if node is not None:
                found.append(node)
    return found


def _ideal_short_labels(netlist: Netlist) -> np.ndarray:
    """Component label per node over the zero-ohm graph (wires and inductors)."""
    rows: List[int] = []
    cols: List[int] = []
    for source in netlist.sources:
        if source.origin in ("wire_segment", "inductor_short"):
            rows.append(source.positive)
            cols.append(source.negative)
    size = netlist.node_count
    adjacency = sp.coo_matrix((np.ones(len(rows)), (rows, cols)), shape=(size, size))
    _, labels = connected_components(adjacency, directed=False)
    return labels


def _batteries_across_ideal_short(elements: Sequence[Element], nodes: NodeMap, netlist: Netlist) -> List[str]:
    labels = _ideal_short_labels(netlist)
    shorted: List[str] = []
    for element in elements:
        if not (isinstance(element, TwoTerminalElement) and element.kind == "battery"):
            continue
        negative = nodes.node_of(element.id, "start")
        positive = nodes.node_of(element.id, "end")
        if negative is None or positive is None:
            continue
        # Terminals merged into one node count as reachable.
        if negative == positive or labels[negative] == labels[positive]:
            shorted.append(element.id)
    return shorted


def _external_voltages(nodes: NodeMap, voltages: np.ndarray) -> Dict[str, float]:
    return {nodes.node_label(idx): float(voltages[idx]) for idx in range(nodes.node_count)}


def _failed(
    nodes: NodeMap,
    netlist: Netlist,
    status: DcSolveStatus,
    reason: str,
    reference: int,
) -> DcSolution:
    return DcSolution(
        status=status,
        reason=reason,
        node_voltages={nodes.node_label(reference): 0.0},
        reference_node_id=nodes.node_label(reference),
        terminal_to_node=nodes.labelled_terminals(),
        node_positions=nodes.labelled_positions(),
        skipped_elements=netlist.skipped_elements,
    )
