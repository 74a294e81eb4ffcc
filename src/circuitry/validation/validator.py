"""Topology validation of freehand element layouts."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

import networkx as nx

from circuitry.config import ValidatorOptions
from circuitry.dc.solver import solve_dc_circuit
from circuitry.dc.types import DcSolution
from circuitry.elements import (
    Element,
    GroundElement,
    Point,
    ThreeTerminalElement,
    TwoTerminalElement,
    WireElement,
    check_unique_ids,
    element_label,
    is_load,
)
from circuitry.graph.nodes import build_node_map
from circuitry.validation.polarity import detect_reverse_polarity, polarity_config_for
from circuitry.validation.types import CircuitStatus, ValidationIssue, ValidationResult, ValidationStats


logger = logging.getLogger(__name__)


def connection_points(element: Element) -> Tuple[Point, ...]:
    """Points through which an element touches its neighbors; wires use endpoints only."""
    if isinstance(element, WireElement):
        return element.endpoints
    return tuple(point for _, point in element.terminals())


def _touches(a: Sequence[Point], b: Sequence[Point], tolerance: float) -> bool:
    return any(p.distance_to(q) <= tolerance for p in a for q in b)


def build_connection_graph(elements: Sequence[Element], tolerance: float) -> nx.Graph:
    """Element-level adjacency: an edge wherever two elements share a connection point."""
    graph = nx.Graph()
    members = [element for element in elements if not isinstance(element, ThreeTerminalElement)]
    points = {element.id: connection_points(element) for element in members}
    for element in members:
        graph.add_node(element.id, kind=element.kind)
    for i, first in enumerate(members):
        for second in members[i + 1 :]:
            if _touches(points[first.id], points[second.id], tolerance):
                graph.add_edge(first.id, second.id)
    return graph


def _ordered_components(graph: nx.Graph, elements: Sequence[Element]) -> List[Set[str]]:
    order = {element.id: idx for idx, element in enumerate(elements)}
    components = [set(component) for component in nx.connected_components(graph)]
    components.sort(key=lambda component: min(order[eid] for eid in component))
    return components


def _connected_terminal_count(
    element: Element,
    others: Sequence[Element],
    tolerance: float,
) -> int:
    foreign = [point for other in others if other.id != element.id for point in connection_points(other)]
    return sum(1 for point in connection_points(element) if _touches((point,), foreign, tolerance))


def _detect_short_circuits(
    elements: Sequence[Element],
    by_id: Dict[str, Element],
    graph: nx.Graph,
    tolerance: float,
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for battery in elements:
        if not (isinstance(battery, TwoTerminalElement) and battery.kind == "battery"):
            continue
        neighbors = [by_id[eid] for eid in graph.neighbors(battery.id)]
        wires = [n for n in neighbors if isinstance(n, WireElement)]
        if not wires or any(is_load(n) for n in neighbors):
            continue
        for wire in wires:
            ends = wire.endpoints
            if _touches(ends, (battery.start,), tolerance) and _touches(ends, (battery.end,), tolerance):
                issues.append(
                    ValidationIssue(
                        type="short_circuit",
                        severity="error",
                        message="Short Circuit Detected",
                        description=(
                            "A direct connection exists between battery terminals without a load "
                            "component. This would cause excessive current flow and potential damage."
                        ),
                        affected_elements=(battery.id, wire.id),
                        affected_positions=(battery.start, battery.end),
                    )
                )
    return issues


def _detect_floating_components(
    members: Sequence[Element],
    tolerance: float,
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for element in members:
        if isinstance(element, WireElement):
            continue
        connected = _connected_terminal_count(element, members, tolerance)
        label = element_label(element)
        positions = connection_points(element)
        if connected == 0:
            issues.append(
                ValidationIssue(
                    type="floating_component",
                    severity="warning",
                    message=f"Floating Component: {label}",
                    description=f"Component {label} has no connections. Connect it to the circuit using wires.",
                    affected_elements=(element.id,),
                    affected_positions=positions,
                )
            )
        elif isinstance(element, TwoTerminalElement) and connected == 1:
            issues.append(
                ValidationIssue(
                    type="unconnected_terminal",
                    severity="warning",
                    message=f"Partially Connected: {label}",
                    description=(
                        f"Component {label} has only one terminal connected. "
                        "Both terminals must be connected for current to flow."
                    ),
                    affected_elements=(element.id,),
                    affected_positions=positions,
                )
            )
    return issues


def _detect_open_circuits(
    batteries: Sequence[TwoTerminalElement],
    loads: Sequence[Element],
    components: Sequence[Set[str]],
) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if len(components) <= 1:
        return issues
    component_of = {eid: idx for idx, component in enumerate(components) for eid in component}
    for battery in batteries:
        for load in loads:
            if component_of[battery.id] == component_of[load.id]:
                continue
            issues.append(
                ValidationIssue(
                    type="open_circuit",
                    severity="error",
                    message="Open Circuit Detected",
                    description=(
                        f"{battery.label or 'Battery'} and {element_label(load)} are not connected. "
                        "Complete the circuit path to allow current flow."
                    ),
                    affected_elements=(battery.id, load.id),
                    affected_positions=connection_points(battery) + connection_points(load),
                )
            )
    return issues


def _detect_missing_ground(
    batteries: Sequence[TwoTerminalElement],
    grounds: Sequence[GroundElement],
) -> List[ValidationIssue]:
    if not batteries or grounds:
        return []
    return [
        ValidationIssue(
            type="missing_ground",
            severity="info",
            message="Missing Ground Reference",
            description=(
                "No ground symbol is present in the circuit. Adding a ground reference helps "
                "establish voltage levels."
            ),
            affected_elements=tuple(b.id for b in batteries),
            affected_positions=tuple(p for b in batteries for p in (b.start, b.end)),
        )
    ]


def _detect_missing_power_source(
    batteries: Sequence[TwoTerminalElement],
    loads: Sequence[Element],
) -> List[ValidationIssue]:
    if batteries or not loads:
        return []
    return [
        ValidationIssue(
            type="missing_power_source",
            severity="warning",
            message="Missing Power Source",
            description=(
                "The circuit has components but no battery or power source. "
                "Add a battery to power the circuit."
            ),
            affected_elements=tuple(load.id for load in loads),
            affected_positions=tuple(p for load in loads for p in connection_points(load)),
        )
    ]


def _detect_floating_wires(wires: Sequence[WireElement], graph: nx.Graph) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for wire in wires:
        if graph.degree(wire.id) > 0:
            continue
        issues.append(
            ValidationIssue(
                type="floating_node",
                severity="warning",
                message="Floating Wire",
                description="This wire segment is not connected to any components.",
                affected_elements=(wire.id,),
                affected_positions=wire.path,
            )
        )
    return issues


def _detect_load_count(loads: Sequence[Element], required: Optional[int]) -> List[ValidationIssue]:
    if required is None or len(loads) == required:
        return []
    return [
        ValidationIssue(
            type="insufficient_components",
            severity="warning",
            message="Wrong Number of Components",
            description=(
                f"This layout needs exactly {required} load components besides the battery; "
                f"found {len(loads)}."
            ),
            affected_elements=tuple(load.id for load in loads),
            affected_positions=tuple(p for load in loads for p in connection_points(load)),
        )
    ]


def _detect_unsupported(elements: Sequence[Element]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for element in elements:
        if not isinstance(element, ThreeTerminalElement):
            continue
        label = element_label(element)
        issues.append(
            ValidationIssue(
                type="unsupported_component",
                severity="info",
                message=f"Not Simulated: {label}",
                description=f"{label} is a transistor; it is ignored by the DC solver and connectivity checks.",
                affected_elements=(element.id,),
                affected_positions=(element.collector, element.base, element.emitter),
            )
        )
    return issues


def _circuit_status(issues: Sequence[ValidationIssue], battery_count: int, component_count: int) -> CircuitStatus:
    if any(issue.severity == "error" for issue in issues):
        return "invalid"
    if any(issue.severity == "warning" for issue in issues) or battery_count == 0 or component_count <= 1:
        return "incomplete"
    return "complete"


def validate_circuit(
    elements: Sequence[Element],
    options: Optional[ValidatorOptions] = None,
    solution: Optional[DcSolution] = None,
) -> ValidationResult:
    """Check a layout for wiring mistakes before it is simulated.

    Polarity checks need node voltages; pass ``solution`` to reuse an existing
    solve, otherwise one is run only when a polarity-sensitive part is present.
    """
    options = options or ValidatorOptions()
    if not elements:
        return ValidationResult(is_valid=True, issues=[], stats=ValidationStats(), circuit_status="incomplete")
    check_unique_ids(elements)

    tolerance = options.connection_tolerance
    by_id = {element.id: element for element in elements}
    members = [element for element in elements if not isinstance(element, ThreeTerminalElement)]
    wires = [element for element in elements if isinstance(element, WireElement)]
    grounds = [element for element in elements if isinstance(element, GroundElement)]
    batteries = [
        element for element in elements if isinstance(element, TwoTerminalElement) and element.kind == "battery"
    ]
    loads = [element for element in elements if is_load(element)]
    components = [
        element for element in members if not isinstance(element, (WireElement, GroundElement))
    ]

    graph = build_connection_graph(elements, tolerance)
    connected = _ordered_components(graph, elements)

    issues: List[ValidationIssue] = []
    issues.extend(_detect_short_circuits(elements, by_id, graph, tolerance))
    issues.extend(_detect_floating_components(members, tolerance))
    issues.extend(_detect_open_circuits(batteries, loads, connected))
    issues.extend(_detect_missing_ground(batteries, grounds))
    issues.extend(_detect_missing_power_source(batteries, loads))
    issues.extend(_detect_floating_wires(wires, graph))
    issues.extend(_detect_load_count(loads, options.required_load_count))

    if options.check_polarity and any(polarity_config_for(element) for element in elements):
        if solution is None:
            solution = solve_dc_circuit(elements, tolerance=tolerance)
        issues.extend(detect_reverse_polarity(elements, solution, options.reverse_bias_threshold))

    issues.extend(_detect_unsupported(elements))

    stats = ValidationStats(
        component_count=len(components),
        wire_count=len(wires),
        ground_count=len(grounds),
        battery_count=len(batteries),
        node_count=build_node_map(members, tolerance).node_count,
        connected_components=len(connected),
    )
    status = _circuit_status(issues, len(batteries), len(components))
    has_errors = status == "invalid"
    if issues:
        logger.debug("Validation found %d issues; status=%s", len(issues), status)
    return ValidationResult(is_valid=not has_errors, issues=issues, stats=stats, circuit_status=status)
