"""Terminal enumeration and tolerance-based node merging."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from circuitry.elements import Element, Point
from circuitry.graph.disjoint_set import DisjointSet


logger = logging.getLogger(__name__)

TerminalKey = Tuple[str, str]

_NEIGHBOR_OFFSETS = tuple((dx, dz) for dx in (-1, 0, 1) for dz in (-1, 0, 1))


@dataclass(frozen=True)
class Terminal:
    """One electrical contact point of an element."""

    element_id: str
    kind: str
    terminal_key: str
    point: Point

    @property
    def key(self) -> TerminalKey:
        return (self.element_id, self.terminal_key)


@dataclass
class NodeMap:
    """Result of merging terminals into electrical nodes."""

    terminal_to_node: Dict[TerminalKey, int] = field(default_factory=dict)
    node_positions: List[Point] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.node_positions)

    def node_of(self, element_id: str, terminal_key: str) -> Optional[int]:
        return self.terminal_to_node.get((element_id, terminal_key))

    @staticmethod
    def node_label(index: int) -> str:
        return f"n{index}"

    def labelled_terminals(self) -> Dict[str, str]:
        """``"elementId:terminalKey" -> "nK"`` view for external consumers."""
        return {
            f"{element_id}:{terminal_key}": self.node_label(node)
            for (element_id, terminal_key), node in self.terminal_to_node.items()
        }

    def labelled_positions(self) -> Dict[str, Point]:
        return {self.node_label(idx): point for idx, point in enumerate(self.node_positions)}


def enumerate_terminals(elements: Sequence[Element]) -> List[Terminal]:
    """List every terminal in element order, then terminal order."""
    terminals: List[Terminal] = []
    for element in elements:
        for terminal_key, point in element.terminals():
            terminals.append(Terminal(element.id, element.kind, terminal_key, point))
    return terminals


def _bucket(point: Point, size: float) -> Tuple[int, int]:
    return (math.floor(point.x / size), math.floor(point.z / size))


def merge_terminals(terminals: Sequence[Terminal], tolerance: float) -> NodeMap:
    """Merge terminals lying within ``tolerance`` of each other (transitively)."""
    if tolerance <= 0.0:
        raise ValueError("tolerance must be positive.")

    buckets: Dict[Tuple[int, int], List[int]] = defaultdict(list)
    for idx, terminal in enumerate(terminals):
        buckets[_bucket(terminal.point, tolerance)].append(idx)

    forest = DisjointSet(len(terminals))
    for (bx, bz), members in buckets.items():
        for dx, dz in _NEIGHBOR_OFFSETS:
            neighbors = buckets.get((bx + dx, bz + dz))
            if not neighbors:
                continue
            for i in members:
                for j in neighbors:
                    if i >= j:
                        continue
                    if terminals[i].point.distance_to(terminals[j].point) <= tolerance:
                        forest.union(i, j)

    node_map = NodeMap()
    for idx, label in enumerate(forest.labels()):
        if label == node_map.node_count:
            node_map.node_positions.append(terminals[idx].point)
        node_map.terminal_to_node[terminals[idx].key] = label

    logger.debug("Merged %d terminals into %d nodes", len(terminals), node_map.node_count)
    return node_map


def build_node_map(elements: Sequence[Element], tolerance: float) -> NodeMap:
    """Enumerate and merge terminals in one step."""
    return merge_terminals(enumerate_terminals(elements), tolerance)
