"""Split a netlist into independently solvable subnetworks."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List

from circuitry.dc.netlist import Netlist
from circuitry.graph.disjoint_set import DisjointSet


logger = logging.getLogger(__name__)


@dataclass
class Subnetwork:
    """Connected group of nodes with the primitives living entirely inside it."""

    nodes: List[int]
    resistor_indices: List[int] = field(default_factory=list)
    source_indices: List[int] = field(default_factory=list)
    battery_count: int = 0

    @property
    def has_battery(self) -> bool:
        return self.battery_count > 0


def partition_netlist(netlist: Netlist) -> List[Subnetwork]:
    """Group nodes connected through resistor or source edges.

    Floating groups become their own subnetworks so they cannot make the
    system of a powered group singular.
    """
    forest = DisjointSet(netlist.node_count)
    for resistor in netlist.resistors:
        forest.union(resistor.a, resistor.b)
    for source in netlist.sources:
        forest.union(source.positive, source.negative)

    labels = forest.labels()
    subnetworks: List[Subnetwork] = []
    for node, label in enumerate(labels):
        if label == len(subnetworks):
            subnetworks.append(Subnetwork(nodes=[]))
        subnetworks[label].nodes.append(node)

    for idx, resistor in enumerate(netlist.resistors):
        subnetworks[labels[resistor.a]].resistor_indices.append(idx)
    for idx, source in enumerate(netlist.sources):
        subnetwork = subnetworks[labels[source.positive]]
        subnetwork.source_indices.append(idx)
        if source.origin == "battery":
            subnetwork.battery_count += 1

    logger.debug(
        "Partitioned %d nodes into %d subnetworks (%d powered)",
        netlist.node_count,
        len(subnetworks),
        sum(1 for sub in subnetworks if sub.has_battery),
    )
    return subnetworks
