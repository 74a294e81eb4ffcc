"""Modified nodal analysis for one DC subnetwork."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import scipy.sparse as sp

from circuitry.config import DEFAULT_PIVOT_EPSILON
from circuitry.dc.netlist import Netlist
from circuitry.dc.partition import Subnetwork
from circuitry.errors import SingularCircuitError


logger = logging.getLogger(__name__)


@dataclass
class MnaSystem:
    """Dense system ``A x = b``; x holds node voltages then source currents.

    Source current ``k`` is the current entering the source at its positive
    node and leaving at its negative node.
    """

    A: np.ndarray
    b: np.ndarray
    reference: int
    unknown_nodes: List[int]
    source_indices: List[int]
    meta: Dict[str, object] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return int(self.b.shape[0])


@dataclass
class SubnetworkSolution:
    """Node voltages (reference at 0 V) and source currents for a subnetwork."""

    reference: int
    voltages: Dict[int, float]
    source_currents: Dict[int, float]


def choose_reference(
    subnetwork: Subnetwork,
    ground_nodes: Sequence[int],
    battery_negative_nodes: Sequence[int],
) -> int:
    """Ground inside the subnetwork, else a battery negative, else its lowest node."""
    members = set(subnetwork.nodes)
    for node in ground_nodes:
        if node in members:
            return node
    for node in battery_negative_nodes:
        if node in members:
            return node
    return min(subnetwork.nodes)


def assemble_system(subnetwork: Subnetwork, netlist: Netlist, reference: int) -> MnaSystem:
    """Stamp resistors and voltage sources of a subnetwork."""
    unknown_nodes = [node for node in subnetwork.nodes if node != reference]
    node_index = {node: idx for idx, node in enumerate(unknown_nodes)}
    n_nodes = len(unknown_nodes)
    n_sources = len(subnetwork.source_indices)
    n_unknowns = n_nodes + n_sources

    A = sp.lil_matrix((n_unknowns, n_unknowns), dtype=float)
    b = np.zeros(n_unknowns, dtype=float)

    def node_idx(node: int) -> Optional[int]:
        return node_index.get(node)

    for ridx in subnetwork.resistor_indices:
        resistor = netlist.resistors[ridx]
        conductance = 1.0 / resistor.ohms
        idx_a = node_idx(resistor.a)
        idx_b = node_idx(resistor.b)
        if idx_a is not None:
            A[idx_a, idx_a] += conductance
        if idx_b is not None:
            A[idx_b, idx_b] += conductance
        if idx_a is not None and idx_b is not None:
            A[idx_a, idx_b] -= conductance
            A[idx_b, idx_a] -= conductance

    for k, sidx in enumerate(subnetwork.source_indices):
        source = netlist.sources[sidx]
        row = n_nodes + k
        idx_pos = node_idx(source.positive)
        idx_neg = node_idx(source.negative)

        # KCL: source current leaves the positive node, enters the negative node.
        if idx_pos is not None:
            A[idx_pos, row] += 1.0
            A[row, idx_pos] += 1.0
        if idx_neg is not None:
            A[idx_neg, row] -= 1.0
            A[row, idx_neg] -= 1.0
        b[row] = source.volts

    meta = {"n_nodes": n_nodes, "n_sources": n_sources, "nnz": int(A.nnz)}
    return MnaSystem(
        A=A.toarray(),
        b=b,
        reference=reference,
        unknown_nodes=unknown_nodes,
        source_indices=list(subnetwork.source_indices),
        meta=meta,
    )


def gaussian_solve(A: np.ndarray, b: np.ndarray, pivot_epsilon: float = DEFAULT_PIVOT_EPSILON) -> np.ndarray:
    """Gauss-Jordan elimination with partial pivoting.

    Raises SingularCircuitError when the best available pivot of a column is
    smaller than ``pivot_epsilon``.
    """
    M = np.array(A, dtype=float, copy=True)
    x = np.array(b, dtype=float, copy=True)
    n = x.shape[0]
    if M.shape != (n, n):
        raise ValueError("A must be square and match b.")

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(M[col:, col])))
        pivot_abs = abs(M[pivot_row, col])
        if pivot_abs < pivot_epsilon:
            raise SingularCircuitError("Circuit matrix is singular.", column=col)

        if pivot_row != col:
            M[[col, pivot_row]] = M[[pivot_row, col]]
            x[[col, pivot_row]] = x[[pivot_row, col]]

        pivot = M[col, col]
        M[col, col:] /= pivot
        x[col] /= pivot

        for row in range(n):
            if row == col:
                continue
            factor = M[row, col]
            if abs(factor) < pivot_epsilon:
                continue
            M[row, col:] -= factor * M[col, col:]
            x[row] -= factor * x[col]

    return x


def solve_subnetwork(
    subnetwork: Subnetwork,
    netlist: Netlist,
    reference: int,
    pivot_epsilon: float = DEFAULT_PIVOT_EPSILON,
) -> SubnetworkSolution:
    """Solve a powered subnetwork; raises SingularCircuitError when ill-posed."""
    system = assemble_system(subnetwork, netlist, reference)
    logger.debug(
        "MNA system: %d nodes, %d sources, %d nonzeros (reference n%d)",
        system.meta["n_nodes"],
        system.meta["n_sources"],
        system.meta["nnz"],
        reference,
    )
    voltages: Dict[int, float] = {reference: 0.0}
    if system.size == 0:
        return SubnetworkSolution(reference=reference, voltages=voltages, source_currents={})

    x = gaussian_solve(system.A, system.b, pivot_epsilon)
    if not np.isfinite(x).all():
        raise SingularCircuitError("Circuit solution is not finite.")

    n_nodes = len(system.unknown_nodes)
    for idx, node in enumerate(system.unknown_nodes):
        voltages[node] = float(x[idx])
    source_currents = {sidx: float(x[n_nodes + k]) for k, sidx in enumerate(system.source_indices)}
    return SubnetworkSolution(reference=reference, voltages=voltages, source_currents=source_currents)
