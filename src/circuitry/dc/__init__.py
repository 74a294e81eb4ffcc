"""DC steady-state solving."""

from circuitry.dc.mna import assemble_system, gaussian_solve
from circuitry.dc.netlist import Netlist, ResistorBranch, VoltageSource, build_netlist
from circuitry.dc.partition import Subnetwork, partition_netlist
from circuitry.dc.solver import solve_dc_circuit
from circuitry.dc.types import DcSolution, ElementCurrent, WireSegmentCurrent

__all__ = [
    "DcSolution",
    "ElementCurrent",
    "Netlist",
    "ResistorBranch",
    "Subnetwork",
    "VoltageSource",
    "WireSegmentCurrent",
    "assemble_system",
    "build_netlist",
    "gaussian_solve",
    "partition_netlist",
    "solve_dc_circuit",
]
