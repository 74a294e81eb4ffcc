"""Connectivity primitives: union-find and node merging."""

from circuitry.graph.disjoint_set import DisjointSet
from circuitry.graph.nodes import NodeMap, Terminal, build_node_map, enumerate_terminals, merge_terminals

__all__ = [
    "DisjointSet",
    "NodeMap",
    "Terminal",
    "build_node_map",
    "enumerate_terminals",
    "merge_terminals",
]
