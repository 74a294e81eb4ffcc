"""Index-based disjoint-set forest."""

from __future__ import annotations

from typing import Dict, List


class DisjointSet:
    """Union-find over the integers ``0..size-1``.

    Path halving plus union by rank. ``labels()`` numbers the sets in order of
    their first member, so results depend only on the index order.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must be non-negative.")
        self._parent: List[int] = list(range(size))
        self._rank: List[int] = [0] * size

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, index: int) -> int:
        parent = self._parent
        while parent[index] != index:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    def union(self, a: int, b: int) -> bool:
        """Merge the sets holding ``a`` and ``b``; False if already merged."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        if self._rank[root_a] < self._rank[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        if self._rank[root_a] == self._rank[root_b]:
            self._rank[root_a] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def labels(self) -> List[int]:
        """Dense set label per index, assigned in first-discovery order."""
        root_to_label: Dict[int, int] = {}
        labels: List[int] = []
        for index in range(len(self._parent)):
            root = self.find(index)
            label = root_to_label.setdefault(root, len(root_to_label))
            labels.append(label)
        return labels

    def groups(self) -> List[List[int]]:
        """Members of each set, sets ordered by their smallest index."""
        grouped: List[List[int]] = []
        for index, label in enumerate(self.labels()):
            if label == len(grouped):
                grouped.append([])
            grouped[label].append(index)
        return grouped
