"""
fgcore/topology/disjoint_set.py

Disjoint-set (union-find) forest over a fixed universe of integer ids.

Used by the factor graph to link variables that share a factor:
- find_set: root search with path compression
- link_set: union by rank (the only place ranks change)
- union_set: returns False when both ids are already connected,
  which is how a closed cycle is detected

See http://en.wikipedia.org/wiki/Disjoint-set_data_structure
"""

from __future__ import annotations

import numpy as np


class DisjointSet:
    """
    Union-find over elements 0..N-1.

    Attributes:
        parent: parent id of each element (self-parented elements are roots)
        rank: union rank, meaningful for roots only
    """

    def __init__(self, num_elements: int):
        if num_elements < 0:
            raise ValueError(f"num_elements must be non-negative, got {num_elements}")
        self._num_elements = int(num_elements)
        self.parent = np.arange(self._num_elements, dtype=np.int64)
        self.rank = np.zeros(self._num_elements, dtype=np.int64)
        self._is_connected = False

    @property
    def num_elements(self) -> int:
        return self._num_elements

    def __len__(self) -> int:
        return self._num_elements

    def make_sets(self) -> None:
        """Reset every element to a singleton set."""
        self.parent = np.arange(self._num_elements, dtype=np.int64)
        self.rank = np.zeros(self._num_elements, dtype=np.int64)
        self._is_connected = False

    def _check(self, x: int) -> int:
        x = int(x)
        if not 0 <= x < self._num_elements:
            raise IndexError(f"element {x} out of range [0, {self._num_elements})")
        return x

    def find_set(self, x: int) -> int:
        """
        Find the root of the set containing x.

        Every node visited on the way up is relinked directly to the root.
        """
        x = self._check(x)
        parent = self.parent

        root = x
        while parent[root] != root:
            root = int(parent[root])

        while parent[x] != root:
            nxt = int(parent[x])
            parent[x] = root
            x = nxt

        return root

    def link_set(self, xroot: int, yroot: int) -> int:
        """
        Link two distinct roots; the higher ranked root becomes the new root.

        On equal rank xroot wins and its rank grows by one.
        """
        xroot = self._check(xroot)
        yroot = self._check(yroot)
        if self.parent[xroot] != xroot or self.parent[yroot] != yroot:
            raise ValueError(f"link_set expects roots, got {xroot} and {yroot}")
        if xroot == yroot:
            raise ValueError(f"link_set expects distinct roots, got {xroot} twice")

        if self.rank[xroot] > self.rank[yroot]:
            self.parent[yroot] = xroot
            return xroot
        if self.rank[xroot] < self.rank[yroot]:
            self.parent[xroot] = yroot
            return yroot

        self.parent[yroot] = xroot
        self.rank[xroot] += 1
        return xroot

    def union_set(self, x: int, y: int) -> bool:
        """
        Merge the sets containing x and y.

        Returns:
            False if x and y were already in the same set, True otherwise
        """
        xroot = self.find_set(x)
        yroot = self.find_set(y)
        if xroot == yroot:
            return False
        self.link_set(xroot, yroot)
        return True

    def is_same_set(self, x: int, y: int) -> bool:
        return self.find_set(x) == self.find_set(y)

    def get_unique_labeling(self, out_labels: np.ndarray) -> int:
        """
        Give each disjoint set a dense label.

        Labels are handed out in first-seen order while scanning 0..N-1.

        Args:
            out_labels: integer array of length N, filled in place

        Returns:
            Number of unique labels
        """
        if len(out_labels) != self._num_elements:
            raise ValueError(
                f"out_labels has length {len(out_labels)}, expected {self._num_elements}"
            )

        root_label = {}
        for i in range(self._num_elements):
            root = self.find_set(i)
            if root not in root_label:
                root_label[root] = len(root_label)
            out_labels[i] = root_label[root]

        return len(root_label)

    def get_num_sets(self) -> int:
        return len({self.find_set(i) for i in range(self._num_elements)})

    def get_connected(self) -> bool:
        """Whether a union-find pass has been completed."""
        return self._is_connected

    def set_connected(self, is_connected: bool) -> None:
        self._is_connected = bool(is_connected)

    def __repr__(self) -> str:
        return f"DisjointSet(elements={self._num_elements}, connected={self._is_connected})"
