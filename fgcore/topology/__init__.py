"""
Topology module: union-find and graph views of factor graphs.
"""

from fgcore.topology.disjoint_set import DisjointSet
from fgcore.topology.incidence import build_factor_adjacency, incidence_matrix, to_networkx

__all__ = [
    "DisjointSet",
    "to_networkx",
    "incidence_matrix",
    "build_factor_adjacency",
]
