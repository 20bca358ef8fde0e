"""
fgcore: factor graph core for structured prediction

Factor graphs over discrete variables, union-find topology analysis and
energy scoring of full assignments.

Key components:
- topology: Disjoint-set forest and graph views (networkx, scipy.sparse)
- structure: Factor graph, factor contract, table factors, observations
"""

__version__ = "1.0.0"
__author__ = "fgcore Team"

from fgcore.topology.disjoint_set import DisjointSet
from fgcore.topology.incidence import to_networkx, incidence_matrix, build_factor_adjacency
from fgcore.structure.factor import Factor, FactorDataSource, TableFactor
from fgcore.structure.factor_graph import FactorGraph, TopologyState, TopologyNotAnalyzedError
from fgcore.structure.observation import FactorGraphObservation

__all__ = [
    # Topology
    "DisjointSet",
    "to_networkx",
    "incidence_matrix",
    "build_factor_adjacency",
    # Structure
    "Factor",
    "FactorDataSource",
    "TableFactor",
    "FactorGraph",
    "TopologyState",
    "TopologyNotAnalyzedError",
    "FactorGraphObservation",
]
