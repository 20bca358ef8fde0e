"""
Structure module: factor graph, factor contract and observations.
"""

from fgcore.structure.factor import Factor, FactorDataSource, TableFactor
from fgcore.structure.factor_graph import FactorGraph, TopologyNotAnalyzedError, TopologyState
from fgcore.structure.observation import FactorGraphObservation

__all__ = [
    "Factor",
    "FactorDataSource",
    "TableFactor",
    "FactorGraph",
    "TopologyState",
    "TopologyNotAnalyzedError",
    "FactorGraphObservation",
]
