"""
Example: Simple chain factor graph.

0--1--2 with pairwise factors and a unary factor on 0.
"""

import numpy as np
from fgcore import FactorGraph, TableFactor


def main():
    fg = FactorGraph([2, 2, 2])

    # Unary on 0
    fg.add_factor(TableFactor([0], [2], parameters=[0.6, 0.4]))

    # Pairwise on (0, 1) and (1, 2), first variable fastest
    fg.add_factor(TableFactor([0, 1], [2, 2], parameters=[0.9, 0.1, 0.2, 0.8]))
    fg.add_factor(TableFactor([1, 2], [2, 2], parameters=[0.3, 0.7, 0.5, 0.5]))

    fg.connect_components()
    print(f"Edges: {fg.get_num_edges()}")
    print(f"Tree: {fg.is_tree_graph()}")

    fg.compute_energies()

    print("\nEnergies of all assignments:")
    best = None
    for a in range(2):
        for b in range(2):
            for c in range(2):
                e = fg.evaluate_energy([a, b, c])
                print(f"  E({a}, {b}, {c}) = {e:.4f}")
                if best is None or e < best[0]:
                    best = (e, (a, b, c))

    print(f"\nLowest energy: {best[0]:.4f} at {best[1]}")
    return np.isfinite(best[0])


if __name__ == "__main__":
    main()
