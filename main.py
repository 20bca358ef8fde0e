#!/usr/bin/env python3
"""
fgcore: factor graph core for structured prediction

Usage:
    # Analyze topology of a factor graph stored as JSON
    python main.py analyze --input graph.json

    # Evaluate the energy of a full assignment
    python main.py energy --input graph.json --state 0,1,0

    # Run demos
    python main.py demo --example chain
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import numpy as np

from fgcore import FactorGraph, TableFactor, __version__


def load_graph_from_json(filepath: str) -> FactorGraph:
    """
    Load a factor graph from JSON file.

    Expected format:
    {
        "cardinalities": [2, 2, 3],
        "factors": [
            {"variables": [0, 1], "energies": [0.1, 0.2, 0.3, 0.4]}
        ]
    }

    Energies are listed with the first variable changing fastest.
    """
    with open(filepath, 'r') as f:
        data = json.load(f)

    cards = [int(c) for c in data["cardinalities"]]
    fg = FactorGraph(cards)

    for fdata in data.get("factors", []):
        variables = [int(v) for v in fdata["variables"]]
        scope_cards = [cards[v] for v in variables]
        fg.add_factor(TableFactor(variables, scope_cards, parameters=fdata["energies"]))

    fg.compute_energies()
    return fg


def parse_state_string(state_str: str) -> List[int]:
    """Parse an assignment: '0,1,0'"""
    return [int(s.strip()) for s in state_str.split(',') if s.strip()]


def print_topology(fg: FactorGraph) -> None:
    fg.connect_components()
    print(f"  Variables: {fg.num_variables}")
    print(f"  Factors: {fg.num_factors}")
    print(f"  Edges: {fg.get_num_edges()}")
    print(f"  Components: {fg.get_num_components()}")
    print(f"  Connected: {fg.is_connected_graph()}")
    print(f"  Acyclic: {fg.is_acyclic_graph()}")
    print(f"  Tree: {fg.is_tree_graph()}")


def cmd_analyze(args):
    """Execute the analyze command."""
    try:
        fg = load_graph_from_json(args.input)
    except (OSError, KeyError, ValueError, IndexError) as e:
        print(f"Error loading {args.input}: {e}")
        return 1

    print(f"Topology of {args.input}:")
    try:
        print_topology(fg)
    except IndexError as e:
        print(f"Error during analysis: {e}")
        return 1
    return 0


def cmd_energy(args):
    """Execute the energy command."""
    try:
        fg = load_graph_from_json(args.input)
    except (OSError, KeyError, ValueError, IndexError) as e:
        print(f"Error loading {args.input}: {e}")
        return 1

    state = parse_state_string(args.state)
    try:
        energy = fg.evaluate_energy(state)
    except (ValueError, IndexError) as e:
        print(f"Error evaluating energy: {e}")
        return 1

    print(f"State: {state}")
    for j, factor in enumerate(fg.get_factors()):
        scope = factor.get_variables()
        sub = [state[v] for v in scope]
        print(f"  factor {j} {scope}: {factor.evaluate_energy(sub):.6f}")
    print(f"Energy = {energy:.6f}")
    return 0


def demo_simple_chain():
    """Demo: Simple chain 0 -- 1 -- 2"""
    print("=" * 60)
    print("Demo: Simple Chain 0 -- 1 -- 2")
    print("=" * 60)

    fg = FactorGraph([2, 2, 2])
    e01 = np.array([0.0, 1.0, 1.0, 0.0])
    e12 = np.array([0.5, 0.2, 0.3, 0.1])
    fg.add_factor(TableFactor([0, 1], [2, 2], parameters=e01))
    fg.add_factor(TableFactor([1, 2], [2, 2], parameters=e12))
    fg.compute_energies()

    print_topology(fg)

    state = [1, 0, 1]
    energy = fg.evaluate_energy(state)
    print(f"\nEnergy of {state} = {energy:.6f}")

    # first variable fastest: index = x0 + 2 * x1
    expected = e01[1 + 2 * 0] + e12[0 + 2 * 1]
    match = fg.is_tree_graph() and np.isclose(energy, expected)
    print(f"Match: {match}")
    return match


def demo_triangle():
    """Demo: Triangle 0 -- 1 -- 2 -- 0"""
    print("=" * 60)
    print("Demo: Triangle")
    print("=" * 60)

    fg = FactorGraph([2, 2, 2])
    potts = np.array([0.0, 1.0, 1.0, 0.0])
    for scope in ([0, 1], [1, 2], [0, 2]):
        fg.add_factor(TableFactor(scope, [2, 2], parameters=potts))
    fg.compute_energies()

    print_topology(fg)

    energies = fg.evaluate_energies([[0, 0, 0], [0, 1, 0], [1, 1, 0]])
    print(f"\nEnergies: {energies.tolist()}")

    match = (not fg.is_acyclic_graph()) and np.allclose(energies, [0.0, 2.0, 2.0])
    print(f"Match: {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_simple_chain,
        "triangle": demo_triangle,
    }

    names = list(demos) if args.example == "all" else [args.example]
    all_passed = True
    for name in names:
        passed = demos[name]()
        all_passed = all_passed and bool(passed)
        print()

    return 0 if all_passed else 1


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="fgcore",
        description="fgcore: factor graph topology and energy evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fgcore analyze --input graph.json
  fgcore energy --input graph.json --state 0,1,0
  fgcore demo --example all
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"fgcore {__version__}"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Report graph topology")
    analyze_parser.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")

    energy_parser = subparsers.add_parser("energy", help="Evaluate energy of an assignment")
    energy_parser.add_argument("--input", "-i", type=str, required=True, help="Input JSON file")
    energy_parser.add_argument("--state", "-s", type=str, required=True, help="Assignment: '0,1,0'")

    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["chain", "triangle", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "analyze":
        return cmd_analyze(args)
    elif args.command == "energy":
        return cmd_energy(args)
    elif args.command == "demo":
        return cmd_demo(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
