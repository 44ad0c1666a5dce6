"""
Command Line Demo
=================
Builds a random geometric network and reports its connectivity.

Why is this file needed?
------------------------
It is the quickest way to exercise the whole core outside a host application:
1. Bulk-loads random node positions into a GraphArena.
2. Connects every pair of nodes closer than --radius.
3. Optionally prunes everything outside the giant component.
4. Logs the statistics snapshot.

Usage:
    $ python -m topoedit --nodes 5000 --radius 12 --keep-giant
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import numpy as np

from topoedit.analysis.components import (
    auto_connect_nearby,
    compute_statistics,
    keep_only_giant_component,
)
from topoedit.logging_config import setup_logging
from topoedit.model.arena import GraphArena

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="topoedit", description="Build a random geometric network and report its connectivity.")
    parser.add_argument("--nodes", type=int, default=2000, help="number of random nodes")
    parser.add_argument("--radius", type=float, default=15.0, help="auto-connect distance [m]")
    parser.add_argument("--extent", type=float, default=500.0, help="side of the square area [m]")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--keep-giant", action="store_true", help="drop nodes outside the giant component")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def build_random_network(n_nodes: int, radius: float, extent: float, seed: Optional[int] = None) -> GraphArena:
    """Uniformly scattered nodes in [0, extent]^2, connected within `radius`."""
    rng = np.random.default_rng(seed)
    positions = rng.uniform(0.0, extent, size=(n_nodes, 2))

    arena = GraphArena(initial_node_capacity=max(1, n_nodes), initial_edge_capacity=max(1, 4 * n_nodes))
    arena.reset_and_load(positions, np.empty((0, 2), dtype=np.int64))
    auto_connect_nearby(arena, radius)
    return arena


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    arena = build_random_network(args.nodes, args.radius, args.extent, args.seed)
    if args.keep_giant:
        keep_only_giant_component(arena)

    stats = compute_statistics(arena)
    for key, value in stats.to_dict().items():
        logger.info(f"{key:>24}: {value:.2f}" if isinstance(value, float) else f"{key:>24}: {value}")


if __name__ == "__main__":
    main()
