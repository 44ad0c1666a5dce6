"""
Selection State
===============
The pair of node / edge index sets chosen by the user.

Selections hold raw arena indices, which any structural mutation may
reassign. They are therefore stamped with the arena version they were built
against and must be dropped (never fixed up) once `is_stale` reports True.
All helpers return a new Selection and leave their input untouched.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from topoedit.model.arena import GraphArena


@dataclass(frozen=True)
class Selection:
    nodes: frozenset[int] = field(default_factory=frozenset)
    edges: frozenset[int] = field(default_factory=frozenset)
    version: Optional[int] = None

    def __len__(self) -> int:
        return len(self.nodes) + len(self.edges)

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def is_stale(self, arena: GraphArena) -> bool:
        """True once the arena has been mutated since this selection was made."""
        return self.version is not None and self.version != arena.version

    def stamped(self, arena: GraphArena) -> Selection:
        """Same indices, bound to the current arena version."""
        return Selection(nodes=self.nodes, edges=self.edges, version=arena.version)


def create_empty_selection(arena: Optional[GraphArena] = None) -> Selection:
    return Selection(version=arena.version if arena is not None else None)


def selection_count(sel: Selection) -> int:
    return len(sel)


def clear_selection(sel: Selection) -> Selection:
    return Selection(version=sel.version)


def toggle_node_selection(sel: Selection, node_idx: int, multi: bool) -> Selection:
    """
    Flip membership of one node (multi), or select only this node.
    """
    nodes = set(sel.nodes) if multi else set()
    edges = sel.edges if multi else frozenset()
    if node_idx in nodes:
        nodes.discard(node_idx)
    else:
        nodes.add(node_idx)
    return Selection(nodes=frozenset(nodes), edges=edges, version=sel.version)


def toggle_edge_selection(sel: Selection, edge_idx: int, multi: bool) -> Selection:
    """
    Flip membership of one edge (multi), or select only this edge.
    """
    nodes = sel.nodes if multi else frozenset()
    edges = set(sel.edges) if multi else set()
    if edge_idx in edges:
        edges.discard(edge_idx)
    else:
        edges.add(edge_idx)
    return Selection(nodes=nodes, edges=frozenset(edges), version=sel.version)


def select_nodes(sel: Selection, node_indices: Iterable[int], multi: bool) -> Selection:
    """Add nodes to the selection (multi) or replace it."""
    nodes = set(sel.nodes) if multi else set()
    edges = sel.edges if multi else frozenset()
    nodes.update(int(i) for i in node_indices)
    return Selection(nodes=frozenset(nodes), edges=edges, version=sel.version)
