"""
Graph Arena (Data Model)
========================
Dense structure-of-arrays storage for the nodes and edges of the network.

Why is this file needed?
------------------------
1. Bulk transfer: every attribute lives in its own contiguous numpy array, so
   the rendering collaborator uploads the occupied prefix without marshalling.
2. Density: removals compact the arrays (last element moves into the hole),
   there are never gaps between live slots.
3. Change detection: a single monotonically increasing `version` is bumped on
   every mutation. It is the only change signal exposed to consumers.

A node's identity IS its array index and is only stable between mutations.
Failing mutations return False / INVALID_INDEX and leave the arena untouched.

Classes:
    ArenaBuffers: Read-only views handed to the rendering collaborator.
    GraphArena: The node/edge store.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, TYPE_CHECKING

import numpy as np

from topoedit.config import (
    DEFAULT_EDGE_CAPACITY,
    DEFAULT_NODE_CAPACITY,
    INDEX_DTYPE,
    INVALID_INDEX,
    POSITION_DTYPE,
)

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def _read_only(view: np.ndarray) -> np.ndarray:
    view.setflags(write=False)
    return view


@dataclass(frozen=True)
class ArenaBuffers:
    """
    Snapshot of the raw arrays, valid until the next mutation of the arena.
    """
    node_x: npt.NDArray[np.float32]
    node_y: npt.NDArray[np.float32]
    edge_source: npt.NDArray[np.uint32]
    edge_target: npt.NDArray[np.uint32]
    version: int

    @property
    def node_count(self) -> int:
        return len(self.node_x)

    @property
    def edge_count(self) -> int:
        return len(self.edge_source)


class GraphArena:
    """
    Growable, compacting store of node positions and edge endpoints.
    """
    def __init__(
        self,
        initial_node_capacity: int = DEFAULT_NODE_CAPACITY,
        initial_edge_capacity: int = DEFAULT_EDGE_CAPACITY,
    ) -> None:
        """
        Allocate the arrays.

        Args:
            initial_node_capacity: Number of node slots allocated up front.
            initial_edge_capacity: Number of edge slots allocated up front.
        """
        if initial_node_capacity < 1:
            raise ValueError(f"Node capacity must be positive, got {initial_node_capacity}.")
        if initial_edge_capacity < 1:
            raise ValueError(f"Edge capacity must be positive, got {initial_edge_capacity}.")

        self._node_count: int = 0
        self._node_capacity: int = int(initial_node_capacity)
        self.node_x: npt.NDArray[np.float32] = np.zeros(self._node_capacity, dtype=POSITION_DTYPE)
        self.node_y: npt.NDArray[np.float32] = np.zeros(self._node_capacity, dtype=POSITION_DTYPE)
        # Scratch space of an external integrator, never read by the core
        self.node_vx: npt.NDArray[np.float32] = np.zeros(self._node_capacity, dtype=POSITION_DTYPE)
        self.node_vy: npt.NDArray[np.float32] = np.zeros(self._node_capacity, dtype=POSITION_DTYPE)

        self._edge_count: int = 0
        self._edge_capacity: int = int(initial_edge_capacity)
        self.edge_source: npt.NDArray[np.uint32] = np.zeros(self._edge_capacity, dtype=INDEX_DTYPE)
        self.edge_target: npt.NDArray[np.uint32] = np.zeros(self._edge_capacity, dtype=INDEX_DTYPE)

        self._version: int = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(nodes={self._node_count}/{self._node_capacity}, "
            f"edges={self._edge_count}/{self._edge_capacity}, version={self._version})"
        )

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------
    @property
    def node_count(self) -> int:
        """Number of occupied node slots."""
        return self._node_count

    @property
    def edge_count(self) -> int:
        """Number of occupied edge slots."""
        return self._edge_count

    @property
    def node_capacity(self) -> int:
        return self._node_capacity

    @property
    def edge_capacity(self) -> int:
        return self._edge_capacity

    @property
    def version(self) -> int:
        """Change counter, incremented on every successful mutation."""
        return self._version

    def _bump(self) -> None:
        self._version += 1

    def is_valid_node(self, index: int) -> bool:
        return 0 <= index < self._node_count

    def is_valid_edge(self, index: int) -> bool:
        return 0 <= index < self._edge_count

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------
    def _resize_nodes(self, new_capacity: int) -> None:
        logger.info(f"Resizing nodes from {self._node_capacity} to {new_capacity}")
        n = self._node_count
        for name in ("node_x", "node_y", "node_vx", "node_vy"):
            grown = np.zeros(new_capacity, dtype=POSITION_DTYPE)
            grown[:n] = getattr(self, name)[:n]
            setattr(self, name, grown)
        self._node_capacity = new_capacity

    def _resize_edges(self, new_capacity: int) -> None:
        logger.info(f"Resizing edges from {self._edge_capacity} to {new_capacity}")
        m = self._edge_count
        for name in ("edge_source", "edge_target"):
            grown = np.zeros(new_capacity, dtype=INDEX_DTYPE)
            grown[:m] = getattr(self, name)[:m]
            setattr(self, name, grown)
        self._edge_capacity = new_capacity

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def add_node(self, x: float, y: float) -> int:
        """
        Append a node and return its index. Always succeeds.
        """
        if self._node_count >= self._node_capacity:
            self._resize_nodes(self._node_capacity * 2)

        idx = self._node_count
        self.node_x[idx] = x
        self.node_y[idx] = y
        self.node_vx[idx] = 0.0
        self.node_vy[idx] = 0.0
        self._node_count += 1
        self._bump()
        return idx

    def remove_node(self, index: int) -> bool:
        """
        Remove a node together with its incident edges.

        The last node is moved into the freed slot and every edge endpoint
        pointing at its old index is rewritten, so exactly one node changes
        identity per removal.

        Returns:
            False if `index` is out of range (no state change), True otherwise.
        """
        if not self.is_valid_node(index):
            logger.debug(f"remove_node: index {index} out of range [0, {self._node_count})")
            return False

        # 1. Drop incident edges, highest index first so swap-compaction
        #    only ever pulls in edges that were already inspected
        for edge_idx in self.get_edges_for_node(index)[::-1]:
            self.remove_edge(edge_idx)

        # 2. Compact: move the last node into the hole and remap references
        last = self._node_count - 1
        if index != last:
            self._copy_node(last, index)
            self._remap_endpoints(last, index)
            logger.debug(f"Node {last} relocated to {index}")

        self._node_count -= 1
        self._bump()
        logger.debug(f"Removed node {index}")
        return True

    def restore_node(self, index: int, x: float, y: float) -> bool:
        """
        Insert a node at `index`, undoing the compaction of `remove_node`.

        The node currently occupying `index` is moved to the end of the
        arena (its edges follow it), then the restored node takes `index`.
        With `index == node_count` this is a plain append.

        Returns:
            False if `index` is outside [0, node_count], True otherwise.
        """
        if not 0 <= index <= self._node_count:
            logger.debug(f"restore_node: index {index} out of range [0, {self._node_count}]")
            return False

        if self._node_count >= self._node_capacity:
            self._resize_nodes(self._node_capacity * 2)

        end = self._node_count
        if index != end:
            self._copy_node(index, end)
            self._remap_endpoints(index, end)

        self.node_x[index] = x
        self.node_y[index] = y
        self.node_vx[index] = 0.0
        self.node_vy[index] = 0.0
        self._node_count += 1
        self._bump()
        return True

    def update_node(self, index: int, x: float, y: float) -> bool:
        """Move a node. Velocity is left untouched."""
        if not self.is_valid_node(index):
            logger.debug(f"update_node: index {index} out of range [0, {self._node_count})")
            return False
        self.node_x[index] = x
        self.node_y[index] = y
        self._bump()
        return True

    def get_node_position(self, index: int) -> Optional[tuple[float, float]]:
        if not self.is_valid_node(index):
            return None
        return float(self.node_x[index]), float(self.node_y[index])

    def _copy_node(self, src: int, dst: int) -> None:
        self.node_x[dst] = self.node_x[src]
        self.node_y[dst] = self.node_y[src]
        self.node_vx[dst] = self.node_vx[src]
        self.node_vy[dst] = self.node_vy[src]

    def _remap_endpoints(self, old: int, new: int) -> None:
        m = self._edge_count
        source = self.edge_source[:m]
        target = self.edge_target[:m]
        source[source == old] = new
        target[target == old] = new

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------
    def add_edge(self, source: int, target: int) -> int:
        """
        Connect two nodes.

        Returns:
            The new edge index, or INVALID_INDEX when an endpoint is out of
            range, the edge would be a self-loop, or the unordered pair is
            already connected.
        """
        if self.has_edge(source, target):
            logger.debug(f"add_edge: rejected duplicate edge ({source}, {target})")
            return INVALID_INDEX
        return self.append_edge(source, target)

    def append_edge(self, source: int, target: int) -> int:
        """
        Connect two nodes without the O(E) duplicate scan.

        Range and self-loop checks still apply. The caller guarantees that the
        pair is not connected yet (bulk builders tracking their own pair set).
        """
        if not (self.is_valid_node(source) and self.is_valid_node(target)):
            logger.debug(f"add_edge: endpoint out of range ({source}, {target})")
            return INVALID_INDEX
        if source == target:
            logger.debug(f"add_edge: rejected self-loop on node {source}")
            return INVALID_INDEX

        if self._edge_count >= self._edge_capacity:
            self._resize_edges(self._edge_capacity * 2)

        idx = self._edge_count
        self.edge_source[idx] = source
        self.edge_target[idx] = target
        self._edge_count += 1
        self._bump()
        return idx

    def remove_edge(self, index: int) -> bool:
        """Remove an edge, moving the last edge into its slot."""
        if not self.is_valid_edge(index):
            logger.debug(f"remove_edge: index {index} out of range [0, {self._edge_count})")
            return False

        last = self._edge_count - 1
        if index != last:
            self.edge_source[index] = self.edge_source[last]
            self.edge_target[index] = self.edge_target[last]
        self._edge_count -= 1
        self._bump()
        return True

    def get_edge(self, index: int) -> Optional[tuple[int, int]]:
        """Return the (source, target) pair of an edge."""
        if not self.is_valid_edge(index):
            return None
        return int(self.edge_source[index]), int(self.edge_target[index])

    def find_edge(self, a: int, b: int) -> int:
        """Index of the edge joining `a` and `b` in either direction, or INVALID_INDEX."""
        if not (self.is_valid_node(a) and self.is_valid_node(b)):
            return INVALID_INDEX
        m = self._edge_count
        source = self.edge_source[:m]
        target = self.edge_target[:m]
        hits = np.flatnonzero(((source == a) & (target == b)) | ((source == b) & (target == a)))
        return int(hits[0]) if len(hits) else INVALID_INDEX

    def has_edge(self, a: int, b: int) -> bool:
        return self.find_edge(a, b) != INVALID_INDEX

    def get_neighbors(self, index: int) -> list[int]:
        """Adjacent node indices, in edge storage order."""
        if not self.is_valid_node(index):
            return []
        m = self._edge_count
        source = self.edge_source[:m]
        target = self.edge_target[:m]
        incident = (source == index) | (target == index)
        others = np.where(source[incident] == index, target[incident], source[incident])
        return [int(n) for n in others]

    def get_edges_for_node(self, index: int) -> list[int]:
        """Incident edge indices, ascending."""
        if not self.is_valid_node(index):
            return []
        m = self._edge_count
        incident = (self.edge_source[:m] == index) | (self.edge_target[:m] == index)
        return [int(e) for e in np.flatnonzero(incident)]

    # ------------------------------------------------------------------
    # Bulk access
    # ------------------------------------------------------------------
    def reset_and_load(self, node_positions, edge_endpoints) -> None:
        """
        Replace the whole content of the arena in one step.

        The loader guarantees that every endpoint lies in [0, N); edges are
        copied as given, without duplicate or self-loop checks.

        Args:
            node_positions: Array-like of shape (N, 2) with x, y columns.
            edge_endpoints: Array-like of shape (E, 2) with source, target columns.
        """
        positions = np.asarray(node_positions, dtype=np.float64)
        endpoints = np.asarray(edge_endpoints, dtype=np.int64)
        # Empty inputs arrive as [] from most loaders
        if positions.size == 0:
            positions = positions.reshape(0, 2)
        if endpoints.size == 0:
            endpoints = endpoints.reshape(0, 2)

        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f"Node positions must have shape (N, 2), got {positions.shape}.")
        if endpoints.ndim != 2 or endpoints.shape[1] != 2:
            raise ValueError(f"Edge endpoints must have shape (E, 2), got {endpoints.shape}.")

        num_nodes = len(positions)
        num_edges = len(endpoints)
        if num_edges and (endpoints.min() < 0 or endpoints.max() >= num_nodes):
            raise ValueError(f"Edge endpoints must lie in [0, {num_nodes}).")

        self._node_count = 0
        self._edge_count = 0

        if num_nodes > self._node_capacity:
            self._resize_nodes(max(num_nodes, self._node_capacity * 2))
        if num_edges > self._edge_capacity:
            self._resize_edges(max(num_edges, self._edge_capacity * 2))

        self.node_x[:num_nodes] = positions[:, 0]
        self.node_y[:num_nodes] = positions[:, 1]
        self.node_vx[:num_nodes] = 0.0
        self.node_vy[:num_nodes] = 0.0
        self.edge_source[:num_edges] = endpoints[:, 0]
        self.edge_target[:num_edges] = endpoints[:, 1]

        self._node_count = num_nodes
        self._edge_count = num_edges
        self._bump()
        logger.info(f"Loaded {num_nodes} nodes and {num_edges} edges into GraphArena.")

    def get_buffers(self) -> ArenaBuffers:
        """Read-only views of the occupied prefix of every raw array."""
        n = self._node_count
        m = self._edge_count
        return ArenaBuffers(
            node_x=_read_only(self.node_x[:n]),
            node_y=_read_only(self.node_y[:n]),
            edge_source=_read_only(self.edge_source[:m]),
            edge_target=_read_only(self.edge_target[:m]),
            version=self._version,
        )

    def positions(self) -> npt.NDArray[np.float64]:
        """(N, 2) float64 copy of the occupied node positions."""
        n = self._node_count
        return np.column_stack((self.node_x[:n], self.node_y[:n])).astype(np.float64)

    def edges(self) -> npt.NDArray[np.int64]:
        """(E, 2) int64 copy of the occupied edge endpoints."""
        m = self._edge_count
        return np.column_stack((self.edge_source[:m], self.edge_target[:m])).astype(np.int64)
