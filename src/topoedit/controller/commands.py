"""
Reversible Graph Commands
=========================
Every user edit of the arena is wrapped in a Command so it can be undone.

Why is this file needed?
------------------------
1. Reversibility: Each command captures, when it runs, exactly the state
   needed to put the arena back (positions, incident edge pairs).
2. Grouping: BatchDeleteCommand turns a multi-selection into one undo step.

Commands assume strict LIFO use through CommandHistory: undo is only valid
against the arena state the command itself left behind. Node removals are
undone by restoring the node at its original index, so node indices captured
by earlier commands stay valid. Edge indices are not stable across undo, so
edge commands re-locate their edge by its endpoint pair.

A command whose arena call is rejected (out-of-range index, self-loop,
duplicate edge) turns into a no-op; its undo then does nothing either.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Iterable, Optional, TYPE_CHECKING

from topoedit.config import INVALID_INDEX

if TYPE_CHECKING:
    from topoedit.model.arena import GraphArena

logger = logging.getLogger(__name__)


class Command(ABC):
    """A reversible edit."""
    description: str = ""

    @abstractmethod
    def execute(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def undo(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.description!r})"


class AddNodeCommand(Command):
    def __init__(self, arena: GraphArena, x: float, y: float) -> None:
        self.arena = arena
        self.x = x
        self.y = y
        self._node_index: int = INVALID_INDEX
        self.description = f"Add node at ({x:.1f}, {y:.1f})"

    @property
    def node_index(self) -> int:
        """Index assigned by the last execute, INVALID_INDEX when not applied."""
        return self._node_index

    def execute(self) -> None:
        self._node_index = self.arena.add_node(self.x, self.y)

    def undo(self) -> None:
        if self._node_index >= 0:
            self.arena.remove_node(self._node_index)
            self._node_index = INVALID_INDEX


class RemoveNodeCommand(Command):
    def __init__(self, arena: GraphArena, node_index: int) -> None:
        self.arena = arena
        self.node_index = node_index
        self._saved_position: Optional[tuple[float, float]] = None
        self._saved_edges: list[tuple[int, int]] = []
        self.description = f"Remove node {node_index}"

    def execute(self) -> None:
        position = self.arena.get_node_position(self.node_index)
        if position is None:
            logger.debug(f"{self.description}: node does not exist, skipped")
            self._saved_position = None
            return

        # Capture before removal; removal rewrites the edge arrays
        self._saved_position = position
        self._saved_edges = [
            self.arena.get_edge(edge_idx) for edge_idx in self.arena.get_edges_for_node(self.node_index)
        ]
        self.arena.remove_node(self.node_index)

    def undo(self) -> None:
        if self._saved_position is None:
            return

        x, y = self._saved_position
        self.arena.restore_node(self.node_index, x, y)
        # The node is back at its old index, so the captured pairs apply verbatim
        for source, target in self._saved_edges:
            if self.arena.add_edge(source, target) == INVALID_INDEX:
                logger.warning(f"{self.description}: could not restore edge ({source}, {target})")
        self._saved_position = None


class MoveNodeCommand(Command):
    def __init__(
        self,
        arena: GraphArena,
        node_index: int,
        new_x: float,
        new_y: float,
        old_position: Optional[tuple[float, float]] = None,
    ) -> None:
        """
        Args:
            arena: Graph holding the node.
            node_index: Node to move.
            new_x, new_y: Destination.
            old_position: Position to restore on undo. Defaults to the
                current position; a drag that already moved the node live
                passes the position it started from.
        """
        self.arena = arena
        self.node_index = node_index
        self.old_position = old_position if old_position is not None else arena.get_node_position(node_index)
        self.new_x = new_x
        self.new_y = new_y
        self.description = f"Move node {node_index}"

    def update_target(self, x: float, y: float) -> None:
        """Retarget the destination while a drag is still in progress."""
        self.new_x = x
        self.new_y = y

    def execute(self) -> None:
        self.arena.update_node(self.node_index, self.new_x, self.new_y)

    def undo(self) -> None:
        if self.old_position is None:
            return
        old_x, old_y = self.old_position
        self.arena.update_node(self.node_index, old_x, old_y)


class AddEdgeCommand(Command):
    def __init__(self, arena: GraphArena, source: int, target: int) -> None:
        self.arena = arena
        self.source = source
        self.target = target
        self._edge_index: int = INVALID_INDEX
        self.description = f"Add edge {source} -> {target}"

    @property
    def edge_index(self) -> int:
        return self._edge_index

    def execute(self) -> None:
        self._edge_index = self.arena.add_edge(self.source, self.target)

    def undo(self) -> None:
        if self._edge_index < 0:
            return
        # Later undos may have shuffled edge slots
        if self.arena.get_edge(self._edge_index) not in ((self.source, self.target), (self.target, self.source)):
            self._edge_index = self.arena.find_edge(self.source, self.target)
        if self._edge_index >= 0:
            self.arena.remove_edge(self._edge_index)
        self._edge_index = INVALID_INDEX


class RemoveEdgeCommand(Command):
    def __init__(self, arena: GraphArena, edge_index: int) -> None:
        self.arena = arena
        self.edge_index = edge_index
        self._saved_edge: Optional[tuple[int, int]] = None
        self._removed = False
        self.description = f"Remove edge {edge_index}"

    def execute(self) -> None:
        if self._saved_edge is not None:
            # Redo: the edge was re-appended by undo, find its current slot
            self.edge_index = self.arena.find_edge(*self._saved_edge)
        else:
            self._saved_edge = self.arena.get_edge(self.edge_index)
        self._removed = self.arena.remove_edge(self.edge_index)
        if not self._removed:
            logger.debug(f"{self.description}: edge does not exist, skipped")

    def undo(self) -> None:
        if not self._removed or self._saved_edge is None:
            return
        source, target = self._saved_edge
        self.edge_index = self.arena.add_edge(source, target)
        self._removed = False


class BatchDeleteCommand(Command):
    """
    Delete a multi-selection in one undo step.

    All requested edges go first, highest index first, then all requested
    nodes, highest index first. Removing edges before nodes keeps the edge
    indices valid (node removal cascades into edge removal), and descending
    order keeps compaction from relocating a not-yet-processed index.
    """
    def __init__(
        self,
        arena: GraphArena,
        node_indices: Iterable[int],
        edge_indices: Iterable[int],
    ) -> None:
        nodes = sorted({int(i) for i in node_indices}, reverse=True)
        edges = sorted({int(i) for i in edge_indices}, reverse=True)

        self.commands: list[Command] = [RemoveEdgeCommand(arena, idx) for idx in edges]
        self.commands += [RemoveNodeCommand(arena, idx) for idx in nodes]

        parts = []
        if nodes:
            parts.append(f"{len(nodes)} nodes")
        if edges:
            parts.append(f"{len(edges)} edges")
        self.description = f"Delete {' and '.join(parts)}" if parts else "Delete nothing"

    def execute(self) -> None:
        for cmd in self.commands:
            cmd.execute()

    def undo(self) -> None:
        for cmd in reversed(self.commands):
            cmd.undo()
