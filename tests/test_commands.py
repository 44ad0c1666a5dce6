"""
Tests for reversible commands and the undo/redo history.
"""
import numpy as np
import pytest

from topoedit.config import INVALID_INDEX
from topoedit.controller.commands import (
    AddEdgeCommand,
    AddNodeCommand,
    BatchDeleteCommand,
    Command,
    MoveNodeCommand,
    RemoveEdgeCommand,
    RemoveNodeCommand,
)
from topoedit.controller.history import CommandHistory
from topoedit.model.arena import GraphArena


@pytest.fixture
def history():
    return CommandHistory(max_history=10)


@pytest.fixture
def cycle():
    """Five nodes on a cycle 0-1-2-3-4-0."""
    graph = GraphArena(8, 8)
    for i in range(5):
        graph.add_node(float(i), float(i * i))
    for i in range(5):
        graph.add_edge(i, (i + 1) % 5)
    return graph


def test_command_is_abstract():
    with pytest.raises(TypeError):
        Command()


class TestNodeCommands:
    def test_add_node_undo_redo(self, arena, history):
        cmd = AddNodeCommand(arena, 1.0, 2.0)
        history.execute(cmd)
        assert arena.node_count == 1
        assert cmd.node_index == 0

        assert history.undo() is cmd
        assert arena.node_count == 0
        assert cmd.node_index == INVALID_INDEX

        assert history.redo() is cmd
        assert arena.get_node_position(0) == (1.0, 2.0)

    def test_remove_node_undo_restores_index_and_edges(self, path_arena, history, edge_set):
        before = path_arena.positions()
        history.execute(RemoveNodeCommand(path_arena, 1))
        assert path_arena.node_count == 2
        assert path_arena.edge_count == 0

        history.undo()

        assert path_arena.node_count == 3
        np.testing.assert_array_equal(path_arena.positions(), before)
        assert edge_set(path_arena) == {frozenset((0, 1)), frozenset((1, 2))}

    def test_remove_node_redo_removes_same_node(self, path_arena, history):
        history.execute(RemoveNodeCommand(path_arena, 0))
        history.undo()
        history.redo()
        assert path_arena.node_count == 2
        assert sorted(path_arena.positions()[:, 0].tolist()) == [1.0, 2.0]

    def test_remove_missing_node_is_noop(self, path_arena, history):
        version = path_arena.version
        history.execute(RemoveNodeCommand(path_arena, 9))
        history.undo()
        assert path_arena.node_count == 3
        assert path_arena.version == version

    def test_move_node(self, path_arena, history):
        cmd = MoveNodeCommand(path_arena, 2, 5.0, 5.0)
        history.execute(cmd)
        assert path_arena.get_node_position(2) == (5.0, 5.0)
        history.undo()
        assert path_arena.get_node_position(2) == (2.0, 0.0)

    def test_move_node_retarget_during_drag(self, path_arena, history):
        cmd = MoveNodeCommand(path_arena, 0, 1.0, 1.0)
        cmd.update_target(3.0, 3.0)
        cmd.update_target(4.0, 4.0)
        history.execute(cmd)
        assert path_arena.get_node_position(0) == (4.0, 4.0)
        assert history.undo_count == 1
        history.undo()
        assert path_arena.get_node_position(0) == (0.0, 0.0)

    def test_move_node_with_explicit_start(self, path_arena, history):
        # Node already dragged live; the command records where the drag began
        path_arena.update_node(1, 8.0, 8.0)
        history.execute(MoveNodeCommand(path_arena, 1, 8.0, 8.0, old_position=(1.0, 0.0)))
        history.undo()
        assert path_arena.get_node_position(1) == (1.0, 0.0)

    def test_undo_across_move_and_remove(self, cycle, history):
        before = cycle.positions()
        history.execute(MoveNodeCommand(cycle, 4, -1.0, -1.0))
        history.execute(RemoveNodeCommand(cycle, 1))
        history.undo()
        history.undo()
        np.testing.assert_array_equal(cycle.positions(), before)


class TestEdgeCommands:
    def test_add_edge_undo(self, path_arena, history):
        cmd = AddEdgeCommand(path_arena, 0, 2)
        history.execute(cmd)
        assert cmd.edge_index == 2
        history.undo()
        assert path_arena.edge_count == 2
        assert not path_arena.has_edge(0, 2)

    def test_rejected_add_edge_is_noop(self, path_arena, history):
        cmd = AddEdgeCommand(path_arena, 1, 0)
        history.execute(cmd)
        assert cmd.edge_index == INVALID_INDEX
        history.undo()
        assert path_arena.edge_count == 2
        assert path_arena.has_edge(0, 1)

    def test_add_edge_undo_finds_moved_edge(self, history):
        graph = GraphArena(4, 4)
        for i in range(3):
            graph.add_node(float(i), 0.0)
        graph.add_edge(0, 1)
        history.execute(AddEdgeCommand(graph, 1, 2))
        history.execute(RemoveEdgeCommand(graph, 0))
        # Undo re-appends (0, 1) behind (1, 2)
        history.undo()
        history.undo()
        assert graph.edge_count == 1
        assert graph.has_edge(0, 1)
        assert not graph.has_edge(1, 2)

    def test_remove_edge_undo_redo(self, path_arena, history):
        history.execute(RemoveEdgeCommand(path_arena, 0))
        assert not path_arena.has_edge(0, 1)
        history.undo()
        assert path_arena.has_edge(0, 1)
        history.redo()
        assert not path_arena.has_edge(0, 1)
        assert path_arena.has_edge(1, 2)


class TestBatchDelete:
    def test_node_with_two_incident_edges(self, path_arena, history, edge_set):
        history.execute(BatchDeleteCommand(path_arena, [1], []))
        assert path_arena.node_count == 2
        assert path_arena.edge_count == 0

        history.undo()

        assert path_arena.node_count == 3
        assert path_arena.edge_count == 2
        assert edge_set(path_arena) == {frozenset((0, 1)), frozenset((1, 2))}

    def test_mixed_selection_round_trip(self, cycle, history, edge_set):
        before_positions = cycle.positions()
        before_edges = edge_set(cycle)
        # Edge 4 joins nodes 4 and 0
        cmd = BatchDeleteCommand(cycle, [1, 3], [4])
        history.execute(cmd)

        assert cycle.node_count == 3
        assert cycle.edge_count == 0

        history.undo()
        np.testing.assert_array_equal(cycle.positions(), before_positions)
        assert edge_set(cycle) == before_edges

        history.redo()
        assert cycle.node_count == 3
        assert cycle.edge_count == 0

        history.undo()
        assert edge_set(cycle) == before_edges

    def test_orders_edges_then_nodes_descending(self, cycle):
        cmd = BatchDeleteCommand(cycle, [0, 3, 3], [1, 4])
        kinds = [(type(c).__name__, getattr(c, "edge_index", getattr(c, "node_index", None))) for c in cmd.commands]
        assert kinds == [
            ("RemoveEdgeCommand", 4),
            ("RemoveEdgeCommand", 1),
            ("RemoveNodeCommand", 3),
            ("RemoveNodeCommand", 0),
        ]
        assert cmd.description == "Delete 2 nodes and 2 edges"

    def test_empty_batch(self, cycle, history):
        version = cycle.version
        history.execute(BatchDeleteCommand(cycle, [], []))
        history.undo()
        assert cycle.version == version


class TestHistory:
    def test_empty_stacks(self, history):
        assert history.undo() is None
        assert history.redo() is None
        assert not history.can_undo()
        assert not history.can_redo()

    def test_execute_clears_redo(self, arena, history):
        history.execute(AddNodeCommand(arena, 0.0, 0.0))
        history.undo()
        assert history.can_redo()
        history.execute(AddNodeCommand(arena, 1.0, 1.0))
        assert not history.can_redo()
        assert history.redo() is None

    def test_oldest_entry_dropped_when_full(self, arena):
        history = CommandHistory(max_history=3)
        for i in range(5):
            history.execute(AddNodeCommand(arena, float(i), 0.0))

        assert history.undo_count == 3
        assert history.can_undo()
        for _ in range(3):
            assert history.undo() is not None
        assert history.undo() is None
        # The two oldest additions can no longer be undone
        assert arena.node_count == 2

    def test_clear(self, arena, history):
        history.execute(AddNodeCommand(arena, 0.0, 0.0))
        history.execute(AddNodeCommand(arena, 1.0, 0.0))
        history.undo()
        history.clear()
        assert history.undo_count == 0
        assert history.redo_count == 0

    def test_rejects_non_positive_depth(self):
        with pytest.raises(ValueError):
            CommandHistory(max_history=0)
