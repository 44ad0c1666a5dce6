"""In-memory graph arena for interactive network editing and analysis."""
from importlib.metadata import version, PackageNotFoundError

from topoedit.model.arena import ArenaBuffers, GraphArena
from topoedit.model.selection import Selection
from topoedit.controller.history import CommandHistory

try:
    __version__ = version("topoedit")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["ArenaBuffers", "GraphArena", "Selection", "CommandHistory", "__version__"]
