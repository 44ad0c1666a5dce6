"""
Configuration & Global Constants
================================
This module serves as the central registry for the tunables of the graph core.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (capacities, history depth, dtypes)
   scattered throughout the code.
2. Deployment: Host applications can resize the arena or the undo history
   through environment variables without touching the code.

Exports:
    DEFAULT_NODE_CAPACITY (int): Starting node slots of a new arena.
    DEFAULT_EDGE_CAPACITY (int): Starting edge slots of a new arena.
    MAX_HISTORY (int): Maximum depth of the undo stack.
    POSITION_DTYPE, INDEX_DTYPE: numpy dtypes of the raw buffers.
    INVALID_INDEX (int): Failure sentinel returned by index-producing calls.
"""
import logging
import os

import numpy as np

logger = logging.getLogger(__name__)


def get_int_setting(name: str, default: int) -> int:
    """
    Read a positive integer override from the environment.

    Invalid values are ignored with a warning, falling back to `default`.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {name}={value}: must be positive, using {default}")
        return default
    return value


# Global Constants
DEFAULT_NODE_CAPACITY: int = get_int_setting("TOPOEDIT_NODE_CAPACITY", 100_000)
DEFAULT_EDGE_CAPACITY: int = get_int_setting("TOPOEDIT_EDGE_CAPACITY", 300_000)
MAX_HISTORY: int = get_int_setting("TOPOEDIT_MAX_HISTORY", 100)

# Raw buffer layout expected by the rendering collaborator
POSITION_DTYPE = np.float32
INDEX_DTYPE = np.uint32

INVALID_INDEX: int = -1
