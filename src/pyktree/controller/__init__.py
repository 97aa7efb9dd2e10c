"""Controller layer for pyktree 3D concept tree visualization.

This module provides the input handling and application coordination:

- InteractionController: Pointer and wheel event processing
- Controller: Main application coordinator (``pyktree.controller.controller``,
  requires Qt)
"""

from pyktree.controller.input_handler import (
    InteractionConfig,
    InteractionController,
    InteractionMode,
    InteractionState,
)

__all__ = [
    "InteractionConfig",
    "InteractionController",
    "InteractionMode",
    "InteractionState",
]
