"""Layout engine for 3D concept tree visualization.

This module contains the depth grouping and the radial layout that
positions tree nodes in 3D space.
"""

from pyktree.layout.engine import Connection, LayoutConfig, LayoutEngine, LayoutResult, Placement
from pyktree.layout.grouping import DepthGroups, group_by_depth
from pyktree.layout.position import Position, rotate_around_vertical_axis

__all__ = [
    "Connection",
    "DepthGroups",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutResult",
    "Placement",
    "Position",
    "group_by_depth",
    "rotate_around_vertical_axis",
]
