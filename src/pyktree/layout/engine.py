"""Radial layout engine for 3D concept tree visualization."""

import math
from dataclasses import dataclass, field

from pyktree.errors import LayoutError, ValidationError, validate_positive
from pyktree.layout.grouping import DepthGroups, group_by_depth, max_depth
from pyktree.layout.position import Position
from pyktree.model.node import TreeNode


@dataclass
class LayoutConfig:
    """Configuration for the layout engine.

    Attributes:
        depth_spacing: Vertical distance between depth levels
        base_ring_radius: Ring radius for depth 1
        ring_radius_step: Ring radius added per further depth
    """

    depth_spacing: float = 4.0
    base_ring_radius: float = 2.0
    ring_radius_step: float = 0.5

    def __post_init__(self) -> None:
        validate_positive(self.depth_spacing, "depth_spacing")
        validate_positive(self.base_ring_radius, "base_ring_radius")
        if self.ring_radius_step < 0:
            raise ValidationError("ring_radius_step", self.ring_radius_step, "non-negative number")


@dataclass(frozen=True)
class Placement:
    """Layout-computed placement of one node.

    Attributes:
        node: Source tree node
        depth: Depth level of the node
        index: Index of the node on its ring
        angle: Angle on the ring in radians (0 for the root)
        ring_radius: Radius of the ring (0 for the root)
        position: Rest position before any interactive rotation
    """

    node: TreeNode
    depth: int
    index: int
    angle: float
    ring_radius: float
    position: Position

    @property
    def is_root(self) -> bool:
        return self.depth == 0


@dataclass(frozen=True)
class Connection:
    """Connector from the vertical axis at the parent depth to a node.

    Attributes:
        start: Point on the vertical axis at the parent's depth
        end: Rest position of the node
        ring_radius: Ring radius of the node's depth
    """

    start: Position
    end: Position
    ring_radius: float


@dataclass
class LayoutResult:
    """Result of a layout operation.

    Attributes:
        groups: Nodes grouped by depth
        placements: Placements in depth then ring order
        connections: One connection per non-root placement, in the same order
        max_depth: Deepest depth present
        depth_spacing: Vertical distance between depth levels
    """

    groups: DepthGroups = field(default_factory=dict)
    placements: list[Placement] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    max_depth: int = 0
    depth_spacing: float = 4.0

    @property
    def is_empty(self) -> bool:
        return not self.placements


class LayoutEngine:
    """Engine for calculating 3D positions for tree nodes.

    Each depth level below the root forms one ring around the vertical
    axis. All nodes of a depth share the ring whatever their parent is,
    and connectors start on the axis rather than at the parent node.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        """Initialize the layout engine.

        Args:
            config: Layout configuration (uses defaults if None)
        """
        self.config = config or LayoutConfig()

    def depth_y(self, depth: int) -> float:
        """Vertical position of a depth level."""
        return 0.0 - depth * self.config.depth_spacing

    def ring_radius(self, depth: int) -> float:
        """Ring radius of a depth level (0 for the root)."""
        if depth <= 0:
            return 0.0
        return self.config.base_ring_radius + (depth - 1) * self.config.ring_radius_step

    @staticmethod
    def ring_angles(count: int) -> list[float]:
        """Evenly spaced angles for a ring of ``count`` nodes."""
        if count <= 0:
            return []
        step = (2 * math.pi) / count
        return [i * step for i in range(count)]

    def calculate_layout(self, root: TreeNode | None) -> LayoutResult:
        """Calculate the 3D layout for a tree.

        Args:
            root: Root node of the tree (None gives an empty result)

        Returns:
            LayoutResult containing placements and connections
        """
        groups = group_by_depth(root)
        result = LayoutResult(
            groups=groups,
            max_depth=max_depth(groups),
            depth_spacing=self.config.depth_spacing,
        )

        for depth in sorted(groups):
            nodes = groups[depth]
            if depth == 0:
                result.placements.append(self._place_root(nodes))
                continue

            radius = self.ring_radius(depth)
            y = self.depth_y(depth)
            parent_axis = Position(0.0, self.depth_y(depth - 1), 0.0)

            for index, (node, angle) in enumerate(zip(nodes, self.ring_angles(len(nodes)))):
                position = Position(math.cos(angle) * radius, y, math.sin(angle) * radius)
                result.placements.append(
                    Placement(
                        node=node,
                        depth=depth,
                        index=index,
                        angle=angle,
                        ring_radius=radius,
                        position=position,
                    )
                )
                result.connections.append(Connection(start=parent_axis, end=position, ring_radius=radius))

        return result

    def _place_root(self, nodes: list[TreeNode]) -> Placement:
        """Create the placement for the root node.

        Args:
            nodes: The depth 0 group

        Returns:
            Placement at the origin
        """
        if len(nodes) != 1:
            raise LayoutError(f"expected exactly one root node, got {len(nodes)}")
        return Placement(
            node=nodes[0],
            depth=0,
            index=0,
            angle=0.0,
            ring_radius=0.0,
            position=Position(0.0, 0.0, 0.0),
        )
