"""Scene composition for the radial concept tree.

Turns a layout into host primitives: one marker and one label per
node, and a curved connector (thin line plus glowing tube) for every
non-root node. Primitives are built once per tree and afterwards only
moved by the frame update until the scene is torn down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from pyktree.errors import GraphicsContextUnavailable, validate_positive, validate_range
from pyktree.layout.engine import Connection, LayoutConfig, LayoutEngine, LayoutResult, Placement
from pyktree.model.node import TreeNode
from pyktree.view.confidence import confidence_tier, hex_to_rgba, tier_color
from pyktree.view.geometry import quadratic_bezier, tube_mesh
from pyktree.view.host import GraphicsHost
from pyktree.view.labels import render_label
from pyktree.view.primitives import CurvePrimitive, LabelPrimitive, MarkerPrimitive, Primitive, TubePrimitive

logger = logging.getLogger(__name__)

CONNECTOR_LINE_COLOR = hex_to_rgba("#1976d299")  # Blue, 60% opacity
CONNECTOR_TUBE_COLOR = hex_to_rgba("#42a5f54d")  # Light blue, 30% opacity
CONNECTOR_TUBE_EMISSIVE = hex_to_rgba("#1976d2")[:3]


@dataclass
class SceneConfig:
    """Configuration for scene composition.

    Attributes:
        node_radius: Marker radius for non-root nodes
        root_scale: Root marker radius multiplier
        root_segments: Root marker tessellation
        node_segments: Non-root marker tessellation
        root_emissive: Root marker self-illumination
        node_emissive: Non-root marker self-illumination
        root_label_offset: Height of the root label above its marker
        label_offset: Height of other labels above their markers
        root_label_size: World-space root label (width, height)
        label_size: World-space label (width, height)
        root_font_size: Root label font size in logical pixels
        font_size: Label font size in logical pixels
        label_canvas: Logical label canvas (width, height)
        pixel_ratio: Label pixel ratio (None asks the host)
        curve_segments: Segments sampled along each connector
        line_width: Connector line width in pixels
        tube_radius: Connector tube radius
        tube_radial_segments: Vertices around the connector tube
        connector_jitter: Control point jitter as a fraction of ring radius
        seed: Seed for connector jitter (None for fresh randomness)
    """

    node_radius: float = 0.12
    root_scale: float = 1.8
    root_segments: int = 64
    node_segments: int = 32
    root_emissive: float = 0.3
    node_emissive: float = 0.25
    root_label_offset: float = 1.0
    label_offset: float = 0.5
    root_label_size: tuple[float, float] = (2.0, 0.5)
    label_size: tuple[float, float] = (1.5, 0.4)
    root_font_size: int = 32
    font_size: int = 24
    label_canvas: tuple[int, int] = (512, 128)
    pixel_ratio: float | None = None
    curve_segments: int = 20
    line_width: float = 2.0
    tube_radius: float = 0.02
    tube_radial_segments: int = 8
    connector_jitter: float = 0.3
    seed: int | None = None

    def __post_init__(self) -> None:
        validate_positive(self.node_radius, "node_radius")
        validate_positive(self.root_scale, "root_scale")
        validate_range(self.node_segments, 3, 256, "node_segments")
        validate_range(self.root_segments, 3, 256, "root_segments")
        validate_range(self.curve_segments, 1, 1000, "curve_segments")
        validate_range(self.tube_radial_segments, 3, 64, "tube_radial_segments")
        validate_range(self.connector_jitter, 0.0, 1.0, "connector_jitter")
        if self.pixel_ratio is not None:
            validate_positive(self.pixel_ratio, "pixel_ratio")


@dataclass(eq=False)
class SceneNode:
    """Runtime state of one node in the scene.

    Attributes:
        source_node: Tree node this scene node renders
        marker: Marker primitive
        label: Label primitive
        rest_position: Layout position before interactive rotation
        current_position: Position after the latest frame update
        label_offset: Label height above the marker
        base_label_size: Label size as built
        base_emissive: Marker emissive tint as built
        base_emissive_intensity: Marker emissive intensity as built
    """

    source_node: TreeNode
    marker: MarkerPrimitive
    label: LabelPrimitive
    rest_position: np.ndarray
    current_position: np.ndarray
    label_offset: float
    base_label_size: tuple[float, float]
    base_emissive: tuple[float, float, float]
    base_emissive_intensity: float

    @property
    def name(self) -> str:
        return self.source_node.name


@dataclass(eq=False)
class Connector:
    """Curved connector from the vertical axis to a node.

    Attributes:
        connection: Layout connection it was built from
        control_point: Control point of the quadratic curve
        points: Sampled curve points in rest space
        line: Thin translucent line primitive
        tube: Glowing tube primitive
    """

    connection: Connection
    control_point: np.ndarray
    points: np.ndarray
    line: CurvePrimitive
    tube: TubePrimitive


@dataclass(eq=False)
class SceneHandle:
    """Handle owning every primitive of one built scene.

    Tearing down releases all host resources and is idempotent. The
    handle is also a context manager that tears down on exit.
    """

    host: GraphicsHost
    layout: LayoutResult
    nodes: list[SceneNode] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)
    _primitives: list[Primitive] = field(default_factory=list, repr=False)
    _by_marker: dict[int, SceneNode] = field(default_factory=dict, repr=False)
    _torn_down: bool = False

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def max_depth(self) -> int:
        return self.layout.max_depth

    @property
    def primitives(self) -> list[Primitive]:
        """Every primitive acquired for this scene, in creation order."""
        return list(self._primitives)

    @property
    def markers(self) -> list[MarkerPrimitive]:
        return [n.marker for n in self.nodes]

    def acquire(self, primitive: Primitive) -> Primitive:
        """Take ownership of a primitive created by the host."""
        self._primitives.append(primitive)
        return primitive

    def add_node(self, scene_node: SceneNode) -> None:
        self.nodes.append(scene_node)
        self._by_marker[id(scene_node.marker)] = scene_node

    def node_for_marker(self, marker: MarkerPrimitive) -> SceneNode | None:
        """Find the scene node owning a marker."""
        return self._by_marker.get(id(marker))

    def find_by_name(self, name: str) -> SceneNode | None:
        """Find the first scene node with the given name."""
        for scene_node in self.nodes:
            if scene_node.name == name:
                return scene_node
        return None

    def teardown(self) -> None:
        """Release all host resources. Safe to call more than once.

        Every primitive gets a release attempt even if some fail. The
        first failure is re-raised afterwards and the primitives that
        failed stay owned, so calling again retries them.
        """
        if self._torn_down:
            return

        self._by_marker.clear()
        self.nodes.clear()
        self.connectors.clear()

        first_error: Exception | None = None
        failed: list[Primitive] = []
        released = 0
        for primitive in reversed(self._primitives):
            if primitive.released:
                continue
            try:
                self.host.release(primitive)
            except Exception as e:
                logger.error(f"Failed to release {type(primitive).__name__}: {e}")
                failed.append(primitive)
                if first_error is None:
                    first_error = e
            else:
                released += 1

        failed.reverse()
        self._primitives = failed
        if first_error is not None:
            logger.warning(f"Scene teardown incomplete, {len(failed)} primitives still held")
            raise first_error

        self._torn_down = True
        logger.info(f"Scene torn down, released {released} primitives")

    def __enter__(self) -> SceneHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


class SceneComposer:
    """Builds scene primitives for a tree through a graphics host."""

    def __init__(
        self,
        host: GraphicsHost,
        config: SceneConfig | None = None,
        layout_config: LayoutConfig | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            host: Graphics host that creates the primitives
            config: Scene configuration (uses defaults if None)
            layout_config: Layout configuration (uses defaults if None)
        """
        self.host = host
        self.config = config or SceneConfig()
        self.layout_engine = LayoutEngine(layout_config)

    def build(self, tree: TreeNode | None) -> SceneHandle:
        """Build all primitives for a tree.

        Primitives acquired before a failure are released before the
        error propagates.

        Args:
            tree: Root node (None builds an empty scene)

        Returns:
            SceneHandle owning the primitives

        Raises:
            GraphicsContextUnavailable: If the host has no surface
        """
        if not self.host.is_available():
            raise GraphicsContextUnavailable("host surface is not available")

        layout = self.layout_engine.calculate_layout(tree)
        handle = SceneHandle(host=self.host, layout=layout)
        if layout.is_empty:
            logger.info("Empty tree, nothing to build")
            return handle

        rng = np.random.default_rng(self.config.seed)
        pixel_ratio = self.config.pixel_ratio or self.host.pixel_ratio()

        try:
            for placement in layout.placements:
                handle.add_node(self._build_node(handle, placement, pixel_ratio))
            for connection in layout.connections:
                handle.connectors.append(self._build_connector(handle, connection, rng))
        except BaseException:
            try:
                handle.teardown()
            except Exception as e:
                logger.error(f"Cleanup after failed build was incomplete: {e}")
            raise

        logger.info(
            f"Built scene for '{tree.name}': {len(handle.nodes)} nodes, "
            f"{len(handle.connectors)} connectors, max depth {layout.max_depth}"
        )
        self.host.request_update()
        return handle

    def _build_node(self, handle: SceneHandle, placement: Placement, pixel_ratio: float) -> SceneNode:
        """Create the marker and label for one placement."""
        cfg = self.config
        node = placement.node
        color = tier_color(confidence_tier(node.principles))
        emissive = color[:3]

        if placement.is_root:
            radius = cfg.node_radius * cfg.root_scale
            segments = cfg.root_segments
            intensity = cfg.root_emissive
            label_offset = cfg.root_label_offset
            label_size = cfg.root_label_size
            font_size = cfg.root_font_size
            stroke = 2
        else:
            radius = cfg.node_radius
            segments = cfg.node_segments
            intensity = cfg.node_emissive
            label_offset = cfg.label_offset
            label_size = cfg.label_size
            font_size = cfg.font_size
            stroke = 1

        rest = placement.position.as_array()
        marker = handle.acquire(
            self.host.create_marker(
                position=rest.copy(),
                radius=radius,
                segments=segments,
                color=color,
                emissive=emissive,
                emissive_intensity=intensity,
            )
        )

        image = render_label(
            node.name,
            font_size=font_size,
            pixel_ratio=pixel_ratio,
            canvas_size=cfg.label_canvas,
            stroke_width=stroke,
        )
        label = handle.acquire(
            self.host.create_label(
                image=image,
                position=rest + np.array([0.0, label_offset, 0.0]),
                size=label_size,
            )
        )
        logger.debug(f"Built node '{node.name}' at depth {placement.depth}")

        return SceneNode(
            source_node=node,
            marker=marker,
            label=label,
            rest_position=rest,
            current_position=rest.copy(),
            label_offset=label_offset,
            base_label_size=label_size,
            base_emissive=emissive,
            base_emissive_intensity=intensity,
        )

    def control_point(self, connection: Connection, rng: np.random.Generator) -> np.ndarray:
        """Pick the curve control point for a connector.

        The midpoint between axis and node, pulled down by the jitter
        distance and nudged sideways by a random amount bounded by it.
        """
        start = connection.start.as_array()
        end = connection.end.as_array()
        jitter = connection.ring_radius * self.config.connector_jitter
        mid_y = (start[1] + end[1]) / 2

        return np.array(
            [
                end[0] * 0.5 + (rng.random() - 0.5) * jitter,
                mid_y - jitter,
                end[2] * 0.5 + (rng.random() - 0.5) * jitter,
            ]
        )

    def _build_connector(self, handle: SceneHandle, connection: Connection, rng: np.random.Generator) -> Connector:
        """Create the line and tube for one connection."""
        cfg = self.config
        control = self.control_point(connection, rng)
        points = quadratic_bezier(
            connection.start.as_array(),
            control,
            connection.end.as_array(),
            segments=cfg.curve_segments,
        )

        line = handle.acquire(self.host.create_curve(points, CONNECTOR_LINE_COLOR, cfg.line_width))
        vertices, normals, indices = tube_mesh(points, cfg.tube_radius, cfg.tube_radial_segments)
        tube = handle.acquire(
            self.host.create_tube(
                vertices,
                normals,
                indices,
                CONNECTOR_TUBE_COLOR,
                CONNECTOR_TUBE_EMISSIVE,
                0.2,
            )
        )
        return Connector(connection=connection, control_point=control, points=points, line=line, tube=tube)


def build_scene(
    tree: TreeNode | None,
    host: GraphicsHost,
    config: SceneConfig | None = None,
    layout_config: LayoutConfig | None = None,
) -> SceneHandle:
    """Construct all primitives for a tree.

    Raises:
        GraphicsContextUnavailable: If the host has no surface
    """
    return SceneComposer(host, config, layout_config).build(tree)


def teardown_scene(handle: SceneHandle | None) -> None:
    """Release all resources of a scene. Idempotent."""
    if handle is not None:
        handle.teardown()
