"""Main controller for the application.

Coordinates between the Model, Layout and View layers: owns the
current scene, routes renderer input to the interaction controller
and drives the frame clock.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QEvent, QObject, Qt, QTimer, pyqtSignal

from pyktree.controller.input_handler import InteractionConfig, InteractionController
from pyktree.layout.engine import LayoutConfig
from pyktree.model.node import TreeNode, tree_stats
from pyktree.view.main_window import MainWindow
from pyktree.view.scene import SceneComposer, SceneConfig, SceneHandle, teardown_scene
from pyktree.view.selection import SelectionPresenter

logger = logging.getLogger(__name__)

# ~60 frames per second
FRAME_INTERVAL_MS = 16


class Controller(QObject):
    """Main application controller.

    Manages the loaded tree and its scene and coordinates between layers.
    """

    # Signals for UI updates
    scene_loaded = pyqtSignal(int)  # Emits node count
    node_selected = pyqtSignal(object)  # Emits selected TreeNode or None
    interaction_changed = pyqtSignal(bool)  # Emits True while dragging

    def __init__(
        self,
        tree: TreeNode | None,
        source: Path | None = None,
        scene_config: SceneConfig | None = None,
        layout_config: LayoutConfig | None = None,
        interaction_config: InteractionConfig | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            tree: Tree to show once the rendering surface is ready
            source: Document the tree was loaded from
            scene_config: Scene configuration (uses defaults if None)
            layout_config: Layout configuration (uses defaults if None)
            interaction_config: Interaction configuration (uses defaults if None)
        """
        super().__init__()

        self._tree = tree
        self._scene: SceneHandle | None = None

        # Create main window
        self._window = MainWindow(source)
        self._renderer = self._window.renderer

        self._composer = SceneComposer(self._renderer, scene_config, layout_config)
        self._interaction = InteractionController(self._renderer, interaction_config)
        self._selection = SelectionPresenter()

        # Frame clock
        self._frame_timer = QTimer()
        self._frame_timer.timeout.connect(self._on_frame)

        self._connect_signals()

        # Install event filters on renderer and window
        self._renderer.installEventFilter(self)
        self._window.installEventFilter(self)

    def _connect_signals(self) -> None:
        """Connect internal signals and interaction callbacks."""
        self._interaction.set_node_selected_callback(self._on_node_picked)
        self._interaction.set_interaction_changed_callback(self._on_interaction_changed)

        self.node_selected.connect(self._window.show_node)

    # Public API

    @property
    def window(self) -> MainWindow:
        return self._window

    @property
    def scene(self) -> SceneHandle | None:
        """Get the currently displayed scene."""
        return self._scene

    @property
    def interaction(self) -> InteractionController:
        return self._interaction

    def start(self) -> None:
        """Start the application - build the scene once GL is ready."""
        if self._renderer.is_available():
            self.load_tree(self._tree)
        else:
            self._renderer.context_ready.connect(self._on_context_ready)
        self._frame_timer.start(FRAME_INTERVAL_MS)

    def show(self) -> None:
        """Show the main window."""
        self._window.show()

    def load_tree(self, tree: TreeNode | None) -> None:
        """Replace the displayed tree.

        The old scene is detached and released before the new one is
        built, so no frame ever draws a mix of both.

        Args:
            tree: New tree (None shows an empty scene)

        Raises:
            GraphicsContextUnavailable: If the renderer has no surface yet
        """
        self._interaction.unbind()
        teardown_scene(self._scene)
        self._scene = None
        self._tree = tree

        scene = self._composer.build(tree)
        self._scene = scene
        self._interaction.bind(scene)
        self._selection.apply(scene, None)
        self.node_selected.emit(None)

        stats = tree_stats(tree)
        self._window.update_stats(stats)
        logger.info(
            f"Loaded tree: {stats.total_nodes} nodes, {stats.total_principles} principles, "
            f"{stats.levels} levels, average confidence {stats.avg_confidence:.2f}"
        )
        self.scene_loaded.emit(len(scene.nodes))

    def select_node(self, name: str | None) -> TreeNode | None:
        """Select a node by name, as from an external list.

        Args:
            name: Node name, None to clear the selection

        Returns:
            The selected node, or None if nothing matched
        """
        node = None
        if name is not None and self._scene is not None:
            scene_node = self._scene.find_by_name(name)
            if scene_node is not None:
                node = scene_node.source_node

        self._selection.apply(self._scene, node.name if node else None)
        self.node_selected.emit(node)
        return node

    def shutdown(self) -> None:
        """Stop the frame clock and release the scene."""
        self._frame_timer.stop()
        self._interaction.unbind()
        teardown_scene(self._scene)
        self._scene = None

    # Event filtering

    def eventFilter(self, obj, event) -> bool:
        """Filter events from the renderer and the window.

        Args:
            obj: Object sending the event
            event: Event object

        Returns:
            True if event was handled
        """
        if obj == self._renderer:
            event_type = event.type()

            if event_type == QEvent.Type.MouseButtonPress:
                if event.button() != Qt.MouseButton.LeftButton:
                    return False
                pos = event.position()
                self._interaction.pointer_down(pos.x(), pos.y(), self._renderer.width(), self._renderer.height())
                return True
            elif event_type == QEvent.Type.MouseMove:
                pos = event.position()
                return self._interaction.pointer_move(pos.x(), pos.y())
            elif event_type == QEvent.Type.MouseButtonRelease:
                return self._interaction.pointer_up()
            elif event_type == QEvent.Type.Wheel:
                # Qt reports positive when scrolling up
                handled = self._interaction.wheel(-event.angleDelta().y())
                event.accept()
                return handled

        elif obj == self._window and event.type() == QEvent.Type.Close:
            self.shutdown()

        return super().eventFilter(obj, event)

    # Callbacks

    def _on_context_ready(self) -> None:
        self._renderer.context_ready.disconnect(self._on_context_ready)
        self.load_tree(self._tree)

    def _on_node_picked(self, node: TreeNode) -> None:
        self._selection.apply(self._scene, node.name)
        self.node_selected.emit(node)

    def _on_interaction_changed(self, dragging: bool) -> None:
        cursor = Qt.CursorShape.ClosedHandCursor if dragging else Qt.CursorShape.ArrowCursor
        self._renderer.setCursor(cursor)
        self.interaction_changed.emit(dragging)

    def _on_frame(self) -> None:
        """Advance one animation frame."""
        self._interaction.apply_frame()
        self._renderer.update()
