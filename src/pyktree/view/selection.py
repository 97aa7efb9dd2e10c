"""Selection emphasis for scene nodes."""

from pyktree.view.confidence import hex_to_rgba
from pyktree.view.scene import SceneHandle, SceneNode

EMPHASIS_TINT = hex_to_rgba("#444444")[:3]


class SelectionPresenter:
    """Applies visual emphasis to the selected node.

    Selection is matched by node name, so nodes sharing a name are all
    emphasised together.
    """

    def __init__(self, emphasis_scale: float = 1.5, emphasis_tint: tuple[float, float, float] = EMPHASIS_TINT) -> None:
        self.emphasis_scale = emphasis_scale
        self.emphasis_tint = emphasis_tint
        self._selected_name: str | None = None

    @property
    def selected_name(self) -> str | None:
        return self._selected_name

    def apply(self, scene: SceneHandle | None, selected_name: str | None) -> list[SceneNode]:
        """Emphasise nodes matching the selection and reset the rest.

        Args:
            scene: Scene to update (None or torn down does nothing)
            selected_name: Name of the selected node, None to clear

        Returns:
            Scene nodes that are now emphasised
        """
        self._selected_name = selected_name
        if scene is None or scene.is_torn_down:
            return []

        emphasised = []
        for scene_node in scene.nodes:
            if selected_name is not None and scene_node.name == selected_name:
                self._emphasise(scene_node)
                emphasised.append(scene_node)
            else:
                self._reset(scene_node)

        scene.host.request_update()
        return emphasised

    def _emphasise(self, scene_node: SceneNode) -> None:
        w, h = scene_node.base_label_size
        scene_node.marker.emissive = self.emphasis_tint
        scene_node.marker.emissive_intensity = 1.0
        scene_node.marker.scale = self.emphasis_scale
        scene_node.label.size = (w * self.emphasis_scale, h * self.emphasis_scale)

    def _reset(self, scene_node: SceneNode) -> None:
        scene_node.marker.emissive = scene_node.base_emissive
        scene_node.marker.emissive_intensity = scene_node.base_emissive_intensity
        scene_node.marker.scale = 1.0
        scene_node.label.size = scene_node.base_label_size
