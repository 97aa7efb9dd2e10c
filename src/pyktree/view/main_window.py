"""Main application window for pyktree.

Hosts the 3D renderer, a details dock for the selected concept and
a status bar with tree statistics.
"""

import html
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QDockWidget, QLabel, QMainWindow, QStatusBar, QTextEdit

from pyktree.model.node import TreeNode, TreeStats
from pyktree.view.renderer import Renderer


class MainWindow(QMainWindow):
    """Main window for the pyktree application."""

    def __init__(self, source: Path | None = None) -> None:
        """Initialize main window.

        Args:
            source: Tree document being shown (used for the title)
        """
        super().__init__()

        self._source = source
        self._renderer: Renderer | None = None
        self._details: QTextEdit | None = None
        self._stats_label: QLabel | None = None

        self._setup_ui()

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        title = f"pyktree - {self._source.name}" if self._source else "pyktree"
        self.setWindowTitle(title)
        self.resize(1200, 800)

        self._renderer = Renderer(self)
        self.setCentralWidget(self._renderer)

        # Details of the selected concept
        self._details = QTextEdit()
        self._details.setReadOnly(True)
        self._details.setStyleSheet("background: #1e1e1e; color: #e0e0e0; padding: 6px;")
        dock = QDockWidget("Principles", self)
        dock.setWidget(self._details)
        dock.setAllowedAreas(Qt.DockWidgetArea.RightDockWidgetArea | Qt.DockWidgetArea.LeftDockWidgetArea)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, dock)

        # Status bar
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._stats_label = QLabel()
        self._status_bar.addPermanentWidget(self._stats_label)
        self._status_bar.showMessage("Drag to rotate, scroll to move through levels, click a node to select it")

    @property
    def renderer(self) -> Renderer:
        """Get the renderer widget."""
        return self._renderer

    def update_stats(self, stats: TreeStats) -> None:
        """Update statistics display.

        Args:
            stats: Statistics of the loaded tree
        """
        self._stats_label.setText(
            f"Nodes: {stats.total_nodes}  Principles: {stats.total_principles}  "
            f"Levels: {stats.levels}  Avg confidence: {stats.avg_confidence:.0%}"
        )

    def show_node(self, node: TreeNode | None) -> None:
        """Show the principles of a selected node.

        Args:
            node: Selected node, or None to clear the panel
        """
        if node is None:
            self._details.clear()
            return

        parts = [f"<h3>{html.escape(node.name)}</h3>", f"<p>Depth {node.depth}, {len(node.principles)} principles</p>"]
        for principle in sorted(node.principles, key=lambda p: p.confidence, reverse=True):
            parts.append(
                f"<p><b>{html.escape(principle.title)}</b> "
                f"<i>({html.escape(principle.category.value)}, {principle.confidence:.0%})</i><br>"
                f"{html.escape(principle.description)}</p>"
            )
        self._details.setHtml("".join(parts))
        self.set_status_message(f"Selected: {node.name}")

    def set_status_message(self, message: str) -> None:
        """Set status bar message.

        Args:
            message: Message to display
        """
        self._status_bar.showMessage(message)
