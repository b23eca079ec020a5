# git_graph_view.py

import html
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QColor, QPainter
from PyQt6.QtWidgets import (
    QApplication,
    QGraphicsScene,
    QGraphicsTextItem,
    QGraphicsView,
    QHBoxLayout,
    QLabel,
    QMenu,
    QWidget,
)

from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import CommitGraph, LegendEntry
from git_graph_edges import truncate_label
from git_graph_items import MAX_REFS_SHOWN, REF_PADDING_X, CommitCircle, CommitMessageItem, EdgeLine, RefBadge

# Distance from the bottom, in pixels, at which the next page is requested
LOAD_MORE_THRESHOLD = 200


class GitGraphView(QGraphicsView):
    commit_item_clicked = pyqtSignal(str)
    load_more_requested = pyqtSignal()

    def __init__(self, config: GraphConfig = DEFAULT_CONFIG, parent=None):
        super().__init__(parent)
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.config = config

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)  # Enable panning
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)  # Zoom towards mouse

        self.graph = CommitGraph()
        self._commit_items: dict[str, CommitCircle] = {}
        self._edge_items: list[EdgeLine] = []
        self._ref_badges: list[RefBadge] = []
        self._message_items: list[CommitMessageItem] = []

        self._zoom_factor_base = 1.1  # Base factor for zooming

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)
        self.verticalScrollBar().valueChanged.connect(self._on_scroll)

    def clear_graph(self):
        self.scene.clear()
        self.graph = CommitGraph()
        self._commit_items.clear()
        self._edge_items.clear()
        self._ref_badges.clear()
        self._message_items.clear()

    def set_graph(self, graph: CommitGraph, selected_commit: Optional[str] = None):
        """Replaces the scene content with a freshly computed graph."""
        scroll_value = self.verticalScrollBar().value()
        self.clear_graph()
        self.graph = graph
        if not graph.nodes:
            return

        # Text column starts right of the widest lane
        text_x = self.config.left_margin + graph.column_count * self.config.column_width

        for node in graph.nodes:
            commit_item = CommitCircle(node, self.config)
            self.scene.addItem(commit_item)
            self._commit_items[node.hash] = commit_item

            label_x = text_x
            for ref in node.commit.refs[:MAX_REFS_SHOWN]:
                badge = RefBadge(ref, node, self.config)
                badge.setPos(label_x, node.y - badge.boundingRect().height() / 2)
                self.scene.addItem(badge)
                self._ref_badges.append(badge)
                label_x += badge.boundingRect().width() + REF_PADDING_X
            hidden_refs = len(node.commit.refs) - MAX_REFS_SHOWN
            if hidden_refs > 0:
                more = QGraphicsTextItem(f"+{hidden_refs}")
                more.setDefaultTextColor(QColor("#71717a"))
                more.setPos(label_x, node.y - more.boundingRect().height() / 2)
                self.scene.addItem(more)
                label_x += more.boundingRect().width() + REF_PADDING_X

            message_item = CommitMessageItem(node)
            message_item.setPos(label_x, node.y - message_item.boundingRect().height() / 2)
            self.scene.addItem(message_item)
            self._message_items.append(message_item)

        for edge in graph.edges:
            edge_item = EdgeLine(edge, self.config)
            self.scene.addItem(edge_item)
            self._edge_items.append(edge_item)

        self.scene.setSceneRect(self.scene.itemsBoundingRect().adjusted(0, 0, 50, self.config.row_height))
        if selected_commit:
            self.select_commit(selected_commit, center=False)
        # Appending a page must not jump the view back to the top
        self.verticalScrollBar().setValue(scroll_value)

    def select_commit(self, commit_hash: Optional[str], center: bool = True):
        self.scene.clearSelection()
        item = self._commit_items.get(commit_hash) if commit_hash else None
        if item is None:
            return
        item.setSelected(True)
        if center:
            self.centerOn(item)

    def commit_item(self, commit_hash: str) -> Optional[CommitCircle]:
        return self._commit_items.get(commit_hash)

    def edge_items(self) -> list[EdgeLine]:
        return list(self._edge_items)

    def _on_scroll(self, value: int):
        scroll_bar = self.verticalScrollBar()
        if scroll_bar.maximum() > 0 and scroll_bar.maximum() - value < LOAD_MORE_THRESHOLD:
            self.load_more_requested.emit()

    def wheelEvent(self, event):
        """Handle mouse wheel events for zooming."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if event.angleDelta().y() > 0:
                self.zoom_in()
            else:
                self.zoom_out()
            event.accept()
        else:
            super().wheelEvent(event)

    def zoom_in(self):
        self.scale(self._zoom_factor_base, self._zoom_factor_base)

    def zoom_out(self):
        self.scale(1.0 / self._zoom_factor_base, 1.0 / self._zoom_factor_base)

    def keyPressEvent(self, event):
        """Ctrl +/= and Ctrl - zoom."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier and event.key() in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.zoom_in()
        elif event.modifiers() & Qt.KeyboardModifier.ControlModifier and event.key() == Qt.Key.Key_Minus:
            self.zoom_out()
        else:
            super().keyPressEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            item = self._commit_item_at(self.itemAt(event.pos()))
            if item is not None:
                self.commit_item_clicked.emit(item.commit_hash)
        super().mousePressEvent(event)

    @staticmethod
    def _commit_item_at(item) -> Optional[CommitCircle]:
        # The inner dot of a merge commit is a child of its CommitCircle
        while item is not None and not isinstance(item, CommitCircle):
            item = item.parentItem()
        return item

    def _show_context_menu(self, pos):
        """Show context menu for right-click on a commit circle."""
        item = self._commit_item_at(self.itemAt(pos))
        if item is None:
            return
        menu = QMenu(self)
        copy_action = QAction("Copy Commit", self)
        copy_action.triggered.connect(lambda: self._copy_commit_sha(item.commit_hash))
        menu.addAction(copy_action)
        menu.exec(self.viewport().mapToGlobal(pos))

    def _copy_commit_sha(self, sha):
        QApplication.clipboard().setText(sha)


class LegendWidget(QWidget):
    """Color swatch and branch name for every legend entry."""

    def __init__(self, config: GraphConfig = DEFAULT_CONFIG, parent=None):
        super().__init__(parent)
        self.config = config
        self.entries: list[LegendEntry] = []
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(4, 2, 4, 2)
        self._layout.setSpacing(8)
        self._labels: list[QLabel] = []

    def set_entries(self, entries):
        for label in self._labels:
            self._layout.removeWidget(label)
            label.deleteLater()
        self._labels = []
        self.entries = list(entries)

        for entry in self.entries:
            text = truncate_label(entry.label, self.config.max_label_chars)
            label = QLabel(f'<span style="color:{entry.color}">&#9679;</span> {html.escape(text)}')
            label.setToolTip(entry.label)
            self._layout.addWidget(label)
            self._labels.append(label)
        self.setVisible(bool(self.entries))

    def label_texts(self) -> list[str]:
        return [label.toolTip() for label in self._labels]
