# git_graph_items.py

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsTextItem

from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import Edge, EdgeKind, GraphNode
from git_graph_edges import normalize_ref_label, truncate_label

SELECTED_OUTLINE_COLOR = QColor("#ffffff")
HOVER_COMMIT_COLOR = QColor(Qt.GlobalColor.lightGray)

SECONDARY_EDGE_OPACITY = 0.7
TRUNCATED_EDGE_OPACITY = 0.5
MERGE_RADIUS_BONUS = 2

REF_PADDING_X = 4
REF_PADDING_Y = 2
MAX_REFS_SHOWN = 3
REF_COLOR_HEAD = QColor("#00d9ff")
REF_COLOR_TAG = QColor("#fbbf24")
REF_COLOR_REMOTE = QColor("#a855f7")

# Configuration for CommitMessageItem
COMMIT_MSG_MAX_LENGTH = 50
COMMIT_MSG_COLOR = QColor("#444444")
COMMIT_MSG_FONT_FAMILY = "Arial"
COMMIT_MSG_FONT_SIZE = 9


class CommitCircle(QGraphicsEllipseItem):
    """Commit dot. Merge commits are drawn as a ring around a smaller dot."""

    def __init__(self, node: GraphNode, config: GraphConfig = DEFAULT_CONFIG, parent: QGraphicsItem = None):
        radius = config.node_radius + (MERGE_RADIUS_BONUS if node.commit.is_merge else 0)
        super().__init__(-radius, -radius, 2 * radius, 2 * radius, parent)
        self.node = node
        self.radius = radius
        self.base_color = QColor(node.color)

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable, True)
        self.setAcceptHoverEvents(True)
        self.setPos(node.x, node.y)

        if node.commit.is_merge:
            self.setBrush(QBrush(Qt.BrushStyle.NoBrush))
            self.setPen(QPen(self.base_color, 2))
            inner_radius = radius - 3
            self.inner_dot = QGraphicsEllipseItem(-inner_radius, -inner_radius, 2 * inner_radius, 2 * inner_radius, self)
            self.inner_dot.setBrush(QBrush(self.base_color))
            self.inner_dot.setPen(QPen(Qt.PenStyle.NoPen))
        else:
            self.inner_dot = None
            self.setBrush(QBrush(self.base_color))
            self.setPen(QPen(Qt.GlobalColor.transparent, 2))

        commit = node.commit
        self.setToolTip(
            f"SHA: {commit.hash}\n"
            f"Author: {commit.author_name} <{commit.author_email}>\n"
            f"Date: {commit.date}\n"
            f"Message: {commit.message}"
        )

    @property
    def commit_hash(self) -> str:
        return self.node.hash

    def itemChange(self, change, value):
        if change == QGraphicsItem.GraphicsItemChange.ItemSelectedChange and not self.node.commit.is_merge:
            outline = SELECTED_OUTLINE_COLOR if value else QColor(Qt.GlobalColor.transparent)
            self.setPen(QPen(outline, 2))
        return super().itemChange(change, value)

    def hoverEnterEvent(self, event):
        if not self.isSelected() and self.inner_dot is None:
            self.setBrush(QBrush(HOVER_COMMIT_COLOR))
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        if self.inner_dot is None:
            self.setBrush(QBrush(self.base_color))
        super().hoverLeaveEvent(event)


def build_edge_path(edge: Edge, config: GraphConfig = DEFAULT_CONFIG) -> QPainterPath:
    """Path from the bottom of the child dot to the top of the parent dot."""
    node = edge.from_node
    radius = config.node_radius
    x, start_y = node.x, node.y + radius
    path = QPainterPath()
    path.moveTo(x, start_y)

    if edge.kind is EdgeKind.TRUNCATED or edge.to_node is None:
        # Short stub: more history exists below the loaded window
        path.lineTo(x, node.y + config.row_height)
        return path

    parent_x = edge.to_node.x
    end_y = edge.to_node.y - radius

    if edge.kind is EdgeKind.STRAIGHT:
        path.lineTo(parent_x, end_y)
    elif edge.kind is EdgeKind.FORK:
        # Drop down, swing over to the parent's lane, continue down into the parent
        mid_y = (start_y + end_y) / 2
        path.lineTo(x, mid_y - 10)
        path.cubicTo(QPointF(x, mid_y + 10), QPointF(parent_x, mid_y - 10), QPointF(parent_x, mid_y + 10))
        path.lineTo(parent_x, end_y)
    else:
        control_offset = abs(parent_x - x) * 0.5
        path.cubicTo(
            QPointF(x, start_y + control_offset),
            QPointF(parent_x, end_y - control_offset),
            QPointF(parent_x, end_y),
        )
    return path


class EdgeLine(QGraphicsPathItem):
    def __init__(self, edge: Edge, config: GraphConfig = DEFAULT_CONFIG, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.edge = edge

        pen = QPen(
            QColor(edge.color_hint),
            config.line_width,
            Qt.PenStyle.SolidLine,
            Qt.PenCapStyle.RoundCap,
            Qt.PenJoinStyle.RoundJoin,
        )
        if edge.kind is EdgeKind.TRUNCATED:
            pen.setStyle(Qt.PenStyle.DashLine)
            self.setOpacity(TRUNCATED_EDGE_OPACITY)
        elif not edge.is_primary:
            self.setOpacity(SECONDARY_EDGE_OPACITY)
        self.setPen(pen)
        self.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        self.setZValue(-1)  # Draw edges behind commits

        self.setPath(build_edge_path(edge, config))


def ref_badge_color(ref: str, node_color: str) -> QColor:
    if "HEAD" in ref:
        return REF_COLOR_HEAD
    if ref.startswith("tag:") or "refs/tags/" in ref:
        return REF_COLOR_TAG
    if "origin/" in ref or "refs/remotes/" in ref:
        return REF_COLOR_REMOTE
    return QColor(node_color)


class RefBadge(QGraphicsTextItem):
    def __init__(self, ref: str, node: GraphNode, config: GraphConfig = DEFAULT_CONFIG, parent: QGraphicsItem = None):
        label = normalize_ref_label(ref) or ref
        super().__init__(truncate_label(label, config.max_label_chars), parent)
        self.ref = ref
        self.is_head = "HEAD" in ref
        self.color = ref_badge_color(ref, node.color)

        self.setFont(QFont("Arial", 8))
        self.setDefaultTextColor(self.color)
        if label != self.toPlainText():
            self.setToolTip(label)

    def paint(self, painter, option, widget=None):
        background = QColor(self.color)
        background.setAlphaF(0.2)
        painter.setBrush(QBrush(background))
        if self.is_head:
            border = QColor(self.color)
            border.setAlphaF(0.5)
            painter.setPen(QPen(border, 1))
        else:
            painter.setPen(QPen(Qt.PenStyle.NoPen))
        painter.drawRoundedRect(self.boundingRect(), 3, 3)
        super().paint(painter, option, widget)

    def boundingRect(self) -> QRectF:
        # Adjust bounding rect to include padding for background drawing
        rect = super().boundingRect()
        rect.adjust(-REF_PADDING_X, -REF_PADDING_Y, REF_PADDING_X, REF_PADDING_Y)
        return rect


class CommitMessageItem(QGraphicsTextItem):
    def __init__(self, node: GraphNode, parent: QGraphicsItem = None):
        super().__init__(parent)
        commit = node.commit
        full_message = commit.message

        # Truncate message for display
        if len(full_message) > COMMIT_MSG_MAX_LENGTH:
            display_text = full_message[:COMMIT_MSG_MAX_LENGTH] + "..."
        else:
            display_text = full_message
        suffix = "  merge" if commit.is_merge else ""
        self.setPlainText(f"{display_text}   {commit.short_hash}  {commit.author_name}{suffix}")

        self.setFont(QFont(COMMIT_MSG_FONT_FAMILY, COMMIT_MSG_FONT_SIZE))
        self.setDefaultTextColor(COMMIT_MSG_COLOR)

        if display_text != full_message:
            self.setToolTip(f"Full message: {full_message}")
