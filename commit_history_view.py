import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from commit_graph_store import CommitGraphStore
from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import CommitGraph
from git_graph_view import GitGraphView, LegendWidget

# 搜索范围：显示文本 -> search_in 参数
SEARCH_SCOPES = [("提交信息", "message"), ("作者", "author"), ("提交号", "hash"), ("全部", "all")]


class CommitHistoryView(QWidget):
    commit_selected = pyqtSignal(str)  # 当选择提交时发出信号

    def __init__(self, config: GraphConfig = DEFAULT_CONFIG, parent=None):
        super().__init__(parent)
        self.config = config
        self.store: Optional[CommitGraphStore] = None
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout()
        layout.setContentsMargins(5, 5, 5, 5)
        self.setLayout(layout)

        # 搜索框
        search_layout = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("搜索提交历史...")
        self.search_edit.returnPressed.connect(self.run_search)
        search_layout.addWidget(self.search_edit)

        self.scope_combo = QComboBox()
        for text, _ in SEARCH_SCOPES:
            self.scope_combo.addItem(text)
        search_layout.addWidget(self.scope_combo)

        # 清除按钮，默认隐藏
        self.clear_button = QPushButton("清除")
        self.clear_button.clicked.connect(self.clear_search)
        self.clear_button.setMaximumWidth(60)
        self.clear_button.setVisible(False)
        search_layout.addWidget(self.clear_button)
        layout.addLayout(search_layout)

        self.legend_widget = LegendWidget(self.config)
        self.legend_widget.setVisible(False)
        layout.addWidget(self.legend_widget)

        self.graph_view = GitGraphView(self.config)
        self.graph_view.commit_item_clicked.connect(self.on_commit_clicked)
        self.graph_view.load_more_requested.connect(self.load_more_commits)
        layout.addWidget(self.graph_view)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def set_store(self, store: CommitGraphStore):
        """绑定提交图数据源，并立即显示其当前结果"""
        if self.store is not None:
            self.store.graph_changed.disconnect(self.on_graph_changed)
            self.store.loading_changed.disconnect(self.on_loading_changed)
            self.store.error_occurred.disconnect(self.on_error)
        self.store = store
        store.graph_changed.connect(self.on_graph_changed)
        store.loading_changed.connect(self.on_loading_changed)
        store.error_occurred.connect(self.on_error)
        self.on_graph_changed(store.graph)

    def load_more_commits(self):
        """滚动到底部时自动加载更多"""
        if self.store is not None and not self.store.is_search_result:
            self.store.load_more_commits()

    def run_search(self):
        if self.store is None:
            return
        query = self.search_edit.text().strip()
        self.clear_button.setVisible(bool(query))
        search_in = SEARCH_SCOPES[self.scope_combo.currentIndex()][1]
        self.store.search_commits(query, search_in)

    def clear_search(self):
        """清除搜索框并恢复完整历史"""
        self.search_edit.clear()
        self.clear_button.setVisible(False)
        if self.store is not None:
            self.store.fetch_commits()

    def on_graph_changed(self, graph: CommitGraph):
        selected = self.store.selected_commit if self.store else None
        self.graph_view.set_graph(graph, selected)
        self.legend_widget.set_entries(graph.legend)
        if not graph.nodes:
            self.status_label.setText("没有提交")
        elif self.store is not None and self.store.has_more:
            self.status_label.setText(f"已加载 {len(graph)} 个提交，滚动加载更多")
        else:
            self.status_label.setText(f"共 {len(graph)} 个提交")

    def on_loading_changed(self, loading: bool):
        if loading:
            self.status_label.setText("加载中...")

    def on_error(self, message: str):
        logging.debug("CommitHistoryView: %s", message)
        self.status_label.setText(f"加载失败：{message}")

    def on_commit_clicked(self, commit_hash: str):
        if self.store is not None:
            self.store.select_commit(commit_hash)
        self.commit_selected.emit(commit_hash)
