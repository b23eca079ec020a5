import logging
from typing import TYPE_CHECKING, Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from git_graph_config import DEFAULT_CONFIG, GraphConfig
from git_graph_data import Commit, CommitGraph
from git_graph_layout import build_commit_graph
from git_log_parser import find_order_violations
from git_manager import GitManagerError

if TYPE_CHECKING:
    from git_manager import GitManager


class CommitGraphStore(QObject):
    """已加载的提交列表及其提交图

    每次列表变化 (首次加载、加载更多、搜索、刷新) 都从头重新计算提交图，
    并通过 graph_changed 信号传给视图。
    """

    graph_changed = pyqtSignal(object)  # CommitGraph
    loading_changed = pyqtSignal(bool)
    error_occurred = pyqtSignal(str)
    selection_changed = pyqtSignal(str)  # 提交号，取消选择时为空字符串

    def __init__(
        self,
        git_manager: "GitManager",
        page_size: int = 100,
        search_page_size: int = 50,
        config: GraphConfig = DEFAULT_CONFIG,
        parent=None,
    ):
        super().__init__(parent)
        self.git_manager = git_manager
        self.page_size = page_size
        self.search_page_size = search_page_size
        self.config = config

        self.commits: List[Commit] = []
        self.current_branch: Optional[str] = None
        self.graph = CommitGraph()
        self.selected_commit: Optional[str] = None
        self.is_loading = False
        self.has_more = True
        self.is_search_result = False
        self.error: Optional[str] = None

    def fetch_commits(self):
        """加载第一页提交 (首次加载或刷新)"""
        page = self._request(lambda: self.git_manager.get_graph_commits(self.page_size, 0))
        if page is None:
            return
        self.current_branch = self.git_manager.get_current_branch()
        self.is_search_result = False
        self.has_more = len(page) >= self.page_size
        self._set_commits(page)

    def refresh(self):
        """手动刷新，保留仍然可见的选中提交"""
        self.fetch_commits()
        if self.selected_commit and self.graph.node(self.selected_commit) is None:
            self.select_commit(None)

    def load_more_commits(self):
        """加载下一页更早的提交，追加到列表末尾"""
        if self.is_loading or not self.has_more:
            return
        skip = len(self.commits)
        page = self._request(lambda: self.git_manager.get_graph_commits(self.page_size, skip))
        if page is None:
            return
        self.has_more = len(page) >= self.page_size
        if page:
            self._set_commits(self.commits + page)

    def search_commits(self, query: str, search_in: str = "message"):
        """用搜索结果替换当前列表，关键字为空时恢复完整历史"""
        if not query.strip():
            self.fetch_commits()
            return
        results = self._request(lambda: self.git_manager.search_commits(query, search_in, self.search_page_size))
        if results is None:
            return
        self.is_search_result = True
        self.has_more = False
        self._set_commits(results)

    def select_commit(self, commit_hash: Optional[str]):
        if commit_hash == self.selected_commit:
            return
        self.selected_commit = commit_hash
        self.selection_changed.emit(commit_hash or "")

    def reset(self):
        self.commits = []
        self.current_branch = None
        self.selected_commit = None
        self.is_loading = False
        self.has_more = True
        self.is_search_result = False
        self.error = None
        self.graph = CommitGraph()
        self.graph_changed.emit(self.graph)

    def _request(self, call: Callable[[], List[Commit]]) -> Optional[List[Commit]]:
        """执行一次 Git 请求，失败时记录错误并返回 None，已加载的列表保持不变"""
        self.is_loading = True
        self.loading_changed.emit(True)
        try:
            result = call()
            self.error = None
            return result
        except GitManagerError as e:
            logging.error("加载提交失败：%s", e)
            self.error = str(e)
            self.error_occurred.emit(self.error)
            return None
        finally:
            self.is_loading = False
            self.loading_changed.emit(False)

    def _set_commits(self, commits: List[Commit]):
        violations = find_order_violations(commits)
        if violations:
            parent, child = violations[0]
            logging.warning(
                "提交列表不是拓扑顺序 (%d 处)，例如 %s 排在其子提交 %s 之前", len(violations), parent[:7], child[:7]
            )
        self.commits = commits
        self.graph = build_commit_graph(commits, self.current_branch, self.config)
        self.graph_changed.emit(self.graph)
