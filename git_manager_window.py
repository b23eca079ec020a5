import logging
import os
from typing import Optional

from PyQt6.QtGui import QAction, QGuiApplication
from PyQt6.QtWidgets import QFileDialog, QMainWindow, QMessageBox, QToolBar

from commit_graph_store import CommitGraphStore
from commit_history_view import CommitHistoryView
from git_manager import GitManager
from settings import settings


class GitManagerWindow(QMainWindow):
    def __init__(self, repo_path: Optional[str] = None):
        super().__init__()
        self.setWindowTitle(self.tr("Git Lanes"))

        # 窗口大小为屏幕可用区域的 80%
        screen = QGuiApplication.primaryScreen()
        if screen:
            geometry = screen.availableGeometry()
            self.setGeometry(
                geometry.x() + int(geometry.width() * 0.1),
                geometry.y() + int(geometry.height() * 0.1),
                int(geometry.width() * 0.8),
                int(geometry.height() * 0.8),
            )
        else:
            self.resize(1024, 768)

        self.settings = settings
        self.git_manager: Optional[GitManager] = None
        self.store: Optional[CommitGraphStore] = None

        self.history_view = CommitHistoryView(self.settings.get_graph_config())
        self.history_view.commit_selected.connect(self.on_commit_selected)
        self.setCentralWidget(self.history_view)

        self._create_toolbar()

        repo_path = repo_path or self.settings.get_last_repository()
        if repo_path:
            self.open_repository(repo_path)

    def _create_toolbar(self):
        toolbar = QToolBar(self.tr("Main"), self)
        self.addToolBar(toolbar)

        open_action = QAction(self.tr("打开仓库"), self)
        open_action.triggered.connect(self.choose_repository)
        toolbar.addAction(open_action)

        refresh_action = QAction(self.tr("刷新"), self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self.refresh)
        toolbar.addAction(refresh_action)

    def choose_repository(self):
        folder = QFileDialog.getExistingDirectory(self, self.tr("选择 Git 仓库"))
        if folder:
            self.open_repository(folder)

    def open_repository(self, repo_path: str) -> bool:
        """打开仓库并加载第一页提交"""
        repo_path = os.path.abspath(repo_path)
        git_manager = GitManager(repo_path)
        if not git_manager.initialize():
            QMessageBox.warning(self, self.tr("打开失败"), self.tr("不是有效的 Git 仓库：") + repo_path)
            return False

        logging.info("打开仓库：%s", repo_path)
        self._release_store()
        self.git_manager = git_manager
        self.store = CommitGraphStore(
            git_manager,
            page_size=self.settings.get_page_size(),
            search_page_size=self.settings.get_search_page_size(),
            config=self.settings.get_graph_config(),
            parent=self,
        )
        self.store.error_occurred.connect(self.show_error)
        self.history_view.set_store(self.store)
        self.store.fetch_commits()

        self.settings.set_last_repository(repo_path)
        self.setWindowTitle(f"Git Lanes - {os.path.basename(repo_path)}")
        return True

    def _release_store(self):
        """断开并释放上一个仓库的数据源"""
        if self.store is None:
            return
        self.store.error_occurred.disconnect(self.show_error)
        self.store.setParent(None)
        self.store.deleteLater()
        self.store = None

    def refresh(self):
        if self.store is not None:
            self.store.refresh()

    def show_error(self, message: str):
        self.statusBar().showMessage(message, 5000)

    def on_commit_selected(self, commit_hash: str):
        self.statusBar().showMessage(commit_hash, 3000)
