import logging
from typing import List, Optional

import git
import git.exc
from git import GitCommandError

from git_graph_data import Commit
from git_log_parser import GIT_LOG_FORMAT, parse_log_output

SEARCH_FIELDS = ("message", "author", "hash", "all")


class GitManagerError(Exception):
    """Git 命令执行失败"""


class GitManager:
    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None

    def initialize(self) -> bool:
        """初始化 Git 仓库"""
        try:
            self.repo = git.Repo(self.repo_path)
            return True
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            logging.warning("GitManager: '%s' 不是 Git 仓库", self.repo_path)
            self.repo = None
            return False

    def _require_repo(self) -> git.Repo:
        if not self.repo:
            raise GitManagerError("Repository not initialized.")
        return self.repo

    def get_branches(self) -> List[str]:
        """获取所有本地分支"""
        if not self.repo:
            return []
        return [branch.name for branch in self.repo.branches]

    def get_current_branch(self) -> Optional[str]:
        """获取当前检出的分支，HEAD 游离或仓库为空时返回 None"""
        if not self.repo:
            return None
        try:
            return self.repo.active_branch.name
        except TypeError:
            # detached HEAD
            return None

    def _run_log(self, *args: str) -> List[Commit]:
        repo = self._require_repo()
        try:
            output = repo.git.log(*args, "--date=iso-strict", f"--format={GIT_LOG_FORMAT}")
        except GitCommandError as e:
            if not repo.head.is_valid():
                # 空仓库，还没有任何提交
                return []
            error_message = f"git log failed: {e!s}"
            if hasattr(e, "stderr") and e.stderr:
                error_message += f"\nDetails: {e.stderr.strip()}"
            raise GitManagerError(error_message) from e
        return parse_log_output(output)

    def get_graph_commits(self, max_count: int = 100, skip: int = 0) -> List[Commit]:
        """获取提交图所需的提交列表 (所有分支，拓扑顺序)

        参数：
            max_count: 每页最大提交数量（默认为 100）
            skip: 跳过的提交数量，用于“加载更多”（默认为 0）
        """
        args = ["--all", "--topo-order", f"--max-count={max_count}"]
        if skip > 0:
            args.append(f"--skip={skip}")

        logging.info("GitManager: 获取提交图 (最大数量：%d, 跳过：%d)", max_count, skip)
        commits = self._run_log(*args)
        logging.debug("GitManager: 获取到 %d 个提交", len(commits))
        return commits

    def search_commits(self, query: str, search_in: str = "message", max_count: int = 50) -> List[Commit]:
        """搜索提交

        参数：
            query: 搜索关键字
            search_in: 搜索范围 'message' | 'author' | 'hash' | 'all'
            max_count: 返回的最大提交数量（默认为 50）
        """
        if search_in not in SEARCH_FIELDS:
            raise ValueError(f"search_in must be one of {SEARCH_FIELDS}, got {search_in!r}")

        args = ["--topo-order", f"--max-count={max_count}"]
        if search_in == "message":
            args.append(f"--grep={query}")
        elif search_in == "author":
            args.append(f"--author={query}")
        elif search_in == "hash":
            repo = self._require_repo()
            try:
                commit = repo.commit(query)
                # 完整的 40 位提交号不会被 repo.commit() 检查，需要确认对象存在
                repo.git.cat_file("-e", f"{commit.hexsha}^{{commit}}")
            except (ValueError, git.exc.BadName, git.exc.BadObject, GitCommandError):
                # 不是有效的提交号，按“无结果”处理
                return []
            args.extend(["--no-walk", query])
        else:
            args.extend([f"--grep={query}", f"--author={query}", "--all-match"])
        if search_in != "hash":
            args.append("--all")

        logging.info("GitManager: 搜索提交 '%s' (范围：%s)", query, search_in)
        return self._run_log(*args)
