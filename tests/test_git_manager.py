import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import git  # Make sure 'gitpython' is installed in the test environment
from git import GitCommandError

from git_graph_layout import assign_lanes
from git_log_parser import is_reverse_topological
from git_manager import GitManager, GitManagerError


class GitRepoTestCase(unittest.TestCase):
    def setUp(self):
        self.repo_path = tempfile.mkdtemp()
        self.repo = git.Repo.init(self.repo_path)
        self.git_manager = GitManager(self.repo_path)
        self.git_manager.initialize()

    def tearDown(self):
        shutil.rmtree(self.repo_path)

    def commit_file(self, name, content, message, **kwargs):
        path = os.path.join(self.repo_path, name)
        with open(path, "w") as f:
            f.write(content)
        self.repo.index.add([name])
        return self.repo.index.commit(message, **kwargs)


class TestGitManagerRepository(GitRepoTestCase):
    def test_initialize_non_repository(self):
        plain_dir = tempfile.mkdtemp()
        try:
            manager = GitManager(plain_dir)
            with self.assertLogs(level="WARNING"):
                self.assertFalse(manager.initialize())
            self.assertIsNone(manager.repo)
        finally:
            shutil.rmtree(plain_dir)

    def test_missing_path(self):
        manager = GitManager(os.path.join(self.repo_path, "does-not-exist"))
        with self.assertLogs(level="WARNING"):
            self.assertFalse(manager.initialize())

    def test_uninitialized_manager_raises(self):
        manager = GitManager(self.repo_path)
        with self.assertRaises(GitManagerError):
            manager.get_graph_commits()

    def test_empty_repository_has_no_commits(self):
        self.assertEqual(self.git_manager.get_graph_commits(), [])

    def test_current_branch(self):
        self.commit_file("a.txt", "a", "Initial commit")
        self.assertEqual(self.git_manager.get_current_branch(), self.repo.active_branch.name)
        self.assertIn(self.repo.active_branch.name, self.git_manager.get_branches())

    def test_detached_head_has_no_branch(self):
        first = self.commit_file("a.txt", "a", "Initial commit")
        self.commit_file("a.txt", "b", "Second commit")
        self.repo.head.reference = first
        self.assertIsNone(self.git_manager.get_current_branch())

    def test_git_failure_raises(self):
        self.commit_file("a.txt", "a", "Initial commit")
        error = GitCommandError("git log", 128, stderr="fatal: something broke")
        # Git resolves commands through __getattr__ and uses __slots__, so the attribute has to be created on the class
        with patch.object(type(self.git_manager.repo.git), "log", create=True, side_effect=error):
            with self.assertRaises(GitManagerError) as ctx:
                self.git_manager.get_graph_commits()
        self.assertIn("something broke", str(ctx.exception))


class TestGitManagerHistory(GitRepoTestCase):
    """
    Builds:

        merge     (HEAD -> default branch)
        |  \\
        c2  f1    (feature, by Bob)
        |  /
        c1        (tag v1.0)
    """

    def setUp(self):
        super().setUp()
        self.c1 = self.commit_file("a.txt", "1", "Initial commit")
        self.c2 = self.commit_file("a.txt", "2", "Main work")
        self.f1 = self.commit_file(
            "b.txt",
            "feature",
            "Feature work",
            parent_commits=[self.c1],
            head=False,
            author=git.Actor("Bob Builder", "bob@example.com"),
        )
        self.repo.create_head("feature", self.f1)
        self.merge = self.commit_file("a.txt", "3", "Merge feature", parent_commits=[self.c2, self.f1])
        self.repo.create_tag("v1.0", ref=self.c1)

    def test_all_commits_in_topological_order(self):
        commits = self.git_manager.get_graph_commits()

        self.assertEqual(len(commits), 4)
        self.assertTrue(is_reverse_topological(commits))
        self.assertEqual(commits[0].hash, self.merge.hexsha)
        self.assertEqual(commits[0].parents, (self.c2.hexsha, self.f1.hexsha))
        self.assertEqual(commits[-1].hash, self.c1.hexsha)
        self.assertTrue(commits[-1].is_root)

    def test_fields(self):
        by_hash = {c.hash: c for c in self.git_manager.get_graph_commits()}
        branch = self.repo.active_branch.name

        self.assertIn(f"HEAD -> {branch}", by_hash[self.merge.hexsha].refs)
        self.assertIn("feature", by_hash[self.f1.hexsha].refs)
        self.assertIn("tag: v1.0", by_hash[self.c1.hexsha].refs)
        self.assertEqual(by_hash[self.f1.hexsha].author_name, "Bob Builder")
        self.assertEqual(by_hash[self.f1.hexsha].author_email, "bob@example.com")
        self.assertEqual(by_hash[self.c2.hexsha].message, "Main work")
        self.assertTrue(by_hash[self.c2.hexsha].date)

    def test_paging(self):
        full = self.git_manager.get_graph_commits(100)
        pages = []
        for skip in (0, 2, 4):
            pages.extend(self.git_manager.get_graph_commits(2, skip))

        self.assertEqual([c.hash for c in pages], [c.hash for c in full])
        self.assertEqual(len(self.git_manager.get_graph_commits(2, 0)), 2)
        self.assertEqual(self.git_manager.get_graph_commits(2, 4), [])

    def test_first_page_columns_survive_second_page(self):
        first_page = self.git_manager.get_graph_commits(2, 0)
        both_pages = first_page + self.git_manager.get_graph_commits(2, 2)

        first_lanes = assign_lanes(first_page)
        all_lanes = assign_lanes(both_pages)
        for sha, column in first_lanes.items():
            self.assertEqual(all_lanes[sha], column)

    def test_search_message(self):
        results = self.git_manager.search_commits("work")
        self.assertEqual({c.hash for c in results}, {self.c2.hexsha, self.f1.hexsha})
        # git grep is case sensitive
        results = self.git_manager.search_commits("feature")
        self.assertEqual([c.hash for c in results], [self.merge.hexsha])

    def test_search_author(self):
        results = self.git_manager.search_commits("Bob", search_in="author")
        self.assertEqual([c.hash for c in results], [self.f1.hexsha])

    def test_search_hash(self):
        results = self.git_manager.search_commits(self.c2.hexsha[:8], search_in="hash")
        self.assertEqual([c.hash for c in results], [self.c2.hexsha])

    def test_search_unknown_hash(self):
        self.assertEqual(self.git_manager.search_commits("0000000", search_in="hash"), [])
        self.assertEqual(self.git_manager.search_commits("0" * 40, search_in="hash"), [])

    def test_search_hash_of_non_commit(self):
        blob_sha = self.repo.git.rev_parse(f"{self.c1.hexsha}:a.txt")
        self.assertEqual(self.git_manager.search_commits(blob_sha, search_in="hash"), [])

    def test_search_full_hash(self):
        results = self.git_manager.search_commits(self.f1.hexsha, search_in="hash")
        self.assertEqual([c.hash for c in results], [self.f1.hexsha])

    def test_search_all_fields(self):
        results = self.git_manager.search_commits("Bob", search_in="all")
        # message and author must both match
        self.assertEqual(results, [])

    def test_search_max_count(self):
        self.assertEqual(len(self.git_manager.search_commits("work", max_count=1)), 1)

    def test_search_invalid_scope(self):
        with self.assertRaises(ValueError):
            self.git_manager.search_commits("x", search_in="file")


if __name__ == "__main__":
    unittest.main()
