# git_log_parser.py

import logging
from typing import Sequence

from git_graph_data import Commit

# Delimiters for parsing git log output
FIELD_SEP = "\x01"
ENTRY_SEP = "\x02"

# Git log format string
# %H: commit hash
# %P: parent hashes (space separated)
# %D: decorations without the surrounding parentheses
# %an: author name
# %ae: author email
# %ad: author date (ISO 8601 strict)
# %s: subject
GIT_LOG_FORMAT = f"%H{FIELD_SEP}%P{FIELD_SEP}%D{FIELD_SEP}%an{FIELD_SEP}%ae{FIELD_SEP}%ad{FIELD_SEP}%s{ENTRY_SEP}"
FIELD_COUNT = 7


def parse_references(raw_refs: str) -> tuple[str, ...]:
    """
    Parses the decoration string from git log %D.
    Example: "HEAD -> main, tag: v1.1, origin/master, master"
    Output: ('HEAD -> main', 'tag: v1.1', 'origin/master', 'master')
    """
    raw_refs = raw_refs.strip()
    # %d style output is wrapped in " (...)"
    if raw_refs.startswith("(") and raw_refs.endswith(")"):
        raw_refs = raw_refs[1:-1]
    return tuple(ref.strip() for ref in raw_refs.split(",") if ref.strip())


def parse_log_output(log_output: str) -> list[Commit]:
    """Parses `git log --format=GIT_LOG_FORMAT` output into commits, keeping git's order."""
    commits: list[Commit] = []
    if not log_output.strip():
        return commits

    for entry in log_output.split(ENTRY_SEP):
        # git puts a newline between entries
        entry = entry.strip("\n")
        if not entry.strip():
            continue

        parts = entry.split(FIELD_SEP)
        if len(parts) < FIELD_COUNT:
            logging.warning("Skipping malformed log entry: %r", entry[:80])
            continue

        sha, parent_hashes, raw_refs, author_name, author_email, author_date, subject = parts[:FIELD_COUNT]
        commits.append(
            Commit(
                hash=sha.strip(),
                parents=tuple(parent_hashes.split()),
                refs=parse_references(raw_refs),
                message=subject,
                author_name=author_name,
                author_email=author_email,
                date=author_date,
            )
        )

    return commits


def find_order_violations(commits: Sequence[Commit]) -> list[tuple[str, str]]:
    """
    Returns (parent, child) pairs where the parent is listed before its child.

    The layout expects children before parents; an empty result means the list can be
    laid out as is.
    """
    position = {commit.hash: index for index, commit in enumerate(commits)}
    violations = []
    for index, commit in enumerate(commits):
        for parent in commit.parents:
            parent_index = position.get(parent)
            if parent_index is not None and parent_index <= index:
                violations.append((parent, commit.hash))
    return violations


def is_reverse_topological(commits: Sequence[Commit]) -> bool:
    return not find_order_violations(commits)
