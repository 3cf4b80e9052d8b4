"""Git Operations Package"""

from git_commit_helper.git.analyzer import GitRepo, GitError
from git_commit_helper.git.diff_processor import DiffProcessor, ProcessedDiff

__all__ = [
    "GitRepo",
    "GitError",
    "DiffProcessor",
    "ProcessedDiff",
]
