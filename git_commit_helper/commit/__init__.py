"""Commit Message Package"""

from git_commit_helper.commit.message import (
    CommitMessage,
    MAX_LINE_LENGTH,
    clean_ai_response,
    contains_chinese,
    ensure_commit_type,
    format_commit_message,
    is_auto_generated,
    wrap_text,
)
from git_commit_helper.commit.issues import issue_marks, parse_issue_reference

__all__ = [
    "CommitMessage",
    "MAX_LINE_LENGTH",
    "clean_ai_response",
    "contains_chinese",
    "ensure_commit_type",
    "format_commit_message",
    "is_auto_generated",
    "wrap_text",
    "issue_marks",
    "parse_issue_reference",
]
