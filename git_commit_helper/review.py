"""AI code review of staged changes and of remote GitHub / Gerrit changes."""

import logging

from git_commit_helper.ai import chat_with_fallback
from git_commit_helper.commit import is_auto_generated
from git_commit_helper.config import Config
from git_commit_helper.git import DiffProcessor, GitRepo
from git_commit_helper.prompts import build_commit_translation_prompt, build_review_prompt
from git_commit_helper.remote import RemoteError, github, gerrit

logger = logging.getLogger(__name__)


def should_skip_review(title: str) -> bool:
    """Merges, cherry-picks and reverts carry no new code worth reviewing."""
    return is_auto_generated(title)


def _review_diff(config: Config, diff: str) -> str:
    processed = DiffProcessor(config.max_diff_chars).process(diff)
    return chat_with_fallback(config, build_review_prompt(config.language), processed.text)


def review_changes(config: Config, repo: GitRepo, no_review: bool = False) -> str | None:
    if no_review:
        logger.info("Code review disabled by --no-review")
        return None
    if not config.ai_review:
        logger.info("AI review is disabled in config, enable it with: git-commit-helper ai-review --enable")
        return None

    diff = repo.staged_diff()
    if not diff.strip():
        logger.info("No staged changes to review")
        return None

    logger.info("Reviewing staged changes")
    return _review_diff(config, diff)


def _fetch_remote(config: Config, url: str) -> tuple[str, str]:
    """(commit message, diff) of a remote change. Pull requests have no message."""
    if "github.com" in url:
        target = github.parse_github_url(url)
        if target.kind == "pull":
            return "", github.get_pr_diff(url)
        return github.get_commit_info(url), github.get_commit_diff(url)
    if gerrit.is_gerrit_url(url):
        return gerrit.get_change_info(url, config), gerrit.get_change_diff(url, config)
    raise RemoteError(f"Unsupported URL, expected a GitHub or Gerrit link: {url}")


def review_remote_changes(config: Config, url: str) -> str:
    logger.debug("Reviewing remote change %s", url)
    message, diff = _fetch_remote(config, url)
    if not diff.strip():
        raise RemoteError("No code changes found")

    report = ""
    if message:
        if config.language != "en" and message.isascii():
            system, user = build_commit_translation_prompt(message)
            chinese = chat_with_fallback(config, system, user)
            report = f"提交信息：\n{message}\n\n中文翻译：\n{chinese}\n\n"
        elif config.language == "en":
            report = f"Commit message:\n{message}\n\n"
        else:
            report = f"提交信息：\n{message}\n\n"

    return report + _review_diff(config, diff)
