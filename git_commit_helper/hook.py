"""commit-msg hook: installation and the work done when git runs it."""

import logging
import os
import shutil
import stat
import sys
from pathlib import Path

from git_commit_helper import NO_TRANSLATE_ENV, SKIP_REVIEW_ENV
from git_commit_helper.ai import translate_with_fallback
from git_commit_helper.commit import CommitMessage, MAX_LINE_LENGTH, contains_chinese, wrap_text
from git_commit_helper.config import APP_NAME, Config
from git_commit_helper.git import GitRepo
from git_commit_helper.interactive import confirm, select
from git_commit_helper.output import print_section
from git_commit_helper.review import review_changes, should_skip_review

logger = logging.getLogger(__name__)

HOOK_NAME = "commit-msg"
BACKUP_NAME = "commit-msg.old"

# git runs commit-msg with stdin closed; reattach the terminal for prompts
_TTY_LINE = 'if (true < /dev/tty) 2>/dev/null; then exec < /dev/tty; fi'


class HookError(Exception):
    """Raised when the hook cannot be installed."""
    pass


def hook_command() -> str:
    """Shell command that runs this tool, preferring the installed script."""
    exe = shutil.which(APP_NAME)
    if exe:
        return f'"{exe}"'
    return f'"{sys.executable}" -m git_commit_helper'


def create_hook_content(command: str, backup: Path | None = None, run_before: bool = True) -> str:
    lines = ["#!/bin/sh", f"# Installed by {APP_NAME}", _TTY_LINE, ""]
    if backup is None:
        lines.append(f'exec {command} hook "$1"')
    elif run_before:
        lines += [
            f'{command} hook "$1" || exit $?',
            "",
            f'if [ -x "{backup}" ]; then',
            f'    exec "{backup}" "$1"',
            "fi",
        ]
    else:
        lines += [
            f'if [ -x "{backup}" ]; then',
            f'    "{backup}" "$1" || exit $?',
            "fi",
            "",
            f'exec {command} hook "$1"',
        ]
    return "\n".join(lines) + "\n"


def install_git_hook(repo_path: str | Path | None = None, force: bool = False,
                     keep_old: bool | None = None, run_before: bool | None = None) -> Path:
    """Write .git/hooks/commit-msg and return its path.

    keep_old and run_before are asked interactively when left as None and an
    existing hook is being replaced.
    """
    repo = GitRepo(repo_path)
    hooks_dir = repo.hooks_dir()
    hook_path = hooks_dir / HOOK_NAME
    backup = None

    if hook_path.exists():
        if not force:
            raise HookError(f"Hook already exists: {hook_path}. Use --force to replace it.")
        print(f"Found an existing {HOOK_NAME} hook")
        if keep_old is None:
            keep_old = confirm("Keep the existing hook and run it as well?", default=True)
        if keep_old:
            backup = hooks_dir / BACKUP_NAME
            hook_path.replace(backup)
            print(f"Existing hook backed up to {backup}")
            if run_before is None:
                choice = select("Execution order", [
                    f"Run {APP_NAME} first, then the old hook",
                    f"Run the old hook first, then {APP_NAME}",
                ])
                run_before = choice != 1
        else:
            hook_path.unlink()

    hooks_dir.mkdir(parents=True, exist_ok=True)
    content = create_hook_content(hook_command(), backup, run_before is not False)
    hook_path.write_text(content, encoding='utf-8')
    hook_path.chmod(hook_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH | stat.S_IRUSR)
    logger.debug("Wrote hook:\n%s", content)
    return hook_path


def _translate_message(config: Config, msg: CommitMessage) -> CommitMessage:
    """English title/body first, then the original Chinese title/body."""
    en_title = translate_with_fallback(config, msg.title).strip().split('\n')[0]
    parts = []
    if msg.body:
        en_body = translate_with_fallback(config, msg.body)
        parts += [wrap_text(en_body.strip(), MAX_LINE_LENGTH), ""]
    parts.append(msg.title)
    if msg.body:
        parts += ["", wrap_text(msg.body, MAX_LINE_LENGTH)]
    return CommitMessage(title=en_title, body="\n".join(parts), marks=list(msg.marks))


def process_commit_msg(path: str | Path, config: Config, no_review: bool = False,
                       repo: GitRepo | None = None) -> bool:
    """Review the staged changes and translate a Chinese message in place.

    Returns True when the message file was rewritten.
    """
    path = Path(path)
    logger.debug("Processing commit message %s", path)
    msg = CommitMessage.parse(path.read_text(encoding='utf-8'))

    if should_skip_review(msg.title):
        logger.debug("Auto-generated commit message, nothing to do")
        return False

    if os.environ.get(SKIP_REVIEW_ENV):
        logger.debug("%s is set, skipping review", SKIP_REVIEW_ENV)
    else:
        report = review_changes(config, repo or GitRepo(), no_review)
        if report:
            print_section("AI Code Review", report)

    if not contains_chinese(msg.title):
        logger.debug("No Chinese in the title, skipping translation")
        return False
    if config.language == "zh" or os.environ.get(NO_TRANSLATE_ENV):
        logger.debug("Translation disabled")
        return False
    if not confirm("The commit message contains Chinese. Translate it?", default=True):
        return False

    logger.info("Translating commit message, default service %s", config.default_service)
    translated = _translate_message(config, msg)
    path.write_text(translated.format() + "\n", encoding='utf-8')
    logger.info("Commit message rewritten")
    return True
