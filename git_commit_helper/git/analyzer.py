"""Git Repository Wrapper - thin layer over the git command line."""

import logging
import os
import re
import subprocess
from pathlib import Path

from git_commit_helper import SKIP_REVIEW_ENV, NO_TRANSLATE_ENV

logger = logging.getLogger(__name__)

GITHUB_REMOTE_RE = re.compile(r'github\.com[:/](?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?/?$')


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitRepo:
    """Runs git commands inside one repository."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else Path.cwd()
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str, input_text: str | None = None, env: dict | None = None) -> str:
        """Run a git command and return stdout."""
        logger.debug("Running: git %s", ' '.join(args))
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=self.path,
                input=input_text,
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                env={**os.environ, **env} if env else None,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{(e.stderr or '').strip()}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError(f"Not inside a git repository: {self.path}")

    def hooks_dir(self) -> Path:
        hooks = Path(self._run_git('rev-parse', '--git-path', 'hooks').strip())
        return hooks if hooks.is_absolute() else (self.path / hooks).resolve()

    def staged_diff(self) -> str:
        return self._run_git('diff', '--cached')

    def last_commit_diff(self) -> str:
        """Patch introduced by HEAD, used in amend mode."""
        return self._run_git('show', '--format=', '--no-color', 'HEAD')

    def last_commit_message(self) -> str:
        return self._run_git('log', '-1', '--format=%B').strip()

    def add_tracked(self) -> None:
        """Stage modifications of tracked files (git add -u)."""
        self._run_git('add', '-u')

    def commit(self, message: str, amend: bool = False) -> str:
        args = ['commit', '-F', '-']
        if amend:
            args.append('--amend')
        # The message is final; keep an installed hook from processing it again
        env = {SKIP_REVIEW_ENV: "1", NO_TRANSLATE_ENV: "1"}
        return self._run_git(*args, input_text=message, env=env)

    def remote_url(self, name: str = 'origin') -> str | None:
        try:
            return self._run_git('config', '--get', f'remote.{name}.url').strip() or None
        except GitError:
            return None

    def current_github_repo(self) -> str | None:
        """owner/repo of the origin remote when it points at GitHub."""
        url = self.remote_url()
        if not url:
            return None
        match = GITHUB_REMOTE_RE.search(url)
        if not match:
            return None
        return f"{match.group('owner')}/{match.group('repo')}"
