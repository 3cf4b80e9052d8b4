"""GitHub pull requests and commits through the REST API."""

import json
import logging
import os
import re
from dataclasses import dataclass

from git_commit_helper.remote import RemoteError, http_get

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
TOKEN_ENV = "GITHUB_TOKEN"

GITHUB_URL_RE = re.compile(
    r'^https?://(?:www\.)?github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/'
    r'(?P<kind>pull|commit)/(?P<ident>[\w]+)'
)


@dataclass
class GitHubTarget:
    owner: str
    repo: str
    kind: str  # "pull" or "commit"
    ident: str

    @property
    def api_url(self) -> str:
        path = "pulls" if self.kind == "pull" else "commits"
        return f"{API_BASE}/repos/{self.owner}/{self.repo}/{path}/{self.ident}"


def parse_github_url(url: str) -> GitHubTarget:
    match = GITHUB_URL_RE.match(url.strip())
    if not match:
        raise RemoteError(f"Invalid GitHub URL, expected a pull request or commit link: {url}")
    return GitHubTarget(**match.groupdict())


def _headers(accept: str = "application/vnd.github.v3+json") -> dict:
    headers = {"Accept": accept}
    token = os.environ.get(TOKEN_ENV)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _get_json(url: str, label: str = "") -> dict:
    text = http_get(url, _headers(), label)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        raise RemoteError(f"Invalid JSON from {url}")


def _expect(url: str, kind: str) -> GitHubTarget:
    target = parse_github_url(url)
    if target.kind != kind:
        raise RemoteError(f"Not a GitHub {'pull request' if kind == 'pull' else 'commit'} URL: {url}")
    return target


def get_pr_diff(url: str) -> str:
    target = _expect(url, "pull")
    pr = _get_json(target.api_url, "Requesting github.com for pull request")
    diff_url = pr.get('diff_url')
    if not diff_url:
        raise RemoteError(f"Pull request has no diff_url: {url}")
    return http_get(diff_url, _headers(), "Requesting github.com for pull request diff")


def get_commit_info(url: str) -> str:
    """Full message of a commit."""
    target = _expect(url, "commit")
    data = _get_json(target.api_url, "Requesting github.com for commit")
    return (data.get('commit') or {}).get('message', '')


def get_commit_diff(url: str) -> str:
    target = _expect(url, "commit")
    return http_get(target.api_url, _headers("application/vnd.github.v3.diff"),
                    "Requesting github.com for commit diff")
