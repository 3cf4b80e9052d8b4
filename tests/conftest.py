"""Shared fixtures: isolated config files, fake HTTP and throwaway git repos."""

import io
import json
import shutil
import subprocess
import urllib.request

import pytest

from git_commit_helper.config import Config, ConfigManager, ServiceConfig


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Never touch the real config or inherit hook switches from the shell."""
    monkeypatch.setenv("GIT_COMMIT_HELPER_CONFIG", str(tmp_path / "config" / "config.json"))
    for name in ("GIT_COMMIT_HELPER_SKIP_REVIEW", "GIT_COMMIT_HELPER_NO_TRANSLATE",
                 "GIT_COMMIT_HELPER_LOG", "GITHUB_TOKEN",
                 "GERRIT_USERNAME", "GERRIT_PASSWORD", "GERRIT_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def manager(tmp_path):
    return ConfigManager(tmp_path / "config" / "config.json")


@pytest.fixture
def configured():
    """Config with DeepSeek as default and OpenAI as fallback."""
    config = Config()
    config.add_service(ServiceConfig(service="deepseek", api_key="sk-deepseek"))
    config.add_service(ServiceConfig(service="openai", api_key="sk-openai"))
    return config


class FakeResponse:
    def __init__(self, body):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        self._data = body.encode('utf-8')

    def read(self):
        return self._data

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Replace urlopen; queue answers (or exceptions) and inspect sent requests.

    Usage:
        fake_urlopen.answers.append({"choices": [...]})
        ... code under test ...
        fake_urlopen.requests[0].full_url
    """
    class Recorder:
        def __init__(self):
            self.answers = []
            self.requests = []
            self.timeouts = []

        def __call__(self, req, timeout=None):
            self.requests.append(req)
            self.timeouts.append(timeout)
            answer = self.answers.pop(0)
            if isinstance(answer, BaseException):
                raise answer
            return FakeResponse(answer)

        def json_body(self, index=-1):
            return json.loads(self.requests[index].data.decode('utf-8'))

    recorder = Recorder()
    monkeypatch.setattr(urllib.request, "urlopen", recorder)
    return recorder


def http_error(url, code, body=""):
    import urllib.error
    return urllib.error.HTTPError(url, code, "error", {}, io.BytesIO(body.encode('utf-8')))


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """An empty git repository with an identity, as the working directory."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    for key, value in {
        "GIT_AUTHOR_NAME": "Test", "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test", "GIT_COMMITTER_EMAIL": "test@example.com",
    }.items():
        monkeypatch.setenv(key, value)
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    subprocess.run(["git", "config", "commit.gpgsign", "false"], cwd=repo, check=True)
    monkeypatch.chdir(repo)
    return repo


def git(repo, *args):
    return subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True).stdout


@pytest.fixture
def typed(monkeypatch):
    """Answer input() prompts with the given lines; EOF once they run out.

    Usage:
        typed("2", "y")
    """
    def feed(*lines):
        answers = iter(lines)

        def fake_input(prompt=""):
            try:
                return next(answers)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

    return feed
