"""Tests for the commit-msg hook."""

import os
import stat

import pytest

from git_commit_helper import hook, interactive
from git_commit_helper.config import Config, ServiceConfig
from git_commit_helper.hook import (
    HookError,
    create_hook_content,
    install_git_hook,
    process_commit_msg,
)


class TestHookContent:

    def test_plain(self):
        content = create_hook_content('"/usr/bin/git-commit-helper"')
        assert content.startswith("#!/bin/sh\n")
        assert "exec < /dev/tty" in content
        assert content.rstrip().endswith('exec "/usr/bin/git-commit-helper" hook "$1"')

    def test_run_before_old_hook(self, tmp_path):
        backup = tmp_path / "commit-msg.old"
        content = create_hook_content("gch", backup, run_before=True)
        assert content.index('gch hook "$1" || exit $?') < content.index(f'exec "{backup}" "$1"')

    def test_run_after_old_hook(self, tmp_path):
        backup = tmp_path / "commit-msg.old"
        content = create_hook_content("gch", backup, run_before=False)
        assert content.index(f'"{backup}" "$1" || exit $?') < content.index('exec gch hook "$1"')

    def test_hook_command_falls_back_to_module(self, monkeypatch):
        monkeypatch.setattr(hook.shutil, "which", lambda name: None)
        assert hook.hook_command().endswith('" -m git_commit_helper')


class TestInstall:

    def test_fresh_install(self, git_repo):
        path = install_git_hook(git_repo)
        assert path == git_repo / ".git" / "hooks" / "commit-msg"
        assert os.stat(path).st_mode & stat.S_IXUSR
        assert ' hook "$1"' in path.read_text()

    def test_existing_hook_needs_force(self, git_repo):
        existing = git_repo / ".git" / "hooks" / "commit-msg"
        existing.parent.mkdir(exist_ok=True)
        existing.write_text("#!/bin/sh\necho old\n")
        with pytest.raises(HookError, match="--force"):
            install_git_hook(git_repo)
        assert existing.read_text() == "#!/bin/sh\necho old\n"

    def test_force_replaces(self, git_repo):
        existing = git_repo / ".git" / "hooks" / "commit-msg"
        existing.parent.mkdir(exist_ok=True)
        existing.write_text("#!/bin/sh\necho old\n")
        install_git_hook(git_repo, force=True, keep_old=False)
        assert "echo old" not in existing.read_text()
        assert not (existing.parent / "commit-msg.old").exists()

    def test_force_keeps_old_hook(self, git_repo):
        existing = git_repo / ".git" / "hooks" / "commit-msg"
        existing.parent.mkdir(exist_ok=True)
        existing.write_text("#!/bin/sh\necho old\n")
        install_git_hook(git_repo, force=True, keep_old=True, run_before=False)

        backup = existing.parent / "commit-msg.old"
        assert backup.read_text() == "#!/bin/sh\necho old\n"
        content = existing.read_text()
        assert content.index(str(backup)) < content.index(' hook "$1"')

    def test_asks_when_not_told(self, git_repo, monkeypatch):
        existing = git_repo / ".git" / "hooks" / "commit-msg"
        existing.parent.mkdir(exist_ok=True)
        existing.write_text("#!/bin/sh\n")
        monkeypatch.setattr(hook, "confirm", lambda *a, **kw: True)
        monkeypatch.setattr(hook, "select", lambda *a, **kw: 0)
        install_git_hook(git_repo, force=True)
        assert (existing.parent / "commit-msg.old").exists()


@pytest.fixture
def config():
    config = Config(ai_review=False)
    config.add_service(ServiceConfig(service="deepseek", api_key="sk"))
    return config


@pytest.fixture
def translator(monkeypatch):
    """Fake translation: returns canned English for the known Chinese inputs."""
    answers = {
        "feat: 添加用户登录": "feat: add user login",
        "- 支持邮箱登录": "- support email login",
    }
    calls = []

    def fake_translate(config, text):
        calls.append(text)
        return answers[text]

    monkeypatch.setattr(hook, "translate_with_fallback", fake_translate)
    monkeypatch.setattr(hook, "confirm", lambda *a, **kw: True)
    return calls


class TestProcessCommitMsg:

    def test_translates_chinese_message(self, tmp_path, config, translator):
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n\n- 支持邮箱登录\n\nChange-Id: I123\n"
                            "# Please enter the commit message\n", encoding='utf-8')

        assert process_commit_msg(msg_file, config, repo=object())
        assert msg_file.read_text(encoding='utf-8') == (
            "feat: add user login\n"
            "\n"
            "- support email login\n"
            "\n"
            "feat: 添加用户登录\n"
            "\n"
            "- 支持邮箱登录\n"
            "\n"
            "Change-Id: I123\n"
        )

    def test_title_only(self, tmp_path, config, translator):
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n", encoding='utf-8')
        process_commit_msg(msg_file, config, repo=object())
        assert msg_file.read_text(encoding='utf-8') == "feat: add user login\n\nfeat: 添加用户登录\n"

    def test_english_message_untouched(self, tmp_path, config, translator):
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("fix: handle empty input\n")
        assert not process_commit_msg(msg_file, config, repo=object())
        assert msg_file.read_text() == "fix: handle empty input\n"
        assert translator == []

    def test_merge_skipped(self, tmp_path, config, translator, monkeypatch):
        monkeypatch.setattr(hook, "review_changes", lambda *a, **kw: pytest.fail("reviewed a merge"))
        msg_file = tmp_path / "MERGE_MSG"
        msg_file.write_text("Merge branch '功能' into main\n", encoding='utf-8')
        assert not process_commit_msg(msg_file, config, repo=object())
        assert translator == []

    def test_no_translate_env(self, tmp_path, config, translator, monkeypatch):
        monkeypatch.setenv("GIT_COMMIT_HELPER_NO_TRANSLATE", "1")
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n", encoding='utf-8')
        assert not process_commit_msg(msg_file, config, repo=object())
        assert translator == []

    def test_chinese_only_language(self, tmp_path, config, translator):
        config.language = "zh"
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n", encoding='utf-8')
        assert not process_commit_msg(msg_file, config, repo=object())

    def test_declined(self, tmp_path, config, translator, monkeypatch):
        monkeypatch.setattr(hook, "confirm", lambda *a, **kw: False)
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n", encoding='utf-8')
        assert not process_commit_msg(msg_file, config, repo=object())
        assert msg_file.read_text(encoding='utf-8') == "feat: 添加用户登录\n"

    def test_ctrl_c_leaves_message(self, tmp_path, config, translator, monkeypatch):
        def interrupt(prompt=""):
            raise KeyboardInterrupt
        monkeypatch.setattr(hook, "confirm", interactive.confirm)
        monkeypatch.setattr("builtins.input", interrupt)
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("feat: 添加用户登录\n", encoding='utf-8')
        with pytest.raises(KeyboardInterrupt):
            process_commit_msg(msg_file, config, repo=object())
        assert msg_file.read_text(encoding='utf-8') == "feat: 添加用户登录\n"
        assert translator == []

    def test_review_printed(self, tmp_path, config, translator, monkeypatch, capsys):
        monkeypatch.setattr(hook, "review_changes", lambda config, repo, no_review: "代码审查报告：\n没问题")
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("fix: handle empty input\n")
        process_commit_msg(msg_file, config, repo=object())
        assert "没问题" in capsys.readouterr().out

    def test_skip_review_env(self, tmp_path, config, translator, monkeypatch):
        monkeypatch.setenv("GIT_COMMIT_HELPER_SKIP_REVIEW", "1")
        monkeypatch.setattr(hook, "review_changes", lambda *a, **kw: pytest.fail("review ran"))
        msg_file = tmp_path / "COMMIT_EDITMSG"
        msg_file.write_text("fix: handle empty input\n")
        process_commit_msg(msg_file, config, repo=object())
