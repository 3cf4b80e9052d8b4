"""
Tests for terminal output: file lists, message boxes and report sections.

Run with -s to see what the terminal shows:
    pytest tests/test_display.py -v -s
"""

import re
import sys

import pytest

from git_commit_helper.cli.utils import display_file_list, display_message, edit_message
from git_commit_helper.git import ProcessedDiff
from git_commit_helper.output import display_width, print_box, print_progress, print_section

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_ansi():
    """Return a function that removes ANSI escape codes."""
    def _strip(text: str) -> str:
        return ANSI_RE.sub('', text)
    return _strip


@pytest.fixture
def make_processed():
    """Return a factory that builds a ProcessedDiff from file lists."""
    def _make(files, filtered=(), omitted=()):
        return ProcessedDiff(
            text="",
            files=list(files),
            filtered_files=list(filtered),
            omitted_files=list(omitted),
            truncated=bool(omitted),
        )
    return _make


# ---------------------------------------------------------------------------
# File list display
# ---------------------------------------------------------------------------

class TestDisplayFileList:
    """Output from display_file_list()."""

    def test_small_list_shows_all(self, capsys, make_processed):
        display_file_list(make_processed(["src/validator.py", "tests/test_validator.py"]))
        out = capsys.readouterr().out

        assert "Changes:" in out
        assert "src/validator.py" in out
        assert "tests/test_validator.py" in out
        assert "..." not in out

    def test_large_list_collapses(self, capsys, make_processed):
        """14 files - first 10 shown, rest collapsed."""
        display_file_list(make_processed([f"src/mod_{i}.py" for i in range(14)]))
        out = capsys.readouterr().out

        assert "src/mod_9.py" in out
        assert "src/mod_10.py" not in out
        assert "... and 4 more files" in out

    def test_filtered_and_omitted_counts(self, capsys, make_processed):
        display_file_list(make_processed(["app.py"], filtered=["poetry.lock"], omitted=["big.sql", "huge.sql"]))
        out = capsys.readouterr().out

        assert "1 generated files left out" in out
        assert "2 files omitted" in out

    def test_empty_prints_nothing(self, capsys, make_processed):
        display_file_list(make_processed([]))
        assert capsys.readouterr().out == ""


# ---------------------------------------------------------------------------
# Commit message display
# ---------------------------------------------------------------------------

class TestDisplayMessage:
    """Output from display_message()."""

    def test_title_with_body(self, capsys, strip_ansi):
        msg = (
            "feat(auth): add token refresh\n"
            "\n"
            "- refresh the token before it expires"
        )
        display_message(msg)
        out = strip_ansi(capsys.readouterr().out)

        assert "feat(auth): add token refresh" in out
        assert "- refresh the token before it expires" in out
        assert "title: feat(auth): add token refresh" in out

    def test_box_edges_line_up_with_chinese(self, capsys, strip_ansi):
        print_box("fix: 修复登录\nplain line")
        lines = [line for line in strip_ansi(capsys.readouterr().out).split("\n") if line]

        widths = {display_width(line) for line in lines}
        assert len(widths) == 1

    def test_long_lines_wrapped(self, capsys, strip_ansi):
        print_box("- " + "word " * 40)
        lines = [line for line in strip_ansi(capsys.readouterr().out).split("\n") if line]
        assert len(lines) > 3


# ---------------------------------------------------------------------------
# Reports and progress
# ---------------------------------------------------------------------------

class TestSections:

    def test_section_between_rules(self, capsys, strip_ansi):
        print_section("AI Code Review", "代码审查报告：\n没有发现问题\n")
        lines = strip_ansi(capsys.readouterr().out).rstrip("\n").split("\n")

        assert lines[1] == "AI Code Review"
        assert lines[2:4] == ["代码审查报告：", "没有发现问题"]
        assert set(lines[0]) == set(lines[-1]) and len(set(lines[0])) == 1

    def test_progress_goes_to_stderr(self, capsys):
        print_progress("Requesting DeepSeek")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Requesting DeepSeek..." in captured.err


class TestDisplayWidth:

    @pytest.mark.parametrize("text,width", [
        ("abc", 3),
        ("中文", 4),
        ("fix: 修复", 9),
        ("", 0),
    ])
    def test_width(self, text, width):
        assert display_width(text) == width


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------

@pytest.mark.skipif(sys.platform == 'win32', reason="needs a POSIX shell script as editor")
class TestEditMessage:

    def test_quoted_editor_path_with_arguments(self, tmp_path, monkeypatch):
        editor_dir = tmp_path / "my editors"
        editor_dir.mkdir()
        script = editor_dir / "fake-editor"
        script.write_text('#!/bin/sh\nprintf "fix: edited\\n# dropped comment\\n" > "$2"\n')
        script.chmod(0o755)
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", f'"{script}" --wait')

        assert edit_message("feat: original") == "fix: edited"

    def test_failing_editor_returns_none(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "false")
        assert edit_message("feat: original") is None
