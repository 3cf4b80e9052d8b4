"""Tests for terminal prompts."""

import pytest

from git_commit_helper.interactive import ask, confirm, select


class TestConfirm:

    def test_enter_takes_default(self, typed):
        typed("")
        assert confirm("Go?", default=True)
        typed("")
        assert not confirm("Go?", default=False)

    def test_yes_no(self, typed):
        typed("YES")
        assert confirm("Go?", default=False)
        typed("n")
        assert not confirm("Go?")

    def test_reasks_on_garbage(self, typed, capsys):
        typed("maybe", "y")
        assert confirm("Go?", default=False)
        assert "Please answer y or n" in capsys.readouterr().out

    def test_eof_takes_default(self, typed):
        typed()
        assert confirm("Go?", default=True)

    def test_eof_answer_can_differ_from_default(self, typed):
        typed()
        assert not confirm("Retry?", default=True, on_eof=False)
        typed("")
        assert confirm("Retry?", default=True, on_eof=False)

    def test_ctrl_c_is_not_an_answer(self, monkeypatch):
        def interrupt(prompt=""):
            raise KeyboardInterrupt
        monkeypatch.setattr("builtins.input", interrupt)
        with pytest.raises(KeyboardInterrupt):
            confirm("Continue with the commit?", default=True)


class TestSelect:

    def test_number(self, typed):
        typed("2")
        assert select("Pick", ["a", "b", "c"]) == 1

    def test_enter_takes_default(self, typed):
        typed("")
        assert select("Pick", ["a", "b"], default=1) == 1

    def test_quit(self, typed):
        typed("q")
        assert select("Pick", ["a", "b"]) is None

    def test_out_of_range_reasks(self, typed, capsys):
        typed("7", "x", "1")
        assert select("Pick", ["a", "b"]) == 0
        assert "Enter 1-2 or q" in capsys.readouterr().out

    def test_no_options(self, typed):
        assert select("Pick", []) is None

    def test_eof(self, typed):
        typed()
        assert select("Pick", ["a"]) is None


class TestAsk:

    def test_value(self, typed):
        typed("  sk-123  ")
        assert ask("API key") == "sk-123"

    def test_default(self, typed):
        typed("")
        assert ask("Model", default="gpt-4o") == "gpt-4o"

    def test_ctrl_c_propagates(self, monkeypatch):
        def interrupt(prompt=""):
            raise KeyboardInterrupt
        monkeypatch.setattr("builtins.input", interrupt)
        with pytest.raises(KeyboardInterrupt):
            ask("API key")

    def test_required(self, typed, capsys):
        typed("", "value")
        assert ask("API key", allow_empty=False) == "value"
        assert "A value is required" in capsys.readouterr().out
