"""Tests for the logtint CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.testing import CliRunner

from logtint.cli import app
from logtint.storage import load_collection, open_settings

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


def _invoke(settings: Path, *args: str, stdin: str | None = None):  # noqa: ANN202
    return runner.invoke(app, ["--settings", str(settings), *args], input=stdin)


class TestSetsCommands:
    def test_create_and_list(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        result = _invoke(settings, "sets", "create", "errors")
        assert result.exit_code == 0
        set_id = result.output.strip()

        collection = load_collection(open_settings(settings))
        assert collection.has_set(set_id)
        assert collection.active_set_ids() == []

        listed = _invoke(settings, "sets", "list")
        assert listed.exit_code == 0
        assert "errors" in listed.output

    def test_create_duplicate_name(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors")
        result = _invoke(settings, "sets", "create", "errors")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_add_rule_and_activate(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors")
        result = _invoke(settings, "sets", "add-rule", "errors", "ERROR", "--fore", "#ffffff", "--back", "#8c2a2a")
        assert result.exit_code == 0
        assert _invoke(settings, "sets", "activate", "errors").exit_code == 0

        collection = load_collection(open_settings(settings))
        active = collection.current_active_set()
        assert [h.pattern for h in active.highlighters()] == ["ERROR"]
        assert active.highlighters()[0].back_color == "#8c2a2a"

    def test_add_rule_bad_color(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors")
        result = _invoke(settings, "sets", "add-rule", "errors", "ERROR", "--fore", "bogus")
        assert result.exit_code == 1
        assert "Invalid color" in result.output

    def test_add_rule_invalid_regex_warns(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors")
        result = _invoke(settings, "sets", "add-rule", "errors", "([")
        assert result.exit_code == 0
        assert "never match" in result.output

    def test_rules_and_remove_rule(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors")
        _invoke(settings, "sets", "add-rule", "errors", "ERROR")
        _invoke(settings, "sets", "add-rule", "errors", "[a-z]+id", "--only-match")

        listed = _invoke(settings, "sets", "rules", "errors")
        assert listed.exit_code == 0
        assert "[a-z]+id" in listed.output

        assert _invoke(settings, "sets", "remove-rule", "errors", "0").exit_code == 0
        collection = load_collection(open_settings(settings))
        remaining = collection.find_set_by_name("errors")
        assert remaining is not None
        assert [h.pattern for h in remaining.highlighters()] == ["[a-z]+id"]

        assert _invoke(settings, "sets", "remove-rule", "errors", "5").exit_code == 1

    def test_deactivate_and_remove(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors", "--activate")
        assert load_collection(open_settings(settings)).active_set_ids()

        assert _invoke(settings, "sets", "deactivate", "--all").exit_code == 0
        assert load_collection(open_settings(settings)).active_set_ids() == []

        assert _invoke(settings, "sets", "remove", "errors").exit_code == 0
        assert not load_collection(open_settings(settings)).has_set_by_name("errors")

    def test_deactivate_needs_target(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path / "hl.toml", "sets", "deactivate")
        assert result.exit_code == 1

    def test_unknown_set(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path / "hl.toml", "sets", "activate", "missing")
        assert result.exit_code == 1
        assert "no highlighter set" in result.output

    def test_bad_stored_entry_keeps_other_sets(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        settings.write_text(
            "[HighlighterSetCollection]\n"
            "version = 2\n"
            'active_sets = ["keep-id"]\n'
            'quick_highlighters = ["junk"]\n'
            'highlighter_sets = [{ version = 3, name = "keep", id = "keep-id",'
            ' highlighters = [{ pattern = "ERROR" }] }]\n'
        )
        assert _invoke(settings, "sets", "create", "new").exit_code == 0

        collection = load_collection(open_settings(settings))
        assert collection.has_set("keep-id")
        assert collection.has_set_by_name("new")
        assert collection.active_set_ids() == ["keep-id"]

    def test_unreadable_settings_left_alone(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        settings.write_text("this is [not toml")
        result = _invoke(settings, "sets", "create", "new")
        assert result.exit_code == 1
        assert "cannot read settings file" in result.output
        assert settings.read_text() == "this is [not toml"


class TestShowCommand:
    def test_show_file(self, tmp_path: Path, sample_log_file: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "errors", "--activate")
        _invoke(settings, "sets", "add-rule", "errors", "ERROR")

        result = _invoke(settings, "show", str(sample_log_file))
        assert result.exit_code == 0
        assert "2024-01-15 ERROR: Connection failed" in result.output
        assert "2024-01-15 WARN: High memory usage" in result.output

    def test_show_stdin_with_set_option(self, tmp_path: Path) -> None:
        settings = tmp_path / "hl.toml"
        _invoke(settings, "sets", "create", "warnings")
        _invoke(settings, "sets", "add-rule", "warnings", "WARN", "--only-match")

        result = _invoke(settings, "show", "--set", "warnings", stdin="WARN: disk\nINFO: ok\n")
        assert result.exit_code == 0
        assert "WARN: disk" in result.output
        assert "INFO: ok" in result.output
        # --set does not change the stored activation
        assert load_collection(open_settings(settings)).active_set_ids() == []

    def test_show_missing_file(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path / "hl.toml", "show", str(tmp_path / "nope.log"))
        assert result.exit_code == 1
        assert "file not found" in result.output


class TestQuickCommands:
    def test_list_defaults(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path / "hl.toml", "quick", "list")
        assert result.exit_code == 0
        assert "Yellow" in result.output
