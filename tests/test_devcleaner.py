from __future__ import annotations

import argparse
import datetime
import io
import os
import shutil
from pathlib import Path

from rich.console import Console

import devcleaner
from conftest import UTC, make_dir, write_file
from console_ui import ConsoleUI
from devcleaner import DevCleaner
from devcleaner_config import CleanerConfig
from file_operations import FileOperations


class ScriptedUI(ConsoleUI):
    """ConsoleUI that answers prompts from fixed lists and records output"""

    def __init__(self, confirms: list[bool] | None = None, answers: list[str] | None = None):
        super().__init__(console=Console(file=io.StringIO(), width=300, highlight=False))
        self.confirms = list(confirms or [])
        self.answers = list(answers or [])
        self.questions: list[str] = []

    def confirm(self, question: str, default: bool = False) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0)

    def prompt(self, question: str, default=None, choices=None) -> str:
        self.questions.append(question)
        return self.answers.pop(0)

    @property
    def output(self) -> str:
        return self.console.file.getvalue()


def _args(path: str | None = None, year: str | None = None, dry_run: bool = False) -> argparse.Namespace:
    return argparse.Namespace(path=path, year=year, dry_run=dry_run, config=None)


def _workspace(root: Path) -> tuple[Path, Path]:
    a = make_dir(root / "a" / "node_modules")
    write_file(a / "left-pad" / "index.js", 300)
    b = make_dir(root / "b" / "node_modules")
    write_file(b / "react" / "index.js", 500)
    return a, b


def test_missing_root_reports_nothing_found(tmp_path: Path) -> None:
    ui = ScriptedUI()

    code = devcleaner.main([str(tmp_path / "missing"), "--year", "all"], ui=ui)

    assert code == 0
    assert "Path not found" in ui.output
    assert "No node_modules directories found." in ui.output


def test_confirmed_run_deletes_matches(tmp_path: Path) -> None:
    a, b = _workspace(tmp_path)
    nested = make_dir(a / "left-pad" / "node_modules")
    ui = ScriptedUI(confirms=[True])

    code = devcleaner.main([str(tmp_path), "--year", "all"], ui=ui)

    assert code == 0
    assert not a.exists()
    assert not b.exists()
    assert not nested.exists()
    assert "Found 2 node_modules directories" in ui.output
    assert "Deleted: 2 directories" in ui.output
    assert "Failed" not in ui.output


def test_declined_run_leaves_everything(tmp_path: Path) -> None:
    a, b = _workspace(tmp_path)
    ui = ScriptedUI(confirms=[False])

    code = devcleaner.main([str(tmp_path), "--year", "all"], ui=ui)

    assert code == 0
    assert a.exists()
    assert b.exists()
    assert "Operation cancelled" in ui.output


def test_dry_run_lists_without_asking(tmp_path: Path) -> None:
    a, b = _workspace(tmp_path)
    ui = ScriptedUI()

    code = devcleaner.main([str(tmp_path), "--year", "all", "--dry-run"], ui=ui)

    assert code == 0
    assert a.exists()
    assert b.exists()
    assert ui.questions == []
    assert "Dry run" in ui.output


def test_partial_deletion_failure_still_succeeds(tmp_path: Path) -> None:
    a, b = _workspace(tmp_path)

    def remove(path: str) -> None:
        if os.path.dirname(path) == str(tmp_path / "a"):
            raise PermissionError(13, "Permission denied", path)
        shutil.rmtree(path)

    ui = ScriptedUI(confirms=[True])
    app = DevCleaner(
        _args(str(tmp_path), "all"),
        config=CleanerConfig(),
        ui=ui,
        file_operations=FileOperations(remove_tree=remove),
        timezone=UTC,
    )

    assert app.run() == 0
    assert a.exists()
    assert not b.exists()
    assert "Deleted: 1 directories" in ui.output
    assert "Failed: 1 directories" in ui.output
    assert "Permission denied" in ui.output


def test_custom_year_is_reprompted_until_valid(tmp_path: Path) -> None:
    old = make_dir(tmp_path / "old" / "node_modules", datetime.datetime(2021, 6, 1, tzinfo=UTC))
    new = make_dir(tmp_path / "new" / "node_modules", datetime.datetime(2023, 1, 1, tzinfo=UTC))
    ui = ScriptedUI(confirms=[True], answers=["custom", "abc", "1999", "2021"])
    app = DevCleaner(_args(str(tmp_path)), config=CleanerConfig(), ui=ui, timezone=UTC)

    assert app.run() == 0
    assert not old.exists()
    assert new.exists()
    assert "please enter a valid year" in ui.output
    assert "Found 1 node_modules directories" in ui.output


def test_menu_year_choice(tmp_path: Path) -> None:
    last_year = datetime.date.today().year - 1
    recent = make_dir(tmp_path / "recent" / "node_modules")
    older = make_dir(tmp_path / "older" / "node_modules", datetime.datetime(last_year, 2, 2, tzinfo=UTC))
    ui = ScriptedUI(confirms=[False], answers=[str(last_year)])
    app = DevCleaner(_args(str(tmp_path)), config=CleanerConfig(), ui=ui, timezone=UTC)

    assert app.run() == 0
    assert "Found 1 node_modules directories" in ui.output
    assert "older" in ui.output
    assert recent.exists()
    assert older.exists()


def test_root_is_chosen_from_candidates(tmp_path: Path) -> None:
    workspace = make_dir(tmp_path / "Developer")
    _workspace(workspace)
    config = CleanerConfig(candidate_roots=[str(tmp_path / "missing"), str(workspace)])
    ui = ScriptedUI(confirms=[True, False], answers=["all"])
    app = DevCleaner(_args(), config=config, ui=ui, timezone=UTC)

    assert app.run() == 0
    assert len(ui.questions) == 3
    assert "Found 2 node_modules directories" in ui.output


def test_root_prompt_rejects_blank_input(tmp_path: Path) -> None:
    _workspace(tmp_path)
    config = CleanerConfig(candidate_roots=[])
    ui = ScriptedUI(confirms=[False], answers=["  ", str(tmp_path), "all"])
    app = DevCleaner(_args(), config=config, ui=ui, timezone=UTC)

    assert app.run() == 0
    assert "please enter a directory" in ui.output
    assert "Found 2 node_modules directories" in ui.output


def test_invalid_year_flag_fails(tmp_path: Path) -> None:
    ui = ScriptedUI()

    assert devcleaner.main([str(tmp_path), "--year", "1990"], ui=ui) == 1
    assert "Invalid input '1990'" in ui.output


def test_bad_config_file_fails(tmp_path: Path) -> None:
    config_file = tmp_path / "bad.toml"
    config_file.write_text("[size]\nmode = 'blocks'\n")
    ui = ScriptedUI()

    assert devcleaner.main([str(tmp_path), "--config", str(config_file)], ui=ui) == 1
    assert "Configuration error" in ui.output


def test_unexpected_error_exits_nonzero(tmp_path: Path, monkeypatch) -> None:
    def explode(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(DevCleaner, "run", explode)
    ui = ScriptedUI()

    assert devcleaner.main([str(tmp_path)], ui=ui) == 1
    assert "Error: boom" in ui.output


def test_interrupt_exits_nonzero(tmp_path: Path, monkeypatch) -> None:
    def interrupt(self):
        raise KeyboardInterrupt

    monkeypatch.setattr(DevCleaner, "run", interrupt)
    ui = ScriptedUI()

    assert devcleaner.main([str(tmp_path)], ui=ui) == 1
    assert "Interrupted" in ui.output
