"""Tests for the main loop and the command line entry point."""

import logging
import sys
from unittest import mock

import pytest

from conftest import FakeTerminal
from hecto import __main__ as cli
from hecto.constants import EditorConstants
from hecto.document import Document
from hecto.editor import Editor
from hecto.position import Position
from hecto.terminal import TerminalError


def test_run_edits_saves_and_quits(tmp_path, isolated_settings):
    target = tmp_path / "loop.txt"
    terminal = FakeTerminal(keys=["h", "i", "<Ctrl-s>", "<Ctrl-q>"])
    editor = Editor(Document(filename=str(target)), terminal=terminal, persistence=isolated_settings)
    editor.run()
    assert terminal.setup_called
    assert terminal.cleanup_called
    assert target.read_text(encoding="utf-8") == "hi"
    assert len(terminal.frames) == 4
    assert isolated_settings.load_cursor_position(str(target)) is not None


def test_run_cleans_up_on_terminal_error(isolated_settings):
    terminal = FakeTerminal()
    terminal.get_key = mock.Mock(side_effect=TerminalError("gone"))
    editor = Editor(terminal=terminal, persistence=isolated_settings)
    with pytest.raises(TerminalError):
        editor.run()
    assert terminal.cleared
    assert terminal.cleanup_called


def test_main_prints_version(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["hecto", "--version"])
    cli.main()
    assert capsys.readouterr().out.startswith("hecto ")


def test_main_runs_editor_and_says_goodbye(monkeypatch, capsys, tmp_path):
    target = tmp_path / "cli.txt"
    monkeypatch.setattr(sys, "argv", ["hecto", str(target)])
    with mock.patch.object(Editor, "run") as run:
        cli.main()
    run.assert_called_once()
    assert capsys.readouterr().out.strip() == EditorConstants.GOODBYE


def test_main_exits_on_terminal_error(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["hecto"])
    with mock.patch.object(Editor, "run", side_effect=TerminalError("no tty")):
        with pytest.raises(SystemExit) as excinfo:
            cli.main()
    assert excinfo.value.code == 1
    assert "no tty" in capsys.readouterr().err


def test_logging_goes_to_file_only_when_requested(monkeypatch, tmp_path):
    logger = logging.getLogger("hecto")
    before = list(logger.handlers)
    monkeypatch.delenv("HECTO_LOG", raising=False)
    cli._configure_logging()
    assert logger.handlers == before

    log_file = tmp_path / "hecto.log"
    monkeypatch.setenv("HECTO_LOG", str(log_file))
    monkeypatch.setenv("HECTO_LOG_LEVEL", "info")
    try:
        cli._configure_logging()
        assert logger.level == logging.INFO
        logging.getLogger("hecto.document").info("hello log")
        for handler in logger.handlers:
            handler.flush()
        assert "hello log" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers[len(before):]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_unsaved_new_file_leaves_no_settings(tmp_path, isolated_settings):
    target = tmp_path / "never-saved.txt"
    terminal = FakeTerminal(keys=["<DOWN>", "<Ctrl-q>"])
    editor = Editor.from_file(str(target), terminal=terminal, persistence=isolated_settings)
    editor.run()
    assert not target.exists()
    assert isolated_settings.load_settings(str(target)) == {}
    assert not isolated_settings.settings_file.exists()


def test_existing_file_remembers_cursor_on_quit(tmp_path, isolated_settings):
    target = tmp_path / "existing.txt"
    target.write_text("one\ntwo\n", encoding="utf-8")
    terminal = FakeTerminal(keys=["<DOWN>", "<RIGHT>", "<Ctrl-q>"])
    Editor.from_file(str(target), terminal=terminal, persistence=isolated_settings).run()
    assert isolated_settings.load_cursor_position(str(target)) == Position.at(1, 1)
