"""Terminal front desk tests."""

import io
import sys
import types

import pytest

from checkin import handle_command, main, run_session
from visitors import VisitorRegistry


@pytest.fixture
def registry():
    return VisitorRegistry()


def test_in_and_out(registry, capsys):
    assert handle_command(registry, "in Alice | a@x.com")
    assert handle_command(registry, "out Alice")
    out = capsys.readouterr().out
    assert "Checked in: Visitor: Alice, Contact: a@x.com" in out
    assert "Checked out: Visitor: Alice" in out
    assert registry.current_count() == 0


def test_in_requires_both_fields(registry, capsys):
    handle_command(registry, "in Alice")
    handle_command(registry, "in  | a@x.com")
    assert "Name and Contact cannot be empty." in capsys.readouterr().err
    assert len(registry) == 0


def test_out_requires_name(registry, capsys):
    handle_command(registry, "out   ")
    assert "Name cannot be empty." in capsys.readouterr().err


def test_out_unknown_visitor(registry, capsys):
    handle_command(registry, "out Bob")
    assert "Visitor not found or already checked out." in capsys.readouterr().err
    assert registry.get_log() == []


def test_current_and_log(registry, capsys):
    handle_command(registry, "in Alice | a@x.com")
    handle_command(registry, "in Bob | b@x.com")
    handle_command(registry, "out Alice")
    capsys.readouterr()
    handle_command(registry, "current")
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Current Visitors:"
    assert len(lines) == 2 and lines[1].startswith("Visitor: Bob")
    handle_command(registry, "log")
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Visitor Log:"
    assert len(lines) == 4


def test_export(registry, tmp_path, capsys):
    handle_command(registry, "in Alice | a@x.com")
    handle_command(registry, "export", export_dir=tmp_path)
    assert "Saved" in capsys.readouterr().out
    assert len(list(tmp_path.glob("*.csv"))) == 2


def test_unknown_command(registry, capsys):
    assert handle_command(registry, "dance")
    assert "Unknown command" in capsys.readouterr().err


def test_run_session_stops_at_quit(registry, capsys):
    stream = io.StringIO("in Alice | a@x.com\nquit\nin Bob | b@x.com\n")
    run_session(registry, stream)
    assert [r.name for r in registry.snapshot_table()] == ["Alice"]


def test_main_exports_to_given_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("in Alice | a@x.com\nexport\nquit\n"))
    assert main(["--export-dir", str(tmp_path), "--log-level", "warning"]) == 0
    assert "Saved" in capsys.readouterr().out
    assert sorted(p.name.split("_2")[0] for p in tmp_path.glob("*.csv")) == ["visitor_log", "visitors"]


def test_main_returns_zero_at_end_of_input(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([]) == 0


def test_main_rejects_unknown_log_level(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--log-level", "verbose"])
    assert exc.value.code == 2
    assert "Unknown log level 'verbose'" in capsys.readouterr().err


def test_main_gui_receives_export_dir(tmp_path, monkeypatch):
    calls = []

    class RecordingGUI:
        def __init__(self, registry, export_dir=None):
            calls.append((registry, export_dir))

        def run(self):
            pass

    monkeypatch.setitem(sys.modules, "gui", types.SimpleNamespace(VisitorGUI=RecordingGUI))
    assert main(["--gui", "--export-dir", str(tmp_path)]) == 0
    assert len(calls) == 1
    registry, export_dir = calls[0]
    assert isinstance(registry, VisitorRegistry)
    assert export_dir == tmp_path
