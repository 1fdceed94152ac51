# tests/test_cli.py
import shutil
from pathlib import Path

import pytest

import shogigui_docker as app_main
from models import Action

DATA = Path(__file__).resolve().parent / "data"


@pytest.fixture
def no_preconditions(monkeypatch):
    monkeypatch.setattr(app_main, "check_preconditions", lambda: None)


def parse(argv, env=None):
    ns = app_main.build_parser().parse_args(argv)
    return app_main.config_from_args(ns, env=env if env is not None else {"XDG_CONFIG_HOME": "/xdg"})


def test_defaults():
    config = parse(["--run"])
    assert config.action == Action.RUN
    assert config.image == "shogigui:latest"
    assert config.settings_path == Path("/xdg/shogigui/settings.xml")
    assert config.games_dir is None


def test_default_settings_without_xdg():
    config = parse(["-u"], env={})
    assert config.settings_path == Path.home() / ".config" / "shogigui" / "settings.xml"


def test_options(tmp_path):
    config = parse(["-r", "-g", str(tmp_path), "-s", str(tmp_path / "s.xml"), "-i", "me/shogi:dev"])
    assert config.games_dir == tmp_path
    assert config.settings_path == tmp_path / "s.xml"
    assert config.image == "me/shogi:dev"


@pytest.mark.parametrize(
    "flag, action",
    [
        ("--build", Action.BUILD),
        ("--run", Action.RUN),
        ("--update-settings", Action.UPDATE_SETTINGS),
        ("--cleanup", Action.CLEANUP),
    ],
)
def test_long_flags(flag, action):
    assert parse([flag]).action == action


def test_help_exits_zero(capsys):
    assert app_main.main(["-h"]) == 0
    assert "--update-settings" in capsys.readouterr().out


def test_no_action_shows_help(capsys, monkeypatch):
    def _boom():
        raise AssertionError("preconditions must not run for help")

    monkeypatch.setattr(app_main, "check_preconditions", _boom)
    assert app_main.main([]) == 0
    assert "usage: shogigui-docker" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["--bogus"], ["-g"], ["-r", "-s"], ["-b", "-r"]])
def test_usage_errors_exit_one(argv, capsys):
    with pytest.raises(SystemExit) as e:
        app_main.main(argv)
    assert e.value.code == 1
    captured = capsys.readouterr()
    assert "[ERR]" in captured.err
    assert "usage: shogigui-docker" in captured.out


def test_preconditions_checked_before_action(monkeypatch):
    order = []
    monkeypatch.setattr(app_main, "check_preconditions", lambda: order.append("pre"))
    monkeypatch.setattr(app_main, "cleanup_images", lambda: order.append("cleanup"))
    assert app_main.main(["-c"]) == 0
    assert order == ["pre", "cleanup"]


def test_failed_precondition_stops_everything(monkeypatch):
    def _fail():
        raise SystemExit(1)

    called = []
    monkeypatch.setattr(app_main, "check_preconditions", _fail)
    monkeypatch.setattr(app_main, "build_image", lambda config: called.append(config))
    with pytest.raises(SystemExit) as e:
        app_main.main(["-b"])
    assert e.value.code == 1
    assert called == []


def test_dispatch_passes_config(monkeypatch, no_preconditions, tmp_path):
    seen = []
    monkeypatch.setattr(app_main, "run_container", lambda config: seen.append(config))
    assert app_main.main(["-r", "-i", "x:y", "-s", str(tmp_path / "s.xml")]) == 0
    (config,) = seen
    assert config.image == "x:y"
    assert config.settings_path == tmp_path / "s.xml"


def test_update_settings_end_to_end(no_preconditions, tmp_path):
    settings = tmp_path / "settings.xml"
    shutil.copyfile(DATA / "settings_empty.xml", settings)

    assert app_main.main(["-u", "-s", str(settings)]) == 0
    assert "<Name>YaneuraOu 4.89 orqha</Name>" in settings.read_text(encoding="utf-8")


def test_bad_settings_document_exits_one(no_preconditions, tmp_path, capsys):
    settings = tmp_path / "settings.xml"
    settings.write_text("<Settings>", encoding="utf-8")

    assert app_main.main(["-u", "-s", str(settings)]) == 1
    assert "well-formed" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["--up"], ["--bui"], ["--clean"], ["--games", "/tmp"]])
def test_abbreviated_flags_are_rejected(argv, monkeypatch):
    monkeypatch.setattr(app_main, "check_preconditions", lambda: None)
    monkeypatch.setattr(app_main, "dispatch", lambda config: None)
    with pytest.raises(SystemExit) as e:
        app_main.main(argv)
    assert e.value.code == 1
