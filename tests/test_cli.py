"""CLI tests."""

import os

import pytest
from click.testing import CliRunner

from pathtemplate.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("PATHTEMPLATE_HOME", str(tmp_path / "home"))
    return CliRunner()


def test_expand(runner, monkeypatch):
    monkeypatch.setenv("HOME", "/home/test")
    monkeypatch.setenv("HOST", "box")
    result = runner.invoke(main, ["expand", "~/logs/$HOST-${HOST}.log"])
    assert result.exit_code == 0
    assert result.output.strip() == "/home/test/logs/box-box.log"


def test_expand_legacy_keeps_literal(runner, monkeypatch):
    monkeypatch.setenv("HOST", "box")
    result = runner.invoke(main, ["expand", "--legacy", "/srv/$HOST~"])
    assert result.exit_code == 0
    assert result.output.strip() == "/srv/$HOST~"


def test_migrate(runner):
    result = runner.invoke(main, ["migrate", "a$b~c"])
    assert result.exit_code == 0
    assert result.output.strip() == r"a\$b\~c"


def test_mkdir(runner, tmp_path):
    target = tmp_path / "x" / "y"
    result = runner.invoke(main, ["mkdir", str(target), "--mode", "755"])
    assert result.exit_code == 0
    assert target.is_dir()


def test_mkdir_rejects_bad_mode(runner, tmp_path):
    result = runner.invoke(main, ["mkdir", str(tmp_path / "x"), "--mode", "9z"])
    assert result.exit_code != 0
    assert not (tmp_path / "x").exists()


def test_mkdir_failure_reports_component(runner, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    result = runner.invoke(main, ["mkdir", str(blocker / "sub")])
    assert result.exit_code == 1
    assert f"{blocker / 'sub'}: mkdir:" in result.output


def test_private_dir(runner, tmp_path):
    ok = tmp_path / "ok"
    result = runner.invoke(main, ["private-dir", str(ok)])
    assert result.exit_code == 0

    shared = tmp_path / "shared"
    shared.mkdir()
    os.chmod(shared, 0o750)
    result = runner.invoke(main, ["private-dir", str(shared)])
    assert result.exit_code == 1
    assert "overgenerous permissions 750" in result.output


def test_ensure_parent(runner, tmp_path):
    target = tmp_path / "logs" / "out.log"
    result = runner.invoke(main, ["ensure-parent", str(target)])
    assert result.exit_code == 0
    assert "created parent directory" in result.output

    result = runner.invoke(main, ["ensure-parent", str(target)])
    assert "already exists" in result.output


def test_settings_lifecycle(runner, monkeypatch):
    monkeypatch.setenv("HOME", "/home/test")

    result = runner.invoke(main, ["settings", "set", "work", "LogFileName", "~/work.log"])
    assert result.exit_code == 0
    result = runner.invoke(main, ["settings", "set", "work", "Font", "Monospace 10", "--font"])
    assert result.exit_code == 0

    result = runner.invoke(main, ["settings", "show", "work"])
    assert result.exit_code == 0
    assert "LogFileName\tpath\t~/work.log" in result.output
    assert "Font\tfont\tMonospace 10" in result.output

    result = runner.invoke(main, ["settings", "show", "work", "--expand"])
    assert "LogFileName\tpath\t/home/test/work.log" in result.output

    result = runner.invoke(main, ["settings", "list"])
    assert result.output.split() == ["work"]

    result = runner.invoke(main, ["settings", "delete", "work"])
    assert result.exit_code == 0
    result = runner.invoke(main, ["settings", "show", "work"])
    assert result.exit_code == 1
    assert "Settings not found" in result.output


def test_private_dir_rejects_regular_file(runner, tmp_path):
    target = tmp_path / "file"
    target.write_text("x")
    os.chmod(target, 0o600)
    result = runner.invoke(main, ["private-dir", str(target)])
    assert result.exit_code == 1
    assert "Not a directory" in result.output
