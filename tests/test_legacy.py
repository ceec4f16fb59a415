"""Tests for escaping paths saved before templates existed."""

from pathtemplate.expand import expand
from pathtemplate.handles import PathHandle
from pathtemplate.legacy import escape_template, migrate


def test_migrate_escapes_dollar_and_tilde():
    handle = PathHandle("a$b~c")
    result = migrate(handle)
    assert result is handle
    assert handle.path == r"a\$b\~c"


def test_migrate_then_expand_restores_literal(monkeypatch):
    monkeypatch.setenv("b", "SHOULD-NOT-APPEAR")
    monkeypatch.setenv("HOME", "/home/test")
    original = "a$b~c"
    migrated = migrate(PathHandle(original))
    assert expand(migrated.path) == original


def test_round_trip_for_awkward_values():
    env = {"HOME": "/h", "X": "x"}
    for original in ["$", "~", "$$", "${X}", "~/$X/\\$X", "\\", "C:\\$X", "${unclosed"]:
        assert expand(escape_template(original), env) == original


def test_unchanged_without_special_characters():
    handle = PathHandle("/var/log/putty.log")
    before = handle.path
    migrate(handle)
    assert handle.path is before


def test_escape_template_returns_same_object_when_clean():
    text = "plain/path"
    assert escape_template(text) is text


def test_migrating_twice_double_escapes():
    handle = migrate(migrate(PathHandle("$x")))
    assert handle.path == r"\\$x"
    assert expand(handle.path, {}) == r"\$x"
