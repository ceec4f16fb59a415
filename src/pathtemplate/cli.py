"""
pathtemplate CLI — Inspect templates and provision directories.

Commands:
    pathtemplate expand          Expand ~, $NAME and ${NAME} in a template
    pathtemplate migrate         Escape a pre-template value
    pathtemplate mkdir           Create a directory chain
    pathtemplate private-dir     Create/check an owner-only directory
    pathtemplate ensure-parent   Create the directory containing a path
    pathtemplate settings        Manage stored settings
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from . import __version__
from .config import CURRENT_FORMAT_VERSION, LEGACY_FORMAT_VERSION, log_level
from .errors import PathTemplateError
from .handles import DisplayNameHandle, PathHandle
from .legacy import escape_template
from .resolve import resolve_template
from .storage import (
    ParentStatus,
    create_path_chain,
    ensure_parent_exists,
    verify_exclusive_ownership,
)
from .store import SettingsStore


def _fail(message: str, exc: Exception) -> None:
    click.echo(f"❌ {message}: {exc}", err=True)
    sys.exit(1)


def _parse_mode(value: str) -> int:
    try:
        mode = int(value, 8)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not an octal mode")
    if not 0 <= mode <= 0o7777:
        raise click.BadParameter(f"{value!r} is out of range")
    return mode


# ── CLI ───────────────────────────────────────────────────────────

@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log provisioning steps")
def main(verbose: bool):
    """pathtemplate — Path templates and private directories."""
    level = "DEBUG" if verbose else log_level()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@main.command()
@click.argument("template")
@click.option("--legacy", is_flag=True,
              help=f"Treat TEMPLATE as saved by format version {LEGACY_FORMAT_VERSION} ($ and ~ literal)")
def expand(template: str, legacy: bool):
    """Expand a path template against the environment."""
    version = LEGACY_FORMAT_VERSION if legacy else CURRENT_FORMAT_VERSION
    resolved = resolve_template(PathHandle(template), format_version=version)
    click.echo(resolved.path)


@main.command()
@click.argument("value")
def migrate(value: str):
    """Escape $ and ~ in a value saved before templates existed."""
    click.echo(escape_template(value))


@main.command()
@click.argument("path")
@click.option("--mode", default="777", show_default=True,
              help="Octal mode for created directories (before umask)")
def mkdir(path: str, mode: str):
    """Create PATH and any missing parent directories."""
    try:
        create_path_chain(path, _parse_mode(mode))
    except PathTemplateError as exc:
        _fail("Failed to create directory", exc)
    click.echo(f"✅ {path}")


@main.command("private-dir")
@click.argument("dirname")
def private_dir(dirname: str):
    """Create DIRNAME owner-only, or check an existing one is ours and closed."""
    try:
        verify_exclusive_ownership(dirname)
    except PathTemplateError as exc:
        _fail("Directory is not safe for private files", exc)
    click.echo(f"✅ {dirname} is private")


@main.command("ensure-parent")
@click.argument("path")
def ensure_parent(path: str):
    """Create the directory that will contain PATH."""
    try:
        status = ensure_parent_exists(path)
    except PathTemplateError as exc:
        _fail("Failed to create parent directory", exc)
    messages = {
        ParentStatus.NO_PARENT: "no parent directory to create",
        ParentStatus.EXISTS: "parent directory already exists",
        ParentStatus.CREATED: "created parent directory",
    }
    click.echo(f"✅ {path}: {messages[status]}")


# ── Settings ──────────────────────────────────────────────────────

def _store() -> SettingsStore:
    try:
        return SettingsStore()
    except PathTemplateError as exc:
        _fail("Cannot open settings directory", exc)


@main.group("settings")
def settings_group():
    """Stored path and font settings."""
    pass


@settings_group.command("set")
@click.argument("session")
@click.argument("key")
@click.argument("value")
@click.option("--font", is_flag=True, help="Store VALUE as a display name rather than a path")
def settings_set(session: str, key: str, value: str, font: bool):
    """Set KEY in SESSION to VALUE."""
    store = _store()
    try:
        entries = store.load(session) or {}
        entries[key] = DisplayNameHandle(value) if font else PathHandle(value)
        store.save(session, entries)
    except (PathTemplateError, ValueError) as exc:
        _fail("Failed to save settings", exc)
    click.echo(f"✅ {session}: {key} = {value}")


@settings_group.command("show")
@click.argument("session")
@click.option("--expand/--raw", "do_expand", default=False,
              help="Show paths expanded against the environment")
def settings_show(session: str, do_expand: bool):
    """Show the settings stored in SESSION."""
    store = _store()
    try:
        entries: Optional[dict] = store.load(session)
    except PathTemplateError as exc:
        _fail("Failed to read settings", exc)
    if entries is None:
        click.echo(f"❌ Settings not found: {session}", err=True)
        sys.exit(1)

    for key, value in sorted(entries.items()):
        if isinstance(value, PathHandle):
            shown = resolve_template(value).path if do_expand else value.path
            click.echo(f"{key}\tpath\t{shown}")
        else:
            click.echo(f"{key}\tfont\t{value.name}")


@settings_group.command("list")
def settings_list():
    """List stored sessions."""
    for name in _store().names():
        click.echo(name)


@settings_group.command("delete")
@click.argument("session")
def settings_delete(session: str):
    """Delete SESSION."""
    if not _store().delete(session):
        click.echo(f"❌ Settings not found: {session}", err=True)
        sys.exit(1)
    click.echo(f"✅ Deleted {session}")


if __name__ == "__main__":
    main()
