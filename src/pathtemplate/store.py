"""
Versioned settings persistence with atomic writes.

A settings file is a header record followed by (key, tag, value) entries,
each record being a NUL-terminated string. Path values saved before
CURRENT_FORMAT_VERSION are migrated once as they are decoded.
"""

from __future__ import annotations

import fcntl
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Mapping, Optional, Union

from .config import CURRENT_FORMAT_VERSION, settings_dir
from .errors import MalformedRecordError
from .handles import TERMINATOR, DisplayNameHandle, PathHandle, read_record
from .legacy import migrate
from .storage import (
    ensure_parent_exists,
    ensure_private_file,
    sanitize_identifier,
    verify_exclusive_ownership,
)


logger = logging.getLogger(__name__)

MAGIC = "PATHTEMPLATE"
SETTINGS_SUFFIX = ".settings"

PATH_TAG = b"F"
NAME_TAG = b"N"

Setting = Union[PathHandle, DisplayNameHandle]

_TAGS: dict[type, bytes] = {PathHandle: PATH_TAG, DisplayNameHandle: NAME_TAG}
_KINDS: dict[bytes, type] = {tag: kind for kind, tag in _TAGS.items()}


def encode_settings(
    entries: Mapping[str, Setting], version: int = CURRENT_FORMAT_VERSION
) -> bytes:
    """Serialise ``entries`` into a settings record stamped with ``version``."""
    out = bytearray(_text_record(f"{MAGIC} {version}"))
    for key, value in entries.items():
        tag = _TAGS.get(type(value))
        if tag is None:
            raise TypeError(f"Cannot store {type(value).__name__} for {key!r}")
        out += _text_record(key)
        out += tag
        out += value.to_bytes()
    return bytes(out)


def _text_record(text: str) -> bytes:
    if "\0" in text:
        raise ValueError(f"Setting keys may not contain NUL: {text!r}")
    return os.fsencode(text) + TERMINATOR


def _decode_header(data: bytes) -> tuple[int, int]:
    if not data:
        raise MalformedRecordError("Empty settings record")
    raw, used = read_record(data)
    magic, _, version = raw.decode("ascii", errors="replace").partition(" ")
    if magic != MAGIC or not version.isdigit():
        raise MalformedRecordError(f"Not a settings record: {raw[:32]!r}")
    return int(version), used


def decode_settings(data: bytes) -> tuple[int, dict[str, Setting]]:
    """Parse a settings record, returning its version and the entries.

    Path entries from versions older than CURRENT_FORMAT_VERSION come back
    escaped, ready for expansion.
    """
    version, pos = _decode_header(data)
    legacy = version < CURRENT_FORMAT_VERSION
    entries: dict[str, Setting] = {}

    while pos < len(data):
        raw_key, used = read_record(data, offset=pos)
        key = os.fsdecode(raw_key)
        pos += used
        tag = data[pos:pos + 1]
        kind = _KINDS.get(tag)
        if kind is None:
            raise MalformedRecordError(f"Unknown tag {tag!r} for setting {key!r}")
        pos += 1
        value, used = kind.deserialise(data, offset=pos)
        pos += used
        if key in entries:
            raise MalformedRecordError(f"Duplicate setting {key!r}")
        if legacy and isinstance(value, PathHandle):
            migrate(value)
        entries[key] = value

    return version, entries


class SettingsStore:
    """Directory of named settings files, private to the current user."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else settings_dir()
        ensure_parent_exists(self.base_dir)
        verify_exclusive_ownership(self.base_dir)
        self._lock_path = self.base_dir / ".lock"
        ensure_private_file(self._lock_path)

    @contextmanager
    def _lock(self):
        with open(self._lock_path, "r+") as lockf:
            fcntl.flock(lockf.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lockf.fileno(), fcntl.LOCK_UN)

    def _settings_path(self, name: str) -> Path:
        safe_name = sanitize_identifier(name)
        if not safe_name.strip("."):
            raise ValueError(f"Invalid settings name: {name!r}")
        return self.base_dir / f"{safe_name}{SETTINGS_SUFFIX}"

    def _atomic_write(self, path: Path, payload: bytes) -> None:
        tmp_path = path.with_suffix(path.suffix + f".tmp.{os.getpid()}")
        with open(tmp_path, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        ensure_private_file(path)

    def save(self, name: str, entries: Mapping[str, Setting]) -> Path:
        """Persist ``entries`` under ``name`` at the current format version."""
        payload = encode_settings(entries)
        with self._lock():
            path = self._settings_path(name)
            self._atomic_write(path, payload)
        logger.info("Saved %d settings to %s", len(entries), path)
        return path

    def load(self, name: str) -> Optional[dict[str, Setting]]:
        """Load settings by name, migrating legacy paths. None if absent."""
        with self._lock():
            path = self._settings_path(name)
            if not path.exists():
                return None
            data = path.read_bytes()
        version, entries = decode_settings(data)
        if version < CURRENT_FORMAT_VERSION:
            logger.info("Migrated %s from format version %d", path.name, version)
        return entries

    def names(self) -> list[str]:
        with self._lock():
            paths = self.base_dir.glob(f"*{SETTINGS_SUFFIX}")
            return sorted(p.name[: -len(SETTINGS_SUFFIX)] for p in paths)

    def delete(self, name: str) -> bool:
        with self._lock():
            path = self._settings_path(name)
            if not path.exists():
                return False
            path.unlink()
        return True
