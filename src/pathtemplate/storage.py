"""Directory provisioning and local storage hardening helpers."""

from __future__ import annotations

import logging
import os
import re
import stat
from enum import Enum
from pathlib import Path
from typing import Union

from .config import PRIVATE_DIR_MODE, PRIVATE_FILE_MODE, PUBLIC_DIR_MODE
from .errors import (
    DirectoryCreationError,
    OwnershipError,
    PermissionBitsError,
)
from .handles import PathHandle


logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"[^a-zA-Z0-9._-]")
_SEPARATORS_RE = re.compile(r"/+")

PathLike = Union[str, os.PathLike, PathHandle]


class ParentStatus(str, Enum):
    NO_PARENT = "no_parent"
    EXISTS = "exists"
    CREATED = "created"


def _as_str(path: PathLike) -> str:
    return os.fspath(path)


def _mkdir(path: str, mode: int) -> bool:
    """Create one directory. Returns False if it already existed."""
    try:
        os.mkdir(path, mode)
    except FileExistsError:
        return False
    except OSError as exc:
        raise DirectoryCreationError(path, exc.strerror or str(exc)) from exc
    return True


def create_path_chain(path: PathLike, mode: int = PUBLIC_DIR_MODE) -> None:
    """Create every directory along ``path``, like ``mkdir -p``.

    Each prefix ending at a separator is created with ``mode`` (subject to
    the umask). Components that already exist are left alone; any other
    failure stops at that component.
    """
    path = _as_str(path)
    for match in _SEPARATORS_RE.finditer(path + "/"):
        prefix = path[:match.start()]
        if not prefix:
            continue
        if _mkdir(prefix, mode):
            logger.info("Created directory %s (mode %03o)", prefix, mode)


def verify_exclusive_ownership(dirname: PathLike) -> None:
    """Create ``dirname`` with mode 700 if needed and check nobody else can use it.

    Raises OwnershipError or PermissionBitsError when a pre-existing
    directory belongs to another user or is open to group/other, and
    DirectoryCreationError when ``dirname`` exists but is not a directory. Callers
    must not put private files in the directory after such a failure.
    """
    dirname = _as_str(dirname)
    if _mkdir(dirname, PRIVATE_DIR_MODE):
        logger.info("Created private directory %s", dirname)

    try:
        st = os.stat(dirname)
    except OSError as exc:
        raise DirectoryCreationError(dirname, exc.strerror or str(exc), "stat") from exc

    if not stat.S_ISDIR(st.st_mode):
        raise DirectoryCreationError(dirname, "Not a directory", "stat")
    if st.st_uid != os.getuid():
        logger.warning("Refusing %s: owned by uid %d", dirname, st.st_uid)
        raise OwnershipError(dirname, st.st_uid)
    if st.st_mode & (stat.S_IRWXG | stat.S_IRWXO):
        logger.warning("Refusing %s: mode %03o", dirname, st.st_mode & 0o777)
        raise PermissionBitsError(dirname, stat.S_IMODE(st.st_mode))


def ensure_parent_exists(fullpath: PathLike) -> ParentStatus:
    """Make sure the directory containing ``fullpath`` exists.

    Missing directories are created world-traversable; use
    :func:`verify_exclusive_ownership` for anything private.
    """
    fullpath = _as_str(fullpath)
    sep = fullpath.rfind("/")
    if sep < 0:
        return ParentStatus.NO_PARENT

    parent = fullpath[:sep] or "/"
    if os.path.exists(parent):
        return ParentStatus.EXISTS

    create_path_chain(parent, PUBLIC_DIR_MODE)
    return ParentStatus.CREATED


def ensure_private_file(path: Path) -> None:
    if not path.exists():
        path.touch()
    os.chmod(path, PRIVATE_FILE_MODE)


def sanitize_identifier(value: str) -> str:
    """Return a filesystem-safe identifier."""
    return _SAFE_ID_RE.sub("_", value)
