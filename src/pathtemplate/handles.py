"""
Path and display-name handles.

A handle wraps a single string. Both kinds persist as the raw bytes of
that string followed by one NUL terminator, so a record always occupies
``len(value) + 1`` bytes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, TypeVar

from .errors import MalformedRecordError


TERMINATOR = b"\0"

H = TypeVar("H", bound="_NulTerminated")


def read_record(data, offset: int = 0, bound: Optional[int] = None) -> tuple[bytes, int]:
    """Return the bytes of one NUL-terminated record and how many bytes it used.

    At most ``bound`` bytes starting at ``offset`` are scanned; the whole rest
    of ``data`` is scanned when ``bound`` is None.
    """
    end = len(data) if bound is None else min(len(data), offset + bound)
    window = bytes(data[offset:end])
    nul = window.find(TERMINATOR)
    if nul < 0:
        raise MalformedRecordError(
            f"no terminator within {end - offset} bytes at offset {offset}"
        )
    return window[:nul], nul + 1


def write_record(value: bytes, buffer=None, offset: int = 0) -> int:
    """Copy ``value`` plus its terminator into ``buffer`` (if given); return the length."""
    record = value + TERMINATOR
    if buffer is not None:
        if len(buffer) - offset < len(record):
            raise ValueError(
                f"buffer too small: need {len(record)} bytes at offset {offset}, "
                f"have {len(buffer) - offset}"
            )
        buffer[offset:offset + len(record)] = record
    return len(record)


class _NulTerminated:
    """Shared codec for handles that wrap one string."""

    def _value(self) -> str:
        raise NotImplementedError

    @classmethod
    def _from_value(cls: type[H], value: str) -> H:
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        return os.fsencode(self._value()) + TERMINATOR

    def serialise(self, buffer=None, offset: int = 0) -> int:
        """Write the record into ``buffer`` and return its length including the NUL.

        With no buffer this only reports the length, so callers can size
        storage first.
        """
        return write_record(os.fsencode(self._value()), buffer, offset)

    @classmethod
    def deserialise(
        cls: type[H], data, bound: Optional[int] = None, offset: int = 0
    ) -> tuple[H, int]:
        """Rebuild a handle from ``data``; return it with the number of bytes consumed."""
        raw, consumed = read_record(data, offset, bound)
        return cls._from_value(os.fsdecode(raw)), consumed


def _check_value(kind: str, value: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{kind} must be a str, not {type(value).__name__}")
    if "\0" in value:
        raise ValueError(f"{kind} may not contain NUL characters")


@dataclass
class PathHandle(_NulTerminated):
    """A filesystem path, or a template that expands to one.

    The empty string means "no path".
    """

    path: str = ""

    def __post_init__(self) -> None:
        _check_value("path", self.path)

    def _value(self) -> str:
        return self.path

    @classmethod
    def _from_value(cls, value: str) -> PathHandle:
        return cls(value)

    def is_null(self) -> bool:
        return not self.path

    def copy(self) -> PathHandle:
        return PathHandle(self.path)

    def __str__(self) -> str:
        return self.path

    def __fspath__(self) -> str:
        return self.path


@dataclass
class DisplayNameHandle(_NulTerminated):
    """A font or display name. Never expanded or migrated."""

    name: str = ""

    def __post_init__(self) -> None:
        _check_value("name", self.name)

    def _value(self) -> str:
        return self.name

    @classmethod
    def _from_value(cls, value: str) -> DisplayNameHandle:
        return cls(value)

    def is_null(self) -> bool:
        return not self.name

    def copy(self) -> DisplayNameHandle:
        return DisplayNameHandle(self.name)

    def __str__(self) -> str:
        return self.name
