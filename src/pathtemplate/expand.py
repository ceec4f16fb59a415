"""
Template expansion for user-supplied paths.

Only ``~``, ``${NAME}`` and ``$NAME`` are recognised. No other shell
expansion is performed. A backslash directly before ``$`` or ``~`` makes
that character literal and is itself dropped.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional


HOME_VARIABLE = "HOME"
SPECIAL_CHARS = "$~"


def _is_name_start(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalpha())


def _is_name_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def _parse_reference(template: str, i: int) -> tuple[Optional[str], int]:
    """Parse a ``$`` reference at ``template[i]``.

    Returns the variable name (None if this ``$`` is not a reference) and
    the index just past the reference.
    """
    nxt = i + 1
    if template.startswith("{", nxt):
        close = template.find("}", nxt + 1)
        if close < 0:
            return None, nxt
        return template[nxt + 1:close], close + 1
    if nxt < len(template) and _is_name_start(template[nxt]):
        end = nxt + 1
        while end < len(template) and _is_name_char(template[end]):
            end += 1
        return template[nxt:end], end
    return None, nxt


def expand(template: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Expand ``~``, ``$NAME`` and ``${NAME}`` in ``template``.

    Unbound variables (and ``~`` with no ``HOME``) expand to nothing.
    Malformed references (``$`` with no name, ``${`` with no closing brace)
    are copied through literally, so this never fails.
    """
    env = os.environ if environ is None else environ
    out: list[str] = []
    escaped = False
    i = 0
    n = len(template)

    while i < n:
        c = template[i]
        if c == "\\" and i + 1 < n and template[i + 1] in SPECIAL_CHARS:
            escaped = True
            i += 1
        elif not escaped and c == "$":
            name, i = _parse_reference(template, i)
            if name is None:
                out.append(c)
            else:
                out.append(env.get(name) or "")
        elif not escaped and c == "~":
            out.append(env.get(HOME_VARIABLE) or "")
            i += 1
        else:
            out.append(c)
            escaped = False
            i += 1

    return "".join(out)
