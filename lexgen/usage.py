"""Usage text built from a table of option specifications."""

from __future__ import annotations

import os
import sys
from typing import Sequence, TextIO

from lexgen.scanopt import OptSpec

_C_SPACE = " \t\n\v\f\r"
_INDENT = 2
_MIN_DESC_WIDTH = 14
_DEFAULT_COLUMNS = 80


def _atoi(text: str) -> int:
    """Parse a leading decimal integer the way C ``atoi`` does."""
    text = text.lstrip(_C_SPACE)
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    return sign * int(digits) if digits else 0


def terminal_columns() -> int:
    """Width of the terminal taken from ``COLUMNS``, 80 when it is unset."""
    env = os.environ.get("COLUMNS")
    if env is None:
        return _DEFAULT_COLUMNS
    return _atoi(env)


def _group_options(options: Sequence[OptSpec]) -> list[tuple[OptSpec, list[OptSpec]]]:
    """Group options by return value; groups are ordered by name."""
    groups: list[tuple[OptSpec, list[OptSpec]]] = []
    for opt in options:
        insert_at: int | None = None
        for position, (head, aliases) in enumerate(groups):
            if head.r_val == opt.r_val:
                aliases.insert(0, opt)
                break
            if insert_at is None and head.name.lower() > opt.name.lower():
                insert_at = position
        else:
            if insert_at is None:
                groups.append((opt, []))
            else:
                groups.insert(insert_at, (opt, []))
    return groups


def _wrap_description(desc: str, width: int, desccol: int) -> str:
    pad = " " * desccol
    out: list[str] = []
    start = 0
    while True:
        pos = start
        lastws: int | None = None
        count = 0
        while pos < len(desc) and count < width and desc[pos] != "\n":
            if desc[pos] in _C_SPACE or desc[pos] == "-":
                lastws = pos
            count += 1
            pos += 1

        if pos >= len(desc):
            out.append(desc[start:] + "\n")
            break
        if desc[pos] == "\n":
            out.append(desc[start:pos] + "\n" + pad)
            start = pos + 1
            continue
        if lastws is not None:
            out.append(desc[start:lastws] + "\n")
            start = lastws + 1
        else:
            out.append(desc[start:pos] + "\n")
            start = pos + 1
        out.append(pad)
    return "".join(out)


def format_usage(
    options: Sequence[OptSpec],
    program: str,
    usage: str | None = None,
    columns: int | None = None,
) -> str:
    """Return a usage message listing every option with its description.

    Options sharing a return value are printed on one line as aliases.
    Lines with a short option come first, then lines with long options only.
    """
    parts: list[str] = []
    if usage is not None:
        parts.append(f"{usage}\n")
    else:
        parts.append(f"Usage: {program} [OPTIONS]...\n")
    parts.append("\n")

    groups = _group_options(options)

    opt_col_width = 0
    desc_col_width = 0
    for head, aliases in groups:
        length = head.print_len + sum(alias.print_len + len(", ") for alias in aliases)
        opt_col_width = max(opt_col_width, length)
        desc_col_width = max(desc_col_width, len(head.description))

    available = (terminal_columns() if columns is None else columns) - 1
    if opt_col_width + desc_col_width + _INDENT * 2 > available:
        desc_col_width = available - (opt_col_width + _INDENT * 2)
        if desc_col_width < _MIN_DESC_WIDTH:
            desc_col_width = sys.maxsize
    desccol = opt_col_width + _INDENT * 2

    for want_short in (True, False):
        for head, aliases in groups:
            members = [head, *aliases]
            has_short = any(not opt.is_long for opt in members)
            if has_short != want_short:
                continue

            ordered: list[OptSpec] = []
            if not head.is_long:
                ordered.append(head)
            ordered.extend(alias for alias in aliases if not alias.is_long)
            if head.is_long:
                ordered.append(head)
            ordered.extend(alias for alias in aliases if alias.is_long)

            names = ", ".join(opt.opt_fmt for opt in ordered)
            line = " " * _INDENT + names
            parts.append(line)
            parts.append(" " * max(0, desccol - len(line)))
            parts.append(_wrap_description(head.description, desc_col_width, desccol))

    return "".join(parts)


def write_usage(
    options: Sequence[OptSpec],
    file: TextIO,
    program: str,
    usage: str | None = None,
    columns: int | None = None,
) -> None:
    """Write the usage message produced by :func:`format_usage` to ``file``."""
    file.write(format_usage(options, program, usage, columns))