"""Skeleton files: property lookup and section-by-section output."""

from __future__ import annotations

from typing import Iterable, Iterator, TextIO

_C_SPACE = " \t\n\v\f\r"
_BUFFER_LIMIT = 255
_DEFINE = "m4_define("


class SkeletonError(Exception):
    """Raised on a malformed skeleton line."""


class Skeleton:
    """The lines of a code skeleton, split into sections by ``%%`` lines."""

    def __init__(self, lines: Iterable[str], default: bool = False) -> None:
        self.lines = [line.rstrip("\n") for line in lines]
        self.default = default
        self._position = 0

    def _prolog(self) -> Iterator[str]:
        for line in self.lines:
            if line.startswith("%%"):
                return
            yield line

    def property(self, name: str) -> str | None:
        """Return the value of a single-line ``m4_define`` in the prolog."""
        for line in self._prolog():
            if not line.startswith(_DEFINE):
                continue
            pos = len(_DEFINE)
            while pos < len(line) and (line[pos] in _C_SPACE or line[pos] == "["):
                pos += 1

            start = pos
            while pos < len(line) and line[pos] != "]" and pos - start < _BUFFER_LIMIT:
                pos += 1
            found = line[start:pos]
            if pos >= len(line) or line[pos] != "]":
                raise SkeletonError("unterminated or too long property name")
            if found != name:
                continue

            while pos < len(line) and (
                line[pos] == "]" or line[pos] in _C_SPACE or line[pos] == ","
            ):
                pos += 1
            while pos < len(line) and line[pos] == "[":
                pos += 1
            if pos >= len(line):
                raise SkeletonError("garbled property line")

            start = pos
            while (
                pos < len(line)
                and pos - start < _BUFFER_LIMIT
                and line[pos : pos + 2] != "]]"
            ):
                pos += 1
            if pos < len(line) and line[pos] == "]":
                return line[start:pos]
            raise SkeletonError("unterminated or too long property value")
        return None

    def has_bone(self, bone: str) -> bool:
        """Whether ``bone`` occurs in the prolog, the first ``%%`` line included."""
        for line in self.lines:
            if bone in line:
                return True
            if line.startswith("%%"):
                break
        return False

    def suffix(self, cplusplus: bool = False) -> str | None:
        """File suffix of the generated source."""
        if self.default:
            return "cc" if cplusplus else "c"
        return self.property("M4_PROPERTY_SOURCE_SUFFIX")

    def sections(self) -> Iterator[list[str]]:
        """Yield the copied lines of each section, comment lines removed."""
        section: list[str] = []
        for line in self.lines:
            if line.startswith("%"):
                if line.startswith("%#"):
                    continue
                if line.startswith("%%"):
                    yield section
                    section = []
                    continue
                raise SkeletonError("bad line in skeleton file")
            section.append(line)
        yield section

    def write_section(self, out: TextIO, announce: bool = False, debug: bool = False) -> bool:
        """Copy lines to ``out`` up to the next ``%%`` line.

        Returns True when a ``%%`` break point ended the section and False
        when the skeleton ran out.
        """
        while self._position < len(self.lines):
            line = self.lines[self._position]
            self._position += 1
            if line.startswith("%"):
                if debug and not line.startswith("%#"):
                    out.write(f"/* {line} */\n")
                if line.startswith("%#"):
                    continue
                if line.startswith("%%"):
                    if announce:
                        out.write(f"/* {line} */\n")
                    return True
                raise SkeletonError("bad line in skeleton file")
            out.write(line + "\n")
        return False