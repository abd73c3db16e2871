"""Hashed symbol tables for name definitions, start conditions and classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

NAME_TABLE_HASH_SIZE = 101
START_COND_HASH_SIZE = 101
CCL_HASH_SIZE = 101


class DuplicateSymbolError(ValueError):
    """Raised when a symbol is installed twice."""


def hash_symbol(text: str, size: int) -> int:
    """Hash ``text`` into a bucket number in ``range(size)``."""
    value = 0
    for byte in text.encode():
        value = ((value << 1) + byte) % size
    return value


@dataclass
class _Entry:
    name: str
    str_val: str | None
    int_val: int


class SymbolTable:
    """A chained hash table mapping names to a string and an integer value."""

    def __init__(self, size: int = 101) -> None:
        self.size = size
        self._buckets: list[list[_Entry]] = [[] for _ in range(size)]

    def _bucket(self, name: str) -> list[_Entry]:
        return self._buckets[hash_symbol(name, self.size)]

    def add(self, name: str, str_val: str | None = None, int_val: int = 0) -> None:
        """Add a symbol; raise DuplicateSymbolError if it already exists."""
        bucket = self._bucket(name)
        if any(entry.name == name for entry in bucket):
            raise DuplicateSymbolError(f"symbol {name!r} already defined")
        bucket.insert(0, _Entry(name, str_val, int_val))

    def find(self, name: str) -> tuple[str | None, int] | None:
        """Return ``(str_val, int_val)`` for ``name``, or None if absent."""
        for entry in self._bucket(name):
            if entry.name == name:
                return entry.str_val, entry.int_val
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None


@dataclass
class StartCondition:
    """A declared start condition and its two epsilon states."""

    name: str
    exclusive: bool
    set_state: Any
    bol_state: Any
    eof: bool = False


class LexerSymbols:
    """The symbol tables a scanner generator keeps while reading rules."""

    def __init__(self) -> None:
        self.name_definitions = SymbolTable(NAME_TABLE_HASH_SIZE)
        self.start_condition_table = SymbolTable(START_COND_HASH_SIZE)
        self.ccl_table = SymbolTable(CCL_HASH_SIZE)
        self.start_conditions: list[StartCondition] = []

    def install_name_definition(self, name: str, definition: str) -> None:
        """Install a name definition; defining a name twice is an error."""
        try:
            self.name_definitions.add(name, definition, 0)
        except DuplicateSymbolError:
            raise DuplicateSymbolError("name defined twice") from None

    def lookup_name_definition(self, name: str) -> str | None:
        """Return the definition of ``name``, or None if it has none."""
        found = self.name_definitions.find(name)
        return found[0] if found else None

    def install_ccl(self, text: str, cclnum: int) -> None:
        """Remember the text of a character class and its number."""
        if text not in self.ccl_table:
            self.ccl_table.add(text, None, cclnum)

    def lookup_ccl(self, text: str) -> int:
        """Return the number of the character class with this text, 0 if none."""
        found = self.ccl_table.find(text)
        return found[1] if found else 0

    def install_start_condition(
        self,
        name: str,
        exclusive: bool = False,
        make_state: Callable[[], Any] | None = None,
    ) -> int:
        """Declare a start condition and return its number, counting from 1."""
        if name in self.start_condition_table:
            raise DuplicateSymbolError(f"start condition {name} declared twice")
        number = len(self.start_conditions) + 1
        self.start_condition_table.add(name, None, number)
        set_state = make_state() if make_state else None
        bol_state = make_state() if make_state else None
        self.start_conditions.append(
            StartCondition(name, bool(exclusive), set_state, bol_state)
        )
        return number

    def lookup_start_condition(self, name: str) -> int:
        """Return the number of a start condition, 0 if it is not declared."""
        found = self.start_condition_table.find(name)
        return found[1] if found else 0