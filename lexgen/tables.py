"""Serialization of scanner tables into the binary tables format."""

from __future__ import annotations

import dataclasses
import struct
from typing import BinaryIO

from lexgen.tableformat import TableData, TableFlags, TableHeader

INT8_MAX = 127
INT16_MAX = 32767
INT32_MAX = 2147483647

_DATA_FLAGS = TableFlags.DATA8 | TableFlags.DATA16 | TableFlags.DATA32
_PACK_CODES = {1: "B", 2: "H", 4: "I"}
_SIZE_FLAGS = {1: TableFlags.DATA8, 2: TableFlags.DATA16, 4: TableFlags.DATA32}


class TableError(Exception):
    """Raised when tables cannot be serialized or compressed."""


def _to_signed(value: int, size: int) -> int:
    bits = size * 8
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >= 1 << (bits - 1) else value


def _values(data: TableData) -> list[int]:
    count = data.total_len()
    if len(data.data) < count:
        raise TableError(
            f"table holds {len(data.data)} integers, {count} expected"
        )
    size = data.element_size()
    return [_to_signed(value, size) for value in data.data[:count]]


def _min_int_size(values: list[int]) -> int:
    largest = max((abs(value) for value in values), default=0)
    if largest <= INT8_MAX:
        return 1
    if largest <= INT16_MAX:
        return 2
    return 4


def compress(data: TableData) -> TableData:
    """Return the table stored with the narrowest integer width that holds it.

    The given table is returned unchanged when no narrower width fits; a
    new table is returned otherwise.
    """
    values = _values(data)
    new_size = _min_int_size(values)
    old_size = data.element_size()
    if new_size == old_size:
        return data
    if new_size > old_size:
        raise TableError("detected negative compression")
    flags = TableFlags((int(data.flags) & ~int(_DATA_FLAGS)) | _SIZE_FLAGS[new_size])
    return dataclasses.replace(
        data,
        flags=flags,
        data=[_to_signed(value, new_size) for value in values],
    )


class TableWriter:
    """Writes a table header followed by tables to a seekable binary stream."""

    def __init__(self, out: BinaryIO) -> None:
        self.out = out
        self.total_written = 0
        self._ssize_pos: int | None = None

    def _write(self, payload: bytes) -> int:
        try:
            count = self.out.write(payload)
        except (OSError, ValueError) as exc:
            raise TableError(f"error while writing tables: {exc}") from exc
        if count is not None and count != len(payload):
            raise TableError("short write while writing tables")
        self.total_written += len(payload)
        return len(payload)

    def _pad64(self) -> int:
        padding = (8 - self.total_written % 8) % 8
        return self._write(bytes(padding)) if padding else 0

    def _tell(self) -> int:
        try:
            return self.out.tell()
        except (OSError, ValueError) as exc:
            raise TableError(f"cannot get stream position: {exc}") from exc

    def write_header(self, header: TableHeader) -> int:
        """Write the header and return the number of bytes written."""
        written = self._write(
            struct.pack(">II", header.magic & 0xFFFFFFFF, header.hsize() & 0xFFFFFFFF)
        )
        self._ssize_pos = self._tell()
        written += self._write(
            struct.pack(">IH", header.ssize & 0xFFFFFFFF, header.flags & 0xFFFF)
        )
        written += self._write(header.version.encode() + b"\0")
        written += self._write(header.name.encode() + b"\0")
        written += self._pad64()
        if written != header.hsize():
            raise TableError("header size does not match the bytes written")
        return written

    def write_data(self, data: TableData) -> int:
        """Write one table, update the set size in the header, return bytes written."""
        if self._ssize_pos is None:
            raise TableError("no table header has been written")
        values = _values(data)
        size = data.element_size()
        mask = (1 << (size * 8)) - 1

        written = self._write(
            struct.pack(
                ">HHII",
                int(data.id) & 0xFFFF,
                int(data.flags) & 0xFFFF,
                data.hilen & 0xFFFFFFFF,
                data.lolen & 0xFFFFFFFF,
            )
        )
        fmt = f">{len(values)}{_PACK_CODES[size]}"
        written += self._write(struct.pack(fmt, *(value & mask for value in values)))
        if written != 12 + len(values) * size:
            raise TableError("insanity detected")
        written += self._pad64()

        try:
            position = self.out.tell()
            self.out.seek(self._ssize_pos)
            self.out.write(struct.pack(">I", self.total_written & 0xFFFFFFFF))
            self.out.seek(position)
        except (OSError, ValueError) as exc:
            raise TableError(f"cannot update the table set size: {exc}") from exc
        return written