"""Types describing the serialized scanner-table format."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAGIC = 0xF13C57B1


class TableId(enum.IntEnum):
    """Identifiers of the serialized scanner tables."""

    ACCEPT = 0x01
    BASE = 0x02
    CHK = 0x03
    DEF = 0x04
    EC = 0x05
    META = 0x06
    NUL_TRANS = 0x07
    NXT = 0x08
    RULE_CAN_MATCH_EOL = 0x09
    START_STATE_LIST = 0x0A
    TRANSITION = 0x0B
    ACCLIST = 0x0C


class TableFlags(enum.IntFlag):
    """How the data of a table is to be read."""

    DATA8 = 0x01
    DATA16 = 0x02
    DATA32 = 0x04
    PTRANS = 0x08
    STRUCT = 0x10


@dataclass
class TableHeader:
    """Header of a serialized table set."""

    version: str
    name: str
    flags: int = 0
    magic: int = MAGIC
    ssize: int = 0

    def hsize(self) -> int:
        """Size of the header in bytes, padded to a 64-bit boundary."""
        size = 14 + len(self.version.encode()) + 1 + len(self.name.encode()) + 1
        return size + (8 - size % 8) % 8


@dataclass
class TableData:
    """One serialized table."""

    id: TableId
    flags: TableFlags = TableFlags.DATA32
    hilen: int = 0
    lolen: int = 0
    data: list[int] = field(default_factory=list)

    def total_len(self) -> int:
        """Number of integers in the table (not the number of elements)."""
        n = self.lolen & 0xFFFFFFFF
        if self.hilen > 0:
            n = (n * self.hilen) & 0xFFFFFFFF
        if self.id == TableId.TRANSITION:
            n = (n * 2) & 0xFFFFFFFF
        return n - (1 << 32) if n >= 1 << 31 else n

    def element_size(self) -> int:
        """Bytes per integer as given by the DATA flags."""
        if self.flags & TableFlags.DATA8:
            return 1
        if self.flags & TableFlags.DATA16:
            return 2
        return 4