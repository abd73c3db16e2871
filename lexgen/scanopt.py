"""Command-line option scanning driven by a table of option specifications."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import Iterator, Sequence

_C_SPACE = " \t\n\v\f\r"


class ErrorCode(enum.IntEnum):
    """Reasons an option could not be scanned."""

    OPT_UNRECOGNIZED = -1
    OPT_AMBIGUOUS = -2
    ARG_NOT_FOUND = -3
    ARG_NOT_ALLOWED = -4


_MESSAGES = {
    ErrorCode.ARG_NOT_ALLOWED: "option `{}' doesn't allow an argument",
    ErrorCode.ARG_NOT_FOUND: "option `{}' requires an argument",
    ErrorCode.OPT_AMBIGUOUS: "option `{}' is ambiguous",
    ErrorCode.OPT_UNRECOGNIZED: "Unrecognized option `{}'",
}


class ScanOptError(Exception):
    """Raised when a command-line option is malformed or unknown."""

    def __init__(self, code: ErrorCode, option: str, index: int) -> None:
        self.code = code
        self.option = option
        self.index = index
        self.message = _MESSAGES[code].format(option)
        super().__init__(self.message)


class ArgKind(enum.Enum):
    """Whether an option takes an argument."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class OptSpec:
    """One option: a format such as ``"--foo=FILE"``, ``"-f FILE"`` or ``"-n [NUM]"``."""

    opt_fmt: str
    r_val: int
    desc: str | None = None
    is_long: bool = field(init=False, repr=False, compare=False)
    arg_kind: ArgKind = field(init=False, repr=False, compare=False)
    name_len: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        fmt = self.opt_fmt
        if len(fmt) < 2 or fmt[0] != "-":
            raise ValueError(f"invalid option format: {fmt!r}")
        is_long = fmt.startswith("--")
        pname = fmt[2:] if is_long else fmt[1:]
        if not pname:
            raise ValueError(f"invalid option format: {fmt!r}")

        kind = ArgKind.NONE
        name_len = 0
        for pos, char in enumerate(pname[1:], start=1):
            if char == "=" or char in _C_SPACE or not is_long:
                if name_len == 0:
                    name_len = pos
                kind = ArgKind.REQUIRED
            if char == "[":
                if name_len == 0:
                    name_len = pos
                kind = ArgKind.OPTIONAL
                break
        if name_len == 0:
            name_len = len(pname)

        object.__setattr__(self, "is_long", is_long)
        object.__setattr__(self, "arg_kind", kind)
        object.__setattr__(self, "name_len", name_len)

    @property
    def name(self) -> str:
        """The format without its leading dashes, e.g. ``"file=FOO"``."""
        return self.opt_fmt[2:] if self.is_long else self.opt_fmt[1:]

    @property
    def option_name(self) -> str:
        """The bare option word, e.g. ``"file"``."""
        return self.name[: self.name_len]

    @property
    def print_len(self) -> int:
        return len(self.opt_fmt)

    @property
    def description(self) -> str:
        return self.desc or ""


@dataclass(frozen=True)
class ScanResult:
    """A recognised option: its return value, its argument and its argv index."""

    value: int
    arg: str | None
    index: int


class OptionScanner:
    """Scans ``argv[1:]`` for options described by a list of :class:`OptSpec`."""

    def __init__(
        self,
        options: Sequence[OptSpec],
        argv: Sequence[str],
        quiet: bool = False,
    ) -> None:
        self.options = list(options)
        self.argv = list(argv)
        self.quiet = quiet
        self.index = 1
        self._subscript = 0

    @property
    def program(self) -> str:
        return self.argv[0] if self.argv else ""

    def _advance(self, count: int) -> None:
        self.index += count
        self._subscript = 0

    def _fail(self, code: ErrorCode, is_short: bool) -> ScanOptError:
        option = ""
        if 0 < self.index < len(self.argv):
            if is_short:
                option = self.argv[self.index][self._subscript]
            else:
                option = self.argv[self.index]
        error = ScanOptError(code, option, self.index)
        if not self.quiet:
            print(f"{self.program}: {error.message}", file=sys.stderr)
        return error

    def _find(self, lookup_long: bool, text: str) -> OptSpec | ErrorCode:
        matches = 0
        last_rval = 0
        found: OptSpec | None = None
        for opt in self.options:
            if lookup_long and opt.is_long:
                length = len(text)
                if length > opt.name_len:
                    continue
                if opt.name[:length] == text:
                    matches += 1
                    found = opt
                    if length == opt.name_len:
                        matches = 1
                        break
                    if last_rval and last_rval == opt.r_val:
                        matches -= 1
                    last_rval = opt.r_val
            elif not lookup_long and not opt.is_long:
                if opt.name[0] == text[0]:
                    matches += 1
                    found = opt
        if matches == 0 or found is None:
            return ErrorCode.OPT_UNRECOGNIZED
        if matches > 1:
            return ErrorCode.OPT_AMBIGUOUS
        return found

    def scan(self) -> ScanResult | None:
        """Return the next option, or None when options end.

        When None is returned, ``index`` is the argv index of the first
        non-option argument.
        """
        start_index = self.index
        if self.index >= len(self.argv):
            return None

        current = self.argv[self.index][self._subscript:]
        optarg: str | None = None
        is_short = False
        spec: OptSpec | None = None

        if self._subscript == 0:
            if current == "--":
                self._advance(1)
                return None
            if current.startswith("--") and len(current) > 2:
                body = current[2:]
                name, sep, value = body.partition("=")
                optarg = value if sep else None
                found = self._find(True, name)
                if isinstance(found, ErrorCode):
                    raise self._fail(found, False)
                spec = found
            elif current.startswith("-") and len(current) > 1:
                self._subscript += 1
                current = current[1:]
            else:
                return None

        if self._subscript != 0:
            is_short = True
            found = self._find(False, current)
            if isinstance(found, ErrorCode):
                raise self._fail(found, True)
            spec = found
            optarg = current[1:] or None

        assert spec is not None
        has_next = self.index + 1 < len(self.argv)

        if spec.arg_kind is ArgKind.NONE:
            if optarg is not None and not is_short:
                error = self._fail(ErrorCode.ARG_NOT_ALLOWED, False)
                self._advance(1)
                raise error
            if optarg is None:
                self._advance(1)
            else:
                self._subscript += 1
            return ScanResult(spec.r_val, None, start_index)

        if spec.arg_kind is ArgKind.REQUIRED:
            if optarg is None and not has_next:
                raise self._fail(ErrorCode.ARG_NOT_FOUND, is_short)
            if optarg is None:
                arg = self.argv[self.index + 1]
                self._advance(2)
            else:
                arg = optarg
                self._advance(1)
            return ScanResult(spec.r_val, arg, start_index)

        self._advance(1)
        return ScanResult(spec.r_val, optarg, start_index)

    def __iter__(self) -> Iterator[ScanResult]:
        while (result := self.scan()) is not None:
            yield result