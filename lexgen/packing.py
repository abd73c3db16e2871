"""Packing of DFA state transitions into base/def/nxt/chk tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

NIL = 0
JAMSTATE = -32766
SAME_TRANS = -1


@dataclass(frozen=True)
class CompressionParams:
    """Tunable thresholds and sizes used while packing transition tables."""

    proto_size_percentage: int = 15
    check_com_percentage: int = 50
    first_match_diff_percentage: int = 10
    acceptable_diff_percentage: int = 50
    template_same_percentage: int = 60
    new_proto_diff_percentage: int = 20
    interior_fit_percentage: int = 15
    max_xtions_full_interior_fit: int = 4
    max_protos: int = 50
    proto_save_size: int = 2000
    one_stack_size: int = 500
    initial_max_xpairs: int = 2000
    max_xpairs_increment: int = 2000
    max_template_xpairs_increment: int = 2500
    use_mecs: bool = True


class TransitionTable:
    """The nxt/chk pair arrays together with the base and def tables.

    State transition arrays are indexed by equivalence class ``1..numecs``;
    element 0 of such a sequence is ignored.
    """

    def __init__(self, numecs: int, params: CompressionParams | None = None) -> None:
        self.numecs = numecs
        self.params = params or CompressionParams()
        size = self.params.initial_max_xpairs
        self.nxt: list[int] = [0] * size
        self.chk: list[int] = [0] * size
        self.base: dict[int, int] = {}
        self.default: dict[int, int] = {}
        self.tblend = 0
        self.firstfree = 1
        self.numtemps = 0
        self.jamstate = 0
        self.jambase = 0
        self.reallocs = 0
        self.single_stack: list[tuple[int, int, int, int]] = []

    def _expand(self) -> None:
        increment = self.params.max_xpairs_increment
        self.nxt.extend([0] * increment)
        self.chk.extend([0] * increment)
        self.reallocs += 1

    def _reserve(self, index: int) -> None:
        """Grow the pair arrays until ``index`` lies strictly inside them."""
        while index >= len(self.chk):
            self._expand()

    def _next_free(self, start: int) -> int:
        """First position at or after ``start`` whose chk entry is unused."""
        position = start
        self._reserve(position)
        while self.chk[position] != 0:
            position += 1
            self._reserve(position)
        return position

    def find_table_space(self, state: Sequence[int], numtrans: int) -> int:
        """Return the first position in chk able to hold ``state``.

        Room is also left for the end-of-buffer entry at the position
        itself and for the action number just before it.
        """
        fit = self.params.max_xtions_full_interior_fit
        if numtrans > fit:
            if self.tblend < 2:
                return 1
            position = max(self.tblend - self.numecs, 1)
        else:
            position = self.firstfree

        while True:
            self._reserve(position + self.numecs)
            while True:
                if self.chk[position - 1] == 0:
                    if self.chk[position] == 0:
                        break
                    position += 2
                else:
                    position += 1
                self._reserve(position + self.numecs)

            if numtrans <= fit:
                self.firstfree = position + 1

            if all(
                state[ec] == 0 or self.chk[position + ec] == 0
                for ec in range(1, self.numecs + 1)
            ):
                return position
            position += 1

    def make_default_table(self, lastdfa: int, end_of_buffer_state: int) -> None:
        """Make the default "jam" table entries."""
        self.jamstate = lastdfa + 1
        self.tblend += 1
        self._reserve(self.tblend + self.numecs)

        self.nxt[self.tblend] = end_of_buffer_state
        self.chk[self.tblend] = self.jamstate
        for ec in range(1, self.numecs + 1):
            self.nxt[self.tblend + ec] = 0
            self.chk[self.tblend + ec] = self.jamstate

        self.jambase = self.tblend
        self.base[self.jamstate] = self.jambase
        self.default[self.jamstate] = 0
        self.tblend += self.numecs
        self.numtemps += 1

    def make_entry(
        self,
        state: Sequence[int],
        numchars: int,
        statenum: int,
        deflink: int,
        totaltrans: int,
    ) -> None:
        """Create base/def and nxt/chk entries for one state's transitions.

        Entries equal to ``SAME_TRANS`` are left to ``deflink``; when
        ``deflink`` is ``JAMSTATE`` zero entries are left out as well.
        """
        if totaltrans == 0:
            self.base[statenum] = JAMSTATE if deflink == JAMSTATE else 0
            self.default[statenum] = deflink
            return

        def needed(ec: int) -> bool:
            value = state[ec]
            return value != SAME_TRANS and (value != 0 or deflink != JAMSTATE)

        minec = next(
            (ec for ec in range(1, numchars + 1) if needed(ec)), numchars + 1
        )
        if totaltrans == 1:
            self.stack_single(statenum, minec, state[minec], deflink)
            return

        maxec = next((ec for ec in range(numchars, 0, -1) if needed(ec)), 0)

        if totaltrans * 100 <= numchars * self.params.interior_fit_percentage:
            baseaddr = self.firstfree
            while baseaddr < minec:
                baseaddr = self._next_free(baseaddr + 1)
            self._reserve(baseaddr + maxec - minec + 1)

            ec = minec
            while ec <= maxec:
                if needed(ec) and self.chk[baseaddr + ec - minec] != 0:
                    baseaddr = self._next_free(baseaddr + 1)
                    self._reserve(baseaddr + maxec - minec + 1)
                    ec = minec
                    continue
                ec += 1
        else:
            baseaddr = max(self.tblend + 1, minec)

        tblbase = baseaddr - minec
        tbllast = tblbase + maxec
        self._reserve(tbllast + 1)

        self.base[statenum] = tblbase
        self.default[statenum] = deflink

        for ec in range(minec, maxec + 1):
            if needed(ec):
                self.nxt[tblbase + ec] = state[ec]
                self.chk[tblbase + ec] = statenum

        if baseaddr == self.firstfree:
            self.firstfree = self._next_free(self.firstfree + 1)

        self.tblend = max(self.tblend, tbllast)

    def make_single_entry(self, state: int, sym: int, onenxt: int, onedef: int) -> None:
        """Create table entries for a state with a single out-transition."""
        self.firstfree = self._next_free(max(self.firstfree, sym))

        self.base[state] = self.firstfree - sym
        self.default[state] = onedef
        self.chk[self.firstfree] = state
        self.nxt[self.firstfree] = onenxt

        if self.firstfree > self.tblend:
            self.tblend = self.firstfree
            self.firstfree += 1
            self._reserve(self.firstfree)

    def place_state(self, state: Sequence[int], statenum: int, transnum: int) -> int:
        """Place a state into the full-speed transition table; return its base."""
        position = self.find_table_space(state, transnum)
        self._reserve(position + self.numecs)
        self.base[statenum] = position

        # Action-number and end-of-buffer markers keep these slots taken.
        self.chk[position - 1] = 1
        self.chk[position] = 1

        for ec in range(1, self.numecs + 1):
            if state[ec] != 0:
                self.chk[position + ec] = ec
                self.nxt[position + ec] = state[ec]

        self.tblend = max(self.tblend, position + self.numecs)
        return position

    def stack_single(self, statenum: int, sym: int, nextstate: int, deflink: int) -> None:
        """Defer a single-transition state, or place it now if the stack is full."""
        if len(self.single_stack) >= self.params.one_stack_size - 1:
            self.make_single_entry(statenum, sym, nextstate, deflink)
        else:
            self.single_stack.append((statenum, sym, nextstate, deflink))