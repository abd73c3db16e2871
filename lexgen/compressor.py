"""Compression of DFA transition tables using protos and templates."""

from __future__ import annotations

from typing import Callable, Sequence

from lexgen.packing import (
    JAMSTATE,
    NIL,
    SAME_TRANS,
    CompressionParams,
    TransitionTable,
)

MarkClasses = Callable[[list[int], list[int], list[int], int], None]
CreateClasses = Callable[[list[int], list[int], int], int]


class TableCompressor:
    """Builds compressed base/def/nxt/chk tables for DFA states.

    "Protos" are transition tables that later states are likely to repeat
    exactly or nearly; a most-recently-used queue of them is kept so that a
    state can be stored as its differences from a similar proto.
    "Templates" are protos made from nearly homogeneous states: they go to
    the common destination on every transition character.

    Meta-equivalence classes are used when ``params.use_mecs`` is set and
    both ``mark_classes`` and ``create_classes`` are supplied.
    ``mark_classes(transset, tecfwd, tecbck, numecs)`` records the classes
    that appear together in a template; ``create_classes(tecfwd, tecbck,
    numecs)`` returns the number of meta-equivalence classes and leaves in
    ``tecbck`` the class of each equivalence class (positive for the
    representative of a class).
    """

    def __init__(self, numecs: int, params: CompressionParams | None = None) -> None:
        self.numecs = numecs
        self.params = params or CompressionParams()
        self.table = TransitionTable(numecs, self.params)

        slots = self.params.max_protos + 1
        self.firstprot = NIL
        self.lastprot = 1
        self.numprots = 0
        self.protnext: list[int] = [NIL] * slots
        self.protprev: list[int] = [NIL] * slots
        self.prottbl: list[int] = [0] * slots
        self.protcomst: list[int] = [0] * slots
        self._saved: dict[int, list[int]] = {}

        self.templates: dict[int, list[int]] = {}
        self.nummecs = numecs
        self.peakpairs = 0

        self.mark_classes: MarkClasses | None = None
        self.create_classes: CreateClasses | None = None
        self.tecfwd: list[int] = [NIL] * (numecs + 1)
        self.tecbck: list[int] = [NIL] * (numecs + 1)
        if self.params.use_mecs and numecs > 0:
            self.tecbck[1] = NIL
            for ec in range(2, numecs + 1):
                self.tecbck[ec] = ec - 1
                self.tecfwd[ec - 1] = ec
            self.tecfwd[numecs] = NIL

    @property
    def _using_mecs(self) -> bool:
        return (
            self.params.use_mecs
            and self.mark_classes is not None
            and self.create_classes is not None
        )

    def build_state_table(
        self,
        state: Sequence[int],
        statenum: int,
        totaltrans: int,
        comstate: int,
        comfreq: int,
    ) -> None:
        """Build table entries for one DFA state.

        ``state`` is indexed by equivalence class; ``comstate`` is the most
        common destination and ``comfreq`` how often it occurs.
        """
        p = self.params
        numecs = self.numecs

        if totaltrans * 100 < numecs * p.proto_size_percentage:
            self.table.make_entry(state, numecs, statenum, JAMSTATE, totaltrans)
            return

        checkcom = comfreq * 100 > totaltrans * p.check_com_percentage
        minprot = self.firstprot
        mindiff = totaltrans
        best_ext: list[int] | None = None

        if checkcom:
            prot = self.firstprot
            while prot != NIL:
                if self.protcomst[prot] == comstate:
                    minprot = prot
                    mindiff, best_ext = self.table_diff(state, minprot)
                    break
                prot = self.protnext[prot]
        else:
            # Keep this state from being treated as a template if it
            # becomes a proto.
            comstate = 0
            if self.firstprot != NIL:
                minprot = self.firstprot
                mindiff, best_ext = self.table_diff(state, minprot)

        if mindiff * 100 > totaltrans * p.first_match_diff_percentage:
            prot = minprot
            while prot != NIL:
                diff, ext = self.table_diff(state, prot)
                if diff < mindiff:
                    mindiff, best_ext, minprot = diff, ext, prot
                prot = self.protnext[prot]

        if mindiff * 100 > totaltrans * p.acceptable_diff_percentage or best_ext is None:
            if comfreq * 100 >= totaltrans * p.template_same_percentage:
                self.make_template(state, statenum, comstate)
            else:
                self.make_proto(state, statenum, comstate)
                self.table.make_entry(state, numecs, statenum, JAMSTATE, totaltrans)
            return

        self.table.make_entry(
            best_ext, numecs, statenum, self.prottbl[minprot], mindiff
        )
        if mindiff * 100 >= totaltrans * p.new_proto_diff_percentage:
            self.make_proto(state, statenum, comstate)
        # If the new proto took minprot's slot, minprot is already in front.
        self.move_to_front(minprot)

    def compress_templates(self, lastdfa: int) -> int:
        """Enter every template into the tables; return the number of classes used."""
        numecs = self.numecs
        self.peakpairs = self.table.numtemps * numecs + self.table.tblend
        use_mecs = self._using_mecs

        if use_mecs:
            assert self.create_classes is not None
            self.nummecs = self.create_classes(self.tecfwd, self.tecbck, numecs)
        else:
            self.nummecs = numecs

        for number in range(1, self.table.numtemps + 1):
            row = self.templates.get(number, [0] * (numecs + 1))
            packed = [0] * (self.nummecs + 1)
            totaltrans = 0
            for ec in range(1, numecs + 1):
                trans = row[ec]
                if use_mecs:
                    meta = self.tecbck[ec]
                    if meta > 0:
                        packed[meta] = trans
                        if trans > 0:
                            totaltrans += 1
                else:
                    packed[ec] = trans
                    if trans > 0:
                        totaltrans += 1
            # Leave room for the jam state after the last real state.
            self.table.make_entry(
                packed, self.nummecs, lastdfa + number + 1, JAMSTATE, totaltrans
            )
        return self.nummecs

    def make_proto(self, state: Sequence[int], statenum: int, comstate: int) -> int:
        """Put a new proto at the front of the queue and return its slot."""
        self.numprots += 1
        if (
            self.numprots >= self.params.max_protos
            or self.numecs * self.numprots >= self.params.proto_save_size
        ):
            slot = self.lastprot
            self.lastprot = self.protprev[self.lastprot]
            self.protnext[self.lastprot] = NIL
        else:
            slot = self.numprots

        self.protnext[slot] = self.firstprot
        if self.firstprot != NIL:
            self.protprev[self.firstprot] = slot
        self.firstprot = slot
        self.prottbl[slot] = statenum
        self.protcomst[slot] = comstate
        self._saved[slot] = [0, *(state[ec] for ec in range(1, self.numecs + 1))]
        return slot

    def make_template(self, state: Sequence[int], statenum: int, comstate: int) -> int:
        """Make a template from ``state``, link the state to it, return its number."""
        numecs = self.numecs
        self.table.numtemps += 1
        number = self.table.numtemps

        row = [0] * (numecs + 1)
        transset: list[int] = []
        for ec in range(1, numecs + 1):
            if state[ec] != 0:
                # Classes 1..256 are recorded as 1..255, 0.
                transset.append(ec & 0xFF)
                row[ec] = comstate
        self.templates[number] = row

        if self._using_mecs:
            assert self.mark_classes is not None
            self.mark_classes(transset, self.tecfwd, self.tecbck, numecs)

        self.make_proto(row, -number, comstate)
        numdiff, ext = self.table_diff(state, self.firstprot)
        self.table.make_entry(ext, numecs, statenum, -number, numdiff)
        return number

    def move_to_front(self, qelm: int) -> None:
        """Move a proto to the front of the queue."""
        if self.firstprot == qelm:
            return
        if qelm == self.lastprot:
            self.lastprot = self.protprev[self.lastprot]
        self.protnext[self.protprev[qelm]] = self.protnext[qelm]
        if self.protnext[qelm] != NIL:
            self.protprev[self.protnext[qelm]] = self.protprev[qelm]
        self.protprev[qelm] = NIL
        self.protnext[qelm] = self.firstprot
        self.protprev[self.firstprot] = qelm
        self.firstprot = qelm

    def table_diff(self, state: Sequence[int], pr: int) -> tuple[int, list[int]]:
        """Compare ``state`` with proto ``pr``.

        Returns the number of differences and the difference array, in which
        entries equal to the proto's are ``SAME_TRANS``.
        """
        saved = self._saved.get(pr, [0] * (self.numecs + 1))
        ext = [0] * (self.numecs + 1)
        numdiff = 0
        for ec in range(1, self.numecs + 1):
            if saved[ec] == state[ec]:
                ext[ec] = SAME_TRANS
            else:
                ext[ec] = state[ec]
                numdiff += 1
        return numdiff, ext