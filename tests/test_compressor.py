import pytest

from lexgen.compressor import TableCompressor
from lexgen.packing import JAMSTATE, NIL, SAME_TRANS, CompressionParams


def _decoded(table, statenum, numecs):
    """Transitions stored directly for ``statenum`` in nxt/chk."""
    base = table.base[statenum]
    result = {}
    for ec in range(1, numecs + 1):
        slot = base + ec
        if 0 <= slot < len(table.chk) and table.chk[slot] == statenum:
            result[ec] = table.nxt[slot]
    return result


def _queue(comp):
    order = []
    prot = comp.firstprot
    while prot != NIL:
        order.append(prot)
        prot = comp.protnext[prot]
    return order


def test_table_diff_identical_state_has_no_differences():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    state = [0, 1, 2, 3, 4]
    slot = comp.make_proto(state, 9, 0)
    numdiff, ext = comp.table_diff(state, slot)
    assert numdiff == 0
    assert ext[1:] == [SAME_TRANS] * 4


def test_table_diff_reports_changed_entries():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    slot = comp.make_proto([0, 1, 2, 3, 4], 9, 0)
    numdiff, ext = comp.table_diff([0, 1, 5, 3, 0], slot)
    assert numdiff == 2
    assert ext[1:] == [SAME_TRANS, 5, SAME_TRANS, 0]


def test_make_proto_puts_new_proto_first():
    comp = TableCompressor(3, CompressionParams(use_mecs=False))
    first = comp.make_proto([0, 1, 1, 1], 5, 1)
    second = comp.make_proto([0, 2, 2, 2], 6, 2)
    assert _queue(comp) == [second, first]
    assert comp.prottbl[second] == 6
    assert comp.protcomst[first] == 1


def test_move_to_front_reorders_queue():
    comp = TableCompressor(3, CompressionParams(use_mecs=False))
    slots = [comp.make_proto([0, n, n, n], n, 0) for n in (1, 2, 3)]
    comp.move_to_front(slots[0])
    assert _queue(comp) == [slots[0], slots[2], slots[1]]
    assert comp.lastprot == slots[1]


def test_proto_queue_is_bounded():
    params = CompressionParams(use_mecs=False, max_protos=3)
    comp = TableCompressor(2, params)
    for n in range(1, 8):
        comp.make_proto([0, n, n], n, 0)
    queue = _queue(comp)
    assert len(queue) == params.max_protos - 1
    assert comp.prottbl[comp.firstprot] == 7


def test_sparse_state_is_stacked_as_single_transition():
    comp = TableCompressor(10, CompressionParams(use_mecs=False))
    state = [0] * 11
    state[3] = 8
    comp.build_state_table(state, 2, 1, 8, 1)
    assert comp.table.single_stack == [(2, 3, 8, JAMSTATE)]
    assert comp.firstprot == NIL


def test_homogeneous_state_becomes_template():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    state = [0, 7, 7, 7, 7]
    comp.build_state_table(state, 3, 4, 7, 4)
    assert comp.table.numtemps == 1
    assert comp.templates[1][1:] == [7, 7, 7, 7]
    assert comp.table.default[3] == -1
    assert comp.table.base[3] == 0
    assert comp.prottbl[comp.firstprot] == -1


def test_varied_state_becomes_proto_with_jam_default():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    state = [0, 1, 2, 3, 4]
    comp.build_state_table(state, 5, 4, 1, 1)
    assert comp.table.default[5] == JAMSTATE
    assert comp.prottbl[comp.firstprot] == 5
    assert comp.protcomst[comp.firstprot] == 0
    assert _decoded(comp.table, 5, 4) == {1: 1, 2: 2, 3: 3, 4: 4}


def test_identical_state_defaults_to_proto():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    state = [0, 1, 2, 3, 4]
    comp.build_state_table(state, 5, 4, 1, 1)
    comp.build_state_table(list(state), 6, 4, 1, 1)
    assert comp.table.default[6] == 5
    assert comp.table.base[6] == 0
    assert len(_queue(comp)) == 1


def test_compress_templates_without_mecs():
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    comp.build_state_table([0, 7, 7, 7, 7], 3, 4, 7, 4)
    lastdfa = 10
    assert comp.compress_templates(lastdfa) == 4
    template_state = lastdfa + 2
    assert comp.table.default[template_state] == JAMSTATE
    assert _decoded(comp.table, template_state, 4) == {1: 7, 2: 7, 3: 7, 4: 7}


def test_compress_templates_uses_meta_classes_when_supplied():
    comp = TableCompressor(4, CompressionParams(use_mecs=True))
    marked = []

    def mark(transset, tecfwd, tecbck, numecs):
        marked.append(list(transset))

    def create(tecfwd, tecbck, numecs):
        for ec in range(1, numecs + 1):
            tecbck[ec] = 1 if ec <= 2 else -1
        tecbck[3] = 2
        return 2

    comp.mark_classes = mark
    comp.create_classes = create
    comp.build_state_table([0, 7, 7, 7, 7], 3, 4, 7, 4)
    assert marked == [[1, 2, 3, 4]]
    assert comp.compress_templates(10) == 2
    assert _decoded(comp.table, 12, 2) == {1: 7, 2: 7}


def test_mecs_links_are_initialised():
    comp = TableCompressor(3, CompressionParams(use_mecs=True))
    assert comp.tecbck[1:] == [NIL, 1, 2]
    assert comp.tecfwd[1:] == [2, 3, NIL]


@pytest.mark.parametrize("statenum", [4, 11])
def test_make_template_returns_increasing_numbers(statenum):
    comp = TableCompressor(4, CompressionParams(use_mecs=False))
    first = comp.make_template([0, 2, 2, 0, 2], statenum, 2)
    second = comp.make_template([0, 3, 3, 3, 3], statenum + 1, 3)
    assert (first, second) == (1, 2)
    assert comp.templates[1][1:] == [2, 2, 0, 2]
    assert comp.table.default[statenum] == -1