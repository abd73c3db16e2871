import itertools

import pytest

from lexgen.symtab import (
    DuplicateSymbolError,
    LexerSymbols,
    SymbolTable,
    hash_symbol,
)


def test_hash_of_empty_string_is_zero():
    assert hash_symbol("", 101) == 0


def test_hash_of_single_char():
    assert hash_symbol("a", 101) == ord("a")


@pytest.mark.parametrize("text", ["a", "digit", "INITIAL", "some_long_name_here", "é"])
def test_hash_in_range(text):
    assert 0 <= hash_symbol(text, 101) < 101
    assert 0 <= hash_symbol(text, 7) < 7


def test_add_and_find():
    table = SymbolTable()
    table.add("digit", "[0-9]", 3)
    assert table.find("digit") == ("[0-9]", 3)
    assert "digit" in table
    assert "letter" not in table


def test_missing_symbol():
    table = SymbolTable()
    assert table.find("nothing") is None


def test_duplicate_add_raises():
    table = SymbolTable()
    table.add("x", "1", 1)
    with pytest.raises(DuplicateSymbolError):
        table.add("x", "2", 2)
    assert table.find("x") == ("1", 1)


def test_colliding_names_all_found():
    table = SymbolTable(1)
    names = ["alpha", "beta", "gamma"]
    for number, name in enumerate(names):
        table.add(name, name.upper(), number)
    for number, name in enumerate(names):
        assert table.find(name) == (name.upper(), number)


def test_name_definition_round_trip():
    symbols = LexerSymbols()
    symbols.install_name_definition("DIGIT", "[0-9]")
    assert symbols.lookup_name_definition("DIGIT") == "[0-9]"
    assert symbols.lookup_name_definition("LETTER") is None


def test_name_defined_twice():
    symbols = LexerSymbols()
    symbols.install_name_definition("DIGIT", "[0-9]")
    with pytest.raises(DuplicateSymbolError, match="name defined twice"):
        symbols.install_name_definition("DIGIT", "[0-7]")


def test_ccl_round_trip():
    symbols = LexerSymbols()
    symbols.install_ccl("a-z", 4)
    assert symbols.lookup_ccl("a-z") == 4
    assert symbols.lookup_ccl("0-9") == 0


def test_ccl_duplicate_keeps_first():
    symbols = LexerSymbols()
    symbols.install_ccl("a-z", 4)
    symbols.install_ccl("a-z", 9)
    assert symbols.lookup_ccl("a-z") == 4


def test_start_conditions_are_numbered():
    symbols = LexerSymbols()
    counter = itertools.count(10)
    first = symbols.install_start_condition("INITIAL", False, lambda: next(counter))
    second = symbols.install_start_condition("COMMENT", True, lambda: next(counter))
    assert (first, second) == (1, 2)
    assert symbols.lookup_start_condition("INITIAL") == 1
    assert symbols.lookup_start_condition("COMMENT") == 2
    assert symbols.lookup_start_condition("STRING") == 0
    comment = symbols.start_conditions[1]
    assert comment.exclusive is True
    assert comment.eof is False
    assert (comment.set_state, comment.bol_state) == (12, 13)


def test_start_condition_declared_twice():
    symbols = LexerSymbols()
    symbols.install_start_condition("INITIAL")
    with pytest.raises(DuplicateSymbolError, match="INITIAL declared twice"):
        symbols.install_start_condition("INITIAL")
    assert len(symbols.start_conditions) == 1