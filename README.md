# lexgen

Building blocks for a lexical-analyzer generator, usable on their own:

- `lexgen.scanopt`: a command-line option scanner driven by a list of
  `OptSpec` entries. It understands short options (`-f FILE`, bundled
  `-xzf`), long options with unambiguous prefixes (`--file=FILE`,
  `--fi FILE`), optional arguments (`-n [NUM]`) and the `--` terminator.
- `lexgen.usage`: `format_usage` and `write_usage` build an aligned,
  wrapped usage message from the same option specifications;
  `terminal_columns` reads the width from `COLUMNS` (80 when unset).
- `lexgen.symtab`: `SymbolTable`, a chained hash table, and `LexerSymbols`,
  which keeps name definitions, character classes and start conditions.
- `lexgen.skeleton`: `Skeleton` reads single-line `m4_define` properties
  from the prolog of a code skeleton and copies it out section by section,
  split at `%%` lines.
- `lexgen.tableformat` and `lexgen.tables`: the serialized scanner-table
  format (big-endian, padded to 64 bits), a `TableWriter` for it and
  `compress`, which narrows a table to the smallest integer width that
  holds its values.
- `lexgen.packing` and `lexgen.compressor`: `TransitionTable` packs DFA
  transitions into base/def/nxt/chk arrays; `TableCompressor` does so using
  protos and templates.

## Installation

```
pip install .
```

## Scanning options

```python
from lexgen.scanopt import OptSpec, OptionScanner, ScanOptError

options = [
    OptSpec("-o FILE", 1, "write output to FILE"),
    OptSpec("--outfile=FILE", 1, "write output to FILE"),
    OptSpec("-v", 2, "be verbose"),
    OptSpec("--verbose", 2, "be verbose"),
]

scanner = OptionScanner(options, ["prog", "-v", "--out=lex.c", "input.l"], quiet=True)
try:
    for result in scanner:
        print(result.value, result.arg, result.index)
except ScanOptError as err:
    print("bad option:", err.code, err.option)
```

Iteration stops at the first argument that is not an option, or just after
`--`; `scanner.index` is then the index of the first remaining argument.
Errors raise `ScanOptError`, whose `code` is an `ErrorCode`. Unless
`quiet` is true the message is also printed to standard error.

## Printing usage

```python
import sys
from lexgen.usage import write_usage

write_usage(options, sys.stdout, "prog", None, 80)
```

Options that share a return value are printed on one line as aliases.
Lines that include a short option come first.

## Symbol tables

```python
from lexgen.symtab import LexerSymbols, DuplicateSymbolError

symbols = LexerSymbols()
symbols.install_name_definition("DIGIT", "[0-9]")
symbols.lookup_name_definition("DIGIT")        # "[0-9]"
symbols.install_start_condition("COMMENT", exclusive=True)   # 1
symbols.lookup_start_condition("COMMENT")      # 1
symbols.lookup_start_condition("OTHER")        # 0
```

Installing the same name definition or start condition twice raises
`DuplicateSymbolError`.

## Skeletons

```python
import sys
from lexgen.skeleton import Skeleton

skel = Skeleton([
    "m4_define([[M4_PROPERTY_SOURCE_SUFFIX]], [[go]])",
    "%# a comment line",
    "%%",
    "package main",
])
skel.property("M4_PROPERTY_SOURCE_SUFFIX")   # "go"
skel.suffix()                                # "go"
skel.write_section(sys.stdout)               # prolog lines, stops at %%
skel.write_section(sys.stdout)               # "package main"
```

Malformed lines raise `SkeletonError`.

## Writing tables

```python
import io
from lexgen.tableformat import TableHeader, TableData, TableId
from lexgen.tables import TableWriter, compress

out = io.BytesIO()
writer = TableWriter(out)
writer.write_header(TableHeader("0.1.0", "tables"))
data = TableData(TableId.ACCEPT, lolen=4, data=[0, 1, 2, 3])
writer.write_data(compress(data))
```

After each table the writer goes back and fills in the total size of the
table set in the header, so the output stream must be seekable. Failures
raise `TableError`.

## What this package does not do

There is no command-line program. The package does not read rule files,
build NFAs or DFAs, compute equivalence classes (`TableCompressor` takes
them through its `mark_classes` and `create_classes` hooks) or generate
scanner source code, and it ships no skeletons of its own.

## Running the tests

```
pip install .[test]
pytest
```