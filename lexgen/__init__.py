"""Option scanning, usage text, symbol tables, skeletons and scanner-table packing and serialization."""

__version__ = "0.1.0"
__all__ = [
    "compressor",
    "packing",
    "scanopt",
    "skeleton",
    "symtab",
    "tableformat",
    "tables",
    "usage",
]