"""
j2t - Lists the fields of a JSON document.

Flattens an arbitrary JSON document into field paths (``a.b[]``) and reports
the primitive types seen at each path together with an example value, as an
aligned list, JSON, CSV or a rich table.
"""

from .errors import InputError, J2TError, OutputError, ParseError
from .reader import JsonSchemaScanner, ScanOptions, load_documents
from .schema import JsonNumber, infer_schema, merge_entry, traverse

__version__ = "0.1.0"

__all__ = [
    "JsonSchemaScanner",
    "ScanOptions",
    "load_documents",
    "JsonNumber",
    "infer_schema",
    "merge_entry",
    "traverse",
    "J2TError",
    "InputError",
    "ParseError",
    "OutputError",
    "__version__",
]
