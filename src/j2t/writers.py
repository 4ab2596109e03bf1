"""
Renderers for a finished schema.

Every renderer receives the field paths already sorted and never mutates
the schema. Kinds of one field are emitted in sorted order so that the
same schema always renders to the same bytes.
"""

import csv
import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .errors import OutputError
from .schema import Schema, sorted_fields, sorted_kinds

FORMAT_LIST = "list"
FORMAT_JSON = "json"
FORMAT_CSV = "csv"
FORMAT_TABLE = "table"

HEADER_FIELD = "field"
HEADER_TYPE = "type"
HEADER_CONTENT = "content"

MERGE_SEPARATOR = ";"


def _rows(fields: List[str], schema: Schema, merge: bool):
    """Yields ``(field, type, content)`` rows, one per kind or one per field when merging."""
    for field in fields:
        entry = schema[field]
        kinds = sorted_kinds(entry)
        if merge:
            yield (
                field,
                MERGE_SEPARATOR.join(kinds),
                MERGE_SEPARATOR.join(entry[k] for k in kinds),
            )
            continue
        for kind in kinds:
            yield field, kind, entry[kind]


def write_list(stream: TextIO, fields: List[str], schema: Schema, merge: bool = False, headers: bool = False):
    field_width = max([len(HEADER_FIELD)] + [len(f) for f in fields]) + 1

    type_width = len(HEADER_TYPE)
    for entry in schema.values():
        if merge:
            type_width = max(type_width, len(MERGE_SEPARATOR.join(entry)))
        else:
            type_width = max([type_width] + [len(k) for k in entry])
    type_width += 1

    if headers:
        stream.write(f"{HEADER_FIELD:<{field_width}}{HEADER_TYPE:<{type_width}}{HEADER_CONTENT}\n")
    for field, kind, content in _rows(fields, schema, merge):
        stream.write(f"{field:<{field_width}}{kind:<{type_width}}{content}\n")


def write_json(stream: TextIO, fields: List[str], schema: Schema, pretty_print: bool = False):
    content = []
    for field in fields:
        entry = schema[field]
        content.append({
            HEADER_FIELD: field,
            "types": [{HEADER_TYPE: k, HEADER_CONTENT: entry[k]} for k in sorted_kinds(entry)],
        })

    if pretty_print:
        json.dump(content, stream, indent=4, ensure_ascii=False)
    else:
        json.dump(content, stream, separators=(",", ":"), ensure_ascii=False)
    stream.write("\n")


def write_csv(stream: TextIO, fields: List[str], schema: Schema, merge: bool = False, headers: bool = False):
    writer = csv.writer(stream, lineterminator="\n")
    if headers:
        writer.writerow([HEADER_FIELD, HEADER_TYPE, HEADER_CONTENT])
    writer.writerows(_rows(fields, schema, merge))


def schema_table(fields: List[str], schema: Schema, merge: bool = False) -> Table:
    table = Table(title="Inferred Schema")
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Content", style="white")

    for field, kind, content in _rows(fields, schema, merge):
        table.add_row(escape(field), kind, escape(content))
    return table


def write_table(stream: TextIO, fields: List[str], schema: Schema, merge: bool = False):
    Console(file=stream).print(schema_table(fields, schema, merge))


def _list(stream, fields, schema, merge, pretty_print, headers):
    write_list(stream, fields, schema, merge=merge, headers=headers)


def _json(stream, fields, schema, merge, pretty_print, headers):
    write_json(stream, fields, schema, pretty_print=pretty_print)


def _csv(stream, fields, schema, merge, pretty_print, headers):
    write_csv(stream, fields, schema, merge=merge, headers=headers)


def _table(stream, fields, schema, merge, pretty_print, headers):
    write_table(stream, fields, schema, merge=merge)


WRITERS: Dict[str, Callable] = {
    FORMAT_LIST: _list,
    FORMAT_JSON: _json,
    FORMAT_CSV: _csv,
    FORMAT_TABLE: _table,
}


def render(
    output_format: str,
    stream: TextIO,
    schema: Schema,
    merge: bool = False,
    pretty_print: bool = False,
    headers: bool = False,
):
    """Sorts the field paths and hands the schema to the renderer for ``output_format``."""
    try:
        writer = WRITERS[output_format]
    except KeyError:
        raise ValueError(f"Unknown output format: {output_format}") from None
    writer(stream, sorted_fields(schema), schema, merge, pretty_print, headers)


@contextmanager
def open_output(file_path: Optional[str | Path] = None) -> Generator[TextIO, None, None]:
    """
    Yields a text stream for the given file (truncated), or stdout when no path is set.
    Stdout is left open.
    """
    if not file_path:
        stream = sys.stdout
        try:
            yield stream
            stream.flush()
        except OSError as e:
            raise OutputError(f"Cannot write output: {e}") from e
        return

    try:
        f = open(file_path, 'w', encoding='utf-8', newline='')
    except OSError as e:
        raise OutputError(f"Cannot open output {file_path}: {e.strerror or e}") from e
    try:
        with f:
            yield f
    except OSError as e:
        raise OutputError(f"Cannot write output {file_path}: {e}") from e
