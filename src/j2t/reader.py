import json
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Generator, List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from .errors import InputError, ParseError
from .schema import JsonNumber, Schema, sorted_fields, traverse
from .writers import render, schema_table

console = Console(stderr=True)

_WHITESPACE = " \t\n\r"


@dataclass
class ScanOptions:
    """Settings for one scan, as collected by the command line."""
    prefix: str = ""
    categorize_numeric: bool = False
    merge: bool = False
    output_format: str = "list"
    pretty_print: bool = False
    headers: bool = False
    multiple_values: bool = False
    verbose: bool = False


@contextmanager
def open_input(file_path: Optional[str | Path] = None) -> Generator[BinaryIO, None, None]:
    """
    Yields a binary stream for the given file, or for stdin when no path is set.
    """
    if not file_path:
        yield sys.stdin.buffer
        return

    try:
        f = open(file_path, 'rb')
    except OSError as e:
        raise InputError(f"Cannot open input {file_path}: {e.strerror or e}") from e
    with f:
        yield f


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON number")


_decoder = json.JSONDecoder(
    parse_int=JsonNumber,
    parse_float=JsonNumber,
    parse_constant=_reject_constant,
)


def load_documents(stream: BinaryIO, multiple_values: bool = False) -> List[Any]:
    """
    Parses every JSON document in the stream.

    Numbers come back as ``JsonNumber``, the exact text used in the source.
    The whole stream is parsed before anything is returned, so a syntax
    error late in the input never leaves a half-built schema behind.
    """
    try:
        content = stream.read()
    except OSError as e:
        raise InputError(f"Cannot read input: {e}") from e

    try:
        text = content.decode('utf-8-sig')
        if not multiple_values:
            return [_decoder.decode(text)]

        documents = []
        pos, end = 0, len(text)
        while True:
            while pos < end and text[pos] in _WHITESPACE:
                pos += 1
            if pos == end:
                break
            document, pos = _decoder.raw_decode(text, pos)
            documents.append(document)
    # JSONDecodeError and UnicodeDecodeError are both ValueErrors
    except ValueError as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    if not documents:
        raise ParseError("Invalid JSON: no document found")
    return documents


class JsonSchemaScanner:
    """
    Infers the flattened schema of a JSON file (or stdin).

    Usage:
        scanner = JsonSchemaScanner("payload.json", ScanOptions(categorize_numeric=True))
        scanner.print_schema()
    """

    def __init__(self, file_path: Optional[str | Path] = None, options: Optional[ScanOptions] = None):
        self.file_path = Path(file_path) if file_path else None
        self.options = options or ScanOptions()
        self.schema_cache: Optional[Schema] = None

    @property
    def source_name(self) -> str:
        return str(self.file_path) if self.file_path else "<stdin>"

    def scan_schema(self) -> Schema:
        """
        Parses the input and folds every document into one schema.
        """
        verbose = self.options.verbose
        if verbose:
            console.print(f"[bold blue]Scanning schema for {escape(self.source_name)}...[/bold blue]")

        with open_input(self.file_path) as stream:
            documents = load_documents(stream, multiple_values=self.options.multiple_values)

        schema: Schema = {}
        for document in tqdm(documents, desc="Processing documents", unit=" docs", disable=not verbose):
            traverse(self.options.prefix, document, schema, self.options.categorize_numeric)

        self.schema_cache = schema
        if verbose:
            console.print(f"[bold green]Found {len(schema)} fields in {len(documents)} document(s)[/bold green]")
        return self.schema_cache

    @property
    def fields(self) -> List[str]:
        if self.schema_cache is None:
            self.scan_schema()
        return sorted_fields(self.schema_cache)

    def write(self, stream: TextIO):
        """Renders the schema to ``stream`` in the configured output format."""
        if self.schema_cache is None:
            self.scan_schema()
        render(
            self.options.output_format,
            stream,
            self.schema_cache,
            merge=self.options.merge,
            pretty_print=self.options.pretty_print,
            headers=self.options.headers,
        )

    def print_schema(self):
        if self.schema_cache is None:
            self.scan_schema()

        Console().print(schema_table(self.fields, self.schema_cache, merge=self.options.merge))
