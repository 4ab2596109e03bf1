"""
Command-line interface for j2t.
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .errors import J2TError
from .reader import JsonSchemaScanner, ScanOptions
from .writers import FORMAT_CSV, FORMAT_JSON, FORMAT_LIST, FORMAT_TABLE, open_output

console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="j2t",
        description="Lists the fields in a JSON document together with their types and an example value",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "-i", "--input",
        help="Input file. Reads from STDIN by default",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file. Writes to STDOUT by default",
    )
    parser.add_argument(
        "-f", "--format",
        dest="output_format",
        choices=[FORMAT_LIST, FORMAT_JSON, FORMAT_CSV, FORMAT_TABLE],
        default=FORMAT_LIST,
        help="Output format (default: list)",
    )
    parser.add_argument(
        "-P", "--prefix",
        default="",
        help="Prefix prepended to every field path",
    )
    parser.add_argument(
        "-p", "--pretty-print",
        action="store_true",
        help="Pretty print. Only applicable for `json` format",
    )
    parser.add_argument(
        "-H", "--headers",
        action="store_true",
        help="Print a header row. Only applicable for `list` and `csv` format",
    )
    parser.add_argument(
        "-m", "--merge",
        action="store_true",
        help="Merge type and content of fields with multiple types into one row. "
             "Only applicable for `list`, `csv` and `table` format",
    )
    parser.add_argument(
        "-n", "--numeric",
        dest="categorize_numeric",
        action="store_true",
        help="Categorize `number` into `number_int` and `number_float`",
    )
    parser.add_argument(
        "-M", "--multiple-values",
        action="store_true",
        help="Accept several concatenated JSON documents (e.g. NDJSON) and merge them into one schema",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show progress on STDERR",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from j2t import __version__
        console.print(f"j2t version {__version__}")
        return 0

    options = ScanOptions(
        prefix=args.prefix,
        categorize_numeric=args.categorize_numeric,
        merge=args.merge,
        output_format=args.output_format,
        pretty_print=args.pretty_print,
        headers=args.headers,
        multiple_values=args.multiple_values,
        verbose=args.verbose,
    )

    try:
        scanner = JsonSchemaScanner(args.input, options)
        scanner.scan_schema()
        with open_output(args.output) as stream:
            scanner.write(stream)
        if args.verbose and args.output:
            console.print(f"[bold green]Schema written to {escape(args.output)}[/bold green]")

    except J2TError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]", highlight=False)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
