"""
Errors raised at the I/O boundary. Schema inference itself never fails.
"""


class J2TError(Exception):
    """Base class for errors that end a run with a non-zero status."""


class InputError(J2TError):
    """The input could not be opened or read."""


class ParseError(J2TError):
    """The input is not valid JSON, or holds no document at all."""


class OutputError(J2TError):
    """The output target could not be opened or written."""
