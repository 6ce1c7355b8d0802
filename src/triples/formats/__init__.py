"""
Text formats.

Supports:
- Line-oriented Turtle, read incrementally and written per subject
- Flat subject,predicate,object CSV
"""

from triples.formats.grammar import LineParser, parse_line, Terminator
from triples.formats.stream import TurtleStream, ParserState
from triples.formats.serializer import TurtleSerializer, serialize_turtle, escape_literal
from triples.formats.csv import import_csv, export_csv

__all__ = [
    "LineParser",
    "parse_line",
    "Terminator",
    "TurtleStream",
    "ParserState",
    "TurtleSerializer",
    "serialize_turtle",
    "escape_literal",
    "import_csv",
    "export_csv",
]
