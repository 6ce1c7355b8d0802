"""
triples: line-oriented Turtle import and export over a DuckDB triple store.

Turtle is read one line at a time, assembled into subjects with multi-valued
predicates, and stored as interned names and objects.
"""

__version__ = "0.1.0"

from triples.errors import (
    TriplesError,
    LineSyntaxError,
    InvalidIdentifier,
    UnresolvedPrefix,
    NoSubjectOpen,
    SubjectAlreadyOpen,
    PrefixInsideBlock,
    IllegalTransition,
    DanglingObjectContinuation,
    PredicateInsideObjectList,
    StatementInsideBlock,
    StoreError,
    ConfigError,
)
from triples.models import Subject, Triple
from triples.names import join, resolve, split
from triples.formats import TurtleStream, ParserState, TurtleSerializer, serialize_turtle
from triples.storage import TripleStore
from triples.config import TriplesConfig
from triples.ingest import ImportReport, import_turtle, export_turtle

__all__ = [
    "Subject",
    "Triple",
    "join",
    "resolve",
    "split",
    "TurtleStream",
    "ParserState",
    "TurtleSerializer",
    "serialize_turtle",
    "TripleStore",
    "TriplesConfig",
    "ImportReport",
    "import_turtle",
    "export_turtle",
    # Errors
    "TriplesError",
    "LineSyntaxError",
    "InvalidIdentifier",
    "UnresolvedPrefix",
    "NoSubjectOpen",
    "SubjectAlreadyOpen",
    "PrefixInsideBlock",
    "IllegalTransition",
    "DanglingObjectContinuation",
    "PredicateInsideObjectList",
    "StatementInsideBlock",
    "StoreError",
    "ConfigError",
]
