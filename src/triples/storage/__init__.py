"""
Storage layer: DuckDB tables of interned names, objects and triples.
"""

from triples.storage.duckdb import TripleStore, MEMORY
from triples.storage.transactions import Session, SessionState, SessionStats

__all__ = [
    "TripleStore",
    "MEMORY",
    "Session",
    "SessionState",
    "SessionStats",
]
