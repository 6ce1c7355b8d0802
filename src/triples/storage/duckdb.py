"""
DuckDB-backed triple store with interned names and objects.

Tables:
- names: subject and predicate identifiers, one row per distinct string
- objects: object text, one row per distinct string
- triples: (subject, predicate, object) id rows, unique per combination

Each insert() runs in its own transaction unless an ingestion session is
active, in which case the session's transaction covers it and nothing is
visible until the session commits.
"""

from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Sequence, Union
import logging

import duckdb
import polars as pl

from triples.errors import StoreError
from triples.models import Subject
from triples.storage.transactions import Session

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

SCHEMA = [
    "CREATE SEQUENCE IF NOT EXISTS names_id_seq START 1",
    "CREATE SEQUENCE IF NOT EXISTS objects_id_seq START 1",
    "CREATE SEQUENCE IF NOT EXISTS triples_id_seq START 1",
    """
    CREATE TABLE IF NOT EXISTS names (
        id BIGINT PRIMARY KEY DEFAULT nextval('names_id_seq'),
        name VARCHAR NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS objects (
        id BIGINT PRIMARY KEY DEFAULT nextval('objects_id_seq'),
        object VARCHAR NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS triples (
        id BIGINT PRIMARY KEY DEFAULT nextval('triples_id_seq'),
        created_at TIMESTAMP DEFAULT current_timestamp,
        subject BIGINT NOT NULL,
        predicate BIGINT NOT NULL,
        object BIGINT NOT NULL,
        UNIQUE (subject, predicate, object)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_subject ON triples (subject)",
    "CREATE INDEX IF NOT EXISTS idx_predicate ON triples (predicate)",
    "CREATE INDEX IF NOT EXISTS idx_object ON triples (object)",
]


class TripleStore:
    """
    Relational storage for subjects.

    Example:
        with TripleStore("/tmp/triples.db") as store:
            with store.session():
                store.insert(subject)
            for name in store.list_subject_names():
                print(store.query(name))
    """

    def __init__(self, location: Union[str, Path] = MEMORY):
        """
        Open (and provision if needed) the store.

        Args:
            location: Database file path, or ":memory:"

        Raises:
            StoreError: If the database can not be opened or initialized
        """
        self._location = str(location)
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._session: Optional[Session] = None
        self._next_session_id = 1
        self._connect()

    @property
    def location(self) -> str:
        return self._location

    @property
    def in_session(self) -> bool:
        return self._session is not None

    def _connect(self) -> None:
        if self._location != MEMORY:
            path = Path(self._location)
            if path.exists():
                logger.debug(f"adding to db {path}")
            else:
                logger.debug(f"creating db {path}")
                path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = duckdb.connect(self._location)
        except duckdb.Error as e:
            raise StoreError(f"can not open store {self._location}: {e}") from e
        for statement in SCHEMA:
            self._execute(statement)
        logger.debug(f"db {self._location} initialized")

    def _ensure_connection(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise StoreError(f"store {self._location} is closed")
        return self._conn

    def _execute(self, sql: str, params: Optional[Sequence[Any]] = None):
        conn = self._ensure_connection()
        try:
            if params is not None:
                return conn.execute(sql, params)
            return conn.execute(sql)
        except duckdb.Error as e:
            raise StoreError(f"SQL Error: {e}") from e

    # =========================================================================
    # Transactions
    # =========================================================================

    def _begin(self) -> None:
        self._execute("BEGIN TRANSACTION")

    def _commit(self) -> None:
        self._execute("COMMIT")

    def _rollback(self) -> None:
        self._execute("ROLLBACK")

    @contextmanager
    def _transaction(self) -> Generator[None, None, None]:
        """Own transaction, or nothing when a session already holds one."""
        if self._session is not None:
            yield
            return
        self._begin()
        try:
            yield
            self._commit()
        except Exception:
            self._rollback()
            raise

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for one ingestion run.

        Usage:
            with store.session() as session:
                for subject in subjects:
                    store.insert(subject)
            # Auto-commits on clean exit, rolls back on exception

        Raises:
            StoreError: If a session is already active on this store
        """
        if self._session is not None:
            raise StoreError(
                f"session {self._session.session_id} already active on {self._location}"
            )
        session = Session(self, self._next_session_id)
        self._next_session_id += 1
        session.begin()
        self._session = session
        try:
            yield session
            session.commit()
        except Exception:
            # a failed rollback must not hide the error that caused it
            try:
                session.rollback()
            except StoreError as rollback_error:
                logger.error(f"Session {session.session_id} rollback failed: {rollback_error}")
            raise
        finally:
            self._session = None

    # =========================================================================
    # Interning
    # =========================================================================

    def _get_or_insert(self, table: str, column: str, value: str) -> int:
        self._execute(
            f"INSERT INTO {table} ({column}) VALUES (?) ON CONFLICT ({column}) DO NOTHING",
            [value],
        )
        row = self._execute(
            f"SELECT id FROM {table} WHERE {column} = ?", [value]
        ).fetchone()
        return row[0]

    def intern_name(self, name: str) -> int:
        """Durable id for a subject or predicate identifier."""
        return self._get_or_insert("names", "name", name)

    def intern_object(self, obj: str) -> int:
        """Durable id for object text."""
        return self._get_or_insert("objects", "object", obj)

    # =========================================================================
    # Writes
    # =========================================================================

    def insert(self, subject: Subject) -> int:
        """
        Insert a subject and all its predicate/object pairs.

        All rows for the subject are written in one transaction.

        Args:
            subject: Completed subject

        Returns:
            Number of predicate/object pairs stored for the subject

        Raises:
            StoreError: If the database rejects the write
        """
        written = 0
        with self._transaction():
            subject_id = self.intern_name(subject.name)
            for predicate, objects in subject.predicate_objects():
                predicate_id = self.intern_name(predicate)
                for obj in sorted(objects):
                    object_id = self.intern_object(obj)
                    self._execute(
                        """
                        INSERT INTO triples (subject, predicate, object) VALUES (?, ?, ?)
                        ON CONFLICT (subject, predicate, object) DO NOTHING
                        """,
                        [subject_id, predicate_id, object_id],
                    )
                    written += 1
        if self._session is not None:
            self._session.record(1, written)
        logger.debug(f"inserted {subject.name} ({written} objects)")
        return written

    # =========================================================================
    # Reads
    # =========================================================================

    def list_subject_names(self) -> List[str]:
        """All distinct subject identifiers, sorted."""
        rows = self._execute(
            """
            SELECT DISTINCT subjects.name
            FROM triples
            JOIN names AS subjects ON triples.subject = subjects.id
            ORDER BY subjects.name
            """
        ).fetchall()
        return [row[0] for row in rows]

    def query(self, name: str) -> Optional[Subject]:
        """
        Reconstruct a stored subject.

        Args:
            name: Subject identifier

        Returns:
            The Subject, or None if nothing is stored for it
        """
        rows = self._execute(
            """
            SELECT predicates.name, objects.object
            FROM triples
            JOIN names AS subjects ON triples.subject = subjects.id
            JOIN names AS predicates ON triples.predicate = predicates.id
            JOIN objects ON triples.object = objects.id
            WHERE subjects.name = ?
            """,
            [name],
        ).fetchall()
        if not rows:
            return None
        subject = Subject(name)
        for predicate, obj in rows:
            subject.add(predicate, obj)
        return subject

    def triples(self) -> pl.DataFrame:
        """Every stored triple as a subject/predicate/object frame."""
        rows = self._execute(
            """
            SELECT subjects.name, predicates.name, objects.object
            FROM triples
            JOIN names AS subjects ON triples.subject = subjects.id
            JOIN names AS predicates ON triples.predicate = predicates.id
            JOIN objects ON triples.object = objects.id
            ORDER BY subjects.name, predicates.name, objects.object
            """
        ).fetchall()
        columns = ["subject", "predicate", "object"]
        if not rows:
            return pl.DataFrame({col: pl.Series([], dtype=pl.Utf8) for col in columns})
        return pl.DataFrame(rows, schema=columns, orient="row")

    def count_triples(self) -> int:
        return self._execute("SELECT COUNT(*) FROM triples").fetchone()[0]

    def stats(self) -> Dict[str, Any]:
        """Row counts for each table."""
        return {
            "location": self._location,
            "names": self._execute("SELECT COUNT(*) FROM names").fetchone()[0],
            "objects": self._execute("SELECT COUNT(*) FROM objects").fetchone()[0],
            "triples": self.count_triples(),
            "in_session": self.in_session,
        }

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the connection, rolling back any open session."""
        if self._conn is None:
            return
        if self._session is not None:
            self._session.rollback()
            self._session = None
        self._conn.close()
        self._conn = None

    def __enter__(self) -> "TripleStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
