"""
Ingestion sessions for the triple store.

A session is the outer transaction around one import run: every subject
inserted while it is active becomes visible together on commit, or not at
all if the run fails part way through.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Any, Dict, Optional
import logging
import time

if TYPE_CHECKING:
    from triples.storage.duckdb import TripleStore

logger = logging.getLogger(__name__)


class SessionState(IntEnum):
    """Session lifecycle states."""
    PENDING = auto()      # Created but not started
    ACTIVE = auto()       # In progress
    COMMITTED = auto()    # Successfully completed
    ABORTED = auto()      # Rolled back


@dataclass
class SessionStats:
    """Statistics for one ingestion session."""
    session_id: int
    start_time: float
    end_time: Optional[float] = None
    subjects: int = 0
    triples: int = 0
    state: SessionState = SessionState.PENDING

    @property
    def duration_ms(self) -> float:
        """Session duration in milliseconds."""
        end = self.end_time or time.time()
        return (end - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "subjects": self.subjects,
            "triples": self.triples,
            "state": self.state.name,
            "duration_ms": round(self.duration_ms, 3),
        }


class Session:
    """
    One outer transaction on a TripleStore.

    Usage:
        with store.session() as session:
            store.insert(subject)
        # Commits on clean exit, rolls back on exception
    """

    def __init__(self, store: "TripleStore", session_id: int):
        self._store = store
        self._state = SessionState.PENDING
        self._stats = SessionStats(session_id=session_id, start_time=time.time())

    @property
    def session_id(self) -> int:
        return self._stats.session_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stats(self) -> SessionStats:
        return self._stats

    def _check_active(self):
        if self._state != SessionState.ACTIVE:
            raise RuntimeError(
                f"Session {self.session_id} is {self._state.name}, not ACTIVE"
            )

    def begin(self) -> "Session":
        if self._state != SessionState.PENDING:
            raise RuntimeError(f"Cannot begin session in state {self._state.name}")
        self._store._begin()
        self._state = SessionState.ACTIVE
        self._stats.state = self._state
        logger.debug(f"Session {self.session_id} started")
        return self

    def record(self, subjects: int, triples: int) -> None:
        """Count rows written under this session."""
        self._check_active()
        self._stats.subjects += subjects
        self._stats.triples += triples

    def commit(self) -> None:
        self._check_active()
        self._store._commit()
        self._finish(SessionState.COMMITTED)
        logger.info(
            f"Session {self.session_id} committed: {self._stats.subjects} subjects, "
            f"{self._stats.triples} triples in {self._stats.duration_ms:.1f} ms"
        )

    def rollback(self) -> None:
        if self._state != SessionState.ACTIVE:
            return
        try:
            self._store._rollback()
        finally:
            self._finish(SessionState.ABORTED)
        logger.warning(
            f"Session {self.session_id} rolled back after {self._stats.subjects} subjects"
        )

    def _finish(self, state: SessionState) -> None:
        self._state = state
        self._stats.state = state
        self._stats.end_time = time.time()
