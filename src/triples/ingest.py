"""
Import and export drivers.

import_turtle streams lines through a TurtleStream into a TripleStore
inside one session, so a failure anywhere in the input leaves the store as
it was. export_turtle writes every stored subject back out as Turtle.
Both work on plain text streams so the CLI can pipe stdin and stdout.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TextIO

from triples.config import TriplesConfig
from triples.errors import TriplesError
from triples.formats.serializer import TurtleSerializer
from triples.formats.stream import TurtleStream
from triples.storage.duckdb import TripleStore

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of one import run."""
    lines: int = 0
    subjects: int = 0
    triples: int = 0
    skipped: List[TriplesError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": self.lines,
            "subjects": self.subjects,
            "triples": self.triples,
            "skipped": [str(e) for e in self.skipped],
        }


def is_ignorable(line: str) -> bool:
    """Blank lines and '#' comment lines carry no fragment."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def import_turtle(
    lines: Iterable[str],
    store: TripleStore,
    config: Optional[TriplesConfig] = None,
) -> ImportReport:
    """
    Read Turtle lines and load the store.

    Args:
        lines: Input lines, in order
        store: Destination store
        config: Error policy and logging interval

    Returns:
        ImportReport with counts

    Raises:
        TriplesError: On the first rejected line (unless continue_on_error
            is set) or if the input ends inside a block; nothing from the
            run is stored in that case
    """
    config = config or TriplesConfig()
    stream = TurtleStream()
    report = ImportReport()

    with store.session():
        for line_number, line in enumerate(lines, start=1):
            report.lines = line_number
            if is_ignorable(line):
                continue
            try:
                subject = stream.load(line)
            except TriplesError as e:
                e.line_number = line_number
                if not config.continue_on_error:
                    raise
                logger.warning(f"Skipping {e}")
                report.skipped.append(e)
                continue
            if subject is None:
                continue
            report.triples += store.insert(subject)
            report.subjects += 1
            if report.subjects % config.batch_log_interval == 0:
                logger.info(f"Imported {report.subjects} subjects ({line_number} lines)")
        try:
            stream.finish()
        except TriplesError as e:
            e.line_number = report.lines
            if not config.continue_on_error:
                raise
            logger.warning(f"Discarding {e}")
            report.skipped.append(e)
            stream.reset()

    logger.info(
        f"Import complete: {report.subjects} subjects, {report.triples} triples, "
        f"{len(report.skipped)} lines skipped"
    )
    return report


def export_turtle(store: TripleStore, out: TextIO) -> int:
    """
    Write the entire store as Turtle.

    Subjects are read twice: once to compute the prefix table, which has
    to precede every block, and once to write them.

    Returns:
        Number of subjects written
    """
    names = store.list_subject_names()
    serializer = TurtleSerializer()
    for name in names:
        subject = store.query(name)
        if subject is not None:
            serializer.add_prefixes(subject)

    serializer.write_prefixes(out)
    written = 0
    for name in names:
        subject = store.query(name)
        if subject is None:
            continue
        serializer.write_subject(subject, out)
        written += 1
    logger.info(f"Exported {written} subjects")
    return written
