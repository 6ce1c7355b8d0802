"""
Flat CSV mapping for stored triples.

Export writes one subject,predicate,object row per stored triple. Import
reads the same three columns, groups rows by subject and inserts each
subject inside a single store session.
"""

from __future__ import annotations

import csv
import logging
from typing import Dict, Iterable, Optional, TextIO

from triples.errors import LineSyntaxError, TriplesError
from triples.formats.serializer import escape_literal
from triples.models import Subject
from triples.names import split, validate_identifier
from triples.storage.duckdb import TripleStore

logger = logging.getLogger(__name__)

HEADERS = ("Subject", "Predicate", "Object")


def display_name(identifier: str, export_ns_name: bool = False) -> str:
    """
    Name as written to a CSV cell.

    Raises:
        InvalidIdentifier: If the local name is wanted and the identifier
            has no namespace to strip
    """
    if export_ns_name:
        return identifier
    return split(identifier)[1]


def qualify(value: str, namespace: Optional[str]) -> str:
    """Join value onto a default namespace with '/', if one is given."""
    if namespace:
        value = f"{namespace.rstrip('/')}/{value}"
    return validate_identifier(value)


def export_csv(
    store: TripleStore,
    out: TextIO,
    export_ns_name: bool = False,
    export_headers: bool = False,
) -> int:
    """
    Write every stored triple as a CSV row.

    Args:
        store: Source store
        out: Text stream to write to
        export_ns_name: Write full identifiers instead of local names
        export_headers: Write a header row first

    Returns:
        Number of rows written, headers excluded
    """
    writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    if export_headers:
        writer.writerow(HEADERS)

    frame = store.triples()
    for subject, predicate, obj in frame.iter_rows():
        writer.writerow([
            display_name(subject, export_ns_name),
            display_name(predicate, export_ns_name),
            obj,
        ])
    logger.info(f"Exported {frame.height} rows")
    return frame.height


def read_subjects(
    source: Iterable[str],
    subject_ns: Optional[str] = None,
    predicate_ns: Optional[str] = None,
    skip_headers: bool = False,
) -> Dict[str, Subject]:
    """
    Group CSV rows into subjects, in first-seen order.

    Raises:
        LineSyntaxError: If a row does not hold exactly three fields
        InvalidIdentifier: If a subject or predicate is not a usable name
    """
    subjects: Dict[str, Subject] = {}
    reader = csv.reader(source)
    for row in reader:
        if skip_headers and reader.line_num == 1:
            continue
        if not row:
            continue
        try:
            if len(row) != 3:
                raise LineSyntaxError(",".join(row), f"expected 3 fields, got {len(row)}")
            name = qualify(row[0].strip(), subject_ns)
            predicate = qualify(row[1].strip(), predicate_ns)
        except TriplesError as e:
            e.line_number = reader.line_num
            raise
        subject = subjects.get(name)
        if subject is None:
            subject = subjects[name] = Subject(name)
        # stored in the same escaped form a Turtle literal carries
        subject.add(predicate, escape_literal(row[2]))
    return subjects


def import_csv(
    source: Iterable[str],
    store: TripleStore,
    subject_ns: Optional[str] = None,
    predicate_ns: Optional[str] = None,
    skip_headers: bool = False,
) -> int:
    """
    Load subject,predicate,object rows into the store.

    Nothing is stored unless every row is accepted.

    Returns:
        Number of subjects inserted
    """
    subjects = read_subjects(source, subject_ns, predicate_ns, skip_headers)
    with store.session():
        for subject in subjects.values():
            store.insert(subject)
    logger.info(f"Imported {len(subjects)} subjects from CSV")
    return len(subjects)
