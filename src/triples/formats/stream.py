"""
Incremental statement assembler for line-oriented Turtle.

A TurtleStream is fed one line at a time. It keeps the prefix table, the
subject currently being built and a small state machine, and hands back a
finished Subject on exactly the line that closes its block:

    stream = TurtleStream()
    for line in lines:
        subject = stream.load(line)
        if subject is not None:
            store.insert(subject)
    stream.finish()

One instance serves one input stream. Instances share nothing, so several
streams can be assembled side by side by holding several instances.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from triples.errors import (
    DanglingObjectContinuation,
    NoSubjectOpen,
    PredicateInsideObjectList,
    PrefixInsideBlock,
    StatementInsideBlock,
    SubjectAlreadyOpen,
    TriplesError,
)
from triples.formats.grammar import (
    Fragment,
    LineParser,
    LiteralValue,
    NameRef,
    ObjectContinuation,
    ObjectTerm,
    PredicateObjects,
    PrefixDeclaration,
    SubjectHead,
    SubjectStatement,
    Terminator,
)
from triples.models import Subject
from triples.names import resolve, validate_identifier

logger = logging.getLogger(__name__)


class ParserState(Enum):
    """Which fragment kinds the stream will accept next."""
    SUBJECT_LOADING = "SubjectLoading"      # between blocks
    PREDICATE_LOADING = "PredicateLoading"  # subject open, expecting predicates
    OBJECT_LOADING = "ObjectLoading"        # inside a ',' separated object list


class TurtleStream:
    """
    Stateful assembler turning Turtle lines into Subjects.

    A rejected line raises and leaves the stream exactly as it was: every
    name on the line is resolved before anything is changed.
    """

    def __init__(self, parser: Optional[LineParser] = None):
        self._parser = parser or LineParser()
        self._state = ParserState.SUBJECT_LOADING
        self._prefixes: Dict[str, str] = {}
        self._subject: Optional[Subject] = None
        # (name as written, resolved identifier) of the open object list
        self._pending_predicate: Optional[tuple] = None
        self.subjects_emitted = 0

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def prefixes(self) -> Mapping[str, str]:
        """Read-only view of the prefix table."""
        return MappingProxyType(self._prefixes)

    @property
    def current_subject(self) -> Optional[Subject]:
        """A copy of the subject being built, if any."""
        return self._subject.copy() if self._subject is not None else None

    @property
    def pending_predicate(self) -> Optional[str]:
        if self._pending_predicate is None:
            return None
        return self._pending_predicate[1]

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, line: str) -> Optional[Subject]:
        """
        Enables a stream processor to load one line of Turtle at a time.

        Args:
            line: One input line

        Returns:
            The finished Subject if this line closed a block, else None

        Raises:
            TriplesError: If the line can not be parsed or is not legal in
                the current state
        """
        try:
            fragment = self._parser.parse(line)
        except TriplesError as e:
            e.state = self._state.value
            raise
        if fragment is None:
            return None
        return self.apply(fragment)

    def apply(self, fragment: Fragment) -> Optional[Subject]:
        """Feed an already parsed fragment."""
        try:
            if isinstance(fragment, PrefixDeclaration):
                return self._on_prefix(fragment)
            if isinstance(fragment, SubjectHead):
                return self._on_subject(fragment)
            if isinstance(fragment, PredicateObjects):
                return self._on_predicate_objects(fragment)
            if isinstance(fragment, ObjectContinuation):
                return self._on_continuation(fragment)
            if isinstance(fragment, SubjectStatement):
                return self._on_statement(fragment)
            raise TypeError(f"unknown fragment type: {type(fragment).__name__}")
        except TriplesError as e:
            if e.state is None:
                e.state = self._state.value
            raise

    def finish(self) -> None:
        """
        Declare the end of input.

        Raises:
            SubjectAlreadyOpen: If the last block was never terminated
        """
        if self._subject is not None:
            raise SubjectAlreadyOpen(
                self._subject.name,
                self._state.value,
                f"input ended before subject {self._subject.name!r} was terminated",
            )

    def reset(self) -> None:
        """Discard the subject in progress; the prefix table is kept."""
        if self._subject is not None:
            logger.debug(f"Discarding unfinished subject {self._subject.name}")
        self._subject = None
        self._pending_predicate = None
        self._state = ParserState.SUBJECT_LOADING

    # =========================================================================
    # Fragment handlers
    # =========================================================================

    def _on_prefix(self, fragment: PrefixDeclaration) -> None:
        # prefixes may only change in between subject blocks
        if self._subject is not None:
            raise PrefixInsideBlock(self._subject.name, fragment.mnemonic)
        namespace = validate_identifier(fragment.namespace)
        self._prefixes[fragment.mnemonic] = namespace
        return None

    def _on_subject(self, fragment: SubjectHead) -> None:
        if self._subject is not None:
            raise SubjectAlreadyOpen(self._subject.name)
        name = self._resolve(fragment.subject)
        self._subject = Subject(name)
        self._state = ParserState.PREDICATE_LOADING
        return None

    def _on_predicate_objects(self, fragment: PredicateObjects) -> Optional[Subject]:
        if self._state is ParserState.SUBJECT_LOADING:
            raise NoSubjectOpen()
        if self._state is ParserState.OBJECT_LOADING:
            raise PredicateInsideObjectList(self.pending_predicate)
        predicate = self._resolve(fragment.predicate)
        objects = self._resolve_objects(fragment.objects)
        self._subject.extend(predicate, objects)
        return self._advance(fragment.terminator, (fragment.predicate, predicate))

    def _on_continuation(self, fragment: ObjectContinuation) -> Optional[Subject]:
        if self._state is not ParserState.OBJECT_LOADING:
            raise DanglingObjectContinuation()
        objects = self._resolve_objects(fragment.objects)
        pending = self._pending_predicate
        self._subject.extend(pending[1], objects)
        return self._advance(fragment.terminator, pending)

    def _on_statement(self, fragment: SubjectStatement) -> Optional[Subject]:
        if self._subject is not None:
            raise StatementInsideBlock(self._subject.name)
        name = self._resolve(fragment.subject)
        predicate = self._resolve(fragment.predicate)
        objects = self._resolve_objects(fragment.objects)
        self._subject = Subject(name)
        self._subject.extend(predicate, objects)
        return self._advance(fragment.terminator, (fragment.predicate, predicate))

    def _advance(self, terminator: Terminator, predicate: tuple) -> Optional[Subject]:
        """Move to the state the line's terminator calls for."""
        if terminator is Terminator.MORE:
            self._pending_predicate = predicate
            self._state = ParserState.OBJECT_LOADING
            return None
        self._pending_predicate = None
        if terminator is Terminator.CONTINUE:
            self._state = ParserState.PREDICATE_LOADING
            return None
        return self._emit()

    def _emit(self) -> Subject:
        subject = self._subject
        self._subject = None
        self._state = ParserState.SUBJECT_LOADING
        self.subjects_emitted += 1
        logger.debug(f"Completed subject {subject.name} with {len(subject)} objects")
        return subject

    # =========================================================================
    # Name resolution
    # =========================================================================

    def _resolve(self, ref: NameRef) -> str:
        return resolve(ref.prefix, ref.local, self._prefixes)

    def _resolve_objects(self, objects: Sequence[ObjectTerm]) -> List[str]:
        resolved = []
        for obj in objects:
            if isinstance(obj, LiteralValue):
                resolved.append(obj.text)
            else:
                resolved.append(self._resolve(obj))
        return resolved
