"""
Error types for triples.

Every failure raised by the grammar, the stream assembler, the name
resolver and the store derives from TriplesError so callers can catch the
whole family, or branch on the specific cause.
"""

from typing import Optional


class TriplesError(Exception):
    """Base class for all triples errors."""

    def __init__(self, message: str, state: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.state = state
        self.line_number: Optional[int] = None

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


class LineSyntaxError(TriplesError):
    """A line matched none of the known fragment shapes."""

    def __init__(self, line: str, reason: str = ""):
        message = f"can not parse line: {line!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.line = line
        self.reason = reason


class InvalidIdentifier(TriplesError):
    """A resolved or split name is malformed or unsplittable."""

    def __init__(self, identifier: str, reason: str = "invalid identifier"):
        super().__init__(f"{reason}: {identifier!r}")
        self.identifier = identifier


class UnresolvedPrefix(TriplesError):
    """A prefix was used with no declaration in scope."""

    def __init__(self, prefix: str, state: Optional[str] = None):
        super().__init__(f"can not locate namespace for prefix {prefix!r}", state)
        self.prefix = prefix


class NoSubjectOpen(TriplesError):
    """A predicate/object fragment arrived with no subject in progress."""

    def __init__(self, state: Optional[str] = None):
        super().__init__("can not load predicate without a subject", state)


class SubjectAlreadyOpen(TriplesError):
    """A fragment that needs a closed block arrived while a subject is open."""

    def __init__(self, subject: str, state: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message or f"previous subject {subject!r} not terminated", state)
        self.subject = subject


class PrefixInsideBlock(SubjectAlreadyOpen):
    """A prefix declaration arrived in the middle of a block."""

    def __init__(self, subject: str, prefix: str, state: Optional[str] = None):
        super().__init__(
            subject,
            state,
            f"prefix {prefix!r} declared while subject {subject!r} is still open",
        )
        self.prefix = prefix


class IllegalTransition(TriplesError):
    """A fragment that can never follow the current state."""


class DanglingObjectContinuation(IllegalTransition):
    """A bare object line arrived when no object list was open."""

    def __init__(self, state: Optional[str] = None):
        super().__init__("object continuation without an open object list", state)


class PredicateInsideObjectList(IllegalTransition):
    """A predicate/object line arrived while an object list was still open."""

    def __init__(self, predicate: str, state: Optional[str] = None):
        super().__init__(
            f"object list for {predicate!r} not terminated before next predicate",
            state,
        )
        self.predicate = predicate


class StatementInsideBlock(IllegalTransition, SubjectAlreadyOpen):
    """A one-line subject statement arrived while another subject was open."""

    def __init__(self, subject: str, state: Optional[str] = None):
        SubjectAlreadyOpen.__init__(
            self,
            subject,
            state,
            f"single-line statement while subject {subject!r} is still open",
        )


class StoreError(TriplesError):
    """The backing database failed; fatal for the session."""


class ConfigError(TriplesError):
    """Configuration could not be loaded or is invalid."""
