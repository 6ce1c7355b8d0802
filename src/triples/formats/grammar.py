"""
Line grammar for the Turtle subset, using pyparsing.

Each input line is classified on its own into one fragment:

    @prefix ex: <http://example.com/> .          PrefixDeclaration
    ex:subj1                                     SubjectHead
        ex:pred1 "hello" ;                       PredicateObjects (continue)
        ex:tag "a" ,                             PredicateObjects (more objects)
            "b" .                                ObjectContinuation (end)
    <http://x/ghc#8Floor> a brick:Floor .        SubjectStatement

The grammar is stateless; deciding whether a fragment is legal where it
appears is the stream assembler's job. Literal text is kept verbatim,
escape sequences included.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import pyparsing as pp
from pyparsing import (
    Keyword, Literal as Lit, Regex, Suppress, Group, StringEnd,
    DelimitedList,
)

from triples.errors import LineSyntaxError
from triples.names import RDF_TYPE


# =============================================================================
# Fragments
# =============================================================================

@dataclass(frozen=True)
class NameRef:
    """A name as written: optional prefix plus local part (or absolute id)."""
    prefix: Optional[str]
    local: str

    def __str__(self) -> str:
        if self.prefix is None:
            return self.local
        return f"{self.prefix}:{self.local}"


@dataclass(frozen=True)
class LiteralValue:
    """Quoted literal text, without the quotes, escapes untouched."""
    text: str


ObjectTerm = Union[NameRef, LiteralValue]


class Terminator(Enum):
    """Trailing punctuation of a predicate/object or object line."""
    CONTINUE = ";"   # next line is another predicate of the same subject
    MORE = ","       # next line is another object of the same predicate
    END = "."        # block closed

    @property
    def is_terminal(self) -> bool:
        return self is Terminator.END


@dataclass(frozen=True)
class PrefixDeclaration:
    mnemonic: str
    namespace: str


@dataclass(frozen=True)
class SubjectHead:
    subject: NameRef


@dataclass(frozen=True)
class PredicateObjects:
    predicate: NameRef
    objects: Tuple[ObjectTerm, ...]
    terminator: Terminator


@dataclass(frozen=True)
class ObjectContinuation:
    objects: Tuple[ObjectTerm, ...]
    terminator: Terminator


@dataclass(frozen=True)
class SubjectStatement:
    """Subject, predicate and objects on a single line."""
    subject: NameRef
    predicate: NameRef
    objects: Tuple[ObjectTerm, ...]
    terminator: Terminator


Fragment = Union[
    PrefixDeclaration,
    SubjectHead,
    PredicateObjects,
    ObjectContinuation,
    SubjectStatement,
]


# =============================================================================
# Grammar
# =============================================================================

PN_PREFIX = r"[A-Za-z][A-Za-z0-9_\-]*"
# Interior dots are allowed, a trailing dot is always the terminator
PN_LOCAL = r"[A-Za-z0-9_%](?:[A-Za-z0-9_\-%.]*[A-Za-z0-9_\-%])?"
IRI_CHARS = r"[^<>\"\s{}|^`\\]"


def is_local_name(text: str) -> bool:
    """True if text can be written after 'prefix:' and parse back unchanged."""
    return re.fullmatch(PN_LOCAL, text) is not None


def _terminator(tokens) -> Terminator:
    text = tokens[0]
    if text.endswith(".") and len(text) > 1:
        return Terminator.END
    return Terminator(text)


class LineParser:
    """
    Parser for single lines of the Turtle subset.

    Usage:
        parser = LineParser()
        fragment = parser.parse('    ex:pred1 "hello" ; .')
    """

    def __init__(self):
        self._build_grammar()

    def _build_grammar(self):
        """Build the pyparsing grammar for one line."""

        # =================================================================
        # Terms
        # =================================================================

        def make_iri(tokens):
            return NameRef(None, tokens[0][1:-1])

        iri_ref = Regex(rf"<{IRI_CHARS}*>").set_parse_action(make_iri)

        def make_prefixed_name(tokens):
            prefix, local = tokens[0].split(":", 1)
            return NameRef(prefix, local)

        prefixed_name = Regex(
            rf"(?:{PN_PREFIX})?:{PN_LOCAL}"
        ).set_parse_action(make_prefixed_name)

        def make_bare_name(tokens):
            return NameRef(None, tokens[0])

        bare_name = Regex(
            rf"{PN_LOCAL}(?![A-Za-z0-9_\-%:])"
        ).set_parse_action(make_bare_name)

        def make_type(tokens):
            return NameRef(None, RDF_TYPE)

        # 'a' only when it is not the start of a longer local name (a-b, a.b)
        type_keyword = Regex(r"a(?![A-Za-z0-9_\-%.:])").set_parse_action(make_type)

        def make_literal(tokens):
            return LiteralValue(tokens[0][1:-1])

        # Backslash escapes are skipped over, never interpreted
        literal = Regex(r'"(?:[^"\\]|\\.)*"').set_parse_action(make_literal)

        name = prefixed_name | iri_ref | bare_name
        predicate = prefixed_name | iri_ref | type_keyword | bare_name
        object_term = literal | iri_ref | prefixed_name
        object_list = Group(DelimitedList(object_term, delim=","))

        terminator = Regex(r";\s*\.|,\s*\.|;|,|\.").set_parse_action(_terminator)

        # =================================================================
        # Lines
        # =================================================================

        def make_prefix(tokens):
            return PrefixDeclaration(tokens.mnemonic[:-1], tokens.namespace.local)

        mnemonic = Regex(rf"(?:{PN_PREFIX})?:")

        prefix_line = (
            Suppress(Keyword("@prefix"))
            + mnemonic("mnemonic")
            + iri_ref("namespace")
            + Suppress(Lit("."))
            + StringEnd()
        ).set_parse_action(make_prefix)

        def make_statement(tokens):
            return SubjectStatement(
                tokens.subject,
                tokens.predicate,
                tuple(tokens.objects),
                tokens.terminator,
            )

        statement_line = (
            name("subject")
            + predicate("predicate")
            + object_list("objects")
            + terminator("terminator")
            + StringEnd()
        ).set_parse_action(make_statement)

        def make_predicate_objects(tokens):
            return PredicateObjects(
                tokens.predicate,
                tuple(tokens.objects),
                tokens.terminator,
            )

        predicate_line = (
            predicate("predicate")
            + object_list("objects")
            + terminator("terminator")
            + StringEnd()
        ).set_parse_action(make_predicate_objects)

        def make_continuation(tokens):
            return ObjectContinuation(tuple(tokens.objects), tokens.terminator)

        continuation_line = (
            object_list("objects")
            + terminator("terminator")
            + StringEnd()
        ).set_parse_action(make_continuation)

        def make_subject(tokens):
            return SubjectHead(tokens.subject)

        subject_line = (name("subject") + StringEnd()).set_parse_action(make_subject)

        self._grammar = (
            prefix_line
            | statement_line
            | predicate_line
            | continuation_line
            | subject_line
        )

    def parse(self, line: str) -> Optional[Fragment]:
        """
        Classify one line.

        Args:
            line: Raw input line; leading whitespace and the line ending
                are ignored

        Returns:
            The fragment, or None for a blank line

        Raises:
            LineSyntaxError: If the line matches no fragment shape
        """
        if not line.strip():
            return None
        try:
            result = self._grammar.parse_string(line, parse_all=True)
        except pp.ParseBaseException as e:
            raise LineSyntaxError(line.rstrip("\r\n"), str(e)) from e
        return result[0]


_default_parser: Optional[LineParser] = None


def parse_line(line: str) -> Optional[Fragment]:
    """Classify one line with a shared LineParser."""
    global _default_parser
    if _default_parser is None:
        _default_parser = LineParser()
    return _default_parser.parse(line)
