"""
Turtle serializer for stored subjects.

The inverse of the stream assembler: prefixes are recomputed from the
names actually written, using the same namespace split that resolution
reverses, and each subject becomes one block:

    @prefix ns1: <http://example.com/> .

    ns1:subj1
        ns1:pred1 "hello" ;
        ns1:tag "a" ,
            "b" .

Every line written here is accepted by LineParser, so an export can be
fed straight back into an import.
"""

from typing import Dict, Iterable, List, Optional, TextIO, Tuple

from triples.errors import InvalidIdentifier
from triples.formats.grammar import is_local_name
from triples.models import Subject
from triples.names import RDF_TYPE, is_absolute_identifier, join, split


def escape_literal(text: str) -> str:
    """
    Make text safe inside double quotes.

    Existing backslash escapes are kept as they are, so text that came from
    a parsed literal is returned unchanged.
    """
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            if i + 1 < len(text):
                out.append(text[i:i + 2])
                i += 2
                continue
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


class TurtleSerializer:
    """
    Serializer for the line-oriented Turtle subset.

    Prefix aliases are ns1, ns2, ... assigned in first-use order, so the
    output for a given set of subjects is deterministic.
    """

    def __init__(self, indent: str = "    "):
        self.indent = indent
        self._prefixes: Dict[str, str] = {}

    @property
    def prefixes(self) -> Dict[str, str]:
        """Namespace to alias mapping computed so far."""
        return dict(self._prefixes)

    def _prefixable(self, identifier: str) -> Optional[Tuple[str, str]]:
        """
        Split identifier for prefixed output.

        Returns None when 'alias:local' would not resolve back to exactly
        this identifier, or when it has no namespace at all; such names are
        written in <...> form instead.
        """
        try:
            namespace, local = split(identifier)
        except InvalidIdentifier:
            return None
        if not is_local_name(local) or join(namespace, local) != identifier:
            return None
        return namespace, local

    def add_prefixes(self, subject: Subject) -> None:
        """Register the namespaces subject's names will be written with."""
        names = [subject.name]
        names.extend(p for p in sorted(subject.predicates()) if p != RDF_TYPE)
        for name in names:
            parts = self._prefixable(name)
            if parts is None:
                continue
            namespace = parts[0]
            if namespace not in self._prefixes:
                self._prefixes[namespace] = f"ns{len(self._prefixes) + 1}"

    def compute_prefixes(self, subjects: Iterable[Subject]) -> Dict[str, str]:
        """Reset and compute the minimal prefix table for subjects."""
        self._prefixes = {}
        for subject in subjects:
            self.add_prefixes(subject)
        return self.prefixes

    def format_name(self, identifier: str) -> str:
        parts = self._prefixable(identifier)
        if parts is not None and parts[0] in self._prefixes:
            return f"{self._prefixes[parts[0]]}:{parts[1]}"
        return f"<{identifier}>"

    def format_predicate(self, identifier: str) -> str:
        if identifier == RDF_TYPE:
            return "a"
        return self.format_name(identifier)

    def format_object(self, obj: str) -> str:
        # identifier-looking text goes out as a reference; both forms
        # re-import to the same stored string
        if is_absolute_identifier(obj):
            return f"<{obj}>"
        return f'"{escape_literal(obj)}"'

    def serialize_prefixes(self) -> List[str]:
        return [
            f"@prefix {alias}: <{namespace}> ."
            for namespace, alias in sorted(self._prefixes.items(), key=lambda kv: int(kv[1][2:]))
        ]

    def serialize_subject(self, subject: Subject) -> List[str]:
        """
        Render one subject block.

        Args:
            subject: Subject with at least one predicate/object pair

        Returns:
            Lines of the block, without line endings
        """
        lines = [self.format_name(subject.name)]
        entries = [
            (self.format_predicate(predicate), sorted(self.format_object(o) for o in objects))
            for predicate, objects in sorted(subject.predicate_objects())
        ]
        for i, (predicate, objects) in enumerate(entries):
            last_predicate = i == len(entries) - 1
            for j, obj in enumerate(objects):
                last_object = j == len(objects) - 1
                if not last_object:
                    terminator = ","
                elif last_predicate:
                    terminator = "."
                else:
                    terminator = ";"
                if j == 0:
                    lines.append(f"{self.indent}{predicate} {obj} {terminator}")
                else:
                    lines.append(f"{self.indent * 2}{obj} {terminator}")
        return lines

    def serialize(self, subjects: List[Subject]) -> str:
        """
        Serialize subjects to Turtle text.

        Args:
            subjects: Subjects to write, in output order

        Returns:
            Turtle formatted string
        """
        self.compute_prefixes(subjects)
        blocks = []
        prefix_lines = self.serialize_prefixes()
        if prefix_lines:
            blocks.append("\n".join(prefix_lines))
        for subject in subjects:
            if len(subject):
                blocks.append("\n".join(self.serialize_subject(subject)))
        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"

    def write_prefixes(self, out: TextIO) -> None:
        prefix_lines = self.serialize_prefixes()
        for line in prefix_lines:
            out.write(line + "\n")
        if prefix_lines:
            out.write("\n")

    def write_subject(self, subject: Subject, out: TextIO) -> None:
        for line in self.serialize_subject(subject):
            out.write(line + "\n")
        out.write("\n")


def serialize_turtle(subjects: List[Subject]) -> str:
    """
    Serialize subjects to Turtle text.

    Args:
        subjects: Subjects to write

    Returns:
        Turtle formatted string
    """
    serializer = TurtleSerializer()
    return serializer.serialize(subjects)
