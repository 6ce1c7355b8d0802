"""
Tests for the Turtle serializer and the parse/serialize round trip.
"""

import pytest

from triples.formats.serializer import TurtleSerializer, escape_literal, serialize_turtle
from triples.formats.stream import TurtleStream
from triples.models import Subject
from triples.names import RDF_TYPE


def reparse(text):
    stream = TurtleStream()
    subjects = []
    for line in text.splitlines():
        subject = stream.load(line)
        if subject is not None:
            subjects.append(subject)
    stream.finish()
    return subjects


@pytest.fixture
def subject():
    subject = Subject("http://example.com/subj1")
    subject.add("http://example.com/pred1", "hello")
    subject.extend("http://example.com/tag", ["a", "b"])
    return subject


class TestEscapeLiteral:
    def test_plain(self):
        assert escape_literal("hello") == "hello"

    def test_existing_escapes_kept(self):
        assert escape_literal(r'The \"inner\" word') == r'The \"inner\" word'

    def test_bare_quote(self):
        assert escape_literal('say "hi"') == r'say \"hi\"'

    def test_newline(self):
        assert escape_literal("a\nb") == r"a\nb"

    def test_trailing_backslash(self):
        assert escape_literal("a\\") == "a\\\\"


class TestLayout:
    def test_block(self, subject):
        text = serialize_turtle([subject])
        assert text == (
            "@prefix ns1: <http://example.com/> .\n"
            "\n"
            "ns1:subj1\n"
            '    ns1:pred1 "hello" ;\n'
            '    ns1:tag "a" ,\n'
            '        "b" .\n'
        )

    def test_aliases_in_first_use_order(self):
        first = Subject("http://one.example/s")
        first.add("http://two.example/p", "x")
        second = Subject("http://three.example/s")
        second.add("http://one.example/p", "y")
        serializer = TurtleSerializer()
        prefixes = serializer.compute_prefixes([first, second])
        assert prefixes == {
            "http://one.example/": "ns1",
            "http://two.example/": "ns2",
            "http://three.example/": "ns3",
        }

    def test_type_written_as_a(self):
        subject = Subject("https://example.com/ghc#8Floor")
        subject.add(RDF_TYPE, "https://brickschema.org/schema/Brick#Floor")
        text = serialize_turtle([subject])
        assert "    a <https://brickschema.org/schema/Brick#Floor> ." in text
        assert "rdf-syntax-ns" not in text

    def test_unprefixable_name_is_bracketed(self):
        subject = Subject("http://example.com/a.")
        subject.add("http://example.com/p", "x")
        lines = TurtleSerializer().serialize(
            [subject]
        ).splitlines()
        assert "<http://example.com/a.>" in lines

    def test_unsplittable_name_is_bracketed(self):
        subject = Subject("http://example.com/s")
        subject.add("k8p_metric_name", "x")
        text = serialize_turtle([subject])
        assert '    <k8p_metric_name> "x" .' in text.splitlines()
        assert reparse(text) == [subject]

    def test_empty(self):
        assert serialize_turtle([]) == ""


class TestRoundTrip:
    def test_simple(self, subject):
        assert reparse(serialize_turtle([subject])) == [subject]

    def test_hash_namespaces(self):
        subject = Subject("http://cmu.edu/building/ontology/ghc#8Floor")
        subject.add(RDF_TYPE, "https://brickschema.org/schema/Brick#Floor")
        subject.add("https://example.com/myns#label", "Eighth floor")
        assert reparse(serialize_turtle([subject])) == [subject]

    def test_escaped_literal(self):
        subject = Subject("http://example.com/s")
        subject.add("http://example.com/p", r'The \"inner\" word')
        assert reparse(serialize_turtle([subject])) == [subject]

    def test_identifier_looking_object(self):
        """Object text that reads as an identifier comes back as the same text."""
        subject = Subject("http://example.com/s")
        subject.extend("http://example.com/p", ["http://example.com/other", "plain text"])
        text = serialize_turtle([subject])
        assert "<http://example.com/other>" in text
        assert '"plain text"' in text
        assert reparse(text) == [subject]

    def test_prefixed_looking_literal_stays_quoted(self):
        subject = Subject("http://example.com/s")
        subject.add("http://example.com/p", "envoy_cluster:internal upstream_rq_200")
        text = serialize_turtle([subject])
        assert '"envoy_cluster:internal upstream_rq_200"' in text
        assert reparse(text) == [subject]

    def test_many_subjects(self):
        subjects = []
        for i in range(5):
            s = Subject(f"http://example.com/subj{i}")
            s.extend("http://example.com/tag", [str(j) for j in range(i + 1)])
            s.add("http://other.example/ns#count", str(i))
            subjects.append(s)
        assert reparse(serialize_turtle(subjects)) == subjects
