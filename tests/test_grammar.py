"""
Tests for the single-line Turtle grammar.
"""

import pytest

from triples.errors import LineSyntaxError
from triples.formats.grammar import (
    LineParser,
    LiteralValue,
    NameRef,
    ObjectContinuation,
    PredicateObjects,
    PrefixDeclaration,
    SubjectHead,
    SubjectStatement,
    Terminator,
    is_local_name,
    parse_line,
)
from triples.names import RDF_TYPE


@pytest.fixture
def parser():
    return LineParser()


class TestPrefixLines:
    def test_prefix(self, parser):
        fragment = parser.parse("@prefix ex: <http://example.com/> .")
        assert fragment == PrefixDeclaration("ex", "http://example.com/")

    def test_prefix_without_spaces(self, parser):
        fragment = parser.parse("@prefix myns:<https://example.com/myns#>.")
        assert fragment == PrefixDeclaration("myns", "https://example.com/myns#")

    @pytest.mark.parametrize("line", [
        "\t@prefix ex: <http://example.com/> .",
        "    @prefix ex: <http://example.com/> .",
        "@prefix ex: <http://example.com/> .\n",
    ])
    def test_leading_and_trailing_whitespace(self, parser, line):
        assert parser.parse(line) == PrefixDeclaration("ex", "http://example.com/")

    def test_empty_mnemonic(self, parser):
        assert parser.parse("@prefix : <http://example.com/> .") == PrefixDeclaration(
            "", "http://example.com/"
        )

    def test_misspelled_keyword(self, parser):
        with pytest.raises(LineSyntaxError):
            parser.parse("@pefix ex: <http://example.com/> .")

    def test_missing_dot(self, parser):
        with pytest.raises(LineSyntaxError):
            parser.parse("@prefix ex: <http://example.com/>")


class TestSubjectLines:
    def test_prefixed_subject(self, parser):
        fragment = parser.parse("res:505776d3-80ea-497f-a4ef-753eeb418c50")
        assert fragment == SubjectHead(NameRef("res", "505776d3-80ea-497f-a4ef-753eeb418c50"))

    def test_bracketed_subject(self, parser):
        fragment = parser.parse("<http://example.com/subj1>")
        assert fragment == SubjectHead(NameRef(None, "http://example.com/subj1"))


class TestPredicateLines:
    def test_continue(self, parser):
        fragment = parser.parse('    ex:pred1 "hello" ;')
        assert fragment == PredicateObjects(
            NameRef("ex", "pred1"), (LiteralValue("hello"),), Terminator.CONTINUE
        )

    def test_end(self, parser):
        fragment = parser.parse('    ex:pred1 "hello" .')
        assert fragment.terminator is Terminator.END

    def test_continue_then_end(self, parser):
        fragment = parser.parse('prop:k8p_metric_name "envoy_cluster:internal upstream_rq_200"; .')
        assert fragment.terminator is Terminator.END
        assert fragment.objects == (LiteralValue("envoy_cluster:internal upstream_rq_200"),)

    def test_more_objects(self, parser):
        fragment = parser.parse('    ex:tag "a",')
        assert fragment.terminator is Terminator.MORE

    def test_unprefixed_predicate(self, parser):
        fragment = parser.parse('k8p_metric_name "envoy_cluster_internal_upstream_rq_200";')
        assert fragment.predicate == NameRef(None, "k8p_metric_name")

    def test_several_objects_on_one_line(self, parser):
        fragment = parser.parse('ex:tag "a", "b", ex:c ;')
        assert fragment.objects == (
            LiteralValue("a"),
            LiteralValue("b"),
            NameRef("ex", "c"),
        )

    def test_type_keyword(self, parser):
        fragment = parser.parse("    a brick:Floor ;")
        assert fragment.predicate == NameRef(None, RDF_TYPE)

    @pytest.mark.parametrize("name", ["a-b", "a.b", "a%20", "abc"])
    def test_bare_predicate_starting_with_a(self, parser, name):
        fragment = parser.parse(f'{name} "x" .')
        assert fragment == PredicateObjects(
            NameRef(None, name), (LiteralValue("x"),), Terminator.END
        )

    def test_escaped_quotes_kept_verbatim(self, parser):
        fragment = parser.parse(
            r'prop:k8p_description "The \"recent cpu usage\" of the system the application is running in" ;'
        )
        assert fragment.objects[0].text == (
            r'The \"recent cpu usage\" of the system the application is running in'
        )

    def test_bracketed_object(self, parser):
        fragment = parser.parse("ex:link <http://example.com/other> .")
        assert fragment.objects == (NameRef(None, "http://example.com/other"),)

    def test_missing_terminator(self, parser):
        with pytest.raises(LineSyntaxError):
            parser.parse('ex:pred1 "hello"')


class TestContinuationLines:
    def test_literal_end(self, parser):
        fragment = parser.parse('        "b" .')
        assert fragment == ObjectContinuation((LiteralValue("b"),), Terminator.END)

    def test_name_more(self, parser):
        fragment = parser.parse("        ex:o1 ,")
        assert fragment == ObjectContinuation((NameRef("ex", "o1"),), Terminator.MORE)


class TestStatementLines:
    def test_isa_statement(self, parser):
        fragment = parser.parse("<http://cmu.edu/building/ontology/ghc#8Floor> a brick:Floor .")
        assert fragment == SubjectStatement(
            NameRef(None, "http://cmu.edu/building/ontology/ghc#8Floor"),
            NameRef(None, RDF_TYPE),
            (NameRef("brick", "Floor"),),
            Terminator.END,
        )

    def test_dot_directly_after_name(self, parser):
        fragment = parser.parse("ex:s ex:p ex:o.")
        assert fragment.objects == (NameRef("ex", "o"),)
        assert fragment.terminator is Terminator.END


class TestMisc:
    def test_blank_line(self, parser):
        assert parser.parse("   \n") is None

    def test_garbage(self, parser):
        with pytest.raises(LineSyntaxError) as exc:
            parser.parse("this is { not turtle")
        assert exc.value.line == "this is { not turtle"

    def test_shared_parser(self):
        assert parse_line("ex:subj1") == SubjectHead(NameRef("ex", "subj1"))

    @pytest.mark.parametrize("text,expected", [
        ("subj1", True),
        ("8Floor", True),
        ("a.b", True),
        ("a.", False),
        ("a b", False),
        ("", False),
        ("a/b", False),
    ])
    def test_is_local_name(self, text, expected):
        assert is_local_name(text) is expected
