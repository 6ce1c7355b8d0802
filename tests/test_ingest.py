"""
Tests for the Turtle import/export drivers.
"""

import io

import pytest

from triples.config import TriplesConfig
from triples.errors import NoSubjectOpen, SubjectAlreadyOpen, UnresolvedPrefix
from triples.ingest import export_turtle, import_turtle, is_ignorable
from triples.storage.duckdb import TripleStore

DOCUMENT = """\
# building sample
@prefix ex: <http://example.com/> .
@prefix brick: <https://brickschema.org/schema/Brick#> .

ex:subj1
    ex:pred1 "hello" ;
    ex:tag "a",
        "b" .

<http://cmu.edu/building/ontology/ghc#8Floor> a brick:Floor .
"""


@pytest.fixture
def store():
    store = TripleStore()
    yield store
    store.close()


class TestImport:
    def test_import(self, store):
        report = import_turtle(io.StringIO(DOCUMENT), store)
        assert report.subjects == 2
        assert report.triples == 4
        assert report.skipped == []
        assert store.list_subject_names() == [
            "http://cmu.edu/building/ontology/ghc#8Floor",
            "http://example.com/subj1",
        ]
        assert store.query("http://example.com/subj1").get("http://example.com/tag") == frozenset(
            {"a", "b"}
        )

    def test_comment_lines(self):
        assert is_ignorable("# comment")
        assert is_ignorable("   # indented comment")
        assert is_ignorable("   ")
        assert not is_ignorable("ex:subj1")

    def test_error_carries_line_number(self, store):
        lines = ["@prefix ex: <http://example.com/> .", "", 'ex:pred1 "x" .']
        with pytest.raises(NoSubjectOpen) as exc:
            import_turtle(lines, store)
        assert exc.value.line_number == 3
        assert str(exc.value).startswith("line 3: ")

    def test_failure_stores_nothing(self, store):
        lines = [
            "@prefix ex: <http://example.com/> .",
            "ex:subj1",
            '    ex:pred1 "hello" .',
            "ns:subj2",
        ]
        with pytest.raises(UnresolvedPrefix):
            import_turtle(lines, store)
        assert store.count_triples() == 0
        assert not store.in_session

    def test_unterminated_input(self, store):
        lines = ["@prefix ex: <http://example.com/> .", "ex:subj1", '    ex:pred1 "hello" ;']
        with pytest.raises(SubjectAlreadyOpen) as exc:
            import_turtle(lines, store)
        assert exc.value.line_number == 3
        assert store.count_triples() == 0

    def test_continue_on_error(self, store):
        lines = [
            "@prefix ex: <http://example.com/> .",
            'ex:pred1 "orphan" .',
            "ex:subj1",
            '    ex:pred1 "hello" .',
            "ex:subj2",
        ]
        config = TriplesConfig(continue_on_error=True)
        report = import_turtle(lines, store, config)
        assert report.subjects == 1
        assert [e.line_number for e in report.skipped] == [2, 5]
        assert store.list_subject_names() == ["http://example.com/subj1"]

    def test_report_to_dict(self, store):
        report = import_turtle(io.StringIO(DOCUMENT), store)
        d = report.to_dict()
        assert d["subjects"] == 2
        assert d["lines"] == len(DOCUMENT.splitlines())


class TestExport:
    def test_export(self, store):
        import_turtle(io.StringIO(DOCUMENT), store)
        out = io.StringIO()
        assert export_turtle(store, out) == 2
        assert out.getvalue() == (
            "@prefix ns1: <http://cmu.edu/building/ontology/ghc#> .\n"
            "@prefix ns2: <http://example.com/> .\n"
            "\n"
            "ns1:8Floor\n"
            "    a <https://brickschema.org/schema/Brick#Floor> .\n"
            "\n"
            "ns2:subj1\n"
            '    ns2:pred1 "hello" ;\n'
            '    ns2:tag "a" ,\n'
            '        "b" .\n'
            "\n"
        )

    def test_export_empty_store(self, store):
        out = io.StringIO()
        assert export_turtle(store, out) == 0
        assert out.getvalue() == ""

    def test_export_reimports_identically(self, store):
        import_turtle(io.StringIO(DOCUMENT), store)
        out = io.StringIO()
        export_turtle(store, out)

        with TripleStore() as copy:
            import_turtle(io.StringIO(out.getvalue()), copy)
            assert copy.list_subject_names() == store.list_subject_names()
            for name in store.list_subject_names():
                assert copy.query(name) == store.query(name)
