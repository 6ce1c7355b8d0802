"""
Command line entry point.

    triples [-d DB] [-c CONFIG] [-v] import-turtle < data.ttl
    triples export-turtle > data.ttl
    triples import-csv --subject-ns http://example.com/ --skip-headers < data.csv
    triples export-csv --export-headers > data.csv

Input is read from stdin and output written to stdout. Any error aborts
the run with a message on stderr and exit status 1.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from triples import __version__
from triples.config import TriplesConfig, load_config
from triples.errors import TriplesError
from triples.formats.csv import export_csv, import_csv
from triples.ingest import export_turtle, import_turtle
from triples.storage.duckdb import TripleStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triples",
        description="Load and dump a triple store as line-oriented Turtle or CSV",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--db-location", type=str, default=None,
                        help="Database file (default: /tmp/triples.db, or TRIPLES_DB)")
    parser.add_argument("-c", "--config", type=Path, default=None,
                        help="JSON configuration file")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log output (-v info, -vv debug)")
    parser.add_argument("--continue-on-error", action="store_true",
                        help="Log and skip rejected Turtle lines instead of aborting")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("import-turtle", help="Read Turtle from stdin into the store")
    commands.add_parser("export-turtle", help="Write the store as Turtle to stdout")

    csv_in = commands.add_parser("import-csv", help="Read subject,predicate,object rows from stdin")
    csv_in.add_argument("--subject-ns", type=str, default=None,
                        help="Namespace joined to every subject")
    csv_in.add_argument("--predicate-ns", type=str, default=None,
                        help="Namespace joined to every predicate")
    csv_in.add_argument("--skip-headers", action="store_true",
                        help="Ignore the first row")

    csv_out = commands.add_parser("export-csv", help="Write subject,predicate,object rows to stdout")
    csv_out.add_argument("--export-ns-name", action="store_true",
                         help="Write full identifiers instead of local names")
    csv_out.add_argument("--export-headers", action="store_true",
                         help="Write a header row")
    return parser


def configure_logging(config: TriplesConfig, verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(args: argparse.Namespace, config: TriplesConfig, stdin: TextIO, stdout: TextIO) -> None:
    with TripleStore(config.db_location) as store:
        if args.command == "import-turtle":
            import_turtle(stdin, store, config)
        elif args.command == "export-turtle":
            export_turtle(store, stdout)
        elif args.command == "import-csv":
            import_csv(
                stdin,
                store,
                subject_ns=args.subject_ns,
                predicate_ns=args.predicate_ns,
                skip_headers=args.skip_headers,
            )
        elif args.command == "export-csv":
            export_csv(
                store,
                stdout,
                export_ns_name=args.export_ns_name,
                export_headers=args.export_headers,
            )


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        config = load_config(args.config)
        if args.db_location:
            config.db_location = args.db_location
        if args.continue_on_error:
            config.continue_on_error = True
        configure_logging(config, args.verbose)
        logger.debug(f"Running {args.command} against {config.db_location}")
        run(args, config, stdin, stdout)
    except TriplesError as e:
        print(f"triples: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
