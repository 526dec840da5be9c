"""Command line interface: rate or map a project listing against directory standards."""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import os
import re
import sys
from pathlib import PurePosixPath
from typing import Iterable, Iterator, Optional, Sequence

from .coverage import Coverage
from .data import DEFAULT_IGNORED_PATHS, VERSION, load_registry
from .evaluation import BestFitError, cover_listing_by_stds, rate_listing_by_stds
from .format import ParseError
from .stds import Standards

logger = logging.getLogger(__name__)

PROG = "osh-dir-std"
DEFINITIONS_ENV = "OSH_DIR_STD_DEFINITIONS"

SC_RATE = "rate"
SC_MAP = "map"

_EXAMPLES = f"""Examples:
  $ # 1. Lists git tracked files,
  $ #    and rates them with all the known standards:
  $ git ls-files --recurse-submodules \\
        | sed -e 's/^"\\(.*\\)"$/\\1/' \\
        | {PROG} --all rate

  $ # 2. Lists git tracked files,
  $ #    and maps them to the default standard:
  $ git ls-files --recurse-submodules \\
        | sed -e 's/^"\\(.*\\)"$/\\1/' \\
        | {PROG} map
"""


class _StderrHandler(logging.StreamHandler):
    """A handler that always writes to the current ``sys.stderr``."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def _setup_logging(quiet: bool) -> None:
    pkg_logger = logging.getLogger(__package__ or "oshdirstd")
    if not any(isinstance(handler, _StderrHandler) for handler in pkg_logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.WARNING if quiet else logging.INFO)


def _regex(value: str) -> re.Pattern:
    try:
        return re.compile(value)
    except re.error as err:
        raise argparse.ArgumentTypeError(f"invalid regex '{value}': {err}") from err


def _add_global_args(parser: argparse.ArgumentParser, std_names: Sequence[str], nested: bool) -> None:
    """Add the options valid both before and after the sub-command.

    Inside a sub-command the defaults are suppressed,
    so values given before the sub-command survive.
    """

    def default(value):
        return argparse.SUPPRESS if nested else value

    parser.add_argument(
        "output",
        nargs="?",
        metavar="JSON-FILE",
        default=default(None),
        help="The output file",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        default=default(False),
        help="Print version information and exit. "
        "May be combined with -q,--quiet, to really only output the version string.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default(False),
        help="Much less (or no) command-line output",
    )
    parser.add_argument(
        "-I",
        "--listing",
        "--input-listing",
        "--input-lst",
        "--in-lst",
        "--input",
        "--in",
        "--lst",
        dest="listing",
        metavar="FILE",
        default=default(None),
        help="Dirs and files listing to check coverage for. "
        "Either the path to a file with new-line separated paths, "
        "or '-' or no argument, meaning the same format is expected on stdin.",
    )
    parser.add_argument(
        "-i",
        "--ignore-paths-regex",
        "--ign",
        "--ignps",
        "--ip",
        "--ips",
        dest="ignore_paths",
        metavar="REGEX",
        type=_regex,
        default=default(None),
        help="Regex capturing all paths to be ignored; relative to the project root, "
        f"like all paths handled by this tool. [default: '{DEFAULT_IGNORED_PATHS.pattern}']",
    )
    parser.add_argument(
        "-s",
        "--standard",
        "--std",
        dest="standard",
        metavar="STD",
        choices=list(std_names) or None,
        default=default(None),
        help="Which OSH directory standard to check coverage for or rate",
    )
    parser.add_argument(
        "-b",
        "--best-fit",
        "--best",
        "--fittest",
        "--fit",
        "--bf",
        dest="best_fit",
        action="store_true",
        default=default(False),
        help="Use which ever standard seems to fit best",
    )
    parser.add_argument(
        "-a",
        "--all",
        "--all-standards",
        "--all-stds",
        dest="all",
        action="store_true",
        default=default(False),
        help="Check coverage/do mapping versus all OSH directory standards",
    )
    parser.add_argument(
        "--definitions",
        metavar="DIR",
        default=default(os.environ.get(DEFINITIONS_ENV)),
        help="Directory holding the standard definitions "
        f"('default_mod.csv' and 'mod/<name>/definition.csv') [env: {DEFINITIONS_ENV}]",
    )


def build_parser(std_names: Sequence[str]) -> argparse.ArgumentParser:
    """Build the argument parser; `std_names` are the valid values of --standard."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Helps humans and machines deal with the OSH directory standard.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    _add_global_args(parser, std_names, nested=False)
    parser.set_defaults(subcommand=None)

    subparsers = parser.add_subparsers(dest="_command_name", metavar="COMMAND")
    rate = subparsers.add_parser(
        SC_RATE,
        aliases=["r"],
        allow_abbrev=False,
        help="Rates a project repo directory with all known OSH dir standards, "
        "indicating for each standard how well it fits",
    )
    rate.add_argument(
        "-c",
        "--include-coverage",
        dest="include_coverage",
        action="store_true",
        help="Includes the coverage",
    )
    _add_global_args(rate, std_names, nested=True)
    rate.set_defaults(subcommand=SC_RATE)

    mapping = subparsers.add_parser(
        SC_MAP,
        aliases=["m"],
        allow_abbrev=False,
        help="Maps project directories and files to parts of the standard",
    )
    _add_global_args(mapping, std_names, nested=True)
    mapping.set_defaults(subcommand=SC_MAP)
    return parser


def line_to_path(line: str) -> str:
    """Remove a leading "./" or ".\\" from a listed path."""
    if line.startswith(("./", ".\\")):
        return line[2:]
    return line


def dirs_and_files(lines: Iterable[str]) -> Iterator[str]:
    """Yield every listed path and all its ancestor dirs, each only once.

    Empty lines and lines starting with '#' are skipped.
    """
    visited = set()
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line or line.startswith("#"):
            continue
        path = PurePosixPath(line_to_path(line))
        for candidate in (path, *path.parents):
            text = str(candidate)
            if text == "." or text in visited:
                continue
            visited.add(text)
            yield text


def cov_entry(coverage: Coverage) -> dict:
    """Return a coverage decorated with its standard's name and matched records."""
    return {
        "name": coverage.std.name,
        "coverage": coverage.to_dict(),
        "records": [record.to_dict() for record in coverage.matched],
    }


@contextlib.contextmanager
def _input_lines(listing: Optional[str]):
    if listing is None or listing == "-":
        logger.info("Reading input listing from stdin.")
        yield sys.stdin
    else:
        logger.info("Reading input listing from file '%s'.", listing)
        with open(listing, encoding="utf-8") as stream:
            yield stream


def _write_output(output: Optional[str], text: str) -> None:
    if output is None or output == "-":
        logger.info("Writing output to stdout")
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        logger.info("Writing output to file '%s'", output)
        with open(output, "w", encoding="utf-8") as stream:
            stream.write(text)


def _early_options(argv: Sequence[str]) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    pre.add_argument("-V", "--version", action="store_true")
    pre.add_argument("-q", "--quiet", action="store_true")
    pre.add_argument("--definitions", default=os.environ.get(DEFINITIONS_ENV))
    early, _rest = pre.parse_known_args(argv)
    return early


def main(argv=None) -> int:
    """Run the command line tool; returns the exit status."""
    argv = sys.argv[1:] if argv is None else list(argv)
    early = _early_options(argv)
    _setup_logging(early.quiet)

    if early.version:
        print(VERSION if early.quiet else f"{PROG} {VERSION}")
        return 0

    registry = None
    if early.definitions:
        try:
            registry = load_registry(early.definitions)
        except ParseError as err:
            logger.error("%s", err)
            return 1

    parser = build_parser(registry.names() if registry is not None else ())
    args = parser.parse_args(argv)

    selected = [args.standard is not None, args.best_fit, args.all]
    if sum(selected) > 1:
        parser.error("the arguments --standard, --best-fit and --all conflict with each other")
    if args.subcommand is None:
        if not any(selected):
            parser.error("one of the arguments --standard --best-fit --all --version is required")
        logger.error("'%s' requires a subcommand, but none was provided", PROG)
        parser.print_help()
        return 1
    if registry is None:
        parser.error(
            f"no standard definitions directory given; use --definitions or set {DEFINITIONS_ENV}"
        )

    ignored_paths = args.ignore_paths if args.ignore_paths is not None else DEFAULT_IGNORED_PATHS
    stds = Standards.from_opts(args.all, args.best_fit, args.standard)

    try:
        with _input_lines(args.listing) as lines:
            paths = dirs_and_files(lines)
            if args.subcommand == SC_RATE:
                logger.info("Rating listing according to standard(s) ...")
                ratings = rate_listing_by_stds(paths, ignored_paths, stds, registry)
                if not getattr(args, "include_coverage", False):
                    ratings = [rating.remove_coverage() for rating in ratings]
                result = [rating.to_dict() for rating in ratings]
            else:
                logger.info("Mapping listing to standard(s) ...")
                coverages = cover_listing_by_stds(paths, ignored_paths, stds, registry)
                result = [cov_entry(coverage) for coverage in coverages]
        logger.info("Converting results to JSON ...")
        _write_output(args.output, json.dumps(result, indent=2))
    except (OSError, BestFitError) as err:
        logger.error("%s", err)
        return 1

    logger.info("done.")
    return 0