import argparse
import logging
import shutil
import sys
import time
from importlib.metadata import version

from .client import AocClient
from .exceptions import AocliError
from .exceptions import AuthenticationFailedError
from .exceptions import EventNotStartedError
from .exceptions import FileWriteError
from .exceptions import HTTPStatusError
from .exceptions import InvalidPuzzleDateError
from .exceptions import InvalidPuzzlePartError
from .exceptions import InvalidSessionError
from .exceptions import LeaderboardNotAvailableError
from .exceptions import NoSessionFoundError
from .exceptions import PuzzleLockedError
from .exceptions import TransportError
from .exceptions import UnexpectedResponseFormat
from .puzzle import last_unlocked_day
from .puzzle import resolve_puzzle
from .render import render_calendar
from .render import render_leaderboard
from .render import render_markdown
from .render import render_text
from .render import render_verdict
from .session import resolve_session
from .types import TooRecent
from .utils import colored
from .utils import save_file


log = logging.getLogger(__name__)

# 1 is any other AocliError, 2 is argparse's usage error
EXIT_CODES = {
    InvalidPuzzleDateError: 3,
    PuzzleLockedError: 4,
    EventNotStartedError: 5,
    NoSessionFoundError: 6,
    InvalidSessionError: 7,
    AuthenticationFailedError: 8,
    UnexpectedResponseFormat: 9,
    TransportError: 10,
    HTTPStatusError: 11,
    InvalidPuzzlePartError: 12,
    LeaderboardNotAvailableError: 13,
    FileWriteError: 14,
}


def exit_code(err):
    for cls in type(err).__mro__:
        if cls in EXIT_CODES:
            return EXIT_CODES[cls]
    return 1


def _positive_int(txt):
    value = int(txt)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than zero: {value}")
    return value


def _common_args(suppress):
    # options are accepted before and after the subcommand. the copy attached to
    # subparsers must not clobber values given before the subcommand
    default = {"default": argparse.SUPPRESS} if suppress else {}
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-d",
        "--day",
        type=int,
        help="puzzle day (default: last unlocked day, during the event)",
        **default,
    )
    common.add_argument(
        "-y",
        "--year",
        type=int,
        help="puzzle year (default: year of the current or last event)",
        **default,
    )
    common.add_argument(
        "-s",
        "--session-file",
        metavar="PATH",
        help="path to session cookie file (default: ~/.adventofcode.session)",
        **default,
    )
    common.add_argument(
        "-w",
        "--width",
        type=_positive_int,
        help="width at which to wrap output (default: terminal width)",
        **default,
    )
    common.add_argument(
        "-o",
        "--overwrite",
        action="store_true",
        help="overwrite files if they already exist",
        **default,
    )
    group = common.add_mutually_exclusive_group()
    group.add_argument(
        "-I",
        "--input-only",
        action="store_true",
        help="download puzzle input only",
        **default,
    )
    group.add_argument(
        "-P",
        "--puzzle-only",
        action="store_true",
        help="download puzzle description only",
        **default,
    )
    common.add_argument(
        "-i",
        "--input-file",
        metavar="PATH",
        help="path where to save puzzle input (default: input)",
        **default,
    )
    common.add_argument(
        "-p",
        "--puzzle-file",
        metavar="PATH",
        help="path where to save puzzle description (default: puzzle.md)",
        **default,
    )
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="restrict log messages to errors only",
        **default,
    )
    verbosity.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging",
        **default,
    )
    return common


def build_parser():
    parser = argparse.ArgumentParser(
        prog="aocli",
        description=f"Advent of Code command-line client v{version('aocli')}",
        parents=[_common_args(suppress=False)],
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s v{version('aocli')}",
    )
    parser.set_defaults(input_file="input", puzzle_file="puzzle.md")
    common = _common_args(suppress=True)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.add_parser(
        "calendar",
        aliases=["c"],
        parents=[common],
        help="show Advent of Code calendar and stars collected",
    )
    commands.add_parser(
        "download",
        aliases=["d"],
        parents=[common],
        help="save puzzle description and input to files",
    )
    commands.add_parser(
        "read",
        aliases=["r"],
        parents=[common],
        help="read puzzle statement (the default command)",
    )
    submit = commands.add_parser(
        "submit",
        aliases=["s"],
        parents=[common],
        help="submit puzzle answer",
    )
    submit.add_argument("part", choices=["1", "2"], help="puzzle part")
    submit.add_argument("answer", help="puzzle answer")
    submit.add_argument(
        "--wait",
        action="store_true",
        help="if you answered too recently, wait as long as the server says and retry",
    )
    board = commands.add_parser(
        "private-leaderboard",
        aliases=["p"],
        parents=[common],
        help="show the state of a private leaderboard",
    )
    board.add_argument("leaderboard_id", type=int, help="private leaderboard id")
    return parser


_ALIASES = {"c": "calendar", "d": "download", "r": "read", "s": "submit", "p": "private-leaderboard"}


def _submit(client, identity, args, color):
    verdict = client.submit_answer(identity, args.part, args.answer)
    if isinstance(verdict, TooRecent) and args.wait:
        wait = verdict.wait.total_seconds()
        log.info("answered too recently, waiting %d seconds to retry", wait)
        time.sleep(wait)
        verdict = client.submit_answer(identity, args.part, args.answer)
    print(render_verdict(verdict, color=color))


def _download(client, identity, args):
    if not args.input_only:
        content = client.fetch_description(identity)
        save_file(args.puzzle_file, render_markdown(content), overwrite=args.overwrite)
        log.info("saved puzzle to %s", args.puzzle_file)
    if not args.puzzle_only:
        data = client.fetch_input(identity)
        save_file(args.input_file, data, overwrite=args.overwrite)
        log.info("saved input to %s", args.input_file)


def run(args):
    command = _ALIASES.get(args.command, args.command or "read")
    color = sys.stdout.isatty()
    width = args.width or shutil.get_terminal_size().columns
    identity = resolve_puzzle(year=args.year, day=args.day)
    session = resolve_session(args.session_file)
    client = AocClient(session)
    log.debug("command=%s puzzle=%s", command, identity)
    if command == "read":
        content = client.fetch_description(identity)
        print(render_text(content, width=width))
    elif command == "download":
        _download(client, identity, args)
    elif command == "submit":
        _submit(client, identity, args, color)
    elif command == "calendar":
        calendar = client.fetch_calendar(identity)
        print(render_calendar(calendar, color=color))
    elif command == "private-leaderboard":
        leaderboard = client.fetch_leaderboard(identity, args.leaderboard_id)
        last_day = last_unlocked_day(identity.year)
        print(render_leaderboard(leaderboard, last_day=last_day, color=color))


def main(argv=None):
    """Read, download, and submit Advent of Code puzzles from the terminal."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    else:
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s %(message)s")
    log.debug("called with %r", args)
    try:
        run(args)
    except AocliError as err:
        print(colored(f"ERROR: {err}", color="red"), file=sys.stderr)
        sys.exit(exit_code(err))
