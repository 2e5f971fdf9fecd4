"""
Plain text rendering of the typed results, for the terminal and for files.
"""
from __future__ import annotations

import textwrap

from .types import AlreadySolved
from .types import Calendar
from .types import CodeBlock
from .types import Correct
from .types import Heading
from .types import Incorrect
from .types import Leaderboard
from .types import Link
from .types import ListBlock
from .types import Paragraph
from .types import PuzzleContent
from .types import StarState
from .types import TooRecent
from .utils import colored


N_DAYS = 25
DEFAULT_WIDTH = 80
DAY_LABELS = (
    "".join(str(day // 10) if day >= 10 else " " for day in range(1, N_DAYS + 1)),
    "".join(str(day % 10) for day in range(1, N_DAYS + 1)),
)
STAR_COLORS = {
    StarState.GOLD: "yellow",
    StarState.SILVER: "white",
    StarState.NONE: "gray",
}
VERDICT_COLORS = {
    Correct: "green",
    Incorrect: "red",
    TooRecent: "red",
    AlreadySolved: "yellow",
}


def _glyph(state, color):
    if state is None:
        return " "
    return colored(state.glyph, STAR_COLORS[state] if color else None)


def render_calendar(calendar: Calendar, color: bool = False) -> str:
    """
    Day numbers are written top-down in their column (tens above units), with the
    stars drawn below as a little tree: day 13 on top, days 1 and 25 at the bottom.
    """
    stars = f"{calendar.total_stars}*"
    lines = [f"Advent of Code {calendar.year}: {colored(stars, 'yellow' if color else None)}", ""]
    lines += DAY_LABELS
    center = (N_DAYS + 1) // 2
    rows = [[" "] * N_DAYS for _ in range(center)]
    for entry in calendar.entries:
        row = abs(center - entry.day)
        rows[row][entry.day - 1] = _glyph(entry.state, color)
    lines += ["".join(row).rstrip() for row in rows]
    return "\n".join(lines)


def render_leaderboard(leaderboard: Leaderboard, last_day: int = N_DAYS, color: bool = False) -> str:
    lines = []
    owner = leaderboard.owner or f"#{leaderboard.leaderboard_id}"
    gold = colored("Gold *", "yellow" if color else None)
    silver = colored("silver +", "white" if color else None)
    gray = colored("gray dot (.)", "gray" if color else None)
    lines.append(f"Private leaderboard of {owner} for Advent of Code {leaderboard.year}.")
    lines.append("")
    lines.append(f"{gold} indicates the user got both stars for that day,")
    lines.append(f"{silver} means just the first star, and a {gray} means none.")
    lines.append("")
    entries = leaderboard.entries
    rank_width = max([len(str(e.rank)) for e in entries], default=1)
    score_width = max([len(str(e.local_score)) for e in entries], default=1)
    pad = " " * (rank_width + score_width)
    for label in DAY_LABELS:
        on, off = label[:last_day], label[last_day:]
        lines.append(f"{pad}   {on}{colored(off, 'gray' if color else None) if off else ''}".rstrip())
    for entry in entries:
        stars = "".join(
            _glyph(state if day <= last_day else None, color)
            for day, state in enumerate(entry.stars_per_day, start=1)
        )
        rank = f"{entry.rank:>{rank_width}}"
        lines.append(f"{rank}) {entry.local_score:>{score_width}} {stars}  {entry.name}")
    return "\n".join(lines)


def render_verdict(verdict, color: bool = False) -> str:
    return colored(verdict.message, VERDICT_COLORS.get(type(verdict)) if color else None)


def _spans_markdown(spans):
    out = []
    for span in spans:
        if span.kind == "emphasis":
            out.append(f"*{span.text}*")
        elif span.kind == "code":
            out.append(f"`{span.text}`")
        elif span.kind == "link":
            out.append(f"[{span.text}]({span.href})")
        else:
            out.append(span.text)
    return "".join(out)


def render_markdown(content: PuzzleContent) -> str:
    """Markdown version of the puzzle prose, the kind you'd save to puzzle.md"""
    chunks = []
    for block in content.body:
        if isinstance(block, Heading):
            chunks.append(f"## {block.text}")
        elif isinstance(block, Paragraph):
            chunks.append(" ".join(_spans_markdown(block.spans).split()))
        elif isinstance(block, CodeBlock):
            chunks.append(f"```\n{block.text.rstrip()}\n```")
        elif isinstance(block, ListBlock):
            items = []
            for i, item in enumerate(block.items, start=1):
                bullet = f"{i}." if block.ordered else "-"
                items.append(f"{bullet} {' '.join(_spans_markdown(item).split())}")
            chunks.append("\n".join(items))
        elif isinstance(block, Link):
            chunks.append(f"[{block.text}]({block.href})")
    for answer in content.answers:
        chunks.append(f"Your puzzle answer was `{answer}`.")
    return "\n\n".join(chunks) + "\n"


def render_text(content: PuzzleContent, width: int = DEFAULT_WIDTH) -> str:
    """Puzzle prose for reading in a terminal, wrapped at `width` columns"""
    if width <= 0:
        raise ValueError("Output width must be greater than zero")
    chunks = []
    for block in content.body:
        if isinstance(block, Heading):
            chunks.append(f"--- {block.text} ---".center(width).rstrip())
        elif isinstance(block, Paragraph):
            chunks.append(textwrap.fill(" ".join(block.text.split()), width))
        elif isinstance(block, CodeBlock):
            # never wrap code, the columns matter
            chunks.append(block.text.rstrip("\n"))
        elif isinstance(block, ListBlock):
            items = []
            for i, item in enumerate(block.items, start=1):
                bullet = f"{i}. " if block.ordered else "* "
                txt = " ".join("".join(span.text for span in item).split())
                items.append(
                    textwrap.fill(txt, width, initial_indent=bullet, subsequent_indent=" " * len(bullet))
                )
            chunks.append("\n".join(items))
        elif isinstance(block, Link):
            chunks.append(f"{block.text} <{block.href}>")
    for answer in content.answers:
        chunks.append(f"Your puzzle answer was {answer}.")
    return "\n\n".join(chunks)
