from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field
from datetime import timedelta
from typing import Literal
from typing import Optional
from typing import Union


class StarState(enum.Enum):
    """Per-day completion indicator. The value is the number of stars collected."""

    NONE = 0
    SILVER = 1  # part 1 only
    GOLD = 2  # both parts

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @classmethod
    def from_glyph(cls, glyph: str) -> Optional[StarState]:
        """Inverse of `glyph`. A blank means the day is still locked (None)."""
        if glyph == " ":
            return None
        for state, char in _GLYPHS.items():
            if char == glyph:
                return state
        raise ValueError(f"unknown star glyph {glyph!r}")


_GLYPHS = {
    StarState.NONE: ".",
    StarState.SILVER: "+",
    StarState.GOLD: "*",
}


# ---- puzzle prose ----

SpanKind = Literal["text", "emphasis", "code", "link"]


@dataclass(frozen=True)
class Span:
    """A run of inline text inside a paragraph or list item."""

    kind: SpanKind
    text: str
    href: Optional[str] = None


@dataclass(frozen=True)
class Heading:
    text: str


@dataclass(frozen=True)
class Paragraph:
    spans: tuple[Span, ...]

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True)
class CodeBlock:
    text: str


@dataclass(frozen=True)
class ListBlock:
    items: tuple[tuple[Span, ...], ...]
    ordered: bool = False


@dataclass(frozen=True)
class Link:
    text: str
    href: str


Block = Union[Heading, Paragraph, CodeBlock, ListBlock, Link]


@dataclass(frozen=True)
class PuzzleContent:
    """The readable part of a puzzle page: title, prose of both parts, and any answers."""

    title: str
    body: tuple[Block, ...]
    answers: tuple[str, ...] = ()


# ---- submission verdicts ----


@dataclass(frozen=True)
class Correct:
    message: str = field(default="", compare=False)


@dataclass(frozen=True)
class Incorrect:
    hint: Optional[str] = None  # "too high" / "too low"
    message: str = field(default="", compare=False)


@dataclass(frozen=True)
class AlreadySolved:
    message: str = field(default="", compare=False)


@dataclass(frozen=True)
class TooRecent:
    wait: timedelta
    message: str = field(default="", compare=False)


@dataclass(frozen=True)
class WrongLevel:
    reason: str

    @property
    def message(self) -> str:
        return self.reason


SubmissionVerdict = Union[Correct, Incorrect, AlreadySolved, TooRecent, WrongLevel]


# ---- leaderboard and calendar ----


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    local_score: int
    stars_per_day: tuple[Optional[StarState], ...]  # 25 items, None = locked day
    name: str


@dataclass(frozen=True)
class Leaderboard:
    year: int
    leaderboard_id: int
    entries: tuple[LeaderboardEntry, ...]
    owner: Optional[str] = None


@dataclass(frozen=True)
class CalendarEntry:
    day: int
    stars: int

    @property
    def state(self) -> StarState:
        return StarState(self.stars)


@dataclass(frozen=True)
class Calendar:
    year: int
    entries: tuple[CalendarEntry, ...]  # exactly 25, in day order

    @property
    def total_stars(self) -> int:
        return sum(entry.stars for entry in self.entries)
