"""
Which puzzle are we talking about? Resolution and validation of (year, day) pairs.

Everything here is plain date arithmetic in the event's time zone. Puzzles unlock at
midnight EST (a fixed UTC-5 offset, regardless of daylight saving). Every function
accepts an explicit `now` so that callers can use a synthetic clock.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone

from .exceptions import EventNotStartedError
from .exceptions import InvalidPuzzleDateError
from .exceptions import PuzzleLockedError


log = logging.getLogger(__name__)

AOC_TZ = timezone(timedelta(hours=-5), "EST")
FIRST_EVENT_YEAR = 2015
DECEMBER = 12
FIRST_DAY = 1
LAST_DAY = 25
URL = "https://adventofcode.com/{year}/day/{day}"


def _aoc_now(now=None):
    if now is None:
        return datetime.now(tz=AOC_TZ)
    return now.astimezone(AOC_TZ)


@dataclass(frozen=True)
class PuzzleIdentity:
    year: int
    day: int

    def __post_init__(self):
        if not FIRST_DAY <= self.day <= LAST_DAY:
            raise InvalidPuzzleDateError(f"{self.day} is not a valid Advent of Code day")
        if self.year < FIRST_EVENT_YEAR:
            raise InvalidPuzzleDateError(f"{self.year} is not a valid Advent of Code year")

    def __str__(self):
        return f"{self.year}/{self.day:02d}"

    def unlock_time(self) -> datetime:
        """The instant this puzzle unlocks (or unlocked), in the event time zone."""
        return datetime(self.year, DECEMBER, self.day, tzinfo=AOC_TZ)

    def is_unlocked(self, now: datetime | None = None) -> bool:
        return _aoc_now(now) >= self.unlock_time()

    @property
    def url(self) -> str:
        """A link to the puzzle's description page on adventofcode.com."""
        return URL.format(year=self.year, day=self.day)

    @property
    def input_url(self) -> str:
        return self.url + "/input"

    @property
    def answer_url(self) -> str:
        return self.url + "/answer"


def ensure_unlocked(identity: PuzzleIdentity, now: datetime | None = None) -> None:
    if not identity.is_unlocked(now):
        log.debug("%s unlocks at %s", identity, identity.unlock_time())
        raise PuzzleLockedError(identity.year, identity.day)


def most_recent_year(now: datetime | None = None) -> int:
    """
    This year, if it's December.
    The most recent year, otherwise.
    Note: Advent of Code started in 2015
    """
    aoc_now = _aoc_now(now)
    year = aoc_now.year
    if aoc_now.month < DECEMBER:
        year -= 1
    if year < FIRST_EVENT_YEAR:
        raise InvalidPuzzleDateError("Time travel not supported yet")
    return year


def latest_unlocked_day(year: int, now: datetime | None = None) -> int:
    """
    Most recent day of the given event. During the Advent of Code that's today
    (happy holidays!), for events in the past it's the 25th. Raises
    EventNotStartedError when the event has not begun yet.
    """
    aoc_now = _aoc_now(now)
    if year < aoc_now.year:
        return LAST_DAY
    if year == aoc_now.year and aoc_now.month == DECEMBER:
        return min(aoc_now.day, LAST_DAY)
    raise EventNotStartedError(year)


def last_unlocked_day(year: int, now: datetime | None = None) -> int:
    """Same as `latest_unlocked_day`, but 0 for an event which has not started."""
    try:
        return latest_unlocked_day(year, now)
    except EventNotStartedError:
        return 0


def resolve_puzzle(
    year: int | None = None,
    day: int | None = None,
    now: datetime | None = None,
) -> PuzzleIdentity:
    """
    Build a PuzzleIdentity from (optional) user input. A missing year defaults to
    the year of the most recently started event, a missing day to the latest
    unlocked day of that event. Puzzles which are still locked are rejected, also
    when both year and day were given explicitly.
    """
    aoc_now = _aoc_now(now)
    if year is None:
        year = most_recent_year(aoc_now)
        log.debug("most recent year=%s", year)
    if year < FIRST_EVENT_YEAR:
        raise InvalidPuzzleDateError(f"{year} is not a valid Advent of Code year")
    if day is None:
        day = latest_unlocked_day(year, aoc_now)
        log.debug("latest unlocked day=%s", day)
    identity = PuzzleIdentity(year=year, day=day)
    ensure_unlocked(identity, aoc_now)
    return identity
