"""
Interpretation of adventofcode.com html.

The site has no API, the pages are meant for humans. Private leaderboards are
scraped from their html rows too. So this module only relies on a few anchors in
the markup, and raises UnexpectedResponseFormat when one of those is missing rather
than returning an empty result - that is the signal that the site changed.

Everything here is a pure function of the response body.
"""
from __future__ import annotations

import logging
import re
from datetime import timedelta

from bs4 import Comment
from bs4 import NavigableString

from .exceptions import AuthenticationFailedError
from .exceptions import UnexpectedResponseFormat
from .types import AlreadySolved
from .types import Calendar
from .types import CalendarEntry
from .types import CodeBlock
from .types import Correct
from .types import Heading
from .types import Incorrect
from .types import Leaderboard
from .types import LeaderboardEntry
from .types import Link
from .types import ListBlock
from .types import Paragraph
from .types import PuzzleContent
from .types import Span
from .types import StarState
from .types import TooRecent
from .types import WrongLevel
from .utils import _get_soup


log = logging.getLogger(__name__)

N_DAYS = 25
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")
_LOGIN_HREF = re.compile(r"^/\d{4}/auth/login$")


def _strip_ansi(txt):
    return _ANSI_ESCAPE.sub("", txt)


def _normalize(txt):
    # collapse whitespace and curly quotes, so that phrase matching doesn't care
    # about the markup the text came from
    txt = txt.replace("’", "'").replace("\xa0", " ")
    return " ".join(txt.split())


def ensure_logged_in(html, page):
    """
    A page rendered for a logged-in user always has the username in the header.
    Expired or bogus tokens get the anonymous version of the page, with a link to
    the login page instead.
    """
    soup = _get_soup(html)
    if soup.find("a", href=_LOGIN_HREF) is not None or soup.find("div", class_="user") is None:
        log.debug("the %s page was not rendered for a logged-in user", page)
        raise AuthenticationFailedError(
            "adventofcode.com did not accept the session token - try logging in again"
        )


# ---- puzzle description ----

_INLINE_KINDS = {
    "em": "emphasis",
    "strong": "emphasis",
    "b": "emphasis",
    "i": "emphasis",
    "code": "code",
}


def _merge_text(spans):
    merged = []
    for span in spans:
        if merged and span.kind == "text" and merged[-1].kind == "text":
            merged[-1] = Span("text", merged[-1].text + span.text)
        elif span.text:
            merged.append(span)
    return tuple(merged)


def _inline(tag):
    spans = []
    for node in tag.children:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            spans.append(Span("text", str(node)))
        elif node.name in _INLINE_KINDS:
            spans.append(Span(_INLINE_KINDS[node.name], node.get_text()))
        elif node.name == "a":
            spans.append(Span("link", node.get_text(), node.get("href")))
        elif node.name == "br":
            spans.append(Span("text", "\n"))
        elif node.name in {"script", "style"}:
            continue
        else:
            # easter egg <span title="..."> and friends: keep the text, drop the tag
            spans.extend(_inline(node))
    return _merge_text(spans)


def _heading_text(tag):
    txt = _normalize(tag.get_text())
    return txt.strip("- ").strip()


def _blocks(article):
    blocks = []
    for node in article.children:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            if node.strip():
                blocks.append(Paragraph((Span("text", str(node).strip()),)))
            continue
        name = node.name
        if name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
            blocks.append(Heading(_heading_text(node)))
        elif name == "p":
            spans = _inline(node)
            if spans:
                blocks.append(Paragraph(spans))
        elif name == "pre":
            blocks.append(CodeBlock(node.get_text()))
        elif name in {"ul", "ol"}:
            items = tuple(_inline(li) for li in node.find_all("li", recursive=False))
            blocks.append(ListBlock(items, ordered=name == "ol"))
        elif name == "a" and node.get("href"):
            blocks.append(Link(node.get_text(), node["href"]))
        else:
            log.debug("dropping <%s> from puzzle prose", name)
    return blocks


def parse_description(html) -> PuzzleContent:
    """
    Pick the puzzle prose out of a puzzle page. Part b is a second <article>, which
    is only present once part a was solved.
    """
    soup = _get_soup(html)
    articles = soup.find_all("article", class_="day-desc")
    if not articles:
        main = soup.find("main")
        articles = main.find_all("article") if main is not None else []
    if not articles:
        raise UnexpectedResponseFormat("puzzle", "no <article> found")
    body = []
    for article in articles:
        body += _blocks(article)
    h2 = articles[0].find("h2")
    if h2 is None:
        raise UnexpectedResponseFormat("puzzle", "heading not found")
    title = _heading_text(h2)
    match = re.match(r"^Day \d{1,2}: (.*)$", title)
    if match is not None:
        title = match.group(1)
    hit = "Your puzzle answer was"
    answers = tuple(
        p.code.get_text()
        for p in soup.find_all("p")
        if p.get_text().startswith(hit) and p.code is not None
    )
    return PuzzleContent(title=title, body=tuple(body), answers=answers)


# ---- answer submission ----

_DURATION_UNITS = {
    "h": "hours",
    "hr": "hours",
    "hour": "hours",
    "hours": "hours",
    "m": "minutes",
    "min": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "s": "seconds",
    "sec": "seconds",
    "second": "seconds",
    "seconds": "seconds",
}
# the message also says "you have to wait after submitting", so a duration must follow
_WAIT_PATTERN = re.compile(
    r"you have ((?:\d+\s*[a-z]+\s*)+?)\s*left(?: to wait)?\b", re.IGNORECASE
)
_DURATION_TOKEN = re.compile(r"(\d+)\s*([a-z]+)", re.IGNORECASE)


def parse_wait(message) -> timedelta:
    """
    Parse the duration from text like "You have 1m 30s left to wait." (or just
    "... left."). Units which
    aren't known are an error, guessing a value is not an option.
    """
    match = _WAIT_PATTERN.search(message)
    if match is None:
        raise UnexpectedResponseFormat("answer", f"no wait time in {message!r}")
    duration = match.group(1).strip()
    tokens = _DURATION_TOKEN.findall(duration)
    if not tokens or _DURATION_TOKEN.sub("", duration).strip():
        raise UnexpectedResponseFormat("answer", f"could not parse wait time {duration!r}")
    kwargs = {}
    for amount, unit in tokens:
        try:
            key = _DURATION_UNITS[unit.lower()]
        except KeyError:
            raise UnexpectedResponseFormat("answer", f"unknown time unit {unit!r}")
        kwargs[key] = kwargs.get(key, 0) + int(amount)
    return timedelta(**kwargs)


def _incorrect(message):
    hint = None
    lowered = message.lower()
    for candidate in "too high", "too low":
        if candidate in lowered:
            hint = candidate
            break
    return Incorrect(hint=hint, message=message)


def _too_recent(message):
    return TooRecent(wait=parse_wait(message), message=message)


# Most specific first. The site's wording varies between years and several of
# these phrases occur within each other's messages, so the order matters.
VERDICT_RULES = (
    ("that's the right answer", lambda message: Correct(message=message)),
    ("did you already complete it", lambda message: AlreadySolved(message=message)),
    ("you gave an answer too recently", _too_recent),
    ("not the right answer", _incorrect),
)


def classify_verdict(message):
    """Classify the server's prose response to an answer submission."""
    lowered = _normalize(message).lower()
    for phrase, make_verdict in VERDICT_RULES:
        if phrase in lowered:
            return make_verdict(message)
    log.warning("unrecognised submit message %r", message)
    return WrongLevel(reason=message)


def parse_verdict(html):
    soup = _get_soup(html)
    container = soup.find("article") or soup.find("main")
    if container is None:
        raise UnexpectedResponseFormat("answer", "no <article> found")
    message = _normalize(container.get_text())
    return classify_verdict(message)


# ---- private leaderboard ----

_STAR_CLASSES = {
    "privboard-star-both": StarState.GOLD.glyph,
    "privboard-star-firstonly": StarState.SILVER.glyph,
    "privboard-star-unlocked": StarState.NONE.glyph,
    "privboard-star-locked": " ",
}
_ROW_PREFIX = re.compile(r"^\s*(\d+)\)\s+(\d+) ")
_OWNER_PATTERN = re.compile(r"private leaderboard of (.+?) for Advent of Code")


def parse_leaderboard_text(text):
    """
    Parse fixed-width leaderboard rows like

         1) 274 **********+****....       Emery Zboncak

    Rank and score are numeric prefixes, then after a single space there are
    exactly 25 star glyph columns, then the name. Names may contain spaces, so this
    goes by column rather than splitting on whitespace. Other lines are ignored, but
    there must be at least one row.
    """
    entries = []
    for line in _strip_ansi(text).splitlines():
        match = _ROW_PREFIX.match(line)
        if match is None:
            continue
        rank, score = map(int, match.groups())
        start = match.end()
        glyphs = line[start : start + N_DAYS].ljust(N_DAYS)
        name = line[start + N_DAYS :].strip()
        try:
            stars = tuple(StarState.from_glyph(g) for g in glyphs)
        except ValueError as err:
            raise UnexpectedResponseFormat("leaderboard", f"{err} in row {line!r}")
        entries.append(
            LeaderboardEntry(rank=rank, local_score=score, stars_per_day=stars, name=name)
        )
    if not entries:
        raise UnexpectedResponseFormat("leaderboard", "no leaderboard rows found")
    return tuple(entries)


def _row_to_text(row):
    position = row.find("span", class_="privboard-position")
    if position is None:
        return None
    rank = position.get_text().strip().rstrip(")")
    loose = "".join(str(s) for s in row.children if isinstance(s, NavigableString))
    score = re.search(r"\d+", loose)
    glyphs = []
    for span in row.find_all("span"):
        for cls in span.get("class", []):
            if cls in _STAR_CLASSES:
                glyphs.append(_STAR_CLASSES[cls])
    if len(glyphs) > N_DAYS:
        raise UnexpectedResponseFormat("leaderboard", f"{len(glyphs)} days in a row")
    name_tag = row.find(class_="privboard-name")
    name = _normalize(name_tag.get_text()) if name_tag is not None else ""
    score = score.group() if score is not None else "0"
    return f"{rank}) {score} {''.join(glyphs).ljust(N_DAYS)} {name}"


def parse_leaderboard(html, year, leaderboard_id) -> Leaderboard:
    soup = _get_soup(html)
    rows = soup.find_all("div", class_="privboard-row")
    lines = [line for line in map(_row_to_text, rows) if line is not None]
    if not lines:
        raise UnexpectedResponseFormat("leaderboard", "no leaderboard rows found")
    entries = parse_leaderboard_text("\n".join(lines))
    container = soup.find("article") or soup
    owner = _OWNER_PATTERN.search(_normalize(container.get_text()))
    return Leaderboard(
        year=year,
        leaderboard_id=leaderboard_id,
        entries=entries,
        owner=owner.group(1) if owner is not None else None,
    )


# ---- calendar ----

_CALENDAR_DAY_CLASS = re.compile(r"^calendar-day(\d+)$")


def _calendar(year, stars_by_day):
    entries = tuple(
        CalendarEntry(day=day, stars=stars_by_day.get(day, 0))
        for day in range(1, N_DAYS + 1)
    )
    return Calendar(year=year, entries=entries)


def parse_calendar(html, year) -> Calendar:
    """
    Stars collected per day, from the event's main page. The calendar is ascii art
    with one link per unlocked day; the link's css classes say how many stars.
    """
    soup = _get_soup(html)
    pre = soup.find("pre", class_="calendar")
    if pre is None:
        raise UnexpectedResponseFormat("calendar", "no <pre class=calendar> found")
    perfect = "calendar-perfect" in pre.get("class", [])
    stars_by_day = {}
    for a in pre.find_all("a"):
        classes = a.get("class", [])
        days = [int(m.group(1)) for m in map(_CALENDAR_DAY_CLASS.match, classes) if m]
        if len(days) != 1 or not 1 <= days[0] <= N_DAYS:
            continue
        [day] = days
        if perfect or "calendar-verycomplete" in classes:
            stars_by_day[day] = 2
        elif "calendar-complete" in classes:
            stars_by_day[day] = 1
        else:
            stars_by_day[day] = 0
    if not stars_by_day:
        raise UnexpectedResponseFormat("calendar", "no days found in the calendar")
    return _calendar(year, stars_by_day)


def _find_day_columns(lines):
    # two-digit labels are written vertically: a row of tens digits above a row of
    # units digits, one column per day
    for i, units in enumerate(lines):
        tens = lines[i - 1] if i else ""
        columns = {}
        for col, char in enumerate(units):
            if not char.isdigit():
                continue
            ten = tens[col] if col < len(tens) and tens[col].isdigit() else "0"
            columns[col] = int(ten + char)
        if sorted(columns.values()) == list(range(1, N_DAYS + 1)):
            return i, columns
    raise UnexpectedResponseFormat("calendar", "day labels not found in the grid")


def parse_calendar_grid(text, year) -> Calendar:
    """
    Parse a fixed-width star grid (as drawn by `aocli.render.render_calendar`).
    Each day's star glyph may be on any row below the labels - only the column
    matters, the rows are just for looks.
    """
    lines = _strip_ansi(text).splitlines()
    label_row, columns = _find_day_columns(lines)
    grid = lines[label_row + 1 :]
    if not any(line.strip() for line in grid):
        raise UnexpectedResponseFormat("calendar", "no star glyphs below the day labels")
    stars_by_day = {}
    for col, day in columns.items():
        glyphs = [line[col] for line in grid if col < len(line) and line[col] != " "]
        if len(glyphs) > 1:
            raise UnexpectedResponseFormat("calendar", f"day {day} has {len(glyphs)} glyphs")
        if not glyphs:
            stars_by_day[day] = 0
            continue
        try:
            state = StarState.from_glyph(glyphs[0])
        except ValueError as err:
            raise UnexpectedResponseFormat("calendar", str(err))
        stars_by_day[day] = state.value
    return _calendar(year, stars_by_day)
