from __future__ import annotations

import logging
import typing as t

from . import parser
from .exceptions import AocliError
from .exceptions import AuthenticationFailedError
from .exceptions import EventNotStartedError
from .exceptions import HTTPStatusError
from .exceptions import InvalidPuzzlePartError
from .exceptions import LeaderboardNotAvailableError
from .exceptions import PuzzleLockedError
from .puzzle import ensure_unlocked
from .puzzle import PuzzleIdentity
from .session import SessionCredential
from .types import Calendar
from .types import Leaderboard
from .types import PuzzleContent
from .types import SubmissionVerdict
from .utils import http as default_http
from .utils import HttpClient


log = logging.getLogger(__name__)

CALENDAR_URL = "https://adventofcode.com/{year}"
LEADERBOARD_URL = "https://adventofcode.com/{year}/leaderboard/private/view/{id}"

_PARTS = {1: "1", "1": "1", "a": "1", 2: "2", "2": "2", "b": "2"}


def _level(part) -> str:
    try:
        return _PARTS[part.lower() if isinstance(part, str) else part]
    except (KeyError, TypeError):
        raise InvalidPuzzlePartError(f"part must be 1 or 2, not {part!r}")


class AocClient:
    """
    Talks to adventofcode.com on behalf of one user. Every request carries the
    session cookie, and every response is checked for a logged-in page before it is
    parsed - an expired token must not look like an empty puzzle.
    """

    def __init__(self, session: SessionCredential, http_client: HttpClient | None = None) -> None:
        self.session = session
        self.http = default_http if http_client is None else http_client

    def __repr__(self):
        return f"<{type(self).__name__} token=...{self.session.token[-4:]}>"

    @property
    def _sanitized(self):
        return "..." + self.session.token[-4:]

    def _get(self, url, page):
        log.debug("getting %s page %s token=%s", page, url, self._sanitized)
        response = self.http.get(url, token=self.session.token)
        if 300 <= response.status < 400:
            # dead tokens get redirected to the login-less version of the site
            log.info("%s redirected to %s", url, response.headers.get("Location"))
        return response

    def _check(self, response, url, page):
        # common handling of non-200 responses, then make sure we were logged in
        if 300 <= response.status < 400:
            raise AuthenticationFailedError(
                f"adventofcode.com redirected the {page} request - is the session expired?"
            )
        if response.status != 200:
            log.error("got %s status code token=%s", response.status, self._sanitized)
            log.error(response.data.decode(errors="replace"))
            raise HTTPStatusError(response.status, url)
        parser.ensure_logged_in(response.data, page)
        return response.data

    def fetch_description(self, identity: PuzzleIdentity) -> PuzzleContent:
        """The puzzle prose. Includes part b, if part a was solved already."""
        ensure_unlocked(identity)
        log.info("fetching puzzle %s", identity)
        response = self._get(identity.url, "puzzle")
        html = self._check(response, identity.url, "puzzle")
        return parser.parse_description(html)

    def fetch_input(self, identity: PuzzleIdentity) -> str:
        """This user's puzzle input, exactly as it was served."""
        ensure_unlocked(identity)
        log.info("fetching input %s token=%s", identity, self._sanitized)
        response = self._get(identity.input_url, "input")
        if response.status == 404:
            raise PuzzleLockedError(identity.year, identity.day)
        if response.status == 400 or 300 <= response.status < 400:
            # "Puzzle inputs differ by user.  Please log in to get your puzzle input."
            log.debug(response.data.decode(errors="replace"))
            raise AuthenticationFailedError(
                "adventofcode.com did not accept the session token - try logging in again"
            )
        if response.status != 200:
            log.error("got %s status code token=%s", response.status, self._sanitized)
            log.error(response.data.decode(errors="replace"))
            raise HTTPStatusError(response.status, identity.input_url)
        return response.data.decode()

    def submit_answer(
        self, identity: PuzzleIdentity, part: t.Union[int, str], answer
    ) -> SubmissionVerdict:
        """
        Post an answer for part 1 or 2 and classify the response. Waiting after a
        TooRecent verdict is up to the caller.
        """
        level = _level(part)
        answer = str(answer).strip() if answer is not None else ""
        if not answer:
            raise AocliError(f"cowardly refusing to submit non-answer: {answer!r}")
        ensure_unlocked(identity)
        url = identity.answer_url
        log.info("posting %r to %s (part %s) token=%s", answer, url, level, self._sanitized)
        fields = {"level": level, "answer": answer}
        response = self.http.post(url, token=self.session.token, fields=fields)
        html = self._check(response, url, "answer")
        verdict = parser.parse_verdict(html)
        log.debug("verdict for %s part %s: %r", identity, level, verdict)
        return verdict

    def fetch_calendar(self, identity: PuzzleIdentity) -> Calendar:
        """Stars collected on each day of the identity's event year."""
        url = CALENDAR_URL.format(year=identity.year)
        log.info("fetching %s calendar", identity.year)
        response = self._get(url, "calendar")
        if response.status == 404:
            # the calendar of the upcoming event is not published yet
            raise EventNotStartedError(identity.year)
        html = self._check(response, url, "calendar")
        return parser.parse_calendar(html, identity.year)

    def fetch_leaderboard(self, identity: PuzzleIdentity, leaderboard_id: int) -> Leaderboard:
        """A private leaderboard of the identity's event year."""
        url = LEADERBOARD_URL.format(year=identity.year, id=leaderboard_id)
        log.info("fetching private leaderboard %s", leaderboard_id)
        response = self._get(url, "leaderboard")
        if 300 <= response.status < 400 or response.status == 404:
            raise LeaderboardNotAvailableError(
                f"private leaderboard {leaderboard_id} does not exist or you are not a member"
            )
        html = self._check(response, url, "leaderboard")
        return parser.parse_leaderboard(html, identity.year, leaderboard_id)
