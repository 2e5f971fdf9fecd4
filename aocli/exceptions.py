class AocliError(Exception):
    """base exception for this package"""


class InvalidPuzzleDateError(AocliError):
    """day outside of 1-25, or a year before the first event"""


class PuzzleLockedError(AocliError):
    """trying to access a puzzle before the unlock"""

    def __init__(self, year, day):
        super().__init__(f"{year}/{day:02d} is still locked")
        self.year = year
        self.day = day


class EventNotStartedError(AocliError):
    """the latest day can not be inferred because the event has not begun"""

    def __init__(self, year):
        super().__init__(f"the {year} event has not started yet")
        self.year = year


class NoSessionFoundError(AocliError):
    """none of the session sources had a token"""


class InvalidSessionError(AocliError):
    """the session token is malformed"""


class InvalidSessionFileError(InvalidSessionError):
    """a session file exists but is unusable"""

    def __init__(self, path, reason):
        super().__init__(f"failed to read session from {path}: {reason}")
        self.path = path
        self.reason = reason


class AuthenticationFailedError(AocliError):
    """the auth is expired/incorrect"""


class UnexpectedResponseFormat(AocliError):
    """the html did not have the expected structure - the site changed?"""

    def __init__(self, page, detail):
        super().__init__(f"unexpected response from {page} page: {detail}")
        self.page = page
        self.detail = detail


class TransportError(AocliError):
    """network failure talking to adventofcode.com"""


class HTTPStatusError(AocliError):
    """adventofcode.com replied with a status we don't know how to handle"""

    def __init__(self, status, url):
        super().__init__(f"HTTP {status} at {url}")
        self.status = status
        self.url = url


class InvalidPuzzlePartError(AocliError):
    """part must be 1 or 2"""


class LeaderboardNotAvailableError(AocliError):
    """the private leaderboard does not exist or you are not a member"""


class FileWriteError(AocliError):
    """refusing (or failing) to write an output file"""

    def __init__(self, path, reason):
        super().__init__(f"failed to write to {path}: {reason}")
        self.path = path
        self.reason = reason
