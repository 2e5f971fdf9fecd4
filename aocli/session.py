"""
Discovery of the adventofcode.com session token.

The token is looked up in a handful of places, in order of precedence, and the
first one which actually has something in it wins:

    1) an explicitly provided file
    2) the environment variable ADVENT_OF_CODE_SESSION
    3) the file ~/.adventofcode.session
    4) the file adventofcode.session in your config directory

The token is never checked against the server here. A dead token is only detected
when a response comes back without the logged-in page header.
"""
from __future__ import annotations

import logging
import os
import platform
import typing as t
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from .exceptions import InvalidSessionError
from .exceptions import InvalidSessionFileError
from .exceptions import NoSessionFoundError


log = logging.getLogger(__name__)

SESSION_ENV_VAR = "ADVENT_OF_CODE_SESSION"
SESSION_FILE = "adventofcode.session"
HIDDEN_SESSION_FILE = ".adventofcode.session"


def _config_dir() -> Path:
    override = os.environ.get("AOCLI_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    system = platform.system()
    if system == "Windows" and os.environ.get("APPDATA"):
        return Path(os.environ["APPDATA"])
    if system == "Darwin":
        return Path("~", "Library", "Application Support").expanduser()
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path("~", ".config")).expanduser()


HOME_SESSION_PATH = Path("~", HIDDEN_SESSION_FILE).expanduser()
CONFIG_SESSION_PATH = _config_dir() / SESSION_FILE


@dataclass(frozen=True)
class SessionCredential:
    token: str

    def __post_init__(self):
        if not self.token or any(c.isspace() for c in self.token):
            raise InvalidSessionError("session token must be a single word")

    @classmethod
    def from_text(cls, text: str) -> SessionCredential:
        return cls(text.strip())

    def __repr__(self):
        return f"<{type(self).__name__} token=...{self.token[-4:]}>"

    __str__ = __repr__


def read_session_file(path: Path) -> str | None:
    """
    Returns the token stored in a session file, or None if the file is empty.
    Only a single line of text is allowed (one trailing newline is fine).
    """
    try:
        txt = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        reason = getattr(err, "strerror", None) or str(err)
        raise InvalidSessionFileError(path, reason) from err
    body = txt.removesuffix("\n").removesuffix("\r")
    if "\n" in body or "\r" in body:
        raise InvalidSessionFileError(path, "expected a single line")
    if not body.strip():
        log.warning("session file %s is empty, ignoring", path)
        return None
    return body


def _from_file(path: Path, required: bool = False) -> str | None:
    if not required and not path.exists():
        log.debug("no session file at %s", path)
        return None
    log.debug("loading session from %s", path)
    return read_session_file(path)


def _from_env(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None:
        return None
    if not value.strip():
        log.warning("environment variable %s is set but it is empty, ignoring", name)
        return None
    log.debug("loading session from %s environment variable", name)
    return value


def session_sources(path: Path | str | None = None) -> list[t.Callable[[], str | None]]:
    """The ranked, lazily evaluated lookups used by `resolve_session`."""
    sources = []
    if path is not None:
        sources.append(partial(_from_file, Path(path).expanduser(), required=True))
    sources += [
        partial(_from_env, SESSION_ENV_VAR),
        partial(_from_file, HOME_SESSION_PATH),
        partial(_from_file, CONFIG_SESSION_PATH),
    ]
    return sources


def resolve_session(path: Path | str | None = None) -> SessionCredential:
    """
    Discover the user's session token. Raises NoSessionFoundError if none of the
    sources has one, InvalidSessionFileError for an unreadable/malformed file.
    """
    for source in session_sources(path):
        token = source()
        if token:
            return SessionCredential.from_text(token)
    raise NoSessionFoundError(
        "Session token not found. Save the cookie into "
        f"{HOME_SESSION_PATH} or {CONFIG_SESSION_PATH}, or export it in "
        f"the environment variable {SESSION_ENV_VAR}"
    )
