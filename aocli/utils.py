from __future__ import annotations

import logging
import os
import platform
import shutil
import time
import typing as t
from collections import deque
from importlib.metadata import version
from pathlib import Path
from tempfile import NamedTemporaryFile

import bs4
import urllib3

from .exceptions import FileWriteError
from .exceptions import TransportError

log: logging.Logger = logging.getLogger(__name__)
_v = version("aocli")
USER_AGENT = f"github.com/aocli/aocli v{_v}"


class HttpClient:
    # every request to adventofcode.com goes through this wrapper
    # so that we can put in user agent header, rate-limit, etc.
    # redirects are never followed: the site answers a dead session
    # with a 302, and callers need to see that.

    pool_manager: urllib3.PoolManager
    req_count: dict[t.Literal["GET", "POST"], int]

    def __init__(self) -> None:
        proxy_url = os.environ.get("http_proxy") or os.environ.get("https_proxy")
        if proxy_url:
            self.pool_manager = urllib3.ProxyManager(proxy_url, headers={"User-Agent": USER_AGENT})
        else:
            self.pool_manager = urllib3.PoolManager(headers={"User-Agent": USER_AGENT})
        self.req_count = {"GET": 0, "POST": 0}
        self._max_t = 3.0
        self._cooloff = 0.16
        self._history = deque([time.time() - self._max_t] * 4, maxlen=4)

    def _limiter(self) -> None:
        now = time.time()
        t0 = self._history[0]
        if now - t0 < self._max_t:
            # made 4 requests within 3 seconds - past the speed limit of 1 req/second.
            # delay 160ms initially, doubling on subsequent occasions
            msg = "you're being rate-limited - slow down on the requests! (delay=%.02fs)"
            log.warning(msg, self._cooloff)
            time.sleep(self._cooloff)
            self._cooloff *= 2
            self._cooloff = min(self._cooloff, 10)
        self._history.append(now)

    def _request(self, method, url, headers, **kwargs) -> urllib3.BaseHTTPResponse:
        self._limiter()
        try:
            if method == "POST":
                resp = self.pool_manager.request_encode_body(
                    method=method,
                    url=url,
                    headers=headers,
                    encode_multipart=False,
                    redirect=False,
                    **kwargs,
                )
            else:
                resp = self.pool_manager.request(method, url, headers=headers, redirect=False)
        except urllib3.exceptions.HTTPError as err:
            log.debug("%s %s failed with %s %s", method, url, type(err).__name__, err)
            raise TransportError(f"{method} {url} failed: {err}") from err
        self.req_count[method] += 1
        log.debug("%s %s -> %s", method, url, resp.status)
        return resp

    def get(self, url: str, token: str | None = None) -> urllib3.BaseHTTPResponse:
        # puzzle prose, inputs, calendar, leaderboards
        if token is None:
            headers = self.pool_manager.headers
        else:
            headers = self.pool_manager.headers | {"Cookie": f"session={token}"}
        return self._request("GET", url, headers)

    def post(
        self, url: str, token: str, fields: t.Mapping[str, str]
    ) -> urllib3.BaseHTTPResponse:
        # submitting answers
        headers = self.pool_manager.headers | {"Cookie": f"session={token}"}
        return self._request("POST", url, headers, fields=fields)


http: HttpClient = HttpClient()


def _ensure_intermediate_dirs(path):
    path.expanduser().parent.mkdir(parents=True, exist_ok=True)


def atomic_write_file(path: Path, contents_str: str) -> None:
    """
    Atomically write a string to a file by writing it to a temporary file, and then
    renaming it to the final destination name. This solves a race condition where existence
    of a file doesn't necessarily mean the content is valid yet.
    """
    _ensure_intermediate_dirs(path)
    with NamedTemporaryFile("w", dir=path.parent, encoding="utf-8", delete=False, newline="") as f:
        log.debug("writing to tempfile @ %s", f.name)
        f.write(contents_str)
    log.debug("moving %s -> %s", f.name, path)
    shutil.move(f.name, path)


def save_file(path: Path, contents_str: str, overwrite: bool = False) -> None:
    """
    Write the puzzle description or input to disk. An existing file is only
    replaced when `overwrite` is True, otherwise FileWriteError is raised.
    """
    path = Path(path).expanduser()
    if overwrite:
        try:
            atomic_write_file(path, contents_str)
        except OSError as err:
            raise FileWriteError(path, err.strerror or str(err)) from err
        return
    try:
        with path.open("x", encoding="utf-8", newline="") as f:
            f.write(contents_str)
    except FileExistsError as err:
        raise FileWriteError(path, "file already exists (use --overwrite)") from err
    except OSError as err:
        raise FileWriteError(path, err.strerror or str(err)) from err


_ANSIColor = t.Literal[
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white", "gray"
]
_ansi_colors = t.get_args(_ANSIColor)


def _enable_windows_ansi() -> None:
    # the windows console needs colorama before it understands ANSI escapes
    if platform.system() != "Windows":
        return
    import colorama

    colorama.just_fix_windows_console()


_enable_windows_ansi()


def colored(txt: str, color: _ANSIColor | None) -> str:
    if color is None:
        return txt
    color = color.casefold()
    if color == "gray":
        # "bright black"
        code = 90
    else:
        code = _ansi_colors.index(color) + 30
    reset = "\x1b[0m"
    return f"\x1b[{code}m{txt}{reset}"


def _get_soup(html):
    return bs4.BeautifulSoup(html, "html.parser")
