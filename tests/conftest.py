import pook as pook_mod
import pytest

from aocli.client import AocClient
from aocli.session import SessionCredential
from aocli.utils import http


LAYOUT = """<!DOCTYPE html>
<html lang="en-us">
<head><title>Advent of Code</title></head>
<body>
<header><div><h1 class="title-global"><a href="/">Advent of Code</a></h1>
<nav><ul><li><a href="/2018/about">[About]</a></li></ul></nav>
<div class="user">testuser <span class="star-count">42*</span></div></div></header>
<main>
{main}
</main>
</body>
</html>
"""

LOGGED_OUT_LAYOUT = """<!DOCTYPE html>
<html lang="en-us">
<body>
<header><div><h1 class="title-global"><a href="/">Advent of Code</a></h1>
<nav><ul><li><a href="/2018/auth/login">[Log In]</a></li></ul></nav></div></header>
<main>
{main}
</main>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def mocked_sleep(mocker):
    no_sleep_till_brooklyn = mocker.patch("time.sleep")
    # nerf the rate-limiter - tests don't actually talk to AoC server at all
    # (and they *can't*, because pook intercepts every request)
    http._max_t = -1.0
    return no_sleep_till_brooklyn


@pytest.fixture
def home_session_file(tmp_path):
    return tmp_path / "home" / ".adventofcode.session"


@pytest.fixture
def config_session_file(tmp_path):
    return tmp_path / ".config" / "aocli" / "adventofcode.session"


@pytest.fixture(autouse=True)
def remove_user_env(monkeypatch, home_session_file, config_session_file):
    home_session_file.parent.mkdir(parents=True)
    config_session_file.parent.mkdir(parents=True)
    monkeypatch.setattr("aocli.session.HOME_SESSION_PATH", home_session_file)
    monkeypatch.setattr("aocli.session.CONFIG_SESSION_PATH", config_session_file)
    monkeypatch.delenv("ADVENT_OF_CODE_SESSION", raising=False)


@pytest.fixture
def session():
    return SessionCredential("thetesttoken")


@pytest.fixture
def client(session):
    return AocClient(session)


@pytest.fixture(autouse=True)
def pook():
    pook_mod.on()
    yield pook_mod
    pook_mod.off()


@pytest.fixture
def page():
    """Wraps some <main> content in the page layout seen by a logged-in user"""
    return LAYOUT.format


@pytest.fixture
def logged_out_page():
    return LOGGED_OUT_LAYOUT.format
