from . import cli
from . import client
from . import exceptions
from . import parser
from . import puzzle
from . import render
from . import session
from . import types
from . import utils
from .client import AocClient
from .exceptions import AocliError
from .puzzle import PuzzleIdentity
from .puzzle import resolve_puzzle
from .session import resolve_session
from .session import SessionCredential

__all__ = [
    "AocClient",
    "AocliError",
    "PuzzleIdentity",
    "SessionCredential",
    "cli",
    "client",
    "exceptions",
    "parser",
    "puzzle",
    "render",
    "resolve_puzzle",
    "resolve_session",
    "session",
    "types",
    "utils",
]
