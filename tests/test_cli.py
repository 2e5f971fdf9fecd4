import logging
from datetime import timedelta

import pytest

from aocli.cli import exit_code
from aocli.cli import main
from aocli.exceptions import AocliError
from aocli.exceptions import AuthenticationFailedError
from aocli.exceptions import InvalidSessionFileError
from aocli.exceptions import NoSessionFoundError
from aocli.exceptions import UnexpectedResponseFormat
from aocli.session import SessionCredential
from aocli.types import Calendar
from aocli.types import CalendarEntry
from aocli.types import Correct
from aocli.types import Heading
from aocli.types import Leaderboard
from aocli.types import LeaderboardEntry
from aocli.types import Paragraph
from aocli.types import PuzzleContent
from aocli.types import Span
from aocli.types import StarState
from aocli.types import TooRecent


CONTENT = PuzzleContent(
    title="Chronal Calibration",
    body=(Heading("Day 1: Chronal Calibration"), Paragraph((Span("text", "Calibrate the device."),))),
)


@pytest.fixture
def fake_client(mocker, freezer):
    freezer.move_to("2018-12-05 12:00:00Z")
    mocker.patch("aocli.cli.resolve_session", return_value=SessionCredential("thetesttoken"))
    cls = mocker.patch("aocli.cli.AocClient")
    return cls.return_value


def test_read_is_the_default_command(fake_client, capsys):
    fake_client.fetch_description.return_value = CONTENT
    main(["--width", "60"])
    out, err = capsys.readouterr()
    assert "--- Day 1: Chronal Calibration ---" in out
    assert "Calibrate the device." in out
    [identity] = fake_client.fetch_description.call_args.args
    assert (identity.year, identity.day) == (2018, 5)


@pytest.mark.parametrize("command", ["read", "r"])
def test_read_explicit_puzzle(fake_client, capsys, command):
    fake_client.fetch_description.return_value = CONTENT
    main([command, "--year", "2015", "-d", "7"])
    [identity] = fake_client.fetch_description.call_args.args
    assert str(identity) == "2015/07"


def test_options_before_subcommand_are_kept(fake_client):
    fake_client.fetch_description.return_value = CONTENT
    main(["-y", "2016", "read", "-d", "3"])
    [identity] = fake_client.fetch_description.call_args.args
    assert str(identity) == "2016/03"


def test_submit(fake_client, capsys):
    fake_client.submit_answer.return_value = Correct(message="That's the right answer!")
    main(["submit", "1", "1234", "-y", "2018", "-d", "1"])
    out, err = capsys.readouterr()
    assert out == "That's the right answer!\n"
    identity, part, answer = fake_client.submit_answer.call_args.args
    assert (str(identity), part, answer) == ("2018/01", "1", "1234")


def test_submit_too_recently_with_wait(fake_client, capsys, mocked_sleep):
    fake_client.submit_answer.side_effect = [
        TooRecent(wait=timedelta(seconds=30), message="You have 30s left to wait."),
        Correct(message="That's the right answer!"),
    ]
    main(["s", "2", "abc", "--wait"])
    mocked_sleep.assert_called_once_with(30)
    assert fake_client.submit_answer.call_count == 2
    out, err = capsys.readouterr()
    assert out == "That's the right answer!\n"


def test_submit_too_recently_without_wait(fake_client, capsys, mocked_sleep):
    fake_client.submit_answer.return_value = TooRecent(
        wait=timedelta(seconds=30), message="You have 30s left to wait."
    )
    main(["submit", "2", "abc"])
    mocked_sleep.assert_not_called()
    out, err = capsys.readouterr()
    assert out == "You have 30s left to wait.\n"


def test_submit_bad_part(fake_client, capsys):
    with pytest.raises(SystemExit(2)):
        main(["submit", "3", "abc"])
    fake_client.submit_answer.assert_not_called()


def test_download(fake_client, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    fake_client.fetch_description.return_value = CONTENT
    fake_client.fetch_input.return_value = "1\n2\n3\n"
    input_file = tmp_path / "input"
    puzzle_file = tmp_path / "puzzle.md"
    main(["download", "-i", str(input_file), "-p", str(puzzle_file)])
    assert input_file.read_text() == "1\n2\n3\n"
    assert puzzle_file.read_text() == "## Day 1: Chronal Calibration\n\nCalibrate the device.\n"
    assert f"saved input to {input_file}" in caplog.messages


def test_download_refuses_to_overwrite(fake_client, tmp_path, capsys):
    fake_client.fetch_input.return_value = "new data"
    input_file = tmp_path / "input"
    input_file.write_text("old data")
    with pytest.raises(SystemExit(14)):
        main(["d", "--input-only", "-i", str(input_file)])
    assert input_file.read_text() == "old data"
    out, err = capsys.readouterr()
    assert "file already exists (use --overwrite)" in err
    main(["d", "--input-only", "--overwrite", "-i", str(input_file)])
    assert input_file.read_text() == "new data"
    fake_client.fetch_description.assert_not_called()


def test_download_puzzle_only(fake_client, tmp_path):
    fake_client.fetch_description.return_value = CONTENT
    main(["download", "-P", "-p", str(tmp_path / "puzzle.md"), "-i", str(tmp_path / "input")])
    assert (tmp_path / "puzzle.md").exists()
    assert not (tmp_path / "input").exists()
    fake_client.fetch_input.assert_not_called()


def test_input_only_and_puzzle_only_are_exclusive(fake_client):
    with pytest.raises(SystemExit(2)):
        main(["download", "-I", "-P"])


def test_calendar(fake_client, capsys):
    entries = tuple(CalendarEntry(day=day, stars=2 if day == 1 else 0) for day in range(1, 26))
    fake_client.fetch_calendar.return_value = Calendar(year=2018, entries=entries)
    main(["c"])
    out, err = capsys.readouterr()
    assert out.startswith("Advent of Code 2018: 2*\n")


def test_private_leaderboard(fake_client, capsys):
    stars = (StarState.GOLD,) * 5 + (None,) * 20
    board = Leaderboard(
        year=2018,
        leaderboard_id=1234,
        entries=(LeaderboardEntry(1, 50, stars, "Emery Zboncak"),),
    )
    fake_client.fetch_leaderboard.return_value = board
    main(["private-leaderboard", "1234"])
    identity, leaderboard_id = fake_client.fetch_leaderboard.call_args.args
    assert leaderboard_id == 1234
    out, err = capsys.readouterr()
    assert "1) 50 *****" in out
    assert out.rstrip().endswith("Emery Zboncak")


def test_locked_puzzle_exit_code(fake_client, capsys):
    with pytest.raises(SystemExit(4)):
        main(["-y", "2018", "-d", "6"])
    out, err = capsys.readouterr()
    assert "2018/06 is still locked" in err
    fake_client.fetch_description.assert_not_called()


def test_invalid_day_exit_code(fake_client, capsys):
    with pytest.raises(SystemExit(3)):
        main(["-y", "2018", "-d", "26"])
    out, err = capsys.readouterr()
    assert "26 is not a valid Advent of Code day" in err


def test_no_session_exit_code(mocker, capsys, freezer):
    freezer.move_to("2018-12-05 12:00:00Z")
    mocker.patch("aocli.cli.resolve_session", side_effect=NoSessionFoundError("no session token found"))
    with pytest.raises(SystemExit(6)):
        main([])
    out, err = capsys.readouterr()
    assert "ERROR: no session token found" in err


def test_bad_width(fake_client):
    with pytest.raises(SystemExit(2)):
        main(["--width", "0"])


@pytest.mark.parametrize(
    "err, code",
    [
        (AocliError("whatever"), 1),
        (InvalidSessionFileError("/tmp/x", "expected a single line"), 7),
        (AuthenticationFailedError("expired"), 8),
        (UnexpectedResponseFormat("puzzle", "no <article> found"), 9),
    ],
)
def test_exit_code(err, code):
    assert exit_code(err) == code


def test_version(capsys):
    with pytest.raises(SystemExit(0)):
        main(["--version"])
    out, err = capsys.readouterr()
    assert out.startswith("aocli v")
