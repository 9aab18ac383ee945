import os
from unittest import mock

from flexterm.launch import (
    new_terminal,
    open_copied,
    open_selection,
    open_url,
    plumb,
    process_cwd,
)


def test_process_cwd():
    assert process_cwd(42) == "/proc/42/cwd"


def test_new_terminal_uses_given_cwd(tmp_path):
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        result = new_terminal(1, "/bin/true", cwd=str(tmp_path))
    assert result is popen.return_value
    args, kwargs = popen.call_args
    assert args[0] == ["/bin/true"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["PWD"] == str(tmp_path)


def test_new_terminal_missing_cwd_falls_back(tmp_path):
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        result = new_terminal(1, "/bin/true", cwd=str(tmp_path / "gone"))
    assert result is popen.return_value
    assert popen.call_args.kwargs["cwd"] is None
    assert popen.call_args.kwargs["env"] is None


def test_open_copied_without_clipboard(capsys):
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        assert open_copied("xdg-open", None) is None
    assert popen.call_count == 0
    assert "nothing copied" in capsys.readouterr().err


def test_open_copied_splits_opener():
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        result = open_copied("firefox --new-tab", "https://example.com")
    assert result is popen.return_value
    assert popen.call_args.args[0] == ["firefox", "--new-tab", "https://example.com"]


def test_open_selection():
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        result = open_selection("notes.txt")
    assert result is popen.return_value
    assert popen.call_args.args[0] == ["xdg-open", "notes.txt"]


def test_open_selection_none():
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        assert open_selection(None) is None
    assert popen.call_count == 0


def test_plumb_runs_in_process_cwd():
    pid = os.getpid()
    with mock.patch("flexterm.launch.os.path.isdir", return_value=True), \
            mock.patch("flexterm.launch.subprocess.Popen") as popen:
        plumb("plumber", "file.txt", pid)
    assert popen.call_args.args[0] == ["plumber", "file.txt"]
    assert popen.call_args.kwargs["cwd"] == f"/proc/{pid}/cwd"


def test_plumb_without_selection():
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        assert plumb("plumber", None, 1) is None
    assert popen.call_count == 0


def test_open_url_missing_program():
    with mock.patch("flexterm.launch.subprocess.Popen", side_effect=FileNotFoundError):
        assert open_url("no-such-opener", "https://example.com") is None


def test_open_url():
    with mock.patch("flexterm.launch.subprocess.Popen") as popen:
        result = open_url("xdg-open", "https://example.com")
    assert result is popen.return_value
    assert popen.call_args.args[0] == ["xdg-open", "https://example.com"]