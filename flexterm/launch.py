"""Starting helper programs: new terminals, URL openers and plumbers."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from typing import Optional

__all__ = [
    "process_cwd",
    "new_terminal",
    "open_copied",
    "open_selection",
    "plumb",
    "open_url",
]


def process_cwd(pid: int) -> str:
    """Path through which the working directory of process ``pid`` is reached."""
    return f"/proc/{pid}/cwd"


def new_terminal(
    pid: int, executable: Optional[str] = None, cwd: Optional[str] = None
) -> subprocess.Popen:
    """Start a detached terminal in the directory of ``cwd`` or of process ``pid``."""
    program = executable or sys.argv[0]
    env = None
    target = cwd if cwd else process_cwd(pid)
    if os.path.isdir(target):
        if cwd:
            env = dict(os.environ)
            env["PWD"] = cwd
    else:
        target = None
    return subprocess.Popen([program], cwd=target, env=env, start_new_session=True)


def open_copied(opener: str, clipboard: Optional[str]) -> Optional[subprocess.Popen]:
    """Open the clipboard contents with ``opener`` in the background."""
    if not clipboard:
        print("Warning: nothing copied to clipboard", file=sys.stderr)
        return None
    return subprocess.Popen(shlex.split(opener) + [clipboard], start_new_session=True)


def open_selection(selection: Optional[str]) -> Optional[subprocess.Popen]:
    """Open the selected text with xdg-open."""
    if selection is None:
        return None
    try:
        return subprocess.Popen(["xdg-open", selection], start_new_session=True)
    except OSError:
        return None


def plumb(command: str, selection: Optional[str], pid: int) -> Optional[subprocess.Popen]:
    """Run ``command`` on the selection in the shell's working directory."""
    if selection is None:
        return None
    cwd = process_cwd(pid)
    if not os.path.isdir(cwd):
        return None
    try:
        return subprocess.Popen([command, selection], cwd=cwd)
    except OSError:
        return None


def open_url(opener: str, url: str) -> Optional[subprocess.Popen]:
    """Open ``url`` with the program ``opener``."""
    try:
        return subprocess.Popen([opener, url])
    except OSError:
        return None