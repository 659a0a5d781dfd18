"""Installer progress reporting: log line cleanup and notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

ESC = "\x1b"
BACKSPACE = "\x08"

_COLORS = {
    "[0;36m": "blue",
    "[0;34m": "blue",
    "[1;34m": "blue",
    "[1;36m": "blue",
    "[0;31m": "red",
    "[1;31m": "red",
    "[0;33m": "yellow",
    "[1;33m": "yellow",
    "[0;32m": "green",
    "[1;32m": "green",
}


@dataclass(frozen=True)
class LogLine:
    text: str
    color: str = "nocolor"


def parse_log_line(line) -> LogLine:
    """Strip control characters and extract a terminal colour code."""
    chars: list[str] = []
    for ch in line:
        if ch.isprintable() or ch == ESC:
            chars.append(ch)
        elif ch == BACKSPACE and len(chars) > 1:
            chars.pop()
    text = "".join(chars)

    color = "nocolor"
    if text.startswith(ESC):
        text = text.replace(ESC, "").replace("[0m", "")
        code = text[: text.find("m") + 1]
        if code:
            text = text.replace(code, "")
        color = _COLORS.get(code, "nocolor")
    return LogLine(text, color)


class OSInstaller:
    """Tracks an installation and forwards its output to a dispatcher."""

    def __init__(self, dispatch: Callable[[str, dict], None]):
        self.dispatch = dispatch
        self.is_installing = False
        self.install_finished = False
        self.install_error = False

    def handle_output(self, output) -> None:
        """Send each line of installer output to the log."""
        text = output.encode("latin-1", "replace").decode("latin-1")
        lines = text.replace("\r\n", "\n").split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        for line in lines:
            self.send_log(line)

    def handle_finished(self, success) -> None:
        if success:
            self.send_log("Installation done.")
        else:
            self.send_log("Install process exited with a non clean error code.")
            self.send_log("Error.")
            self.dispatch(
                "showNotificationMsg",
                {
                    "title": "Error",
                    "message": "Installation failed. See log...",
                    "button": "Close",
                    "timeout": 0,
                },
            )
            self.install_error = True
        self.install_finished = True

    def send_log(self, line) -> None:
        entry = parse_log_line(line)
        self.dispatch("newLogItem", {"line": entry.text, "color": entry.color})