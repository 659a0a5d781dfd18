import pytest

from calaos_home.installer import LogLine, OSInstaller, parse_log_line


def test_plain_line():
    assert parse_log_line("hello world") == LogLine("hello world", "nocolor")


@pytest.mark.parametrize(
    "code,color",
    [
        ("[0;31m", "red"),
        ("[1;31m", "red"),
        ("[0;34m", "blue"),
        ("[1;36m", "blue"),
        ("[0;33m", "yellow"),
        ("[1;32m", "green"),
    ],
)
def test_colored_line(code, color):
    assert parse_log_line(f"\x1b{code}Formatting disk\x1b[0m") == LogLine("Formatting disk", color)


def test_unknown_color_code():
    assert parse_log_line("\x1b[1;35mhi") == LogLine("hi", "nocolor")


def test_backspace_removes_previous():
    assert parse_log_line("abc\x08d").text == "abd"


def test_backspace_keeps_single_char():
    assert parse_log_line("a\x08").text == "a"


def test_control_chars_dropped():
    assert parse_log_line("a\tb\x07c").text == "abc"


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, action, payload):
        self.calls.append((action, payload))


def test_handle_output_splits_lines():
    rec = Recorder()
    inst = OSInstaller(rec)
    inst.handle_output("first\r\n\x1b[0;32msecond\n")
    assert rec.calls == [
        ("newLogItem", {"line": "first", "color": "nocolor"}),
        ("newLogItem", {"line": "second", "color": "green"}),
    ]


def test_finished_success():
    rec = Recorder()
    inst = OSInstaller(rec)
    inst.handle_finished(True)
    assert inst.install_finished is True
    assert inst.install_error is False
    assert rec.calls == [("newLogItem", {"line": "Installation done.", "color": "nocolor"})]


def test_finished_failure():
    rec = Recorder()
    inst = OSInstaller(rec)
    inst.handle_finished(False)
    assert inst.install_finished is True
    assert inst.install_error is True
    actions = [action for action, _ in rec.calls]
    assert actions == ["newLogItem", "newLogItem", "showNotificationMsg"]
    assert rec.calls[1][1]["line"] == "Error."
    assert rec.calls[2][1]["timeout"] == 0


def test_initial_state():
    inst = OSInstaller(Recorder())
    assert (inst.is_installing, inst.install_finished, inst.install_error) == (False, False, False)