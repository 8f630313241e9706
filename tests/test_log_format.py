import logging

from webos_remote.log_format import BOLD, CYAN, MAGENTA, ColoredFormatter


def make_record(message: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("webos_remote.domain.control", level, __file__, 1, message, None, None)


class TestColoredFormatter:
    def test_state_lines_are_highlighted(self):
        output = ColoredFormatter().format(make_record("State: IDLE -> CONNECTING (tv)"))
        assert f"{BOLD}{CYAN}State: IDLE -> CONNECTING (tv)" in output

    def test_discovery_lines_are_highlighted(self):
        output = ColoredFormatter().format(make_record("Found TV: LG TV at 10.0.0.2 (LG webOS)"))
        assert MAGENTA in output

    def test_logger_name_is_shortened(self):
        output = ColoredFormatter().format(make_record("hello"))
        assert "control" in output
        assert "webos_remote.domain" not in output
