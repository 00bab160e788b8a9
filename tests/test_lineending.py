import pytest

from gitrelease.lineending import detect_line_ending, join_lines, split_lines


@pytest.mark.parametrize(
    "source, expected",
    [
        ("", ""),
        ("single line", ""),
        ("a\nb\n", "\n"),
        ("a\r\nb\r\n", "\r\n"),
        ("a\rb\r", "\r"),
        # mixed content falls back to the heuristic counts
        ("a\r\nb\nc", "\n"),
        ("a\r\nb\rc\r", "\r"),
    ],
)
def test_detect_line_ending(source: str, expected: str) -> None:
    assert detect_line_ending(source) == expected


def test_split_and_join_keep_bytes() -> None:
    for source in ("a\r\nb\r\n", "a\nb", "a\rb\r", "one"):
        ending = detect_line_ending(source)
        assert join_lines(split_lines(source, ending), ending) == source
