import pytest

from wordcomplete.host import HostError, LocalDocument, LocalView
from wordcomplete.text.scanner import ScanError, Word, find_word_start, word_at_offset


def make_view(text: str) -> LocalView:
    return LocalView("view-1", LocalDocument.from_text(text))


def test_word_before_trigger() -> None:
    assert find_word_start("hello world!", 11) == (6, "world")


def test_offset_at_line_start_yields_empty_word() -> None:
    assert find_word_start("hello world", 0) == (0, "")


def test_offset_before_first_whitespace_starts_at_zero() -> None:
    assert find_word_start("hello world", 3) == (0, "hel")


def test_offset_right_after_whitespace_yields_empty_word() -> None:
    assert find_word_start("hello world", 6) == (6, "")


def test_punctuation_does_not_split_words() -> None:
    assert find_word_start("say foo.bar", 11) == (4, "foo.bar")


def test_information_separators_stay_inside_word() -> None:
    assert find_word_start("say a\x1cb", 7) == (4, "a\x1cb")


def test_no_break_space_separates_words() -> None:
    line = "foo\u00a0bar"

    assert find_word_start(line, len(line.encode("utf-8"))) == (5, "bar")


def test_offsets_are_counted_in_bytes() -> None:
    line = "über straße"
    target = len(line.encode("utf-8"))

    start, word = find_word_start(line, target)

    assert start == len("über ".encode("utf-8"))
    assert word == "straße"


@pytest.mark.parametrize(
    "line",
    ["", "word", "two words", "  leading", "tab\tsplit here", "a b c d e"],
)
def test_word_start_never_passes_target(line: str) -> None:
    raw = line.encode("utf-8")
    for target in range(len(raw) + 1):
        start, word = find_word_start(line, target)
        prefix = raw[:target].decode("utf-8")
        boundaries = [i + 1 for i, char in enumerate(prefix) if char.isspace()]
        assert start <= target
        assert start == (boundaries[-1] if boundaries else 0)
        assert word == raw[start:target].decode("utf-8")


def test_offset_inside_multibyte_character_is_rejected() -> None:
    with pytest.raises(ScanError):
        find_word_start("é", 1)


def test_offset_past_line_end_is_rejected() -> None:
    with pytest.raises(ScanError):
        find_word_start("abc", 7)


def test_word_at_offset_on_second_line() -> None:
    view = make_view("first line\nsecond word")
    offset = len("first line\nsecond wo")

    word = word_at_offset(view, offset)

    assert word == Word(start=len("first line\nsecond "), text="wo")


def test_word_at_offset_propagates_host_failures() -> None:
    view = make_view("short")

    with pytest.raises(HostError):
        word_at_offset(view, 99)
