import math

import pytest

from newsbot.utils.helpers import MAX_MESSAGE_LENGTH, split_message


def test_short_text_is_a_single_segment():
    text = "hello\nworld"
    assert split_message(text) == [text]


def test_text_at_exact_limit_is_not_split():
    text = "x" * MAX_MESSAGE_LENGTH
    assert split_message(text) == [text]


def test_no_newline_hard_splits_at_limit():
    text = "a" * 10_000
    segments = split_message(text)

    assert len(segments) == math.ceil(10_000 / MAX_MESSAGE_LENGTH)
    assert all(len(s) == MAX_MESSAGE_LENGTH for s in segments[:-1])
    assert "".join(segments) == text


def test_splits_at_last_newline_in_window():
    lines = [f"line {i:04d} " + "y" * 40 for i in range(300)]
    text = "\n".join(lines)

    segments = split_message(text)

    assert len(segments) > 1
    assert all(len(s) <= MAX_MESSAGE_LENGTH for s in segments)
    # Each cut consumed exactly one newline and no line was broken.
    assert "\n".join(segments) == text
    for segment in segments:
        assert segment.split("\n")[0] in lines


def test_small_limit_prefers_line_boundaries():
    assert split_message("aaa\nbbb\nccc", limit=8) == ["aaa\nbbb", "ccc"]


def test_window_without_newline_falls_back_to_hard_split():
    assert split_message("abcdefgh\nij", limit=5) == ["abcde", "fgh", "ij"]


def test_leading_newline_does_not_produce_empty_segment():
    assert split_message("\nabcdef", limit=4) == ["abcd", "ef"]


def test_invalid_limit():
    with pytest.raises(ValueError):
        split_message("text", limit=0)
