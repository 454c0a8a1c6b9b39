from __future__ import annotations

import pytest

from fixtures import ASTERISK_QUIZ, DEFAULT_QUIZ, DELIMITER_QUIZ

from quizmaster.bank import FormatKind, detect_format


@pytest.mark.parametrize(
    "text, expected",
    [
        (DEFAULT_QUIZ, FormatKind.DEFAULT),
        (DELIMITER_QUIZ, FormatKind.DELIMITER_BLOCK),
        (ASTERISK_QUIZ, FormatKind.ASTERISK_MARKED),
        ("", FormatKind.DEFAULT),
        ("just some prose", FormatKind.DEFAULT),
    ],
)
def test_detect_format_classifies_documents(text, expected):
    assert detect_format(text) is expected


def test_delimiter_wins_over_asterisk_markers():
    text = "1. Q\n*A) yes\n=====# yes\n+++++\n"

    assert detect_format(text) is FormatKind.DELIMITER_BLOCK


def test_delimiter_requires_both_tokens():
    assert detect_format("+++++ only separators") is FormatKind.DEFAULT
    assert detect_format("===== only options") is FormatKind.DEFAULT


@pytest.mark.parametrize("marker", ["*a)", "*E)", "* A)", "A)*"])
def test_asterisk_requires_star_before_capital_a_to_d(marker):
    assert detect_format(f"1. Q\n{marker} x\n") is FormatKind.DEFAULT


def test_asterisk_marker_may_appear_mid_line():
    assert (
        detect_format("Answer key: *C) twelve")
        is FormatKind.ASTERISK_MARKED
    )
