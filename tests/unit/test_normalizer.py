"""Unit tests for the text normaliser."""

from doc_qa.ingestion.normalizer import sanitize_text


def test_smart_punctuation_is_canonicalised() -> None:
    assert sanitize_text("‘hi’ “there” – —") == "'hi' \"there\" - -"


def test_non_ascii_characters_are_removed() -> None:
    assert sanitize_text("café ☕ ok") == "caf  ok"


def test_tabs_and_line_breaks_survive() -> None:
    assert sanitize_text("a\tb\nc\r\n") == "a\tb\nc\r\n"


def test_other_control_characters_are_removed() -> None:
    assert sanitize_text("a\x00b\x07c\x7f") == "abc"


def test_empty_string() -> None:
    assert sanitize_text("") == ""
