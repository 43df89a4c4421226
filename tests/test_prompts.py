"""Tests for prompt building and word-count classification."""

from __future__ import annotations

import pytest

from transintel.prompts import (
    NO_TRANSLATION_TOKEN,
    TRANSLATIONS_TOKEN,
    WordCountClass,
    build_detection_prompt,
    build_translation_prompt,
    classify_word_count,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("bonjour", WordCountClass.SHORT),
        ("bon jour", WordCountClass.SHORT),
        ("  bon \n jour  ", WordCountClass.SHORT),
        ("bonjour le monde", WordCountClass.LONG),
    ],
)
def test_classify_word_count(text: str, expected: WordCountClass) -> None:
    """Test one or two tokens are SHORT and three or more are LONG."""
    assert classify_word_count(text) is expected


def test_short_prompt_asks_for_validation_synonyms_and_alternatives() -> None:
    """Test the short template carries both markers and language names."""
    prompt = build_translation_prompt("happy", "English", "Spanish", WordCountClass.SHORT)

    assert 'Analyze "happy" (English)' in prompt
    assert NO_TRANSLATION_TOKEN in prompt
    assert TRANSLATIONS_TOKEN in prompt
    assert "Spanish translations (semicolon-separated" in prompt
    assert "English synonyms (comma-separated)" in prompt


def test_long_prompt_is_plain_translation() -> None:
    """Test the long template asks for the translated text only."""
    text = "The weather is lovely today.\nSee you soon!"
    prompt = build_translation_prompt(text, "English", "French", WordCountClass.LONG)

    assert prompt.startswith("Task: Professional translation from English to French")
    assert text in prompt
    assert "ONLY the translated text" in prompt
    assert TRANSLATIONS_TOKEN not in prompt


def test_prompt_building_is_deterministic_and_brace_safe() -> None:
    """Test user text with format braces is inserted verbatim."""
    text = "use {name} and {0} here"
    first = build_translation_prompt(text, "English", "German", WordCountClass.LONG)
    second = build_translation_prompt(text, "English", "German", WordCountClass.LONG)

    assert first == second
    assert text in first


def test_detection_prompt_requests_two_letter_code() -> None:
    """Test the detection prompt quotes the text and asks for a bare code."""
    prompt = build_detection_prompt("Guten Morgen")

    assert 'Text: "Guten Morgen"' in prompt
    assert "ONLY the 2-letter code" in prompt
