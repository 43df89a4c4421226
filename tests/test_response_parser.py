"""Tests for the response parser branches and output filters."""

from __future__ import annotations

from transintel.prompts import WordCountClass
from transintel.response_parser import (
    WORD_NOT_FOUND_MESSAGE,
    filter_alternatives,
    filter_synonyms,
    parse_not_found,
    parse_response,
    parse_synonyms_and_alternatives,
)

SHORT = WordCountClass.SHORT
LONG = WordCountClass.LONG


def test_synonyms_and_alternatives_response() -> None:
    """Test the canonical short-text response shape."""
    response = "happy, joyful, cheerful\nTRANSLATIONS:\nfeliz; contento; alegre"

    result = parse_response(response, SHORT, "en")

    assert result.translated_text == "feliz"
    assert result.alternatives == ["contento", "alegre"]
    assert result.synonyms == ["happy", "joyful", "cheerful"]
    assert result.detected_language == "en"
    assert result.no_translation is False


def test_not_found_response() -> None:
    """Test the sentinel selects the word-not-found shape with suggestions."""
    response = "hello, held, help, heel\nNO_TRANSLATION"

    result = parse_response(response, SHORT, "en")

    assert result.no_translation is True
    assert result.translated_text == WORD_NOT_FOUND_MESSAGE
    assert result.synonyms == ["hello", "held", "help", "heel"]
    assert result.alternatives is None
    assert result.to_dict() == {
        "translatedText": WORD_NOT_FOUND_MESSAGE,
        "detectedLanguage": "en",
        "synonyms": ["hello", "held", "help", "heel"],
        "noTranslation": True,
    }


def test_not_found_without_suggestions_line() -> None:
    """Test a bare sentinel yields no suggestions rather than the sentinel itself."""
    result = parse_not_found("NO_TRANSLATION\n", "en")

    assert result.no_translation is True
    assert result.synonyms == []


def test_not_found_skips_leading_blank_lines() -> None:
    """Test suggestions are read from the first non-blank line."""
    result = parse_not_found("\n\n  recieve, receive, relieve\nNO_TRANSLATION", "en")

    assert result.synonyms == ["recieve", "receive", "relieve"]


def test_long_text_is_returned_trimmed() -> None:
    """Test long inputs bypass the marker grammar entirely."""
    response = "  Bonjour le monde.\nTRANSLATIONS: ignored  \n"

    result = parse_response(response, LONG, "fr")

    assert result.translated_text == "Bonjour le monde.\nTRANSLATIONS: ignored"
    assert result.synonyms is None
    assert result.alternatives is None
    assert result.to_dict() == {
        "translatedText": "Bonjour le monde.\nTRANSLATIONS: ignored",
        "detectedLanguage": "fr",
    }


def test_short_text_without_markers_is_plain() -> None:
    """Test a short response with no marker is a plain translation."""
    result = parse_response("  hola \n", SHORT, "en")

    assert result.translated_text == "hola"
    assert result.synonyms is None


def test_marker_without_trailing_content_falls_back_to_full_response() -> None:
    """Test a dangling translations marker does not crash the parser."""
    response = "happy, joyful\nTRANSLATIONS:\n   \n"

    result = parse_synonyms_and_alternatives(response, "en")

    assert result.translated_text == "happy, joyful\nTRANSLATIONS:"
    assert result.alternatives is None
    assert result.synonyms is None


def test_commentary_before_synonyms_is_ignored() -> None:
    """Test only the last line before the marker is read as synonyms."""
    response = (
        "Here are the results you asked for\n"
        "big, large, huge\n"
        "TRANSLATIONS:\n"
        "grande; enorme\n"
        "Note: these are common."
    )

    result = parse_response(response, SHORT, "en")

    assert result.synonyms == ["big", "large", "huge"]
    assert result.translated_text == "grande"
    assert result.alternatives == ["enorme"]


def test_single_synonym_fallback_keeps_whole_text() -> None:
    """Test a comma-less synonym section is kept as one item."""
    response = "gracias\nTRANSLATIONS:\nthanks; thank you"

    result = parse_response(response, SHORT, "es")

    assert result.synonyms == ["gracias"]
    assert result.translated_text == "thanks"
    assert result.alternatives == ["thank you"]


def test_alternatives_are_capped_at_eight() -> None:
    """Test at most eight alternatives follow the primary translation."""
    translations = "; ".join(f"t{i}" for i in range(12))
    response = f"a, b\nTRANSLATIONS:\n{translations}"

    result = parse_response(response, SHORT, "en")

    assert result.translated_text == "t0"
    assert result.alternatives == [f"t{i}" for i in range(1, 9)]


def test_all_alternatives_filtered_keeps_translation_line() -> None:
    """Test the raw translation line is used when filtering leaves nothing."""
    response = "a, b\nTRANSLATIONS:\n ; ;"

    result = parse_response(response, SHORT, "en")

    assert result.translated_text == "; ;"
    assert result.alternatives is None
    assert result.synonyms == ["a", "b"]


def test_filter_synonyms_thresholds() -> None:
    """Test the length, semicolon and punctuation rules for synonyms."""
    candidates = [
        " glad ",
        "",
        "x" * 51,
        "y" * 50,
        "feliz; contento",
        "a: b: c",
        "a: b: c: d",
    ]

    assert filter_synonyms(candidates) == ["glad", "y" * 50, "a: b: c"]


def test_filter_synonyms_caps_at_eight() -> None:
    """Test at most eight synonyms are kept."""
    assert filter_synonyms([f"s{i}" for i in range(10)]) == [f"s{i}" for i in range(8)]


def test_filter_alternatives_thresholds() -> None:
    """Test empty and over-long alternatives are dropped."""
    candidates = ["uno", "  ", "z" * 101, "w" * 100]

    assert filter_alternatives(candidates) == ["uno", "w" * 100]
