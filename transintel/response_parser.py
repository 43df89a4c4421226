"""
Response parser: turns free-text model output into a TranslationResult.

Long inputs are plain translations. Short inputs follow a small line
grammar driven by two markers:

    happy, joyful, cheerful          <- synonyms (comma-separated)
    TRANSLATIONS:
    feliz; contento; alegre          <- ranked translations (semicolon-separated)

or, for words that do not exist in the source language:

    hello, held, help, heel          <- spelling suggestions
    NO_TRANSLATION

Each branch is a separate function so it can be exercised on its own.
"""

import logging
import re
from typing import List, Optional

from transintel.models import TranslationResult
from transintel.prompts import NO_TRANSLATION_TOKEN, TRANSLATIONS_TOKEN, WordCountClass

logger = logging.getLogger(__name__)

WORD_NOT_FOUND_MESSAGE = "Word not found. Did you mean one of these?"

MAX_SYNONYMS = 8
MAX_ALTERNATIVES = 8
MAX_SYNONYM_LENGTH = 50
MAX_ALTERNATIVE_LENGTH = 100
MAX_PUNCTUATION_MARKS = 2

_PUNCTUATION_RE = re.compile(r"[;:,]")


def parse_response(
    response: str,
    word_count_class: WordCountClass,
    detected_language: str
) -> TranslationResult:
    """
    Classify a raw model response and build the structured result.

    Args:
        response: Raw text returned by the model
        word_count_class: Length class of the original request
        detected_language: Language code to report back

    Returns:
        TranslationResult in one of its three shapes
    """
    if word_count_class is WordCountClass.LONG:
        return parse_plain(response, detected_language)

    if NO_TRANSLATION_TOKEN in response:
        return parse_not_found(response, detected_language)

    if TRANSLATIONS_TOKEN in response:
        return parse_synonyms_and_alternatives(response, detected_language)

    return parse_plain(response, detected_language)


def parse_plain(response: str, detected_language: str) -> TranslationResult:
    return TranslationResult(translated_text=response.strip(), detected_language=detected_language)


def parse_not_found(response: str, detected_language: str) -> TranslationResult:
    """Word-not-found branch: the first non-blank line holds spelling suggestions."""
    suggestions_line = response.strip().split('\n')[0].strip()
    if NO_TRANSLATION_TOKEN in suggestions_line:
        suggestions_line = ""

    return TranslationResult(
        translated_text=WORD_NOT_FOUND_MESSAGE,
        detected_language=detected_language,
        synonyms=filter_synonyms(suggestions_line.split(',')),
        no_translation=True
    )


def parse_synonyms_and_alternatives(response: str, detected_language: str) -> TranslationResult:
    """
    Synonyms-plus-alternatives branch.

    Falls back to the plain shape when nothing follows the marker.
    """
    before, after = response.split(TRANSLATIONS_TOKEN, 1)
    translations_line = _first_line(after)
    if not translations_line:
        logger.warning("Response has a translations marker but no translations; returning it verbatim")
        return parse_plain(response, detected_language)

    synonyms = filter_synonyms(_synonym_candidates(before))

    translations = filter_alternatives(translations_line.split(';'))
    if not translations:
        return TranslationResult(
            translated_text=translations_line,
            detected_language=detected_language,
            synonyms=synonyms
        )

    return TranslationResult(
        translated_text=translations[0],
        detected_language=detected_language,
        synonyms=synonyms,
        alternatives=translations[1:MAX_ALTERNATIVES + 1]
    )


def filter_synonyms(candidates: List[str]) -> List[str]:
    """
    Keep plausible synonyms: non-empty, at most 50 characters, no semicolon,
    and no more than two of the marks ``; : ,``. At most eight are kept.
    """
    kept = []
    for candidate in candidates:
        candidate = candidate.strip()
        if not candidate or len(candidate) > MAX_SYNONYM_LENGTH:
            continue
        if ';' in candidate:
            continue
        if len(_PUNCTUATION_RE.findall(candidate)) > MAX_PUNCTUATION_MARKS:
            continue
        kept.append(candidate)
    return kept[:MAX_SYNONYMS]


def filter_alternatives(candidates: List[str]) -> List[str]:
    """Keep non-empty translations of at most 100 characters, in order."""
    kept = []
    for candidate in candidates:
        candidate = candidate.strip()
        if candidate and len(candidate) <= MAX_ALTERNATIVE_LENGTH:
            kept.append(candidate)
    return kept


def _synonym_candidates(text: str) -> List[str]:
    # Models sometimes prepend commentary; the synonyms are on the last line.
    text = text.strip()
    if not text:
        return []
    last_line = text.split('\n')[-1].strip()
    if ',' in last_line:
        return last_line.split(',')
    return [text]


def _first_line(text: str) -> Optional[str]:
    text = text.strip()
    if not text:
        return None
    return text.split('\n')[0].strip()
