"""
Prompt templates for translation, language detection and text extraction,
plus the pure functions that fill them in.
"""

import enum

# Literal markers the model is asked to emit and the response parser matches.
NO_TRANSLATION_TOKEN = "NO_TRANSLATION"
TRANSLATIONS_TOKEN = "TRANSLATIONS:"

# Inputs with at most this many whitespace-delimited tokens get the
# synonyms/alternatives treatment.
SHORT_TEXT_MAX_WORDS = 2


class WordCountClass(enum.Enum):
    """Coarse length class of a request, selecting prompt and parser branch."""
    SHORT = "short"
    LONG = "long"


def classify_word_count(text: str) -> WordCountClass:
    """Return SHORT for one or two whitespace-delimited tokens, LONG otherwise."""
    if len(text.split()) <= SHORT_TEXT_MAX_WORDS:
        return WordCountClass.SHORT
    return WordCountClass.LONG


SHORT_TEXT_PROMPT_TEMPLATE = """Task: Analyze "{text}" ({source_language})

FIRST: Check if "{text}" is a valid word/phrase in {source_language}.

If INVALID/MISSPELLED:
- Line 1: 2-4 similar correct {source_language} words (comma-separated)
- Line 2: {no_translation_token}
- Do NOT provide translations for non-existent words

If VALID:
- Line 1: 2-3 {source_language} synonyms (comma-separated)
- Line 2: {translations_token}
- Line 3: 3-4 {target_language} translations (semicolon-separated, ordered from most to least common)

Example for invalid:
hello, held, help, heel
{no_translation_token}

Example for valid:
happy, joyful, cheerful
{translations_token}
feliz; contento; alegre

Provide ONLY the specified format. No explanations."""

LONG_TEXT_PROMPT_TEMPLATE = """Task: Professional translation from {source_language} to {target_language}

Text:
{text}

Rules:
- Preserve exact meaning, tone, and intent
- Use natural {target_language} expressions and idioms
- Maintain formatting (line breaks, punctuation, emphasis)
- Match formality level of source
- For technical/specialized terms, use standard {target_language} equivalents

Output: ONLY the translated text, no explanations or metadata."""

DETECT_LANGUAGE_PROMPT_TEMPLATE = """Identify the language of this text. Respond ONLY with the ISO 639-1 two-letter code (e.g., en, es, fr, de, zh, ja, ar, hi, pt, ru).

Text: "{text}"

Respond with ONLY the 2-letter code, nothing else."""

API_CHECK_PROMPT = 'Say "API key is working" in one sentence.'

IMAGE_EXTRACTION_PROMPT = """Task: OCR text extraction from image

Instructions:
- Extract ALL visible text exactly as it appears
- Preserve line breaks, spacing, and text layout
- Include text from all regions (headers, body, captions, labels)
- Maintain punctuation and formatting

Output: ONLY the extracted text, no descriptions or metadata."""

DOCUMENT_EXTRACTION_PROMPT = """Task: Extract text from PDF document

Instructions:
- Extract ALL text content in reading order
- Preserve paragraph breaks and structure
- Maintain formatting (bold, italic) if significant
- Include headers, footers, and page content

Output: ONLY the extracted text, no metadata or page numbers unless they're part of content."""

AUDIO_TRANSCRIPTION_PROMPT = """Task: Audio transcription

Instructions:
- Transcribe ALL spoken words accurately
- Use proper punctuation and capitalization
- Indicate speaker changes if multiple speakers
- Preserve meaning and context
- Use [inaudible] for unclear segments

Output: ONLY the transcribed text, no timestamps or metadata."""


def build_translation_prompt(
    text: str,
    source_language: str,
    target_language: str,
    word_count_class: WordCountClass
) -> str:
    """
    Build the main translation prompt.

    Args:
        text: Text to translate, inserted verbatim
        source_language: Display name of the source language
        target_language: Display name of the target language
        word_count_class: SHORT asks for validation, synonyms and ranked
                          alternatives; LONG asks for a plain translation

    Returns:
        The prompt string
    """
    if word_count_class is WordCountClass.SHORT:
        return SHORT_TEXT_PROMPT_TEMPLATE.format(
            text=text,
            source_language=source_language,
            target_language=target_language,
            no_translation_token=NO_TRANSLATION_TOKEN,
            translations_token=TRANSLATIONS_TOKEN
        )
    return LONG_TEXT_PROMPT_TEMPLATE.format(
        text=text,
        source_language=source_language,
        target_language=target_language
    )


def build_detection_prompt(text: str) -> str:
    """Build the prompt asking for a bare two-letter language code."""
    return DETECT_LANGUAGE_PROMPT_TEMPLATE.format(text=text)
