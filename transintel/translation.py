"""
Translation orchestration.

Flow for one request:
    cache lookup -> (language detection if source is "auto")
    -> prompt building -> upstream call with retries
    -> response parsing -> cache store
"""

import logging
import re
from typing import Optional

from transintel.cache import TranslationCache
from transintel.errors import UpstreamError
from transintel.languages import AUTO_DETECT, language_name
from transintel.models import TranslationRequest, TranslationResult
from transintel.prompts import build_detection_prompt, build_translation_prompt, classify_word_count
from transintel.response_parser import parse_response
from transintel.retry import UpstreamInvoker

logger = logging.getLogger(__name__)

_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2}$")


class TranslationService:
    """
    Translates text through Gemini with caching and response normalization.
    """

    def __init__(self, invoker: UpstreamInvoker, cache: TranslationCache):
        """
        Args:
            invoker: Upstream invoker used for detection and translation calls
            cache: Shared translation cache
        """
        self.invoker = invoker
        self.cache = cache

    def translate(self, request: TranslationRequest) -> TranslationResult:
        """
        Translate a request, serving it from the cache when possible.

        Raises:
            UpstreamError: If the translation call fails after retries
        """
        cached = self.cache.get(request.cache_key)
        if cached is not None:
            logger.info("Cache hit - returning cached translation")
            return cached

        detected_language = request.source_language
        if request.source_language == AUTO_DETECT:
            detected_language = self.detect_language(request.text) or AUTO_DETECT

        source_name = language_name(detected_language)
        target_name = language_name(request.target_language)
        word_count_class = classify_word_count(request.text)

        logger.info(
            f"Translating {source_name} -> {target_name} "
            f"({word_count_class.value} text, {len(request.text)} chars)"
        )

        prompt = build_translation_prompt(request.text, source_name, target_name, word_count_class)
        response = self.invoker.invoke(prompt)
        logger.debug(f"Raw model response: {response!r}")

        result = parse_response(response, word_count_class, detected_language)

        self.cache.set(request.cache_key, result)
        return result

    def detect_language(self, text: str) -> Optional[str]:
        """
        Ask the model for the two-letter code of the text's language.

        Returns:
            The code, or None if detection failed or the answer was not a
            two-letter code
        """
        logger.info("Running language detection...")
        try:
            response = self.invoker.invoke(build_detection_prompt(text))
        except UpstreamError as e:
            logger.warning(f"Language detection failed, continuing with auto: {e}")
            return None

        code = re.sub(r"[^a-z]", "", response.strip().lower())
        if not _LANGUAGE_CODE_RE.match(code):
            logger.warning(f"Ignoring unexpected language detection answer: {response!r}")
            return None

        logger.info(f"Detected language: {code} ({language_name(code)})")
        return code
