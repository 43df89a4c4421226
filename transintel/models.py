"""
Request and result types shared by the translation flow.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from transintel.errors import ValidationError
from transintel.languages import AUTO_DETECT


@dataclass(frozen=True)
class TranslationRequest:
    """
    A single translation request.

    The triple (text, source_language, target_language) is also the cache
    fingerprint, compared as exact strings.
    """
    text: str
    source_language: str
    target_language: str

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "TranslationRequest":
        """
        Build a request from a decoded JSON body.

        Raises:
            ValidationError: If text or target language is missing or blank
        """
        if not isinstance(payload, dict):
            payload = {}
        text = payload.get('text')
        target_language = payload.get('targetLanguage')
        source_language = payload.get('sourceLanguage') or AUTO_DETECT

        if not isinstance(text, str) or not text.strip() \
                or not isinstance(target_language, str) or not target_language:
            raise ValidationError("Text and target language are required")
        if not isinstance(source_language, str):
            raise ValidationError("Source language must be a language code")

        return cls(text=text, source_language=source_language, target_language=target_language)

    @property
    def cache_key(self) -> tuple:
        return (self.text, self.source_language, self.target_language)


@dataclass(frozen=True)
class TranslationResult:
    """
    Normalized translation output.

    Exactly one shape holds: plain translation, translation with synonyms
    and alternatives, or word-not-found with spelling suggestions (carried
    in ``synonyms`` with ``no_translation`` set).
    """
    translated_text: str
    detected_language: str
    synonyms: Optional[List[str]] = None
    alternatives: Optional[List[str]] = None
    no_translation: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON body for the /translate endpoint."""
        data: Dict[str, Any] = {
            'translatedText': self.translated_text,
            'detectedLanguage': self.detected_language,
        }
        if self.synonyms is not None:
            data['synonyms'] = list(self.synonyms)
        if self.alternatives is not None:
            data['alternatives'] = list(self.alternatives)
        if self.no_translation:
            data['noTranslation'] = True
        return data
