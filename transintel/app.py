"""
Flask application exposing the translation backend over HTTP.

Endpoints:
    POST /translate      JSON {text, sourceLanguage, targetLanguage}
    POST /extract-text   multipart form with a "file" field
    GET  /health         liveness and credential status
    GET  /test-api       round-trips a trivial prompt to check the API key
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from flask import Flask, jsonify, request

from transintel.cache import TranslationCache
from transintel.config import ExtractionLimits, ServerDefaults, Settings
from transintel.errors import ConfigError, TransIntelError, UpstreamError, ValidationError
from transintel.extraction import UPLOAD_FAILED_MESSAGE, ExtractionOrchestrator, validate_upload
from transintel.gemini_client import GeminiClient
from transintel.models import TranslationRequest
from transintel.prompts import API_CHECK_PROMPT
from transintel.retry import UpstreamInvoker
from transintel.translation import TranslationService

logger = logging.getLogger(__name__)

# Multipart framing on top of the largest accepted file.
_MULTIPART_OVERHEAD_BYTES = 1024 * 1024


@dataclass
class Services:
    """Process-wide collaborators shared by all request handlers."""
    settings: Settings
    cache: TranslationCache
    client: Any = None
    translation: Optional[TranslationService] = None
    extraction: Optional[ExtractionOrchestrator] = None


def build_services(
    settings: Settings,
    client=None,
    cache: Optional[TranslationCache] = None,
    sleep: Callable[[float], Any] = time.sleep
) -> Services:
    """
    Wire the cache, Gemini client, invoker and orchestrators together.

    Without an API key only the cache is created; endpoints that need the
    model then report a configuration error.
    """
    if cache is None:
        cache = TranslationCache(settings.cache_max_size, settings.cache_ttl_seconds)
    services = Services(settings=settings, cache=cache)

    if client is None and settings.api_key_configured:
        client = GeminiClient(settings.api_key, settings.model)
    if client is None:
        return services

    invoker = UpstreamInvoker(client, sleep=sleep)
    services.client = client
    services.translation = TranslationService(invoker, cache)
    services.extraction = ExtractionOrchestrator(client, invoker, sleep=sleep)
    return services


def create_app(
    settings: Optional[Settings] = None,
    client=None,
    cache: Optional[TranslationCache] = None,
    sleep: Callable[[float], Any] = time.sleep
) -> Flask:
    """
    Create the Flask application.

    Args:
        settings: Runtime settings (default: read from the environment)
        client: Gemini client override, mainly for tests
        cache: Translation cache override
        sleep: Delay function used by retries and polling
    """
    settings = settings or Settings.from_env()
    services = build_services(settings, client=client, cache=cache, sleep=sleep)

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = ExtractionLimits.MAX_FILE_BYTES + _MULTIPART_OVERHEAD_BYTES
    app.extensions['transintel'] = services

    def redact(text: Optional[str]) -> Optional[str]:
        if text and settings.api_key:
            return text.replace(settings.api_key, "***")
        return text

    def error_response(error: TransIntelError, **extra):
        body = dict(extra)
        body.update({"error": error.message, "details": redact(error.details or error.message)})
        return jsonify(body), error.status_code

    @app.errorhandler(TransIntelError)
    def handle_transintel_error(error: TransIntelError):
        return error_response(error)

    @app.errorhandler(413)
    def file_too_large(_error):
        return error_response(ValidationError("File too large", "Maximum file size is 10MB."))

    @app.route('/translate', methods=['POST'])
    def translate():
        """Translate text, serving repeated requests from the cache."""
        translation_request = TranslationRequest.from_payload(request.get_json(silent=True))

        logger.info(
            f"Translation request: source={translation_request.source_language} "
            f"target={translation_request.target_language}"
        )

        if services.translation is None:
            raise ConfigError(
                "API key not configured. Please add your Gemini API key to the .env file",
                "GEMINI_API_KEY is not set"
            )

        try:
            result = services.translation.translate(translation_request)
        except UpstreamError as e:
            logger.error(f"Translation error: {e}", exc_info=True)
            error_message, status_code = classify_translation_error(e)
            return jsonify({"error": error_message, "details": redact(e.message)}), status_code
        except Exception as e:
            logger.error(f"Translation error: {e}", exc_info=True)
            return jsonify({"error": "Translation failed", "details": redact(str(e))}), 500

        return jsonify(result.to_dict())

    @app.route('/extract-text', methods=['POST'])
    def extract_text():
        """Extract text from an uploaded image, PDF, audio or text file."""
        uploaded = request.files.get('file')
        if uploaded is None:
            raise ValidationError("No file uploaded", "Please select a file to upload.")

        data = uploaded.read()
        mime_type = uploaded.mimetype
        filename = uploaded.filename or "upload"

        validate_upload(data, mime_type)

        if services.extraction is None:
            logger.error("API key not configured")
            raise ConfigError("API key not configured", "Server configuration error. Please contact support.")

        try:
            text = services.extraction.extract(data, mime_type, filename)
        except ValidationError:
            raise
        except Exception as e:
            logger.error(f"Text extraction error: {e}", exc_info=True)
            error_message, details = classify_extraction_error(e)
            return jsonify({"error": error_message, "details": redact(details)}), 500

        return jsonify({"text": text})

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok", "apiKeyConfigured": settings.api_key_configured})

    @app.route('/test-api', methods=['GET'])
    def test_api():
        """Check that the configured API key works with a trivial prompt."""
        if services.client is None:
            return error_response(ConfigError("API key not configured", "GEMINI_API_KEY is not set"), success=False)

        try:
            test_response = services.client.generate(API_CHECK_PROMPT)
        except Exception as e:
            logger.error(f"API key check failed: {e}", exc_info=True)
            return jsonify({
                "success": False,
                "error": redact(str(e)),
                "details": (
                    "Your API key might be invalid, expired, or has reached quota limits. "
                    f"Get a new key from: {ServerDefaults.API_KEY_CONSOLE_URL}"
                )
            }), 500

        return jsonify({
            "success": True,
            "message": "API key is valid and working!",
            "testResponse": test_response
        })

    return app


# ============================================================================
# ERROR CLASSIFICATION
# ============================================================================

def _is_credential_error(status: Optional[int], message: str) -> bool:
    return status in (401, 403) or "api key" in message.lower()


def _is_quota_error(status: Optional[int], message: str) -> bool:
    return status == 429 or "quota" in message.lower()


def _is_timeout_error(status: Optional[int], message: str) -> bool:
    return status == 504 or "timeout" in message.lower()


def classify_translation_error(error: UpstreamError) -> Tuple[str, int]:
    """Map a failed translation to a user-facing message and HTTP status."""
    message = error.message or ""
    if _is_credential_error(error.status, message):
        return "Invalid API key", 401
    if _is_quota_error(error.status, message):
        return "API quota exceeded. Please try again later.", 429
    if _is_timeout_error(error.status, message):
        return "Translation timeout. Please try a shorter text.", 504
    return "Translation failed", 500


def classify_extraction_error(error: Exception) -> Tuple[str, str]:
    """Map a failed extraction to a user-facing message and details."""
    status = getattr(error, 'status', None)
    if isinstance(error, TransIntelError):
        message = error.details or error.message
        summary = error.message
    else:
        message = summary = str(error)

    if _is_credential_error(status, message):
        return "Invalid API key", "Server API key is invalid or expired."
    if _is_quota_error(status, message):
        return "API quota exceeded", "The server has reached its API quota limit. Please try again later."
    if summary == UPLOAD_FAILED_MESSAGE:
        return summary, (
            "Could not upload file for processing. The file might be corrupted "
            "or in an unsupported format."
        )
    return "Failed to extract text from file", message
