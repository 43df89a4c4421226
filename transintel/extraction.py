"""
File-to-text extraction.

Text files are decoded in place. Images, PDFs and audio go through the
Gemini Files API:

    write temp file -> upload -> poll until ACTIVE -> generate -> cleanup

The temp file and the remote file are released on every exit path.
"""

import contextlib
import enum
import logging
import mimetypes
import os
import tempfile
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from transintel.config import ExtractionLimits
from transintel.errors import ExtractionError, UpstreamError, ValidationError
from transintel.prompts import (
    AUDIO_TRANSCRIPTION_PROMPT,
    DOCUMENT_EXTRACTION_PROMPT,
    IMAGE_EXTRACTION_PROMPT
)
from transintel.retry import UpstreamInvoker

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "File upload to processing service failed"

SUPPORTED_TYPES_MESSAGE = (
    "Supported types: images (PNG, JPEG, WEBP, HEIC, HEIF), PDFs, and audio "
    "(MP3, WAV, AAC, FLAC, OGG, AIFF). Maximum file size: 10MB."
)


class MimeCategory(enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    UNSUPPORTED = "unsupported"


class RemoteState(enum.Enum):
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


EXTRACTION_PROMPTS = {
    MimeCategory.IMAGE: IMAGE_EXTRACTION_PROMPT,
    MimeCategory.DOCUMENT: DOCUMENT_EXTRACTION_PROMPT,
    MimeCategory.AUDIO: AUDIO_TRANSCRIPTION_PROMPT,
}


def categorize_mime_type(mime_type: Optional[str]) -> MimeCategory:
    """Map an uploaded file's MIME type to the category driving extraction."""
    if not mime_type or mime_type not in ExtractionLimits.ALLOWED_MIME_TYPES:
        return MimeCategory.UNSUPPORTED
    if mime_type.startswith('text/'):
        return MimeCategory.TEXT
    if mime_type.startswith('image/'):
        return MimeCategory.IMAGE
    if mime_type == 'application/pdf':
        return MimeCategory.DOCUMENT
    if mime_type.startswith('audio/'):
        return MimeCategory.AUDIO
    return MimeCategory.UNSUPPORTED


def remote_state(file) -> RemoteState:
    """
    Read the processing state of an uploaded file.

    Accepts the SDK's FileState enum or a plain string. Anything that is
    neither PROCESSING nor FAILED is treated as ready.
    """
    state = getattr(file, 'state', None)
    name = getattr(state, 'name', state)
    if name == RemoteState.PROCESSING.value:
        return RemoteState.PROCESSING
    if name == RemoteState.FAILED.value:
        return RemoteState.FAILED
    return RemoteState.ACTIVE


def validate_upload(data: bytes, mime_type: Optional[str], max_bytes: int = ExtractionLimits.MAX_FILE_BYTES) -> MimeCategory:
    """
    Reject oversized or unsupported uploads before any processing.

    Raises:
        ValidationError: If the file is too large or of an unsupported type
    """
    if len(data) > max_bytes:
        raise ValidationError("File too large", "Maximum file size is 10MB.")
    category = categorize_mime_type(mime_type)
    if category is MimeCategory.UNSUPPORTED:
        raise ValidationError("Unsupported file type", SUPPORTED_TYPES_MESSAGE)
    return category


@dataclass
class ExtractionJob:
    """Transient state of one non-text extraction."""
    filename: str
    mime_type: str
    category: MimeCategory
    temp_path: Optional[str] = None
    remote_file: Any = None
    state: RemoteState = RemoteState.UPLOADING


class ExtractionOrchestrator:
    """
    Extracts text from uploaded files using Gemini.
    """

    def __init__(
        self,
        client,
        invoker: UpstreamInvoker,
        poll_interval: float = ExtractionLimits.POLL_INTERVAL_SECONDS,
        max_polls: int = ExtractionLimits.MAX_POLLS,
        max_bytes: int = ExtractionLimits.MAX_FILE_BYTES,
        sleep: Callable[[float], Any] = time.sleep
    ):
        """
        Args:
            client: GeminiClient (or compatible) for file operations
            invoker: Upstream invoker for the extraction generation call
            poll_interval: Seconds between processing-state checks
            max_polls: Maximum number of state checks before giving up
            max_bytes: Size ceiling for uploads
            sleep: Delay function, injectable for tests
        """
        self.client = client
        self.invoker = invoker
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.max_bytes = max_bytes
        self.sleep = sleep

    def extract(self, data: bytes, mime_type: str, filename: str = "upload") -> str:
        """
        Extract text from a file.

        Args:
            data: Raw file content
            mime_type: Declared MIME type of the file
            filename: Original file name, used for the temp file suffix and
                      the remote display name

        Returns:
            The extracted text, trimmed

        Raises:
            ValidationError: Oversized or unsupported file
            ExtractionError: Upload or remote processing failed
            UpstreamError: The Gemini API rejected a call
        """
        category = validate_upload(data, mime_type, self.max_bytes)

        if category is MimeCategory.TEXT:
            return data.decode('utf-8', errors='replace').strip()

        job = ExtractionJob(filename=filename, mime_type=mime_type, category=category)
        logger.info(f"Extracting text from {filename} ({mime_type}, {len(data)} bytes)")

        with self._scoped_temp_file(data, self._suffix_for(job)) as temp_path:
            job.temp_path = temp_path
            try:
                self._upload(job)
                self.wait_until_active(job)
                job.state = RemoteState.ACTIVE
                text = self.invoker.invoke(EXTRACTION_PROMPTS[category], file=job.remote_file)
            finally:
                self._release_remote_file(job)

        return text.strip()

    def wait_until_active(self, job: ExtractionJob) -> None:
        """
        Poll the remote file until it leaves PROCESSING.

        Raises:
            ExtractionError: If processing failed or did not finish in time
        """
        job.state = remote_state(job.remote_file)
        polls = 0
        while job.state is RemoteState.PROCESSING:
            if polls >= self.max_polls:
                raise ExtractionError(
                    "File processing timed out",
                    f"File was still processing after {polls} checks"
                )
            logger.info("Waiting for file to be processed...")
            self.sleep(self.poll_interval)
            polls += 1
            try:
                job.remote_file = self.client.get_file(job.remote_file.name)
            except Exception as e:
                raise UpstreamError.from_exception(e) from e
            job.state = remote_state(job.remote_file)

        if job.state is RemoteState.FAILED:
            raise ExtractionError("File processing failed")
        logger.info(f"File ready: {getattr(job.remote_file, 'uri', job.remote_file.name)}")

    def _upload(self, job: ExtractionJob) -> None:
        try:
            uploaded = self.client.upload_file(job.temp_path, mime_type=job.mime_type, display_name=job.filename)
        except Exception as e:
            upstream = UpstreamError.from_exception(e)
            raise ExtractionError(
                UPLOAD_FAILED_MESSAGE,
                f"Failed to upload file: {upstream.message}",
                status=upstream.status
            ) from e

        if uploaded is None or not getattr(uploaded, 'name', None):
            raise ExtractionError(UPLOAD_FAILED_MESSAGE, "File upload returned invalid response")

        job.remote_file = uploaded
        job.state = RemoteState.PROCESSING
        logger.info(f"Uploaded file {uploaded.name}")

    def _release_remote_file(self, job: ExtractionJob) -> None:
        if job.remote_file is None:
            return
        try:
            self.client.delete_file(job.remote_file.name)
        except Exception as e:
            logger.error(f"Failed to delete uploaded file {job.remote_file.name}: {e}", exc_info=True)

    @contextlib.contextmanager
    def _scoped_temp_file(self, data: bytes, suffix: str) -> Iterator[str]:
        try:
            fd, path = tempfile.mkstemp(prefix="transintel_", suffix=suffix)
        except OSError as e:
            raise ExtractionError("Failed to extract text from file", f"Could not create temp file: {e}") from e
        try:
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(data)
            except OSError as e:
                raise ExtractionError("Failed to extract text from file", f"Could not write temp file: {e}") from e
            logger.debug(f"Temp file created: {path}")
            yield path
        finally:
            self._remove_temp_file(path)

    def _remove_temp_file(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.error(f"Failed to clean up temp file {path}: {e}", exc_info=True)

    @staticmethod
    def _suffix_for(job: ExtractionJob) -> str:
        suffix = os.path.splitext(job.filename)[1]
        if not suffix:
            suffix = mimetypes.guess_extension(job.mime_type) or ""
        return suffix
