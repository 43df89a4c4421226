"""
Thin wrapper over the google-genai SDK.

Exposes the four capabilities the backend needs from Gemini: text
generation (optionally over an uploaded file), file upload, file status
lookup and file deletion. Errors are raised as the SDK raises them; the
callers classify them.
"""

import logging
from typing import Optional

from google import genai
from google.genai import types

from transintel.config import GenerationDefaults, ModelDefaults

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Handles all interactions with the Gemini API.

    Uses a low temperature so repeated requests produce stable, parseable
    output.
    """

    def __init__(self, api_key: str, model: str = ModelDefaults.MODEL):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key
            model: Gemini model identifier (default: gemini-2.5-flash-lite)
        """
        self.model = model
        self.client = genai.Client(api_key=api_key)

    def generate(self, prompt: str, file: Optional[types.File] = None) -> str:
        """
        Generate content for a prompt, optionally grounded on an uploaded file.

        Args:
            prompt: Instruction text
            file: A file previously uploaded with upload_file and in ACTIVE state

        Returns:
            The generated text (empty string if the model returned no text)
        """
        parts = []
        if file is not None:
            parts.append(types.Part.from_uri(file_uri=file.uri, mime_type=file.mime_type))
        parts.append(types.Part(text=prompt))

        contents = [types.Content(role="user", parts=parts)]
        logger.debug(f"Generating with {self.model} ({len(prompt)} prompt chars, file={file is not None})")

        generation_config = types.GenerateContentConfig(
            temperature=GenerationDefaults.TEMPERATURE,
            top_p=GenerationDefaults.TOP_P,
            top_k=GenerationDefaults.TOP_K,
            max_output_tokens=GenerationDefaults.MAX_OUTPUT_TOKENS,
        )

        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=generation_config
        )
        return response.text or ""

    def upload_file(self, path: str, mime_type: str, display_name: Optional[str] = None) -> types.File:
        """Upload a local file to the Gemini Files API."""
        return self.client.files.upload(
            file=path,
            config=types.UploadFileConfig(mime_type=mime_type, display_name=display_name)
        )

    def get_file(self, name: str) -> types.File:
        """Fetch the current metadata (including processing state) of an uploaded file."""
        return self.client.files.get(name=name)

    def delete_file(self, name: str) -> None:
        """Delete an uploaded file."""
        self.client.files.delete(name=name)
