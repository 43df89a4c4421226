"""
TransIntel translation backend.

Orchestrates Gemini calls for text translation and file text extraction,
with a short-lived result cache and normalized response shapes.
"""

__version__ = "1.0.0"
