"""
Speech-to-text collaborator backed by Google Cloud Speech-to-Text.

The scoring engine never calls this; the API layer uses it to turn a finished
recording into the plain transcript the engine consumes.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

from google.cloud import speech_v1p1beta1 as speech
from google.api_core.exceptions import GoogleAPIError

from .settings import settings

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
	pass


class TranscriptionUnavailable(TranscriptionError):
	pass


class TranscriptionServiceError(TranscriptionError):
	pass


def decode_audio(audio_base64: str) -> bytes:
	try:
		content = base64.b64decode(audio_base64 or "", validate=True)
	except (binascii.Error, ValueError) as e:
		raise TranscriptionError(f"Audio payload is not valid base64: {e}") from e
	if not content:
		raise TranscriptionError("Empty audio payload received.")
	return content


def _make_client() -> Any:
	if not settings.speech_enabled:
		raise TranscriptionUnavailable("Speech recognition is disabled (SPEECH_ENABLED=false).")
	try:
		return speech.SpeechClient()
	except Exception as e:
		raise TranscriptionUnavailable(f"Speech recognition unavailable: {e}") from e


def transcribe(audio_base64: str, *, language_code: Optional[str] = None, client: Any = None) -> str:
	"""Return the transcript for a base64-encoded recording.

	Results are joined in order using each result's top alternative. An
	utterance the recognizer could not make out yields an empty string, which
	the scoring engine handles like any other degenerate input.
	"""
	content = decode_audio(audio_base64)
	client = client or _make_client()
	audio = speech.RecognitionAudio(content=content)
	config = speech.RecognitionConfig(
		language_code=language_code or settings.speech_language_code,
		model="default",
		enable_automatic_punctuation=True,
		use_enhanced=True,
	)
	try:
		response = client.recognize(config=config, audio=audio)
	except GoogleAPIError as e:
		logger.warning("Speech-to-Text request failed: %s", e)
		raise TranscriptionServiceError(f"Speech-to-Text API error: {e}") from e
	pieces = [r.alternatives[0].transcript.strip() for r in response.results if r.alternatives]
	transcript = " ".join(p for p in pieces if p)
	logger.debug("Transcribed %d bytes of audio into %d characters", len(content), len(transcript))
	return transcript
