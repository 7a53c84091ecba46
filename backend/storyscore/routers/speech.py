from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from .. import transcription
from ..transcription import TranscriptionError, TranscriptionServiceError, TranscriptionUnavailable

router = APIRouter(prefix="/speech", tags=["speech"])


class TranscribeRequest(BaseModel):
	audio_base64: str
	language_code: str | None = None


class TranscribeResponse(BaseModel):
	transcript: str


@router.post("/transcribe", response_model=TranscribeResponse)
def transcribe(req: TranscribeRequest):
	try:
		text = transcription.transcribe(req.audio_base64, language_code=req.language_code)
	except TranscriptionUnavailable as e:
		raise HTTPException(status_code=503, detail=str(e))
	except TranscriptionServiceError as e:
		raise HTTPException(status_code=502, detail=str(e))
	except TranscriptionError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return TranscribeResponse(transcript=text)
