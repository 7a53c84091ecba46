from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .. import catalog
from ..schemas import StoryMetrics
from ..scoring import score_practice, score_retelling

router = APIRouter(prefix="/score", tags=["scoring"])


class RetellingRequest(BaseModel):
	# Either the reference text itself or the id of a catalog story
	reference: Optional[str] = None
	story_id: Optional[uuid.UUID] = None
	candidate: str = ""


class PracticeRequest(BaseModel):
	transcript: str = ""
	duration: float = Field(default=0.0, ge=0.0, description="Recording length in seconds")


def resolve_reference(reference: Optional[str], story_id: Optional[uuid.UUID]) -> str:
	if reference is not None:
		return reference
	if story_id is None:
		raise HTTPException(status_code=400, detail="reference or story_id is required")
	story = catalog.get_story(story_id)
	if story is None:
		raise HTTPException(status_code=404, detail="Story not found")
	return story.content


@router.post("/retelling", response_model=StoryMetrics)
def retelling(req: RetellingRequest):
	reference = resolve_reference(req.reference, req.story_id)
	return score_retelling(reference, req.candidate)


@router.post("/practice", response_model=StoryMetrics)
def practice(req: PracticeRequest):
	return score_practice(req.transcript, req.duration)
