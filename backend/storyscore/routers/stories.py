from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from .. import catalog
from ..schemas import Story, StoryCategory, StoryPrompt

router = APIRouter(prefix="/stories", tags=["stories"])


class PromptRequest(BaseModel):
	category: Optional[StoryCategory] = None


@router.get("", response_model=List[Story])
def list_stories(category: Optional[StoryCategory] = None):
	return catalog.list_stories(category)


@router.get("/categories", response_model=List[str])
def list_categories():
	return [c.value for c in StoryCategory]


@router.post("/prompt", response_model=StoryPrompt, response_model_exclude_none=True)
def generate_prompt(req: PromptRequest):
	return catalog.generate_prompt(req.category)


@router.get("/{story_id}", response_model=Story)
def get_story(story_id: uuid.UUID):
	story = catalog.get_story(story_id)
	if story is None:
		raise HTTPException(status_code=404, detail="Story not found")
	return story
