from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from .. import deps
from ..progress import ProgressAggregator
from ..schemas import OverallProgress, PracticeType, ProgressRecord, StoryMetrics, TimeWindow, utcnow
from ..scoring import score_practice, score_retelling
from ..store import ProgressSaveError
from .scoring import resolve_reference

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


class RecordRequest(BaseModel):
	"""
	Request model for recording a completed session.

	When ``metrics`` is omitted the session is scored here: ``text`` is the
	retelling (scored against ``reference`` or the catalog story ``story_id``)
	or the free-practice transcript.
	"""
	type: PracticeType
	text: str = ""
	reference: Optional[str] = None
	story_id: Optional[uuid.UUID] = None
	prompt_id: Optional[uuid.UUID] = None
	duration: float = Field(default=0.0, ge=0.0)
	metrics: Optional[StoryMetrics] = None
	date: Optional[datetime] = None


def _save_failed(e: ProgressSaveError) -> HTTPException:
	return HTTPException(status_code=503, detail=f"Progress was updated but could not be saved: {e}")


@router.post("/records", response_model=ProgressRecord, response_model_exclude_none=True, status_code=201)
def create_record(req: RecordRequest, aggregator: ProgressAggregator = Depends(deps.get_aggregator)):
	metrics = req.metrics
	if metrics is None:
		if req.type is PracticeType.RETELLING:
			reference = resolve_reference(req.reference, req.story_id)
			metrics = score_retelling(reference, req.text)
		else:
			metrics = score_practice(req.text, req.duration)
	record = ProgressRecord(
		date=req.date or utcnow(),
		story_id=req.story_id,
		prompt_id=req.prompt_id,
		metrics=metrics,
		duration=req.duration,
		type=req.type,
	)
	try:
		return aggregator.append(record)
	except ProgressSaveError as e:
		# The record stays in the in-memory log even though it was not saved
		raise HTTPException(
			status_code=503,
			detail={"message": f"Progress was updated but could not be saved: {e}", "record_id": str(record.id)},
		)


@router.get("/records", response_model=List[ProgressRecord], response_model_exclude_none=True)
def list_records(window: TimeWindow = TimeWindow.ALL, aggregator: ProgressAggregator = Depends(deps.get_aggregator)):
	return aggregator.query(window)


@router.get("/records/{record_id}", response_model=ProgressRecord, response_model_exclude_none=True)
def get_record(record_id: uuid.UUID, aggregator: ProgressAggregator = Depends(deps.get_aggregator)):
	record = aggregator.get(record_id)
	if record is None:
		raise HTTPException(status_code=404, detail="Record not found")
	return record


@router.delete("/records/{record_id}", status_code=204)
def delete_record(record_id: uuid.UUID, aggregator: ProgressAggregator = Depends(deps.get_aggregator)):
	# Deleting an unknown id is not an error
	try:
		aggregator.remove(record_id)
	except ProgressSaveError as e:
		raise _save_failed(e)
	return Response(status_code=204)


@router.delete("", status_code=204)
def clear_progress():
	# Also the recovery path for unreadable history, so it bypasses get_aggregator
	aggregator = deps.current_aggregator()
	try:
		aggregator.clear()
	except ProgressSaveError as e:
		raise _save_failed(e)
	if deps.load_error() is not None:
		logger.warning("Progress history reset after load failure")
		deps.clear_load_error()
	return Response(status_code=204)


@router.get("/summary", response_model=OverallProgress, response_model_exclude_none=True)
def summary(window: TimeWindow = TimeWindow.ALL, aggregator: ProgressAggregator = Depends(deps.get_aggregator)):
	return aggregator.summary(window)
