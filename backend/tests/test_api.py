from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from storyscore import catalog, deps
from storyscore.main import app
from storyscore.schemas import utcnow
from storyscore.store import OVERALL_KEY, RECORDS_KEY, MemoryProgressStore, ProgressSaveError
from storyscore.text_metrics import PRACTICE_RULES


def _client() -> AsyncClient:
	return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health_reports_store():
	async with _client() as client:
		res = await client.get("/health")
	assert res.status_code == 200
	body = res.json()
	assert body["status"] == "ok"
	assert body["progress_store"] == "memory"
	assert body["sessions"] == 0


@pytest.mark.asyncio
async def test_score_retelling_with_reference_text():
	async with _client() as client:
		res = await client.post(
			"/score/retelling",
			json={"reference": "the quick brown fox", "candidate": "the quick brown fox"},
		)
	assert res.status_code == 200
	body = res.json()
	assert body["similarity"] == 1.0
	assert body["coherence"] == 0.3
	assert len(body["suggestions"]) >= 1


@pytest.mark.asyncio
async def test_score_retelling_against_catalog_story():
	story = catalog.SAMPLE_STORIES[0]
	async with _client() as client:
		ok = await client.post("/score/retelling", json={"story_id": str(story.id), "candidate": story.content})
		missing = await client.post("/score/retelling", json={"story_id": str(uuid.uuid4()), "candidate": "hi"})
		no_reference = await client.post("/score/retelling", json={"candidate": "hi"})
	assert ok.status_code == 200
	assert ok.json()["similarity"] == 1.0
	assert missing.status_code == 404
	assert no_reference.status_code == 400


@pytest.mark.asyncio
async def test_score_practice_empty_transcript():
	async with _client() as client:
		res = await client.post("/score/practice", json={"transcript": "", "duration": 0})
		negative = await client.post("/score/practice", json={"transcript": "hi", "duration": -5})
	assert res.status_code == 200
	body = res.json()
	assert body["overall"] == 0.0
	assert PRACTICE_RULES[0][1] in body["suggestions"]
	assert PRACTICE_RULES[4][1] in body["suggestions"]
	assert negative.status_code == 422


@pytest.mark.asyncio
async def test_record_lifecycle():
	async with _client() as client:
		created = await client.post(
			"/progress/records",
			json={"type": "free_practice", "text": "Once upon a time. However, it rained.", "duration": 40},
		)
		assert created.status_code == 201
		record = created.json()
		assert "story_id" not in record

		listed = await client.get("/progress/records")
		fetched = await client.get(f"/progress/records/{record['id']}")
		summary = await client.get("/progress/summary")
		deleted = await client.delete(f"/progress/records/{record['id']}")
		deleted_again = await client.delete(f"/progress/records/{record['id']}")
		after = await client.get("/progress/summary")

	assert [r["id"] for r in listed.json()] == [record["id"]]
	assert fetched.json()["metrics"] == record["metrics"]
	assert summary.json()["total_sessions"] == 1
	assert summary.json()["total_practice_time"] == 40
	assert summary.json()["average_overall"] == pytest.approx(record["metrics"]["overall"])
	assert deleted.status_code == 204
	assert deleted_again.status_code == 204
	assert after.json()["total_sessions"] == 0
	assert "last_practice_date" not in after.json()


@pytest.mark.asyncio
async def test_record_retelling_scores_against_story():
	story = catalog.SAMPLE_STORIES[2]
	async with _client() as client:
		res = await client.post(
			"/progress/records",
			json={"type": "retelling", "story_id": str(story.id), "text": "Luna saved the forest.", "duration": 25},
		)
	assert res.status_code == 201
	body = res.json()
	assert body["story_id"] == str(story.id)
	assert body["type"] == "retelling"
	assert body["metrics"]["similarity"] < 0.6


@pytest.mark.asyncio
async def test_windowed_records_and_summary():
	old_date = (utcnow() - timedelta(days=10)).isoformat()
	metrics = {
		"similarity": 0.5,
		"fluency": 0.5,
		"coherence": 0.5,
		"vocabulary": 0.5,
		"overall": 0.5,
		"suggestions": ["Keep practicing."],
	}
	async with _client() as client:
		await client.post("/progress/records", json={"type": "free_practice", "metrics": metrics, "duration": 60, "date": old_date})
		await client.post("/progress/records", json={"type": "free_practice", "text": "A short tale.", "duration": 20})
		week = await client.get("/progress/records", params={"window": "week"})
		month = await client.get("/progress/records", params={"window": "month"})
		week_summary = await client.get("/progress/summary", params={"window": "week"})
		bad_window = await client.get("/progress/records", params={"window": "decade"})

	assert len(week.json()) == 1
	assert len(month.json()) == 2
	assert week_summary.json()["total_sessions"] == 1
	assert week_summary.json()["total_practice_time"] == 20
	assert bad_window.status_code == 422


@pytest.mark.asyncio
async def test_clear_progress():
	async with _client() as client:
		await client.post("/progress/records", json={"type": "free_practice", "text": "words", "duration": 5})
		cleared = await client.delete("/progress")
		listed = await client.get("/progress/records")
		summary = await client.get("/progress/summary")
	assert cleared.status_code == 204
	assert listed.json() == []
	assert summary.json()["total_sessions"] == 0


@pytest.mark.asyncio
async def test_unreadable_history_is_surfaced_until_reset():
	store = MemoryProgressStore()
	store.blobs = {RECORDS_KEY: "not json", OVERALL_KEY: "{}"}
	deps.init_aggregator(store)
	async with _client() as client:
		health = await client.get("/health")
		blocked = await client.get("/progress/summary")
		blocked_write = await client.post("/progress/records", json={"type": "free_practice", "text": "hi"})
		reset = await client.delete("/progress")
		summary = await client.get("/progress/summary")
	assert health.json()["status"] == "degraded"
	assert blocked.status_code == 503
	assert blocked_write.status_code == 503
	assert reset.status_code == 204
	assert summary.status_code == 200
	assert summary.json()["total_sessions"] == 0



class _ReadOnlyStore(MemoryProgressStore):
	def save(self, records, progress):
		raise ProgressSaveError("read-only volume")


@pytest.mark.asyncio
async def test_failed_save_returns_record_id():
	deps.init_aggregator(_ReadOnlyStore())
	async with _client() as client:
		res = await client.post("/progress/records", json={"type": "free_practice", "text": "A tale.", "duration": 12})
		listed = await client.get("/progress/records")
	assert res.status_code == 503
	detail = res.json()["detail"]
	assert "could not be saved" in detail["message"]
	assert [r["id"] for r in listed.json()] == [detail["record_id"]]


@pytest.mark.asyncio
async def test_info_reports_configuration():
	async with _client() as client:
		res = await client.get("/info")
	assert res.status_code == 200
	assert res.json() == {"status": "ok", "progress_store": "memory", "speech_enabled": False}

@pytest.mark.asyncio
async def test_stories_and_prompts():
	async with _client() as client:
		stories = await client.get("/stories")
		fantasy = await client.get("/stories", params={"category": "Fantasy"})
		categories = await client.get("/stories/categories")
		one = await client.get(f"/stories/{catalog.SAMPLE_STORIES[1].id}")
		missing = await client.get(f"/stories/{uuid.uuid4()}")
		prompt = await client.post("/stories/prompt", json={"category": "Sports"})
		general = await client.post("/stories/prompt", json={})
	assert len(stories.json()) == 5
	assert [s["title"] for s in fantasy.json()] == ["The Enchanted Forest"]
	assert "Social Interactions" in categories.json()
	assert one.json()["title"] == "The Vintage Dress"
	assert missing.status_code == 404
	assert prompt.json()["text"] in catalog.CATEGORY_PROMPTS[catalog.StoryCategory.SPORTS]
	assert general.json()["text"] in catalog.GENERAL_PROMPTS
	assert "category" not in general.json()


@pytest.mark.asyncio
async def test_transcribe_endpoint(monkeypatch: pytest.MonkeyPatch):
	from storyscore import transcription

	monkeypatch.setattr(transcription, "transcribe", lambda audio, language_code=None: "once upon a time")
	async with _client() as client:
		res = await client.post("/speech/transcribe", json={"audio_base64": "AAAA"})
	assert res.status_code == 200
	assert res.json() == {"transcript": "once upon a time"}


@pytest.mark.asyncio
async def test_transcribe_rejects_bad_audio_and_reports_disabled_service():
	async with _client() as client:
		bad = await client.post("/speech/transcribe", json={"audio_base64": "!!not base64!!"})
		disabled = await client.post("/speech/transcribe", json={"audio_base64": "AAAA"})
	assert bad.status_code == 400
	assert disabled.status_code == 503
