import logging

from fastapi import FastAPI

from . import deps
from .settings import settings
from .routers import health
from .routers import scoring
from .routers import progress
from .routers import stories
from .routers import speech

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Storytelling Practice API")
app.include_router(health.router)
app.include_router(scoring.router)
app.include_router(progress.router)
app.include_router(stories.router)
app.include_router(speech.router)


@app.get("/info")
def info():
	return {"status": "ok", "progress_store": settings.progress_store, "speech_enabled": settings.speech_enabled}


@app.on_event("startup")
async def startup_event():
	# Load the persisted progress log once; an unreadable history is reported, not fatal
	aggregator = deps.init_aggregator()
	logger.info("Loaded %d practice sessions", aggregator.progress.total_sessions)
