from fastapi import APIRouter

from .. import deps

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
	aggregator = deps.current_aggregator()
	store = aggregator.store
	error = deps.load_error()
	return {
		"status": "degraded" if error else "ok",
		"progress_store": store.backend if store is not None else None,
		"sessions": aggregator.progress.total_sessions,
		"load_error": str(error) if error else None,
	}
