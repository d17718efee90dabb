# api/app/routes/health.py
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    state = request.app.state
    return {
        "success": True,
        "status": "healthy",
        "service": "signal-watcher-api",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "analysis": {
            "mode": state.analysis_engine.mode,
            "in_flight": state.dispatcher.in_flight,
            **state.dispatcher.sink.stats.as_dict(),
        },
        "metrics": state.request_metrics.snapshot() if state.request_metrics else None,
    }
