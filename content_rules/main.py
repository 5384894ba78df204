"""FastAPI application entrypoint for the content rules service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from .ai import ContentAI
from .cache import Cache, InMemoryCache
from .config import settings
from .context import BabyRecord, build_rule_context
from .db_cache import DbCache, initialize_db
from .matcher import pick_for_slot
from .models import RuleContext, Screen, Slot, SlotContent
from .programs.registry import build_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting up content-rules…")
    initialize_db(settings.content_cache_db_path)
    cache = InMemoryCache()
    cache.start()
    app.state.cache = cache
    app.state.rules = build_rules(ContentAI())
    log.info("content-rules ready with %d rules.", len(app.state.rules))
    yield
    log.info("Shutting down…")
    await cache.stop()
    log.info("Shutdown complete.")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="content-rules", version="0.1.0", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SlotRequest(BaseModel):
    screen: Screen
    slot: Slot
    context: RuleContext
    baby_id: str | None = None
    family_id: str | None = None
    user_id: str | None = None
    defer_ai: bool = False


class SlotResponse(BaseModel):
    content: SlotContent | None


def _cache_for(request: Request, req: SlotRequest) -> Cache:
    # Per-baby persistence needs full ownership; otherwise share the process cache.
    if req.baby_id and req.family_id and req.user_id:
        return DbCache(settings.content_cache_db_path, req.baby_id, req.family_id, req.user_id)
    return request.app.state.cache


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
async def health(request: Request):
    return {
        "status": "ok",
        "cache_entries": request.app.state.cache.size(),
        "rules": len(request.app.state.rules),
    }


@app.post("/content/slot", response_model=SlotResponse)
async def content_slot(req: SlotRequest, request: Request):
    cache = _cache_for(request, req)
    try:
        content = await pick_for_slot(
            request.app.state.rules,
            req.screen,
            req.slot,
            req.context,
            cache,
            defer_ai=req.defer_ai,
        )
    except Exception as exc:
        log.exception("Content resolution failed for %s/%s", req.screen.value, req.slot.value)
        raise HTTPException(status_code=500, detail=f"Content error: {exc}") from exc
    return SlotResponse(content=content)


@app.post("/content/context", response_model=RuleContext)
async def content_context(baby: BabyRecord):
    return build_rule_context(baby)


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def run() -> None:
    uvicorn.run(
        "content_rules.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    run()
