import logging
import os
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import state_store
from src.api.errors import InvalidInput, MatchApiError, MatchNotFound
from src.api.state_store import DAYS, Event, Match, MatchStore

logger = logging.getLogger(__name__)

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "3000"))

MATCH_ID = re.compile(r"\d+", re.ASCII)

ENDPOINTS = [
    ("/health", "Health check"),
    ("/matches/day/{day}", "List matches for yesterday|today|tomorrow"),
    ("/matches/{match_id}", "Get match details by ID"),
    ("/matches/{match_id}/events", "Get match events by ID"),
]

store: Optional[MatchStore] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global store
    # A bad data file aborts startup
    store = MatchStore.from_file(state_store.DATA_PATH)
    yield


app = FastAPI(title="Football Matches API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(MatchApiError)
async def match_api_error(request: Request, exc: MatchApiError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_match_or_raise(match_id: str) -> Match:
    if not MATCH_ID.fullmatch(match_id):
        raise InvalidInput("Invalid match ID")

    try:
        # int() refuses very long digit strings
        match = store.find_match(int(match_id.lstrip("0") or "0"))
    except ValueError:
        match = None
    if match is None:
        raise MatchNotFound("Match not found")
    return match


@app.get("/")
def root():
    return {
        "service": "football-matches-api",
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "endpoints": [f"GET {path} - {desc}" for path, desc in ENDPOINTS],
    }


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": utc_timestamp()}


@app.get("/matches/day/{day}", response_model=List[Match], response_model_exclude_unset=True)
def matches_for_day(day: str):
    if day not in DAYS:
        raise InvalidInput("Invalid day. Use: yesterday, today, or tomorrow")
    return list(store.day(day))


@app.get("/matches/{match_id}/events", response_model=List[Event], response_model_exclude_unset=True)
def match_events(match_id: str):
    match = get_match_or_raise(match_id)
    return list(match.events or ())


@app.get("/matches/{match_id}", response_model=Match, response_model_exclude_unset=True)
def match_detail(match_id: str):
    return get_match_or_raise(match_id)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Football Matches API running at http://%s:%s", HOST, PORT)
    logger.info("Available endpoints:")
    for path, desc in ENDPOINTS:
        logger.info("  GET %s - %s", path, desc)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
