import logging
import os
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DATA_PATH = Path(os.environ.get("MATCHES_DATA", "data/matches.json"))

# Scan order for lookups
DAYS = ("yesterday", "today", "tomorrow")


class Event(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    minute: int
    team: str
    type: str = Field(..., description="goal | card | ...")
    player: str


class Teams(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    home: str
    away: str


class Score(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    # null until the match has been played
    home: Optional[Union[int, float]] = None
    away: Optional[Union[int, float]] = None


class Match(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    id: int
    date: Optional[str] = None
    teams: Teams
    score: Optional[Score] = None
    events: Optional[Tuple[Event, ...]] = ()


class MatchBuckets(BaseModel):
    model_config = ConfigDict(frozen=True)

    yesterday: Optional[Tuple[Match, ...]] = ()
    today: Optional[Tuple[Match, ...]] = ()
    tomorrow: Optional[Tuple[Match, ...]] = ()


@dataclass(frozen=True)
class MatchStore:
    """Read-only view over the three day buckets.

    Built once at startup. Lookups are linear scans in DAYS order.
    """

    buckets: MatchBuckets

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MatchStore":
        path = Path(path)
        # strict: stored values are served as-is, never coerced
        buckets = MatchBuckets.model_validate_json(path.read_text(encoding="utf-8"), strict=True)
        store = cls(buckets)

        logger.info("Loaded matches from %s: %s", path, store.counts())
        for match_id in store.duplicate_ids():
            logger.warning("Duplicate match id %s, lookups return the first one", match_id)
        return store

    def day(self, day: str) -> Tuple[Match, ...]:
        if day not in DAYS:
            raise KeyError(day)
        return getattr(self.buckets, day) or ()

    def matches(self):
        for day in DAYS:
            yield from self.day(day)

    def find_match(self, match_id: int) -> Optional[Match]:
        for match in self.matches():
            if match.id == match_id:
                return match
        return None

    def counts(self) -> Dict[str, int]:
        return {day: len(self.day(day)) for day in DAYS}

    def duplicate_ids(self) -> List[int]:
        seen = Counter(m.id for m in self.matches())
        return [match_id for match_id, n in seen.items() if n > 1]
