import argparse
import json
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from src.api.state_store import DATA_PATH, DAYS

RAW = Path("data/raw")

# match_date minus --today, in days
OFFSETS = {-1: "yesterday", 0: "today", 1: "tomorrow"}

EVENT_COLS = ["minute", "team", "type", "player"]


def read_table(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise SystemExit(f"Missing {path}.")
    return pd.DataFrame(json.loads(path.read_text(encoding="utf-8")))


def assign_buckets(matches: pd.DataFrame, today: date) -> pd.DataFrame:
    """Tag each match with its day bucket and drop the ones outside the window."""
    df = matches.copy()
    dates = pd.to_datetime(df["match_date"], format="ISO8601").dt.normalize()
    offset = (dates - pd.Timestamp(today)).dt.days
    df["bucket"] = offset.map(OFFSETS)
    return df.dropna(subset=["bucket"])


def events_by_match(events: pd.DataFrame) -> Dict[int, List[dict]]:
    if events.empty:
        return {}

    events = events.sort_values(["match_id", "minute"], kind="stable")
    cols = events.reindex(columns=EVENT_COLS).astype(object)
    cols = cols.where(cols.notna(), None)
    cols["match_id"] = events["match_id"]

    return {
        int(mid): g[EVENT_COLS].to_dict("records")
        for mid, g in cols.groupby("match_id", sort=False)
    }


def _score(value) -> Optional[Union[int, float]]:
    if value is None or pd.isna(value):
        return None
    value = float(value)
    return int(value) if value.is_integer() else value


def build_buckets(matches: pd.DataFrame, events: pd.DataFrame, today: date) -> Dict[str, List[dict]]:
    buckets: Dict[str, List[dict]] = {day: [] for day in DAYS}
    if matches.empty:
        return buckets

    df = assign_buckets(matches, today).sort_values(["match_date", "match_id"], kind="stable")
    per_match = events_by_match(events)

    for m in df.to_dict("records"):
        mid = int(m["match_id"])
        buckets[m["bucket"]].append({
            "id": mid,
            "date": str(m["match_date"]),
            "teams": {"home": m["home_team"], "away": m["away_team"]},
            "score": {"home": _score(m.get("home_score")), "away": _score(m.get("away_score"))},
            "events": per_match.get(mid, []),
        })

    return buckets


def main(argv=None):
    parser = argparse.ArgumentParser(description="Build the day-bucket matches file")
    parser.add_argument("--matches", default=str(RAW / "matches.json"))
    parser.add_argument("--events", default=str(RAW / "events.json"))
    parser.add_argument("--out", default=str(DATA_PATH))
    parser.add_argument("--today", type=date.fromisoformat, default=date.today())
    args = parser.parse_args(argv)

    matches = read_table(Path(args.matches))
    events_path = Path(args.events)
    events = read_table(events_path) if events_path.exists() else pd.DataFrame()

    buckets = build_buckets(matches, events, args.today)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(buckets, indent=2, ensure_ascii=False), encoding="utf-8")

    print("Saved:", out)
    print("Matches:", {day: len(rows) for day, rows in buckets.items()})


if __name__ == "__main__":
    main()
