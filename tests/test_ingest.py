import json
from datetime import date

import pandas as pd
import pytest

from src.ingest import build_matches, check_data

TODAY = date(2026, 10, 19)

MATCHES = [
    {"match_id": 11, "match_date": "2026-10-19", "home_team": "A", "away_team": "B",
     "home_score": 1, "away_score": 0},
    {"match_id": 10, "match_date": "2026-10-19", "home_team": "C", "away_team": "D"},
    {"match_id": 20, "match_date": "2026-10-18", "home_team": "E", "away_team": "F",
     "home_score": 3, "away_score": 3},
    {"match_id": 30, "match_date": "2026-10-20", "home_team": "G", "away_team": "H"},
    {"match_id": 40, "match_date": "2026-10-01", "home_team": "I", "away_team": "J"},
]

EVENTS = [
    {"match_id": 11, "minute": 80, "team": "B", "type": "card", "player": "Q"},
    {"match_id": 11, "minute": 10, "team": "A", "type": "goal", "player": "X"},
]


def test_build_buckets_by_date():
    buckets = build_matches.build_buckets(pd.DataFrame(MATCHES), pd.DataFrame(EVENTS), TODAY)

    assert [m["id"] for m in buckets["yesterday"]] == [20]
    assert [m["id"] for m in buckets["today"]] == [10, 11]
    assert [m["id"] for m in buckets["tomorrow"]] == [30]


def test_build_buckets_record_shape():
    buckets = build_matches.build_buckets(pd.DataFrame(MATCHES), pd.DataFrame(EVENTS), TODAY)
    played, unplayed = buckets["today"][1], buckets["today"][0]

    assert played == {
        "id": 11,
        "date": "2026-10-19",
        "teams": {"home": "A", "away": "B"},
        "score": {"home": 1, "away": 0},
        "events": [
            {"minute": 10, "team": "A", "type": "goal", "player": "X"},
            {"minute": 80, "team": "B", "type": "card", "player": "Q"},
        ],
    }
    assert unplayed["score"] == {"home": None, "away": None}
    assert unplayed["events"] == []


def test_build_buckets_empty_input():
    buckets = build_matches.build_buckets(pd.DataFrame(), pd.DataFrame(), TODAY)
    assert buckets == {"yesterday": [], "today": [], "tomorrow": []}


def test_build_then_check(tmp_path, capsys):
    (tmp_path / "matches.json").write_text(json.dumps(MATCHES), encoding="utf-8")
    (tmp_path / "events.json").write_text(json.dumps(EVENTS), encoding="utf-8")
    out = tmp_path / "out" / "matches.json"

    build_matches.main([
        "--matches", str(tmp_path / "matches.json"),
        "--events", str(tmp_path / "events.json"),
        "--out", str(out),
        "--today", "2026-10-19",
    ])
    data = json.loads(out.read_text(encoding="utf-8"))
    assert set(data) == {"yesterday", "today", "tomorrow"}

    check_data.main(["--data", str(out)])
    assert "OK:" in capsys.readouterr().out


def test_build_missing_matches_file(tmp_path):
    with pytest.raises(SystemExit):
        build_matches.main(["--matches", str(tmp_path / "nope.json"), "--out", str(tmp_path / "o.json")])


def test_check_rejects_duplicates(tmp_path):
    path = tmp_path / "matches.json"
    rec = {"id": 1, "teams": {"home": "A", "away": "B"}}
    path.write_text(json.dumps({"today": [rec], "tomorrow": [rec]}), encoding="utf-8")

    with pytest.raises(SystemExit, match="Duplicate match ids"):
        check_data.main(["--data", str(path)])


def test_check_rejects_malformed(tmp_path):
    path = tmp_path / "matches.json"
    path.write_text(json.dumps({"today": [{"id": "x"}]}), encoding="utf-8")

    with pytest.raises(SystemExit, match="Invalid"):
        check_data.main(["--data", str(path)])


def test_build_keeps_fractional_scores():
    rows = [{"match_id": 1, "match_date": "2026-10-19", "home_team": "A", "away_team": "B",
             "home_score": 2.5, "away_score": 1}]
    buckets = build_matches.build_buckets(pd.DataFrame(rows), pd.DataFrame(), TODAY)
    assert buckets["today"][0]["score"] == {"home": 2.5, "away": 1}
    assert type(buckets["today"][0]["score"]["away"]) is int
