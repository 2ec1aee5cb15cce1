import argparse
from pathlib import Path

from pydantic import ValidationError

from src.api.state_store import DATA_PATH, MatchStore


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate a day-bucket matches file")
    parser.add_argument("--data", default=str(DATA_PATH))
    args = parser.parse_args(argv)

    path = Path(args.data)
    if not path.exists():
        raise SystemExit(f"Missing {path}. Run src.ingest.build_matches first.")

    try:
        store = MatchStore.from_file(path)
    except ValidationError as e:
        raise SystemExit(f"Invalid {path}:\n{e}")

    dupes = store.duplicate_ids()
    if dupes:
        raise SystemExit(f"Duplicate match ids in {path}: {dupes}")

    print("OK:", path)
    print("Matches:", store.counts())


if __name__ == "__main__":
    main()
