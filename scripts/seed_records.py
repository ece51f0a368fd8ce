from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Iterator

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from rowcycle.bootstrap import bootstrap_schema  # noqa: E402
from rowcycle.db import Database, count_records, insert_records  # noqa: E402
from rowcycle.logging_utils import configure_logging  # noqa: E402


def read_lines(path: Path) -> Iterator[str]:
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            value = line.strip()
            if value:
                yield value


def main() -> None:
    parser = argparse.ArgumentParser(description="Insert records into tbl_test out-of-band")
    parser.add_argument("texts", nargs="*", help="Record payloads to insert")
    parser.add_argument("--file", type=Path, help="Text file with one payload per line")
    parser.add_argument("--database-url", help="Override DATABASE_URL / MYSQL* settings")
    parser.add_argument("--force", action="store_true", help="Seed even if the table already has rows")
    args = parser.parse_args()

    configure_logging()
    texts = list(args.texts)
    if args.file:
        texts.extend(read_lines(args.file))
    if not texts:
        parser.error("nothing to insert: pass TEXT arguments or --file")

    database = Database(args.database_url)
    try:
        if not bootstrap_schema(database):
            raise SystemExit("Schema bootstrap failed; see log for details.")

        existing_count = count_records(database)
        if existing_count > 0 and not args.force:
            print(f"tbl_test already has {existing_count} rows; skipping seed (use --force to reseed).")
            return

        inserted = insert_records(database, texts)
        print(f"Inserted rows in this run: {inserted}")
        print(f"Total rows in tbl_test: {count_records(database)}")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
