#!/usr/bin/env python
"""
Database initialization script for the IMDb dataset dumps.

This script performs a complete database setup:
1. Creates database schema (tables, indexes, constraints)
2. Imports titles from title.basics.tsv (movies only by default)
3. Imports ratings from title.ratings.tsv
4. Imports people from name.basics.tsv
5. Imports principal cast/crew from title.principals.tsv

Files may be plain .tsv or gzipped .tsv.gz, as downloaded from
https://datasets.imdbws.com/. IMDb marks missing values with '\\N'; those
become NULL. Rows referencing titles or people that were not imported are
skipped.

Usage:
    # Full import into the default database
    python scripts/init_database.py --data-dir data/imdb --reset

    # Only movies with at least 100 votes
    python scripts/init_database.py --data-dir data/imdb --reset --min-votes 100
"""

import argparse
import csv
import gzip
import sys
import time
from pathlib import Path
from typing import Dict, Iterator, Optional, Set

from reelpick.core.suggest.movie import parse_float, parse_int
from reelpick.database import init_database, verify_schema
from reelpick.database.connection import DEFAULT_DB_PATH
from reelpick.database.models import Title, TitleRating, Person, Principal
from reelpick.utils.logging_config import configure_script_logging, get_logger

logger = get_logger(__name__)

MISSING = "\\N"
BATCH_SIZE = 5000

csv.field_size_limit(sys.maxsize)


def _value(row: Dict[str, str], key: str) -> Optional[str]:
    value = row.get(key)
    return None if value is None or value == MISSING else value


def find_file(data_dir: Path, name: str) -> Optional[Path]:
    """Locate `name`.tsv or `name`.tsv.gz in the data directory."""
    for candidate in (data_dir / f"{name}.tsv", data_dir / f"{name}.tsv.gz"):
        if candidate.exists():
            return candidate
    return None


def read_tsv(path: Path) -> Iterator[Dict[str, str]]:
    """Yield rows of an IMDb TSV file as dicts."""
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rt", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f, delimiter="\t", quoting=csv.QUOTE_NONE)
        yield from reader


def _flush(session, batch: list) -> int:
    if not batch:
        return 0
    session.bulk_save_objects(batch)
    session.commit()
    count = len(batch)
    batch.clear()
    return count


def import_titles(session, path: Path, title_types: Set[str]) -> Set[str]:
    """Import title.basics rows of the given types; returns the imported ids."""
    imported: Set[str] = set()
    batch = []
    for row in read_tsv(path):
        title_type = _value(row, "titleType")
        if title_type not in title_types:
            continue
        genres = _value(row, "genres")
        batch.append(Title(
            tconst=row["tconst"],
            title_type=title_type,
            primary_title=_value(row, "primaryTitle") or "",
            original_title=_value(row, "originalTitle"),
            start_year=parse_int(_value(row, "startYear")),
            runtime_minutes=parse_int(_value(row, "runtimeMinutes")),
            genres=genres.replace(",", ", ") if genres else None,
        ))
        imported.add(row["tconst"])
        if len(batch) >= BATCH_SIZE:
            _flush(session, batch)
    _flush(session, batch)
    logger.info(f"Imported {len(imported)} titles")
    return imported


def import_ratings(session, path: Path, titles: Set[str], min_votes: int) -> Set[str]:
    """Import title.ratings for known titles; returns ids of rated titles kept."""
    kept: Set[str] = set()
    batch = []
    for row in read_tsv(path):
        tconst = row["tconst"]
        if tconst not in titles:
            continue
        num_votes = parse_int(_value(row, "numVotes"))
        if (num_votes or 0) < min_votes:
            continue
        batch.append(TitleRating(
            tconst=tconst,
            average_rating=parse_float(_value(row, "averageRating")),
            num_votes=num_votes,
        ))
        kept.add(tconst)
        if len(batch) >= BATCH_SIZE:
            _flush(session, batch)
    _flush(session, batch)
    logger.info(f"Imported {len(kept)} ratings")
    return kept


def collect_principal_people(path: Path, titles: Set[str]) -> Set[str]:
    """Ids of people credited on any of the given titles."""
    return {row["nconst"] for row in read_tsv(path) if row["tconst"] in titles}


def import_people(session, path: Path, people: Set[str]) -> int:
    """Import name.basics rows for the given people."""
    count = 0
    batch = []
    for row in read_tsv(path):
        if row["nconst"] not in people:
            continue
        batch.append(Person(nconst=row["nconst"], primary_name=_value(row, "primaryName") or ""))
        if len(batch) >= BATCH_SIZE:
            count += _flush(session, batch)
    count += _flush(session, batch)
    logger.info(f"Imported {count} people")
    return count


def import_principals(session, path: Path, titles: Set[str], people: Set[str]) -> int:
    """Import title.principals rows linking known titles and people."""
    count = 0
    batch = []
    for row in read_tsv(path):
        if row["tconst"] not in titles or row["nconst"] not in people:
            continue
        ordering = parse_int(_value(row, "ordering"))
        if ordering is None:
            continue
        batch.append(Principal(
            tconst=row["tconst"],
            ordering=ordering,
            nconst=row["nconst"],
            category=_value(row, "category"),
            job=_value(row, "job"),
            characters=_value(row, "characters"),
        ))
        if len(batch) >= BATCH_SIZE:
            count += _flush(session, batch)
    count += _flush(session, batch)
    logger.info(f"Imported {count} principal credits")
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import IMDb dataset dumps into the ReelPick database")
    parser.add_argument("--data-dir", type=Path, default=Path("data") / "imdb",
                        help="Directory containing the IMDb .tsv/.tsv.gz files")
    parser.add_argument("--db-path", default=DEFAULT_DB_PATH, help="SQLite database file")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    parser.add_argument("--min-votes", type=int, default=0,
                        help="Skip titles with fewer votes than this")
    parser.add_argument("--title-types", default="movie",
                        help="Comma-separated title types to import (default: movie)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_script_logging(debug=args.debug)

    files = {name: find_file(args.data_dir, name)
             for name in ("title.basics", "title.ratings", "name.basics", "title.principals")}
    missing = [name for name, path in files.items() if path is None]
    if missing:
        logger.error(f"Missing IMDb files in {args.data_dir}: {', '.join(missing)}")
        return 1

    start = time.time()
    db_manager = init_database(db_path=args.db_path, reset=args.reset)
    title_types = {t.strip() for t in args.title_types.split(",") if t.strip()}

    with db_manager.session_scope() as session:
        titles = import_titles(session, files["title.basics"], title_types)
        rated = import_ratings(session, files["title.ratings"], titles, args.min_votes)
        if args.min_votes > 0:
            # unrated titles can never pass the popularity floor
            titles &= rated
        people = collect_principal_people(files["title.principals"], titles)
        import_people(session, files["name.basics"], people)
        import_principals(session, files["title.principals"], titles, people)

    ok = verify_schema(db_manager)
    logger.info(f"Done in {time.time() - start:.1f}s")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
