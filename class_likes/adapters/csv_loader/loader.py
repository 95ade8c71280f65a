"""CSV loader — reads the static class schedule feed."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from class_likes.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_non_negative_int,
)
from class_likes.application.ports.schedule_repo import ScheduleRepository
from class_likes.domain.entities.class_session import ClassSession

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "subject", "day", "date", "time", "location", "professor")

# Header spellings seen in exported sheets → canonical column
COLUMN_ALIASES: dict[str, str] = {
    "classid": "id",
    "class_id": "id",
    "initiallikes": "initial_likes",
    "likes": "initial_likes",
}


def _sniff_dialect(sample: str) -> type[csv.Dialect] | csv.Dialect:
    """Detect the delimiter (comma/semicolon/tab) from the header line."""
    if not sample:
        return csv.get_dialect("excel")

    first_line = sample.splitlines()[0]
    delims = [",", ";", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.get_dialect("excel")


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization."""
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {}
        for col in reader.fieldnames:
            normalized = normalize_column_name(col)
            col_map[col] = COLUMN_ALIASES.get(normalized, normalized)
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_schedule(file_path: Path) -> list[ClassSession]:
    """Load the schedule CSV.

    Expected columns (after normalization):
        id, subject, day, date, time, location, professor,
        room (optional), category (optional), initial_likes (optional)

    Rows missing a required value are skipped with a warning; a duplicate
    id keeps the first row.
    """
    rows = _read_csv(file_path)
    sessions: list[ClassSession] = []
    seen: set[str] = set()

    for line_no, row in enumerate(rows, start=2):
        missing = [c for c in REQUIRED_COLUMNS if not row.get(c)]
        if missing:
            logger.warning("%s line %d: missing %s, skipped", file_path.name, line_no, ", ".join(missing))
            continue
        if row["id"] in seen:
            logger.warning("%s line %d: duplicate id %s, skipped", file_path.name, line_no, row["id"])
            continue
        seen.add(row["id"])
        sessions.append(
            ClassSession(
                id=row["id"],
                subject=row["subject"],
                day=row["day"],
                date=row["date"],
                time=row["time"],
                location=row["location"],
                professor=row["professor"],
                room=row.get("room"),
                category=row.get("category"),
                initial_likes=parse_non_negative_int(row.get("initial_likes")),
            )
        )
    return sessions


class CsvScheduleRepository(ScheduleRepository):
    """Schedule read once from CSV and kept in memory (the feed is static)."""

    def __init__(self, file_path: str | Path):
        self._path = Path(file_path)
        self._sessions: list[ClassSession] | None = None

    def get_all(self) -> list[ClassSession]:
        if self._sessions is None:
            if not self._path.exists():
                logger.warning("Schedule file %s not found; serving an empty schedule", self._path)
                return []
            self._sessions = load_schedule(self._path)
        return list(self._sessions)
