#!/usr/bin/env python3
"""
txt_import.py
-------------
Import a hand-written drinks log into the database.

Each line of the log records one entry:

    (date context), quantity, name[, abv[, volume]]

    (1 oct, evening), 2, Guinness, 4.2%, 568 mL?
    , 1, Laphroaig 10, 40%, 25 mL
    (oct 2; brunch; hotel), ~2, Mimosa

The parenthesised date context is optional. When present it holds a day
("1 oct" or "oct 2") followed by up to two words, separated by commas or
semicolons. A time-of-day word sets the entry's period; "brunch" means
afternoon; the other word is kept as context. Without a time word the
period carries over from the previous line on the same day and defaults
to night on a new day. Without any date context the previous line's
context is reused. Lines are read in order and years are implicit: the
log starts in 2018 and every "1 jan" moves to the next year.

Lines that cannot be parsed are reported and skipped; database errors
abort the import and roll it back.

Usage:
    drinklog import path/to/drinks.csv
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Tuple

from drinklog.core.exceptions import ImportParseError, ValidationError
from drinklog.core.logging_manager import DrinkLogLogger, safe_logger
from drinklog.database.manager import DrinkLogDB
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.enums import TimePeriod, VolumeUnit
from drinklog.ledger.parsers import (
    multiplier_for_name,
    parse_abv,
    parse_quantity,
    parse_volume,
)

LOG_START = date(2018, 1, 1)

_LINE = re.compile(
    r"(?:\((?P<date>.*?)\))?,?(?P<quantity>.*?),(?P<name>.*?)"
    r"(?:,(?P<abv>.*?)(?:,(?P<volume>.*?))?)?$"
)
_DATE_CONTEXT = re.compile(
    r"^(?P<day>(?:\d{1,2}\s\w{3})|(?:\w{3}\s\d{1,2}))?[,; ]*"
    r"(?:(?P<context2>[^\r\n;,]*?)[;,]?)?"
    r"(?:(?P<context1>[^\r\n;,]*?)[;,]?)?$"
)
_MONTHS = {
    name: number
    for number, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun",
         "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}
BRUNCH = "brunch"


class ImportStats:
    """Track import statistics."""

    def __init__(self) -> None:
        self.lines_read: int = 0
        self.entries_created: int = 0
        self.drinks_created: int = 0
        self.errors: int = 0
        self.failures: List[Tuple[int, str]] = []
        self.start_time: datetime = datetime.now()

    def record_failure(self, line_number: int, message: str) -> None:
        self.errors += 1
        self.failures.append((line_number, message))

    def duration(self) -> float:
        """Get elapsed time in seconds."""
        return (datetime.now() - self.start_time).total_seconds()

    def summary(self) -> str:
        """Get formatted summary."""
        return (
            f"{self.lines_read} lines, "
            f"{self.entries_created} entries created, "
            f"{self.drinks_created} drinks created, "
            f"{self.errors} errors in {self.duration():.2f}s"
        )


def setup_logger(log_dir: Path) -> DrinkLogLogger:
    """Setup logging for import operations."""
    operations_log_dir: Path = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return DrinkLogLogger(operations_log_dir, component_name="txt_import")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class RawEntry:
    """The comma-separated fields of one log line, unparsed."""

    date: Optional[str]
    quantity: Optional[str]
    name: Optional[str]
    abv: Optional[str] = None
    volume: Optional[str] = None

    @classmethod
    def from_line(cls, line: str) -> Optional["RawEntry"]:
        """Split a log line; None if it has no quantity/name separator."""
        match = _LINE.match(line.strip())
        if match is None:
            return None
        return cls(
            date=_clean(match.group("date")),
            quantity=_clean(match.group("quantity")),
            name=_clean(match.group("name")),
            abv=_clean(match.group("abv")),
            volume=_clean(match.group("volume")),
        )


@dataclass(frozen=True)
class DateContext:
    """
    When an entry was drunk, as carried from line to line.

    Attributes:
        drank_on: Calendar date
        time: Time of day
        context: Extra words from the date field ("brunch", "pub")
    """

    drank_on: date
    time: TimePeriod
    context: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def initial(cls) -> "DateContext":
        return cls(LOG_START, TimePeriod.EVENING, ())

    @classmethod
    def from_entry(cls, entry: RawEntry, previous: "DateContext") -> "DateContext":
        """
        Resolve an entry's date field against the previous line's context.

        Raises:
            ImportParseError: If the field names two times of day or an
                impossible date
        """
        if entry.date is None:
            return previous

        match = _DATE_CONTEXT.match(entry.date)
        if match is None:
            raise ImportParseError(f"Unreadable date context: {entry.date!r}")

        def group(name: str) -> Optional[str]:
            value = _clean(match.group(name))
            return value.lower() if value else None

        day = group("day")
        drank_on = cls.parse_day(day, previous.drank_on) if day else previous.drank_on
        context1, context2 = group("context1"), group("context2")
        time1, time2 = TimePeriod.from_str(context1), TimePeriod.from_str(context2)

        if time1 is not None and time2 is not None:
            raise ImportParseError(
                f"Found two time strings: {context1!r} and {context2!r}"
            )
        time = time1 or time2
        if time is None:
            if BRUNCH in (context1, context2):
                time = TimePeriod.AFTERNOON
            elif drank_on == previous.drank_on:
                time = previous.time
            else:
                time = TimePeriod.NIGHT

        context = tuple(
            word for word in (context1, context2)
            if word is not None and word != time.value
        )
        return cls(drank_on, time, context)

    @staticmethod
    def parse_day(text: str, previous: date) -> date:
        """
        Parse "1 oct" or "oct 1" in the year of ``previous``.

        New Year's Day starts the following year.

        Raises:
            ImportParseError: If the text is not a valid day of a month
        """
        parts = text.lower().split()
        if len(parts) != 2:
            raise ImportParseError(f"Unreadable day: {text!r}")
        day_text, month_text = (parts if parts[0].isdigit() else parts[::-1])
        month = _MONTHS.get(month_text[:3])
        if month is None or not day_text.isdigit():
            raise ImportParseError(f"Unreadable day: {text!r}")

        day = int(day_text)
        year = previous.year + 1 if (day, month) == (1, 1) else previous.year
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ImportParseError(f"Invalid day {text!r}: {e}") from e


@dataclass(frozen=True)
class ImportedEntry:
    """A fully parsed log line, ready to be stored."""

    when: DateContext
    name: str
    quantity: Tuple[ApproximateValue, ApproximateValue]
    abv: Optional[Tuple[ApproximateValue, ApproximateValue]] = None
    volume: Optional[Tuple[ApproximateValue, VolumeUnit]] = None

    @property
    def multiplier(self) -> float:
        return multiplier_for_name(self.name)


def parse_line(line: str, previous: DateContext) -> ImportedEntry:
    """
    Parse one log line.

    Raises:
        ImportParseError: If the line layout or date context is unreadable
        ValidationError: If the quantity, ABV or volume is malformed
    """
    raw = RawEntry.from_line(line)
    if raw is None:
        raise ImportParseError(f"Failed to parse {line.strip()!r}")
    if raw.name is None:
        raise ImportParseError(f"No drink name in {line.strip()!r}")

    when = DateContext.from_entry(raw, previous)
    return ImportedEntry(
        when=when,
        name=raw.name,
        quantity=parse_quantity(raw.quantity),
        abv=parse_abv(raw.abv),
        volume=parse_volume(raw.volume),
    )


def import_file(
    file_path: Path,
    db: DrinkLogDB,
    person_id: int = 1,
    logger: Optional[DrinkLogLogger] = None,
    dry_run: bool = False,
) -> ImportStats:
    """
    Import every line of a log file for one person.

    Args:
        file_path: Log file (UTF-8 text)
        db: Database manager instance
        person_id: Owner of the imported entries; created if missing
        logger: Optional logger
        dry_run: Parse and report without writing to the database

    Returns:
        ImportStats with processing results

    Raises:
        ImportParseError: If the file cannot be read
        DatabaseError: If a write fails; nothing is imported in that case
    """
    log = safe_logger(logger)
    stats = ImportStats()

    try:
        lines = Path(file_path).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise ImportParseError(f"Cannot read {file_path}: {e}") from e

    log.log_operation(
        "import_start",
        {"file": str(file_path), "lines": len(lines), "dry_run": dry_run},
    )

    parsed: List[ImportedEntry] = []
    previous = DateContext.initial()
    for number, line in enumerate(lines, start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        stats.lines_read += 1
        try:
            entry = parse_line(line, previous)
        except (ImportParseError, ValidationError) as e:
            stats.record_failure(number, str(e))
            log.log_warning(f"Skipping line {number}", {"line": line, "error": str(e)})
            continue
        previous = entry.when
        parsed.append(entry)

    if not dry_run and parsed:
        with db.session_scope():
            db.people.get_or_create(person_id)
            for entry in parsed:
                low, high = entry.abv if entry.abv else (None, None)
                drink = db.drinks.find(entry.name, low, high, entry.multiplier)
                if drink is None:
                    drink = db.drinks.register(entry.name, low, high, entry.multiplier)
                    stats.drinks_created += 1

                volume, unit = entry.volume if entry.volume else (None, None)
                db.entries.create(
                    {
                        "person_id": person_id,
                        "drink_id": drink.id,
                        "drank_on": entry.when.drank_on,
                        "time_period": entry.when.time,
                        "min_quantity": entry.quantity[0],
                        "max_quantity": entry.quantity[1],
                        "volume": volume,
                        "volume_unit": unit,
                    }
                )
                stats.entries_created += 1

    log.log_operation("import_complete", {"stats": stats.summary()})
    return stats
