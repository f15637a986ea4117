from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .models import TransactionRecord

# ---------- Explicit dates ----------
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_SLASH_DATE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})(?!\d)")

# ---------- Day ranges (checked in this order) ----------
_RANGE_PATTERNS = [
    re.compile(r"(\d+)\s*-\s*(\d+)"),
    re.compile(r"من\s*يوم\s*(\d+)\s*(?:ل|إلى|الى)\s*(?:يوم\s*)?(\d+)?"),
    re.compile(r"from\s*(?:day\s*)?(\d+)\s*(?:to|till|until)\s*(?:day\s*)?(\d+)"),
    re.compile(r"men\s*yom\s*(\d+)\s*(?:le|l|la)\s*(?:yom\s*)?(\d+)?"),
]
RANGE_DEFAULT_SPAN = 10

# ---------- Single day ----------
_DAY_PATTERNS = [
    re.compile(r"يوم\s*(\d+)"),
    re.compile(r"yom\s*(\d+)"),
    re.compile(r"\bday\s*(\d+)"),
]

_TEMPORAL_MARKERS = (
    "يوم", "اليوم", "امبارح", "من يوم", "لحد يوم",
    "yom", "el yom", "embareh",
    "today", "yesterday",
)


@dataclass(frozen=True)
class TemporalQuery:
    explicit_date: Optional[str] = None   # ISO string, or "D/M" as typed
    day_number: Optional[int] = None
    range_start: Optional[int] = None
    range_end: Optional[int] = None
    has_marker: bool = False
    malformed: bool = False   # a number was given but is not a usable day/range

    @property
    def has_range(self) -> bool:
        return self.range_start is not None and self.range_end is not None

    @property
    def has_value(self) -> bool:
        return self.has_range or self.day_number is not None or self.explicit_date is not None

    @property
    def is_temporal(self) -> bool:
        return self.has_value or self.has_marker


@dataclass(frozen=True)
class DateFilter:
    """A concrete restriction of the record set: one date, or a day-of-month span."""
    date: Optional[str] = None
    range_start: Optional[int] = None
    range_end: Optional[int] = None

    @property
    def is_range(self) -> bool:
        return self.range_start is not None

    def apply(self, records: Iterable[TransactionRecord]) -> List[TransactionRecord]:
        if self.is_range:
            return [r for r in records if self.range_start <= r.day <= self.range_end]
        return [r for r in records if r.date == self.date]


def _valid_day(n: Optional[int]) -> bool:
    return n is not None and 1 <= n <= 31


def _find_range(text: str):
    """Return (start, end, malformed)."""
    for pat in _RANGE_PATTERNS:
        m = pat.search(text)
        if not m:
            continue
        start = int(m.group(1))
        end = int(m.group(2)) if m.group(2) else start + RANGE_DEFAULT_SPAN
        if not _valid_day(start) or end < start:
            return None, None, True
        return start, end, False
    return None, None, False


def extract_temporal(utterance: str) -> TemporalQuery:
    """
    Pull an explicit date, a day range, or a single day number out of the
    question. A range wins over a single day; only the first explicit date
    counts. Marker words ("today", "يوم", ...) flag the query as temporal
    even when no number resolves.
    """
    text = (utterance or "").lower()

    explicit = None
    m = _ISO_DATE.search(text)
    if m:
        explicit = m.group(0)
    else:
        m = _SLASH_DATE.search(text)
        if m and _valid_day(int(m.group(1))) and 1 <= int(m.group(2)) <= 12:
            explicit = m.group(0)

    # dates must not be read back as "N-M" ranges
    scan = _SLASH_DATE.sub(" ", _ISO_DATE.sub(" ", text))

    start, end, malformed = _find_range(scan)
    day = None
    if start is None and not malformed:
        for pat in _DAY_PATTERNS:
            dm = pat.search(scan)
            if dm:
                n = int(dm.group(1))
                if _valid_day(n):
                    day = n
                else:
                    malformed = True
                break

    return TemporalQuery(
        explicit_date=explicit,
        day_number=day,
        range_start=start,
        range_end=end,
        has_marker=any(k in text for k in _TEMPORAL_MARKERS),
        malformed=malformed,
    )


def _dates_desc(records: Sequence[TransactionRecord]) -> List[str]:
    return sorted({r.date for r in records}, reverse=True)


def _dates_in_order(records: Sequence[TransactionRecord]) -> List[str]:
    return list(dict.fromkeys(r.date for r in records))


def latest_date(records: Sequence[TransactionRecord]) -> Optional[str]:
    dates = _dates_desc(records)
    return dates[0] if dates else None


def resolve_dates(query: TemporalQuery, records: Sequence[TransactionRecord]) -> Optional[DateFilter]:
    """
    Turn extracted values into a filter over `records`.
    Returns None when nothing usable resolves (no number and no data, or a
    day number that no record carries).
    """
    if query.malformed and not query.explicit_date:
        return None
    if query.has_range:
        return DateFilter(range_start=query.range_start, range_end=query.range_end)

    if query.day_number is not None:
        # last match in record order; the store hands records newest first
        matches = [d for d in _dates_in_order(records) if int(d.split("-")[2]) == query.day_number]
        return DateFilter(date=matches[-1]) if matches else None

    dates = _dates_desc(records)
    if query.explicit_date:
        if _ISO_DATE.fullmatch(query.explicit_date):
            return DateFilter(date=query.explicit_date)
        day, month = (int(x) for x in query.explicit_date.split("/"))
        for d in dates:
            _, mm, dd = (int(x) for x in d.split("-"))
            if dd == day and mm == month:
                return DateFilter(date=d)
        return None

    if query.has_marker and dates:
        return DateFilter(date=dates[0])
    return None
