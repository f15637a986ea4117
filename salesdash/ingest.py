from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from rapidfuzz import fuzz

from .config import (
    ALLOWED_TYPES, HEADER_ROWS, STORE_BLOCK_WIDTH, STORE_MATCH_MIN_SCORE, STORES,
)
from .models import TransactionRecord

LOGGER = logging.getLogger(__name__)

SUMMARY_LABELS = {"total", "sum", "average", ""}
_ISO_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")


class IngestError(ValueError):
    pass


# -----------------------
# Cell helpers
# -----------------------
def excel_serial_to_date(value: float) -> Optional[date]:
    """
    Excel's bug-adjusted epoch is 1899-12-30. Only plausible serials
    (~1954..2064) are accepted so order counts are never read as dates.
    """
    if not 20000 <= value <= 60000:
        return None
    return (pd.Timestamp("1899-12-30") + pd.to_timedelta(float(value), unit="D")).date()


def coerce_date(cell: Any) -> Optional[str]:
    """Return the ISO date string for a first-column cell, or None for non-data rows."""
    if cell is None or (pd.api.types.is_scalar(cell) and pd.isna(cell)):
        return None
    if isinstance(cell, (datetime, date)):
        return pd.Timestamp(cell).date().isoformat()
    if pd.api.types.is_number(cell):
        d = excel_serial_to_date(float(cell))
        return d.isoformat() if d else None

    s = str(cell).strip()
    if s.lower() in SUMMARY_LABELS or not re.search(r"\d", s):
        return None
    m = _ISO_RE.match(s)
    if m:
        y, mo, dd = (int(x) for x in m.groups())
        try:
            return date(y, mo, dd).isoformat()
        except ValueError:
            return None
    d = pd.to_datetime(s, errors="coerce", dayfirst=True)
    return None if pd.isna(d) else d.date().isoformat()


def _number(cell: Any) -> float:
    v = pd.to_numeric(pd.Series([cell]), errors="coerce").iloc[0]
    return 0.0 if pd.isna(v) else float(v)


# -----------------------
# Layout detection
# -----------------------
def locate_store_columns(header: pd.DataFrame, stores: Sequence[str] = STORES) -> Dict[str, int]:
    """
    Map each store to its "orders" column. Header cells naming a store are
    matched fuzzily; if any store is missing from the header the fixed
    layout (blocks of three columns after the date) is used.
    """
    found: Dict[str, tuple] = {}
    for _, row in header.iterrows():
        for col, cell in row.items():
            if cell is None or (isinstance(cell, float) and pd.isna(cell)):
                continue
            text = str(cell).strip().lower()
            if not text:
                continue
            for store in stores:
                sc = fuzz.ratio(text, store.lower())
                if sc >= STORE_MATCH_MIN_SCORE and (store not in found or sc > found[store][1]):
                    found[store] = (int(col), sc)

    if len(found) == len(stores):
        return {s: found[s][0] for s in stores}
    return {s: 1 + i * STORE_BLOCK_WIDTH for i, s in enumerate(stores)}


# -----------------------
# Public API
# -----------------------
def _source_name(source: Any) -> Optional[str]:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", None)


def parse_frame(raw: pd.DataFrame, stores: Sequence[str] = STORES) -> List[TransactionRecord]:
    """
    Turn a header-less sheet into records. One record per (date row, store)
    with any orders or sales; summary and blank rows are skipped.
    """
    header = raw.iloc[:HEADER_ROWS]
    cols = locate_store_columns(header, stores)
    out: List[TransactionRecord] = []

    for i in range(HEADER_ROWS, len(raw)):
        row = raw.iloc[i]
        day = coerce_date(row.iloc[0]) if len(row) else None
        if day is None:
            LOGGER.debug("skipping row %d: no date in %r", i, row.iloc[0] if len(row) else None)
            continue
        for store in stores:
            oc = cols[store]
            orders = _number(row.iloc[oc]) if oc < len(row) else 0.0
            sales = _number(row.iloc[oc + 1]) if oc + 1 < len(row) else 0.0
            if orders > 0 or sales > 0:
                out.append(TransactionRecord(date=day, store_name=store,
                                             orders=int(round(orders)), sales=sales))
    return out


def parse_workbook(source: Any, stores: Sequence[str] = STORES) -> List[TransactionRecord]:
    """
    Read the first sheet of an .xlsx/.xls export (path or uploaded file
    object) into normalized records.
    """
    name = _source_name(source)
    if name and Path(name).suffix.lower().lstrip(".") not in ALLOWED_TYPES:
        raise IngestError(f"Please upload an Excel file (.xlsx or .xls), got {Path(name).name}")

    try:
        raw = pd.read_excel(source, sheet_name=0, header=None)
    except Exception as e:
        raise IngestError(f"Could not parse the Excel file: {e}") from e

    records = parse_frame(raw, stores)
    if not records:
        raise IngestError("The Excel file appears to be empty or in an unexpected format.")
    LOGGER.info("parsed %d records from %s", len(records), name or "upload")
    return records
