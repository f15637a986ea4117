from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .config import CACHE_DIR, SALES_FILE, TARGETS_FILE
from .models import StoreTarget, TransactionRecord

LOGGER = logging.getLogger(__name__)

SALES_COLUMNS = ["date", "store_name", "orders", "sales"]
TARGET_COLUMNS = ["store_name", "month", "year", "target"]


class SalesStore:
    """
    Parquet-backed record store: one file of daily store rows, one of
    monthly targets. Uploads replace a whole month at a time.
    """

    def __init__(self, root: str | Path = CACHE_DIR):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.sales_path = self.root / SALES_FILE
        self.targets_path = self.root / TARGETS_FILE

    # -------- reads --------
    def _read(self, path: Path, columns: List[str]) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame(columns=columns)
        return pd.read_parquet(path)

    def sales_frame(self) -> pd.DataFrame:
        return self._read(self.sales_path, SALES_COLUMNS)

    def load_records(self, store_name: Optional[str] = None) -> List[TransactionRecord]:
        """Most recent first, like the dashboard table."""
        df = self.sales_frame()
        if store_name is not None:
            df = df[df["store_name"] == store_name]
        df = df.sort_values("date", ascending=False, kind="stable")
        return [TransactionRecord.from_mapping(row) for row in df.to_dict("records")]

    def load_targets(self) -> List[StoreTarget]:
        df = self._read(self.targets_path, TARGET_COLUMNS)
        return [
            StoreTarget(store_name=str(r["store_name"]), month=int(r["month"]),
                        year=int(r["year"]), target=float(r["target"]))
            for r in df.to_dict("records")
        ]

    # -------- writes --------
    def replace_month(self, records: Iterable[TransactionRecord]) -> int:
        """
        Delete every stored row in the month of the first new record, then
        insert the new records. Returns the number inserted.
        """
        records = list(records)
        if not records:
            return 0
        month = records[0].month_key
        current = self.sales_frame()
        if not current.empty:
            current = current[current["date"].astype(str).str[:7] != month]
        new = pd.DataFrame([r.to_dict() for r in records], columns=SALES_COLUMNS)
        merged = pd.concat([current, new], ignore_index=True) if not current.empty else new
        merged.to_parquet(self.sales_path, index=False)
        LOGGER.info("replaced %s with %d records", month, len(new))
        return len(new)

    def set_target(self, store_name: str, month: int, year: int, target: float) -> None:
        df = self._read(self.targets_path, TARGET_COLUMNS)
        if not df.empty:
            keep = ~((df["store_name"] == store_name) & (df["month"] == month) & (df["year"] == year))
            df = df[keep]
        row = pd.DataFrame([{"store_name": store_name, "month": month, "year": year, "target": float(target)}],
                           columns=TARGET_COLUMNS)
        df = pd.concat([df, row], ignore_index=True) if not df.empty else row
        df.to_parquet(self.targets_path, index=False)
