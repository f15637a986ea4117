from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TransactionRecord:
    """One day of one store: date is the ISO string written by ingestion."""
    date: str
    store_name: str
    orders: int
    sales: float

    @property
    def day(self) -> int:
        return int(self.date.split("-")[2])

    @property
    def month_key(self) -> str:
        return self.date[:7]

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "TransactionRecord":
        # persistence rows use store_name, the wire shape uses storeName
        store = row.get("store_name", row.get("storeName"))
        return cls(
            date=str(row["date"])[:10],
            store_name=str(store),
            orders=int(row.get("orders") or 0),
            sales=float(row.get("sales") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "store_name": self.store_name,
            "orders": self.orders,
            "sales": self.sales,
        }


@dataclass(frozen=True)
class StoreTarget:
    store_name: str
    month: int
    year: int
    target: float


@dataclass(frozen=True)
class StorePerformance:
    name: str
    sales: float
    orders: int
    target: float
    progress: float

    @property
    def remaining(self) -> float:
        return max(0.0, self.target - self.sales)


@dataclass(frozen=True)
class DashboardContext:
    """
    Snapshot handed to the query engine. Built fresh by metrics.aggregate()
    on every refresh and never mutated afterwards.
    """
    total_sales: float = 0.0
    total_orders: int = 0
    avg_order_value: float = 0.0
    store_performance: Tuple[StorePerformance, ...] = field(default_factory=tuple)
    sales_data: Tuple[TransactionRecord, ...] = field(default_factory=tuple)

    def find_store(self, name: str) -> Optional[StorePerformance]:
        for store in self.store_performance:
            if store.name == name:
                return store
        return None
