from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .config import CHART_DAYS, DEFAULT_TARGETS, STORES
from .models import DashboardContext, StorePerformance, StoreTarget, TransactionRecord


def _progress(sales: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return max(0.0, min(100.0, sales / target * 100))


def _resolve_target(store: str,
                    targets: Sequence[StoreTarget],
                    default_targets: Mapping[str, float],
                    month: Optional[int] = None,
                    year: Optional[int] = None) -> float:
    for t in targets:
        if t.store_name != store:
            continue
        if month is not None and t.month != month:
            continue
        if year is not None and t.year != year:
            continue
        if t.target:
            return float(t.target)
    return float(default_targets.get(store, 0))


def aggregate(records: Iterable[TransactionRecord],
              targets: Sequence[StoreTarget] = (),
              store_list: Sequence[str] = STORES,
              default_targets: Mapping[str, float] = DEFAULT_TARGETS,
              month: Optional[int] = None,
              year: Optional[int] = None) -> DashboardContext:
    """
    Reduce raw records into the dashboard snapshot.

    Totals cover every record, including ones whose store is not in
    `store_list`; per-store rows follow `store_list` order and appear even
    when a store has no records.
    """
    rows = tuple(records)
    total_sales = sum(r.sales for r in rows)
    total_orders = sum(r.orders for r in rows)
    avg = total_sales / total_orders if total_orders > 0 else 0.0

    perf: List[StorePerformance] = []
    for name in store_list:
        mine = [r for r in rows if r.store_name == name]
        sales = sum(r.sales for r in mine)
        orders = sum(r.orders for r in mine)
        target = _resolve_target(name, targets, default_targets, month, year)
        perf.append(StorePerformance(name=name, sales=sales, orders=orders,
                                     target=target, progress=_progress(sales, target)))

    return DashboardContext(
        total_sales=total_sales,
        total_orders=total_orders,
        avg_order_value=avg,
        store_performance=tuple(perf),
        sales_data=rows,
    )


def records_frame(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    df = pd.DataFrame([r.to_dict() for r in records],
                      columns=["date", "store_name", "orders", "sales"])
    return df


def daily_series(records: Iterable[TransactionRecord], last: int = CHART_DAYS) -> pd.DataFrame:
    """Per-date totals, ascending, limited to the last `last` dates. Columns: date, sales, orders."""
    df = records_frame(records)
    if df.empty:
        return pd.DataFrame(columns=["date", "sales", "orders"])
    out = (df.assign(date=pd.to_datetime(df["date"], errors="coerce"))
             .dropna(subset=["date"])
             .groupby("date", as_index=False)[["sales", "orders"]].sum()
             .sort_values("date"))
    if last:
        out = out.tail(last)
    return out.reset_index(drop=True)


def target_progress(context: DashboardContext) -> float:
    total_target = sum(s.target for s in context.store_performance)
    if total_target <= 0:
        return 0.0
    return context.total_sales / total_target * 100


def avg_orders_per_day(records: Iterable[TransactionRecord]) -> float:
    rows = list(records)
    days = len({r.date for r in rows})
    if not days:
        return 0.0
    return sum(r.orders for r in rows) / days


def branch_summary(records: Iterable[TransactionRecord], store: str, target: float) -> Dict[str, float]:
    mine = [r for r in records if r.store_name == store]
    sales = sum(r.sales for r in mine)
    return {
        "sales": sales,
        "orders": sum(r.orders for r in mine),
        "target": target,
        "progress": _progress(sales, target),
        "achieved": sales,
        "remaining": max(0.0, target - sales),
    }
