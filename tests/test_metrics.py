import pytest

from salesdash.config import DEFAULT_TARGETS, STORES
from salesdash.metrics import (
    aggregate, avg_orders_per_day, branch_summary, daily_series, target_progress,
)
from salesdash.models import StoreTarget, TransactionRecord


def rec(date, store, orders, sales):
    return TransactionRecord(date=date, store_name=store, orders=orders, sales=sales)


def test_totals_are_exact_sums(records):
    ctx = aggregate(records)
    assert ctx.total_sales == sum(r.sales for r in records)
    assert ctx.total_orders == sum(r.orders for r in records)
    assert ctx.avg_order_value == ctx.total_sales / ctx.total_orders


def test_empty_records_give_zeros():
    ctx = aggregate([])
    assert ctx.total_sales == 0
    assert ctx.total_orders == 0
    assert ctx.avg_order_value == 0
    assert [s.name for s in ctx.store_performance] == STORES
    assert all(s.sales == 0 and s.orders == 0 and s.progress == 0 for s in ctx.store_performance)


def test_zero_orders_never_divides():
    ctx = aggregate([rec("2024-01-01", "Maadi", 0, 500)])
    assert ctx.avg_order_value == 0


def test_store_order_follows_store_list_not_data():
    rows = [rec("2024-01-01", "Maadi", 1, 10), rec("2024-01-01", "Dark store", 1, 10)]
    ctx = aggregate(rows, store_list=["Tagmo", "Maadi", "Dark store"])
    assert [s.name for s in ctx.store_performance] == ["Tagmo", "Maadi", "Dark store"]
    assert ctx.store_performance[0].sales == 0


def test_progress_is_clamped():
    ctx = aggregate([rec("2024-01-01", "Maadi", 10, 5_000_000)])
    maadi = ctx.find_store("Maadi")
    assert maadi.progress == 100
    assert maadi.remaining == 0
    for s in ctx.store_performance:
        assert 0 <= s.progress <= 100


def test_zero_target_gives_zero_progress():
    ctx = aggregate([rec("2024-01-01", "Maadi", 1, 100)], default_targets={"Maadi": 0})
    assert ctx.find_store("Maadi").progress == 0


def test_unknown_store_counts_in_totals_only():
    rows = [rec("2024-01-01", "Zamalek", 5, 1000), rec("2024-01-01", "Maadi", 1, 100)]
    ctx = aggregate(rows)
    assert ctx.total_sales == 1100
    assert sum(s.sales for s in ctx.store_performance) == 100


def test_targets_lookup_then_default():
    targets = [StoreTarget("Tagmo", 1, 2024, 500000), StoreTarget("Tagmo", 2, 2024, 900000)]
    ctx = aggregate([], targets=targets, month=2, year=2024)
    assert ctx.find_store("Tagmo").target == 900000
    assert ctx.find_store("Maadi").target == DEFAULT_TARGETS["Maadi"]

    ctx = aggregate([], targets=targets)
    assert ctx.find_store("Tagmo").target == 500000


def test_daily_series_last_buckets(records):
    daily = daily_series(records, last=2)
    assert list(daily["date"].dt.strftime("%Y-%m-%d")) == ["2024-01-08", "2024-01-12"]
    assert daily["sales"].iloc[-1] == 14500
    assert daily["orders"].iloc[-1] == 58


def test_daily_series_empty():
    assert daily_series([]).empty


def test_target_progress_and_orders_per_day(records):
    ctx = aggregate(records)
    assert target_progress(ctx) == pytest.approx(ctx.total_sales / sum(DEFAULT_TARGETS.values()) * 100)
    assert avg_orders_per_day(records) == sum(r.orders for r in records) / 4
    assert avg_orders_per_day([]) == 0


def test_branch_summary(records):
    s = branch_summary(records, "Dark store", 1000000)
    assert s["sales"] == 21000
    assert s["orders"] == 70
    assert s["remaining"] == 1000000 - 21000
    assert s["progress"] == pytest.approx(2.1)
