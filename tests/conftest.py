import pytest

from salesdash.metrics import aggregate
from salesdash.models import DashboardContext, StorePerformance, TransactionRecord


def rec(date, store, orders, sales):
    return TransactionRecord(date=date, store_name=store, orders=orders, sales=sales)


@pytest.fixture
def records():
    return [
        rec("2024-01-01", "Dark store", 30, 9000),
        rec("2024-01-01", "Tagmo", 10, 4000),
        rec("2024-01-05", "Dark store", 25, 7000),
        rec("2024-01-05", "Dark store", 15, 5000),
        rec("2024-01-05", "Maadi", 20, 6000),
        rec("2024-01-08", "Heliopolis", 12, 3000),
        rec("2024-01-12", "Tagmo", 40, 10000),
        rec("2024-01-12", "Maadi", 18, 4500),
    ]


@pytest.fixture
def ctx(records):
    return aggregate(records)


@pytest.fixture
def two_store_ctx():
    return DashboardContext(
        total_sales=1300000,
        total_orders=350,
        avg_order_value=1300000 / 350,
        store_performance=(
            StorePerformance(name="Dark store", sales=500000, orders=200, target=1000000, progress=50),
            StorePerformance(name="Maadi", sales=800000, orders=150, target=700000, progress=100),
        ),
    )


@pytest.fixture
def target_ctx():
    # sums: sales 1,800,000 against targets 3,450,000
    return DashboardContext(
        total_sales=1800000,
        total_orders=900,
        avg_order_value=2000,
        store_performance=(
            StorePerformance(name="Dark store", sales=500000, orders=250, target=1000000, progress=50),
            StorePerformance(name="Tagmo", sales=400000, orders=88, target=750000, progress=400000 / 750000 * 100),
            StorePerformance(name="Heliopolis", sales=500000, orders=300, target=1000000, progress=50),
            StorePerformance(name="Maadi", sales=400000, orders=262, target=700000, progress=400000 / 700000 * 100),
        ),
    )
