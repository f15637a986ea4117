from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd
import plotly.express as px

from .config import CHART_DAYS, CURRENCY
from .metrics import daily_series
from .models import DashboardContext, TransactionRecord


def _html(fig) -> str:
    return fig.to_html(full_html=False, include_plotlyjs=True, config={"responsive": True})


def sales_trend_figure(records: Iterable[TransactionRecord], last: int = CHART_DAYS):
    """Area chart of daily sales over the last `last` dates; None without data."""
    daily = daily_series(records, last=last)
    if daily.empty:
        return None
    daily = daily.assign(label=daily["date"].map(lambda d: f"{d:%b} {d.day}"))
    fig = px.area(daily, x="label", y="sales", title="Sales Trend",
                  labels={"label": "Date", "sales": f"Sales ({CURRENCY})"})
    fig.update_yaxes(tickformat="~s")
    return fig


def orders_figure(records: Iterable[TransactionRecord], last: int = CHART_DAYS):
    daily = daily_series(records, last=last)
    if daily.empty:
        return None
    daily = daily.assign(label=daily["date"].map(lambda d: f"{d:%b} {d.day}"))
    return px.bar(daily, x="label", y="orders", title="Daily Orders",
                  labels={"label": "Date", "orders": "Orders"})


def store_progress_figure(context: DashboardContext):
    if not context.store_performance:
        return None
    df = pd.DataFrame([
        {"Store": s.name, "Progress": s.progress, "Sales": s.sales, "Target": s.target}
        for s in context.store_performance
    ])
    fig = px.bar(df, x="Progress", y="Store", orientation="h", title="Store Performance",
                 hover_data=["Sales", "Target"], range_x=[0, 100],
                 labels={"Progress": "% of target"})
    return fig


def branch_donut_figure(achieved: float, remaining: float, title: Optional[str] = None):
    df = pd.DataFrame({"Part": ["Achieved", "Remaining"], "Value": [achieved, max(remaining, 0.0)]})
    fig = px.pie(df, names="Part", values="Value", hole=0.75, title=title or "Target Progress")
    fig.update_traces(textposition="inside", textinfo="percent+label")
    return fig


def to_chart(kind: str, context: DashboardContext, **kwargs) -> Optional[str]:
    """Embeddable HTML for one of: trend, orders, stores, branch."""
    if kind == "trend":
        fig = sales_trend_figure(context.sales_data, **kwargs)
    elif kind == "orders":
        fig = orders_figure(context.sales_data, **kwargs)
    elif kind == "stores":
        fig = store_progress_figure(context)
    elif kind == "branch":
        fig = branch_donut_figure(**kwargs)
    else:
        raise ValueError(f"unknown chart kind: {kind}")
    return _html(fig) if fig is not None else None
