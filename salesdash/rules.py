"""
Deterministic answer engine: an ordered table of (name, handler) rules.

Each handler looks at the case-folded question and the dashboard snapshot and
either returns a rendered answer or None to let the next rule try. The table
order is the priority order; the last rule always answers.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import BRANCH_ALIASES
from .language import LanguageFlags, detect
from .models import DashboardContext, StorePerformance
from .temporal import extract_temporal, resolve_dates
from .templates import render

LOGGER = logging.getLogger(__name__)

# ---------- Keyword sets ----------
_GREETING_WORDS = {"hi", "hey", "hello", "ahlan", "salam"}
_GREETING_AR = ("مرحبا", "هاي", "السلام")

_HIGHEST = ("أعلى", "اعلى", "a3la", "highest")
_LOWEST = ("أقل", "اقل", "a2al", "lowest")
_MOST = ("أكثر", "اكثر", "aktar", "most")
_LEAST = ("أقل", "اقل", "a2al", "least")
_ORDER = ("order", "طلب")
_TARGET = ("محتاج", "me7tag", "need", "تحقيق", "target", "هدف")
_SALES = ("sales", "مبيعات")
_ORDERS_TOTAL = ("order", "طلب", "kam el")
_BEST = ("أحسن", "a7san", "best", "top", "branch", "store", "فرع")
_DOING = ("عامل", "3amel", "doing")
_HOW_MANY = ("كام", "kam", "how many")
_ORDER_WORD = ("order", "أوردر", "اوردر")
_AVERAGE = ("average", "متوسط", "mtwst", "avg")

# avg order value used for the target gap when the real one is 0
FALLBACK_AVG_ORDER = 100

_WORD_RE = re.compile(r"[a-z0-9']+")


@dataclass(frozen=True)
class Query:
    text: str
    context: DashboardContext
    flags: LanguageFlags

    @property
    def lower(self) -> str:
        return self.text.lower()

    @property
    def language(self) -> str:
        return self.flags.language

    def has(self, keywords: Iterable[str]) -> bool:
        ql = self.lower
        return any(k in ql for k in keywords)

    def words(self) -> set:
        return set(_WORD_RE.findall(self.lower))

    def answer(self, intent: str, **values) -> str:
        return render(intent, self.language, **values)


@dataclass(frozen=True)
class Rule:
    name: str
    handler: Callable[[Query], Optional[str]]


def match_branch(text: str) -> Optional[str]:
    """First store whose alias appears in the text (alias table order)."""
    ql = (text or "").lower()
    for store, aliases in BRANCH_ALIASES.items():
        if any(a in ql for a in aliases):
            return store
    return None


def _pick(stores: Sequence[StorePerformance], key, largest: bool) -> Optional[StorePerformance]:
    # ties keep the earliest store in store-list order
    best = None
    for s in stores:
        if best is None or (key(s) > key(best) if largest else key(s) < key(best)):
            best = s
    return best


# ---------- Rule bodies ----------
def greeting(q: Query) -> Optional[str]:
    if q.words() & _GREETING_WORDS or q.has(_GREETING_AR):
        return q.answer("greeting")
    return None


def highest_sales(q: Query) -> Optional[str]:
    if not (q.has(_HIGHEST) or ("most" in q.lower and "sales" in q.lower)):
        return None
    top = _pick(q.context.store_performance, lambda s: s.sales, largest=True)
    if top is None:
        return None
    return q.answer("highest_sales", name=top.name, sales=top.sales)


def lowest_sales(q: Query) -> Optional[str]:
    if not (q.has(_LOWEST) or ("least" in q.lower and "sales" in q.lower)):
        return None
    low = _pick(q.context.store_performance, lambda s: s.sales, largest=False)
    if low is None:
        return None
    return q.answer("lowest_sales", name=low.name, sales=low.sales)


def most_orders(q: Query) -> Optional[str]:
    if not (q.has(_MOST) and q.has(_ORDER)):
        return None
    top = _pick(q.context.store_performance, lambda s: s.orders, largest=True)
    if top is None:
        return None
    return q.answer("most_orders", name=top.name, orders=top.orders)


def least_orders(q: Query) -> Optional[str]:
    if not (q.has(_LEAST) and q.has(_ORDER)):
        return None
    low = _pick(q.context.store_performance, lambda s: s.orders, largest=False)
    if low is None:
        return None
    return q.answer("least_orders", name=low.name, orders=low.orders)


def target_gap(q: Query) -> Optional[str]:
    if not q.has(_TARGET):
        return None
    remaining = sum(s.remaining for s in q.context.store_performance)
    avg = q.context.avg_order_value if q.context.avg_order_value > 0 else FALLBACK_AVG_ORDER
    orders_needed = math.ceil(remaining / avg)
    return q.answer("target_gap", remaining=remaining, orders_needed=orders_needed, avg=avg)


def temporal(q: Query) -> Optional[str]:
    tq = extract_temporal(q.text)
    if not tq.is_temporal:
        return None
    window = resolve_dates(tq, q.context.sales_data)
    if window is None:
        return None

    rows = window.apply(q.context.sales_data)
    if not rows:
        return None
    branch = match_branch(q.text)

    if window.is_range:
        span = {"start": window.range_start, "end": window.range_end}
        if branch:
            mine = [r for r in rows if r.store_name == branch]
            return q.answer("range_branch", name=branch, **span,
                            sales=sum(r.sales for r in mine),
                            orders=sum(r.orders for r in mine))
        return q.answer("range_total", **span,
                        sales=sum(r.sales for r in rows),
                        orders=sum(r.orders for r in rows))

    if branch:
        mine = [r for r in rows if r.store_name == branch]
        if not mine:
            return None
        return q.answer("day_branch", name=branch, date=window.date,
                        sales=sum(r.sales for r in mine),
                        orders=sum(r.orders for r in mine))
    return q.answer("day_total", date=window.date,
                    sales=sum(r.sales for r in rows),
                    orders=sum(r.orders for r in rows))


def branch_orders(q: Query) -> Optional[str]:
    if not (q.has(_DOING) and q.has(_HOW_MANY) and q.has(_ORDER_WORD)):
        return None
    name = match_branch(q.text)
    store = q.context.find_store(name) if name else None
    if store is None:
        return None
    return q.answer("branch_orders", name=store.name, orders=store.orders)


def total_sales(q: Query) -> Optional[str]:
    if not q.has(_SALES):
        return None
    return q.answer("total_sales", sales=q.context.total_sales)


def total_orders(q: Query) -> Optional[str]:
    if not q.has(_ORDERS_TOTAL):
        return None
    return q.answer("total_orders", orders=q.context.total_orders)


def best_branch(q: Query) -> Optional[str]:
    if not q.has(_BEST):
        return None
    best = _pick(q.context.store_performance, lambda s: s.progress, largest=True)
    if best is None:
        return None
    return q.answer("best_branch", name=best.name, sales=best.sales, progress=best.progress)


def branch_detail(store_name: str, q: Query) -> Optional[str]:
    if not q.has(BRANCH_ALIASES.get(store_name, ())):
        return None
    store = q.context.find_store(store_name)
    if store is None:
        return None
    return q.answer("branch_detail", name=store.name, sales=store.sales, orders=store.orders,
                    target=store.target, progress=store.progress)


def average_order(q: Query) -> Optional[str]:
    if not q.has(_AVERAGE):
        return None
    return q.answer("avg_order_value", avg=q.context.avg_order_value)


def default(q: Query) -> str:
    return q.answer("default")


# Priority order. Date questions and the per-branch order count sit ahead
# of the generic sales/orders/branch keywords, which would otherwise swallow
# them ("sales for dark store yom 5", "3amel kam order fel tagmo").
RULES: List[Rule] = [
    Rule("greeting", greeting),
    Rule("highest_sales", highest_sales),
    Rule("lowest_sales", lowest_sales),
    Rule("most_orders", most_orders),
    Rule("least_orders", least_orders),
    Rule("target_gap", target_gap),
    Rule("temporal", temporal),
    Rule("branch_orders", branch_orders),
    Rule("total_sales", total_sales),
    Rule("total_orders", total_orders),
    Rule("best_branch", best_branch),
    *[Rule(f"branch:{store}", partial(branch_detail, store)) for store in BRANCH_ALIASES],
    Rule("average_order", average_order),
    Rule("default", default),
]


def resolve_with_rule(utterance: str,
                      context: DashboardContext,
                      flags: Optional[LanguageFlags] = None,
                      rules: Sequence[Rule] = RULES) -> Tuple[str, str]:
    """Return (rule name, answer) for the first rule that answers."""
    q = Query(text=utterance or "", context=context, flags=flags or detect(utterance or ""))
    for rule in rules:
        try:
            out = rule.handler(q)
        except Exception:
            LOGGER.exception("rule %s failed; trying the next one", rule.name)
            continue
        if out:
            return rule.name, out
    return "default", default(q)


def resolve(utterance: str,
            context: DashboardContext,
            flags: Optional[LanguageFlags] = None) -> str:
    return resolve_with_rule(utterance, context, flags)[1]
