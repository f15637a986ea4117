import os, sys, logging
from datetime import date

# Ensure we can import the package as "salesdash.*"
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import streamlit as st

from salesdash.config import APP_TITLE, ALLOWED_TYPES, CURRENCY, RECENT_ROWS, STORES
from salesdash.chat import answer_query
from salesdash.charts import to_chart
from salesdash.ingest import IngestError, parse_workbook
from salesdash.llm import LLMClient
from salesdash.metrics import aggregate, avg_orders_per_day, branch_summary, records_frame, target_progress
from salesdash.store import SalesStore
from salesdash.templates import fmt_int, fmt_pct, fmt_thousands

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ------------------------------------------------------------------------------
# Data
# ------------------------------------------------------------------------------
@st.cache_resource
def _store() -> SalesStore:
    return SalesStore()


@st.cache_resource
def _llm() -> LLMClient:
    return LLMClient.from_env()


def _snapshot():
    store = _store()
    records = store.load_records()
    today = date.today()
    context = aggregate(records, store.load_targets(), month=today.month, year=today.year)
    return records, context


def _chart(html, height=420):
    if html:
        st.components.v1.html(html, height=height, scrolling=False)
    else:
        st.info("No data yet. Upload an Excel export from the sidebar.")


# ------------------------------------------------------------------------------
# UI
# ------------------------------------------------------------------------------
st.set_page_config(page_title=APP_TITLE, page_icon="📊", layout="wide")
st.title(APP_TITLE)

with st.sidebar:
    st.header("⬆️ Upload Sales Data")
    st.caption("Expected format: Date, Store columns with Orders and Sales. "
               "Uploading will replace existing data for the same month.")
    upload = st.file_uploader("Drag and drop your Excel file here, or click to browse",
                              type=ALLOWED_TYPES, accept_multiple_files=False)
    if upload is not None and st.button("Import", use_container_width=True):
        with st.spinner(f"Uploading {upload.name}..."):
            try:
                parsed = parse_workbook(upload)
                n = _store().replace_month(parsed)
                st.success(f"Upload Successful! {n} records have been imported.")
            except IngestError as e:
                st.error(str(e))

    st.divider()
    st.header("🎯 Targets")
    with st.form("target_form"):
        t_store = st.selectbox("Store", STORES)
        t_month = st.number_input("Month", 1, 12, value=date.today().month)
        t_year = st.number_input("Year", 2000, 2100, value=date.today().year)
        t_value = st.number_input(f"Target ({CURRENCY})", min_value=0, step=10000)
        if st.form_submit_button("Save target") and t_value > 0:
            _store().set_target(t_store, int(t_month), int(t_year), float(t_value))
            st.success("Target saved.")

records, ctx = _snapshot()

# --- Stats grid ---
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Sales", f"{fmt_thousands(ctx.total_sales)} {CURRENCY}",
          f"{fmt_int(target_progress(ctx))}% of monthly target", delta_color="off")
c2.metric("Total Orders", ctx.total_orders, f"{fmt_int(avg_orders_per_day(records))} avg/day", delta_color="off")
c3.metric("Avg Order Value", f"{fmt_int(ctx.avg_order_value)} {CURRENCY}")
c4.metric("Active Stores", len(STORES))

tab_dash, tab_branch, tab_chat = st.tabs(["Dashboard", "Branch Analysis", "AI Assistant"])

with tab_dash:
    left, right = st.columns([2, 1])
    with left:
        _chart(to_chart("trend", ctx))
    with right:
        st.subheader("Store Performance")
        for s in ctx.store_performance:
            st.write(f"**{s.name}** — {fmt_thousands(s.sales)} / {fmt_thousands(s.target)} {CURRENCY}")
            st.progress(min(int(s.progress), 100), text=f"{fmt_pct(s.progress)}%")
    _chart(to_chart("orders", ctx), height=360)

    st.subheader("Recent Sales")
    df = records_frame(records[:RECENT_ROWS])
    st.dataframe(df, use_container_width=True, hide_index=True)

with tab_branch:
    branch = st.selectbox("Branch", STORES, key="branch_pick")
    perf = ctx.find_store(branch)
    summary = branch_summary(records, branch, perf.target if perf else 0)
    b1, b2, b3 = st.columns(3)
    b1.metric("Sales", f"{fmt_int(summary['sales'])} {CURRENCY}")
    b2.metric("Orders", int(summary["orders"]))
    b3.metric("Progress", f"{fmt_pct(summary['progress'])}%")
    _chart(to_chart("branch", ctx, achieved=summary["achieved"], remaining=summary["remaining"],
                    title=f"{branch} — Target Progress"))

with tab_chat:
    if "history" not in st.session_state:
        st.session_state.history = [(
            "assistant",
            "**مرحباً! / Ahlan!**\n\nأنا مساعدك الذكي لنظام المبيعات. اسألني عن أي شيء!\n\n"
            "Ana mosa3dak el zaky lel sales system. Es2alni 3an ay 7aga!",
        )]

    for role, content in st.session_state.history:
        with st.chat_message(role):
            st.markdown(content.replace("\n", "  \n"))

    q = st.chat_input("اسأل عن المبيعات… / Ask about sales…")
    if q:
        with st.chat_message("user"):
            st.markdown(q)
        with st.chat_message("assistant"):
            with st.spinner("يفكّر…"):
                out = answer_query(q, ctx, client=_llm())
            st.markdown(out["text"].replace("\n", "  \n"))
            st.caption(f"source: {out['meta'].get('source')}")
        st.session_state.history.append(("user", q))
        st.session_state.history.append(("assistant", out["text"]))
