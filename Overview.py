import time

import pandas as pd
import streamlit as st

from config import configure_logging, load_settings
from domain.models import OverviewStats, SearchKind
from element_component import entered_page, highlight_table, stat_card
from services.search_service import (
    SearchState,
    clear_search,
    on_query_changed,
    on_search_resolved,
    resolve_search,
    take_due_query,
)
from services.stats_service import fetch_stats
from utils.barcode import barcode_png
from utils.formatting import format_quantity
from utils.location_codes import parse_code_qty_list

settings = load_settings()
configure_logging(settings)

st.set_page_config(page_title="總覽看板", page_icon="🏭", layout="wide")
st.sidebar.header("🏭 總覽看板")

# -----------------------------------------------------------------------------
# Page-owned state
# -----------------------------------------------------------------------------

if entered_page("overview"):
    # nothing from an earlier visit survives navigation
    st.session_state["overview_stats"] = OverviewStats()
    st.session_state["search_state"] = SearchState()
    st.session_state["search_query"] = ""


def on_search_input():
    st.session_state["search_state"] = on_query_changed(
        st.session_state["search_state"],
        st.session_state["search_query"],
        time.monotonic(),
        settings.search_debounce_seconds,
    )


def on_search_clear():
    st.session_state["search_query"] = ""
    st.session_state["search_state"] = clear_search(st.session_state["search_state"])


# -----------------------------------------------------------------------------
# Header + search bar
# -----------------------------------------------------------------------------

col_title, col_search, col_clear = st.columns([3, 3, 0.5], vertical_alignment="bottom")

with col_title:
    st.title("總覽看板")
    st.caption("即時監控庫存狀態與儲位分佈")

with col_search:
    st.text_input(
        "料件條碼",
        key="search_query",
        placeholder="掃描或輸入料件條碼搜尋 (自動顯示)...",
        on_change=on_search_input,
    )

with col_clear:
    st.button("✕", on_click=on_search_clear, help="清除搜尋")


# -----------------------------------------------------------------------------
# Stats cards (refreshed in the background)
# -----------------------------------------------------------------------------

@st.fragment(run_every=settings.stats_refresh_seconds)
def stats_panel():
    fresh = fetch_stats(settings.admin_location_patterns)
    if fresh is not None:
        st.session_state["overview_stats"] = fresh
    stats: OverviewStats = st.session_state["overview_stats"]

    col_total, col_occupied, col_empty, col_low = st.columns(4)
    with col_total:
        stat_card("庫存總數", format_quantity(stats.total_stock), "item")
    with col_occupied:
        stat_card("佔用儲位", format_quantity(stats.occupied_cells), "location", key="goto_location_occupied")
    with col_empty:
        stat_card("空置儲位", format_quantity(stats.empty_cells), "location", key="goto_location_empty")
    with col_low:
        stat_card("低庫存警示", format_quantity(stats.low_stock))


stats_panel()


# -----------------------------------------------------------------------------
# Search results + highlighted locations
# -----------------------------------------------------------------------------

def render_bom_summary(entry):
    st.subheader(f"📦 主件搜尋結果: {entry.main_barcode}")

    rows = []
    for comp in entry.components:
        codes = [loc.code for loc in parse_code_qty_list(comp.locations)]
        rows.append(
            {
                "元件品號": comp.component_barcode,
                "品名": comp.component_name,
                "庫存": comp.current_stock,
                "單套用量": comp.required_qty,
                "缺料": "⚠️" if comp.is_short else "",
                "儲位": ",".join(codes) if codes else "無",
            }
        )
    st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")


def render_item_summary(item):
    st.subheader(f"🔎 料件搜尋結果: {item.barcode}")
    st.write(f"**{item.name}** {item.description}")


@st.fragment(run_every=settings.search_debounce_seconds)
def search_panel():
    state: SearchState = st.session_state["search_state"]

    state, seq = take_due_query(state, time.monotonic())
    if seq is not None:
        st.session_state["search_state"] = state
        result = resolve_search(state.query)
        state = on_search_resolved(st.session_state["search_state"], seq, result)
        st.session_state["search_state"] = state

    result = state.result

    st.subheader("平面圖")
    if result is None:
        if state.query.strip() and state.deadline is None and state.issued_seq:
            st.info("查無此條碼。")
        return

    st.caption(f"🔍 搜尋結果: 找到 {len(result.highlights)} 個相關料架")

    col_info, col_code = st.columns([3, 1])
    with col_info:
        if result.kind == SearchKind.BOM:
            render_bom_summary(result.data)
        else:
            render_item_summary(result.data)
    with col_code:
        code = result.data.main_barcode if result.kind == SearchKind.BOM else result.data.barcode
        png = barcode_png(code)
        if png:
            st.image(png, caption=code)

    highlight_table(result)


search_panel()
