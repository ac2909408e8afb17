
import pandas as pd
import streamlit as st

from config import configure_logging, load_settings
from element_component import delete_confirmation_dialog, entered_page
from services.export_service import SHEET_LABELS, export_report
from services.report_service import (
    REPORT_TABS,
    DeleteDialogState,
    EditStatus,
    can_delete,
    changed_safe_stocks,
    fetch_report,
    flatten_bom,
    initial_tab,
    open_delete_dialog,
    revert_safe_stock_edit,
    save_safe_stock,
    summarize_by_item,
    summarize_by_location,
)
from utils.formatting import utc_today
from utils.location_codes import format_locations, parse_display_tokens

settings = load_settings()
configure_logging(settings)

st.set_page_config(page_title="庫存報表", page_icon="📊", layout="wide")
st.sidebar.header("📊 庫存報表")

# -----------------------------------------------------------------------------
# Page-owned state (reset on every visit)
# -----------------------------------------------------------------------------

st.session_state.setdefault("safe_stock_editor_version", 0)

entered = entered_page("reports")
if entered:
    st.session_state["report_rows"] = []
    st.session_state["report_bom"] = []
    st.session_state["safe_stock_edits"] = {}
    st.session_state["delete_state"] = DeleteDialogState()


def load_report():
    fetched = fetch_report()
    if fetched is None:
        st.error("無法載入庫存報表，請稍後再試。")
        return
    st.session_state["report_rows"], st.session_state["report_bom"] = fetched


# set by the delete dialog after a successful delete
reload_requested = st.session_state.pop("report_reload", False)
if entered or reload_requested:
    load_report()

# -----------------------------------------------------------------------------
# Active tab: overview link > ?tab= > last choice
# -----------------------------------------------------------------------------

requested_tab = st.session_state.pop("report_tab", None)
if requested_tab or "report_active_tab" not in st.session_state:
    st.session_state["report_active_tab"] = initial_tab(requested_tab or st.query_params.get("tab"))

# -----------------------------------------------------------------------------
# Projections
# -----------------------------------------------------------------------------

rows = st.session_state["report_rows"]
item_summary = summarize_by_item(rows)
location_summary = summarize_by_location(rows)
bom_rows = flatten_bom(st.session_state["report_bom"])

# -----------------------------------------------------------------------------
# Header: title, refresh, export
# -----------------------------------------------------------------------------

col_title, col_refresh, col_export = st.columns([4, 1, 1], vertical_alignment="bottom")

with col_title:
    st.title("庫存報表")

with col_refresh:
    if st.button("🔄 重新整理"):
        load_report()
        st.rerun()

active_tab = st.radio(
    "報表",
    REPORT_TABS,
    format_func=SHEET_LABELS.get,
    horizontal=True,
    key="report_active_tab",
    label_visibility="collapsed",
)

with col_export:
    export = export_report(
        active_tab,
        items=item_summary,
        locations=location_summary,
        bom_rows=bom_rows,
        today=utc_today(),
    )
    st.download_button(
        "📥 匯出 Excel",
        data=export.content,
        file_name=export.file_name,
        mime=export.mime,
    )

deleted = st.session_state.pop("delete_success", None)
if deleted is not None:
    st.success(f"刪除成功！ ({deleted.barcode} {deleted.name})")


# -----------------------------------------------------------------------------
# Item tab
# -----------------------------------------------------------------------------

def render_item_tab():
    if not item_summary:
        st.info("目前沒有任何料件。")
        return

    df_items = pd.DataFrame(
        [
            {
                "元件品號": i.barcode,
                "品名": i.name,
                "規格": i.description,
                "庫存單位": i.unit,
                "庫別名稱": i.category,
                "數量": i.total_qty,
                "安全庫存": i.safe_stock,
                "儲位": format_locations(i.locations, sep=", "),
            }
            for i in item_summary
        ]
    )

    edited = st.data_editor(
        df_items,
        hide_index=True,
        width="stretch",
        disabled=[c for c in df_items.columns if c != "安全庫存"],
        column_config={
            "安全庫存": st.column_config.NumberColumn("安全庫存", min_value=0, step=1),
        },
        key=f"safe_stock_editor_{st.session_state['safe_stock_editor_version']}",
    )

    # the editor commits a cell on blur/enter; persist whatever changed
    changed = changed_safe_stocks(df_items, edited, "元件品號", "安全庫存")
    if changed:
        rows_now = st.session_state["report_rows"]
        edits = st.session_state["safe_stock_edits"]
        for barcode, value in changed:
            rows_now, edits = save_safe_stock(rows_now, edits, barcode, value)
        st.session_state["report_rows"] = rows_now
        st.session_state["safe_stock_edits"] = edits
        st.session_state["safe_stock_editor_version"] += 1
        st.rerun()

    for barcode, edit in st.session_state["safe_stock_edits"].items():
        if edit.status != EditStatus.FAILED:
            continue
        col_msg, col_revert = st.columns([5, 1])
        with col_msg:
            st.error(f"更新安全庫存失敗 ({barcode}): {edit.error}")
        with col_revert:
            if st.button("還原", key=f"revert_{barcode}"):
                st.session_state["report_rows"], st.session_state["safe_stock_edits"] = revert_safe_stock_edit(
                    st.session_state["report_rows"], st.session_state["safe_stock_edits"], barcode
                )
                st.session_state["safe_stock_editor_version"] += 1
                st.rerun()

    # delete is only offered for items with nothing left in stock
    deletable = {i.barcode: i for i in item_summary if can_delete(i)}
    if deletable:
        with st.expander("🗑 刪除零庫存料件"):
            barcode = st.selectbox(
                "料件",
                list(deletable.keys()),
                format_func=lambda b: f"{b} {deletable[b].name}",
                key="delete_candidate",
            )
            if st.button("刪除此料件 (需確認)", type="secondary"):
                st.session_state["delete_state"] = open_delete_dialog(deletable[barcode])
                st.session_state["delete_password"] = ""
                token = st.session_state.get("token") or settings.api_token
                delete_confirmation_dialog("delete_state", token)


# -----------------------------------------------------------------------------
# Location tab
# -----------------------------------------------------------------------------

def render_location_tab():
    if not location_summary:
        st.info("目前沒有任何儲位存放料件。")
        return

    df_locations = pd.DataFrame(
        [
            {
                "儲位代碼": r.code,
                "數量": r.quantity,
                "料件": f"{r.name} [{r.barcode}]",
            }
            for r in location_summary
        ]
    )
    st.dataframe(df_locations, hide_index=True, width="stretch")


# -----------------------------------------------------------------------------
# BOM tab
# -----------------------------------------------------------------------------

def format_bom_locations(raw: str) -> str:
    tokens = parse_display_tokens(raw)
    if not tokens:
        return "無庫存"
    return ", ".join(f"{code}({qty})" if qty is not None else code for code, qty in tokens)


def render_bom_tab():
    if not bom_rows:
        st.info("目前沒有任何主件資料。")
        return

    df_bom = pd.DataFrame(
        [
            {
                "主件品號": r.main_barcode if r.show_main else "",
                "元件品號": r.component.component_barcode,
                "品名": r.component.component_name,
                "組成用量": r.component.required_qty,
                "當前庫存量": r.component.current_stock,
                "缺料": "⚠️" if r.component.is_short else "",
                "安全庫存": r.component.safe_stock,
                "儲位": format_bom_locations(r.component.locations),
            }
            for r in bom_rows
        ]
    )
    st.dataframe(df_bom, hide_index=True, width="stretch")


if active_tab == "item":
    render_item_tab()
elif active_tab == "bom":
    render_bom_tab()
else:
    render_location_tab()
