from typing import Optional

import pandas as pd
import streamlit as st

from domain.models import SearchKind, SearchResult
from services.report_service import DeleteDialogState, submit_delete

REPORTS_PAGE = "pages/1_Reports.py"


def entered_page(page: str) -> bool:
    """
    True on the first run of `page` after another page was shown (or on
    the very first run). Page-owned state is reset by the caller then.
    """
    entered = st.session_state.get("current_page") != page
    st.session_state["current_page"] = page
    return entered


def stat_card(label: str, value: str, report_tab: Optional[str] = None, key: Optional[str] = None):
    """Metric tile; with `report_tab` set it also links to that report tab."""
    with st.container(border=True):
        st.metric(label, value)
        if report_tab and st.button("查看報表 →", key=key or f"goto_{report_tab}"):
            st.session_state["report_tab"] = report_tab
            st.switch_page(REPORTS_PAGE)


def highlight_table(result: SearchResult):
    """Table form of the locations a search result lights up on the floor map."""
    if not result.highlights:
        st.info("此料件目前沒有儲位紀錄。")
        return

    if result.kind == SearchKind.BOM:
        rows = [
            {
                "儲位代碼": h.location_code,
                "元件": ", ".join(f"{c.name} [{c.barcode}] ({c.stock})" for c in h.components),
            }
            for h in result.highlights
        ]
    else:
        rows = [{"儲位代碼": h.location_code, "數量": h.quantity} for h in result.highlights]

    st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")


@st.dialog("確認刪除料件？")
def delete_confirmation_dialog(state_name: str, token: Optional[str]):
    state: DeleteDialogState = st.session_state[state_name]
    if not state.is_open:
        st.rerun()

    st.markdown(f"您即將刪除料件：`{state.target.barcode}` **{state.target.name}**")
    st.warning("此操作無法復原！相關的交易紀錄與庫存將會一併永久刪除。")

    password = st.text_input("請輸入管理員密碼確認：", type="password", key="delete_password")

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("確認刪除", type="primary", key="confirm_delete"):
            state = submit_delete(state, password, token)
            st.session_state[state_name] = state
            if state.done:
                st.session_state["delete_success"] = state.target
                st.session_state["report_reload"] = True
                st.rerun()
    with col_no:
        if st.button("取消", key="cancel_delete"):
            st.session_state[state_name] = DeleteDialogState()
            st.rerun()

    if state.error:
        st.error(state.error)
