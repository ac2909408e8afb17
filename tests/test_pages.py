import pytest
from streamlit.testing.v1 import AppTest

import data_integrator
from domain.models import Item, ItemDetails, Location
from services.report_service import EditStatus, SafeStockEdit
from services.search_service import SearchState
from helpers import make_row

OVERVIEW = "../Overview.py"
REPORTS = "pages/1_Reports.py"


class FakeInventory:
    """Stands in for the inventory API; counts report fetches."""

    def __init__(self):
        self.quantity = 5
        self.report_calls = 0

    def get_locations(self):
        return [Location("A-01", self.quantity)]

    def get_bom(self, barcode=None):
        return []

    def get_item_details(self, barcode):
        return ItemDetails(
            item=Item(barcode=barcode, name="Spring"),
            inventory=[make_row(barcode, "A-01", self.quantity, name="Spring")],
        )

    def get_inventory_report(self):
        self.report_calls += 1
        return [make_row("A1", "A-01", self.quantity, name="Bolt")]


@pytest.fixture
def server(monkeypatch):
    fake = FakeInventory()
    for name in ("get_locations", "get_bom", "get_item_details", "get_inventory_report"):
        monkeypatch.setattr(data_integrator, name, getattr(fake, name))
    return fake


@pytest.fixture
def app(server):
    at = AppTest.from_file(OVERVIEW, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def _report_quantity(at: AppTest) -> int:
    return at.session_state["report_rows"][0].quantity


def _result_captions(at: AppTest):
    return [c.value for c in at.caption if "搜尋結果" in c.value]


def test_reports_fetch_fresh_data_on_every_visit(app, server):
    app.switch_page(REPORTS).run()
    assert _report_quantity(app) == 5

    server.quantity = 42

    # reruns of the same page keep what was loaded
    app.run()
    assert _report_quantity(app) == 5
    assert server.report_calls == 1

    app.switch_page("Overview.py").run()
    app.switch_page(REPORTS).run()

    assert not app.exception
    assert _report_quantity(app) == 42
    assert server.report_calls == 2


def test_safe_stock_edits_do_not_survive_navigation(app, server):
    app.switch_page(REPORTS).run()
    app.session_state["safe_stock_edits"] = {
        "A1": SafeStockEdit(EditStatus.FAILED, 9, 0, error="HTTP 500"),
    }
    app.run()
    assert [e.value for e in app.error] == ["更新安全庫存失敗 (A1): HTTP 500"]

    app.switch_page("Overview.py").run()
    app.switch_page(REPORTS).run()

    assert app.session_state["safe_stock_edits"] == {}
    assert not app.error


def test_reload_flag_refetches_once(app, server):
    app.switch_page(REPORTS).run()
    assert server.report_calls == 1

    app.session_state["report_reload"] = True
    app.run()
    assert server.report_calls == 2

    app.run()
    assert server.report_calls == 2


def test_search_result_is_dropped_after_leaving_overview(app, server):
    # a query whose debounce deadline has already passed
    app.session_state["search_state"] = SearchState(query="C9", deadline=0.0)
    app.run()

    assert app.session_state["search_state"].result is not None
    assert _result_captions(app) == ["🔍 搜尋結果: 找到 1 個相關料架"]

    app.switch_page(REPORTS).run()
    app.switch_page("Overview.py").run()

    assert not app.exception
    assert app.text_input(key="search_query").value == ""
    assert app.session_state["search_state"].result is None
    assert _result_captions(app) == []
