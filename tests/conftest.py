import pytest

from domain.models import BomEntry, Location
from helpers import make_component, make_row


@pytest.fixture
def inventory_rows():
    return [
        make_row("A10", "B-02", 4, name="Bolt", safe_stock=10),
        make_row("A2", "A-01", 3, name="Nut"),
        make_row("A10", "A-10", 6, name="Bolt (dup name)", safe_stock=99),
        make_row("A1", None, 0, name="Washer"),
        make_row("A2", "A-2", 0, name="Nut"),
    ]


@pytest.fixture
def bom_entries():
    return [
        BomEntry(
            main_barcode="B1000",
            components=[
                make_component("C1", "L01:5,L02:3", required=2, stock=8),
            ],
        ),
        BomEntry(
            main_barcode="B100",
            components=[
                make_component("C2", "L01:5,L02:3", required=1, stock=8),
                make_component("C3", "L02:x", required=4, stock=2),
            ],
        ),
    ]


@pytest.fixture
def locations():
    return [
        Location("A-01", 5),
        Location("A-02", 0),
        Location("#B-01#V_2", 7),
        Location("走道一", 2),
        Location("一樓儲位圖", 0),
        Location("C", 1),
        Location("柱", 0),
        Location("#大門", 0),
    ]
