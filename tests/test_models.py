from domain.models import BomEntry, InventoryRow, Location
from services.report_service import summarize_by_item, summarize_by_location


def test_inventory_row_from_dict_normalizes_missing_fields():
    row = InventoryRow.from_dict({"barcode": "A1", "name": "Bolt", "quantity": "3"})

    assert row.item_name == "Bolt"
    assert row.description == ""
    assert row.safe_stock == 0
    assert row.location_code is None
    assert row.quantity == 3


def test_numeric_location_codes_become_text():
    rows = [
        InventoryRow.from_dict({"barcode": "A1", "location_code": 101, "quantity": 2}),
        InventoryRow.from_dict({"barcode": "A2", "location_code": "A", "quantity": 1}),
    ]

    assert rows[0].location_code == "101"
    assert [r.code for r in summarize_by_location(rows)] == ["101", "A"]
    assert summarize_by_item(rows)[0].locations[0].code == "101"


def test_empty_location_code_is_unassigned():
    assert InventoryRow.from_dict({"barcode": "A1", "location_code": ""}).location_code is None


def test_location_from_dict():
    assert Location.from_dict({"code": 7, "total_quantity": None}) == Location("7", 0)


def test_bom_entry_without_components():
    entry = BomEntry.from_dict({"main_barcode": "M1", "components": None})
    assert entry.components == []
