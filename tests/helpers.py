from typing import Optional

from domain.models import BomComponent, InventoryRow


def make_row(
        barcode: str,
        location_code: Optional[str],
        quantity: int,
        *,
        name: str = "",
        safe_stock: int = 0,
) -> InventoryRow:
    return InventoryRow(
        barcode=barcode,
        item_name=name or f"item {barcode}",
        description=f"desc {barcode}",
        unit="PCS",
        category="原料倉",
        safe_stock=safe_stock,
        location_code=location_code,
        quantity=quantity,
    )


def make_component(barcode: str, locations: str = "", *, required: int = 1, stock: int = 0) -> BomComponent:
    return BomComponent(
        component_barcode=barcode,
        component_name=f"comp {barcode}",
        description="",
        required_qty=required,
        current_stock=stock,
        safe_stock=0,
        locations=locations,
    )
