# domain/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from utils.formatting import parse_int


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class LocationQuantity:
    """
    One location with the quantity held there.
    Replaces the "code(qty)" / "code:qty" strings the API and UI pass around.
    """
    code: str
    quantity: int


@dataclass(frozen=True)
class Location:
    code: str
    total_quantity: int

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Location":
        return cls(
            code=_text(raw.get("code")),
            total_quantity=parse_int(raw.get("total_quantity")),
        )


@dataclass(frozen=True)
class InventoryRow:
    """
    One (item, location) pairing as returned by the inventory report.
    location_code is None for items that are not stored anywhere yet.
    """
    barcode: str
    item_name: str
    description: str
    unit: str
    category: str
    safe_stock: int
    location_code: Optional[str]
    quantity: int

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "InventoryRow":
        return cls(
            barcode=_text(raw.get("barcode")),
            item_name=_text(raw.get("item_name") or raw.get("name")),
            description=_text(raw.get("description")),
            unit=_text(raw.get("unit")),
            category=_text(raw.get("category")),
            safe_stock=parse_int(raw.get("safe_stock")),
            location_code=_text(raw.get("location_code")) or None,
            quantity=parse_int(raw.get("quantity")),
        )


@dataclass(frozen=True)
class Item:
    barcode: str
    name: str
    description: str = ""
    unit: str = ""
    category: str = ""
    safe_stock: int = 0

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Item":
        return cls(
            barcode=_text(raw.get("barcode")),
            name=_text(raw.get("name") or raw.get("item_name")),
            description=_text(raw.get("description")),
            unit=_text(raw.get("unit")),
            category=_text(raw.get("category")),
            safe_stock=parse_int(raw.get("safe_stock")),
        )


@dataclass(frozen=True)
class ItemDetails:
    item: Item
    inventory: List[InventoryRow]


@dataclass(frozen=True)
class BomComponent:
    component_barcode: str
    component_name: str
    description: str
    required_qty: int
    current_stock: int
    safe_stock: int
    locations: str  # raw "code:qty,code:qty" as served

    @property
    def is_short(self) -> bool:
        return self.current_stock < self.required_qty

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BomComponent":
        return cls(
            component_barcode=_text(raw.get("component_barcode")),
            component_name=_text(raw.get("component_name")),
            description=_text(raw.get("description")),
            required_qty=parse_int(raw.get("required_qty")),
            current_stock=parse_int(raw.get("current_stock")),
            safe_stock=parse_int(raw.get("safe_stock")),
            locations=_text(raw.get("locations")),
        )


@dataclass(frozen=True)
class BomEntry:
    main_barcode: str
    components: List[BomComponent]

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BomEntry":
        return cls(
            main_barcode=_text(raw.get("main_barcode")),
            components=[BomComponent.from_dict(c) for c in raw.get("components") or []],
        )


# -----------------------------------------------------------------------------
# Report projections
# -----------------------------------------------------------------------------

@dataclass
class ItemSummary:
    barcode: str
    name: str
    description: str
    unit: str
    category: str
    safe_stock: int
    total_qty: int = 0
    locations: List[LocationQuantity] = field(default_factory=list)


@dataclass(frozen=True)
class LocationRow:
    code: str
    barcode: str
    name: str
    description: str
    unit: str
    category: str
    quantity: int


@dataclass(frozen=True)
class BomRow:
    main_barcode: str
    component: BomComponent
    show_main: bool  # first component row of its BOM entry


# -----------------------------------------------------------------------------
# Overview
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OverviewStats:
    total_stock: int = 0
    occupied_cells: int = 0
    empty_cells: int = 0
    low_stock: int = 0  # not computed yet, always 0


@dataclass(frozen=True)
class ComponentStock:
    barcode: str
    name: str
    stock: int


@dataclass(frozen=True)
class Highlight:
    location_code: str
    quantity: Optional[int] = None  # ITEM results: quantity of the item there
    components: List[ComponentStock] = field(default_factory=list)


class SearchKind(str, Enum):
    BOM = "BOM"
    ITEM = "ITEM"


@dataclass(frozen=True)
class SearchResult:
    kind: SearchKind
    data: Union[BomEntry, Item]
    highlights: List[Highlight]


@dataclass(frozen=True)
class DeleteTarget:
    barcode: str
    name: str
