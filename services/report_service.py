# services/report_service.py
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

import data_integrator
from domain.errors import InventoryApiError, ValidationFailure
from domain.models import (
    BomEntry,
    BomRow,
    DeleteTarget,
    InventoryRow,
    ItemSummary,
    LocationQuantity,
    LocationRow,
)
from utils.formatting import parse_int
from utils.location_codes import natural_key

logger = logging.getLogger(__name__)

REPORT_TABS = ("item", "location", "bom")


# -----------------------------------------------------------------------------
# Fetch
# -----------------------------------------------------------------------------

def fetch_report(api=data_integrator) -> Optional[Tuple[List[InventoryRow], List[BomEntry]]]:
    """
    (inventory rows, BOM entries), or None if either call failed.
    """
    try:
        rows = api.get_inventory_report()
        bom = api.get_bom()
    except InventoryApiError as e:
        logger.error("Loading inventory report failed: %s", e)
        return None

    logger.debug("Loaded %d inventory rows and %d BOM entries", len(rows), len(bom))
    return rows, bom


# -----------------------------------------------------------------------------
# Projections
# -----------------------------------------------------------------------------

def summarize_by_item(rows: Sequence[InventoryRow]) -> List[ItemSummary]:
    """
    One summary per barcode. The first row seen for a barcode supplies the
    descriptive fields; later rows only add quantity and locations.
    """
    by_barcode: Dict[str, ItemSummary] = {}

    for row in rows:
        summary = by_barcode.get(row.barcode)
        if summary is None:
            summary = ItemSummary(
                barcode=row.barcode,
                name=row.item_name,
                description=row.description,
                unit=row.unit,
                category=row.category,
                safe_stock=row.safe_stock,
            )
            by_barcode[row.barcode] = summary

        summary.total_qty += row.quantity
        if row.location_code:
            summary.locations.append(LocationQuantity(row.location_code, row.quantity))

    return sorted(by_barcode.values(), key=lambda s: natural_key(s.barcode))


def summarize_by_location(rows: Sequence[InventoryRow]) -> List[LocationRow]:
    """
    One record per stocked (location, item) row; unassigned and empty rows
    are left out. Rows sharing a location are not merged.
    """
    out = [
        LocationRow(
            code=row.location_code,
            barcode=row.barcode,
            name=row.item_name,
            description=row.description,
            unit=row.unit,
            category=row.category,
            quantity=row.quantity,
        )
        for row in rows
        if row.location_code and row.quantity > 0
    ]
    return sorted(out, key=lambda r: natural_key(r.code))


def flatten_bom(entries: Sequence[BomEntry]) -> List[BomRow]:
    return [
        BomRow(main_barcode=entry.main_barcode, component=comp, show_main=idx == 0)
        for entry in entries
        for idx, comp in enumerate(entry.components)
    ]


# -----------------------------------------------------------------------------
# Safe-stock inline edit
# -----------------------------------------------------------------------------

class EditStatus(str, Enum):
    CLEAN = "clean"
    PENDING = "pending"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True)
class SafeStockEdit:
    status: EditStatus
    value: int
    revert_to: int  # last value known to be stored on the server
    error: Optional[str] = None


def parse_safe_stock(raw) -> int:
    return max(0, parse_int(raw))


def apply_safe_stock(rows: Sequence[InventoryRow], barcode: str, value: int) -> List[InventoryRow]:
    return [replace(r, safe_stock=value) if r.barcode == barcode else r for r in rows]


def current_safe_stock(rows: Sequence[InventoryRow], barcode: str) -> int:
    for r in rows:
        if r.barcode == barcode:
            return r.safe_stock
    return 0


def begin_safe_stock_edit(
        rows: Sequence[InventoryRow],
        edits: Dict[str, SafeStockEdit],
        barcode: str,
        raw,
) -> Tuple[List[InventoryRow], Dict[str, SafeStockEdit]]:
    """
    Optimistic: the new value shows immediately, before the server has it.
    revert_to stays at the value from before the first uncommitted change.
    """
    value = parse_safe_stock(raw)
    previous = edits.get(barcode)

    if previous is not None and previous.status in (EditStatus.PENDING, EditStatus.FAILED):
        revert_to = previous.revert_to
    else:
        revert_to = current_safe_stock(rows, barcode)

    new_edits = dict(edits)
    new_edits[barcode] = SafeStockEdit(EditStatus.PENDING, value, revert_to)
    return apply_safe_stock(rows, barcode, value), new_edits


def commit_safe_stock_edit(edits: Dict[str, SafeStockEdit], barcode: str) -> Dict[str, SafeStockEdit]:
    edit = edits[barcode]
    new_edits = dict(edits)
    new_edits[barcode] = SafeStockEdit(EditStatus.COMMITTED, edit.value, edit.value)
    return new_edits


def fail_safe_stock_edit(
        edits: Dict[str, SafeStockEdit],
        barcode: str,
        message: str,
) -> Dict[str, SafeStockEdit]:
    # the optimistic value stays on screen; revert is a separate user action
    edit = edits[barcode]
    new_edits = dict(edits)
    new_edits[barcode] = replace(edit, status=EditStatus.FAILED, error=message)
    return new_edits


def revert_safe_stock_edit(
        rows: Sequence[InventoryRow],
        edits: Dict[str, SafeStockEdit],
        barcode: str,
) -> Tuple[List[InventoryRow], Dict[str, SafeStockEdit]]:
    edit = edits.get(barcode)
    if edit is None:
        return list(rows), dict(edits)

    new_edits = dict(edits)
    new_edits[barcode] = SafeStockEdit(EditStatus.CLEAN, edit.revert_to, edit.revert_to)
    return apply_safe_stock(rows, barcode, edit.revert_to), new_edits


def save_safe_stock(
        rows: Sequence[InventoryRow],
        edits: Dict[str, SafeStockEdit],
        barcode: str,
        raw,
        api=data_integrator,
) -> Tuple[List[InventoryRow], Dict[str, SafeStockEdit]]:
    """Optimistic update, then persist; the edit ends COMMITTED or FAILED."""
    rows, edits = begin_safe_stock_edit(rows, edits, barcode, raw)
    ok, msg, _ = api.update_safe_stock(barcode, edits[barcode].value)
    if ok:
        return rows, commit_safe_stock_edit(edits, barcode)
    return rows, fail_safe_stock_edit(edits, barcode, msg)


def changed_safe_stocks(
        before: pd.DataFrame,
        after: pd.DataFrame,
        key_column: str,
        value_column: str,
) -> List[Tuple[str, Any]]:
    """
    (barcode, new value) for every editor row whose safe-stock cell changed.
    Cleared cells come back as NaN and are not treated as a change.
    """
    new_values = after[value_column]
    mask = new_values.notna() & (new_values != before[value_column])
    return [(row[key_column], row[value_column]) for _, row in after[mask].iterrows()]


# -----------------------------------------------------------------------------
# Delete
# -----------------------------------------------------------------------------

DELETE_FAILED_FALLBACK = "未知錯誤"


@dataclass(frozen=True)
class DeleteDialogState:
    target: Optional[DeleteTarget] = None
    error: Optional[str] = None
    done: bool = False

    @property
    def is_open(self) -> bool:
        return self.target is not None and not self.done


def can_delete(item: ItemSummary) -> bool:
    """Only items with nothing left in stock may be deleted."""
    return item.total_qty == 0


def open_delete_dialog(item: ItemSummary) -> DeleteDialogState:
    if not can_delete(item):
        raise ValidationFailure(f"Item {item.barcode} still has {item.total_qty} in stock")
    return DeleteDialogState(target=DeleteTarget(barcode=item.barcode, name=item.name))


def submit_delete(
        state: DeleteDialogState,
        password: str,
        token: Optional[str],
        api=data_integrator,
) -> DeleteDialogState:
    """
    The password is only checked for presence here; the server decides
    whether it is right. On failure the dialog stays open for a retry.
    """
    if not state.is_open:
        return state
    if not password:
        return replace(state, error="請輸入管理員密碼")

    ok, msg, _ = api.delete_item(state.target.barcode, password, token)
    if ok:
        return replace(state, error=None, done=True)
    return replace(state, error=f"刪除失敗: {msg or DELETE_FAILED_FALLBACK}")


def initial_tab(requested: Optional[str]) -> str:
    return requested if requested in REPORT_TABS else "item"
