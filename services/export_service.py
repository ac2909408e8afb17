# services/export_service.py
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Dict, Sequence

import pandas as pd

from domain.models import BomRow, ItemSummary, LocationRow
from utils.formatting import date_stamp
from utils.location_codes import format_locations

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
FILE_PREFIX = "庫存報表"

# sheet label per report tab
SHEET_LABELS: Dict[str, str] = {
    "item": "料件總表",
    "location": "儲位總表",
    "bom": "主件總表",
}

ITEM_COLUMNS = ["元件品號", "品名", "規格", "庫存單位", "庫別名稱", "儲位代碼", "數量", "安全庫存"]
LOCATION_COLUMNS = ["儲位代碼", "元件品號", "品名", "規格", "庫存單位", "庫別名稱", "數量"]
BOM_COLUMNS = [
    "主件品號", "元件品號", "品名", "規格", "單/複數單位", "取替代品群組",
    "屬性", "組成用量", "當前庫存量", "安全庫存", "儲位",
]


@dataclass(frozen=True)
class ExportFile:
    file_name: str
    sheet_name: str
    content: bytes
    mime: str = XLSX_MIME


def item_frame(items: Sequence[ItemSummary]) -> pd.DataFrame:
    records = [
        {
            "元件品號": i.barcode,
            "品名": i.name,
            "規格": i.description,
            "庫存單位": i.unit,
            "庫別名稱": i.category,
            "儲位代碼": format_locations(i.locations, sep="\n"),
            "數量": i.total_qty,
            "安全庫存": i.safe_stock,
        }
        for i in items
    ]
    return pd.DataFrame(records, columns=ITEM_COLUMNS)


def location_frame(locations: Sequence[LocationRow]) -> pd.DataFrame:
    records = [
        {
            "儲位代碼": row.code,
            "元件品號": row.barcode,
            "品名": row.name,
            "規格": row.description,
            "庫存單位": row.unit,
            "庫別名稱": row.category,
            "數量": row.quantity,
        }
        for row in locations
    ]
    return pd.DataFrame(records, columns=LOCATION_COLUMNS)


def bom_frame(bom_rows: Sequence[BomRow]) -> pd.DataFrame:
    # every row carries its main barcode; the on-screen grouping is display only
    records = [
        {
            "主件品號": r.main_barcode,
            "元件品號": r.component.component_barcode,
            "品名": r.component.component_name,
            "規格": r.component.description,
            "單/複數單位": "單一",
            "取替代品群組": "",
            "屬性": "廠內",
            "組成用量": r.component.required_qty,
            "當前庫存量": r.component.current_stock,
            "安全庫存": r.component.safe_stock,
            "儲位": r.component.locations,
        }
        for r in bom_rows
    ]
    return pd.DataFrame(records, columns=BOM_COLUMNS)


def export_frame(
        kind: str,
        *,
        items: Sequence[ItemSummary] = (),
        locations: Sequence[LocationRow] = (),
        bom_rows: Sequence[BomRow] = (),
) -> pd.DataFrame:
    if kind == "item":
        return item_frame(items)
    if kind == "location":
        return location_frame(locations)
    if kind == "bom":
        return bom_frame(bom_rows)
    raise ValueError(f"Unknown report tab: {kind}")


def export_file_name(kind: str, today: date) -> str:
    return f"{FILE_PREFIX}_{SHEET_LABELS[kind]}_{date_stamp(today)}.xlsx"


def to_xlsx_bytes(df: pd.DataFrame, sheet_name: str) -> bytes:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df.to_excel(writer, sheet_name=sheet_name[:31], index=False)  # Excel sheet name limit is 31 chars
    return output.getvalue()


def export_report(
        kind: str,
        *,
        items: Sequence[ItemSummary] = (),
        locations: Sequence[LocationRow] = (),
        bom_rows: Sequence[BomRow] = (),
        today: date,
) -> ExportFile:
    """
    Workbook with a single sheet holding the active report tab.
    Doesn't touch the data it is given.
    """
    df = export_frame(kind, items=items, locations=locations, bom_rows=bom_rows)
    sheet_name = SHEET_LABELS[kind]

    return ExportFile(
        file_name=export_file_name(kind, today),
        sheet_name=sheet_name,
        content=to_xlsx_bytes(df, sheet_name),
    )
