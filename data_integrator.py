import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from config import load_settings
from domain.errors import InventoryApiError, NotFoundError
from domain.models import BomEntry, InventoryRow, Item, ItemDetails, Location

logger = logging.getLogger(__name__)

settings = load_settings()


def _error_message(resp: requests.Response) -> str:
    """Server-provided `error` text if the body has one, else the HTTP status."""
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {resp.status_code}"


def _request(
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
) -> Any:
    url = f"{settings.api_url}{path}"
    logger.debug("%s %s params=%s", method, url, params)

    try:
        resp = requests.request(
            method,
            url,
            params=params,
            json=json,
            headers=headers,
            timeout=settings.api_timeout,
        )
    except requests.RequestException as e:
        raise InventoryApiError(f"Inventory API unreachable: {e}") from e

    if resp.status_code == 404:
        raise NotFoundError(_error_message(resp), resp.status_code)
    if not resp.ok:
        raise InventoryApiError(_error_message(resp), resp.status_code)

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as e:
        raise InventoryApiError(f"Invalid JSON from {path}: {e}", resp.status_code) from e


def _as_list(data: Any) -> List[Dict[str, Any]]:
    return data if isinstance(data, list) else []


def _item_path(barcode: str) -> str:
    return f"/items/{quote(barcode, safe='')}"


# -----------------------------------------------------------------------------
# Reads (raise InventoryApiError)
# -----------------------------------------------------------------------------

def get_locations() -> List[Location]:
    data = _request("GET", "/locations")
    return [Location.from_dict(row) for row in _as_list(data)]


def get_item_details(barcode: str) -> ItemDetails:
    """
    Returns the item master record plus one InventoryRow per location
    the item is stored in.
    Raises NotFoundError if the barcode is unknown.
    """
    data = _request("GET", _item_path(barcode))
    if not isinstance(data, dict) or not data.get("item"):
        raise NotFoundError(f"Item {barcode} not found", 404)

    item = Item.from_dict(data["item"])
    inventory = []
    for row in _as_list(data.get("inventory")):
        # inventory rows don't always repeat the item's own fields
        merged = {"barcode": item.barcode, "item_name": item.name, **row}
        inventory.append(InventoryRow.from_dict(merged))

    return ItemDetails(item=item, inventory=inventory)


def get_bom(barcode: Optional[str] = None) -> List[BomEntry]:
    params = {"barcode": barcode} if barcode else None
    data = _request("GET", "/bom", params=params)
    return [BomEntry.from_dict(row) for row in _as_list(data)]


def get_inventory_report() -> List[InventoryRow]:
    data = _request("GET", "/reports/inventory")
    return [InventoryRow.from_dict(row) for row in _as_list(data)]


# -----------------------------------------------------------------------------
# Writes (return (ok, message, data))
# -----------------------------------------------------------------------------

def update_safe_stock(barcode: str, safe_stock: int) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    if safe_stock < 0:
        return False, "Safe stock cannot be negative", None

    try:
        data = _request(
            "PUT",
            f"{_item_path(barcode)}/safe-stock",
            json={"safe_stock": safe_stock},
        )
    except InventoryApiError as e:
        logger.error("Updating safe stock of %s failed: %s", barcode, e.message)
        return False, e.message, None

    logger.info("Safe stock of %s set to %d", barcode, safe_stock)
    return True, "Updated", data


def delete_item(barcode: str, password: str, token: Optional[str]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Permanently delete an item together with its stock and transactions.
    The password is checked by the server; the token authenticates the caller.
    """
    headers = {"Authorization": f"Bearer {token}"} if token else None

    try:
        data = _request(
            "DELETE",
            _item_path(barcode),
            json={"password": password},
            headers=headers,
        )
    except InventoryApiError as e:
        logger.error("Deleting item %s failed: %s", barcode, e.message)
        return False, e.message, None

    logger.info("Deleted item %s", barcode)
    return True, "Deleted", data
