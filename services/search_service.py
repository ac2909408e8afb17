# services/search_service.py
"""
Barcode search for the overview page.

A scanned barcode may belong to a main assembly (has a BOM) or to a single
component, and the page can't tell which before asking. The BOM endpoint is
tried first; the item endpoint only when that yields nothing.

Debounce and response ordering are kept as plain state transitions on
SearchState so they can be driven by a Streamlit fragment and tested
without one.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

import data_integrator
from domain.errors import InventoryApiError
from domain.models import (
    BomEntry,
    ComponentStock,
    Highlight,
    InventoryRow,
    SearchKind,
    SearchResult,
)
from utils.location_codes import parse_code_qty_list

logger = logging.getLogger(__name__)


def select_bom_entry(entries: Sequence[BomEntry], query: str) -> Optional[BomEntry]:
    """Exact main_barcode match wins; otherwise the first entry returned."""
    if not entries:
        return None
    for entry in entries:
        if entry.main_barcode == query:
            return entry
    return entries[0]


def bom_highlights(entry: BomEntry) -> List[Highlight]:
    """
    One highlight per distinct location code (first-seen order), carrying
    every component stored there.
    """
    by_code: Dict[str, List[ComponentStock]] = {}

    for comp in entry.components:
        for loc in parse_code_qty_list(comp.locations):
            by_code.setdefault(loc.code, []).append(
                ComponentStock(
                    barcode=comp.component_barcode,
                    name=comp.component_name,
                    stock=loc.quantity,
                )
            )

    return [Highlight(location_code=code, components=comps) for code, comps in by_code.items()]


def item_highlights(inventory: Sequence[InventoryRow]) -> List[Highlight]:
    return [
        Highlight(location_code=row.location_code, quantity=row.quantity)
        for row in inventory
        if row.location_code
    ]


def resolve_search(query: str, api=data_integrator) -> Optional[SearchResult]:
    """
    Returns a BOM result, an ITEM result, or None if neither endpoint
    knows the barcode. Never raises for API failures.
    """
    query = query.strip()
    if not query:
        return None

    # 1) main assembly?
    try:
        entries = api.get_bom(query)
        matched = select_bom_entry(entries, query)
        if matched is not None:
            return SearchResult(
                kind=SearchKind.BOM,
                data=matched,
                highlights=bom_highlights(matched),
            )
    except InventoryApiError as e:
        logger.warning("BOM search for %s failed, falling back to item details: %s", query, e)

    # 2) single item
    try:
        details = api.get_item_details(query)
    except InventoryApiError as e:
        logger.info("No item found for %s: %s", query, e)
        return None

    return SearchResult(
        kind=SearchKind.ITEM,
        data=details.item,
        highlights=item_highlights(details.inventory),
    )


# -----------------------------------------------------------------------------
# Debounce + request ordering
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchState:
    query: str = ""
    deadline: Optional[float] = None  # monotonic time the pending query fires at
    issued_seq: int = 0  # sequence number of the latest issued request
    result: Optional[SearchResult] = None


def on_query_changed(state: SearchState, query: str, now: float, delay: float) -> SearchState:
    """
    Every change drops the current result and invalidates any request
    still in flight. A non-blank query is (re)armed to fire `delay` later.
    """
    if not query.strip():
        return SearchState(query=query, issued_seq=state.issued_seq + 1)
    return replace(
        state,
        query=query,
        deadline=now + delay,
        issued_seq=state.issued_seq + 1,
        result=None,
    )


def take_due_query(state: SearchState, now: float) -> Tuple[SearchState, Optional[int]]:
    """
    If the pending query's deadline has passed, issue it: returns the new
    state and the sequence number to resolve under. Otherwise (state, None).
    """
    if state.deadline is None or now < state.deadline:
        return state, None

    seq = state.issued_seq + 1
    return replace(state, deadline=None, issued_seq=seq), seq


def on_search_resolved(state: SearchState, seq: int, result: Optional[SearchResult]) -> SearchState:
    if seq != state.issued_seq:
        logger.debug("Dropping stale search response #%d (latest #%d)", seq, state.issued_seq)
        return state
    return replace(state, result=result)


def clear_search(state: SearchState) -> SearchState:
    return on_query_changed(state, "", 0.0, 0.0)
