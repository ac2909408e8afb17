# services/stats_service.py
import logging
from typing import Iterable, List, Optional, Pattern, Sequence

import data_integrator
from domain.errors import InventoryApiError
from domain.models import Location, OverviewStats
from utils.location_codes import compile_patterns, is_storage_location

logger = logging.getLogger(__name__)


def storage_locations(
        locations: Iterable[Location],
        patterns: Sequence[Pattern],
) -> List[Location]:
    """Real storage cells only; aisle labels, legends, pillars and gates are dropped."""
    return [loc for loc in locations if is_storage_location(loc.code, patterns)]


def compute_stats(
        locations: Sequence[Location],
        admin_patterns: Sequence[str],
) -> OverviewStats:
    """
    total_stock counts every location, administrative ones included.
    occupied/empty only count real storage cells.
    """
    cells = storage_locations(locations, compile_patterns(admin_patterns))
    occupied = sum(1 for loc in cells if loc.total_quantity > 0)

    return OverviewStats(
        total_stock=sum(loc.total_quantity for loc in locations),
        occupied_cells=occupied,
        empty_cells=len(cells) - occupied,
        low_stock=0,
    )


def fetch_stats(admin_patterns: Sequence[str]) -> Optional[OverviewStats]:
    """
    Returns None when the API call fails; the caller keeps showing
    whatever it had.
    """
    try:
        locations = data_integrator.get_locations()
    except InventoryApiError as e:
        logger.error("Refreshing location stats failed: %s", e)
        return None

    return compute_stats(locations, admin_patterns)
