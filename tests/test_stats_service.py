from unittest.mock import patch

from config import DEFAULT_ADMIN_LOCATION_PATTERNS
from domain.errors import InventoryApiError
from domain.models import Location, OverviewStats
from services import stats_service
from services.stats_service import compute_stats, storage_locations
from utils.location_codes import compile_patterns


def test_compute_stats(locations):
    stats = compute_stats(locations, DEFAULT_ADMIN_LOCATION_PATTERNS)

    # storage cells: A-01 (5), A-02 (0), #B-01#V_2 (7)
    assert stats == OverviewStats(total_stock=15, occupied_cells=2, empty_cells=1, low_stock=0)


def test_total_stock_includes_administrative_locations(locations):
    stats = compute_stats(locations, DEFAULT_ADMIN_LOCATION_PATTERNS)
    assert stats.total_stock == sum(loc.total_quantity for loc in locations)


def test_occupied_plus_empty_equals_storage_cells(locations):
    patterns = compile_patterns(DEFAULT_ADMIN_LOCATION_PATTERNS)
    stats = compute_stats(locations, DEFAULT_ADMIN_LOCATION_PATTERNS)
    assert stats.occupied_cells + stats.empty_cells == len(storage_locations(locations, patterns))


def test_patterns_are_configurable(locations):
    stats = compute_stats(locations, [])
    assert stats.occupied_cells + stats.empty_cells == len(locations)


def test_compute_stats_empty():
    assert compute_stats([], DEFAULT_ADMIN_LOCATION_PATTERNS) == OverviewStats()


def test_fetch_stats_swallows_api_errors():
    with patch.object(stats_service.data_integrator, "get_locations", side_effect=InventoryApiError("down")):
        assert stats_service.fetch_stats(DEFAULT_ADMIN_LOCATION_PATTERNS) is None


def test_fetch_stats():
    with patch.object(stats_service.data_integrator, "get_locations", return_value=[Location("A-01", 3)]):
        stats = stats_service.fetch_stats(DEFAULT_ADMIN_LOCATION_PATTERNS)
    assert stats == OverviewStats(total_stock=3, occupied_cells=1, empty_cells=0)
