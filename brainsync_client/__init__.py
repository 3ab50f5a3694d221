"""Python client for the BrainSync catalog: CRUD calls, shared list state and the listing query pipeline."""

from brainsync_client.catalog_client import CatalogClient
from brainsync_client.catalog_query import ALL_CATEGORIES, SORT_KEYS, category_options, query_catalog
from brainsync_client.catalog_state import CatalogState
from brainsync_client.debounce import Debouncer
from brainsync_client.listing import CatalogListing, dashboard_stats, owned_by
from brainsync_client.models import VideoRecord

__all__ = [
    'ALL_CATEGORIES',
    'SORT_KEYS',
    'CatalogClient',
    'CatalogListing',
    'CatalogState',
    'Debouncer',
    'VideoRecord',
    'category_options',
    'dashboard_stats',
    'owned_by',
    'query_catalog',
]
