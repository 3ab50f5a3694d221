import threading
from datetime import datetime, timedelta, timezone

from brainsync_client.catalog_query import ALL_CATEGORIES, category_options, query_catalog
from brainsync_client.debounce import SEARCH_DEBOUNCE_SECONDS, Debouncer


class CatalogListing:
    """Search, category and sort controls over a CatalogState.

    One instance backs a listing page (home or dashboard); ``close()`` on
    teardown so a debounced search cannot land after the page is gone.
    """

    def __init__(self, state, debounce_wait=SEARCH_DEBOUNCE_SECONDS):
        self.state = state
        self.term = ''
        self.category = ALL_CATEGORIES
        self.sort_key = 'newest'
        self._lock = threading.Lock()
        self._search = Debouncer(self.set_search_now, wait=debounce_wait)

    def search(self, text):
        self._search(text)

    def set_search_now(self, text):
        with self._lock:
            self.term = text

    def select_category(self, category):
        with self._lock:
            self.category = category

    def sort_by(self, sort_key):
        with self._lock:
            self.sort_key = sort_key

    def results(self):
        with self._lock:
            term, category, sort_key = self.term, self.category, self.sort_key
        return query_catalog(self.state.videos, term, category, sort_key)

    def categories(self):
        return category_options(self.state.videos)

    @property
    def filtering(self):
        return bool(self.term) or self.category != ALL_CATEGORIES

    def close(self):
        self._search.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def owned_by(records, user_id):
    return [record for record in records if user_id and record.instructorId == user_id]


def dashboard_stats(records, user_id=None, role=None, now=None):
    """Counts for the dashboard cards; ``my_courses`` only narrows for instructors"""
    records = list(records)
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)

    return {
        'total': len(records),
        'categories': len(category_options(records)) - 1,
        'this_week': sum(1 for record in records if record.createdAt > week_ago),
        'my_courses': len(owned_by(records, user_id)) if role == 'instructor' else len(records),
    }
