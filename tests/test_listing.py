import threading
import unittest
from datetime import datetime, timezone
from unittest import mock

from brainsync_client.catalog_state import CatalogState
from brainsync_client.debounce import Debouncer
from brainsync_client.listing import CatalogListing, dashboard_stats, owned_by
from brainsync_client.models import VideoRecord


def record(record_id, title, category, created_at, instructor_id='uid-a', instructor='alice'):
    return VideoRecord.from_dict({'id': record_id, 'title': title, 'description': '', 'category': category,
                                  'instructor': instructor, 'instructorId': instructor_id,
                                  'videoUrl': 'https://cdn.example.com/v.mp4', 'createdAt': created_at})


class DebouncerTests(unittest.TestCase):
    def test_only_last_value_fires(self):
        fired = threading.Event()
        values = []

        def callback(value):
            values.append(value)
            fired.set()

        debouncer = Debouncer(callback, wait=0.05)
        for text in ('g', 'go', 'gol'):
            debouncer(text)
        self.assertTrue(fired.wait(2))
        self.assertEqual(values, ['gol'])
        self.assertFalse(debouncer.pending)

    def test_cancel_drops_pending_call(self):
        callback = mock.Mock()
        debouncer = Debouncer(callback, wait=0.05)
        debouncer('go')
        self.assertTrue(debouncer.pending)
        debouncer.cancel()
        threading.Event().wait(0.15)
        callback.assert_not_called()

    def test_flush_fires_now(self):
        callback = mock.Mock()
        debouncer = Debouncer(callback, wait=10)
        debouncer('go')
        debouncer.flush()
        callback.assert_called_once_with('go')
        debouncer.flush()
        callback.assert_called_once_with('go')

    def test_closed_debouncer_ignores_calls(self):
        callback = mock.Mock()
        with Debouncer(callback, wait=0.01) as debouncer:
            pass
        debouncer('go')
        self.assertFalse(debouncer.pending)

    def test_superseded_timer_delivers_nothing(self):
        callback = mock.Mock()
        debouncer = Debouncer(callback, wait=10)
        debouncer('g')
        debouncer('go')
        debouncer._fire(1)
        callback.assert_not_called()
        self.assertTrue(debouncer.pending)

        debouncer._fire(2)
        callback.assert_called_once_with('go')

    def test_timer_firing_after_close_delivers_nothing(self):
        callback = mock.Mock()
        debouncer = Debouncer(callback, wait=10)
        debouncer('go')
        debouncer.close()
        debouncer._fire(1)
        callback.assert_not_called()


class CatalogListingTests(unittest.TestCase):
    def setUp(self):
        self.state = CatalogState(mock.Mock())
        self.state.videos = [
            record('1', 'Intro to Go', 'Programming', '2026-01-01T00:00:00Z'),
            record('2', 'Advanced Go', 'Programming', '2026-02-01T00:00:00Z'),
            record('3', 'Sketching', 'Art', '2026-03-01T00:00:00Z', instructor_id='uid-b'),
        ]
        self.listing = CatalogListing(self.state, debounce_wait=10)

    def tearDown(self):
        self.listing.close()

    def test_defaults_show_everything_newest_first(self):
        self.assertEqual([v.id for v in self.listing.results()], ['3', '2', '1'])
        self.assertEqual(self.listing.categories(), ['all', 'Programming', 'Art'])
        self.assertFalse(self.listing.filtering)

    def test_search_applies_after_debounce(self):
        self.listing.search('intro')
        self.assertEqual(len(self.listing.results()), 3)
        self.listing._search.flush()
        self.assertEqual([v.id for v in self.listing.results()], ['1'])

    def test_close_cancels_pending_search(self):
        self.listing.search('intro')
        self.listing.close()
        self.listing._search.flush()
        self.assertEqual(self.listing.term, '')

    def test_category_and_sort(self):
        self.listing.select_category('Programming')
        self.listing.sort_by('title')
        self.assertEqual([v.title for v in self.listing.results()], ['Advanced Go', 'Intro to Go'])
        self.assertTrue(self.listing.filtering)

    def test_dashboard_stats(self):
        now = datetime(2026, 3, 5, tzinfo=timezone.utc)
        stats = dashboard_stats(self.state.videos, user_id='uid-a', role='instructor', now=now)
        self.assertEqual(stats, {'total': 3, 'categories': 2, 'this_week': 1, 'my_courses': 2})

        student = dashboard_stats(self.state.videos, user_id='uid-a', role='student', now=now)
        self.assertEqual(student['my_courses'], 3)

    def test_owned_by(self):
        self.assertEqual([v.id for v in owned_by(self.state.videos, 'uid-b')], ['3'])
        self.assertEqual(owned_by(self.state.videos, None), [])


if __name__ == '__main__':
    unittest.main()
