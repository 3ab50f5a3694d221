import logging
import threading

from brainsync.errors import BrainSyncError

logger = logging.getLogger(__name__)


class CatalogState:
    """Shared video list plus loading/error flags for the listing pages.

    Each list fetch records the generation it started under. Local mutations
    and newer fetches bump the generation, and a fetch that completes under an
    older generation (with data or with an error) is discarded. ``loading``
    stays set while any request is in flight, discarded ones included.
    """

    def __init__(self, client):
        self.client = client
        self.videos = []
        self.loading = False
        self.error = None
        self._generation = 0
        self._in_flight = 0
        self._lock = threading.RLock()
        self._listeners = []

    def subscribe(self, callback):
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self):
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback(self)

    @property
    def generation(self):
        return self._generation

    def _begin(self, bump=True):
        with self._lock:
            self._in_flight += 1
            self.loading = True
            self.error = None
            if bump:
                self._generation += 1
            generation = self._generation
        self._notify()
        return generation

    def _finish(self, error_message=None, error=None):
        """Close out one request; ``error_message`` becomes the user-visible error"""
        if error_message:
            logger.error(f"{error_message}: {error}")
        with self._lock:
            self._in_flight -= 1
            self.loading = self._in_flight > 0
            if error_message:
                self.error = error_message
        self._notify()

    def fetch_videos(self):
        """Refresh the list. Returns False when the response was stale or failed."""
        generation = self._begin()
        try:
            videos = self.client.list_all()
        except BrainSyncError as e:
            if generation != self._generation:
                logger.info(f"Discarding stale fetch failure (generation {generation}): {e}")
                self._finish()
                return False
            self._finish('Failed to fetch videos', e)
            return False

        with self._lock:
            stale = generation != self._generation
            if not stale:
                self.videos = videos
        if stale:
            logger.info(f"Discarding stale video list (generation {generation} < {self._generation})")
        self._finish()
        return not stale

    def add_video(self, fields):
        self._begin()
        try:
            video = self.client.create(fields)
        except BrainSyncError as e:
            self._finish('Failed to add video', e)
            raise
        with self._lock:
            self.videos = [video, *self.videos]
        self._finish()
        return video

    def delete_video(self, video_id):
        self._begin()
        try:
            self.client.delete_by_id(video_id)
        except BrainSyncError as e:
            self._finish('Failed to delete video', e)
            raise
        with self._lock:
            self.videos = [video for video in self.videos if video.id != video_id]
        self._finish()

    def get_videos_by_category(self, category):
        self._begin(bump=False)
        try:
            videos = self.client.list_by_category(category)
        except BrainSyncError as e:
            self._finish('Failed to fetch videos by category', e)
            return []
        self._finish()
        return videos

    def get_video_by_id(self, video_id):
        self._begin(bump=False)
        try:
            video = self.client.get_by_id(video_id)
        except BrainSyncError as e:
            self._finish('Failed to fetch video', e)
            return None
        self._finish()
        return video
