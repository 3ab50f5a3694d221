import threading

SEARCH_DEBOUNCE_SECONDS = 0.3

_NOTHING = object()


class Debouncer:
    """Delays ``callback`` until calls stop arriving for ``wait`` seconds.

    Only the latest value is delivered. ``close()`` on teardown so a pending
    timer cannot fire into a consumer that is gone.
    """

    def __init__(self, callback, wait=SEARCH_DEBOUNCE_SECONDS):
        self.callback = callback
        self.wait = wait
        self._lock = threading.Lock()
        self._timer = None
        self._token = 0
        self._value = _NOTHING
        self._closed = False

    def __call__(self, value):
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._value = value
            self._token += 1
            self._timer = threading.Timer(self.wait, self._fire, args=(self._token,))
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self):
        with self._lock:
            return self._value is not _NOTHING

    def _take(self, token=None):
        """Pop the pending value; a timer superseded by a later call gets nothing"""
        with self._lock:
            if self._closed or (token is not None and token != self._token):
                return _NOTHING
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            value, self._value = self._value, _NOTHING
            return value

    def _fire(self, token=None):
        value = self._take(token)
        if value is not _NOTHING:
            self.callback(value)

    def flush(self):
        self._fire()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._value = _NOTHING

    def close(self):
        with self._lock:
            self._closed = True
        self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
