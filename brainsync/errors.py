# brainsync/errors.py
"""Error taxonomy shared by the catalog service and its client."""


class BrainSyncError(Exception):
    """Base error. ``status`` is the HTTP status the service answers with."""

    status = 500
    default_message = 'Something went wrong!'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message}


class NotFound(BrainSyncError):
    status = 404
    default_message = 'Video not found'


class ValidationGap(BrainSyncError):
    """A required field is missing or malformed."""

    status = 400
    default_message = 'Missing required fields'

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self):
        payload = super().to_dict()
        if self.fields:
            payload['fields'] = self.fields
        return payload


class RecordShapeError(ValidationGap):
    """A record received from the service does not have the VideoRecord shape."""

    default_message = 'Malformed video record'


class StoreFault(BrainSyncError):
    status = 500
    default_message = 'Store operation failed'


class AuthError(BrainSyncError):
    status = 401
    default_message = 'Authentication required'

    def __init__(self, message=None, status=None):
        super().__init__(message)
        if status is not None:
            self.status = status


class NetworkFault(BrainSyncError):
    """Client-side only: the call to the service never produced a response."""

    status = 503
    default_message = 'Network request failed'


class StorageUnavailable(BrainSyncError):
    status = 503
    default_message = 'Object storage is not configured'
