import logging
from pathlib import Path
from urllib.parse import quote

import requests

from brainsync.errors import AuthError, NetworkFault, NotFound, StoreFault, ValidationGap
from brainsync.models import missing_required_fields
from brainsync_client.models import VideoRecord, parse_records

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class CatalogClient:
    """HTTP client for the ``/api/videos`` collection.

    Every call fails on its own; nothing is retried.
    """

    def __init__(self, base_url='http://localhost:5000/api', session=None, id_token=None,
                 timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.id_token = id_token
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        headers = kwargs.pop('headers', {})
        if self.id_token:
            headers['Authorization'] = f'Bearer {self.id_token}'
        url = f'{self.base_url}{path}'

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NetworkFault(str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.ok:
            return payload

        message = payload.get('message') if isinstance(payload, dict) else None
        status = response.status_code
        logger.warning(f"{method} {url} -> {status}: {message}")
        if status == 404:
            raise NotFound(message)
        if status == 400:
            raise ValidationGap(message, fields=payload.get('fields') if isinstance(payload, dict) else None)
        if status in (401, 403):
            raise AuthError(message, status=status)
        raise StoreFault(message or f'Unexpected status {status}')

    def list_all(self):
        return parse_records(self._request('GET', '/videos'))

    def get_by_id(self, video_id):
        return VideoRecord.from_dict(self._request('GET', f"/videos/{quote(video_id, safe='')}"))

    def list_by_category(self, category):
        return parse_records(self._request('GET', f"/videos/category/{quote(category, safe='')}"))

    def create(self, fields):
        missing = missing_required_fields(fields)
        if missing:
            raise ValidationGap('Please fill in all required fields.', fields=missing)
        return VideoRecord.from_dict(self._request('POST', '/videos', json=fields))

    def delete_by_id(self, video_id):
        payload = self._request('DELETE', f"/videos/{quote(video_id, safe='')}")
        return payload.get('message', '') if isinstance(payload, dict) else ''

    def upload_video(self, path):
        """Upload a video file; returns ``{'videoUrl', 'videoKey'}`` to merge into the create fields"""
        path = Path(path)
        with path.open('rb') as fp:
            payload = self._request('POST', '/videos/upload', files={'file': (path.name, fp)})
        return {'videoUrl': payload['videoUrl'], 'videoKey': payload['videoKey']}

    def health(self):
        return self._request('GET', '/health')
