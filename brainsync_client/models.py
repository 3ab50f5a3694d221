from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from brainsync.errors import RecordShapeError

TEXT_FIELDS = ('title', 'description', 'category', 'instructor', 'instructorId', 'videoUrl', 'videoKey')


def parse_timestamp(value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            raise RecordShapeError(f"Unparseable createdAt: {value!r}", fields=['createdAt'])
    else:
        raise RecordShapeError('Missing createdAt', fields=['createdAt'])
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class VideoRecord:
    id: str
    title: str
    description: str
    category: str
    instructor: str
    instructorId: str
    videoUrl: str
    createdAt: datetime
    videoKey: str = ''

    @classmethod
    def from_dict(cls, payload):
        """Build a record from a service payload, rejecting anything not shaped like one"""
        if not isinstance(payload, dict):
            raise RecordShapeError(f"Expected an object, got {type(payload).__name__}")

        record_id = payload.get('id') or payload.get('_id')
        if not record_id or not isinstance(record_id, str):
            raise RecordShapeError('Missing id', fields=['id'])

        values = {}
        bad = []
        for field in TEXT_FIELDS:
            value = payload.get(field)
            if value is None:
                value = ''
            elif not isinstance(value, str):
                bad.append(field)
            values[field] = value
        if bad:
            raise RecordShapeError('Non-text fields: ' + ', '.join(bad), fields=bad)

        return cls(id=record_id, createdAt=parse_timestamp(payload.get('createdAt')), **values)

    def to_dict(self):
        data = asdict(self)
        data['createdAt'] = self.createdAt.isoformat(timespec='milliseconds')
        return data


def parse_records(payload):
    if not isinstance(payload, list):
        raise RecordShapeError(f"Expected a list of videos, got {type(payload).__name__}")
    return [VideoRecord.from_dict(item) for item in payload]
