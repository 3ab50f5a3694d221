# brainsync/models.py
"""VideoRecord fields and create-path preparation"""

from datetime import datetime, timezone

from .errors import ValidationGap

# Fields a client may supply on create; anything else in the body is ignored
CREATE_FIELDS = ('title', 'description', 'category', 'instructor', 'videoUrl', 'videoKey', 'instructorId')
REQUIRED_FIELDS = ('title', 'description', 'category', 'videoUrl')

# Store-assigned, immutable after creation
ID_FIELD = 'id'
CREATED_AT_FIELD = 'createdAt'

DEFAULT_INSTRUCTOR = 'Unknown'
DEFAULT_INSTRUCTOR_ID = 'unknown'


def utc_timestamp(now=None):
    """ISO-8601 UTC timestamp with millisecond precision"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds')


def missing_required_fields(data):
    missing = []
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def prepare_create_fields(data, strict=True):
    """Pick the writable fields out of a request body.

    With ``strict`` a missing or blank required field raises ValidationGap.
    Without it the body is stored as given, as long as it is an object.
    """
    if not isinstance(data, dict):
        raise ValidationGap('Invalid JSON body')

    if strict:
        missing = missing_required_fields(data)
        if missing:
            raise ValidationGap('Missing required fields', fields=missing)

    fields = {key: data[key] for key in CREATE_FIELDS if key in data}
    fields.setdefault('instructor', DEFAULT_INSTRUCTOR)
    fields.setdefault('instructorId', DEFAULT_INSTRUCTOR_ID)
    return fields


def document_to_record(doc_id, data):
    """Firestore document -> JSON record with its id"""
    record = dict(data or {})
    record[ID_FIELD] = doc_id
    created_at = record.get(CREATED_AT_FIELD)
    if isinstance(created_at, datetime):
        record[CREATED_AT_FIELD] = utc_timestamp(created_at)
    return record
