"""Filter and sort of the in-memory video list shown by the listing pages.

Runs entirely on data already fetched; no round-trip per query.
"""
import unicodedata
from collections.abc import Mapping
from datetime import datetime, timezone

from brainsync.errors import RecordShapeError
from brainsync_client.models import parse_timestamp

ALL_CATEGORIES = 'all'
SORT_KEYS = ('newest', 'oldest', 'title', 'instructor')

# Records without a usable createdAt sort as the oldest
UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _field(record, name):
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _text(record, name):
    value = _field(record, name)
    return value if isinstance(value, str) else ''


def _created_at(record):
    try:
        return parse_timestamp(_field(record, 'createdAt'))
    except RecordShapeError:
        return UNDATED


def collation_key(text):
    """Locale-aware ordering: base letters first, then case, then raw text"""
    folded = text.casefold()
    base = ''.join(ch for ch in unicodedata.normalize('NFKD', folded) if not unicodedata.combining(ch))
    return base, folded, text


def matches_term(record, term):
    needle = term.lower()
    return any(needle in _text(record, name).lower() for name in ('title', 'description', 'instructor'))


def query_catalog(records, term='', category=ALL_CATEGORIES, sort_key='newest'):
    filtered = list(records)

    if term:
        filtered = [record for record in filtered if matches_term(record, term)]

    if category != ALL_CATEGORIES:
        filtered = [record for record in filtered if _field(record, 'category') == category]

    if sort_key == 'newest':
        return sorted(filtered, key=_created_at, reverse=True)
    if sort_key == 'oldest':
        return sorted(filtered, key=_created_at)
    if sort_key == 'title':
        return sorted(filtered, key=lambda record: collation_key(_text(record, 'title')))
    if sort_key == 'instructor':
        return sorted(filtered, key=lambda record: collation_key(_text(record, 'instructor')))
    return filtered


def category_options(records):
    """'all' followed by the distinct categories in first-seen order"""
    seen = {}
    for record in records:
        seen.setdefault(_field(record, 'category'), None)
    return [ALL_CATEGORIES, *seen]
