"""In-memory stand-in for the slice of the Firestore client the catalog store uses."""
import copy
import uuid

from firebase_admin import firestore


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._collection.docs.get(self.id))

    def set(self, data):
        self._collection.docs[self.id] = copy.deepcopy(data)

    def delete(self):
        self._collection.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=(), order=None, limit=None):
        self._collection = collection
        self._filters = list(filters)
        self._order = order
        self._limit = limit

    def where(self, field, op, value):
        assert op == '==', op
        return FakeQuery(self._collection, self._filters + [(field, value)], self._order, self._limit)

    def order_by(self, field, direction=None):
        return FakeQuery(self._collection, self._filters, (field, direction), self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._order, count)

    def stream(self):
        self._collection.client.check()
        items = [
            (doc_id, data) for doc_id, data in self._collection.docs.items()
            if all(data.get(field) == value for field, value in self._filters)
        ]
        if self._order:
            field, direction = self._order
            items.sort(key=lambda item: item[1].get(field), reverse=direction == firestore.Query.DESCENDING)
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, data in items:
            yield FakeSnapshot(doc_id, copy.deepcopy(data))


class FakeCollection(FakeQuery):
    def __init__(self, client, name):
        self.client = client
        self.name = name
        self.docs = {}
        super().__init__(self)

    def document(self, doc_id=None):
        self.client.check()
        return FakeDocumentRef(self, doc_id or uuid.uuid4().hex[:20])


class FakeFirestore:
    """Set ``fail`` to make every call raise, as an unreachable backend would."""

    def __init__(self):
        self.collections = {}
        self.fail = False

    def check(self):
        if self.fail:
            raise RuntimeError('firestore unavailable')

    def collection(self, name):
        self.check()
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]
