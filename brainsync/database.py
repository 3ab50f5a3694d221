# brainsync/database.py

import logging

import firebase_admin
from firebase_admin import credentials, firestore
from flask import current_app

from .config import load_firebase_creds
from .errors import NotFound, StoreFault
from .models import CREATED_AT_FIELD, document_to_record, utc_timestamp

logger = logging.getLogger(__name__)


def initialize_firebase():
    """Initialize the Firebase Admin SDK (service account from env, else ADC)"""
    if not firebase_admin._apps:
        creds = load_firebase_creds()
        if creds:
            cred = credentials.Certificate(creds)
        else:
            cred = credentials.ApplicationDefault()
        firebase_admin.initialize_app(cred)
        logger.info("✅ Firebase initialized")
    return firebase_admin.get_app()


class CatalogStore:
    """Video records kept as documents in one Firestore collection.

    Every operation stands alone; there are no multi-document transactions.
    Errors raised by the client are logged and surfaced as StoreFault.
    """

    def __init__(self, client, collection='videos'):
        self.client = client
        self.collection_name = collection

    @property
    def collection(self):
        return self.client.collection(self.collection_name)

    def _fault(self, action, error):
        logger.error(f"Store {action} failed: {error}")
        return StoreFault(f'Error {action}')

    def list_all(self):
        try:
            docs = self.collection.order_by(
                CREATED_AT_FIELD, direction=firestore.Query.DESCENDING
            ).stream()
            return [document_to_record(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            raise self._fault('fetching videos', e) from e

    def get_by_id(self, video_id):
        try:
            doc = self.collection.document(video_id).get()
        except Exception as e:
            raise self._fault('fetching video', e) from e
        if not doc.exists:
            raise NotFound()
        return document_to_record(doc.id, doc.to_dict())

    def list_by_category(self, category):
        try:
            docs = self.collection.where('category', '==', category).stream()
            records = [document_to_record(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            raise self._fault('fetching videos by category', e) from e
        # Sorted here rather than by the query to avoid a composite index
        records.sort(key=lambda record: record.get(CREATED_AT_FIELD) or '', reverse=True)
        return records

    def create(self, fields):
        data = dict(fields)
        data[CREATED_AT_FIELD] = utc_timestamp()
        try:
            doc_ref = self.collection.document()
            doc_ref.set(data)
        except Exception as e:
            raise self._fault('creating video', e) from e
        logger.info(f"✅ Video created: {doc_ref.id}")
        return document_to_record(doc_ref.id, data)

    def delete_by_id(self, video_id):
        try:
            doc_ref = self.collection.document(video_id)
            if not doc_ref.get().exists:
                raise NotFound()
            doc_ref.delete()
        except NotFound:
            raise
        except Exception as e:
            raise self._fault('deleting video', e) from e
        logger.info(f"🗑️ Video deleted: {video_id}")

    def ping(self):
        """One-document read used by the readiness check"""
        try:
            list(self.collection.limit(1).stream())
            return True
        except Exception as e:
            logger.warning(f"Store ping failed: {e}")
            return False


def get_store():
    """Catalog store for the current app, created on first use"""
    store = current_app.extensions.get('catalog_store')
    if store is None:
        initialize_firebase()
        store = CatalogStore(firestore.client(), current_app.config['VIDEOS_COLLECTION'])
        current_app.extensions['catalog_store'] = store
    return store
