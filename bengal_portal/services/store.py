# bengal_portal/services/store.py
"""
Durable key-value store for the portal.

Every logical collection (session, jobs, quotes, chat history) lives under
one key as a JSON document. Managers never talk to a store directly: they
go through a CollectionRepository bound to a single key, which owns the
encode/decode step and the fallback to seed data when a payload is missing
or unreadable.
"""

import json
import logging

from bengal_portal.models import db, StoredCollection
from bengal_portal.errors import CorruptCollectionError

logger = logging.getLogger(__name__)

SESSION_KEY = 'session'
JOBS_KEY = 'jobs'
QUOTES_KEY = 'quotes'
CHAT_HISTORY_KEY = 'chatHistory'


class SqlAlchemyStore:
    """Store backed by the stored_collections table. Requires an app context."""

    def __init__(self, prefix=''):
        self.prefix = prefix

    def _key(self, key):
        return f"{self.prefix}{key}"

    def get(self, key):
        row = db.session.get(StoredCollection, self._key(key))
        return row.payload if row else None

    def set(self, key, value):
        try:
            row = db.session.get(StoredCollection, self._key(key))
            if row is None:
                row = StoredCollection(key=self._key(key), payload=value)
                db.session.add(row)
            else:
                row.payload = value
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error writing store key '{key}': {str(e)}")
            raise

    def remove(self, key):
        try:
            row = db.session.get(StoredCollection, self._key(key))
            if row is not None:
                db.session.delete(row)
                db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error removing store key '{key}': {str(e)}")
            raise


class MemoryStore:
    """Dict-backed store with the same surface, for tests and scripts."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def remove(self, key):
        self.data.pop(key, None)


class CollectionRepository:
    """
    Read/write access to one JSON collection in a store.

    Args:
        store: object with get/set/remove
        key (str): logical collection key
        decode (callable): builds one record from its dict form
        seed (callable): returns the records to use when the key is absent
            or unreadable; defaults to an empty list
    """

    def __init__(self, store, key, decode, seed=None):
        self.store = store
        self.key = key
        self.decode = decode
        self.seed = seed or list

    def _parse(self, raw):
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError(f"expected a list, got {type(items).__name__}")
            return [self.decode(item) for item in items]
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptCollectionError(self.key, f"Stored '{self.key}' payload is unreadable: {e}")

    def load(self):
        raw = self.store.get(self.key)
        if raw is None:
            records = list(self.seed())
            if records:
                self.save(records)
            return records

        try:
            return self._parse(raw)
        except CorruptCollectionError as e:
            logger.warning(f"{e.message}; reinitialising from seed data")
            records = list(self.seed())
            self.save(records)
            return records

    def save(self, records):
        self.store.set(self.key, json.dumps([r.to_dict() for r in records]))


class RecordRepository:
    """Read/write access to a single JSON object in a store (the session)."""

    def __init__(self, store, key, decode, corrupt_error=CorruptCollectionError):
        self.store = store
        self.key = key
        self.decode = decode
        self.corrupt_error = corrupt_error

    def load(self):
        """
        Returns the decoded record or None when absent.

        Raises:
            CorruptCollectionError (or the configured subclass) when the
            payload cannot be decoded.
        """
        raw = self.store.get(self.key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            return self.decode(data)
        except (ValueError, KeyError, TypeError) as e:
            raise self.corrupt_error(self.key, f"Stored '{self.key}' payload is unreadable: {e}")

    def save(self, record):
        self.store.set(self.key, json.dumps(record.to_dict()))

    def clear(self):
        self.store.remove(self.key)
