# bengal_portal/models/stored_collection.py

from datetime import datetime
from .base import db

class StoredCollection(db.Model):
    """One durable key of the portal store (session, jobs, quotes, chat history)."""
    __tablename__ = 'stored_collections'

    key = db.Column(db.String(64), primary_key=True)
    payload = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<StoredCollection key={self.key} size={len(self.payload or "")}>'
