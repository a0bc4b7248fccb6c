"""
Base Model Class for Flask-SQLAlchemy

This module provides the abstract base every persisted entity inherits from: a
24 character hexadecimal document identifier, creation and modification timestamps.

Key Components:
- generate_object_id: time-ordered 24-hex identifier (4-byte timestamp,
  5 random bytes, 3-byte counter)
- BaseModel: id, created_at and updated_at columns
"""

import itertools
import os
import struct
import threading
import time
from datetime import datetime, timezone

from . import db

_PROCESS_RANDOM = os.urandom(5)
_counter = itertools.count(struct.unpack('>I', b'\x00' + os.urandom(3))[0])
_counter_lock = threading.Lock()


def generate_object_id() -> str:
    """
    Generate a 24 character hexadecimal document identifier.

    Identifiers sort roughly by creation time and are unique per process
    through the random component and a rolling counter.
    """
    with _counter_lock:
        count = next(_counter) & 0xFFFFFF
    timestamp = struct.pack('>I', int(time.time()) & 0xFFFFFFFF)
    return (timestamp + _PROCESS_RANDOM + count.to_bytes(3, 'big')).hex()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """
    Base model class providing common functionality for all models.

    Usage:
        class Thread(BaseModel):
            __tablename__ = 'threads'
            title = db.Column(db.String(200), nullable=False)
    """

    # Mark as abstract so SQLAlchemy doesn't create a table for this class
    __abstract__ = True

    id = db.Column(db.String(24), primary_key=True, default=generate_object_id)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        model_id = getattr(self, 'id', 'unknown')
        return f"<{self.__class__.__name__}(id={model_id})>"
