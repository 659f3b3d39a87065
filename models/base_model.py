#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the Chirpy API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps (UTC, microsecond precision)
- save() and delete() that use the DBStorage singleton

Notes:
- Timestamps are set Python-side so ordering by created_at is stable on SQLite,
  whose CURRENT_TIMESTAMP only has second resolution. The server default is a fallback
  for rows inserted outside the ORM.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py.
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at,
    plus save()/delete() wired to DBStorage.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

    def save(self):
        """Bump updated_at and persist the instance."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()

    def delete(self):
        """
        Hard delete the current instance. Intentionally not committing here;
        caller decides when to commit.
        """
        models.storage.delete(self)
