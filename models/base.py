"""
Base model class shared by application models built through factories.

Provides the Flask-SQLAlchemy ``db`` instance, an auto-incrementing primary
key, creation and update timestamps and snake_case table names.
"""

import re
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declared_attr


# Initialized by the Flask application factory
db = SQLAlchemy()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """
    Abstract base model for all Flask-SQLAlchemy models.

    Timestamps are filled in Python so that unsaved instances returned by a
    factory's ``make`` already carry them.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __init__(self, **kwargs):
        current_time = _utcnow()
        kwargs.setdefault('created_at', current_time)
        kwargs.setdefault('updated_at', current_time)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

    @declared_attr
    def __tablename__(cls) -> str:
        # CamelCase -> snake_case
        name = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', cls.__name__)
        return re.sub('([a-z0-9])([A-Z])', r'\1_\2', name).lower()


__all__ = ['db', 'BaseModel']
