"""
Database instance and base model for factory-built models.
"""

from .base import BaseModel, db

__all__ = ['db', 'BaseModel']
