"""
Test doubles for exercising builders without a database.

``Record`` subclasses stand in for models and ``InMemoryPersister`` stands in
for the SQLAlchemy persister, recording every save and connection change.
"""

import itertools
from typing import Any, Dict, List, Optional, Tuple, Type


class Record:
    """Plain attribute bag accepting any keyword arguments."""

    def __init__(self, **attributes):
        self.id = None
        for key, value in attributes.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class Author(Record):
    pass


class Article(Record):
    pass


class InMemoryPersister:
    """Persister keeping saved instances in a list."""

    def __init__(self) -> None:
        self.saved: List[Tuple[str, Any]] = []
        self.events: List[Tuple[str, Any]] = []
        self._ids = itertools.count(1)
        self._connections: Dict[int, str] = {}

    def set_connection(self, instance: Any, name: str) -> None:
        self._connections[id(instance)] = name

    def connection_for(self, instance: Any) -> Optional[str]:
        return self._connections.get(id(instance))

    def default_connection(self, model: Type) -> str:
        return 'default'

    def save(self, instance: Any) -> None:
        instance.id = next(self._ids)
        self.saved.append((self.connection_for(instance), instance))
        self.events.append(('save', instance))

    def get_key(self, instance: Any) -> Any:
        return instance.id

    def is_entity(self, value: Any) -> bool:
        return isinstance(value, Record)
