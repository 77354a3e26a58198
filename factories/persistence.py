"""
Persistence of factory-built model instances.

Builders never talk to the ORM directly. They go through a ``Persister``,
which knows how to tag an instance with a connection, save it and read back
its primary key. ``SQLAlchemyPersister`` maps connection names onto
Flask-SQLAlchemy bind keys: ``"default"`` is the primary database and any
other name must appear in ``SQLALCHEMY_BINDS``.
"""

from typing import Any, Dict, Optional, Protocol, Type, runtime_checkable

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session
from sqlalchemy.orm.state import InstanceState

from .exceptions import UnknownConnection
from .logging import get_logger


DEFAULT_CONNECTION = 'default'
PERSISTENCE_MODES = ('flush', 'commit')

_CONNECTION_ATTR = '_factory_connection'

logger = get_logger(__name__)


@runtime_checkable
class Persister(Protocol):
    """Capability a builder needs to store the instances it makes."""

    def save(self, instance: Any) -> None: ...

    def set_connection(self, instance: Any, name: str) -> None: ...

    def default_connection(self, model: Type) -> str: ...

    def get_key(self, instance: Any) -> Any: ...

    def is_entity(self, value: Any) -> bool: ...


class SQLAlchemyPersister:
    """
    Persister backed by a Flask-SQLAlchemy database.

    Instances whose connection matches their model's own bind are saved
    through ``db.session``. Any other connection gets a dedicated session
    bound to that engine, created on first use and reused until ``close``.
    Requires an active application context.
    """

    def __init__(self, db: SQLAlchemy, mode: str = 'flush') -> None:
        if mode not in PERSISTENCE_MODES:
            raise ValueError(f"Unsupported persistence mode: {mode!r}")
        self.db = db
        self.mode = mode
        self._sessions: Dict[str, Session] = {}

    def set_connection(self, instance: Any, name: str) -> None:
        setattr(instance, _CONNECTION_ATTR, name)

    def connection_for(self, instance: Any) -> str:
        connection = getattr(instance, _CONNECTION_ATTR, None)
        return connection or self.default_connection(type(instance))

    def default_connection(self, model: Type) -> str:
        table = getattr(model, '__table__', None)
        bind_key = None
        if table is not None:
            bind_key = table.metadata.info.get('bind_key')
        return bind_key or DEFAULT_CONNECTION

    def session(self, connection: Optional[str] = None, model: Optional[Type] = None) -> Session:
        """
        Return the session used to persist into a connection.

        Args:
            connection: Connection name, ``None`` for the model's own bind
            model: Model class whose own bind is served by ``db.session``

        Raises:
            UnknownConnection: If the connection has no configured engine
        """
        own = self.default_connection(model) if model is not None else DEFAULT_CONNECTION
        if connection is None or connection == own:
            return self.db.session

        if connection not in self._sessions:
            bind_key = None if connection == DEFAULT_CONNECTION else connection
            engines = self.db.engines
            if bind_key not in engines:
                raise UnknownConnection(connection)
            self._sessions[connection] = Session(bind=engines[bind_key])
            logger.debug("factory.session_opened", connection=connection)
        return self._sessions[connection]

    def save(self, instance: Any) -> None:
        session = self.session(self.connection_for(instance), type(instance))
        session.add(instance)
        if self.mode == 'commit':
            session.commit()
        else:
            session.flush()

    def get_key(self, instance: Any) -> Any:
        identity = sa_inspect(instance).identity
        if identity is None:
            return None
        if len(identity) == 1:
            return identity[0]
        return identity

    def is_entity(self, value: Any) -> bool:
        if isinstance(value, type):
            return False
        return isinstance(sa_inspect(value, raiseerr=False), InstanceState)

    def commit(self) -> None:
        """Commit ``db.session`` and every per-connection session."""
        self.db.session.commit()
        for session in self._sessions.values():
            session.commit()

    def close(self) -> None:
        """Close every per-connection session opened by this persister."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()


__all__ = [
    'DEFAULT_CONNECTION',
    'PERSISTENCE_MODES',
    'Persister',
    'SQLAlchemyPersister',
]
