"""
Model factories for Flask-SQLAlchemy applications.

Register definitions, states and lifecycle callbacks on a ``Factory`` and use
``Factory.of(Model)`` to build raw attributes, unsaved instances or persisted
instances filled with Faker data.
"""

from .attributes import Deferred, EntityReference, LiteralValue, NestedFactory
from .builder import FactoryBuilder
from .exceptions import (
    FactoryError,
    UnknownConnection,
    UnknownDefinition,
    UnknownModel,
    UnknownState,
)
from .extension import Factories, current_factory
from .factory import Factory
from .persistence import DEFAULT_CONNECTION, Persister, SQLAlchemyPersister
from .registry import DEFAULT_DEFINITION, CallbackKind, FactoryRegistry

__version__ = '1.0.0'

__all__ = [
    'CallbackKind',
    'DEFAULT_CONNECTION',
    'DEFAULT_DEFINITION',
    'Deferred',
    'EntityReference',
    'Factories',
    'Factory',
    'FactoryBuilder',
    'FactoryError',
    'FactoryRegistry',
    'LiteralValue',
    'NestedFactory',
    'Persister',
    'SQLAlchemyPersister',
    'UnknownConnection',
    'UnknownDefinition',
    'UnknownModel',
    'UnknownState',
    'current_factory',
]
