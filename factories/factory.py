"""
Factory facade: registers model definitions and hands out builders.

Definitions, states and callbacks can be registered directly or with the
decorator forms::

    factory = Factory(Faker())

    @factory.define(User)
    def user(faker, attributes):
        return {'name': faker.name(), 'active': False}

    factory.state(User, 'admin', {'active': True})

    @factory.after_creating_state(User, 'with_posts')
    def add_posts(user, faker):
        factory.of(Post).times(2).create({'user_id': user.id})

Definition modules can also live on disk. ``Factory.load`` imports every
Python file of a directory and calls its module-level ``register(factory)``.
"""

import importlib.util
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union

from faker import Faker

from .builder import FactoryBuilder
from .exceptions import FactoryError, UnknownModel
from .logging import get_logger
from .persistence import Persister
from .registry import DEFAULT_DEFINITION, CallbackKind, FactoryRegistry


logger = get_logger(__name__)

REGISTER_HOOK = 'register'


class Factory:
    """Owns the registry shared by every builder it creates."""

    def __init__(self, faker: Optional[Faker] = None, persister: Optional[Persister] = None,
                 registry: Optional[FactoryRegistry] = None) -> None:
        self.faker = faker or Faker()
        self.persister = persister
        self.registry = registry or FactoryRegistry()

    @classmethod
    def construct(cls, faker: Faker, path: Optional[Union[str, os.PathLike]] = None,
                  persister: Optional[Persister] = None) -> 'Factory':
        """Create a factory and load the definitions found under ``path``."""
        factory = cls(faker, persister)
        if path is not None:
            factory.load(path)
        return factory

    def __contains__(self, model: Type) -> bool:
        return self.registry.has_definition(model, DEFAULT_DEFINITION)

    # Registration

    def define(self, model: Type, generator: Optional[Callable] = None,
               name: str = DEFAULT_DEFINITION):
        """
        Define a class with a given set of attributes.

        Args:
            model: Model class the definition builds
            generator: ``(faker, attributes) -> dict``; omit to use as a decorator
            name: Definition name

        Returns:
            The factory, or a decorator when ``generator`` is omitted
        """
        if generator is None:
            def decorator(fn):
                self.registry.add_definition(model, name, fn)
                return fn
            return decorator

        self.registry.add_definition(model, name, generator)
        return self

    def state(self, model: Type, state: str,
              attributes: Optional[Union[Mapping[str, Any], Callable]] = None):
        """Define a state with a mapping or a ``(faker, attributes) -> dict`` callable."""
        if attributes is None:
            def decorator(fn):
                self.registry.add_state(model, state, fn)
                return fn
            return decorator

        self.registry.add_state(model, state, attributes)
        return self

    def after_making(self, model: Type, callback: Optional[Callable] = None,
                     name: str = DEFAULT_DEFINITION):
        """Run a callback after making a model with the given definition."""
        return self._register_callback(CallbackKind.AFTER_MAKING, model, name, callback)

    def after_making_state(self, model: Type, state: str, callback: Optional[Callable] = None):
        return self.after_making(model, callback, state)

    def after_creating(self, model: Type, callback: Optional[Callable] = None,
                       name: str = DEFAULT_DEFINITION):
        """Run a callback after creating a model with the given definition."""
        return self._register_callback(CallbackKind.AFTER_CREATING, model, name, callback)

    def after_creating_state(self, model: Type, state: str, callback: Optional[Callable] = None):
        return self.after_creating(model, callback, state)

    def _register_callback(self, kind: CallbackKind, model: Type, name: str,
                           callback: Optional[Callable]):
        if callback is None:
            def decorator(fn):
                self.registry.add_callback(kind, model, name, fn)
                return fn
            return decorator

        self.registry.add_callback(kind, model, name, callback)
        return self

    # Builders and shortcuts

    def of(self, model: Type, name: str = DEFAULT_DEFINITION) -> FactoryBuilder:
        """Create a builder for the given model."""
        if self.persister is None:
            raise FactoryError(
                "Factory has no persister configured",
                error_code='NO_PERSISTER',
                details={'model': model.__name__},
            )
        return FactoryBuilder(model, name, self.registry, self.faker, self.persister)

    def create(self, model: Type, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        return self.of(model).create(attributes)

    def create_as(self, model: Type, name: str, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        return self.of(model, name).create(attributes)

    def make(self, model: Type, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        return self.of(model).make(attributes)

    def make_as(self, model: Type, name: str, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        return self.of(model, name).make(attributes)

    def raw(self, model: Type, attributes: Optional[Mapping[str, Any]] = None,
            name: str = DEFAULT_DEFINITION) -> Dict[str, Any]:
        return self.of(model, name).raw(attributes)

    def raw_of(self, model: Type, name: str, attributes: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.raw(model, attributes, name)

    # Lookup

    def resolve_model(self, name: str) -> Type:
        """
        Find a registered model class by ``ClassName`` or ``module.ClassName``.

        Raises:
            UnknownModel: If no registered model matches
        """
        for model in self.registry.models():
            if name in (model.__name__, f"{model.__module__}.{model.__qualname__}"):
                return model
        raise UnknownModel(name)

    # Loading

    def load(self, path: Union[str, os.PathLike]) -> 'Factory':
        """
        Load factory definition modules from a directory.

        Every ``*.py`` file below ``path`` is imported in sorted order and its
        ``register(factory)`` function, when present, is called with this factory.

        Raises:
            FactoryError: If ``path`` is not a directory
        """
        directory = Path(path)
        if not directory.is_dir():
            raise FactoryError(
                f"Factory path [{directory}] is not a directory.",
                error_code='INVALID_FACTORY_PATH',
                details={'path': str(directory)},
            )

        loaded: List[str] = []
        for file in sorted(directory.rglob('*.py')):
            module = self._import_file(directory, file)
            register = getattr(module, REGISTER_HOOK, None)
            if not callable(register):
                logger.debug("factory.load_skipped", file=str(file))
                continue
            register(self)
            loaded.append(file.name)

        logger.info("factory.loaded", path=str(directory), files=loaded)
        return self

    @staticmethod
    def _import_file(directory: Path, file: Path):
        relative = file.relative_to(directory).with_suffix('')
        module_name = '_factories_' + '_'.join(relative.parts)
        spec = importlib.util.spec_from_file_location(module_name, file)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module


__all__ = ['Factory', 'REGISTER_HOOK']
