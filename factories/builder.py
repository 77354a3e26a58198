"""
Model factory builder.

A ``FactoryBuilder`` produces raw attribute dictionaries, in-memory model
instances or persisted model instances for one model class. It combines the
named definition with the active states and the caller's overrides, expands
deferred and nested attributes, and runs the registered lifecycle callbacks.

Example:
    users = factory.of(User).times(3).state('admin').create({'active': True})
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union

from faker import Faker

from .attributes import expand_attributes
from .exceptions import UnknownDefinition, UnknownState
from .logging import get_logger
from .persistence import Persister
from .registry import DEFAULT_DEFINITION, CallbackKind, FactoryRegistry


logger = get_logger(__name__)


class FactoryBuilder:
    """
    Fluent builder for model instances of a single class.

    Configuration methods mutate the builder and return it, so a builder can
    be configured in one chain and reused for several generation calls.
    """

    def __init__(self, model: Type, name: str, registry: FactoryRegistry,
                 faker: Faker, persister: Persister) -> None:
        self.model = model
        self.name = name or DEFAULT_DEFINITION
        self.registry = registry
        self.faker = faker
        self.persister = persister
        self.amount: Optional[int] = None
        self.active_states: List[str] = []
        self._connection: Optional[str] = None

    def __repr__(self) -> str:
        return (f"<FactoryBuilder({self.model.__name__}, name={self.name!r}, "
                f"states={self.active_states!r}, amount={self.amount!r})>")

    # Configuration

    def times(self, amount: int) -> 'FactoryBuilder':
        """Set the number of models to build; below one yields an empty list."""
        self.amount = amount
        return self

    def state(self, state: str) -> 'FactoryBuilder':
        return self.states(state)

    def states(self, *states: Union[str, Iterable[str]]) -> 'FactoryBuilder':
        """
        Append states to apply, in order.

        Accepts either several names or a single iterable of names. Names
        are only checked when attributes are resolved.
        """
        if len(states) == 1 and not isinstance(states[0], str) and isinstance(states[0], Iterable):
            states = tuple(states[0])
        self.active_states.extend(states)
        return self

    def connection(self, name: str) -> 'FactoryBuilder':
        """Set the database connection on which instances should be persisted."""
        self._connection = name
        return self

    # Generation

    def lazy(self, attributes: Optional[Mapping[str, Any]] = None) -> Callable[[], Any]:
        """Return a callable that creates the models when invoked."""
        def create():
            return self.create(attributes)
        return create

    def create(self, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        """Make the models, persist them and run the after-creating callbacks."""
        results = self.make(attributes)
        instances = results if isinstance(results, list) else [results]

        self._store(instances)
        self.call_after_creating(instances)

        logger.debug(
            "factory.create",
            model=self.model.__name__,
            definition=self.name,
            states=list(self.active_states),
            count=len(instances),
            connection=self._connection,
        )
        return results

    def make(self, attributes: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Build unsaved model instances.

        Returns:
            A single instance when no amount is set, otherwise a list
        """
        if self.amount is None:
            instance = self._make_instance(attributes)
            self.call_after_making([instance])
            self._log_make(1)
            return instance

        if self.amount < 1:
            return []

        instances = [self._make_instance(attributes) for _ in range(self.amount)]
        self.call_after_making(instances)
        self._log_make(len(instances))
        return instances

    def _log_make(self, count: int) -> None:
        logger.debug(
            "factory.make",
            model=self.model.__name__,
            definition=self.name,
            states=list(self.active_states),
            count=count,
        )

    def raw(self, attributes: Optional[Mapping[str, Any]] = None) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Return resolved attribute dictionaries without building models."""
        if self.amount is None:
            return self.get_raw_attributes(attributes)

        if self.amount < 1:
            return []

        return [self.get_raw_attributes(attributes) for _ in range(self.amount)]

    # Callbacks

    def call_after_making(self, instances: Iterable[Any]) -> None:
        self._call_after(CallbackKind.AFTER_MAKING, instances)

    def call_after_creating(self, instances: Iterable[Any]) -> None:
        self._call_after(CallbackKind.AFTER_CREATING, instances)

    def _call_after(self, kind: CallbackKind, instances: Iterable[Any]) -> None:
        names = [self.name] + list(self.active_states)
        for instance in instances:
            for name in names:
                for callback in self.registry.callbacks(kind, self.model, name):
                    callback(instance, self.faker)

    # Resolution

    def get_raw_attributes(self, attributes: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Resolve the attribute dictionary for one model.

        Raises:
            UnknownDefinition: If no definition exists for the model and name
            UnknownState: If an active state has neither attributes nor callbacks
        """
        overrides = dict(attributes or {})

        definition = self.registry.definition(self.model, self.name)
        if definition is None:
            raise UnknownDefinition(self.model, self.name)

        merged = self._apply_states(dict(definition(self.faker, overrides)), overrides)
        merged.update(overrides)

        return expand_attributes(merged, self.persister)

    def _apply_states(self, definition: Dict[str, Any], attributes: Dict[str, Any]) -> Dict[str, Any]:
        for state in self.active_states:
            if not self.registry.has_state(self.model, state):
                if self.registry.has_after_callback(self.model, state):
                    continue
                raise UnknownState(self.model, state)

            definition.update(self._state_attributes(state, attributes))

        return definition

    def _state_attributes(self, state: str, attributes: Dict[str, Any]) -> Mapping[str, Any]:
        state_attributes = self.registry.state(self.model, state)

        if not callable(state_attributes):
            return state_attributes

        return state_attributes(self.faker, attributes)

    def _make_instance(self, attributes: Optional[Mapping[str, Any]]) -> Any:
        instance = self.model(**self.get_raw_attributes(attributes))

        if self._connection is not None:
            self.persister.set_connection(instance, self._connection)

        return instance

    def _store(self, instances: List[Any]) -> None:
        for instance in instances:
            if self._connection is None:
                self.persister.set_connection(
                    instance, self.persister.default_connection(type(instance))
                )
            self.persister.save(instance)


__all__ = ['FactoryBuilder']
