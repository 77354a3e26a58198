"""
Typed storage for factory definitions, states and lifecycle callbacks.

Every entry is keyed by the model class and a name, so the registry can tell
apart a state that carries attributes, a state that only exists as a callback
target, and a state that is missing entirely.
"""

from enum import Enum
from typing import (
    Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple, Type, Union
)


DEFAULT_DEFINITION = 'default'

Generator = Callable[[Any, Dict[str, Any]], Mapping[str, Any]]
StateAttributes = Union[Mapping[str, Any], Generator]
Callback = Callable[[Any, Any], Any]


class CallbackKind(Enum):
    """Lifecycle point at which a callback runs."""
    AFTER_MAKING = "after_making"
    AFTER_CREATING = "after_creating"


class FactoryKey(NamedTuple):
    model: Type
    name: str


class FactoryRegistry:
    """Read-mostly store shared by every builder of a factory."""

    def __init__(self) -> None:
        self._definitions: Dict[FactoryKey, Generator] = {}
        self._states: Dict[FactoryKey, StateAttributes] = {}
        self._callbacks: Dict[CallbackKind, Dict[FactoryKey, List[Callback]]] = {
            kind: {} for kind in CallbackKind
        }

    # Definitions

    def add_definition(self, model: Type, name: str, generator: Generator) -> None:
        self._definitions[FactoryKey(model, name)] = generator

    def has_definition(self, model: Type, name: str = DEFAULT_DEFINITION) -> bool:
        return FactoryKey(model, name) in self._definitions

    def definition(self, model: Type, name: str = DEFAULT_DEFINITION) -> Optional[Generator]:
        return self._definitions.get(FactoryKey(model, name))

    # States

    def add_state(self, model: Type, name: str, attributes: StateAttributes) -> None:
        self._states[FactoryKey(model, name)] = attributes

    def has_state(self, model: Type, name: str) -> bool:
        return FactoryKey(model, name) in self._states

    def state(self, model: Type, name: str) -> Optional[StateAttributes]:
        return self._states.get(FactoryKey(model, name))

    # Callbacks

    def add_callback(self, kind: CallbackKind, model: Type, name: str,
                     callback: Callback) -> None:
        self._callbacks[kind].setdefault(FactoryKey(model, name), []).append(callback)

    def callbacks(self, kind: CallbackKind, model: Type, name: str) -> Tuple[Callback, ...]:
        return tuple(self._callbacks[kind].get(FactoryKey(model, name), ()))

    def has_after_callback(self, model: Type, name: str) -> bool:
        """Whether the name is the target of any after-making or after-creating callback."""
        key = FactoryKey(model, name)
        return any(key in registered for registered in self._callbacks.values())

    # Introspection

    def models(self) -> List[Type]:
        seen: Dict[Type, None] = {}
        for key in self._definitions:
            seen.setdefault(key.model, None)
        return list(seen)

    def definition_names(self, model: Type) -> List[str]:
        return [key.name for key in self._definitions if key.model is model]

    def state_names(self, model: Type) -> List[str]:
        return [key.name for key in self._states if key.model is model]


__all__ = [
    'DEFAULT_DEFINITION',
    'CallbackKind',
    'FactoryKey',
    'FactoryRegistry',
]
