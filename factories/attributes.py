"""
Attribute variants used when expanding raw factory attributes.

Every value of a merged attribute mapping is classified once into one of four
variants and then resolved in a single ordered pass:

- ``LiteralValue``: kept as-is
- ``Deferred``: a callable invoked with the attributes resolved so far
- ``NestedFactory``: another builder, created and replaced by the new key
- ``EntityReference``: an existing model instance, replaced by its key

Strings, classes and mappings are always literals even though some of them
are callable.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Union

from .persistence import Persister


@dataclass(frozen=True)
class LiteralValue:
    value: Any


@dataclass(frozen=True)
class Deferred:
    """Attribute computed from the other attributes of the same instance."""
    fn: Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class NestedFactory:
    builder: Any


@dataclass(frozen=True)
class EntityReference:
    instance: Any


Attribute = Union[LiteralValue, Deferred, NestedFactory, EntityReference]


def _is_builder(value: Any) -> bool:
    from .builder import FactoryBuilder
    return isinstance(value, FactoryBuilder)


def classify(value: Any, persister: Persister, allow_deferred: bool = True) -> Attribute:
    """
    Wrap a raw attribute value in its variant.

    Args:
        value: Raw value taken from a definition, state or override
        persister: Used to recognise model instances
        allow_deferred: Whether callables become ``Deferred``

    Returns:
        The tagged attribute variant
    """
    if isinstance(value, (LiteralValue, NestedFactory, EntityReference)):
        return value
    if isinstance(value, Deferred) and allow_deferred:
        return value
    if _is_builder(value):
        return NestedFactory(value)
    if persister.is_entity(value):
        return EntityReference(value)
    if (allow_deferred and callable(value)
            and not isinstance(value, (str, bytes, type, Mapping))):
        return Deferred(value)
    return LiteralValue(value)


def _substitute(attribute: Attribute, persister: Persister) -> Any:
    if isinstance(attribute, NestedFactory):
        created = attribute.builder.create()
        if isinstance(created, list):
            return [persister.get_key(instance) for instance in created]
        return persister.get_key(created)
    if isinstance(attribute, EntityReference):
        return persister.get_key(attribute.instance)
    return attribute.value


def expand_attributes(attributes: Mapping[str, Any], persister: Persister) -> Dict[str, Any]:
    """
    Resolve every attribute to its underlying value, in mapping order.

    A deferred attribute sees the values resolved before it and the raw values
    after it; its result is itself substituted when it is a builder or a model
    instance, but is never called again.
    """
    resolved: Dict[str, Any] = dict(attributes)
    for key, value in attributes.items():
        attribute = classify(value, persister)
        if isinstance(attribute, Deferred):
            attribute = classify(attribute.fn(dict(resolved)), persister, allow_deferred=False)
        resolved[key] = _substitute(attribute, persister)
    return resolved


__all__ = [
    'Attribute',
    'LiteralValue',
    'Deferred',
    'NestedFactory',
    'EntityReference',
    'classify',
    'expand_attributes',
]
