"""
Attribute resolution for facet objects.

Lookup order for `resolve(obj, name)`:
  1. built-in attributes (`__id__`, `__parents__`),
  2. the object's own attributes,
  3. the object's own `__attr_missing__` hook, if it answers non-None,
  4. each parent in declaration order, depth first.

The first match wins. Every object is visited at most once per lookup, so
cyclic parent chains terminate with a NotFoundError instead of recursing.
"""
from typing import Any, Dict, List, Optional, Set

from facet.facet_datatypes import Obj, NotFoundError, is_missing

BUILTIN_ATTRIBUTES = ("__id__", "__parents__")

# Python literal type -> type object. Filled in by facet_core at import.
TYPE_REGISTRY: Dict[type, Obj] = {}


def register_type(py_type: type, type_obj: Obj) -> None:
    TYPE_REGISTRY[py_type] = type_obj


def type_of(value: Any) -> Optional[Obj]:
    """The type object of a value.

    For an object this is its first parent. For a host literal it is the
    registered type object of the nearest Python base class.
    """
    if isinstance(value, Obj):
        return value.parents[0] if len(value.parents) else None
    for klass in type(value).__mro__:
        if klass in TYPE_REGISTRY:
            return TYPE_REGISTRY[klass]
    return None


def as_object(value: Any) -> Optional[Obj]:
    """The object attribute lookup starts from: the value itself, or its type."""
    if isinstance(value, Obj):
        return value
    return type_of(value)


def _builtin(obj: Obj, name: str) -> Any:
    if name == "__id__":
        return obj.id
    if name == "__parents__":
        return list(obj.parents)
    return NotFoundError(name)


def resolve(value: Any, name: str) -> Any:
    """Finds `name` on `value` or its parents.

    Returns the value, or a NotFoundError instance (not raised) when nothing
    in the chain defines it.
    """
    if not isinstance(name, str):
        raise TypeError(f"Attribute name must be a str, not {type(name).__name__}")
    if isinstance(value, Obj) and name in BUILTIN_ATTRIBUTES:
        return _builtin(value, name)
    start = as_object(value)
    if start is None:
        return NotFoundError(name)
    return _resolve_in(start, name, set(), value)


def _resolve_in(obj: Obj, name: str, visited: Set[int], receiver: Any) -> Any:
    visited.add(id(obj))
    if obj.attributes.has_own(name):
        return obj.attributes[name]

    if name != "__attr_missing__" and obj.attributes.has_own("__attr_missing__"):
        from facet.facet_dispatch import invoke
        answer = invoke(obj.attributes["__attr_missing__"], receiver, name)
        if answer is not None:
            return answer

    for parent in obj.parents:
        if id(parent) in visited:
            continue
        found = _resolve_in(parent, name, visited, receiver)
        if not is_missing(found):
            return found
    return NotFoundError(name)


def get_attr(value: Any, name: str) -> Any:
    """Like `resolve`, but raises the NotFoundError."""
    found = resolve(value, name)
    if is_missing(found):
        found.facet_obj = value
        raise found
    return found


def has_attr(value: Any, name: str) -> bool:
    return not is_missing(resolve(value, name))


def find_owner(value: Any, name: str) -> Optional[Obj]:
    """Finds the object in the lookup chain that owns `name`."""
    start = as_object(value)
    if start is None:
        return None
    visited: Set[int] = set()

    def walk(obj: Obj) -> Optional[Obj]:
        visited.add(id(obj))
        if obj.attributes.has_own(name):
            return obj
        for parent in obj.parents:
            if id(parent) in visited:
                continue
            owner = walk(parent)
            if owner is not None:
                return owner
        return None

    return walk(start)


def keys(value: Any, include_parents: bool = False) -> List[str]:
    """Attribute names visible on `value`.

    Own keys come first in insertion order. With `include_parents`, keys from
    the whole chain follow in resolution order, each listed once.
    """
    start = as_object(value)
    if start is None:
        return []
    if not include_parents:
        return list(start.attributes.keys()) if start is value else []

    out: List[str] = []
    seen_keys: Set[str] = set()
    visited: Set[int] = set()

    def walk(obj: Obj):
        visited.add(id(obj))
        for k in obj.attributes:
            if k not in seen_keys:
                seen_keys.add(k)
                out.append(k)
        for parent in obj.parents:
            if id(parent) not in visited:
                walk(parent)

    walk(start)
    return out


def set_attr(value: Any, name: str, new_value: Any) -> Any:
    """Binds `name` on the object itself, never on a parent."""
    if not isinstance(value, Obj):
        raise TypeError(f"Cannot set attribute {name!r} on {type(value).__name__} value")
    value[name] = new_value
    return new_value


def del_attr(value: Any, name: str) -> Any:
    """Removes an own attribute and returns its old value."""
    if not isinstance(value, Obj):
        raise TypeError(f"Cannot delete attribute {name!r} on {type(value).__name__} value")
    old = value.attributes.get(name)
    if is_missing(old):
        old.facet_obj = value
        raise old
    del value.attributes[name]
    return old
