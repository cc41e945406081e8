"""
Defines the core data types for the facet object runtime.

This module provides the object container itself (attributes plus an ordered
parent chain), the callable wrappers the dispatcher knows how to invoke, and
the error hierarchy shared by every other module.
"""

import collections.abc
import itertools
import os
import sys
from abc import ABC
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

def _dbg(*parts):
    """Trace to stderr when FACET_DEBUG is set."""
    if os.environ.get("FACET_DEBUG"):
        print("[DBG]", *parts, file=sys.stderr)


# =================================================================
# Errors
# =================================================================

class FacetError(Exception):
    """Base class for all errors signalled by the runtime."""
    facet_obj: Any = None


class NotFoundError(FacetError, LookupError):
    """An attribute was absent after full resolution."""
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __bool__(self):
        # A failed lookup is falsy so callers can write `if not found: ...`
        return False

    def __repr__(self) -> str:
        return f"NotFoundError({self.name!r})"


class UnsupportedOperation(FacetError, TypeError):
    """The receiver does not support an operator, or not for the given operand."""
    def __init__(self, operator: str, receiver: Any = None, detail: str = None):
        msg = f"{operator!r} is not supported by {_describe(receiver)}"
        super().__init__(f"{msg}: {detail}" if detail else msg)
        self.operator = operator
        self.receiver = receiver
        self.facet_obj = receiver


class AssertionFailure(FacetError, AssertionError):
    """A script assertion evaluated to a false value."""
    def __init__(self, expression: Any = None):
        msg = "assertion failed" if expression is None else f"assertion failed: {expression}"
        super().__init__(msg)
        self.expression = expression


def is_missing(value: Any) -> bool:
    """True when `value` is the tagged failure returned by a resolve."""
    return isinstance(value, NotFoundError)


def _describe(value: Any) -> str:
    if isinstance(value, Obj):
        return repr(value)
    return f"{type(value).__name__} {value!r}"


# =================================================================
# Attribute storage
# =================================================================

_UNSET = object()

class AttributeStore(collections.abc.MutableMapping):
    """Ordered name -> value mapping owned by exactly one object.

    Lookup never leaves this store; parent traversal is the resolver's job.
    """
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        if initial:
            for k, v in initial.items():
                self.set(k, v)

    @staticmethod
    def _check(name: Any) -> str:
        if not isinstance(name, str):
            raise TypeError(f"Attribute name must be a str, not {type(name).__name__}")
        return name

    def get(self, name: str, default: Any = _UNSET) -> Any:
        """Returns the local value, or `NotFoundError(name)` when absent.

        An explicit `default` replaces the failure value.
        """
        name = self._check(name)
        if name in self._data:
            return self._data[name]
        if default is _UNSET:
            return NotFoundError(name)
        return default

    def set(self, name: str, value: Any) -> None:
        self._data[self._check(name)] = value

    def has_own(self, name: str) -> bool:
        return isinstance(name, str) and name in self._data

    __contains__ = has_own

    def __getitem__(self, name):
        return self._data[self._check(name)]

    def __setitem__(self, name, value):
        self.set(name, value)

    def __delitem__(self, name):
        del self._data[self._check(name)]

    def __iter__(self):
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"AttributeStore({list(self._data)!r})"


class ParentChain(collections.abc.MutableSequence):
    """Ordered list of the objects an object delegates to.

    Parents are shared references; duplicates are allowed.
    """
    def __init__(self, parents: Iterable['Obj'] = ()):
        self._items: List['Obj'] = [self._check(p) for p in parents]

    @staticmethod
    def _check(parent: Any) -> 'Obj':
        if not isinstance(parent, Obj):
            raise TypeError(f"Parent must be an object, not {type(parent).__name__}")
        return parent

    def __getitem__(self, index):
        return self._items[index]

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            self._items[index] = [self._check(p) for p in value]
        else:
            self._items[index] = self._check(value)

    def __delitem__(self, index):
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, index, value):
        self._items.insert(index, self._check(value))

    def replace_all(self, parents: Union['Obj', Iterable['Obj']]) -> None:
        """Swaps in a new parent list in a single step."""
        if isinstance(parents, Obj):
            parents = [parents]
        self._items = [self._check(p) for p in parents]

    def __eq__(self, other):
        if isinstance(other, ParentChain):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ParentChain({self._items!r})"


# =================================================================
# Objects
# =================================================================

_ids = itertools.count(1)


class Obj:
    """An identity-bearing attribute container with an ordered parent list.

    Item access goes through full resolution (`obj["x"]`), while assignment
    and deletion only ever touch this object's own attributes. Two objects are
    equal only if they are the same object.
    """
    __slots__ = ("attributes", "parents", "id")

    def __init__(self, *parents: 'Obj', **attributes: Any):
        self.id: int = next(_ids)
        self.attributes = AttributeStore(attributes)
        self.parents = ParentChain(parents)

    def has_own(self, name: str) -> bool:
        return self.attributes.has_own(name)

    def __getitem__(self, name: str) -> Any:
        from facet.facet_resolver import resolve
        found = resolve(self, name)
        if is_missing(found):
            raise found
        return found

    def __setitem__(self, name: str, value: Any):
        if name == "__parents__":
            self.parents.replace_all(value)
            return
        self.attributes.set(name, value)

    def __delitem__(self, name: str):
        if not self.attributes.has_own(name):
            raise NotFoundError(name)
        del self.attributes[name]

    def __contains__(self, name: Any) -> bool:
        from facet.facet_resolver import has_attr
        return isinstance(name, str) and has_attr(self, name)

    def get(self, name: str, default: Any = None) -> Any:
        from facet.facet_resolver import resolve
        found = resolve(self, name)
        return default if is_missing(found) else found

    def keys(self) -> collections.abc.KeysView:
        """Own keys only, in insertion order."""
        return self.attributes.keys()

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        return self is other

    def __repr__(self) -> str:
        keys = ', '.join(self.attributes.keys())
        name = self.attributes.get("name", "Object")
        return f"<Obj {name} #{self.id} attrs=[{keys}] parents={len(self.parents)}>"


# =================================================================
# Callables
# =================================================================

class FacetCallable(ABC):
    """Abstract base class for values the dispatcher may invoke."""
    pass


class NativeFunction(FacetCallable):
    """A host function tagged as invocable.

    The wrapped function always receives the receiver first:
    `func(receiver, *args)`.
    """
    def __init__(self, name: str, func: Callable[..., Any]):
        self.name = name
        self.func = func

    def __call__(self, receiver: Any, *args: Any) -> Any:
        return self.func(receiver, *args)

    def __repr__(self) -> str:
        return f"<NativeFunction {self.name}>"


class BoundFunction(FacetCallable):
    """A callable paired with the receiver it was fetched from."""
    def __init__(self, function: Any, receiver: Any):
        self.function = function
        self.receiver = receiver

    def __repr__(self) -> str:
        return f"<BoundFunction {self.function!r} on {self.receiver!r}>"

    def __eq__(self, other):
        if not isinstance(other, BoundFunction):
            return NotImplemented
        return self.function is other.function and self.receiver is other.receiver

    def __hash__(self):
        return hash((id(self.function), id(self.receiver)))


def native(name: str):
    """Decorator turning a plain `fn(receiver, *args)` into a NativeFunction."""
    def wrap(func):
        return NativeFunction(name, func)
    return wrap
