"""
Maps built-in syntax onto attribute lookups.

Every operator is an ordinary attribute with a reserved name. The dispatcher
resolves that name and invokes whatever it finds with the receiver passed
explicitly as the first argument.
"""
from typing import Any, Dict, Tuple

from facet.facet_datatypes import (
    Obj, NativeFunction, BoundFunction, UnsupportedOperation, is_missing, _dbg
)
from facet.facet_resolver import resolve, type_of

CALL = "()"
COMPARE = "<=>"
COLON = ":"
TEXT = "@text"

# syntax -> (canonical attribute, where the attribute is looked up)
OPERATOR_TABLE: Dict[str, Tuple[str, str]] = {
    "()": (CALL, "receiver"),
    "<=>": (COMPARE, "receiver"),
    "<": ("<", "receiver"),
    "<=": ("<=", "receiver"),
    ">": (">", "receiver"),
    ">=": (">=", "receiver"),
    ":": (COLON, "type"),
    "@text": (TEXT, "receiver"),
}

RESERVED_KEYS = frozenset(canonical for canonical, _ in OPERATOR_TABLE.values()) | {"__parents__"}


def is_callable(value: Any) -> bool:
    if isinstance(value, (NativeFunction, BoundFunction)):
        return True
    return isinstance(value, Obj) and not is_missing(resolve(value, CALL))


def invoke(func: Any, receiver: Any, *args: Any) -> Any:
    """Invokes a resolved attribute value with `receiver` first.

    An object used as a function is itself called through its own `()`, with
    the object prepended to the arguments. Chains of such objects are followed
    until a native function is reached.
    """
    call_args = (receiver,) + args
    seen = set()
    while True:
        if isinstance(func, BoundFunction):
            call_args = (func.receiver,) + call_args[1:]
            func = func.function
            continue
        if isinstance(func, NativeFunction):
            return func.func(*call_args)
        if isinstance(func, Obj):
            if id(func) in seen:
                err = RecursionError("call resolution cycle detected")
                err.facet_obj = func
                raise err
            seen.add(id(func))
            nxt = resolve(func, CALL)
            if is_missing(nxt):
                raise UnsupportedOperation(CALL, func)
            call_args = (func,) + call_args
            func = nxt
            continue
        raise UnsupportedOperation(CALL, func)


class OperatorDispatcher:
    """Turns operator syntax into resolve-and-invoke steps."""

    def _lookup(self, operator: str, target: Any, receiver: Any) -> Any:
        func = resolve(target, operator) if target is not None else None
        if func is None or is_missing(func):
            raise UnsupportedOperation(operator, receiver)
        return func

    def dispatch(self, syntax: str, receiver: Any, *args: Any) -> Any:
        """Generic entry point keyed by the operator's source spelling."""
        if syntax not in OPERATOR_TABLE:
            raise ValueError(f"Unknown operator syntax: {syntax!r}")
        canonical, where = OPERATOR_TABLE[syntax]
        _dbg("dispatch()", syntax, "receiver", type(receiver).__name__, "argc", len(args))
        if canonical == TEXT:
            if args:
                raise TypeError(f"@text takes no arguments, got {len(args)}")
            return self.text(receiver)
        if where == "type":
            return self.colon(receiver, *args)
        func = self._lookup(canonical, receiver, receiver)
        return invoke(func, receiver, *args)

    def call(self, obj: Any, *args: Any) -> Any:
        """`obj(args...)`"""
        return self.dispatch("()", obj, *args)

    def compare(self, a: Any, b: Any) -> Any:
        """`a <=> b`"""
        return self.dispatch("<=>", a, b)

    def lt(self, a: Any, b: Any) -> Any:
        return self.dispatch("<", a, b)

    def le(self, a: Any, b: Any) -> Any:
        return self.dispatch("<=", a, b)

    def gt(self, a: Any, b: Any) -> Any:
        return self.dispatch(">", a, b)

    def ge(self, a: Any, b: Any) -> Any:
        return self.dispatch(">=", a, b)

    def colon(self, a: Any, b: Any) -> Any:
        """`a : b`, looked up on the *type* of `a` and invoked as (type, a, b)."""
        klass = type_of(a)
        func = self._lookup(COLON, klass, a)
        return invoke(func, klass, a, b)

    def text(self, obj: Any) -> str:
        """Stringifies through `@text`, falling back to the default form."""
        func = resolve(obj, TEXT)
        if is_missing(func):
            from facet.facet_printer import default_text
            return default_text(obj)
        result = invoke(func, obj)
        if not isinstance(result, str):
            err = TypeError(f"@text must return a string, got {type(result).__name__}")
            err.facet_obj = obj
            raise err
        return result

    def call_attr(self, obj: Any, name: str, *args: Any) -> Any:
        """Resolves `name` on `obj` and invokes it with `obj` as receiver."""
        func = self._lookup(name, obj, obj)
        return invoke(func, obj, *args)


dispatcher = OperatorDispatcher()
