"""
Built-in type objects shared by every runtime.

    Pristine      root of everything; reflection helpers (`__keys__`, `inspect`, ...)
    Basic         Pristine + identity equality
    Comparable    `<`, `<=`, `>`, `>=` derived from the host's `<=>`
    Number, Text  host literals; `<=>`, `==`, `@text`, extended with Comparable
    Boolean, Null, List, Function
                  host literals; `@text` and `==`

The objects are created once at import and registered with the resolver so
that host literals resolve attributes through them.
"""
from typing import Any, Callable, Dict

from facet.facet_datatypes import (
    Obj, NativeFunction, BoundFunction, UnsupportedOperation, is_missing, _describe
)
from facet.facet_resolver import (
    resolve, get_attr, set_attr, del_attr, has_attr, keys, register_type
)
from facet.facet_dispatch import dispatcher, invoke, COMPARE
from facet.facet_composer import extend


def _install(target: Obj, table: Dict[str, Callable[..., Any]]) -> Obj:
    type_name = target.attributes.get("name", "Object")
    for attr, func in table.items():
        target[attr] = NativeFunction(f"{type_name}::{attr}", func)
    return target


# =================================================================
# Pristine
# =================================================================

def _inspect(this):
    from facet.facet_printer import Printer
    return Printer().pformat(this)


def _keys(this, include_parents=False):
    return keys(this, include_parents=bool(include_parents))


def _get_attr_q(this, name):
    found = resolve(this, name)
    return None if is_missing(found) else found


Pristine = _install(Obj(name="Pristine"), {
    "inspect": _inspect,
    "__keys__": _keys,
    "__get_attr__": get_attr,
    "__set_attr__": set_attr,
    "__has_attr__": has_attr,
    "__del_attr__": del_attr,
    "__call_attr__": lambda this, name, *args: dispatcher.call_attr(this, name, *args),
    "::": get_attr,
    ".=": set_attr,
    ".?": _get_attr_q,
})


# =================================================================
# Basic
# =================================================================

def _identity_eq(this, other):
    if isinstance(this, Obj):
        return this is other
    return this == other


def _not_eq(this, other):
    return not dispatcher.call_attr(this, "==", other)


Basic = _install(Obj(Pristine, name="Basic"), {
    "==": _identity_eq,
    "!=": _not_eq,
})


# =================================================================
# Comparable
# =================================================================

def _three_way(a, b):
    func = resolve(a, COMPARE)
    if is_missing(func):
        raise UnsupportedOperation(COMPARE, a)
    return invoke(func, a, b)


# Capability object: no parents, no per-instance state.
Comparable = _install(Obj(name="Comparable"), {
    "<": lambda a, b: _three_way(a, b) < 0,
    "<=": lambda a, b: _three_way(a, b) <= 0,
    ">": lambda a, b: _three_way(a, b) > 0,
    ">=": lambda a, b: _three_way(a, b) >= 0,
})


# =================================================================
# Host literal types
# =================================================================

def _literal_cmp(kind: type):
    def cmp(a, b):
        if not isinstance(b, kind) or isinstance(b, bool) != isinstance(a, bool):
            raise UnsupportedOperation(COMPARE, a, f"cannot compare with {_describe(b)}")
        return (a > b) - (a < b)
    return cmp


def _number_text(this):
    if isinstance(this, float) and this.is_integer():
        return str(int(this))
    return str(this)


def _list_text(this):
    from facet.facet_printer import Printer
    return Printer().pformat(this)


def _function_call(this, *args):
    # `f(args...)` on a function value: the first argument becomes the receiver
    if not args:
        return invoke(this, None)
    return invoke(this, *args)


def _function_text(this):
    if isinstance(this, BoundFunction):
        return f"<BoundFunction {_function_text(this.function)}>"
    if isinstance(this, NativeFunction):
        return f"<Function {this.name}>"
    return repr(this)


Number = _install(Obj(Basic, name="Number"), {
    "<=>": _literal_cmp((int, float)),
    "==": lambda a, b: not isinstance(b, bool) and isinstance(b, (int, float)) and a == b,
    "@text": _number_text,
})
extend(Number, Comparable)

Text = _install(Obj(Basic, name="Text"), {
    "<=>": _literal_cmp(str),
    "==": lambda a, b: isinstance(b, str) and a == b,
    "@text": lambda this: this,
})
extend(Text, Comparable)

Boolean = _install(Obj(Basic, name="Boolean"), {
    "==": lambda a, b: isinstance(b, bool) and a == b,
    "@text": lambda this: "true" if this else "false",
})

Null = _install(Obj(Basic, name="Null"), {
    "==": lambda a, b: b is None,
    "@text": lambda this: "null",
})

List = _install(Obj(Basic, name="List"), {
    "@text": _list_text,
})

Function = _install(Obj(Basic, name="Function"), {
    "()": _function_call,
    "@text": _function_text,
})

register_type(int, Number)
register_type(float, Number)
register_type(str, Text)
register_type(bool, Boolean)
register_type(type(None), Null)
register_type(list, List)
register_type(NativeFunction, Function)
register_type(BoundFunction, Function)
