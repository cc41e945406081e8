"""
Runtime composition of objects: `extend` layers capabilities on top of the
existing parents, `becomes` rebases the parent chain wholesale.
"""
from typing import Iterable, Union

from facet.facet_datatypes import Obj, _dbg


def _require_object(value, op: str) -> Obj:
    if not isinstance(value, Obj):
        raise TypeError(f"{op} expects an object, got {type(value).__name__}")
    return value


def extend(target: Obj, *mixins: Obj) -> Obj:
    """Appends each mixin to `target`'s parents.

    Existing parents and local attributes are left alone. Not idempotent:
    extending twice with the same mixin lists it twice.
    """
    _require_object(target, "extend")
    if not mixins:
        raise TypeError("extend expects at least one mixin")
    for mixin in mixins:
        target.parents.append(_require_object(mixin, "extend"))
    _dbg("extend()", "target", target.id, "mixins", [m.id for m in mixins])
    return target


def becomes(target: Obj, parents: Union[Obj, Iterable[Obj]]) -> Obj:
    """Replaces `target`'s parents with `parents` (one object or a list)."""
    _require_object(target, "becomes")
    target.parents.replace_all(parents)
    _dbg("becomes()", "target", target.id, "parents", [p.id for p in target.parents])
    return target
