from __future__ import annotations

import json
from typing import Any, Optional
import collections.abc

import yaml

from facet.facet_datatypes import Obj, NativeFunction, BoundFunction


# --------------------------
# Helpers
# --------------------------

def _parent_ref(obj: Obj) -> dict:
    ref = {"ref": obj.id}
    name = obj.attributes.get("name", None)
    if isinstance(name, str):
        ref["name"] = name
    return ref


def snapshot(value: Any, *, include_parents: bool = False, _seen: Optional[set] = None) -> Any:
    """
    Convert a value (and any objects it reaches) into plain Python data.

    Objects become {"id", "attributes", "parents"}; an object reached a second
    time is written as {"ref": id} so cyclic graphs terminate. Parents are
    written as references unless include_parents is set.
    """
    seen = _seen if _seen is not None else set()
    if isinstance(value, Obj):
        if value.id in seen:
            return {"ref": value.id}
        seen.add(value.id)
        attrs = {k: snapshot(v, include_parents=include_parents, _seen=seen)
                 for k, v in value.attributes.items()}
        if include_parents:
            parents = [snapshot(p, include_parents=True, _seen=seen) for p in value.parents]
        else:
            parents = [_parent_ref(p) for p in value.parents]
        return {"id": value.id, "attributes": attrs, "parents": parents}
    if isinstance(value, NativeFunction):
        return {"function": value.name}
    if isinstance(value, BoundFunction):
        return {
            "function": snapshot(value.function, include_parents=include_parents, _seen=seen),
            "bound": snapshot(value.receiver, include_parents=include_parents, _seen=seen),
        }
    if isinstance(value, (list, tuple)):
        return [snapshot(v, include_parents=include_parents, _seen=seen) for v in value]
    if isinstance(value, collections.abc.Mapping):
        return {str(k): snapshot(v, include_parents=include_parents, _seen=seen) for k, v in value.items()}
    return value


def detect_format(data_hint: Optional[str] = None) -> Optional[str]:
    """Returns 'json' or 'yaml' from simple sniffing, or None for empty input."""
    if data_hint is None:
        return None
    s = data_hint.lstrip()
    if not s:
        return None
    if s.startswith('{') or s.startswith('['):
        return 'json'
    return 'yaml'


# --------------------------
# Public API
# --------------------------

def serialize(value: Any, *, fmt: str = 'json', include_parents: bool = False) -> str:
    """Render a value as JSON or YAML text."""
    data = snapshot(value, include_parents=include_parents)
    f = (fmt or 'json').lower()
    if f == 'json':
        return json.dumps(data, indent=2, ensure_ascii=False)
    if f in ('yaml', 'yml'):
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported serialization format: {fmt}")


def deserialize(data: bytes | bytearray | str, *, fmt: Optional[str] = None) -> Any:
    """
    Parse JSON or YAML text back into plain data.
    Objects are not rebuilt; the result is the snapshot structure.
    """
    text = data.decode('utf-8', errors='replace') if isinstance(data, (bytes, bytearray)) else str(data)
    f = (fmt or detect_format(text) or 'yaml').lower()
    if f == 'json':
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # YAML is a superset of JSON
            return yaml.safe_load(text)
    if f in ('yaml', 'yml'):
        return yaml.safe_load(text)
    raise ValueError(f"Unsupported serialization format: {fmt}")
