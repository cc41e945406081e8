"""
Textual forms of facet values.

`default_text` is what printing falls back to when a value has no `@text`.
`Printer.pformat` produces the debugging representation used by `inspect`.
`text_template` builds a Mustache-backed `@text` implementation.
"""
import pystache

from facet.facet_datatypes import Obj, NativeFunction, BoundFunction, is_missing
from facet.facet_resolver import resolve, type_of


def _type_name(obj: Obj) -> str:
    # A root object names itself; anything else is named by its type.
    klass = type_of(obj)
    name = resolve(klass if klass is not None else obj, "name")
    if isinstance(name, str):
        return name
    return "Object"


def default_text(value) -> str:
    """Fallback textual form. Never fails."""
    if isinstance(value, Obj):
        return f"<{_type_name(value)}:{value.id}>"
    return Printer().pformat(value)


class Printer:
    """Formats facet values into readable, debugging-oriented strings."""

    def __init__(self, max_depth=4):
        self.max_depth = max_depth
        self._active = set()
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format a value."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, Obj): return self._pformat_object
        if isinstance(obj, list): return self._pformat_list
        if isinstance(obj, str): return self._pformat_str
        # Default to Python's repr for unknown types
        return lambda o, l: repr(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
            list: self._pformat_list,
            Obj: self._pformat_object,
            NativeFunction: self._pformat_function,
            BoundFunction: self._pformat_bound,
        }

    def _pformat_primitive(self, obj, level):
        return str(obj)

    def _pformat_str(self, obj, level):
        return repr(obj)

    def _pformat_bool(self, obj, level):
        return 'true' if obj else 'false'

    def _pformat_none(self, obj, level):
        return 'null'

    def _pformat_list(self, obj, level):
        if id(obj) in self._active:
            return '[...]'
        self._active.add(id(obj))
        try:
            return '[' + ', '.join(self.pformat(v, level + 1) for v in obj) + ']'
        finally:
            self._active.discard(id(obj))

    def _pformat_function(self, obj, level):
        return f"<Function {obj.name}>"

    def _pformat_bound(self, obj, level):
        return f"<BoundFunction {self.pformat(obj.function, level + 1)}>"

    def _pformat_object(self, obj, level):
        head = f"{_type_name(obj)}#{obj.id}"
        if id(obj) in self._active or level >= self.max_depth:
            return f"{head}{{...}}"
        self._active.add(id(obj))
        try:
            parts = []
            for k, v in obj.attributes.items():
                if k == "name" and not len(obj.parents):
                    continue
                parts.append(f"{k}: {self.pformat(v, level + 1)}")
            return f"{head}{{{', '.join(parts)}}}"
        finally:
            self._active.discard(id(obj))


_HIDDEN = object()


class _TemplateContext(dict):
    """Mustache context that resolves attributes of `obj` only when looked up.

    Callables are hidden. Object values render through their own `@text`,
    except objects already being rendered higher up, which use the default
    text form.
    """

    def __init__(self, obj):
        super().__init__()
        self.obj = obj

    def _lookup(self, key):
        from facet.facet_dispatch import is_callable
        if not isinstance(key, str):
            return _HIDDEN
        v = resolve(self.obj, key)
        if is_missing(v) or is_callable(v):
            return _HIDDEN
        return v

    def __contains__(self, key):
        return self._lookup(key) is not _HIDDEN

    def __getitem__(self, key):
        v = self._lookup(key)
        if v is _HIDDEN:
            raise KeyError(key)
        if isinstance(v, (str, int, float, bool)) or v is None:
            return v
        if isinstance(v, Obj) and v.id in _rendering:
            return default_text(v)
        from facet.facet_dispatch import dispatcher
        return dispatcher.text(v)


# ids of objects whose template is currently rendering
_rendering = set()


def text_template(template: str) -> NativeFunction:
    """An `@text` implementation rendering `template` against the receiver."""
    renderer = pystache.Renderer(escape=lambda u: u)

    def render(this):
        key = this.id if isinstance(this, Obj) else None
        entered = key is not None and key not in _rendering
        if entered:
            _rendering.add(key)
        try:
            return renderer.render(template, _TemplateContext(this))
        finally:
            if entered:
                _rendering.discard(key)

    return NativeFunction("@text", render)
