# facet runtime

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Union, Iterable

from facet.facet_datatypes import (
    Obj, NativeFunction, NotFoundError, UnsupportedOperation,
    AssertionFailure, is_missing, _dbg
)
from facet.facet_resolver import resolve, get_attr, set_attr, type_of
from facet.facet_composer import extend, becomes
from facet.facet_dispatch import dispatcher
from facet.facet_core import Basic, Comparable


class KernelLib:
    """Functions bound into every runtime's top-level scope.

    Each `_name` method is exposed as the attribute `name`.
    """

    def __init__(self, runtime: 'Runtime'):
        self.runtime = runtime

    def _print(self, *values):
        return self.runtime.print(*values)

    def _assert(self, condition, expression=None):
        return self.runtime.assert_(condition, expression)

    def _object(self, *parents):
        return self.runtime.new_object(*parents)

    def _extend(self, target, *mixins):
        return extend(target, *mixins)

    def _becomes(self, target, parents):
        return becomes(target, parents)


# ===================================================================
# Execution
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of running a script against a runtime."""
    status: Literal['success', 'error']
    value: Any = None
    error_message: Optional[str] = None
    side_effects: List[Dict] = field(default_factory=list)

    @property
    def stdout(self) -> List[str]:
        return [e.get('message', '') for e in self.side_effects if e.get('topics') == ['stdout']]

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        return str(self.error_message or "Unknown error")


class Runtime:
    """Host facade: builds objects, runs scripts, and collects printed output.

    A script is any Python callable taking the runtime as first argument.
    """

    def __init__(self, echo: bool = False, name: str = "main"):
        self.echo = echo
        self.side_effects: List[Dict] = []
        self.dispatcher = dispatcher
        # Top-level lexical scope. Class objects built by new_class start
        # out delegating to it.
        self.scope = Obj(Basic, name=name)
        self.scope["Comparable"] = Comparable
        kernel = KernelLib(self)
        for attr, member in inspect.getmembers(kernel):
            if attr.startswith('_') and not attr.startswith('__') and callable(member):
                self.scope[attr[1:]] = NativeFunction(
                    f"Kernel::{attr[1:]}", lambda _this, *args, _m=member: _m(*args)
                )

    # --- Object construction ---
    def new_object(self, *parents: Obj, **attributes: Any) -> Obj:
        """A new object; with no parents given it inherits from Basic."""
        obj = Obj(*(parents or (Basic,)))
        for k, v in attributes.items():
            obj[k] = v
        return obj

    def new_class(self, name: str, instance_methods: Union[Obj, Dict[str, Any], None] = None,
                  init: Optional[Callable[..., Any]] = None) -> Obj:
        """A class object whose `()` builds instances.

        Each instance is created inside the class scope and then `becomes` the
        class's `instance_methods` object. If the instance resolves `init`, it
        is called with the constructor arguments.
        """
        klass = Obj(self.scope, name=name)
        if isinstance(instance_methods, Obj):
            methods = instance_methods
        else:
            methods = self.new_object(name=name)
            for k, v in (instance_methods or {}).items():
                methods[k] = v
        if init is not None:
            methods["init"] = init if isinstance(init, NativeFunction) else NativeFunction(f"{name}::init", init)
        klass["instance_methods"] = methods
        klass["()"] = NativeFunction(f"{name}::()", self._construct)
        return klass

    def _construct(self, klass: Obj, *args: Any) -> Obj:
        instance = Obj(klass)
        becomes(instance, get_attr(klass, "instance_methods"))
        if not is_missing(resolve(instance, "init")):
            dispatcher.call_attr(instance, "init", *args)
        _dbg("construct()", "class", klass.attributes.get("name", None), "instance", instance.id)
        return instance

    # --- Resolution & composition ---
    def resolve(self, value: Any, name: str) -> Any:
        return resolve(value, name)

    def get_attr(self, value: Any, name: str) -> Any:
        return get_attr(value, name)

    def set_attr(self, value: Any, name: str, new_value: Any) -> Any:
        return set_attr(value, name, new_value)

    def extend(self, target: Obj, *mixins: Obj) -> Obj:
        return extend(target, *mixins)

    def becomes(self, target: Obj, parents: Union[Obj, Iterable[Obj]]) -> Obj:
        return becomes(target, parents)

    def type_of(self, value: Any) -> Optional[Obj]:
        return type_of(value)

    # --- Operators ---
    def call(self, obj: Any, *args: Any) -> Any:
        return self.dispatcher.call(obj, *args)

    def call_attr(self, obj: Any, name: str, *args: Any) -> Any:
        return self.dispatcher.call_attr(obj, name, *args)

    def compare(self, a: Any, b: Any) -> Any:
        return self.dispatcher.compare(a, b)

    def lt(self, a: Any, b: Any) -> Any:
        return self.dispatcher.lt(a, b)

    def le(self, a: Any, b: Any) -> Any:
        return self.dispatcher.le(a, b)

    def gt(self, a: Any, b: Any) -> Any:
        return self.dispatcher.gt(a, b)

    def ge(self, a: Any, b: Any) -> Any:
        return self.dispatcher.ge(a, b)

    def colon(self, a: Any, b: Any) -> Any:
        return self.dispatcher.colon(a, b)

    def text(self, value: Any) -> str:
        return self.dispatcher.text(value)

    def inspect(self, value: Any) -> str:
        from facet.facet_printer import Printer
        return Printer().pformat(value)

    # --- Host primitives ---
    def print(self, *values: Any) -> None:
        """Stringifies each value through `@text` and records the line."""
        message = " ".join(self.text(v) for v in values)
        self.side_effects.append({"topics": ["stdout"], "message": message})
        if self.echo:
            print(message)
        return None

    def assert_(self, condition: Any, expression: Any = None) -> bool:
        if not condition:
            raise AssertionFailure(expression)
        return True

    # --- Execution ---
    def _format_runtime_error(self, e: BaseException) -> str:
        match e:
            case AssertionFailure() as af:
                msg = f"AssertionFailure: {af.expression}" if af.expression is not None else "AssertionFailure"
            case UnsupportedOperation() as uo:
                msg = f"UnsupportedOperation: {uo.operator}"
            case NotFoundError() as nf:
                msg = f"NotFoundError: {nf.name}"
            case RecursionError():
                msg = f"RecursionError: {e}"
            case TypeError() | AttributeError():
                msg = f"TypeError: {e}"
            case _:
                msg = f"InternalError: {e}"

        # Render the offending value, if the error carries one
        facet_obj = getattr(e, 'facet_obj', None)
        if facet_obj is not None:
            try:
                rendered = self.inspect(facet_obj)
            except Exception:
                rendered = repr(facet_obj)
            msg = f"{msg}\n{rendered}"
        return msg

    def run(self, script: Callable[..., Any], *args: Any) -> ExecutionResult:
        """Runs `script(self, *args)` and captures its outcome."""
        self.side_effects = []
        try:
            value = script(self, *args)
        except Exception as e:
            _dbg("run()", "error", type(e).__name__, str(e))
            err_msg = self._format_runtime_error(e)
            self.side_effects.append({'topics': ['stderr'], 'message': err_msg})
            return ExecutionResult(status='error', error_message=err_msg, side_effects=self.side_effects)
        return ExecutionResult(status='success', value=value, side_effects=self.side_effects)
