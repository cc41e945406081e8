import pytest
from facet.facet_datatypes import (
    Obj, NativeFunction, BoundFunction, UnsupportedOperation
)
from facet.facet_dispatch import (
    OperatorDispatcher, dispatcher, invoke, is_callable, OPERATOR_TABLE, RESERVED_KEYS
)
from facet.facet_core import Basic, Number


def recorder(name="rec"):
    return NativeFunction(name, lambda *args: args)


@pytest.fixture
def number_colon():
    """Installs a temporary `:` on Number and removes it afterwards."""
    def install(func):
        Number[":"] = func
    yield install
    if Number.has_own(":"):
        del Number[":"]


# --- Operator table completeness ---

@pytest.mark.parametrize("syntax, args", [
    ("()", ()),
    ("<=>", (1,)),
    ("<", (1,)),
    ("<=", (1,)),
    (">", (1,)),
    (">=", (1,)),
    (":", (1,)),
])
def test_missing_operator_raises_unsupported(syntax, args):
    o = Obj(Basic)
    with pytest.raises(UnsupportedOperation) as exc:
        dispatcher.dispatch(syntax, o, *args)
    assert exc.value.operator == syntax
    assert exc.value.receiver is o


def test_named_entry_points_raise_unsupported():
    o = Obj()
    for method, op in [
        (lambda: dispatcher.call(o), "()"),
        (lambda: dispatcher.compare(o, 1), "<=>"),
        (lambda: dispatcher.lt(o, 1), "<"),
        (lambda: dispatcher.le(o, 1), "<="),
        (lambda: dispatcher.gt(o, 1), ">"),
        (lambda: dispatcher.ge(o, 1), ">="),
        (lambda: dispatcher.colon(o, 1), ":"),
    ]:
        with pytest.raises(UnsupportedOperation) as exc:
            method()
        assert exc.value.operator == op


def test_table_covers_reserved_keys():
    assert set(OPERATOR_TABLE) == {"()", "<=>", "<", "<=", ">", ">=", ":", "@text"}
    assert "__parents__" in RESERVED_KEYS
    assert OPERATOR_TABLE[":"][1] == "type"


def test_unknown_syntax():
    with pytest.raises(ValueError):
        dispatcher.dispatch("+", 1, 2)


# --- Invocation shapes ---

def test_call_passes_receiver_first():
    o = Obj(**{"()": recorder()})
    assert dispatcher.call(o, 1, 2) == (o, 1, 2)


def test_binary_operators_pass_receiver_first():
    o = Obj(**{op: recorder(op) for op in ("<=>", "<", "<=", ">", ">=")})
    assert dispatcher.compare(o, "b") == (o, "b")
    assert dispatcher.lt(o, "b") == (o, "b")
    assert dispatcher.le(o, "b") == (o, "b")
    assert dispatcher.gt(o, "b") == (o, "b")
    assert dispatcher.ge(o, "b") == (o, "b")


def test_inherited_call_still_receives_instance():
    klass = Obj(**{"()": recorder()})
    inst = Obj(klass)
    assert dispatcher.call(inst, "x") == (inst, "x")


def test_object_used_as_function():
    fn_obj = Obj(**{"()": recorder()})
    o = Obj(m=fn_obj)
    assert dispatcher.call_attr(o, "m", 5) == (fn_obj, o, 5)


def test_bound_function_replaces_receiver():
    bf = BoundFunction(recorder(), "bound")
    assert invoke(bf, "ignored", 1) == ("bound", 1)


def test_call_cycle_detected():
    f = Obj()
    f["()"] = f
    with pytest.raises(RecursionError):
        dispatcher.call(f)


def test_non_callable_attribute():
    o = Obj(**{"()": 5})
    with pytest.raises(UnsupportedOperation) as exc:
        dispatcher.call(o)
    assert exc.value.operator == "()"


def test_call_attr_missing_names_attribute():
    with pytest.raises(UnsupportedOperation) as exc:
        dispatcher.call_attr(Obj(), "frobnicate")
    assert exc.value.operator == "frobnicate"


def test_is_callable():
    assert is_callable(recorder())
    assert is_callable(BoundFunction(recorder(), None))
    assert is_callable(Obj(**{"()": recorder()}))
    assert not is_callable(Obj())
    assert not is_callable(lambda: None)
    assert not is_callable(3)


# --- `:` goes through the type ---

def test_colon_uses_type_of_left_operand():
    klass = Obj(**{":": recorder(":")})
    inst = Obj(klass)
    assert dispatcher.colon(inst, "b") == (klass, inst, "b")


def test_colon_ignores_receivers_own_attribute():
    klass = Obj()
    inst = Obj(klass, **{":": recorder(":")})
    with pytest.raises(UnsupportedOperation) as exc:
        dispatcher.colon(inst, "b")
    assert exc.value.operator == ":"
    assert exc.value.receiver is inst


def test_colon_without_type():
    with pytest.raises(UnsupportedOperation):
        dispatcher.colon(Obj(), 1)


def test_colon_on_number_literal(number_colon):
    number_colon(NativeFunction("Number:::", lambda klass, n, unit: (klass, f"{n}{unit}")))
    assert dispatcher.colon(3, "px") == (Number, "3px")
    assert dispatcher.dispatch(":", 2.5, "em") == (Number, "2.5em")


# --- @text ---

def test_text_with_hook():
    o = Obj(**{"@text": NativeFunction("@text", lambda this: "Sam W")})
    assert dispatcher.text(o) == "Sam W"
    assert dispatcher.dispatch("@text", o) == "Sam W"


def test_text_fallback_never_fails():
    o = Obj()
    assert dispatcher.text(o) == f"<Object:{o.id}>"
    named = Obj(name="Thing")
    assert dispatcher.text(named) == f"<Thing:{named.id}>"
    assert dispatcher.text(object.__new__(object)).startswith("<object")


def test_text_must_return_string():
    o = Obj(**{"@text": NativeFunction("@text", lambda this: 42)})
    with pytest.raises(TypeError):
        dispatcher.text(o)


def test_text_of_literals():
    assert dispatcher.text(5) == "5"
    assert dispatcher.text(3.0) == "3"
    assert dispatcher.text(2.5) == "2.5"
    assert dispatcher.text("hi") == "hi"
    assert dispatcher.text(True) == "true"
    assert dispatcher.text(None) == "null"
    assert dispatcher.text([1, "a"]) == "[1, 'a']"


def test_separate_dispatcher_instances_agree():
    o = Obj(**{"()": recorder()})
    assert OperatorDispatcher().call(o) == dispatcher.call(o)


def test_text_dispatch_rejects_arguments():
    o = Obj(**{"@text": NativeFunction("@text", lambda this: "x")})
    with pytest.raises(TypeError):
        dispatcher.dispatch("@text", o, 1)
    with pytest.raises(TypeError):
        dispatcher.colon(3)
