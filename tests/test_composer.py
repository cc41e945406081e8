import pytest
from facet.facet_datatypes import Obj, is_missing
from facet.facet_resolver import resolve
from facet.facet_composer import extend, becomes


def test_extend_is_additive():
    base = Obj(a="base", shared="base")
    o = Obj(base, own="own")
    mixin = Obj(m="mixin", shared="mixin", own="mixin")
    before = {k: resolve(o, k) for k in ("a", "shared", "own")}

    assert extend(o, mixin) is o

    for k, v in before.items():
        assert resolve(o, k) == v
    assert resolve(o, "m") == "mixin"
    assert o.parents == [base, mixin]


def test_extend_twice_appends_twice():
    o = Obj()
    mixin = Obj(m=1)
    extend(o, mixin)
    extend(o, mixin)
    assert o.parents == [mixin, mixin]
    assert resolve(o, "m") == 1


def test_extend_many_in_order():
    o = Obj()
    m1, m2 = Obj(x=1), Obj(x=2, y=2)
    extend(o, m1, m2)
    assert o.parents == [m1, m2]
    assert resolve(o, "x") == 1
    assert resolve(o, "y") == 2


def test_extend_rejects_non_objects():
    with pytest.raises(TypeError):
        extend(Obj(), "mixin")
    with pytest.raises(TypeError):
        extend("target", Obj())
    with pytest.raises(TypeError):
        extend(Obj())


def test_becomes_replaces_parents():
    old = Obj(only_old="old", both="old")
    q = Obj(both="q")
    o = Obj(old, own="own")

    assert becomes(o, [q]) is o

    assert is_missing(resolve(o, "only_old"))
    assert resolve(o, "both") == "q"
    assert resolve(o, "own") == "own"
    assert o.parents == [q]


def test_becomes_accepts_single_object():
    o = Obj(Obj(), Obj())
    q = Obj()
    becomes(o, q)
    assert o.parents == [q]


def test_becomes_empty_detaches():
    o = Obj(Obj(a=1))
    becomes(o, [])
    assert len(o.parents) == 0
    assert is_missing(resolve(o, "a"))


def test_becomes_then_extend():
    methods = Obj(greet="hi")
    comparable = Obj(cmp="yes")
    o = Obj(Obj(scope_only=1))
    becomes(o, methods)
    extend(o, comparable)
    assert o.parents == [methods, comparable]
    assert is_missing(resolve(o, "scope_only"))


def test_becomes_rejects_non_objects():
    with pytest.raises(TypeError):
        becomes(Obj(), ["nope"])
    with pytest.raises(TypeError):
        becomes(None, Obj())
