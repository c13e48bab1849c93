"""Tests for the method descriptor."""

import pytest

from anyiter import NilPointer, Panic, SafeMethod, SafeValue, wrap_method, wrap_type
from anyiter.rtype import TY_INT, MethodDef, func_of, interface_of, ptr_to
from anyiter.rvalue import pointer_to, zero

from conftest import PKG, TEST_INTERFACE, TEST_STRUCT, make_test_struct


def _method(t, name: str) -> SafeMethod:
    m, ok = wrap_type(t).method_by_name(name)
    assert ok, name
    return m


def test_concrete_method():
    m = _method(TEST_STRUCT, "GetSomeField")
    assert m.name() == "GetSomeField"
    assert m.pkg_path() == ""
    assert m.is_exported() is True
    assert m.index() == 1
    assert m.receiver() == wrap_type(TEST_STRUCT)


def test_concrete_method_type_takes_receiver_first():
    t = _method(TEST_STRUCT, "GetSomeField").type()
    assert t.num_in() == 1
    assert t.in_(0) == wrap_type(TEST_STRUCT)
    assert t.out(0) == wrap_type(TY_INT)


def test_variadic_method_type():
    t = _method(TEST_STRUCT, "AddToField").type()
    assert t.is_variadic() is True
    assert t.string() == "func(fixtures.testStruct, ...int)"


def test_method_func_takes_receiver():
    f = _method(TEST_STRUCT, "GetSomeField").func()
    results = f.call([SafeValue(make_test_struct(5))])
    assert [r.as_int() for r in results] == [5]


def test_method_func_on_pointer_receiver():
    f = _method(ptr_to(TEST_STRUCT), "GetSomeField").func()
    ptr = wrap_type(ptr_to(TEST_STRUCT))
    assert f.type().in_(0) == ptr
    results = f.call([SafeValue(pointer_to(make_test_struct(3)))])
    assert results[0].as_int() == 3


def test_method_func_on_nil_pointer_receiver():
    f = _method(ptr_to(TEST_STRUCT), "GetSomeField").func()
    nil = SafeValue(zero(ptr_to(TEST_STRUCT)))
    assert f.call([nil]) == NilPointer("call")
    with pytest.raises(Panic):
        f.unwrap().call([nil.unwrap()])


def test_interface_method():
    m = _method(TEST_INTERFACE, "GetSomeField")
    assert m.func() is None
    assert m.type().string() == "func() int"
    assert m.receiver() == wrap_type(TEST_INTERFACE)


def test_unexported_interface_method():
    t = interface_of([MethodDef("secret", func_of([], []), pkg_path=PKG)])
    m = wrap_type(t).method(0)
    assert m.name() == "secret"
    assert m.pkg_path() == PKG
    assert m.is_exported() is False


def test_wrap_method_round_trip():
    raw = TEST_STRUCT.method(0)
    m = wrap_method(raw)
    assert m.unwrap() is raw
    assert m.receiver() is None
    assert wrap_method(raw, TEST_STRUCT) == wrap_type(TEST_STRUCT).method(0)
