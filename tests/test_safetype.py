"""Tests for the panic-free type descriptor."""

import pytest

from anyiter import IndexOutOfRange, Panic, SafeField, SafeMethod, WrongKind, is_failure, wrap_type
from anyiter.rtype import (
    ARITHMETIC_KINDS,
    BOTH_DIR,
    RECV_DIR,
    TY_ANY,
    TY_BOOL,
    TY_COMPLEX128,
    TY_ERROR,
    TY_FLOAT32,
    TY_INT,
    TY_STRING,
    TY_UINT8,
    TY_UNSAFE_POINTER,
    StructField,
    Type,
    array_of,
    chan_of,
    func_of,
    map_of,
    ptr_to,
    slice_of,
    struct_of,
)
from anyiter.safetype import ELEM_KINDS

from conftest import (
    ADD_TO_FIELD_SIG,
    AMBIGUOUS,
    GET_SOME_FIELD_SIG,
    OUTER,
    PKG,
    PTR_EMBED,
    SECOND_TEST_STRUCT,
    TEST_INTERFACE,
    TEST_STRUCT,
)

SAMPLE_TYPES = [
    Type("invalid"),
    TY_BOOL,
    TY_INT,
    TY_UINT8,
    TY_FLOAT32,
    TY_COMPLEX128,
    TY_STRING,
    TY_UNSAFE_POINTER,
    TY_ANY,
    TY_ERROR,
    array_of(3, TY_INT),
    slice_of(TY_STRING),
    map_of(TY_STRING, TY_INT),
    ptr_to(TEST_STRUCT),
    chan_of(TY_INT, RECV_DIR),
    func_of([TY_INT, slice_of(TY_INT)], [TY_ERROR], variadic=True),
    ADD_TO_FIELD_SIG,
    TEST_STRUCT,
    SECOND_TEST_STRUCT,
    TEST_INTERFACE,
]

NULLARY_OPS = ["bits", "chan_dir", "is_variadic", "elem", "key", "len", "num_field", "num_in", "num_out"]
INDEXED_OPS = ["field", "in_", "out", "method"]


def _type_id(t: Type) -> str:
    return t.kind() + ":" + t.string()


def _wrap_result(x):
    if isinstance(x, Type):
        return wrap_type(x)
    return x


# ============================================================
# Parity with the runtime
# ============================================================


@pytest.mark.parametrize("t", SAMPLE_TYPES, ids=_type_id)
@pytest.mark.parametrize("op", NULLARY_OPS)
def test_nullary_matches_runtime_or_wrong_kind(t, op):
    safe = getattr(wrap_type(t), op)()
    try:
        expected = getattr(t, op)()
    except Panic:
        assert isinstance(safe, WrongKind)
        assert safe.actual == t.kind()
        assert t.kind() not in safe.expected
        return
    assert not is_failure(safe)
    assert safe == _wrap_result(expected)


@pytest.mark.parametrize("t", SAMPLE_TYPES, ids=_type_id)
@pytest.mark.parametrize("op", INDEXED_OPS)
def test_indexed_matches_runtime_or_fails(t, op):
    for i in (-1, 0, 1, 2, 3):
        safe = getattr(wrap_type(t), op)(i)
        try:
            expected = getattr(t, op)(i)
        except Panic:
            assert isinstance(safe, (WrongKind, IndexOutOfRange))
            continue
        assert not is_failure(safe)
        assert safe.unwrap() == expected


@pytest.mark.parametrize("t", SAMPLE_TYPES, ids=_type_id)
def test_unconditional_ops_delegate(t):
    st = wrap_type(t)
    assert st.kind() == t.kind()
    assert st.name() == t.name()
    assert st.pkg_path() == t.pkg_path()
    assert st.string() == t.string()
    assert str(st) == t.string()
    assert st.size() == t.size()
    assert st.align() == t.align()
    assert st.field_align() == t.field_align()
    assert st.comparable() == t.comparable()
    assert st.num_method() == t.num_method()


@pytest.mark.parametrize("t", SAMPLE_TYPES, ids=_type_id)
def test_queries_are_idempotent(t):
    st = wrap_type(t)
    for op in NULLARY_OPS:
        assert getattr(st, op)() == getattr(st, op)()
    for op in INDEXED_OPS:
        assert getattr(st, op)(0) == getattr(st, op)(0)


@pytest.mark.parametrize("t", SAMPLE_TYPES, ids=_type_id)
def test_unwrap_round_trip(t):
    assert wrap_type(t).unwrap() is t
    assert wrap_type(t) == wrap_type(t)
    assert hash(wrap_type(t)) == hash(wrap_type(t))


def test_relations_delegate():
    a = wrap_type(TEST_STRUCT)
    assert a.implements(wrap_type(TEST_INTERFACE)) is True
    assert a.implements(wrap_type(TY_ERROR)) is False
    assert a.implements(wrap_type(TY_INT)) is False
    assert a.assignable_to(wrap_type(TEST_INTERFACE)) is True
    assert a.assignable_to(wrap_type(TY_ANY)) is True
    assert a.convertible_to(wrap_type(TY_INT)) is False


# ============================================================
# Methods
# ============================================================


def test_method_in_range():
    m = wrap_type(TEST_STRUCT).method(0)
    assert isinstance(m, SafeMethod)
    assert m.name() == "AddToField"


def test_method_out_of_range():
    assert wrap_type(TEST_STRUCT).method(100) == IndexOutOfRange("method", 100, 2)


def test_method_index_equal_to_count():
    assert wrap_type(TEST_STRUCT).num_method() == 2
    assert wrap_type(TEST_STRUCT).method(2) == IndexOutOfRange("method", 2, 2)


def test_method_negative_index():
    assert wrap_type(TEST_STRUCT).method(-1) == IndexOutOfRange("method", -1, 2)


def test_method_by_name():
    m, ok = wrap_type(TEST_STRUCT).method_by_name("GetSomeField")
    assert ok is True
    assert m.type().string() == "func(fixtures.testStruct) int"


def test_method_by_name_missing():
    assert wrap_type(TEST_STRUCT).method_by_name("Nope") == (None, False)


def test_pointer_receiver_method_only_on_pointer():
    assert wrap_type(TEST_STRUCT).method_by_name("SetSomeField") == (None, False)
    m, ok = wrap_type(ptr_to(TEST_STRUCT)).method_by_name("SetSomeField")
    assert ok is True
    assert m.index() == 2


# ============================================================
# Kind-restricted queries
# ============================================================


def test_bits_wrong_kind():
    assert wrap_type(TEST_STRUCT).bits() == WrongKind("bits", ARITHMETIC_KINDS, "struct")


def test_bits():
    assert wrap_type(TY_UINT8).bits() == 8


def test_chan_dir_wrong_kind():
    assert wrap_type(TEST_STRUCT).chan_dir() == WrongKind("chan_dir", ("chan",), "struct")


def test_chan_dir():
    assert wrap_type(chan_of(TY_INT)).chan_dir() == BOTH_DIR
    assert wrap_type(chan_of(TY_INT, RECV_DIR)).chan_dir() == RECV_DIR


def test_is_variadic_wrong_kind():
    assert wrap_type(TEST_STRUCT).is_variadic() == WrongKind("is_variadic", ("func",), "struct")


def test_is_variadic():
    assert wrap_type(ADD_TO_FIELD_SIG).is_variadic() is True
    assert wrap_type(GET_SOME_FIELD_SIG).is_variadic() is False


def test_elem_wrong_kind():
    assert wrap_type(TEST_STRUCT).elem() == WrongKind("elem", ELEM_KINDS, "struct")


def test_elem():
    assert wrap_type(ptr_to(TEST_STRUCT)).elem() == wrap_type(TEST_STRUCT)


def test_key_wrong_kind():
    assert wrap_type(TY_INT).key() == WrongKind("key", ("map",), "int")


def test_key():
    assert wrap_type(map_of(TY_STRING, TY_INT)).key() == wrap_type(TY_STRING)


def test_len_wrong_kind():
    assert wrap_type(slice_of(TY_INT)).len() == WrongKind("len", ("array",), "slice")


def test_len():
    assert wrap_type(array_of(4, TY_INT)).len() == 4


def test_num_field_wrong_kind():
    assert wrap_type(TY_INT).num_field() == WrongKind("num_field", ("struct",), "int")


def test_num_field():
    assert wrap_type(TEST_STRUCT).num_field() == 1


def test_field_wrong_kind():
    assert wrap_type(TY_INT).field(0) == WrongKind("field", ("struct",), "int")


def test_field_out_of_range():
    assert wrap_type(TEST_STRUCT).field(500) == IndexOutOfRange("field", 500, 1)


def test_field_index_equal_to_count():
    assert wrap_type(TEST_STRUCT).field(1) == IndexOutOfRange("field", 1, 1)


def test_field():
    f = wrap_type(TEST_STRUCT).field(0)
    assert isinstance(f, SafeField)
    assert f.name() == "someField"
    assert f.is_exported() is False
    assert f.pkg_path() == PKG
    assert f.type() == wrap_type(TY_INT)
    assert f.index() == (0,)
    assert f.offset() == 0


def test_field_tag_lookup():
    t = struct_of([StructField("B", TY_STRING, tag='json:"b,omitempty" xml:"bee"')])
    f = wrap_type(t).field(0)
    assert f.tag() == 'json:"b,omitempty" xml:"bee"'
    assert f.tag_lookup("xml") == ("bee", True)
    assert f.tag_lookup("yaml") == ("", False)


def test_field_by_index_wrong_kind():
    assert wrap_type(TY_INT).field_by_index([0]) == WrongKind("field_by_index", ("struct",), "int")


def test_field_by_index_out_of_range():
    assert wrap_type(TEST_STRUCT).field_by_index([500]) == IndexOutOfRange("field_by_index", 500, 1)


def test_field_by_index_nested():
    f = wrap_type(SECOND_TEST_STRUCT).field_by_index([0, 0])
    assert f.name() == "someField"


def test_field_by_index_nested_out_of_range():
    assert wrap_type(SECOND_TEST_STRUCT).field_by_index([0, 1]) == IndexOutOfRange("field_by_index", 1, 1)


def test_field_by_index_through_non_struct():
    result = wrap_type(SECOND_TEST_STRUCT).field_by_index([0, 0, 0])
    assert result == WrongKind("field_by_index", ("struct",), "int")


def test_field_by_index_through_embedded_pointer():
    f = wrap_type(PTR_EMBED).field_by_index([0, 1])
    assert f.name() == "Y"


def test_field_by_name_non_struct():
    assert wrap_type(TY_INT).field_by_name("X") == (None, False)
    assert wrap_type(TY_INT).field_by_name_func(lambda s: True) == (None, False)


def test_field_by_name_promoted():
    f, ok = wrap_type(OUTER).field_by_name("Y")
    assert ok is True
    assert f.index() == (0, 1)


def test_field_by_name_ambiguous():
    assert wrap_type(AMBIGUOUS).field_by_name("X") == (None, False)


def test_field_by_name_func():
    f, ok = wrap_type(OUTER).field_by_name_func(lambda s: s.startswith("Z"))
    assert ok is True
    assert f.name() == "Z"


def test_in_wrong_kind():
    assert wrap_type(TEST_STRUCT).in_(1) == WrongKind("in", ("func",), "struct")


def test_in_out_of_range():
    assert wrap_type(ADD_TO_FIELD_SIG).in_(500) == IndexOutOfRange("in", 500, 1)


def test_in_index_equal_to_count():
    assert wrap_type(ADD_TO_FIELD_SIG).in_(1) == IndexOutOfRange("in", 1, 1)


def test_in():
    assert wrap_type(ADD_TO_FIELD_SIG).in_(0) == wrap_type(slice_of(TY_INT))


def test_num_in_wrong_kind():
    assert wrap_type(TY_INT).num_in() == WrongKind("num_in", ("func",), "int")


def test_num_in():
    assert wrap_type(ADD_TO_FIELD_SIG).num_in() == 1


def test_num_out_wrong_kind():
    assert wrap_type(TY_INT).num_out() == WrongKind("num_out", ("func",), "int")


def test_num_out():
    assert wrap_type(GET_SOME_FIELD_SIG).num_out() == 1


def test_out_wrong_kind():
    assert wrap_type(TEST_STRUCT).out(0) == WrongKind("out", ("func",), "struct")


def test_out_out_of_range():
    assert wrap_type(GET_SOME_FIELD_SIG).out(500) == IndexOutOfRange("out", 500, 1)


def test_out_of_func_without_results():
    assert wrap_type(ADD_TO_FIELD_SIG).out(0) == IndexOutOfRange("out", 0, 0)


def test_out():
    assert wrap_type(GET_SOME_FIELD_SIG).out(0) == wrap_type(TY_INT)


# ============================================================
# Walkthroughs
# ============================================================


def test_inspect_unknown_type_without_raising():
    st = wrap_type(TY_STRING)
    results = [st.elem(), st.key(), st.num_field(), st.field(0), st.in_(0), st.out(0), st.bits()]
    assert all(isinstance(r, WrongKind) for r in results)
    assert [r.op for r in results] == ["elem", "key", "num_field", "field", "in", "out", "bits"]


def test_walk_struct_fields():
    st = wrap_type(OUTER)
    names = []
    i = 0
    while not is_failure(st.field(i)):
        names.append(st.field(i).name())
        i += 1
    assert names == ["Inner", "Z"]
    assert st.field(i) == IndexOutOfRange("field", 2, 2)


def test_failure_can_be_raised():
    failure = wrap_type(TY_INT).elem()
    with pytest.raises(Exception) as info:
        raise failure.error()
    assert info.value.failure == failure
    assert str(info.value) == "elem: expected kind array, chan, map, ptr or slice, got int"


def test_scenario_int():
    st = wrap_type(TY_INT)
    assert st.bits() == 64
    assert st.num_field() == WrongKind("num_field", ("struct",), "int")


def test_scenario_one_field_struct():
    st = wrap_type(struct_of([StructField("A", TY_INT)]))
    assert st.field(0).name() == "A"
    assert st.field(1) == IndexOutOfRange("field", 1, 1)


def test_scenario_map():
    st = wrap_type(map_of(TY_STRING, slice_of(TY_INT)))
    assert st.key().kind() == "string"
    assert st.elem().kind() == "slice"


def test_scenario_variadic_func():
    st = wrap_type(func_of([TY_STRING, slice_of(TY_INT)], [], variadic=True))
    assert st.is_variadic() is True
    assert st.num_in() == 2
    assert st.in_(1).kind() == "slice"


def test_scenario_chan():
    assert wrap_type(chan_of(TY_INT, RECV_DIR)).chan_dir() == RECV_DIR
    assert wrap_type(TY_INT).chan_dir() == WrongKind("chan_dir", ("chan",), "int")
