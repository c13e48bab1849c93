"""Pytest configuration and shared runtime types for the anyiter test suite."""

import sys
from pathlib import Path

import pytest

# Add repository root to path for package imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from anyiter.rtype import (  # noqa: E402
    TY_INT,
    TY_STRING,
    MethodDef,
    StructField,
    func_of,
    interface_of,
    named,
    ptr_to,
    slice_of,
    struct_of,
)
from anyiter.rvalue import pointer_to, struct, value_of  # noqa: E402

PKG = "example.com/anyiter/fixtures"


# ============================================================
# testStruct and friends
# ============================================================


def _get_some_field(recv, args):
    return [value_of(TY_INT, recv.field(0).as_int())]


def _add_to_field(recv, args):
    return []


def _set_some_field(recv, args):
    recv.data.value = struct(TEST_STRUCT, [args[0]])
    return []


GET_SOME_FIELD_SIG = func_of([], [TY_INT])
ADD_TO_FIELD_SIG = func_of([slice_of(TY_INT)], [], variadic=True)

TEST_STRUCT = named(
    "testStruct",
    PKG,
    struct_of([StructField("someField", TY_INT)], pkg_path=PKG),
    methods=[
        MethodDef("GetSomeField", GET_SOME_FIELD_SIG, impl=_get_some_field),
        MethodDef("AddToField", ADD_TO_FIELD_SIG, impl=_add_to_field),
        MethodDef("SetSomeField", func_of([TY_INT], []), impl=_set_some_field, ptr_recv=True),
    ],
)

SECOND_TEST_STRUCT = named(
    "secondTestStruct",
    PKG,
    struct_of([StructField("t", TEST_STRUCT)], pkg_path=PKG),
)

TEST_INTERFACE = named(
    "testInterface",
    PKG,
    interface_of([MethodDef("GetSomeField", GET_SOME_FIELD_SIG)]),
)


# ============================================================
# Embedding
# ============================================================

INNER = named("Inner", PKG, struct_of([StructField("X", TY_INT), StructField("Y", TY_INT)]))
OTHER = named("Other", PKG, struct_of([StructField("X", TY_STRING)]))
OUTER = struct_of([StructField("", INNER, anonymous=True), StructField("Z", TY_INT)])
AMBIGUOUS = struct_of([StructField("", INNER, anonymous=True), StructField("", OTHER, anonymous=True)])
SHADOWED = struct_of([StructField("", INNER, anonymous=True), StructField("X", TY_STRING)])
PTR_EMBED = struct_of([StructField("", ptr_to(INNER), anonymous=True)])

POINT = named("Point", PKG, struct_of([StructField("X", TY_INT), StructField("Y", TY_INT)]))


def make_test_struct(n: int):
    """A testStruct value with someField set to n."""
    return struct(TEST_STRUCT, [value_of(TY_INT, n)])


def make_point(x: int, y: int):
    return struct(POINT, [value_of(TY_INT, x), value_of(TY_INT, y)])


@pytest.fixture
def test_struct_ptr():
    """A fresh *testStruct pointing at someField == 5."""
    return pointer_to(make_test_struct(5))
