"""SafeValue: panic-free descriptor over a runtime value handle.

Same discipline as `SafeType`: each accessor matches on the value's kind
before delegating, and every case the runtime would panic on comes back as
a failure value instead. The zero value yields `InvalidValue` for anything
that needs a type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from .failures import (
    ArgumentCount,
    ChannelDirection,
    ClosedChannel,
    Failure,
    IndexOutOfRange,
    InvalidValue,
    NilPointer,
    NotAssignable,
    Unexported,
    WrongKind,
)
from .rtype import (
    COMPLEX_KINDS,
    FLOAT_KINDS,
    INT_KINDS,
    RECV_DIR,
    SEND_DIR,
    UINT_KINDS,
    Method,
    Type,
)
from .rvalue import MethodFunc, Value
from .safetype import SafeType

LEN_KINDS: tuple[str, ...] = ("array", "chan", "map", "slice", "string")
CAP_KINDS: tuple[str, ...] = ("array", "chan", "slice")
NIL_KINDS: tuple[str, ...] = ("chan", "func", "interface", "map", "ptr", "slice", "unsafe.Pointer")
INDEX_KINDS: tuple[str, ...] = ("array", "slice", "string")


@dataclass(frozen=True)
class SafeValue:
    """Wraps one `rvalue.Value`."""

    handle: Value

    def __str__(self) -> str:
        return self.handle.string()

    def unwrap(self) -> Value:
        return self.handle

    # ============================================================
    # UNCONDITIONAL
    # ============================================================

    def is_valid(self) -> bool:
        return self.handle.is_valid()

    def kind(self) -> str:
        return self.handle.kind()

    def string(self) -> str:
        return self.handle.string()

    def can_interface(self) -> bool:
        if not self.handle.is_valid():
            return False
        return self.handle.can_interface()

    # ============================================================
    # ANY VALID VALUE
    # ============================================================

    def type(self) -> SafeType | InvalidValue:
        if not self.handle.is_valid():
            return InvalidValue("type")
        return SafeType(self.handle.type())

    def interface(self) -> object | InvalidValue | Unexported:
        if not self.handle.is_valid():
            return InvalidValue("interface")
        if not self.handle.can_interface():
            return Unexported("interface")
        return self.handle.interface()

    def is_zero(self) -> bool | InvalidValue:
        if not self.handle.is_valid():
            return InvalidValue("is_zero")
        return self.handle.is_zero()

    def num_method(self) -> int | InvalidValue:
        if not self.handle.is_valid():
            return InvalidValue("num_method")
        return self.handle.num_method()

    def method(self, i: int) -> SafeValue | InvalidValue | IndexOutOfRange | NilPointer:
        v = self.handle
        if not v.is_valid():
            return InvalidValue("method")
        n = v.num_method()
        if i < 0 or i >= n:
            return IndexOutOfRange("method", i, n)
        failure = _check_receiver("method", v, v.type().method(i))
        if failure is not None:
            return failure
        return SafeValue(v.method(i))

    def method_by_name(self, name: str) -> tuple[SafeValue | None, bool] | NilPointer:
        v = self.handle
        if not v.is_valid():
            return None, False
        m, ok = v.type().method_by_name(name)
        if not ok:
            return None, False
        failure = _check_receiver("method_by_name", v, m)
        if failure is not None:
            return failure
        return SafeValue(v.method_by_name(name)), True

    # ============================================================
    # SCALARS
    # ============================================================

    def as_bool(self) -> bool | Failure:
        match self.handle.kind():
            case "bool":
                return self.handle.as_bool()
            case "invalid":
                return InvalidValue("as_bool")
            case actual:
                return WrongKind("as_bool", ("bool",), actual)

    def as_int(self) -> int | Failure:
        match self.handle.kind():
            case kind if kind in INT_KINDS:
                return self.handle.as_int()
            case "invalid":
                return InvalidValue("as_int")
            case actual:
                return WrongKind("as_int", INT_KINDS, actual)

    def as_uint(self) -> int | Failure:
        match self.handle.kind():
            case kind if kind in UINT_KINDS:
                return self.handle.as_uint()
            case "invalid":
                return InvalidValue("as_uint")
            case actual:
                return WrongKind("as_uint", UINT_KINDS, actual)

    def as_float(self) -> float | Failure:
        match self.handle.kind():
            case kind if kind in FLOAT_KINDS:
                return self.handle.as_float()
            case "invalid":
                return InvalidValue("as_float")
            case actual:
                return WrongKind("as_float", FLOAT_KINDS, actual)

    def as_complex(self) -> complex | Failure:
        match self.handle.kind():
            case kind if kind in COMPLEX_KINDS:
                return self.handle.as_complex()
            case "invalid":
                return InvalidValue("as_complex")
            case actual:
                return WrongKind("as_complex", COMPLEX_KINDS, actual)

    def as_bytes(self) -> bytes | Failure:
        v = self.handle
        match v.kind():
            case "slice" if v.type().elem().kind() == "uint8":
                return v.as_bytes()
            case "invalid":
                return InvalidValue("as_bytes")
            case "slice":
                return WrongKind("as_bytes", ("uint8",), v.type().elem().kind())
            case actual:
                return WrongKind("as_bytes", ("slice",), actual)

    # ============================================================
    # SIZES
    # ============================================================

    def len(self) -> int | Failure:
        match self.handle.kind():
            case "array" | "chan" | "map" | "slice" | "string":
                return self.handle.len()
            case "invalid":
                return InvalidValue("len")
            case actual:
                return WrongKind("len", LEN_KINDS, actual)

    def cap(self) -> int | Failure:
        match self.handle.kind():
            case "array" | "chan" | "slice":
                return self.handle.cap()
            case "invalid":
                return InvalidValue("cap")
            case actual:
                return WrongKind("cap", CAP_KINDS, actual)

    def is_nil(self) -> bool | Failure:
        match self.handle.kind():
            case "chan" | "func" | "interface" | "map" | "ptr" | "slice" | "unsafe.Pointer":
                return self.handle.is_nil()
            case "invalid":
                return InvalidValue("is_nil")
            case actual:
                return WrongKind("is_nil", NIL_KINDS, actual)

    # ============================================================
    # STRUCTS
    # ============================================================

    def num_field(self) -> int | Failure:
        match self.handle.kind():
            case "struct":
                return self.handle.num_field()
            case "invalid":
                return InvalidValue("num_field")
            case actual:
                return WrongKind("num_field", ("struct",), actual)

    def field(self, i: int) -> SafeValue | Failure:
        match self.handle.kind():
            case "struct":
                n = self.handle.num_field()
                if i < 0 or i >= n:
                    return IndexOutOfRange("field", i, n)
                return SafeValue(self.handle.field(i))
            case "invalid":
                return InvalidValue("field")
            case actual:
                return WrongKind("field", ("struct",), actual)

    def field_by_index(self, index: tuple[int, ...] | list[int]) -> SafeValue | Failure:
        v = self.handle
        if not v.is_valid():
            return InvalidValue("field_by_index")
        i = 0
        while i < len(index):
            if i > 0 and v.kind() == "ptr" and v.type().elem().kind() == "struct":
                if v.is_nil():
                    return NilPointer("field_by_index")
                v = v.elem()
            match v.kind():
                case "struct":
                    n = v.num_field()
                    if index[i] < 0 or index[i] >= n:
                        return IndexOutOfRange("field_by_index", index[i], n)
                    v = v.field(index[i])
                case actual:
                    return WrongKind("field_by_index", ("struct",), actual)
            i += 1
        if self.handle.kind() != "struct":
            return WrongKind("field_by_index", ("struct",), self.handle.kind())
        return SafeValue(self.handle.field_by_index(index))

    def field_by_name(self, name: str) -> tuple[SafeValue | None, bool] | NilPointer:
        if self.handle.kind() != "struct":
            return None, False
        f, ok = self.handle.type().field_by_name(name)
        if not ok:
            return None, False
        return self._field_at(f.index, "field_by_name")

    def field_by_name_func(self, match: Callable[[str], bool]) -> tuple[SafeValue | None, bool] | NilPointer:
        if self.handle.kind() != "struct":
            return None, False
        f, ok = self.handle.type().field_by_name_func(match)
        if not ok:
            return None, False
        return self._field_at(f.index, "field_by_name_func")

    def _field_at(self, index: tuple[int, ...], op: str) -> tuple[SafeValue, bool] | NilPointer:
        result = self.field_by_index(index)
        if isinstance(result, NilPointer):
            return NilPointer(op)
        return result, True

    # ============================================================
    # INDEXING
    # ============================================================

    def index(self, i: int) -> SafeValue | Failure:
        match self.handle.kind():
            case "array" | "slice" | "string":
                n = self.handle.len()
                if i < 0 or i >= n:
                    return IndexOutOfRange("index", i, n)
                return SafeValue(self.handle.index(i))
            case "invalid":
                return InvalidValue("index")
            case actual:
                return WrongKind("index", INDEX_KINDS, actual)

    def map_index(self, key: SafeValue) -> tuple[SafeValue | None, bool] | Failure:
        match self.handle.kind():
            case "map":
                failure = _check_assignable("map_index", key.handle, self.handle.type().key())
                if failure is not None:
                    return failure
                v = self.handle.map_index(key.handle)
                if not v.is_valid():
                    return None, False
                return SafeValue(v), True
            case "invalid":
                return InvalidValue("map_index")
            case actual:
                return WrongKind("map_index", ("map",), actual)

    def map_keys(self) -> list[SafeValue] | Failure:
        match self.handle.kind():
            case "map":
                return [SafeValue(k) for k in self.handle.map_keys()]
            case "invalid":
                return InvalidValue("map_keys")
            case actual:
                return WrongKind("map_keys", ("map",), actual)

    def map_range(self) -> list[tuple[SafeValue, SafeValue]] | Failure:
        match self.handle.kind():
            case "map":
                return [(SafeValue(k), SafeValue(v)) for k, v in self.handle.map_range()]
            case "invalid":
                return InvalidValue("map_range")
            case actual:
                return WrongKind("map_range", ("map",), actual)

    # ============================================================
    # INDIRECTION
    # ============================================================

    def elem(self) -> SafeValue | Failure:
        match self.handle.kind():
            case "interface" | "ptr":
                return SafeValue(self.handle.elem())
            case "invalid":
                return InvalidValue("elem")
            case actual:
                return WrongKind("elem", ("interface", "ptr"), actual)

    # ============================================================
    # CHANNELS
    # ============================================================

    def try_send(self, x: SafeValue) -> bool | Failure:
        v = self.handle
        match v.kind():
            case "chan":
                t = v.type()
                if t.chan_dir() & SEND_DIR == 0:
                    return ChannelDirection("try_send", t.chan_dir())
                if v.ro or x.handle.ro:
                    return Unexported("try_send")
                failure = _check_assignable("try_send", x.handle, t.elem())
                if failure is not None:
                    return failure
                if v.is_closed():
                    return ClosedChannel("try_send")
                return v.try_send(x.handle)
            case "invalid":
                return InvalidValue("try_send")
            case actual:
                return WrongKind("try_send", ("chan",), actual)

    def try_recv(self) -> tuple[SafeValue, bool] | Failure:
        v = self.handle
        match v.kind():
            case "chan":
                if v.type().chan_dir() & RECV_DIR == 0:
                    return ChannelDirection("try_recv", v.type().chan_dir())
                x, ok = v.try_recv()
                return SafeValue(x), ok
            case "invalid":
                return InvalidValue("try_recv")
            case actual:
                return WrongKind("try_recv", ("chan",), actual)

    def close(self) -> None | Failure:
        v = self.handle
        match v.kind():
            case "chan":
                if v.type().chan_dir() & SEND_DIR == 0:
                    return ChannelDirection("close", v.type().chan_dir())
                if v.is_nil():
                    return NilPointer("close")
                if v.is_closed():
                    return ClosedChannel("close")
                v.close()
                return None
            case "invalid":
                return InvalidValue("close")
            case actual:
                return WrongKind("close", ("chan",), actual)

    # ============================================================
    # CALLS
    # ============================================================

    def call(self, args: Sequence[SafeValue]) -> list[SafeValue] | Failure:
        """Call a func value, checking receiver, arity and argument types first.

        Trailing arguments of a variadic function are packed into a slice of
        the variadic element type.
        """
        v = self.handle
        match v.kind():
            case "func":
                pass
            case "invalid":
                return InvalidValue("call")
            case actual:
                return WrongKind("call", ("func",), actual)
        if not v.can_interface():
            return Unexported("call")
        if v.is_nil():
            return NilPointer("call")
        t = v.type()
        n = t.num_in()
        if t.is_variadic():
            if len(args) < n - 1:
                return ArgumentCount("call", len(args), n - 1, True)
        elif len(args) != n:
            return ArgumentCount("call", len(args), n)
        i = 0
        while i < len(args):
            if t.is_variadic() and i >= n - 1:
                want = t.in_(n - 1).elem()
            else:
                want = t.in_(i)
            failure = _check_assignable("call", args[i].handle, want, i)
            if failure is not None:
                return failure
            if args[i].handle.ro:
                return Unexported("call")
            i += 1
        if isinstance(v.data, MethodFunc) and v.data.nil_receiver([a.handle for a in args]):
            return NilPointer("call")
        return [SafeValue(r) for r in v.call([a.handle for a in args])]


def wrap_value(handle: Value) -> SafeValue:
    return SafeValue(handle)


def _check_assignable(op: str, x: Value, want: Type, position: int = -1) -> Failure | None:
    if not x.is_valid():
        return InvalidValue(op)
    if not x.type().assignable_to(want):
        return NotAssignable(op, x.type().string(), want.string(), position)
    return None


def _check_receiver(op: str, v: Value, m: Method) -> NilPointer | None:
    """A bound method needs a non-nil interface, or a non-nil pointer for value methods.

    An interface receiver is checked against its dynamic value.
    """
    if v.kind() == "interface":
        if v.is_nil():
            return NilPointer(op)
        v = v.elem()
        m, ok = v.type().method_by_name(m.name)
        if not ok:
            return None
    if v.kind() == "ptr" and not m.ptr_recv and v.is_nil():
        return NilPointer(op)
    return None
