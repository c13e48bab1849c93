"""Runtime values: typed payloads with raw, panic-capable accessors.

A `Value` pairs a runtime `Type` with a Python payload:

| Kind                  | Payload                              |
|-----------------------|--------------------------------------|
| bool                  | bool                                 |
| int*, uint*, uintptr  | int (wrapped to the kind's width)    |
| float*                | float                                |
| complex*              | complex                              |
| string                | str                                  |
| array, struct         | tuple[Value, ...]                    |
| slice                 | tuple[Value, ...] or None (nil)      |
| map                   | tuple[(Value, Value), ...] or None   |
| ptr                   | Cell or None                         |
| chan                  | ChanState or None                    |
| func                  | callable(list[Value]) -> list[Value] |
|                       | (MethodFunc for method expressions)  |
| interface             | Value (dynamic) or None              |
| unsafe.Pointer        | int                                  |

The zero `Value()` has no type and is invalid. Values read through
unexported struct fields are marked read-only (`ro`).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Callable, Iterable

from .rtype import (
    BOTH_DIR,
    COMPLEX_KINDS,
    FLOAT_KINDS,
    INT_KINDS,
    RECV_DIR,
    SEND_DIR,
    TY_UINT8,
    UINT_KINDS,
    Method,
    Panic,
    Type,
    func_of,
    ptr_to,
    slice_of,
)


class Cell:
    """A pointer target. Pointers to the same cell are equal."""

    __slots__ = ("value",)

    def __init__(self, value: Value):
        self.value = value


class ChanState:
    """Buffered channel state. Operations on it never block."""

    def __init__(self, cap: int):
        self.buf: list[Value] = []
        self.cap = cap
        self.closed = False


@dataclass(frozen=True)
class Value:
    """A runtime value handle."""

    typ: Type | None = None
    data: object = None
    ro: bool = False

    # --- valid for every value ---

    def is_valid(self) -> bool:
        return self.typ is not None

    def kind(self) -> str:
        if self.typ is None:
            return "invalid"
        return self.typ.k

    def string(self) -> str:
        if self.typ is None:
            return "<invalid Value>"
        if self.typ.k == "string":
            return self.data
        return "<" + self.typ.string() + " Value>"

    def can_interface(self) -> bool:
        if self.typ is None:
            raise Panic("reflect: call of reflect.Value.CanInterface on zero Value")
        return not self.ro

    # --- any valid value ---

    def type(self) -> Type:
        self._must_be_valid("Type")
        return self.typ

    def interface(self) -> object:
        self._must_be_valid("Interface")
        if self.ro:
            raise Panic("reflect.Value.Interface: cannot return value obtained from unexported field or method")
        return to_python(self)

    def is_zero(self) -> bool:
        self._must_be_valid("IsZero")
        return _is_zero(self)

    def num_method(self) -> int:
        self._must_be_valid("NumMethod")
        return self.typ.num_method()

    def method(self, i: int) -> Value:
        self._must_be_valid("Method")
        if i < 0 or i >= self.typ.num_method():
            raise Panic("reflect: Method index out of range")
        return _bind(self, self.typ.method(i))

    def method_by_name(self, name: str) -> Value:
        self._must_be_valid("MethodByName")
        m, ok = self.typ.method_by_name(name)
        if not ok:
            return Value()
        return _bind(self, m)

    # --- scalars ---

    def as_bool(self) -> bool:
        self._must_be("Bool", ("bool",))
        return self.data

    def as_int(self) -> int:
        self._must_be("Int", INT_KINDS)
        return self.data

    def as_uint(self) -> int:
        self._must_be("Uint", UINT_KINDS)
        return self.data

    def as_float(self) -> float:
        self._must_be("Float", FLOAT_KINDS)
        return self.data

    def as_complex(self) -> complex:
        self._must_be("Complex", COMPLEX_KINDS)
        return self.data

    def as_bytes(self) -> bytes:
        self._must_be("Bytes", ("slice",))
        if self.typ.elem_t.k != "uint8":
            raise Panic("reflect.Value.Bytes of non-byte slice")
        if self.data is None:
            return b""
        return bytes(e.data for e in self.data)

    # --- sizes ---

    def len(self) -> int:
        self._must_be("Len", ("array", "chan", "map", "slice", "string"))
        match self.typ.k:
            case "string":
                return len(self.data.encode("utf-8"))
            case "chan":
                return 0 if self.data is None else len(self.data.buf)
            case "array":
                return self.typ.n
            case _:
                return 0 if self.data is None else len(self.data)

    def cap(self) -> int:
        self._must_be("Cap", ("array", "chan", "slice"))
        match self.typ.k:
            case "chan":
                return 0 if self.data is None else self.data.cap
            case "array":
                return self.typ.n
            case _:
                return 0 if self.data is None else len(self.data)

    def is_nil(self) -> bool:
        self._must_be("IsNil", ("chan", "func", "interface", "map", "ptr", "slice", "unsafe.Pointer"))
        if self.typ.k == "unsafe.Pointer":
            return self.data == 0
        return self.data is None

    # --- structs ---

    def num_field(self) -> int:
        self._must_be("NumField", ("struct",))
        return len(self.data)

    def field(self, i: int) -> Value:
        self._must_be("Field", ("struct",))
        if i < 0 or i >= len(self.data):
            raise Panic("reflect: Field index out of range")
        f = self.typ.sfields[i]
        v = self.data[i]
        return replace(v, ro=self.ro or not f.is_exported())

    def field_by_index(self, index: tuple[int, ...] | list[int]) -> Value:
        if len(index) == 1:
            return self.field(index[0])
        self._must_be("FieldByIndex", ("struct",))
        v = self
        i = 0
        while i < len(index):
            if i > 0 and v.kind() == "ptr" and v.typ.elem_t.k == "struct":
                if v.data is None:
                    raise Panic("reflect: indirection through nil pointer to embedded struct")
                v = replace(v.data.value, ro=v.ro or v.data.value.ro)
            v = v.field(index[i])
            i += 1
        return v

    def field_by_name(self, name: str) -> Value:
        self._must_be("FieldByName", ("struct",))
        f, ok = self.typ.field_by_name(name)
        if not ok:
            return Value()
        return self.field_by_index(f.index)

    def field_by_name_func(self, match: Callable[[str], bool]) -> Value:
        self._must_be("FieldByNameFunc", ("struct",))
        f, ok = self.typ.field_by_name_func(match)
        if not ok:
            return Value()
        return self.field_by_index(f.index)

    # --- indexing ---

    def index(self, i: int) -> Value:
        self._must_be("Index", ("array", "slice", "string"))
        if self.typ.k == "string":
            raw = self.data.encode("utf-8")
            if i < 0 or i >= len(raw):
                raise Panic("reflect: string index out of range")
            return Value(TY_UINT8, raw[i], self.ro)
        items = () if self.data is None else self.data
        if i < 0 or i >= len(items):
            raise Panic("reflect: " + self.typ.k + " index out of range")
        return replace(items[i], ro=self.ro or items[i].ro)

    def map_index(self, key: Value) -> Value:
        self._must_be("MapIndex", ("map",))
        key = _assign_to(key, self.typ.key_t, "reflect.Value.MapIndex")
        if self.data is None:
            return Value()
        for k, v in self.data:
            if _same(k, key):
                return replace(v, ro=self.ro or v.ro)
        return Value()

    def map_keys(self) -> list[Value]:
        self._must_be("MapKeys", ("map",))
        if self.data is None:
            return []
        return [replace(k, ro=self.ro or k.ro) for k, _ in self.data]

    def map_range(self) -> list[tuple[Value, Value]]:
        self._must_be("MapRange", ("map",))
        if self.data is None:
            return []
        return [(replace(k, ro=self.ro or k.ro), replace(v, ro=self.ro or v.ro)) for k, v in self.data]

    # --- indirection ---

    def elem(self) -> Value:
        self._must_be("Elem", ("interface", "ptr"))
        if self.data is None:
            return Value()
        if self.typ.k == "interface":
            return replace(self.data, ro=self.ro or self.data.ro)
        return replace(self.data.value, ro=self.ro or self.data.value.ro)

    # --- channels ---

    def try_send(self, x: Value) -> bool:
        self._must_be("TrySend", ("chan",))
        if self.typ.cdir & SEND_DIR == 0:
            raise Panic("reflect: send on recv-only channel")
        if self.ro or x.ro:
            raise Panic("reflect: Send using value obtained using unexported field")
        x = _assign_to(x, self.typ.elem_t, "reflect.Value.Send")
        if self.data is None:
            return False
        if self.data.closed:
            raise Panic("send on closed channel")
        if len(self.data.buf) >= self.data.cap:
            return False
        self.data.buf.append(x)
        return True

    def try_recv(self) -> tuple[Value, bool]:
        self._must_be("TryRecv", ("chan",))
        if self.typ.cdir & RECV_DIR == 0:
            raise Panic("reflect: recv on send-only channel")
        if self.data is None:
            return Value(), False
        if len(self.data.buf) > 0:
            return self.data.buf.pop(0), True
        if self.data.closed:
            return zero(self.typ.elem_t), False
        return Value(), False

    def is_closed(self) -> bool:
        self._must_be("IsClosed", ("chan",))
        return self.data is not None and self.data.closed

    def close(self) -> None:
        self._must_be("Close", ("chan",))
        if self.typ.cdir & SEND_DIR == 0:
            raise Panic("reflect: close of receive-only channel")
        if self.data is None:
            raise Panic("close of nil channel")
        if self.data.closed:
            raise Panic("close of closed channel")
        self.data.closed = True

    # --- calls ---

    def call(self, args: list[Value]) -> list[Value]:
        self._must_be("Call", ("func",))
        if self.ro:
            raise Panic("reflect: Call using value obtained using unexported field")
        if self.data is None:
            raise Panic("reflect: call of nil function")
        t = self.typ
        n = len(t.ins)
        if t.dotdotdot:
            if len(args) < n - 1:
                raise Panic("reflect: Call with too few input arguments")
        elif len(args) < n:
            raise Panic("reflect: Call with too few input arguments")
        elif len(args) > n:
            raise Panic("reflect: Call with too many input arguments")
        converted: list[Value] = []
        i = 0
        while i < len(args):
            if t.dotdotdot and i >= n - 1:
                want = t.ins[n - 1].elem_t
            else:
                want = t.ins[i]
            if not args[i].is_valid():
                raise Panic("reflect: Call using zero Value argument")
            if args[i].ro:
                raise Panic("reflect: Call using value obtained using unexported field")
            converted.append(_assign_to(args[i], want, "reflect: Call"))
            i += 1
        if t.dotdotdot:
            extra = tuple(converted[n - 1 :])
            converted = converted[: n - 1] + [Value(t.ins[n - 1], extra)]
        return list(self.data(converted))

    # --- internal ---

    def _must_be_valid(self, op: str) -> None:
        if self.typ is None:
            raise Panic("reflect: call of reflect.Value." + op + " on zero Value")

    def _must_be(self, op: str, kinds: tuple[str, ...]) -> None:
        self._must_be_valid(op)
        if self.typ.k not in kinds:
            raise Panic("reflect: call of reflect.Value." + op + " on " + self.typ.k + " Value")


# ============================================================
# CONSTRUCTORS
# ============================================================


def value_of(typ: Type, data: object) -> Value:
    """Wrap a Python payload as a value of `typ`, normalizing scalars."""
    k = typ.k
    if k in INT_KINDS or k in UINT_KINDS:
        return Value(typ, _wrap_int(k, typ.size() * 8, int(data)))
    if k in FLOAT_KINDS:
        return Value(typ, float(data))
    if k in COMPLEX_KINDS:
        return Value(typ, complex(data))
    if k == "bool":
        return Value(typ, bool(data))
    if k in ("array", "slice", "struct") and isinstance(data, list):
        return Value(typ, tuple(data))
    return Value(typ, data)


def zero(typ: Type) -> Value:
    match typ.k:
        case "bool":
            return Value(typ, False)
        case "string":
            return Value(typ, "")
        case k if k in INT_KINDS or k in UINT_KINDS or k == "unsafe.Pointer":
            return Value(typ, 0)
        case k if k in FLOAT_KINDS:
            return Value(typ, 0.0)
        case k if k in COMPLEX_KINDS:
            return Value(typ, 0j)
        case "array":
            return Value(typ, tuple(zero(typ.elem_t) for _ in range(typ.n)))
        case "struct":
            return Value(typ, tuple(zero(f.type) for f in typ.sfields))
        case _:
            return Value(typ, None)


def array(typ: Type, items: Iterable[Value]) -> Value:
    items = tuple(items)
    if typ.k != "array":
        raise Panic("reflect: array of non-array type " + typ.string())
    if len(items) != typ.n:
        raise Panic("reflect: array literal of wrong length")
    return Value(typ, tuple(_assign_to(v, typ.elem_t, "reflect: array") for v in items))


def make_slice(typ: Type, items: Iterable[Value]) -> Value:
    if typ.k != "slice":
        raise Panic("reflect.MakeSlice of non-slice type")
    return Value(typ, tuple(_assign_to(v, typ.elem_t, "reflect: slice") for v in items))


def make_map(typ: Type, pairs: Iterable[tuple[Value, Value]] = ()) -> Value:
    if typ.k != "map":
        raise Panic("reflect.MakeMap of non-map type")
    entries: list[tuple[Value, Value]] = []
    for k, v in pairs:
        k = _assign_to(k, typ.key_t, "reflect.Value.SetMapIndex")
        v = _assign_to(v, typ.elem_t, "reflect.Value.SetMapIndex")
        replaced = False
        i = 0
        while i < len(entries):
            if _same(entries[i][0], k):
                entries[i] = (k, v)
                replaced = True
                break
            i += 1
        if not replaced:
            entries.append((k, v))
    return Value(typ, tuple(entries))


def make_chan(typ: Type, cap: int = 0) -> Value:
    if typ.k != "chan":
        raise Panic("reflect.MakeChan of non-chan type")
    if typ.cdir != BOTH_DIR:
        raise Panic("reflect.MakeChan: unidirectional channel type")
    if cap < 0:
        raise Panic("reflect.MakeChan: negative buffer size")
    return Value(typ, ChanState(cap))


def make_func(typ: Type, fn: Callable[[list[Value]], list[Value]]) -> Value:
    if typ.k != "func":
        raise Panic("reflect: call of MakeFunc with non-Func type")
    return Value(typ, fn)


def struct(typ: Type, fields: Iterable[Value]) -> Value:
    fields = tuple(fields)
    if typ.k != "struct":
        raise Panic("reflect: struct of non-struct type " + typ.string())
    if len(fields) != len(typ.sfields):
        raise Panic("reflect: struct literal of wrong length")
    return Value(typ, tuple(_assign_to(v, f.type, "reflect: struct") for v, f in zip(fields, typ.sfields)))


def new(typ: Type) -> Value:
    return Value(ptr_to(typ), Cell(zero(typ)))


def pointer_to(v: Value) -> Value:
    return Value(ptr_to(v.type()), Cell(v))


def boxed(iface: Type, v: Value) -> Value:
    """An interface value of type `iface` holding `v` (nil when `v` is invalid)."""
    if iface.k != "interface":
        raise Panic("reflect: boxed of non-interface type " + iface.string())
    if not v.is_valid():
        return Value(iface, None)
    if not v.typ.implements(iface):
        raise Panic("reflect: " + v.typ.string() + " does not implement " + iface.string())
    if v.typ.k == "interface":
        return Value(iface, v.data)
    return Value(iface, v)


def method_func(m: Method) -> Value:
    """The implementation of a concrete method as a func value taking the receiver first."""
    if m.impl is None:
        return Value()
    return Value(m.type, MethodFunc(m.impl, m.ptr_recv))


class MethodFunc:
    """Func payload of a method expression. Argument 0 is the receiver."""

    __slots__ = ("impl", "ptr_recv")

    def __init__(self, impl: Callable[..., list], ptr_recv: bool):
        self.impl = impl
        self.ptr_recv = ptr_recv

    def __call__(self, args: list[Value]) -> list[Value]:
        return list(self.impl(_receiver(args[0], self.ptr_recv), args[1:]))

    def nil_receiver(self, args: list[Value]) -> bool:
        """Whether calling with `args` would dereference a nil pointer receiver."""
        if self.ptr_recv or len(args) == 0:
            return False
        return args[0].kind() == "ptr" and args[0].data is None


def to_python(v: Value) -> object:
    """Convert a value to the closest native Python object."""
    match v.kind():
        case "invalid":
            return None
        case "array":
            return tuple(to_python(e) for e in v.data)
        case "slice":
            return None if v.data is None else [to_python(e) for e in v.data]
        case "map":
            return None if v.data is None else {to_python(k): to_python(e) for k, e in v.data}
        case "struct":
            return {f.name: to_python(e) for f, e in zip(v.typ.sfields, v.data)}
        case "interface":
            return None if v.data is None else to_python(v.data)
        case _:
            return v.data


# ============================================================
# HELPERS
# ============================================================


def _wrap_int(kind: str, bits: int, x: int) -> int:
    x &= (1 << bits) - 1
    if kind in INT_KINDS and x >= 1 << (bits - 1):
        x -= 1 << bits
    return x


def _is_zero_float(x: float) -> bool:
    return x == 0 and math.copysign(1.0, x) > 0


def _is_zero(v: Value) -> bool:
    """All-zero bit pattern: -0.0 is not zero, NaN is not zero."""
    match v.typ.k:
        case "bool":
            return v.data is False
        case "string":
            return v.data == ""
        case k if k in INT_KINDS or k in UINT_KINDS or k == "unsafe.Pointer":
            return v.data == 0
        case k if k in FLOAT_KINDS:
            return _is_zero_float(v.data)
        case k if k in COMPLEX_KINDS:
            return _is_zero_float(v.data.real) and _is_zero_float(v.data.imag)
        case "array" | "struct":
            for e in v.data:
                if not _is_zero(e):
                    return False
            return True
        case _:
            return v.data is None


def _same(a: Value, b: Value) -> bool:
    return a.typ == b.typ and a.data == b.data


def _assign_to(v: Value, target: Type, context: str) -> Value:
    if not v.is_valid():
        raise Panic(context + " using zero Value")
    if not v.typ.assignable_to(target):
        raise Panic(context + ": value of type " + v.typ.string() + " is not assignable to type " + target.string())
    # stored payloads never carry the read-only mark of the path they were read through
    if v.ro:
        v = replace(v, ro=False)
    if target.k == "interface":
        return boxed(target, v)
    if v.typ != target:
        return Value(target, v.data)
    return v


def _receiver(recv: Value, ptr_recv: bool) -> Value:
    if not ptr_recv and recv.kind() == "ptr":
        if recv.data is None:
            raise Panic("value method called using nil pointer")
        return recv.data.value
    return recv


def _bind(recv: Value, m: Method) -> Value:
    t = recv.typ
    if t.k == "interface":
        if recv.data is None:
            raise Panic("reflect: Method on nil interface value")
        dynamic = recv.data
        name = m.name

        def dispatch(args: list[Value]) -> list[Value]:
            return dynamic.method_by_name(name).call(args)

        return Value(m.type, dispatch, recv.ro)
    impl = m.impl
    ptr_recv = m.ptr_recv
    sig = func_of(m.type.ins[1:], m.type.outs, m.type.dotdotdot)

    def bound(args: list[Value]) -> list[Value]:
        if impl is None:
            raise Panic("reflect: method " + m.name + " has no implementation")
        return list(impl(_receiver(recv, ptr_recv), args))

    return Value(sig, bound, recv.ro)


def bytes_value(b: bytes) -> Value:
    """A []byte value."""
    return Value(slice_of(TY_UINT8), tuple(Value(TY_UINT8, x) for x in b))
