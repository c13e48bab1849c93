"""Runtime type model: kinds, layout, relations and field/method lookup.

This is the raw introspection layer. Handles are immutable `Type` values.
Queries that only make sense for some kinds (or some indices) raise `Panic`
when misused; the safe descriptors in `safetype` never let that happen.

Layout follows a 64-bit target:

| Kind                              | Size | Align |
|-----------------------------------|------|-------|
| bool, int8, uint8                 | 1    | 1     |
| int16, uint16                     | 2    | 2     |
| int32, uint32, float32            | 4    | 4     |
| int, int64, uint, uint64, uintptr | 8    | 8     |
| float64, ptr, map, chan, func     | 8    | 8     |
| complex64                         | 8    | 4     |
| complex128                        | 16   | 8     |
| string, interface                 | 16   | 8     |
| slice                             | 24   | 8     |
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Literal


PTR_SIZE: int = 8


# ============================================================
# Diagnostics
# ============================================================


class AnyiterError(Exception):
    """Base error for the runtime and the descriptors."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class Panic(AnyiterError):
    """Raised by the raw runtime when an operation is invalid for its receiver."""


# ============================================================
# KINDS
# ============================================================

Kind = Literal[
    "invalid",
    "bool",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
    "float32",
    "float64",
    "complex64",
    "complex128",
    "array",
    "chan",
    "func",
    "interface",
    "map",
    "ptr",
    "slice",
    "string",
    "struct",
    "unsafe.Pointer",
]

INT_KINDS: tuple[str, ...] = ("int", "int8", "int16", "int32", "int64")
UINT_KINDS: tuple[str, ...] = ("uint", "uint8", "uint16", "uint32", "uint64", "uintptr")
FLOAT_KINDS: tuple[str, ...] = ("float32", "float64")
COMPLEX_KINDS: tuple[str, ...] = ("complex64", "complex128")
ARITHMETIC_KINDS: tuple[str, ...] = INT_KINDS + UINT_KINDS + FLOAT_KINDS + COMPLEX_KINDS

KINDS: tuple[str, ...] = (
    ("invalid", "bool")
    + ARITHMETIC_KINDS
    + ("array", "chan", "func", "interface", "map", "ptr", "slice", "string", "struct", "unsafe.Pointer")
)

# Channel directions (bit set)
RECV_DIR: int = 1
SEND_DIR: int = 2
BOTH_DIR: int = RECV_DIR | SEND_DIR

_SCALAR_LAYOUT: dict[str, tuple[int, int]] = {
    "bool": (1, 1),
    "int": (8, 8),
    "int8": (1, 1),
    "int16": (2, 2),
    "int32": (4, 4),
    "int64": (8, 8),
    "uint": (8, 8),
    "uint8": (1, 1),
    "uint16": (2, 2),
    "uint32": (4, 4),
    "uint64": (8, 8),
    "uintptr": (8, 8),
    "float32": (4, 4),
    "float64": (8, 8),
    "complex64": (8, 4),
    "complex128": (16, 8),
    "string": (2 * PTR_SIZE, PTR_SIZE),
    "unsafe.Pointer": (PTR_SIZE, PTR_SIZE),
    "ptr": (PTR_SIZE, PTR_SIZE),
    "map": (PTR_SIZE, PTR_SIZE),
    "chan": (PTR_SIZE, PTR_SIZE),
    "func": (PTR_SIZE, PTR_SIZE),
    "interface": (2 * PTR_SIZE, PTR_SIZE),
    "slice": (3 * PTR_SIZE, PTR_SIZE),
}


# ============================================================
# FIELDS AND METHODS
# ============================================================


@dataclass(frozen=True)
class StructField:
    """A struct field as reported by field lookups.

    `pkg_path` is empty for exported fields. `index` is the path of field
    positions from the outermost struct, `offset` the byte offset within
    the struct that declares the field.
    """

    name: str
    type: Type
    pkg_path: str = ""
    tag: str = ""
    offset: int = 0
    index: tuple[int, ...] = ()
    anonymous: bool = False

    def is_exported(self) -> bool:
        return self.pkg_path == ""


@dataclass(frozen=True)
class MethodDef:
    """One entry of a defined type's (or an interface's) method table.

    `sig` is the signature without the receiver. `impl` receives the receiver
    value and the argument values and returns the result values.
    """

    name: str
    sig: Type
    impl: Callable[..., list] | None = field(default=None, compare=False)
    ptr_recv: bool = False
    pkg_path: str = ""


@dataclass(frozen=True)
class Method:
    """A method as reported by method lookups.

    For a non-interface receiver, `type` is a func type whose first input is
    the receiver. For an interface receiver, `type` is the bare signature
    and `impl` is None.
    """

    name: str
    pkg_path: str
    type: Type
    index: int
    impl: Callable[..., list] | None = field(default=None, compare=False)
    ptr_recv: bool = False


# ============================================================
# TYPES
# ============================================================


@dataclass(frozen=True, repr=False)
class Type:
    """A runtime type handle.

    One class covers every kind; which attributes are meaningful depends on
    `k`. Build handles with the predeclared `TY_*` constants and the
    constructors below rather than directly.
    """

    k: Kind
    tname: str = ""
    pkg: str = ""
    elem_t: Type | None = None
    key_t: Type | None = None
    n: int = 0
    cdir: int = 0
    sfields: tuple[StructField, ...] = ()
    ins: tuple[Type, ...] = ()
    outs: tuple[Type, ...] = ()
    dotdotdot: bool = False
    mtab: tuple[MethodDef, ...] = ()

    def __repr__(self) -> str:
        return f"Type({self.string()})"

    def __str__(self) -> str:
        return self.string()

    # --- valid for every kind ---

    def kind(self) -> Kind:
        return self.k

    def name(self) -> str:
        return self.tname

    def pkg_path(self) -> str:
        return self.pkg

    def size(self) -> int:
        return _layout(self)[0]

    def align(self) -> int:
        return _layout(self)[1]

    def field_align(self) -> int:
        return _layout(self)[1]

    def string(self) -> str:
        return _type_string(self)

    def comparable(self) -> bool:
        if self.k in ("func", "map", "slice"):
            return False
        if self.k == "array":
            return self.elem_t.comparable()
        if self.k == "struct":
            for f in self.sfields:
                if not f.type.comparable():
                    return False
        return True

    def implements(self, u: Type) -> bool:
        if u.k != "interface":
            return False
        have = _method_set(self)
        for want in u.mtab:
            if not _has_method(have, want):
                return False
        return True

    def assignable_to(self, u: Type) -> bool:
        if self == u:
            return True
        if u.k == "interface":
            return self.implements(u)
        if (self.tname == "" or u.tname == "") and underlying(self) == underlying(u):
            return True
        if (
            self.k == "chan"
            and self.cdir == BOTH_DIR
            and u.k == "chan"
            and self.elem_t == u.elem_t
            and (self.tname == "" or u.tname == "")
        ):
            return True
        return False

    def convertible_to(self, u: Type) -> bool:
        if self.assignable_to(u):
            return True
        vk = self.k
        tk = u.k
        integer = INT_KINDS + UINT_KINDS
        if vk in integer + FLOAT_KINDS and tk in integer + FLOAT_KINDS:
            return True
        if vk in COMPLEX_KINDS and tk in COMPLEX_KINDS:
            return True
        if vk in integer and tk == "string":
            return True
        if vk == "string" and tk == "slice" and u.elem_t.pkg == "" and u.elem_t.k in ("uint8", "int32"):
            return True
        if vk == "slice" and tk == "string" and self.elem_t.pkg == "" and self.elem_t.k in ("uint8", "int32"):
            return True
        if vk == "slice" and tk == "ptr" and u.elem_t.k == "array" and self.elem_t == u.elem_t.elem_t:
            return True
        if vk == "slice" and tk == "array" and self.elem_t == u.elem_t:
            return True
        if _untagged(underlying(self)) == _untagged(underlying(u)):
            return True
        if (
            vk == "ptr"
            and tk == "ptr"
            and self.tname == ""
            and u.tname == ""
            and _untagged(underlying(self.elem_t)) == _untagged(underlying(u.elem_t))
        ):
            return True
        return False

    def num_method(self) -> int:
        return len(_method_set(self))

    def method(self, i: int) -> Method:
        methods = _method_set(self)
        if i < 0 or i >= len(methods):
            raise Panic("reflect: Method index out of range")
        return _make_method(self, methods[i], i)

    def method_by_name(self, name: str) -> tuple[Method | None, bool]:
        methods = _method_set(self)
        i = 0
        while i < len(methods):
            if methods[i].name == name:
                return _make_method(self, methods[i], i), True
            i += 1
        return None, False

    # --- kind-restricted ---

    def bits(self) -> int:
        if self.k not in ARITHMETIC_KINDS:
            raise Panic("reflect: Bits of non-arithmetic Type " + self.string())
        return self.size() * 8

    def chan_dir(self) -> int:
        self._must_be("ChanDir", "chan")
        return self.cdir

    def is_variadic(self) -> bool:
        self._must_be("IsVariadic", "func")
        return self.dotdotdot

    def elem(self) -> Type:
        if self.k not in ("array", "chan", "map", "ptr", "slice"):
            raise Panic("reflect: Elem of invalid type " + self.string())
        return self.elem_t

    def key(self) -> Type:
        self._must_be("Key", "map")
        return self.key_t

    def len(self) -> int:
        self._must_be("Len", "array")
        return self.n

    def num_field(self) -> int:
        self._must_be("NumField", "struct")
        return len(self.sfields)

    def field(self, i: int) -> StructField:
        self._must_be("Field", "struct")
        if i < 0 or i >= len(self.sfields):
            raise Panic("reflect: Field index out of bounds")
        return self.sfields[i]

    def field_by_index(self, index: tuple[int, ...] | list[int]) -> StructField:
        self._must_be("FieldByIndex", "struct")
        f = StructField(name="", type=self)
        t = self
        i = 0
        while i < len(index):
            if i > 0:
                t = f.type
                if t.k == "ptr" and t.elem_t.k == "struct":
                    t = t.elem_t
            f = t.field(index[i])
            i += 1
        return f

    def field_by_name(self, name: str) -> tuple[StructField | None, bool]:
        self._must_be("FieldByName", "struct")
        if name != "":
            has_embeds = False
            for f in self.sfields:
                if f.name == name:
                    return f, True
                if f.anonymous:
                    has_embeds = True
            if not has_embeds:
                return None, False
        return self.field_by_name_func(lambda s: s == name)

    def field_by_name_func(self, match: Callable[[str], bool]) -> tuple[StructField | None, bool]:
        """Breadth-first search over this struct and its embedded structs.

        Stops at the shallowest depth with a matching name. Two or more
        matches at that depth annihilate each other and report no match.
        """
        self._must_be("FieldByNameFunc", "struct")
        result: StructField | None = None
        ok = False
        current: list[tuple[Type, tuple[int, ...]]] = []
        nxt: list[tuple[Type, tuple[int, ...]]] = [(self, ())]
        next_count: dict[Type, int] = {}
        visited: set[Type] = set()
        while len(nxt) > 0:
            current, nxt = nxt, []
            count = next_count
            next_count = {}
            for t, scan_index in current:
                if t in visited:
                    continue
                visited.add(t)
                i = 0
                while i < len(t.sfields):
                    f = t.sfields[i]
                    ntyp: Type | None = None
                    if f.anonymous:
                        ntyp = f.type
                        if ntyp.k == "ptr":
                            ntyp = ntyp.elem_t
                    if match(f.name):
                        if count.get(t, 0) > 1 or ok:
                            return None, False
                        result = replace(f, index=scan_index + (i,))
                        ok = True
                        i += 1
                        continue
                    if ok or ntyp is None or ntyp.k != "struct":
                        i += 1
                        continue
                    if next_count.get(ntyp, 0) > 0:
                        next_count[ntyp] = 2
                        i += 1
                        continue
                    next_count[ntyp] = 1
                    if count.get(t, 0) > 1:
                        next_count[ntyp] = 2
                    nxt.append((ntyp, scan_index + (i,)))
                    i += 1
            if ok:
                break
        return result, ok

    def num_in(self) -> int:
        self._must_be("NumIn", "func")
        return len(self.ins)

    def in_(self, i: int) -> Type:
        self._must_be("In", "func")
        if i < 0 or i >= len(self.ins):
            raise Panic("reflect: In index out of range")
        return self.ins[i]

    def num_out(self) -> int:
        self._must_be("NumOut", "func")
        return len(self.outs)

    def out(self, i: int) -> Type:
        self._must_be("Out", "func")
        if i < 0 or i >= len(self.outs):
            raise Panic("reflect: Out index out of range")
        return self.outs[i]

    def _must_be(self, op: str, kind: str) -> None:
        if self.k != kind:
            raise Panic("reflect: " + op + " of non-" + kind + " type " + self.string())


# ============================================================
# PREDECLARED TYPES
# ============================================================

TY_BOOL = Type("bool", tname="bool")
TY_INT = Type("int", tname="int")
TY_INT8 = Type("int8", tname="int8")
TY_INT16 = Type("int16", tname="int16")
TY_INT32 = Type("int32", tname="int32")
TY_INT64 = Type("int64", tname="int64")
TY_UINT = Type("uint", tname="uint")
TY_UINT8 = Type("uint8", tname="uint8")
TY_UINT16 = Type("uint16", tname="uint16")
TY_UINT32 = Type("uint32", tname="uint32")
TY_UINT64 = Type("uint64", tname="uint64")
TY_UINTPTR = Type("uintptr", tname="uintptr")
TY_FLOAT32 = Type("float32", tname="float32")
TY_FLOAT64 = Type("float64", tname="float64")
TY_COMPLEX64 = Type("complex64", tname="complex64")
TY_COMPLEX128 = Type("complex128", tname="complex128")
TY_STRING = Type("string", tname="string")
TY_UNSAFE_POINTER = Type("unsafe.Pointer", tname="Pointer", pkg="unsafe")
TY_BYTE = TY_UINT8
TY_RUNE = TY_INT32
TY_ANY = Type("interface")
TY_ERROR = Type(
    "interface",
    tname="error",
    mtab=(MethodDef("Error", Type("func", outs=(TY_STRING,))),),
)

_BASIC: dict[str, Type] = {
    t.k: t
    for t in (
        TY_BOOL,
        TY_INT,
        TY_INT8,
        TY_INT16,
        TY_INT32,
        TY_INT64,
        TY_UINT,
        TY_UINT8,
        TY_UINT16,
        TY_UINT32,
        TY_UINT64,
        TY_UINTPTR,
        TY_FLOAT32,
        TY_FLOAT64,
        TY_COMPLEX64,
        TY_COMPLEX128,
        TY_STRING,
        TY_UNSAFE_POINTER,
    )
}


# ============================================================
# CONSTRUCTORS
# ============================================================


def array_of(length: int, elem: Type) -> Type:
    if length < 0:
        raise Panic("reflect: negative length passed to ArrayOf")
    return Type("array", elem_t=elem, n=length)


def chan_of(elem: Type, dir: int = BOTH_DIR) -> Type:
    if dir not in (RECV_DIR, SEND_DIR, BOTH_DIR):
        raise Panic("reflect.ChanOf: invalid dir")
    return Type("chan", elem_t=elem, cdir=dir)


def func_of(ins: tuple[Type, ...] | list[Type], outs: tuple[Type, ...] | list[Type] = (), variadic: bool = False) -> Type:
    ins = tuple(ins)
    if variadic and (len(ins) == 0 or ins[-1].k != "slice"):
        raise Panic("reflect.FuncOf: last arg of variadic func must be slice")
    return Type("func", ins=ins, outs=tuple(outs), dotdotdot=variadic)


def interface_of(methods: tuple[MethodDef, ...] | list[MethodDef] = ()) -> Type:
    mtab = tuple(sorted(methods, key=lambda m: m.name))
    i = 1
    while i < len(mtab):
        if mtab[i].name == mtab[i - 1].name:
            raise Panic("reflect: duplicate method " + mtab[i].name)
        i += 1
    for m in mtab:
        if m.sig.k != "func":
            raise Panic("reflect: interface method " + m.name + " has non-func signature")
    return Type("interface", mtab=mtab)


def map_of(key: Type, elem: Type) -> Type:
    if not key.comparable():
        raise Panic("reflect.MapOf: invalid key type " + key.string())
    return Type("map", key_t=key, elem_t=elem)


def ptr_to(elem: Type) -> Type:
    return Type("ptr", elem_t=elem)


def slice_of(elem: Type) -> Type:
    return Type("slice", elem_t=elem)


def struct_of(fields: tuple[StructField, ...] | list[StructField], pkg_path: str = "main") -> Type:
    """Lay out a struct type.

    Embedded fields are given with `anonymous=True` and an empty name; the
    name is taken from the embedded type (or its pointer target).
    Unexported fields are stamped with `pkg_path`.
    """
    laid: list[StructField] = []
    seen: set[str] = set()
    offset = 0
    i = 0
    while i < len(fields):
        f = fields[i]
        name = f.name
        if f.anonymous and name == "":
            base = f.type.elem_t if f.type.k == "ptr" else f.type
            name = base.tname
        if name == "":
            raise Panic("reflect.StructOf: field " + str(i) + " has no name")
        if name in seen:
            raise Panic("reflect.StructOf: duplicate field " + name)
        seen.add(name)
        fpkg = "" if _exported(name) else (f.pkg_path or pkg_path)
        offset = _align_up(offset, f.type.align())
        laid.append(replace(f, name=name, pkg_path=fpkg, offset=offset, index=(i,)))
        offset += f.type.size()
        i += 1
    return Type("struct", sfields=tuple(laid))


def named(name: str, pkg_path: str, base: Type, methods: tuple[MethodDef, ...] | list[MethodDef] = ()) -> Type:
    """Declare a defined type `name` in package `pkg_path` with underlying `base`."""
    u = underlying(base)
    if len(methods) > 0 and u.k in ("ptr", "interface"):
        raise Panic("reflect: invalid receiver type " + name)
    if u.k == "interface":
        return replace(u, tname=name, pkg=pkg_path)
    mtab = tuple(sorted(methods, key=lambda m: m.name))
    i = 1
    while i < len(mtab):
        if mtab[i].name == mtab[i - 1].name:
            raise Panic("reflect: duplicate method " + name + "." + mtab[i].name)
        i += 1
    return replace(u, tname=name, pkg=pkg_path, mtab=mtab)


def underlying(t: Type) -> Type:
    """The type stripped of its definition (name, package, methods)."""
    if t.k in _BASIC:
        return _BASIC[t.k]
    if t.k == "interface":
        return replace(t, tname="", pkg="")
    return replace(t, tname="", pkg="", mtab=())


# ============================================================
# STRUCT TAGS
# ============================================================


def tag_lookup(tag: str, key: str) -> tuple[str, bool]:
    """Look up `key` in a conventional `key:"value" key2:"value2"` tag."""
    while tag != "":
        i = 0
        while i < len(tag) and tag[i] == " ":
            i += 1
        tag = tag[i:]
        if tag == "":
            break
        i = 0
        while i < len(tag) and tag[i] > " " and tag[i] != ":" and tag[i] != '"' and tag[i] != "\x7f":
            i += 1
        if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
            break
        name = tag[:i]
        tag = tag[i + 1 :]
        i = 1
        while i < len(tag) and tag[i] != '"':
            if tag[i] == "\\":
                i += 1
            i += 1
        if i >= len(tag):
            break
        qvalue = tag[: i + 1]
        tag = tag[i + 1 :]
        if key == name:
            return _unquote(qvalue), True
    return "", False


def _unquote(q: str) -> str:
    body = q[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            nc = body[i + 1]
            if nc == "n":
                out.append("\n")
            elif nc == "t":
                out.append("\t")
            else:
                out.append(nc)
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


# ============================================================
# HELPERS
# ============================================================


def _exported(name: str) -> bool:
    return name != "" and name[0].isupper()


def _align_up(x: int, a: int) -> int:
    return (x + a - 1) // a * a


def _layout(t: Type) -> tuple[int, int]:
    if t.k in _SCALAR_LAYOUT:
        return _SCALAR_LAYOUT[t.k]
    if t.k == "array":
        size, align = _layout(t.elem_t)
        return size * t.n, align
    if t.k == "struct":
        if len(t.sfields) == 0:
            return 0, 1
        align = 1
        end = 0
        for f in t.sfields:
            fsize, falign = _layout(f.type)
            if falign > align:
                align = falign
            end = f.offset + fsize
        last_size = _layout(t.sfields[-1].type)[0]
        if last_size == 0 and end > 0:
            end += 1
        return _align_up(end, align), align
    return 0, 1


def _method_set(t: Type) -> tuple[MethodDef, ...]:
    if t.k == "interface":
        return t.mtab
    if t.k == "ptr" and t.tname == "" and t.elem_t.k not in ("ptr", "interface"):
        return tuple(m for m in t.elem_t.mtab if _exported(m.name))
    return tuple(m for m in t.mtab if not m.ptr_recv and _exported(m.name))


def _has_method(have: tuple[MethodDef, ...], want: MethodDef) -> bool:
    for m in have:
        if m.name == want.name and m.pkg_path == want.pkg_path and m.sig == want.sig:
            return True
    return False


def _make_method(t: Type, m: MethodDef, index: int) -> Method:
    if t.k == "interface":
        return Method(name=m.name, pkg_path=m.pkg_path, type=m.sig, index=index)
    sig = func_of((t,) + m.sig.ins, m.sig.outs, m.sig.dotdotdot)
    return Method(name=m.name, pkg_path=m.pkg_path, type=sig, index=index, impl=m.impl, ptr_recv=m.ptr_recv)


def _untagged(t: Type) -> Type:
    if t.k == "struct":
        return replace(t, sfields=tuple(replace(f, tag="", type=_untagged(f.type)) for f in t.sfields))
    if t.k in ("array", "slice", "ptr", "chan") and t.elem_t is not None:
        return replace(t, elem_t=_untagged(t.elem_t))
    if t.k == "map":
        return replace(t, key_t=_untagged(t.key_t), elem_t=_untagged(t.elem_t))
    return t


def _pkg_name(path: str) -> str:
    i = path.rfind("/")
    return path[i + 1 :]


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _signature(t: Type) -> str:
    """Render `(params) results` for a func type."""
    params: list[str] = []
    i = 0
    while i < len(t.ins):
        p = t.ins[i]
        if t.dotdotdot and i == len(t.ins) - 1:
            params.append("..." + _type_string(p.elem_t))
        else:
            params.append(_type_string(p))
        i += 1
    result = "(" + ", ".join(params) + ")"
    if len(t.outs) == 1:
        result += " " + _type_string(t.outs[0])
    elif len(t.outs) > 1:
        result += " (" + ", ".join(_type_string(o) for o in t.outs) + ")"
    return result


def _type_string(t: Type) -> str:
    if t.tname != "":
        if t.pkg != "":
            return _pkg_name(t.pkg) + "." + t.tname
        return t.tname
    match t.k:
        case "array":
            return "[" + str(t.n) + "]" + _type_string(t.elem_t)
        case "slice":
            return "[]" + _type_string(t.elem_t)
        case "ptr":
            return "*" + _type_string(t.elem_t)
        case "map":
            return "map[" + _type_string(t.key_t) + "]" + _type_string(t.elem_t)
        case "chan":
            elem = _type_string(t.elem_t)
            if t.cdir == RECV_DIR:
                return "<-chan " + elem
            if t.cdir == SEND_DIR:
                return "chan<- " + elem
            if t.elem_t.k == "chan" and t.elem_t.tname == "" and t.elem_t.cdir == RECV_DIR:
                return "chan (" + elem + ")"
            return "chan " + elem
        case "func":
            return "func" + _signature(t)
        case "struct":
            if len(t.sfields) == 0:
                return "struct {}"
            parts: list[str] = []
            for f in t.sfields:
                if f.anonymous:
                    s = _type_string(f.type)
                else:
                    s = f.name + " " + _type_string(f.type)
                if f.tag != "":
                    s += " " + _quote(f.tag)
                parts.append(s)
            return "struct { " + "; ".join(parts) + " }"
        case "interface":
            if len(t.mtab) == 0:
                return "interface {}"
            return "interface { " + "; ".join(m.name + _signature(m.sig) for m in t.mtab) + " }"
        case _:
            return t.k
