"""SafeType: panic-free descriptor over a runtime type handle.

Every query of `rtype.Type` is mirrored here. Queries defined for every kind
delegate directly. Kind-restricted queries match on the kind first and
return a `WrongKind` failure instead of panicking; positional queries check
`0 <= i < count` and return `IndexOutOfRange` otherwise. Name and predicate
lookups return `(result, found)` pairs and never fail.

| Query              | Kinds                                  |
|--------------------|----------------------------------------|
| bits               | int*, uint*, uintptr, float*, complex* |
| chan_dir           | chan                                   |
| is_variadic        | func                                   |
| elem               | array, chan, map, ptr, slice           |
| field              | struct                                 |
| field_by_index     | struct                                 |
| in_                | func                                   |
| key                | map                                    |
| len                | array                                  |
| num_field          | struct                                 |
| num_in             | func                                   |
| num_out            | func                                   |
| out                | func                                   |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .failures import IndexOutOfRange, WrongKind
from .rtype import ARITHMETIC_KINDS, StructField, Type, tag_lookup

if TYPE_CHECKING:
    from .safemethod import SafeMethod

ELEM_KINDS: tuple[str, ...] = ("array", "chan", "map", "ptr", "slice")


@dataclass(frozen=True)
class SafeType:
    """Wraps one `rtype.Type`. Equal handles make equal descriptors."""

    handle: Type

    def __str__(self) -> str:
        return self.handle.string()

    def unwrap(self) -> Type:
        return self.handle

    # ============================================================
    # UNCONDITIONAL
    # ============================================================

    def align(self) -> int:
        return self.handle.align()

    def field_align(self) -> int:
        return self.handle.field_align()

    def name(self) -> str:
        return self.handle.name()

    def pkg_path(self) -> str:
        return self.handle.pkg_path()

    def size(self) -> int:
        return self.handle.size()

    def string(self) -> str:
        return self.handle.string()

    def kind(self) -> str:
        return self.handle.kind()

    def implements(self, u: SafeType) -> bool:
        return self.handle.implements(u.handle)

    def assignable_to(self, u: SafeType) -> bool:
        return self.handle.assignable_to(u.handle)

    def convertible_to(self, u: SafeType) -> bool:
        return self.handle.convertible_to(u.handle)

    def comparable(self) -> bool:
        return self.handle.comparable()

    # ============================================================
    # METHODS
    # ============================================================

    def num_method(self) -> int:
        return self.handle.num_method()

    def method(self, i: int) -> SafeMethod | IndexOutOfRange:
        from .safemethod import SafeMethod

        failure = _check_index("method", i, self.handle.num_method())
        if failure is not None:
            return failure
        return SafeMethod(self.handle.method(i), self.handle)

    def method_by_name(self, name: str) -> tuple[SafeMethod | None, bool]:
        from .safemethod import SafeMethod

        m, ok = self.handle.method_by_name(name)
        if not ok:
            return None, False
        return SafeMethod(m, self.handle), True

    # ============================================================
    # KIND-RESTRICTED
    # ============================================================

    def bits(self) -> int | WrongKind:
        match self.handle.kind():
            case kind if kind in ARITHMETIC_KINDS:
                return self.handle.bits()
            case actual:
                return WrongKind("bits", ARITHMETIC_KINDS, actual)

    def chan_dir(self) -> int | WrongKind:
        match self.handle.kind():
            case "chan":
                return self.handle.chan_dir()
            case actual:
                return WrongKind("chan_dir", ("chan",), actual)

    def is_variadic(self) -> bool | WrongKind:
        match self.handle.kind():
            case "func":
                return self.handle.is_variadic()
            case actual:
                return WrongKind("is_variadic", ("func",), actual)

    def elem(self) -> SafeType | WrongKind:
        match self.handle.kind():
            case "array" | "chan" | "map" | "ptr" | "slice":
                return SafeType(self.handle.elem())
            case actual:
                return WrongKind("elem", ELEM_KINDS, actual)

    def key(self) -> SafeType | WrongKind:
        match self.handle.kind():
            case "map":
                return SafeType(self.handle.key())
            case actual:
                return WrongKind("key", ("map",), actual)

    def len(self) -> int | WrongKind:
        match self.handle.kind():
            case "array":
                return self.handle.len()
            case actual:
                return WrongKind("len", ("array",), actual)

    def num_field(self) -> int | WrongKind:
        match self.handle.kind():
            case "struct":
                return self.handle.num_field()
            case actual:
                return WrongKind("num_field", ("struct",), actual)

    def field(self, i: int) -> SafeField | WrongKind | IndexOutOfRange:
        match self.handle.kind():
            case "struct":
                failure = _check_index("field", i, self.handle.num_field())
                if failure is not None:
                    return failure
                return SafeField(self.handle.field(i))
            case actual:
                return WrongKind("field", ("struct",), actual)

    def field_by_index(self, index: tuple[int, ...] | list[int]) -> SafeField | WrongKind | IndexOutOfRange:
        """The nested field reached by following `index` one level at a time.

        Levels after the first step through a pointer to a struct. Every level
        is checked for kind and range before the runtime walks the path.
        """
        t = self.handle
        f: StructField | None = None
        i = 0
        while i < len(index):
            if f is not None:
                t = f.type
                if t.kind() == "ptr" and t.elem().kind() == "struct":
                    t = t.elem()
            match t.kind():
                case "struct":
                    failure = _check_index("field_by_index", index[i], t.num_field())
                    if failure is not None:
                        return failure
                    f = t.field(index[i])
                case actual:
                    return WrongKind("field_by_index", ("struct",), actual)
            i += 1
        if self.handle.kind() != "struct":
            return WrongKind("field_by_index", ("struct",), self.handle.kind())
        return SafeField(self.handle.field_by_index(index))

    def field_by_name(self, name: str) -> tuple[SafeField | None, bool]:
        match self.handle.kind():
            case "struct":
                f, ok = self.handle.field_by_name(name)
                if not ok:
                    return None, False
                return SafeField(f), True
            case _:
                return None, False

    def field_by_name_func(self, match: Callable[[str], bool]) -> tuple[SafeField | None, bool]:
        if self.handle.kind() != "struct":
            return None, False
        f, ok = self.handle.field_by_name_func(match)
        if not ok:
            return None, False
        return SafeField(f), True

    def num_in(self) -> int | WrongKind:
        match self.handle.kind():
            case "func":
                return self.handle.num_in()
            case actual:
                return WrongKind("num_in", ("func",), actual)

    def in_(self, i: int) -> SafeType | WrongKind | IndexOutOfRange:
        match self.handle.kind():
            case "func":
                failure = _check_index("in", i, self.handle.num_in())
                if failure is not None:
                    return failure
                return SafeType(self.handle.in_(i))
            case actual:
                return WrongKind("in", ("func",), actual)

    def num_out(self) -> int | WrongKind:
        match self.handle.kind():
            case "func":
                return self.handle.num_out()
            case actual:
                return WrongKind("num_out", ("func",), actual)

    def out(self, i: int) -> SafeType | WrongKind | IndexOutOfRange:
        match self.handle.kind():
            case "func":
                failure = _check_index("out", i, self.handle.num_out())
                if failure is not None:
                    return failure
                return SafeType(self.handle.out(i))
            case actual:
                return WrongKind("out", ("func",), actual)


@dataclass(frozen=True)
class SafeField:
    """Wraps one `rtype.StructField`, exposing its type as a `SafeType`."""

    handle: StructField

    def unwrap(self) -> StructField:
        return self.handle

    def name(self) -> str:
        return self.handle.name

    def pkg_path(self) -> str:
        return self.handle.pkg_path

    def type(self) -> SafeType:
        return SafeType(self.handle.type)

    def tag(self) -> str:
        return self.handle.tag

    def tag_lookup(self, key: str) -> tuple[str, bool]:
        return tag_lookup(self.handle.tag, key)

    def offset(self) -> int:
        return self.handle.offset

    def index(self) -> tuple[int, ...]:
        return self.handle.index

    def anonymous(self) -> bool:
        return self.handle.anonymous

    def is_exported(self) -> bool:
        return self.handle.is_exported()


def wrap_type(handle: Type) -> SafeType:
    return SafeType(handle)


def _check_index(op: str, i: int, bound: int) -> IndexOutOfRange | None:
    if i < 0 or i >= bound:
        return IndexOutOfRange(op, i, bound)
    return None
