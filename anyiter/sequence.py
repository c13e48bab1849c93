"""Generic sequence walk over collection-like values.

`iterate` turns an array, slice, string, map, channel or pointer to array
into a chain of immutable steps. Each step exposes the current element as a
`SafeValue`, its type as a `SafeType`, and `next()` which returns the
following step or None at the end.

The walk is single-pass and forward-only. Arrays, slices, strings and maps
are snapshotted when `iterate` is called, so calling `next()` on the same
step twice gives equal steps. Channel steps receive on `next()`, so each
call consumes a buffered element.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .failures import ChannelDirection, Failure, InvalidValue, NilPointer, WrongKind
from .rtype import RECV_DIR, TY_INT32
from .rvalue import Value
from .safetype import SafeType
from .safevalue import SafeValue

SEQUENCE_KINDS: tuple[str, ...] = ("array", "chan", "map", "ptr", "slice", "string")


class Iter:
    """One step of a walk. Abstract."""

    def value(self) -> SafeValue:
        raise NotImplementedError

    def type(self) -> SafeType:
        return SafeType(self.value().unwrap().type())

    def index(self) -> int:
        raise NotImplementedError

    def next(self) -> Iter | None:
        raise NotImplementedError

    def __iter__(self) -> Iterator[Iter]:
        step: Iter | None = self
        while step is not None:
            yield step
            step = step.next()


@dataclass(frozen=True)
class ItemStep(Iter):
    """A step over the elements of an array, slice or string."""

    items: tuple[Value, ...]
    pos: int = 0

    def value(self) -> SafeValue:
        return SafeValue(self.items[self.pos])

    def index(self) -> int:
        return self.pos

    def next(self) -> ItemStep | None:
        if self.pos + 1 >= len(self.items):
            return None
        return ItemStep(self.items, self.pos + 1)


@dataclass(frozen=True)
class MapStep(Iter):
    """A step over the entries of a map. `value()` is the entry's value."""

    pairs: tuple[tuple[Value, Value], ...]
    pos: int = 0

    def key(self) -> SafeValue:
        return SafeValue(self.pairs[self.pos][0])

    def value(self) -> SafeValue:
        return SafeValue(self.pairs[self.pos][1])

    def index(self) -> int:
        return self.pos

    def next(self) -> MapStep | None:
        if self.pos + 1 >= len(self.pairs):
            return None
        return MapStep(self.pairs, self.pos + 1)


@dataclass(frozen=True)
class ChanStep(Iter):
    """A step over the buffered elements of a channel."""

    chan: Value
    current: Value
    pos: int = 0

    def value(self) -> SafeValue:
        return SafeValue(self.current)

    def index(self) -> int:
        return self.pos

    def next(self) -> ChanStep | None:
        x, ok = self.chan.try_recv()
        if not ok:
            return None
        return ChanStep(self.chan, x, self.pos + 1)


def iterate(v: SafeValue) -> Iter | None | Failure:
    """Start a walk over `v`; None when `v` has no elements."""
    h = v.unwrap()
    match h.kind():
        case "array" | "slice":
            return _items(tuple(h.index(i) for i in range(h.len())))
        case "string":
            return _items(tuple(Value(TY_INT32, ord(c), h.ro) for c in h.string()))
        case "map":
            pairs = tuple(h.map_range())
            if len(pairs) == 0:
                return None
            return MapStep(pairs)
        case "chan":
            if h.type().chan_dir() & RECV_DIR == 0:
                return ChannelDirection("iterate", h.type().chan_dir())
            x, ok = h.try_recv()
            if not ok:
                return None
            return ChanStep(h, x)
        case "ptr" if h.type().elem().kind() == "array":
            if h.is_nil():
                return NilPointer("iterate")
            return iterate(SafeValue(h.elem()))
        case "ptr":
            return WrongKind("iterate", ("array",), h.type().elem().kind())
        case "invalid":
            return InvalidValue("iterate")
        case actual:
            return WrongKind("iterate", SEQUENCE_KINDS, actual)


def _items(items: tuple[Value, ...]) -> ItemStep | None:
    if len(items) == 0:
        return None
    return ItemStep(items)
