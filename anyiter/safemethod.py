"""Descriptor over one entry of a type's method set."""

from __future__ import annotations

from dataclasses import dataclass

from .rtype import Method, Type
from .rvalue import method_func
from .safetype import SafeType
from .safevalue import SafeValue


@dataclass(frozen=True)
class SafeMethod:
    """Wraps one `rtype.Method` together with the type it was looked up on.

    None of the accessors can fail. `func()` is None for interface methods,
    which have no implementation of their own.
    """

    handle: Method
    owner: Type | None = None

    def unwrap(self) -> Method:
        return self.handle

    def name(self) -> str:
        return self.handle.name

    def pkg_path(self) -> str:
        return self.handle.pkg_path

    def type(self) -> SafeType:
        return SafeType(self.handle.type)

    def func(self) -> SafeValue | None:
        if self.handle.impl is None:
            return None
        return SafeValue(method_func(self.handle))

    def index(self) -> int:
        return self.handle.index

    def receiver(self) -> SafeType | None:
        if self.owner is None:
            return None
        return SafeType(self.owner)

    def is_exported(self) -> bool:
        return self.handle.pkg_path == ""


def wrap_method(handle: Method, owner: Type | None = None) -> SafeMethod:
    return SafeMethod(handle, owner)
