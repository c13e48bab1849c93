"""Panic-free descriptors over a reflective type and value runtime.

The raw runtime (`rtype`, `rvalue`) raises `Panic` whenever a query does not
apply to its receiver. The descriptors returned by `wrap_type`,
`wrap_method` and `wrap_value` answer the same queries but return a failure
value instead, so inspection of an unknown type or value never aborts.
"""

from __future__ import annotations

from .failures import (
    ArgumentCount as ArgumentCount,
    ChannelDirection as ChannelDirection,
    ClosedChannel as ClosedChannel,
    Failure as Failure,
    FailureError as FailureError,
    IndexOutOfRange as IndexOutOfRange,
    InvalidValue as InvalidValue,
    NilPointer as NilPointer,
    NotAssignable as NotAssignable,
    Unexported as Unexported,
    WrongKind as WrongKind,
    is_failure as is_failure,
)
from .rtype import AnyiterError as AnyiterError, Panic as Panic
from .safemethod import SafeMethod as SafeMethod, wrap_method as wrap_method
from .safetype import SafeField as SafeField, SafeType as SafeType, wrap_type as wrap_type
from .safevalue import SafeValue as SafeValue, wrap_value as wrap_value
from .sequence import Iter as Iter, iterate as iterate
