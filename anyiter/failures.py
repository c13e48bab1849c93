"""Failure values returned by the safe descriptors.

A failure is returned, never raised. Each one carries the structured facts
of what went wrong; `message` is derived from them. Callers branch on the
failure class (or `match` on it) rather than on the text.
"""

from __future__ import annotations

from dataclasses import dataclass

from .rtype import RECV_DIR, SEND_DIR, AnyiterError


class FailureError(AnyiterError):
    """A failure converted to an exception for callers that want to raise it."""

    def __init__(self, failure: Failure):
        super().__init__(failure.message)
        self.failure = failure


@dataclass(frozen=True)
class Failure:
    """Base for all failure values. Abstract."""

    op: str

    @property
    def message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.message

    def error(self) -> FailureError:
        return FailureError(self)


@dataclass(frozen=True)
class WrongKind(Failure):
    """The operation is not defined for the receiver's kind."""

    expected: tuple[str, ...]
    actual: str

    @property
    def message(self) -> str:
        return self.op + ": expected kind " + _one_of(self.expected) + ", got " + self.actual


@dataclass(frozen=True)
class IndexOutOfRange(Failure):
    """A positional argument fell outside [0, bound)."""

    index: int
    bound: int

    @property
    def message(self) -> str:
        return self.op + ": index " + str(self.index) + " out of range [0, " + str(self.bound) + ")"


@dataclass(frozen=True)
class InvalidValue(Failure):
    """The operation was called on the zero (invalid) value."""

    @property
    def message(self) -> str:
        return self.op + ": call on zero Value"


@dataclass(frozen=True)
class NotAssignable(Failure):
    """A value's type cannot be assigned to the required type.

    `position` is the argument index for calls, -1 otherwise.
    """

    have: str
    want: str
    position: int = -1

    @property
    def message(self) -> str:
        where = ""
        if self.position >= 0:
            where = " (argument " + str(self.position) + ")"
        return self.op + ": value of type " + self.have + " is not assignable to type " + self.want + where


@dataclass(frozen=True)
class ArgumentCount(Failure):
    """A call supplied the wrong number of arguments."""

    have: int
    want: int
    variadic: bool = False

    @property
    def message(self) -> str:
        want = str(self.want)
        if self.variadic:
            want = "at least " + str(self.want)
        return self.op + ": got " + str(self.have) + " arguments, want " + want


@dataclass(frozen=True)
class ChannelDirection(Failure):
    """A channel operation is not permitted by the channel's direction."""

    dir: int

    @property
    def message(self) -> str:
        if self.dir == RECV_DIR:
            return self.op + ": channel is receive-only"
        if self.dir == SEND_DIR:
            return self.op + ": channel is send-only"
        return self.op + ": invalid channel direction " + str(self.dir)


@dataclass(frozen=True)
class ClosedChannel(Failure):
    """Send on, or close of, an already closed channel."""

    @property
    def message(self) -> str:
        return self.op + ": channel is closed"


@dataclass(frozen=True)
class NilPointer(Failure):
    """The operation needs a non-nil receiver (function, channel or pointer)."""

    @property
    def message(self) -> str:
        return self.op + ": nil receiver"


@dataclass(frozen=True)
class Unexported(Failure):
    """The value was obtained through an unexported field and cannot escape."""

    name: str = ""

    @property
    def message(self) -> str:
        if self.name == "":
            return self.op + ": value obtained from unexported field or method"
        return self.op + ": value obtained from unexported field " + self.name


def is_failure(x: object) -> bool:
    return isinstance(x, Failure)


def _one_of(kinds: tuple[str, ...]) -> str:
    if len(kinds) == 0:
        return "(none)"
    if len(kinds) == 1:
        return kinds[0]
    return ", ".join(kinds[:-1]) + " or " + kinds[-1]
