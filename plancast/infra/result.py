from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


class Result(Generic[T, E]):
    """
    Ok/Err result.

    Used where a problem must be reported to the caller without aborting
    the surrounding computation (e.g. one bad actual among many):

        r = check(x)
        if r.is_ok():
            use(r.value)
        else:
            report(r.error)
    """

    def is_ok(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Ok(Result[T, E]):
    value: T

    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Result[T, E]):
    error: E

    def is_ok(self) -> bool:
        return False
