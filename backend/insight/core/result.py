"""Tagged Result: explicit success/failure variant for untrusted-output validation.

Invariants:
    - Ok carries the value, Err carries the (unraised) error; never both
    - Callers branch with isinstance / match, so both arms are handled statically
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E
