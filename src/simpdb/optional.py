"""Presence-tagged container for lookups that may find nothing.

`Optional` is returned by point lookups and extremum queries instead of
``None`` so that "absent" is an explicit state rather than a value that could
be confused with a stored one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import NotFoundError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Optional(Generic[T]):
    """A value together with a flag telling whether it is present.

    It is only safe to read `value` when `valid` is True.
    """

    value: T | None = None
    valid: bool = False

    @classmethod
    def of(cls, value: T) -> Optional[T]:
        """Wrap a present value."""
        return cls(value=value, valid=True)

    @classmethod
    def empty(cls) -> Optional[T]:
        """Return the absent value."""
        return cls()

    def __bool__(self) -> bool:
        return self.valid

    def unwrap(self) -> T:
        """Return the value.

        Raises:
            NotFoundError: If no value is present.
        """
        if not self.valid:
            raise NotFoundError()
        return self.value  # type: ignore[return-value]

    def or_else(self, default: T) -> T:
        """Return the value if present, otherwise `default`."""
        if self.valid:
            return self.value  # type: ignore[return-value]
        return default

    def __repr__(self) -> str:
        if not self.valid:
            return "Optional.empty()"
        return f"Optional.of({self.value!r})"
