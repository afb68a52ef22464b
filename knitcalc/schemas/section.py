"""
Tagged section variants for snapshot fields.

Every section of a PatternDefinitionSnapshot is exactly one of:

  Unset           — the user has not filled the section in
  Invalid(reason) — the UI captured something it could not interpret
  Set(value)      — a usable value

Consumers pattern-match on the variant instead of consulting separate
"is set" flags, so a section can never be both empty and populated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Unset:
    """Placeholder for a section with no entered value."""


UNSET = Unset()


@dataclass(frozen=True)
class Invalid:
    """A section whose entered value could not be interpreted."""

    reason: str


@dataclass(frozen=True)
class Set(Generic[T]):
    """A section holding a usable value."""

    value: T


Section = Union[Unset, Invalid, Set[T]]


def value_of(section: Section[T]) -> T | None:
    """Return the wrapped value of a Set section, else None."""
    match section:
        case Set(value=value):
            return value
        case _:
            return None
