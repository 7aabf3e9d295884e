"""
Data models for the rating prompt policy.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class DecisionReason(str, Enum):
    """Outcome of a single should_present evaluation."""
    FORCED = "forced"
    RECENT_CRASH = "recent_crash"
    TOO_SOON = "too_soon"
    BELOW_THRESHOLD = "below_threshold"
    ELIGIBLE = "eligible"


@dataclass(frozen=True)
class Present(Generic[T]):
    """A persisted value that was found."""
    value: T


@dataclass(frozen=True)
class Absent:
    """A persisted value that was not found or could not be read."""


ABSENT = Absent()

Stored = Union[Present[T], Absent]


def value_or(stored: "Stored[T]", default: T) -> T:
    """Unwrap a stored value, substituting ``default`` when absent."""
    if isinstance(stored, Present):
        return stored.value
    return default


def as_datetime(raw: Any) -> "Stored[datetime]":
    if isinstance(raw, datetime):
        return Present(raw)
    return ABSENT


def as_int(raw: Any) -> "Stored[int]":
    # bool is an int subclass but never a valid counter
    if isinstance(raw, int) and not isinstance(raw, bool):
        return Present(raw)
    return ABSENT


@dataclass(frozen=True)
class PolicyState:
    """Snapshot of the persisted policy fields with defaults applied."""
    last_request_date: Optional[datetime]
    request_count: int
    threshold: int
    last_crash_date: Optional[datetime]
    force_show_override: bool
