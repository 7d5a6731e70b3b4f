"""Shared domain models for the Shrutam quote sync core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

T = TypeVar("T")

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# ---- Enums ----


class PersistStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"


class SyncState(str, Enum):
    """States of a single orchestrator call."""

    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FALLEN_BACK = "fallen_back"
    FAILED = "failed"


# ---- Quote Models ----


class Quote(BaseModel):
    """One unit of displayable content.

    Field aliases are the wire names used by the remote API and by the
    persisted store blobs.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    text: str = Field(alias="shlok")
    source_label: str = Field(alias="source")
    category: str
    created_at: datetime
    meaning_primary: str = Field(alias="meaning_hindi")
    meaning_secondary: str = Field(alias="meaning_english")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Mixed naive/aware values cannot be compared when sorting.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class DailyCacheEntry(BaseModel):
    """The persisted "quote of today" slot: ``{"data": Quote, "date": str}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    quote: Quote = Field(alias="data")
    cached_on: date = Field(alias="date")

    @field_validator("cached_on", mode="before")
    @classmethod
    def parse_cached_on(cls, v):
        if isinstance(v, str):
            return parse_date_string(v)
        return v

    @field_serializer("cached_on")
    def serialize_cached_on(self, v: date) -> str:
        return to_date_string(v)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def to_date_string(d: date) -> str:
    """Render *d* as ``"Mon Jan 01 2024"`` independent of the process locale."""
    return f"{_WEEKDAYS[d.weekday()]} {_MONTHS[d.month - 1]} {d.day:02d} {d.year}"


def parse_date_string(value: str) -> date:
    """Inverse of :func:`to_date_string`.  ISO dates are accepted as well."""
    parts = value.split()
    if len(parts) == 4 and parts[1] in _MONTHS:
        return date(int(parts[3]), _MONTHS.index(parts[1]) + 1, int(parts[2]))
    return date.fromisoformat(value)


# ---- Result Models ----


@dataclass(frozen=True)
class PersistResult:
    """Outcome of a best-effort cache write."""

    status: PersistStatus
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> PersistResult:
        return cls(PersistStatus.OK)

    @classmethod
    def degraded(cls, reason: str) -> PersistResult:
        return cls(PersistStatus.DEGRADED, reason)

    @property
    def is_ok(self) -> bool:
        return self.status is PersistStatus.OK


@dataclass(frozen=True)
class MergeResult:
    """The list produced by a recent-cache merge and how persisting it went."""

    quotes: list[Quote]
    persist: PersistResult = field(default_factory=PersistResult.ok)


@dataclass(frozen=True)
class SyncResult(Generic[T]):
    """Value returned by one orchestrator call together with its final state."""

    value: Optional[T]
    state: SyncState
    error: Optional[Exception] = None

    @property
    def from_cache(self) -> bool:
        return self.state is SyncState.FALLEN_BACK
