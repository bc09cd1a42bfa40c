"""
Pydantic v2 schemas for participatory budget administration.

These models define the JSON shapes consumed and returned by
``budget_admin/routers/budgets.py``. They are free of SQLAlchemy imports;
ORM instances are read through ``from_attributes``.

Domain context
--------------
A budget walks through a fixed, ordered sequence of phases. Each phase has
a half-open date window, an enabled flag and localized texts; the budget
points at its current phase kind.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from budget_admin.schemas.common import LocalizedText
from budget_admin.utils.dates import to_naive_utc

BudgetFilter = Literal["all", "open", "finished"]


# ---------------------------------------------------------------------------
# Input schemas - write operations
# ---------------------------------------------------------------------------


class BudgetCreate(BaseModel):
    """Payload for creating a budget (POST /).

    ``published`` is accepted for form compatibility but always ignored:
    new budgets start as drafts. Result/stats toggles are not part of the
    creation form.

    Attributes:
        name: Localized name; the default-locale entry is required.
        phase: Initial current phase kind. Defaults to the first catalog kind.
        voting_style: "knapsack" (default) or "approval".
        published: Ignored.
    """

    name: LocalizedText = Field(default_factory=dict)
    phase: str | None = Field(default=None, max_length=40)
    voting_style: str = Field(default="knapsack", max_length=20)
    published: bool | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": {"en": "M30 - Summer campaign"},
                "phase": "accepting",
                "voting_style": "approval",
            }
        }
    )


class BudgetUpdate(BaseModel):
    """Partial update of a budget (PUT /{budget}).

    ``name`` entries are merged into the stored mapping, so sending only
    ``{"es": ...}`` leaves the other locales untouched.
    """

    name: LocalizedText | None = None
    phase: str | None = Field(default=None, max_length=40)
    voting_style: str | None = Field(default=None, max_length=20)
    results_enabled: bool | None = None
    stats_enabled: bool | None = None
    advanced_stats_enabled: bool | None = None


class BudgetPhaseUpdate(BaseModel):
    """Partial update of one phase (PUT /{budget}/phases/{phase_id}).

    Timestamps with an offset are stored as naive UTC.
    """

    starts_at: datetime.datetime | None = None
    ends_at: datetime.datetime | None = None
    enabled: bool | None = None
    name: LocalizedText | None = None
    description: LocalizedText | None = None
    summary: LocalizedText | None = None

    @field_validator("starts_at", "ends_at")
    @classmethod
    def normalise_timezone(cls, value: datetime.datetime | None) -> datetime.datetime | None:
        return to_naive_utc(value)


# ---------------------------------------------------------------------------
# Response schemas - read operations
# ---------------------------------------------------------------------------


class BudgetPhaseResponse(BaseModel):
    """Stored phase record, raw timestamps included."""

    id: int
    kind: str
    starts_at: datetime.datetime | None = None
    ends_at: datetime.datetime | None = None
    enabled: bool
    name: dict[str, str]
    description: dict[str, str]
    summary: dict[str, str]

    model_config = ConfigDict(from_attributes=True)


class BudgetResponse(BaseModel):
    """Full budget record returned by detail and write endpoints.

    Attributes:
        draft: True while ``published`` is not True.
        phase_label: Localized label of the current phase kind.
        has_winning_investments: Whether winners are already visible.
        winners_action: "calculate", "recalculate" or None when the
            current phase does not allow the calculation.
    """

    id: int
    name: dict[str, str]
    slug: str | None
    published: bool | None
    draft: bool
    phase: str
    phase_label: str
    voting_style: str
    results_enabled: bool
    stats_enabled: bool
    advanced_stats_enabled: bool
    starts_at: datetime.datetime | None = None
    ends_at: datetime.datetime | None = None
    has_winning_investments: bool
    winners_action: Literal["calculate", "recalculate"] | None = None
    phases: list[BudgetPhaseResponse]


class BudgetActionResponse(BaseModel):
    """Write-operation envelope: message plus the resulting budget."""

    message: str
    budget: BudgetResponse


class BudgetIndexRow(BaseModel):
    """One row of the admin budget list."""

    id: int
    name: str
    slug: str | None
    phase: str
    phase_label: str
    status: str
    phase_progress: str | None = None
    current_phase_number: int | None = None
    total_phases: int
    start_date: str
    end_date: str
    duration: str
    published: bool | None
    draft: bool


class BudgetIndexResponse(BaseModel):
    filter: BudgetFilter
    total: int
    summary: str
    rows: list[BudgetIndexRow]


class PhaseTableRow(BaseModel):
    """One row of a budget's phases table."""

    id: int
    kind: str
    name: str
    start_date: str
    end_date: str
    enabled: bool
    active: bool
    current: bool


class WinnersCalculationResponse(BaseModel):
    message: str
    budget_id: int
