"""Rows of a budget's phases table."""

from __future__ import annotations

import datetime

from budget_admin.models.budget import Budget
from budget_admin.models.budget_phase import BudgetPhase
from budget_admin.presenters.dates import end_date, start_date
from budget_admin.schemas.budget import PhaseTableRow
from budget_admin.services.phase_service import is_active
from budget_admin.utils.i18n import localized, phase_label


class BudgetPhasesPresenter:
    def __init__(
        self,
        budget: Budget,
        locale: str | None = None,
        as_of: datetime.datetime | None = None,
    ):
        self.budget = budget
        self.locale = locale
        self.as_of = as_of

    @property
    def phases(self) -> list[BudgetPhase]:
        return self.budget.phases

    def name(self, phase: BudgetPhase) -> str:
        return localized(phase.name, self.locale) or phase_label(phase.kind, self.locale)

    def row(self, phase: BudgetPhase) -> PhaseTableRow:
        return PhaseTableRow(
            id=phase.id,
            kind=phase.kind,
            name=self.name(phase),
            start_date=start_date(phase, self.locale),
            end_date=end_date(phase, self.locale),
            enabled=phase.enabled,
            active=is_active(phase, self.as_of),
            current=phase.kind == self.budget.phase,
        )

    def rows(self) -> list[PhaseTableRow]:
        return [self.row(phase) for phase in self.phases]
