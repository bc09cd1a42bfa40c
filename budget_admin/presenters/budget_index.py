"""Rows of the admin budget list."""

from __future__ import annotations

import logging

from budget_admin.models.budget import Budget
from budget_admin.presenters.dates import duration, end_date, start_date
from budget_admin.schemas.budget import (
    BudgetFilter,
    BudgetIndexResponse,
    BudgetIndexRow,
)
from budget_admin.services.phase_service import enabled_phase_ordinal, enabled_phases
from budget_admin.utils.i18n import localized, phase_label, translate, translate_count

logger = logging.getLogger(__name__)


class BudgetIndexPresenter:
    """Derives list rows (progress, dates, duration) for a set of budgets."""

    def __init__(self, budgets: list[Budget], locale: str | None = None):
        self.budgets = budgets
        self.locale = locale

    def phase_progress_text(self, budget: Budget) -> str | None:
        current = enabled_phase_ordinal(budget)
        if current is None:
            return None
        return translate(
            "index.phase_progress",
            self.locale,
            current=current,
            total=len(enabled_phases(budget)),
        )

    def status(self, budget: Budget) -> str:
        if budget.is_finished:
            return translate("index.completed", self.locale)
        return phase_label(budget.phase, self.locale)

    def row(self, budget: Budget) -> BudgetIndexRow:
        return BudgetIndexRow(
            id=budget.id,
            name=localized(budget.name, self.locale),
            slug=budget.slug,
            phase=budget.phase,
            phase_label=phase_label(budget.phase, self.locale),
            status=self.status(budget),
            phase_progress=self.phase_progress_text(budget),
            current_phase_number=enabled_phase_ordinal(budget),
            total_phases=len(enabled_phases(budget)),
            start_date=start_date(budget, self.locale),
            end_date=end_date(budget, self.locale),
            duration=duration(budget, self.locale),
            published=budget.published,
            draft=budget.is_draft,
        )

    def summary(self) -> str:
        if not self.budgets:
            return translate("index.empty", self.locale)
        return translate_count("index.count", len(self.budgets), self.locale)

    def render(self, budget_filter: BudgetFilter) -> BudgetIndexResponse:
        rows = [self.row(budget) for budget in self.budgets]
        logger.debug("BudgetIndexPresenter: filter=%s rows=%d", budget_filter, len(rows))
        return BudgetIndexResponse(
            filter=budget_filter,
            total=len(rows),
            summary=self.summary(),
            rows=rows,
        )
