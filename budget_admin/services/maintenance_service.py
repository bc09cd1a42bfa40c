"""
Out-of-band maintenance routines for budgets and their phases.

Each routine receives a session (and the catalog where relevant), applies
its fix-up to every matching row, commits once and returns the number of
records it changed. Re-running a routine is safe:

- ``set_published`` only visits budgets whose ``published`` is unset, and
  every visit decides it.
- ``backfill_phase_descriptions`` records each merged locale in
  ``BudgetPhase.summary_merged_locales`` and skips it afterwards.
- ``backfill_phase_names`` only fills empty names.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from budget_admin.models.budget import Budget
from budget_admin.models.budget_phase import BudgetPhase
from budget_admin.services import phase_service
from budget_admin.utils.catalog import PhaseCatalog
from budget_admin.utils.constants import DRAFTING, SUMMARY_SEPARATOR
from budget_admin.utils.i18n import default_locale, phase_label

logger = logging.getLogger(__name__)


def set_published(db: Session, catalog: PhaseCatalog) -> int:
    """Decide ``published`` for every budget where it is still unset.

    Budgets sitting in the retired drafting kind (or any kind no longer in
    the catalog) are moved to a valid phase and kept as drafts; every
    other budget becomes published.
    """
    budgets = db.query(Budget).filter(Budget.published.is_(None)).all()
    for budget in budgets:
        if budget.phase == DRAFTING or budget.phase not in catalog:
            phase_service.advance_or_fix_current_phase(budget, catalog)
            budget.published = False
        else:
            budget.published = True
        logger.info(
            "set_published: budget id=%d phase=%s published=%s",
            budget.id, budget.phase, budget.published,
        )

    db.commit()
    return len(budgets)


def backfill_phase_descriptions(db: Session) -> int:
    """Append each locale's summary to that locale's description, once.

    Locales without a summary are left untouched; a locale whose summary
    was already merged is skipped on later runs.
    """
    changed = 0
    for phase in db.query(BudgetPhase).order_by(BudgetPhase.id).all():
        merged = set(phase.summary_merged_locales or [])
        pending = [
            locale
            for locale, summary in (phase.summary or {}).items()
            if summary and locale not in merged
        ]
        if not pending:
            continue

        description = dict(phase.description or {})
        for locale in pending:
            current = description.get(locale) or ""
            summary = phase.summary[locale]
            description[locale] = (
                f"{current}{SUMMARY_SEPARATOR}{summary}" if current else summary
            )
        phase.description = description
        phase.summary_merged_locales = sorted(merged | set(pending))
        changed += 1
        logger.info(
            "backfill_phase_descriptions: phase id=%d locales=%s",
            phase.id, pending,
        )

    db.commit()
    return changed


def backfill_phase_names(db: Session, locales: list[str] | None = None) -> int:
    """Fill empty phase names with the canonical label of their kind.

    Args:
        db: Active SQLAlchemy session.
        locales: Locales to fill; defaults to the default locale only.
    """
    locales = locales or [default_locale()]
    changed = 0
    for phase in db.query(BudgetPhase).order_by(BudgetPhase.id).all():
        names = dict(phase.name or {})
        missing = [locale for locale in locales if not (names.get(locale) or "").strip()]
        if not missing:
            continue
        for locale in missing:
            names[locale] = phase_label(phase.kind, locale)
        phase.name = names
        changed += 1
        logger.info(
            "backfill_phase_names: phase id=%d kind=%s locales=%s",
            phase.id, phase.kind, missing,
        )

    db.commit()
    return changed
