"""
Phase sequence service - current-phase resolution and phase editing.

Functions here operate on a ``Budget`` and its loaded ``phases`` together
with an explicit ``PhaseCatalog``. Pure derivations (ordinal, activity,
first enabled kind) never touch the session; the write operations
(``generate_phases``, ``update_phase``) follow the usual service pattern
of validating first, then mutating, then committing.

Design notes
------------
- Phase order is creation order (``id``), which matches catalog order
  because phases are generated from the catalog in one pass.
- ``advance_or_fix_current_phase`` only acts on catalog drift: a budget
  whose current kind is still in the catalog is left alone, which makes
  the routine idempotent.
- Editing an enabled phase keeps the enabled sequence contiguous by
  moving the neighbouring boundaries (previous ``ends_at``, next
  ``starts_at``).
"""

from __future__ import annotations

import datetime
import logging

from sqlalchemy.orm import Session

from budget_admin.exceptions import RecordNotFound, ValidationFailed
from budget_admin.models.budget import Budget
from budget_admin.models.budget_phase import BudgetPhase
from budget_admin.schemas.budget import BudgetPhaseUpdate
from budget_admin.utils.catalog import PhaseCatalog
from budget_admin.utils.constants import (
    FALLBACK_PHASE_KIND,
    PHASE_DEFAULT_LENGTH_MONTHS,
)
from budget_admin.utils.dates import add_months, to_naive_utc
from budget_admin.utils.i18n import phase_label, translate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ordered_phases(budget: Budget) -> list[BudgetPhase]:
    # Unsaved phases have no id yet; keep their in-memory order.
    return sorted(budget.phases, key=lambda phase: phase.id or 0)


def _neighbour_enabled_phases(
    budget: Budget, phase: BudgetPhase
) -> tuple[BudgetPhase | None, BudgetPhase | None]:
    """Closest enabled phases before and after ``phase`` in sequence order."""
    ordered = _ordered_phases(budget)
    position = ordered.index(phase)
    previous = next(
        (p for p in reversed(ordered[:position]) if p.enabled), None
    )
    following = next((p for p in ordered[position + 1:] if p.enabled), None)
    return previous, following


def _merge_localized(
    current: dict[str, str] | None, updates: dict[str, str]
) -> dict[str, str]:
    merged = dict(current or {})
    merged.update(updates)
    return merged


# ---------------------------------------------------------------------------
# Derivations
# ---------------------------------------------------------------------------


def enabled_phases(budget: Budget) -> list[BudgetPhase]:
    """Enabled phases of ``budget`` in sequence order."""
    return [phase for phase in _ordered_phases(budget) if phase.enabled]


def enabled_phase_ordinal(budget: Budget) -> int | None:
    """1-based position of the current phase among enabled phases.

    Returns None when the current kind is disabled or missing, meaning
    there is no progress to display.
    """
    kinds = [phase.kind for phase in enabled_phases(budget)]
    try:
        return kinds.index(budget.phase) + 1
    except ValueError:
        logger.debug(
            "enabled_phase_ordinal: budget id=%s phase=%s not among enabled phases",
            budget.id, budget.phase,
        )
        return None


def first_enabled_phase(
    budget: Budget, catalog: PhaseCatalog
) -> BudgetPhase | None:
    """First enabled phase of ``budget`` walking the catalog in order."""
    by_kind = {phase.kind: phase for phase in budget.phases}
    for kind in catalog:
        phase = by_kind.get(kind)
        if phase is not None and phase.enabled:
            return phase
    return None


def is_active(
    phase: BudgetPhase, as_of: datetime.datetime | None = None
) -> bool:
    """True when ``phase`` is enabled and ``as_of`` falls in its window.

    An aware ``as_of`` is compared in UTC.
    """
    if not phase.enabled or phase.starts_at is None or phase.ends_at is None:
        return False
    moment = to_naive_utc(as_of or datetime.datetime.now(datetime.timezone.utc))
    return phase.starts_at <= moment < phase.ends_at


# ---------------------------------------------------------------------------
# Current-phase resolution
# ---------------------------------------------------------------------------


def advance_or_fix_current_phase(budget: Budget, catalog: PhaseCatalog) -> bool:
    """Repair a budget whose current phase kind left the catalog.

    The budget moves to its first enabled phase in catalog order. When no
    phase is enabled it moves to the fallback kind ("informing"), whose
    phase record is enabled. Any repaired budget becomes an explicit draft.

    Does not commit. Returns True when something changed.
    """
    if budget.phase in catalog:
        return False

    previous_kind = budget.phase
    target = first_enabled_phase(budget, catalog)
    if target is not None:
        budget.phase = target.kind
    else:
        budget.phase = FALLBACK_PHASE_KIND
        fallback = budget.phase_of_kind(FALLBACK_PHASE_KIND)
        if fallback is not None:
            fallback.enabled = True
        else:
            logger.warning(
                "advance_or_fix_current_phase: budget id=%s has no '%s' phase record",
                budget.id, FALLBACK_PHASE_KIND,
            )

    if budget.published is not False:
        budget.published = False

    logger.info(
        "advance_or_fix_current_phase: budget id=%s phase %s -> %s",
        budget.id, previous_kind, budget.phase,
    )
    return True


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------


def generate_phases(
    budget: Budget,
    catalog: PhaseCatalog,
    locales: list[str],
    start: datetime.datetime | None = None,
) -> list[BudgetPhase]:
    """Create one enabled phase per catalog kind, one month each.

    The first phase starts at ``start`` (default: today at midnight UTC) and
    every following phase starts where the previous one ends. Names are
    the canonical labels for each locale in ``locales``. Does not commit.
    """
    if start is None:
        today = datetime.datetime.now(datetime.timezone.utc).date()
        start = datetime.datetime.combine(today, datetime.time.min)

    phases: list[BudgetPhase] = []
    starts_at = start
    for kind in catalog:
        ends_at = add_months(starts_at, PHASE_DEFAULT_LENGTH_MONTHS)
        phase = BudgetPhase(
            kind=kind,
            starts_at=starts_at,
            ends_at=ends_at,
            enabled=True,
            name={locale: phase_label(kind, locale) for locale in locales},
            description={},
            summary={},
            summary_merged_locales=[],
        )
        budget.phases.append(phase)
        phases.append(phase)
        starts_at = ends_at

    logger.debug(
        "generate_phases: budget=%s kinds=%d start=%s",
        budget.slug, len(phases), start.isoformat(),
    )
    return phases


def get_phase(budget: Budget, phase_id: int) -> BudgetPhase:
    """Return the phase ``phase_id`` owned by ``budget``.

    Raises:
        RecordNotFound: If the budget has no such phase.
    """
    phase = next((p for p in budget.phases if p.id == phase_id), None)
    if phase is None:
        raise RecordNotFound("BudgetPhase", phase_id)
    return phase


def update_phase(
    db: Session,
    budget: Budget,
    phase_id: int,
    data: BudgetPhaseUpdate,
    locale: str | None = None,
) -> BudgetPhase:
    """Apply a partial update to one phase and keep neighbours contiguous.

    Args:
        db: Active SQLAlchemy session.
        budget: Owner of the phase.
        phase_id: Primary key of the phase to edit.
        data: Validated partial-update payload.
        locale: Locale for validation messages.

    Returns:
        The updated and refreshed ``BudgetPhase``.

    Raises:
        RecordNotFound: If the phase does not belong to ``budget``.
        ValidationFailed: If the resulting window is empty or would
            overlap the neighbouring enabled phases.
    """
    phase = get_phase(budget, phase_id)

    starts_at = data.starts_at if data.starts_at is not None else phase.starts_at
    ends_at = data.ends_at if data.ends_at is not None else phase.ends_at
    enabled = data.enabled if data.enabled is not None else phase.enabled
    was_enabled = phase.enabled

    errors: dict[str, list[str]] = {}
    if starts_at is not None and ends_at is not None and starts_at >= ends_at:
        errors.setdefault("ends_at", []).append(translate("errors.invalid_range", locale))

    previous, following = _neighbour_enabled_phases(budget, phase)
    if enabled:
        if (
            previous is not None
            and previous.starts_at is not None
            and starts_at is not None
            and starts_at <= previous.starts_at
        ):
            errors.setdefault("starts_at", []).append(translate("errors.prev_phase", locale))
        if (
            following is not None
            and following.ends_at is not None
            and ends_at is not None
            and ends_at >= following.ends_at
        ):
            errors.setdefault("ends_at", []).append(translate("errors.next_phase", locale))

    if errors:
        logger.warning(
            "update_phase: budget id=%d phase id=%d rejected errors=%s",
            budget.id, phase_id, errors,
        )
        raise ValidationFailed(errors)

    phase.starts_at = starts_at
    phase.ends_at = ends_at
    phase.enabled = enabled
    if data.name is not None:
        phase.name = _merge_localized(phase.name, data.name)
    if data.description is not None:
        phase.description = _merge_localized(phase.description, data.description)
    if data.summary is not None:
        phase.summary = _merge_localized(phase.summary, data.summary)

    if enabled:
        if following is not None:
            following.starts_at = ends_at
        if previous is not None:
            previous.ends_at = starts_at
    elif was_enabled and following is not None:
        following.starts_at = starts_at

    db.commit()
    db.refresh(phase)

    logger.info(
        "update_phase: budget id=%d phase id=%d kind=%s fields=%s",
        budget.id, phase.id, phase.kind,
        list(data.model_dump(exclude_none=True).keys()),
    )
    return phase
