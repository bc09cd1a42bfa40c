"""
Participatory budgets - service layer.

All database access for the ``/api/admin/budgets`` endpoints lives here.
Functions receive a SQLAlchemy ``Session`` and raise the typed errors from
``budget_admin.exceptions``; the HTTP mapping happens in ``main.py``.

Design notes
------------
- Validation runs before any attribute is touched, so a failed create or
  update never leaves pending changes in the session.
- New budgets are always drafts (``published=False``) whatever the payload
  says; ``publish_budget`` is the only way to publish and there is no way
  back through this layer.
- The slug follows the default-locale name only while the budget is a
  draft. Published budgets keep their slug forever.
- Destruction is guarded: investments are checked before polls.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from budget_admin.exceptions import (
    HasAssociatedInvestments,
    HasAssociatedPoll,
    RecordNotFound,
    ValidationFailed,
    WinnersCalculationUnavailable,
)
from budget_admin.models.budget import Budget
from budget_admin.models.investment import Investment
from budget_admin.models.poll import Poll
from budget_admin.schemas.budget import (
    BudgetCreate,
    BudgetFilter,
    BudgetPhaseResponse,
    BudgetResponse,
    BudgetUpdate,
)
from budget_admin.services import phase_service
from budget_admin.utils.catalog import PhaseCatalog
from budget_admin.utils.constants import (
    FINISHED,
    VOTING_STYLES,
    WINNERS_PHASE_KINDS,
)
from budget_admin.utils.i18n import default_locale, phase_label, translate
from budget_admin.utils.slugs import parameterize, unique_slug

logger = logging.getLogger(__name__)

# Receives the budget id; runs outside the request.
WinnerCalculator = Callable[[int], None]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalized_names(names: dict[str, str]) -> set[str]:
    return {value.strip().lower() for value in names.values() if value and value.strip()}


def _validate_name(
    db: Session,
    names: dict[str, str],
    locale: str | None,
    exclude_id: int | None = None,
) -> list[str]:
    """Return the error messages for ``names`` (empty when valid).

    The default-locale entry is required; no locale entry may match a name
    of another budget, case-insensitively.
    """
    messages: list[str] = []
    if not (names.get(default_locale()) or "").strip():
        messages.append(translate("errors.blank", locale))
        return messages

    wanted = _normalized_names(names)
    query = db.query(Budget.id, Budget.name)
    if exclude_id is not None:
        query = query.filter(Budget.id != exclude_id)
    for row in query.all():
        if wanted & _normalized_names(row.name or {}):
            messages.append(translate("errors.taken", locale))
            break
    return messages


def _validate_choices(
    data: BudgetCreate | BudgetUpdate,
    catalog: PhaseCatalog,
    locale: str | None,
    errors: dict[str, list[str]],
) -> None:
    if data.phase is not None and data.phase not in catalog:
        errors.setdefault("phase", []).append(translate("errors.inclusion", locale))
    if data.voting_style is not None and data.voting_style not in VOTING_STYLES:
        errors.setdefault("voting_style", []).append(translate("errors.inclusion", locale))


def _generate_slug(db: Session, name: str, exclude_id: int | None = None) -> str:
    query = db.query(Budget.slug).filter(Budget.slug.isnot(None))
    if exclude_id is not None:
        query = query.filter(Budget.id != exclude_id)
    taken = {row.slug for row in query.all()}
    return unique_slug(parameterize(name) or "budget", taken)


def _winners_action(budget: Budget) -> str | None:
    if budget.phase not in WINNERS_PHASE_KINDS:
        return None
    return "recalculate" if budget.has_winning_investments else "calculate"


def build_budget_response(budget: Budget, locale: str | None = None) -> BudgetResponse:
    """Convert a ``Budget`` ORM instance into a ``BudgetResponse``."""
    return BudgetResponse(
        id=budget.id,
        name=dict(budget.name or {}),
        slug=budget.slug,
        published=budget.published,
        draft=budget.is_draft,
        phase=budget.phase,
        phase_label=phase_label(budget.phase, locale),
        voting_style=budget.voting_style,
        results_enabled=budget.results_enabled,
        stats_enabled=budget.stats_enabled,
        advanced_stats_enabled=budget.advanced_stats_enabled,
        starts_at=budget.starts_at,
        ends_at=budget.ends_at,
        has_winning_investments=budget.has_winning_investments,
        winners_action=_winners_action(budget),
        phases=[BudgetPhaseResponse.model_validate(p) for p in budget.phases],
    )


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


def list_budgets(db: Session, budget_filter: BudgetFilter = "all") -> list[Budget]:
    """Return budgets newest first, narrowed by ``budget_filter``.

    "open" keeps every budget whose current phase is not finished,
    "finished" keeps the complement.
    """
    query = db.query(Budget)
    if budget_filter == "open":
        query = query.filter(Budget.phase != FINISHED)
    elif budget_filter == "finished":
        query = query.filter(Budget.phase == FINISHED)
    budgets = query.order_by(Budget.id.desc()).all()
    logger.debug("list_budgets: filter=%s total=%d", budget_filter, len(budgets))
    return budgets


def find_budget(db: Session, slug_or_id: str | int) -> Budget:
    """Look a budget up by slug first, then by numeric id.

    Raises:
        RecordNotFound: If neither lookup matches.
    """
    budget = db.query(Budget).filter(Budget.slug == str(slug_or_id)).first()
    if budget is None and str(slug_or_id).isdigit():
        budget = db.get(Budget, int(slug_or_id))
    if budget is None:
        raise RecordNotFound("Budget", slug_or_id)
    return budget


def create_budget(
    db: Session,
    data: BudgetCreate,
    catalog: PhaseCatalog,
    locales: list[str],
    locale: str | None = None,
    start: datetime.datetime | None = None,
) -> Budget:
    """Create a draft budget together with one phase per catalog kind.

    Args:
        db: Active SQLAlchemy session.
        data: Validated creation payload; ``data.published`` is ignored.
        catalog: Phase catalog used to generate the phases.
        locales: Locales for which canonical phase names are stored.
        locale: Locale for validation messages.
        start: Start of the first phase (default: today).

    Returns:
        The freshly created and refreshed ``Budget``.

    Raises:
        ValidationFailed: Blank or duplicate name, unknown phase or
            voting style.
    """
    errors: dict[str, list[str]] = {}
    name_errors = _validate_name(db, data.name, locale)
    if name_errors:
        errors["name"] = name_errors
    _validate_choices(data, catalog, locale, errors)
    if errors:
        logger.warning("create_budget: rejected errors=%s", errors)
        raise ValidationFailed(errors)

    budget = Budget(
        name=dict(data.name),
        phase=data.phase or next(iter(catalog)),
        voting_style=data.voting_style,
        published=False,
        results_enabled=False,
        stats_enabled=False,
        advanced_stats_enabled=False,
    )
    budget.slug = _generate_slug(db, data.name[default_locale()])
    phase_service.generate_phases(budget, catalog, locales, start=start)

    db.add(budget)
    db.commit()
    db.refresh(budget)

    logger.info(
        "create_budget: created id=%d slug=%s phase=%s",
        budget.id, budget.slug, budget.phase,
    )
    return budget


def update_budget(
    db: Session,
    budget: Budget,
    data: BudgetUpdate,
    catalog: PhaseCatalog,
    locale: str | None = None,
) -> Budget:
    """Apply a partial update to ``budget``.

    Name entries are merged per locale. The slug is regenerated only when
    the budget is still a draft and its default-locale name changed.

    Raises:
        ValidationFailed: Blank or duplicate name, unknown phase or
            voting style.
    """
    errors: dict[str, list[str]] = {}
    new_names: dict[str, str] | None = None
    if data.name is not None:
        new_names = dict(budget.name or {})
        new_names.update(data.name)
        name_errors = _validate_name(db, new_names, locale, exclude_id=budget.id)
        if name_errors:
            errors["name"] = name_errors
    _validate_choices(data, catalog, locale, errors)
    if errors:
        logger.warning("update_budget: id=%d rejected errors=%s", budget.id, errors)
        raise ValidationFailed(errors)

    if new_names is not None:
        default = default_locale()
        default_name_changed = new_names.get(default) != (budget.name or {}).get(default)
        budget.name = new_names
        if budget.is_draft and default_name_changed:
            budget.slug = _generate_slug(db, new_names[default], exclude_id=budget.id)

    update_data = data.model_dump(exclude_none=True, exclude={"name"})
    for field, value in update_data.items():
        setattr(budget, field, value)

    db.commit()
    db.refresh(budget)

    logger.info(
        "update_budget: id=%d slug=%s fields=%s",
        budget.id, budget.slug, list(data.model_dump(exclude_none=True).keys()),
    )
    return budget


def publish_budget(db: Session, budget: Budget) -> Budget:
    """Publish ``budget``; its slug is frozen from now on."""
    budget.published = True
    db.commit()
    db.refresh(budget)
    logger.info("publish_budget: id=%d slug=%s", budget.id, budget.slug)
    return budget


def destroy_budget(db: Session, budget: Budget) -> None:
    """Delete ``budget`` and its phases unless dependents exist.

    Raises:
        HasAssociatedInvestments: The budget has at least one investment.
        HasAssociatedPoll: The budget has a poll.
    """
    investments: int = (
        db.query(func.count(Investment.id))
        .filter(Investment.budget_id == budget.id)
        .scalar()
        or 0
    )
    if investments:
        logger.warning(
            "destroy_budget: id=%d blocked by %d investments", budget.id, investments
        )
        raise HasAssociatedInvestments(budget.id)

    has_poll = (
        db.query(Poll.id).filter(Poll.budget_id == budget.id).first() is not None
    )
    if has_poll:
        logger.warning("destroy_budget: id=%d blocked by poll", budget.id)
        raise HasAssociatedPoll(budget.id)

    budget_id = budget.id
    db.delete(budget)
    db.commit()
    logger.info("destroy_budget: deleted id=%d", budget_id)


def ensure_winners_calculable(budget: Budget, locale: str | None = None) -> None:
    """Check that the current phase allows computing winner investments.

    Raises:
        WinnersCalculationUnavailable: Phase is neither reviewing ballots
            nor finished.
    """
    if budget.phase not in WINNERS_PHASE_KINDS:
        raise WinnersCalculationUnavailable(
            budget.id,
            f"Winners cannot be calculated during phase "
            f"'{phase_label(budget.phase, locale)}'",
        )


def run_winner_calculation(calculator: WinnerCalculator, budget_id: int) -> None:
    """Background entry point wrapping the external calculator."""
    logger.info("run_winner_calculation: budget id=%d started", budget_id)
    calculator(budget_id)
    logger.info("run_winner_calculation: budget id=%d finished", budget_id)
