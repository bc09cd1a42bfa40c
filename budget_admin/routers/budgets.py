"""
Participatory budgets admin router.

Mounts under ``/api/admin/budgets`` (prefix set in ``main.py``).

Every endpoint is gated by the ``BUDGETS_ENABLED`` feature flag
(``require_budgets_enabled``); when it is off the request fails with
``FeatureDisabled`` before any lookup happens. Budgets are addressed by
slug or numeric id.

The response language follows the ``locale`` query parameter, then the
``Accept-Language`` header, then the configured default.

Endpoints
---------
GET    /                          - Budget list filtered by all/open/finished.
POST   /                          - Create a draft budget with its phases.
GET    /{budget}                  - Budget detail.
PUT    /{budget}                  - Partial update.
DELETE /{budget}                  - Delete (guarded by investments / polls).
POST   /{budget}/publish          - Publish (one-way).
GET    /{budget}/phases           - Phases table.
PUT    /{budget}/phases/{phase}   - Edit one phase.
POST   /{budget}/winners          - Trigger winner calculation in background.
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Path, Query, Request
from sqlalchemy.orm import Session

from budget_admin.config import Settings, get_settings
from budget_admin.database import get_db
from budget_admin.exceptions import FeatureDisabled, WinnersCalculationUnavailable
from budget_admin.presenters.budget_index import BudgetIndexPresenter
from budget_admin.presenters.budget_phases import BudgetPhasesPresenter
from budget_admin.schemas.budget import (
    BudgetActionResponse,
    BudgetCreate,
    BudgetFilter,
    BudgetIndexResponse,
    BudgetPhaseResponse,
    BudgetPhaseUpdate,
    BudgetResponse,
    BudgetUpdate,
    PhaseTableRow,
    WinnersCalculationResponse,
)
from budget_admin.schemas.common import MessageResponse
from budget_admin.services import budget_service, phase_service
from budget_admin.services.budget_service import WinnerCalculator
from budget_admin.utils.catalog import PhaseCatalog, get_phase_catalog
from budget_admin.utils.constants import BUDGETS_FEATURE
from budget_admin.utils.i18n import resolve_locale, translate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared dependencies
# ---------------------------------------------------------------------------


def require_budgets_enabled(
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Stop the request when budget administration is switched off."""
    if not settings.BUDGETS_ENABLED:
        raise FeatureDisabled(BUDGETS_FEATURE)


def get_locale(
    locale: Annotated[
        str | None,
        Query(description="Response locale, e.g. 'en' or 'es'.", max_length=10),
    ] = None,
    accept_language: Annotated[str | None, Header()] = None,
) -> str:
    return resolve_locale(locale or accept_language)


def get_winner_calculator(request: Request) -> WinnerCalculator | None:
    """External winner calculator registered on ``app.state``, if any."""
    return getattr(request.app.state, "winner_calculator", None)


router = APIRouter(
    tags=["Budgets"],
    dependencies=[Depends(require_budgets_enabled)],
)

DbSession = Annotated[Session, Depends(get_db)]
Catalog = Annotated[PhaseCatalog, Depends(get_phase_catalog)]
Locale = Annotated[str, Depends(get_locale)]
BudgetRef = Annotated[
    str, Path(description="Budget slug or numeric id.", max_length=200)
]


# ---------------------------------------------------------------------------
# GET /
# ---------------------------------------------------------------------------


@router.get(
    "/",
    response_model=BudgetIndexResponse,
    summary="List budgets",
    responses={403: {"description": "Budget administration is disabled."}},
)
def list_budgets(
    db: DbSession,
    locale: Locale,
    budget_filter: Annotated[
        BudgetFilter,
        Query(alias="filter", description="all, open (not finished) or finished."),
    ] = "all",
) -> BudgetIndexResponse:
    logger.debug("GET /admin/budgets filter=%s locale=%s", budget_filter, locale)
    budgets = budget_service.list_budgets(db, budget_filter)
    return BudgetIndexPresenter(budgets, locale).render(budget_filter)


# ---------------------------------------------------------------------------
# POST /
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=BudgetActionResponse,
    status_code=201,
    summary="Create a draft budget",
    description=(
        "Creates a budget and one phase per catalog kind. The budget is "
        "always created as a draft, whatever ``published`` says."
    ),
    responses={422: {"description": "Blank or duplicate name, unknown phase."}},
)
def create_budget(
    data: BudgetCreate,
    db: DbSession,
    catalog: Catalog,
    locale: Locale,
    settings: Annotated[Settings, Depends(get_settings)],
) -> BudgetActionResponse:
    logger.info("POST /admin/budgets phase=%s", data.phase)
    budget = budget_service.create_budget(
        db, data, catalog, settings.AVAILABLE_LOCALES, locale=locale
    )
    return BudgetActionResponse(
        message=translate("budget.created", locale),
        budget=budget_service.build_budget_response(budget, locale),
    )


# ---------------------------------------------------------------------------
# GET /{budget}
# ---------------------------------------------------------------------------


@router.get(
    "/{budget_ref}",
    response_model=BudgetResponse,
    summary="Budget detail",
    responses={404: {"description": "Unknown slug or id."}},
)
def get_budget(budget_ref: BudgetRef, db: DbSession, locale: Locale) -> BudgetResponse:
    budget = budget_service.find_budget(db, budget_ref)
    return budget_service.build_budget_response(budget, locale)


# ---------------------------------------------------------------------------
# PUT /{budget}
# ---------------------------------------------------------------------------


@router.put(
    "/{budget_ref}",
    response_model=BudgetActionResponse,
    summary="Update a budget",
    responses={
        404: {"description": "Unknown slug or id."},
        422: {"description": "Blank or duplicate name, unknown phase."},
    },
)
def update_budget(
    budget_ref: BudgetRef,
    data: BudgetUpdate,
    db: DbSession,
    catalog: Catalog,
    locale: Locale,
) -> BudgetActionResponse:
    logger.info("PUT /admin/budgets/%s", budget_ref)
    budget = budget_service.find_budget(db, budget_ref)
    budget = budget_service.update_budget(db, budget, data, catalog, locale=locale)
    return BudgetActionResponse(
        message=translate("budget.updated", locale),
        budget=budget_service.build_budget_response(budget, locale),
    )


# ---------------------------------------------------------------------------
# DELETE /{budget}
# ---------------------------------------------------------------------------


@router.delete(
    "/{budget_ref}",
    response_model=MessageResponse,
    summary="Delete a budget",
    responses={
        404: {"description": "Unknown slug or id."},
        409: {"description": "The budget has investments or a poll."},
    },
)
def destroy_budget(budget_ref: BudgetRef, db: DbSession, locale: Locale) -> MessageResponse:
    logger.info("DELETE /admin/budgets/%s", budget_ref)
    budget = budget_service.find_budget(db, budget_ref)
    budget_service.destroy_budget(db, budget)
    return MessageResponse(message=translate("budget.destroyed", locale))


# ---------------------------------------------------------------------------
# POST /{budget}/publish
# ---------------------------------------------------------------------------


@router.post(
    "/{budget_ref}/publish",
    response_model=BudgetActionResponse,
    summary="Publish a budget",
    description="One-way transition; there is no unpublish endpoint.",
    responses={404: {"description": "Unknown slug or id."}},
)
def publish_budget(budget_ref: BudgetRef, db: DbSession, locale: Locale) -> BudgetActionResponse:
    logger.info("POST /admin/budgets/%s/publish", budget_ref)
    budget = budget_service.find_budget(db, budget_ref)
    budget = budget_service.publish_budget(db, budget)
    return BudgetActionResponse(
        message=translate("budget.published", locale),
        budget=budget_service.build_budget_response(budget, locale),
    )


# ---------------------------------------------------------------------------
# GET /{budget}/phases
# ---------------------------------------------------------------------------


@router.get(
    "/{budget_ref}/phases",
    response_model=list[PhaseTableRow],
    summary="Phases table",
    responses={404: {"description": "Unknown slug or id."}},
)
def list_phases(
    budget_ref: BudgetRef,
    db: DbSession,
    locale: Locale,
    as_of: Annotated[
        datetime.datetime | None,
        Query(description="Moment used for the 'active' column. Defaults to now."),
    ] = None,
) -> list[PhaseTableRow]:
    budget = budget_service.find_budget(db, budget_ref)
    return BudgetPhasesPresenter(budget, locale, as_of=as_of).rows()


# ---------------------------------------------------------------------------
# PUT /{budget}/phases/{phase_id}
# ---------------------------------------------------------------------------


@router.put(
    "/{budget_ref}/phases/{phase_id}",
    response_model=BudgetPhaseResponse,
    summary="Edit a phase",
    responses={
        404: {"description": "Unknown budget or phase."},
        422: {"description": "Empty or overlapping date range."},
    },
)
def update_phase(
    budget_ref: BudgetRef,
    phase_id: Annotated[int, Path(description="Phase id.", ge=1)],
    data: BudgetPhaseUpdate,
    db: DbSession,
    locale: Locale,
) -> BudgetPhaseResponse:
    logger.info("PUT /admin/budgets/%s/phases/%d", budget_ref, phase_id)
    budget = budget_service.find_budget(db, budget_ref)
    phase = phase_service.update_phase(db, budget, phase_id, data, locale=locale)
    return BudgetPhaseResponse.model_validate(phase)


# ---------------------------------------------------------------------------
# POST /{budget}/winners
# ---------------------------------------------------------------------------


@router.post(
    "/{budget_ref}/winners",
    response_model=WinnersCalculationResponse,
    status_code=202,
    summary="Calculate winner investments",
    description=(
        "Schedules the winner calculation in the background. Allowed only "
        "while reviewing ballots or once finished."
    ),
    responses={
        404: {"description": "Unknown slug or id."},
        409: {"description": "Phase does not allow the calculation."},
    },
)
def calculate_winners(
    budget_ref: BudgetRef,
    db: DbSession,
    locale: Locale,
    background_tasks: BackgroundTasks,
    calculator: Annotated[WinnerCalculator | None, Depends(get_winner_calculator)],
) -> WinnersCalculationResponse:
    budget = budget_service.find_budget(db, budget_ref)
    budget_service.ensure_winners_calculable(budget, locale)
    if calculator is None:
        raise WinnersCalculationUnavailable(
            budget.id, "No winner calculator is configured"
        )

    background_tasks.add_task(
        budget_service.run_winner_calculation, calculator, budget.id
    )
    logger.info("POST /admin/budgets/%s/winners scheduled", budget_ref)
    return WinnersCalculationResponse(
        message=translate("budget.winners_calculating", locale),
        budget_id=budget.id,
    )
