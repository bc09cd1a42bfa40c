"""
Tests for budget_admin.services.budget_service.

Covers the draft-on-create rule, name validation, slug regeneration while
in draft, the one-way publish, the destroy guards and lookups.
"""

import pytest

from budget_admin.exceptions import (
    HasAssociatedInvestments,
    HasAssociatedPoll,
    RecordNotFound,
    ValidationFailed,
    WinnersCalculationUnavailable,
)
from budget_admin.models import BudgetPhase, Investment, Poll
from budget_admin.schemas.budget import BudgetCreate, BudgetUpdate
from budget_admin.services import budget_service

LOCALES = ["en", "es"]


class TestCreateBudget:
    def test_always_created_as_draft(self, db_session, catalog):
        budget = budget_service.create_budget(
            db_session,
            BudgetCreate(name={"en": "M30 - Summer campaign"}, published=True),
            catalog,
            LOCALES,
        )

        assert budget.published in (None, False)
        assert budget.is_draft
        assert budget.slug == "m30-summer-campaign"
        assert budget.voting_style == "knapsack"
        assert len(budget.phases) == len(catalog)

    def test_phase_and_voting_style(self, db_session, catalog):
        budget = budget_service.create_budget(
            db_session,
            BudgetCreate(name={"en": "Approval"}, phase="accepting", voting_style="approval"),
            catalog,
            LOCALES,
        )

        assert budget.phase == "accepting"
        assert budget.voting_style == "approval"

    def test_name_is_mandatory(self, db_session, catalog):
        with pytest.raises(ValidationFailed) as exc_info:
            budget_service.create_budget(
                db_session, BudgetCreate(name={"es": "Solo español"}), catalog, LOCALES
            )

        assert exc_info.value.errors["name"] == ["can't be blank"]

    def test_name_must_be_unique(self, db_session, catalog, budget_factory):
        budget_factory(name="Existing Name")

        with pytest.raises(ValidationFailed) as exc_info:
            budget_service.create_budget(
                db_session, BudgetCreate(name={"en": "existing name"}), catalog, LOCALES
            )

        assert exc_info.value.errors["name"] == ["has already been taken"]

    def test_unknown_phase_and_voting_style(self, db_session, catalog):
        with pytest.raises(ValidationFailed) as exc_info:
            budget_service.create_budget(
                db_session,
                BudgetCreate(name={"en": "Bad"}, phase="drafting", voting_style="ranked"),
                catalog,
                LOCALES,
            )

        assert set(exc_info.value.errors) == {"phase", "voting_style"}

    def test_slug_collision_gets_suffix(self, db_session, catalog, budget_factory):
        budget_factory(name="Parks")

        budget = budget_service.create_budget(
            db_session, BudgetCreate(name={"en": "Parks!"}), catalog, LOCALES
        )

        assert budget.slug == "parks-2"


class TestUpdateBudget:
    def test_default_locale_name_change_regenerates_draft_slug(
        self, db_session, catalog, budget_factory
    ):
        budget = budget_factory(name="Old name", published=False)

        budget_service.update_budget(
            db_session, budget, BudgetUpdate(name={"en": "New English Name"}), catalog
        )

        assert budget.slug == "new-english-name"

    def test_other_locale_name_keeps_slug(self, db_session, catalog, budget_factory):
        budget = budget_factory(name="Old name", published=False)
        old_slug = budget.slug

        budget_service.update_budget(
            db_session, budget, BudgetUpdate(name={"es": "Spanish name"}), catalog
        )

        assert budget.slug == old_slug
        assert budget.name == {"en": "Old name", "es": "Spanish name"}

    def test_published_budget_keeps_slug(self, db_session, catalog, budget_factory):
        budget = budget_factory(name="Old name")
        budget_service.publish_budget(db_session, budget)
        old_slug = budget.slug

        budget_service.update_budget(
            db_session, budget, BudgetUpdate(name={"en": "Renamed"}), catalog
        )

        assert budget.name["en"] == "Renamed"
        assert budget.slug == old_slug

    def test_invalid_update_persists_nothing(self, db_session, catalog, budget_factory):
        budget_factory(name="Taken")
        budget = budget_factory(name="Mine")

        with pytest.raises(ValidationFailed):
            budget_service.update_budget(
                db_session,
                budget,
                BudgetUpdate(name={"en": "Taken"}, voting_style="approval"),
                catalog,
            )

        db_session.expire_all()
        assert budget.name == {"en": "Mine"}
        assert budget.voting_style == "knapsack"

    def test_blank_default_name_is_rejected(self, db_session, catalog, budget_factory):
        budget = budget_factory(name="Mine")

        with pytest.raises(ValidationFailed):
            budget_service.update_budget(
                db_session, budget, BudgetUpdate(name={"en": "  "}), catalog
            )

    def test_results_and_stats_flags(self, db_session, catalog, budget_factory):
        budget = budget_factory()

        budget_service.update_budget(
            db_session,
            budget,
            BudgetUpdate(results_enabled=True, advanced_stats_enabled=True),
            catalog,
        )

        assert budget.results_enabled is True
        assert budget.stats_enabled is False
        assert budget.advanced_stats_enabled is True


class TestPublishBudget:
    def test_publish(self, db_session, budget_factory):
        budget = budget_factory()

        budget_service.publish_budget(db_session, budget)

        assert budget.published is True
        assert not budget.is_draft


class TestDestroyBudget:
    def test_without_dependents_removes_budget_and_phases(self, db_session, budget_factory):
        budget = budget_factory()
        budget_id = budget.id

        budget_service.destroy_budget(db_session, budget)

        assert db_session.query(BudgetPhase).filter_by(budget_id=budget_id).count() == 0
        with pytest.raises(RecordNotFound):
            budget_service.find_budget(db_session, budget_id)

    def test_with_investment(self, db_session, budget_factory):
        budget = budget_factory()
        db_session.add(Investment(budget_id=budget.id, title="More trees"))
        db_session.commit()

        with pytest.raises(HasAssociatedInvestments):
            budget_service.destroy_budget(db_session, budget)

        assert budget_service.find_budget(db_session, budget.id) is budget

    def test_with_poll(self, db_session, budget_factory):
        budget = budget_factory()
        db_session.add(Poll(budget_id=budget.id, name="Final vote"))
        db_session.commit()

        with pytest.raises(HasAssociatedPoll):
            budget_service.destroy_budget(db_session, budget)

    def test_investments_are_checked_before_polls(self, db_session, budget_factory):
        budget = budget_factory()
        db_session.add(Investment(budget_id=budget.id, title="More trees"))
        db_session.add(Poll(budget_id=budget.id, name="Final vote"))
        db_session.commit()

        with pytest.raises(HasAssociatedInvestments):
            budget_service.destroy_budget(db_session, budget)


class TestLookupAndList:
    def test_find_by_slug_or_id(self, db_session, budget_factory):
        budget = budget_factory(name="Budget slug")

        assert budget_service.find_budget(db_session, "budget-slug") is budget
        assert budget_service.find_budget(db_session, str(budget.id)) is budget

    def test_unknown_slug_or_id(self, db_session, budget_factory):
        budget_factory()

        with pytest.raises(RecordNotFound):
            budget_service.find_budget(db_session, "wrong_budget")
        with pytest.raises(RecordNotFound):
            budget_service.find_budget(db_session, 0)

    def test_filters(self, db_session, budget_factory):
        accepting = budget_factory(phase="accepting")
        balloting = budget_factory(phase="balloting")
        finished = budget_factory(phase="finished")

        assert set(budget_service.list_budgets(db_session, "all")) == {
            accepting, balloting, finished,
        }
        assert set(budget_service.list_budgets(db_session, "open")) == {accepting, balloting}
        assert budget_service.list_budgets(db_session, "finished") == [finished]


class TestWinners:
    def test_only_while_reviewing_ballots_or_finished(self, budget_factory):
        with pytest.raises(WinnersCalculationUnavailable):
            budget_service.ensure_winners_calculable(budget_factory(phase="balloting"))

        budget_service.ensure_winners_calculable(budget_factory(phase="reviewing_ballots"))
        budget_service.ensure_winners_calculable(budget_factory(phase="finished"))

    def test_winners_action(self, db_session, budget_factory):
        budget = budget_factory(phase="finished")
        assert budget_service.build_budget_response(budget).winners_action == "calculate"

        db_session.add(Investment(budget_id=budget.id, title="Winner", winner=True))
        db_session.commit()
        db_session.expire_all()

        response = budget_service.build_budget_response(budget)
        assert response.has_winning_investments is True
        assert response.winners_action == "recalculate"

    def test_no_action_before_ballots_are_reviewed(self, budget_factory):
        response = budget_service.build_budget_response(budget_factory(phase="accepting"))

        assert response.winners_action is None
