"""
Tests for the budget index and phases table presenters.

Phases generated by ``budget_factory`` start on 2015-07-15 and last one
month each, so every displayed end date is the day before the next start.
"""

from datetime import datetime, timedelta

from budget_admin.presenters.budget_index import BudgetIndexPresenter
from budget_admin.presenters.budget_phases import BudgetPhasesPresenter
from budget_admin.presenters.dates import duration, end_date, start_date
from budget_admin.services import phase_service
from budget_admin.utils.dates import display_end


class TestDateWindow:
    def test_phase_dates(self, budget_factory):
        informing = budget_factory().phase_of_kind("informing")

        assert start_date(informing) == "July 15, 2015"
        assert end_date(informing) == "August 14, 2015"

    def test_spanish_dates(self, budget_factory):
        informing = budget_factory().phase_of_kind("informing")

        assert start_date(informing, "es") == "15 de julio de 2015"
        assert end_date(informing, "es") == "14 de agosto de 2015"

    def test_unset_dates_render_empty(self, budget_factory):
        informing = budget_factory().phase_of_kind("informing")
        informing.starts_at = None
        informing.ends_at = None

        assert start_date(informing) == ""
        assert end_date(informing) == ""

    def test_display_end_matches_next_start_minus_one_minute(self, budget_factory):
        phases = phase_service.enabled_phases(budget_factory())

        for current, following in zip(phases, phases[1:]):
            assert display_end(current.ends_at) == following.starts_at - timedelta(minutes=1)

    def test_stored_end_is_not_modified(self, budget_factory):
        informing = budget_factory().phase_of_kind("informing")

        end_date(informing)

        assert informing.ends_at == datetime(2015, 8, 15)

    def test_duration_uses_raw_timestamps(self, budget_factory):
        budget = budget_factory()

        assert duration(budget.phase_of_kind("informing")) == "about 1 month"
        assert duration(budget) == "9 months"
        assert duration(budget, "es") == "9 meses"


class TestBudgetIndexPresenter:
    def test_row(self, budget_factory):
        budget = budget_factory(name="Parks", phase="accepting")

        row = BudgetIndexPresenter([budget]).row(budget)

        assert row.name == "Parks"
        assert row.phase_label == "Accepting projects"
        assert row.status == "Accepting projects"
        assert row.phase_progress == "Phase 2 of 9"
        assert row.current_phase_number == 2
        assert row.total_phases == 9
        assert row.start_date == "July 15, 2015"
        assert row.end_date == "April 14, 2016"
        assert row.draft is True

    def test_progress_counts_enabled_phases_only(self, budget_factory, db_session):
        budget = budget_factory(phase="selecting")
        budget.phase_of_kind("reviewing").enabled = False
        db_session.commit()

        row = BudgetIndexPresenter([budget]).row(budget)

        assert row.phase_progress == "Phase 3 of 8"

    def test_no_progress_for_disabled_current_phase(self, budget_factory, db_session):
        budget = budget_factory(phase="selecting")
        budget.phase_of_kind("selecting").enabled = False
        db_session.commit()

        row = BudgetIndexPresenter([budget]).row(budget)

        assert row.phase_progress is None
        assert row.current_phase_number is None

    def test_finished_budget_is_completed(self, budget_factory):
        budget = budget_factory(phase="finished")

        presenter = BudgetIndexPresenter([budget], "es")

        assert presenter.row(budget).status == "Completado"

    def test_summary(self, budget_factory):
        assert BudgetIndexPresenter([]).summary() == "There are no budgets."
        budget = budget_factory()
        assert BudgetIndexPresenter([budget]).summary() == "There is 1 budget"


class TestBudgetPhasesPresenter:
    def test_rows_in_catalog_order(self, budget_factory):
        budget = budget_factory(phase="selecting")

        rows = BudgetPhasesPresenter(budget, as_of=datetime(2015, 7, 20)).rows()

        assert [row.name for row in rows][:4] == [
            "Information",
            "Accepting projects",
            "Reviewing projects",
            "Selecting projects",
        ]
        selecting = rows[3]
        assert selecting.start_date == "October 15, 2015"
        assert selecting.end_date == "November 14, 2015"
        assert selecting.current is True
        assert selecting.active is False
        assert rows[0].active is True
        assert rows[0].current is False

    def test_empty_name_falls_back_to_catalog_label(self, budget_factory):
        budget = budget_factory()
        budget.phase_of_kind("informing").name = {"en": ""}

        row = BudgetPhasesPresenter(budget, "es").rows()[0]

        assert row.name == "Información"
