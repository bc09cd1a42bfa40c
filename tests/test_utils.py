"""
Tests for the pure helpers in budget_admin.utils.
"""

from datetime import datetime, timedelta, timezone

import pytest

from budget_admin.utils.catalog import PhaseCatalog
from budget_admin.utils.dates import add_months, distance_of_time_in_words, to_naive_utc
from budget_admin.utils.i18n import localized, resolve_locale, translate
from budget_admin.utils.slugs import parameterize, unique_slug


class TestSlugs:
    def test_parameterize(self):
        assert parameterize("M30 - Summer campaign") == "m30-summer-campaign"
        assert parameterize("Presupuestos Participativos Año 2024!") == (
            "presupuestos-participativos-ano-2024"
        )

    def test_unique_slug(self):
        assert unique_slug("parks", set()) == "parks"
        assert unique_slug("parks", {"parks", "parks-2"}) == "parks-3"


class TestLocales:
    def test_resolve_locale(self):
        assert resolve_locale("es") == "es"
        assert resolve_locale("es-PE,es;q=0.9,en;q=0.8") == "es"
        assert resolve_locale("fr") == "en"
        assert resolve_locale(None) == "en"

    def test_translate_falls_back_to_default_locale_then_key(self):
        assert translate("index.completed", "fr") == "Completed"
        assert translate("no.such.key", "es") == "no.such.key"

    def test_localized_falls_back_to_default_locale(self):
        assert localized({"en": "Parks", "es": "Parques"}, "es") == "Parques"
        assert localized({"en": "Parks"}, "es") == "Parks"


class TestDistanceOfTimeInWords:
    START = datetime(2015, 1, 1)

    @pytest.mark.parametrize(
        "delta, words",
        [
            (timedelta(seconds=20), "less than a minute"),
            (timedelta(minutes=30), "30 minutes"),
            (timedelta(hours=5), "about 5 hours"),
            (timedelta(days=1), "1 day"),
            (timedelta(days=12), "12 days"),
            (timedelta(days=31), "about 1 month"),
            (timedelta(days=120), "4 months"),
            (timedelta(days=400), "about 1 year"),
            (timedelta(days=600), "over 1 year"),
            (timedelta(days=700), "almost 2 years"),
        ],
    )
    def test_thresholds(self, delta, words):
        assert distance_of_time_in_words(self.START, self.START + delta) == words

    def test_argument_order_does_not_matter(self):
        later = self.START + timedelta(days=12)

        assert distance_of_time_in_words(later, self.START) == "12 days"

    def test_spanish(self):
        words = distance_of_time_in_words(self.START, self.START + timedelta(days=12), "es")

        assert words == "12 días"

    def test_leap_days_do_not_push_years_over_the_quarter(self):
        start = datetime(2012, 1, 1)
        end = datetime(2020, 1, 1) + timedelta(minutes=130_000)

        assert distance_of_time_in_words(start, end) == "about 8 years"

    def test_year_spanning_a_leap_day(self):
        start = datetime(2016, 1, 1)

        assert distance_of_time_in_words(start, datetime(2016, 12, 31)) == "about 1 year"


class TestToNaiveUtc:
    def test_aware_value_is_shifted_to_utc(self):
        lima = timezone(timedelta(hours=-5))

        assert to_naive_utc(datetime(2015, 8, 19, 19, 0, tzinfo=lima)) == datetime(2015, 8, 20)

    def test_naive_and_missing_values_pass_through(self):
        assert to_naive_utc(datetime(2015, 8, 20)) == datetime(2015, 8, 20)
        assert to_naive_utc(None) is None


class TestAddMonths:
    def test_clamps_to_month_end(self):
        assert add_months(datetime(2015, 1, 31), 1) == datetime(2015, 2, 28)
        assert add_months(datetime(2016, 1, 31), 1) == datetime(2016, 2, 29)

    def test_crosses_year(self):
        assert add_months(datetime(2015, 11, 15, 10, 30), 3) == datetime(2016, 2, 15, 10, 30)


class TestPhaseCatalog:
    def test_rejects_duplicates(self):
        with pytest.raises(ValueError):
            PhaseCatalog.of(["informing", "informing"])

    def test_position_and_without(self):
        catalog = PhaseCatalog.of(["drafting", "informing", "finished"])

        assert catalog.position("informing") == 1
        assert catalog.without("drafting").kinds == ("informing", "finished")
        assert catalog.without("drafting").position("drafting") is None
