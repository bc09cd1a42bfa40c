"""
Locale resolution and the built-in string catalog.

Strings are looked up by dotted key; missing keys and unknown locales fall
back to the configured default locale, then to the key itself so a missing
translation never breaks a response.

Count-dependent strings are stored as ``<key>.one`` / ``<key>.other`` and
resolved through ``translate_count``.
"""

from __future__ import annotations

import logging

from budget_admin.config import get_settings

logger = logging.getLogger(__name__)

_TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        # Canonical phase labels
        "phase.drafting": "Drafting (Not visible to the public)",
        "phase.informing": "Information",
        "phase.accepting": "Accepting projects",
        "phase.reviewing": "Reviewing projects",
        "phase.selecting": "Selecting projects",
        "phase.valuating": "Valuating projects",
        "phase.publishing_prices": "Publishing projects prices",
        "phase.balloting": "Voting projects",
        "phase.reviewing_ballots": "Reviewing voting",
        "phase.finished": "Finished budget",
        # Index
        "index.completed": "Completed",
        "index.phase_progress": "Phase {current} of {total}",
        "index.empty": "There are no budgets.",
        "index.count.one": "There is 1 budget",
        "index.count.other": "There are {count} budgets",
        # Flash-style messages
        "budget.created": "New participatory budget created successfully!",
        "budget.updated": "Participatory budget updated successfully",
        "budget.published": "Participatory budget published successfully",
        "budget.destroyed": "Budget deleted successfully",
        "budget.draft_notice": "This participatory budget is in draft mode",
        "budget.winners_calculating": "Winners being calculated, it may take a minute.",
        "phase.updated": "Changes saved",
        # Validation
        "errors.blank": "can't be blank",
        "errors.taken": "has already been taken",
        "errors.inclusion": "is not included in the list",
        "errors.invalid_range": "must be after the start date",
        "errors.prev_phase": "must be after the start date of the previous enabled phase",
        "errors.next_phase": "must be before the end date of the next enabled phase",
        # Months
        "month.1": "January",
        "month.2": "February",
        "month.3": "March",
        "month.4": "April",
        "month.5": "May",
        "month.6": "June",
        "month.7": "July",
        "month.8": "August",
        "month.9": "September",
        "month.10": "October",
        "month.11": "November",
        "month.12": "December",
        "date.long": "{month} {day:02d}, {year}",
        # Distance of time in words
        "duration.less_than_x_minutes.one": "less than a minute",
        "duration.less_than_x_minutes.other": "less than {count} minutes",
        "duration.x_minutes.one": "1 minute",
        "duration.x_minutes.other": "{count} minutes",
        "duration.about_x_hours.one": "about 1 hour",
        "duration.about_x_hours.other": "about {count} hours",
        "duration.x_days.one": "1 day",
        "duration.x_days.other": "{count} days",
        "duration.about_x_months.one": "about 1 month",
        "duration.about_x_months.other": "about {count} months",
        "duration.x_months.one": "1 month",
        "duration.x_months.other": "{count} months",
        "duration.about_x_years.one": "about 1 year",
        "duration.about_x_years.other": "about {count} years",
        "duration.over_x_years.one": "over 1 year",
        "duration.over_x_years.other": "over {count} years",
        "duration.almost_x_years.one": "almost 1 year",
        "duration.almost_x_years.other": "almost {count} years",
    },
    "es": {
        "phase.drafting": "Borrador (No visible para el público)",
        "phase.informing": "Información",
        "phase.accepting": "Presentación de proyectos",
        "phase.reviewing": "Revisión interna de proyectos",
        "phase.selecting": "Fase de apoyos",
        "phase.valuating": "Evaluación de proyectos",
        "phase.publishing_prices": "Publicación de precios",
        "phase.balloting": "Votación final",
        "phase.reviewing_ballots": "Revisión de votación",
        "phase.finished": "Resultados",
        "index.completed": "Completado",
        "index.phase_progress": "Fase {current} de {total}",
        "index.empty": "No hay presupuestos.",
        "index.count.one": "Hay 1 presupuesto",
        "index.count.other": "Hay {count} presupuestos",
        "budget.created": "¡Presupuesto participativo creado con éxito!",
        "budget.updated": "Presupuesto participativo actualizado correctamente",
        "budget.published": "Presupuesto participativo publicado correctamente",
        "budget.destroyed": "Presupuesto eliminado correctamente",
        "budget.draft_notice": "Este presupuesto participativo está en modo borrador",
        "budget.winners_calculating": "Calculando ganadores, puede tardar un minuto.",
        "phase.updated": "Cambios guardados",
        "errors.blank": "no puede estar en blanco",
        "errors.taken": "ya está en uso",
        "errors.inclusion": "no está incluido en la lista",
        "errors.invalid_range": "debe ser posterior a la fecha de inicio",
        "errors.prev_phase": "debe ser posterior al inicio de la fase habilitada anterior",
        "errors.next_phase": "debe ser anterior al fin de la fase habilitada siguiente",
        "month.1": "enero",
        "month.2": "febrero",
        "month.3": "marzo",
        "month.4": "abril",
        "month.5": "mayo",
        "month.6": "junio",
        "month.7": "julio",
        "month.8": "agosto",
        "month.9": "septiembre",
        "month.10": "octubre",
        "month.11": "noviembre",
        "month.12": "diciembre",
        "date.long": "{day:02d} de {month} de {year}",
        "duration.less_than_x_minutes.one": "menos de un minuto",
        "duration.less_than_x_minutes.other": "menos de {count} minutos",
        "duration.x_minutes.one": "1 minuto",
        "duration.x_minutes.other": "{count} minutos",
        "duration.about_x_hours.one": "alrededor de 1 hora",
        "duration.about_x_hours.other": "alrededor de {count} horas",
        "duration.x_days.one": "1 día",
        "duration.x_days.other": "{count} días",
        "duration.about_x_months.one": "alrededor de 1 mes",
        "duration.about_x_months.other": "alrededor de {count} meses",
        "duration.x_months.one": "1 mes",
        "duration.x_months.other": "{count} meses",
        "duration.about_x_years.one": "alrededor de 1 año",
        "duration.about_x_years.other": "alrededor de {count} años",
        "duration.over_x_years.one": "más de 1 año",
        "duration.over_x_years.other": "más de {count} años",
        "duration.almost_x_years.one": "casi 1 año",
        "duration.almost_x_years.other": "casi {count} años",
    },
}


def default_locale() -> str:
    return get_settings().DEFAULT_LOCALE


def resolve_locale(requested: str | None) -> str:
    """Return ``requested`` when it is an available locale, else the default.

    Accepts region-qualified tags such as ``es-PE`` by matching the
    language prefix.
    """
    settings = get_settings()
    if requested:
        candidate = requested.split(",")[0].split(";")[0].strip().lower()
        if candidate in settings.AVAILABLE_LOCALES:
            return candidate
        language = candidate.split("-")[0].split("_")[0]
        if language in settings.AVAILABLE_LOCALES:
            return language
    return settings.DEFAULT_LOCALE


def translate(key: str, locale: str | None = None, **kwargs: object) -> str:
    """Look up ``key`` for ``locale`` and format it with ``kwargs``."""
    fallback = default_locale()
    template = _TRANSLATIONS.get(locale or fallback, {}).get(key)
    if template is None:
        template = _TRANSLATIONS.get(fallback, {}).get(key)
    if template is None:
        logger.debug("translate: missing key=%s locale=%s", key, locale)
        return key
    return template.format(**kwargs) if kwargs else template


def translate_count(key: str, count: int, locale: str | None = None) -> str:
    form = "one" if count == 1 else "other"
    return translate(f"{key}.{form}", locale, count=count)


def phase_label(kind: str, locale: str | None = None) -> str:
    """Canonical catalog label for a phase kind."""
    return translate(f"phase.{kind}", locale)


def localized(values: dict[str, str] | None, locale: str | None = None) -> str:
    """Pick the text for ``locale`` from a ``{locale: text}`` mapping.

    Falls back to the default locale, then to any non-empty value.
    """
    if not values:
        return ""
    fallback = default_locale()
    for candidate in (locale, fallback):
        if candidate and values.get(candidate):
            return values[candidate]
    return next((text for text in values.values() if text), "")
