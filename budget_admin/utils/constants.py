"""
Application-wide constants for participatory budget administration.

Defines phase kinds, voting styles, list filters and maintenance
separators used across routers, services, presenters and models.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Phase kinds
# ---------------------------------------------------------------------------

DRAFTING: Final[str] = "drafting"  # retired kind, kept for old rows
INFORMING: Final[str] = "informing"
ACCEPTING: Final[str] = "accepting"
REVIEWING: Final[str] = "reviewing"
SELECTING: Final[str] = "selecting"
VALUATING: Final[str] = "valuating"
PUBLISHING_PRICES: Final[str] = "publishing_prices"
BALLOTING: Final[str] = "balloting"
REVIEWING_BALLOTS: Final[str] = "reviewing_ballots"
FINISHED: Final[str] = "finished"

# Default ordered catalog; the live one comes from Settings.PHASE_KINDS
PHASE_KINDS: Final[list[str]] = [
    INFORMING,
    ACCEPTING,
    REVIEWING,
    SELECTING,
    VALUATING,
    PUBLISHING_PRICES,
    BALLOTING,
    REVIEWING_BALLOTS,
    FINISHED,
]

# Kind used when a budget has no enabled phase left to fall back on
FALLBACK_PHASE_KIND: Final[str] = INFORMING

# Phases in which winner investments may be (re)calculated
WINNERS_PHASE_KINDS: Final[frozenset[str]] = frozenset(
    {REVIEWING_BALLOTS, FINISHED}
)

# ---------------------------------------------------------------------------
# Voting styles
# ---------------------------------------------------------------------------

VOTING_STYLES: Final[list[str]] = [
    "knapsack",
    "approval",
]

DEFAULT_VOTING_STYLE: Final[str] = "knapsack"

# ---------------------------------------------------------------------------
# Admin list filters
# ---------------------------------------------------------------------------

BUDGET_FILTERS: Final[list[str]] = [
    "all",
    "open",
    "finished",
]

# ---------------------------------------------------------------------------
# Phase defaults and maintenance
# ---------------------------------------------------------------------------

PHASE_DEFAULT_LENGTH_MONTHS: Final[int] = 1

# Joins the migrated summary onto the description
SUMMARY_SEPARATOR: Final[str] = "<br>"

# Feature flag name reported by FeatureDisabled
BUDGETS_FEATURE: Final[str] = "process.budgets"
