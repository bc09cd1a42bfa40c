"""
Typed exception hierarchy for budget administration.

Every error carries a machine-readable ``code`` so the HTTP layer and the
maintenance scripts can react by type instead of parsing messages.

    BudgetAdminError (base)
    |
    +-- FeatureDisabled             fatal: feature flag is off
    +-- RecordNotFound              fatal: unknown budget / phase
    +-- ValidationFailed            recoverable: field-level messages
    +-- DestroyGuardError
    |   +-- HasAssociatedInvestments
    |   +-- HasAssociatedPoll
    +-- WinnersCalculationUnavailable

The mapping to HTTP status codes lives in ``budget_admin.main``.
"""

from __future__ import annotations


class BudgetAdminError(Exception):
    """Base class for every error raised by the budget services."""

    code: str = "BUDGET_ADMIN_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FeatureDisabled(BudgetAdminError):
    code = "FEATURE_DISABLED"

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"Feature '{feature}' is disabled")


class RecordNotFound(BudgetAdminError):
    code = "RECORD_NOT_FOUND"

    def __init__(self, model: str, key: object):
        self.model = model
        self.key = key
        super().__init__(f"Couldn't find {model} with '{key}'")


class ValidationFailed(BudgetAdminError):
    """Raised with a ``{field: [messages]}`` mapping; nothing was persisted."""

    code = "VALIDATION_FAILED"

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        summary = "; ".join(
            f"{field} {message}"
            for field, messages in errors.items()
            for message in messages
        )
        super().__init__(f"Validation failed: {summary}")


class DestroyGuardError(BudgetAdminError):
    code = "DESTROY_GUARD"

    def __init__(self, budget_id: int, message: str):
        self.budget_id = budget_id
        super().__init__(message)


class HasAssociatedInvestments(DestroyGuardError):
    code = "HAS_ASSOCIATED_INVESTMENTS"

    def __init__(self, budget_id: int):
        super().__init__(
            budget_id,
            "You cannot delete a budget that has associated investments",
        )


class HasAssociatedPoll(DestroyGuardError):
    code = "HAS_ASSOCIATED_POLL"

    def __init__(self, budget_id: int):
        super().__init__(
            budget_id,
            "You cannot delete a budget that has an associated poll",
        )


class WinnersCalculationUnavailable(BudgetAdminError):
    code = "WINNERS_CALCULATION_UNAVAILABLE"

    def __init__(self, budget_id: int, reason: str):
        self.budget_id = budget_id
        super().__init__(reason)
