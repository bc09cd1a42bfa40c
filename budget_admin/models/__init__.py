"""SQLAlchemy models package for participatory budget administration.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from budget_admin.models import Budget, BudgetPhase
"""

# Aggregate root
from budget_admin.models.budget import Budget  # noqa: F401
from budget_admin.models.budget_phase import BudgetPhase  # noqa: F401

# Dependents guarding destruction
from budget_admin.models.investment import Investment  # noqa: F401
from budget_admin.models.poll import Poll  # noqa: F401

__all__ = [
    "Budget",
    "BudgetPhase",
    "Investment",
    "Poll",
]
