"""Read-only presenters deriving display values from budgets and phases."""
