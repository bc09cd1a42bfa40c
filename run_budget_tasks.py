"""Maintenance tasks for participatory budgets.

Usage:
    python run_budget_tasks.py <task>

Tasks:
    set_published                  Decide ``published`` for budgets where it is unset.
    phases_summary_to_description  Append phase summaries to descriptions (once per locale).
    add_name_to_existing_phases    Fill empty phase names with the catalog label.

Every task is safe to re-run. The database URL comes from the application
settings (``DATABASE_URL`` / ``.env``).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

# Make the package importable when run from the repository root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy.orm import Session

from budget_admin import models  # noqa: F401
from budget_admin.config import get_settings
from budget_admin.database import SessionLocal
from budget_admin.services import maintenance_service
from budget_admin.utils.catalog import PhaseCatalog


def _set_published(session: Session) -> int:
    catalog = PhaseCatalog.of(get_settings().PHASE_KINDS)
    return maintenance_service.set_published(session, catalog)


def _phases_summary_to_description(session: Session) -> int:
    return maintenance_service.backfill_phase_descriptions(session)


def _add_name_to_existing_phases(session: Session) -> int:
    return maintenance_service.backfill_phase_names(
        session, get_settings().AVAILABLE_LOCALES
    )


TASKS: dict[str, Callable[[Session], int]] = {
    "set_published": _set_published,
    "phases_summary_to_description": _phases_summary_to_description,
    "add_name_to_existing_phases": _add_name_to_existing_phases,
}


def run(task_name: str) -> int:
    """Run ``task_name`` in its own session and return the changed count."""
    task = TASKS[task_name]
    session = SessionLocal()
    try:
        changed = task(session)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    return changed


def main(argv: list[str]) -> int:
    if len(argv) < 2 or argv[1] not in TASKS:
        print("ERROR: a task name is required.")
        print(f"Usage: python run_budget_tasks.py <{'|'.join(TASKS)}>")
        return 1

    task_name = argv[1]
    print(f"[INFO] Running {task_name}...")
    changed = run(task_name)
    print(f"[OK] {task_name}: {changed} records updated")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
