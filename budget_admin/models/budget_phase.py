"""BudgetPhase model - one stage of a budget's fixed phase sequence."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import relationship

from budget_admin.database import Base


class BudgetPhase(Base):
    """A phase window of a budget.

    Each budget owns exactly one row per catalog kind, created together
    with the budget; ordering follows ``id`` (creation order matches the
    catalog). The window is half-open: active during
    ``[starts_at, ends_at)``.

    Attributes:
        id: Primary key.
        budget_id: FK to Budget.
        kind: Phase kind; immutable after creation.
        starts_at: Inclusive start of the window.
        ends_at: Exclusive end of the window.
        enabled: Whether the phase takes part in the enabled sequence.
        name: Localized display name, ``{locale: text}``.
        description: Localized description, ``{locale: text}``.
        summary: Localized summary, ``{locale: text}``.
        summary_merged_locales: Locales whose summary was already
            appended to the description by the one-time backfill.
    """

    __tablename__ = "budget_phase"

    id = Column(Integer, primary_key=True, autoincrement=True)
    budget_id = Column(Integer, ForeignKey("budget.id"), nullable=False, index=True)
    kind = Column(String(40), nullable=False)
    starts_at = Column(DateTime, nullable=True)
    ends_at = Column(DateTime, nullable=True)
    enabled = Column(Boolean, default=True, nullable=False)
    name = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    description = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    summary = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    summary_merged_locales = Column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )

    # Relationships
    budget = relationship("Budget", back_populates="phases", lazy="select")

    def __repr__(self) -> str:
        return f"<BudgetPhase id={self.id} kind={self.kind!r} enabled={self.enabled}>"
