"""Budget model - a participatory budget moving through ordered phases."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_admin.database import Base
from budget_admin.utils.constants import DEFAULT_VOTING_STYLE, FINISHED


class Budget(Base):
    """Participatory budget administered through the admin API.

    ``published`` is a tri-state: ``None`` (never decided), ``False``
    (explicit draft) and ``True`` (published, slug frozen).

    Attributes:
        id: Primary key.
        name: Localized name, ``{locale: text}``.
        slug: Unique URL slug derived from the default-locale name.
        published: Tri-state publication flag.
        phase: Kind of the current phase.
        voting_style: "knapsack" or "approval".
        results_enabled: Show results once the budget is finished.
        stats_enabled: Show participation stats.
        advanced_stats_enabled: Show advanced participation stats.
        created_at: Record creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "budget"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    slug = Column(String(200), unique=True, nullable=True)
    published = Column(Boolean, nullable=True)
    phase = Column(String(40), nullable=False)
    voting_style = Column(String(20), nullable=False, default=DEFAULT_VOTING_STYLE)
    results_enabled = Column(Boolean, default=False, nullable=False)
    stats_enabled = Column(Boolean, default=False, nullable=False)
    advanced_stats_enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    phases = relationship(
        "BudgetPhase",
        back_populates="budget",
        order_by="BudgetPhase.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
    investments = relationship(
        "Investment", back_populates="budget", lazy="select"
    )
    polls = relationship("Poll", back_populates="budget", lazy="select")

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def enabled_phases(self) -> list:
        return [phase for phase in self.phases if phase.enabled]

    @property
    def starts_at(self):
        enabled = self.enabled_phases
        return enabled[0].starts_at if enabled else None

    @property
    def ends_at(self):
        enabled = self.enabled_phases
        return enabled[-1].ends_at if enabled else None

    @property
    def is_draft(self) -> bool:
        return not self.published

    @property
    def is_finished(self) -> bool:
        return self.phase == FINISHED

    @property
    def has_winning_investments(self) -> bool:
        return any(investment.winner for investment in self.investments)

    def phase_of_kind(self, kind: str):
        return next((phase for phase in self.phases if phase.kind == kind), None)

    def __repr__(self) -> str:
        return f"<Budget id={self.id} slug={self.slug!r} phase={self.phase!r}>"
