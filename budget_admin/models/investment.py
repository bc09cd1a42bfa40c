"""Investment model - a citizen project proposed under a budget.

Only the columns the administration layer reads are mapped here; the
project lifecycle itself is owned elsewhere.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_admin.database import Base


class Investment(Base):
    __tablename__ = "budget_investment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    budget_id = Column(Integer, ForeignKey("budget.id"), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    winner = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    budget = relationship("Budget", back_populates="investments", lazy="select")
