"""Poll model - a ballot box optionally attached to a budget."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from budget_admin.database import Base


class Poll(Base):
    __tablename__ = "poll"

    id = Column(Integer, primary_key=True, autoincrement=True)
    budget_id = Column(Integer, ForeignKey("budget.id"), nullable=True, index=True)
    name = Column(String(300), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    budget = relationship("Budget", back_populates="polls", lazy="select")
