"""Class category model (e.g. "Beginners", "Competition")."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Category(Base):
    """Grouping used to restrict which students may book a class."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(
        String(26), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(80), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organization = relationship("Organization", back_populates="categories")

    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_categories_organization_name"),
    )
