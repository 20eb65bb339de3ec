from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from stocktrail.core.database import Base, utcnow


class InventoryLog(Base):
    """One stock transition of one product. Rows are never updated."""

    __tablename__ = "inventory_logs"

    id = Column(Integer, primary_key=True, index=True)

    # what item
    product_id = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # change details
    old_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)

    # who
    changed_by = Column(String, nullable=False, default="system")

    timestamp = Column(DateTime, nullable=False, default=utcnow)

    product = relationship("Product", back_populates="logs")
