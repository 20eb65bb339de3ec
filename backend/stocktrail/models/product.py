from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    CheckConstraint,
    Index,
    func,
)
from sqlalchemy.orm import relationship

from stocktrail.core.database import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    __table_args__ = (
        # SAFETY CONSTRAINTS
        CheckConstraint("stock >= 0", name="ck_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    unit = Column(String, nullable=True)
    category = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    status = Column(String, nullable=True)

    stock = Column(Integer, nullable=False, default=0)

    # URL
    image = Column(String, nullable=True)

    # timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    logs = relationship(
        "InventoryLog",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"


# names are unique regardless of case
Index("uq_products_name_lower", func.lower(Product.name), unique=True)
