from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from stocktrail.core.database import utcnow
from stocktrail.models.product import Product

# API sort key -> column; anything else falls back to updated_at DESC
SORT_COLUMNS = MappingProxyType(
    {
        "name": Product.name,
        "stock": Product.stock,
        "createdAt": Product.created_at,
        "updatedAt": Product.updated_at,
    }
)

SORTABLE_FIELDS = frozenset(SORT_COLUMNS)

WRITABLE_FIELDS = ("name", "unit", "category", "brand", "stock", "status", "image")


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductRepository:
    """
    All product reads and writes for one session.

    Writes flush but never commit: the caller owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, search_name: Optional[str]):
        q = self.db.query(Product)
        if search_name:
            q = q.filter(Product.name.ilike(_like_pattern(search_name), escape="\\"))
        return q

    def find_all(
        self,
        search_name: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Product]:
        q = self._filtered(search_name)

        if sort_field in SORT_COLUMNS:
            column = SORT_COLUMNS[sort_field]
            if (sort_order or "").upper() == "DESC":
                q = q.order_by(column.desc(), Product.id.desc())
            else:
                q = q.order_by(column.asc(), Product.id.asc())
        else:
            q = q.order_by(Product.updated_at.desc(), Product.id.desc())

        # pagination only when both are given; export wants everything
        if limit is not None and offset is not None:
            q = q.limit(limit).offset(offset)

        return q.all()

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def find_by_name(self, name: str) -> Optional[Product]:
        """Case-insensitive exact match, used for duplicate checks."""
        if name is None:
            return None
        return (
            self.db.query(Product)
            # fold both sides with the store's lower() so this agrees with the unique index
            .filter(func.lower(Product.name) == func.lower(str(name).strip()))
            .first()
        )

    def create(self, data: Mapping[str, Any]) -> Product:
        p = Product(
            name=data.get("name"),
            unit=data.get("unit"),
            category=data.get("category"),
            brand=data.get("brand"),
            stock=data.get("stock") or 0,
            status=data.get("status"),
            image=data.get("image") or None,
        )
        self.db.add(p)
        self.db.flush()
        return p

    def update(self, product_id: int, data: Mapping[str, Any]) -> Optional[Product]:
        p = self.find_by_id(product_id)
        if p is None:
            return None

        # full overwrite, missing keys become NULL
        for field in WRITABLE_FIELDS:
            setattr(p, field, data.get(field))
        p.image = p.image or None
        # onupdate only fires when a column actually changed
        p.updated_at = utcnow()

        self.db.flush()
        return p

    def delete(self, product_id: int) -> bool:
        p = self.find_by_id(product_id)
        if p is None:
            return False
        self.db.delete(p)
        self.db.flush()
        return True

    def get_product_count(self, search_name: Optional[str] = None) -> int:
        q = self.db.query(func.count(Product.id))
        if search_name:
            q = q.filter(Product.name.ilike(_like_pattern(search_name), escape="\\"))
        return q.scalar() or 0
