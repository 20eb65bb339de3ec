import logging
import math
from typing import Any, Callable, ContextManager, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from stocktrail.core.config import settings
from stocktrail.core.errors import ConflictError, InventoryError, NotFoundError
from stocktrail.models.inventory_log import InventoryLog
from stocktrail.models.product import Product
from stocktrail.repositories.inventory_logs import InventoryLogRepository
from stocktrail.repositories.products import ProductRepository
from stocktrail.services.inventory_logs import InventoryLogService
from stocktrail.services.validation import normalize_product_data, validate_product_data

logger = logging.getLogger(__name__)

UnitOfWork = Callable[[], ContextManager[Any]]

# keeps OFFSET within a bindable integer for any page size
MAX_PAGE = 1_000_000


class ProductService:
    """
    Product business rules.

    Every write runs inside `unit_of_work()`, a context manager that commits
    on a clean exit and rolls back when the block raises. The service never
    commits by itself.
    """

    def __init__(
        self,
        products: ProductRepository,
        logs: InventoryLogRepository,
        *,
        unit_of_work: UnitOfWork,
    ):
        self.products = products
        self.logs = logs
        self.unit_of_work = unit_of_work
        self.history = InventoryLogService(logs, products)

    # ---------- CSV IMPORT ----------

    def import_products(self, rows: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        stats: Dict[str, Any] = {"added": 0, "skipped": 0, "duplicates": []}

        for row in rows:
            try:
                validate_product_data(row)
                data = normalize_product_data(row)

                # each row commits on its own; earlier rows survive a later failure
                with self.unit_of_work():
                    existing = self.products.find_by_name(data["name"])
                    if existing is None:
                        self.products.create(data)
            except (InventoryError, SQLAlchemyError) as e:
                # one bad row never aborts the batch
                logger.warning("Skipping row for product %s: %s", row.get("name") or "unknown", e)
                stats["skipped"] += 1
                continue

            if existing is not None:
                stats["skipped"] += 1
                stats["duplicates"].append({"name": data["name"], "existing_id": existing.id})
            else:
                stats["added"] += 1

        logger.info(
            "CSV import finished: %d added, %d skipped (%d duplicates)",
            stats["added"],
            stats["skipped"],
            len(stats["duplicates"]),
        )
        return stats

    # ---------- CREATE / UPDATE / DELETE ----------

    def create_product(self, data: Mapping[str, Any]) -> Product:
        validate_product_data(data)
        clean = normalize_product_data(data)

        with self.unit_of_work():
            if self.products.find_by_name(clean["name"]) is not None:
                raise ConflictError(f"Product name '{clean['name']}' already exists.")
            p = self.products.create(clean)

        logger.info("Created product %s (%s) with stock %s", p.id, p.name, p.stock)
        return p

    def update_product(
        self,
        product_id: int,
        update_data: Mapping[str, Any],
        changed_by: Optional[str] = None,
    ) -> Product:
        validate_product_data(update_data)
        clean = normalize_product_data(update_data)

        with self.unit_of_work():
            existing = self.products.find_by_id(product_id)
            if existing is None:
                raise NotFoundError("Product not found.")

            # unique name check, except for itself
            by_name = self.products.find_by_name(clean["name"])
            if by_name is not None and by_name.id != existing.id:
                raise ConflictError(f"Product name '{clean['name']}' already exists.")

            old_stock = existing.stock
            new_stock = clean["stock"]

            if old_stock != new_stock:
                self.logs.create_log(
                    product_id=product_id,
                    old_stock=old_stock,
                    new_stock=new_stock,
                    changed_by=changed_by,
                )
                logger.info(
                    "Stock of product %s changed %s -> %s by %s",
                    product_id,
                    old_stock,
                    new_stock,
                    changed_by or "system",
                )

            updated = self.products.update(product_id, clean)

        return updated

    def delete_product(self, product_id: int) -> None:
        with self.unit_of_work():
            if not self.products.delete(product_id):
                raise NotFoundError("Product not found.")

        logger.info("Deleted product %s", product_id)

    # ---------- READS ----------

    def get_products(
        self,
        page: int = 1,
        limit: int = settings.default_page_size,
        name: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = max(1, min(int(page), MAX_PAGE))
        limit = max(1, min(int(limit), settings.max_page_size))
        offset = (page - 1) * limit

        products = self.products.find_all(
            search_name=name,
            sort_field=sort,
            sort_order=order,
            limit=limit,
            offset=offset,
        )
        total = self.products.get_product_count(name)

        return {
            "data": products,
            "pagination": {
                "total_items": total,
                "total_pages": math.ceil(total / limit),
                "current_page": page,
                "limit": limit,
            },
        }

    def get_product_history(self, product_id: int) -> List[InventoryLog]:
        return self.history.get_product_history(product_id)

    def get_all_products(self) -> List[Product]:
        return self.products.find_all()
