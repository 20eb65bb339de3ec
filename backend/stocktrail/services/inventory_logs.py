from typing import List

from stocktrail.core.errors import NotFoundError
from stocktrail.models.inventory_log import InventoryLog
from stocktrail.repositories.inventory_logs import InventoryLogRepository
from stocktrail.repositories.products import ProductRepository


class InventoryLogService:
    def __init__(self, logs: InventoryLogRepository, products: ProductRepository):
        self.logs = logs
        self.products = products

    def get_product_history(self, product_id: int) -> List[InventoryLog]:
        """Newest-first stock transitions of an existing product."""
        if self.products.find_by_id(product_id) is None:
            raise NotFoundError("Product not found.")
        return self.logs.find_logs_by_product_id(product_id)
