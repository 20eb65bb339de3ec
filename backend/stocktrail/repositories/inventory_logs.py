from typing import List, Optional

from sqlalchemy.orm import Session

from stocktrail.models.inventory_log import InventoryLog

DEFAULT_ACTOR = "system"


class InventoryLogRepository:
    """Append-only access to inventory_logs. No update, no delete."""

    def __init__(self, db: Session):
        self.db = db

    def create_log(
        self,
        product_id: int,
        old_stock: int,
        new_stock: int,
        changed_by: Optional[str] = DEFAULT_ACTOR,
    ) -> InventoryLog:
        log = InventoryLog(
            product_id=product_id,
            old_stock=old_stock,
            new_stock=new_stock,
            changed_by=changed_by or DEFAULT_ACTOR,
        )
        self.db.add(log)
        self.db.flush()
        return log

    def find_logs_by_product_id(self, product_id: int) -> List[InventoryLog]:
        return (
            self.db.query(InventoryLog)
            .filter(InventoryLog.product_id == product_id)
            .order_by(InventoryLog.timestamp.desc(), InventoryLog.id.desc())
            .all()
        )
