"""
Inventory CRUD operations:
- Material catalog reads
- Stock records keyed by (sector, material), written with an atomic upsert
"""
from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.orm import Session, selectinload
import logging
from typing import List, Optional, Dict, Any

from sector_stock.models import Material, StockRecord
from sector_stock.crud.base import CRUDBase

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CRUDMaterial(CRUDBase[Material]):
    def __init__(self):
        super().__init__(Material)

    def get_all(self, db: Session) -> List[Material]:
        """Get the full material catalog ordered by name"""
        try:
            stmt = select(Material).order_by(Material.name)
            result = db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing materials: {e}")
            raise


class CRUDStockRecord(CRUDBase[StockRecord]):
    def __init__(self):
        super().__init__(StockRecord)

    def get_by_sector(self, db: Session, sector_id: int) -> List[StockRecord]:
        """Get stock records of one sector with their material loaded"""
        try:
            stmt = (
                select(StockRecord)
                .join(StockRecord.material)
                .options(selectinload(StockRecord.material))
                .where(StockRecord.sector_id == sector_id)
                .order_by(Material.name)
            )
            result = db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error getting stock for sector {sector_id}: {e}")
            raise

    def get_by_pair(self, db: Session, *, sector_id: int, material_id: int) -> Optional[StockRecord]:
        """Get the stock record identified by (sector, material)"""
        stmt = select(StockRecord).where(
            StockRecord.sector_id == sector_id,
            StockRecord.material_id == material_id,
        )
        return db.execute(stmt).scalar_one_or_none()

    def upsert(self, db: Session, *, sector_id: int, material_id: int, quantity: int, need: int) -> StockRecord:
        """
        Create or overwrite the record for (sector_id, material_id) and commit.

        Repeating the call with the same arguments leaves the same stored state.
        """
        values = {
            "sector_id": sector_id,
            "material_id": material_id,
            "quantity": quantity,
            "need": need,
        }
        try:
            dialect_insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
            if dialect_insert is not None:
                record = self._upsert_on_conflict(db, dialect_insert, values)
            else:
                record = self._upsert_select_then_write(db, values)
            db.commit()
            return record
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error upserting stock for sector {sector_id}, material {material_id}: {e}")
            raise

    def _upsert_on_conflict(self, db: Session, dialect_insert, values: Dict[str, Any]) -> StockRecord:
        stmt = dialect_insert(StockRecord).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["sector_id", "material_id"],
            set_={
                "quantity": stmt.excluded.quantity,
                "need": stmt.excluded.need,
                "updated_at": func.now(),
            },
        ).returning(StockRecord)
        result = db.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    def _upsert_select_then_write(self, db: Session, values: Dict[str, Any]) -> StockRecord:
        # A concurrent insert of the same pair surfaces as IntegrityError; the retry updates it.
        for attempt in range(2):
            record = self.get_by_pair(db, sector_id=values["sector_id"], material_id=values["material_id"])
            if record is None:
                record = StockRecord(**values)
                db.add(record)
            else:
                record.quantity = values["quantity"]
                record.need = values["need"]
            try:
                db.flush()
                return record
            except IntegrityError:
                db.rollback()
                if attempt == 1:
                    raise
                logger.warning("Concurrent insert of stock record detected, retrying as update")


# Create instances
crud_material = CRUDMaterial()
crud_stock_record = CRUDStockRecord()
