"""
Stock ledger: the only writer of stock records.

Every successful upsert invalidates the aggregate report cache before it
returns, so a report read that starts after the write never sees the cached
pre-write report (see utils.report_cache for the in-flight recompute case).
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from sector_stock.crud.inventory import crud_material, crud_stock_record
from sector_stock.models import Material, StockRecord
from sector_stock.utils.report_cache import ReportCache

logger = logging.getLogger(__name__)


class MaterialNotFound(Exception):
    def __init__(self, material_id: int):
        super().__init__(f"Material {material_id} not found")
        self.material_id = material_id


class StockLedger:
    def __init__(self, report_cache: ReportCache):
        self.report_cache = report_cache

    def list_by_sector(self, db: Session, sector_id: Optional[int]) -> List[StockRecord]:
        """Stock records of ``sector_id``; empty when the caller has no sector."""
        if sector_id is None:
            return []
        return crud_stock_record.get_by_sector(db, sector_id)

    def list_materials(self, db: Session) -> List[Material]:
        return crud_material.get_all(db)

    def upsert(self, db: Session, *, sector_id: int, material_id: int, quantity: int, need: int) -> StockRecord:
        if crud_material.get(db, id=material_id) is None:
            raise MaterialNotFound(material_id)

        record = crud_stock_record.upsert(
            db,
            sector_id=sector_id,
            material_id=material_id,
            quantity=quantity,
            need=need,
        )
        logger.info(
            f"Stock updated: sector {sector_id}, material {material_id}, "
            f"quantity={quantity}, need={need}"
        )

        self.report_cache.invalidate()
        return record
