"""
Cross-sector aggregate report.
Built from the full ledger and material catalog, unscoped.
"""
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from sector_stock.models import Material, Sector, StockRecord
from sector_stock.schemas.dashboard import AggregateReport, MaterialTotals, ReportSummary, SectorTotals


def material_deficit(quantity: int, need: int) -> int:
    """Shortfall of one material across all sectors, floored at zero."""
    return max(0, need - quantity)


def summarize(sectors: List[SectorTotals], materials: List[MaterialTotals]) -> AggregateReport:
    """
    Assemble the report from per-sector and per-material totals.

    Deficit is summed per material, so a surplus of one material never
    offsets a shortage of another.
    """
    summary = ReportSummary(
        total_units=len(sectors),
        total_items=sum(m.quantity for m in materials),
        deficit=sum(m.deficit for m in materials),
    )
    return AggregateReport(
        summary=summary,
        sectors=sectors,
        materials=materials,
        generated_at=datetime.now(timezone.utc),
    )


def compute_report(db: Session) -> AggregateReport:
    quantity = func.coalesce(func.sum(StockRecord.quantity), 0)
    need = func.coalesce(func.sum(StockRecord.need), 0)

    material_stmt = (
        select(Material.id, Material.name, Material.unit_of_measure, quantity, need)
        .outerjoin(StockRecord, StockRecord.material_id == Material.id)
        .group_by(Material.id, Material.name, Material.unit_of_measure)
        .order_by(Material.id)
    )
    materials = [
        MaterialTotals(
            id=row[0],
            name=row[1],
            unit_of_measure=row[2],
            quantity=int(row[3]),
            need=int(row[4]),
            deficit=material_deficit(int(row[3]), int(row[4])),
        )
        for row in db.execute(material_stmt).all()
    ]

    sector_stmt = (
        select(Sector.id, Sector.name, quantity, need)
        .outerjoin(StockRecord, StockRecord.sector_id == Sector.id)
        .group_by(Sector.id, Sector.name)
        .order_by(Sector.id)
    )
    sectors = [
        SectorTotals(id=row[0], name=row[1], total_stock=int(row[2]), total_need=int(row[3]))
        for row in db.execute(sector_stmt).all()
    ]

    return summarize(sectors, materials)
