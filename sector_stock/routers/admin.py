from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sector_stock.database import get_db
from sector_stock.dependencies import get_report_cache, require_admin
from sector_stock.schemas.auth import TokenClaims
from sector_stock.schemas.dashboard import AggregateReport
from sector_stock.utils.aggregates import compute_report
from sector_stock.utils.report_cache import ReportCache

router = APIRouter(prefix="/admin", tags=["admin"])


# -----------------------------
# Aggregate report (cache-served when fresh)
# -----------------------------
@router.get("/relatorios", response_model=AggregateReport)
def aggregate_report(
    claims: TokenClaims = Depends(require_admin),
    cache: ReportCache = Depends(get_report_cache),
    db: Session = Depends(get_db)
):
    return cache.get_or_compute(lambda: compute_report(db))
