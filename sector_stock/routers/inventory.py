"""
Sector stock router.
Callers read and write only their own sector's records; the catalog is shared.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from sector_stock.database import get_db
from sector_stock.dependencies import get_current_claims, get_stock_ledger, require_sector_claims
from sector_stock.ledger import MaterialNotFound, StockLedger
from sector_stock.schemas.auth import TokenClaims
from sector_stock.schemas.inventory import MaterialResponse, StockRecordResponse, StockUpdate

router = APIRouter(prefix="/materiais", tags=["inventory"])


@router.get("/setor", response_model=List[StockRecordResponse])
def list_sector_stock(
    claims: TokenClaims = Depends(get_current_claims),
    ledger: StockLedger = Depends(get_stock_ledger),
    db: Session = Depends(get_db)
):
    """
    Stock records of the caller's sector.
    Callers without a sector get an empty list.
    """
    return ledger.list_by_sector(db, claims.sector_id)


@router.get("/lista", response_model=List[MaterialResponse])
def list_materials(
    claims: TokenClaims = Depends(get_current_claims),
    ledger: StockLedger = Depends(get_stock_ledger),
    db: Session = Depends(get_db)
):
    return ledger.list_materials(db)


@router.post("/update", response_model=StockRecordResponse)
def update_sector_stock(
    update: StockUpdate,
    claims: TokenClaims = Depends(require_sector_claims),
    ledger: StockLedger = Depends(get_stock_ledger),
    db: Session = Depends(get_db)
):
    """
    Report quantity on hand and projected need of one material for the
    caller's sector. Creates the record on first report, overwrites it after.
    """
    try:
        return ledger.upsert(
            db,
            sector_id=claims.sector_id,
            material_id=update.material_id,
            quantity=update.quantity,
            need=update.need,
        )
    except MaterialNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
