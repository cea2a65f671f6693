"""
Aggregate report schemas.
A report is derived data: it is rebuilt from the ledger, never edited.
"""
from pydantic import BaseModel, Field
from typing import List
from datetime import datetime


class ReportSummary(BaseModel):
    total_units: int = Field(..., serialization_alias="totalSetores")
    total_items: int = Field(..., serialization_alias="totalItens")
    deficit: int


class SectorTotals(BaseModel):
    id: int
    name: str = Field(..., serialization_alias="nome")
    total_stock: int = Field(..., serialization_alias="totalEstoque")
    total_need: int = Field(..., serialization_alias="totalNecessidade")


class MaterialTotals(BaseModel):
    id: int
    name: str = Field(..., serialization_alias="nome")
    unit_of_measure: str = Field(..., serialization_alias="unidade")
    quantity: int = Field(..., serialization_alias="quantidade")
    need: int = Field(..., serialization_alias="necessidade")
    deficit: int


class AggregateReport(BaseModel):
    summary: ReportSummary
    sectors: List[SectorTotals] = Field(default_factory=list, serialization_alias="setores")
    materials: List[MaterialTotals] = Field(default_factory=list, serialization_alias="materiais")
    generated_at: datetime
