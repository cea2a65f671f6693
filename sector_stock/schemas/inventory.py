"""
Stock ledger schemas.
Quantities and needs are whole units, never negative.
"""
from pydantic import BaseModel, ConfigDict, Field


class MaterialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(..., serialization_alias="nome")
    unit_of_measure: str = Field(..., serialization_alias="unidade")


class StockRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sector_id: int = Field(..., serialization_alias="setor_id")
    material_id: int
    quantity: int = Field(..., serialization_alias="quantidade")
    need: int = Field(..., serialization_alias="necessidade")
    material: MaterialResponse


class StockUpdate(BaseModel):
    material_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0, validation_alias="quantidade")
    need: int = Field(..., ge=0, validation_alias="necessidade")
