# backend/schemas/rekap.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import Optional

class RekapGenerate(BaseModel):
    # Any day of the month (or YYYY-MM); normalised to the first day
    periode: str

class RekapGenerateResult(BaseModel):
    periode: date
    total_items: int
    created_count: int
    updated_count: int

class RekapUpdate(BaseModel):
    stock_awal: Optional[int] = Field(None, ge=0)
    realisasi: Optional[int] = Field(None, ge=0)
    distribusi: Optional[int] = Field(None, ge=0)

class RekapResponse(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    apd_id: int
    apd_name: Optional[str] = None
    periode: date
    stock_awal: int
    realisasi: int
    distribusi: int
    saldo_akhir: int
    satuan: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
