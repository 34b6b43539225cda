# backend/schemas/distribusi.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import Optional

# Daily issuance as entered by the user; periode is derived server-side
class DistribusiCreate(BaseModel):
    apd_id: int
    tanggal: date
    nama: str = Field(min_length=1)
    bengkel_id: int
    qty: int = Field(ge=1)

class DistribusiResponse(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    apd_id: int
    tanggal: date
    nama: str
    bengkel_id: int
    qty: int
    periode: date
    apd_name: Optional[str] = None
    satuan: Optional[str] = None
    bengkel_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

# Flat row of the per-worker issuance report
class PengeluaranRow(BaseModel):
    id: int
    nama: str
    tanggal: date
    bengkel_name: Optional[str] = None
    apd_name: Optional[str] = None
    qty: int
    satuan: Optional[str] = None
    periode: date

class PeriodeOption(BaseModel):
    periode: date
    label: str
