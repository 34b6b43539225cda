# backend/schemas/pengajuan.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import Optional

# `total` is not part of any input schema, the database computes it
class PengajuanCreate(BaseModel):
    nama_project: str = Field(min_length=1)
    nomor_project: str = Field(min_length=1)
    kepala_project: str = Field(min_length=1)
    progres: str = "Draft"
    keterangan: Optional[str] = None
    tanggal: date
    apd_nama: str = Field(min_length=1)
    jumlah: int = Field(ge=0)
    unit: str = "pcs"
    harga: float = Field(ge=0)

class PengajuanUpdate(BaseModel):
    nama_project: Optional[str] = Field(None, min_length=1)
    nomor_project: Optional[str] = Field(None, min_length=1)
    kepala_project: Optional[str] = Field(None, min_length=1)
    progres: Optional[str] = None
    keterangan: Optional[str] = None
    tanggal: Optional[date] = None
    apd_nama: Optional[str] = Field(None, min_length=1)
    jumlah: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = None
    harga: Optional[float] = Field(None, ge=0)

class PengajuanResponse(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    nama_project: str
    nomor_project: str
    kepala_project: str
    progres: str
    keterangan: Optional[str] = None
    tanggal: date
    apd_nama: str
    jumlah: int
    unit: str
    harga: float
    total: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)
