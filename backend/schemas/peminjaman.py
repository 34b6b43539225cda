# backend/schemas/peminjaman.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import Optional

from models.peminjaman import PeminjamanStatus

class PeminjamanCreate(BaseModel):
    nama_peminjam: str = Field(min_length=1)
    divisi: str = Field(min_length=1)
    nama_apd: str = Field(min_length=1)
    tanggal_pinjam: date
    tanggal_kembali: Optional[date] = None
    status: Optional[PeminjamanStatus] = None

class PeminjamanUpdate(BaseModel):
    nama_peminjam: Optional[str] = Field(None, min_length=1)
    divisi: Optional[str] = Field(None, min_length=1)
    nama_apd: Optional[str] = Field(None, min_length=1)
    tanggal_pinjam: Optional[date] = None
    tanggal_kembali: Optional[date] = None
    status: Optional[PeminjamanStatus] = None

class PeminjamanResponse(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    nama_peminjam: str
    divisi: str
    nama_apd: str
    tanggal_pinjam: date
    tanggal_kembali: Optional[date] = None
    status: PeminjamanStatus

    model_config = ConfigDict(from_attributes=True)
