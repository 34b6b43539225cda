# backend/schemas/pegawai.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

# Sizes and colours of the mandatory APD set
class PegawaiApdFields(BaseModel):
    bengkel_id: Optional[int] = None
    size_sepatu: Optional[int] = Field(None, ge=0)
    jenis_sepatu: Optional[str] = None
    warna_katelpack: Optional[str] = None
    size_katelpack: Optional[str] = None
    warna_helm: Optional[str] = None

class PegawaiCreate(PegawaiApdFields):
    nama: str = Field(min_length=1)
    nip: str = Field(min_length=1)
    divisi_id: int
    posisi_id: int

class PegawaiUpdate(PegawaiApdFields):
    nama: Optional[str] = Field(None, min_length=1)
    nip: Optional[str] = Field(None, min_length=1)
    divisi_id: Optional[int] = None
    posisi_id: Optional[int] = None

class PegawaiResponse(PegawaiApdFields):
    id: int
    created_at: Optional[datetime] = None
    nama: str
    nip: str
    divisi_id: Optional[int] = None
    posisi_id: Optional[int] = None
    divisi_name: Optional[str] = None
    posisi_name: Optional[str] = None
    bengkel_name: Optional[str] = None
    link_helm: Optional[str] = None
    link_shoes: Optional[str] = None
    link_katelpack: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

# Row of the helm / shoes / katelpack views
class DokumentasiRow(BaseModel):
    no: int
    id: int
    nama: str
    nip: str
    warna_helm: Optional[str] = None
    size_sepatu: Optional[int] = None
    jenis_sepatu: Optional[str] = None
    warna_katelpack: Optional[str] = None
    size_katelpack: Optional[str] = None
    link: Optional[str] = None
    signed_url: Optional[str] = None
