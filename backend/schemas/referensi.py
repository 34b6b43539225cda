# backend/schemas/referensi.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

class DivisiCreate(BaseModel):
    nama_divisi: str = Field(min_length=1)

class DivisiResponse(DivisiCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class PosisiCreate(BaseModel):
    nama_posisi: str = Field(min_length=1)

class PosisiResponse(PosisiCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
