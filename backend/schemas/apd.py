# backend/schemas/apd.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

# Base schema for an equipment item
class ApdItemBase(BaseModel):
    name: str = Field(min_length=1)
    satuan: Optional[str] = None

# Schema for creating an item; opening quantity defaults to 0
class ApdItemCreate(ApdItemBase):
    jumlah: int = Field(0, ge=0)

# Stock opname edit, every field optional
class ApdItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    satuan: Optional[str] = None
    jumlah: Optional[int] = Field(None, ge=0)

class ApdItemResponse(ApdItemBase):
    id: int
    jumlah: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# Live opening stock of a single item
class ApdStockResponse(BaseModel):
    apd_id: int
    stock_awal: int

class BengkelCreate(BaseModel):
    name: str = Field(min_length=1)

class BengkelResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
