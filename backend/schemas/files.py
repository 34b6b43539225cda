# backend/schemas/files.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

from models.files import JenisFile

class ApdFileResponse(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    file_url: str
    storage_path: str
    nama_file: str
    jenis_file: JenisFile
    user_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
