# backend/models/files.py
import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from database import Base

# Kinds of documents kept in the bucket
class JenisFile(str, enum.Enum):
    TEMPLATE_MR = "template_mr"
    BERITA_SERAH_TERIMA = "berita_serah_terima"
    PENGAJUAN_APD = "pengajuan_apd"
    LOGO_PERSONAL = "logo_personal"
    KPI_KONSUMABLE = "kpi_konsumable"
    SOP_DOCUMENT = "sop_document"

# Registry row for one uploaded object
class ApdFile(Base):
    __tablename__ = "apd_files"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    file_url = Column(String, nullable=False)
    storage_path = Column(String, nullable=False, unique=True)
    nama_file = Column(String, nullable=False)
    jenis_file = Column(
        Enum(JenisFile, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    user = relationship("User")
