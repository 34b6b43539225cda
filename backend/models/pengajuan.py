# backend/models/pengajuan.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Text, Computed, CheckConstraint, func
from database import Base

# Procurement request for a project. `total` is generated by the database
# from jumlah * harga and is never written by the application.
class PengajuanApd(Base):
    __tablename__ = "pengajuan_apd"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    nama_project = Column(String, nullable=False, index=True)
    nomor_project = Column(String, nullable=False)
    kepala_project = Column(String, nullable=False)
    progres = Column(String, nullable=False, default="Draft")
    keterangan = Column(Text, nullable=True)
    tanggal = Column(Date, nullable=False)
    apd_nama = Column(String, nullable=False)
    jumlah = Column(Integer, CheckConstraint("jumlah >= 0"), nullable=False)
    unit = Column(String, nullable=False, default="pcs")
    harga = Column(Float, CheckConstraint("harga >= 0"), nullable=False)
    total = Column(Float, Computed("jumlah * harga", persisted=True))
