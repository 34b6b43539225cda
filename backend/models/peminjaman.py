# backend/models/peminjaman.py
import enum
from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, func
from database import Base

# Loan states
class PeminjamanStatus(str, enum.Enum):
    DIPINJAM = "Dipinjam"
    DIKEMBALIKAN = "Dikembalikan"

# Equipment lent out to a person; tanggal_kembali stays empty until returned
class ApdPeminjaman(Base):
    __tablename__ = "apd_peminjaman"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    nama_peminjam = Column(String, nullable=False)
    divisi = Column(String, nullable=False)
    nama_apd = Column(String, nullable=False)
    tanggal_pinjam = Column(Date, nullable=False)
    tanggal_kembali = Column(Date, nullable=True)
    status = Column(
        Enum(PeminjamanStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PeminjamanStatus.DIPINJAM,
    )
