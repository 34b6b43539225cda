# backend/models/pegawai.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base


class Divisi(Base):
    __tablename__ = "divisi"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    nama_divisi = Column(String, nullable=False, unique=True)


class Posisi(Base):
    __tablename__ = "posisi"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    nama_posisi = Column(String, nullable=False, unique=True)


# Employee with the sizes/colours of the mandatory APD set (shoes, helmet,
# coverall) and storage paths of the hand-over documentation photos
class Pegawai(Base):
    __tablename__ = "pegawai"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    nama = Column(String, nullable=False, index=True)
    nip = Column(String, nullable=False, index=True)
    divisi_id = Column(Integer, ForeignKey("divisi.id"), nullable=True)
    posisi_id = Column(Integer, ForeignKey("posisi.id"), nullable=True)
    bengkel_id = Column(Integer, ForeignKey("apd_bengkel.id"), nullable=True)

    size_sepatu = Column(Integer, nullable=True)
    jenis_sepatu = Column(String, nullable=True)
    warna_katelpack = Column(String, nullable=True)
    size_katelpack = Column(String, nullable=True)
    warna_helm = Column(String, nullable=True)

    link_helm = Column(String, nullable=True)
    link_shoes = Column(String, nullable=True)
    link_katelpack = Column(String, nullable=True)

    divisi = relationship("Divisi")
    posisi = relationship("Posisi")
    bengkel = relationship("ApdBengkel")
