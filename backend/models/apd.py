# backend/models/apd.py
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint,
    UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from database import Base

# Model ApdItem
# Single piece of protective equipment held in stock. `jumlah` is the
# current quantity from the latest stock opname and doubles as the opening
# stock of the monthly balance report.
class ApdItem(Base):
    __tablename__ = "apd_items"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    name = Column(String, nullable=False, index=True)
    satuan = Column(String, nullable=True)
    jumlah = Column(Integer, CheckConstraint("jumlah >= 0"), nullable=False, default=0)


# Workshop / unit receiving consumables
class ApdBengkel(Base):
    __tablename__ = "apd_bengkel"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    name = Column(String, nullable=False, unique=True)


# Daily consumable issuance, one row per hand-out
class ApdDaily(Base):
    __tablename__ = "apd_daily"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    apd_id = Column(Integer, ForeignKey("apd_items.id"), nullable=False, index=True)
    tanggal = Column(Date, nullable=False)
    nama = Column(String, nullable=False)  # recipient
    bengkel_id = Column(Integer, ForeignKey("apd_bengkel.id"), nullable=False, index=True)
    qty = Column(Integer, CheckConstraint("qty > 0"), nullable=False)
    # First day of the month of `tanggal`
    periode = Column(Date, nullable=False, index=True)

    apd_item = relationship("ApdItem")
    bengkel = relationship("ApdBengkel")


# Monthly balance per item per period
class ApdMonthly(Base):
    __tablename__ = "apd_monthly"
    __table_args__ = (UniqueConstraint("apd_id", "periode", name="uq_apd_monthly_item_periode"),)

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    apd_id = Column(Integer, ForeignKey("apd_items.id"), nullable=False, index=True)
    periode = Column(Date, nullable=False, index=True)
    stock_awal = Column(Integer, nullable=False, default=0)
    realisasi = Column(Integer, nullable=False, default=0)
    distribusi = Column(Integer, nullable=False, default=0)
    # stock_awal + realisasi - distribusi, may go negative
    saldo_akhir = Column(Integer, nullable=False, default=0)
    satuan = Column(String, nullable=True)

    apd_item = relationship("ApdItem")
