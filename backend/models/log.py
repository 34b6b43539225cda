# backend/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index, func
from sqlalchemy.orm import relationship
from database import Base

# Audit entry written by write_log after every change to dashboard data:
# stock opname, issuances, rekap generation, uploads, logins and password resets
class Log(Base):
    __tablename__ = "logs"
    __table_args__ = (Index("ix_logs_resource_ts", "resource", "ts"),)

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    # Kept when the account is removed
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(50), index=True)    # LOGIN, CREATE, UPDATE, DELETE, UPLOAD, GENERATE ...
    resource = Column(String(50), index=True)  # table or area, e.g. apd_daily, apd_monthly, auth
    status = Column(String(20), index=True)    # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)

    # Row ids, changed fields, periods, storage paths
    meta = Column(JSON, nullable=True)

    user = relationship("User", lazy="joined", uselist=False)
