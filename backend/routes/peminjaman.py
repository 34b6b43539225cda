# backend/routes/peminjaman.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.peminjaman import ApdPeminjaman, PeminjamanStatus
from models.users import User
from utils.audit import write_log
from utils.excel import peminjaman_workbook, timestamped_filename, xlsx_response
from utils.tokenJWT import get_current_user
import schemas.peminjaman as peminjaman_schemas

router = APIRouter(prefix="/peminjaman", tags=["Peminjaman"])


def _check_dates(pinjam, kembali) -> None:
    if pinjam and kembali and kembali < pinjam:
        raise HTTPException(status_code=400, detail="Tanggal kembali tidak boleh sebelum tanggal pinjam")


def _filtered_query(db: Session, status=None, nama_peminjam=None, divisi=None):
    query = db.query(ApdPeminjaman)
    if status:
        query = query.filter(ApdPeminjaman.status == status)
    if nama_peminjam:
        query = query.filter(ApdPeminjaman.nama_peminjam.ilike(f"%{nama_peminjam}%"))
    if divisi:
        query = query.filter(ApdPeminjaman.divisi.ilike(f"%{divisi}%"))
    return query.order_by(ApdPeminjaman.tanggal_pinjam.desc(), ApdPeminjaman.id.desc())


@router.get("", response_model=List[peminjaman_schemas.PeminjamanResponse])
def list_peminjaman(
    status: Optional[PeminjamanStatus] = Query(None),
    nama_peminjam: Optional[str] = Query(None),
    divisi: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _filtered_query(db, status, nama_peminjam, divisi).all()


@router.get("/export")
def export_peminjaman(
    status: Optional[PeminjamanStatus] = Query(None),
    nama_peminjam: Optional[str] = Query(None),
    divisi: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _filtered_query(db, status, nama_peminjam, divisi).all()
    return xlsx_response(peminjaman_workbook(rows), timestamped_filename("Peminjaman_APD"))


@router.post("", response_model=peminjaman_schemas.PeminjamanResponse, status_code=201)
def create_peminjaman(
    payload: peminjaman_schemas.PeminjamanCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _check_dates(payload.tanggal_pinjam, payload.tanggal_kembali)

    status = payload.status
    if status is None:
        status = PeminjamanStatus.DIKEMBALIKAN if payload.tanggal_kembali else PeminjamanStatus.DIPINJAM

    loan = ApdPeminjaman(**payload.model_dump(exclude={"status"}), status=status)
    db.add(loan)
    db.commit()
    db.refresh(loan)
    write_log(db, user_id=current_user.id, action="CREATE", resource="apd_peminjaman",
              ip=request.client.host, meta={"id": loan.id})
    return loan


@router.get("/{loan_id}", response_model=peminjaman_schemas.PeminjamanResponse)
def get_peminjaman(loan_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    loan = db.query(ApdPeminjaman).filter(ApdPeminjaman.id == loan_id).first()
    if not loan:
        raise HTTPException(status_code=404, detail="Data peminjaman tidak ditemukan")
    return loan


@router.patch("/{loan_id}", response_model=peminjaman_schemas.PeminjamanResponse)
def update_peminjaman(
    loan_id: int,
    payload: peminjaman_schemas.PeminjamanUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    loan = db.query(ApdPeminjaman).filter(ApdPeminjaman.id == loan_id).first()
    if not loan:
        raise HTTPException(status_code=404, detail="Data peminjaman tidak ditemukan")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("status", "missing") is None:
        changes.pop("status")
    _check_dates(
        changes.get("tanggal_pinjam", loan.tanggal_pinjam),
        changes.get("tanggal_kembali", loan.tanggal_kembali),
    )

    # A return date without an explicit status closes the loan
    if changes.get("tanggal_kembali") and "status" not in changes:
        changes["status"] = PeminjamanStatus.DIKEMBALIKAN

    for field, value in changes.items():
        if value is None and field != "tanggal_kembali":
            continue
        setattr(loan, field, value)
    db.commit()
    db.refresh(loan)
    write_log(db, user_id=current_user.id, action="UPDATE", resource="apd_peminjaman",
              ip=request.client.host, meta={"id": loan.id, "status": loan.status.value})
    return loan


@router.delete("/{loan_id}", status_code=204)
def delete_peminjaman(
    loan_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    loan = db.query(ApdPeminjaman).filter(ApdPeminjaman.id == loan_id).first()
    if not loan:
        raise HTTPException(status_code=404, detail="Data peminjaman tidak ditemukan")

    db.delete(loan)
    db.commit()
    write_log(db, user_id=current_user.id, action="DELETE", resource="apd_peminjaman",
              ip=request.client.host, meta={"id": loan_id})
    return None
