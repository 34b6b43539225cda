# backend/routes/pengajuan.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.pengajuan import PengajuanApd
from models.users import User
from utils.audit import write_log
from utils.excel import pengajuan_workbook, timestamped_filename, xlsx_response
from utils.tokenJWT import get_current_user
import schemas.pengajuan as pengajuan_schemas

router = APIRouter(prefix="/pengajuan", tags=["Pengajuan"])

# Columns that may never be cleared by an update
REQUIRED_FIELDS = {"nama_project", "nomor_project", "kepala_project", "progres", "tanggal", "apd_nama", "jumlah", "unit", "harga"}


def _filtered_query(db: Session, nama_project=None, progres=None):
    query = db.query(PengajuanApd)
    if nama_project:
        query = query.filter(PengajuanApd.nama_project.ilike(f"%{nama_project}%"))
    if progres:
        query = query.filter(PengajuanApd.progres.ilike(f"%{progres}%"))
    return query.order_by(PengajuanApd.created_at.desc(), PengajuanApd.id.desc())


def _get_or_404(db: Session, pengajuan_id: int) -> PengajuanApd:
    pengajuan = db.query(PengajuanApd).filter(PengajuanApd.id == pengajuan_id).first()
    if not pengajuan:
        raise HTTPException(status_code=404, detail="Pengajuan tidak ditemukan")
    return pengajuan


@router.get("", response_model=List[pengajuan_schemas.PengajuanResponse])
def list_pengajuan(
    nama_project: Optional[str] = Query(None),
    progres: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _filtered_query(db, nama_project, progres).all()


@router.get("/export")
def export_pengajuan(
    nama_project: Optional[str] = Query(None),
    progres: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _filtered_query(db, nama_project, progres).all()
    return xlsx_response(pengajuan_workbook(rows), timestamped_filename("Pengajuan_APD"))


@router.post("", response_model=pengajuan_schemas.PengajuanResponse, status_code=201)
def create_pengajuan(
    payload: pengajuan_schemas.PengajuanCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pengajuan = PengajuanApd(**payload.model_dump())
    db.add(pengajuan)
    db.commit()
    # total is generated by the database
    db.refresh(pengajuan)
    write_log(db, user_id=current_user.id, action="CREATE", resource="pengajuan_apd",
              ip=request.client.host, meta={"id": pengajuan.id, "total": pengajuan.total})
    return pengajuan


@router.get("/{pengajuan_id}", response_model=pengajuan_schemas.PengajuanResponse)
def get_pengajuan(pengajuan_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_or_404(db, pengajuan_id)


@router.patch("/{pengajuan_id}", response_model=pengajuan_schemas.PengajuanResponse)
def update_pengajuan(
    pengajuan_id: int,
    payload: pengajuan_schemas.PengajuanUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pengajuan = _get_or_404(db, pengajuan_id)
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(pengajuan, field, value)
    db.commit()
    db.refresh(pengajuan)
    write_log(db, user_id=current_user.id, action="UPDATE", resource="pengajuan_apd",
              ip=request.client.host, meta={"id": pengajuan.id, "total": pengajuan.total})
    return pengajuan


@router.delete("/{pengajuan_id}", status_code=204)
def delete_pengajuan(
    pengajuan_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pengajuan = _get_or_404(db, pengajuan_id)
    db.delete(pengajuan)
    db.commit()
    write_log(db, user_id=current_user.id, action="DELETE", resource="pengajuan_apd",
              ip=request.client.host, meta={"id": pengajuan_id})
    return None
