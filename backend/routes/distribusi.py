# backend/routes/distribusi.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from database import get_db
from models.apd import ApdBengkel, ApdDaily, ApdItem
from models.users import User
from utils.audit import write_log
from utils.excel import pengeluaran_workbook, timestamped_filename, xlsx_response
from utils.periode import calculate_periode, format_periode_name
from utils.rekap import list_periods
from utils.tokenJWT import get_current_user
import schemas.distribusi as distribusi_schemas

router = APIRouter(prefix="/distribusi", tags=["Distribusi"])


def _periode_or_400(value: str):
    try:
        return calculate_periode(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Format periode tidak valid (YYYY-MM atau YYYY-MM-DD)")


def _serialize(d: ApdDaily) -> Dict:
    return {
        "id": d.id,
        "created_at": d.created_at,
        "apd_id": d.apd_id,
        "tanggal": d.tanggal,
        "nama": d.nama,
        "bengkel_id": d.bengkel_id,
        "qty": d.qty,
        "periode": d.periode,
        "apd_name": d.apd_item.name if d.apd_item else None,
        "satuan": d.apd_item.satuan if d.apd_item else None,
        "bengkel_name": d.bengkel.name if d.bengkel else None,
    }


def _pengeluaran_rows(db: Session, periode: Optional[str], apd_id: Optional[int]) -> List[Dict]:
    query = db.query(ApdDaily)
    if periode:
        query = query.filter(ApdDaily.periode == _periode_or_400(periode))
    if apd_id is not None:
        query = query.filter(ApdDaily.apd_id == apd_id)

    rows = []
    for d in query.order_by(ApdDaily.tanggal.asc(), ApdDaily.id.asc()).all():
        row = _serialize(d)
        rows.append({k: row[k] for k in ("id", "nama", "tanggal", "bengkel_name", "apd_name", "qty", "satuan", "periode")})
    return rows


@router.post("", response_model=distribusi_schemas.DistribusiResponse, status_code=201)
def create_distribusi(
    payload: distribusi_schemas.DistribusiCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not db.query(ApdItem.id).filter(ApdItem.id == payload.apd_id).first():
        raise HTTPException(status_code=400, detail="APD tidak ditemukan")
    if not db.query(ApdBengkel.id).filter(ApdBengkel.id == payload.bengkel_id).first():
        raise HTTPException(status_code=400, detail="Bengkel tidak ditemukan")

    daily = ApdDaily(
        apd_id=payload.apd_id,
        tanggal=payload.tanggal,
        nama=payload.nama.strip(),
        bengkel_id=payload.bengkel_id,
        qty=payload.qty,
        periode=calculate_periode(payload.tanggal),
    )
    db.add(daily)
    db.commit()
    db.refresh(daily)
    write_log(db, user_id=current_user.id, action="CREATE", resource="apd_daily",
              ip=request.client.host, meta={"id": daily.id, "apd_id": daily.apd_id, "qty": daily.qty})
    return _serialize(daily)


@router.get("", response_model=List[distribusi_schemas.DistribusiResponse])
def list_distribusi(
    periode: Optional[str] = Query(None, description="YYYY-MM atau YYYY-MM-DD"),
    bengkel_id: Optional[int] = Query(None),
    apd_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(ApdDaily)
    if periode:
        query = query.filter(ApdDaily.periode == _periode_or_400(periode))
    if bengkel_id is not None:
        query = query.filter(ApdDaily.bengkel_id == bengkel_id)
    if apd_id is not None:
        query = query.filter(ApdDaily.apd_id == apd_id)
    return [_serialize(d) for d in query.order_by(ApdDaily.tanggal.desc(), ApdDaily.id.desc()).all()]


@router.get("/periods", response_model=List[distribusi_schemas.PeriodeOption])
def list_distribusi_periods(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [{"periode": p, "label": format_periode_name(p)} for p in list_periods(db, ApdDaily)]


@router.get("/pengeluaran", response_model=List[distribusi_schemas.PengeluaranRow])
def pengeluaran_report(
    periode: Optional[str] = Query(None),
    apd_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _pengeluaran_rows(db, periode, apd_id)


@router.get("/pengeluaran/export")
def export_pengeluaran(
    periode: Optional[str] = Query(None),
    apd_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _pengeluaran_rows(db, periode, apd_id)

    apd_name = "Semua APD"
    if apd_id is not None:
        item = db.query(ApdItem).filter(ApdItem.id == apd_id).first()
        apd_name = item.name if item else "-"
    periode_label = format_periode_name(periode) if periode else "Semua Periode"

    wb = pengeluaran_workbook(rows, periode_label, apd_name)
    return xlsx_response(wb, timestamped_filename("Pengeluaran_APD"))


@router.delete("/{daily_id}", status_code=204)
def delete_distribusi(
    daily_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    daily = db.query(ApdDaily).filter(ApdDaily.id == daily_id).first()
    if not daily:
        raise HTTPException(status_code=404, detail="Data distribusi tidak ditemukan")

    db.delete(daily)
    db.commit()
    write_log(db, user_id=current_user.id, action="DELETE", resource="apd_daily",
              ip=request.client.host, meta={"id": daily_id})
    return None
