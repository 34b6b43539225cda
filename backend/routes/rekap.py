# backend/routes/rekap.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from config import settings
from database import get_db
from models.apd import ApdMonthly
from models.users import User
from utils.audit import write_log
from utils.excel import balance_report_workbook, content_disposition, timestamped_filename, xlsx_response
from utils.pdf import generate_balance_report_pdf
from utils.periode import calculate_periode, format_periode_name
from utils.rekap import RekapError, generate_batch_rekap, list_monthly, list_periods, update_monthly
from utils.tokenJWT import get_current_user
import schemas.distribusi as distribusi_schemas
import schemas.rekap as rekap_schemas

router = APIRouter(prefix="/rekap", tags=["Rekap"])


def _periode_or_400(value: str):
    try:
        return calculate_periode(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Format periode tidak valid (YYYY-MM atau YYYY-MM-DD)")


def _serialize(row: ApdMonthly) -> Dict:
    return {
        "id": row.id,
        "created_at": row.created_at,
        "apd_id": row.apd_id,
        "apd_name": row.apd_item.name if row.apd_item else None,
        "periode": row.periode,
        "stock_awal": row.stock_awal,
        "realisasi": row.realisasi,
        "distribusi": row.distribusi,
        "saldo_akhir": row.saldo_akhir,
        "satuan": row.satuan,
    }


def _report_rows(db: Session, periode: str):
    p = _periode_or_400(periode)
    rows = [_serialize(r) for r in list_monthly(db, p)]
    if not rows:
        raise HTTPException(status_code=404, detail="Tidak ada data rekap untuk periode yang dipilih")
    return p, rows


@router.post("/generate", response_model=rekap_schemas.RekapGenerateResult)
def generate_rekap(
    payload: rekap_schemas.RekapGenerate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    periode = _periode_or_400(payload.periode)
    try:
        result = generate_batch_rekap(db, periode)
    except RekapError as e:
        write_log(db, user_id=current_user.id, action="GENERATE", resource="apd_monthly",
                  status="FAIL", ip=request.client.host, meta={"periode": str(periode), "error": str(e)})
        raise HTTPException(status_code=400, detail=str(e))

    write_log(db, user_id=current_user.id, action="GENERATE", resource="apd_monthly",
              ip=request.client.host, meta={**result, "periode": str(periode)})
    return result


@router.get("", response_model=List[rekap_schemas.RekapResponse])
def get_rekap(
    periode: Optional[str] = Query(None),
    apd_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    p = _periode_or_400(periode) if periode else None
    return [_serialize(r) for r in list_monthly(db, p, apd_id)]


@router.get("/periods", response_model=List[distribusi_schemas.PeriodeOption])
def get_rekap_periods(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [{"periode": p, "label": format_periode_name(p)} for p in list_periods(db)]


@router.get("/export")
def export_rekap(
    periode: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    p, rows = _report_rows(db, periode)
    wb = balance_report_workbook(rows, format_periode_name(p), settings.DEPARTMENT_NAME)
    return xlsx_response(wb, timestamped_filename(f"Batch_Rekap_{p.strftime('%Y-%m')}"))


@router.get("/export.pdf")
def export_rekap_pdf(
    periode: str = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    p, rows = _report_rows(db, periode)
    pdf_bytes = generate_balance_report_pdf(rows, format_periode_name(p), settings.DEPARTMENT_NAME)
    filename = timestamped_filename(f"Batch_Rekap_{p.strftime('%Y-%m')}", "pdf")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.patch("/{rekap_id}", response_model=rekap_schemas.RekapResponse)
def patch_rekap(
    rekap_id: int,
    payload: rekap_schemas.RekapUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = db.query(ApdMonthly).filter(ApdMonthly.id == rekap_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Data rekap tidak ditemukan")

    changes = payload.model_dump(exclude_unset=True)
    row = update_monthly(db, row, changes)
    write_log(db, user_id=current_user.id, action="UPDATE", resource="apd_monthly",
              ip=request.client.host, meta={"id": row.id, "changes": changes})
    return _serialize(row)
