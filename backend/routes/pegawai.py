# backend/routes/pegawai.py
import logging
import time
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.apd import ApdBengkel
from models.pegawai import Divisi, Pegawai, Posisi
from models.users import User
from utils import storage
from utils.audit import write_log
from utils.excel import dokumentasi_workbook, pegawai_workbook, timestamped_filename, xlsx_response
from utils.tokenJWT import get_current_user
import schemas.pegawai as pegawai_schemas

router = APIRouter(prefix="/pegawai", tags=["Pegawai"])
logger = logging.getLogger(__name__)

# APD type -> (bucket folder, link column)
DOKUMENTASI = {
    "HELM": ("helm-docs", "link_helm"),
    "SHOES": ("shoes-docs", "link_shoes"),
    "KATELPACK": ("katelpack-docs", "link_katelpack"),
}


def _serialize(p: Pegawai) -> Dict:
    return {
        "id": p.id,
        "created_at": p.created_at,
        "nama": p.nama,
        "nip": p.nip,
        "divisi_id": p.divisi_id,
        "posisi_id": p.posisi_id,
        "bengkel_id": p.bengkel_id,
        "size_sepatu": p.size_sepatu,
        "jenis_sepatu": p.jenis_sepatu,
        "warna_katelpack": p.warna_katelpack,
        "size_katelpack": p.size_katelpack,
        "warna_helm": p.warna_helm,
        "link_helm": p.link_helm,
        "link_shoes": p.link_shoes,
        "link_katelpack": p.link_katelpack,
        "divisi_name": p.divisi.nama_divisi if p.divisi else None,
        "posisi_name": p.posisi.nama_posisi if p.posisi else None,
        "bengkel_name": p.bengkel.name if p.bengkel else None,
    }


def _get_pegawai_or_404(db: Session, pegawai_id: int) -> Pegawai:
    pegawai = db.query(Pegawai).filter(Pegawai.id == pegawai_id).first()
    if not pegawai:
        raise HTTPException(status_code=404, detail="Pegawai tidak ditemukan")
    return pegawai


def _check_references(db: Session, data: Dict) -> None:
    checks = (
        ("divisi_id", Divisi, "Divisi tidak ditemukan"),
        ("posisi_id", Posisi, "Posisi tidak ditemukan"),
        ("bengkel_id", ApdBengkel, "Bengkel tidak ditemukan"),
    )
    for field, model, message in checks:
        value = data.get(field)
        if value is not None and not db.query(model.id).filter(model.id == value).first():
            raise HTTPException(status_code=400, detail=message)


def _filtered_query(db: Session, divisi_id=None, posisi_id=None, bengkel_id=None, nama=None):
    query = db.query(Pegawai)
    if divisi_id is not None:
        query = query.filter(Pegawai.divisi_id == divisi_id)
    if posisi_id is not None:
        query = query.filter(Pegawai.posisi_id == posisi_id)
    if bengkel_id is not None:
        query = query.filter(Pegawai.bengkel_id == bengkel_id)
    if nama:
        query = query.filter(Pegawai.nama.ilike(f"%{nama.strip()}%"))
    return query.order_by(Pegawai.nama.asc(), Pegawai.id.asc())


def _view_rows(db: Session, apd_type: str, base_url: str) -> List[Dict]:
    query = db.query(Pegawai)
    if apd_type == "HELM":
        query = query.filter(Pegawai.warna_helm.isnot(None), Pegawai.warna_helm != "")
    elif apd_type == "SHOES":
        query = query.filter(or_(
            Pegawai.size_sepatu > 0,
            Pegawai.jenis_sepatu.isnot(None) & (Pegawai.jenis_sepatu != ""),
        ))
    else:
        query = query.filter(or_(
            Pegawai.warna_katelpack.isnot(None) & (Pegawai.warna_katelpack != ""),
            Pegawai.size_katelpack.isnot(None) & (Pegawai.size_katelpack != ""),
        ))

    link_column = DOKUMENTASI[apd_type][1]
    rows = []
    for no, p in enumerate(query.order_by(Pegawai.nama.asc(), Pegawai.id.asc()).all(), start=1):
        link = getattr(p, link_column)
        rows.append({
            "no": no,
            "id": p.id,
            "nama": p.nama,
            "nip": p.nip,
            "warna_helm": p.warna_helm,
            "size_sepatu": p.size_sepatu,
            "jenis_sepatu": p.jenis_sepatu,
            "warna_katelpack": p.warna_katelpack,
            "size_katelpack": p.size_katelpack,
            "link": link,
            "signed_url": storage.create_signed_url(base_url, link) if link else None,
        })
    return rows


def _apd_type_or_404(apd_type: str) -> str:
    apd_type = apd_type.upper()
    if apd_type not in DOKUMENTASI:
        raise HTTPException(status_code=404, detail="Jenis APD tidak dikenal")
    return apd_type


# ---------- list / export ----------
@router.get("", response_model=List[pegawai_schemas.PegawaiResponse])
def list_pegawai(
    divisi_id: Optional[int] = Query(None),
    posisi_id: Optional[int] = Query(None),
    bengkel_id: Optional[int] = Query(None),
    nama: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return [_serialize(p) for p in _filtered_query(db, divisi_id, posisi_id, bengkel_id, nama).all()]


@router.get("/export")
def export_pegawai(
    divisi_id: Optional[int] = Query(None),
    posisi_id: Optional[int] = Query(None),
    bengkel_id: Optional[int] = Query(None),
    nama: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    grouped: Dict[str, List[Dict]] = {}
    for p in _filtered_query(db, divisi_id, posisi_id, bengkel_id, nama).all():
        row = _serialize(p)
        grouped.setdefault(row["divisi_name"] or "Tanpa Divisi", []).append(row)

    groups = sorted(grouped.items(), key=lambda kv: kv[0].lower())
    return xlsx_response(pegawai_workbook(groups), timestamped_filename("Data_Pegawai"))


# ---------- mandatory APD views ----------
@router.get("/helm", response_model=List[pegawai_schemas.DokumentasiRow])
def list_helm(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _view_rows(db, "HELM", str(request.base_url))


@router.get("/shoes", response_model=List[pegawai_schemas.DokumentasiRow])
def list_shoes(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _view_rows(db, "SHOES", str(request.base_url))


@router.get("/katelpack", response_model=List[pegawai_schemas.DokumentasiRow])
def list_katelpack(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _view_rows(db, "KATELPACK", str(request.base_url))


@router.get("/{apd_type}/export")
def export_view(
    apd_type: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    apd_type = _apd_type_or_404(apd_type)
    rows = _view_rows(db, apd_type, str(request.base_url))
    prefix = {"HELM": "Data_Helm", "SHOES": "Data_Shoes", "KATELPACK": "Data_Katelpack"}[apd_type]
    return xlsx_response(dokumentasi_workbook(apd_type, rows), timestamped_filename(prefix))


# ---------- CRUD ----------
@router.post("", response_model=pegawai_schemas.PegawaiResponse, status_code=201)
def create_pegawai(
    payload: pegawai_schemas.PegawaiCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    _check_references(db, data)

    pegawai = Pegawai(**data)
    db.add(pegawai)
    db.commit()
    db.refresh(pegawai)
    write_log(db, user_id=current_user.id, action="CREATE", resource="pegawai",
              ip=request.client.host, meta={"id": pegawai.id, "nama": pegawai.nama})
    return _serialize(pegawai)


@router.get("/{pegawai_id}", response_model=pegawai_schemas.PegawaiResponse)
def get_pegawai(pegawai_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _serialize(_get_pegawai_or_404(db, pegawai_id))


@router.patch("/{pegawai_id}", response_model=pegawai_schemas.PegawaiResponse)
def update_pegawai(
    pegawai_id: int,
    payload: pegawai_schemas.PegawaiUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pegawai = _get_pegawai_or_404(db, pegawai_id)
    changes = payload.model_dump(exclude_unset=True)
    for required in ("nama", "nip", "divisi_id", "posisi_id"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} wajib diisi")
    _check_references(db, changes)

    for field, value in changes.items():
        setattr(pegawai, field, value)
    db.commit()
    db.refresh(pegawai)
    write_log(db, user_id=current_user.id, action="UPDATE", resource="pegawai",
              ip=request.client.host, meta={"id": pegawai.id})
    return _serialize(pegawai)


@router.delete("/{pegawai_id}", status_code=204)
def delete_pegawai(
    pegawai_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pegawai = _get_pegawai_or_404(db, pegawai_id)
    keys = [k for k in (pegawai.link_helm, pegawai.link_shoes, pegawai.link_katelpack) if k]

    db.delete(pegawai)
    db.commit()

    if keys:
        try:
            storage.remove_objects(keys)
        except storage.StorageError as e:
            logger.warning(f"Documentation of pegawai {pegawai_id} not removed: {e}")

    write_log(db, user_id=current_user.id, action="DELETE", resource="pegawai",
              ip=request.client.host, meta={"id": pegawai_id})
    return None


# ---------- documentation photos ----------
@router.put("/{pegawai_id}/dokumentasi/{apd_type}", response_model=pegawai_schemas.PegawaiResponse)
def upload_dokumentasi(
    pegawai_id: int,
    apd_type: str,
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    apd_type = _apd_type_or_404(apd_type)
    pegawai = _get_pegawai_or_404(db, pegawai_id)
    folder, link_column = DOKUMENTASI[apd_type]

    ext = PurePosixPath(file.filename or "").suffix.lstrip(".").lower() or "jpg"
    prefix = f"pegawai-{pegawai_id}-"
    key = f"{folder}/{prefix}{int(time.time() * 1000)}.{ext}"

    try:
        # One photo per employee and APD type
        old = storage.list_objects(folder, search=prefix)
        if old:
            storage.remove_objects(f"{folder}/{name}" for name in old)
        storage.upload_object(key, file.file, upsert=True)
    except storage.StorageError as e:
        write_log(db, user_id=current_user.id, action="UPLOAD", resource="pegawai",
                  status="FAIL", ip=request.client.host, meta={"id": pegawai_id, "error": str(e)})
        raise HTTPException(status_code=500, detail=f"Gagal upload dokumentasi: {e}")

    try:
        setattr(pegawai, link_column, key)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        storage.remove_objects([key])
        logger.error(f"Saving documentation link for pegawai {pegawai_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Gagal menyimpan link dokumentasi")

    db.refresh(pegawai)
    write_log(db, user_id=current_user.id, action="UPLOAD", resource="pegawai",
              ip=request.client.host, meta={"id": pegawai_id, "apd_type": apd_type, "path": key})
    return _serialize(pegawai)


@router.delete("/{pegawai_id}/dokumentasi/{apd_type}", response_model=pegawai_schemas.PegawaiResponse)
def delete_dokumentasi(
    pegawai_id: int,
    apd_type: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    apd_type = _apd_type_or_404(apd_type)
    pegawai = _get_pegawai_or_404(db, pegawai_id)
    link_column = DOKUMENTASI[apd_type][1]

    key = getattr(pegawai, link_column)
    if not key:
        raise HTTPException(status_code=404, detail="Dokumentasi tidak ditemukan")

    # The link is cleared even if the object cannot be removed
    setattr(pegawai, link_column, None)
    db.commit()
    try:
        storage.remove_objects([storage.key_from_url(key)])
    except storage.StorageError as e:
        logger.warning(f"Documentation object {key} not removed: {e}")

    db.refresh(pegawai)
    write_log(db, user_id=current_user.id, action="DELETE", resource="pegawai",
              ip=request.client.host, meta={"id": pegawai_id, "apd_type": apd_type})
    return _serialize(pegawai)
