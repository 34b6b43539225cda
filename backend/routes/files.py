# backend/routes/files.py
import logging
import time
from pathlib import PurePosixPath
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.files import ApdFile, JenisFile
from models.users import User
from utils import storage
from utils.audit import write_log
from utils.excel import files_summary_workbook, files_workbook, timestamped_filename, xlsx_response
from utils.tokenJWT import get_current_user
import schemas.files as files_schemas

router = APIRouter(prefix="/files", tags=["Files"])
storage_router = APIRouter(prefix="/storage", tags=["Storage"])
logger = logging.getLogger(__name__)


def _folder_for(jenis_file: JenisFile) -> str:
    return "logos" if jenis_file == JenisFile.LOGO_PERSONAL else "docs"


def _get_or_404(db: Session, file_id: int) -> ApdFile:
    row = db.query(ApdFile).filter(ApdFile.id == file_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="File tidak ditemukan")
    return row


def _export_prefix(jenis_file: Optional[JenisFile]) -> str:
    if jenis_file is None:
        return "Files"
    return "_".join(part.capitalize() for part in jenis_file.value.split("_"))


def _query(db: Session, jenis_file: Optional[JenisFile] = None, user_id: Optional[int] = None):
    query = db.query(ApdFile)
    if jenis_file is not None:
        query = query.filter(ApdFile.jenis_file == jenis_file)
    if user_id is not None:
        query = query.filter(ApdFile.user_id == user_id)
    return query.order_by(ApdFile.created_at.desc(), ApdFile.id.desc())


@router.post("", response_model=files_schemas.ApdFileResponse, status_code=201)
def upload_file(
    request: Request,
    file: UploadFile = File(...),
    jenis_file: JenisFile = Form(...),
    replace_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    replaced = _get_or_404(db, replace_id) if replace_id is not None else None

    nama_file = file.filename or "file"
    ext = PurePosixPath(nama_file).suffix.lstrip(".").lower() or "bin"
    ts = int(time.time() * 1000)
    key = f"{_folder_for(jenis_file)}/{jenis_file.value}-{current_user.id}-{ts}.{ext}"
    while storage.object_exists(key):
        ts += 1
        key = f"{_folder_for(jenis_file)}/{jenis_file.value}-{current_user.id}-{ts}.{ext}"

    try:
        storage.upload_object(key, file.file)
    except storage.StorageError as e:
        write_log(db, user_id=current_user.id, action="UPLOAD", resource="apd_files",
                  status="FAIL", ip=request.client.host, meta={"name": nama_file, "error": str(e)})
        raise HTTPException(status_code=500, detail=f"Gagal upload file: {e}")

    file_url = storage.public_url(str(request.base_url), key)
    old_key = replaced.storage_path if replaced else None
    try:
        if replaced:
            replaced.file_url = file_url
            replaced.storage_path = key
            replaced.nama_file = nama_file
            replaced.jenis_file = jenis_file
            replaced.user_id = current_user.id
            row = replaced
        else:
            row = ApdFile(
                file_url=file_url,
                storage_path=key,
                nama_file=nama_file,
                jenis_file=jenis_file,
                user_id=current_user.id,
            )
            db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        storage.remove_objects([key])
        logger.error(f"Registering uploaded file {key} failed: {e}")
        raise HTTPException(status_code=500, detail="Gagal menyimpan data file")

    if old_key:
        try:
            storage.remove_objects([old_key])
        except storage.StorageError as e:
            logger.warning(f"Replaced object {old_key} not removed: {e}")

    db.refresh(row)
    write_log(db, user_id=current_user.id, action="UPLOAD", resource="apd_files",
              ip=request.client.host, meta={"id": row.id, "path": key, "replaced": old_key})
    return row


@router.get("", response_model=List[files_schemas.ApdFileResponse])
def list_files(
    jenis_file: Optional[JenisFile] = Query(None),
    mine: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _query(db, jenis_file, current_user.id if mine else None).all()

    # Registry rows whose object vanished from the bucket are dropped
    present = []
    stale = 0
    for row in rows:
        if storage.object_exists(row.storage_path):
            present.append(row)
        else:
            db.delete(row)
            stale += 1
    if stale:
        db.commit()
        logger.info(f"Removed {stale} registry rows without a stored object")
    return present


@router.get("/latest", response_model=files_schemas.ApdFileResponse)
def latest_file(
    jenis_file: JenisFile = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = _query(db, jenis_file, current_user.id).first()
    if not row:
        raise HTTPException(status_code=404, detail="File tidak ditemukan")
    return row


@router.get("/export")
def export_files(
    jenis_file: Optional[JenisFile] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _query(db, jenis_file).all()
    return xlsx_response(files_workbook(rows), timestamped_filename(_export_prefix(jenis_file)))


@router.get("/export/summary")
def export_files_summary(
    jenis_file: Optional[JenisFile] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = _query(db, jenis_file).all()
    return xlsx_response(files_summary_workbook(rows), timestamped_filename(f"Summary_{_export_prefix(jenis_file)}"))


@router.get("/{file_id}/download")
def download_file(file_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    row = _get_or_404(db, file_id)
    try:
        path = storage.local_path(row.storage_path)
    except storage.StorageError:
        raise HTTPException(status_code=404, detail="File tidak ditemukan di storage")
    return FileResponse(path, filename=row.nama_file)


@router.delete("/{file_id}", status_code=204)
def delete_file(
    file_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = _get_or_404(db, file_id)
    key = row.storage_path

    try:
        storage.remove_objects([key])
    except storage.StorageError as e:
        write_log(db, user_id=current_user.id, action="DELETE", resource="apd_files",
                  status="FAIL", ip=request.client.host, meta={"id": file_id, "error": str(e)})
        raise HTTPException(status_code=500, detail=f"Gagal menghapus file dari storage: {e}")

    db.delete(row)
    db.commit()
    write_log(db, user_id=current_user.id, action="DELETE", resource="apd_files",
              ip=request.client.host, meta={"id": file_id, "path": key})
    return None


# Short-lived links for documentation photos, no bearer token needed
@storage_router.get("/signed/{token}")
def serve_signed(token: str):
    try:
        key = storage.resolve_signed_token(token)
        path = storage.local_path(key)
    except storage.StorageError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FileResponse(path)
