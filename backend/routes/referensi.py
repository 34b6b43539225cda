# backend/routes/referensi.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from models.pegawai import Divisi, Posisi
from models.users import User
from utils.tokenJWT import get_current_user
from utils.audit import write_log
import schemas.referensi as ref_schemas

router = APIRouter(tags=["Referensi"])


@router.get("/divisi", response_model=List[ref_schemas.DivisiResponse])
def list_divisi(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Divisi).order_by(Divisi.nama_divisi.asc()).all()


@router.post("/divisi", response_model=ref_schemas.DivisiResponse, status_code=201)
def create_divisi(
    payload: ref_schemas.DivisiCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    nama = payload.nama_divisi.strip()
    if db.query(Divisi).filter(func.lower(Divisi.nama_divisi) == nama.lower()).first():
        raise HTTPException(status_code=409, detail="Divisi sudah ada")

    divisi = Divisi(nama_divisi=nama)
    db.add(divisi)
    db.commit()
    db.refresh(divisi)
    write_log(db, user_id=current_user.id, action="CREATE", resource="divisi",
              ip=request.client.host, meta={"id": divisi.id})
    return divisi


@router.get("/posisi", response_model=List[ref_schemas.PosisiResponse])
def list_posisi(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(Posisi).order_by(Posisi.nama_posisi.asc()).all()


@router.post("/posisi", response_model=ref_schemas.PosisiResponse, status_code=201)
def create_posisi(
    payload: ref_schemas.PosisiCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    nama = payload.nama_posisi.strip()
    if db.query(Posisi).filter(func.lower(Posisi.nama_posisi) == nama.lower()).first():
        raise HTTPException(status_code=409, detail="Posisi sudah ada")

    posisi = Posisi(nama_posisi=nama)
    db.add(posisi)
    db.commit()
    db.refresh(posisi)
    write_log(db, user_id=current_user.id, action="CREATE", resource="posisi",
              ip=request.client.host, meta={"id": posisi.id})
    return posisi
