# backend/routes/apd.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from models.apd import ApdItem, ApdBengkel, ApdDaily, ApdMonthly
from models.users import User
from utils.tokenJWT import get_current_user
from utils.audit import write_log
from utils.excel import stock_opname_workbook, timestamped_filename, xlsx_response
import schemas.apd as apd_schemas

router = APIRouter(prefix="/apd", tags=["APD"])


def _get_item_or_404(db: Session, item_id: int) -> ApdItem:
    item = db.query(ApdItem).filter(ApdItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="APD tidak ditemukan")
    return item


# ---------- items / stock opname ----------
@router.get("/items", response_model=List[apd_schemas.ApdItemResponse])
def list_items(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(ApdItem).order_by(ApdItem.name.asc()).all()


@router.get("/items/export")
def export_items(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    items = db.query(ApdItem).order_by(ApdItem.name.asc()).all()
    return xlsx_response(stock_opname_workbook(items), timestamped_filename("Stock_Opname_APD"))


@router.post("/items", response_model=apd_schemas.ApdItemResponse, status_code=201)
def create_item(
    payload: apd_schemas.ApdItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = ApdItem(name=payload.name.strip(), satuan=payload.satuan, jumlah=payload.jumlah)
    db.add(item)
    db.commit()
    db.refresh(item)
    write_log(db, user_id=current_user.id, action="CREATE", resource="apd_items",
              ip=request.client.host, meta={"id": item.id, "name": item.name})
    return item


@router.patch("/items/{item_id}", response_model=apd_schemas.ApdItemResponse)
def update_item(
    item_id: int,
    payload: apd_schemas.ApdItemUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item_or_404(db, item_id)
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is not None:
            setattr(item, field, value.strip() if field == "name" else value)
    db.commit()
    db.refresh(item)
    write_log(db, user_id=current_user.id, action="STOCK_OPNAME", resource="apd_items",
              ip=request.client.host, meta={"id": item.id, "changes": changes})
    return item


@router.delete("/items/{item_id}", status_code=204)
def delete_item(
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = _get_item_or_404(db, item_id)

    # Items with history stay, otherwise the balance reports lose their rows
    in_use = (
        db.query(ApdDaily.id).filter(ApdDaily.apd_id == item_id).first()
        or db.query(ApdMonthly.id).filter(ApdMonthly.apd_id == item_id).first()
    )
    if in_use:
        raise HTTPException(status_code=409, detail="APD masih digunakan pada data distribusi atau rekap")

    db.delete(item)
    db.commit()
    write_log(db, user_id=current_user.id, action="DELETE", resource="apd_items",
              ip=request.client.host, meta={"id": item_id})
    return None


@router.get("/items/{item_id}/stock", response_model=apd_schemas.ApdStockResponse)
def get_item_stock(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    item = _get_item_or_404(db, item_id)
    return {"apd_id": item.id, "stock_awal": item.jumlah or 0}


# ---------- workshops ----------
@router.get("/bengkel", response_model=List[apd_schemas.BengkelResponse])
def list_bengkel(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(ApdBengkel).order_by(ApdBengkel.name.asc()).all()


@router.post("/bengkel", response_model=apd_schemas.BengkelResponse, status_code=201)
def create_bengkel(
    payload: apd_schemas.BengkelCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    name = payload.name.strip()
    exists = db.query(ApdBengkel).filter(func.lower(ApdBengkel.name) == name.lower()).first()
    if exists:
        raise HTTPException(status_code=409, detail="Bengkel sudah ada")

    bengkel = ApdBengkel(name=name)
    db.add(bengkel)
    db.commit()
    db.refresh(bengkel)
    write_log(db, user_id=current_user.id, action="CREATE", resource="apd_bengkel",
              ip=request.client.host, meta={"id": bengkel.id})
    return bengkel
