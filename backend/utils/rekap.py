# backend/utils/rekap.py
"""Monthly reconciliation ("batch rekap").

For every item issued during a month the balance row holds::

    saldo_akhir = stock_awal + realisasi - distribusi

``stock_awal`` is the item's current quantity, ``distribusi`` the sum of the
month's daily issuances and ``realisasi`` a manually entered receipt figure
that survives regeneration.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.apd import ApdDaily, ApdItem, ApdMonthly
from utils.periode import calculate_periode, month_range

logger = logging.getLogger(__name__)

NO_DAILY_DATA = "Tidak ada data harian untuk periode yang dipilih. Pastikan sudah ada data distribusi APD untuk bulan tersebut."


class RekapError(Exception):
    """Raised when a period cannot be reconciled."""


def compute_saldo(stock_awal, realisasi, distribusi) -> int:
    return (stock_awal or 0) + (realisasi or 0) - (distribusi or 0)


def generate_batch_rekap(db: Session, periode) -> Dict:
    """Creates or refreshes the balance rows of one period in a single transaction.

    Rows of items whose issuances were all deleted stay in the period with
    ``distribusi`` reset to zero.
    """
    periode = calculate_periode(periode)
    start, end = month_range(periode)

    sums = dict(
        db.query(ApdDaily.apd_id, func.sum(ApdDaily.qty))
        .filter(ApdDaily.tanggal >= start, ApdDaily.tanggal < end)
        .group_by(ApdDaily.apd_id)
        .all()
    )
    existing = {
        row.apd_id: row
        for row in db.query(ApdMonthly).filter(ApdMonthly.periode == periode).all()
    }
    if not sums and not existing:
        raise RekapError(NO_DAILY_DATA)

    apd_ids = sorted(set(sums) | set(existing))
    created_count = 0
    updated_count = 0
    try:
        items = {it.id: it for it in db.query(ApdItem).filter(ApdItem.id.in_(apd_ids)).all()}

        for apd_id in apd_ids:
            item = items.get(apd_id)
            stock_awal = (item.jumlah if item else 0) or 0
            distribusi = int(sums.get(apd_id) or 0)
            satuan = (item.satuan if item else None) or "Pcs"

            row = existing.get(apd_id)
            if row is not None:
                # realisasi is entered by hand and kept as is
                row.stock_awal = stock_awal
                row.distribusi = distribusi
                row.satuan = satuan
                row.saldo_akhir = compute_saldo(stock_awal, row.realisasi, distribusi)
                updated_count += 1
            else:
                db.add(ApdMonthly(
                    apd_id=apd_id,
                    periode=periode,
                    stock_awal=stock_awal,
                    realisasi=0,
                    distribusi=distribusi,
                    saldo_akhir=compute_saldo(stock_awal, 0, distribusi),
                    satuan=satuan,
                ))
                created_count += 1

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Batch rekap for {periode} failed: {e}")
        raise RekapError(f"Gagal membuat rekap: {e}") from e

    logger.info(f"Batch rekap {periode}: {created_count} created, {updated_count} updated")
    return {
        "periode": periode,
        "total_items": len(apd_ids),
        "created_count": created_count,
        "updated_count": updated_count,
    }


def list_monthly(db: Session, periode=None, apd_id: Optional[int] = None) -> List[ApdMonthly]:
    """Balance rows with stock_awal synced from the live item quantity."""
    query = db.query(ApdMonthly)
    if periode:
        query = query.filter(ApdMonthly.periode == calculate_periode(periode))
    if apd_id is not None:
        query = query.filter(ApdMonthly.apd_id == apd_id)
    rows = query.order_by(ApdMonthly.apd_id.asc(), ApdMonthly.periode.desc()).all()

    changed = False
    for row in rows:
        live_stock = (row.apd_item.jumlah if row.apd_item else row.stock_awal) or 0
        saldo = compute_saldo(live_stock, row.realisasi, row.distribusi)
        if row.stock_awal != live_stock or row.saldo_akhir != saldo:
            row.stock_awal = live_stock
            row.saldo_akhir = saldo
            changed = True
    if changed:
        db.commit()
    return rows


def update_monthly(db: Session, row: ApdMonthly, changes: Dict) -> ApdMonthly:
    """Applies stock_awal/realisasi/distribusi edits and recomputes the balance."""
    for field in ("stock_awal", "realisasi", "distribusi"):
        if changes.get(field) is not None:
            setattr(row, field, changes[field])
    row.saldo_akhir = compute_saldo(row.stock_awal, row.realisasi, row.distribusi)
    db.commit()
    db.refresh(row)
    return row


def list_periods(db: Session, model=ApdMonthly) -> List[date]:
    rows = db.query(model.periode).distinct().order_by(model.periode.desc()).all()
    return [r[0] for r in rows]
