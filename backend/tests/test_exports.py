from datetime import date
from types import SimpleNamespace

from utils.excel import (
    balance_report_workbook,
    content_disposition,
    format_tanggal_dmy,
    pegawai_workbook,
    stock_opname_workbook,
)
from utils.pdf import generate_balance_report_pdf


def test_content_disposition_keeps_utf8_name():
    header = content_disposition("Rekap_Januari_Ü.xlsx")
    assert header.startswith('attachment; filename="Rekap_Januari_.xlsx"')
    assert "filename*=UTF-8''Rekap_Januari_%C3%9C.xlsx" in header


def test_dmy_dates_are_not_zero_padded():
    assert format_tanggal_dmy(date(2025, 1, 5)) == "5-1-2025"
    assert format_tanggal_dmy("2025-11-30") == "30-11-2025"
    assert format_tanggal_dmy(None) == "Tanggal tidak valid"


def test_stock_opname_defaults_missing_values():
    wb = stock_opname_workbook([SimpleNamespace(name="Masker", jumlah=None, satuan=None)])
    ws = wb.active
    assert [c.value for c in ws[2]] == [1, "Masker", 0, "-"]


def test_pegawai_numbering_restarts_per_group():
    groups = [
        ("Produksi", [{"nama": "A"}, {"nama": "B"}]),
        ("Gudang", [{"nama": "C"}]),
    ]
    ws = pegawai_workbook(groups).active
    assert [ws.cell(row=r, column=1).value for r in range(2, 7)] == ["Produksi", 1, 2, "Gudang", 1]


def test_balance_report_marks_negative_saldo():
    rows = [
        {"apd_name": "Helm", "stock_awal": 5, "realisasi": 0, "distribusi": 8, "saldo_akhir": -3, "satuan": None},
        {"apd_name": "Masker", "stock_awal": 10, "realisasi": 2, "distribusi": 1, "saldo_akhir": 11, "satuan": "Box"},
    ]
    ws = balance_report_workbook(rows, "Januari 2025", "GENERAL ENGINEERING").active
    assert ws["A2"].value == "GENERAL ENGINEERING"
    assert ws["G4"].value == "Pcs"
    assert ws["F4"].font.color.rgb.endswith("FF0000")


def test_balance_report_pdf_renders_many_rows():
    rows = [
        {"apd_name": f"APD {i}", "stock_awal": i, "realisasi": 0, "distribusi": 1, "saldo_akhir": i - 1, "satuan": "Pcs"}
        for i in range(80)
    ]
    pdf = generate_balance_report_pdf(rows, "Januari 2025", "GENERAL ENGINEERING")
    assert pdf.startswith(b"%PDF")
