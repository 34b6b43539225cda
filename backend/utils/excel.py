# backend/utils/excel.py
"""Workbook builders for the dashboard exports.

Each builder takes already-loaded rows (ORM objects or schema instances) and
returns an openpyxl ``Workbook`` with a fixed column layout. Routes turn the
workbook into a download with ``xlsx_response``.
"""
from datetime import date, datetime
from io import BytesIO
from typing import Any, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote

from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_THIN = Side(style="thin", color="000000")
BORDER = Border(top=_THIN, bottom=_THIN, left=_THIN, right=_THIN)
HEADER_FILL = PatternFill("solid", fgColor="E3F2FD")
CENTER = Alignment(horizontal="center", vertical="center")


# ---------- helpers ----------
def _val(row: Any, name: str, default=None):
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def _dash(value) -> Any:
    return "-" if value is None or value == "" else value


def format_tanggal(value, fmt: str = "%d/%m/%Y") -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return value.strftime(fmt)


def format_tanggal_dmy(value) -> str:
    """``D-M-YYYY`` without zero padding (signature sheets)."""
    if not value:
        return "Tanggal tidak valid"
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return f"{value.day}-{value.month}-{value.year}"


def format_rupiah(amount) -> str:
    amount = int(round(float(amount or 0)))
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(amount):,}".replace(",", ".")


def _set_widths(ws, widths: Sequence[int]) -> None:
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _style_header(ws, row_idx: int, n_cols: int, fill: PatternFill = HEADER_FILL, font: Font = None) -> None:
    for col in range(1, n_cols + 1):
        cell = ws.cell(row=row_idx, column=col)
        cell.font = font or Font(bold=True)
        cell.alignment = CENTER
        cell.fill = fill
        cell.border = BORDER


def _border_rows(ws, first_row: int, last_row: int, n_cols: int) -> None:
    for r in range(first_row, last_row + 1):
        for c in range(1, n_cols + 1):
            ws.cell(row=r, column=c).border = BORDER


def _simple_table(title: str, headers: List[str], rows: List[list], widths: Sequence[int]) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(headers)
    for r in rows:
        ws.append(r)
    _style_header(ws, 1, len(headers))
    _border_rows(ws, 2, ws.max_row, len(headers))
    _set_widths(ws, widths)
    return wb


def workbook_bytes(wb: Workbook) -> BytesIO:
    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio


def content_disposition(pretty_filename: str, fallback_ascii: Optional[str] = None) -> str:
    fallback = (fallback_ascii or pretty_filename).encode("ascii", "ignore").decode() or "export.xlsx"
    return "attachment; filename=\"{fallback}\"; filename*=UTF-8''{utf8}".format(
        fallback=fallback.replace('"', ''),
        utf8=quote(pretty_filename, safe=""),
    )


def timestamped_filename(prefix: str, ext: str = "xlsx") -> str:
    now = datetime.now()
    return f"{prefix}_{now.strftime('%Y-%m-%d')}_{now.strftime('%H-%M-%S')}.{ext}"


def xlsx_response(wb: Workbook, filename: str) -> StreamingResponse:
    headers = {"Content-Disposition": content_disposition(filename)}
    return StreamingResponse(workbook_bytes(wb), media_type=XLSX_MEDIA_TYPE, headers=headers)


# ---------- stock opname ----------
def stock_opname_workbook(items: Iterable[Any]) -> Workbook:
    rows = [
        [i, _val(it, "name"), _val(it, "jumlah") or 0, _dash(_val(it, "satuan"))]
        for i, it in enumerate(items, start=1)
    ]
    return _simple_table("Stock Opname APD", ["NO", "NAMA APD", "STOCK AWAL", "SATUAN"], rows, [5, 30, 15, 15])


# ---------- pegawai ----------
PEGAWAI_HEADERS = [
    "NO", "NAMA", "POSISI", "SIZE (Sepatu)", "JENIS SEPATU",
    "Warna katelpack", "SIZE (katelpack)", "WARNA HELM", "NIP",
]


def pegawai_workbook(groups: Iterable[Tuple[str, List[Any]]]) -> Workbook:
    """Employees grouped by division; numbering restarts inside each group."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Data Pegawai"
    ws.append(PEGAWAI_HEADERS)
    _style_header(ws, 1, len(PEGAWAI_HEADERS), fill=PatternFill("solid", fgColor="FFFF00"))

    for divisi_name, members in groups:
        ws.append([divisi_name] + [""] * (len(PEGAWAI_HEADERS) - 1))
        sep_row = ws.max_row
        ws.merge_cells(start_row=sep_row, start_column=1, end_row=sep_row, end_column=len(PEGAWAI_HEADERS))
        ws.cell(row=sep_row, column=1).font = Font(bold=True)
        ws.cell(row=sep_row, column=1).fill = PatternFill("solid", fgColor="D9D9D9")
        for no, p in enumerate(members, start=1):
            size_sepatu = _val(p, "size_sepatu")
            ws.append([
                no,
                _dash(_val(p, "nama")),
                _dash(_val(p, "posisi_name")),
                str(size_sepatu) if size_sepatu else "-",
                _dash(_val(p, "jenis_sepatu")),
                _dash(_val(p, "warna_katelpack")),
                _dash(_val(p, "size_katelpack")),
                _dash(_val(p, "warna_helm")),
                _dash(_val(p, "nip")),
            ])

    _border_rows(ws, 2, ws.max_row, len(PEGAWAI_HEADERS))
    _set_widths(ws, [6, 25, 18, 14, 16, 16, 14, 14, 16])
    return wb


DOKUMENTASI_LAYOUTS = {
    "HELM": (
        "Data Pegawai Helm",
        ["NO", "NAMA", "NIP", "WARNA HELM", "DOKUMENTASI"],
        ["warna_helm"],
        [6, 25, 20, 15, 50],
    ),
    "SHOES": (
        "Data Pegawai Shoes",
        ["NO", "NAMA", "NIP", "SIZE SEPATU", "JENIS SEPATU", "DOKUMENTASI"],
        ["size_sepatu", "jenis_sepatu"],
        [6, 25, 20, 12, 16, 50],
    ),
    "KATELPACK": (
        "Data Pegawai Katelpack",
        ["NO", "NAMA", "NIP", "WARNA KATELPACK", "SIZE KATELPACK", "DOKUMENTASI"],
        ["warna_katelpack", "size_katelpack"],
        [6, 25, 20, 16, 16, 50],
    ),
}


def dokumentasi_workbook(apd_type: str, rows: Iterable[Any]) -> Workbook:
    title, headers, fields, widths = DOKUMENTASI_LAYOUTS[apd_type]
    data = []
    for r in rows:
        data.append(
            [_val(r, "no"), _dash(_val(r, "nama")), _dash(_val(r, "nip"))]
            + [_dash(_val(r, f)) for f in fields]
            + [_dash(_val(r, "signed_url"))]
        )
    return _simple_table(title, headers, data, widths)


# ---------- pengeluaran pekerja ----------
PENGELUARAN_HEADERS = ["NO", "NAMA", "Tanggal", "Bengkel/Biro/Jabatan", "Qty", "TANDA TANGAN"]


def pengeluaran_workbook(rows: Iterable[Any], periode_label: str, apd_name: str) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "Pengeluaran APD"
    n = len(PENGELUARAN_HEADERS)

    ws.append(["Laporan Pengeluaran Alat Pelindung Diri (APD)"])
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=n)
    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    ws.cell(row=1, column=1).alignment = CENTER

    ws.append([f"Nama APD yang di minta : {apd_name}", "", "", f"Periode : {periode_label}", "", ""])
    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=3)
    ws.merge_cells(start_row=2, start_column=4, end_row=2, end_column=n)
    ws.append([""])

    ws.append(PENGELUARAN_HEADERS)
    header_row = ws.max_row
    _style_header(ws, header_row, n)

    for no, r in enumerate(rows, start=1):
        ws.append([
            no,
            _val(r, "nama") or "",
            format_tanggal_dmy(_val(r, "tanggal")),
            _val(r, "bengkel_name") or "",
            _val(r, "qty") or 0,
            "",
        ])
    _border_rows(ws, header_row + 1, ws.max_row, n)

    # Signature block
    ws.append([""])
    ws.append(["Mengetahui"])
    ws.append(["Inspektor Safety", "", "Inspektor Safety", "", "Ka. Biro K3LH", ""])
    ws.append([""] * n)

    _set_widths(ws, [6, 28, 14, 28, 8, 22])
    return wb


# ---------- batch rekap (balance report) ----------
REKAP_HEADERS = ["No", "PPE", "Stock PPE", "Realisasi", "Distribusi", "Saldo Akhir", "Satuan"]


def balance_report_workbook(rows: Iterable[Any], periode_label: str, department: str) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "Balance Report"
    n = len(REKAP_HEADERS)

    ws.append(["PERSONAL PROTECTION EQUIPMENT BALANCE REPORT"])
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=n)
    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    ws.cell(row=1, column=1).alignment = CENTER

    ws.append([department, "", "", f"Recapitulation Date : {periode_label}", "", "", ""])
    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=3)
    ws.merge_cells(start_row=2, start_column=4, end_row=2, end_column=n)
    for col in (1, 4):
        ws.cell(row=2, column=col).font = Font(bold=True)
        ws.cell(row=2, column=col).alignment = CENTER

    ws.append(REKAP_HEADERS)
    _style_header(ws, 3, n, fill=PatternFill("solid", fgColor="000000"), font=Font(bold=True, color="FFFFFF"))

    for no, r in enumerate(rows, start=1):
        saldo = _val(r, "saldo_akhir") or 0
        ws.append([
            no,
            _val(r, "apd_name") or "-",
            _val(r, "stock_awal") or 0,
            _val(r, "realisasi") or 0,
            _val(r, "distribusi") or 0,
            saldo,
            _val(r, "satuan") or "Pcs",
        ])
        if saldo < 0:
            ws.cell(row=ws.max_row, column=6).font = Font(color="FF0000")

    _border_rows(ws, 1, ws.max_row, n)
    _set_widths(ws, [6, 35, 12, 12, 12, 12, 10])
    return wb


# ---------- peminjaman ----------
def peminjaman_workbook(rows: Iterable[Any]) -> Workbook:
    data = [
        [
            i,
            _val(r, "nama_peminjam"),
            _val(r, "divisi"),
            _val(r, "nama_apd"),
            format_tanggal(_val(r, "tanggal_pinjam")),
            format_tanggal(_val(r, "tanggal_kembali")),
        ]
        for i, r in enumerate(rows, start=1)
    ]
    headers = ["NO", "NAMA PEMINJAM", "DIVISI", "NAMA APD", "TGL PINJAM", "TGL KEMBALI"]
    return _simple_table("Peminjaman APD", headers, data, [5, 25, 15, 25, 12, 12])


# ---------- pengajuan ----------
PENGAJUAN_HEADERS = [
    "NO", "NAMA PROJECT", "NOMOR PROJECT", "KEPALA PROJECT", "PROGRES", "TANGGAL",
    "NAMA APD", "JUMLAH", "UNIT", "HARGA", "TOTAL", "KETERANGAN",
]


def pengajuan_workbook(rows: Iterable[Any]) -> Workbook:
    data = [
        [
            i,
            _val(r, "nama_project"),
            _val(r, "nomor_project"),
            _val(r, "kepala_project"),
            _val(r, "progres"),
            format_tanggal(_val(r, "tanggal")),
            _val(r, "apd_nama"),
            _val(r, "jumlah"),
            _val(r, "unit"),
            format_rupiah(_val(r, "harga")),
            format_rupiah(_val(r, "total")),
            _dash(_val(r, "keterangan")),
        ]
        for i, r in enumerate(rows, start=1)
    ]
    return _simple_table("Pengajuan APD", PENGAJUAN_HEADERS, data, [5, 25, 16, 20, 12, 12, 22, 8, 8, 15, 15, 25])


# ---------- uploaded files ----------
def files_workbook(rows: Iterable[Any]) -> Workbook:
    data = [
        [
            i,
            _val(r, "nama_file"),
            format_tanggal(_val(r, "created_at"), "%d %b %Y %H:%M"),
            _dash(_val(r, "user_id")),
            "Active",
            "N/A",
            _val(r, "file_url"),
        ]
        for i, r in enumerate(rows, start=1)
    ]
    headers = ["NO", "NAMA FILE", "TANGGAL UPLOAD", "USER ID", "STATUS", "UKURAN", "LINK FILE"]
    return _simple_table("Pengajuan Konsumable", headers, data, [5, 35, 20, 12, 10, 10, 60])


def files_summary_workbook(rows: Iterable[Any]) -> Workbook:
    """One line per uploader: file count, first and latest upload."""
    grouped = {}
    for r in rows:
        grouped.setdefault(_val(r, "user_id"), []).append(r)

    data = []
    for no, (user_id, files) in enumerate(grouped.items(), start=1):
        files = sorted(files, key=lambda f: _val(f, "created_at") or datetime.min, reverse=True)
        data.append([
            no,
            _dash(user_id),
            len(files),
            format_tanggal(_val(files[-1], "created_at"), "%d %b %Y %H:%M"),
            format_tanggal(_val(files[0], "created_at"), "%d %b %Y %H:%M"),
            _val(files[0], "nama_file"),
        ])
    headers = ["NO", "USER ID", "JUMLAH FILE", "UPLOAD PERTAMA", "UPLOAD TERAKHIR", "FILE TERAKHIR"]
    return _simple_table("Summary", headers, data, [5, 12, 12, 20, 20, 35])
