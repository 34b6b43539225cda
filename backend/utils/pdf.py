# backend/utils/pdf.py

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

# Built-in Type1 fonts are used unless DejaVu is shipped in assets/fonts
FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts in ReportLab when they are available."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    if not FONT_REGULAR_PATH.exists():
        return

    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    else:
        FONT_BOLD_NAME = FONT_REGULAR_NAME
    logger.info("Registered DejaVu fonts for PDF reports")


# Column layout: (header, x position, alignment)
COLUMNS = [
    ("No", 22, "left"),
    ("PPE", 32, "left"),
    ("Stock PPE", 110, "right"),
    ("Realisasi", 130, "right"),
    ("Distribusi", 150, "right"),
    ("Saldo Akhir", 172, "right"),
    ("Satuan", 175, "left"),
]


def _get(row: Any, name: str, default=None):
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def generate_balance_report_pdf(rows: Iterable[Any], periode_label: str, department: str) -> bytes:
    """
    Renders the monthly balance report:
    - title and department / recapitulation date
    - one line per item with stock, realisasi, distribusi and saldo akhir
    - negative saldo printed in red
    - signature block
    """
    _init_fonts()

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4

    def draw_text(x, y, text, font=None, size=10, align="left", color=(0, 0, 0)):
        c.setFillColorRGB(*color)
        c.setFont(font or FONT_REGULAR_NAME, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)
        c.setFillColorRGB(0, 0, 0)

    def draw_header(current_y):
        c.setFillColorRGB(0, 0, 0)
        c.rect(20 * mm, current_y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
        for label, x, align in COLUMNS:
            draw_text(x * mm, current_y, label, font=FONT_BOLD_NAME, size=9, align=align, color=(1, 1, 1))
        return current_y - 8 * mm

    # --- title ---
    y = height - 20 * mm
    draw_text(width / 2, y, "PERSONAL PROTECTION EQUIPMENT BALANCE REPORT", font=FONT_BOLD_NAME, size=14, align="center")
    y -= 8 * mm
    draw_text(20 * mm, y, department, font=FONT_BOLD_NAME, size=10)
    draw_text(190 * mm, y, f"Recapitulation Date : {periode_label}", size=10, align="right")
    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 8 * mm

    # --- table ---
    y = draw_header(y)
    for idx, row in enumerate(rows, start=1):
        saldo = _get(row, "saldo_akhir") or 0
        values = [
            idx,
            str(_get(row, "apd_name") or "-")[:40],
            _get(row, "stock_awal") or 0,
            _get(row, "realisasi") or 0,
            _get(row, "distribusi") or 0,
            saldo,
            _get(row, "satuan") or "Pcs",
        ]
        for (label, x, align), value in zip(COLUMNS, values):
            color = (1, 0, 0) if label == "Saldo Akhir" and saldo < 0 else (0, 0, 0)
            draw_text(x * mm, y, value, size=9, align=align, color=color)

        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm

        if y < 50 * mm:
            c.showPage()
            y = draw_header(height - 20 * mm)

    # --- signatures ---
    y_signatures = 35 * mm
    if y < y_signatures + 25 * mm:
        c.showPage()

    c.setFont(FONT_REGULAR_NAME, 9)
    c.drawString(20 * mm, y_signatures + 18 * mm, "Mengetahui")
    c.setLineWidth(0.5)
    for center, label in ((45, "Inspektor Safety"), (105, "Inspektor Safety"), (165, "Ka. Biro K3LH")):
        c.line((center - 25) * mm, y_signatures, (center + 25) * mm, y_signatures)
        c.drawCentredString(center * mm, y_signatures - 4 * mm, label)

    c.showPage()
    c.save()
    return buf.getvalue()
