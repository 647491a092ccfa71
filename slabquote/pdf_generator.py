"""
PDF Quotation Generator.

Renders a QuotationSnapshot as an A4 portrait document.
Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header (company, client, seller, date, validity)
2. One table per material group, in display order
3. Totals (slab count, grand total, installments)
4. Payment method + bank details (when enabled)
5. Standard measurement disclaimer (when enabled)

Numbers come from the snapshot's summary and the shared cell formatting in
preview.py; nothing is recomputed here. Long groups are split across pages
and the table header is repeated on each new page.
"""

import logging
from datetime import date

from fpdf import FPDF

from .formatters import format_currency, format_date
from .preview import (
    TABLE_COLUMNS,
    bank_detail_lines,
    disclaimer_text,
    group_columns,
    installment_line,
    line_item_cells,
)
from .schemas import QuotationSnapshot

logger = logging.getLogger(__name__)

# Column widths in mm; both layouts fill the 190 mm printable width.
COLUMN_WIDTHS = {
    "Acabamento": 22,
    "Material": 50,
    "Preço/m²": 26,
    "Área (m²)": 20,
    "Medida líquida": 28,
    "Qtd": 12,
    "Total": 32,
}
COLUMN_WIDTHS_WITH_DETAILS = {
    "Acabamento": 22,
    "Material": 36,
    "Preço/m²": 24,
    "Área (m²)": 18,
    "Medida líquida": 26,
    "Qtd": 10,
    "Total": 27,
    "Detalhes": 27,
}

ROW_HEIGHT = 6
HEADER_ROW_HEIGHT = 7
SECTION_HEIGHT = 10


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class QuotationPDF(FPDF):
    """Custom PDF class for slab quotation documents."""

    def __init__(self, company=""):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.company = company
        self.set_margins(10, 15, 10)
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # We handle headers manually per section

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Página {self.page_no()}/{{nb}}", align="C")
        self.set_text_color(0, 0, 0)

    def ensure_space(self, height: float) -> bool:
        """Start a new page if `height` mm would not fit. Returns True on a break."""
        if self.will_page_break(height):
            self.add_page()
            return True
        return False

    def section_header(self, title):
        """Render a section header bar."""
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, _safe(f"  {title}"), fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """Render a table header row. cols: [(label, right_aligned, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(230, 230, 230)
        for label, right, width in cols:
            self.cell(width, HEADER_ROW_HEIGHT, _safe(label), border="B", fill=True,
                      align="R" if right else "L")
        self.ln()

    def table_row(self, values, cols):
        """Render a table data row; repeats the header first when a page break is due."""
        if self.ensure_space(ROW_HEIGHT):
            self.table_header(cols)
        self.set_font("Helvetica", "", 8)
        for val, (_, right, width) in zip(values, cols):
            self.cell(width, ROW_HEIGHT, self.fit_text(_safe(str(val)), width - 1),
                      align="R" if right else "L")
        self.ln()

    def subtotal_row(self, label, amount):
        """Render a subtotal row spanning the full width."""
        self.ensure_space(ROW_HEIGHT + 4)
        self.set_font("Helvetica", "B", 9)
        self.cell(140, ROW_HEIGHT, _safe(label), align="R", border="T")
        self.cell(50, ROW_HEIGHT, _safe(format_currency(amount)), align="R", border="T")
        self.ln(ROW_HEIGHT + 4)

    def fit_text(self, text: str, width: float) -> str:
        """Truncate `text` with '...' so it fits in `width` mm at the current font."""
        if self.get_string_width(text) <= width:
            return text
        while text and self.get_string_width(text + "...") > width:
            text = text[:-1]
        return text + "..."


def _columns_for(group):
    labels = group_columns(group)
    widths = COLUMN_WIDTHS_WITH_DETAILS if len(labels) > len(TABLE_COLUMNS) else COLUMN_WIDTHS
    return [(label, right, widths[label]) for label, right in labels]


def build_quotation_pdf(snapshot: QuotationSnapshot, today: date = None,
                        compress: bool = True) -> QuotationPDF:
    """Lay out the whole document and return the FPDF object (not yet serialized)."""
    quotation = snapshot.quotation
    summary = snapshot.summary
    today = today or date.today()

    pdf = QuotationPDF(company=quotation.company)
    pdf.set_compression(compress)
    pdf.add_page()

    # ── SECTION 1: Header ──
    top = pdf.get_y()
    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(130, 10, pdf.fit_text(_safe(f"Orçamento - {quotation.company}"), 128))
    pdf.set_font("Helvetica", "", 11)
    pdf.cell(0, 10, f"Data: {format_date(today)}", align="R", new_x="LMARGIN", new_y="NEXT")

    pdf.set_y(top + 10)
    pdf.cell(130, 6, pdf.fit_text(_safe(f"Cliente: {quotation.client}"), 128))
    pdf.cell(0, 6, f"Validade: {format_date(quotation.valid_until)}", align="R",
             new_x="LMARGIN", new_y="NEXT")
    if quotation.seller:
        pdf.cell(0, 6, _safe(f"Vendedor: {quotation.seller}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    # ── SECTION 2: Materials, one table per type ──
    for group in summary.groups:
        cols = _columns_for(group)
        with_details = len(cols) > len(TABLE_COLUMNS)
        # Keep the group title, header and first row together
        pdf.ensure_space(SECTION_HEIGHT + HEADER_ROW_HEIGHT + ROW_HEIGHT)
        pdf.section_header(group.label)
        pdf.table_header(cols)
        for item in group.items:
            pdf.table_row(line_item_cells(item, with_details), cols)
        pdf.subtotal_row(f"Subtotal {group.label}", group.subtotal)

    # ── SECTION 3: Totals ──
    pdf.ensure_space(30)
    pdf.set_font("Helvetica", "", 11)
    pdf.cell(0, 7, f"Total de Chapas: {summary.total_slabs}", new_x="LMARGIN", new_y="NEXT")

    pdf.set_fill_color(45, 55, 72)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(130, 10, "  VALOR TOTAL", fill=True)
    pdf.cell(60, 10, _safe(f"{format_currency(summary.grand_total)}  "), fill=True, align="R")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(12)

    installments = installment_line(snapshot)
    if installments:
        pdf.set_font("Helvetica", "", 11)
        pdf.cell(0, 6, _safe(installments), new_x="LMARGIN", new_y="NEXT")

    # ── SECTION 4: Payment ──
    pdf.ln(2)
    pdf.set_font("Helvetica", "", 11)
    pdf.cell(0, 6, _safe(f"Forma de Pagamento: {quotation.payment_method.label}"),
             new_x="LMARGIN", new_y="NEXT")

    bank_lines = bank_detail_lines(snapshot)
    if bank_lines:
        pdf.ensure_space(8 + 6 * len(bank_lines))
        pdf.ln(2)
        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(0, 6, _safe("Dados Bancários:"), new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "", 10)
        for line in bank_lines:
            pdf.cell(0, 6, _safe(line), new_x="LMARGIN", new_y="NEXT")

    # ── SECTION 5: Disclaimer ──
    disclaimer = disclaimer_text(snapshot)
    if disclaimer:
        pdf.ln(4)
        pdf.set_font("Helvetica", "I", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.multi_cell(0, 4.5, _safe(disclaimer), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)

    return pdf


def generate_quotation_pdf(snapshot: QuotationSnapshot, today: date = None,
                           compress: bool = True) -> bytes:
    """
    Generate the quotation PDF.

    Args:
        snapshot: QuotationStore.snapshot() output
        today: issue date printed in the header (defaults to today)
        compress: deflate page streams (disable to inspect the raw text)

    Returns:
        PDF bytes
    """
    pdf = build_quotation_pdf(snapshot, today=today, compress=compress)
    data = bytes(pdf.output())
    logger.info(
        "Generated quotation PDF: %d pages, %d bytes", pdf.page_no(), len(data),
    )
    return data
