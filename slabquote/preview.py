"""
Screen preview — plain-text rendering of a QuotationSnapshot.

Column definitions and cell formatting live here and are shared with the
PDF generator, so both outputs show the same strings for the same snapshot.
"""

from datetime import date

from .formatters import format_currency, format_date, format_measure, format_number
from .schemas import LineItemView, MaterialGroup, QuotationSnapshot

# (label, right-aligned)
TABLE_COLUMNS = [
    ("Acabamento", False),
    ("Material", False),
    ("Preço/m²", True),
    ("Área (m²)", True),
    ("Medida líquida", False),
    ("Qtd", True),
    ("Total", True),
]
DETAILS_COLUMN = ("Detalhes", False)


def group_columns(group: MaterialGroup) -> list:
    """Details column only appears when some item in the group has details."""
    if group.has_details:
        return TABLE_COLUMNS + [DETAILS_COLUMN]
    return list(TABLE_COLUMNS)


def line_item_cells(item: LineItemView, with_details: bool = False) -> list:
    material = item.material
    cells = [
        material.finishing.label,
        material.name,
        format_currency(material.price_per_unit),
        format_number(item.area),
        format_measure(item.net_width, item.net_height),
        str(material.quantity),
        format_currency(item.line_total),
    ]
    if with_details:
        cells.append(material.details or "-")
    return cells


def build_preview_rows(snapshot: QuotationSnapshot) -> list:
    """
    Table data per material group, in display order.

    Returns: [{"type": MaterialType, "label": str, "columns": [str],
               "rows": [[str]], "subtotal": str}, ...]
    """
    tables = []
    for group in snapshot.summary.groups:
        columns = group_columns(group)
        with_details = len(columns) > len(TABLE_COLUMNS)
        tables.append({
            "type": group.type,
            "label": group.label,
            "columns": [label for label, _ in columns],
            "rows": [line_item_cells(item, with_details) for item in group.items],
            "subtotal": format_currency(group.subtotal),
        })
    return tables


def installment_line(snapshot: QuotationSnapshot):
    """'3x de R$ 100,00 (Boleto)', or None for a single payment."""
    summary = snapshot.summary
    if summary.installment_value is None:
        return None
    return (
        f"{summary.installments}x de {format_currency(summary.installment_value)} "
        f"({snapshot.quotation.payment_method.label})"
    )


def bank_detail_lines(snapshot: QuotationSnapshot) -> list:
    quotation = snapshot.quotation
    if not quotation.show_bank_details:
        return []
    bank = quotation.bank_details
    return [
        f"Banco: {bank.bank}",
        f"Agência: {bank.agency}",
        f"Conta: {bank.account}",
        f"CNPJ: {bank.cnpj}",
        f"Nome: {bank.company_name}",
        f"PIX: {bank.pix}",
    ]


def disclaimer_text(snapshot: QuotationSnapshot):
    quotation = snapshot.quotation
    if quotation.show_default_measure and quotation.default_measure_message:
        return quotation.default_measure_message
    return None


def _render_table(columns: list, rows: list) -> list:
    widths = [len(label) for label, _ in columns]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def fmt(cells):
        parts = []
        for (_, right), width, cell in zip(columns, widths, cells):
            parts.append(cell.rjust(width) if right else cell.ljust(width))
        return "  ".join(parts).rstrip()

    lines = [fmt([label for label, _ in columns])]
    lines.append("  ".join("-" * w for w in widths))
    lines.extend(fmt(row) for row in rows)
    return lines


def render_preview(snapshot: QuotationSnapshot, today: date = None) -> str:
    quotation = snapshot.quotation
    summary = snapshot.summary
    today = today or date.today()

    lines = [f"Orçamento - {quotation.company}"]
    if quotation.seller:
        lines.append(f"Vendedor: {quotation.seller}")
    lines.append(f"Cliente: {quotation.client}")
    lines.append(f"Data: {format_date(today)}")
    lines.append(f"Validade: {format_date(quotation.valid_until)}")

    if not summary.groups:
        lines.append("")
        lines.append("Nenhum material adicionado.")

    for group in summary.groups:
        columns = group_columns(group)
        with_details = len(columns) > len(TABLE_COLUMNS)
        lines.append("")
        lines.append(group.label)
        lines.extend(_render_table(
            columns, [line_item_cells(item, with_details) for item in group.items],
        ))

    lines.append("")
    lines.append(f"Total de Chapas: {summary.total_slabs}")
    lines.append(f"Valor Total: {format_currency(summary.grand_total)}")
    installments = installment_line(snapshot)
    if installments:
        lines.append(installments)

    lines.append("")
    lines.append(f"Forma de Pagamento: {quotation.payment_method.label}")
    bank_lines = bank_detail_lines(snapshot)
    if bank_lines:
        lines.append("Dados Bancários:")
        lines.extend(bank_lines)

    disclaimer = disclaimer_text(snapshot)
    if disclaimer:
        lines.append("")
        lines.append(disclaimer)

    return "\n".join(lines) + "\n"
