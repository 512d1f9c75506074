from io import BytesIO
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from core.formatting import format_currency, format_number, format_percentage

PRICING_METHOD_LABELS = {
    "markup": "Markup (%)",
    "price": "Fixed price",
    "profit": "Target profit",
    "margin": "Target margin (%)",
}


def _create_styles():
    """Create reusable style definitions."""
    thin_border = Side(style="thin", color="000000")
    return {
        "title_font": Font(bold=True, size=14),
        "section_font": Font(bold=True, size=11),
        "header_font": Font(bold=True, size=10),
        "header_fill": PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid"),
        "warning_fill": PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid"),
        "muted_fill": PatternFill(start_color="EDEDED", end_color="EDEDED", fill_type="solid"),
        "subtotal_font": Font(bold=True),
        "border": Border(left=thin_border, right=thin_border, top=thin_border, bottom=thin_border),
        "center_align": Alignment(horizontal="center", vertical="center"),
        "right_align": Alignment(horizontal="right", vertical="center"),
        "left_align": Alignment(horizontal="left", vertical="center"),
    }


def _apply_header_row(ws, row: int, columns: List[str], styles: dict):
    for col_idx, col_name in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=col_name)
        cell.font = styles["header_font"]
        cell.fill = styles["header_fill"]
        cell.border = styles["border"]
        cell.alignment = styles["center_align"]


def _apply_data_row(ws, row: int, values: List[Any], styles: dict, alignments: List[str] = None):
    for col_idx, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col_idx, value=value)
        cell.border = styles["border"]
        if alignments and col_idx <= len(alignments):
            align_type = alignments[col_idx - 1]
            cell.alignment = styles.get(f"{align_type}_align", styles["left_align"])


def _apply_subtotal_row(ws, row: int, values: List[Any], styles: dict, alignments: List[str]):
    _apply_data_row(ws, row, values, styles, alignments)
    for col in range(1, len(values) + 1):
        ws.cell(row=row, column=col).font = styles["subtotal_font"]


def _set_column_widths(ws, widths: List[int]):
    for col_idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width


def _section_title(ws, row: int, title: str, styles: dict) -> int:
    ws.cell(row=row, column=1, value=title).font = styles["section_font"]
    return row + 1


def _allocation_label(per_unit: bool) -> str:
    return "Per unit" if per_unit else "Per batch"


def build_product_cost_excel(product: Dict[str, Any], currency: str = "USD") -> BytesIO:
    """Costing sheet for one product: lines, per-unit cost, pricing and variants."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Costing"
    styles = _create_styles()

    def money(value):
        return format_currency(value, currency)

    costing = product.get("costing", {})
    pricing = product.get("pricing", {})
    batch_size = product.get("batch_size") or 1

    current_row = 1
    ws.cell(row=current_row, column=1, value=f"COSTING SHEET: {product.get('name', '-')}").font = styles["title_font"]
    ws.merge_cells(start_row=current_row, start_column=1, end_row=current_row, end_column=6)
    current_row += 2

    header_info = [
        ("SKU:", product.get("sku") or "-"),
        ("Category:", product.get("category") or "-"),
        ("Status:", (product.get("status") or "-").replace("_", " ").title()),
        ("Batch size:", batch_size),
        ("Currency:", currency),
    ]
    for label, value in header_info:
        ws.cell(row=current_row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=value)
        current_row += 1
    current_row += 1

    # Materials
    materials = product.get("materials", [])
    current_row = _section_title(ws, current_row, "MATERIALS", styles)
    material_columns = ["Material", "Quantity", "Unit", "Price / unit", "Units made", "Cost / unit"]
    material_alignments = ["left", "right", "center", "right", "right", "right"]
    _apply_header_row(ws, current_row, material_columns, styles)
    current_row += 1
    for m in materials:
        row_values = [
            m.get("name", "-"),
            format_number(m.get("quantity"), 3),
            m.get("unit", "-"),
            money(m.get("price_per_unit")),
            m.get("units_made", 1),
            money(m.get("line_cost")),
        ]
        _apply_data_row(ws, current_row, row_values, styles, material_alignments)
        current_row += 1
    _apply_subtotal_row(
        ws, current_row, ["TOTAL", "", "", "", "", money(costing.get("materials_cost"))], styles, material_alignments
    )
    current_row += 2

    # Labor
    labor = product.get("labor_costs", [])
    current_row = _section_title(ws, current_row, "LABOR", styles)
    labor_columns = ["Activity", "Minutes", "Hourly rate", "Allocation", "Line cost", "Cost / unit"]
    labor_alignments = ["left", "right", "right", "center", "right", "right"]
    _apply_header_row(ws, current_row, labor_columns, styles)
    current_row += 1
    for l in labor:
        per_unit = l.get("per_unit", True)
        line_cost = l.get("line_cost") or 0.0
        row_values = [
            l.get("activity", "-"),
            format_number(l.get("time_spent_minutes"), 1),
            money(l.get("hourly_rate")),
            _allocation_label(per_unit),
            money(line_cost),
            money(line_cost if per_unit else line_cost / batch_size),
        ]
        _apply_data_row(ws, current_row, row_values, styles, labor_alignments)
        current_row += 1
    _apply_subtotal_row(
        ws, current_row, ["TOTAL", "", "", "", "", money(costing.get("labor_cost"))], styles, labor_alignments
    )
    current_row += 2

    # Other costs
    others = product.get("other_costs", [])
    current_row = _section_title(ws, current_row, "OTHER COSTS", styles)
    other_columns = ["Item", "Quantity", "Cost", "Allocation", "Line cost", "Cost / unit"]
    other_alignments = ["left", "right", "right", "center", "right", "right"]
    _apply_header_row(ws, current_row, other_columns, styles)
    current_row += 1
    for o in others:
        per_unit = o.get("per_unit", True)
        line_cost = o.get("line_cost") or 0.0
        row_values = [
            o.get("item", "-"),
            format_number(o.get("quantity"), 2),
            money(o.get("cost")),
            _allocation_label(per_unit),
            money(line_cost),
            money(line_cost if per_unit else line_cost / batch_size),
        ]
        _apply_data_row(ws, current_row, row_values, styles, other_alignments)
        current_row += 1
    _apply_subtotal_row(
        ws, current_row, ["TOTAL", "", "", "", "", money(costing.get("other_cost"))], styles, other_alignments
    )
    current_row += 2

    # Summary
    current_row = _section_title(ws, current_row, "PRICING SUMMARY", styles)
    method = pricing.get("method")
    method_key = getattr(method, "value", method)
    summary_data = [
        ("Cost per unit:", money(costing.get("product_cost"))),
        ("Break-even price:", money(pricing.get("break_even_price"))),
        ("Pricing method:", PRICING_METHOD_LABELS.get(method_key, "-")),
        ("Method value:", format_number(pricing.get("value")) if pricing.get("value") is not None else "-"),
        ("Price:", money(pricing.get("price"))),
        ("Profit:", money(pricing.get("profit"))),
        ("Margin:", format_percentage(pricing.get("margin"), 2)),
        ("Markup:", format_percentage(pricing.get("markup"), 2)),
        ("Costs share of price:", format_percentage(pricing.get("costs_percentage"), 2)),
    ]
    for label, value in summary_data:
        ws.cell(row=current_row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=value)
        current_row += 1

    if pricing.get("price") is None:
        current_row += 1
        warning_cell = ws.cell(row=current_row, column=1, value="⚠ No pricing method set for this product")
        warning_cell.fill = styles["warning_fill"]
        ws.merge_cells(start_row=current_row, start_column=1, end_row=current_row, end_column=4)
        current_row += 1
    current_row += 1

    # Variants
    variants = product.get("variants", [])
    if variants:
        current_row = _section_title(ws, current_row, "VARIANTS", styles)
        variant_columns = ["Variant", "SKU", "Cost", "Price", "Stock", "Active"]
        variant_alignments = ["left", "center", "right", "right", "right", "center"]
        _apply_header_row(ws, current_row, variant_columns, styles)
        current_row += 1
        for v in variants:
            row_values = [
                v.get("display_name") or v.get("name", "-"),
                v.get("sku") or "-",
                money(v.get("effective_cost")),
                money(v.get("effective_price")),
                v.get("stock_level", 0),
                "Yes" if v.get("is_active", True) else "No",
            ]
            _apply_data_row(ws, current_row, row_values, styles, variant_alignments)
            if not v.get("is_active", True):
                for col in range(1, 7):
                    ws.cell(row=current_row, column=col).fill = styles["muted_fill"]
            current_row += 1

        variant_summary = product.get("variant_summary", {})
        _apply_subtotal_row(
            ws,
            current_row,
            ["ACTIVE STOCK", "", "", "", variant_summary.get("total_stock", 0), ""],
            styles,
            variant_alignments,
        )
        current_row += 1

    _set_column_widths(ws, [28, 14, 16, 16, 16, 16])

    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return stream
