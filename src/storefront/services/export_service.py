from __future__ import annotations

from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from storefront.domain.errors import ValidationError
from storefront.domain.models import Order


class OrderExportService:
    """Writes the orders currently loaded in the client to an .xlsx workbook."""

    def export_orders_excel(self, path: str, orders: Iterable[Order], include_user: bool) -> int:
        orders = list(orders)
        if not orders:
            raise ValidationError("No orders to export.")

        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, end_col: int):
            ref = f"A1:{get_column_letter(end_col)}{ws.max_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        # -------- 1) Orders --------
        ws = wb.active
        ws.title = "Orders"
        headers = ["Order ID"] + (["User"] if include_user else []) + ["Date", "Status", "Amount", "Items"]
        ws.append(headers)
        bold_row(ws, 1)

        amount_col = get_column_letter(headers.index("Amount") + 1)
        for row, o in enumerate(orders, start=2):
            values = [o.id] + ([o.user_id or ""] if include_user else [])
            values += [o.date or "", o.status or "", float(o.amount), len(o.product_items)]
            ws.append(values)
            money(ws[f"{amount_col}{row}"])

        ws.freeze_panes = "A2"
        set_widths(ws, {get_column_letter(i + 1): 16 for i in range(len(headers))})
        add_table(ws, "OrdersTable", len(headers))

        # -------- 2) Items --------
        ws2 = wb.create_sheet("Items")
        ws2.append(["Order ID", "Product ID", "Qty", "Unit Price", "Line Total"])
        bold_row(ws2, 1)

        out_row = 2
        for o in orders:
            for it in o.product_items:
                ws2.append([o.id, it.product_id, int(it.quantity), float(it.price), float(it.line_total)])
                money(ws2[f"D{out_row}"])
                money(ws2[f"E{out_row}"])
                out_row += 1

        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 10, "B": 12, "C": 6, "D": 14, "E": 14})
        if ws2.max_row >= 2:
            add_table(ws2, "OrderItems", 5)

        wb.save(path)
        return len(orders)
