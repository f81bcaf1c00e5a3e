"""
Sales reporting.

``summarize_orders`` works on any iterable of orders and touches no database,
so it is shared by the analytics endpoint and both export formats.
"""

import io
from collections import Counter
from decimal import Decimal
from typing import NamedTuple

import openpyxl
import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from orders.models import OrderStatus
from orders.utils import format_currency, to_money

REPORT_TITLE = "Canteen Sales Report"
ORDER_COLUMNS = ['Date', 'Token', 'Order', 'Customer', 'Mobile', 'Items', 'Payment Method', 'Total']


class SalesSummary(NamedTuple):
    completed: list
    cancelled: list
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    payment_methods: dict
    cancellation_rate: float


def summarize_orders(orders):
    orders = list(orders)
    completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
    cancelled = [o for o in orders if o.status == OrderStatus.CANCELLED]

    revenue = sum((o.total_amount for o in completed), Decimal('0.00'))
    average = to_money(revenue / len(completed)) if completed else Decimal('0.00')
    rate = round(len(cancelled) / len(orders) * 100, 1) if orders else 0

    return SalesSummary(
        completed=completed,
        cancelled=cancelled,
        total_orders=len(orders),
        total_revenue=to_money(revenue),
        average_order_value=average,
        payment_methods=dict(Counter(o.payment_method for o in completed)),
        cancellation_rate=rate,
    )


def _period_label(start_date, end_date):
    if start_date and end_date:
        return f"Period: {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d}"
    if start_date:
        return f"Period: from {start_date:%Y-%m-%d}"
    if end_date:
        return f"Period: up to {end_date:%Y-%m-%d}"
    return "Period: all time"


def _items_label(order):
    return ", ".join(f"{item.quantity}x {item.menu_item.name}" for item in order.items.all())


def orders_frame(orders):
    """Completed orders as a DataFrame, one row per order"""
    rows = [
        {
            'Date': order.created_at.strftime('%Y-%m-%d %H:%M'),
            'Token': order.token,
            'Order': order.display_number,
            'Customer': order.customer.name,
            'Mobile': order.customer.mobile,
            'Items': _items_label(order),
            'Payment Method': order.get_payment_method_display(),
            'Total': float(order.total_amount),
        }
        for order in orders
    ]
    return pd.DataFrame(rows, columns=ORDER_COLUMNS)


def export_excel(summary, start_date=None, end_date=None):
    """Workbook bytes with a summary sheet and the completed-order listing"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Summary"

    header_font = Font(bold=True, size=12)
    title_font = Font(bold=True, size=16)

    ws['A1'] = REPORT_TITLE
    ws['A1'].font = title_font
    ws['A2'] = _period_label(start_date, end_date)
    ws.merge_cells('A1:D1')
    ws.merge_cells('A2:D2')

    metrics = [
        ('Total Orders', summary.total_orders),
        ('Completed Orders', len(summary.completed)),
        ('Cancelled Orders', len(summary.cancelled)),
        ('Total Revenue', float(summary.total_revenue)),
        ('Average Order Value', float(summary.average_order_value)),
        ('Cancellation Rate (%)', summary.cancellation_rate),
    ]
    for row, (label, value) in enumerate(metrics, 4):
        ws.cell(row=row, column=1, value=label).font = header_font
        ws.cell(row=row, column=2, value=value)

    row = len(metrics) + 5
    ws.cell(row=row, column=1, value='Payment Method').font = header_font
    ws.cell(row=row, column=2, value='Orders').font = header_font
    for method, count in sorted(summary.payment_methods.items()):
        row += 1
        ws.cell(row=row, column=1, value=method)
        ws.cell(row=row, column=2, value=count)

    orders_ws = wb.create_sheet("Completed Orders")
    for r_idx, values in enumerate(dataframe_to_rows(orders_frame(summary.completed), index=False, header=True), 1):
        for c_idx, value in enumerate(values, 1):
            cell = orders_ws.cell(row=r_idx, column=c_idx, value=value)
            if r_idx == 1:
                cell.font = header_font

    for sheet in (ws, orders_ws):
        for column in sheet.columns:
            column_letter = get_column_letter(column[0].column)
            width = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            sheet.column_dimensions[column_letter].width = min(width + 2, 50)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_pdf(summary, start_date=None, end_date=None):
    """PDF bytes with the headline numbers and the completed-order listing"""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    story = []

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'CustomTitle',
        parent=styles['Heading1'],
        fontSize=18,
        spaceAfter=30,
        alignment=1
    )

    story.append(Paragraph(REPORT_TITLE, title_style))
    story.append(Paragraph(_period_label(start_date, end_date), styles['Heading2']))
    story.append(Spacer(1, 20))

    metrics = [
        ['Total Orders', str(summary.total_orders)],
        ['Completed Orders', str(len(summary.completed))],
        ['Cancelled Orders', str(len(summary.cancelled))],
        ['Total Revenue', format_currency(summary.total_revenue)],
        ['Average Order Value', format_currency(summary.average_order_value)],
        ['Cancellation Rate', f"{summary.cancellation_rate}%"],
    ]
    for method, count in sorted(summary.payment_methods.items()):
        metrics.append([f"Paid by {method}", str(count)])

    metrics_table = Table(metrics)
    metrics_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(metrics_table)
    story.append(Spacer(1, 20))

    data = [['Date/Time', 'Token', 'Customer', 'Items', 'Payment', 'Total']]
    for order in summary.completed:
        data.append([
            order.created_at.strftime('%m/%d %H:%M'),
            str(order.token),
            order.customer.name[:20],
            _items_label(order)[:30],
            order.get_payment_method_display(),
            format_currency(order.total_amount),
        ])
    data.append(['', '', '', '', 'Total', format_currency(summary.total_revenue)])

    table = Table(data)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 10),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
        ('BACKGROUND', (0, 1), (-1, -2), colors.beige),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 1, colors.black)
    ]))
    story.append(table)
    doc.build(story)

    return buffer.getvalue()
