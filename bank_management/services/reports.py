"""
Spreadsheet and PDF reports built from already-loaded ledger data.
"""

from html import escape
from io import BytesIO
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from bank_management.core.config import settings
from bank_management.models.client import Client
from bank_management.models.transaction import AccountTransaction

TRANSACTIONS_SHEET = "Transactions Info"
DETAILS_SHEET = "Account Details"
TRANSACTION_HEADERS = ["#", "Transaction Type", "Date", "Time", "Amount"]

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="0000FF", end_color="0000FF", fill_type="solid")


def _style_header(sheet: Worksheet) -> None:
    for cell in sheet[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def _fit_columns(sheet: Worksheet) -> None:
    for index, column in enumerate(sheet.columns, start=1):
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        sheet.column_dimensions[get_column_letter(index)].width = width + 2


def _write_transactions(sheet: Worksheet, transactions: Iterable[AccountTransaction]) -> None:
    sheet.append(TRANSACTION_HEADERS)
    count = 0
    for count, transaction in enumerate(transactions, start=1):
        sheet.append([
            str(count),
            transaction.transaction_type.name,
            transaction.date_of_execution.isoformat(),
            transaction.time_of_execution.isoformat(),
            f"$ {transaction.amount}",
        ])
    if count == 0:
        sheet.append(["No transactions found", "", "", "", ""])
    _style_header(sheet)
    _fit_columns(sheet)


def _to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_transactions_spreadsheet(transactions: Iterable[AccountTransaction]) -> bytes:
    """Workbook with one row per transaction."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = TRANSACTIONS_SHEET
    _write_transactions(sheet, transactions)
    return _to_bytes(workbook)


def render_account_statement(client: Client, transactions: Iterable[AccountTransaction]) -> bytes:
    """Workbook with the client's account details and its transactions."""
    account = client.banking_account
    workbook = Workbook()
    details = workbook.active
    details.title = DETAILS_SHEET
    rows: List[list] = [
        ["Field", "Value"],
        ["DNI", client.dni],
        ["Name", client.name],
        ["Email", client.email],
        ["Address", client.address or ""],
        ["Client Status", client.status.display_value],
        ["Account Number", account.account_number],
        ["Balance", f"$ {account.balance}"],
        ["Withdrawal Limit", f"$ {account.withdrawal_limit}"],
        ["Opened", account.account_opened_date.isoformat()],
        ["Closed", account.account_closing_date.isoformat() if account.account_closing_date else ""],
        ["Account Status", account.status.display_value],
    ]
    for row in rows:
        details.append(row)
    _style_header(details)
    _fit_columns(details)

    _write_transactions(workbook.create_sheet(TRANSACTIONS_SHEET), transactions)
    return _to_bytes(workbook)


# ==================== PDF ====================

PDF_TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.blue),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
])
PDF_LABEL_STYLE = TableStyle([
    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
    ("TEXTCOLOR", (0, 0), (0, -1), colors.darkgrey),
])
NO_TRANSACTIONS_MESSAGE = "No transactions available for this account."


def _pdf_header(title: str) -> list:
    styles = getSampleStyleSheet()
    return [
        Paragraph(escape(settings.BANK_NAME), styles["Title"]),
        Paragraph(escape(settings.SUPPORT_EMAIL), styles["Normal"]),
        Spacer(1, 12),
        Paragraph(title, styles["Heading2"]),
    ]


def _pdf_transactions(transactions: Iterable[AccountTransaction]) -> list:
    rows = [TRANSACTION_HEADERS[1:]]
    for transaction in transactions:
        rows.append([
            transaction.transaction_type.display_value,
            transaction.date_of_execution.isoformat(),
            transaction.time_of_execution.isoformat(),
            f"$ {transaction.amount}",
        ])
    if len(rows) == 1:
        return [Paragraph(NO_TRANSACTIONS_MESSAGE, getSampleStyleSheet()["Italic"])]
    table = Table(rows, repeatRows=1)
    table.setStyle(PDF_TABLE_STYLE)
    return [table]


def _labelled(rows: List[list]) -> Table:
    table = Table(rows, hAlign="LEFT")
    table.setStyle(PDF_LABEL_STYLE)
    return table


def _build_pdf(elements: list, title: str) -> bytes:
    buffer = BytesIO()
    SimpleDocTemplate(buffer, pagesize=A4, title=title).build(elements)
    return buffer.getvalue()


def render_account_details_pdf(client: Client) -> bytes:
    """PDF with the client's personal data and the state of its account."""
    account = client.banking_account
    elements = _pdf_header("Client Details")
    elements.append(_labelled([
        ["DNI:", client.dni],
        ["Name:", client.name],
        ["Email:", client.email],
        ["Address:", client.address or ""],
        ["Client Status:", client.status.display_value],
    ]))
    elements.append(Paragraph("Account Details", getSampleStyleSheet()["Heading2"]))
    elements.append(_labelled([
        ["Account Number:", account.account_number],
        ["Account Status:", account.status.display_value],
        ["Account Opened Date:", account.account_opened_date.isoformat()],
        ["Withdrawal Limit:", f"$ {account.withdrawal_limit}"],
        ["Balance:", f"$ {account.balance}"],
    ]))
    return _build_pdf(elements, f"Account details {client.dni}")


def render_transactions_pdf(client: Client, transactions: Iterable[AccountTransaction]) -> bytes:
    """PDF listing the transactions of the client's account."""
    elements = _pdf_header("Account Transactions")
    elements.append(_labelled([
        ["Client:", client.name],
        ["Account Number:", client.banking_account.account_number],
    ]))
    elements.append(Spacer(1, 12))
    elements.extend(_pdf_transactions(transactions))
    return _build_pdf(elements, f"Account transactions {client.dni}")
