"""
Report API endpoints.
Serves account spreadsheets and PDFs as file downloads.
"""

from datetime import date
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bank_management.api.transactions import validate_date_range
from bank_management.database import get_db
from bank_management.services import clients, ledger, reports

router = APIRouter(prefix="/reports", tags=["Reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"


def _attachment(content: bytes, filename: str, media_type: str = XLSX_MEDIA_TYPE) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/excel/clients/{dni}/transactions")
def transactions_by_date_range_excel(
    dni: str,
    from_date: date,
    to_date: date,
    db: Session = Depends(get_db)
):
    """
    Download the client's transactions between two dates as a spreadsheet.
    """
    validate_date_range(from_date, to_date)
    client = clients.get_client(db, dni)
    transactions = ledger.iter_transactions(
        db, client.banking_account.account_number, from_date=from_date, to_date=to_date
    )
    content = reports.render_transactions_spreadsheet(transactions)
    filename = f"AccountTransactions_Filtered_{dni}_FromDate_{from_date}_ToDate_{to_date}.xlsx"
    return _attachment(content, filename)


@router.get("/excel/clients/{dni}/account-statement")
def account_statement_excel(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    Download the client's account details and full history as a spreadsheet.
    """
    client = clients.get_client(db, dni)
    transactions = ledger.iter_transactions(db, client.banking_account.account_number)
    content = reports.render_account_statement(client, transactions)
    filename = f"AccountStatement_{dni}_{date.today()}.xlsx"
    return _attachment(content, filename)


@router.get("/pdf/clients/{dni}/account-details")
def account_details_pdf(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    Download the client's personal and account details as a PDF.
    """
    client = clients.get_client(db, dni)
    content = reports.render_account_details_pdf(client)
    return _attachment(content, f"AccountDetails_{dni}_{date.today()}.pdf", PDF_MEDIA_TYPE)


@router.get("/pdf/clients/{dni}/transactions")
def account_transactions_pdf(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    Download the client's full transaction history as a PDF.
    """
    client = clients.get_client(db, dni)
    transactions = ledger.iter_transactions(db, client.banking_account.account_number)
    content = reports.render_transactions_pdf(client, transactions)
    return _attachment(content, f"AccountTransactions_{dni}_{date.today()}.pdf", PDF_MEDIA_TYPE)
