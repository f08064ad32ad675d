"""
Banking account API endpoints.
Handles account retrieval, listing by status, status changes and closing.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from bank_management.database import get_db
from bank_management.models.enums import BankingAccountStatus
from bank_management.schemas.account import AccountResponse
from bank_management.services import ledger

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("/", response_model=List[AccountResponse])
def list_accounts(
    status_filter: str = Query("ACTIVE", alias="status"),
    db: Session = Depends(get_db)
):
    """
    List banking accounts with the given status.

    - **status**: ACTIVE, BLOCKED, INACTIVE, CLOSED, OVERDUE or FROZEN (default: ACTIVE)
    """
    return ledger.list_accounts(db, BankingAccountStatus.parse(status_filter))


@router.get("/{account_number}", response_model=AccountResponse)
def get_account(
    account_number: str,
    db: Session = Depends(get_db)
):
    """
    Get account details by account number.
    """
    return ledger.get_account(db, account_number)


@router.put("/{account_number}/status/{new_status}", response_model=AccountResponse)
def update_account_status(
    account_number: str,
    new_status: str,
    db: Session = Depends(get_db)
):
    """
    Change the status of an account. Setting the current status is a no-op.
    """
    return ledger.update_account_status(db, account_number, BankingAccountStatus.parse(new_status))


@router.delete("/{account_number}", response_model=AccountResponse)
def close_account(
    account_number: str,
    db: Session = Depends(get_db)
):
    """
    Close an active account. The account and its history are kept.
    """
    return ledger.close_account(db, account_number)
