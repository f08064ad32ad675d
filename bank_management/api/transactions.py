"""
Account transaction API endpoints.
Handles recharges, withdrawals, transfers and transaction history.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from bank_management.core.exceptions import InvalidRequestError
from bank_management.database import get_db
from bank_management.models.enums import AccountTransactionType
from bank_management.schemas.transaction import (
    AmountRequest,
    TransactionResponse,
    TransactionUpdate,
    TransferRequest,
)
from bank_management.services import ledger

router = APIRouter(prefix="/accounts/{account_number}/transactions", tags=["Transactions"])


def validate_date_range(from_date: date, to_date: date) -> None:
    if from_date > to_date:
        raise InvalidRequestError("Invalid date range: 'from_date' must not be after 'to_date'")


@router.post("/recharge", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def recharge(
    account_number: str,
    request: AmountRequest,
    db: Session = Depends(get_db)
):
    """
    Add money to an account.
    """
    return ledger.recharge(db, account_number, request.amount)


@router.post("/withdrawal", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def withdrawal(
    account_number: str,
    request: AmountRequest,
    db: Session = Depends(get_db)
):
    """
    Take money out of an account.

    Rejected when the amount exceeds the withdrawal limit or the balance.
    """
    return ledger.withdraw(db, account_number, request.amount)


@router.post("/transfer", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def transfer(
    account_number: str,
    request: TransferRequest,
    db: Session = Depends(get_db)
):
    """
    Transfer money from this account to another one.

    Both accounts get a TRANSFER record; the source account's record is returned.

    - **amount**: Transfer amount (must be positive)
    - **destination_account_number**: Account credited with the amount
    """
    return ledger.transfer(db, account_number, request.destination_account_number, request.amount)


@router.get("/", response_model=List[TransactionResponse])
def list_transactions(
    account_number: str,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """
    List all transactions of an account, oldest first.

    - **skip**: Number of records to skip (default: 0)
    - **limit**: Maximum number of records to return (default: all)
    """
    return ledger.list_transactions(db, account_number, skip=skip, limit=limit)


@router.get("/filter/type/{transaction_type}", response_model=List[TransactionResponse])
def filter_by_type(
    account_number: str,
    transaction_type: str,
    db: Session = Depends(get_db)
):
    """
    List transactions of one type (RECHARGE, WITHDRAWAL or TRANSFER).
    """
    return ledger.filter_by_type(db, account_number, AccountTransactionType.parse(transaction_type))


@router.get("/filter/date-range", response_model=List[TransactionResponse])
def filter_by_date_range(
    account_number: str,
    from_date: date,
    to_date: date,
    db: Session = Depends(get_db)
):
    """
    List transactions executed between two dates, both inclusive.
    """
    validate_date_range(from_date, to_date)
    return ledger.filter_by_date_range(db, account_number, from_date, to_date)


@router.get("/filter", response_model=List[TransactionResponse])
def filter_by_type_and_date_range(
    account_number: str,
    transaction_type: str,
    from_date: date,
    to_date: date,
    db: Session = Depends(get_db)
):
    """
    List transactions of one type executed between two dates, both inclusive.
    """
    validate_date_range(from_date, to_date)
    return ledger.filter_by_type_and_date_range(
        db, account_number, AccountTransactionType.parse(transaction_type), from_date, to_date
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    account_number: str,
    transaction_id: int,
    db: Session = Depends(get_db)
):
    """
    Get one transaction of the account.
    """
    return ledger.get_transaction(db, account_number, transaction_id)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    account_number: str,
    transaction_id: int,
    request: TransactionUpdate,
    db: Session = Depends(get_db)
):
    """
    Correct a recharge or withdrawal. The balance is adjusted by the difference.
    """
    return ledger.update_transaction(
        db, account_number, transaction_id,
        transaction_type=request.transaction_type,
        amount=request.amount,
    )


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    account_number: str,
    transaction_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a recharge or withdrawal and reverse its effect on the balance.
    """
    ledger.delete_transaction(db, account_number, transaction_id)
    return None
