"""
Ledger operations on banking accounts.

Every balance change is paired with an AccountTransaction row and committed
in the same database transaction as the balance update. Money-moving
operations lock the account rows they touch (SELECT ... FOR UPDATE); a
transfer locks both rows in ascending account-number order so that two
opposite transfers cannot deadlock.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from bank_management.core.exceptions import (
    InactiveAccountError,
    InsufficientFundsError,
    InvalidTransactionError,
    ResourceNotFoundError,
)
from bank_management.database import atomic
from bank_management.models.account import BankingAccount
from bank_management.models.enums import (
    AccountTransactionType,
    BankingAccountStatus,
    EntryType,
)
from bank_management.models.transaction import AccountTransaction

logger = logging.getLogger(__name__)

# Entry side for single-account operations
ENTRY_TYPE_BY_KIND = {
    AccountTransactionType.RECHARGE: EntryType.CREDIT,
    AccountTransactionType.WITHDRAWAL: EntryType.DEBIT,
}


# ==================== PRECONDITIONS ====================

def find_account(db: Session, account_number: str, lock: bool = False) -> BankingAccount:
    """Load an account by number, optionally locking its row."""
    query = db.query(BankingAccount).filter(BankingAccount.account_number == account_number)
    if lock:
        query = query.with_for_update()
    account = query.first()
    if account is None:
        logger.error("No banking account found for account number: %s", account_number)
        raise ResourceNotFoundError(f"Account not found with account number: {account_number}")
    return account


def require_active(account: BankingAccount) -> None:
    if account.status != BankingAccountStatus.ACTIVE:
        logger.error("Account %s is not active (status=%s)", account.account_number, account.status.name)
        raise InactiveAccountError(f"The bank account {account.account_number} is not active.")


def require_positive(amount: Decimal) -> None:
    if amount is None or amount <= 0:
        logger.error("Invalid amount: %s", amount)
        raise InvalidTransactionError("The amount must be positive.")


def require_within_limit(account: BankingAccount, amount: Decimal) -> None:
    if amount > account.withdrawal_limit:
        raise InsufficientFundsError(
            f"Exceeded withdrawal limit. Withdrawal limit: {account.withdrawal_limit}"
        )


def require_sufficient_funds(account: BankingAccount, amount: Decimal) -> None:
    if amount > account.balance:
        raise InsufficientFundsError(
            f"Insufficient funds. Balance: {account.balance}, Required: {amount}"
        )


def _find_active_account(db: Session, account_number: str, lock: bool = False) -> BankingAccount:
    account = find_account(db, account_number, lock=lock)
    require_active(account)
    return account


def _build_transaction(
    account: BankingAccount,
    transaction_type: AccountTransactionType,
    entry_type: EntryType,
    amount: Decimal,
    counterparty: Optional[str] = None,
) -> AccountTransaction:
    now = datetime.now()
    return AccountTransaction(
        transaction_type=transaction_type,
        entry_type=entry_type,
        amount=amount,
        date_of_execution=now.date(),
        time_of_execution=now.time().replace(microsecond=0),
        counterparty_account_number=counterparty,
        banking_account=account,
    )


# ==================== ACCOUNTS ====================

def get_account(db: Session, account_number: str) -> BankingAccount:
    """Read-only lookup; not gated on the account status."""
    return find_account(db, account_number)


def list_accounts(db: Session, status: BankingAccountStatus) -> List[BankingAccount]:
    accounts = (
        db.query(BankingAccount)
        .filter(BankingAccount.status == status)
        .order_by(BankingAccount.id)
        .all()
    )
    logger.info("Returning %d accounts with status %s", len(accounts), status.name)
    return accounts


def update_account_status(db: Session, account_number: str, status: BankingAccountStatus) -> BankingAccount:
    with atomic(db):
        account = find_account(db, account_number, lock=True)
        if account.status == status:
            logger.info("Account %s already has status %s", account_number, status.name)
            return account
        account.status = status
    db.refresh(account)
    logger.info("Account %s status changed to %s", account_number, status.name)
    return account


def close_account(db: Session, account_number: str) -> BankingAccount:
    """Close an active account; the row is kept with its history."""
    with atomic(db):
        account = _find_active_account(db, account_number, lock=True)
        account.status = BankingAccountStatus.CLOSED
        account.account_closing_date = date.today()
    db.refresh(account)
    logger.info("Account %s closed", account_number)
    return account


# ==================== MONEY MOVEMENT ====================

def recharge(db: Session, account_number: str, amount: Decimal) -> AccountTransaction:
    """Credit an account and record a RECHARGE entry."""
    require_positive(amount)
    with atomic(db):
        account = _find_active_account(db, account_number, lock=True)
        account.balance += amount
        transaction = _build_transaction(
            account, AccountTransactionType.RECHARGE, EntryType.CREDIT, amount
        )
        db.add(transaction)
    db.refresh(transaction)
    logger.info("Recharged %s to account %s. New balance: %s", amount, account_number, account.balance)
    return transaction


def withdraw(db: Session, account_number: str, amount: Decimal) -> AccountTransaction:
    """Debit an account and record a WITHDRAWAL entry."""
    require_positive(amount)
    with atomic(db):
        account = _find_active_account(db, account_number, lock=True)
        require_within_limit(account, amount)
        require_sufficient_funds(account, amount)
        account.balance -= amount
        transaction = _build_transaction(
            account, AccountTransactionType.WITHDRAWAL, EntryType.DEBIT, amount
        )
        db.add(transaction)
    db.refresh(transaction)
    logger.info("Withdrew %s from account %s. New balance: %s", amount, account_number, account.balance)
    return transaction


def transfer(
    db: Session,
    source_account_number: str,
    destination_account_number: str,
    amount: Decimal,
) -> AccountTransaction:
    """
    Move money between two accounts.

    Records a DEBIT leg on the source and a CREDIT leg on the destination,
    both typed TRANSFER, and returns the source leg. Both accounts must exist
    and be active before a transfer into the same account is refused, which
    happens whatever the amount.
    """
    require_positive(amount)

    with atomic(db):
        locked = {
            number: find_account(db, number, lock=True)
            for number in sorted({source_account_number, destination_account_number})
        }
        source = locked[source_account_number]
        destination = locked[destination_account_number]

        require_active(source)
        require_active(destination)
        if source.account_number == destination.account_number:
            logger.error("Transfer from account %s into itself", source.account_number)
            raise InvalidTransactionError("Cannot make a transfer into the same account.")
        require_sufficient_funds(source, amount)
        require_within_limit(source, amount)

        source_leg = _build_transaction(
            source, AccountTransactionType.TRANSFER, EntryType.DEBIT, amount,
            counterparty=destination.account_number,
        )
        destination_leg = _build_transaction(
            destination, AccountTransactionType.TRANSFER, EntryType.CREDIT, amount,
            counterparty=source.account_number,
        )
        source.balance -= amount
        destination.balance += amount
        db.add_all([source_leg, destination_leg])
    db.refresh(source_leg)
    logger.info(
        "Transfer of %s from account %s to account %s completed. Balances: %s=%s, %s=%s",
        amount, source.account_number, destination.account_number,
        source.account_number, source.balance,
        destination.account_number, destination.balance,
    )
    return source_leg


# ==================== RETRIEVAL ====================

def _transactions_query(
    db: Session,
    account: BankingAccount,
    transaction_type: Optional[AccountTransactionType] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
):
    query = db.query(AccountTransaction).filter(
        AccountTransaction.banking_account_id == account.id
    )
    if transaction_type is not None:
        query = query.filter(AccountTransaction.transaction_type == transaction_type)
    if from_date is not None:
        query = query.filter(AccountTransaction.date_of_execution >= from_date)
    if to_date is not None:
        query = query.filter(AccountTransaction.date_of_execution <= to_date)
    return query.order_by(
        AccountTransaction.date_of_execution,
        AccountTransaction.time_of_execution,
        AccountTransaction.id,
    )


def _paginate(query, skip: int, limit: Optional[int]) -> List[AccountTransaction]:
    query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def _find_transaction(db: Session, account: BankingAccount, transaction_id: int) -> AccountTransaction:
    transaction = (
        db.query(AccountTransaction)
        .filter(
            AccountTransaction.id == transaction_id,
            AccountTransaction.banking_account_id == account.id,
        )
        .first()
    )
    if transaction is None:
        logger.error("Transaction %s not found for account %s", transaction_id, account.account_number)
        raise ResourceNotFoundError(f"Transaction not found with id {transaction_id}")
    return transaction


def get_transaction(db: Session, account_number: str, transaction_id: int) -> AccountTransaction:
    account = _find_active_account(db, account_number)
    return _find_transaction(db, account, transaction_id)


def list_transactions(
    db: Session, account_number: str, skip: int = 0, limit: Optional[int] = None
) -> List[AccountTransaction]:
    account = _find_active_account(db, account_number)
    transactions = _paginate(_transactions_query(db, account), skip, limit)
    logger.info("Returning %d transactions for account %s", len(transactions), account_number)
    return transactions


def filter_by_type(
    db: Session,
    account_number: str,
    transaction_type: AccountTransactionType,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[AccountTransaction]:
    account = _find_active_account(db, account_number)
    transactions = _paginate(
        _transactions_query(db, account, transaction_type=transaction_type), skip, limit
    )
    logger.info("Found %d %s transactions for account %s", len(transactions), transaction_type.name, account_number)
    return transactions


def filter_by_date_range(
    db: Session,
    account_number: str,
    from_date: date,
    to_date: date,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[AccountTransaction]:
    """Transactions executed between from_date and to_date, both inclusive."""
    account = _find_active_account(db, account_number)
    transactions = _paginate(
        _transactions_query(db, account, from_date=from_date, to_date=to_date), skip, limit
    )
    logger.info(
        "Found %d transactions for account %s from %s to %s",
        len(transactions), account_number, from_date, to_date,
    )
    return transactions


def filter_by_type_and_date_range(
    db: Session,
    account_number: str,
    transaction_type: AccountTransactionType,
    from_date: date,
    to_date: date,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[AccountTransaction]:
    account = _find_active_account(db, account_number)
    transactions = _paginate(
        _transactions_query(
            db, account, transaction_type=transaction_type, from_date=from_date, to_date=to_date
        ),
        skip,
        limit,
    )
    logger.info(
        "Found %d %s transactions for account %s from %s to %s",
        len(transactions), transaction_type.name, account_number, from_date, to_date,
    )
    return transactions


def iter_transactions(
    db: Session,
    account_number: str,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    batch_size: int = 500,
) -> Iterator[AccountTransaction]:
    """
    Stream an account's transactions in batches instead of loading them all.

    Not status-gated, so closed or blocked accounts still get statements.
    """
    account = find_account(db, account_number)
    yield from _transactions_query(
        db, account, from_date=from_date, to_date=to_date
    ).yield_per(batch_size)


# ==================== CORRECTIONS ====================

def update_transaction(
    db: Session,
    account_number: str,
    transaction_id: int,
    transaction_type: Optional[AccountTransactionType] = None,
    amount: Optional[Decimal] = None,
) -> AccountTransaction:
    """
    Correct a recharge or withdrawal record.

    The balance is re-derived from the difference between the old and new
    effect of the entry. Transfer legs cannot be amended because the
    counterpart leg lives on another account.
    """
    if amount is not None:
        require_positive(amount)

    with atomic(db):
        account = _find_active_account(db, account_number, lock=True)
        transaction = _find_transaction(db, account, transaction_id)

        new_type = transaction_type or transaction.transaction_type
        if AccountTransactionType.TRANSFER in (transaction.transaction_type, new_type):
            raise InvalidTransactionError("Transfer transactions cannot be amended.")

        new_amount = amount if amount is not None else transaction.amount
        new_entry_type = ENTRY_TYPE_BY_KIND[new_type]
        new_effect = new_amount if new_entry_type == EntryType.CREDIT else -new_amount
        new_balance = account.balance - transaction.signed_amount + new_effect
        if new_balance < 0:
            raise InsufficientFundsError(
                f"Correction would leave account {account_number} with a negative balance."
            )

        account.balance = new_balance
        now = datetime.now()
        transaction.transaction_type = new_type
        transaction.entry_type = new_entry_type
        transaction.amount = new_amount
        transaction.date_of_execution = now.date()
        transaction.time_of_execution = now.time().replace(microsecond=0)
    db.refresh(transaction)
    logger.info("Transaction %s updated for account %s", transaction_id, account_number)
    return transaction


def delete_transaction(db: Session, account_number: str, transaction_id: int) -> None:
    """Remove a recharge or withdrawal record and reverse its effect on the balance."""
    with atomic(db):
        account = _find_active_account(db, account_number, lock=True)
        transaction = _find_transaction(db, account, transaction_id)
        if transaction.transaction_type == AccountTransactionType.TRANSFER:
            raise InvalidTransactionError("Transfer transactions cannot be deleted.")

        new_balance = account.balance - transaction.signed_amount
        if new_balance < 0:
            raise InsufficientFundsError(
                f"Deleting transaction {transaction_id} would leave a negative balance."
            )
        account.balance = new_balance
        db.delete(transaction)
    logger.info("Transaction %s deleted for account %s", transaction_id, account_number)
