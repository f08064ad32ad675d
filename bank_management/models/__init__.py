"""
Database models package.
"""

from bank_management.models.enums import (
    AccountTransactionType,
    BankingAccountStatus,
    EntryType,
    UserStatus,
)
from bank_management.models.client import Client
from bank_management.models.account import BankingAccount
from bank_management.models.transaction import AccountTransaction

__all__ = [
    "AccountTransaction",
    "AccountTransactionType",
    "BankingAccount",
    "BankingAccountStatus",
    "Client",
    "EntryType",
    "UserStatus",
]
