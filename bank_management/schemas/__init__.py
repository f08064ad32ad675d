"""
Pydantic schemas package.
"""

from bank_management.schemas.account import AccountResponse
from bank_management.schemas.client import (
    AdherentSummary,
    ClientCreate,
    ClientRegistrationResponse,
    ClientResponse,
    ClientUpdate,
)
from bank_management.schemas.transaction import (
    AmountRequest,
    TransactionResponse,
    TransactionUpdate,
    TransferRequest,
)

__all__ = [
    "AccountResponse",
    "AdherentSummary",
    "AmountRequest",
    "ClientCreate",
    "ClientRegistrationResponse",
    "ClientResponse",
    "ClientUpdate",
    "TransactionResponse",
    "TransactionUpdate",
    "TransferRequest",
]
