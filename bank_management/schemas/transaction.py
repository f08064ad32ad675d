"""
Pydantic schemas for Account Transaction API requests and responses.
"""

from pydantic import BaseModel, Field, ConfigDict
from decimal import Decimal
from datetime import date, time
from typing import Optional
from bank_management.models.enums import AccountTransactionType, EntryType


class AmountRequest(BaseModel):
    """Schema for a recharge or a withdrawal."""
    amount: Decimal = Field(..., max_digits=15, decimal_places=2, description="Amount to move (must be positive)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": 250.00
            }
        }
    )


class TransferRequest(BaseModel):
    """Schema for a transfer from the path account to a destination account."""
    amount: Decimal = Field(..., max_digits=15, decimal_places=2, description="Transfer amount (must be positive)")
    destination_account_number: str = Field(..., min_length=1, max_length=50, description="Destination account number")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": 100.00,
                "destination_account_number": "3f2a9c0b1d8e4f6a9b7c5d3e1f0a2b4c"
            }
        }
    )


class TransactionUpdate(BaseModel):
    """Schema for correcting a recharge or withdrawal record."""
    transaction_type: Optional[AccountTransactionType] = None
    amount: Optional[Decimal] = Field(None, max_digits=15, decimal_places=2)


class TransactionResponse(BaseModel):
    """Schema for transaction response."""
    id: int
    account_number: str
    transaction_type: AccountTransactionType
    entry_type: EntryType
    amount: Decimal
    date_of_execution: date
    time_of_execution: time
    counterparty_account_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
