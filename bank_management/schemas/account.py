"""
Pydantic schemas for Banking Account API responses.
"""

from pydantic import BaseModel, ConfigDict
from decimal import Decimal
from datetime import date
from typing import Optional
from bank_management.models.enums import BankingAccountStatus


class AccountResponse(BaseModel):
    """Schema for banking account response."""
    id: int
    account_number: str
    balance: Decimal
    withdrawal_limit: Decimal
    account_opened_date: date
    account_closing_date: Optional[date] = None
    status: BankingAccountStatus
    client_dni: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
