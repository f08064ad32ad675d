"""
Banking account database model.
Represents bank accounts in the system.
"""

from sqlalchemy import Column, String, Numeric, Date, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import date
from decimal import Decimal
from bank_management.database import Base
from bank_management.models.enums import BankingAccountStatus


class BankingAccount(Base):
    """
    Banking account table - stores balances and withdrawal limits.
    """
    __tablename__ = "banking_accounts"

    id = Column(Integer, primary_key=True, index=True)
    account_number = Column(String(50), unique=True, index=True, nullable=False)
    balance = Column(Numeric(precision=15, scale=2), nullable=False, default=Decimal("0.00"))
    withdrawal_limit = Column(Numeric(precision=15, scale=2), nullable=False)
    account_opened_date = Column(Date, default=date.today, nullable=False)
    account_closing_date = Column(Date, nullable=True)
    status = Column(SQLEnum(BankingAccountStatus), nullable=False, default=BankingAccountStatus.ACTIVE)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, unique=True)

    client = relationship("Client", back_populates="banking_account")

    # Ledger entries; removed together with the account
    transactions = relationship(
        "AccountTransaction",
        back_populates="banking_account",
        cascade="all, delete-orphan",
        order_by="AccountTransaction.id"
    )

    @property
    def client_dni(self):
        return self.client.dni if self.client else None

    def __repr__(self):
        return f"<BankingAccount(account_number={self.account_number}, balance={self.balance}, status={self.status})>"
