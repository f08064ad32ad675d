"""
Account transaction database model.
Represents one ledger entry on one banking account.
"""

from sqlalchemy import Column, String, Numeric, Date, Time, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from bank_management.database import Base
from bank_management.models.enums import AccountTransactionType, EntryType


class AccountTransaction(Base):
    """
    Account transaction table - stores recharges, withdrawals and transfer legs.

    A transfer is recorded as two rows: a DEBIT on the source account and a
    CREDIT on the destination account, each naming the other as counterparty.
    """
    __tablename__ = "account_transactions"

    id = Column(Integer, primary_key=True, index=True)
    transaction_type = Column(SQLEnum(AccountTransactionType), nullable=False)
    entry_type = Column(SQLEnum(EntryType), nullable=False)
    date_of_execution = Column(Date, nullable=False, index=True)
    time_of_execution = Column(Time, nullable=False)
    amount = Column(Numeric(precision=15, scale=2), nullable=False)
    counterparty_account_number = Column(String(50), nullable=True)
    banking_account_id = Column(Integer, ForeignKey("banking_accounts.id"), nullable=False, index=True)

    banking_account = relationship("BankingAccount", back_populates="transactions")

    @property
    def account_number(self):
        return self.banking_account.account_number

    @property
    def signed_amount(self):
        """Effect of this entry on its own account's balance."""
        if self.entry_type == EntryType.CREDIT:
            return self.amount
        return -self.amount

    def __repr__(self):
        return (
            f"<AccountTransaction(id={self.id}, type={self.transaction_type}, "
            f"entry={self.entry_type}, amount={self.amount})>"
        )
