"""
Status and type enumerations shared by the models and schemas.
Values are stored and serialized by name.
"""

import enum

from bank_management.core.exceptions import InvalidStatusError


class TokenEnum(str, enum.Enum):
    """Enum parsed from a case-insensitive string token."""

    @classmethod
    def parse(cls, token: str):
        try:
            return cls[token.strip().upper()]
        except (KeyError, AttributeError):
            allowed = ", ".join(member.name for member in cls)
            raise InvalidStatusError(
                f"Invalid {cls.__name__} '{token}'. Allowed values: {allowed}"
            ) from None

    @property
    def display_value(self) -> str:
        return self.name.capitalize()


class UserStatus(TokenEnum):
    """Client lifecycle states."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    BANNED = "BANNED"


class BankingAccountStatus(TokenEnum):
    """Banking account lifecycle states."""
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    INACTIVE = "INACTIVE"
    CLOSED = "CLOSED"
    OVERDUE = "OVERDUE"
    FROZEN = "FROZEN"


class AccountTransactionType(TokenEnum):
    """Kinds of balance-affecting events."""
    RECHARGE = "RECHARGE"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER = "TRANSFER"


class EntryType(TokenEnum):
    """Side of a ledger entry on its own account."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
