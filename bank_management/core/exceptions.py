"""Domain exception hierarchy for the banking API."""


class BankingError(Exception):
    """Base exception for all banking domain errors."""


class ResourceNotFoundError(BankingError):
    """Raised when an account, client or transaction does not exist."""


class InactiveAccountError(BankingError):
    """Raised when an operation targets a non-active account or client."""


class InvalidTransactionError(BankingError):
    """Raised when a transaction request is not acceptable."""


class InsufficientFundsError(BankingError):
    """Raised when an amount exceeds the balance or the withdrawal limit."""


class DniAlreadyExistsError(BankingError):
    """Raised when registering a DNI that is already taken."""


class EmailDuplicateError(BankingError):
    """Raised when an email is already registered to another client."""


class InvalidStatusError(BankingError):
    """Raised when a status or type token cannot be parsed."""


class InvalidRequestError(BankingError):
    """Raised when boundary input is malformed."""
