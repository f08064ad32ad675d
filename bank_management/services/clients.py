"""
Client directory: registration, status lifecycle and adherent management.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_management.core.config import settings
from bank_management.core.exceptions import (
    DniAlreadyExistsError,
    EmailDuplicateError,
    InactiveAccountError,
    InvalidRequestError,
    ResourceNotFoundError,
)
from bank_management.core.security import hash_password
from bank_management.database import atomic
from bank_management.models.account import BankingAccount
from bank_management.models.client import Client
from bank_management.models.enums import BankingAccountStatus, UserStatus

logger = logging.getLogger(__name__)

# Client columns that cannot be cleared by a patch
REQUIRED_FIELDS = ("name", "email", "password")


def generate_account_number() -> str:
    """Opaque random account number; uniqueness is enforced by the table."""
    return uuid.uuid4().hex


def _default_account() -> BankingAccount:
    return BankingAccount(
        account_number=generate_account_number(),
        balance=Decimal("0.00"),
        withdrawal_limit=settings.DEFAULT_WITHDRAWAL_LIMIT,
        account_opened_date=date.today(),
        status=BankingAccountStatus.ACTIVE,
    )


def client_exists(db: Session, dni: str) -> bool:
    return db.query(Client.id).filter(Client.dni == dni).first() is not None


def _validate_dni_available(db: Session, dni: str) -> None:
    if client_exists(db, dni):
        logger.error("The DNI=%s is already registered.", dni)
        raise DniAlreadyExistsError(f"The DNI {dni} is already registered.")


def _commit_new_client(db: Session, client: Client) -> Client:
    """Persist a new client with its account, mapping unique violations."""
    db.add(client)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if client_exists(db, client.dni):
            logger.error("The DNI=%s is already registered.", client.dni)
            raise DniAlreadyExistsError(f"The DNI {client.dni} is already registered.") from None
        logger.error("The EMAIL=%s is already registered.", client.email)
        raise EmailDuplicateError("Email already exists.") from None
    db.refresh(client)
    return client


def _email_taken(db: Session, email: str, client_id: int) -> bool:
    return db.query(Client.id).filter(Client.email == email, Client.id != client_id).first() is not None


def _apply_patch(client: Client, patch: Dict[str, Any]) -> None:
    missing = [field for field in REQUIRED_FIELDS if field in patch and patch[field] is None]
    if missing:
        raise InvalidRequestError(f"Fields cannot be null: {', '.join(missing)}")
    for field, value in patch.items():
        if field == "password":
            client.password_hash = hash_password(value)
        else:
            setattr(client, field, value)


def _save_patch(db: Session, client: Client, patch: Dict[str, Any]) -> Client:
    _apply_patch(client, patch)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        email = patch.get("email")
        if email is None or not _email_taken(db, email, client.id):
            raise
        logger.error("The EMAIL=%s is already registered.", email)
        raise EmailDuplicateError("Email already exists.") from None
    db.refresh(client)
    return client


def _new_client(data: Dict[str, Any], status: UserStatus) -> Client:
    client = Client(
        dni=data["dni"],
        name=data["name"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
        address=data.get("address"),
        status=status,
    )
    client.banking_account = _default_account()
    return client


# ==================== CLIENTS ====================

def register_client(db: Session, data: Dict[str, Any]) -> Client:
    """
    Register a client in PENDING status together with a fresh account.

    Raises DniAlreadyExistsError if the DNI is taken and EmailDuplicateError
    if the email collides at write time.
    """
    _validate_dni_available(db, data["dni"])
    client = _commit_new_client(db, _new_client(data, UserStatus.PENDING))
    logger.info(
        "Client %s registered with account %s",
        client.dni, client.banking_account.account_number,
    )
    return client


def get_client(db: Session, dni: str) -> Client:
    client = db.query(Client).filter(Client.dni == dni).first()
    if client is None:
        logger.error("Client not found with DNI=%s", dni)
        raise ResourceNotFoundError(f"Client not found with DNI: {dni}")
    return client


def require_active_client(client: Client) -> None:
    if client.status != UserStatus.ACTIVE:
        logger.error("The client %s is not active.", client.dni)
        raise InactiveAccountError("The client is not active.")


def update_client(db: Session, dni: str, patch: Dict[str, Any]) -> Client:
    """Update an active client's mutable fields; only keys present in patch change."""
    client = get_client(db, dni)
    require_active_client(client)
    client = _save_patch(db, client, patch)
    logger.info("Client %s updated", dni)
    return client


def set_client_status(db: Session, dni: str, status: UserStatus) -> Client:
    client = get_client(db, dni)
    if client.status == status:
        logger.info("Client %s status is already %s. No update required.", dni, status.name)
        return client
    client.status = status
    db.commit()
    db.refresh(client)
    logger.info("Client %s status changed to %s", dni, status.name)
    return client


def delete_client(db: Session, dni: str) -> None:
    """Soft delete: the client is marked INACTIVE, the account is left as is."""
    client = get_client(db, dni)
    client.status = UserStatus.INACTIVE
    db.commit()
    logger.info("Client %s deleted (set INACTIVE)", dni)


def list_clients(db: Session, status: UserStatus) -> List[Client]:
    clients = db.query(Client).filter(Client.status == status).order_by(Client.id).all()
    logger.info("Returning %d clients with status %s", len(clients), status.name)
    return clients


# ==================== ADHERENTS ====================

def find_adherent(db: Session, main_client: Client, adherent_dni: str) -> Client:
    """Return the adherent of main_client with the given DNI."""
    get_client(db, adherent_dni)
    adherent = (
        db.query(Client)
        .filter(Client.main_client_id == main_client.id, Client.dni == adherent_dni)
        .first()
    )
    if adherent is None:
        logger.info("DNI %s is not an adherent of DNI %s", adherent_dni, main_client.dni)
        raise ResourceNotFoundError(
            f"The client with DNI {adherent_dni} is not an adherent of {main_client.dni}"
        )
    return adherent


def add_adherent(db: Session, main_dni: str, data: Dict[str, Any]) -> Client:
    """Register an ACTIVE adherent with its own account under main_dni."""
    main_client = get_client(db, main_dni)
    _validate_dni_available(db, data["dni"])
    adherent = _new_client(data, UserStatus.ACTIVE)
    adherent.main_client = main_client
    adherent = _commit_new_client(db, adherent)
    logger.info("Adherent %s added for main client %s", adherent.dni, main_dni)
    return adherent


def list_adherents(db: Session, main_dni: str) -> List[Client]:
    return list(get_client(db, main_dni).adherents)


def get_adherent(db: Session, main_dni: str, adherent_dni: str) -> Client:
    return find_adherent(db, get_client(db, main_dni), adherent_dni)


def update_adherent(db: Session, main_dni: str, adherent_dni: str, patch: Dict[str, Any]) -> Client:
    adherent = get_adherent(db, main_dni, adherent_dni)
    adherent = _save_patch(db, adherent, patch)
    logger.info("Adherent %s of main client %s updated", adherent_dni, main_dni)
    return adherent


def set_adherent_status(db: Session, main_dni: str, adherent_dni: str, status: UserStatus) -> Client:
    adherent = get_adherent(db, main_dni, adherent_dni)
    adherent.status = status
    db.commit()
    db.refresh(adherent)
    logger.info("Status of adherent %s changed to %s for main client %s", adherent_dni, status.name, main_dni)
    return adherent


def remove_adherent(db: Session, main_dni: str, adherent_dni: str) -> None:
    """Delete an adherent and its account (with its history) in one transaction."""
    with atomic(db):
        adherent = get_adherent(db, main_dni, adherent_dni)
        account = adherent.banking_account
        if account is not None:
            account.client = None
            db.delete(account)
        db.delete(adherent)
    logger.info("Removed adherent %s for main client %s", adherent_dni, main_dni)
