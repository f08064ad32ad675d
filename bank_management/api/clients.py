"""
Client API endpoints.
Handles registration, client lifecycle and adherent management.
"""

import logging
import smtplib
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from bank_management.database import get_db
from bank_management.models.enums import UserStatus
from bank_management.schemas.client import (
    ClientCreate,
    ClientRegistrationResponse,
    ClientResponse,
    ClientUpdate,
)
from bank_management.services import clients
from bank_management.services.notifications import (
    WELCOME_SUBJECT,
    get_notifier,
    welcome_message,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.post("/", response_model=ClientRegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_client(
    client_data: ClientCreate,
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier)
):
    """
    Register a client. The client starts PENDING with a new empty account,
    and a welcome email is sent to the registered address.

    A failed email does not undo the registration; it is reported in
    **email_sent**.
    """
    client = clients.register_client(db, client_data.model_dump())

    email_sent = True
    try:
        notifier.send_email(
            client.email,
            WELCOME_SUBJECT,
            welcome_message(client.name, client.email),
        )
    except (smtplib.SMTPException, OSError):
        logger.exception("Welcome email to %s could not be sent", client.email)
        email_sent = False

    result = "Client created and email sent." if email_sent else "Client created; the welcome email could not be sent."
    return ClientRegistrationResponse(
        result=result,
        email_sent=email_sent,
        data=ClientResponse.model_validate(client),
    )


@router.get("/", response_model=List[ClientResponse])
def list_clients(
    status_filter: str = Query("ACTIVE", alias="status"),
    db: Session = Depends(get_db)
):
    """
    List clients with the given status.

    - **status**: ACTIVE, INACTIVE, PENDING or BANNED (default: ACTIVE)
    """
    return clients.list_clients(db, UserStatus.parse(status_filter))


@router.get("/{dni}", response_model=ClientResponse)
def get_client(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    Get a client by DNI.
    """
    return clients.get_client(db, dni)


@router.put("/{dni}", response_model=ClientResponse)
def update_client(
    dni: str,
    client_data: ClientUpdate,
    db: Session = Depends(get_db)
):
    """
    Update an active client. Only the fields sent are changed.
    """
    return clients.update_client(db, dni, client_data.model_dump(exclude_unset=True))


@router.delete("/{dni}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    Delete a client. The client is marked INACTIVE, nothing is removed.
    """
    clients.delete_client(db, dni)
    return None


@router.put("/{dni}/status/{new_status}", response_model=ClientResponse)
def update_client_status(
    dni: str,
    new_status: str,
    db: Session = Depends(get_db)
):
    """
    Change the status of a client.
    """
    return clients.set_client_status(db, dni, UserStatus.parse(new_status))


# ==================== ADHERENTS ====================

@router.post("/{dni}/adherents/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def add_adherent(
    dni: str,
    adherent_data: ClientCreate,
    db: Session = Depends(get_db)
):
    """
    Register an adherent of the client. Adherents start ACTIVE with their own account.
    """
    return clients.add_adherent(db, dni, adherent_data.model_dump())


@router.get("/{dni}/adherents/", response_model=List[ClientResponse])
def list_adherents(
    dni: str,
    db: Session = Depends(get_db)
):
    """
    List the adherents of a client.
    """
    return clients.list_adherents(db, dni)


@router.get("/{dni}/adherents/{adherent_dni}", response_model=ClientResponse)
def get_adherent(
    dni: str,
    adherent_dni: str,
    db: Session = Depends(get_db)
):
    """
    Get one adherent of a client.
    """
    return clients.get_adherent(db, dni, adherent_dni)


@router.put("/{dni}/adherents/{adherent_dni}", response_model=ClientResponse)
def update_adherent(
    dni: str,
    adherent_dni: str,
    adherent_data: ClientUpdate,
    db: Session = Depends(get_db)
):
    """
    Update an adherent. Only the fields sent are changed.
    """
    return clients.update_adherent(db, dni, adherent_dni, adherent_data.model_dump(exclude_unset=True))


@router.put("/{dni}/adherents/{adherent_dni}/status/{new_status}", response_model=ClientResponse)
def update_adherent_status(
    dni: str,
    adherent_dni: str,
    new_status: str,
    db: Session = Depends(get_db)
):
    """
    Change the status of an adherent.
    """
    return clients.set_adherent_status(db, dni, adherent_dni, UserStatus.parse(new_status))


@router.delete("/{dni}/adherents/{adherent_dni}", status_code=status.HTTP_204_NO_CONTENT)
def remove_adherent(
    dni: str,
    adherent_dni: str,
    db: Session = Depends(get_db)
):
    """
    Remove an adherent together with its account.
    """
    clients.remove_adherent(db, dni, adherent_dni)
    return None
