"""
Pydantic schemas for Client API requests and responses.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from bank_management.models.enums import UserStatus
from bank_management.schemas.account import AccountResponse


class ClientCreate(BaseModel):
    """Schema for registering a client or an adherent."""
    dni: str = Field(..., min_length=1, max_length=20, description="National identification number")
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)
    address: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "dni": "30111222",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "s3cret-pass",
                "address": "742 Evergreen Terrace"
            }
        }
    )


class ClientUpdate(BaseModel):
    """Schema for updating a client; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("name", "email", "password")
    @classmethod
    def reject_null(cls, value):
        # Omitting a field leaves it unchanged; null is not a value for it
        if value is None:
            raise ValueError("must not be null")
        return value


class AdherentSummary(BaseModel):
    """Short form of an adherent inside a client response."""
    dni: str
    name: str
    email: str
    status: UserStatus

    model_config = ConfigDict(from_attributes=True)


class ClientResponse(BaseModel):
    """Schema for client response."""
    id: int
    dni: str
    name: str
    email: str
    address: Optional[str] = None
    status: UserStatus
    banking_account: Optional[AccountResponse] = None
    adherents: List[AdherentSummary] = []
    main_client_dni: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClientRegistrationResponse(BaseModel):
    """Schema returned after a registration."""
    result: str
    email_sent: bool
    data: ClientResponse
