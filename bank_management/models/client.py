"""
Client database model.
Represents bank customers and their adherents.
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from bank_management.database import Base
from bank_management.models.enums import UserStatus


class Client(Base):
    """
    Client table - stores customer identity records.

    A client whose main_client_id is set is an adherent of that client.
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    dni = Column(String(20), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    address = Column(String(255), nullable=True)
    status = Column(SQLEnum(UserStatus), nullable=False, default=UserStatus.PENDING)
    main_client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)

    banking_account = relationship(
        "BankingAccount",
        back_populates="client",
        uselist=False
    )
    main_client = relationship(
        "Client",
        remote_side=[id],
        back_populates="adherents"
    )
    adherents = relationship(
        "Client",
        back_populates="main_client",
        order_by="Client.id"
    )

    @property
    def main_client_dni(self):
        return self.main_client.dni if self.main_client else None

    def __repr__(self):
        return f"<Client(dni={self.dni}, name={self.name}, status={self.status})>"
