"""
Transaction model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import DateTime
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from yoruba.core.clock import utcnow
from yoruba.models.enums import PaymentMethod, TransactionStatus

if TYPE_CHECKING:
    from yoruba.models.user import User


class Transaction(SQLModel, table=True):
    """Transaction table - diamond purchases and diamonds-for-lives exchanges."""
    __tablename__ = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    amount: float  # Real money amount, 0 for diamond payments
    description: str
    payment_method: PaymentMethod
    status: TransactionStatus = Field(default=TransactionStatus.PENDING)
    payment_token: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Relationships
    user: "User" = Relationship(back_populates="transactions")
