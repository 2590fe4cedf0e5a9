"""
Shop schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class BuyLivesRequest(BaseModel):
    """Refill lives with diamonds."""
    user_id: int = Field(..., description="User ID")


class PurchaseDiamondsRequest(BaseModel):
    """Buy a diamond package."""
    user_id: int = Field(..., description="User ID")
    amount: float = Field(..., gt=0, description="Price paid")
    payment_token: Optional[str] = Field(None, description="Token from the payment sheet")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "amount": 29.9,
                "payment_token": "tok_123"
            }
        }


class ShopResponse(BaseModel):
    """Balances after a purchase."""
    transaction_id: int
    diamonds: int
    lives: int
    next_life_at: Optional[datetime] = None
    diamonds_added: int = 0
    diamonds_spent: int = 0
    message: str
