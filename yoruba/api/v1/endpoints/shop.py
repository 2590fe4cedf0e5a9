"""
Shop endpoints.
"""
from fastapi import APIRouter, Depends

from yoruba.api.v1.endpoints.dependencies import get_shop
from yoruba.schemas.shop import BuyLivesRequest, PurchaseDiamondsRequest, ShopResponse
from yoruba.services.shop_service import ShopService

router = APIRouter(prefix="/shop", tags=["shop"])


@router.post("/buy-lives", response_model=ShopResponse)
async def buy_lives(
    request: BuyLivesRequest,
    shop: ShopService = Depends(get_shop)
):
    """Refill lives with diamonds."""
    result = shop.buy_lives(request.user_id)
    return ShopResponse(
        transaction_id=result.transaction_id,
        diamonds=result.user.diamonds,
        lives=result.user.lives,
        next_life_at=result.user.next_life_at,
        diamonds_spent=result.diamonds_spent,
        message="Lives refilled"
    )


@router.post("/purchase", response_model=ShopResponse)
async def purchase_diamonds(
    request: PurchaseDiamondsRequest,
    shop: ShopService = Depends(get_shop)
):
    """Buy a diamond package (payment is mocked)."""
    result = shop.purchase_diamonds(request.user_id, request.amount, request.payment_token)
    return ShopResponse(
        transaction_id=result.transaction_id,
        diamonds=result.user.diamonds,
        lives=result.user.lives,
        next_life_at=result.user.next_life_at,
        diamonds_added=result.diamonds_added,
        message=f"{result.diamonds_added} diamonds added"
    )
