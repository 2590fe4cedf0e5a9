"""
Shop: spend diamonds on lives, buy diamonds with (mocked) real money.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from yoruba.core.clock import Clock, utcnow
from yoruba.core.config import settings
from yoruba.core.exceptions import (
    NotFoundError,
    ConflictError,
    InsufficientDiamondsError,
    ValidationError,
)
from yoruba.models.enums import PaymentMethod, TransactionStatus
from yoruba.repositories.base import ProgressStore
from yoruba.schemas.records import UserResources
from yoruba.services.life_service import LifePolicy, LifeState, build_life_policy
from yoruba.services.progression_service import UserLockRegistry, user_locks
from yoruba.services.reward_service import diamonds_for_purchase

logger = logging.getLogger(__name__)


@dataclass
class PurchaseResult:
    transaction_id: int
    user: UserResources
    diamonds_added: int = 0
    diamonds_spent: int = 0


class ShopService:
    def __init__(
        self,
        progress: ProgressStore,
        life_policy: Optional[LifePolicy] = None,
        clock: Clock = utcnow,
        locks: Optional[UserLockRegistry] = None,
        extra_lives_cost: Optional[int] = None,
    ):
        self.progress = progress
        self.life_policy = life_policy or build_life_policy()
        self.clock = clock
        self.locks = locks or user_locks
        self.extra_lives_cost = extra_lives_cost if extra_lives_cost is not None else settings.extra_lives_cost

    def _require_user(self, user_id: int) -> UserResources:
        user = self.progress.get_user_resources(user_id)
        if not user:
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def buy_lives(self, user_id: int) -> PurchaseResult:
        """
        Refill lives to the maximum for extra_lives_cost diamonds.

        Raises:
            NotFoundError: Unknown user
            ConflictError: Lives are already full
            InsufficientDiamondsError: Not enough diamonds
        """
        with self.locks.hold(user_id):
            with self.progress.transaction():
                self.progress.lock_user(user_id)
                user = self._require_user(user_id)
                now = self.clock()
                lives = self.life_policy.regenerate(LifeState(user.lives, user.next_life_at), now)
                if lives.lives >= self.life_policy.max_lives:
                    raise ConflictError("Your lives are already full")
                if user.diamonds < self.extra_lives_cost:
                    raise InsufficientDiamondsError(
                        f"Buying lives costs {self.extra_lives_cost} diamonds, you have {user.diamonds}"
                    )

                refill = self.life_policy.refill()
                user = self.progress.update_user_resources(
                    user_id,
                    lives=refill.lives,
                    next_life_at=refill.next_life_at,
                    diamonds_delta=-self.extra_lives_cost,
                )
                transaction_id = self.progress.record_transaction(
                    user_id,
                    amount=0,
                    description=f"Refill lives for {self.extra_lives_cost} diamonds",
                    payment_method=PaymentMethod.DIAMONDS,
                    status=TransactionStatus.COMPLETED,
                    completed_at=now,
                )

        logger.info(f"User {user_id} refilled lives for {self.extra_lives_cost} diamonds")
        return PurchaseResult(
            transaction_id=transaction_id,
            user=user,
            diamonds_spent=self.extra_lives_cost,
        )

    def purchase_diamonds(self, user_id: int, amount: float, payment_token: Optional[str] = None) -> PurchaseResult:
        """
        Buy a diamond package. The payment gateway is mocked and always succeeds.

        Raises:
            ValidationError: Non-positive amount
            NotFoundError: Unknown user
        """
        if amount <= 0:
            raise ValidationError("Purchase amount must be positive")

        diamonds = diamonds_for_purchase(amount)
        with self.locks.hold(user_id):
            with self.progress.transaction():
                self.progress.lock_user(user_id)
                self._require_user(user_id)
                transaction_id = self.progress.record_transaction(
                    user_id,
                    amount=amount,
                    description=f"{diamonds} diamonds",
                    payment_method=PaymentMethod.GOOGLE_PAY,
                    status=TransactionStatus.PENDING,
                    payment_token=payment_token or f"mock_{uuid.uuid4().hex}",
                )
                user = self.progress.update_user_resources(user_id, diamonds_delta=diamonds)
                self.progress.update_transaction_status(
                    transaction_id, TransactionStatus.COMPLETED, completed_at=self.clock()
                )

        logger.info(f"User {user_id} bought {diamonds} diamonds for {amount:.2f}")
        return PurchaseResult(transaction_id=transaction_id, user=user, diamonds_added=diamonds)
