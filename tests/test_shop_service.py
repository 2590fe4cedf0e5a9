from datetime import timedelta

import pytest

from yoruba.core.exceptions import ConflictError, InsufficientDiamondsError, ValidationError
from yoruba.models.enums import PaymentMethod, TransactionStatus
from yoruba.services.life_service import LifePolicy
from yoruba.services.progression_service import UserLockRegistry
from yoruba.services.reward_service import diamonds_for_purchase, diamonds_for_level
from yoruba.services.shop_service import ShopService


@pytest.fixture
def shop(world):
    return ShopService(
        world.store,
        life_policy=LifePolicy(max_lives=5, regen_interval=timedelta(minutes=30)),
        clock=world.clock,
        locks=UserLockRegistry(),
        extra_lives_cost=15,
    )


class TestBuyLives:

    def test_refills_lives_for_diamonds(self, world, shop):
        world.store.update_user_resources(
            world.user.user_id, lives=1, next_life_at=world.clock() + timedelta(minutes=5), diamonds_delta=20
        )

        result = shop.buy_lives(world.user.user_id)

        assert result.user.lives == 5
        assert result.user.next_life_at is None
        assert result.user.diamonds == 5
        transaction = world.store.transactions[result.transaction_id]
        assert transaction["payment_method"] == PaymentMethod.DIAMONDS
        assert transaction["status"] == TransactionStatus.COMPLETED

    def test_full_lives(self, world, shop):
        world.store.update_user_resources(world.user.user_id, diamonds_delta=100)
        with pytest.raises(ConflictError):
            shop.buy_lives(world.user.user_id)

    def test_not_enough_diamonds(self, world, shop):
        world.store.update_user_resources(
            world.user.user_id, lives=2, next_life_at=world.clock() + timedelta(minutes=5), diamonds_delta=14
        )
        with pytest.raises(InsufficientDiamondsError):
            shop.buy_lives(world.user.user_id)
        assert world.store.get_user_resources(world.user.user_id).diamonds == 14
        assert world.store.transactions == {}


class TestPurchaseDiamonds:

    def test_grants_package_and_completes_transaction(self, world, shop):
        result = shop.purchase_diamonds(world.user.user_id, 29.9, payment_token="tok_1")

        assert result.diamonds_added == 250
        assert result.user.diamonds == 250
        transaction = world.store.transactions[result.transaction_id]
        assert transaction["status"] == TransactionStatus.COMPLETED
        assert transaction["payment_method"] == PaymentMethod.GOOGLE_PAY
        assert transaction["completed_at"] == world.clock()

    def test_rejects_non_positive_amount(self, world, shop):
        with pytest.raises(ValidationError):
            shop.purchase_diamonds(world.user.user_id, 0)


@pytest.mark.parametrize("amount,diamonds", [(9.9, 100), (15, 100), (29.9, 250), (49.9, 500), (99.9, 1000)])
def test_purchase_packages(amount, diamonds):
    assert diamonds_for_purchase(amount) == diamonds


def test_unknown_tier_earns_one_diamond():
    assert diamonds_for_level("PRATA") == 1


def test_purchases_lock_the_user_row(world, shop, monkeypatch):
    locked = []
    monkeypatch.setattr(world.store, "lock_user", locked.append)

    shop.purchase_diamonds(world.user.user_id, 10)

    assert locked == [world.user.user_id]
