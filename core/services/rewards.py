from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import Q

from ..exceptions import NotFoundError, ServiceError
from ..models import (
    MemberStatusTier,
    RewardsPointSettings,
    RewardsPointSlot,
    RewardsPointTransaction,
    UserRewardsPoints,
)
from .pricing import money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointsAward:
    points_awarded: int
    new_balance: int
    total_points_earned: int = 0


@dataclass(frozen=True)
class PointsRedemption:
    points_redeemed: int
    discount_amount: Decimal
    new_balance: int


@dataclass(frozen=True)
class PointsRefund:
    points_refunded: int
    new_balance: int


def entry_tier() -> MemberStatusTier | None:
    return MemberStatusTier.objects.filter(min_points=0, is_active=True).first()


def tier_for(total_points_earned: int) -> MemberStatusTier | None:
    return (
        MemberStatusTier.objects.filter(min_points__lte=total_points_earned, is_active=True)
        .order_by("-min_points")
        .first()
    )


class RewardsPointsService:
    """Earn, redeem and refund loyalty points for a single member."""

    def __init__(self, user):
        self.user = user

    def account(self, create: bool = True) -> UserRewardsPoints | None:
        account = UserRewardsPoints.objects.filter(user=self.user).select_related("tier").first()
        if account is None and create:
            account = UserRewardsPoints.objects.create(user=self.user, tier=entry_tier())
        return account

    def balance(self) -> int:
        account = self.account(create=False)
        return account.current_balance if account else 0

    def refresh_tier(self, account: UserRewardsPoints) -> None:
        tier = tier_for(account.total_points_earned)
        if tier is not None and tier.pk != account.tier_id:
            account.tier = tier
            account.save(update_fields=["tier", "updated_at"])

    @transaction.atomic
    def award_for_booking(self, amount, booking=None) -> PointsAward:
        amount = Decimal(str(amount))
        slot = (
            RewardsPointSlot.objects.filter(is_active=True, min_amount__lte=amount, max_amount__gte=amount)
            .order_by("-min_amount")
            .first()
        )
        if slot is None:
            logger.info("No active rewards slot for amount %s", amount)
            return PointsAward(0, 0)
        points = math.floor(amount / 1000 * slot.points_per_thousand)
        if points <= 0:
            return PointsAward(0, 0)

        account = self.account()
        account.current_balance += points
        account.total_points_earned += points
        account.save(update_fields=["current_balance", "total_points_earned", "updated_at"])
        RewardsPointTransaction.objects.create(
            user=self.user,
            booking=booking,
            transaction_type="earned",
            points=points,
            balance_after=account.current_balance,
            amount=money(amount),
            description=f"Points earned from booking ({money(amount)} BDT)",
        )
        self.refresh_tier(account)
        logger.info("Awarded %s points to user %s", points, self.user.pk)
        return PointsAward(points, account.current_balance, account.total_points_earned)

    @transaction.atomic
    def redeem_for_booking(self, points: int, booking=None) -> PointsRedemption:
        settings = RewardsPointSettings.active()
        if settings is None:
            raise ServiceError("Rewards point settings not found")
        if points < settings.min_points_to_redeem:
            raise ServiceError(f"Minimum {settings.min_points_to_redeem} points required to redeem")
        if settings.max_points_per_booking and points > settings.max_points_per_booking:
            raise ServiceError(f"Maximum {settings.max_points_per_booking} points can be used per booking")
        account = self.account(create=False)
        if account is None or account.current_balance < points:
            raise ServiceError("Insufficient points balance")

        discount = money(Decimal(points) / settings.points_per_taka)
        account.current_balance -= points
        account.lifetime_points_spent += points
        account.save(update_fields=["current_balance", "lifetime_points_spent", "updated_at"])
        RewardsPointTransaction.objects.create(
            user=self.user,
            booking=booking,
            transaction_type="redeemed",
            points=-points,
            balance_after=account.current_balance,
            description=f"Points redeemed for booking ({points} points = {discount} BDT)",
        )
        logger.info("Redeemed %s points (%s BDT) for user %s", points, discount, self.user.pk)
        return PointsRedemption(points, discount, account.current_balance)

    def max_redeemable(self, amount) -> int:
        settings = RewardsPointSettings.active()
        if settings is None:
            return 0
        max_points = self.balance()
        if settings.max_points_per_booking:
            max_points = min(max_points, settings.max_points_per_booking)
        max_points = min(max_points, math.floor(Decimal(str(amount)) * settings.points_per_taka))
        if max_points < settings.min_points_to_redeem:
            return 0
        return max_points

    @transaction.atomic
    def refund_for_booking(self, booking) -> PointsRefund:
        redeemed = (
            RewardsPointTransaction.objects.filter(user=self.user, booking=booking, transaction_type="redeemed")
            .order_by("-created_at", "-id")
            .first()
        )
        if redeemed is None:
            return PointsRefund(0, 0)
        points = abs(redeemed.points)
        account = self.account(create=False)
        if account is None:
            account = UserRewardsPoints.objects.create(
                user=self.user,
                current_balance=points,
                lifetime_points_spent=points,
            )
        else:
            account.current_balance += points
            account.lifetime_points_spent = max(0, account.lifetime_points_spent - points)
            account.save(update_fields=["current_balance", "lifetime_points_spent", "updated_at"])
        RewardsPointTransaction.objects.create(
            user=self.user,
            booking=booking,
            transaction_type="adjusted",
            points=points,
            balance_after=account.current_balance,
            description=f"Points refunded for cancelled booking ({points} points)",
        )
        logger.info("Refunded %s points to user %s for booking %s", points, self.user.pk, booking.pk)
        return PointsRefund(points, account.current_balance)

    def has_earned_for(self, booking) -> bool:
        return RewardsPointTransaction.objects.filter(
            user=self.user, booking=booking, transaction_type="earned"
        ).exists()


class RewardsAdminService:
    """Back-office management of slots, tiers and member balances."""

    @transaction.atomic
    def adjust_points(self, user, points: int, description: str) -> int:
        account = UserRewardsPoints.objects.filter(user=user).first()
        if account is None:
            raise NotFoundError("User rewards points not found")
        new_balance = account.current_balance + points
        if new_balance < 0:
            raise ServiceError("Insufficient points balance")
        account.current_balance = new_balance
        account.total_points_earned += max(0, points)
        account.save(update_fields=["current_balance", "total_points_earned", "updated_at"])
        RewardsPointTransaction.objects.create(
            user=user,
            transaction_type="adjusted",
            points=points,
            balance_after=new_balance,
            description=description,
        )
        RewardsPointsService(user).refresh_tier(account)
        logger.info("Admin adjusted %s points for user %s", points, user.pk)
        return new_balance

    def ensure_slot_is_free(self, min_amount, max_amount, exclude_id=None) -> None:
        if min_amount >= max_amount:
            raise ServiceError("Min amount must be less than max amount")
        overlaps = RewardsPointSlot.objects.filter(is_active=True).filter(
            Q(min_amount__lte=min_amount, max_amount__gte=min_amount)
            | Q(min_amount__lte=max_amount, max_amount__gte=max_amount)
            | Q(min_amount__gte=min_amount, max_amount__lte=max_amount)
        )
        if exclude_id is not None:
            overlaps = overlaps.exclude(pk=exclude_id)
        if overlaps.exists():
            raise ServiceError("Slot overlaps with existing active slot")

    def settings(self) -> RewardsPointSettings:
        settings = RewardsPointSettings.objects.order_by("-is_active", "-id").first()
        if settings is None:
            settings = RewardsPointSettings.objects.create()
        return settings

    @transaction.atomic
    def update_settings(self, data: dict) -> RewardsPointSettings:
        settings = self.settings()
        for field in ("points_per_taka", "min_points_to_redeem", "max_points_per_booking"):
            if field in data:
                setattr(settings, field, data[field])
        settings.is_active = True
        settings.save()
        logger.info("Rewards point settings updated")
        return settings

    def get_slot(self, slot_id: int) -> RewardsPointSlot:
        slot = RewardsPointSlot.objects.filter(pk=slot_id).first()
        if slot is None:
            raise NotFoundError("Slot not found")
        return slot

    def create_slot(self, data: dict) -> RewardsPointSlot:
        if data.get("is_active", True):
            self.ensure_slot_is_free(data["min_amount"], data["max_amount"])
        elif data["min_amount"] >= data["max_amount"]:
            raise ServiceError("Min amount must be less than max amount")
        return RewardsPointSlot.objects.create(**data)

    def update_slot(self, slot_id: int, data: dict) -> RewardsPointSlot:
        slot = self.get_slot(slot_id)
        for field, value in data.items():
            setattr(slot, field, value)
        if slot.is_active:
            self.ensure_slot_is_free(slot.min_amount, slot.max_amount, exclude_id=slot.pk)
        elif slot.min_amount >= slot.max_amount:
            raise ServiceError("Min amount must be less than max amount")
        slot.save()
        return slot

    def delete_slot(self, slot_id: int) -> None:
        self.get_slot(slot_id).delete()

    def get_tier(self, tier_id: int) -> MemberStatusTier:
        tier = MemberStatusTier.objects.filter(pk=tier_id).first()
        if tier is None:
            raise NotFoundError("Tier not found")
        return tier

    def _ensure_tier_name_free(self, name: str, exclude_id: int | None = None) -> None:
        clash = MemberStatusTier.objects.filter(name__iexact=name)
        if exclude_id is not None:
            clash = clash.exclude(pk=exclude_id)
        if clash.exists():
            raise ServiceError("Tier name already exists")

    def create_tier(self, data: dict) -> MemberStatusTier:
        self._ensure_tier_name_free(data["name"])
        return MemberStatusTier.objects.create(**data)

    def update_tier(self, tier_id: int, data: dict) -> MemberStatusTier:
        tier = self.get_tier(tier_id)
        if "name" in data:
            self._ensure_tier_name_free(data["name"], exclude_id=tier.pk)
        for field, value in data.items():
            setattr(tier, field, value)
        tier.save()
        return tier

    def delete_tier(self, tier_id: int) -> None:
        self.get_tier(tier_id).delete()

    def members(self, search: str = ""):
        queryset = UserRewardsPoints.objects.select_related("user", "tier").order_by("-total_points_earned", "id")
        if search:
            queryset = queryset.filter(
                Q(user__first_name__icontains=search)
                | Q(user__last_name__icontains=search)
                | Q(user__email__icontains=search)
            )
        return queryset
