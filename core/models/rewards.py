from django.db import models

from .booking import Booking
from .user import User


class RewardsPointSlot(models.Model):
    """Earning band: bookings whose amount falls in ``[min_amount, max_amount]`` earn ``points_per_thousand``."""

    min_amount = models.DecimalField(max_digits=12, decimal_places=2)
    max_amount = models.DecimalField(max_digits=12, decimal_places=2)
    points_per_thousand = models.DecimalField(max_digits=8, decimal_places=2)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("min_amount",)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.min_amount}-{self.max_amount}: {self.points_per_thousand} pts/1000"


class RewardsPointSettings(models.Model):
    points_per_taka = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=1,
        help_text="Points needed for one taka of discount",
    )
    min_points_to_redeem = models.PositiveIntegerField(default=100)
    max_points_per_booking = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "rewards point settings"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.points_per_taka} points per taka"

    @classmethod
    def active(cls):
        return cls.objects.filter(is_active=True).order_by("-id").first()


class MemberStatusTier(models.Model):
    name = models.CharField(max_length=50, unique=True)
    min_points = models.PositiveIntegerField(default=0)
    color = models.CharField(max_length=20, blank=True)
    icon = models.CharField(max_length=50, blank=True)
    benefits = models.TextField(blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ("min_points",)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name


class UserRewardsPoints(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="rewards_account")
    total_points_earned = models.PositiveIntegerField(default=0)
    current_balance = models.IntegerField(default=0)
    lifetime_points_spent = models.PositiveIntegerField(default=0)
    tier = models.ForeignKey(
        MemberStatusTier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "user rewards points"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.user.username}: {self.current_balance} pts"


class RewardsPointTransaction(models.Model):
    TRANSACTION_TYPE_CHOICES = (
        ("earned", "Earned"),
        ("redeemed", "Redeemed"),
        ("adjusted", "Adjusted"),
        ("expired", "Expired"),
    )

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="points_transactions")
    booking = models.ForeignKey(
        Booking,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="points_transactions",
    )
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPE_CHOICES)
    points = models.IntegerField()
    balance_after = models.IntegerField()
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.transaction_type} {self.points} for {self.user.username}"
