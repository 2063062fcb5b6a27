from django.db import models

from .booking import Booking
from .user import User


class Payment(models.Model):
    """A ledger line for a booking: ``dr_amount`` raises what is owed, ``cr_amount`` records money received."""

    PAYMENT_TYPE_CHOICES = (
        ("booking", "Booking"),
        ("security_deposit", "Security Deposit"),
        ("refund", "Refund"),
    )
    TRANSACTION_TYPE_CHOICES = (
        ("owner_accepted", "Owner Accepted"),
        ("guest_payment", "Guest Payment"),
        ("payment_received", "Payment Received"),
        ("refund", "Refund"),
    )
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("completed", "Completed"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
        ("refunded", "Refunded"),
    )

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="payments")
    payment_reference = models.CharField(max_length=50, db_index=True)
    payment_type = models.CharField(max_length=20, choices=PAYMENT_TYPE_CHOICES, default="booking")
    payment_method = models.CharField(max_length=30, blank=True)
    transaction_type = models.CharField(max_length=30, choices=TRANSACTION_TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    dr_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    cr_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    notes = models.TextField(blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.payment_reference


class OwnerPayout(models.Model):
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("completed", "Completed"),
        ("failed", "Failed"),
    )

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="payouts")
    payout_reference = models.CharField(max_length=60, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=30, default="bank_transfer")
    payment_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    payment_reference = models.CharField(max_length=100, blank=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.payout_reference
