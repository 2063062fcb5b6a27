from datetime import time

from django.db import models
from django.db.models import Q
from django.utils import timezone

from .property import Property
from .user import User


class Coupon(models.Model):
    DISCOUNT_TYPE_CHOICES = (("percentage", "Percentage"), ("fixed", "Fixed Amount"))

    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPE_CHOICES, default="percentage")
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    maximum_discount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    minimum_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    valid_from = models.DateTimeField(null=True, blank=True)
    valid_until = models.DateTimeField(null=True, blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.code

    def is_redeemable(self, now=None) -> bool:
        now = now or timezone.now()
        if not self.is_active:
            return False
        if self.valid_from and self.valid_from > now:
            return False
        if self.valid_until and self.valid_until < now:
            return False
        if self.usage_limit is not None and self.used_count >= self.usage_limit:
            return False
        return True


class BookingQuerySet(models.QuerySet):
    def blocking(self, now=None):
        """Bookings that hold their dates: confirmed stays and owner-accepted requests awaiting payment."""

        now = now or timezone.now()
        return self.filter(
            Q(status__in=("confirmed", "checked_in"))
            | Q(status="pending", confirmed_at__isnull=False, payment_deadline__gt=now)
        )

    def overlapping(self, check_in_date, check_out_date):
        return self.filter(check_in_date__lte=check_out_date, check_out_date__gte=check_in_date)

    def awaiting_payment_expired(self, now=None):
        now = now or timezone.now()
        return self.filter(status="pending", confirmed_at__isnull=False, payment_deadline__lt=now)


class Booking(models.Model):
    STATUS_CHOICES = (
        ("pending", "Pending"),
        ("confirmed", "Confirmed"),
        ("checked_in", "Checked In"),
        ("checked_out", "Checked Out"),
        ("cancelled", "Cancelled"),
    )
    PAYMENT_STATUS_CHOICES = (
        ("pending", "Pending"),
        ("processing", "Processing"),
        ("paid", "Paid"),
        ("completed", "Completed"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
        ("refunded", "Refunded"),
    )

    booking_reference = models.CharField(max_length=20, unique=True)
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="bookings")
    guest = models.ForeignKey(User, on_delete=models.CASCADE, related_name="bookings")
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    check_in_time = models.TimeField(default=time(15, 0))
    check_out_time = models.TimeField(default=time(11, 0))
    number_of_guests = models.PositiveIntegerField(default=1)
    number_of_nights = models.PositiveIntegerField()
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    cleaning_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    extra_guest_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    service_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="BDT")
    admin_commission_rate = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    admin_commission = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    owner_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    coupon = models.ForeignKey(Coupon, on_delete=models.SET_NULL, null=True, blank=True, related_name="bookings")
    guest_name = models.CharField(max_length=255, blank=True)
    guest_email = models.EmailField(blank=True)
    guest_phone = models.CharField(max_length=20, blank=True)
    special_requests = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="pending")
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="pending")
    confirmed_at = models.DateTimeField(null=True, blank=True)
    payment_deadline = models.DateTimeField(null=True, blank=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_out_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)
    points_redeemed = models.PositiveIntegerField(default=0)
    points_discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.booking_reference} for {self.property.title}"

    def is_owner_accepted(self) -> bool:
        return self.status == "pending" and self.confirmed_at is not None

    def payment_window_open(self, now=None) -> bool:
        if not self.is_owner_accepted() or self.payment_deadline is None:
            return False
        now = now or timezone.now()
        return self.payment_deadline > now

    def can_guest_cancel(self, today=None) -> bool:
        if self.status in {"cancelled", "checked_out"}:
            return False
        today = today or timezone.localdate()
        return self.check_in_date > today

    def mark_cancelled(self, reason: str = "") -> None:
        self.status = "cancelled"
        self.cancelled_at = timezone.now()
        self.cancellation_reason = reason
        self.save(update_fields=["status", "cancelled_at", "cancellation_reason", "updated_at"])


class AdminEarning(models.Model):
    """Platform commission recorded for every booking."""

    STATUS_CHOICES = (("active", "Active"), ("cancelled", "Cancelled"))
    PAYMENT_STATUS_CHOICES = (("pending", "Pending"), ("paid", "Paid"))

    booking = models.OneToOneField(Booking, on_delete=models.CASCADE, related_name="admin_earning")
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="commission_records")
    booking_amount = models.DecimalField(max_digits=12, decimal_places=2)
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2)
    owner_earnings = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="pending")
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Commission for {self.booking.booking_reference}"
