from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterable

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

from ..exceptions import ConflictError, NotFoundError, ServiceError
from ..models import AdminEarning, Booking, Payment, Property, PropertyImage, SystemSetting
from .accounting import OwnerBalanceService, booking_ledger, sum_or_zero
from .notifications import send_sms
from .booking import dates_available
from .pricing import ledger_reference, money, split_commission
from .rewards import RewardsPointsService

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_FORMATS = {"JPEG", "PNG", "WEBP"}
OWNER_PAYMENT_STATUSES = ("pending", "processing", "completed", "failed", "cancelled", "refunded")
DEFAULT_PAYMENT_TIME_LIMIT = 15


def validate_image(upload) -> None:
    """Reject uploads Pillow cannot parse or that are not JPEG/PNG/WEBP."""

    try:
        with Image.open(upload) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ServiceError(f"Invalid image file: {getattr(upload, 'name', 'upload')}") from exc
    finally:
        upload.seek(0)
    if image_format not in ALLOWED_IMAGE_FORMATS:
        raise ServiceError("Only JPEG, PNG and WEBP images are allowed")


@dataclass(frozen=True)
class OwnerDashboardStats:
    total_properties: int
    active_properties: int
    pending_properties: int
    total_bookings: int
    pending_requests: int
    upcoming_check_ins: int


class OwnerPropertyService:
    """Create and maintain an owner's listings."""

    def __init__(self, owner):
        self.owner = owner

    def properties(self, status: str = ""):
        queryset = (
            Property.objects.filter(owner=self.owner)
            .select_related("property_type")
            .prefetch_related("images", "amenities")
            .annotate(
                booking_count=Count("bookings", distinct=True),
                active_booking_count=Count(
                    "bookings",
                    filter=Q(bookings__status__in=("confirmed", "checked_in")),
                    distinct=True,
                ),
            )
        )
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def get(self, property_id: int) -> Property:
        listing = self.properties().filter(pk=property_id).first()
        if listing is None:
            raise NotFoundError("Property not found or access denied")
        return listing

    @transaction.atomic
    def create(self, data: dict[str, Any]) -> Property:
        amenities = data.pop("amenities", None)
        listing = Property.objects.create(owner=self.owner, status="pending", **data)
        if amenities:
            listing.amenities.set(amenities)
        logger.info("Owner %s created property %s", self.owner.pk, listing.pk)
        return listing

    @transaction.atomic
    def update(self, property_id: int, data: dict[str, Any]) -> Property:
        listing = self.get(property_id)
        amenities = data.pop("amenities", None)
        for field, value in data.items():
            setattr(listing, field, value)
        listing.save()
        if amenities is not None:
            listing.amenities.set(amenities)
        return listing

    def delete(self, property_id: int) -> Property:
        listing = self.get(property_id)
        if listing.bookings.filter(status__in=("confirmed", "checked_in")).exists():
            raise ServiceError("Cannot delete property with active bookings")
        listing.status = "inactive"
        listing.save(update_fields=["status", "updated_at"])
        logger.info("Owner %s deactivated property %s", self.owner.pk, listing.pk)
        return listing

    @transaction.atomic
    def add_images(self, property_id: int, uploads: Iterable, captions: Iterable[str] = ()) -> list[PropertyImage]:
        listing = self.get(property_id)
        uploads = list(uploads)
        if not uploads:
            raise ServiceError("No images uploaded")
        for upload in uploads:
            validate_image(upload)

        captions = list(captions)
        has_main = listing.images.filter(image_type="main").exists()
        next_order = listing.images.count()
        created = []
        for index, upload in enumerate(uploads):
            created.append(
                PropertyImage.objects.create(
                    property=listing,
                    image=upload,
                    image_type="gallery" if has_main or index else "main",
                    caption=captions[index] if index < len(captions) else "",
                    sort_order=next_order + index,
                )
            )
        return created

    def remove_image(self, property_id: int, image_id: int) -> None:
        listing = self.get(property_id)
        image = listing.images.filter(pk=image_id).first()
        if image is None:
            raise NotFoundError("Image not found")
        was_main = image.image_type == "main"
        image.image.delete(save=False)
        image.delete()
        if was_main:
            replacement = listing.images.order_by("sort_order", "id").first()
            if replacement is not None:
                replacement.image_type = "main"
                replacement.save(update_fields=["image_type"])


class OwnerBookingService:
    """Act on booking requests made against an owner's listings."""

    def __init__(self, owner):
        self.owner = owner

    def bookings(self, status: str = "", property_id: int | None = None):
        queryset = Booking.objects.filter(property__owner=self.owner).select_related("property", "guest")
        if status:
            queryset = queryset.filter(status=status)
        if property_id:
            queryset = queryset.filter(property_id=property_id)
        return queryset

    def get(self, booking_id: int, *, lock: bool = False) -> Booking:
        queryset = self.bookings()
        if lock:
            queryset = queryset.select_for_update(of=("self",))
        booking = queryset.filter(pk=booking_id).first()
        if booking is None:
            raise NotFoundError("Booking not found or access denied")
        return booking

    @transaction.atomic
    def confirm(self, booking_id: int) -> Booking:
        """Accept a request; the guest then has a limited window to pay."""

        booking = self.get(booking_id, lock=True)
        if booking.status != "pending" or booking.confirmed_at is not None:
            raise ServiceError("Only pending bookings can be accepted")
        if not dates_available(
            booking.property, booking.check_in_date, booking.check_out_date, exclude_booking_id=booking.pk
        ):
            raise ConflictError("Property is not available for the selected dates")

        minutes = SystemSetting.get_int("payment_time_limit_minutes", DEFAULT_PAYMENT_TIME_LIMIT) or DEFAULT_PAYMENT_TIME_LIMIT
        now = timezone.now()
        booking.confirmed_at = now
        booking.payment_deadline = now + timedelta(minutes=minutes)
        booking.save(update_fields=["confirmed_at", "payment_deadline", "updated_at"])
        Payment.objects.create(
            booking=booking,
            payment_reference=ledger_reference("DR", booking.pk),
            transaction_type="owner_accepted",
            amount=booking.total_amount,
            dr_amount=booking.total_amount,
            status="pending",
            notes=f"Owner accepted booking request - Receivable amount: ৳{booking.total_amount}",
        )
        logger.info("Owner %s accepted booking %s", self.owner.pk, booking.booking_reference)

        deadline = timezone.localtime(booking.payment_deadline)
        message = (
            f"Hi {booking.guest_name or booking.guest.display_name}, your booking request "
            f"({booking.booking_reference}) for {booking.property.title} has been accepted. "
            f"Please complete payment within {minutes} minutes (by {deadline:%Y-%m-%d %H:%M}) to confirm your stay. "
            "Otherwise, the booking will be automatically cancelled."
        )
        phone = booking.guest_phone or booking.guest.phone
        transaction.on_commit(lambda: send_sms(phone, message))
        return booking

    def check_in(self, booking_id: int) -> Booking:
        booking = self.get(booking_id)
        if booking.status != "confirmed":
            raise ServiceError("Only confirmed bookings can be checked in")
        if booking.payment_status != "paid":
            raise ServiceError("Payment must be completed before check-in")
        booking.status = "checked_in"
        booking.checked_in_at = timezone.now()
        booking.save(update_fields=["status", "checked_in_at", "updated_at"])
        logger.info("Booking %s checked in", booking.booking_reference)
        return booking

    def check_out(self, booking_id: int) -> Booking:
        booking = self.get(booking_id)
        if booking.status != "checked_in":
            raise ServiceError("Only checked-in guests can be checked out")
        booking.status = "checked_out"
        booking.checked_out_at = timezone.now()
        booking.save(update_fields=["status", "checked_out_at", "updated_at"])
        logger.info("Booking %s checked out", booking.booking_reference)
        return booking

    @transaction.atomic
    def cancel(self, booking_id: int, reason: str = "") -> Booking:
        booking = self.get(booking_id, lock=True)
        if booking.status not in {"pending", "confirmed"}:
            raise ServiceError("This booking cannot be cancelled")
        booking.mark_cancelled(reason or "Cancelled by property owner")
        AdminEarning.objects.filter(booking=booking).update(status="cancelled", updated_at=timezone.now())
        try:
            RewardsPointsService(booking.guest).refund_for_booking(booking)
        except ServiceError as exc:
            logger.warning("Points refund for booking %s failed: %s", booking.booking_reference, exc)
        logger.info("Owner %s cancelled booking %s", self.owner.pk, booking.booking_reference)
        return booking

    @transaction.atomic
    def update_payment(
        self,
        booking_id: int,
        payment_status: str,
        *,
        partial_amount=None,
        discount_amount=None,
        discount_reason: str = "",
    ) -> Booking:
        """Record cash received or a goodwill discount against a booking."""

        if payment_status not in OWNER_PAYMENT_STATUSES:
            raise ServiceError("Invalid payment status")
        booking = self.get(booking_id, lock=True)
        now = timezone.now()

        discount = money(discount_amount) if discount_amount else Decimal("0.00")
        if discount > 0:
            discount = min(discount, booking.total_amount)
            booking.discount_amount += discount
            booking.total_amount -= discount
            split = split_commission(booking.total_amount, booking.admin_commission_rate)
            booking.admin_commission = split.commission
            booking.owner_earnings = split.owner_earnings
            AdminEarning.objects.filter(booking=booking).update(
                booking_amount=booking.total_amount,
                commission_amount=split.commission,
                owner_earnings=split.owner_earnings,
                updated_at=now,
            )
            receivable = booking.payments.filter(transaction_type="owner_accepted", status="pending").first()
            if receivable is not None:
                receivable.amount = receivable.dr_amount = max(Decimal("0.00"), receivable.dr_amount - discount)
                receivable.save(update_fields=["amount", "dr_amount"])
            logger.info("Discount %s applied to booking %s: %s", discount, booking.booking_reference, discount_reason)

        partial = money(partial_amount) if partial_amount else Decimal("0.00")
        if partial > 0:
            Payment.objects.create(
                booking=booking,
                payment_reference=ledger_reference("CR", booking.pk),
                payment_method="cash",
                transaction_type="payment_received",
                amount=partial,
                cr_amount=partial,
                status="completed",
                notes="Partial payment received",
                processed_at=now,
            )

        resulting_status = payment_status
        totals = booking.payments.aggregate(
            dr=sum_or_zero("dr_amount"),
            cr=sum_or_zero("cr_amount"),
        )
        if totals["dr"] > 0 and totals["dr"] - totals["cr"] <= Decimal("0.01"):
            resulting_status = "paid"
        booking.payment_status = resulting_status
        booking.save()

        row_status = "completed" if resulting_status == "paid" else resulting_status
        booking.payments.exclude(status=row_status).update(status=row_status, processed_at=now)
        logger.info("Owner %s set payment of booking %s to %s", self.owner.pk, booking.booking_reference, resulting_status)
        return booking

    def payment_history(self, booking_id: int) -> dict[str, Any]:
        booking = self.get(booking_id)
        lines, summary = booking_ledger(booking)
        return {"booking": booking, "ledger": lines, "summary": summary}


class OwnerDashboardService:
    """Aggregate data required for the owner dashboard."""

    def __init__(self, owner):
        self.owner = owner

    def stats(self) -> OwnerDashboardStats:
        listings = Property.objects.filter(owner=self.owner).aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(status="active")),
            pending=Count("id", filter=Q(status="pending")),
        )
        bookings = Booking.objects.filter(property__owner=self.owner)
        today = timezone.localdate()
        return OwnerDashboardStats(
            total_properties=listings["total"],
            active_properties=listings["active"],
            pending_properties=listings["pending"],
            total_bookings=bookings.count(),
            pending_requests=bookings.filter(status="pending", confirmed_at__isnull=True).count(),
            upcoming_check_ins=bookings.filter(status="confirmed", check_in_date__gte=today).count(),
        )

    def bookings_by_status(self) -> dict[str, int]:
        rows = (
            Booking.objects.filter(property__owner=self.owner)
            .values("status")
            .annotate(total=Count("id"))
            .order_by("status")
        )
        return {row["status"]: row["total"] for row in rows}

    def recent_bookings(self, limit: int = 5) -> list[Booking]:
        return list(
            Booking.objects.filter(property__owner=self.owner).select_related("property", "guest")[:limit]
        )

    def earnings(self) -> dict[str, Any]:
        return OwnerBalanceService(self.owner).summary()
