"""Guest side of the booking lifecycle plus the expired-acceptance sweep."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from ..exceptions import ConflictError, NotFoundError, ServiceError
from ..models import AdminEarning, Booking, Coupon, Payment, Property, SystemSetting
from .accounting import booking_ledger
from .notifications import send_sms
from .pricing import (
    StayQuote,
    count_nights,
    coupon_discount,
    generate_booking_reference,
    ledger_reference,
    money,
    quote_stay,
    split_commission,
)
from .rewards import RewardsPointsService

logger = logging.getLogger(__name__)

DEFAULT_COMMISSION_RATE = Decimal("10")
GUEST_PAYMENT_STATUSES = ("pending", "processing", "paid", "completed", "failed", "cancelled", "refunded")


def dates_available(listing: Property, check_in: date, check_out: date, *, exclude_booking_id=None, now=None) -> bool:
    """True when no blocking booking of ``listing`` touches ``[check_in, check_out]``."""

    conflicts = listing.bookings.blocking(now).overlapping(check_in, check_out)
    if exclude_booking_id is not None:
        conflicts = conflicts.exclude(pk=exclude_booking_id)
    return not conflicts.exists()


def commission_rate() -> Decimal:
    return SystemSetting.get_decimal("admin_commission_rate", DEFAULT_COMMISSION_RATE)


@dataclass(frozen=True)
class BookingRequest:
    property_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int = 1
    special_requests: str = ""
    coupon_code: str = ""


@dataclass(frozen=True)
class BookingOutcome:
    booking: Booking
    quote: StayQuote
    discount: Decimal
    final_amount: Decimal

    def pricing(self) -> dict[str, Any]:
        return {
            "nights": self.quote.nights,
            "basePrice": self.quote.stay_amount,
            "cleaningFee": self.quote.cleaning_fee,
            "securityDeposit": self.quote.security_deposit,
            "extraGuestFee": self.quote.extra_guest_fee,
            "serviceFee": self.quote.service_fee,
            "taxAmount": self.quote.tax_amount,
            "subtotal": self.quote.subtotal,
            "discountAmount": self.discount,
            "totalAmount": self.final_amount,
        }


@dataclass(frozen=True)
class GuestPaymentOutcome:
    booking: Booking
    points_redeemed: int = 0
    points_discount: Decimal = Decimal("0.00")
    points_awarded: int = 0


class GuestBookingService:
    """Book, pay for and cancel stays on behalf of one guest."""

    def __init__(self, guest):
        self.guest = guest

    def _bookings(self):
        return Booking.objects.filter(guest=self.guest).select_related("property", "property__owner")

    def get(self, booking_id: int, message: str = "Booking not found or access denied") -> Booking:
        booking = self._bookings().filter(pk=booking_id).first()
        if booking is None:
            raise NotFoundError(message)
        return booking

    def bookings(self, status: str = ""):
        queryset = self._bookings().prefetch_related("property__images")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def detail(self, booking_id: int) -> dict[str, Any]:
        booking = self.get(booking_id, "Booking not found")
        lines, summary = booking_ledger(booking)
        return {"booking": booking, "ledger": lines, "summary": summary}

    def dashboard(self) -> dict[str, Any]:
        bookings = Booking.objects.filter(guest=self.guest)
        counts = bookings.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status="pending")),
            confirmed=Count("id", filter=Q(status="confirmed")),
            checked_in=Count("id", filter=Q(status="checked_in")),
            checked_out=Count("id", filter=Q(status="checked_out")),
            cancelled=Count("id", filter=Q(status="cancelled")),
        )
        spent = bookings.filter(payment_status="paid").exclude(status="cancelled").aggregate(
            total=Sum("total_amount")
        )["total"]
        today = timezone.localdate()
        return {
            "statistics": {
                "totalBookings": counts.pop("total"),
                "totalFavorites": self.guest.favorites.count(),
                "totalSpent": money(spent),
                "byStatus": counts,
            },
            "recent_bookings": list(self._bookings()[:5]),
            "upcoming_bookings": list(
                self._bookings().filter(status="confirmed", check_in_date__gte=today).order_by("check_in_date")[:3]
            ),
        }

    @transaction.atomic
    def create(self, request: BookingRequest) -> BookingOutcome:
        today = timezone.localdate()
        if request.check_in_date < today:
            raise ServiceError("Check-in date cannot be in the past")
        if request.check_out_date <= request.check_in_date:
            raise ServiceError("Check-out date must be after check-in date")

        listing = (
            Property.objects.select_for_update()
            .filter(pk=request.property_id, status="active")
            .select_related("owner")
            .first()
        )
        if listing is None:
            raise NotFoundError("Property not found or not available")
        if listing.owner_id == self.guest.pk:
            raise ServiceError("You cannot book your own property")
        if request.number_of_guests > listing.max_guests:
            raise ServiceError(f"Maximum {listing.max_guests} guests allowed")
        nights = count_nights(request.check_in_date, request.check_out_date)
        if nights < listing.minimum_stay:
            raise ServiceError(f"Minimum {listing.minimum_stay} nights required")
        if not dates_available(listing, request.check_in_date, request.check_out_date):
            raise ConflictError("Property is not available for the selected dates")

        quote = quote_stay(
            base_price=listing.base_price,
            nights=nights,
            guests=request.number_of_guests,
            cleaning_fee=listing.cleaning_fee,
            security_deposit=listing.security_deposit,
            extra_guest_fee=listing.extra_guest_fee,
        )

        coupon = None
        discount = Decimal("0.00")
        if request.coupon_code:
            coupon = Coupon.objects.select_for_update().filter(code=request.coupon_code.strip()).first()
            if coupon is not None and coupon.is_redeemable():
                discount = coupon_discount(coupon, quote.total)
            else:
                coupon = None
        final_amount = money(max(Decimal("0"), quote.total - discount))
        split = split_commission(final_amount, commission_rate())

        booking = Booking.objects.create(
            booking_reference=generate_booking_reference(),
            property=listing,
            guest=self.guest,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            check_in_time=listing.check_in_time,
            check_out_time=listing.check_out_time,
            number_of_guests=request.number_of_guests,
            number_of_nights=nights,
            base_price=quote.stay_amount,
            cleaning_fee=quote.cleaning_fee,
            security_deposit=quote.security_deposit,
            extra_guest_fee=quote.extra_guest_fee,
            service_fee=quote.service_fee,
            tax_amount=quote.tax_amount,
            discount_amount=discount,
            subtotal=quote.subtotal,
            total_amount=final_amount,
            currency=listing.currency,
            admin_commission_rate=split.rate,
            admin_commission=split.commission,
            owner_earnings=split.owner_earnings,
            coupon=coupon if discount > 0 else None,
            guest_name=self.guest.display_name,
            guest_email=self.guest.email,
            guest_phone=self.guest.phone,
            special_requests=request.special_requests or "",
        )
        if coupon is not None and discount > 0:
            coupon.used_count += 1
            coupon.save(update_fields=["used_count"])
        AdminEarning.objects.create(
            booking=booking,
            owner=listing.owner,
            booking_amount=final_amount,
            commission_rate=split.rate,
            commission_amount=split.commission,
            owner_earnings=split.owner_earnings,
        )
        logger.info("Booking %s requested by guest %s for property %s", booking.booking_reference, self.guest.pk, listing.pk)

        transaction.on_commit(
            lambda: send_sms(
                listing.owner.phone,
                f"New booking request {booking.booking_reference} for {listing.title}. "
                f"Guest: {booking.guest_name}. Check-in {booking.check_in_date:%Y-%m-%d}. "
                "Please review and confirm.",
            )
        )
        return BookingOutcome(booking, quote, discount, final_amount)

    @transaction.atomic
    def cancel(self, booking_id: int, reason: str = "") -> Booking:
        booking = self.get(booking_id)
        if booking.status == "cancelled":
            raise ServiceError("Booking is already cancelled")
        if booking.status == "checked_out":
            raise ServiceError("Cannot cancel completed booking")
        if not booking.can_guest_cancel():
            raise ServiceError("Cannot cancel booking after check-in date")

        booking.mark_cancelled(reason or "Cancelled by guest")
        AdminEarning.objects.filter(booking=booking).update(status="cancelled", updated_at=timezone.now())
        try:
            RewardsPointsService(self.guest).refund_for_booking(booking)
        except ServiceError as exc:
            logger.warning("Points refund for booking %s failed: %s", booking.booking_reference, exc)
        logger.info("Guest %s cancelled booking %s", self.guest.pk, booking.booking_reference)
        return booking

    @transaction.atomic
    def pay(
        self,
        booking_id: int,
        payment_status: str,
        payment_method: str = "",
        points_to_redeem: int = 0,
    ) -> GuestPaymentOutcome:
        if payment_status not in GUEST_PAYMENT_STATUSES:
            raise ServiceError("Invalid payment status")
        booking = Booking.objects.select_for_update().filter(pk=booking_id, guest=self.guest).first()
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.status != "pending":
            raise ServiceError("Booking must be in pending status")
        if not booking.is_owner_accepted():
            raise ServiceError("Property owner has not accepted this booking request yet")
        if not booking.payment_window_open():
            raise ServiceError("Payment deadline has passed for this booking")

        if payment_status != "paid":
            booking.payment_status = payment_status
            booking.save(update_fields=["payment_status", "updated_at"])
            return GuestPaymentOutcome(booking)

        receivable = booking.payments.filter(transaction_type="owner_accepted").first()
        if receivable is None:
            raise ServiceError("Owner has not accepted this booking request yet")

        rewards = RewardsPointsService(self.guest)
        points_redeemed = 0
        points_discount = Decimal("0.00")
        now = timezone.now()
        if not booking.payments.filter(transaction_type="guest_payment").exists():
            if points_to_redeem and points_to_redeem > 0:
                try:
                    redemption = rewards.redeem_for_booking(points_to_redeem, booking)
                except ServiceError as exc:
                    logger.warning("Points redemption for booking %s failed: %s", booking.booking_reference, exc)
                else:
                    points_redeemed = redemption.points_redeemed
                    points_discount = redemption.discount_amount

            received = money(max(Decimal("0"), booking.total_amount - points_discount))
            notes = f"Guest payment received - Total: ৳{booking.total_amount}"
            if points_discount > 0:
                notes += f", Points discount: ৳{points_discount}"
            Payment.objects.create(
                booking=booking,
                payment_reference=ledger_reference("CR", booking.pk),
                payment_method=payment_method or "online",
                transaction_type="guest_payment",
                amount=received,
                cr_amount=received,
                status="completed",
                notes=notes,
                processed_at=now,
            )
            receivable.status = "completed"
            receivable.processed_at = now
            receivable.save(update_fields=["status", "processed_at"])
            AdminEarning.objects.filter(booking=booking).update(payment_status="paid", paid_at=now, updated_at=now)
            booking.points_redeemed = points_redeemed
            booking.points_discount = points_discount

        booking.status = "confirmed"
        booking.payment_status = "paid"
        booking.save()
        logger.info("Guest %s paid for booking %s", self.guest.pk, booking.booking_reference)

        points_awarded = 0
        if not rewards.has_earned_for(booking):
            points_awarded = rewards.award_for_booking(booking.total_amount, booking).points_awarded
        return GuestPaymentOutcome(booking, points_redeemed, points_discount, points_awarded)


def cancel_expired_bookings(now=None) -> list[str]:
    """Cancel owner-accepted requests whose payment window closed unpaid.

    Returns the references of the bookings that were cancelled.
    """

    now = now or timezone.now()
    expired = (
        Booking.objects.awaiting_payment_expired(now)
        .exclude(pk__in=Payment.objects.filter(payment_type="booking", status="completed").values("booking_id"))
        .select_related("property", "guest")
    )
    cancelled: list[str] = []
    for booking in expired:
        with transaction.atomic():
            booking.mark_cancelled("Payment not completed within the deadline")
            booking.payments.filter(status__in=("pending", "processing")).update(status="cancelled", processed_at=now)
            AdminEarning.objects.filter(booking=booking).update(status="cancelled", updated_at=now)
        cancelled.append(booking.booking_reference)
        logger.info("Booking %s cancelled after payment deadline %s", booking.booking_reference, booking.payment_deadline)
        send_sms(
            booking.guest_phone or booking.guest.phone,
            f"Hi {booking.guest_name or booking.guest.display_name}, your booking request "
            f"({booking.booking_reference}) for {booking.property.title} "
            f"(Check-in: {booking.check_in_date:%Y-%m-%d}) has been automatically cancelled as payment "
            "was not completed within the deadline. The property is now available for other guests.",
        )
    return cancelled
