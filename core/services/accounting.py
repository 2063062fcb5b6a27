"""DR/CR booking ledger, owner balances and payouts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..exceptions import NotFoundError, ServiceError
from ..models import AdminEarning, Booking, OwnerPayout, Payment
from .params import query_date
from .pricing import money, payout_reference

logger = logging.getLogger(__name__)

User = get_user_model()

ZERO = Decimal("0.00")
EARNING_STATUSES = ("confirmed", "checked_in", "checked_out")
PAYOUT_STATUSES = ("pending", "processing", "completed", "failed")


def sum_or_zero(field: str, condition: Q | None = None, **filter_kwargs):
    """``SUM(field)`` that yields 0 rather than NULL over empty sets."""

    if filter_kwargs:
        condition = (condition & Q(**filter_kwargs)) if condition is not None else Q(**filter_kwargs)
    aggregate = Sum(field, filter=condition) if condition is not None else Sum(field)
    return Coalesce(aggregate, Value(ZERO), output_field=DecimalField(max_digits=14, decimal_places=2))


@dataclass(frozen=True)
class LedgerEntry:
    payment: Payment
    running_balance: Decimal


@dataclass(frozen=True)
class LedgerSummary:
    total_dr: Decimal
    total_cr: Decimal
    outstanding: Decimal
    total_bookings: int


@dataclass(frozen=True)
class LedgerFilters:
    view: str = "all"
    entity_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None


def with_running_balance(entries: Iterable[Payment]) -> list[LedgerEntry]:
    """Pair every entry with the cumulative ``dr - cr`` up to and including it."""

    balance = ZERO
    lines: list[LedgerEntry] = []
    for entry in entries:
        balance += (entry.dr_amount or ZERO) - (entry.cr_amount or ZERO)
        lines.append(LedgerEntry(entry, money(balance)))
    return lines


def summarize(entries: Iterable[Payment]) -> LedgerSummary:
    entries = list(entries)
    total_dr = sum((entry.dr_amount or ZERO for entry in entries), ZERO)
    total_cr = sum((entry.cr_amount or ZERO for entry in entries), ZERO)
    return LedgerSummary(
        total_dr=money(total_dr),
        total_cr=money(total_cr),
        outstanding=money(total_dr - total_cr),
        total_bookings=len({entry.booking_id for entry in entries}),
    )


def booking_ledger(booking: Booking) -> tuple[list[LedgerEntry], LedgerSummary]:
    entries = list(booking.payments.order_by("created_at", "id"))
    return with_running_balance(entries), summarize(entries)


class OwnerBalanceService:
    """Earnings, available balance and payout requests for one property owner."""

    def __init__(self, owner):
        self.owner = owner

    def _bookings(self):
        return Booking.objects.filter(property__owner=self.owner)

    def earned(self) -> Decimal:
        return self._bookings().filter(payment_status="paid", status__in=EARNING_STATUSES).aggregate(
            total=sum_or_zero("owner_earnings")
        )["total"]

    def committed_payouts(self) -> Decimal:
        return OwnerPayout.objects.filter(
            owner=self.owner, payment_status__in=("pending", "processing", "completed")
        ).aggregate(total=sum_or_zero("amount"))["total"]

    def available_balance(self) -> Decimal:
        return money(self.earned() - self.committed_payouts())

    def summary(self) -> dict[str, Any]:
        bookings = self._bookings()
        totals = bookings.exclude(status="cancelled").aggregate(
            total_revenue=sum_or_zero("total_amount", status__in=EARNING_STATUSES),
            total_earnings=sum_or_zero("owner_earnings", status__in=EARNING_STATUSES),
            total_commission=sum_or_zero("admin_commission", status__in=EARNING_STATUSES),
            pending_earnings=sum_or_zero("owner_earnings", status="pending"),
        )
        payouts = OwnerPayout.objects.filter(owner=self.owner).aggregate(
            paid_out=sum_or_zero("amount", payment_status="completed"),
            pending_payouts=sum_or_zero("amount", payment_status__in=("pending", "processing")),
        )
        return {
            **{key: money(value) for key, value in totals.items()},
            **{key: money(value) for key, value in payouts.items()},
            "available_balance": self.available_balance(),
            "total_bookings": bookings.exclude(status="cancelled").count(),
        }

    @transaction.atomic
    def request_payout(self, amount, payment_method: str = "bank_transfer", notes: str = "") -> OwnerPayout:
        amount = Decimal(str(amount or 0))
        if amount <= 0:
            raise ServiceError("Invalid payout amount")
        available = self.available_balance()
        if amount > available:
            raise ServiceError(f"Insufficient balance. Available: {available}")
        payout = OwnerPayout.objects.create(
            owner=self.owner,
            payout_reference=payout_reference(self.owner.pk),
            amount=money(amount),
            payment_method=payment_method or "bank_transfer",
            notes=notes or "",
        )
        logger.info("Owner %s requested payout %s of %s", self.owner.pk, payout.payout_reference, payout.amount)
        return payout


class AdminLedgerService:
    """Platform-wide ledger and accounting summaries for the back office."""

    def build_filters(self, data: dict[str, str]) -> LedgerFilters:
        view = (data.get("view") or "all").strip()
        if view not in {"all", "owner", "guest"}:
            view = "all"
        entity_raw = (data.get("entity_id") or "").strip()
        entity_id = int(entity_raw) if entity_raw.isdigit() else None
        return LedgerFilters(
            view=view,
            entity_id=entity_id,
            start_date=query_date(data.get("start_date"), "start date"),
            end_date=query_date(data.get("end_date"), "end date"),
        )

    @staticmethod
    def _date_range(queryset, filters: LedgerFilters, field: str = "created_at"):
        if filters.start_date:
            queryset = queryset.filter(**{f"{field}__date__gte": filters.start_date})
        if filters.end_date:
            queryset = queryset.filter(**{f"{field}__date__lte": filters.end_date})
        return queryset

    def entries(self, filters: LedgerFilters):
        queryset = (
            Payment.objects.exclude(booking__status="cancelled")
            .select_related("booking__property__owner", "booking__guest")
            .order_by("created_at", "id")
        )
        queryset = self._date_range(queryset, filters)
        if filters.view == "owner" and filters.entity_id:
            queryset = queryset.filter(booking__property__owner_id=filters.entity_id)
        elif filters.view == "guest" and filters.entity_id:
            queryset = queryset.filter(booking__guest_id=filters.entity_id)
        return queryset

    def ledger(self, filters: LedgerFilters) -> tuple[list[LedgerEntry], dict[str, Any]]:
        entries = list(self.entries(filters))
        summary = summarize(entries)

        commissions = self._date_range(
            AdminEarning.objects.filter(status="active").exclude(booking__status="cancelled"), filters
        ).aggregate(
            total_commission_earned=sum_or_zero("commission_amount"),
            commission_paid=sum_or_zero("commission_amount", payment_status="paid"),
            commission_pending=sum_or_zero("commission_amount", payment_status="pending"),
        )
        owner_earnings = self._date_range(
            Booking.objects.filter(status__in=EARNING_STATUSES), filters
        ).aggregate(total=sum_or_zero("owner_earnings"))["total"]
        payouts = self._date_range(OwnerPayout.objects.all(), filters).aggregate(
            completed=sum_or_zero("amount", payment_status="completed"),
            pending=sum_or_zero("amount", payment_status__in=("pending", "processing")),
        )
        return with_running_balance(entries), {
            "total_dr": summary.total_dr,
            "total_cr": summary.total_cr,
            "outstanding": summary.outstanding,
            "total_bookings": summary.total_bookings,
            "total_commission_earned": money(commissions["total_commission_earned"]),
            "commission_paid": money(commissions["commission_paid"]),
            "commission_pending": money(commissions["commission_pending"]),
            "total_owner_earnings": money(owner_earnings),
            "total_payouts_to_owners": money(payouts["completed"]),
            "pending_payouts_to_owners": money(payouts["pending"]),
            "total_owner_outstanding": self.total_owner_outstanding(),
        }

    def total_owner_outstanding(self) -> Decimal:
        total = ZERO
        for owner in User.objects.filter(user_type="property_owner"):
            balance = OwnerBalanceService(owner).available_balance()
            if balance > 0:
                total += balance
        return money(total)

    def owner_summaries(self) -> list[dict[str, Any]]:
        rows = []
        owners = User.objects.filter(user_type="property_owner").annotate(
            total_bookings=Count(
                "properties__bookings",
                filter=Q(properties__bookings__status__in=EARNING_STATUSES),
                distinct=True,
            ),
            total_revenue=sum_or_zero("properties__bookings__total_amount", properties__bookings__status__in=EARNING_STATUSES),
        )
        for owner in owners:
            received = Payment.objects.filter(booking__property__owner=owner).exclude(
                booking__status="cancelled"
            ).aggregate(total=sum_or_zero("cr_amount"))["total"]
            rows.append(
                {
                    "id": owner.pk,
                    "owner_name": owner.display_name,
                    "email": owner.email,
                    "business_name": getattr(getattr(owner, "owner_profile", None), "business_name", ""),
                    "total_bookings": owner.total_bookings,
                    "total_revenue": money(owner.total_revenue),
                    "total_received": money(received),
                    "outstanding": money(owner.total_revenue - received),
                }
            )
        rows.sort(key=lambda row: row["total_revenue"], reverse=True)
        return rows

    def guest_summaries(self) -> list[dict[str, Any]]:
        rows = []
        active = ~Q(bookings__status="cancelled")
        guests = (
            User.objects.filter(user_type="guest")
            .annotate(
                total_bookings=Count("bookings", filter=active, distinct=True),
                total_spent=sum_or_zero("bookings__total_amount", active),
            )
            .filter(total_bookings__gt=0)
        )
        for guest in guests:
            paid = Payment.objects.filter(booking__guest=guest).exclude(booking__status="cancelled").aggregate(
                total=sum_or_zero("cr_amount")
            )["total"]
            rows.append(
                {
                    "id": guest.pk,
                    "guest_name": guest.display_name,
                    "email": guest.email,
                    "total_bookings": guest.total_bookings,
                    "total_spent": money(guest.total_spent),
                    "total_paid": money(paid),
                    "outstanding": money(guest.total_spent - paid),
                }
            )
        rows.sort(key=lambda row: row["total_spent"], reverse=True)
        return rows


class PayoutAdminService:
    """Review and settle owner payout requests."""

    def balances(self) -> list[dict[str, Any]]:
        rows = []
        for owner in User.objects.filter(user_type="property_owner").order_by("id"):
            service = OwnerBalanceService(owner)
            rows.append(
                {
                    "owner_id": owner.pk,
                    "owner_name": owner.display_name,
                    "email": owner.email,
                    "total_earned": money(service.earned()),
                    "committed_payouts": money(service.committed_payouts()),
                    "current_balance": service.available_balance(),
                    "total_properties": owner.properties.filter(status="active").count(),
                }
            )
        rows.sort(key=lambda row: row["current_balance"], reverse=True)
        return rows

    def update_status(self, payout_id: int, payment_status: str, payment_reference: str = "", notes: str = "") -> OwnerPayout:
        if payment_status not in PAYOUT_STATUSES:
            raise ServiceError("Invalid payment status")
        payout = OwnerPayout.objects.filter(pk=payout_id).first()
        if payout is None:
            raise NotFoundError("Payout not found")
        payout.payment_status = payment_status
        if payment_reference:
            payout.payment_reference = payment_reference
        if notes:
            payout.notes = notes
        if payment_status == "completed":
            payout.payment_date = timezone.now()
        payout.save()
        logger.info("Payout %s marked %s", payout.payout_reference, payment_status)
        return payout
