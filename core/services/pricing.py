"""Pure money arithmetic for stays: quotes, coupons, commission split and refunds."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

SERVICE_FEE_RATE = Decimal("0.10")
TAX_RATE = Decimal("0.15")
REFUND_SERVICE_CHARGE_RATE = Decimal("0.05")
REFUND_MINIMUM_SERVICE_CHARGE = Decimal("50")
CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class StayQuote:
    nights: int
    stay_amount: Decimal
    cleaning_fee: Decimal
    security_deposit: Decimal
    extra_guest_fee: Decimal
    service_fee: Decimal
    tax_amount: Decimal
    subtotal: Decimal
    total: Decimal


@dataclass(frozen=True)
class CommissionSplit:
    rate: Decimal
    commission: Decimal
    owner_earnings: Decimal


@dataclass(frozen=True)
class RefundBreakdown:
    original_amount: Decimal
    refund_amount: Decimal
    service_charge: Decimal
    cancellation_fee: Decimal
    net_refund: Decimal


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def quote_stay(
    *,
    base_price,
    nights: int,
    guests: int = 1,
    cleaning_fee=0,
    security_deposit=0,
    extra_guest_fee=0,
) -> StayQuote:
    """Price a stay the way the booking endpoint charges it.

    ``extra_guest_fee`` is the per-guest rate of the listing; every guest after
    the first pays it once. Service fee and tax are charged on the nightly
    amount only.
    """

    stay_amount = Decimal(str(base_price or 0)) * nights
    cleaning = Decimal(str(cleaning_fee or 0))
    deposit = Decimal(str(security_deposit or 0))
    extra = Decimal(str(extra_guest_fee or 0)) * (guests - 1) if guests > 1 else Decimal("0")
    service_fee = stay_amount * SERVICE_FEE_RATE
    tax_amount = stay_amount * TAX_RATE
    subtotal = stay_amount + cleaning + deposit + extra
    total = subtotal + service_fee + tax_amount
    return StayQuote(
        nights=nights,
        stay_amount=money(stay_amount),
        cleaning_fee=money(cleaning),
        security_deposit=money(deposit),
        extra_guest_fee=money(extra),
        service_fee=money(service_fee),
        tax_amount=money(tax_amount),
        subtotal=money(subtotal),
        total=money(total),
    )


def coupon_discount(coupon, total: Decimal) -> Decimal:
    """Discount granted by ``coupon`` on ``total``; zero when the minimum is not met."""

    if coupon is None or total < coupon.minimum_amount:
        return Decimal("0.00")
    if coupon.discount_type == "percentage":
        discount = total * coupon.discount_value / 100
        if coupon.maximum_discount:
            discount = min(discount, coupon.maximum_discount)
    else:
        discount = coupon.discount_value
    return money(discount)


def split_commission(total: Decimal, rate: Decimal) -> CommissionSplit:
    commission = money(Decimal(total) * Decimal(rate) / 100)
    return CommissionSplit(rate=money(rate), commission=commission, owner_earnings=money(Decimal(total) - commission))


def calculate_refund(
    amount,
    *,
    free_cancellation_hours: int,
    cancellation_fee_percentage,
    hours_before_check_in: float,
) -> RefundBreakdown:
    original = Decimal(str(amount))
    fee_percentage = Decimal(str(cancellation_fee_percentage or 0))
    refund_percentage = Decimal("100")
    cancellation_fee = Decimal("0")
    if hours_before_check_in < free_cancellation_hours:
        refund_percentage -= fee_percentage
        cancellation_fee = original * fee_percentage / 100
    service_charge = max(original * REFUND_SERVICE_CHARGE_RATE, REFUND_MINIMUM_SERVICE_CHARGE)
    refund_amount = original * refund_percentage / 100
    net_refund = max(Decimal("0"), refund_amount - service_charge)
    return RefundBreakdown(
        original_amount=money(original),
        refund_amount=money(refund_amount),
        service_charge=money(service_charge),
        cancellation_fee=money(cancellation_fee),
        net_refund=money(net_refund),
    )


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_booking_reference() -> str:
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=3))
    return f"KH{str(_epoch_millis())[-6:]}{suffix}"


def ledger_reference(prefix: str, booking_id: int) -> str:
    """``DR-``/``CR-`` style payment reference tied to a booking."""

    return f"{prefix}-{_epoch_millis()}-{booking_id}"


def payout_reference(owner_id: int) -> str:
    return f"OWNER-PAYOUT-REQ-{_epoch_millis()}-{owner_id}"
