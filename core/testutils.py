"""Builders shared by the test modules."""

from __future__ import annotations

import itertools
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APIClient

from .models import AdminEarning, Booking, Property, SystemSetting, User
from .services.pricing import quote_stay, split_commission

PASSWORD = "Str0ng-Passw0rd!"

_sequence = itertools.count(1)


def make_user(user_type: str = "guest", **extra) -> User:
    number = next(_sequence)
    username = extra.pop("username", f"{user_type}{number}")
    defaults = {
        "email": f"{username}@example.com",
        "first_name": user_type.replace("_", " ").title(),
        "last_name": f"User{number}",
        "phone": "01712345678",
    }
    defaults.update(extra)
    return User.objects.create_user(username=username, password=PASSWORD, user_type=user_type, **defaults)


def make_property(owner: User, **extra) -> Property:
    defaults = {
        "title": "Lakeside Cottage",
        "address": "12 Lake Road",
        "city": "Sylhet",
        "base_price": Decimal("2000.00"),
        "max_guests": 4,
        "status": "active",
    }
    defaults.update(extra)
    return Property.objects.create(owner=owner, **defaults)


def make_booking(guest: User, listing: Property, *, check_in=None, nights: int = 2, **extra) -> Booking:
    """Insert a booking priced like the booking service would, without its side effects."""

    check_in = check_in or timezone.localdate() + timedelta(days=10)
    quote = quote_stay(
        base_price=listing.base_price,
        nights=nights,
        cleaning_fee=listing.cleaning_fee,
        security_deposit=listing.security_deposit,
    )
    split = split_commission(quote.total, Decimal("10"))
    fields = {
        "booking_reference": f"KHTEST{next(_sequence):04d}",
        "check_in_date": check_in,
        "check_out_date": check_in + timedelta(days=nights),
        "number_of_nights": nights,
        "base_price": quote.stay_amount,
        "service_fee": quote.service_fee,
        "tax_amount": quote.tax_amount,
        "subtotal": quote.subtotal,
        "total_amount": quote.total,
        "admin_commission_rate": split.rate,
        "admin_commission": split.commission,
        "owner_earnings": split.owner_earnings,
        "guest_name": guest.display_name,
        "guest_email": guest.email,
        "guest_phone": guest.phone,
    }
    fields.update(extra)
    booking = Booking.objects.create(guest=guest, property=listing, **fields)
    AdminEarning.objects.create(
        booking=booking,
        owner=listing.owner,
        booking_amount=booking.total_amount,
        commission_rate=split.rate,
        commission_amount=split.commission,
        owner_earnings=split.owner_earnings,
    )
    return booking


def set_setting(key: str, value, setting_type: str = "string", is_public: bool = False) -> SystemSetting:
    setting, _ = SystemSetting.objects.update_or_create(
        setting_key=key,
        defaults={"setting_value": str(value), "setting_type": setting_type, "is_public": is_public},
    )
    return setting


def api_client(user: User | None = None) -> APIClient:
    client = APIClient()
    if user is not None:
        client.force_authenticate(user=user)
    return client
