"""Passenger manifests, booking request validation and ticket selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..exceptions import ServiceError
from .passengers import classify_passenger, fallback_code, validate_passenger_age

REQUIRED_PASSENGER_FIELDS = (
    ("first_name", "First Name is required."),
    ("last_name", "Last Name is required."),
    ("gender", "Gender is required."),
    ("dob", "Date of Birth is required."),
    ("nationality", "Nationality is required."),
    ("passport_number", "Passport Number is required."),
    ("passport_country", "Passport Country is required."),
)


class FlightValidationError(ServiceError):
    """Field errors keyed ``contact.<field>`` / ``passengers.<i>.<field>``."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("The given data was invalid.", errors=errors)


def _parse_day(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    try:
        parsed = parse_date(text[:10])
    except ValueError:
        return None
    if parsed is None:
        moment = parse_datetime(text)
        return moment.date() if moment else None
    return parsed


def blank_passenger(label: str, code: str | None = None) -> dict[str, str]:
    return {
        "type": label,
        "code": code or fallback_code(label),
        "first_name": "",
        "last_name": "",
        "nationality": "",
        "gender": "",
        "dob": "",
        "passport_number": "",
        "passport_country": "",
        "passport_expiry": "",
        "title": "Mr",
    }


def build_manifest(fare_summary: dict[str, Any] | None) -> list[dict[str, str]]:
    """One blank passenger per seat counted in the fare summary."""

    if not fare_summary:
        return [{"type": "Adult", "code": "ADT", "title": "Mr"}]
    passengers = []
    for key, item in fare_summary.items():
        if key == "totalPassenger" or not isinstance(item, dict):
            continue
        for _ in range(int(item.get("passengerNumberByType") or 0)):
            passengers.append(blank_passenger(item.get("passengerType") or "", item.get("code")))
    return passengers


def departure_date(flight: dict[str, Any] | None) -> date | None:
    """Departure date of the first leg of a priced itinerary."""

    legs = (flight or {}).get("legs")
    if not legs:
        return None
    first = next(iter(legs.values())) if isinstance(legs, dict) else legs[0]
    return _parse_day(((first or {}).get("departure") or {}).get("date"))


def validate_booking_request(
    flight: dict[str, Any] | None,
    passengers: list[dict[str, Any]],
    contact: dict[str, Any] | None,
    today: date | None = None,
) -> dict[str, list[str]]:
    contact = contact or {}
    today = today or timezone.localdate()
    departure = departure_date(flight)
    errors: dict[str, list[str]] = {}

    if not contact.get("mobile"):
        errors["contact.mobile"] = ["Mobile is required"]
    if not contact.get("email"):
        errors["contact.email"] = ["Email is required"]

    for index, passenger in enumerate(passengers):
        prefix = f"passengers.{index}"
        for field, message in REQUIRED_PASSENGER_FIELDS:
            if not passenger.get(field):
                errors[f"{prefix}.{field}"] = [message]

        expiry = passenger.get("passport_expiry")
        if not expiry:
            errors[f"{prefix}.passport_expiry"] = ["Passport Expiry is required."]
        elif departure is not None:
            expiry_day = _parse_day(expiry)
            if expiry_day is None or expiry_day <= departure:
                errors[f"{prefix}.passport_expiry"] = ["Passport expiry must be after flight departure date"]

        birth = _parse_day(passenger.get("dob"))
        if passenger.get("dob") and birth is None:
            errors[f"{prefix}.dob"] = ["Date of Birth is invalid."]
        elif birth is not None and classify_passenger(passenger.get("type")):
            check = validate_passenger_age(passenger.get("type"), birth, departure or today, today)
            if check.departure_error:
                errors[f"{prefix}.dob"] = [check.departure_error]
    return errors


def build_booking_payload(
    flight: dict[str, Any],
    passengers: list[dict[str, Any]],
    contact: dict[str, Any],
    lead_passenger: dict[str, Any] | None = None,
) -> dict[str, Any]:
    lead = lead_passenger or {}
    return {
        "flightData": flight,
        "passengers": passengers,
        "contact": contact,
        "lead_passenger_country_code": lead.get("country_code") or contact.get("country_code") or "880",
        "lead_passenger_mobile": lead.get("mobile") or "",
        "lead_passenger_email": lead.get("email") or "",
    }


@dataclass(frozen=True)
class TicketSelection:
    passengers: list[dict[str, Any]]
    total_cost: Decimal


def select_ticket_passengers(selected: list[dict[str, Any]]) -> TicketSelection:
    """Normalise the travellers picked for ticketing and total their fares."""

    if not selected:
        raise ServiceError("Please select at least one passenger.")
    passengers = []
    total = Decimal("0")
    for item in selected:
        name_number = item.get("NameNumber") or (
            f"{item['nameAssociationId']}.1" if item.get("nameAssociationId") is not None else ""
        )
        passenger_type = item.get("PassengerType") or item.get("passengerCode") or ""
        if not name_number or not passenger_type:
            raise ServiceError("Each selected passenger needs a name number and passenger type")
        try:
            fare = Decimal(str(item.get("fare") or 0))
        except InvalidOperation:
            fare = Decimal("0")
        total += fare
        passengers.append({"NameNumber": name_number, "PassengerType": passenger_type, "fare": float(fare)})
    return TicketSelection(passengers, total)
