"""Flight search and booking integration."""

from .booking import (
    FlightValidationError,
    build_booking_payload,
    build_manifest,
    departure_date,
    select_ticket_passengers,
    validate_booking_request,
)
from .client import FlightApiClient, FlightApiError
from .passengers import (
    calculate_exact_age,
    classify_passenger,
    fallback_code,
    passenger_type_code,
    validate_passenger_age,
)

__all__ = [
    "FlightApiClient",
    "FlightApiError",
    "FlightValidationError",
    "build_booking_payload",
    "build_manifest",
    "calculate_exact_age",
    "classify_passenger",
    "departure_date",
    "fallback_code",
    "passenger_type_code",
    "select_ticket_passengers",
    "validate_booking_request",
    "validate_passenger_age",
]
