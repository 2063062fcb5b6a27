"""Passenger age arithmetic and airline passenger type codes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time

DAYS_PER_YEAR = 365.25
DAYS_PER_MONTH = 30.4375
SECONDS_PER_DAY = 86400

ADULT_MIN_YEARS = 12
CHILD_MIN_YEARS = 2

# Matched as label substrings, first hit wins.
PASSENGER_KINDS = ("adult", "kid", "child", "infant")

AGE_RULES = {
    "adult": ("Adult must be 12 years or above", lambda years: years >= 12),
    "kid": ("Kid must be 2 to below 5 years", lambda years: 2 < years < 5),
    "child": ("Child must be 5 to below 12 years", lambda years: 5 < years < 12),
    "infant": ("Infant must be below 24 months", lambda years: years < 2),
}


@dataclass(frozen=True)
class ExactAge:
    years: int
    months: int
    days: int
    hours: int
    total_days: float
    total_years: float

    def __str__(self) -> str:
        return f"{self.years}y {self.months}m {self.days}d"


@dataclass(frozen=True)
class AgeCheck:
    current_age: str
    departure_age: str
    current_error: str = ""
    departure_error: str = ""

    @property
    def is_valid(self) -> bool:
        return not (self.current_error or self.departure_error)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def calculate_exact_age(birth: date | datetime, reference: date | datetime) -> ExactAge:
    """Calendar age using 365.25-day years and 30.4375-day months."""

    elapsed = (_as_datetime(reference) - _as_datetime(birth)).total_seconds()
    total_days = elapsed / SECONDS_PER_DAY
    years = math.floor(total_days / DAYS_PER_YEAR)
    months = math.floor((total_days - years * DAYS_PER_YEAR) / DAYS_PER_MONTH)
    days = math.floor(total_days - years * DAYS_PER_YEAR - months * DAYS_PER_MONTH)
    hours = math.floor(elapsed / 3600 - (years * DAYS_PER_YEAR + months * DAYS_PER_MONTH + days) * 24)
    return ExactAge(
        years=years,
        months=months,
        days=days,
        hours=hours,
        total_days=total_days,
        total_years=total_days / DAYS_PER_YEAR,
    )


def classify_passenger(label: str | None) -> str | None:
    lowered = (label or "").lower()
    for kind in PASSENGER_KINDS:
        if kind in lowered:
            return kind
    return None


def passenger_type_code(birth: date | datetime, reference: date | datetime) -> str:
    """``ADT``, ``Cnn`` (completed years) or ``Inn`` (completed months)."""

    age = calculate_exact_age(birth, reference)
    if age.total_years >= ADULT_MIN_YEARS:
        return "ADT"
    if age.total_years >= CHILD_MIN_YEARS:
        return f"C{age.years:02d}"
    return f"I{math.floor(age.total_days / DAYS_PER_MONTH):02d}"


def fallback_code(label: str | None) -> str:
    if label == "Adult":
        return "ADT"
    if label == "Children":
        return "C07"
    return "INF"


def age_error(label: str | None, age: ExactAge, suffix: str) -> str:
    kind = classify_passenger(label)
    if kind is None:
        return ""
    message, accepts = AGE_RULES[kind]
    return "" if accepts(age.total_years) else f"{message} {suffix}"


def validate_passenger_age(
    label: str | None,
    birth: date | datetime,
    departure: date | datetime,
    now: date | datetime,
) -> AgeCheck:
    current = calculate_exact_age(birth, now)
    at_departure = calculate_exact_age(birth, departure)
    return AgeCheck(
        current_age=str(current),
        departure_age=str(at_departure),
        current_error=age_error(label, current, "(current age)"),
        departure_error=age_error(label, at_departure, "at departure"),
    )
