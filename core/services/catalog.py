from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db.models import Avg, Count, Prefetch, Q

from ..exceptions import ConflictError, NotFoundError, ServiceError
from ..models import Amenity, Booking, DisplayCategory, Favorite, Property, PropertyReport, PropertyType, Review, SystemSetting
from .booking import dates_available
from .params import query_date, record_id

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "price_asc": ("base_price", "-id"),
    "price_desc": ("-base_price", "-id"),
    "rating": ("-average_rating", "-review_count", "-id"),
    "newest": ("-created_at", "-id"),
}


def _decimal_or_none(raw: str | None) -> Decimal | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return Decimal(raw)
    except (InvalidOperation, TypeError):
        return None


def _int_or_none(raw: str | None) -> int | None:
    raw = (raw or "").strip()
    return int(raw) if raw.isdigit() else None


@dataclass(frozen=True)
class PropertyFilters:
    """Value object holding filter parameters for catalog queries."""

    location: str = ""
    property_type: int | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    guests: int | None = None
    amenities: tuple[int, ...] = field(default_factory=tuple)
    check_in: date | None = None
    check_out: date | None = None
    featured: bool = False
    sort: str = "newest"


class PropertyCatalogService:
    """Encapsulates querying logic for the public property catalog."""

    def __init__(self, base_queryset=None) -> None:
        self.base_queryset = base_queryset if base_queryset is not None else Property.objects.filter(status="active")

    def build_filters(self, data: dict[str, str]) -> PropertyFilters:
        """Return validated filter parameters from raw request data."""
        amenity_ids = tuple(
            int(part) for part in (data.get("amenities") or "").split(",") if part.strip().isdigit()
        )
        check_in = query_date(data.get("check_in"), "check-in date")
        check_out = query_date(data.get("check_out"), "check-out date")
        if check_in and check_out and check_out <= check_in:
            raise ServiceError("Check-out date must be after check-in date")
        sort = (data.get("sort") or "newest").strip()
        return PropertyFilters(
            location=(data.get("location") or "").strip(),
            property_type=_int_or_none(data.get("property_type")),
            min_price=_decimal_or_none(data.get("min_price")),
            max_price=_decimal_or_none(data.get("max_price")),
            guests=_int_or_none(data.get("guests")),
            amenities=amenity_ids,
            check_in=check_in,
            check_out=check_out,
            featured=(data.get("featured") or "").lower() in {"1", "true", "yes"},
            sort=sort if sort in SORT_ORDERS else "newest",
        )

    def annotated(self, queryset=None):
        queryset = self.base_queryset if queryset is None else queryset
        approved = Q(reviews__status="approved")
        return (
            queryset.select_related("property_type", "owner")
            .prefetch_related("images", "amenities")
            .annotate(
                average_rating=Avg("reviews__rating", filter=approved),
                review_count=Count("reviews", filter=approved, distinct=True),
            )
        )

    def search(self, filters: PropertyFilters):
        """Apply filters and return the catalog queryset."""
        queryset = self.base_queryset

        if filters.location:
            queryset = queryset.filter(
                Q(city__icontains=filters.location)
                | Q(address__icontains=filters.location)
                | Q(title__icontains=filters.location)
            )
        if filters.property_type:
            queryset = queryset.filter(property_type_id=filters.property_type)
        if filters.min_price is not None:
            queryset = queryset.filter(base_price__gte=filters.min_price)
        if filters.max_price is not None:
            queryset = queryset.filter(base_price__lte=filters.max_price)
        if filters.guests:
            queryset = queryset.filter(max_guests__gte=filters.guests)
        if filters.featured:
            queryset = queryset.filter(is_featured=True)
        for amenity_id in filters.amenities:
            queryset = queryset.filter(amenities__id=amenity_id)
        if filters.check_in and filters.check_out:
            busy = (
                Booking.objects.blocking()
                .overlapping(filters.check_in, filters.check_out)
                .values("property_id")
            )
            queryset = queryset.exclude(pk__in=busy)

        return self.annotated(queryset.distinct()).order_by(*SORT_ORDERS[filters.sort])

    def detail(self, property_id: int) -> Property:
        reviews = Review.objects.filter(status="approved").select_related("guest").order_by("-created_at")
        listing = (
            self.annotated()
            .prefetch_related(Prefetch("reviews", queryset=reviews, to_attr="approved_reviews"))
            .filter(pk=property_id)
            .first()
        )
        if listing is None:
            raise NotFoundError("Property not found")
        return listing

    def recommended(self, limit: int = 6) -> list[Property]:
        queryset = self.annotated().order_by("-is_featured", "-average_rating", "-created_at")
        return list(queryset[:limit])

    def availability(self, property_id: int, check_in: date | None, check_out: date | None) -> dict[str, Any]:
        if not check_in or not check_out:
            raise ServiceError("Check-in and check-out dates are required")
        if check_out <= check_in:
            raise ServiceError("Check-out date must be after check-in date")
        listing = Property.objects.filter(pk=property_id).first()
        if listing is None:
            raise NotFoundError("Property not found")
        return {
            "isAvailable": dates_available(listing, check_in, check_out),
            "check_in_date": check_in,
            "check_out_date": check_out,
        }

    @staticmethod
    def amenities():
        return Amenity.objects.filter(is_active=True).order_by("category", "name")

    @staticmethod
    def property_types():
        return PropertyType.objects.filter(is_active=True)

    @staticmethod
    def display_categories():
        return DisplayCategory.objects.filter(is_active=True).annotate(
            property_count=Count("properties", filter=Q(properties__status="active"), distinct=True)
        )

    def display_category_properties(self, category_id: int) -> tuple[DisplayCategory, Any]:
        category = DisplayCategory.objects.filter(pk=category_id, is_active=True).first()
        if category is None:
            raise NotFoundError("Display category not found")
        return category, self.annotated(category.properties.filter(status="active")).order_by("-created_at")

    @staticmethod
    def public_settings() -> dict[str, Any]:
        return {row.setting_key: row.typed_value for row in SystemSetting.objects.filter(is_public=True)}


class FavoriteService:
    """A guest's saved listings."""

    def __init__(self, user):
        self.user = user

    def favorites(self):
        return (
            Favorite.objects.filter(user=self.user)
            .select_related("property")
            .prefetch_related("property__images")
            .order_by("-created_at")
        )

    def add(self, property_id: int) -> Favorite:
        property_id = record_id(property_id, "property ID")
        if property_id is None:
            raise ServiceError("Property ID is required")
        listing = Property.objects.filter(pk=property_id, status="active").first()
        if listing is None:
            raise NotFoundError("Property not found")
        if Favorite.objects.filter(user=self.user, property=listing).exists():
            raise ConflictError("Property already in favorites")
        return Favorite.objects.create(user=self.user, property=listing)

    def remove(self, property_id: int) -> None:
        deleted, _ = Favorite.objects.filter(user=self.user, property_id=property_id).delete()
        if not deleted:
            raise NotFoundError("Property not found in favorites")


class PropertyReportService:
    def __init__(self, user=None):
        self.user = user

    def submit(self, property_id, reason: str, detail: str = "") -> PropertyReport:
        property_id = record_id(property_id, "property ID")
        if not property_id or not (reason or "").strip():
            raise ServiceError("Property ID and reason are required")
        listing = Property.objects.filter(pk=property_id).first()
        if listing is None:
            raise NotFoundError("Property not found")
        reporter = self.user if getattr(self.user, "is_authenticated", False) else None
        report = PropertyReport.objects.create(
            property=listing,
            user=reporter,
            reason=reason.strip(),
            detail=(detail or "").strip(),
        )
        logger.info("Property %s reported: %s", listing.pk, report.reason)
        return report
