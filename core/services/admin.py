"""Back-office operations: users, listings, catalog reference data and settings."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q
from django.utils.text import slugify
from rest_framework.authtoken.models import Token

from ..exceptions import ConflictError, NotFoundError, ServiceError
from ..models import AdminEarning, Amenity, Booking, DisplayCategory, Property, PropertyReport, PropertyType, SystemSetting
from .accounting import sum_or_zero
from .params import record_ids
from .pricing import money

logger = logging.getLogger(__name__)

User = get_user_model()

PROPERTY_STATUSES = ("pending", "active", "inactive", "rejected")
REPORT_STATUSES = ("pending", "investigating", "resolved", "dismissed")


@dataclass(frozen=True)
class AdminDashboardStats:
    users: dict[str, int]
    properties: dict[str, int]
    bookings: dict[str, int]
    commission: dict[str, Any]


def _counts_by(queryset, field: str, values) -> dict[str, int]:
    aggregates = {value: Count("id", filter=Q(**{field: value})) for value in values}
    return {"total": queryset.count(), **queryset.aggregate(**aggregates)}


class AdminDashboardService:
    def stats(self) -> AdminDashboardStats:
        commission = AdminEarning.objects.filter(status="active").aggregate(
            total=sum_or_zero("commission_amount"),
            paid=sum_or_zero("commission_amount", payment_status="paid"),
            pending=sum_or_zero("commission_amount", payment_status="pending"),
        )
        return AdminDashboardStats(
            users=_counts_by(User.objects.all(), "user_type", ("guest", "property_owner", "admin")),
            properties=_counts_by(Property.objects.all(), "status", PROPERTY_STATUSES),
            bookings=_counts_by(
                Booking.objects.all(), "status", ("pending", "confirmed", "checked_in", "checked_out", "cancelled")
            ),
            commission={key: money(value) for key, value in commission.items()},
        )

    def recent_bookings(self, limit: int = 10) -> list[Booking]:
        return list(Booking.objects.select_related("property", "guest")[:limit])


class AdminUserService:
    def users(self, user_type: str = "", search: str = ""):
        queryset = User.objects.order_by("-date_joined")
        if user_type:
            queryset = queryset.filter(user_type=user_type)
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )
        return queryset

    def get(self, user_id: int):
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update(self, user_id: int, data: dict[str, Any]):
        user = self.get(user_id)
        email = data.get("email")
        if email and User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise ConflictError("Email is already in use by another user")
        for field, value in data.items():
            setattr(user, field, value)
        user.save()
        return user

    def set_active(self, user_id: int, is_active: bool):
        user = self.get(user_id)
        user.is_active = is_active
        user.save(update_fields=["is_active"])
        if not is_active:
            Token.objects.filter(user=user).delete()
        logger.info("User %s %s", user.pk, "unblocked" if is_active else "blocked")
        return user


class AdminPropertyService:
    def properties(self, status: str = "", search: str = ""):
        queryset = Property.objects.select_related("owner", "property_type").prefetch_related("images")
        if status:
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(city__icontains=search) | Q(owner__email__icontains=search)
            )
        return queryset.annotate(booking_count=Count("bookings", distinct=True))

    def get(self, property_id: int) -> Property:
        listing = Property.objects.filter(pk=property_id).first()
        if listing is None:
            raise NotFoundError("Property not found")
        return listing

    def set_status(self, property_id: int, status: str) -> Property:
        if status not in PROPERTY_STATUSES:
            raise ServiceError("Invalid status")
        listing = self.get(property_id)
        listing.status = status
        listing.save(update_fields=["status", "updated_at"])
        logger.info("Property %s set to %s", listing.pk, status)
        return listing

    def set_featured(self, property_id: int, is_featured) -> Property:
        if not isinstance(is_featured, bool):
            raise ServiceError("is_featured must be a boolean value")
        listing = self.get(property_id)
        listing.is_featured = is_featured
        listing.save(update_fields=["is_featured", "updated_at"])
        return listing

    @transaction.atomic
    def assign_categories(self, property_id: int, category_ids) -> Property:
        if not isinstance(category_ids, list):
            raise ServiceError("category_ids must be an array")
        category_ids = record_ids(category_ids, "category ID")
        listing = self.get(property_id)
        categories = list(DisplayCategory.objects.filter(pk__in=category_ids))
        if len(categories) != len(set(category_ids)):
            raise ServiceError("One or more category IDs are invalid")
        listing.display_categories.set(categories)
        return listing


class ReferenceDataService:
    """CRUD for amenities and property types, which listings reference."""

    labels = {Amenity: "Amenity", PropertyType: "Property type"}

    def __init__(self, model):
        self.model = model
        self.label = self.labels[model]

    def get(self, pk: int):
        instance = self.model.objects.filter(pk=pk).first()
        if instance is None:
            raise NotFoundError(f"{self.label} not found")
        return instance

    def _ensure_unique(self, name: str, exclude_id: int | None = None) -> None:
        queryset = self.model.objects.filter(name__iexact=name)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise ConflictError(f"{self.label} with this name already exists")

    def create(self, data: dict[str, Any]):
        self._ensure_unique(data["name"])
        return self.model.objects.create(**data)

    def update(self, pk: int, data: dict[str, Any]):
        instance = self.get(pk)
        if "name" in data:
            self._ensure_unique(data["name"], exclude_id=instance.pk)
        for field, value in data.items():
            setattr(instance, field, value)
        instance.save()
        return instance

    def toggle(self, pk: int, is_active):
        if not isinstance(is_active, bool):
            raise ServiceError("is_active must be a boolean value")
        instance = self.get(pk)
        instance.is_active = is_active
        instance.save(update_fields=["is_active"])
        return instance

    def delete(self, pk: int) -> None:
        instance = self.get(pk)
        if instance.properties.exists():
            raise ConflictError(f"Cannot delete {self.label.lower()}. It is being used by properties.")
        instance.delete()


class DisplayCategoryService:
    def categories(self):
        return DisplayCategory.objects.annotate(property_count=Count("properties", distinct=True))

    def get(self, pk: int) -> DisplayCategory:
        category = DisplayCategory.objects.filter(pk=pk).first()
        if category is None:
            raise NotFoundError("Display category not found")
        return category

    def _ensure_unique(self, name: str, exclude_id: int | None = None) -> None:
        queryset = DisplayCategory.objects.filter(name__iexact=name)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise ConflictError("Display category with this name already exists")

    @staticmethod
    def _unique_slug(name: str, exclude_id: int | None = None) -> str:
        base = slugify(name) or "category"
        slug, suffix = base, 2
        while DisplayCategory.objects.filter(slug=slug).exclude(pk=exclude_id).exists():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def create(self, data: dict[str, Any]) -> DisplayCategory:
        self._ensure_unique(data["name"])
        return DisplayCategory.objects.create(slug=self._unique_slug(data["name"]), **data)

    def update(self, pk: int, data: dict[str, Any]) -> DisplayCategory:
        category = self.get(pk)
        if "name" in data and data["name"] != category.name:
            self._ensure_unique(data["name"], exclude_id=category.pk)
            category.slug = self._unique_slug(data["name"], exclude_id=category.pk)
        for field, value in data.items():
            setattr(category, field, value)
        category.save()
        return category

    def delete(self, pk: int) -> None:
        category = self.get(pk)
        if category.properties.exists():
            raise ConflictError("Cannot delete display category. It is being used by properties.")
        category.delete()

    @transaction.atomic
    def assign_properties(self, pk: int, property_ids) -> DisplayCategory:
        if not isinstance(property_ids, list):
            raise ServiceError("property_ids must be an array")
        property_ids = record_ids(property_ids, "property ID")
        category = self.get(pk)
        listings = list(Property.objects.filter(pk__in=property_ids))
        if len(listings) != len(set(property_ids)):
            raise ServiceError("One or more property IDs are invalid")
        category.properties.set(listings)
        logger.info("Display category %s now holds %s properties", category.pk, len(listings))
        return category


class SystemSettingsService:
    def settings(self) -> dict[str, dict[str, Any]]:
        return {
            row.setting_key: {
                "value": row.typed_value,
                "type": row.setting_type,
                "description": row.description,
                "is_public": row.is_public,
            }
            for row in SystemSetting.objects.all()
        }

    @transaction.atomic
    def update(self, settings) -> None:
        if not isinstance(settings, dict) or not settings:
            raise ServiceError("Settings object is required")
        for key, entry in settings.items():
            entry = entry if isinstance(entry, dict) else {"value": entry}
            value = entry.get("value")
            if isinstance(value, (dict, list)):
                value = json.dumps(value)
            elif isinstance(value, bool):
                value = str(value).lower()
            setting, created = SystemSetting.objects.get_or_create(
                setting_key=key,
                defaults={
                    "setting_type": entry.get("type") or "string",
                    "description": entry.get("description") or "",
                    "is_public": bool(entry.get("is_public")),
                },
            )
            setting.setting_value = "" if value is None else str(value)
            setting.save(update_fields=["setting_value", "updated_at"])
        logger.info("System settings updated: %s", ", ".join(sorted(settings)))


def update_report_status(report_id: int, status: str) -> PropertyReport:
    if status not in REPORT_STATUSES:
        raise ServiceError("Invalid status")
    report = PropertyReport.objects.filter(pk=report_id).first()
    if report is None:
        raise NotFoundError("Report not found")
    report.status = status
    report.save(update_fields=["status", "updated_at"])
    return report
