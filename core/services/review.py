from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from django.db import transaction

from ..exceptions import ConflictError, NotFoundError, ServiceError
from ..models import Booking, Review

logger = logging.getLogger(__name__)

if TYPE_CHECKING:  # pragma: no cover - used for static analysis only
    from ..models.user import User as UserType

MODERATION_STATUSES = ("pending", "approved", "rejected")


@dataclass(frozen=True)
class ReviewEligibility:
    can_review: bool
    reason: str | None = None


class ReviewService:
    """Handle review creation and eligibility around completed stays."""

    def __init__(self, user: "UserType"):
        self.user = user

    def eligibility(self, booking: Booking | None) -> ReviewEligibility:
        if booking is None or booking.guest_id != self.user.pk or booking.status != "checked_out":
            return ReviewEligibility(False, "Booking not found or not eligible for review")
        if Review.objects.filter(booking=booking).exists():
            return ReviewEligibility(False, "Review already exists for this booking")
        return ReviewEligibility(True, None)

    @transaction.atomic
    def create(self, booking_id: int, data: dict[str, Any]) -> Review:
        booking = Booking.objects.filter(pk=booking_id).select_related("property").first()
        eligibility = self.eligibility(booking)
        if not eligibility.can_review:
            if booking is not None and booking.status == "checked_out" and booking.guest_id == self.user.pk:
                raise ConflictError(eligibility.reason)
            raise NotFoundError(eligibility.reason)
        review = Review.objects.create(booking=booking, property=booking.property, guest=self.user, **data)
        logger.info("Guest %s reviewed booking %s", self.user.pk, booking.booking_reference)
        return review

    def my_reviews(self):
        return Review.objects.filter(guest=self.user).select_related("property", "booking")

    def _own_pending(self, review_id: int, action: str) -> Review:
        review = Review.objects.filter(pk=review_id, guest=self.user).first()
        if review is None:
            raise NotFoundError("Review not found or access denied")
        if review.status != "pending":
            raise ServiceError(f"Cannot {action} approved or rejected review")
        return review

    def update(self, review_id: int, data: dict[str, Any]) -> Review:
        review = self._own_pending(review_id, "update")
        for field, value in data.items():
            setattr(review, field, value)
        review.save()
        return review

    def delete(self, review_id: int) -> None:
        self._own_pending(review_id, "delete").delete()


def property_reviews(property_id: int):
    return Review.objects.filter(property_id=property_id, status="approved").select_related("guest")


def moderate_review(review_id: int, status: str) -> Review:
    if status not in MODERATION_STATUSES:
        raise ServiceError("Invalid status")
    review = Review.objects.filter(pk=review_id).first()
    if review is None:
        raise NotFoundError("Review not found")
    review.status = status
    review.save(update_fields=["status", "updated_at"])
    logger.info("Review %s moderated to %s", review.pk, status)
    return review
