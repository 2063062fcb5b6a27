from rest_framework import status
from rest_framework.permissions import AllowAny

from ..api.permissions import IsGuest
from ..api.responses import success_response
from ..api.serializers import ReviewCreateSerializer, ReviewSerializer, ReviewWriteSerializer
from ..services.review import ReviewService, property_reviews
from .base import ServiceAPIView


class ReviewView(ServiceAPIView):
    permission_classes = [IsGuest]
    service_class = ReviewService


class MyReviewsView(ReviewView):
    def get(self, request):
        return self.paginated_response(
            "Reviews retrieved successfully", self.get_service().my_reviews(), ReviewSerializer, "reviews"
        )

    def post(self, request):
        data = dict(self.validated(ReviewCreateSerializer))
        review = self.get_service().create(data.pop("booking_id"), data)
        return success_response(
            "Review submitted successfully and is pending approval",
            {"review": self.serialize(ReviewSerializer, review)},
            status.HTTP_201_CREATED,
        )


class ReviewDetailView(ReviewView):
    def put(self, request, review_id):
        data = self.validated(ReviewWriteSerializer, partial=True)
        review = self.get_service().update(review_id, dict(data))
        return success_response("Review updated successfully", {"review": self.serialize(ReviewSerializer, review)})

    def delete(self, request, review_id):
        self.get_service().delete(review_id)
        return success_response("Review deleted successfully")


class PropertyReviewsView(ServiceAPIView):
    permission_classes = [AllowAny]

    def get(self, request, property_id):
        return self.paginated_response(
            "Reviews retrieved successfully", property_reviews(property_id), ReviewSerializer, "reviews"
        )
