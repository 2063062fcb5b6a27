"""Guest review endpoints."""

from django.urls import path

from ..views import reviews

urlpatterns = [
    path("api/reviews", reviews.MyReviewsView.as_view(), name="review_list"),
    path("api/reviews/<int:review_id>", reviews.ReviewDetailView.as_view(), name="review_detail"),
]
