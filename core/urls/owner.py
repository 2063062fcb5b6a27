"""Owner-focused URL patterns."""

from django.urls import path

from ..views import owner

urlpatterns = [
    path("api/property-owner/dashboard", owner.OwnerDashboardView.as_view(), name="owner_dashboard"),
    path("api/property-owner/earnings", owner.OwnerEarningsView.as_view(), name="owner_earnings"),
    path("api/property-owner/payouts", owner.OwnerPayoutListView.as_view(), name="owner_payouts"),
    path("api/property-owner/properties", owner.OwnerPropertyListView.as_view(), name="owner_property_list"),
    path(
        "api/property-owner/properties/<int:property_id>",
        owner.OwnerPropertyDetailView.as_view(),
        name="owner_property_detail",
    ),
    path(
        "api/property-owner/properties/<int:property_id>/images",
        owner.OwnerPropertyImagesView.as_view(),
        name="owner_property_images",
    ),
    path(
        "api/property-owner/properties/<int:property_id>/images/<int:image_id>",
        owner.OwnerPropertyImageDetailView.as_view(),
        name="owner_property_image_detail",
    ),
    path("api/property-owner/bookings", owner.OwnerBookingListView.as_view(), name="owner_booking_list"),
    path(
        "api/property-owner/bookings/<int:booking_id>",
        owner.OwnerBookingDetailView.as_view(),
        name="owner_booking_detail",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/confirm",
        owner.OwnerBookingConfirmView.as_view(),
        name="owner_booking_confirm",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/check-in",
        owner.OwnerBookingCheckInView.as_view(),
        name="owner_booking_check_in",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/check-out",
        owner.OwnerBookingCheckOutView.as_view(),
        name="owner_booking_check_out",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/cancel",
        owner.OwnerBookingCancelView.as_view(),
        name="owner_booking_cancel",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/payment",
        owner.OwnerBookingPaymentView.as_view(),
        name="owner_booking_payment",
    ),
    path(
        "api/property-owner/bookings/<int:booking_id>/payment-history",
        owner.OwnerPaymentHistoryView.as_view(),
        name="owner_payment_history",
    ),
]
