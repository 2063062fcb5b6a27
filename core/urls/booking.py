"""Guest booking endpoints."""

from django.urls import path

from ..views import booking

urlpatterns = [
    path("api/guest/dashboard", booking.GuestDashboardView.as_view(), name="guest_dashboard"),
    path("api/guest/bookings", booking.GuestBookingListView.as_view(), name="guest_booking_list"),
    path("api/guest/bookings/<int:booking_id>", booking.GuestBookingDetailView.as_view(), name="guest_booking_detail"),
    path(
        "api/guest/bookings/<int:booking_id>/cancel",
        booking.GuestBookingCancelView.as_view(),
        name="guest_booking_cancel",
    ),
    path(
        "api/guest/bookings/<int:booking_id>/payment",
        booking.GuestBookingPaymentView.as_view(),
        name="guest_booking_payment",
    ),
]
