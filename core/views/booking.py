from rest_framework import status

from ..api.permissions import IsGuest
from ..api.responses import success_response
from ..api.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    GuestPaymentSerializer,
    LedgerEntrySerializer,
    LedgerSummarySerializer,
)
from ..services.booking import BookingRequest, GuestBookingService
from .base import ServiceAPIView


class GuestBookingView(ServiceAPIView):
    permission_classes = [IsGuest]
    service_class = GuestBookingService


class GuestBookingListView(GuestBookingView):
    def get(self, request):
        bookings = self.get_service().bookings(request.query_params.get("status", ""))
        return self.paginated_response("Bookings retrieved successfully", bookings, BookingSerializer, "bookings")

    def post(self, request):
        data = self.validated(BookingCreateSerializer)
        outcome = self.get_service().create(BookingRequest(**data))
        return success_response(
            "Booking request sent to the property owner",
            {"booking": self.serialize(BookingSerializer, outcome.booking), "pricing": outcome.pricing()},
            status.HTTP_201_CREATED,
        )


class GuestBookingDetailView(GuestBookingView):
    def get(self, request, booking_id):
        detail = self.get_service().detail(booking_id)
        return success_response(
            "Booking details retrieved successfully",
            {
                "booking": self.serialize(BookingSerializer, detail["booking"]),
                "payments": self.serialize(LedgerEntrySerializer, detail["ledger"], many=True),
                "summary": self.serialize(LedgerSummarySerializer, detail["summary"]),
            },
        )


class GuestBookingCancelView(GuestBookingView):
    def patch(self, request, booking_id):
        data = self.validated(CancelBookingSerializer)
        booking = self.get_service().cancel(booking_id, data["reason"])
        return success_response("Booking cancelled successfully", {"booking": self.serialize(BookingSerializer, booking)})


class GuestBookingPaymentView(GuestBookingView):
    def patch(self, request, booking_id):
        data = self.validated(GuestPaymentSerializer)
        outcome = self.get_service().pay(
            booking_id,
            data["payment_status"],
            payment_method=data["payment_method"],
            points_to_redeem=data["points_to_redeem"],
        )
        return success_response(
            "Payment status updated successfully",
            {
                "booking": self.serialize(BookingSerializer, outcome.booking),
                "pointsRedeemed": outcome.points_redeemed,
                "pointsDiscount": outcome.points_discount,
                "pointsAwarded": outcome.points_awarded,
            },
        )


class GuestDashboardView(GuestBookingView):
    def get(self, request):
        dashboard = self.get_service().dashboard()
        return success_response(
            "Dashboard data retrieved successfully",
            {
                "statistics": dashboard["statistics"],
                "recentBookings": self.serialize(BookingSerializer, dashboard["recent_bookings"], many=True),
                "upcomingBookings": self.serialize(BookingSerializer, dashboard["upcoming_bookings"], many=True),
            },
        )
