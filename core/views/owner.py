from dataclasses import asdict

from rest_framework import status

from ..api.permissions import IsPropertyOwner
from ..api.responses import success_response
from ..api.serializers import (
    BookingSerializer,
    CancelBookingSerializer,
    LedgerEntrySerializer,
    LedgerSummarySerializer,
    OwnerPaymentSerializer,
    OwnerPayoutSerializer,
    PayoutRequestSerializer,
    PropertyDetailSerializer,
    PropertyImageSerializer,
    PropertyListSerializer,
    PropertyWriteSerializer,
)
from ..models import OwnerPayout
from ..services.accounting import OwnerBalanceService
from ..services.owner import OwnerBookingService, OwnerDashboardService, OwnerPropertyService
from .base import ServiceAPIView


class OwnerView(ServiceAPIView):
    permission_classes = [IsPropertyOwner]


class OwnerPropertyListView(OwnerView):
    service_class = OwnerPropertyService

    def get(self, request):
        properties = self.get_service().properties(request.query_params.get("status", ""))
        return self.paginated_response("Properties retrieved successfully", properties, PropertyListSerializer, "properties")

    def post(self, request):
        data = dict(self.validated(PropertyWriteSerializer))
        service = self.get_service()
        listing = service.create(data)
        return success_response(
            "Property created successfully and is pending approval",
            {"property": self.serialize(PropertyDetailSerializer, service.get(listing.pk))},
            status.HTTP_201_CREATED,
        )


class OwnerPropertyDetailView(OwnerView):
    service_class = OwnerPropertyService

    def get(self, request, property_id):
        listing = self.get_service().get(property_id)
        return success_response("Property retrieved successfully", {"property": self.serialize(PropertyDetailSerializer, listing)})

    def put(self, request, property_id):
        return self.update(property_id, partial=False)

    def patch(self, request, property_id):
        return self.update(property_id, partial=True)

    def update(self, property_id, partial):
        service = self.get_service()
        data = dict(self.validated(PropertyWriteSerializer, partial=partial))
        service.update(property_id, data)
        return success_response(
            "Property updated successfully",
            {"property": self.serialize(PropertyDetailSerializer, service.get(property_id))},
        )

    def delete(self, request, property_id):
        self.get_service().delete(property_id)
        return success_response("Property deleted successfully")


class OwnerPropertyImagesView(OwnerView):
    service_class = OwnerPropertyService

    def post(self, request, property_id):
        images = self.get_service().add_images(
            property_id,
            request.FILES.getlist("images"),
            request.data.getlist("captions") if hasattr(request.data, "getlist") else (),
        )
        return success_response(
            "Images uploaded successfully",
            {"images": self.serialize(PropertyImageSerializer, images, many=True)},
            status.HTTP_201_CREATED,
        )


class OwnerPropertyImageDetailView(OwnerView):
    service_class = OwnerPropertyService

    def delete(self, request, property_id, image_id):
        self.get_service().remove_image(property_id, image_id)
        return success_response("Image deleted successfully")


class OwnerBookingView(OwnerView):
    service_class = OwnerBookingService

    def booking_response(self, message, booking):
        return success_response(message, {"booking": self.serialize(BookingSerializer, booking)})


class OwnerBookingListView(OwnerBookingView):
    def get(self, request):
        params = request.query_params
        property_id = params.get("property_id")
        bookings = self.get_service().bookings(
            params.get("status", ""),
            int(property_id) if property_id and property_id.isdigit() else None,
        )
        return self.paginated_response("Bookings retrieved successfully", bookings, BookingSerializer, "bookings")


class OwnerBookingDetailView(OwnerBookingView):
    def get(self, request, booking_id):
        return self.booking_response("Booking retrieved successfully", self.get_service().get(booking_id))


class OwnerBookingConfirmView(OwnerBookingView):
    def patch(self, request, booking_id):
        booking = self.get_service().confirm(booking_id)
        return self.booking_response("Booking request accepted. Waiting for guest payment.", booking)


class OwnerBookingCheckInView(OwnerBookingView):
    def patch(self, request, booking_id):
        return self.booking_response("Guest checked in successfully", self.get_service().check_in(booking_id))


class OwnerBookingCheckOutView(OwnerBookingView):
    def patch(self, request, booking_id):
        return self.booking_response("Guest checked out successfully", self.get_service().check_out(booking_id))


class OwnerBookingCancelView(OwnerBookingView):
    def patch(self, request, booking_id):
        data = self.validated(CancelBookingSerializer)
        booking = self.get_service().cancel(booking_id, data["reason"])
        return self.booking_response("Booking cancelled successfully", booking)


class OwnerBookingPaymentView(OwnerBookingView):
    def patch(self, request, booking_id):
        data = self.validated(OwnerPaymentSerializer)
        booking = self.get_service().update_payment(
            booking_id,
            data["payment_status"],
            partial_amount=data.get("partial_amount"),
            discount_amount=data.get("discount_amount"),
            discount_reason=data["discount_reason"],
        )
        return self.booking_response("Payment status updated successfully", booking)


class OwnerPaymentHistoryView(OwnerBookingView):
    def get(self, request, booking_id):
        history = self.get_service().payment_history(booking_id)
        return success_response(
            "Payment history retrieved successfully",
            {
                "booking": self.serialize(BookingSerializer, history["booking"]),
                "payments": self.serialize(LedgerEntrySerializer, history["ledger"], many=True),
                "summary": self.serialize(LedgerSummarySerializer, history["summary"]),
            },
        )


class OwnerDashboardView(OwnerView):
    service_class = OwnerDashboardService

    def get(self, request):
        service = self.get_service()
        return success_response(
            "Dashboard data retrieved successfully",
            {
                "statistics": asdict(service.stats()),
                "bookingsByStatus": service.bookings_by_status(),
                "earnings": service.earnings(),
                "recentBookings": self.serialize(BookingSerializer, service.recent_bookings(), many=True),
            },
        )


class OwnerEarningsView(OwnerView):
    service_class = OwnerBalanceService

    def get(self, request):
        return success_response("Earnings retrieved successfully", {"earnings": self.get_service().summary()})


class OwnerPayoutListView(OwnerView):
    service_class = OwnerBalanceService

    def get(self, request):
        payouts = OwnerPayout.objects.filter(owner=request.user).select_related("owner")
        return self.paginated_response("Payouts retrieved successfully", payouts, OwnerPayoutSerializer, "payouts")

    def post(self, request):
        data = self.validated(PayoutRequestSerializer)
        payout = self.get_service().request_payout(data["amount"], data["payment_method"], data["notes"])
        return success_response(
            "Payout request submitted successfully",
            {"payout": self.serialize(OwnerPayoutSerializer, payout)},
            status.HTTP_201_CREATED,
        )
