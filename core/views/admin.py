from dataclasses import asdict

from rest_framework import status

from ..api.permissions import IsAdmin
from ..api.responses import success_response
from ..api.serializers import (
    ActiveFlagSerializer,
    AdminPropertyUpdateSerializer,
    AdminUserUpdateSerializer,
    AmenitySerializer,
    BookingSerializer,
    DisplayCategorySerializer,
    LedgerEntrySerializer,
    LedgerSummarySerializer,
    OwnerPayoutSerializer,
    PayoutStatusSerializer,
    PropertyDetailSerializer,
    PropertyListSerializer,
    PropertyReportSerializer,
    PropertyTypeSerializer,
    ReviewSerializer,
    StatusSerializer,
    UserSerializer,
)
from ..exceptions import NotFoundError
from ..models import Amenity, Booking, OwnerPayout, PropertyReport, PropertyType, Review
from ..services.accounting import AdminLedgerService, PayoutAdminService, booking_ledger
from ..services.admin import (
    AdminDashboardService,
    AdminPropertyService,
    AdminUserService,
    DisplayCategoryService,
    ReferenceDataService,
    SystemSettingsService,
    update_report_status,
)
from ..services.review import moderate_review
from .base import ServiceAPIView


class AdminView(ServiceAPIView):
    permission_classes = [IsAdmin]

    def get_service(self):
        return self.service_class()


class AdminDashboardView(AdminView):
    service_class = AdminDashboardService

    def get(self, request):
        service = self.get_service()
        return success_response(
            "Dashboard data retrieved successfully",
            {
                "statistics": asdict(service.stats()),
                "recentBookings": self.serialize(BookingSerializer, service.recent_bookings(), many=True),
            },
        )


class AdminUserListView(AdminView):
    service_class = AdminUserService

    def get(self, request):
        params = request.query_params
        users = self.get_service().users(params.get("user_type", ""), params.get("search", ""))
        return self.paginated_response("Users retrieved successfully", users, UserSerializer, "users")


class AdminUserDetailView(AdminView):
    service_class = AdminUserService

    def get(self, request, user_id):
        return success_response("User retrieved successfully", {"user": self.serialize(UserSerializer, self.get_service().get(user_id))})

    def put(self, request, user_id):
        data = self.validated(AdminUserUpdateSerializer, partial=True)
        user = self.get_service().update(user_id, dict(data))
        return success_response("User updated successfully", {"user": self.serialize(UserSerializer, user)})

    patch = put


class AdminUserStatusView(AdminView):
    service_class = AdminUserService

    def patch(self, request, user_id):
        data = self.validated(ActiveFlagSerializer)
        user = self.get_service().set_active(user_id, data["is_active"])
        message = "User unblocked successfully" if user.is_active else "User blocked successfully"
        return success_response(message, {"user": self.serialize(UserSerializer, user)})


class AdminPropertyListView(AdminView):
    service_class = AdminPropertyService

    def get(self, request):
        params = request.query_params
        properties = self.get_service().properties(params.get("status", ""), params.get("search", ""))
        return self.paginated_response("Properties retrieved successfully", properties, PropertyListSerializer, "properties")


class AdminPropertyDetailView(AdminView):
    service_class = AdminPropertyService

    def get(self, request, property_id):
        listing = self.get_service().get(property_id)
        return success_response("Property retrieved successfully", {"property": self.serialize(PropertyDetailSerializer, listing)})

    def put(self, request, property_id):
        service = self.get_service()
        listing = service.get(property_id)
        serializer = AdminPropertyUpdateSerializer(
            listing, data=request.data, partial=True, context=self.get_serializer_context()
        )
        serializer.is_valid(raise_exception=True)
        listing = serializer.save()
        return success_response("Property updated successfully", {"property": self.serialize(PropertyDetailSerializer, listing)})


class AdminPropertyStatusView(AdminView):
    service_class = AdminPropertyService

    def patch(self, request, property_id):
        data = self.validated(StatusSerializer)
        listing = self.get_service().set_status(property_id, data["status"])
        return success_response(
            "Property status updated successfully", {"property": self.serialize(PropertyListSerializer, listing)}
        )


class AdminPropertyFeaturedView(AdminView):
    service_class = AdminPropertyService

    def patch(self, request, property_id):
        listing = self.get_service().set_featured(property_id, request.data.get("is_featured"))
        message = "Property marked as featured" if listing.is_featured else "Property removed from featured"
        return success_response(message, {"property": self.serialize(PropertyListSerializer, listing)})


class AdminPropertyCategoriesView(AdminView):
    service_class = AdminPropertyService

    def put(self, request, property_id):
        listing = self.get_service().assign_categories(property_id, request.data.get("category_ids"))
        categories = listing.display_categories.all()
        return success_response(
            "Property categories updated successfully",
            {"categories": self.serialize(DisplayCategorySerializer, categories, many=True)},
        )


class ReferenceDataListView(AdminView):
    """Amenities and property types share one CRUD surface."""

    model = None
    serializer_class = None
    items_key = ""

    def get_service(self) -> ReferenceDataService:
        return ReferenceDataService(self.model)

    def get(self, request):
        items = self.model.objects.all()
        return success_response(
            f"{self.get_service().label} list retrieved successfully",
            {self.items_key: self.serialize(self.serializer_class, items, many=True)},
        )

    def post(self, request):
        service = self.get_service()
        instance = service.create(dict(self.validated(self.serializer_class)))
        return success_response(
            f"{service.label} created successfully",
            {"item": self.serialize(self.serializer_class, instance)},
            status.HTTP_201_CREATED,
        )


class ReferenceDataDetailView(ReferenceDataListView):
    def get(self, request, pk):
        service = self.get_service()
        return success_response(
            f"{service.label} retrieved successfully", {"item": self.serialize(self.serializer_class, service.get(pk))}
        )

    def put(self, request, pk):
        service = self.get_service()
        instance = service.update(pk, dict(self.validated(self.serializer_class, partial=True)))
        return success_response(
            f"{service.label} updated successfully", {"item": self.serialize(self.serializer_class, instance)}
        )

    def delete(self, request, pk):
        service = self.get_service()
        service.delete(pk)
        return success_response(f"{service.label} deleted successfully")


class ReferenceDataToggleView(ReferenceDataListView):
    def patch(self, request, pk):
        service = self.get_service()
        instance = service.toggle(pk, request.data.get("is_active"))
        return success_response(
            f"{service.label} status updated successfully", {"item": self.serialize(self.serializer_class, instance)}
        )


AMENITY_VIEW_OPTIONS = {"model": Amenity, "serializer_class": AmenitySerializer, "items_key": "amenities"}
PROPERTY_TYPE_VIEW_OPTIONS = {"model": PropertyType, "serializer_class": PropertyTypeSerializer, "items_key": "propertyTypes"}


class AdminDisplayCategoryListView(AdminView):
    service_class = DisplayCategoryService

    def get(self, request):
        categories = self.get_service().categories()
        return success_response(
            "Display categories retrieved successfully",
            {"categories": self.serialize(DisplayCategorySerializer, categories, many=True)},
        )

    def post(self, request):
        category = self.get_service().create(dict(self.validated(DisplayCategorySerializer)))
        return success_response(
            "Display category created successfully",
            {"category": self.serialize(DisplayCategorySerializer, category)},
            status.HTTP_201_CREATED,
        )


class AdminDisplayCategoryDetailView(AdminView):
    service_class = DisplayCategoryService

    def get(self, request, pk):
        category = self.get_service().get(pk)
        return success_response(
            "Display category retrieved successfully",
            {
                "category": self.serialize(DisplayCategorySerializer, category),
                "properties": self.serialize(PropertyListSerializer, category.properties.all(), many=True),
            },
        )

    def put(self, request, pk):
        category = self.get_service().update(pk, dict(self.validated(DisplayCategorySerializer, partial=True)))
        return success_response(
            "Display category updated successfully", {"category": self.serialize(DisplayCategorySerializer, category)}
        )

    def delete(self, request, pk):
        self.get_service().delete(pk)
        return success_response("Display category deleted successfully")


class AdminDisplayCategoryPropertiesView(AdminView):
    service_class = DisplayCategoryService

    def put(self, request, pk):
        category = self.get_service().assign_properties(pk, request.data.get("property_ids"))
        return success_response(
            "Category properties updated successfully",
            {"properties": self.serialize(PropertyListSerializer, category.properties.all(), many=True)},
        )


class AdminSettingsView(AdminView):
    service_class = SystemSettingsService

    def get(self, request):
        return success_response("Settings retrieved successfully", {"settings": self.get_service().settings()})

    def put(self, request):
        service = self.get_service()
        service.update(request.data.get("settings"))
        return success_response("Settings updated successfully", {"settings": service.settings()})


class AdminReviewListView(AdminView):
    def get(self, request):
        reviews = Review.objects.select_related("guest", "property", "booking")
        review_status = request.query_params.get("status")
        if review_status:
            reviews = reviews.filter(status=review_status)
        return self.paginated_response("Reviews retrieved successfully", reviews, ReviewSerializer, "reviews")


class AdminReviewStatusView(AdminView):
    def patch(self, request, review_id):
        data = self.validated(StatusSerializer)
        review = moderate_review(review_id, data["status"])
        return success_response("Review status updated successfully", {"review": self.serialize(ReviewSerializer, review)})


class AdminReportListView(AdminView):
    def get(self, request):
        reports = PropertyReport.objects.select_related("property", "user")
        report_status = request.query_params.get("status")
        if report_status:
            reports = reports.filter(status=report_status)
        return self.paginated_response("Reports retrieved successfully", reports, PropertyReportSerializer, "reports")


class AdminReportStatusView(AdminView):
    def patch(self, request, report_id):
        data = self.validated(StatusSerializer)
        report = update_report_status(report_id, data["status"])
        return success_response("Report status updated successfully", {"report": self.serialize(PropertyReportSerializer, report)})


class AdminBookingListView(AdminView):
    def get(self, request):
        bookings = Booking.objects.select_related("property", "guest")
        booking_status = request.query_params.get("status")
        if booking_status:
            bookings = bookings.filter(status=booking_status)
        return self.paginated_response("Bookings retrieved successfully", bookings, BookingSerializer, "bookings")


class AdminBookingPaymentsView(AdminView):
    def get(self, request, booking_id):
        booking = Booking.objects.select_related("property", "guest").filter(pk=booking_id).first()
        if booking is None:
            raise NotFoundError("Booking not found")
        lines, summary = booking_ledger(booking)
        return success_response(
            "Payments retrieved successfully",
            {
                "booking": self.serialize(BookingSerializer, booking),
                "payments": self.serialize(LedgerEntrySerializer, lines, many=True),
                "summary": self.serialize(LedgerSummarySerializer, summary),
            },
        )


class AdminLedgerView(AdminView):
    service_class = AdminLedgerService

    def get(self, request):
        service = self.get_service()
        entries, summary = service.ledger(service.build_filters(request.query_params))
        return success_response(
            "Ledger retrieved successfully",
            {"entries": self.serialize(LedgerEntrySerializer, entries, many=True), "summary": summary},
        )


class AdminOwnerAccountsView(AdminView):
    service_class = AdminLedgerService

    def get(self, request):
        return success_response("Owner accounts retrieved successfully", {"owners": self.get_service().owner_summaries()})


class AdminGuestAccountsView(AdminView):
    service_class = AdminLedgerService

    def get(self, request):
        return success_response("Guest accounts retrieved successfully", {"guests": self.get_service().guest_summaries()})


class AdminPayoutBalancesView(AdminView):
    service_class = PayoutAdminService

    def get(self, request):
        return success_response("Owner balances retrieved successfully", {"balances": self.get_service().balances()})


class AdminPayoutListView(AdminView):
    def get(self, request):
        payouts = OwnerPayout.objects.select_related("owner")
        payout_status = request.query_params.get("status")
        if payout_status:
            payouts = payouts.filter(payment_status=payout_status)
        return self.paginated_response("Payouts retrieved successfully", payouts, OwnerPayoutSerializer, "payouts")


class AdminPayoutStatusView(AdminView):
    service_class = PayoutAdminService

    def patch(self, request, payout_id):
        data = self.validated(PayoutStatusSerializer)
        payout = self.get_service().update_status(
            payout_id, data["payment_status"], data["payment_reference"], data["notes"]
        )
        return success_response("Payout status updated successfully", {"payout": self.serialize(OwnerPayoutSerializer, payout)})
