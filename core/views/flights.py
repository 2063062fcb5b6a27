import logging

from django.utils import timezone
from rest_framework.permissions import AllowAny, IsAuthenticated

from ..api.responses import success_response
from ..api.serializers import (
    AgeCheckSerializer,
    FlightBookingSerializer,
    FlightSearchSerializer,
    SearchResultsSerializer,
    TicketIssueSerializer,
)
from ..flights import (
    FlightApiClient,
    FlightValidationError,
    build_booking_payload,
    passenger_type_code,
    select_ticket_passengers,
    validate_booking_request,
    validate_passenger_age,
)
from .base import ServiceAPIView

logger = logging.getLogger(__name__)


class FlightView(ServiceAPIView):
    """Proxy to the flight API; upstream failures surface through ``FlightApiError``."""

    permission_classes = [AllowAny]
    client_class = FlightApiClient

    def get_client(self) -> FlightApiClient:
        return self.client_class()


class FlightSearchView(FlightView):
    def post(self, request):
        data = self.validated(FlightSearchSerializer)
        client = self.get_client()
        search = {
            "sabre": client.search_sabre,
            "amadeus": client.search_amadeus,
        }.get(data["provider"], client.initiate_search)
        return success_response("Flight search started", search(data["criteria"]))


class AmadeusResultsView(FlightView):
    def post(self, request):
        data = self.validated(SearchResultsSerializer)
        return success_response("Amadeus results retrieved", self.get_client().fetch_amadeus_results(data["folder"]))


class SabreResultsView(FlightView):
    def post(self, request):
        data = self.validated(SearchResultsSerializer)
        results = self.get_client().fetch_sabre_results(data["folder"], data["flight_type"] or None)
        return success_response("Sabre results retrieved", results)


class RevalidateView(FlightView):
    def post(self, request):
        return success_response("Fare revalidated", self.get_client().revalidate(dict(request.data)))


class PassengerAgeCheckView(FlightView):
    def post(self, request):
        data = self.validated(AgeCheckSerializer)
        check = validate_passenger_age(data["type"], data["dob"], data["departure_date"], timezone.localdate())
        return success_response(
            "Passenger age checked",
            {
                "currentAge": check.current_age,
                "departureAge": check.departure_age,
                "currentError": check.current_error,
                "departureError": check.departure_error,
                "isValid": check.is_valid,
                "code": passenger_type_code(data["dob"], data["departure_date"]),
            },
        )


class FlightBookView(FlightView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        data = self.validated(FlightBookingSerializer)
        errors = validate_booking_request(data["flight"], data["passengers"], data["contact"])
        if errors:
            raise FlightValidationError(errors)
        payload = build_booking_payload(data["flight"], data["passengers"], data["contact"], data["lead_passenger"])
        result = self.get_client().book(payload)
        logger.info("User %s booked a flight for %s passengers", request.user.pk, len(data["passengers"]))
        return success_response("Flight booked successfully", result)


class FlightBookingDetailView(FlightView):
    permission_classes = [IsAuthenticated]

    def get(self, request, booking_id):
        details = self.get_client().booking_details(booking_id, request.query_params.get("folder_path"))
        return success_response("Flight booking details retrieved", details)


class IssueTicketView(FlightView):
    permission_classes = [IsAuthenticated]

    def post(self, request, booking_id):
        data = self.validated(TicketIssueSerializer)
        selection = select_ticket_passengers(data["selected_passengers"])
        result = self.get_client().issue_ticket(booking_id, selection.passengers)
        logger.info("Ticket issue submitted for flight booking %s", booking_id)
        return success_response(
            "Ticket issue submitted",
            {"result": result, "passengers": selection.passengers, "totalCost": selection.total_cost},
        )


class CountriesView(FlightView):
    def get(self, request):
        return success_response("Countries retrieved", self.get_client().countries())
