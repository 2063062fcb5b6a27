import json
from datetime import date
from decimal import Decimal
from functools import partial
from unittest import mock

import httpx
from django.test import SimpleTestCase, TestCase

from .exceptions import ServiceError
from .flights import (
    FlightApiClient,
    FlightApiError,
    build_booking_payload,
    departure_date,
    select_ticket_passengers,
    validate_booking_request,
)
from .testutils import api_client, make_user
from .views.flights import FlightView

BASE_URL = "https://flights.test/api"

FLIGHT = {"legs": [{"departure": {"date": "2030-05-10T08:30:00"}, "arrival": {"date": "2030-05-10"}}]}


def passenger(**extra):
    data = {
        "type": "Adult",
        "first_name": "Rafiq",
        "last_name": "Islam",
        "gender": "Male",
        "dob": "1990-01-01",
        "nationality": "BD",
        "passport_number": "EA1234567",
        "passport_country": "BD",
        "passport_expiry": "2032-01-01",
    }
    data.update(extra)
    return data


CONTACT = {"mobile": "01712345678", "email": "traveller@example.com"}


class ValidateBookingRequestTest(SimpleTestCase):
    def test_departure_date_from_first_leg(self):
        self.assertEqual(departure_date(FLIGHT), date(2030, 5, 10))
        self.assertEqual(departure_date({"legs": {"0": {"departure": {"date": "2030-06-01"}}}}), date(2030, 6, 1))
        self.assertIsNone(departure_date({}))

    def test_complete_request_has_no_errors(self):
        self.assertEqual(validate_booking_request(FLIGHT, [passenger()], CONTACT, today=date(2026, 1, 1)), {})

    def test_missing_contact_and_passenger_fields(self):
        errors = validate_booking_request(FLIGHT, [passenger(first_name="", passport_expiry="")], {}, today=date(2026, 1, 1))
        self.assertEqual(errors["contact.mobile"], ["Mobile is required"])
        self.assertEqual(errors["contact.email"], ["Email is required"])
        self.assertEqual(errors["passengers.0.first_name"], ["First Name is required."])
        self.assertEqual(errors["passengers.0.passport_expiry"], ["Passport Expiry is required."])

    def test_passport_must_outlive_departure(self):
        errors = validate_booking_request(FLIGHT, [passenger(passport_expiry="2030-05-10")], CONTACT, today=date(2026, 1, 1))
        self.assertEqual(
            errors["passengers.0.passport_expiry"], ["Passport expiry must be after flight departure date"]
        )

    def test_age_checked_at_departure(self):
        errors = validate_booking_request(
            FLIGHT,
            [passenger(), passenger(type="Infant", dob="2027-01-01")],
            CONTACT,
            today=date(2026, 1, 1),
        )
        self.assertEqual(errors, {"passengers.1.dob": ["Infant must be below 24 months at departure"]})

    def test_invalid_date_of_birth(self):
        errors = validate_booking_request(FLIGHT, [passenger(dob="not-a-date")], CONTACT, today=date(2026, 1, 1))
        self.assertEqual(errors["passengers.0.dob"], ["Date of Birth is invalid."])

    def test_payload_defaults_lead_country_code(self):
        payload = build_booking_payload(FLIGHT, [passenger()], CONTACT)
        self.assertEqual(payload["lead_passenger_country_code"], "880")
        self.assertEqual(payload["flightData"], FLIGHT)


class SelectTicketPassengersTest(SimpleTestCase):
    def test_normalises_and_totals(self):
        selection = select_ticket_passengers(
            [
                {"NameNumber": "1.1", "PassengerType": "ADT", "fare": "12500.50"},
                {"nameAssociationId": 2, "passengerCode": "C07", "fare": 8000},
            ]
        )
        self.assertEqual(selection.total_cost, Decimal("20500.50"))
        self.assertEqual(selection.passengers[1], {"NameNumber": "2.1", "PassengerType": "C07", "fare": 8000.0})

    def test_requires_a_selection(self):
        with self.assertRaisesMessage(ServiceError, "Please select at least one passenger."):
            select_ticket_passengers([])

    def test_rejects_incomplete_entries(self):
        with self.assertRaises(ServiceError):
            select_ticket_passengers([{"fare": 100}])


class FlightApiClientTest(SimpleTestCase):
    def client_for(self, handler):
        return FlightApiClient(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(handler))

    def test_successful_request_returns_json(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"folder": "abc"})

        self.assertEqual(self.client_for(handler).initiate_search({"from": "DAC"}), {"folder": "abc"})
        self.assertEqual(seen["url"], f"{BASE_URL}/search")
        self.assertEqual(seen["body"], {"from": "DAC"})

    def test_upstream_validation_error_passes_through(self):
        def handler(request):
            return httpx.Response(422, json={"message": "Fare expired", "errors": {"fare": ["stale"]}})

        with self.assertRaises(FlightApiError) as ctx:
            self.client_for(handler).revalidate({})
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(ctx.exception.message, "Fare expired")
        self.assertEqual(ctx.exception.errors, {"fare": ["stale"]})

    def test_upstream_server_error_is_bad_gateway(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        with self.assertRaises(FlightApiError) as ctx:
            self.client_for(handler).countries()
        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.upstream_status, 500)

    def test_connection_failure_is_bad_gateway(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(FlightApiError) as ctx:
            self.client_for(handler).countries()
        self.assertEqual(ctx.exception.status_code, 502)

    def test_booking_details_sends_folder_path(self):
        def handler(request):
            return httpx.Response(200, json=dict(request.url.params))

        result = self.client_for(handler).booking_details("PNR1", "2030/05")
        self.assertEqual(result, {"booking_id": "PNR1", "folder_path": "2030/05"})


class FlightViewTest(TestCase):
    def setUp(self):
        self.calls = []

        def handler(request):
            self.calls.append(request)
            if request.url.path.endswith("/countries"):
                return httpx.Response(200, json=[{"code": "BD", "name": "Bangladesh"}])
            if request.url.path.endswith("/booking"):
                return httpx.Response(200, json={"bookingId": "PNR1"})
            if request.url.path.endswith("/ticket-issue-submit"):
                return httpx.Response(200, json={"status": "issued"})
            return httpx.Response(503, json={"message": "Supplier down"})

        patcher = mock.patch.object(
            FlightView,
            "client_class",
            partial(FlightApiClient, base_url=BASE_URL, transport=httpx.MockTransport(handler)),
        )
        patcher.start()
        self.addCleanup(patcher.stop)
        self.guest = make_user()

    def test_countries_are_public(self):
        response = api_client().get("/api/flights/countries")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"][0]["code"], "BD")

    def test_upstream_failure_is_reported_as_bad_gateway(self):
        response = api_client().post("/api/flights/search", {"from": "DAC", "to": "CXB"}, format="json")
        self.assertEqual(response.status_code, 502)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Supplier down")

    def test_booking_requires_login(self):
        response = api_client().post("/api/flights/book", {}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_invalid_booking_never_reaches_the_api(self):
        payload = {"flight": FLIGHT, "passengers": [passenger(last_name="")], "contact": CONTACT}
        response = api_client(self.guest).post("/api/flights/book", payload, format="json")
        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertEqual(body["message"], "The given data was invalid.")
        self.assertIn("passengers.0.last_name", body["errors"])
        self.assertEqual(self.calls, [])

    def test_valid_booking_is_forwarded(self):
        payload = {"flight": FLIGHT, "passengers": [passenger()], "contact": CONTACT}
        response = api_client(self.guest).post("/api/flights/book", payload, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], {"bookingId": "PNR1"})
        sent = json.loads(self.calls[0].content)
        self.assertEqual(sent["passengers"][0]["passport_number"], "EA1234567")

    def test_issue_ticket_totals_selected_fares(self):
        payload = {"selected_passengers": [{"NameNumber": "1.1", "PassengerType": "ADT", "fare": 1000}]}
        response = api_client(self.guest).post("/api/flights/bookings/PNR1/issue-ticket", payload, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Decimal(str(response.json()["data"]["totalCost"])), Decimal("1000"))

    def test_age_check(self):
        payload = {"type": "Child", "dob": "2015-01-01", "departure_date": "2022-07-01"}
        response = api_client().post("/api/flights/passengers/age-check", payload, format="json")
        data = response.json()["data"]
        self.assertEqual(data["departureAge"], "7y 5m 29d")
        self.assertEqual(data["code"], "C07")
        self.assertEqual(data["departureError"], "")
