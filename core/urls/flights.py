"""Flight search and booking proxy endpoints."""

from django.urls import path

from ..views import flights

urlpatterns = [
    path("api/flights/search", flights.FlightSearchView.as_view(), name="flight_search"),
    path("api/flights/search/amadeus", flights.AmadeusResultsView.as_view(), name="flight_results_amadeus"),
    path("api/flights/search/sabre", flights.SabreResultsView.as_view(), name="flight_results_sabre"),
    path("api/flights/revalidate", flights.RevalidateView.as_view(), name="flight_revalidate"),
    path("api/flights/book", flights.FlightBookView.as_view(), name="flight_book"),
    path("api/flights/passengers/age-check", flights.PassengerAgeCheckView.as_view(), name="flight_age_check"),
    path("api/flights/bookings/<str:booking_id>", flights.FlightBookingDetailView.as_view(), name="flight_booking_detail"),
    path(
        "api/flights/bookings/<str:booking_id>/issue-ticket",
        flights.IssueTicketView.as_view(),
        name="flight_issue_ticket",
    ),
    path("api/flights/countries", flights.CountriesView.as_view(), name="flight_countries"),
]
