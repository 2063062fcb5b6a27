"""Aggregate URL patterns for the core application."""

from . import admin, auth, booking, flights, messaging, owner, public, reviews, rewards

urlpatterns = [
    *public.urlpatterns,
    *auth.urlpatterns,
    *booking.urlpatterns,
    *owner.urlpatterns,
    *admin.urlpatterns,
    *messaging.urlpatterns,
    *rewards.urlpatterns,
    *reviews.urlpatterns,
    *flights.urlpatterns,
]
