"""Catalog browsing, reports and health endpoints open to everyone."""

from django.urls import path

from ..views import health, public, reviews

urlpatterns = [
    path("health", health.HealthView.as_view(), name="health"),
    path("api/guest/properties", public.PropertyListView.as_view(), name="property_list"),
    path("api/guest/properties/recommended", public.RecommendedPropertiesView.as_view(), name="property_recommended"),
    path("api/guest/properties/<int:property_id>", public.PropertyDetailView.as_view(), name="property_detail"),
    path(
        "api/guest/properties/<int:property_id>/availability",
        public.PropertyAvailabilityView.as_view(),
        name="property_availability",
    ),
    path(
        "api/guest/properties/<int:property_id>/reviews",
        reviews.PropertyReviewsView.as_view(),
        name="property_reviews",
    ),
    path("api/guest/amenities", public.AmenityListView.as_view(), name="amenity_list"),
    path("api/guest/property-types", public.PropertyTypeListView.as_view(), name="property_type_list"),
    path("api/guest/display-categories", public.DisplayCategoryListView.as_view(), name="display_category_list"),
    path(
        "api/guest/display-categories/<int:category_id>/properties",
        public.DisplayCategoryPropertiesView.as_view(),
        name="display_category_properties",
    ),
    path("api/guest/settings/public", public.PublicSettingsView.as_view(), name="public_settings"),
    path("api/guest/favorites", public.FavoriteListView.as_view(), name="favorite_list"),
    path("api/guest/favorites/<int:property_id>", public.FavoriteDetailView.as_view(), name="favorite_detail"),
    path("api/reports", public.PropertyReportView.as_view(), name="property_report"),
]
