from rest_framework import status
from rest_framework.permissions import AllowAny

from ..api.permissions import IsGuest
from ..api.responses import success_response
from ..api.serializers import (
    AmenitySerializer,
    DisplayCategorySerializer,
    FavoriteSerializer,
    PropertyDetailSerializer,
    PropertyListSerializer,
    PropertyReportSerializer,
    PropertyTypeSerializer,
)
from ..services.catalog import FavoriteService, PropertyCatalogService, PropertyReportService
from ..services.params import query_date
from .base import ServiceAPIView


class CatalogView(ServiceAPIView):
    permission_classes = [AllowAny]
    service_class = PropertyCatalogService

    def get_service(self) -> PropertyCatalogService:
        return self.service_class()


class PropertyListView(CatalogView):
    def get(self, request):
        service = self.get_service()
        filters = service.build_filters(request.query_params)
        return self.paginated_response(
            "Properties retrieved successfully",
            service.search(filters),
            PropertyListSerializer,
            "properties",
        )


class RecommendedPropertiesView(CatalogView):
    def get(self, request):
        properties = self.get_service().recommended()
        return success_response(
            "Recommended properties retrieved successfully",
            {"properties": self.serialize(PropertyListSerializer, properties, many=True)},
        )


class PropertyDetailView(CatalogView):
    def get(self, request, property_id):
        listing = self.get_service().detail(property_id)
        return success_response(
            "Property details retrieved successfully",
            {"property": self.serialize(PropertyDetailSerializer, listing)},
        )


class PropertyAvailabilityView(CatalogView):
    def get(self, request, property_id):
        params = request.query_params
        check_in = query_date(params.get("check_in_date") or params.get("check_in"), "check-in date")
        check_out = query_date(params.get("check_out_date") or params.get("check_out"), "check-out date")
        availability = self.get_service().availability(property_id, check_in, check_out)
        return success_response("Availability checked successfully", availability)


class AmenityListView(CatalogView):
    def get(self, request):
        amenities = self.get_service().amenities()
        return success_response(
            "Amenities retrieved successfully",
            {"amenities": self.serialize(AmenitySerializer, amenities, many=True)},
        )


class PropertyTypeListView(CatalogView):
    def get(self, request):
        types = self.get_service().property_types()
        return success_response(
            "Property types retrieved successfully",
            {"propertyTypes": self.serialize(PropertyTypeSerializer, types, many=True)},
        )


class DisplayCategoryListView(CatalogView):
    def get(self, request):
        categories = self.get_service().display_categories()
        return success_response(
            "Display categories retrieved successfully",
            {"categories": self.serialize(DisplayCategorySerializer, categories, many=True)},
        )


class DisplayCategoryPropertiesView(CatalogView):
    def get(self, request, category_id):
        category, properties = self.get_service().display_category_properties(category_id)
        response = self.paginated_response(
            "Category properties retrieved successfully",
            properties,
            PropertyListSerializer,
            "properties",
        )
        response.data["data"]["category"] = self.serialize(DisplayCategorySerializer, category)
        return response


class PublicSettingsView(CatalogView):
    def get(self, request):
        return success_response("Settings retrieved successfully", {"settings": self.get_service().public_settings()})


class FavoriteListView(ServiceAPIView):
    permission_classes = [IsGuest]
    service_class = FavoriteService

    def get(self, request):
        return self.paginated_response(
            "Favorites retrieved successfully",
            self.get_service().favorites(),
            FavoriteSerializer,
            "favorites",
        )

    def post(self, request):
        favorite = self.get_service().add(request.data.get("property_id"))
        return success_response(
            "Property added to favorites",
            {"favorite": self.serialize(FavoriteSerializer, favorite)},
            status.HTTP_201_CREATED,
        )


class FavoriteDetailView(ServiceAPIView):
    permission_classes = [IsGuest]
    service_class = FavoriteService

    def delete(self, request, property_id):
        self.get_service().remove(property_id)
        return success_response("Property removed from favorites")


class PropertyReportView(ServiceAPIView):
    permission_classes = [AllowAny]
    service_class = PropertyReportService

    def post(self, request):
        report = self.get_service().submit(
            request.data.get("property_id"),
            request.data.get("reason") or "",
            request.data.get("detail") or request.data.get("description") or "",
        )
        return success_response(
            "Report submitted successfully",
            {"report": self.serialize(PropertyReportSerializer, report)},
            status.HTTP_201_CREATED,
        )
