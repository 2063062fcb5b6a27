"""Back-office endpoints."""

from django.urls import path

from ..views import admin

amenity_options = admin.AMENITY_VIEW_OPTIONS
property_type_options = admin.PROPERTY_TYPE_VIEW_OPTIONS

urlpatterns = [
    path("api/admin/dashboard", admin.AdminDashboardView.as_view(), name="admin_dashboard"),
    path("api/admin/users", admin.AdminUserListView.as_view(), name="admin_user_list"),
    path("api/admin/users/<int:user_id>", admin.AdminUserDetailView.as_view(), name="admin_user_detail"),
    path("api/admin/users/<int:user_id>/status", admin.AdminUserStatusView.as_view(), name="admin_user_status"),
    path("api/admin/properties", admin.AdminPropertyListView.as_view(), name="admin_property_list"),
    path(
        "api/admin/properties/<int:property_id>",
        admin.AdminPropertyDetailView.as_view(),
        name="admin_property_detail",
    ),
    path(
        "api/admin/properties/<int:property_id>/status",
        admin.AdminPropertyStatusView.as_view(),
        name="admin_property_status",
    ),
    path(
        "api/admin/properties/<int:property_id>/featured",
        admin.AdminPropertyFeaturedView.as_view(),
        name="admin_property_featured",
    ),
    path(
        "api/admin/properties/<int:property_id>/display-categories",
        admin.AdminPropertyCategoriesView.as_view(),
        name="admin_property_categories",
    ),
    path("api/admin/amenities", admin.ReferenceDataListView.as_view(**amenity_options), name="admin_amenity_list"),
    path(
        "api/admin/amenities/<int:pk>",
        admin.ReferenceDataDetailView.as_view(**amenity_options),
        name="admin_amenity_detail",
    ),
    path(
        "api/admin/amenities/<int:pk>/toggle",
        admin.ReferenceDataToggleView.as_view(**amenity_options),
        name="admin_amenity_toggle",
    ),
    path(
        "api/admin/property-types",
        admin.ReferenceDataListView.as_view(**property_type_options),
        name="admin_property_type_list",
    ),
    path(
        "api/admin/property-types/<int:pk>",
        admin.ReferenceDataDetailView.as_view(**property_type_options),
        name="admin_property_type_detail",
    ),
    path(
        "api/admin/property-types/<int:pk>/toggle",
        admin.ReferenceDataToggleView.as_view(**property_type_options),
        name="admin_property_type_toggle",
    ),
    path(
        "api/admin/display-categories",
        admin.AdminDisplayCategoryListView.as_view(),
        name="admin_display_category_list",
    ),
    path(
        "api/admin/display-categories/<int:pk>",
        admin.AdminDisplayCategoryDetailView.as_view(),
        name="admin_display_category_detail",
    ),
    path(
        "api/admin/display-categories/<int:pk>/properties",
        admin.AdminDisplayCategoryPropertiesView.as_view(),
        name="admin_display_category_properties",
    ),
    path("api/admin/settings", admin.AdminSettingsView.as_view(), name="admin_settings"),
    path("api/admin/reviews", admin.AdminReviewListView.as_view(), name="admin_review_list"),
    path("api/admin/reviews/<int:review_id>/status", admin.AdminReviewStatusView.as_view(), name="admin_review_status"),
    path("api/admin/reports", admin.AdminReportListView.as_view(), name="admin_report_list"),
    path("api/admin/reports/<int:report_id>/status", admin.AdminReportStatusView.as_view(), name="admin_report_status"),
    path("api/admin/bookings", admin.AdminBookingListView.as_view(), name="admin_booking_list"),
    path(
        "api/admin/bookings/<int:booking_id>/payments",
        admin.AdminBookingPaymentsView.as_view(),
        name="admin_booking_payments",
    ),
    path("api/admin/accounting/ledger", admin.AdminLedgerView.as_view(), name="admin_ledger"),
    path("api/admin/accounting/owners", admin.AdminOwnerAccountsView.as_view(), name="admin_owner_accounts"),
    path("api/admin/accounting/guests", admin.AdminGuestAccountsView.as_view(), name="admin_guest_accounts"),
    path("api/admin/payouts/balances", admin.AdminPayoutBalancesView.as_view(), name="admin_payout_balances"),
    path("api/admin/payouts", admin.AdminPayoutListView.as_view(), name="admin_payout_list"),
    path("api/admin/payouts/<int:payout_id>/status", admin.AdminPayoutStatusView.as_view(), name="admin_payout_status"),
]
