"""Business logic for the rental and booking domain, kept out of the views."""

from .accounting import AdminLedgerService, OwnerBalanceService, PayoutAdminService
from .admin import (
    AdminDashboardService,
    AdminPropertyService,
    AdminUserService,
    DisplayCategoryService,
    ReferenceDataService,
    SystemSettingsService,
)
from .auth import AccountService
from .booking import GuestBookingService, cancel_expired_bookings
from .catalog import FavoriteService, PropertyCatalogService, PropertyReportService
from .messaging import MessagingService
from .notifications import send_sms
from .owner import OwnerBookingService, OwnerDashboardService, OwnerPropertyService
from .review import ReviewService
from .rewards import RewardsAdminService, RewardsPointsService

__all__ = [
    "AccountService",
    "AdminDashboardService",
    "AdminLedgerService",
    "AdminPropertyService",
    "AdminUserService",
    "DisplayCategoryService",
    "FavoriteService",
    "GuestBookingService",
    "MessagingService",
    "OwnerBalanceService",
    "OwnerBookingService",
    "OwnerDashboardService",
    "OwnerPropertyService",
    "PayoutAdminService",
    "PropertyCatalogService",
    "PropertyReportService",
    "ReferenceDataService",
    "ReviewService",
    "RewardsAdminService",
    "RewardsPointsService",
    "SystemSettingsService",
    "cancel_expired_bookings",
    "send_sms",
]
