"""Core application data models exposed as a flat module-level API."""

from .booking import AdminEarning, Booking, Coupon
from .messaging import Conversation, Message
from .payment import OwnerPayout, Payment
from .profile import PropertyOwnerProfile
from .property import Amenity, DisplayCategory, Favorite, Property, PropertyImage, PropertyReport, PropertyType
from .review import Review
from .rewards import (
    MemberStatusTier,
    RewardsPointSettings,
    RewardsPointSlot,
    RewardsPointTransaction,
    UserRewardsPoints,
)
from .system import SystemSetting
from .user import User

__all__ = [
    "User",
    "PropertyOwnerProfile",
    "PropertyType",
    "Amenity",
    "Property",
    "PropertyImage",
    "DisplayCategory",
    "Favorite",
    "PropertyReport",
    "Coupon",
    "Booking",
    "AdminEarning",
    "Payment",
    "OwnerPayout",
    "Conversation",
    "Message",
    "Review",
    "RewardsPointSlot",
    "RewardsPointSettings",
    "MemberStatusTier",
    "UserRewardsPoints",
    "RewardsPointTransaction",
    "SystemSetting",
]
