"""DRF serializers grouped by API area."""

from .accounting import OwnerPayoutSerializer, PayoutRequestSerializer, PayoutStatusSerializer
from .admin import ActiveFlagSerializer, AdminUserUpdateSerializer, StatusSerializer
from .auth import (
    LoginSerializer,
    OwnerProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .bookings import (
    BookingCreateSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    GuestPaymentSerializer,
    LedgerEntrySerializer,
    LedgerSummarySerializer,
    OwnerPaymentSerializer,
    PaymentSerializer,
)
from .flights import (
    AgeCheckSerializer,
    FlightBookingSerializer,
    FlightSearchSerializer,
    SearchResultsSerializer,
    TicketIssueSerializer,
)
from .messaging import ConversationSerializer, MessageSerializer, ReplySerializer, StartConversationSerializer
from .properties import (
    AdminPropertyUpdateSerializer,
    AmenitySerializer,
    DisplayCategorySerializer,
    FavoriteSerializer,
    PropertyDetailSerializer,
    PropertyImageSerializer,
    PropertyListSerializer,
    PropertyReportSerializer,
    PropertyTypeSerializer,
    PropertyWriteSerializer,
)
from .reviews import ReviewCreateSerializer, ReviewSerializer, ReviewWriteSerializer
from .rewards import (
    AdjustPointsSerializer,
    MemberPointsSerializer,
    MemberStatusTierSerializer,
    RewardsPointSettingsSerializer,
    RewardsPointSlotSerializer,
    RewardsPointTransactionSerializer,
    UserRewardsPointsSerializer,
)

__all__ = [
    "ActiveFlagSerializer",
    "AdjustPointsSerializer",
    "AdminPropertyUpdateSerializer",
    "AdminUserUpdateSerializer",
    "AgeCheckSerializer",
    "AmenitySerializer",
    "BookingCreateSerializer",
    "BookingSerializer",
    "CancelBookingSerializer",
    "ConversationSerializer",
    "DisplayCategorySerializer",
    "FavoriteSerializer",
    "FlightBookingSerializer",
    "FlightSearchSerializer",
    "GuestPaymentSerializer",
    "LedgerEntrySerializer",
    "LedgerSummarySerializer",
    "LoginSerializer",
    "MemberPointsSerializer",
    "MemberStatusTierSerializer",
    "MessageSerializer",
    "OwnerPaymentSerializer",
    "OwnerPayoutSerializer",
    "OwnerProfileSerializer",
    "PaymentSerializer",
    "PayoutRequestSerializer",
    "PayoutStatusSerializer",
    "ProfileUpdateSerializer",
    "PropertyDetailSerializer",
    "PropertyImageSerializer",
    "PropertyListSerializer",
    "PropertyReportSerializer",
    "PropertyTypeSerializer",
    "PropertyWriteSerializer",
    "RegisterSerializer",
    "ReplySerializer",
    "ReviewCreateSerializer",
    "ReviewSerializer",
    "ReviewWriteSerializer",
    "RewardsPointSettingsSerializer",
    "RewardsPointSlotSerializer",
    "RewardsPointTransactionSerializer",
    "StartConversationSerializer",
    "StatusSerializer",
    "UserRewardsPointsSerializer",
    "UserSerializer",
]
